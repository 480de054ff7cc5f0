"""
Settings Service - company-wide settings stored as a single row
"""
import logging

from sqlalchemy.orm import Session

from pump_estimator_core.infra.models import SettingModel, utcnow

from api.models.catalog_schemas import SettingsOut, SettingsUpdate
from api.services.errors import commit

logger = logging.getLogger(__name__)

SETTINGS_ROW_ID = 1


def get_settings(session: Session) -> SettingsOut:
    row = session.get(SettingModel, SETTINGS_ROW_ID)
    if row is None:
        return SettingsOut()
    return SettingsOut.model_validate(row)


def update_settings(session: Session, data: SettingsUpdate) -> SettingsOut:
    """Upsert the settings row with the provided fields"""
    row = session.get(SettingModel, SETTINGS_ROW_ID)
    if row is None:
        row = SettingModel(id=SETTINGS_ROW_ID)
        session.add(row)
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(row, field, value)
    row.updated_at = utcnow()
    commit(session, "update settings")
    logger.info("Updated company settings")
    return SettingsOut.model_validate(row)
