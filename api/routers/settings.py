"""Settings Router - company settings"""
import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from pump_estimator_core.infra.db import get_session

from api.models.catalog_schemas import SettingsOut, SettingsUpdate
from api.services import settings_service
from api.services.errors import ServiceError
from api.utils.admin_guard import ensure_admin
from api.utils.errors import get_trace_id, to_http_exception

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1/settings", tags=["settings"])


@router.get("", response_model=SettingsOut)
def get_settings(session: Session = Depends(get_session)):
    return settings_service.get_settings(session)


@router.put("", response_model=SettingsOut)
def update_settings(
    req: SettingsUpdate,
    request: Request,
    session: Session = Depends(get_session),
    _admin: dict = Depends(ensure_admin),
):
    """Update company settings (admin only)"""
    try:
        return settings_service.update_settings(session, req)
    except ServiceError as e:
        raise to_http_exception(e, get_trace_id(request)) from e
