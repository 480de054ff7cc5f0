"""
Catalog Service - admin CRUD for materials, labor rates and equipment
"""
import logging
from typing import List, Optional, Type, TypeVar
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import Session

from pump_estimator_core.infra.models import (
    Base,
    EquipmentModel,
    LaborRateModel,
    MaterialModel,
    utcnow,
)

from api.models.catalog_schemas import (
    EquipmentIn,
    EquipmentUpdate,
    LaborRateIn,
    LaborRateUpdate,
    MaterialIn,
    MaterialUpdate,
    validate_lookup_data,
)
from api.services.errors import InvalidRequestError, NotFoundError, commit

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT", bound=Base)


def _get(session: Session, model: Type[RowT], row_id: UUID, label: str) -> RowT:
    row = session.get(model, row_id)
    if row is None:
        raise NotFoundError(label, row_id)
    return row


def _apply(row, data: BaseModel) -> None:
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(row, field, value)
    row.updated_at = utcnow()


# === Materials ===

def list_materials(
    session: Session, category: Optional[str] = None, active: Optional[bool] = None
) -> List[MaterialModel]:
    query = select(MaterialModel).order_by(MaterialModel.category, MaterialModel.name)
    if category:
        query = query.where(MaterialModel.category == category)
    if active is not None:
        query = query.where(MaterialModel.is_active.is_(active))
    return list(session.scalars(query).all())


def create_material(session: Session, data: MaterialIn) -> MaterialModel:
    material = MaterialModel(**data.model_dump())
    session.add(material)
    commit(session, "create material", conflict_message=f"{data.category} '{data.name}' already exists")
    logger.info(f"Created material {material.category}/{material.name}")
    return material


def update_material(session: Session, material_id: UUID, data: MaterialUpdate) -> MaterialModel:
    material = _get(session, MaterialModel, material_id, "Material")
    changes = data.model_dump(exclude_unset=True)
    category = changes.get("category", material.category)
    lookup_data = changes.get("lookup_data", material.lookup_data)
    try:
        validate_lookup_data(category, lookup_data)
    except ValueError as e:
        raise InvalidRequestError(str(e), hint="lookup_data") from e

    _apply(material, data)
    commit(session, "update material", conflict_message=f"{category} '{material.name}' already exists")
    return material


def delete_material(session: Session, material_id: UUID) -> None:
    material = _get(session, MaterialModel, material_id, "Material")
    session.delete(material)
    commit(session, "delete material")
    logger.info(f"Deleted material {material.category}/{material.name}")


# === Labor rates ===

def list_labor_rates(session: Session, active: Optional[bool] = None) -> List[LaborRateModel]:
    query = select(LaborRateModel).order_by(LaborRateModel.name)
    if active is not None:
        query = query.where(LaborRateModel.is_active.is_(active))
    return list(session.scalars(query).all())


def create_labor_rate(session: Session, data: LaborRateIn) -> LaborRateModel:
    rate = LaborRateModel(**data.model_dump())
    session.add(rate)
    commit(session, "create labor rate", conflict_message=f"Labor rate '{data.name}' already exists")
    logger.info(f"Created labor rate {rate.name}")
    return rate


def update_labor_rate(session: Session, rate_id: UUID, data: LaborRateUpdate) -> LaborRateModel:
    rate = _get(session, LaborRateModel, rate_id, "Labor rate")
    _apply(rate, data)
    commit(session, "update labor rate", conflict_message=f"Labor rate '{rate.name}' already exists")
    return rate


def delete_labor_rate(session: Session, rate_id: UUID) -> None:
    rate = _get(session, LaborRateModel, rate_id, "Labor rate")
    session.delete(rate)
    commit(session, "delete labor rate")


# === Equipment ===

def list_equipment(session: Session) -> List[EquipmentModel]:
    return list(session.scalars(select(EquipmentModel).order_by(EquipmentModel.name)).all())


def create_equipment(session: Session, data: EquipmentIn) -> EquipmentModel:
    equipment = EquipmentModel(**data.model_dump())
    session.add(equipment)
    commit(session, "create equipment", conflict_message=f"Equipment '{data.name}' already exists")
    return equipment


def update_equipment(session: Session, equipment_id: UUID, data: EquipmentUpdate) -> EquipmentModel:
    equipment = _get(session, EquipmentModel, equipment_id, "Equipment")
    _apply(equipment, data)
    commit(session, "update equipment", conflict_message=f"Equipment '{equipment.name}' already exists")
    return equipment


def delete_equipment(session: Session, equipment_id: UUID) -> None:
    equipment = _get(session, EquipmentModel, equipment_id, "Equipment")
    session.delete(equipment)
    commit(session, "delete equipment")
