"""Catalog Router - materials, labor rates and equipment (writes are admin only)"""
import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from pump_estimator_core.infra.db import get_session

from api.models.catalog_schemas import (
    EquipmentIn,
    EquipmentOut,
    EquipmentUpdate,
    LaborRateIn,
    LaborRateOut,
    LaborRateUpdate,
    MaterialCategoryName,
    MaterialIn,
    MaterialOut,
    MaterialUpdate,
)
from api.services import catalog_service
from api.services.errors import ServiceError
from api.utils.admin_guard import ensure_admin
from api.utils.errors import get_trace_id, to_http_exception

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1/catalog", tags=["catalog"])


# === Materials ===

@router.get("/materials", response_model=List[MaterialOut])
def list_materials(
    category: Optional[MaterialCategoryName] = None,
    active: Optional[bool] = None,
    session: Session = Depends(get_session),
):
    """List materials, filterable by category and active flag"""
    return catalog_service.list_materials(session, category=category, active=active)


@router.post("/materials", response_model=MaterialOut, status_code=status.HTTP_201_CREATED)
def create_material(
    req: MaterialIn,
    request: Request,
    session: Session = Depends(get_session),
    _admin: dict = Depends(ensure_admin),
):
    try:
        return catalog_service.create_material(session, req)
    except ServiceError as e:
        raise to_http_exception(e, get_trace_id(request)) from e


@router.put("/materials/{material_id}", response_model=MaterialOut)
def update_material(
    material_id: UUID,
    req: MaterialUpdate,
    request: Request,
    session: Session = Depends(get_session),
    _admin: dict = Depends(ensure_admin),
):
    try:
        return catalog_service.update_material(session, material_id, req)
    except ServiceError as e:
        raise to_http_exception(e, get_trace_id(request)) from e


@router.delete("/materials/{material_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_material(
    material_id: UUID,
    request: Request,
    session: Session = Depends(get_session),
    _admin: dict = Depends(ensure_admin),
):
    try:
        catalog_service.delete_material(session, material_id)
    except ServiceError as e:
        raise to_http_exception(e, get_trace_id(request)) from e


# === Labor rates ===

@router.get("/labor-rates", response_model=List[LaborRateOut])
def list_labor_rates(active: Optional[bool] = None, session: Session = Depends(get_session)):
    return catalog_service.list_labor_rates(session, active=active)


@router.post("/labor-rates", response_model=LaborRateOut, status_code=status.HTTP_201_CREATED)
def create_labor_rate(
    req: LaborRateIn,
    request: Request,
    session: Session = Depends(get_session),
    _admin: dict = Depends(ensure_admin),
):
    try:
        return catalog_service.create_labor_rate(session, req)
    except ServiceError as e:
        raise to_http_exception(e, get_trace_id(request)) from e


@router.put("/labor-rates/{rate_id}", response_model=LaborRateOut)
def update_labor_rate(
    rate_id: UUID,
    req: LaborRateUpdate,
    request: Request,
    session: Session = Depends(get_session),
    _admin: dict = Depends(ensure_admin),
):
    try:
        return catalog_service.update_labor_rate(session, rate_id, req)
    except ServiceError as e:
        raise to_http_exception(e, get_trace_id(request)) from e


@router.delete("/labor-rates/{rate_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_labor_rate(
    rate_id: UUID,
    request: Request,
    session: Session = Depends(get_session),
    _admin: dict = Depends(ensure_admin),
):
    try:
        catalog_service.delete_labor_rate(session, rate_id)
    except ServiceError as e:
        raise to_http_exception(e, get_trace_id(request)) from e


# === Equipment ===

@router.get("/equipment", response_model=List[EquipmentOut])
def list_equipment(session: Session = Depends(get_session)):
    return catalog_service.list_equipment(session)


@router.post("/equipment", response_model=EquipmentOut, status_code=status.HTTP_201_CREATED)
def create_equipment(
    req: EquipmentIn,
    request: Request,
    session: Session = Depends(get_session),
    _admin: dict = Depends(ensure_admin),
):
    try:
        return catalog_service.create_equipment(session, req)
    except ServiceError as e:
        raise to_http_exception(e, get_trace_id(request)) from e


@router.put("/equipment/{equipment_id}", response_model=EquipmentOut)
def update_equipment(
    equipment_id: UUID,
    req: EquipmentUpdate,
    request: Request,
    session: Session = Depends(get_session),
    _admin: dict = Depends(ensure_admin),
):
    try:
        return catalog_service.update_equipment(session, equipment_id, req)
    except ServiceError as e:
        raise to_http_exception(e, get_trace_id(request)) from e


@router.delete("/equipment/{equipment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_equipment(
    equipment_id: UUID,
    request: Request,
    session: Session = Depends(get_session),
    _admin: dict = Depends(ensure_admin),
):
    try:
        catalog_service.delete_equipment(session, equipment_id)
    except ServiceError as e:
        raise to_http_exception(e, get_trace_id(request)) from e
