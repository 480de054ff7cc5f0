"""
Catalog read interface
Loads active materials and labor rates into an immutable Catalog snapshot
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..engine.catalog import Catalog, CatalogLaborRate, CatalogMaterial
from .models import LaborRateModel, MaterialModel

logger = logging.getLogger(__name__)


def list_active_materials(session: Session) -> List[CatalogMaterial]:
    """Active material rows in stable (category, name) order"""
    rows = session.scalars(
        select(MaterialModel)
        .where(MaterialModel.is_active.is_(True))
        .order_by(MaterialModel.category, MaterialModel.name)
    ).all()
    return [
        CatalogMaterial(
            name=row.name,
            category=row.category,
            price=row.price,
            description=row.description,
            unit=row.unit,
            lookup_data=dict(row.lookup_data or {}),
        )
        for row in rows
    ]


def list_active_labor_rates(session: Session) -> List[CatalogLaborRate]:
    rows = session.scalars(
        select(LaborRateModel)
        .where(LaborRateModel.is_active.is_(True))
        .order_by(LaborRateModel.name)
    ).all()
    return [
        CatalogLaborRate(name=row.name, rate_per_hour=row.rate_per_hour, description=row.description)
        for row in rows
    ]


def load_catalog(session: Session) -> Catalog:
    """Fetch the catalog once; the snapshot is not refreshed mid-calculation"""
    materials = list_active_materials(session)
    labor_rates = list_active_labor_rates(session)
    logger.debug(f"Loaded catalog: materials={len(materials)} labor_rates={len(labor_rates)}")
    return Catalog.from_rows(materials, labor_rates)
