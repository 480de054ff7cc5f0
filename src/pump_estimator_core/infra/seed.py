"""
Default catalog data
Pipes, motors, wires, fixed-price items, discharge bundles and labor rates
"""

import logging
from decimal import Decimal
from typing import Dict

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..engine.catalog import (
    BUNDLE_FALLBACKS,
    CONCRETE_PAD_NAME,
    INSTALL_LABOR_NAME,
    PREP_LABOR_NAME,
    SOUNDING_TUBE_NAME,
    STARTUP_LABOR_NAME,
    MaterialCategory,
)
from .models import LaborRateModel, MaterialModel

logger = logging.getLogger(__name__)

DEFAULT_MATERIALS = [
    # Pipes: GPM range and friction loss per foot of setting
    {"name": '1.5" Pipe', "category": MaterialCategory.PIPE, "price": "8.65", "unit": "ft",
     "lookup_data": {"gpmMin": 30, "gpmMax": 54, "frictionLoss": 0.04},
     "description": '1.5" Schedule 40 PVC Pipe'},
    {"name": '2" Pipe', "category": MaterialCategory.PIPE, "price": "11.08", "unit": "ft",
     "lookup_data": {"gpmMin": 55, "gpmMax": 70, "frictionLoss": 0.01},
     "description": '2" Schedule 40 PVC Pipe'},
    {"name": '2.5" Pipe', "category": MaterialCategory.PIPE, "price": "11.08", "unit": "ft",
     "lookup_data": {"gpmMin": 71, "gpmMax": 110, "frictionLoss": 0.075},
     "description": '2.5" Schedule 40 PVC Pipe'},

    # Motors: horsepower range (exclusive min, inclusive max)
    {"name": "3 HP Motor", "category": MaterialCategory.MOTOR, "price": "1895.40", "unit": "each",
     "lookup_data": {"hpMin": 2.0, "hpMax": 3.5}, "description": '4" Grundfos 3 HP motor'},
    {"name": "5 HP Motor", "category": MaterialCategory.MOTOR, "price": "2581.86", "unit": "each",
     "lookup_data": {"hpMin": 3.5, "hpMax": 5.5}, "description": '4" Grundfos 5 HP motor'},
    {"name": "7.5 HP Motor", "category": MaterialCategory.MOTOR, "price": "3301.72", "unit": "each",
     "lookup_data": {"hpMin": 5.51, "hpMax": 7.75}, "description": '6" Grundfos 7.5 HP motor'},
    {"name": "10 HP Motor", "category": MaterialCategory.MOTOR, "price": "4120.15", "unit": "each",
     "lookup_data": {"hpMin": 7.75, "hpMax": 10.5}, "description": '6" Grundfos 10 HP motor'},

    # Wires: names match the wire-gauge chart
    {"name": "#14", "category": MaterialCategory.WIRE, "price": "2.13", "unit": "ft", "description": "#14 FJ wire"},
    {"name": "#12", "category": MaterialCategory.WIRE, "price": "2.88", "unit": "ft", "description": "#12 FJ wire"},
    {"name": "#10", "category": MaterialCategory.WIRE, "price": "3.95", "unit": "ft", "description": "#10 FJ wire"},
    {"name": "#8", "category": MaterialCategory.WIRE, "price": "5.40", "unit": "ft", "description": "#8 FJ wire"},
    {"name": "#6", "category": MaterialCategory.WIRE, "price": "7.85", "unit": "ft", "description": "#6 FJ wire"},
    {"name": "#4", "category": MaterialCategory.WIRE, "price": "11.20", "unit": "ft", "description": "#4 FJ wire"},
    {"name": "#3", "category": MaterialCategory.WIRE, "price": "13.60", "unit": "ft", "description": "#3 FJ wire"},
    {"name": "#2", "category": MaterialCategory.WIRE, "price": "16.45", "unit": "ft", "description": "#2 FJ wire"},
    {"name": "#1", "category": MaterialCategory.WIRE, "price": "20.10", "unit": "ft", "description": "#1 FJ wire"},

    # Fixed items
    {"name": CONCRETE_PAD_NAME, "category": MaterialCategory.CONCRETE, "price": "900.00", "unit": "each",
     "description": "Standard concrete pad for well head"},
    {"name": SOUNDING_TUBE_NAME, "category": MaterialCategory.SOUNDING_TUBE, "price": "1.00", "unit": "ft",
     "description": '1" PVC Sounding Tube'},
] + [
    # Discharge bundles
    {"name": f"Bundle {package}", "category": MaterialCategory.BUNDLE, "price": str(price), "unit": "each",
     "description": description}
    for package, (price, description) in BUNDLE_FALLBACKS.items()
]

DEFAULT_LABOR_RATES = [
    {"name": PREP_LABOR_NAME, "rate_per_hour": "175.00", "description": "Labor for job preparation"},
    {"name": INSTALL_LABOR_NAME, "rate_per_hour": "395.00",
     "description": "Labor for installing submersible pump"},
    {"name": STARTUP_LABOR_NAME, "rate_per_hour": "175.00",
     "description": "Labor for agricultural submersible pump startup"},
]


def seed_catalog(session: Session) -> Dict[str, int]:
    """
    Insert the default catalog, skipping rows that already exist.

    Materials are matched on (category, name), labor rates on name.
    Existing rows are left untouched. The caller commits.

    Returns:
        Counts of inserted rows: {"materials": n, "labor_rates": m}
    """
    existing_materials = set(session.execute(select(MaterialModel.category, MaterialModel.name)).all())
    existing_rates = set(session.scalars(select(LaborRateModel.name)).all())

    inserted = {"materials": 0, "labor_rates": 0}

    for row in DEFAULT_MATERIALS:
        category = row["category"].value
        if (category, row["name"]) in existing_materials:
            continue
        session.add(MaterialModel(
            name=row["name"],
            category=category,
            price=Decimal(row["price"]),
            unit=row["unit"],
            description=row["description"],
            lookup_data=row.get("lookup_data"),
        ))
        inserted["materials"] += 1

    for row in DEFAULT_LABOR_RATES:
        if row["name"] in existing_rates:
            continue
        session.add(LaborRateModel(
            name=row["name"],
            rate_per_hour=Decimal(row["rate_per_hour"]),
            description=row["description"],
        ))
        inserted["labor_rates"] += 1

    session.flush()
    logger.info(
        f"Seeded catalog: materials={inserted['materials']} labor_rates={inserted['labor_rates']}"
    )
    return inserted
