"""
Well Pump Estimator Engine Module
Pump sizing and line-item pricing
"""

from .catalog import Catalog, CatalogLaborRate, CatalogMaterial, MaterialCategory
from .errors import CalculationError
from .estimate_calculator import (
    CalculatedLineItem,
    CalculationResult,
    EstimateInput,
    calculate_estimate_line_items,
)
from .wire_chart import lookup_wire_gauge

__all__ = [
    "Catalog",
    "CatalogLaborRate",
    "CatalogMaterial",
    "MaterialCategory",
    "CalculationError",
    "CalculatedLineItem",
    "CalculationResult",
    "EstimateInput",
    "calculate_estimate_line_items",
    "lookup_wire_gauge",
]
