"""
Catalog snapshot consumed by the estimate calculator
Materials grouped by category, labor rates keyed by name, fallback defaults
"""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple


class MaterialCategory(str, Enum):
    PIPE = "Pipe"
    MOTOR = "Motor"
    WIRE = "Wire"
    CONCRETE = "Concrete"
    SOUNDING_TUBE = "SoundingTube"
    BUNDLE = "Bundle"


# Catalog names of the fixed-price rows
CONCRETE_PAD_NAME = "Concrete Pad"
SOUNDING_TUBE_NAME = "Sounding Tube"
PREP_LABOR_NAME = "Prep Job Labor"
INSTALL_LABOR_NAME = "Install Submersible Labor"
STARTUP_LABOR_NAME = "Ag Sub Pump Startup Labor"

# Used only when the matching catalog row is missing
FALLBACK_PRICES: Mapping[str, Decimal] = MappingProxyType({
    "concrete_pad": Decimal("900.00"),
    "sounding_tube": Decimal("1.00"),
    "prep_labor": Decimal("175.00"),
    "install_labor": Decimal("395.00"),
    "startup_labor": Decimal("175.00"),
})

BUNDLE_FALLBACKS: Mapping[str, Tuple[Decimal, str]] = MappingProxyType({
    "A": (
        Decimal("1700.00"),
        "Submersible bundle A – sub discharge head. "
        "Duct tape, electrical splice connections, tape kit, etc.",
    ),
    "B": (
        Decimal("1450.00"),
        "Submersible bundle B – well plate. "
        "Duct tape, electrical splice connections, tape kit, etc.",
    ),
    "C": (
        Decimal("700.00"),
        "Submersible bundle C – reuse discharge head. "
        "Duct tape, electrical splice connections, tape kit, etc.",
    ),
})


def to_decimal(value: Any) -> Decimal:
    """Convert a catalog or input value to Decimal without float artifacts"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("boolean is not a numeric value")
    if isinstance(value, (int, float, str)):
        return Decimal(str(value).strip())
    raise TypeError(f"unsupported numeric type: {type(value).__name__}")


@dataclass(frozen=True)
class CatalogMaterial:
    """Read-only material row"""
    name: str
    category: str
    price: Decimal
    description: Optional[str] = None
    unit: Optional[str] = None
    lookup_data: Mapping[str, Any] = field(default_factory=dict)

    def lookup_decimal(self, key: str) -> Optional[Decimal]:
        """Numeric value from lookup_data, None if absent or not numeric"""
        raw = (self.lookup_data or {}).get(key)
        if raw is None:
            return None
        try:
            value = to_decimal(raw)
        except (TypeError, ArithmeticError):
            return None
        return value if value.is_finite() else None


@dataclass(frozen=True)
class CatalogLaborRate:
    """Read-only labor rate row"""
    name: str
    rate_per_hour: Decimal
    description: Optional[str] = None


class Catalog:
    """
    Immutable snapshot of active materials and labor rates.

    Built once per calculation so every lookup sees the same pricing basis.
    """

    def __init__(
        self,
        materials_by_category: Mapping[str, Tuple[CatalogMaterial, ...]],
        labor_rates_by_name: Mapping[str, CatalogLaborRate],
    ):
        self._materials = MappingProxyType(dict(materials_by_category))
        self._labor_rates = MappingProxyType(dict(labor_rates_by_name))

    @classmethod
    def from_rows(
        cls,
        materials: Iterable[CatalogMaterial],
        labor_rates: Iterable[CatalogLaborRate],
    ) -> "Catalog":
        grouped: Dict[str, list] = {}
        for material in materials:
            grouped.setdefault(_category_key(material.category), []).append(material)

        rates: Dict[str, CatalogLaborRate] = {}
        for rate in labor_rates:
            # first row wins for duplicate names
            rates.setdefault(rate.name, rate)

        return cls({k: tuple(v) for k, v in grouped.items()}, rates)

    def materials(self, category) -> Tuple[CatalogMaterial, ...]:
        return self._materials.get(_category_key(category), ())

    def material(self, category, name: str) -> Optional[CatalogMaterial]:
        for material in self.materials(category):
            if material.name == name:
                return material
        return None

    def labor_rate(self, name: str) -> Optional[CatalogLaborRate]:
        return self._labor_rates.get(name)

    @property
    def categories(self) -> Tuple[str, ...]:
        return tuple(self._materials)

    def __len__(self) -> int:
        return sum(len(v) for v in self._materials.values()) + len(self._labor_rates)


def _category_key(category) -> str:
    if isinstance(category, MaterialCategory):
        return category.value
    return str(category)
