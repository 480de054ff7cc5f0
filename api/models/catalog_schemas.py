"""
Catalog Pydantic schemas
Materials, labor rates, equipment and company settings
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

MaterialCategoryName = Literal["Pipe", "Motor", "Wire", "Concrete", "SoundingTube", "Bundle"]
RateUnit = Literal["hour", "day", "job"]

# Keys lookup_data must carry for range-matched categories
REQUIRED_LOOKUP_KEYS = {
    "Pipe": ("gpmMin", "gpmMax", "frictionLoss"),
    "Motor": ("hpMin", "hpMax"),
}
_RANGE_KEYS = {"Pipe": ("gpmMin", "gpmMax"), "Motor": ("hpMin", "hpMax")}


def validate_lookup_data(category: Optional[str], lookup_data: Optional[Dict[str, Any]]) -> None:
    """Raise ValueError when a Pipe/Motor row lacks a usable range"""
    required = REQUIRED_LOOKUP_KEYS.get(category or "")
    if not required:
        return
    data = lookup_data or {}
    missing = [key for key in required if key not in data]
    if missing:
        raise ValueError(f"{category} lookup_data requires {', '.join(missing)}")
    for key in required:
        value = data[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"lookup_data.{key} must be a number")
    low, high = _RANGE_KEYS[category]
    if data[low] > data[high]:
        raise ValueError(f"lookup_data.{low} must not exceed {high}")


# === Materials ===

class MaterialIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="Unique within its category")
    category: MaterialCategoryName
    description: Optional[str] = Field(None, max_length=1000)
    unit: Optional[str] = Field(None, max_length=32, description="ft, each, ...")
    price: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)
    lookup_data: Optional[Dict[str, Any]] = Field(None, description="Pipe/Motor range data")
    is_active: bool = True

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": '2" Pipe',
                "category": "Pipe",
                "description": '2" Schedule 40 PVC Pipe',
                "unit": "ft",
                "price": "11.08",
                "lookup_data": {"gpmMin": 55, "gpmMax": 70, "frictionLoss": 0.01},
                "is_active": True,
            }
        }
    )

    @model_validator(mode="after")
    def check_lookup_data(self):
        validate_lookup_data(self.category, self.lookup_data)
        return self


class MaterialUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    category: Optional[MaterialCategoryName] = None
    description: Optional[str] = Field(None, max_length=1000)
    unit: Optional[str] = Field(None, max_length=32)
    price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    lookup_data: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None


class MaterialOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    category: str
    description: Optional[str] = None
    unit: Optional[str] = None
    price: Decimal
    lookup_data: Optional[Dict[str, Any]] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


# === Labor rates ===

class LaborRateIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="e.g. Prep Job Labor")
    description: Optional[str] = Field(None, max_length=1000)
    rate_per_hour: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)
    is_active: bool = True


class LaborRateUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    rate_per_hour: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    is_active: Optional[bool] = None


class LaborRateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: Optional[str] = None
    rate_per_hour: Decimal
    is_active: bool
    created_at: datetime
    updated_at: datetime


# === Equipment ===

class EquipmentIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    rate: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    rate_unit: Optional[RateUnit] = None
    cost: Optional[Decimal] = Field(None, ge=0, decimal_places=2)


class EquipmentUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    rate: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    rate_unit: Optional[RateUnit] = None
    cost: Optional[Decimal] = Field(None, ge=0, decimal_places=2)


class EquipmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: Optional[str] = None
    rate: Optional[Decimal] = None
    rate_unit: Optional[str] = None
    cost: Optional[Decimal] = None
    created_at: datetime
    updated_at: datetime


# === Settings ===

class SettingsUpdate(BaseModel):
    company_name: Optional[str] = Field(None, max_length=200)
    company_address: Optional[str] = Field(None, max_length=500)
    company_phone: Optional[str] = Field(None, max_length=50)
    company_email: Optional[str] = Field(None, max_length=255)
    company_logo_url: Optional[str] = Field(None, max_length=1000)
    default_sales_tax_rate: Optional[Decimal] = Field(None, ge=0, le=1, description="0.08 for 8%")
    email_from_name: Optional[str] = Field(None, max_length=200)
    email_from_address: Optional[str] = Field(None, max_length=255)


class SettingsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    company_name: Optional[str] = None
    company_address: Optional[str] = None
    company_phone: Optional[str] = None
    company_email: Optional[str] = None
    company_logo_url: Optional[str] = None
    default_sales_tax_rate: Optional[Decimal] = None
    email_from_name: Optional[str] = None
    email_from_address: Optional[str] = None
    updated_at: Optional[datetime] = None
