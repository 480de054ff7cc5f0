"""
Estimate Pydantic schemas
Calculator inputs, line items, and estimate request/response bodies
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from api.models.client_schemas import ClientOut, SiteIn, SiteOut

EstimateStatus = Literal["draft", "approved", "synced", "sent", "archived"]
DischargePackage = Literal["A", "B", "C"]


# === Request schemas ===

class EstimateInputs(BaseModel):
    """Hydraulic/electrical parameters for the line-item calculator"""
    gpm: Decimal = Field(..., gt=0, description="Flow rate (gallons per minute)")
    pump_setting: Decimal = Field(..., gt=0, description="Pump setting depth (ft)")
    pumping_water_level: Decimal = Field(..., gt=0, description="Pumping water level (ft)")
    pressure_psi: Decimal = Field(..., gt=0, description="Discharge pressure (psi)")
    voltage: Literal[240, 480] = Field(..., description="Supply voltage")
    prep_time_hours: Decimal = Field(Decimal("0"), ge=0, description="Prep labor hours")
    install_time_hours: Decimal = Field(Decimal("0"), ge=0, description="Install labor hours")
    start_time_hours: Decimal = Field(Decimal("0"), ge=0, description="Startup labor hours")
    discharge_package: DischargePackage = Field(..., description="Discharge bundle (A/B/C)")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "gpm": 60,
                "pump_setting": 300,
                "pumping_water_level": 150,
                "pressure_psi": 60,
                "voltage": 240,
                "prep_time_hours": 2,
                "install_time_hours": 8,
                "start_time_hours": 1,
                "discharge_package": "A",
            }
        }
    )


class EstimateCreateRequest(BaseModel):
    """Create an estimate for an existing client at a new site"""
    client_id: UUID = Field(..., description="Client the estimate is for")
    site: SiteIn = Field(default_factory=SiteIn, description="Well site")
    inputs: EstimateInputs
    notes: Optional[str] = Field(None, max_length=5000, description="Overall notes")


class LineItemIn(BaseModel):
    """Manually edited line item; total is recomputed server-side"""
    sort_order: int = Field(..., ge=1)
    description: str = Field(..., min_length=1, max_length=1000)
    quantity: Decimal = Field(Decimal("1"))
    rate: Decimal = Field(Decimal("0"))
    notes: Optional[str] = None
    is_taxable: bool = False


class EstimateUpdateRequest(BaseModel):
    """Header edits and optional full replacement of the line items"""
    status: Optional[EstimateStatus] = None
    overall_notes: Optional[str] = Field(None, max_length=5000)
    line_items: Optional[List[LineItemIn]] = Field(
        None, description="When present, replaces every line item"
    )


class RecalculateRequest(BaseModel):
    """Rerun the calculator; stored inputs are used when omitted"""
    inputs: Optional[EstimateInputs] = None


# === Response schemas ===

class LineItemOut(BaseModel):
    sort_order: int
    description: str
    quantity: str
    rate: str
    total: str
    notes: Optional[str] = None
    is_taxable: bool = False


class CalculationSummary(BaseModel):
    pipe: str
    total_friction_loss: str
    pressure_feet: str
    tdh: str
    horsepower: str
    motor: str
    wire_gauge: str
    wire_quantity: str


class CalculationResponse(BaseModel):
    line_items: List[LineItemOut]
    total_amount: str
    summary: CalculationSummary
    fallbacks: List[str] = Field(default_factory=list, description="Catalog rows replaced by defaults")


class EstimateSummaryOut(BaseModel):
    id: UUID
    estimate_number: str
    status: str
    client_id: UUID
    client_name: Optional[str] = None
    site_address: Optional[str] = None
    total_amount: str
    created_at: datetime


class EstimateDetailOut(EstimateSummaryOut):
    inputs: Dict[str, Any]
    overall_notes: Optional[str] = None
    approved_at: Optional[datetime] = None
    updated_at: datetime
    client: Optional[ClientOut] = None
    site: Optional[SiteOut] = None
    line_items: List[LineItemOut]
    fallbacks: List[str] = Field(default_factory=list)


class EstimateListResponse(BaseModel):
    estimates: List[EstimateSummaryOut]
    total: int
    page: int
    size: int
