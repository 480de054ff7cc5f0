"""SQLAlchemy models for the well pump estimator.

Clients and their well sites, estimates with their line items, and the
admin-managed catalog (materials, labor rates, equipment, settings).
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, List, Optional
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )


class ClientModel(TimestampMixin, Base):
    """Customer an estimate is prepared for."""

    __tablename__ = "clients"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    contact_name: Mapped[Optional[str]] = mapped_column(Text)
    contact_email: Mapped[Optional[str]] = mapped_column(Text)
    contact_phone: Mapped[Optional[str]] = mapped_column(Text)
    address: Mapped[Optional[str]] = mapped_column(Text)

    sites: Mapped[List["SiteModel"]] = relationship(
        back_populates="client", cascade="all, delete-orphan"
    )
    estimates: Mapped[List["EstimateModel"]] = relationship(
        back_populates="client", cascade="all, delete-orphan"
    )


class SiteModel(TimestampMixin, Base):
    """Well location belonging to a client."""

    __tablename__ = "sites"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    client_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False
    )
    address: Mapped[Optional[str]] = mapped_column(Text)
    coordinates: Mapped[Optional[str]] = mapped_column(Text)  # "lat,lng"
    intended_use: Mapped[Optional[str]] = mapped_column(Text)

    client: Mapped[ClientModel] = relationship(back_populates="sites")
    estimates: Mapped[List["EstimateModel"]] = relationship(
        back_populates="site", cascade="all, delete-orphan"
    )


class EstimateModel(TimestampMixin, Base):
    """Estimate header: calculator inputs and the stored total."""

    __tablename__ = "estimates"
    __table_args__ = (
        Index("estimate_user_id_idx", "user_id"),
        Index("estimate_client_id_idx", "client_id"),
        Index("estimate_status_idx", "status"),
    )

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    user_id: Mapped[str] = mapped_column(Text, nullable=False)
    client_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False
    )
    site_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("sites.id", ondelete="CASCADE"), nullable=False
    )
    estimate_number: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")

    # Calculator inputs (unscaled)
    gpm: Mapped[Optional[Decimal]] = mapped_column(Numeric)
    ps: Mapped[Optional[Decimal]] = mapped_column(Numeric)
    pwl: Mapped[Optional[Decimal]] = mapped_column(Numeric)
    psi: Mapped[Optional[Decimal]] = mapped_column(Numeric)
    voltage: Mapped[Optional[int]] = mapped_column(Integer)
    prep_time_hours: Mapped[Optional[Decimal]] = mapped_column(Numeric)
    install_time_hours: Mapped[Optional[Decimal]] = mapped_column(Numeric)
    startup_time_hours: Mapped[Optional[Decimal]] = mapped_column(Numeric)
    discharge_package: Mapped[Optional[str]] = mapped_column(String(1))

    overall_notes: Mapped[Optional[str]] = mapped_column(Text)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    client: Mapped[ClientModel] = relationship(back_populates="estimates")
    site: Mapped[SiteModel] = relationship(back_populates="estimates")
    line_items: Mapped[List["EstimateLineItemModel"]] = relationship(
        back_populates="estimate",
        cascade="all, delete-orphan",
        order_by="EstimateLineItemModel.sort_order",
    )


class EstimateLineItemModel(TimestampMixin, Base):
    """One priced row of an estimate."""

    __tablename__ = "estimate_line_items"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    estimate_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("estimates.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric, nullable=False)
    rate: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    is_taxable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    estimate: Mapped[EstimateModel] = relationship(back_populates="line_items")


class MaterialModel(TimestampMixin, Base):
    """Priced material; lookup_data holds category-specific ranges."""

    __tablename__ = "materials"
    __table_args__ = (UniqueConstraint("category", "name", name="material_category_name_uq"),)

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    unit: Mapped[Optional[str]] = mapped_column(String(32))
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    # Pipe: {gpmMin, gpmMax, frictionLoss}; Motor: {hpMin, hpMax}
    lookup_data: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class LaborRateModel(TimestampMixin, Base):
    __tablename__ = "labor_rates"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    rate_per_hour: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class EquipmentModel(TimestampMixin, Base):
    __tablename__ = "equipment"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2))
    rate_unit: Mapped[Optional[str]] = mapped_column(String(16))  # hour, day, job
    cost: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2))


class SettingModel(TimestampMixin, Base):
    """Company-wide settings, single row with id 1."""

    __tablename__ = "settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)
    company_name: Mapped[Optional[str]] = mapped_column(Text)
    company_address: Mapped[Optional[str]] = mapped_column(Text)
    company_phone: Mapped[Optional[str]] = mapped_column(Text)
    company_email: Mapped[Optional[str]] = mapped_column(Text)
    company_logo_url: Mapped[Optional[str]] = mapped_column(Text)
    default_sales_tax_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 4))
    email_from_name: Mapped[Optional[str]] = mapped_column(Text)
    email_from_address: Mapped[Optional[str]] = mapped_column(Text)
