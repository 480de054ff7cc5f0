"""
Estimate Service - calculation preview and estimate lifecycle
Catalog snapshot → calculator → estimate header + 11 line items in one transaction
"""
import logging
from dataclasses import asdict
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from pump_estimator_core.engine import (
    CalculatedLineItem,
    CalculationResult,
    Catalog,
    EstimateInput,
    calculate_estimate_line_items,
)
from pump_estimator_core.engine.estimate_calculator import (
    calculate_total,
    format_money,
    format_quantity,
    sum_totals,
)
from pump_estimator_core.infra.catalog_repository import load_catalog
from pump_estimator_core.infra.models import (
    ClientModel,
    EstimateLineItemModel,
    EstimateModel,
    SiteModel,
    utcnow,
)

from api.models.client_schemas import ClientOut, SiteOut
from api.models.estimate_schemas import (
    CalculationResponse,
    CalculationSummary,
    EstimateCreateRequest,
    EstimateDetailOut,
    EstimateInputs,
    EstimateListResponse,
    EstimateSummaryOut,
    EstimateUpdateRequest,
    LineItemIn,
    LineItemOut,
)
from api.services.errors import InvalidRequestError, NotFoundError, PersistenceError, commit

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


# === Mapping helpers ===

def _core_inputs(inputs: EstimateInputs) -> EstimateInput:
    return EstimateInput.build(**inputs.model_dump())


def _input_columns(inputs: EstimateInput) -> Dict[str, Any]:
    return {
        "gpm": inputs.gpm,
        "ps": inputs.pump_setting,
        "pwl": inputs.pumping_water_level,
        "psi": inputs.pressure_psi,
        "voltage": int(inputs.voltage),
        "prep_time_hours": inputs.prep_time_hours,
        "install_time_hours": inputs.install_time_hours,
        "startup_time_hours": inputs.start_time_hours,
        "discharge_package": inputs.discharge_package,
    }


def _stored_inputs(estimate: EstimateModel) -> Dict[str, Any]:
    """Calculator keyword arguments from the persisted header"""
    return {
        "gpm": estimate.gpm,
        "pump_setting": estimate.ps,
        "pumping_water_level": estimate.pwl,
        "pressure_psi": estimate.psi,
        "voltage": estimate.voltage,
        "prep_time_hours": estimate.prep_time_hours,
        "install_time_hours": estimate.install_time_hours,
        "start_time_hours": estimate.startup_time_hours,
        "discharge_package": estimate.discharge_package,
    }


def _plain(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else format_quantity(Decimal(value))


def _line_item_out(item: EstimateLineItemModel) -> LineItemOut:
    return LineItemOut(
        sort_order=item.sort_order,
        description=item.description,
        quantity=format_quantity(Decimal(item.quantity)),
        rate=format_money(Decimal(item.rate)),
        total=format_money(Decimal(item.total)),
        notes=item.notes,
        is_taxable=item.is_taxable,
    )


def _line_item_model(item: CalculatedLineItem) -> EstimateLineItemModel:
    return EstimateLineItemModel(
        sort_order=item.sort_order,
        description=item.description,
        quantity=Decimal(item.quantity),
        rate=Decimal(item.rate),
        total=Decimal(item.total),
        notes=item.notes,
        is_taxable=item.is_taxable,
    )


def _manual_line_items(items: Sequence[LineItemIn]) -> List[CalculatedLineItem]:
    """Hand-edited rows; totals are always quantity x rate"""
    orders = [item.sort_order for item in items]
    if len(set(orders)) != len(orders):
        raise InvalidRequestError("Line item sort_order values must be unique")
    return [
        CalculatedLineItem(
            sort_order=item.sort_order,
            description=item.description,
            quantity=format_quantity(item.quantity),
            rate=format_money(item.rate),
            total=calculate_total(item.quantity, format_money(item.rate)),
            notes=item.notes,
            is_taxable=item.is_taxable,
        )
        for item in sorted(items, key=lambda i: i.sort_order)
    ]


def _summary_out(estimate: EstimateModel) -> EstimateSummaryOut:
    return EstimateSummaryOut(
        id=estimate.id,
        estimate_number=estimate.estimate_number,
        status=estimate.status,
        client_id=estimate.client_id,
        client_name=estimate.client.name if estimate.client else None,
        site_address=estimate.site.address if estimate.site else None,
        total_amount=format_money(Decimal(estimate.total_amount)),
        created_at=estimate.created_at,
    )


def _detail_out(estimate: EstimateModel, fallbacks: Iterable[str] = ()) -> EstimateDetailOut:
    summary = _summary_out(estimate)
    inputs = {key: _plain(value) if isinstance(value, Decimal) else value
              for key, value in _stored_inputs(estimate).items()}
    return EstimateDetailOut(
        **summary.model_dump(),
        inputs=inputs,
        overall_notes=estimate.overall_notes,
        approved_at=estimate.approved_at,
        updated_at=estimate.updated_at,
        client=ClientOut.model_validate(estimate.client) if estimate.client else None,
        site=SiteOut.model_validate(estimate.site) if estimate.site else None,
        line_items=[_line_item_out(item) for item in estimate.line_items],
        fallbacks=list(fallbacks),
    )


def _calculation_out(result: CalculationResult) -> CalculationResponse:
    return CalculationResponse(
        line_items=[LineItemOut(**asdict(item)) for item in result.line_items],
        total_amount=result.total_amount,
        summary=CalculationSummary(
            pipe=result.pipe_name,
            total_friction_loss=format_quantity(result.total_friction_loss),
            pressure_feet=format_quantity(result.pressure_feet),
            tdh=format_quantity(result.tdh),
            horsepower=format_quantity(result.horsepower.quantize(Decimal("0.0001"))),
            motor=result.motor_name,
            wire_gauge=result.wire_gauge,
            wire_quantity=format_quantity(result.wire_quantity),
        ),
        fallbacks=list(result.fallbacks),
    )


# === Calculation ===

def _load_catalog(session: Session) -> Catalog:
    try:
        return load_catalog(session)
    except SQLAlchemyError as e:
        logger.error(f"Catalog retrieval failed: {e}")
        raise PersistenceError("Failed to load catalog", hint="Retry later") from e


def _calculate(session: Session, inputs: EstimateInput) -> CalculationResult:
    catalog = _load_catalog(session)
    return calculate_estimate_line_items(inputs, catalog)


def preview(session: Session, inputs: EstimateInputs) -> CalculationResponse:
    """
    Run the calculator against the current catalog without persisting.

    Raises:
        CalculationError: sizing or input failure
        PersistenceError: catalog could not be read
    """
    result = _calculate(session, _core_inputs(inputs))
    return _calculation_out(result)


def _replace_line_items(
    session: Session, estimate: EstimateModel, items: Sequence[CalculatedLineItem]
) -> None:
    """Delete old rows, insert new ones and store the new total"""
    estimate.line_items.clear()
    session.flush()
    estimate.line_items.extend(_line_item_model(item) for item in items)
    estimate.total_amount = Decimal(sum_totals(item.total for item in items))


# === Lifecycle ===

def generate_estimate_number(session: Session, now: Optional[datetime] = None) -> str:
    """
    Next "{year}-{seq:04d}" number; seq starts after this year's count
    and is bumped past numbers already taken.
    """
    year = (now or datetime.now(timezone.utc)).year
    prefix = f"{year}-"
    count = session.scalar(
        select(func.count())
        .select_from(EstimateModel)
        .where(EstimateModel.estimate_number.like(f"{prefix}%"))
    ) or 0

    seq = count + 1
    while True:
        number = f"{prefix}{seq:04d}"
        taken = session.scalar(
            select(EstimateModel.id).where(EstimateModel.estimate_number == number)
        )
        if taken is None:
            return number
        seq += 1


def create_estimate(session: Session, user_id: str, data: EstimateCreateRequest) -> EstimateDetailOut:
    """
    Calculate and persist a new estimate with its site and line items.

    Raises:
        NotFoundError: client does not exist
        CalculationError: sizing or input failure (nothing is written)
        PersistenceError: the transaction failed and was rolled back
    """
    client = session.get(ClientModel, data.client_id)
    if client is None:
        raise NotFoundError("Client", data.client_id)

    inputs = _core_inputs(data.inputs)
    result = _calculate(session, inputs)

    try:
        site = SiteModel(client=client, **data.site.model_dump())
        estimate = EstimateModel(
            user_id=user_id,
            client=client,
            site=site,
            estimate_number=generate_estimate_number(session),
            status="draft",
            overall_notes=data.notes,
            total_amount=Decimal(result.total_amount),
            **_input_columns(inputs),
        )
        estimate.line_items = [_line_item_model(item) for item in result.line_items]
        session.add(estimate)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to create estimate: {e}")
        raise PersistenceError("Failed to create estimate", hint="Retry later") from e
    commit(session, "create estimate", "Estimate number already taken, retry the request")

    logger.info(
        f"Created estimate {estimate.estimate_number} for client {client.id} "
        f"total={estimate.total_amount}"
    )
    return _detail_out(estimate, result.fallbacks)


def _get_owned(session: Session, user_id: str, estimate_id: UUID) -> EstimateModel:
    try:
        estimate = session.get(EstimateModel, estimate_id)
    except SQLAlchemyError as e:
        raise PersistenceError("Failed to load estimate", hint="Retry later") from e
    if estimate is None or estimate.user_id != user_id:
        raise NotFoundError("Estimate", estimate_id)
    return estimate


def get_estimate(session: Session, user_id: str, estimate_id: UUID) -> EstimateDetailOut:
    return _detail_out(_get_owned(session, user_id, estimate_id))


def list_estimates(session: Session, user_id: str, page: int = 1, size: int = 20) -> EstimateListResponse:
    """Newest first, paginated"""
    page = max(page, 1)
    size = min(max(size, 1), MAX_PAGE_SIZE)

    try:
        total = session.scalar(
            select(func.count()).select_from(EstimateModel).where(EstimateModel.user_id == user_id)
        ) or 0
        rows = session.scalars(
            select(EstimateModel)
            .where(EstimateModel.user_id == user_id)
            .options(selectinload(EstimateModel.client), selectinload(EstimateModel.site))
            .order_by(EstimateModel.created_at.desc(), EstimateModel.estimate_number.desc())
            .offset((page - 1) * size)
            .limit(size)
        ).all()
    except SQLAlchemyError as e:
        logger.error(f"Failed to list estimates: {e}")
        raise PersistenceError("Failed to list estimates", hint="Retry later") from e

    return EstimateListResponse(
        estimates=[_summary_out(row) for row in rows],
        total=total,
        page=page,
        size=size,
    )


def update_estimate(
    session: Session, user_id: str, estimate_id: UUID, data: EstimateUpdateRequest
) -> EstimateDetailOut:
    """
    Apply header edits and, when given, replace every line item.

    Raises:
        NotFoundError, InvalidRequestError, PersistenceError
    """
    estimate = _get_owned(session, user_id, estimate_id)
    manual_items = _manual_line_items(data.line_items) if data.line_items is not None else None

    try:
        if data.status is not None:
            estimate.status = data.status
            if data.status == "approved" and estimate.approved_at is None:
                estimate.approved_at = utcnow()
        if "overall_notes" in data.model_fields_set:
            estimate.overall_notes = data.overall_notes
        if manual_items is not None:
            _replace_line_items(session, estimate, manual_items)
        estimate.updated_at = utcnow()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to update estimate {estimate_id}: {e}")
        raise PersistenceError("Failed to update estimate", hint="Retry later") from e
    commit(session, "update estimate")

    logger.info(f"Updated estimate {estimate.estimate_number}")
    return _detail_out(estimate)


def recalculate_estimate(
    session: Session, user_id: str, estimate_id: UUID, inputs: Optional[EstimateInputs] = None
) -> EstimateDetailOut:
    """
    Rerun the calculator with new or stored inputs and replace the line items.

    Raises:
        NotFoundError, CalculationError, PersistenceError
    """
    estimate = _get_owned(session, user_id, estimate_id)
    core_inputs = _core_inputs(inputs) if inputs is not None else EstimateInput.build(**_stored_inputs(estimate))
    result = _calculate(session, core_inputs)

    try:
        for column, value in _input_columns(core_inputs).items():
            setattr(estimate, column, value)
        _replace_line_items(session, estimate, result.line_items)
        estimate.updated_at = utcnow()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to recalculate estimate {estimate_id}: {e}")
        raise PersistenceError("Failed to recalculate estimate", hint="Retry later") from e
    commit(session, "recalculate estimate")

    logger.info(f"Recalculated estimate {estimate.estimate_number} total={estimate.total_amount}")
    return _detail_out(estimate, result.fallbacks)


def delete_estimate(session: Session, user_id: str, estimate_id: UUID) -> None:
    estimate = _get_owned(session, user_id, estimate_id)
    session.delete(estimate)
    commit(session, "delete estimate")
    logger.info(f"Deleted estimate {estimate.estimate_number}")
