"""Estimate Router - calculation preview and estimate lifecycle"""
import logging
from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from pump_estimator_core.engine.errors import CalculationError
from pump_estimator_core.infra.db import get_session

from api.auth import get_current_user
from api.models.estimate_schemas import (
    CalculationResponse,
    EstimateCreateRequest,
    EstimateDetailOut,
    EstimateInputs,
    EstimateListResponse,
    EstimateUpdateRequest,
    RecalculateRequest,
)
from api.services import estimate_service
from api.services.errors import ServiceError
from api.utils.errors import get_trace_id, to_http_exception

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1/estimates", tags=["estimates"])


@router.post("/calculate", response_model=CalculationResponse)
def calculate_estimate(
    inputs: EstimateInputs,
    request: Request,
    session: Session = Depends(get_session),
):
    """
    Preview the 11 line items for the given parameters

    Pipe by GPM range → TDH → horsepower → motor → wire gauge → pricing.
    Nothing is persisted.
    """
    trace_id = get_trace_id(request)
    try:
        result = estimate_service.preview(session, inputs)
    except (CalculationError, ServiceError) as e:
        raise to_http_exception(e, trace_id) from e

    logger.info(
        f"[{trace_id}] Calculated preview: pipe={result.summary.pipe} "
        f"motor={result.summary.motor} total={result.total_amount}"
    )
    return result


@router.post("", response_model=EstimateDetailOut, status_code=status.HTTP_201_CREATED)
def create_estimate(
    req: EstimateCreateRequest,
    request: Request,
    session: Session = Depends(get_session),
    user: Dict[str, Any] = Depends(get_current_user),
):
    """Calculate and save a new draft estimate"""
    try:
        return estimate_service.create_estimate(session, user["user_id"], req)
    except (CalculationError, ServiceError) as e:
        raise to_http_exception(e, get_trace_id(request)) from e


@router.get("", response_model=EstimateListResponse)
def list_estimates(
    request: Request,
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=estimate_service.MAX_PAGE_SIZE),
    session: Session = Depends(get_session),
    user: Dict[str, Any] = Depends(get_current_user),
):
    """List the caller's estimates, newest first"""
    try:
        return estimate_service.list_estimates(session, user["user_id"], page=page, size=size)
    except ServiceError as e:
        raise to_http_exception(e, get_trace_id(request)) from e


@router.get("/{estimate_id}", response_model=EstimateDetailOut)
def get_estimate(
    estimate_id: UUID,
    request: Request,
    session: Session = Depends(get_session),
    user: Dict[str, Any] = Depends(get_current_user),
):
    """Retrieve estimate with client, site and line items"""
    try:
        return estimate_service.get_estimate(session, user["user_id"], estimate_id)
    except ServiceError as e:
        raise to_http_exception(e, get_trace_id(request)) from e


@router.put("/{estimate_id}", response_model=EstimateDetailOut)
def update_estimate(
    estimate_id: UUID,
    req: EstimateUpdateRequest,
    request: Request,
    session: Session = Depends(get_session),
    user: Dict[str, Any] = Depends(get_current_user),
):
    """Update status/notes and optionally replace all line items"""
    try:
        return estimate_service.update_estimate(session, user["user_id"], estimate_id, req)
    except ServiceError as e:
        raise to_http_exception(e, get_trace_id(request)) from e


@router.post("/{estimate_id}/recalculate", response_model=EstimateDetailOut)
def recalculate_estimate(
    estimate_id: UUID,
    request: Request,
    req: Optional[RecalculateRequest] = None,
    session: Session = Depends(get_session),
    user: Dict[str, Any] = Depends(get_current_user),
):
    """Rerun the calculator with new or stored inputs"""
    inputs = req.inputs if req else None
    try:
        return estimate_service.recalculate_estimate(session, user["user_id"], estimate_id, inputs)
    except (CalculationError, ServiceError) as e:
        raise to_http_exception(e, get_trace_id(request)) from e


@router.delete("/{estimate_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_estimate(
    estimate_id: UUID,
    request: Request,
    session: Session = Depends(get_session),
    user: Dict[str, Any] = Depends(get_current_user),
):
    try:
        estimate_service.delete_estimate(session, user["user_id"], estimate_id)
    except ServiceError as e:
        raise to_http_exception(e, get_trace_id(request)) from e
