"""
Error mapping for routers
Translates calculator and service errors into HTTPException detail envelopes
"""
import logging
import uuid
from typing import Union

from fastapi import HTTPException, Request, status

from pump_estimator_core.engine.errors import CalculationError

from api.services.errors import ServiceError

logger = logging.getLogger(__name__)

DomainError = Union[CalculationError, ServiceError]


def get_trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", str(uuid.uuid4()))


def to_http_exception(error: DomainError, trace_id: str) -> HTTPException:
    """
    Build the HTTPException for a domain error.

    Calculation errors are input-driven and map to 422; service errors
    carry their own status code.
    """
    if isinstance(error, CalculationError):
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    else:
        status_code = error.status_code

    detail = error.to_detail()
    detail["traceId"] = trace_id
    logger.warning(f"[{trace_id}] {detail['code']}: {detail['message']}")
    return HTTPException(status_code=status_code, detail=detail)
