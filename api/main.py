"""
Well Pump Estimator API - FastAPI Main Application
Submersible pump sizing, estimate management and catalog administration
"""

import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from pump_estimator_core import __version__

from api.config import config
from api.db import init_db, close_db, check_db_health
from api.security_config import get_allowed_origins, get_allowed_hosts, EXPOSE_HEADERS
from api.auth import verify_token

# Routers
from api.routers import catalog, clients, estimate, settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.APP_LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Application metadata
APP_NAME = "Well Pump Estimator API"
APP_VERSION = __version__
APP_DESCRIPTION = "Submersible well pump sizing and estimate management"


class ErrorResponse(BaseModel):
    """Standard error response model"""
    code: str
    message: str
    hint: Optional[str] = None
    traceId: str
    meta: Dict[str, Any]


class AppContext:
    """Application context manager"""
    def __init__(self):
        self.start_time = time.time()
        self.ready = False

    def startup(self):
        """Initialize application resources"""
        logger.info(f"Starting {APP_NAME} ({config.APP_ENV})...")
        init_db()
        self.ready = True
        logger.info(f"{APP_NAME} started successfully")

    def shutdown(self):
        """Cleanup application resources"""
        logger.info(f"Shutting down {APP_NAME}...")
        close_db()
        self.ready = False
        logger.info(f"{APP_NAME} shut down successfully")


# Initialize application context
app_context = AppContext()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    app_context.startup()
    yield
    app_context.shutdown()


# Create FastAPI application
app = FastAPI(
    title=APP_NAME,
    version=APP_VERSION,
    description=APP_DESCRIPTION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# Configure CORS with whitelist
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
    expose_headers=EXPOSE_HEADERS
)

# Configure trusted hosts with whitelist
app.add_middleware(
    TrustedHostMiddleware,
    allowed_hosts=get_allowed_hosts()
)

# Configure rate limiting
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[config.RATE_LIMIT_DEFAULT],
    storage_uri="memory://"
)
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)


def _trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", str(uuid.uuid4()))


# Rate limit exceeded handler
@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Handle rate limit exceeded"""
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=jsonable_encoder(ErrorResponse(
            code="RATE_LIMIT_EXCEEDED",
            message="Too many requests",
            hint="Please wait before making more requests",
            traceId=_trace_id(request),
            meta={"dedupKey": f"rate_limit_{request.url.path}_{time.time()}"}
        ))
    )


# Middleware for trace ID injection
@app.middleware("http")
async def inject_trace_id(request: Request, call_next):
    """Inject trace ID into all requests and responses"""
    trace_id = request.headers.get("X-Trace-Id", str(uuid.uuid4()))

    # Add trace ID to logger context
    logger_adapter = logging.LoggerAdapter(logger, {"trace_id": trace_id})
    request.state.logger = logger_adapter
    request.state.trace_id = trace_id

    # Process request
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time

    # Add headers to response
    response.headers["X-Trace-Id"] = trace_id
    response.headers["X-Process-Time"] = str(process_time)

    logger_adapter.info(
        f"{request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s"
    )

    return response


# Exception handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors"""
    errors = exc.errors()
    hint = None
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()))
        hint = f"{location}: {errors[0]['msg']}" if location else str(errors[0]["msg"])
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder(ErrorResponse(
            code="VALIDATION_ERROR",
            message="Invalid request parameters",
            hint=hint,
            traceId=_trace_id(request),
            meta={"dedupKey": f"validation_{request.url.path}_{time.time()}"}
        ))
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions"""
    detail = exc.detail if isinstance(exc.detail, dict) else {}
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(ErrorResponse(
            code=detail.get("code", "HTTP_ERROR"),
            message=detail.get("message", str(exc.detail)),
            hint=detail.get("hint"),
            traceId=detail.get("traceId", _trace_id(request)),
            meta={"dedupKey": f"http_{request.url.path}_{exc.status_code}"}
        )),
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=jsonable_encoder(ErrorResponse(
            code="INTERNAL_ERROR",
            message="An internal error occurred",
            hint="Please contact support with the trace ID",
            traceId=_trace_id(request),
            meta={"dedupKey": f"internal_{request.url.path}_{time.time()}"}
        ))
    )


# Health check endpoint
@app.get("/healthz")
async def health_check():
    """Liveness check; does not touch the database"""
    return JSONResponse(
        content={
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": time.time() - app_context.start_time
        }
    )


# Readiness check endpoint
@app.get("/readyz")
def readiness_check(request: Request):
    """
    Readiness check with database validation.
    Response: {"status":"ok","db":"ok","tables":N,"ts":"<UTC-ISO>","traceId":"..."}
    """
    trace_id = _trace_id(request)

    if not app_context.ready:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "message": "Application not ready",
                "traceId": trace_id
            }
        )

    db_health = check_db_health()
    ts = datetime.now(timezone.utc).isoformat()

    if db_health.get("status") != "ok":
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "degraded",
                "db": db_health.get("status"),
                "db_error": db_health.get("error"),
                "ts": ts,
                "traceId": trace_id
            }
        )

    return JSONResponse(
        content={
            "status": "ok",
            "db": "ok",
            "tables": db_health.get("table_count", 0),
            "ts": ts,
            "traceId": trace_id
        }
    )


# Include routers with JWT authentication
# All API endpoints require authentication except health/ready/root
for router_module in (estimate, clients, catalog, settings):
    app.include_router(router_module.router, dependencies=[Depends(verify_token)])


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "description": APP_DESCRIPTION,
        "docs": "/docs",
        "openapi": "/openapi.json",
        "health": "/healthz",
        "ready": "/readyz"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=config.APP_PORT,
        reload=config.is_development(),
        log_level=config.APP_LOG_LEVEL.lower()
    )
