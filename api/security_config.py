"""
Browser and token settings for the estimator API.

Production serves the estimator front end from pump-estimator.app; any
other APP_ENV is treated as a local workstation. CORS_ORIGINS and
TRUSTED_HOSTS (comma separated) replace the production lists when a
deployment runs under its own domain.
"""

import os

PRODUCTION_ORIGINS = [
    "https://pump-estimator.app",
    "https://app.pump-estimator.app",
]

PRODUCTION_HOSTS = [
    "pump-estimator.app",
    "*.pump-estimator.app",
    "localhost",
    "127.0.0.1",
]

LOCAL_ORIGINS = ["http://localhost:3000", "http://localhost:8000", "http://127.0.0.1:3000"]

# TestClient sends Host: testserver
LOCAL_HOSTS = ["localhost", "127.0.0.1", "testserver"]

# Trace id and timing headers readable by the estimate screens
EXPOSE_HEADERS = ["X-Trace-Id", "X-Process-Time"]

# Bearer tokens issued by the auth provider
JWT_ALGORITHM = "HS256"
JWT_AUDIENCE = "authenticated"


def _is_production() -> bool:
    return os.getenv("APP_ENV", "development") == "production"


def _env_list(name: str) -> list[str]:
    return [item.strip() for item in os.getenv(name, "").split(",") if item.strip()]


def get_allowed_origins() -> list[str]:
    """Origins allowed to call the API from a browser"""
    if not _is_production():
        return LOCAL_ORIGINS
    return _env_list("CORS_ORIGINS") or PRODUCTION_ORIGINS


def get_allowed_hosts() -> list[str]:
    """Host headers accepted by TrustedHostMiddleware"""
    if not _is_production():
        return LOCAL_HOSTS
    return _env_list("TRUSTED_HOSTS") or PRODUCTION_HOSTS
