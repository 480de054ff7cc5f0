"""
Well Pump Estimator Infrastructure Module
Database connections, ORM models, the catalog read interface and default catalog data
"""

from .db import Database, get_db, get_session, check_database_health
from .catalog_repository import load_catalog
from .seed import seed_catalog

__all__ = [
    "Database",
    "get_db",
    "get_session",
    "check_database_health",
    "load_catalog",
    "seed_catalog",
]
