"""
Well Pump Estimator Database Module
Binds the core SQLAlchemy Database to the API configuration
"""
import logging

from pump_estimator_core.infra.db import check_database_health, configure_db, get_db

from api.config import config

logger = logging.getLogger(__name__)


def check_db_health() -> dict:
    """
    Check database connection and basic health.

    Returns:
        dict with status, connected, tables and optional error
    """
    health = check_database_health()
    if health["status"] == "healthy":
        health["status"] = "ok"
    return health


def init_db() -> None:
    """
    Bind the global database to DATABASE_URL and verify connectivity.
    Called on application startup.
    """
    db = configure_db(config.DATABASE_URL)
    try:
        if config.DB_AUTO_CREATE:
            db.create_tables()
        if not db.test_connection():
            raise RuntimeError("Database initialization failed")
        logger.info(f"Database connected successfully ({db.config.db_type} at {db.config.display_url})")
    except Exception as e:
        logger.error(f"Database initialization error: {e}")
        raise


def close_db() -> None:
    """
    Close database connection pool.
    Called on application shutdown.
    """
    try:
        get_db().close()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error(f"Error closing database connections: {e}")
