"""
Database connection and session management
Supports both PostgreSQL and SQLite
"""

import logging
import os
from contextlib import contextmanager
from typing import Generator, Optional
from urllib.parse import urlparse

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool, QueuePool
from dotenv import load_dotenv

from .models import Base

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///./data/pump_estimator.db"


class DatabaseConfig:
    """Database configuration handler"""

    def __init__(self, database_url: Optional[str] = None):
        self.database_url = database_url or os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
        self._parse_url()

    def _parse_url(self):
        """Parse database URL to determine type and settings"""
        parsed = urlparse(self.database_url)
        self.db_type = parsed.scheme.split("+")[0]  # Remove driver suffix

        # Determine if PostgreSQL or SQLite
        self.is_postgres = self.db_type in ["postgresql", "postgres"]
        self.is_sqlite = self.db_type == "sqlite"

        # SQLAlchemy only accepts the postgresql:// scheme
        if self.database_url.startswith("postgres://"):
            self.database_url = self.database_url.replace("postgres://", "postgresql://", 1)

    def get_engine_kwargs(self) -> dict:
        """Get engine configuration based on database type"""
        if self.is_sqlite:
            return {
                "connect_args": {"check_same_thread": False},
                "poolclass": NullPool,  # No connection pooling for SQLite
            }
        elif self.is_postgres:
            return {
                "poolclass": QueuePool,
                "pool_size": int(os.getenv("DB_POOL_SIZE", "10")),
                "max_overflow": int(os.getenv("DB_MAX_OVERFLOW", "20")),
                "pool_timeout": int(os.getenv("DB_POOL_TIMEOUT", "30")),
                "pool_pre_ping": True,  # Check connection health
                "pool_recycle": 3600,   # Recycle connections after 1 hour
            }
        else:
            return {}

    @property
    def display_url(self) -> str:
        return self.database_url.split("@")[-1] if "@" in self.database_url else "local"


class Database:
    """Database connection manager"""

    def __init__(self, database_url: Optional[str] = None):
        self.config = DatabaseConfig(database_url)
        self.engine: Optional[Engine] = None
        self.SessionLocal: Optional[sessionmaker] = None
        self._initialize()

    def _initialize(self):
        """Initialize database engine and session factory"""
        engine_kwargs = self.config.get_engine_kwargs()

        if self.config.is_sqlite:
            self._ensure_sqlite_dir()

        # Create engine
        self.engine = create_engine(
            self.config.database_url,
            echo=os.getenv("DB_ECHO", "false").lower() == "true",
            **engine_kwargs
        )

        # Create session factory
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine
        )

    def _ensure_sqlite_dir(self):
        # sqlite:///<path>; the file path follows the third slash
        path = urlparse(self.config.database_url).path[1:]
        if path and path != ":memory:":
            directory = os.path.dirname(path)
            if directory and not os.path.exists(directory):
                os.makedirs(directory, exist_ok=True)

    def get_session(self) -> Session:
        """Get a new database session"""
        if not self.SessionLocal:
            raise RuntimeError("Database not initialized")
        return self.SessionLocal()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """
        Provide a transactional scope around a series of operations.

        Usage:
            with db.session_scope() as session:
                session.add(entity)
        """
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def test_connection(self) -> bool:
        """Test database connection"""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.error(f"Database connection failed: {e}")
            return False

    def create_tables(self):
        """Create all tables from the ORM metadata"""
        Base.metadata.create_all(self.engine)

    def drop_tables(self):
        """Drop all tables (use with caution!)"""
        Base.metadata.drop_all(self.engine)

    def close(self):
        """Close database connection"""
        if self.engine:
            self.engine.dispose()


# Global database instance (singleton pattern)
_db_instance: Optional[Database] = None


def get_db() -> Database:
    """Get global database instance"""
    global _db_instance
    if _db_instance is None:
        _db_instance = Database()
    return _db_instance


def configure_db(database_url: Optional[str] = None) -> Database:
    """Replace the global database instance with one bound to database_url"""
    global _db_instance
    if _db_instance is not None:
        _db_instance.close()
    _db_instance = Database(database_url)
    return _db_instance


def get_session() -> Generator[Session, None, None]:
    """
    Dependency for FastAPI to get database session

    Usage in FastAPI:
        @app.get("/items")
        def get_items(db: Session = Depends(get_session)):
            return db.query(Item).all()
    """
    db = get_db()
    with db.session_scope() as session:
        yield session


# Health check function
def check_database_health() -> dict:
    """Check database health and return status"""
    db = get_db()

    health = {
        "status": "unknown",
        "database_type": db.config.db_type,
        "database_url": db.config.display_url,
        "connected": False,
        "tables": []
    }

    try:
        # Test connection
        health["connected"] = db.test_connection()

        if health["connected"]:
            health["tables"] = sorted(inspect(db.engine).get_table_names())
            health["table_count"] = len(health["tables"])
            health["status"] = "healthy" if health["table_count"] > 0 else "empty"
        else:
            health["status"] = "disconnected"

    except Exception as e:
        health["status"] = "error"
        health["error"] = str(e)

    return health
