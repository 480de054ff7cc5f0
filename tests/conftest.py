"""
Pytest configuration and fixtures
"""

import os
import sys
from decimal import Decimal
from pathlib import Path
from typing import Generator

import pytest
from sqlalchemy.orm import Session

# Add src and project root to path for imports
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT / "src"))
sys.path.insert(0, str(ROOT))

# Test settings must be in place before api.config is imported
os.environ.setdefault("APP_ENV", "development")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-testing-only")
os.environ.setdefault("RATE_LIMIT_DEFAULT", "10000/minute")
os.environ.setdefault("DB_AUTO_CREATE", "true")

from pump_estimator_core.engine.catalog import Catalog, CatalogLaborRate, CatalogMaterial
from pump_estimator_core.infra.db import Database
from pump_estimator_core.infra.models import ClientModel
from pump_estimator_core.infra.seed import DEFAULT_LABOR_RATES, DEFAULT_MATERIALS, seed_catalog


@pytest.fixture
def test_database(tmp_path) -> Generator[Database, None, None]:
    """Fresh SQLite database file per test"""
    db = Database(f"sqlite:///{tmp_path / 'test.db'}")
    db.create_tables()

    yield db

    db.close()


@pytest.fixture
def db_session(test_database) -> Generator[Session, None, None]:
    """Database session for each test"""
    session = test_database.get_session()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def seeded_session(db_session) -> Session:
    """Session over a database holding the default catalog"""
    seed_catalog(db_session)
    db_session.commit()
    return db_session


@pytest.fixture
def client_row(seeded_session) -> ClientModel:
    """Persisted client for estimate tests"""
    client = ClientModel(name="Valley Farms", contact_name="Dana Ortiz", address="12 Orchard Rd")
    seeded_session.add(client)
    seeded_session.commit()
    return client


def build_catalog(exclude=()):
    """In-memory catalog from the default seed rows, minus excluded names"""
    materials = [
        CatalogMaterial(
            name=row["name"],
            category=row["category"].value,
            price=Decimal(row["price"]),
            description=row["description"],
            unit=row["unit"],
            lookup_data=row.get("lookup_data") or {},
        )
        for row in DEFAULT_MATERIALS
        if row["name"] not in exclude
    ]
    labor_rates = [
        CatalogLaborRate(
            name=row["name"],
            rate_per_hour=Decimal(row["rate_per_hour"]),
            description=row["description"],
        )
        for row in DEFAULT_LABOR_RATES
        if row["name"] not in exclude
    ]
    return Catalog.from_rows(materials, labor_rates)


@pytest.fixture
def make_catalog():
    """Factory for catalog snapshots with selected rows removed"""
    return build_catalog


@pytest.fixture
def sample_catalog() -> Catalog:
    """Default catalog snapshot"""
    return build_catalog()


@pytest.fixture
def sample_inputs() -> dict:
    """60 GPM at 60 psi, pump set at 300 ft on 240V with bundle A"""
    return {
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


@pytest.fixture(autouse=True)
def reset_singleton():
    """Reset database singleton before each test"""
    import pump_estimator_core.infra.db as db_module
    db_module._db_instance = None
    yield
    db_module._db_instance = None


# Test markers
def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, isolated)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (database, file I/O)"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests (full workflow)"
    )
    config.addinivalue_line(
        "markers", "critical: Critical path tests that must pass"
    )
