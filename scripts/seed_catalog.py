#!/usr/bin/env python3
"""
Catalog Seeding Script for the Well Pump Estimator
Creates all tables and inserts the default materials and labor rates
"""

import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from pump_estimator_core.infra.db import Database  # noqa: E402
from pump_estimator_core.infra.seed import seed_catalog  # noqa: E402

# Load environment variables
load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Create tables and seed the default catalog"""
    db = Database()
    logger.info(f"[SEED] Connecting to: {db.config.display_url} ({db.config.db_type})")

    try:
        if not db.test_connection():
            logger.error("[SEED] Database connection failed")
            return 1

        logger.info("[SEED] Creating tables...")
        db.create_tables()

        with db.session_scope() as session:
            inserted = seed_catalog(session)

        logger.info(
            f"[SEED] Done: {inserted['materials']} materials, "
            f"{inserted['labor_rates']} labor rates inserted"
        )
        return 0
    except Exception as e:
        logger.error(f"[SEED] Error seeding database: {e}")
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
