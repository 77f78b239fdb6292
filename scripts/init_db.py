"""Database initialization script."""
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.database.db import init_db, engine
from src.analytics.logger import logger
from sqlalchemy import inspect

EXPECTED_TABLES = ["users", "chats"]


def initialize_database() -> bool:
    """Create tables and report which ones exist."""
    try:
        logger.info("Initializing database...")
        init_db()

        existing_tables = inspect(engine).get_table_names()
        for table in EXPECTED_TABLES:
            if table in existing_tables:
                logger.info(f"  [OK] {table}")
            else:
                logger.warning(f"  [WARN] {table} (missing)")

        logger.info("[SUCCESS] Database initialization complete!")
        return all(table in existing_tables for table in EXPECTED_TABLES)

    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)
        return False


if __name__ == "__main__":
    success = initialize_database()
    sys.exit(0 if success else 1)
