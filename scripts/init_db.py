#!/usr/bin/env python3
"""
Standalone database initialization script
Creates the PostgreSQL schema; can be run from the host or inside a container
"""

import sys
import logging
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("init_db")


def main() -> int:
    """Create all tables and list what exists afterwards"""
    logger.info("=" * 60)
    logger.info("HomeHub Database Initialization")
    logger.info("=" * 60)

    try:
        from sqlalchemy import inspect
        from domain.models.database import engine, init_database

        init_database()
        tables = inspect(engine).get_table_names()
        logger.info(f"✓ {len(tables)} tables: {', '.join(sorted(tables))}")
        return 0
    except Exception as e:
        logger.exception(f"✗ Failed to initialize the database: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
