import logging

from sqlalchemy import inspect

from parafort import database
from parafort.models_db import Base

logger = logging.getLogger("migration")


def run_migrations(engine=None):
    """Creates any table from the models that does not exist yet. Existing tables are left alone."""
    engine = engine or database.engine
    if engine is None:
        logger.error("❌ Database engine not initialized. Skipping migrations.")
        return []

    existing = set(inspect(engine).get_table_names())
    missing = [name for name in Base.metadata.tables if name not in existing]

    if missing:
        logger.info(f"🔄 Creating tables: {', '.join(missing)}")
    Base.metadata.create_all(bind=engine)
    logger.info("✅ Schema up to date")
    return missing
