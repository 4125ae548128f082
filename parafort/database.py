import logging
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, scoped_session
from sqlalchemy.pool import StaticPool

from .config import config

# Global registry, populated by init_db()
engine = None
db_session = None

logger = logging.getLogger("parafort")


def normalize_database_url(database_url: Optional[str]) -> Optional[str]:
    """
    Normalize the database URL.
    - postgres:// and postgresql:// use the psycopg (v3) driver.
    - Postgres URLs always carry sslmode=require.
    """
    if not database_url:
        return None

    try:
        url = make_url(database_url)
    except Exception:
        # Leave unparseable URLs untouched, create_engine will report them
        return database_url

    if url.drivername in ("postgres", "postgresql"):
        url = url.set(drivername="postgresql+psycopg")

    if url.drivername.startswith("postgresql") and "sslmode" not in url.query:
        url = url.set(query={**url.query, "sslmode": "require"})

    return url.render_as_string(hide_password=False)


def _engine_options(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        # Single shared connection so in-memory databases survive across sessions
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    return {
        "pool_pre_ping": True,
        "pool_size": config.DB_POOL_SIZE,
        "max_overflow": config.DB_MAX_OVERFLOW,
        "pool_timeout": config.DB_POOL_TIMEOUT,
        "pool_recycle": config.DB_POOL_RECYCLE,
    }


def init_db(database_url: Optional[str] = None):
    global engine, db_session
    database_url = normalize_database_url(database_url or config.DATABASE_URL)
    if not database_url:
        logger.warning("⚠️ DATABASE_URL not set. Check the environment variables.")
        return

    try:
        masked_url = database_url.split("@")[-1] if "@" in database_url else database_url.split(":")[0]
        logger.info(f"🔌 Connecting to database: {masked_url}")

        engine = create_engine(database_url, **_engine_options(database_url))
        db_session = scoped_session(sessionmaker(autocommit=False, autoflush=False, bind=engine))
        logger.info("✅ Database connection initialized")
    except Exception as e:
        logger.error(f"❌ Failed to create database engine: {e}")
        raise


def get_db():
    """Yields the thread-scoped session. Prefer the container's get_uow() in routes."""
    if db_session is None:
        init_db()

    if db_session is None:
        raise RuntimeError("Database is not configured (DATABASE_URL missing)")

    # scoped_session returns the same session for the thread; removal happens at app teardown
    yield db_session()
