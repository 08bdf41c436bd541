"""
PostgreSQL (Supabase) database access

This module centralizes every way the application reaches the database:
- psycopg2 direct connections (repositories use raw SQL)
- SQLAlchemy metadata (table definitions in app.models, dev schema creation)
- Supabase client (Storage uploads)
"""
import logging
import time
from functools import lru_cache

import psycopg2
from psycopg2.extras import RealDictCursor
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base
from supabase import Client, create_client

from .config import settings

logger = logging.getLogger(__name__)

# Seconds before a connection attempt is abandoned
CONNECTION_TIMEOUT = 10


# ============================================================================
# SQLAlchemy Configuration (table definitions)
# ============================================================================

Base = declarative_base()


@lru_cache(maxsize=1)
def get_engine():
    """Lazily build the SQLAlchemy engine (only needed for schema creation)"""
    if not settings.database_url:
        raise RuntimeError("DATABASE_URL not configured")

    return create_engine(
        settings.database_url,
        pool_pre_ping=True,
    )


def init_schema():
    """
    Create missing tables from app.models.

    Only used in development (DB_AUTO_CREATE=1); production schemas are
    managed on Supabase.
    """
    import app.models  # noqa: F401  (registers tables on Base.metadata)

    Base.metadata.create_all(bind=get_engine())
    logger.info("Database schema ensured (%d tables)", len(Base.metadata.tables))


# ============================================================================
# psycopg2 Direct Connections (for raw SQL queries)
# ============================================================================

def _connect(cursor_factory=None, max_retries: int = 3, retry_delay: float = 1.0):
    """
    Open a psycopg2 connection with retry on transient connection failures.

    Supabase poolers occasionally drop SSL connections; we retry with
    exponential backoff before giving up.
    """
    database_url = settings.database_url
    if not database_url:
        raise RuntimeError("DATABASE_URL not configured")

    last_error = None

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"Database connection attempt {attempt}/{max_retries}")
            return psycopg2.connect(
                database_url,
                cursor_factory=cursor_factory,
                connect_timeout=CONNECTION_TIMEOUT,
            )
        except psycopg2.OperationalError as e:
            last_error = e
            error_msg = str(e)

            if "SSL connection has been closed unexpectedly" in error_msg:
                logger.warning(f"SSL connection error on attempt {attempt}/{max_retries}: {error_msg}")
            else:
                logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {error_msg}")

            if attempt < max_retries:
                delay = retry_delay * (2 ** (attempt - 1))
                logger.info(f"Retrying in {delay:.2f} seconds...")
                time.sleep(delay)

    logger.error(f"All {max_retries} connection attempts failed")
    raise last_error


def get_db_connection(max_retries: int = 3, retry_delay: float = 1.0):
    """
    Get a psycopg2 connection (returns tuples)

    Example:
        conn = get_db_connection()
        cursor = conn.cursor()
        cursor.execute("SELECT 1")
        cursor.close()
        conn.close()
    """
    return _connect(max_retries=max_retries, retry_delay=retry_delay)


def get_db_connection_dict(max_retries: int = 3, retry_delay: float = 1.0):
    """
    Get a psycopg2 connection with RealDictCursor (returns dictionaries)

    Use this for repositories and API responses.
    """
    return _connect(cursor_factory=RealDictCursor, max_retries=max_retries, retry_delay=retry_delay)


# ============================================================================
# Supabase Client (Storage)
# ============================================================================

@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """
    Shared Supabase client built with the service role key.

    Usage:
        @router.post("/media")
        def upload(sb: Client = Depends(get_supabase)):
            ...
    """
    if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
        raise RuntimeError("SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY not configured")

    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
