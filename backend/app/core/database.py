"""
Conexión a base de datos PostgreSQL (Supabase)

Este módulo centraliza TODAS las formas de acceso a la base de datos:
- SQLAlchemy (definición del esquema, usado por scripts/init_db.py)
- psycopg2 directo (repositorios, queries SQL raw)
- Supabase client (Storage para imágenes de productos)

Author: TM3
Updated: 2025-10-17
"""
import time
import logging

import psycopg2
from psycopg2.extras import RealDictCursor
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base
from supabase import create_client, Client

from .config import settings

logger = logging.getLogger(__name__)

# Seconds psycopg2 waits for the server before giving up
CONNECTION_TIMEOUT = 10


# ============================================================================
# SQLAlchemy Configuration (schema models)
# ============================================================================

# Base para modelos
Base = declarative_base()

_engine = None


def get_engine():
    """
    Lazily build the SQLAlchemy engine.

    The engine is only needed for schema management, so it is not created
    at import time (tests and the API can run without DATABASE_URL).
    """
    global _engine
    if _engine is None:
        if not settings.DATABASE_URL:
            raise Exception("DATABASE_URL not configured")
        _engine = create_engine(
            settings.DATABASE_URL,
            pool_pre_ping=True,  # Verificar conexión antes de usar
            pool_size=5,
            max_overflow=10,
        )
    return _engine


# ============================================================================
# psycopg2 Direct Connections (for raw SQL queries)
# ============================================================================

def get_db_connection_dict():
    """
    Get a database connection with RealDictCursor (returns dictionaries)

    Rows come back as dicts that map straight onto the pydantic domain
    models. Repositories go through get_db_connection_dict_with_retry.

    Example:
        conn = get_db_connection_dict()
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM products")
        results = cursor.fetchall()  # Returns list of dicts
        cursor.close()
        conn.close()
    """
    database_url = settings.DATABASE_URL
    if not database_url:
        raise Exception("DATABASE_URL not configured")

    return psycopg2.connect(
        database_url,
        cursor_factory=RealDictCursor,
        connect_timeout=CONNECTION_TIMEOUT
    )


# ============================================================================
# Supabase Client (for Supabase-specific features)
# ============================================================================

_supabase: Client = None


def get_supabase() -> Client:
    """
    FastAPI dependency para obtener cliente de Supabase

    Usage:
        @router.post("/upload")
        def upload(sb: Client = Depends(get_supabase)):
            ...
    """
    global _supabase
    if _supabase is None:
        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
            raise Exception("SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY not configured")
        _supabase = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
    return _supabase


# ============================================================================
# Database Connection with Retry Logic (SSL Failure Recovery)
# ============================================================================

def get_db_connection_with_retry(max_retries=3, retry_delay=1.0, dict_cursor=False):
    """
    Get a psycopg2 connection with automatic retry on SSL/connection failures

    Handles intermittent Supabase connection issues by retrying failed
    connections with exponential backoff.

    Args:
        max_retries: Maximum number of connection attempts (default: 3)
        retry_delay: Initial delay between retries in seconds (default: 1.0)
        dict_cursor: Use RealDictCursor as the connection's cursor factory

    Returns:
        psycopg2 connection object

    Raises:
        psycopg2.OperationalError: If all retry attempts fail
    """
    database_url = settings.DATABASE_URL
    if not database_url:
        raise Exception("DATABASE_URL not configured")

    connect_kwargs = {"connect_timeout": CONNECTION_TIMEOUT}
    if dict_cursor:
        connect_kwargs["cursor_factory"] = RealDictCursor

    last_error = None

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"Database connection attempt {attempt}/{max_retries}")
            conn = psycopg2.connect(database_url, **connect_kwargs)

            # Test connection with a simple query
            cursor = conn.cursor()
            cursor.execute("SELECT 1")
            cursor.close()

            return conn

        except psycopg2.OperationalError as e:
            last_error = e
            error_msg = str(e)

            if "SSL connection has been closed unexpectedly" in error_msg:
                logger.warning(f"SSL connection error on attempt {attempt}/{max_retries}: {error_msg}")
            else:
                logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {error_msg}")

            if attempt < max_retries:
                # Exponential backoff
                delay = retry_delay * (2 ** (attempt - 1))
                logger.info(f"Retrying in {delay:.2f} seconds...")
                time.sleep(delay)
            else:
                logger.error(f"All {max_retries} connection attempts failed")
                raise last_error

    raise last_error if last_error else Exception("Connection failed after all retries")


def get_db_connection_dict_with_retry(max_retries=3, retry_delay=1.0):
    """Same as get_db_connection_with_retry but returns dicts instead of tuples."""
    return get_db_connection_with_retry(
        max_retries=max_retries,
        retry_delay=retry_delay,
        dict_cursor=True
    )
