"""
SQLAlchemy engine singleton for the reservation store.

A single engine is shared by every request. Server databases (PostgreSQL in
production) get a sized connection pool; file-backed SQLite used for local
runs falls back to SQLAlchemy's default pool.
"""

from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url

from hotel_reservations.config import DATABASE_URL

if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set.")


def _pool_options(database_url: str) -> dict[str, Any]:
    """
    Build pool keyword arguments suited to the database backend.

    Args:
        database_url: SQLAlchemy database URL

    Returns:
        dict: Keyword arguments for create_engine()
    """
    if make_url(database_url).get_backend_name() == "sqlite":
        return {}

    return {
        "pool_size": 10,  # Connections kept open in the pool
        "max_overflow": 20,  # Extra connections when the pool is exhausted
        "pool_pre_ping": True,  # Detect stale connections before use
        "pool_recycle": 3600,  # Recycle connections after 1 hour
    }


engine: Engine = create_engine(
    DATABASE_URL,
    future=True,
    echo=False,
    **_pool_options(DATABASE_URL),
)


def check_engine_health(db_engine: Engine | None = None) -> bool:
    """
    Check if the database engine can open a connection and run a query.

    Used by the /ready endpoint before the service accepts traffic.

    Args:
        db_engine: Engine to probe (defaults to the module singleton)

    Returns:
        bool: True if database is reachable and healthy, False otherwise
    """
    try:
        with (db_engine or engine).connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
