"""
Module: poultry_kernel.db.engine
Responsibility: SQLAlchemy engine construction, table creation and the
    transactional scope helper.  Single point of database connection
    configuration.
Architecture position: Kernel > DB.  May import from db/base.py and, inside
    create_tables(), from models/.

Invariants enforced:
    - An in-memory SQLite URL gets a StaticPool so every session sees the
      same database.
    - session_scope() commits on normal exit and rolls back on any
      exception, which it re-raises.
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from poultry_kernel.logging_config import get_logger

logger = get_logger("db.engine")


def _is_memory_sqlite(database_url: str) -> bool:
    url = make_url(database_url)
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine for ``database_url``."""
    if _is_memory_sqlite(database_url):
        engine = create_engine(
            database_url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_engine(database_url, echo=echo, pool_pre_ping=True)
    logger.debug("engine_built", extra={"dialect": engine.dialect.name, "echo": echo})
    return engine


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """
    Provide a transactional scope around a series of operations.

    Postconditions: On normal exit the session is committed and closed.
        On exception it is rolled back and closed, and the exception is
        re-raised.

    Usage:
        with session_scope(factory) as session:
            session.add(entity)
    """
    session = factory()
    logger.debug("transaction_started")
    try:
        yield session
        session.commit()
        logger.debug("transaction_committed")
    except Exception:
        session.rollback()
        logger.warning("transaction_rolled_back", exc_info=True)
        raise
    finally:
        session.close()


def create_tables(engine: Engine) -> None:
    """Create every table registered on Base.metadata."""
    from poultry_kernel.db.base import Base
    import poultry_kernel.models  # noqa: F401  registers the mapped tables

    Base.metadata.create_all(engine)
