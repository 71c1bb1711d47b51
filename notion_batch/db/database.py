from __future__ import annotations

from collections.abc import Generator, Iterable
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import Column, Engine, Integer, MetaData, Table, Text, create_engine
from sqlalchemy.orm import Session, sessionmaker

from notion_batch.config import get_settings


def create_db_engine(url: str | None = None) -> Engine:
    """Create an engine for the export target (DATABASE_URL by default)."""
    settings = get_settings()
    url = url or settings.database_url
    engine = create_engine(url, echo=settings.log_level == "DEBUG", pool_pre_ping=True)
    logger.debug(f"Database engine created for {engine.url.render_as_string(hide_password=True)}")
    return engine


@contextmanager
def session_scope(engine: Engine) -> Generator[Session, None, None]:
    """Provide a transactional scope around a series of operations."""
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
        session.commit()
    except Exception:  # Intentionally broad - rollback on any error before re-raising
        session.rollback()
        raise
    finally:
        session.close()


def build_table(metadata: MetaData, name: str, columns: Iterable[str]) -> Table:
    """Define a table with an autoincrement ``id`` and one Text column per name."""
    columns = list(columns)
    if not columns:
        raise ValueError("At least one column is required")
    if len({c.lower() for c in columns}) != len(columns):
        raise ValueError(f"Duplicate column names: {columns}")
    if any(c.lower() == "id" for c in columns):
        raise ValueError("Column name 'id' is reserved for the primary key")
    return Table(
        name,
        metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        *(Column(c, Text, nullable=True) for c in columns),
    )
