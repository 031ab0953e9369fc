"""Remote data client: contract plus SQL and in-memory implementations."""

from __future__ import annotations

import logging

from nadi.config import Settings
from nadi.database import Base, create_engine
from nadi.datasource.base import (
    MULTIPLE_ROWS,
    ROW_NOT_FOUND,
    DataSource,
    RemoteError,
    RemoteResult,
    TableQuery,
    TableRef,
)
from nadi.datasource.memory import MemoryDataSource
from nadi.datasource.sql import SqlDataSource

logger = logging.getLogger(__name__)

__all__ = [
    "DataSource",
    "MemoryDataSource",
    "MULTIPLE_ROWS",
    "ROW_NOT_FOUND",
    "RemoteError",
    "RemoteResult",
    "SqlDataSource",
    "TableQuery",
    "TableRef",
    "create_data_source",
]


def create_data_source(settings: Settings) -> DataSource:
    """Build the data source selected by ``settings.DATA_SOURCE``."""
    import nadi.models  # noqa: F401  (registers every table on Base.metadata)

    kind = settings.DATA_SOURCE.lower()
    if kind == "memory":
        logger.info("Using in-memory data source")
        return MemoryDataSource(Base.metadata)
    if kind == "sql":
        engine = create_engine(
            settings.DATABASE_URL,
            echo=settings.ENVIRONMENT == "development" and settings.LOG_LEVEL == "debug",
        )
        return SqlDataSource(engine, Base.metadata)
    raise ValueError(f"Unknown DATA_SOURCE '{settings.DATA_SOURCE}' (expected 'sql' or 'memory')")
