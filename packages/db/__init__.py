"""Database access: engine, catalog, reference caches and report execution."""

from packages.db.base import Base, get_database_url, get_engine
from packages.db.cache import CacheState, CatalogCache, ReferenceCache
from packages.db.catalog import CatalogReader, TableNotFoundError
from packages.db.execution import ExecutionResult, QueryExecutionError, builder_query

__all__ = [
    "Base",
    "CacheState",
    "CatalogCache",
    "CatalogReader",
    "ExecutionResult",
    "QueryExecutionError",
    "ReferenceCache",
    "TableNotFoundError",
    "builder_query",
    "get_database_url",
    "get_engine",
]
