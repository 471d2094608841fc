"""FastAPI dependencies for the database, catalog and report compiler."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.engine import Engine

from packages.core.compiler import ReportCompiler
from packages.db.base import get_engine as create_db_engine
from packages.db.cache import CatalogCache
from packages.db.catalog import CatalogReader

from app.core.config import get_settings


@lru_cache
def get_engine() -> Engine:
    """Process-wide engine for the reporting database (connects lazily)."""
    settings = get_settings()
    return create_db_engine(settings.database_url, echo=settings.database_echo)


def get_catalog(engine: Annotated[Engine, Depends(get_engine)]) -> CatalogReader:
    """Catalog reader bound to the reporting database."""
    return CatalogReader(engine, schema=get_settings().database_schema)


def get_compiler(request: Request) -> ReportCompiler:
    """The compiler built once at startup."""
    return request.app.state.compiler


def get_catalog_cache(request: Request) -> CatalogCache:
    """The reference-data caches built once at startup."""
    return request.app.state.catalog_cache


# Type alias for convenience
EngineDep = Annotated[Engine, Depends(get_engine)]
CatalogDep = Annotated[CatalogReader, Depends(get_catalog)]
CompilerDep = Annotated[ReportCompiler, Depends(get_compiler)]
CatalogCacheDep = Annotated[CatalogCache, Depends(get_catalog_cache)]
