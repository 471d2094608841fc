"""
Reference-data caches for ReportQL.

Table names and relation edges change only with schema migrations, so
they are loaded lazily on first use and kept until explicitly
invalidated (or the process restarts).
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from enum import Enum
from typing import Generic, TypeVar

from packages.db.catalog import CatalogReader

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheState(str, Enum):
    """Lifecycle of a reference cache."""

    EMPTY = "empty"
    POPULATED = "populated"


class ReferenceCache(Generic[T]):
    """
    Lazily populated, explicitly invalidated memo of one loader.

    Concurrent first calls are serialized, so the loader runs once per
    population. A loader that raises leaves the cache EMPTY.
    """

    def __init__(self, loader: Callable[[], T], name: str = "reference"):
        self._loader = loader
        self._name = name
        self._lock = threading.Lock()
        # (state, value) swapped as one reference so readers never see a torn pair
        self._entry: tuple[CacheState, T | None] = (CacheState.EMPTY, None)
        self.load_count = 0

    @property
    def state(self) -> CacheState:
        return self._entry[0]

    @property
    def name(self) -> str:
        return self._name

    def get(self) -> T:
        """Return the cached value, loading it on first use."""
        state, value = self._entry
        if state is CacheState.POPULATED:
            return value

        with self._lock:
            state, value = self._entry
            if state is CacheState.EMPTY:
                value = self._loader()
                self._entry = (CacheState.POPULATED, value)
                self.load_count += 1
                logger.info("Populated %s cache (load #%d)", self._name, self.load_count)

        return value

    def invalidate(self) -> None:
        """Drop the cached value; the next ``get()`` reloads it."""
        with self._lock:
            self._entry = (CacheState.EMPTY, None)
        logger.info("Invalidated %s cache", self._name)


class CatalogCache:
    """The process-wide caches in front of a CatalogReader."""

    def __init__(self, catalog: CatalogReader):
        self.table_names: ReferenceCache[list[dict[str, str]]] = ReferenceCache(
            catalog.get_table_names, name="table_names"
        )
        self.relations: ReferenceCache[list[dict[str, str]]] = ReferenceCache(
            catalog.get_all_related_tables, name="relations"
        )

    def invalidate_all(self) -> None:
        self.table_names.invalidate()
        self.relations.invalidate()
