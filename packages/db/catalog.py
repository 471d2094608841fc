"""
Catalog reader for ReportQL.

Reads table names, columns and foreign keys from the live database
through the SQLAlchemy inspector, so it works on any dialect.
"""

from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import CompileError, NoSuchTableError
from sqlalchemy.types import TypeEngine

logger = logging.getLogger(__name__)


class TableNotFoundError(Exception):
    """Raised when a requested table does not exist in the catalog."""

    pass


class CatalogReader:
    """
    Read-only view of the database catalog.

    Every call opens a fresh inspector; memoization is the job of
    ``ReferenceCache``.
    """

    def __init__(self, engine: Engine, schema: str | None = None):
        """
        Initialize the reader.

        Args:
            engine: SQLAlchemy engine for the reporting database.
            schema: Schema to read. Uses the connection default if not provided.
        """
        self._engine = engine
        self._schema = schema

    def get_table_names(self) -> list[dict[str, str]]:
        """List tables as ``[{"table_name": ...}]``, sorted by name."""
        names = inspect(self._engine).get_table_names(schema=self._schema)
        return [{"table_name": name} for name in sorted(names)]

    def get_table_attributes(self, table_name: str) -> list[dict[str, str]]:
        """
        List the columns of one table as ``[{"column_name", "type"}]``.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        inspector = inspect(self._engine)
        try:
            columns = inspector.get_columns(table_name, schema=self._schema)
        except NoSuchTableError as e:
            raise TableNotFoundError(f"Table '{table_name}' not found") from e

        return [
            {"column_name": column["name"], "type": self._type_name(column["type"])}
            for column in columns
        ]

    def get_foreign_keys(self) -> list[dict[str, str]]:
        """
        List single-column foreign keys across all tables.

        Each row carries ``table_name``, ``column_name``,
        ``foreign_table_name`` and ``foreign_column_name``.
        """
        inspector = inspect(self._engine)
        rows: list[dict[str, str]] = []

        for table_name in sorted(inspector.get_table_names(schema=self._schema)):
            for fk in inspector.get_foreign_keys(table_name, schema=self._schema):
                constrained = fk.get("constrained_columns") or []
                referred = fk.get("referred_columns") or []
                if len(constrained) != 1 or len(referred) != 1:
                    logger.debug(
                        "Skipping composite foreign key %s on %s", fk.get("name"), table_name
                    )
                    continue

                rows.append(
                    {
                        "table_name": table_name,
                        "column_name": constrained[0],
                        "foreign_table_name": fk["referred_table"],
                        "foreign_column_name": referred[0],
                    }
                )

        return rows

    def get_all_related_tables(self) -> list[dict[str, str]]:
        """Raw relation edges as ``[{"table_name", "related_table"}]``."""
        return [
            {"table_name": row["table_name"], "related_table": row["foreign_table_name"]}
            for row in self.get_foreign_keys()
        ]

    def _type_name(self, column_type: TypeEngine) -> str:
        try:
            return column_type.compile(dialect=self._engine.dialect)
        except CompileError:
            return type(column_type).__name__
