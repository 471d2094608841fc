"""Report execution layer."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from packages.core.compiler import ReportQueryParts

logger = logging.getLogger(__name__)

# Largest integer a JSON consumer can hold without losing precision
MAX_SAFE_INTEGER = 2**53 - 1


@dataclass
class ExecutionResult:
    """Result of report execution."""

    columns: list[str]
    rows: list[dict[str, Any]] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def to_response(self) -> dict[str, list[dict[str, Any]]]:
        return {"result": self.rows}


class QueryExecutionError(Exception):
    """Raised when report execution fails."""

    pass


def json_safe(value: Any) -> Any:
    """Stringify integers that would lose precision in JSON."""
    if isinstance(value, int) and not isinstance(value, bool) and abs(value) > MAX_SAFE_INTEGER:
        return str(value)
    return value


def builder_query(bind: Engine | Connection, parts: ReportQueryParts) -> ExecutionResult:
    """
    Execute the statement assembled from compiled report parts.

    This is a thin execution layer with no business logic. The statement
    is sent as-is through ``exec_driver_sql`` with no parameters, so colons
    and percent signs inside quoted literals reach the database untouched.

    Args:
        bind: Engine or open connection to run the statement on.
        parts: Rendered clauses from the report compiler.

    Returns:
        ExecutionResult with rows keyed by SELECT alias.

    Raises:
        QueryExecutionError: If execution fails.
    """
    sql = parts.to_sql()
    try:
        if isinstance(bind, Engine):
            with bind.connect() as connection:
                return _run(connection, sql)
        return _run(bind, sql)
    except SQLAlchemyError as e:
        logger.error("Report query failed (%s):\n%s", type(e).__name__, sql)
        # Don't expose raw SQL errors to users
        raise QueryExecutionError(f"Query execution failed: {type(e).__name__}") from e


def _run(connection: Connection, sql: str) -> ExecutionResult:
    # No parameter collection, so the driver leaves % in LIKE patterns alone
    result = connection.exec_driver_sql(sql, execution_options={"no_parameters": True})
    columns = list(result.keys())
    rows = [
        {column: json_safe(value) for column, value in zip(columns, row)}
        for row in result
    ]
    return ExecutionResult(columns=columns, rows=rows)
