"""
Tests for report execution.

Compiled reports are run against the seeded in-memory database.
"""

import pytest

from packages.core.compiler import ReportCompiler, ReportQueryParts
from packages.core.sql_ast.models import ReportRequest
from packages.db.execution import (
    MAX_SAFE_INTEGER,
    QueryExecutionError,
    builder_query,
    json_safe,
)


@pytest.fixture
def compiler() -> ReportCompiler:
    return ReportCompiler()


def run(compiler: ReportCompiler, engine, payload: dict):
    compiled = compiler.compile(ReportRequest.model_validate(payload))
    return builder_query(engine, compiled.parts())


# -----------------------------
# Execution Tests
# -----------------------------


class TestBuilderQuery:
    """Tests for builder_query."""

    def test_rows_keyed_by_alias(self, compiler, seeded_engine, seeded_sales) -> None:
        result = run(
            compiler,
            seeded_engine,
            {
                "tables": ["sales", "stores"],
                "columns": ["stores.name"],
                "aggregation": [{"func": "COUNT", "column": "sales.id"}],
            },
        )

        assert result.columns == ["COUNT_sales_id", "stores_name"]
        assert sum(row["COUNT_sales_id"] for row in result.rows) == seeded_sales

    def test_in_filter(self, compiler, seeded_engine, seeded_sales) -> None:
        result = run(
            compiler,
            seeded_engine,
            {
                "tables": ["sales"],
                "columns": ["sales.sale_status_desc"],
                "aggregation": [{"func": "COUNT", "column": "sales.id"}],
                "filters": [
                    {
                        "column": "sales.sale_status_desc",
                        "operator": "IN",
                        "value": ["COMPLETED", "CANCELLED"],
                    }
                ],
            },
        )

        statuses = {row["sales_sale_status_desc"] for row in result.rows}
        assert statuses <= {"COMPLETED", "CANCELLED"}
        assert sum(row["COUNT_sales_id"] for row in result.rows) == seeded_sales

    def test_like_pattern_reaches_database(self, compiler, seeded_engine) -> None:
        result = run(
            compiler,
            seeded_engine,
            {
                "tables": ["channels"],
                "columns": ["channels.name"],
                "filters": [{"column": "channels.name", "operator": "LIKE", "value": "Food"}],
            },
        )

        assert [row["channels_name"] for row in result.rows] == ["iFood"]

    def test_order_by(self, compiler, seeded_engine) -> None:
        result = run(
            compiler,
            seeded_engine,
            {
                "tables": ["channels"],
                "columns": ["channels.name"],
                "orderBy": [{"column": "channels.name", "direction": "ASC"}],
            },
        )

        names = [row["channels_name"] for row in result.rows]
        assert names == sorted(names)
        assert result.row_count == 4

    def test_accepts_open_connection(self, compiler, seeded_engine) -> None:
        compiled = compiler.compile(ReportRequest(tables=["stores"]))

        with seeded_engine.connect() as connection:
            result = builder_query(connection, compiled.parts())

        assert result.row_count == 5
        assert result.to_response() == {"result": result.rows}

    def test_database_error_is_wrapped(self, seeded_engine) -> None:
        parts = ReportQueryParts(select_part="sales.no_such_column", from_part="sales")

        with pytest.raises(QueryExecutionError, match="OperationalError"):
            builder_query(seeded_engine, parts)


class TestJsonSafe:
    """Tests for large-integer serialization."""

    def test_large_int_becomes_string(self) -> None:
        assert json_safe(MAX_SAFE_INTEGER + 1) == str(MAX_SAFE_INTEGER + 1)
        assert json_safe(-(MAX_SAFE_INTEGER + 1)) == str(-(MAX_SAFE_INTEGER + 1))

    def test_safe_values_untouched(self) -> None:
        assert json_safe(MAX_SAFE_INTEGER) == MAX_SAFE_INTEGER
        assert json_safe(True) is True
        assert json_safe("x") == "x"
        assert json_safe(None) is None
