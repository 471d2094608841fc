"""
Report Validator for ReportQL.

Checks a ReportRequest before any SQL is built: every identifier must be
a plain (optionally table-qualified) name, and operators must fit their
values. Literal values are escaped later by the value codec.
"""

import re

from packages.core.sql_ast.models import (
    AggregateFunction,
    ColumnItem,
    ColumnReference,
    Filter,
    FilterOperator,
    HavingCondition,
    LiteralValue,
    ReportRequest,
    TableRef,
)


# -----------------------------
# Errors
# -----------------------------


class ReportCompileError(Exception):
    """Raised when a report cannot be compiled."""

    pass


class ReportValidationError(ReportCompileError):
    """Raised when a report request is invalid."""

    pass


# -----------------------------
# Validation Rules
# -----------------------------

_NAME = r"[A-Za-z_][A-Za-z0-9_]*"
IDENTIFIER_RE = re.compile(rf"^{_NAME}$")
COLUMN_RE = re.compile(rf"^{_NAME}(\.{_NAME})?$")
HAVING_AGGREGATION_RE = re.compile(
    rf"^\s*(?P<func>[A-Za-z]+)\s*\(\s*(?P<column>{_NAME}(\.{_NAME})?)\s*\)\s*$"
)

# Operators that make no sense against an aggregate
DISALLOWED_HAVING_OPERATORS: set[FilterOperator] = {
    FilterOperator.LIKE,
    FilterOperator.NOT_LIKE,
    FilterOperator.IN,
}


# -----------------------------
# Validator
# -----------------------------


class ReportValidator:
    """
    Validates ReportRequest objects before compilation.

    Missing tables are fatal; every other rule guards what gets
    embedded into the statement as an identifier.
    """

    def validate(self, request: ReportRequest) -> None:
        """
        Validate the given request.

        Args:
            request: The ReportRequest to validate.

        Raises:
            ReportValidationError: If the request is invalid.
        """
        self._validate_tables(request.tables)
        self._validate_columns(request.columns)
        self._validate_aggregations(request)
        self._validate_filters(request.filters or [])
        self._validate_having(request.having)
        self._validate_order_by(request)
        self._validate_group_by(request.group_by)

    # -------------------------
    # Validation Methods
    # -------------------------

    def _validate_tables(self, tables: list[TableRef | str] | None) -> None:
        if not tables:
            raise ReportValidationError(
                "At least one table must be provided in 'tables'"
            )

        for table in tables:
            name = table if isinstance(table, str) else table.name
            if not IDENTIFIER_RE.match(name or ""):
                raise ReportValidationError(f"Invalid table name '{name}'")

            if isinstance(table, TableRef) and table.on is not None and table.on.is_complete:
                self._check_column(table.on.left, f"ON condition of '{name}'")
                self._check_column(table.on.right, f"ON condition of '{name}'")

    def _validate_columns(self, columns: list[ColumnItem | str | None] | None) -> None:
        for column in columns or []:
            name = column.column if isinstance(column, ColumnItem) else column
            if name:
                self._check_column(name, "selected column")

    def _validate_aggregations(self, request: ReportRequest) -> None:
        for agg in request.aggregation or []:
            if agg.column:
                self._check_column(agg.column, "aggregated column")

    def _validate_filters(self, filters: list[Filter]) -> None:
        for f in filters:
            self._check_column(f.column, "filter column")
            self._validate_filter_value(f)

    def _validate_filter_value(self, f: Filter) -> None:
        """Validate that the filter value matches operator expectations."""
        value = f.value

        if isinstance(value, ColumnReference):
            self._check_column(value.qualified, f"value of filter on '{f.column}'")
            if f.operator == FilterOperator.IN:
                raise ReportValidationError(
                    f"IN operator for '{f.column}' requires literal values, not a column"
                )
            return

        if isinstance(value, LiteralValue):
            value = value.value

        if isinstance(value, list):
            if f.operator != FilterOperator.IN:
                raise ReportValidationError(
                    f"Operator '{f.operator.value}' for '{f.column}' does not accept a list of values"
                )
            if not value:
                raise ReportValidationError(
                    f"IN operator for '{f.column}' requires at least one value"
                )

    def _validate_having(self, having: list[HavingCondition] | str | None) -> None:
        # Pre-rendered strings are passed through as-is
        if having is None or isinstance(having, str):
            return

        for h in having:
            match = HAVING_AGGREGATION_RE.match(h.aggregation)
            if match is None:
                raise ReportValidationError(
                    f"HAVING aggregation '{h.aggregation}' must look like FUNC(column)"
                )
            if match.group("func").upper() not in AggregateFunction.__members__:
                raise ReportValidationError(
                    f"Unsupported aggregate function in HAVING: '{match.group('func')}'"
                )
            if h.operator in DISALLOWED_HAVING_OPERATORS:
                raise ReportValidationError(
                    f"Operator '{h.operator.value}' not allowed in HAVING"
                )

    def _validate_order_by(self, request: ReportRequest) -> None:
        # Entries not in the selection are dropped later, but must still be safe to log
        for order in request.order_by or []:
            if order.column:
                self._check_column(order.column, "ORDER BY column")

    def _validate_group_by(self, group_by: list[str] | str | None) -> None:
        if group_by is None:
            return
        columns = split_group_by(group_by)
        for column in columns:
            self._check_column(column, "GROUP BY column")

    # -------------------------
    # Helpers
    # -------------------------

    @staticmethod
    def _check_column(column: str | None, role: str) -> None:
        if not column or not COLUMN_RE.match(column):
            raise ReportValidationError(f"Invalid {role} '{column}'")


def split_group_by(group_by: list[str] | str) -> list[str]:
    """Accept GROUP BY as a list or a comma-separated string."""
    if isinstance(group_by, str):
        return [part.strip() for part in group_by.split(",") if part.strip()]
    return [column for column in group_by if column]
