"""
Value codec for ReportQL.

Classifies scalar filter values and renders them as SQL literals.
Every value that reaches a WHERE or HAVING clause goes through here.
"""

import math
import re
from collections.abc import Iterable
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from packages.core.sql_ast.models import (
    ColumnReference,
    FilterOperator,
    LiteralValue,
)

DEFAULT_DATE_FORMAT = "YYYY-MM-DD HH24:MI:SS"

_NUMERIC_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_COLUMN_REFERENCE_RE = re.compile(r"^[a-z_]+\.[a-z_]+$", re.IGNORECASE)
_LEADING_WILDCARDS_RE = re.compile(r"^%{2,}")
_TRAILING_WILDCARDS_RE = re.compile(r"%{2,}$")
_DATE_LIKE_MARKERS = ("date", "time", "created", "updated")
_LIKE_OPERATORS = (FilterOperator.LIKE, FilterOperator.NOT_LIKE)


# -----------------------------
# Classification
# -----------------------------


def is_numeric(value: Any) -> bool:
    """True for finite numbers and strings that read as a decimal number."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, (float, Decimal)):
        return math.isfinite(value)
    if isinstance(value, str):
        return bool(_NUMERIC_RE.match(value.strip()))
    return False


def is_column_reference(value: Any) -> bool:
    """True when a raw string looks like ``table.column``."""
    return isinstance(value, str) and bool(_COLUMN_REFERENCE_RE.match(value))


def is_date_like_column(column: str) -> bool:
    """True when the column name suggests a date or timestamp type."""
    name = column.rsplit(".", 1)[-1].lower()
    return any(marker in name for marker in _DATE_LIKE_MARKERS)


# -----------------------------
# Quoting
# -----------------------------


def quote_value(value: Any) -> str:
    """
    Render a scalar as a SQL literal.

    None becomes NULL, numbers stay bare, everything else is
    single-quoted with embedded quotes doubled.
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if is_numeric(value):
        return str(value).strip()
    if isinstance(value, (datetime, date, time)):
        value = value.isoformat()
    text = str(value).replace("'", "''")
    return f"'{text}'"


def quote_list(values: Iterable[Any]) -> str:
    """Render a value list for IN: each element quoted, then parenthesized."""
    return "(" + ", ".join(quote_value(v) for v in values) + ")"


# -----------------------------
# Literal Normalization
# -----------------------------


def normalize_like_pattern(value: str) -> str:
    """
    Apply "contains" semantics to a LIKE pattern.

    Patterns that already carry ``%`` are kept, with doubled wildcards at
    either edge collapsed. Patterns without ``%`` are wrapped on both sides.
    """
    if "%" in value:
        value = _LEADING_WILDCARDS_RE.sub("%", value)
        return _TRAILING_WILDCARDS_RE.sub("%", value)
    return f"%{value}%"


def capitalize_first(value: str) -> str:
    return value[:1].upper() + value[1:]


# -----------------------------
# Filter Rendering
# -----------------------------


def render_filter_column(
    column: str,
    operator: FilterOperator,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> str:
    """Cast date-like columns to text so LIKE can pattern-match them."""
    if operator in _LIKE_OPERATORS and is_date_like_column(column):
        return f"TO_CHAR({column}, {quote_value(date_format)})"
    return column


def render_filter_value(operator: FilterOperator, value: Any) -> str:
    """
    Render the right-hand side of a WHERE condition.

    Tagged values are rendered as tagged. Untagged strings that look like
    ``table.column`` are treated as column references.
    """
    if isinstance(value, ColumnReference):
        return value.qualified
    if isinstance(value, LiteralValue):
        return _render_literal(operator, value.value)
    if isinstance(value, (list, tuple)):
        return quote_list(value)
    if is_column_reference(value):
        return value.lower()
    return _render_literal(operator, value)


def _render_literal(operator: FilterOperator, value: Any) -> str:
    if operator in _LIKE_OPERATORS and value is not None:
        # Patterns are always text, even when the UI sends a number
        return _quote_text(normalize_like_pattern(str(value)))
    if isinstance(value, str) and operator == FilterOperator.EQ and not is_numeric(value):
        value = capitalize_first(value)
    return quote_value(value)


def _quote_text(text: str) -> str:
    return "'" + text.replace("'", "''") + "'"
