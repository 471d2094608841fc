"""
Report request models for ReportQL.

These models define the ONLY structured format the report builder UI
is allowed to submit.

They describe report intent (tables, columns, aggregations, filters),
NOT SQL syntax. JSON keys follow the UI's camelCase names.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


# -----------------------------
# Enums (restrict UI input)
# -----------------------------


class JoinType(str, Enum):
    """Supported SQL join types."""

    INNER = "INNER"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    FULL = "FULL"

    @property
    def sql(self) -> str:
        return f"{self.value} JOIN"


class AggregateFunction(str, Enum):
    """Supported aggregate functions."""

    SUM = "SUM"
    AVG = "AVG"
    COUNT = "COUNT"
    MAX = "MAX"
    MIN = "MIN"


class FilterOperator(str, Enum):
    """Supported comparison operators for WHERE and HAVING."""

    EQ = "="
    NOT_EQ = "!="
    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="
    LIKE = "LIKE"
    NOT_LIKE = "NOT LIKE"
    IN = "IN"


class FilterLogic(str, Enum):
    """Connective the UI attaches to filters after the first."""

    AND = "AND"
    OR = "OR"


class OrderDirection(str, Enum):
    """Sort direction for ORDER BY clauses."""

    ASC = "ASC"
    DESC = "DESC"


def _upper_token(value: Any) -> Any:
    """Normalize enum input: trim, uppercase, collapse inner whitespace."""
    if isinstance(value, str):
        token = " ".join(value.split()).upper()
        return token or None
    return value


def _coerce_join_type(value: Any) -> Any:
    value = _upper_token(value)
    if isinstance(value, str):
        value = value.removesuffix(" JOIN").removesuffix(" OUTER")
    return value


def _coerce_operator(value: Any) -> Any:
    value = _upper_token(value)
    if value == "<>":
        return FilterOperator.NOT_EQ.value
    return value


# -----------------------------
# Tables & Columns
# -----------------------------


class JoinCondition(BaseModel):
    """
    Explicit ON condition supplied by the UI.

    Example:
        {"left": "sales.store_id", "right": "stores.id"}
    """

    left: str | None = None
    right: str | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.left and self.right)


class TableRef(BaseModel):
    """
    A table requested by the report.

    The first table seeds FROM; every later table is joined to the
    tables already included.
    """

    name: str
    join_type: JoinType | None = Field(
        default=None,
        validation_alias=AliasChoices("join_type", "type", "joinType"),
    )
    on: JoinCondition | None = Field(
        default=None,
        validation_alias=AliasChoices("on", "explicitOn", "explicit_on"),
    )

    @field_validator("join_type", mode="before")
    @classmethod
    def normalize_join_type(cls, v: Any) -> Any:
        return _coerce_join_type(v)


class ColumnItem(BaseModel):
    """Column entry as sent by the UI: ``{"column": "sales.total"}``."""

    column: str | None = None


class Aggregation(BaseModel):
    """
    Represents an aggregated column.

    Examples:
        SUM(sales.total_amount) AS SUM_sales_total_amount
        COUNT(customers.id) AS COUNT_customers_id
    """

    func: AggregateFunction | None = None
    column: str | None = None

    @field_validator("func", mode="before")
    @classmethod
    def normalize_func(cls, v: Any) -> Any:
        return _upper_token(v)

    @field_validator("column", mode="before")
    @classmethod
    def empty_column_is_missing(cls, v: Any) -> Any:
        return v or None

    @property
    def expression(self) -> str:
        return f"{self.func.value}({self.column})"

    @property
    def alias(self) -> str:
        return f"{self.func.value}_{self.column.replace('.', '_')}"


# -----------------------------
# Filter Values
# -----------------------------

Scalar = str | int | float | bool | None


class ColumnReference(BaseModel):
    """Filter value that points at another column instead of a literal."""

    kind: Literal["column"] = "column"
    table: str
    column: str

    @property
    def qualified(self) -> str:
        return f"{self.table}.{self.column}"


class LiteralValue(BaseModel):
    """Filter value that is always embedded as a literal."""

    kind: Literal["literal"] = "literal"
    value: Scalar = None


TaggedValue = Annotated[ColumnReference | LiteralValue, Field(discriminator="kind")]
FilterValue = TaggedValue | list[Scalar] | Scalar


# -----------------------------
# Conditions & Ordering
# -----------------------------


class Filter(BaseModel):
    """
    Represents a WHERE clause condition.

    Examples:
        stores.id = 5
        customers.name LIKE '%ana%'
        sales.sale_status_desc IN ('COMPLETED', 'CANCELLED')
    """

    column: str
    operator: FilterOperator = FilterOperator.EQ
    value: FilterValue = None
    logic: FilterLogic = FilterLogic.AND

    @field_validator("operator", mode="before")
    @classmethod
    def normalize_operator(cls, v: Any) -> Any:
        return _coerce_operator(v)

    @field_validator("logic", mode="before")
    @classmethod
    def normalize_logic(cls, v: Any) -> Any:
        return _upper_token(v) or FilterLogic.AND.value


class HavingCondition(BaseModel):
    """
    Represents a HAVING condition over an already-rendered aggregate.

    Example:
        {"aggregation": "SUM(sales.total)", "operator": ">", "value": 1000}
    """

    aggregation: str
    operator: FilterOperator = FilterOperator.EQ
    value: Scalar = None

    @field_validator("operator", mode="before")
    @classmethod
    def normalize_operator(cls, v: Any) -> Any:
        return _coerce_operator(v)


class OrderClause(BaseModel):
    """
    Represents an ORDER BY entry.

    Example:
        ORDER BY sales.created_at DESC
    """

    column: str | None = None
    direction: OrderDirection = OrderDirection.ASC

    @field_validator("direction", mode="before")
    @classmethod
    def normalize_direction(cls, v: Any) -> Any:
        return _upper_token(v) or OrderDirection.ASC.value


# -----------------------------
# Root Request
# -----------------------------


class ReportRequest(BaseModel):
    """
    Root object submitted by the report builder.

    Constructed fresh per HTTP call and consumed by the report compiler.
    """

    model_config = ConfigDict(populate_by_name=True)

    tables: list[TableRef | str] | None = Field(
        default=None, description="Tables in join order; the first seeds FROM"
    )
    join_type: JoinType = Field(
        default=JoinType.INNER,
        alias="joinType",
        description="Join type used when a table does not set its own",
    )
    columns: list[ColumnItem | str | None] | None = Field(
        default=None, description="Plain columns to select"
    )
    aggregation: list[Aggregation] | None = Field(
        default=None, description="Aggregated columns to select"
    )
    filters: list[Filter] | None = Field(
        default=None, description="WHERE conditions, always joined with AND"
    )
    having: list[HavingCondition] | str | None = Field(
        default=None, description="HAVING conditions or a pre-rendered clause"
    )
    order_by: list[OrderClause] | None = Field(
        default=None, alias="orderBy", description="Ordering over selected columns"
    )
    group_by: list[str] | str | None = Field(
        default=None, alias="groupBy", description="Explicit GROUP BY columns"
    )

    @field_validator("join_type", mode="before")
    @classmethod
    def normalize_join_type(cls, v: Any) -> Any:
        return _coerce_join_type(v) or JoinType.INNER.value


# -----------------------------
# Normalized Request
# -----------------------------


@dataclass(frozen=True)
class NormalizedReport:
    """
    Flat, immutable view of a ReportRequest.

    Every collection is a tuple; incomplete entries are already removed.
    ``group_by`` is None when the report has no GROUP BY at all.
    """

    tables: tuple[TableRef, ...]
    join_type: JoinType
    columns: tuple[str, ...]
    aggregations: tuple[Aggregation, ...]
    filters: tuple[Filter, ...]
    having: tuple[HavingCondition, ...] | str | None
    order_by: tuple[OrderClause, ...]
    group_by: tuple[str, ...] | None

    @property
    def table_names(self) -> tuple[str, ...]:
        return tuple(t.name for t in self.tables)
