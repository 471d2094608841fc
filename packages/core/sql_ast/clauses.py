"""
Clause builders for ReportQL.

Each builder is a pure function from normalized report data to a frozen
clause object. Clause objects only become text in ``render()``, so the
join and filter logic never depends on string formatting.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from packages.core.sql_ast.codec import (
    DEFAULT_DATE_FORMAT,
    quote_value,
    render_filter_column,
    render_filter_value,
)
from packages.core.sql_ast.join_resolver import JoinPlan, JoinStep
from packages.core.sql_ast.models import (
    Aggregation,
    ColumnReference,
    Filter,
    FilterLogic,
    FilterOperator,
    HavingCondition,
    LiteralValue,
    OrderClause,
    OrderDirection,
)

SELECT_SEPARATOR = ",\n\t"


# -----------------------------
# Clause Objects
# -----------------------------


@dataclass(frozen=True)
class SelectItem:
    expression: str
    alias: str | None = None

    def render(self) -> str:
        if self.alias:
            return f"{self.expression} AS {self.alias}"
        return self.expression


@dataclass(frozen=True)
class SelectClause:
    """SELECT list; renders ``*`` when nothing was selected."""

    items: tuple[SelectItem, ...] = ()

    def render(self) -> str:
        if not self.items:
            return "*"
        return SELECT_SEPARATOR.join(item.render() for item in self.items)

    @property
    def aliases(self) -> tuple[str, ...]:
        return tuple(item.alias or item.expression for item in self.items)

    def __bool__(self) -> bool:
        # SELECT always renders, even as "*"
        return True


@dataclass(frozen=True)
class FromClause:
    """Base table followed by one JOIN line per step."""

    base_table: str
    joins: tuple[JoinStep, ...] = ()

    def render(self) -> str:
        return "\n".join([self.base_table, *(join.render() for join in self.joins)])

    def __bool__(self) -> bool:
        return bool(self.base_table)


@dataclass(frozen=True)
class Condition:
    left: str
    operator: str
    right: str

    def render(self) -> str:
        return f"{self.left} {self.operator} {self.right}"


@dataclass(frozen=True)
class WhereClause:
    """Conditions joined with AND."""

    conditions: tuple[Condition, ...] = ()

    def render(self) -> str:
        return " AND ".join(c.render() for c in self.conditions)

    def __bool__(self) -> bool:
        return bool(self.conditions)


@dataclass(frozen=True)
class GroupByClause:
    columns: tuple[str, ...] = ()

    def render(self) -> str:
        return ", ".join(self.columns)

    def __bool__(self) -> bool:
        return bool(self.columns)


@dataclass(frozen=True)
class HavingClause:
    """
    HAVING conditions, or a raw clause passed through untouched.

    ``raw`` wins over ``conditions`` when both are set.
    """

    conditions: tuple[Condition, ...] = ()
    raw: str | None = None

    def render(self) -> str:
        if self.raw is not None:
            return self.raw
        return " AND ".join(c.render() for c in self.conditions)

    def __bool__(self) -> bool:
        return bool(self.raw and self.raw.strip()) or bool(self.conditions)


@dataclass(frozen=True)
class OrderItem:
    column: str
    direction: OrderDirection = OrderDirection.ASC

    def render(self) -> str:
        return f"{self.column} {self.direction.value}"


@dataclass(frozen=True)
class OrderByClause:
    items: tuple[OrderItem, ...] = ()

    def render(self) -> str:
        return ", ".join(item.render() for item in self.items)

    def __bool__(self) -> bool:
        return bool(self.items)


# -----------------------------
# Builders
# -----------------------------


def column_alias(column: str) -> str:
    """Stable result key for a dotted column: ``sales.total`` -> ``sales_total``."""
    return column.replace(".", "_")


def build_select(
    columns: Sequence[str], aggregations: Sequence[Aggregation]
) -> SelectClause:
    """Aggregations first, then plain columns; dotted names get an alias."""
    items: list[SelectItem] = [
        SelectItem(expression=agg.expression, alias=agg.alias) for agg in aggregations
    ]
    for column in columns:
        alias = column_alias(column) if "." in column else None
        items.append(SelectItem(expression=column, alias=alias))
    return SelectClause(items=tuple(items))


def build_from(plan: JoinPlan) -> FromClause:
    return FromClause(base_table=plan.base_table, joins=plan.joins)


def build_where(
    filters: Sequence[Filter], date_format: str = DEFAULT_DATE_FORMAT
) -> WhereClause:
    """
    Build WHERE conditions, always joined with AND.

    The per-filter ``logic`` field is not honored; see
    ``ignored_filter_logic`` for the filters whose OR was dropped.
    """
    conditions: list[Condition] = []
    for filter_ in filters:
        value = filter_.value
        if filter_.operator == FilterOperator.IN:
            value = _as_value_list(value)

        conditions.append(
            Condition(
                left=render_filter_column(filter_.column, filter_.operator, date_format),
                operator=filter_.operator.value,
                right=render_filter_value(filter_.operator, value),
            )
        )
    return WhereClause(conditions=tuple(conditions))


def ignored_filter_logic(filters: Sequence[Filter]) -> list[Filter]:
    """Filters after the first that asked for OR, which WHERE does not apply."""
    return [f for f in filters[1:] if f.logic == FilterLogic.OR]


def resolve_group_by(
    explicit: Sequence[str] | None,
    columns: Sequence[str],
    aggregations: Sequence[Aggregation],
) -> tuple[str, ...] | None:
    """
    Explicit GROUP BY wins; otherwise group by every plain column
    when the report aggregates anything.
    """
    if explicit is not None:
        return tuple(explicit)
    if aggregations and columns:
        return tuple(columns)
    return None


def build_group_by(group_by: Sequence[str] | None) -> GroupByClause:
    return GroupByClause(columns=tuple(group_by or ()))


def build_having(having: Sequence[HavingCondition] | str | None) -> HavingClause:
    """Pass a pre-rendered string through; join condition lists with AND."""
    if having is None:
        return HavingClause()
    if isinstance(having, str):
        return HavingClause(raw=having)
    return HavingClause(
        conditions=tuple(
            Condition(
                left=h.aggregation,
                operator=h.operator.value,
                right=quote_value(h.value),
            )
            for h in having
        )
    )


def build_order_by(
    order_by: Sequence[OrderClause], columns: Sequence[str]
) -> tuple[OrderByClause, list[OrderClause]]:
    """
    Keep only ORDER BY entries whose column is among the selected columns.

    Returns:
        The clause, plus the entries that were dropped.
    """
    selected = set(columns)
    items: list[OrderItem] = []
    dropped: list[OrderClause] = []
    for clause in order_by:
        if clause.column and clause.column in selected:
            items.append(OrderItem(column=clause.column, direction=clause.direction))
        else:
            dropped.append(clause)
    return OrderByClause(items=tuple(items)), dropped


def _as_value_list(value):
    if isinstance(value, ColumnReference):
        return value
    if isinstance(value, LiteralValue):
        value = value.value
    if isinstance(value, (list, tuple)):
        return value
    return [value]
