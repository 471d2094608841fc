"""Report request models, value codec, clause builders and join resolution."""

from .join_resolver import JoinPlan, JoinResolutionError, JoinResolver, JoinStep, SkippedTable
from .models import (
    AggregateFunction,
    Aggregation,
    ColumnItem,
    ColumnReference,
    Filter,
    FilterLogic,
    FilterOperator,
    HavingCondition,
    JoinCondition,
    JoinType,
    LiteralValue,
    NormalizedReport,
    OrderClause,
    OrderDirection,
    ReportRequest,
    TableRef,
)

__all__ = [
    "AggregateFunction",
    "Aggregation",
    "ColumnItem",
    "ColumnReference",
    "Filter",
    "FilterLogic",
    "FilterOperator",
    "HavingCondition",
    "JoinCondition",
    "JoinPlan",
    "JoinResolutionError",
    "JoinResolver",
    "JoinStep",
    "JoinType",
    "LiteralValue",
    "NormalizedReport",
    "OrderClause",
    "OrderDirection",
    "ReportRequest",
    "SkippedTable",
    "TableRef",
]
