"""
Report Compiler for ReportQL.

Transforms a ReportRequest into clause objects and, on demand, into one
SQL statement:

1. Validate the request (fail fast)
2. Normalize it into a NormalizedReport
3. Resolve the JOIN chain from the relation graph
4. Build SELECT / FROM / WHERE / GROUP BY / HAVING / ORDER BY
5. Render the parts, or the full preview statement

The compiler never executes SQL.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from packages.core.safety.validator import (
    ReportCompileError,
    ReportValidationError,
    ReportValidator,
    split_group_by,
)
from packages.core.schema_registry.registry import RelationGraph, get_default_graph
from packages.core.sql_ast.clauses import (
    FromClause,
    GroupByClause,
    HavingClause,
    OrderByClause,
    SelectClause,
    WhereClause,
    build_from,
    build_group_by,
    build_having,
    build_order_by,
    build_select,
    build_where,
    ignored_filter_logic,
    resolve_group_by,
)
from packages.core.sql_ast.codec import DEFAULT_DATE_FORMAT
from packages.core.sql_ast.join_resolver import JoinPlan, JoinResolver
from packages.core.sql_ast.models import (
    ColumnItem,
    NormalizedReport,
    ReportRequest,
    TableRef,
)

logger = logging.getLogger(__name__)

__all__ = [
    "CompiledReport",
    "DroppedArtifact",
    "DroppedKind",
    "ReportCompileError",
    "ReportCompiler",
    "ReportQueryParts",
    "ReportValidationError",
    "compile_report",
    "preview_report",
]


# -----------------------------
# Results
# -----------------------------


class DroppedKind(str, Enum):
    """What kind of request item was left out of the statement."""

    SKIPPED_TABLE = "skipped_table"
    DUPLICATE_TABLE = "duplicate_table"
    IGNORED_ORDER_BY = "ignored_order_by"
    IGNORED_FILTER_LOGIC = "ignored_filter_logic"


@dataclass(frozen=True)
class DroppedArtifact:
    """A request item the compiler accepted but did not apply."""

    kind: DroppedKind
    subject: str
    reason: str

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "subject": self.subject, "reason": self.reason}


@dataclass(frozen=True)
class ReportQueryParts:
    """
    Rendered clause bodies, without their keywords.

    This is exactly what the execution layer consumes.
    """

    select_part: str
    from_part: str
    where_part: str = ""
    group_by_part: str = ""
    having_part: str = ""
    order_by_part: str = ""

    def to_sql(self) -> str:
        """Assemble the parts into one statement with a trailing semicolon."""
        query_parts = [
            f"SELECT {self.select_part}",
            f"FROM {self.from_part}",
            self.where_part and f"WHERE {self.where_part}",
            self.group_by_part and f"GROUP BY {self.group_by_part}",
            self.having_part and f"HAVING {self.having_part}",
            self.order_by_part and f"ORDER BY {self.order_by_part}",
        ]
        return "\n".join(part for part in query_parts if part) + ";"


@dataclass(frozen=True)
class CompiledReport:
    """Structured compile result: one clause object per SQL clause."""

    select: SelectClause
    from_: FromClause
    where: WhereClause
    group_by: GroupByClause
    having: HavingClause
    order_by: OrderByClause
    join_plan: JoinPlan
    dropped: tuple[DroppedArtifact, ...] = field(default_factory=tuple)

    def parts(self) -> ReportQueryParts:
        return ReportQueryParts(
            select_part=self.select.render(),
            from_part=self.from_.render(),
            where_part=self.where.render() if self.where else "",
            group_by_part=self.group_by.render() if self.group_by else "",
            having_part=self.having.render() if self.having else "",
            order_by_part=self.order_by.render() if self.order_by else "",
        )

    def to_sql(self) -> str:
        return self.parts().to_sql()

    def dropped_of(self, kind: DroppedKind) -> list[DroppedArtifact]:
        return [d for d in self.dropped if d.kind == kind]


# -----------------------------
# Compiler
# -----------------------------


class ReportCompiler:
    """
    Compiles ReportRequest objects into SQL clauses.

    Stateless apart from the relation graph it is given; safe to share
    between requests.
    """

    def __init__(
        self,
        graph: RelationGraph | None = None,
        validator: ReportValidator | None = None,
        date_format: str = DEFAULT_DATE_FORMAT,
    ):
        """
        Initialize the compiler.

        Args:
            graph: Relation graph for join inference.
                   Uses the default graph if not provided.
            validator: Request validator. A default one is created if not provided.
            date_format: TO_CHAR format used when LIKE targets a date-like column.
        """
        self._graph = graph if graph is not None else get_default_graph()
        self._validator = validator or ReportValidator()
        self._resolver = JoinResolver(graph=self._graph)
        self._date_format = date_format

    @property
    def graph(self) -> RelationGraph:
        return self._graph

    def compile(self, request: ReportRequest) -> CompiledReport:
        """
        Compile a request into clause objects.

        Args:
            request: The report request to compile.

        Returns:
            CompiledReport with every clause and the dropped artifacts.

        Raises:
            ReportValidationError: If the request is invalid.
        """
        self._validator.validate(request)
        report = self.normalize(request)

        join_plan = self._resolver.resolve(report.tables, report.join_type)
        order_by, dropped_order = build_order_by(report.order_by, report.columns)

        compiled = CompiledReport(
            select=build_select(report.columns, report.aggregations),
            from_=build_from(join_plan),
            where=build_where(report.filters, self._date_format),
            group_by=build_group_by(report.group_by),
            having=build_having(report.having),
            order_by=order_by,
            join_plan=join_plan,
            dropped=self._collect_dropped(report, join_plan, dropped_order),
        )

        for artifact in compiled.dropped:
            logger.warning(
                "Report item dropped: %s %s (%s)",
                artifact.kind.value,
                artifact.subject,
                artifact.reason,
            )
        logger.debug("Compiled report query:\n%s", compiled.to_sql())
        return compiled

    def preview(self, request: ReportRequest) -> str:
        """Compile a request into the statement text shown to the user."""
        return self.compile(request).to_sql()

    # -------------------------
    # Normalization
    # -------------------------

    def normalize(self, request: ReportRequest) -> NormalizedReport:
        """
        Flatten a request into tuples and derive the implicit GROUP BY.

        Raises:
            ReportValidationError: If no table was requested.
        """
        if not request.tables:
            raise ReportValidationError(
                "At least one table must be provided in 'tables'"
            )

        tables = tuple(
            TableRef(name=t) if isinstance(t, str) else t for t in request.tables
        )
        columns = tuple(
            name
            for name in (
                c.column if isinstance(c, ColumnItem) else c
                for c in request.columns or []
            )
            if name
        )
        aggregations = tuple(
            a for a in request.aggregation or [] if a.func is not None and a.column
        )

        having = request.having
        if isinstance(having, list):
            having = tuple(having)

        explicit_group_by = (
            None if request.group_by is None else split_group_by(request.group_by)
        )
        if isinstance(request.group_by, str) and not explicit_group_by:
            # A blank string means "not set"; an empty list means "no GROUP BY"
            explicit_group_by = None

        return NormalizedReport(
            tables=tables,
            join_type=request.join_type,
            columns=columns,
            aggregations=aggregations,
            filters=tuple(request.filters or []),
            having=having,
            order_by=tuple(request.order_by or []),
            group_by=resolve_group_by(explicit_group_by, columns, aggregations),
        )

    # -------------------------
    # Diagnostics
    # -------------------------

    def _collect_dropped(
        self,
        report: NormalizedReport,
        join_plan: JoinPlan,
        dropped_order,
    ) -> tuple[DroppedArtifact, ...]:
        dropped: list[DroppedArtifact] = []

        for skipped in join_plan.skipped:
            kind = (
                DroppedKind.DUPLICATE_TABLE
                if skipped.duplicate
                else DroppedKind.SKIPPED_TABLE
            )
            dropped.append(DroppedArtifact(kind, skipped.table, skipped.reason))

        for clause in dropped_order:
            dropped.append(
                DroppedArtifact(
                    DroppedKind.IGNORED_ORDER_BY,
                    clause.column or "",
                    "column is not among the selected columns",
                )
            )

        for filter_ in ignored_filter_logic(report.filters):
            dropped.append(
                DroppedArtifact(
                    DroppedKind.IGNORED_FILTER_LOGIC,
                    filter_.column,
                    "filters are always combined with AND",
                )
            )

        return tuple(dropped)


# -----------------------------
# Module-level helpers
# -----------------------------


def compile_report(
    request: ReportRequest, graph: RelationGraph | None = None
) -> CompiledReport:
    """Compile a request with a one-off compiler."""
    return ReportCompiler(graph=graph).compile(request)


def preview_report(request: ReportRequest, graph: RelationGraph | None = None) -> str:
    """Compile a request straight to its preview statement."""
    return ReportCompiler(graph=graph).preview(request)
