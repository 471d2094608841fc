"""
Join Resolver for ReportQL.

Turns the ordered table list of a report into a base table plus
JOIN steps, using the schema relation graph.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from packages.core.schema_registry.registry import (
    RelationGraph,
    get_default_graph,
)
from packages.core.sql_ast.models import JoinType, TableRef

logger = logging.getLogger(__name__)


# -----------------------------
# Data structures
# -----------------------------


@dataclass(frozen=True)
class JoinStep:
    """Represents a single JOIN line."""

    table: str
    left: str
    right: str
    join_type: JoinType = JoinType.INNER
    explicit: bool = False

    def render(self) -> str:
        return f"{self.join_type.sql} {self.table} ON {self.left} = {self.right}"


@dataclass(frozen=True)
class SkippedTable:
    """A requested table that could not be joined."""

    table: str
    reason: str
    duplicate: bool = False


@dataclass(frozen=True)
class JoinPlan:
    """
    Complete join plan for a report.

    Contains the base table, the ordered joins, and every requested
    table that was left out of FROM.
    """

    base_table: str
    joins: tuple[JoinStep, ...]
    skipped: tuple[SkippedTable, ...] = ()

    @property
    def included_tables(self) -> tuple[str, ...]:
        return (self.base_table, *(j.table for j in self.joins))


# -----------------------------
# Errors
# -----------------------------


class JoinResolutionError(Exception):
    """Raised when a join plan cannot be started at all."""

    pass


# -----------------------------
# Resolver
# -----------------------------


class JoinResolver:
    """
    Resolves the JOIN chain for an ordered list of tables.

    Each table after the first is connected to the first already-included
    table that shares an edge with it. Tables with no edge are skipped,
    not rejected.
    """

    def __init__(self, graph: RelationGraph | None = None):
        """
        Initialize the resolver.

        Args:
            graph: Relation graph to use for lookups.
                   Uses the default graph if not provided.
        """
        self._graph = graph if graph is not None else get_default_graph()

    def resolve(
        self,
        tables: Sequence[TableRef],
        default_join_type: JoinType = JoinType.INNER,
    ) -> JoinPlan:
        """
        Build the join plan for the requested tables.

        Args:
            tables: Requested tables, in request order.
            default_join_type: Join type for tables that do not set one.

        Returns:
            JoinPlan with base table, joins and skipped tables.

        Raises:
            JoinResolutionError: If no table was requested.
        """
        if not tables:
            raise JoinResolutionError("At least one table is required to build FROM")

        base_table = tables[0].name
        included: list[str] = [base_table]
        joins: list[JoinStep] = []
        skipped: list[SkippedTable] = []

        for table in tables[1:]:
            join_type = table.join_type or default_join_type

            if table.on is not None and table.on.is_complete:
                joins.append(
                    JoinStep(
                        table=table.name,
                        left=table.on.left,
                        right=table.on.right,
                        join_type=join_type,
                        explicit=True,
                    )
                )
                if table.name not in included:
                    included.append(table.name)
                continue

            if table.name in included:
                skipped.append(SkippedTable(table.name, "already included", duplicate=True))
                logger.warning("Table %s requested more than once, JOIN ignored", table.name)
                continue

            step = self._find_join(included, table.name, join_type)
            if step is None:
                skipped.append(
                    SkippedTable(
                        table.name,
                        f"no relation to any of: {', '.join(included)}",
                    )
                )
                logger.warning("No relation found for %s, JOIN ignored", table.name)
                continue

            joins.append(step)
            included.append(table.name)

        return JoinPlan(base_table=base_table, joins=tuple(joins), skipped=tuple(skipped))

    # -------------------------
    # Helpers
    # -------------------------

    def _find_join(
        self, included: Sequence[str], target_table: str, join_type: JoinType
    ) -> JoinStep | None:
        """
        Find the first included table with a direct edge to the target.

        Insertion order decides ties; no shortest-path search is done.
        """
        for candidate in included:
            edge = self._graph.edge(candidate, target_table)
            if edge is None:
                continue

            return JoinStep(
                table=target_table,
                left=edge.owner_side(),
                right=edge.referenced_side(),
                join_type=join_type,
            )

        return None
