"""
Schema Relation Graph for ReportQL.

This module defines:
- Which foreign keys connect the reportable tables
- Which side of each relation owns the key column
- How the graph is loaded once at startup (static, file, or live catalog)

The graph is the ONLY source the join resolver consults.
"""

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


# -----------------------------
# Errors
# -----------------------------


class RelationGraphError(Exception):
    """Raised when a relation graph cannot be built or loaded."""

    pass


class GraphSource(str, Enum):
    """Where the relation graph is loaded from."""

    STATIC = "static"
    FILE = "file"
    CATALOG = "catalog"


# -----------------------------
# Edge Metadata
# -----------------------------


@dataclass(frozen=True)
class RelationEdge:
    """
    One foreign-key fact between two tables.

    ``owner_table.fk_column`` references ``referenced_table.referenced_key``.
    """

    owner_table: str
    referenced_table: str
    fk_column: str
    referenced_key: str = "id"

    def owner_side(self) -> str:
        """Qualified FK column on the owning table."""
        return f"{self.owner_table}.{self.fk_column}"

    def referenced_side(self) -> str:
        """Qualified key column on the referenced table."""
        return f"{self.referenced_table}.{self.referenced_key}"

    def other(self, table: str) -> str:
        """Return the table on the opposite end of the edge."""
        if table == self.owner_table:
            return self.referenced_table
        return self.owner_table


# -----------------------------
# Relation Graph
# -----------------------------


class RelationGraph:
    """
    Immutable table-to-table graph of foreign-key edges.

    Lookups are symmetric: ``edge("sales", "stores")`` and
    ``edge("stores", "sales")`` return the same record, and the record
    itself says which table holds the key.
    """

    def __init__(self, edges: Iterable[RelationEdge]):
        self._edges: tuple[RelationEdge, ...] = tuple(edges)

        self._adjacency: dict[str, dict[str, RelationEdge]] = {}
        for edge in self._edges:
            owner = self._adjacency.setdefault(edge.owner_table, {})
            referenced = self._adjacency.setdefault(edge.referenced_table, {})
            # First declaration wins when two FKs link the same pair
            owner.setdefault(edge.referenced_table, edge)
            referenced.setdefault(edge.owner_table, edge)

    # -------------------------
    # Lookup Methods
    # -------------------------

    def edge(self, table_a: str, table_b: str) -> RelationEdge | None:
        """Get the edge between two tables, in either direction."""
        return self._adjacency.get(table_a, {}).get(table_b)

    def neighbors(self, table: str) -> list[str]:
        """List the tables directly related to ``table``."""
        return list(self._adjacency.get(table, {}).keys())

    def has_table(self, table: str) -> bool:
        """Check if the table takes part in any relation."""
        return table in self._adjacency

    def list_tables(self) -> list[str]:
        """List every table that appears in the graph."""
        return list(self._adjacency.keys())

    def list_edges(self) -> list[RelationEdge]:
        """List edges in declaration order."""
        return list(self._edges)

    def related_pairs(self) -> list[dict[str, str]]:
        """Raw edges in the ``/all-related-tables`` shape."""
        return [
            {"table_name": e.owner_table, "related_table": e.referenced_table}
            for e in self._edges
        ]

    def __len__(self) -> int:
        return len(self._edges)

    # -------------------------
    # Constructors
    # -------------------------

    @classmethod
    def from_catalog(cls, foreign_keys: Iterable[Mapping[str, Any]]) -> "RelationGraph":
        """
        Build a graph from catalog foreign-key rows.

        Each row needs ``table_name``, ``column_name``,
        ``foreign_table_name`` and optionally ``foreign_column_name``.
        """
        edges: list[RelationEdge] = []
        for row in foreign_keys:
            try:
                edges.append(
                    RelationEdge(
                        owner_table=row["table_name"],
                        referenced_table=row["foreign_table_name"],
                        fk_column=row["column_name"],
                        referenced_key=row.get("foreign_column_name") or "id",
                    )
                )
            except KeyError as e:
                raise RelationGraphError(
                    f"Catalog foreign-key row is missing {e.args[0]!r}: {dict(row)}"
                ) from e
        return cls(edges)

    @classmethod
    def from_file(cls, path: str | Path) -> "RelationGraph":
        """
        Build a graph from a versioned JSON artifact.

        Expected shape::

            {"version": 1, "edges": [{"owner_table": "sales",
              "referenced_table": "stores", "fk_column": "store_id"}]}
        """
        try:
            document = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise RelationGraphError(f"Cannot read relation graph file '{path}': {e}") from e

        if not isinstance(document, dict) or not isinstance(document.get("edges"), list):
            raise RelationGraphError(
                f"Relation graph file '{path}' must contain an 'edges' list"
            )

        edges: list[RelationEdge] = []
        for raw in document["edges"]:
            try:
                edges.append(RelationEdge(**raw))
            except TypeError as e:
                raise RelationGraphError(f"Invalid edge {raw!r} in '{path}': {e}") from e

        logger.info(
            "Loaded %d relation edges from %s (version %s)",
            len(edges),
            path,
            document.get("version", "unversioned"),
        )
        return cls(edges)


# -----------------------------
# Default Graph Definition
# -----------------------------


def _edges_to(referenced_table: str, fk_column: str, owners: tuple[str, ...]) -> list[RelationEdge]:
    return [
        RelationEdge(owner_table=owner, referenced_table=referenced_table, fk_column=fk_column)
        for owner in owners
    ]


_DEFAULT_EDGES: list[RelationEdge] = [
    *_edges_to(
        "brands",
        "brand_id",
        (
            "sub_brands",
            "stores",
            "channels",
            "categories",
            "products",
            "option_groups",
            "items",
            "payment_types",
            "coupons",
        ),
    ),
    *_edges_to(
        "sub_brands",
        "sub_brand_id",
        ("stores", "categories", "products", "option_groups", "items", "customers", "sales"),
    ),
    *_edges_to("stores", "store_id", ("customers", "sales")),
    *_edges_to("channels", "channel_id", ("sales",)),
    *_edges_to("categories", "category_id", ("products", "option_groups", "items")),
    *_edges_to("products", "product_id", ("product_sales",)),
    *_edges_to("option_groups", "option_group_id", ("item_product_sales", "item_item_product_sales")),
    *_edges_to("items", "item_id", ("item_product_sales", "item_item_product_sales")),
    *_edges_to("customers", "customer_id", ("sales",)),
    *_edges_to(
        "sales",
        "sale_id",
        ("product_sales", "delivery_sales", "delivery_addresses", "payments", "coupon_sales"),
    ),
    *_edges_to("product_sales", "product_sale_id", ("item_product_sales",)),
    *_edges_to("item_product_sales", "item_product_sale_id", ("item_item_product_sales",)),
    *_edges_to("delivery_sales", "delivery_sale_id", ("delivery_addresses",)),
    *_edges_to("payment_types", "payment_type_id", ("payments",)),
    *_edges_to("coupons", "coupon_id", ("coupon_sales",)),
]


def get_default_graph() -> RelationGraph:
    """Get the relation graph for the production reporting schema."""
    return RelationGraph(_DEFAULT_EDGES)


def load_relation_graph(
    source: GraphSource | str = GraphSource.STATIC,
    path: str | Path | None = None,
    catalog: Any = None,
) -> RelationGraph:
    """
    Load the relation graph once, from the configured source.

    Args:
        source: ``static``, ``file`` or ``catalog``.
        path: JSON artifact path, required for ``file``.
        catalog: Object exposing ``get_foreign_keys()``, required for ``catalog``.

    Raises:
        RelationGraphError: If the source is unknown or its input is missing.
    """
    try:
        source = GraphSource(source)
    except ValueError as e:
        raise RelationGraphError(f"Unknown relation graph source '{source}'") from e

    match source:
        case GraphSource.STATIC:
            graph = get_default_graph()
        case GraphSource.FILE:
            if path is None:
                raise RelationGraphError("relation graph source 'file' requires a path")
            graph = RelationGraph.from_file(path)
        case GraphSource.CATALOG:
            if catalog is None:
                raise RelationGraphError("relation graph source 'catalog' requires a catalog reader")
            graph = RelationGraph.from_catalog(catalog.get_foreign_keys())

    logger.info("Relation graph ready: source=%s edges=%d", source.value, len(graph))
    return graph
