"""
Tests for the Schema Relation Graph.

Tests edge lookup, graph construction and startup loading.
"""

import json

import pytest

from packages.core.schema_registry.registry import (
    GraphSource,
    RelationEdge,
    RelationGraph,
    RelationGraphError,
    get_default_graph,
    load_relation_graph,
)


# -----------------------------
# Fixtures
# -----------------------------


@pytest.fixture
def graph() -> RelationGraph:
    """Create the default production graph."""
    return get_default_graph()


class FakeCatalog:
    """Stands in for CatalogReader."""

    def __init__(self, rows):
        self.rows = rows
        self.calls = 0

    def get_foreign_keys(self):
        self.calls += 1
        return self.rows


# -----------------------------
# Edge Lookup Tests
# -----------------------------


class TestEdgeLookup:
    """Tests for edge(a, b)."""

    def test_sales_owns_store_id(self, graph: RelationGraph) -> None:
        """sales.store_id references stores.id."""
        edge = graph.edge("sales", "stores")

        assert edge is not None
        assert edge.owner_table == "sales"
        assert edge.referenced_table == "stores"
        assert edge.fk_column == "store_id"
        assert edge.referenced_key == "id"

    def test_lookup_is_symmetric(self, graph: RelationGraph) -> None:
        """Both argument orders return the same record."""
        assert graph.edge("stores", "sales") == graph.edge("sales", "stores")

    def test_owner_varies_per_edge(self, graph: RelationGraph) -> None:
        """Sometimes the current table owns the key, sometimes the neighbor."""
        assert graph.edge("sales", "payments").owner_table == "payments"
        assert graph.edge("sales", "channels").owner_table == "sales"

    def test_no_direct_edge(self, graph: RelationGraph) -> None:
        """Tables that are only related through others have no edge."""
        assert graph.edge("brands", "sales") is None
        assert graph.edge("coupons", "stores") is None

    def test_unknown_table(self, graph: RelationGraph) -> None:
        assert graph.edge("nope", "sales") is None
        assert graph.neighbors("nope") == []

    def test_edge_sides(self) -> None:
        edge = RelationEdge("coupon_sales", "coupons", "coupon_id")

        assert edge.owner_side() == "coupon_sales.coupon_id"
        assert edge.referenced_side() == "coupons.id"
        assert edge.other("coupons") == "coupon_sales"
        assert edge.other("coupon_sales") == "coupons"


class TestGraphContents:
    """Tests for the default schema graph."""

    def test_neighbors_of_stores(self, graph: RelationGraph) -> None:
        assert set(graph.neighbors("stores")) == {
            "brands",
            "sub_brands",
            "customers",
            "sales",
        }

    def test_all_schema_tables_present(self, graph: RelationGraph) -> None:
        assert len(graph.list_tables()) == 19
        assert graph.has_table("item_item_product_sales")

    def test_related_pairs_shape(self, graph: RelationGraph) -> None:
        pairs = graph.related_pairs()

        assert {"table_name": "sales", "related_table": "stores"} in pairs
        assert len(pairs) == len(graph)

    def test_first_declaration_wins(self) -> None:
        """Two FKs between the same pair keep the first one."""
        graph = RelationGraph(
            [
                RelationEdge("sales", "customers", "customer_id"),
                RelationEdge("sales", "customers", "referrer_id"),
            ]
        )

        assert graph.edge("sales", "customers").fk_column == "customer_id"


# -----------------------------
# Construction Tests
# -----------------------------


class TestFromCatalog:
    """Tests for building a graph from catalog rows."""

    def test_builds_edges(self) -> None:
        graph = RelationGraph.from_catalog(
            [
                {
                    "table_name": "sales",
                    "column_name": "store_id",
                    "foreign_table_name": "stores",
                    "foreign_column_name": "id",
                },
                {
                    "table_name": "orders",
                    "column_name": "customer_code",
                    "foreign_table_name": "customers",
                    "foreign_column_name": "code",
                },
            ]
        )

        assert graph.edge("stores", "sales").owner_side() == "sales.store_id"
        assert graph.edge("orders", "customers").referenced_side() == "customers.code"

    def test_missing_foreign_column_defaults_to_id(self) -> None:
        graph = RelationGraph.from_catalog(
            [{"table_name": "a", "column_name": "b_id", "foreign_table_name": "b"}]
        )

        assert graph.edge("a", "b").referenced_key == "id"

    def test_incomplete_row_raises(self) -> None:
        with pytest.raises(RelationGraphError, match="foreign_table_name"):
            RelationGraph.from_catalog([{"table_name": "a", "column_name": "b_id"}])


class TestFromFile:
    """Tests for the versioned JSON artifact."""

    def test_loads_edges(self, tmp_path) -> None:
        path = tmp_path / "graph.json"
        path.write_text(
            json.dumps(
                {
                    "version": 3,
                    "edges": [
                        {
                            "owner_table": "sales",
                            "referenced_table": "stores",
                            "fk_column": "store_id",
                        }
                    ],
                }
            )
        )

        graph = RelationGraph.from_file(path)

        assert len(graph) == 1
        assert graph.edge("sales", "stores").fk_column == "store_id"

    def test_missing_edges_list(self, tmp_path) -> None:
        path = tmp_path / "graph.json"
        path.write_text(json.dumps({"version": 1}))

        with pytest.raises(RelationGraphError, match="edges"):
            RelationGraph.from_file(path)

    def test_invalid_edge(self, tmp_path) -> None:
        path = tmp_path / "graph.json"
        path.write_text(json.dumps({"edges": [{"owner_table": "sales"}]}))

        with pytest.raises(RelationGraphError, match="Invalid edge"):
            RelationGraph.from_file(path)

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(RelationGraphError, match="Cannot read"):
            RelationGraph.from_file(tmp_path / "absent.json")


class TestLoadRelationGraph:
    """Tests for startup loading."""

    def test_static(self) -> None:
        graph = load_relation_graph(GraphSource.STATIC)

        assert len(graph) == len(get_default_graph())

    def test_catalog(self) -> None:
        catalog = FakeCatalog(
            [{"table_name": "x", "column_name": "y_id", "foreign_table_name": "y"}]
        )

        graph = load_relation_graph("catalog", catalog=catalog)

        assert catalog.calls == 1
        assert graph.edge("x", "y") is not None

    def test_catalog_requires_reader(self) -> None:
        with pytest.raises(RelationGraphError, match="catalog reader"):
            load_relation_graph("catalog")

    def test_file_requires_path(self) -> None:
        with pytest.raises(RelationGraphError, match="requires a path"):
            load_relation_graph("file")

    def test_unknown_source(self) -> None:
        with pytest.raises(RelationGraphError, match="Unknown"):
            load_relation_graph("ldap")
