"""
Tests for the clause builders.

Each builder is checked on its own, over already-normalized input.
"""

from packages.core.sql_ast.clauses import (
    FromClause,
    HavingClause,
    SelectClause,
    build_from,
    build_group_by,
    build_having,
    build_order_by,
    build_select,
    build_where,
    column_alias,
    ignored_filter_logic,
    resolve_group_by,
)
from packages.core.sql_ast.join_resolver import JoinPlan, JoinStep
from packages.core.sql_ast.models import (
    Aggregation,
    Filter,
    HavingCondition,
    OrderClause,
)


# -----------------------------
# SELECT Tests
# -----------------------------


class TestSelect:
    """Tests for build_select."""

    def test_empty_selection_is_star(self) -> None:
        clause = build_select([], [])

        assert clause.render() == "*"
        assert bool(clause)

    def test_aggregations_come_first(self) -> None:
        clause = build_select(
            ["sales.id"], [Aggregation(func="SUM", column="sales.total")]
        )

        assert clause.render() == "SUM(sales.total) AS SUM_sales_total,\n\tsales.id AS sales_id"

    def test_bare_column_is_not_aliased(self) -> None:
        clause = build_select(["id", "stores.name"], [])

        assert clause.render() == "id,\n\tstores.name AS stores_name"
        assert clause.aliases == ("id", "stores_name")

    def test_column_alias(self) -> None:
        assert column_alias("sales.total_amount") == "sales_total_amount"
        assert column_alias("total") == "total"


# -----------------------------
# FROM Tests
# -----------------------------


class TestFrom:
    """Tests for build_from."""

    def test_base_table_only(self) -> None:
        clause = build_from(JoinPlan(base_table="sales", joins=()))

        assert clause.render() == "sales"

    def test_one_line_per_join(self) -> None:
        plan = JoinPlan(
            base_table="sales",
            joins=(
                JoinStep(table="stores", left="sales.store_id", right="stores.id"),
                JoinStep(table="brands", left="stores.brand_id", right="brands.id"),
            ),
        )

        assert build_from(plan).render() == (
            "sales\n"
            "INNER JOIN stores ON sales.store_id = stores.id\n"
            "INNER JOIN brands ON stores.brand_id = brands.id"
        )

    def test_empty_base_table_is_falsy(self) -> None:
        assert not FromClause(base_table="")


# -----------------------------
# WHERE Tests
# -----------------------------


class TestWhere:
    """Tests for build_where."""

    def test_no_filters(self) -> None:
        clause = build_where([])

        assert not clause
        assert clause.render() == ""

    def test_conditions_joined_with_and(self) -> None:
        clause = build_where(
            [
                Filter(column="stores.id", operator="=", value=5),
                Filter(column="customers.name", operator="LIKE", value="ana"),
            ]
        )

        assert clause.render() == "stores.id = 5 AND customers.name LIKE '%ana%'"

    def test_or_logic_is_still_and(self) -> None:
        filters = [
            Filter(column="stores.id", value=1),
            Filter(column="stores.id", value=2, logic="OR"),
        ]

        assert build_where(filters).render() == "stores.id = 1 AND stores.id = 2"
        assert ignored_filter_logic(filters) == [filters[1]]

    def test_or_on_first_filter_is_not_reported(self) -> None:
        filters = [Filter(column="stores.id", value=1, logic="OR")]

        assert ignored_filter_logic(filters) == []

    def test_in_list(self) -> None:
        clause = build_where(
            [
                Filter(
                    column="sales.sale_status_desc",
                    operator="IN",
                    value=["COMPLETED", "CANCELLED"],
                )
            ]
        )

        assert clause.render() == "sales.sale_status_desc IN ('COMPLETED', 'CANCELLED')"

    def test_in_scalar_is_wrapped(self) -> None:
        clause = build_where([Filter(column="stores.id", operator="IN", value=3)])

        assert clause.render() == "stores.id IN (3)"

    def test_date_column_like(self) -> None:
        clause = build_where(
            [Filter(column="sales.created_at", operator="LIKE", value="2024-01")],
            date_format="YYYY-MM-DD",
        )

        assert clause.render() == "TO_CHAR(sales.created_at, 'YYYY-MM-DD') LIKE '%2024-01%'"

    def test_column_comparison(self) -> None:
        clause = build_where([Filter(column="sales.store_id", value="stores.id")])

        assert clause.render() == "sales.store_id = stores.id"

    def test_tagged_column_comparison(self) -> None:
        filter_ = Filter.model_validate(
            {
                "column": "sales.store_id",
                "value": {"kind": "column", "table": "stores", "column": "id"},
            }
        )

        assert build_where([filter_]).render() == "sales.store_id = stores.id"


# -----------------------------
# GROUP BY Tests
# -----------------------------


class TestGroupBy:
    """Tests for resolve_group_by and build_group_by."""

    def test_implicit_group_by(self) -> None:
        aggs = [Aggregation(func="SUM", column="sales.total")]

        assert resolve_group_by(None, ["sales.id"], aggs) == ("sales.id",)

    def test_no_aggregation_no_group_by(self) -> None:
        assert resolve_group_by(None, ["sales.id"], []) is None

    def test_aggregation_only_no_group_by(self) -> None:
        aggs = [Aggregation(func="COUNT", column="sales.id")]

        assert resolve_group_by(None, [], aggs) is None

    def test_explicit_wins(self) -> None:
        aggs = [Aggregation(func="SUM", column="sales.total")]

        assert resolve_group_by(["stores.name"], ["sales.id"], aggs) == ("stores.name",)

    def test_render(self) -> None:
        clause = build_group_by(("sales.id", "stores.name"))

        assert clause.render() == "sales.id, stores.name"
        assert not build_group_by(None)


# -----------------------------
# HAVING Tests
# -----------------------------


class TestHaving:
    """Tests for build_having."""

    def test_condition_list(self) -> None:
        clause = build_having(
            [
                HavingCondition(aggregation="SUM(sales.total)", operator=">", value=1000),
                HavingCondition(aggregation="COUNT(sales.id)", operator=">=", value="10"),
            ]
        )

        assert clause.render() == "SUM(sales.total) > 1000 AND COUNT(sales.id) >= 10"

    def test_string_value_is_quoted(self) -> None:
        clause = build_having(
            [HavingCondition(aggregation="MAX(stores.name)", operator="=", value="O'Hara")]
        )

        assert clause.render() == "MAX(stores.name) = 'O''Hara'"

    def test_raw_passthrough(self) -> None:
        clause = build_having("SUM(sales.total) > 10")

        assert clause.render() == "SUM(sales.total) > 10"

    def test_blank_raw_is_empty(self) -> None:
        assert not build_having("   ")
        assert not build_having(None)
        assert not HavingClause()


# -----------------------------
# ORDER BY Tests
# -----------------------------


class TestOrderBy:
    """Tests for build_order_by."""

    def test_unselected_column_is_dropped(self) -> None:
        order = [OrderClause(column="sales.id", direction="DESC")]

        clause, dropped = build_order_by(order, ["sales.total"])

        assert clause.render() == ""
        assert not clause
        assert dropped == order

    def test_selected_column_is_kept(self) -> None:
        order = [
            OrderClause(column="sales.total", direction="desc"),
            OrderClause(column="stores.name"),
        ]

        clause, dropped = build_order_by(order, ["sales.total", "stores.name"])

        assert clause.render() == "sales.total DESC, stores.name ASC"
        assert dropped == []

    def test_empty_column_is_dropped(self) -> None:
        clause, dropped = build_order_by([OrderClause(column=None)], ["sales.total"])

        assert not clause
        assert len(dropped) == 1


def test_select_clause_is_always_truthy() -> None:
    assert bool(SelectClause())
