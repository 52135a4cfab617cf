# Rev 1.0.0

from __future__ import annotations

import pytest

from stockdesk.models.filter_spec import InventoryFilters, ProductFilters
from stockdesk.services.cascade import (
    CascadeGraph,
    CascadeRule,
    compute_allowed_values,
    is_unconstrained,
    related_values,
)


SUBCATEGORIES = [
    {"id": 1, "name": "Fasteners", "category": "raw"},
    {"id": 2, "name": "Adhesives", "category": "raw"},
    {"id": 3, "name": "Packaging", "category": "finished"},
]


def test_unconstrained_values() -> None:
    assert is_unconstrained(None)
    assert is_unconstrained("")
    assert is_unconstrained(0)
    assert not is_unconstrained(False)
    assert not is_unconstrained("raw")
    assert not is_unconstrained(3)


def test_allowed_values_filter_by_parent() -> None:
    allowed = compute_allowed_values(SUBCATEGORIES, "raw", "category")
    assert [row["id"] for row in allowed] == [1, 2]


def test_unconstrained_parent_returns_whole_universe_in_order() -> None:
    assert compute_allowed_values(SUBCATEGORIES, "", "category") == SUBCATEGORIES
    assert compute_allowed_values(SUBCATEGORIES, 0, "category") == SUBCATEGORIES


def test_allowed_values_accepts_callable_returning_sets() -> None:
    owners = {1: {"raw", "semi"}, 3: {"finished"}}
    allowed = compute_allowed_values(SUBCATEGORIES, "semi", lambda row: owners.get(row["id"], set()))
    assert [row["id"] for row in allowed] == [1]


def test_related_values_collects_parents_per_child() -> None:
    products = [
        {"id": 10, "category": "raw", "subcategory_id": 1},
        {"id": 11, "category": "semi", "subcategory_id": 1},
        {"id": 12, "category": "finished", "subcategory_id": None},
    ]
    mapping = related_values(products, parent_key="category", child_key="subcategory_id")
    assert mapping == {1: {"raw", "semi"}}


def test_graph_descendants_follow_chains() -> None:
    graph = InventoryFilters.cascade_graph()
    assert graph.descendants("category") == ("subcategory_id", "product_id")
    assert graph.descendants("subcategory_id") == ("product_id",)
    assert graph.descendants("product_id") == ()


def test_fields_to_reset_respects_keep() -> None:
    graph = InventoryFilters.cascade_graph()
    assert graph.fields_to_reset(["category"], keep={"subcategory_id"}) == ("product_id",)


def test_reset_descendants_clears_only_children() -> None:
    graph = ProductFilters.cascade_graph()
    spec = ProductFilters(category="raw", subcategory_id=4, formula_id=2, component_id=9, location_id=1)

    reset = graph.reset_descendants(spec, ["category"])

    assert reset.subcategory_id == 0
    assert reset.component_id == 9
    assert reset.location_id == 1


def test_graph_rejects_cycles_and_self_rules() -> None:
    with pytest.raises(ValueError):
        CascadeGraph([CascadeRule("a", "a")])
    with pytest.raises(ValueError):
        CascadeGraph([CascadeRule("a", "b"), CascadeRule("b", "a")])
