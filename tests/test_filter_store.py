# Rev 1.0.0

from __future__ import annotations

import pytest

from stockdesk.models.filter_spec import AuditFilters, FilterValidationError, InventoryFilters, ProductFilters
from stockdesk.viewmodels.filter_store import FilterStateStore


def test_changing_category_resets_subcategory() -> None:
    store = FilterStateStore(ProductFilters)
    store.apply(category="raw", subcategory_id=4)
    assert store.filters.subcategory_id == 4

    store.apply(category="finished")

    assert store.filters.category == "finished"
    assert store.filters.subcategory_id == 0


def test_cascade_resets_whole_chain() -> None:
    store = FilterStateStore(InventoryFilters)
    store.apply(category="raw", subcategory_id=2, product_id=9, user_id=1)

    store.apply(category="semi")

    assert store.filters.subcategory_id == 0
    assert store.filters.product_id == 0
    assert store.filters.user_id == 1


def test_child_supplied_with_parent_is_kept() -> None:
    store = FilterStateStore(InventoryFilters)
    store.apply(category="raw", subcategory_id=2, product_id=9)

    store.apply(category="semi", subcategory_id=5)

    assert store.filters.subcategory_id == 5
    assert store.filters.product_id == 0


def test_reapplying_same_parent_keeps_children() -> None:
    store = FilterStateStore(ProductFilters)
    store.apply(category="raw", subcategory_id=4)

    assert store.apply(category="raw") is False
    assert store.filters.subcategory_id == 4


def test_days_and_date_range_clear_each_other() -> None:
    store = FilterStateStore(AuditFilters)
    store.apply(date_from="2024-01-01", date_to="2024-01-31")

    store.apply(days=7)
    assert (store.filters.days, store.filters.date_from, store.filters.date_to) == (7, "", "")

    store.apply(date_from="2024-02-01")
    assert store.filters.days == 0
    assert store.filters.date_from == "2024-02-01"


def test_days_with_dates_in_one_edit_is_rejected() -> None:
    store = FilterStateStore(InventoryFilters)
    with pytest.raises(FilterValidationError):
        store.apply(days=7, date_from="2024-01-01")
    assert store.filters == InventoryFilters()


def test_active_count_includes_search(qtbot) -> None:
    store = FilterStateStore(ProductFilters)
    counts = []
    store.activeCountChanged.connect(counts.append)

    store.apply(category="raw", is_component=False)
    store.set_search("   ")
    store.set_search("bolt")

    assert store.active_count() == 3
    assert counts == [2, 3]


def test_signals_fire_only_on_change(qtbot) -> None:
    store = FilterStateStore(ProductFilters)
    emitted = []
    store.filtersChanged.connect(emitted.append)

    assert store.apply(location_id=2) is True
    assert store.apply(location_id=2) is False
    assert store.set_search("") is False

    assert len(emitted) == 1


def test_toggle_selects_then_clears() -> None:
    store = FilterStateStore(ProductFilters)
    store.toggle("source_type", "manufacturing")
    assert store.filters.source_type == "manufacturing"
    store.toggle("source_type", "manufacturing")
    assert store.filters.source_type == ""


def test_clear_resets_everything(qtbot) -> None:
    store = FilterStateStore(ProductFilters)
    store.apply(category="raw", location_id=1)
    store.set_search("glue")

    with qtbot.waitSignal(store.activeCountChanged) as blocker:
        assert store.clear() is True

    assert blocker.args == [0]
    assert store.filters == ProductFilters()
    assert store.search == ""
    assert store.clear() is False
