# Rev 1.0.0

from __future__ import annotations

import pytest

from stockdesk.models.filter_spec import (
    AuditFilters,
    FilterValidationError,
    InventoryFilters,
    ProductFilters,
)


def test_empty_record_has_no_active_fields() -> None:
    assert ProductFilters().active_fields() == ()
    assert AuditFilters().active_fields() == ()


def test_merge_coerces_strings() -> None:
    spec = InventoryFilters().merged({"user_id": "7", "days": " 30 ", "entry_type": "manual_in"})
    assert spec.user_id == 7
    assert spec.days == 30
    assert spec.entry_type == "manual_in"
    assert spec.active_fields() == ("entry_type", "user_id", "days")


def test_flag_fields_are_tri_state() -> None:
    spec = AuditFilters().merged({"is_flag": "false"})
    assert spec.is_flag is False
    assert spec.is_active("is_flag")
    assert not AuditFilters().is_active("is_flag")
    assert ProductFilters().merged({"is_parent": "yes"}).is_parent is True


@pytest.mark.parametrize(
    "field, value",
    [
        ("category", "gadgets"),
        ("subcategory_id", -1),
        ("subcategory_id", True),
        ("location_id", "abc"),
        ("nope", 1),
        ("is_parent", "maybe"),
    ],
)
def test_invalid_values_are_rejected(field, value) -> None:
    with pytest.raises(FilterValidationError):
        ProductFilters().merged({field: value})


def test_date_fields_must_be_iso_dates() -> None:
    with pytest.raises(FilterValidationError):
        InventoryFilters().merged({"date_from": "12/01/2024"})
    assert InventoryFilters().merged({"date_from": "2024-12-01"}).date_from == "2024-12-01"


def test_cleared_and_changed_fields() -> None:
    spec = ProductFilters(category="raw", location_id=2)
    cleared = spec.cleared(["category"])
    assert cleared.category == ""
    assert cleared.changed_fields(spec) == ("category",)


def test_active_items_in_field_order() -> None:
    spec = AuditFilters(action="update", user_id=3, is_flag=True)
    assert spec.active_items() == (("user_id", 3), ("action", "update"), ("is_flag", True))
