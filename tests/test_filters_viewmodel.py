# Rev 1.0.0

from __future__ import annotations

from stockdesk.models.filter_spec import InventoryFilters, ProductFilters
from stockdesk.viewmodels.filters_viewmodel import REFERENCE_RESOURCES, FiltersViewModel


class StubOptions:
    def __init__(self) -> None:
        self.calls = []
        self.data = {
            "subcategories": [{"id": 1, "name": "Fasteners"}, {"id": 2, "name": "Fabric"}, {"id": 3, "name": "Unused"}],
            "locations": [{"id": 1, "name": "Main"}],
            "users": [{"id": 1, "username": "alex"}],
            "purchase-info": [],
            "formulas": [
                {"id": 1, "name": "Frame kit", "components": [{"component_id": 10}, {"component_id": 11}]},
                {"id": 2, "name": "Strap kit", "components": [{"component_id": 11}]},
            ],
            "products": [
                {"id": 10, "name": "Bolt", "category": "raw", "subcategory_id": 1},
                {"id": 11, "name": "Cloth", "category": "raw", "subcategory_id": 2},
                {"id": 12, "name": "Frame", "category": "finished", "subcategory_id": 1},
                {"id": 13, "name": "Strap", "category": "semi", "subcategory_id": None},
            ],
        }

    def list_reference(self, resource):
        self.calls.append(resource)
        return list(self.data[resource])


def _ids(rows):
    return [row["id"] for row in rows]


def test_refresh_loads_every_resource(qtbot) -> None:
    source = StubOptions()
    vm = FiltersViewModel(source)

    with qtbot.waitSignal(vm.optionsChanged) as blocker:
        vm.refresh()

    assert sorted(source.calls) == sorted(REFERENCE_RESOURCES)
    assert _ids(blocker.args[0]["locations"]) == [1]


def test_options_are_loaded_once() -> None:
    source = StubOptions()
    vm = FiltersViewModel(source)
    vm.options()
    vm.options()
    assert len(source.calls) == len(REFERENCE_RESOURCES)


def test_subcategories_follow_category() -> None:
    vm = FiltersViewModel(StubOptions())

    assert _ids(vm.allowed_options(ProductFilters())["subcategories"]) == [1, 2, 3]
    assert _ids(vm.allowed_options(ProductFilters(category="raw"))["subcategories"]) == [1, 2]
    assert _ids(vm.allowed_options(ProductFilters(category="finished"))["subcategories"]) == [1]
    assert _ids(vm.allowed_options(ProductFilters(category="semi"))["subcategories"]) == []


def test_products_follow_category_and_subcategory() -> None:
    vm = FiltersViewModel(StubOptions())

    allowed = vm.allowed_options(InventoryFilters(category="raw", subcategory_id=1))

    assert _ids(allowed["products"]) == [10]
    assert "components" not in allowed


def test_components_follow_formula() -> None:
    vm = FiltersViewModel(StubOptions())

    assert _ids(vm.allowed_options(ProductFilters())["components"]) == [10, 11]
    assert _ids(vm.allowed_options(ProductFilters(formula_id=2))["components"]) == [11]
