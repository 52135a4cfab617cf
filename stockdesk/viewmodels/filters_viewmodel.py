# Rev 1.0.0

"""Filters view-model loading reference data for the filter pickers."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Protocol, Set

from PySide6.QtCore import QObject, Signal

from stockdesk.models.filter_spec import FilterSpec
from stockdesk.services.cascade import compute_allowed_values, related_values

logger = logging.getLogger(__name__)

REFERENCE_RESOURCES = (
    "subcategories",
    "locations",
    "formulas",
    "users",
    "products",
    "purchase-info",
)


class OptionsSource(Protocol):
    def list_reference(self, resource: str) -> List[Dict[str, Any]]:
        ...


class FiltersViewModel(QObject):
    optionsChanged = Signal(dict)

    def __init__(self, source: OptionsSource) -> None:
        super().__init__()
        self._source = source
        self._options: Dict[str, List[dict]] = {name: [] for name in REFERENCE_RESOURCES}

    def refresh(self) -> Dict[str, List[dict]]:
        self._options = {name: self._source.list_reference(name) for name in REFERENCE_RESOURCES}
        logger.debug(
            "Loaded filter options: %s",
            ", ".join(f"{name}={len(rows)}" for name, rows in self._options.items()),
        )
        self.optionsChanged.emit(self._options)
        return self._options

    def options(self) -> Dict[str, List[dict]]:
        if not any(self._options.values()):
            self.refresh()
        return self._options

    def allowed_options(self, filters: FilterSpec) -> Dict[str, List[dict]]:
        """Picker contents for ``filters`` with every cascade applied."""
        options = self.options()
        products = options["products"]
        allowed: Dict[str, List[dict]] = {
            "locations": list(options["locations"]),
            "users": list(options["users"]),
            "formulas": list(options["formulas"]),
            "purchase-info": list(options["purchase-info"]),
        }

        category = getattr(filters, "category", "")
        sub_categories = related_values(products, parent_key="category", child_key="subcategory_id")
        allowed["subcategories"] = compute_allowed_values(
            options["subcategories"],
            category,
            lambda row: sub_categories.get(row.get("id"), set()),
        )

        in_category = compute_allowed_values(products, category, "category")
        allowed["products"] = compute_allowed_values(
            in_category,
            getattr(filters, "subcategory_id", 0),
            "subcategory_id",
        )

        if "component_id" in filters.field_names():
            allowed["components"] = self._components_for(getattr(filters, "formula_id", 0))
        return allowed

    def _components_for(self, formula_id: int) -> List[dict]:
        options = self.options()
        owners: Dict[int, Set[int]] = {}
        for formula in options["formulas"]:
            for component in formula.get("components") or []:
                owners.setdefault(int(component["component_id"]), set()).add(int(formula["id"]))
        universe = [row for row in options["products"] if int(row["id"]) in owners]
        return compute_allowed_values(universe, formula_id, lambda row: owners.get(int(row["id"]), set()))
