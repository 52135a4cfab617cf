# Rev 1.0.0

"""Per-screen holder of structured filters and raw search text."""
from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Set, Type

from PySide6.QtCore import QObject, Signal

from stockdesk.models.filter_spec import FilterSpec, FilterValidationError

logger = logging.getLogger(__name__)


class FilterStateStore(QObject):
    """Owns one screen's :class:`FilterSpec` and search text.

    Edits are applied in the order received. Signals fire only when something
    actually changed, so listeners can trigger fetches without deduplicating.
    """

    filtersChanged = Signal(object)     # Emits the new FilterSpec
    searchChanged = Signal(str)
    activeCountChanged = Signal(int)

    def __init__(self, spec_cls: Type[FilterSpec], *, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._spec_cls = spec_cls
        self._graph = spec_cls.cascade_graph()
        self._filters: FilterSpec = spec_cls.empty()
        self._search = ""

    # ---- accessors ----------------------------------------------------
    @property
    def spec_cls(self) -> Type[FilterSpec]:
        return self._spec_cls

    @property
    def filters(self) -> FilterSpec:
        return self._filters

    @property
    def search(self) -> str:
        return self._search

    def active_count(self) -> int:
        count = len(self._filters.active_fields())
        if self._search.strip():
            count += 1
        return count

    # ---- edits --------------------------------------------------------
    def apply(self, partial: Optional[Mapping[str, Any]] = None, **fields: Any) -> bool:
        """Merge ``partial`` into the current filters; returns True if anything changed.

        Changing a cascade parent clears its descendants unless the same edit
        supplies them. Setting one side of an exclusive group clears the other.
        """
        updates = dict(partial or {})
        updates.update(fields)
        if not updates:
            return False

        current = self._filters
        merged = current.merged(updates)
        supplied = set(updates)

        changed_parents = [
            name
            for name in updates
            if name in self._graph.parents() and getattr(merged, name) != getattr(current, name)
        ]
        merged = self._graph.reset_descendants(merged, changed_parents, keep=supplied)
        merged = self._apply_exclusive(merged, supplied)
        return self._replace(merged)

    def toggle(self, name: str, value: Any) -> bool:
        """Set ``name`` to ``value``, or clear it when it already holds ``value``."""
        wanted = self._spec_cls.coerce(name, value)
        if getattr(self._filters, name) == wanted:
            return self.apply({name: self._spec_cls.unconstrained_value(name)})
        return self.apply({name: wanted})

    def set_search(self, text: Optional[str]) -> bool:
        text = text or ""
        if text == self._search:
            return False
        before = self.active_count()
        self._search = text
        self.searchChanged.emit(text)
        self._emit_count_if_changed(before)
        return True

    def clear(self) -> bool:
        """Reset every field and the search text to "no constraint"."""
        empty = self._spec_cls.empty()
        if self._filters == empty and not self._search:
            return False
        before = self.active_count()
        search_changed = bool(self._search)
        filters_changed = self._filters != empty
        self._filters = empty
        self._search = ""
        if filters_changed:
            self.filtersChanged.emit(self._filters)
        if search_changed:
            self.searchChanged.emit("")
        self._emit_count_if_changed(before)
        logger.debug("Cleared %s filters", self._spec_cls.SCREEN)
        return True

    # ---- internals ----------------------------------------------------
    def _apply_exclusive(self, spec: FilterSpec, supplied: Set[str]) -> FilterSpec:
        for left, right in self._spec_cls.EXCLUSIVE:
            left_set = self._any_set(spec, left, supplied)
            right_set = self._any_set(spec, right, supplied)
            if left_set and right_set:
                raise FilterValidationError(
                    f"{', '.join(left)} cannot be combined with {', '.join(right)}"
                )
            if left_set:
                spec = spec.cleared(name for name in right if name not in supplied)
            elif right_set:
                spec = spec.cleared(name for name in left if name not in supplied)
        return spec

    @staticmethod
    def _any_set(spec: FilterSpec, names: Iterable[str], supplied: Set[str]) -> bool:
        return any(name in supplied and spec.is_active(name) for name in names)

    def _replace(self, new_filters: FilterSpec) -> bool:
        if new_filters == self._filters:
            return False
        before = self.active_count()
        self._filters = new_filters
        self.filtersChanged.emit(new_filters)
        self._emit_count_if_changed(before)
        return True

    def _emit_count_if_changed(self, before: int) -> None:
        after = self.active_count()
        if after != before:
            self.activeCountChanged.emit(after)
