# Rev 1.0.0

"""Parent/child rules between hierarchical filter fields.

Two concerns live here and are kept apart:

* :func:`compute_allowed_values` is pure. Given the universe of a child
  field and the value currently applied to its parent, it answers which child
  values are still valid.
* :class:`CascadeGraph` knows which fields hang below which and produces a
  filter record with the stale descendants reset. It never looks at option
  lists.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Collection,
    Dict,
    Hashable,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Set,
    Tuple,
    TypeVar,
    Union,
)

T = TypeVar("T")

Relation = Union[str, Callable[[Any], Any]]


@dataclass(frozen=True)
class CascadeRule:
    """Changing ``parent`` invalidates ``child``."""

    parent: str
    child: str


def is_unconstrained(value: Any) -> bool:
    """``""``, ``0`` and ``None`` all mean "no constraint on this field"."""
    if value is None:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value == 0
    if isinstance(value, str):
        return value == ""
    return False


def _relation_value(item: Any, relation: Relation) -> Any:
    if callable(relation):
        return relation(item)
    if isinstance(item, Mapping):
        return item.get(relation)
    return getattr(item, relation, None)


def _matches(related: Any, parent_value: Any) -> bool:
    if isinstance(related, (set, frozenset)):
        return parent_value in related
    return related == parent_value


def compute_allowed_values(
    universe: Iterable[T],
    applied_parent_value: Any,
    relation: Relation,
) -> List[T]:
    """Return the members of ``universe`` that are valid under the parent value.

    ``relation`` is either a key/attribute name or a callable returning the
    value that links an element to its parent field. When the relation yields
    a set, membership is tested instead of equality. An unconstrained parent
    returns the whole universe, in order.
    """
    items = list(universe)
    if is_unconstrained(applied_parent_value):
        return items
    return [item for item in items if _matches(_relation_value(item, relation), applied_parent_value)]


def related_values(
    records: Iterable[Any],
    *,
    parent_key: Relation,
    child_key: Relation,
) -> Dict[Hashable, Set[Any]]:
    """Map each child value to the set of parent values seen on owning records.

    Used when the child universe has no direct foreign key to the parent,
    e.g. subcategories only relate to a product category through the products
    that use them.
    """
    mapping: Dict[Hashable, Set[Any]] = {}
    for record in records:
        child = _relation_value(record, child_key)
        if is_unconstrained(child):
            continue
        mapping.setdefault(child, set()).add(_relation_value(record, parent_key))
    return mapping


class CascadeGraph:
    """Directed parent -> child rules for one screen's filter record."""

    def __init__(self, rules: Sequence[CascadeRule] = ()) -> None:
        self._rules: Tuple[CascadeRule, ...] = tuple(rules)
        self._children: Dict[str, List[str]] = {}
        for rule in self._rules:
            if rule.parent == rule.child:
                raise ValueError(f"Cascade rule cannot point at itself: {rule.parent}")
            self._children.setdefault(rule.parent, []).append(rule.child)
        for rule in self._rules:
            if rule.parent in self.descendants(rule.child):
                raise ValueError(f"Cascade cycle through {rule.parent} -> {rule.child}")

    @property
    def rules(self) -> Tuple[CascadeRule, ...]:
        return self._rules

    def parents(self) -> Set[str]:
        return set(self._children)

    def children(self, field: str) -> Tuple[str, ...]:
        return tuple(self._children.get(field, ()))

    def descendants(self, field: str) -> Tuple[str, ...]:
        """All fields reachable from ``field``, breadth first, without duplicates."""
        ordered: List[str] = []
        queue = list(self._children.get(field, ()))
        while queue:
            current = queue.pop(0)
            if current in ordered or current == field:
                continue
            ordered.append(current)
            queue.extend(self._children.get(current, ()))
        return tuple(ordered)

    def fields_to_reset(
        self,
        changed_fields: Iterable[str],
        *,
        keep: Optional[Collection[str]] = None,
    ) -> Tuple[str, ...]:
        keep_set = set(keep or ())
        ordered: List[str] = []
        for field in changed_fields:
            for child in self.descendants(field):
                if child in keep_set or child in ordered:
                    continue
                ordered.append(child)
        return tuple(ordered)

    def reset_descendants(
        self,
        spec: T,
        changed_fields: Iterable[str],
        *,
        keep: Optional[Collection[str]] = None,
    ) -> T:
        """Return ``spec`` with every descendant of ``changed_fields`` cleared.

        Fields named in ``keep`` are left alone; the store passes the fields the
        caller supplied explicitly in the same edit.
        """
        stale = self.fields_to_reset(changed_fields, keep=keep)
        if not stale:
            return spec
        return spec.cleared(stale)  # type: ignore[attr-defined]
