# Rev 1.0.0

"""Canonical "what to fetch" descriptor for list screens."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict

from stockdesk.models.filter_spec import FilterSpec


@dataclass(frozen=True)
class RequestDescriptor:
    filters: FilterSpec
    search: str = ""
    page: int = 1
    limit: int = 50
    # Dispatch token assigned by the fetch coordinator; not part of equality.
    sequence: int = field(default=0, compare=False)

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.limit < 1:
            raise ValueError("limit must be >= 1")

    def is_filter_equivalent(self, other: "RequestDescriptor | None") -> bool:
        """True when both descriptors only differ by page number."""
        if other is None:
            return False
        return (
            self.filters == other.filters
            and self.search == other.search
            and self.limit == other.limit
        )

    def with_page(self, page: int) -> "RequestDescriptor":
        return replace(self, page=page)

    def with_sequence(self, sequence: int) -> "RequestDescriptor":
        return replace(self, sequence=sequence)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def to_query_params(self) -> Dict[str, str]:
        """Flatten into query parameters; unconstrained filters are omitted."""
        params: Dict[str, str] = {}
        if self.search:
            params["search"] = self.search
        params["page"] = str(self.page)
        params["limit"] = str(self.limit)
        for name, value in self.filters.active_items():
            if isinstance(value, bool):
                params[name] = "true" if value else "false"
            else:
                params[name] = str(value)
        return params


def build_request(
    filters: FilterSpec,
    debounced_search: str,
    page: int,
    limit: int,
) -> RequestDescriptor:
    """Merge filters, settled search text and paging into a descriptor.

    Pure: equal inputs always produce equal descriptors.
    """
    return RequestDescriptor(
        filters=filters,
        search=(debounced_search or "").strip(),
        page=page,
        limit=limit,
    )
