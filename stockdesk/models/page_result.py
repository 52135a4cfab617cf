# Rev 1.0.0

"""One page of list results plus the paging metadata that came with it."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple

from stockdesk.api.errors import MalformedResponseError


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit > 0 else 0


@dataclass(frozen=True)
class PageResult:
    items: Tuple[Any, ...]
    total: int
    page: int
    pages: int

    @property
    def count(self) -> int:
        return len(self.items)

    def is_full(self, limit: int) -> bool:
        """A full page suggests more rows may follow."""
        return len(self.items) >= limit

    def has_more(self, limit: int) -> bool:
        return self.is_full(limit) and self.page < self.pages

    @classmethod
    def build(cls, items: Sequence[Any], *, total: int, page: int, limit: int) -> "PageResult":
        return cls(items=tuple(items), total=total, page=page, pages=page_count(total, limit))

    @classmethod
    def from_payload(
        cls,
        payload: Any,
        *,
        page: int,
        limit: int,
        parse_item: Optional[Callable[[Mapping[str, Any]], Any]] = None,
    ) -> "PageResult":
        """Parse the ``{success, message, data, meta}`` envelope of a list call.

        Missing ``meta`` fields fall back to what was requested; ``pages`` is
        always recomputed from ``total`` and ``limit``.
        """
        if not isinstance(payload, Mapping):
            raise MalformedResponseError("List response is not a JSON object")
        data = payload.get("data")
        if data is None:
            data = []
        if not isinstance(data, list):
            raise MalformedResponseError("List response 'data' is not an array")

        meta = payload.get("meta") or {}
        if not isinstance(meta, Mapping):
            raise MalformedResponseError("List response 'meta' is not an object")

        try:
            rows = [parse_item(row) if parse_item else row for row in data]
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedResponseError(f"Unexpected list item shape: {exc}") from exc

        try:
            total = int(meta.get("total", meta.get("count", len(rows))))
            current_page = int(meta.get("page", page))
        except (TypeError, ValueError) as exc:
            raise MalformedResponseError(f"Unexpected paging metadata: {exc}") from exc
        if total < 0 or current_page < 1:
            raise MalformedResponseError("Paging metadata out of range")

        return cls.build(rows, total=total, page=current_page, limit=limit)
