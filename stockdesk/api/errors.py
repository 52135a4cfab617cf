# Rev 1.0.0

"""Failures raised while fetching list pages.

All of them reach the view layer the same way: as the message string exposed
through the fetch coordinator's ``error``.
"""
from __future__ import annotations

from typing import Optional


class ListFetchError(Exception):
    """Base class for anything that prevented a page from loading."""


class TransportError(ListFetchError):
    """The request never produced an HTTP response (DNS, refused, timeout)."""


class ApiResponseError(ListFetchError):
    """The server answered with a non-2xx status or ``success: false``."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(ListFetchError):
    """The response body did not have the expected envelope or meta shape."""
