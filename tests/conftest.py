# Rev 1.0.0

"""Shared fixtures for the StockDesk test suite."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Tuple

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from stockdesk.models.page_result import PageResult
from stockdesk.models.request_descriptor import RequestDescriptor
from stockdesk.repositories.db import Database
from stockdesk.utils.paths import MIGRATIONS_DIR


@pytest.fixture(autouse=True)
def _qt_app(qapp):
    """Every QObject in the suite lives under the pytest-qt application."""
    return qapp


class ManualDispatcher:
    """Holds fetch jobs until the test completes them, in any order."""

    def __init__(self) -> None:
        self.calls: List[Tuple[Callable[[], Any], Callable[[Any, Any], None]]] = []

    def dispatch(self, job, on_done) -> None:
        self.calls.append((job, on_done))

    @property
    def pending(self) -> int:
        return len(self.calls)

    def complete(self, index: int = 0) -> None:
        job, on_done = self.calls.pop(index)
        try:
            result = job()
        except Exception as exc:
            on_done(None, exc)
            return
        on_done(result, None)

    def fail(self, error: BaseException, index: int = 0) -> None:
        _, on_done = self.calls.pop(index)
        on_done(None, error)


class FakeListSource:
    """Serves ``total`` numbered rows; optionally narrowed by a predicate."""

    def __init__(self, total: int = 120, *, rows: Optional[Sequence[Any]] = None) -> None:
        self.rows = list(rows) if rows is not None else [{"id": i} for i in range(1, total + 1)]
        self.requests: List[RequestDescriptor] = []
        self.error: Optional[BaseException] = None
        self.select: Optional[Callable[[RequestDescriptor], Sequence[Any]]] = None

    def fetch_page(self, descriptor: RequestDescriptor) -> PageResult:
        self.requests.append(descriptor)
        if self.error is not None:
            raise self.error
        rows = list(self.select(descriptor)) if self.select else self.rows
        start = descriptor.offset
        return PageResult.build(
            rows[start:start + descriptor.limit],
            total=len(rows),
            page=descriptor.page,
            limit=descriptor.limit,
        )


@pytest.fixture
def manual_dispatcher() -> ManualDispatcher:
    return ManualDispatcher()


@pytest.fixture
def fake_source() -> FakeListSource:
    return FakeListSource()


@pytest.fixture
def database(tmp_path: Path):
    db = Database(tmp_path / "demo.db")
    db.run_migrations(MIGRATIONS_DIR)
    yield db
    db.close()
