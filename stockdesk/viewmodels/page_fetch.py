# Rev 1.0.0

"""Paged fetch state machine shared by the list screens.

``Idle -> Loading -> {Success, Failure} -> Idle``. Each dispatch is stamped
with a monotonically increasing sequence number and only the completion that
carries the latest number is applied; anything older is dropped.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Any, Callable, List, Optional, Protocol, Set

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal, Slot

from stockdesk.api.errors import ListFetchError, MalformedResponseError
from stockdesk.models.page_result import PageResult
from stockdesk.models.request_descriptor import RequestDescriptor

logger = logging.getLogger(__name__)

FetchJob = Callable[[], PageResult]
FetchCallback = Callable[[Optional[PageResult], Optional[BaseException]], None]


class ListSource(Protocol):
    def fetch_page(self, descriptor: RequestDescriptor) -> PageResult:
        ...


class FetchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class FetchState:
    loading: bool
    error: Optional[str]
    last_descriptor: Optional[RequestDescriptor]
    status: FetchStatus = FetchStatus.IDLE


# ---- dispatchers ------------------------------------------------------
class InlineDispatcher:
    """Runs the fetch synchronously on the calling thread."""

    def dispatch(self, job: FetchJob, on_done: FetchCallback) -> None:
        try:
            result = job()
        except Exception as exc:
            on_done(None, exc)
            return
        on_done(result, None)


class _FetchSignals(QObject):
    finished = Signal(object, object)


class _FetchWorker(QRunnable):
    def __init__(self, job: FetchJob) -> None:
        super().__init__()
        self.setAutoDelete(True)
        self._job = job
        self.signals = _FetchSignals()

    def run(self) -> None:  # pragma: no cover - runs in background thread
        try:
            result = self._job()
        except Exception as exc:
            self.signals.finished.emit(None, exc)
            return
        self.signals.finished.emit(result, None)


class _Relay(QObject):
    """Lives on the GUI thread so worker completions arrive there, queued."""

    def __init__(self, callback: FetchCallback, signals: _FetchSignals, release: Callable[["_Relay"], None]) -> None:
        super().__init__()
        self._callback = callback
        self._signals = signals
        self._release = release
        signals.finished.connect(self.deliver)

    @Slot(object, object)
    def deliver(self, result: Any, error: Any) -> None:
        try:
            self._callback(result, error)
        finally:
            self._release(self)


class ThreadPoolDispatcher(QObject):
    """Runs fetches on a QThreadPool and reports back on the GUI thread."""

    def __init__(self, pool: Optional[QThreadPool] = None, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._pool = pool or QThreadPool.globalInstance()
        self._relays: Set[_Relay] = set()

    def dispatch(self, job: FetchJob, on_done: FetchCallback) -> None:
        worker = _FetchWorker(job)
        relay = _Relay(on_done, worker.signals, self._relays.discard)
        self._relays.add(relay)
        self._pool.start(worker)

    def pending(self) -> int:
        return len(self._relays)

    def wait_for_done(self, msecs: int = -1) -> bool:
        return self._pool.waitForDone(msecs)


# ---- coordinator ------------------------------------------------------
class PageFetchCoordinator(QObject):
    """Issues page fetches for a list screen and merges the results."""

    itemsChanged = Signal(list)
    loadingChanged = Signal(bool)
    errorChanged = Signal(object)               # str or None
    pageInfoChanged = Signal(int, int, int)     # page, pages, total
    statusChanged = Signal(str)

    def __init__(self, source: ListSource, *, dispatcher: Any = None, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._source = source
        self._dispatcher = dispatcher if dispatcher is not None else ThreadPoolDispatcher(parent=self)
        self._items: List[Any] = []
        self._sequence = 0
        self._inflight: Optional[RequestDescriptor] = None
        self._loaded: Optional[RequestDescriptor] = None
        self._failed: Optional[RequestDescriptor] = None
        self._last_result: Optional[PageResult] = None
        self._error: Optional[str] = None
        self._status = FetchStatus.IDLE
        self._disposed = False
        self._suppressed = 0

    # ---- accessors ----------------------------------------------------
    @property
    def items(self) -> List[Any]:
        return list(self._items)

    @property
    def loading(self) -> bool:
        return self._inflight is not None

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def status(self) -> FetchStatus:
        return self._status

    @property
    def page(self) -> int:
        return self._last_result.page if self._last_result else 0

    @property
    def pages(self) -> int:
        return self._last_result.pages if self._last_result else 0

    @property
    def total(self) -> int:
        return self._last_result.total if self._last_result else 0

    @property
    def last_descriptor(self) -> Optional[RequestDescriptor]:
        """In flight, else the last failed request, else the last loaded page."""
        return self._inflight or self._failed or self._loaded

    @property
    def loaded_descriptor(self) -> Optional[RequestDescriptor]:
        return self._loaded

    @property
    def suppressed_requests(self) -> int:
        return self._suppressed

    def state(self) -> FetchState:
        return FetchState(
            loading=self.loading,
            error=self._error,
            last_descriptor=self.last_descriptor,
            status=self._status,
        )

    def has_more(self) -> bool:
        if self._loaded is None or self._last_result is None:
            return False
        if self._failed is not None and not self._failed.is_filter_equivalent(self._loaded):
            # The loaded pages belong to filters that are no longer current.
            return False
        return self._last_result.has_more(self._loaded.limit)

    # ---- transitions --------------------------------------------------
    def request(self, descriptor: RequestDescriptor) -> bool:
        """Fetch page 1 for ``descriptor`` unless it matches what is already believed.

        Returns True when a fetch was dispatched.
        """
        if self._disposed:
            return False
        reference = self.last_descriptor
        if reference is not None and descriptor.is_filter_equivalent(reference):
            if self._inflight is not None:
                self._suppressed += 1
                logger.debug("Suppressed duplicate request for %s", self._describe(descriptor))
                return False
            if self._error is None:
                return False
        return self._dispatch(descriptor.with_page(1), append=False)

    def load_more(self) -> bool:
        """Fetch and append the next page when the last page came back full."""
        if self._disposed:
            return False
        if self._inflight is not None:
            self._suppressed += 1
            return False
        failed = self._failed
        if failed is not None and (self._loaded is None or not failed.is_filter_equivalent(self._loaded)):
            # Nothing was loaded for the failed filters yet, so start them over.
            return self._dispatch(failed.with_page(1), append=False)
        if self._loaded is None or not self.has_more():
            return False
        return self._dispatch(self._loaded.with_page(self._loaded.page + 1), append=True)

    def refresh(self, descriptor: Optional[RequestDescriptor] = None) -> bool:
        """Reload page 1 and replace the items.

        Without ``descriptor`` the in-flight, failed or loaded request is reloaded.
        """
        if self._disposed:
            return False
        reference = descriptor or self.last_descriptor
        if reference is None:
            return False
        target = reference.with_page(1)
        if self._inflight is not None and self._inflight == target:
            self._suppressed += 1
            return False
        return self._dispatch(target, append=False)

    def shutdown(self) -> None:
        """Stop accepting work; completions still in flight are ignored."""
        self._disposed = True
        self._inflight = None

    # ---- internals ----------------------------------------------------
    def _dispatch(self, descriptor: RequestDescriptor, *, append: bool) -> bool:
        self._sequence += 1
        stamped = descriptor.with_sequence(self._sequence)
        was_loading = self.loading
        self._inflight = stamped
        self._set_status(FetchStatus.LOADING)
        if not was_loading:
            self.loadingChanged.emit(True)
        logger.debug(
            "Dispatching #%s %s (%s)",
            stamped.sequence,
            self._describe(stamped),
            "append" if append else "replace",
        )
        source = self._source
        self._dispatcher.dispatch(
            lambda: source.fetch_page(stamped),
            partial(self._on_finished, stamped, append),
        )
        return True

    def _on_finished(
        self,
        descriptor: RequestDescriptor,
        append: bool,
        result: Optional[PageResult],
        error: Optional[BaseException],
    ) -> None:
        if self._disposed:
            return
        if descriptor.sequence != self._sequence:
            logger.debug("Discarding stale response #%s (latest #%s)", descriptor.sequence, self._sequence)
            return

        self._inflight = None
        if error is None and not isinstance(result, PageResult):
            error = MalformedResponseError(f"Source returned {type(result).__name__} instead of a page")
        if error is not None:
            self._fail(descriptor, error)
            return

        if result is None:
            return
        if append:
            self._items.extend(result.items)
        else:
            self._items = list(result.items)
        self._loaded = descriptor
        self._failed = None
        self._last_result = result
        if self._error is not None:
            self._error = None
            self.errorChanged.emit(None)
        self.itemsChanged.emit(list(self._items))
        self.pageInfoChanged.emit(result.page, result.pages, result.total)
        self._set_status(FetchStatus.SUCCESS)
        self.loadingChanged.emit(False)
        self._set_status(FetchStatus.IDLE)

    def _fail(self, descriptor: RequestDescriptor, error: BaseException) -> None:
        message = str(error) or error.__class__.__name__
        if isinstance(error, ListFetchError):
            logger.warning("Fetch #%s failed: %s", descriptor.sequence, message)
        else:
            logger.warning("Fetch #%s raised unexpectedly", descriptor.sequence, exc_info=error)
        self._failed = descriptor
        self._error = message
        self.errorChanged.emit(message)
        self._set_status(FetchStatus.FAILURE)
        self.loadingChanged.emit(False)
        self._set_status(FetchStatus.IDLE)

    def _set_status(self, status: FetchStatus) -> None:
        if status != self._status:
            self._status = status
            self.statusChanged.emit(status.value)

    @staticmethod
    def _describe(descriptor: RequestDescriptor) -> str:
        filters = ", ".join(f"{k}={v}" for k, v in descriptor.filters.active_items()) or "-"
        return f"[{filters}] search={descriptor.search!r} page={descriptor.page}"
