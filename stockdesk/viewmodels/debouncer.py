# Rev 1.0.0

"""Quiet-interval debouncer backed by a single-shot QTimer."""
from __future__ import annotations

from typing import Any, Optional

from PySide6.QtCore import QObject, QTimer, Signal

_NOTHING = object()


class Debouncer(QObject):
    """Propagates a value only after it stopped changing for ``quiet_interval_ms``.

    Every :meth:`observe` restarts the timer and replaces the pending value, so
    a burst of edits produces exactly one ``settled`` emission carrying the
    last value.
    """

    settled = Signal(object)

    def __init__(self, quiet_interval_ms: int = 500, *, initial: Any = None, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        if quiet_interval_ms < 0:
            raise ValueError("quiet_interval_ms cannot be negative")
        self._current = initial
        self._pending: Any = _NOTHING
        self._torn_down = False
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(quiet_interval_ms)
        self._timer.timeout.connect(self._emit_pending)

    @property
    def quiet_interval_ms(self) -> int:
        return self._timer.interval()

    def observe(self, value: Any) -> None:
        if self._torn_down:
            return
        self._pending = value
        self._timer.start()

    def current(self) -> Any:
        return self._current

    def is_pending(self) -> bool:
        return self._pending is not _NOTHING

    def cancel(self) -> None:
        """Drop the pending value without emitting it."""
        self._timer.stop()
        self._pending = _NOTHING

    def reset(self, value: Any) -> None:
        """Cancel anything pending and make ``value`` current without emitting."""
        self.cancel()
        self._current = value

    def flush(self) -> None:
        """Emit the pending value now instead of waiting for the timer."""
        if self._pending is _NOTHING:
            return
        self._timer.stop()
        self._emit_pending()

    def teardown(self) -> None:
        """Cancel and refuse further input; the owner is going away."""
        self.cancel()
        self._torn_down = True

    def _emit_pending(self) -> None:
        if self._pending is _NOTHING or self._torn_down:
            return
        value = self._pending
        self._pending = _NOTHING
        self._current = value
        self.settled.emit(value)
