# Rev 1.0.0

"""Scroll offset helpers for the scroll-to-top button and infinite scroll."""
from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QObject, Signal


class ScrollPositionTracker(QObject):
    pastThresholdChanged = Signal(bool)

    def __init__(self, threshold_px: int = 200, *, end_margin_px: int = 200, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._threshold_px = threshold_px
        self._end_margin_px = end_margin_px
        self._past = False

    @property
    def threshold_px(self) -> int:
        return self._threshold_px

    @property
    def end_margin_px(self) -> int:
        return self._end_margin_px

    @property
    def past_threshold(self) -> bool:
        return self._past

    @staticmethod
    def is_past_threshold(offset: float, threshold_px: float) -> bool:
        return offset > threshold_px

    @staticmethod
    def is_near_end(offset: float, viewport_height: float, content_height: float, margin_px: float) -> bool:
        """True once the bottom of the viewport is within ``margin_px`` of the content end."""
        if content_height <= 0:
            return False
        return offset + viewport_height >= content_height - margin_px

    def on_scroll(self, offset: float) -> bool:
        past = self.is_past_threshold(offset, self._threshold_px)
        if past != self._past:
            self._past = past
            self.pastThresholdChanged.emit(past)
        return past

    def near_end(self, offset: float, viewport_height: float, content_height: float) -> bool:
        return self.is_near_end(offset, viewport_height, content_height, self._end_margin_px)
