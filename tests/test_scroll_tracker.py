# Rev 1.0.0

from __future__ import annotations

from stockdesk.viewmodels.scroll_tracker import ScrollPositionTracker


def test_threshold_is_strictly_greater() -> None:
    assert not ScrollPositionTracker.is_past_threshold(200, 200)
    assert ScrollPositionTracker.is_past_threshold(201, 200)


def test_signal_only_on_edges() -> None:
    tracker = ScrollPositionTracker(120)
    changes = []
    tracker.pastThresholdChanged.connect(changes.append)

    for offset in (0, 50, 121, 300, 500, 119, 0):
        tracker.on_scroll(offset)

    assert changes == [True, False]
    assert tracker.past_threshold is False


def test_near_end_uses_margin() -> None:
    tracker = ScrollPositionTracker(200, end_margin_px=100)
    assert not tracker.near_end(0, 500, 2000)
    assert tracker.near_end(1400, 500, 2000)
    assert not tracker.near_end(0, 500, 0)
