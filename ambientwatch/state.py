"""In-memory dashboard state shared by the poller and the renderer."""

from __future__ import annotations

import logging
from collections import deque
from typing import Iterator, Optional

from .models import ChartMode, ConnectionStatus, HistoryPoint, HistoryStatus, SensorReading

logger = logging.getLogger(__name__)

# Live readings kept for the chart (4 min at the default 2 s poll interval)
DEFAULT_HISTORY_SIZE = 120


class RollingHistory:
    """Fixed-capacity FIFO of recent live readings, oldest first."""

    def __init__(self, capacity: int = DEFAULT_HISTORY_SIZE) -> None:
        if capacity < 1:
            raise ValueError(f"History capacity must be positive, got {capacity}")
        self._points: deque[HistoryPoint] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._points.maxlen

    def append(self, point: HistoryPoint) -> None:
        """Append at the tail, evicting the oldest point when full."""
        self._points.append(point)

    def clear(self) -> None:
        self._points.clear()

    def snapshot(self) -> list[HistoryPoint]:
        """Return a copy of the buffer in chronological order."""
        return list(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[HistoryPoint]:
        return iter(list(self._points))


class HistoricalCache:
    """Device-stored history, replaced wholesale on every successful fetch."""

    def __init__(self) -> None:
        self.points: list[HistoryPoint] = []
        self.status = HistoryStatus.IDLE

    def clear(self) -> None:
        self.points = []
        self.status = HistoryStatus.IDLE

    def __len__(self) -> int:
        return len(self.points)


class _RequestSequence:
    """Monotonic request numbering with newest-wins acceptance.

    A response is accepted only if it belongs to a request issued after the
    last accepted one. ``invalidate`` marks every in-flight request stale.
    """

    def __init__(self) -> None:
        self._issued = 0
        self._applied = 0

    def next(self) -> int:
        self._issued += 1
        return self._issued

    def accept(self, seq: int) -> bool:
        if seq <= self._applied:
            return False
        self._applied = seq
        return True

    def invalidate(self) -> None:
        self._applied = self._issued


class DashboardState:
    """Explicit state container for one dashboard session.

    Fetch completions write through the ``apply_*`` methods, user actions
    through ``reset`` and ``chart_mode``. The renderer only reads.
    """

    def __init__(self, address: str, history_size: int = DEFAULT_HISTORY_SIZE) -> None:
        self.address = address
        self.reading: Optional[SensorReading] = None
        self.connection = ConnectionStatus.CONNECTING
        self.history = RollingHistory(history_size)
        self.api_history = HistoricalCache()
        self.chart_mode = ChartMode.LIVE
        self._live_seq = _RequestSequence()
        self._history_seq = _RequestSequence()

    def reset(self, address: Optional[str] = None) -> None:
        """Clear all device data, optionally switching to a new address."""
        if address is not None:
            self.address = address
        self.reading = None
        self.connection = ConnectionStatus.CONNECTING
        self.history.clear()
        self.api_history.clear()
        self._live_seq.invalidate()
        self._history_seq.invalidate()
        logger.debug("State reset for %s", self.address)

    # ── Live snapshot ────────────────────────────────────────────────

    def begin_live_request(self) -> int:
        return self._live_seq.next()

    def apply_live(self, seq: int, reading: SensorReading, label: str) -> bool:
        """Store a live reading. Returns False if the response was stale."""
        if not self._live_seq.accept(seq):
            logger.debug("Discarding stale live response #%d", seq)
            return False
        self.reading = reading
        self.connection = ConnectionStatus.CONNECTED
        self.history.append(HistoryPoint.from_reading(reading, label))
        return True

    def apply_live_error(self, seq: int) -> bool:
        if not self._live_seq.accept(seq):
            logger.debug("Discarding stale live failure #%d", seq)
            return False
        self.connection = ConnectionStatus.ERROR
        return True

    # ── Device history ───────────────────────────────────────────────

    def begin_history_request(self) -> int:
        self.api_history.status = HistoryStatus.LOADING
        return self._history_seq.next()

    def apply_history(self, seq: int, points: list[HistoryPoint]) -> bool:
        if not self._history_seq.accept(seq):
            logger.debug("Discarding stale history response #%d", seq)
            return False
        self.api_history.points = points
        self.api_history.status = HistoryStatus.LOADED
        return True

    def apply_history_error(self, seq: int) -> bool:
        if not self._history_seq.accept(seq):
            logger.debug("Discarding stale history failure #%d", seq)
            return False
        self.api_history.status = HistoryStatus.ERROR
        return True

    # ── Renderer helpers ─────────────────────────────────────────────

    def active_points(self) -> list[HistoryPoint]:
        """Return the dataset selected by the chart mode."""
        if self.chart_mode is ChartMode.API:
            return list(self.api_history.points)
        return self.history.snapshot()
