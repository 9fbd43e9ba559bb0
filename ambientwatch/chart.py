"""Multi-series time chart: axis scaling, hover lookup and text rendering.

The chart draws either the rolling live buffer or the device-stored history
on a shared x-axis. Each series gets its own vertical scale, so only shapes
and trends are comparable across series, not absolute magnitudes.
"""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from typing import Optional, Sequence

from .canvas import BOLD, DIM, RESET, Canvas, fg
from .formatting import fmt, round_half_up
from .i18n import t
from .models import ChartMode, HistoryPoint, HistoryStatus

# Terminal cells are measured as this many pixels for tick spacing
CELL_WIDTH_PX = 8
# Minimum gap between x-axis labels
TICK_SPACING_PX = {ChartMode.LIVE: 80, ChartMode.API: 40}
MIN_TICKS = 2
MAX_TICKS = 8

# Horizontal grid intervals
GRID_INTERVALS = 4

AREA_CHAR = "░"
PRIMARY_CHAR = "●"
SECONDARY_CHAR = "•"
GRID_CHAR = "┄"
SNAP_CHAR = "┊"
MARKER_CHAR = "◆"
_BACKGROUND = " " + GRID_CHAR
_UNDER_LINES = _BACKGROUND + AREA_CHAR

TOOLTIP_WIDTH = 26


@dataclass(frozen=True)
class Series:
    """One plotted quantity."""

    key: str
    label_key: str
    unit: str
    decimals: int
    primary: bool = False
    floor: float = 0.0

    @property
    def label(self) -> str:
        return t(self.label_key)

    def values(self, points: Sequence[HistoryPoint]) -> list[float]:
        return [getattr(p, self.key) for p in points]


PM25 = Series("pm2p5", "series_pm25", "µg/m³", 1, primary=True, floor=10)
CO2 = Series("co2", "series_co2", "ppm", 0, primary=True, floor=500)

SECONDARY_SERIES = (
    Series("temperature", "series_temperature", "°C", 1, floor=10),
    Series("humidity", "series_humidity", "%", 1, floor=50),
    Series("voc_index", "series_voc", "idx", 0, floor=100),
    Series("nox_index", "series_nox", "idx", 0, floor=10),
    Series("pm1p0", "series_pm1", "µg/m³", 1, floor=5),
)

# Legend and tooltip order
ALL_SERIES = (PM25, CO2) + SECONDARY_SERIES


@dataclass(frozen=True)
class Tick:
    """An x-axis label position."""

    index: int
    x: float
    label: str
    align: str  # "left" | "center" | "right"


# ── Axis scaling ─────────────────────────────────────────────────────


def _round_up(value: float, headroom: float, step: int) -> float:
    """``value * headroom`` rounded up to a multiple of ``step``.

    Saturates at the largest float when the headroom overflows.
    """
    top = value * headroom
    if not math.isfinite(top):
        return sys.float_info.max
    return math.ceil(top / step) * step


def pm_ceiling(values: Sequence[float]) -> float:
    """Top of the PM2.5 scale: 25% headroom in steps of 5, at least 10."""
    return max(10, _round_up(max(values), 1.25, 5))


def co2_ceiling(values: Sequence[float]) -> float:
    """Top of the CO₂ scale: 15% headroom in steps of 50, at least 500."""
    return max(500, _round_up(max(values), 1.15, 50))


def series_ceiling(values: Sequence[float], floor: float) -> float:
    """Top of a secondary scale: max clamped to the floor, 20% headroom, steps of 5."""
    return _round_up(max(max(values), floor), 1.2, 5)


def compute_ceilings(points: Sequence[HistoryPoint]) -> dict[str, float]:
    """Independent ceiling for every series, keyed by series key."""
    ceilings = {
        PM25.key: pm_ceiling(PM25.values(points)),
        CO2.key: co2_ceiling(CO2.values(points)),
    }
    for series in SECONDARY_SERIES:
        ceilings[series.key] = series_ceiling(series.values(points), series.floor)
    return ceilings


# ── Coordinate mapping ───────────────────────────────────────────────


def map_range(value: float, start1: float, stop1: float, start2: float, stop2: float) -> float:
    """Linearly re-map a value from one range to another."""
    return start2 + (stop2 - start2) * ((value - start1) / (stop1 - start1))


def x_span(mode: ChartMode, count: int, capacity: int) -> int:
    """Index range covered by the plot width.

    Live mode spans the whole buffer capacity so the line grows from the
    left; API mode stretches the fetched series across the width.
    """
    if mode is ChartMode.LIVE:
        return max(capacity - 1, 1)
    return max(count - 1, 1)


def x_position(index: float, span: int, left: float, width: float) -> float:
    return map_range(index, 0, span, left, left + width)


def y_position(value: float, ceiling: float, top: float, height: float) -> float:
    return map_range(value, 0, ceiling, top + height, top)


def hover_index(pointer_x: float, left: float, width: float, span: int, count: int) -> int:
    """Data index nearest to a pointer position inside the plot."""
    raw = round_half_up(map_range(pointer_x, left, left + width, 0, span))
    return min(max(raw, 0), count - 1)


def tick_count(plot_width_px: float, mode: ChartMode) -> int:
    return min(max(math.floor(plot_width_px / TICK_SPACING_PX[mode]), MIN_TICKS), MAX_TICKS)


def ticks(
    points: Sequence[HistoryPoint],
    mode: ChartMode,
    span: int,
    left: float,
    width: float,
    plot_width_px: Optional[float] = None,
) -> list[Tick]:
    """Evenly spaced x-axis labels; the first left-aligned, the last right-aligned."""
    count = tick_count(width if plot_width_px is None else plot_width_px, mode)
    result = []
    for i in range(count):
        frac = i / (count - 1)
        idx = min(max(round_half_up(frac * span), 0), len(points) - 1)
        if i == 0:
            align = "left"
        elif i == count - 1:
            align = "right"
        else:
            align = "center"
        result.append(Tick(idx, x_position(idx, span, left, width), points[idx].label, align))
    return result


def tooltip_rows(point: HistoryPoint) -> list[tuple[Series, str]]:
    """Every series' raw value at a point, formatted with its unit."""
    return [
        (series, f"{fmt(getattr(point, series.key), series.decimals)} {series.unit}")
        for series in ALL_SERIES
    ]


def chart_message(mode: ChartMode, status: HistoryStatus, count: int) -> Optional[str]:
    """Status text shown instead of the chart, or None if it can be drawn."""
    if mode is ChartMode.API:
        if status is HistoryStatus.LOADING:
            return t("chart_loading")
        if status is HistoryStatus.ERROR:
            return t("chart_error")
        if status is HistoryStatus.IDLE:
            return t("chart_idle")
    if count < 2:
        return t("chart_collecting")
    return None


# ── Text rendering ───────────────────────────────────────────────────


class TextChart:
    """Draws the chart onto a character canvas.

    ``pointer`` is a plot-relative column standing in for the mouse; when
    set, a snap line, series markers and a value tooltip are drawn.
    """

    def __init__(
        self,
        points: Sequence[HistoryPoint],
        mode: ChartMode,
        capacity: int,
        width: int,
        height: int,
    ) -> None:
        self._points = list(points)
        self._mode = mode
        self._width = width
        self._height = height
        self._span = x_span(mode, len(self._points), capacity)
        self._ceilings = compute_ceilings(self._points)

    @property
    def ceilings(self) -> dict[str, float]:
        return dict(self._ceilings)

    def _col(self, index: float) -> float:
        return x_position(index, self._span, 0, self._width - 1)

    def _row(self, value: float, ceiling: float) -> float:
        row = y_position(value, ceiling, 0, self._height - 1)
        return min(max(row, 0), self._height - 1)

    def _vertices(self, series: Series) -> list[tuple[float, float]]:
        ceiling = self._ceilings[series.key]
        return [
            (self._col(i), self._row(getattr(p, series.key), ceiling))
            for i, p in enumerate(self._points)
        ]

    @staticmethod
    def _trace(vertices: list[tuple[float, float]]) -> list[tuple[int, int]]:
        """Cells covered by straight segments between consecutive vertices."""
        cells: list[tuple[int, int]] = []
        for (x0, y0), (x1, y1) in zip(vertices, vertices[1:]):
            steps = max(abs(round_half_up(x1) - round_half_up(x0)), abs(round_half_up(y1) - round_half_up(y0)), 1)
            for s in range(steps + 1):
                f = s / steps
                cells.append((round_half_up(x0 + (x1 - x0) * f), round_half_up(y0 + (y1 - y0) * f)))
        return cells

    def _draw_grid(self, canvas: Canvas) -> None:
        style = fg("border")
        for i in range(GRID_INTERVALS + 1):
            row = round_half_up(map_range(i, 0, GRID_INTERVALS, self._height - 1, 0))
            for x in range(0, self._width, 2):
                canvas.put(x, row, GRID_CHAR, style)

    def _draw_area(self, canvas: Canvas, series: Series) -> None:
        style = DIM + fg(series.key)
        surface: dict[int, int] = {}
        for x, y in self._trace(self._vertices(series)):
            surface[x] = min(y, surface.get(x, y))
        for x, top in surface.items():
            for y in range(top + 1, self._height):
                canvas.put(x, y, AREA_CHAR, style, only_over=_UNDER_LINES)

    def _draw_line(self, canvas: Canvas, series: Series) -> None:
        char = PRIMARY_CHAR if series.primary else SECONDARY_CHAR
        style = fg(series.key)
        for x, y in self._trace(self._vertices(series)):
            canvas.put(x, y, char, style)

    def _draw_pointer(self, canvas: Canvas, pointer: int) -> int:
        idx = hover_index(pointer, 0, self._width - 1, self._span, len(self._points))
        hx = round_half_up(self._col(idx))
        for y in range(self._height):
            canvas.put(hx, y, SNAP_CHAR, fg("muted"), only_over=_UNDER_LINES)
        point = self._points[idx]
        for series in ALL_SERIES:
            y = round_half_up(self._row(getattr(point, series.key), self._ceilings[series.key]))
            canvas.put(hx, y, MARKER_CHAR, fg(series.key))
        return idx

    def _tooltip_segments(self, index: int) -> list[list[tuple[str, str]]]:
        point = self._points[index]
        inner = TOOLTIP_WIDTH - 4
        border = fg("border")
        rows = [[(f"┌{'─' * (TOOLTIP_WIDTH - 2)}┐", border)]]
        rows.append([("│ ", border), (f"{point.label:<{inner}}", fg("muted")), (" │", border)])
        for series, value in tooltip_rows(point):
            label = series.label[: max(inner - len(value) - 1, 0)]
            gap = inner - len(label) - len(value)
            rows.append([
                ("│ ", border),
                (label, fg(series.key)),
                (" " * gap, ""),
                (value, BOLD),
                (" │", border),
            ])
        rows.append([(f"└{'─' * (TOOLTIP_WIDTH - 2)}┘", border)])
        return rows

    def tooltip_lines(self, index: int) -> list[str]:
        """Boxed tooltip listing every series' value at one data index."""
        return [
            "".join(f"{style}{text}{RESET}" if style else text for text, style in row)
            for row in self._tooltip_segments(index)
        ]

    def _overlay_tooltip(self, canvas: Canvas, hx: int, index: int) -> None:
        x = hx + 2
        if x + TOOLTIP_WIDTH > self._width:
            x = hx - TOOLTIP_WIDTH - 1
        x = max(x, 0)
        for y, row in enumerate(self._tooltip_segments(index)):
            col = x
            for text, style in row:
                canvas.text(col, y, text, style)
                col += len(text)

    def _axis_lines(self) -> list[str]:
        axis = ["─"] * self._width
        labels = [" "] * self._width
        plot_px = self._width * CELL_WIDTH_PX
        seen: set[int] = set()
        last_end = -1
        for tick in ticks(self._points, self._mode, self._span, 0, self._width - 1, plot_px):
            if tick.index in seen:
                continue
            seen.add(tick.index)
            col = round_half_up(tick.x)
            axis[col] = "┬"
            text = tick.label
            if len(text) > self._width:
                continue
            if tick.align == "left":
                start = col
            elif tick.align == "right":
                start = col - len(text) + 1
            else:
                start = col - len(text) // 2
            start = min(max(start, 0), self._width - len(text))
            if start <= last_end:
                continue
            labels[start:start + len(text)] = list(text)
            last_end = start + len(text)
        return [f"{fg('border')}{''.join(axis)}{RESET}", f"{DIM}{''.join(labels)}{RESET}"]

    def render(self, pointer: Optional[int] = None) -> list[str]:
        """Render plot rows plus the x-axis; the tooltip goes below if it does not fit."""
        canvas = Canvas(self._width, self._height)
        self._draw_grid(canvas)
        self._draw_area(canvas, CO2)
        self._draw_line(canvas, CO2)
        self._draw_area(canvas, PM25)
        self._draw_line(canvas, PM25)
        for series in SECONDARY_SERIES:
            self._draw_line(canvas, series)

        extra: list[str] = []
        if pointer is not None:
            pointer = min(max(pointer, 0), self._width - 1)
            index = self._draw_pointer(canvas, pointer)
            hx = round_half_up(self._col(index))
            if self._height >= len(ALL_SERIES) + 3 and self._width >= TOOLTIP_WIDTH + 2:
                self._overlay_tooltip(canvas, hx, index)
            else:
                extra = self.tooltip_lines(index)
        return canvas.lines() + self._axis_lines() + extra


def legend(ceilings: Optional[dict[str, float]] = None) -> str:
    """One-line legend of all series, with scale tops when known."""
    parts = []
    for series in ALL_SERIES:
        label = series.label
        if ceilings and series.key in ceilings:
            label += f" {DIM}0–{ceilings[series.key]:g}{RESET}"
        marker = PRIMARY_CHAR if series.primary else SECONDARY_CHAR
        parts.append(f"{fg(series.key)}{marker}{RESET} {label}")
    return "  ".join(parts)
