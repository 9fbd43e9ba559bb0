"""ANSI TUI dashboard: header, metric cards and the history chart."""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import shutil
import sys
from pathlib import Path
from typing import Optional

try:
    import termios
    import tty
    _HAS_TERMIOS = True
except ImportError:
    _HAS_TERMIOS = False

from . import __version__
from .canvas import (
    BOLD,
    CLEAR_SCREEN,
    DIM,
    HIDE_CURSOR,
    RESET,
    REVERSE,
    SHOW_CURSOR,
    center,
    fg,
    pad,
    visible_len,
)
from .cards import Card, build_cards
from .chart import TextChart, chart_message, legend
from .controller import InputController
from .i18n import t
from .models import ChartMode, ConnectionStatus, HistoryStatus
from .state import DashboardState

logger = logging.getLogger(__name__)

# Redraw interval (seconds)
RENDER_INTERVAL = 0.5

MAX_COLS = 160
MIN_CHART_HEIGHT = 6
CARD_HEIGHT = 4
# Header, card rows, chart title + legend, axis rows and footer
_FIXED_ROWS = 3 + 2 * CARD_HEIGHT + 3 + 2 + 4

# Keys that execute instantly without Enter
_INSTANT_KEYS = frozenset("qlarx,.<>")
# Keys that start input mode (may need arguments, confirmed with Enter)
_INPUT_KEYS = frozenset("cd")

POINTER_STEP = 1
POINTER_JUMP = 10

_CONNECTION_STYLE = {
    ConnectionStatus.CONNECTED: ("ok", "status_connected"),
    ConnectionStatus.ERROR: ("danger", "status_error"),
    ConnectionStatus.CONNECTING: ("warn", "status_connecting"),
}


class TuiDashboard:
    """Terminal dashboard for one device.

    Instant keys (no Enter needed):
      q          - quit
      l          - live chart (rolling buffer)
      a          - API history chart (fetches device history)
      r          - retry / refresh (history in API mode, a poll in live mode)
      , .        - move the chart pointer one column left / right
      < >        - move the chart pointer ten columns
      x          - hide the chart pointer
      Enter      - redraw

    Input mode (type + Enter, ESC to cancel, Backspace to edit):
      c <address> - connect to a device (empty = reconnect)
      d [dir]     - download the device history as CSV
    """

    def __init__(
        self,
        state: DashboardState,
        controller: InputController,
    ) -> None:
        self._state = state
        self._controller = controller
        self._running = False
        self._task: Optional[asyncio.Task] = None

        # Pending async actions (set by sync command handler, executed in async loop)
        self._pending_download: Optional[Path] = None
        self._download_requested = False

        self._pointer: Optional[int] = None  # plot-relative column
        self._plot_width = 0
        self._status_msg: Optional[str] = None  # one-shot feedback message
        self._input_mode = False  # True when building a command line
        self._input_buffer = ""   # Accumulated input in input mode
        self._old_term_settings = None  # Saved terminal settings for cbreak restore

    async def start(self) -> None:
        """Start the TUI dashboard."""
        self._running = True
        self._task = asyncio.create_task(self._run(), name="tui_dashboard")
        logger.info("TUI dashboard started")

    def _restore_terminal(self) -> None:
        """Restore terminal settings from cbreak mode."""
        if self._old_term_settings is not None:
            try:
                termios.tcsetattr(sys.stdin, termios.TCSADRAIN, self._old_term_settings)
                self._old_term_settings = None
            except (termios.error, OSError):
                pass

    async def stop(self) -> None:
        """Stop the TUI dashboard."""
        self._running = False

        try:
            loop = asyncio.get_running_loop()
            loop.remove_reader(sys.stdin)
        except (ValueError, NotImplementedError):
            pass

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        self._restore_terminal()

        sys.stdout.write(SHOW_CURSOR)
        sys.stdout.flush()

    async def _run(self) -> None:
        """Main loop: redraw on a timer and on input."""
        loop = asyncio.get_running_loop()
        input_event = asyncio.Event()
        input_cmd = ""
        quit_requested = False

        cbreak_ok = False
        if _HAS_TERMIOS and sys.stdin.isatty():
            try:
                self._old_term_settings = termios.tcgetattr(sys.stdin)
                tty.setcbreak(sys.stdin.fileno())
                cbreak_ok = True
            except (termios.error, OSError):
                self._old_term_settings = None

        if cbreak_ok:
            def _on_stdin() -> None:
                nonlocal input_cmd, quit_requested
                ch = sys.stdin.read(1)
                if not ch:
                    return

                if not self._input_mode:
                    key = ch.lower()
                    if ch == "\n":
                        input_cmd = ""
                        input_event.set()
                    elif key == "q":
                        quit_requested = True
                        input_event.set()
                    elif key in _INSTANT_KEYS:
                        input_cmd = key
                        input_event.set()
                    elif key in _INPUT_KEYS:
                        self._input_mode = True
                        self._input_buffer = key
                        self._render()
                else:
                    if ch == "\n":
                        input_cmd = self._input_buffer
                        self._input_mode = False
                        self._input_buffer = ""
                        input_event.set()
                    elif ch == "\x1b":
                        self._input_mode = False
                        self._input_buffer = ""
                        self._render()
                    elif ch in ("\x7f", "\b"):
                        if len(self._input_buffer) > 1:
                            self._input_buffer = self._input_buffer[:-1]
                        else:
                            self._input_mode = False
                            self._input_buffer = ""
                        self._render()
                    elif ch >= " ":
                        self._input_buffer += ch
                        self._render()
        else:
            # Fallback: readline-based input (no cbreak support)
            def _on_stdin() -> None:
                nonlocal input_cmd, quit_requested
                line = sys.stdin.readline().strip()
                input_cmd = line
                if line.lower() in ("q", "quit"):
                    quit_requested = True
                input_event.set()

        try:
            loop.add_reader(sys.stdin, _on_stdin)
        except NotImplementedError:
            pass

        sys.stdout.write(HIDE_CURSOR)
        sys.stdout.flush()

        try:
            while self._running:
                self._render()
                input_event.clear()

                try:
                    await asyncio.wait_for(input_event.wait(), timeout=RENDER_INTERVAL)
                except asyncio.TimeoutError:
                    continue

                if quit_requested:
                    self._running = False
                    os.kill(os.getpid(), signal.SIGINT)
                    return

                self.handle_command(input_cmd)
                input_cmd = ""

                if self._download_requested:
                    self._download_requested = False
                    dest = self._pending_download
                    self._pending_download = None
                    self._status_msg = t("tui_download_started", url=self._controller.csv_url)
                    self._render()
                    path, error = await self._controller.try_download(dest)
                    if path:
                        self._status_msg = t("tui_download_saved", path=path)
                    else:
                        self._status_msg = t("tui_download_failed", error=error)
        finally:
            self._restore_terminal()

    # ── Command handling ──────────────────────────────────────────────

    def handle_command(self, line: str) -> None:
        """Parse and execute a user command."""
        self._status_msg = None
        parts = line.split(maxsplit=1)

        if not parts:
            return

        cmd = parts[0].lower()
        arg = parts[1].strip() if len(parts) > 1 else ""

        if cmd == "l":
            self._controller.select_mode(ChartMode.LIVE)
            self._pointer = None
            return

        if cmd == "a":
            already = (
                self._state.chart_mode is ChartMode.API
                and self._state.api_history.status is HistoryStatus.LOADED
            )
            self._controller.select_mode(ChartMode.API)
            self._pointer = None
            if already:
                self._status_msg = t("tui_history_refresh_hint")
            return

        if cmd == "r":
            if self._state.chart_mode is ChartMode.API:
                if self._controller.refresh_history() is None:
                    self._status_msg = t("tui_history_busy")
            else:
                self._controller.poll_now()
            return

        if cmd == "c":
            self._controller.connect(arg)
            self._pointer = None
            self._status_msg = t("tui_connecting_to", address=self._state.address)
            return

        if cmd == "d":
            self._pending_download = Path(arg).expanduser() if arg else None
            self._download_requested = True
            return

        if cmd == "x":
            self._pointer = None
            return

        if cmd in (",", ".", "<", ">"):
            self._move_pointer(cmd)
            return

        self._status_msg = t("tui_unknown_command", cmd=cmd)

    def _move_pointer(self, key: str) -> None:
        """Move the chart pointer; the first press places it at the right edge."""
        width = max(self._plot_width, 1)
        if self._pointer is None:
            self._pointer = width - 1
            return
        step = POINTER_JUMP if key in "<>" else POINTER_STEP
        delta = -step if key in ",<" else step
        self._pointer = min(max(self._pointer + delta, 0), width - 1)

    # ── Rendering ─────────────────────────────────────────────────────

    def _render(self) -> None:
        """Render the whole screen."""
        size = shutil.get_terminal_size()
        try:
            lines = self.render_lines(size.columns, size.lines)
        except Exception as e:
            # Keep the loop alive; the next frame may render
            logger.exception("TUI render error: %s", e)
            return
        output = CLEAR_SCREEN + "\n".join(lines) + "\n"
        sys.stdout.write(output)
        sys.stdout.flush()

    def render_lines(self, columns: int, rows: int) -> list[str]:
        """Build the screen for a terminal size."""
        cols = min(columns, MAX_COLS)
        lines: list[str] = []
        self._render_header(lines, cols)
        self._render_cards(lines, cols)
        chart_height = max(rows - _FIXED_ROWS, MIN_CHART_HEIGHT)
        self._render_chart(lines, cols, chart_height)
        self._render_footer(lines, cols)
        return lines

    def _render_header(self, lines: list[str], cols: int) -> None:
        title = f"AmbientWatch v{__version__}"
        subtitle = t("tui_subtitle")
        color, label_key = _CONNECTION_STYLE[self._state.connection]
        status = f"{fg(color)}●{RESET} {t(label_key)}"

        left = f"{BOLD}{title}{RESET}  {DIM}{subtitle}{RESET}"
        padding = cols - visible_len(left) - visible_len(status)
        lines.append(f"{left}{' ' * max(padding, 2)}{status}")

        details = f"{t('tui_device')}: {self._controller.base_url}"
        reading = self._state.reading
        if reading and reading.timestamp:
            details += f"   {t('tui_updated', timestamp=reading.timestamp)}"
        lines.append(f"{DIM}{details}{RESET}")
        lines.append("=" * cols)

    def _card_box(self, card: Card, width: int) -> list[str]:
        inner = width - 2
        accent = fg(card.key)
        top = f"{accent}┌{'━' * inner}┐{RESET}"
        label = f"{fg('muted')}{card.label.upper()[: inner - 2]}{RESET}"

        value_style = fg("muted") if card.is_placeholder else BOLD
        value = f"{value_style}{card.value}{RESET} {fg('muted')}{card.unit}{RESET}"
        if card.badge:
            badge = f"{fg(card.badge.level)}[{card.badge.label.upper()}]{RESET}"
            gap = inner - 2 - visible_len(value) - visible_len(badge)
            if gap >= 1:
                value = f"{value}{' ' * gap}{badge}"

        return [
            top,
            f"│ {pad(label, inner - 2)} │",
            f"│ {pad(value, inner - 2)} │",
            f"└{'─' * inner}┘",
        ]

    def _render_card_row(self, lines: list[str], cols: int, cards: list[Card]) -> None:
        gap = 1
        width = (cols - gap * (len(cards) - 1)) // len(cards)
        boxes = [self._card_box(card, width) for card in cards]
        for row in range(CARD_HEIGHT):
            lines.append((" " * gap).join(box[row] for box in boxes))

    def _render_cards(self, lines: list[str], cols: int) -> None:
        top, bottom = build_cards(self._state.reading)
        self._render_card_row(lines, cols, top)
        self._render_card_row(lines, cols, bottom)

    def _mode_toggle(self) -> str:
        parts = []
        for mode, key in ((ChartMode.LIVE, "tui_mode_live"), (ChartMode.API, "tui_mode_api")):
            label = f" {t(key)} "
            if self._state.chart_mode is mode:
                parts.append(f"{REVERSE}{fg('accent')}{label}{RESET}")
            else:
                parts.append(f"{DIM}{label}{RESET}")
        return " ".join(parts)

    def _render_chart(self, lines: list[str], cols: int, height: int) -> None:
        state = self._state
        mode = state.chart_mode
        points = state.active_points()

        title = t("chart_title")
        if mode is ChartMode.API and state.api_history.status is HistoryStatus.LOADED:
            title += f"  •  {t('chart_readings', n=len(points))}"
        toggle = self._mode_toggle()
        padding = cols - visible_len(title) - visible_len(toggle)
        lines.append(f"{fg('muted')}{title}{RESET}{' ' * max(padding, 2)}{toggle}")

        plot_width = cols - 4
        self._plot_width = plot_width
        message = chart_message(mode, state.api_history.status, len(points))
        if message:
            lines.append("")
            style = fg("danger") if mode is ChartMode.API and state.api_history.status is HistoryStatus.ERROR else DIM
            for row in range(height + 2):
                if row == height // 2:
                    lines.append(f"  {style}{center(message, plot_width)}{RESET}")
                else:
                    lines.append("")
            return

        chart = TextChart(points, mode, state.history.capacity, plot_width, height)
        lines.append(f"  {legend(chart.ceilings)}")
        for row in chart.render(self._pointer):
            lines.append(f"  {row}")

    def _render_footer(self, lines: list[str], cols: int) -> None:
        """Render common footer with status message and help."""
        lines.append("=" * cols)

        if self._status_msg:
            lines.append(f"  {fg('warn')}{self._status_msg}{RESET}")

        if self._input_mode:
            lines.append(f"  > {self._input_buffer}█")
            return

        cmds = [
            t("tui_cmd_connect"),
            t("tui_cmd_live"),
            t("tui_cmd_api"),
            t("tui_cmd_refresh"),
            t("tui_cmd_pointer"),
            t("tui_cmd_download"),
            t("tui_cmd_quit"),
        ]
        lines.append(f"  {DIM}{'  '.join(cmds)}{RESET}")
