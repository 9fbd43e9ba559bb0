"""Console reporter for printing readings without the TUI."""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import datetime
from typing import Optional

from .cards import build_cards
from .i18n import t
from .models import ConnectionStatus
from .state import DashboardState

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 10


class ConsoleReporter:
    """Prints the current reading as a table.

    Supports two modes:
    - Timed mode (interval > 0): prints automatically every N seconds
    - Keypress mode (interval == 0): prints when Enter is pressed
    """

    def __init__(
        self,
        state: DashboardState,
        interval: int = DEFAULT_INTERVAL_SECONDS,
    ) -> None:
        self._state = state
        self._interval = interval
        self._running = False
        self._task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        """Start the console reporter."""
        self._running = True

        if self._interval == 0:
            self._task = asyncio.create_task(self._run_keypress(), name="console_reporter")
            logger.info("Console reporter started (keypress mode)")
        else:
            self._task = asyncio.create_task(self._run_timed(), name="console_reporter")
            logger.info("Console reporter started (every %ds)", self._interval)

    async def stop(self) -> None:
        """Stop the console reporter."""
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

    async def _run_timed(self) -> None:
        """Print readings at a fixed interval."""
        await asyncio.sleep(3)  # Wait for initial data

        while self._running:
            try:
                print(self.format_report())
            except Exception as e:
                logger.warning("Console reporter error: %s", e)

            await asyncio.sleep(self._interval)

    async def _run_keypress(self) -> None:
        """Print readings when Enter is pressed."""
        print(t("console_press_enter"))

        loop = asyncio.get_running_loop()
        event = asyncio.Event()

        def _on_stdin() -> None:
            sys.stdin.readline()
            event.set()

        try:
            loop.add_reader(sys.stdin, _on_stdin)
        except NotImplementedError:
            # Fallback for platforms without add_reader (e.g. Windows)
            logger.warning("Keypress mode not supported on this platform, using %ds interval",
                           DEFAULT_INTERVAL_SECONDS)
            self._interval = DEFAULT_INTERVAL_SECONDS
            await self._run_timed()
            return

        while self._running:
            event.clear()
            await event.wait()
            if self._running:
                try:
                    print(self.format_report())
                except Exception as e:
                    logger.warning("Console reporter error: %s", e)

    def format_report(self, now: Optional[datetime] = None) -> str:
        """Format the current reading as a metric/value table."""
        now = now or datetime.now()
        stamp = now.strftime("%H:%M:%S")
        state = self._state

        if state.connection is ConnectionStatus.ERROR:
            return f"\n[{stamp}] {t('console_connection_error', address=state.address)}"
        if state.reading is None:
            return f"\n[{stamp}] {t('console_no_data_yet')}"

        top, bottom = build_cards(state.reading)
        rows = []
        for card in top + bottom:
            value = f"{card.value} {card.unit}"
            badge = card.badge.label if card.badge else ""
            rows.append((card.label, value, badge))

        col_metric = t("console_col_metric")
        col_value = t("console_col_value")
        col_level = t("console_col_level")

        name_w = max(max(len(r[0]) for r in rows), len(col_metric))
        value_w = max(max(len(r[1]) for r in rows), len(col_value))

        header = f"{col_metric:<{name_w}}  {col_value:>{value_w}}  {col_level}"
        separator = "-" * max(len(header), name_w + value_w + 12)

        title = t("console_header", address=state.address)
        if state.reading.timestamp:
            title += f" ({t('tui_updated', timestamp=state.reading.timestamp)})"

        lines = [
            "",
            f"[{stamp}] {title}",
            separator,
            header,
            separator,
        ]
        for name, value, badge in rows:
            lines.append(f"{name:<{name_w}}  {value:>{value_w}}  {badge}".rstrip())
        lines.append(separator)
        return "\n".join(lines)
