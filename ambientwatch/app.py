"""Main application coordinator."""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import Optional

from .console import ConsoleReporter
from .controller import InputController
from .device import DeviceClient
from .models import AppConfig
from .poller import DevicePoller
from .state import DashboardState
from .tui import TuiDashboard

logger = logging.getLogger(__name__)


class AmbientWatchApp:
    """Main application that coordinates the poller and the UI."""

    def __init__(
        self,
        config: AppConfig,
        console_interval: Optional[int] = None,
    ) -> None:
        self._config = config
        self._console_interval = console_interval
        self._state: Optional[DashboardState] = None
        self._poller: Optional[DevicePoller] = None
        self._controller: Optional[InputController] = None
        self._tui: Optional[TuiDashboard] = None
        self._console: Optional[ConsoleReporter] = None
        self._running = False
        self._shutdown_event: Optional[asyncio.Event] = None

    @property
    def state(self) -> Optional[DashboardState]:
        return self._state

    async def start(self) -> None:
        """Start all components."""
        device = self._config.device
        logger.info("Starting AmbientWatch for %s...", device.address)

        self._state = DashboardState(device.address, history_size=device.history_size)
        client = DeviceClient(device.address, timeout=device.request_timeout)
        self._poller = DevicePoller(self._state, client, interval=device.poll_interval)
        self._controller = InputController(
            self._state, self._poller, download_dir=self._config.download_dir,
        )

        await self._poller.start()

        if self._console_interval is not None:
            self._console = ConsoleReporter(self._state, interval=self._console_interval)
            await self._console.start()
        else:
            self._tui = TuiDashboard(self._state, self._controller)
            await self._tui.start()

        self._running = True
        logger.info("AmbientWatch started successfully")

    async def stop(self) -> None:
        """Stop all components."""
        if not self._running:
            return

        logger.info("Stopping AmbientWatch...")
        self._running = False

        # UI first, then the poller and its HTTP session
        if self._tui:
            await self._tui.stop()

        if self._console:
            await self._console.stop()

        if self._poller:
            await self._poller.stop()

        logger.info("AmbientWatch stopped")

    async def run(self) -> None:
        """Run the application until shutdown signal."""
        self._shutdown_event = asyncio.Event()

        loop = asyncio.get_running_loop()

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(
                sig,
                lambda: asyncio.create_task(self._handle_shutdown()),
            )

        try:
            await self.start()
            await self._shutdown_event.wait()
        finally:
            await self.stop()

    async def _handle_shutdown(self) -> None:
        """Handle shutdown signal."""
        logger.info("Shutdown signal received")
        self._shutdown_event.set()
