"""User actions: connect to an address, switch chart mode, download data."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

from .device import DeviceError
from .models import ChartMode, HistoryStatus
from .poller import DevicePoller
from .state import DashboardState

logger = logging.getLogger(__name__)


class InputController:
    """Translates user input into state resets and fetch requests."""

    def __init__(self, state: DashboardState, poller: DevicePoller, download_dir: Path = Path(".")) -> None:
        self._state = state
        self._poller = poller
        self._download_dir = download_dir

    @property
    def base_url(self) -> str:
        return self._poller.client.base_url

    @property
    def csv_url(self) -> str:
        return self._poller.client.csv_url

    def connect(self, text: str) -> asyncio.Task:
        """Connect to the entered address, clearing all collected data.

        Empty input reconnects to the current address. One live fetch is
        triggered immediately.
        """
        address = text.strip() or self._state.address
        self._poller.set_address(address)
        self._state.reset(address)
        logger.info("Connecting to %s", address)
        return self._poller.request_live()

    def poll_now(self) -> asyncio.Task:
        """Fetch a live snapshot now instead of waiting for the timer."""
        return self._poller.request_live()

    def select_mode(self, mode: ChartMode) -> Optional[asyncio.Task]:
        """Switch the chart dataset.

        Switching to API mode fetches the device history unless it is
        already loaded or loading.
        """
        self._state.chart_mode = mode
        if mode is ChartMode.API and self._state.api_history.status not in (
            HistoryStatus.LOADED,
            HistoryStatus.LOADING,
        ):
            return self._poller.request_history()
        return None

    def toggle_mode(self) -> Optional[asyncio.Task]:
        if self._state.chart_mode is ChartMode.LIVE:
            return self.select_mode(ChartMode.API)
        return self.select_mode(ChartMode.LIVE)

    def refresh_history(self) -> Optional[asyncio.Task]:
        """Refetch the device history in API mode, unless a fetch is running."""
        if self._state.chart_mode is not ChartMode.API:
            return None
        if self._state.api_history.status is HistoryStatus.LOADING:
            return None
        return self._poller.request_history()

    async def download(self, dest_dir: Optional[Path] = None) -> Path:
        """Save the device's history CSV, raising DeviceError or OSError on failure."""
        return await self._poller.download_csv(dest_dir or self._download_dir)

    async def try_download(self, dest_dir: Optional[Path] = None) -> tuple[Optional[Path], Optional[str]]:
        """Download the CSV, returning (path, None) or (None, error text)."""
        try:
            return await self.download(dest_dir), None
        except (DeviceError, OSError) as e:
            logger.warning("CSV download failed: %s", e)
            return None, str(e)
