"""Periodic and on-demand fetching from the device into the dashboard state."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

from .device import DeviceClient, DeviceError
from .formatting import live_label
from .state import DashboardState

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 2.0


class DevicePoller:
    """Fetches live snapshots on a timer and history on request.

    Every fetch runs as its own task and writes its outcome into the shared
    ``DashboardState``. A new poll does not wait for the previous one; the
    state's request sequence keeps the newest result.
    """

    def __init__(
        self,
        state: DashboardState,
        client: DeviceClient,
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self._state = state
        self._client = client
        self._interval = interval
        self._timer: Optional[asyncio.Task] = None
        self._inflight: set[asyncio.Task] = set()

    @property
    def client(self) -> DeviceClient:
        return self._client

    @property
    def interval(self) -> float:
        return self._interval

    async def start(self) -> None:
        """Open the HTTP session and start the poll timer."""
        await self._client.start()
        self._timer = asyncio.create_task(self._poll_loop(), name="device_poll")
        logger.info("Polling %s every %.1fs", self._client.base_url, self._interval)

    async def stop(self) -> None:
        """Stop the timer, cancel in-flight fetches and close the session."""
        tasks = list(self._inflight)
        if self._timer:
            tasks.append(self._timer)
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._inflight.clear()
        self._timer = None

        await self._client.stop()
        logger.info("Device poller stopped")

    async def _poll_loop(self) -> None:
        while True:
            self.request_live()
            await asyncio.sleep(self._interval)

    def _spawn(self, coro, name: str) -> asyncio.Task:
        task = asyncio.create_task(coro, name=name)
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    def request_live(self) -> asyncio.Task:
        """Fire one live fetch without waiting for it."""
        return self._spawn(self.poll_once(), "device_live")

    def request_history(self) -> asyncio.Task:
        """Fire one history fetch without waiting for it."""
        seq = self._state.begin_history_request()
        return self._spawn(self._load_history(seq), "device_history")

    def set_address(self, address: str) -> None:
        self._client.set_address(address)

    async def poll_once(self) -> bool:
        """Fetch one live snapshot into the state. Returns True on success."""
        seq = self._state.begin_live_request()
        try:
            reading = await self._client.get_live()
        except DeviceError as e:
            logger.warning("Live poll failed: %s", e)
            self._state.apply_live_error(seq)
            return False
        except Exception as e:
            logger.exception("Unexpected error polling device: %s", e)
            self._state.apply_live_error(seq)
            return False

        self._state.apply_live(seq, reading, live_label())
        return True

    async def load_history(self) -> bool:
        """Fetch the device history into the state. Returns True on success."""
        return await self._load_history(self._state.begin_history_request())

    async def _load_history(self, seq: int) -> bool:
        try:
            points = await self._client.get_history()
        except DeviceError as e:
            logger.warning("History fetch failed: %s", e)
            self._state.apply_history_error(seq)
            return False
        except Exception as e:
            logger.exception("Unexpected error fetching history: %s", e)
            self._state.apply_history_error(seq)
            return False

        self._state.apply_history(seq, points)
        logger.info("Loaded %d history entries", len(points))
        return True

    async def download_csv(self, dest_dir: Path) -> Path:
        """Save the device's history CSV; errors propagate to the caller."""
        return await self._client.download_csv(dest_dir)
