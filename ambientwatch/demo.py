"""Demo mode: a fake air-quality device served locally with aiohttp."""

from __future__ import annotations

import csv
import io
import logging
import math
import random
from datetime import datetime, timedelta
from typing import Optional

from aiohttp import web

from .models import AppConfig

logger = logging.getLogger(__name__)

# One stored entry per minute for the last four hours
HISTORY_POINTS = 240
HISTORY_STEP = timedelta(minutes=1)

# ── Demo sensor profiles ─────────────────────────────────────────────
# wire name: (base, daily amplitude, phase, noise, decimals)

PROFILES = {
    "pm2p5": (9.0, 6.0, 0.0, 1.2, 1),
    "co2": (780.0, 320.0, 1.2, 25.0, 0),
    "temperature": (21.5, 1.4, -0.6, 0.1, 1),
    "humidity": (44.0, 6.0, 0.8, 0.6, 1),
    "vocIndex": (110.0, 45.0, 1.5, 6.0, 0),
    "noxIndex": (6.0, 4.0, 2.0, 1.0, 0),
    "pm1p0": (5.5, 3.5, 0.1, 0.8, 1),
}

CSV_COLUMNS = ["timestamp"] + list(PROFILES)


def _sinusoidal(rng: random.Random, base: float, amplitude: float, phase: float, noise: float, hours: float) -> float:
    """Daily sinusoid around a base value with gaussian noise, never negative."""
    value = base + amplitude * math.sin(2 * math.pi * hours / 24.0 + phase) + rng.gauss(0, noise)
    return max(value, 0.0)


class DemoDevice:
    """Serves ``/api``, ``/api/history`` and ``/api/history/csv`` with synthetic data."""

    def __init__(self, seed: Optional[int] = 42) -> None:
        self._rng = random.Random(seed)
        self._runner: Optional[web.AppRunner] = None
        self.requests: dict[str, int] = {"live": 0, "history": 0, "csv": 0}

    def _values(self, moment: datetime) -> dict:
        hours = moment.hour + moment.minute / 60 + moment.second / 3600
        values = {}
        for name, (base, amplitude, phase, noise, decimals) in PROFILES.items():
            value = _sinusoidal(self._rng, base, amplitude, phase, noise, hours)
            values[name] = round(value, decimals) if decimals else int(round(value))
        return values

    def reading(self, now: Optional[datetime] = None) -> dict:
        """Current snapshot in the device's wire format."""
        now = now or datetime.now()
        payload = {"timestamp": now.strftime("%Y-%m-%d %H:%M:%S")}
        payload.update(self._values(now))
        return payload

    def history(self, now: Optional[datetime] = None) -> list[dict]:
        """Stored readings, oldest first, with epoch-millisecond timestamps."""
        now = now or datetime.now()
        entries = []
        for i in range(HISTORY_POINTS):
            moment = now - HISTORY_STEP * (HISTORY_POINTS - 1 - i)
            entry = {"timestamp": int(moment.timestamp() * 1000)}
            entry.update(self._values(moment))
            entries.append(entry)
        return entries

    def history_csv(self, now: Optional[datetime] = None) -> str:
        buf = io.StringIO()
        writer = csv.DictWriter(buf, fieldnames=CSV_COLUMNS)
        writer.writeheader()
        for entry in self.history(now):
            row = dict(entry)
            row["timestamp"] = datetime.fromtimestamp(entry["timestamp"] / 1000).isoformat(timespec="seconds")
            writer.writerow(row)
        return buf.getvalue()

    # ── HTTP handlers ─────────────────────────────────────────────────

    async def _handle_live(self, request: web.Request) -> web.Response:
        self.requests["live"] += 1
        return web.json_response(self.reading())

    async def _handle_history(self, request: web.Request) -> web.Response:
        self.requests["history"] += 1
        return web.json_response(self.history())

    async def _handle_csv(self, request: web.Request) -> web.Response:
        self.requests["csv"] += 1
        return web.Response(
            text=self.history_csv(),
            content_type="text/csv",
            headers={"Content-Disposition": 'attachment; filename="history.csv"'},
        )

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/api", self._handle_live)
        app.router.add_get("/api/history", self._handle_history)
        app.router.add_get("/api/history/csv", self._handle_csv)
        return app

    async def start(self, host: str = "127.0.0.1", port: int = 0) -> str:
        """Start serving; returns the ``host:port`` address to connect to."""
        self._runner = web.AppRunner(self.make_app())
        await self._runner.setup()
        site = web.TCPSite(self._runner, host, port)
        await site.start()
        bound_host, bound_port = self._runner.addresses[0][:2]
        address = f"{bound_host}:{bound_port}"
        logger.info("Demo device listening on %s", address)
        return address

    async def stop(self) -> None:
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            logger.info("Demo device stopped")


async def run_demo(config: AppConfig, console_interval: Optional[int] = None) -> None:
    """Run the dashboard against a local demo device."""
    from .app import AmbientWatchApp

    device = DemoDevice()
    config.device.address = await device.start()
    try:
        await AmbientWatchApp(config, console_interval=console_interval).run()
    finally:
        await device.stop()
