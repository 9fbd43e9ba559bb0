"""HTTP client for the air-quality device's local API."""

from __future__ import annotations

import asyncio
import json
import logging
import math
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import aiohttp

from . import __version__
from .formatting import history_label
from .models import READING_FIELDS, HistoryPoint, SensorReading

logger = logging.getLogger(__name__)

USER_AGENT = f"AmbientWatch/{__version__}"

LIVE_PATH = "/api"
HISTORY_PATH = "/api/history"
CSV_PATH = "/api/history/csv"

CSV_CHUNK_SIZE = 64 * 1024


class DeviceError(Exception):
    """A request to the device failed."""


class NetworkFailure(DeviceError):
    """Connection error, timeout, or non-2xx response."""


class ParseFailure(DeviceError):
    """The response body was not the expected JSON."""


def normalize_base_url(address: str) -> str:
    """Turn a user-entered address into a base URL.

    Prefixes ``http://`` unless a scheme is present and strips trailing
    slashes, e.g. ``192.168.1.20/`` -> ``http://192.168.1.20``.
    """
    address = address.strip()
    base = address if "://" in address else f"http://{address}"
    return base.rstrip("/")


def _opt_float(value: Any) -> Optional[float]:
    """Coerce a JSON value to float; None for absent, non-numeric or non-finite values."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        logger.debug("Ignoring non-numeric value: %r", value)
        return None
    if not math.isfinite(result):
        logger.debug("Ignoring non-finite value: %r", value)
        return None
    return result


def parse_reading(data: Any) -> SensorReading:
    """Parse a live snapshot object, keeping absent fields as None."""
    if not isinstance(data, dict):
        raise ParseFailure(f"Expected a JSON object, got {type(data).__name__}")
    timestamp = data.get("timestamp")
    return SensorReading(
        timestamp=str(timestamp) if timestamp is not None else None,
        **{attr: _opt_float(data.get(wire)) for wire, attr in READING_FIELDS.items()},
    )


def parse_history(data: Any) -> list[HistoryPoint]:
    """Parse the stored history array, defaulting absent values to 0."""
    if not isinstance(data, list):
        raise ParseFailure(f"Expected a JSON array, got {type(data).__name__}")
    points = []
    for entry in data:
        if not isinstance(entry, dict):
            raise ParseFailure(f"Expected history entries to be objects, got {type(entry).__name__}")
        values = {attr: _opt_float(entry.get(wire)) for wire, attr in READING_FIELDS.items()}
        points.append(HistoryPoint(
            label=history_label(entry.get("timestamp")),
            **{attr: value if value is not None else 0.0 for attr, value in values.items()},
        ))
    return points


class DeviceClient:
    """Talks to one device address over HTTP.

    No request timeout is set unless ``timeout`` is given; the aiohttp
    client default applies otherwise.
    """

    def __init__(self, address: str, timeout: Optional[float] = None) -> None:
        self._address = address
        self._base_url = normalize_base_url(address)
        self._timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def address(self) -> str:
        return self._address

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def csv_url(self) -> str:
        return f"{self._base_url}{CSV_PATH}"

    def set_address(self, address: str) -> None:
        """Point subsequent requests at a new address."""
        self._address = address
        self._base_url = normalize_base_url(address)
        logger.info("Device address set to %s", self._base_url)

    async def start(self) -> None:
        """Initialize the HTTP session."""
        if self._session is None:
            kwargs: dict[str, Any] = {"headers": {"User-Agent": USER_AGENT}}
            if self._timeout is not None:
                kwargs["timeout"] = aiohttp.ClientTimeout(total=self._timeout)
            self._session = aiohttp.ClientSession(**kwargs)

    async def stop(self) -> None:
        """Close the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def _get_json(self, path: str) -> Any:
        if not self._session:
            await self.start()

        url = f"{self._base_url}{path}"
        try:
            async with self._session.get(url) as response:
                if response.status // 100 != 2:
                    raise NetworkFailure(f"HTTP {response.status} from {url}")
                body = await response.read()
        except asyncio.TimeoutError as e:
            raise NetworkFailure(f"Timeout fetching {url}") from e
        except aiohttp.ClientError as e:
            raise NetworkFailure(f"{url}: {e}") from e

        try:
            return json.loads(body)
        except ValueError as e:
            raise ParseFailure(f"Malformed JSON from {url}: {e}") from e

    async def get_live(self) -> SensorReading:
        """Fetch the current snapshot."""
        reading = parse_reading(await self._get_json(LIVE_PATH))
        logger.debug("Live reading from %s: %s", self._base_url, reading)
        return reading

    async def get_history(self) -> list[HistoryPoint]:
        """Fetch the device-stored history."""
        points = parse_history(await self._get_json(HISTORY_PATH))
        logger.debug("Fetched %d history entries from %s", len(points), self._base_url)
        return points

    async def download_csv(self, dest_dir: Path) -> Path:
        """Save the device's history CSV into ``dest_dir`` unparsed."""
        if not self._session:
            await self.start()

        dest_dir.mkdir(parents=True, exist_ok=True)
        path = dest_dir / f"ambient-history-{datetime.now().strftime('%Y%m%d-%H%M%S')}.csv"
        # Streamed into a side file, renamed only once complete
        partial = path.with_name(path.name + ".part")
        try:
            await self._stream_to(self.csv_url, partial)
        except BaseException:
            partial.unlink(missing_ok=True)
            raise
        partial.replace(path)

        logger.info("Saved history CSV to %s", path)
        return path

    async def _stream_to(self, url: str, path: Path) -> None:
        try:
            async with self._session.get(url) as response:
                if response.status // 100 != 2:
                    raise NetworkFailure(f"HTTP {response.status} from {url}")
                with open(path, "wb") as f:
                    async for chunk in response.content.iter_chunked(CSV_CHUNK_SIZE):
                        f.write(chunk)
        except asyncio.TimeoutError as e:
            raise NetworkFailure(f"Timeout fetching {url}") from e
        except aiohttp.ClientError as e:
            raise NetworkFailure(f"{url}: {e}") from e
