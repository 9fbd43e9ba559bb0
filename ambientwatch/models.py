"""Data models for AmbientWatch."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


class ConnectionStatus(Enum):
    """Outcome of the most recent live poll."""

    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


class HistoryStatus(Enum):
    """Load status of the device-stored history."""

    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class ChartMode(Enum):
    """Which dataset the chart reads."""

    LIVE = "live"
    API = "api"


# Wire name -> attribute name
READING_FIELDS = {
    "pm2p5": "pm2p5",
    "co2": "co2",
    "temperature": "temperature",
    "humidity": "humidity",
    "vocIndex": "voc_index",
    "noxIndex": "nox_index",
    "pm1p0": "pm1p0",
}


@dataclass
class SensorReading:
    """A live snapshot from the device. Absent fields stay None."""

    timestamp: Optional[str] = None
    pm2p5: Optional[float] = None
    co2: Optional[float] = None
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    voc_index: Optional[float] = None
    nox_index: Optional[float] = None
    pm1p0: Optional[float] = None


@dataclass
class HistoryPoint:
    """A normalized chart entry. Missing values are stored as 0."""

    label: str
    pm2p5: float = 0.0
    co2: float = 0.0
    temperature: float = 0.0
    humidity: float = 0.0
    voc_index: float = 0.0
    nox_index: float = 0.0
    pm1p0: float = 0.0

    @classmethod
    def from_reading(cls, reading: SensorReading, label: str) -> HistoryPoint:
        """Build a point from a live reading, defaulting absent values to 0."""
        return cls(
            label=label,
            **{
                attr: getattr(reading, attr) or 0.0
                for attr in READING_FIELDS.values()
            },
        )


@dataclass
class DeviceConfig:
    """Device connection configuration."""

    address: str = "ambient.local"
    poll_interval: float = 2.0
    history_size: int = 120
    request_timeout: Optional[float] = None


@dataclass
class AppConfig:
    """Application configuration."""

    device: DeviceConfig = field(default_factory=DeviceConfig)
    language: str = "en"
    download_dir: Path = field(default_factory=lambda: Path("."))
