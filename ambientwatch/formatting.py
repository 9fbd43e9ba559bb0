"""Shared formatting and utility functions for all UI modules."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any, Optional

from .i18n import t

PLACEHOLDER = "--"

# Enough digits for any finite float at fixed point
_FMT_CONTEXT = Context(prec=400)

# Badge levels map to palette colors
LEVEL_OK = "ok"
LEVEL_WARN = "warn"
LEVEL_DANGER = "danger"


@dataclass(frozen=True)
class Badge:
    """Qualitative level shown next to a metric value."""

    label: str
    level: str


def fmt(value: Optional[float], decimals: int = 1) -> str:
    """Format a reading with fixed decimals, or the placeholder if absent.

    Ties round away from zero on the exact binary value, so 0.25 gives
    "0.3" while 1.005 (stored just below) gives "1.00" at two decimals.
    """
    if value is None:
        return PLACEHOLDER
    number = float(value)
    if not math.isfinite(number):
        return PLACEHOLDER
    step = Decimal(1).scaleb(-decimals)
    return str(Decimal(number).quantize(step, rounding=ROUND_HALF_UP, context=_FMT_CONTEXT))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


def pm_aqi(pm: Optional[float]) -> Optional[Badge]:
    """Classify PM2.5 (µg/m³) into a three-tier air quality badge."""
    if pm is None:
        return None
    if pm < 12:
        return Badge(t("level_good"), LEVEL_OK)
    if pm < 35:
        return Badge(t("level_moderate"), LEVEL_WARN)
    return Badge(t("level_unhealthy"), LEVEL_DANGER)


def co2_level(co2: Optional[float]) -> Optional[Badge]:
    """Classify CO₂ (ppm) into a three-tier ventilation badge."""
    if co2 is None:
        return None
    if co2 < 800:
        return Badge(t("level_good"), LEVEL_OK)
    if co2 < 1500:
        return Badge(t("level_moderate"), LEVEL_WARN)
    return Badge(t("level_high"), LEVEL_DANGER)


def live_label(now: Optional[datetime] = None) -> str:
    """Time label for a live reading: local arrival time with seconds."""
    return (now or datetime.now()).strftime("%H:%M:%S")


def history_label(timestamp: Any) -> str:
    """Time label for a stored reading: local HH:MM from epoch or ISO-8601.

    Numbers above 1e11 are taken as epoch milliseconds, smaller ones as
    epoch seconds. Unparseable values give the placeholder.
    """
    if timestamp is None or isinstance(timestamp, bool):
        return PLACEHOLDER
    try:
        if isinstance(timestamp, (int, float)):
            seconds = timestamp / 1000 if timestamp > 1e11 else timestamp
            moment = datetime.fromtimestamp(seconds)
        else:
            text = str(timestamp).strip()
            if text.replace(".", "", 1).isdigit():
                return history_label(float(text))
            moment = datetime.fromisoformat(text.replace("Z", "+00:00"))
            if moment.tzinfo is not None:
                moment = moment.astimezone()
    except (ValueError, OverflowError, OSError):
        return PLACEHOLDER
    return moment.strftime("%H:%M")
