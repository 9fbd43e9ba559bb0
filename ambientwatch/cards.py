"""Metric cards for the current live reading."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .formatting import PLACEHOLDER, Badge, co2_level, fmt, pm_aqi
from .i18n import t
from .models import SensorReading


@dataclass(frozen=True)
class Card:
    """Display strings for one metric."""

    key: str
    label: str
    value: str
    unit: str
    badge: Optional[Badge] = None

    @property
    def is_placeholder(self) -> bool:
        return self.value == PLACEHOLDER


def build_cards(reading: Optional[SensorReading]) -> tuple[list[Card], list[Card]]:
    """Return the two card rows for a reading (or placeholders without one)."""
    r = reading or SensorReading()
    top = [
        Card("pm2p5", t("card_pm25"), fmt(r.pm2p5), "µg/m³", pm_aqi(r.pm2p5)),
        Card("co2", t("card_co2"), fmt(r.co2, 0), "ppm", co2_level(r.co2)),
        Card("temperature", t("card_temperature"), fmt(r.temperature), "°C"),
        Card("humidity", t("card_humidity"), fmt(r.humidity), "%"),
    ]
    bottom = [
        Card("voc_index", t("card_voc"), fmt(r.voc_index, 0), "idx"),
        Card("nox_index", t("card_nox"), fmt(r.nox_index, 0), "idx"),
        Card("pm1p0", t("card_pm1"), fmt(r.pm1p0), "µg/m³"),
    ]
    return top, bottom
