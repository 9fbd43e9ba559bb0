"""Tests for metric card contents."""

from ambientwatch.cards import build_cards
from ambientwatch.formatting import LEVEL_DANGER, LEVEL_OK
from ambientwatch.models import SensorReading


def test_placeholders_without_reading():
    top, bottom = build_cards(None)
    assert len(top) == 4
    assert len(bottom) == 3
    assert all(card.is_placeholder for card in top + bottom)
    assert all(card.badge is None for card in top + bottom)


def test_values_and_badges():
    top, bottom = build_cards(SensorReading(pm2p5=40.0, co2=612.4, temperature=21.26, voc_index=98.0))
    pm, co2, temperature, humidity = top
    assert pm.value == "40.0"
    assert pm.badge.level == LEVEL_DANGER
    assert co2.value == "612"
    assert co2.badge.level == LEVEL_OK
    assert temperature.value == "21.3"
    assert humidity.is_placeholder
    assert bottom[0].value == "98"
    assert bottom[0].unit == "idx"


def test_zero_is_a_value():
    top, _ = build_cards(SensorReading(pm2p5=0.0))
    assert top[0].value == "0.0"
    assert top[0].badge.label == "Good"
