"""Tests for value formatting, level badges and time labels."""

from datetime import datetime

from ambientwatch.formatting import (
    LEVEL_DANGER,
    LEVEL_OK,
    LEVEL_WARN,
    PLACEHOLDER,
    co2_level,
    fmt,
    history_label,
    live_label,
    pm_aqi,
    round_half_up,
)


def test_fmt():
    assert fmt(None) == PLACEHOLDER
    assert fmt(12.345) == "12.3"
    assert fmt(801.6, 0) == "802"
    assert fmt(0) == "0.0"


def test_fmt_rounds_ties_away_from_zero():
    assert fmt(0.25) == "0.3"
    assert fmt(22.25) == "22.3"
    assert fmt(2.5, 0) == "3"
    assert fmt(1500.5, 0) == "1501"
    assert fmt(-0.25) == "-0.3"
    # 1.005 is stored just below the tie
    assert fmt(1.005, 2) == "1.00"


def test_fmt_non_finite_is_placeholder():
    assert fmt(float("nan")) == PLACEHOLDER
    assert fmt(float("inf"), 0) == PLACEHOLDER


def test_fmt_huge_value_keeps_fixed_point():
    text = fmt(1.7e308, 0)
    assert text.isdigit()
    assert len(text) == 309


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2


def test_pm_aqi_tiers():
    assert pm_aqi(None) is None
    assert pm_aqi(11.9).level == LEVEL_OK
    assert pm_aqi(12).level == LEVEL_WARN
    assert pm_aqi(35).level == LEVEL_DANGER
    assert pm_aqi(5).label == "Good"
    assert pm_aqi(50).label == "Unhealthy"


def test_co2_level_tiers():
    assert co2_level(None) is None
    assert co2_level(799).level == LEVEL_OK
    assert co2_level(800).label == "Moderate"
    assert co2_level(1500).label == "High"
    assert co2_level(1500).level == LEVEL_DANGER


def test_live_label():
    assert live_label(datetime(2024, 5, 1, 9, 5, 7)) == "09:05:07"


class TestHistoryLabel:
    def test_epoch_milliseconds(self):
        expected = datetime.fromtimestamp(1_700_000_000).strftime("%H:%M")
        assert history_label(1_700_000_000_000) == expected

    def test_epoch_seconds(self):
        expected = datetime.fromtimestamp(1_700_000_000).strftime("%H:%M")
        assert history_label(1_700_000_000) == expected

    def test_numeric_string(self):
        expected = datetime.fromtimestamp(1_700_000_000).strftime("%H:%M")
        assert history_label("1700000000000") == expected

    def test_naive_iso(self):
        assert history_label("2024-01-01T08:30:00") == "08:30"

    def test_unparseable(self):
        assert history_label(None) == PLACEHOLDER
        assert history_label("yesterday") == PLACEHOLDER
        assert history_label(True) == PLACEHOLDER
