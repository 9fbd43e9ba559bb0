"""Tests for the rolling buffer and newest-wins state updates."""

import pytest

from ambientwatch.models import ChartMode, ConnectionStatus, HistoryPoint, HistoryStatus, SensorReading
from ambientwatch.state import DashboardState, RollingHistory


class TestRollingHistory:
    def test_evicts_oldest_at_capacity(self):
        history = RollingHistory(3)
        for i in range(5):
            history.append(HistoryPoint(str(i)))
        assert len(history) == 3
        assert [p.label for p in history.snapshot()] == ["2", "3", "4"]

    def test_snapshot_is_a_copy(self):
        history = RollingHistory(2)
        history.append(HistoryPoint("a"))
        snap = history.snapshot()
        history.append(HistoryPoint("b"))
        assert len(snap) == 1

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            RollingHistory(0)


class TestDashboardState:
    def test_live_reading_appends_point(self):
        state = DashboardState("a", history_size=3)
        seq = state.begin_live_request()
        assert state.apply_live(seq, SensorReading(co2=700.0), "10:00:00")
        assert state.connection is ConnectionStatus.CONNECTED
        assert state.history.snapshot()[0].co2 == 700.0
        assert state.history.snapshot()[0].pm2p5 == 0.0

    def test_stale_live_response_is_discarded(self):
        state = DashboardState("a")
        first = state.begin_live_request()
        second = state.begin_live_request()
        assert state.apply_live(second, SensorReading(co2=900.0), "10:00:02")
        assert not state.apply_live(first, SensorReading(co2=400.0), "10:00:01")
        assert state.reading.co2 == 900.0
        assert len(state.history) == 1

    def test_stale_error_does_not_override_success(self):
        state = DashboardState("a")
        first = state.begin_live_request()
        second = state.begin_live_request()
        state.apply_live(second, SensorReading(), "x")
        assert not state.apply_live_error(first)
        assert state.connection is ConnectionStatus.CONNECTED

    def test_error_keeps_last_reading(self):
        state = DashboardState("a")
        state.apply_live(state.begin_live_request(), SensorReading(co2=500.0), "x")
        state.apply_live_error(state.begin_live_request())
        assert state.connection is ConnectionStatus.ERROR
        assert state.reading.co2 == 500.0

    def test_reset_clears_everything(self):
        state = DashboardState("old", history_size=3)
        state.apply_live(state.begin_live_request(), SensorReading(co2=500.0), "x")
        state.apply_history(state.begin_history_request(), [HistoryPoint("h")])
        state.chart_mode = ChartMode.API

        state.reset("new")

        assert state.address == "new"
        assert state.reading is None
        assert state.connection is ConnectionStatus.CONNECTING
        assert len(state.history) == 0
        assert state.api_history.points == []
        assert state.api_history.status is HistoryStatus.IDLE
        assert state.chart_mode is ChartMode.API

    def test_responses_in_flight_during_reset_are_dropped(self):
        state = DashboardState("old")
        live = state.begin_live_request()
        history = state.begin_history_request()
        state.reset("new")
        assert not state.apply_live(live, SensorReading(co2=1.0), "x")
        assert not state.apply_history(history, [HistoryPoint("h")])
        assert state.reading is None
        assert state.api_history.status is HistoryStatus.IDLE

    def test_history_status_transitions(self):
        state = DashboardState("a")
        seq = state.begin_history_request()
        assert state.api_history.status is HistoryStatus.LOADING
        state.apply_history_error(seq)
        assert state.api_history.status is HistoryStatus.ERROR
        seq = state.begin_history_request()
        state.apply_history(seq, [HistoryPoint("a"), HistoryPoint("b")])
        assert state.api_history.status is HistoryStatus.LOADED
        assert len(state.api_history) == 2

    def test_active_points_follow_mode(self):
        state = DashboardState("a")
        state.apply_live(state.begin_live_request(), SensorReading(), "live")
        state.apply_history(state.begin_history_request(), [HistoryPoint("api")])
        assert [p.label for p in state.active_points()] == ["live"]
        state.chart_mode = ChartMode.API
        assert [p.label for p in state.active_points()] == ["api"]
