"""Tests for the demo device and command line parsing."""

from datetime import datetime

from ambientwatch.__main__ import parse_args
from ambientwatch.demo import HISTORY_POINTS, DemoDevice
from ambientwatch.device import parse_history, parse_reading


def test_reading_parses():
    reading = parse_reading(DemoDevice(seed=3).reading(datetime(2024, 1, 1, 12, 0)))
    assert reading.timestamp == "2024-01-01 12:00:00"
    assert reading.co2 > 0
    assert reading.pm2p5 >= 0


def test_history_is_chronological_epoch_ms():
    entries = DemoDevice(seed=3).history(datetime(2024, 1, 1, 12, 0))
    assert len(entries) == HISTORY_POINTS
    stamps = [e["timestamp"] for e in entries]
    assert stamps == sorted(stamps)
    assert stamps[-1] - stamps[-2] == 60_000
    assert parse_history(entries)[-1].label == "12:00"


async def test_start_and_stop_on_free_port():
    device = DemoDevice()
    address = await device.start()
    try:
        host, port = address.rsplit(":", 1)
        assert host == "127.0.0.1"
        assert int(port) > 0
    finally:
        await device.stop()


def test_cli_defaults():
    args = parse_args([])
    assert args.console is None
    assert args.address is None
    assert not args.demo


def test_cli_console_modes():
    assert parse_args(["-o"]).console == 0
    assert parse_args(["--console", "10"]).console == 10
    args = parse_args(["-a", "10.0.0.5", "-i", "5", "--lang", "fi", "--demo"])
    assert args.address == "10.0.0.5"
    assert args.interval == 5.0
    assert args.lang == "fi"
    assert args.demo
