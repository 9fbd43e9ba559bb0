"""Tests for response parsing and the HTTP client against a local server."""

import json
import re

import pytest
from aiohttp import web

from ambientwatch.demo import HISTORY_POINTS
from ambientwatch.device import (
    DeviceClient,
    NetworkFailure,
    ParseFailure,
    normalize_base_url,
    parse_history,
    parse_reading,
)
from ambientwatch.formatting import PLACEHOLDER


@pytest.mark.parametrize(
    "address, expected",
    [
        ("192.168.1.20", "http://192.168.1.20"),
        ("192.168.1.20/", "http://192.168.1.20"),
        ("  ambient.local  ", "http://ambient.local"),
        ("http://ambient.local:8080//", "http://ambient.local:8080"),
        ("https://sensor.example", "https://sensor.example"),
        ("httpbox.local", "http://httpbox.local"),
    ],
)
def test_normalize_base_url(address, expected):
    assert normalize_base_url(address) == expected


class TestParseReading:
    def test_full_object(self):
        reading = parse_reading({
            "timestamp": "2024-01-01 10:00:00",
            "pm2p5": 4.2, "co2": 612, "temperature": 21.5, "humidity": 40,
            "vocIndex": 101, "noxIndex": 1, "pm1p0": 2.5,
        })
        assert reading.co2 == 612.0
        assert reading.voc_index == 101.0
        assert reading.nox_index == 1.0
        assert reading.timestamp == "2024-01-01 10:00:00"

    def test_non_finite_values_are_none(self):
        reading = parse_reading(json.loads('{"pm2p5": NaN, "co2": Infinity, "humidity": "nan", "temperature": "-inf", "pm1p0": 3}'))
        assert reading.pm2p5 is None
        assert reading.co2 is None
        assert reading.humidity is None
        assert reading.temperature is None
        assert reading.pm1p0 == 3.0

    def test_absent_and_non_numeric_fields_are_none(self):
        reading = parse_reading({"co2": "n/a", "pm2p5": None, "humidity": "45.5"})
        assert reading.co2 is None
        assert reading.pm2p5 is None
        assert reading.temperature is None
        assert reading.humidity == 45.5
        assert reading.timestamp is None

    def test_rejects_non_object(self):
        with pytest.raises(ParseFailure):
            parse_reading([1, 2])


class TestParseHistory:
    def test_missing_values_default_to_zero(self):
        points = parse_history([{"timestamp": "2024-01-01T08:30:00", "co2": 700}])
        assert points[0].label == "08:30"
        assert points[0].co2 == 700.0
        assert points[0].pm2p5 == 0.0

    def test_non_finite_values_default_to_zero(self):
        points = parse_history(json.loads('[{"timestamp": 0, "co2": NaN, "pm2p5": -Infinity}]'))
        assert points[0].co2 == 0.0
        assert points[0].pm2p5 == 0.0

    def test_bad_timestamp_gets_placeholder(self):
        assert parse_history([{"timestamp": "soon"}])[0].label == PLACEHOLDER

    def test_rejects_non_array(self):
        with pytest.raises(ParseFailure):
            parse_history({"entries": []})

    def test_rejects_non_object_entries(self):
        with pytest.raises(ParseFailure):
            parse_history([1, 2])

    def test_empty(self):
        assert parse_history([]) == []


class TestDeviceClient:
    async def test_live_from_demo_device(self, device_address, demo_device):
        client = DeviceClient(device_address)
        try:
            reading = await client.get_live()
        finally:
            await client.stop()
        assert reading.co2 is not None
        assert reading.timestamp is not None
        assert demo_device.requests["live"] == 1

    async def test_history_from_demo_device(self, device_address):
        client = DeviceClient(device_address, timeout=5)
        try:
            points = await client.get_history()
        finally:
            await client.stop()
        assert len(points) == HISTORY_POINTS
        assert all(re.fullmatch(r"\d\d:\d\d", p.label) for p in points)

    async def test_download_csv(self, device_address, tmp_path):
        client = DeviceClient(device_address)
        try:
            path = await client.download_csv(tmp_path / "exports")
        finally:
            await client.stop()
        assert path.parent == tmp_path / "exports"
        assert path.name.startswith("ambient-history-")
        lines = path.read_text().splitlines()
        assert lines[0].startswith("timestamp,pm2p5,co2")
        assert len(lines) == HISTORY_POINTS + 1
        assert [p.name for p in (tmp_path / "exports").iterdir()] == [path.name]

    async def test_truncated_csv_leaves_no_file(self, aiohttp_server, tmp_path):
        async def truncated(request):
            response = web.StreamResponse(headers={"Content-Type": "text/csv", "Content-Length": "100000"})
            await response.prepare(request)
            await response.write(b"timestamp,pm2p5,co2\n")
            request.transport.close()
            return response

        app = web.Application()
        app.router.add_get("/api/history/csv", truncated)
        server = await aiohttp_server(app)

        client = DeviceClient(f"{server.host}:{server.port}", timeout=5)
        dest = tmp_path / "exports"
        try:
            with pytest.raises(NetworkFailure):
                await client.download_csv(dest)
        finally:
            await client.stop()
        assert list(dest.iterdir()) == []

    async def test_failed_csv_status_leaves_no_file(self, aiohttp_server, tmp_path):
        async def missing(request):
            return web.Response(status=404)

        app = web.Application()
        app.router.add_get("/api/history/csv", missing)
        server = await aiohttp_server(app)

        client = DeviceClient(f"{server.host}:{server.port}")
        try:
            with pytest.raises(NetworkFailure):
                await client.download_csv(tmp_path)
        finally:
            await client.stop()
        assert list(tmp_path.iterdir()) == []

    async def test_non_2xx_is_network_failure(self, aiohttp_server):
        async def broken(request):
            return web.Response(status=503, text="busy")

        app = web.Application()
        app.router.add_get("/api", broken)
        server = await aiohttp_server(app)

        client = DeviceClient(f"{server.host}:{server.port}")
        try:
            with pytest.raises(NetworkFailure):
                await client.get_live()
        finally:
            await client.stop()

    async def test_malformed_json_is_parse_failure(self, aiohttp_server):
        async def garbage(request):
            return web.Response(text="<html>not json</html>")

        app = web.Application()
        app.router.add_get("/api/history", garbage)
        server = await aiohttp_server(app)

        client = DeviceClient(f"{server.host}:{server.port}")
        try:
            with pytest.raises(ParseFailure):
                await client.get_history()
        finally:
            await client.stop()

    async def test_unreachable_is_network_failure(self, unused_tcp_port):
        client = DeviceClient(f"127.0.0.1:{unused_tcp_port}", timeout=5)
        try:
            with pytest.raises(NetworkFailure):
                await client.get_live()
        finally:
            await client.stop()

    async def test_set_address_changes_target(self, device_address):
        client = DeviceClient("ambient.local")
        client.set_address(device_address)
        assert client.csv_url == f"http://{device_address}/api/history/csv"
        try:
            await client.get_live()
        finally:
            await client.stop()
