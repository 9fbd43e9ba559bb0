"""Shared fixtures: a scriptable fake device client and a demo device server."""

import asyncio
from typing import Optional

import pytest

from ambientwatch.controller import InputController
from ambientwatch.demo import DemoDevice
from ambientwatch.device import CSV_PATH, NetworkFailure, normalize_base_url
from ambientwatch.i18n import init_lang
from ambientwatch.models import HistoryPoint, SensorReading
from ambientwatch.poller import DevicePoller
from ambientwatch.state import DashboardState


@pytest.fixture(autouse=True)
def english():
    init_lang("en")
    yield
    init_lang("en")


class FakeClient:
    """Stands in for DeviceClient; gates and errors are set per test."""

    def __init__(self, address: str = "ambient.local") -> None:
        self.set_address(address)
        self.reading = SensorReading(timestamp="12:00:00", pm2p5=8.0, co2=650.0, temperature=21.0)
        self.history = [HistoryPoint("10:00", pm2p5=3.0), HistoryPoint("10:01", pm2p5=4.0)]
        self.live_error: Optional[Exception] = None
        self.history_error: Optional[Exception] = None
        self.live_gate: Optional[asyncio.Event] = None
        self.history_gate: Optional[asyncio.Event] = None
        self.live_calls = 0
        self.history_calls = 0
        self.started = False

    @property
    def csv_url(self) -> str:
        return f"{self.base_url}{CSV_PATH}"

    def set_address(self, address: str) -> None:
        self.address = address
        self.base_url = normalize_base_url(address)

    async def start(self) -> None:
        self.started = True

    async def stop(self) -> None:
        self.started = False

    async def get_live(self) -> SensorReading:
        self.live_calls += 1
        if self.live_gate:
            await self.live_gate.wait()
        if self.live_error:
            raise self.live_error
        return self.reading

    async def get_history(self) -> list[HistoryPoint]:
        self.history_calls += 1
        if self.history_gate:
            await self.history_gate.wait()
        if self.history_error:
            raise self.history_error
        return list(self.history)

    async def download_csv(self, dest_dir):
        raise NetworkFailure("no CSV on the fake device")


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def state():
    return DashboardState("ambient.local", history_size=5)


@pytest.fixture
async def poller(state, fake_client):
    poller = DevicePoller(state, fake_client, interval=60)
    yield poller
    await poller.stop()


@pytest.fixture
def controller(state, poller, tmp_path):
    return InputController(state, poller, download_dir=tmp_path)


@pytest.fixture
def demo_device():
    return DemoDevice(seed=1)


@pytest.fixture
async def device_server(aiohttp_server, demo_device):
    return await aiohttp_server(demo_device.make_app())


@pytest.fixture
def device_address(device_server):
    return f"{device_server.host}:{device_server.port}"
