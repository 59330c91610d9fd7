"""
Pytest configuration and fixtures.
"""
import json

import pytest
import requests

from hubitat import build_registry, HubitatCollector

HUB_ADDRESS = "http://hub.local"
ACCESS_TOKEN = "secret-token"


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, body, status_code=200):
        self.body = body
        self.status_code = status_code
        self.closed = False

    def json(self):
        if isinstance(self.body, (bytes, str)):
            return json.loads(self.body)
        return self.body

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(
                f"{self.status_code} Error", response=self
            )

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class FakeHub:
    """Records requests and serves a fixed response or error."""

    def __init__(self):
        self.calls = []
        self.responses = []
        self.error = None
        self.body = []
        self.status_code = 200

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        response = FakeResponse(self.body, self.status_code)
        self.responses.append(response)
        return response


def make_device(label="Living Room Sensor", attributes=None, **fields):
    device = {
        "name": "Generic Zigbee Sensor",
        "label": label,
        "type": "Generic Zigbee Temperature/Humidity Sensor",
        "model": "TH01",
        "manufacturer": "eWeLink",
        "room": "Living Room",
        "attributes": attributes if attributes is not None else {},
    }
    device.update(fields)
    return device


@pytest.fixture
def fake_hub(monkeypatch) -> FakeHub:
    hub = FakeHub()
    monkeypatch.setattr("hubitat.collector.requests.get", hub.get)
    return hub


@pytest.fixture
def registry():
    return build_registry()


@pytest.fixture
def collector(registry) -> HubitatCollector:
    return HubitatCollector(HUB_ADDRESS, ACCESS_TOKEN, registry, timeout=5)


@pytest.fixture(name="make_device")
def make_device_fixture():
    return make_device
