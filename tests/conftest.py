import json

import pytest
import requests

from huelink.api import bridge as bridge_module
from huelink.api.bridge import HueBridge
from huelink.config import BridgeSettings
from huelink.repo.credential_store import CredentialStore


class FakeTime:
    """Replaces the time module inside huelink.api.bridge."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps = []

    def monotonic(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds):
        self.now += seconds


def make_response(payload=None, status=200, raw=None):
    response = requests.Response()
    response.status_code = status
    if raw is None:
        raw = json.dumps(payload).encode("utf-8") if payload is not None else b""
    response._content = raw
    response._content_consumed = True
    response.encoding = "utf-8"
    return response


class FakeSession:
    """Stands in for requests.Session: answers from a queue and records every call."""

    def __init__(self, clock: FakeTime):
        self.clock = clock
        self.responses = []
        self.default = None
        self.calls = []
        self.closed = False

    def queue(self, item, latency=0.0):
        self.responses.append((item, latency))

    def request(self, method, url, data=None, headers=None, timeout=None, stream=False):
        self.calls.append({
            "method": method,
            "url": url,
            "body": json.loads(data) if data else None,
            "headers": headers or {},
            "timeout": timeout,
            "stream": stream,
            "started": self.clock.now,
        })
        item, latency = self.responses.pop(0) if self.responses else self.default
        self.clock.advance(latency)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self):
        self.closed = True


@pytest.fixture
def fake_time(monkeypatch):
    clock = FakeTime()
    monkeypatch.setattr(bridge_module, "time", clock)
    return clock


@pytest.fixture
def session(fake_time):
    return FakeSession(fake_time)


@pytest.fixture
def settings(tmp_path):
    return BridgeSettings(bridge_ip="10.0.0.2", home=tmp_path / ".huelink")


@pytest.fixture
def credentials(settings):
    return CredentialStore(settings.home)


@pytest.fixture
def bridge(settings, credentials, session):
    return HueBridge(username="user", settings=settings, credentials=credentials, session=session)


LIGHT_JSON = {
    "state": {"on": False, "bri": 100, "hue": 8000, "sat": 120, "ct": 300,
              "xy": [0.45, 0.41], "alert": "none", "effect": "none",
              "colormode": "ct", "mode": "homeautomation", "reachable": True},
    "swupdate": {"state": "noupdates", "lastinstall": "2021-01-01T10:00:00"},
    "type": "Extended color light",
    "name": "Desk",
    "modelid": "LCT015",
    "manufacturername": "Signify Netherlands B.V.",
    "productname": "Hue color lamp",
    "capabilities": {"certified": True},
    "config": {"archetype": "sultanbulb"},
    "uniqueid": "00:17:88:01:00:00:00:01-0b",
    "swversion": "1.50.2_r30933",
    "swconfigid": "772B0E5E",
    "productid": "Philips-LCT015-1-A19ECLv5",
}

GROUP_JSON = {
    "name": "Living room",
    "lights": ["1", "3"],
    "sensors": [],
    "type": "Room",
    "state": {"all_on": False, "any_on": False},
    "recycle": False,
    "class": "Living room",
    "action": {"on": False, "bri": 200, "hue": 8000, "sat": 120, "ct": 300,
               "xy": [0.45, 0.41], "alert": "none", "effect": "none", "colormode": "ct"},
}


@pytest.fixture
def light_json():
    return json.loads(json.dumps(LIGHT_JSON))


@pytest.fixture
def group_json():
    return json.loads(json.dumps(GROUP_JSON))
