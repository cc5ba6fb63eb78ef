import json
import os
import socket
import sys
import urllib.request
from pathlib import Path

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]
SRC = REPO_ROOT / "src"

# Prefer repo sources over any installed package.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def block_network(monkeypatch):
    if os.getenv("LIVE") == "1":
        return

    real_connect = socket.socket.connect

    def guarded_connect(sock, address):
        host = address[0]
        if host not in ("127.0.0.1", "localhost"):
            raise RuntimeError("Network access blocked in tests")
        return real_connect(sock, address)

    monkeypatch.setattr(socket.socket, "connect", guarded_connect)
    monkeypatch.setattr(
        urllib.request,
        "urlopen",
        lambda *args, **kwargs: (_ for _ in ()).throw(
            RuntimeError("Network access blocked in tests")
        ),
    )


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=None):
        self.status_code = status_code
        self._payload = payload
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            return json.loads(self.text)
        return self._payload


class FakeSession:
    """Stands in for requests.Session; replays queued responses in order."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []
        self.closed = False

    def get(self, url, params=None, timeout=None, headers=None):
        self.calls.append({"url": url, "params": dict(params or {}), "timeout": timeout})
        if not self.responses:
            raise AssertionError("unexpected extra upstream request")
        nxt = self.responses.pop(0)
        if isinstance(nxt, BaseException):
            raise nxt
        return nxt

    def close(self):
        self.closed = True


def esri_feature(i, **attrs):
    x = -86.0 + i * 0.001
    base = {"OBJECTID": i, "mukey": str(i), "musym": f"M{i}", "muname": f"Unit {i}"}
    base.update(attrs)
    return {
        "attributes": base,
        "geometry": {
            "rings": [[[x, 40.0], [x, 40.001], [x + 0.001, 40.001], [x + 0.001, 40.0], [x, 40.0]]]
        },
    }


def page(n, start=0, exceeded=False):
    body = {"features": [esri_feature(start + i) for i in range(n)]}
    if exceeded:
        body["exceededTransferLimit"] = True
    return FakeResponse(body)


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def make_page():
    return page


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def square_polygon():
    return {
        "type": "Polygon",
        "coordinates": [
            [[-86.2, 39.7], [-86.1, 39.7], [-86.1, 39.8], [-86.2, 39.8], [-86.2, 39.7]]
        ],
    }
