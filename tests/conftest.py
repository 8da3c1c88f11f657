import json
import logging
import os
import sys

import aiohttp
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)


class FakeResponse:
    def __init__(self, status=200, body="", error=None):
        self.status = status
        self._body = body
        self._error = error

    async def read(self):
        if isinstance(self._body, bytes):
            return self._body
        return self._body.encode("utf-8")

    async def text(self, errors="strict"):
        return (await self.read()).decode("utf-8", errors=errors)

    async def __aenter__(self):
        if self._error is not None:
            raise self._error
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Records requests and replays queued responses in order."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.requests = []
        self.closed = False

    def _next(self, method, url, kwargs):
        self.requests.append({"method": method, "url": url, **kwargs})
        return self.responses.pop(0)

    def get(self, url, **kwargs):
        return self._next("GET", url, kwargs)

    def post(self, url, **kwargs):
        return self._next("POST", url, kwargs)

    async def close(self):
        self.closed = True


def ticker_body(funding_rate="0.0001234", ret_code=0, ret_msg="OK", symbol="BTCUSDT"):
    tickers = [] if funding_rate is None else [{"symbol": symbol, "fundingRate": funding_rate}]
    return json.dumps({
        "retCode": ret_code,
        "retMsg": ret_msg,
        "result": {"category": "linear", "list": tickers},
    })


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    funding = logging.getLogger("funding")
    for handler in funding.handlers:
        handler.close()
    funding.handlers.clear()


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def connection_error():
    return aiohttp.ClientConnectionError("connection refused")


@pytest.fixture
def pushover_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)  # keep a developer .env out of the way
    monkeypatch.setenv("PUSHOVER_TOKEN", "app-token")
    monkeypatch.setenv("PUSHOVER_USER_KEY", "user-key")
