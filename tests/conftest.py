"""Shared fixtures for the recipe client test suite.

HTTP is served by httpx.MockTransport handlers and time by FakeClock, so no
test touches the network or really sleeps (except the cancellation tests).
"""

from __future__ import annotations

import io
import json
import logging
import sys
from typing import Callable, Optional

import httpx
import pytest
from PIL import Image

from recipe_client.config import ClientSettings

# ---------------------------------------------------------------------------
# Configure verbose logging for test debugging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream=sys.stderr,
    force=True,
)

BASE_URL = "http://recipes.test"


class FakeClock:
    """Monotonic clock that only moves when sleep() is awaited."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class ScriptedServer:
    """Fake job queue: scripted responses for POST /jobs and GET /jobs/{id}.

    Each script entry is an httpx.Response, an exception to raise, or a
    callable taking the request. The last GET entry repeats forever.
    """

    def __init__(self, submit: Optional[list] = None, polls: Optional[list] = None,
                 clock: Optional[FakeClock] = None):
        self.submit_script = list(submit or [])
        self.poll_script = list(polls or [])
        self.clock = clock
        self.requests: list[httpx.Request] = []
        self.request_times: list[float] = []

    def _next(self, script: list, request: httpx.Request) -> httpx.Response:
        entry = script.pop(0) if len(script) > 1 else script[0]
        if isinstance(entry, Exception):
            raise entry
        if callable(entry):
            return entry(request)
        # Fresh copy: the same scripted response may be served many times
        return httpx.Response(entry.status_code, headers=entry.headers, content=entry.content)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.clock is not None:
            self.request_times.append(self.clock())
        if request.method == "POST":
            return self._next(self.submit_script, request)
        return self._next(self.poll_script, request)

    @property
    def polls(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "GET"]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def json_response(status_code: int, body) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(body).encode("utf-8"),
                          headers={"Content-Type": "application/json"})


def make_image_bytes(fmt: str, color=(200, 80, 40), size=(8, 8)) -> bytes:
    out = io.BytesIO()
    Image.new("RGB", size, color).save(out, format=fmt)
    return out.getvalue()


@pytest.fixture
def settings() -> ClientSettings:
    return ClientSettings(
        base_url=BASE_URL,
        poll_interval=1.0,
        poll_timeout=10.0,
        request_timeout=5.0,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes("JPEG")


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG", color=(10, 120, 240))


@pytest.fixture
def http_factory() -> Callable[[ScriptedServer], httpx.AsyncClient]:
    def _make(server: ScriptedServer, base_url: str = BASE_URL) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=base_url, transport=server.transport())
    return _make
