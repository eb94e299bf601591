"""Shared fakes standing in for aiohttp sessions and sockets."""

import asyncio
import json
from types import SimpleNamespace

import aiohttp
import pytest

from edgex_client.auth import Credential, RequestAuthenticator


TEST_ACCOUNT_ID = 42
TEST_PRIVATE_KEY = "0x3c1e9550e66958296d11b60f8e8e7a7ad990d07fa65d5f7652c4a6c87d4e3cc"


class FakeWebSocket:
    """Async-iterable socket. Frames are fed by the test; sent frames are recorded."""

    def __init__(self):
        self.sent: list[dict] = []
        self.closed = False
        self.close_code = None
        self._inbox: asyncio.Queue = asyncio.Queue()
        self._exception = None

    def feed(self, payload):
        data = payload if isinstance(payload, str) else json.dumps(payload)
        self._inbox.put_nowait(SimpleNamespace(type=aiohttp.WSMsgType.TEXT, data=data))

    def drop(self, code: int = 1006):
        """Simulate the server closing the connection."""
        self.close_code = code
        self._inbox.put_nowait(None)

    def fail(self, exc: Exception):
        self._exception = exc
        self._inbox.put_nowait(SimpleNamespace(type=aiohttp.WSMsgType.ERROR, data=None))

    async def send_json(self, data):
        if self.closed:
            raise ConnectionResetError("Cannot write to closing transport")
        self.sent.append(data)

    async def close(self):
        if not self.closed:
            self.closed = True
            if self.close_code is None:
                self.close_code = 1000
            self._inbox.put_nowait(None)

    def exception(self):
        return self._exception

    def __aiter__(self):
        return self

    async def __anext__(self):
        msg = await self._inbox.get()
        if msg is None:
            raise StopAsyncIteration
        return msg


class YieldingWebSocket(FakeWebSocket):
    """Socket whose sends suspend, letting other tasks run mid-send."""

    async def send_json(self, data):
        await asyncio.sleep(0)
        await super().send_json(data)


class FakeResponse:
    def __init__(self, status: int = 200, body=None, text: str | None = None):
        self.status = status
        self._body = body
        self._text = text

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False

    async def json(self, content_type=None):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body

    async def text(self):
        return self._text if self._text is not None else json.dumps(self._body)


class FakeHttpSession:
    """
    Stands in for aiohttp.ClientSession.

    ws_connect() hands out a new FakeWebSocket per call, pre-loaded with
    ``initial_frames``. request() returns queued FakeResponses.
    """

    def __init__(self, initial_frames=None, connect_error: Exception | None = None, socket_factory=None):
        self.initial_frames = list(initial_frames or [])
        self.connect_error = connect_error
        self.socket_factory = socket_factory or FakeWebSocket
        self.connects: list[tuple[str, dict]] = []
        self.sockets: list[FakeWebSocket] = []
        self.requests: list[dict] = []
        self.responses: list[FakeResponse] = []
        self.request_error: Exception | None = None
        self.closed = False

    async def ws_connect(self, url, headers=None):
        self.connects.append((url, dict(headers or {})))
        if self.connect_error is not None:
            raise self.connect_error
        ws = self.socket_factory()
        for frame in self.initial_frames:
            ws.feed(frame)
        self.sockets.append(ws)
        return ws

    def request(self, method, url, **kwargs):
        self.requests.append({"method": method, "url": url, **kwargs})
        if self.request_error is not None:
            raise self.request_error
        if self.responses:
            return self.responses.pop(0)
        return FakeResponse(200, {"code": "SUCCESS", "data": {}})

    async def close(self):
        self.closed = True


async def settle(rounds: int = 20):
    """Let background reader/heartbeat tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def credential():
    return Credential(account_id=TEST_ACCOUNT_ID, private_key=TEST_PRIVATE_KEY)


@pytest.fixture
def authenticator(credential):
    return RequestAuthenticator(credential)


@pytest.fixture
def http():
    return FakeHttpSession()
