import asyncio
import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class FakeTV:
    """
    Stands in for the TV end of the WebSocket.

    Every frame the client sends is decoded into `sent`; the responder
    returns the frames the TV answers with.
    """

    def __init__(self, responder=None) -> None:
        self.sent: list[dict] = []
        self.inbox: asyncio.Queue = asyncio.Queue()
        self.responder = responder or (lambda message: [])
        self.closed = False
        self.close_code: int | None = None

    async def send(self, data: str) -> None:
        message = json.loads(data)
        self.sent.append(message)
        for reply in self.responder(message):
            self.push(reply)

    def push(self, frame) -> None:
        self.inbox.put_nowait(frame if isinstance(frame, str) else json.dumps(frame))

    def hang_up(self) -> None:
        self.inbox.put_nowait(None)

    def __aiter__(self):
        return self

    async def __anext__(self):
        frame = await self.inbox.get()
        if frame is None:
            raise StopAsyncIteration
        return frame

    async def close(self, code: int = 1000, reason: str = "") -> None:
        self.closed = True
        self.close_code = code
        self.hang_up()


def tv_responder(client_key="KEY-1", payloads=None, errors=None):
    """A TV that accepts pairing and answers each request by uri."""
    payloads = payloads or {}
    errors = errors or {}

    def respond(message):
        if message["type"] == "register":
            return [{"type": "registered", "id": message["id"], "payload": {"client-key": client_key}}]
        if message["type"] == "request":
            uri = message["uri"]
            if uri in errors:
                return [{"type": "error", "id": message["id"], "error": errors[uri], "payload": {}}]
            return [{
                "type": "response",
                "id": message["id"],
                "payload": payloads.get(uri, {"returnValue": True}),
            }]
        return []

    return respond


@pytest.fixture
def make_tv():
    def factory(responder=None, **kwargs):
        return FakeTV(responder or tv_responder(**kwargs))
    return factory


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Keep the developer's TVREMOTE_* settings out of the tests."""
    for name in ("TVREMOTE_ADDR", "TVREMOTE_KEY_FILE", "TVREMOTE_SOCKS5_PROXY", "TVREMOTE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TVREMOTE_CONFIG", str(tmp_path / "missing-config.yaml"))
    return tmp_path
