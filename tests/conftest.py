import json
import os
import tempfile

import httpx
import pytest
import pytest_asyncio

# Keep test logs out of the working directory
os.environ.setdefault("LOG_PATH", tempfile.NamedTemporaryFile(suffix=".log").name)

from transmission_adapter.notifications import RecordingNotifier
from transmission_adapter.rpc_client import RPCClient
from transmission_adapter.service import TransmissionService
from transmission_adapter.session import SESSION_HEADER, SessionManager


class FakeDaemon:
    """
    Minimal stand-in for a Transmission daemon behind httpx.MockTransport.

    The connect probe (GET) answers with ``probe_status`` and the current
    token. RPC posts answer from ``responses`` keyed by method, defaulting to
    an empty success.
    """

    def __init__(self, token="token-1", probe_status=409):
        self.token = token
        self.probe_status = probe_status
        self.requests = []
        self.responses = {}

    def respond(self, method, body=None, status=200, token=None):
        self.responses[method] = (status, body, token)

    def payloads(self):
        return [json.loads(r.content) for r in self.requests if r.method == "POST"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.method == "GET":
            headers = {SESSION_HEADER: self.token} if self.token else {}
            return httpx.Response(self.probe_status, headers=headers)

        method = json.loads(request.content)["method"]
        status, body, token = self.responses.get(method, (200, None, None))
        if body is None:
            body = {"arguments": {}, "result": "success"}
        headers = {SESSION_HEADER: token} if token else {}
        if isinstance(body, (bytes, str)):
            return httpx.Response(status, content=body, headers=headers)
        return httpx.Response(status, json=body, headers=headers)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def raw_torrent(info_hash, name="Torrent", trackers=(), **extra):
    data = {
        "id": extra.pop("id", 1),
        "hashString": info_hash,
        "name": name,
        "trackers": [
            {"announce": url, "id": i, "scrape": "", "tier": 0}
            for i, url in enumerate(trackers)
        ],
    }
    data.update(extra)
    return data


@pytest.fixture
def daemon():
    return FakeDaemon()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest_asyncio.fixture
async def rpc_client(daemon):
    client = RPCClient(SessionManager(), transport=daemon.transport())
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def connected_client(rpc_client):
    await rpc_client.connect("localhost", 9091, "admin", "secret")
    return rpc_client


@pytest_asyncio.fixture
async def service(daemon, notifier):
    async with TransmissionService(notifier=notifier, transport=daemon.transport()) as svc:
        await svc.connect("localhost", 9091, "admin", "secret")
        yield svc
