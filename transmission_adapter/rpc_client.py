"""
Transmission JSON-RPC client.

Provides the RPCClient class, the only path through which requests reach the
daemon. connect() performs the session handshake (a 409 on the probe is the
expected answer, not a failure) and send() posts a single command, refreshing
the session token from every response it gets back.

Responses to commands can be classified into an RPCResult so callers don't
need to poke at the raw body to tell a duplicate add from a real failure.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import httpx

from .config import Config
from .exceptions import ConnectionFailure, DuplicateTorrent, ProtocolError, SessionDesync
from .logger import logger
from .session import SESSION_HEADER, SessionManager, credential_digest
from .urls import build_url


CONNECT_TIMEOUT = Config.CONNECT_TIMEOUT
REQUEST_TIMEOUT = Config.REQUEST_TIMEOUT

HTTP_CONFLICT = 409
DUPLICATE_KEY = "torrent-duplicate"
SUCCESS = "success"


class ResultKind(str, Enum):
    OK = "ok"
    DUPLICATE = "duplicate"
    ERROR = "error"


@dataclass
class RPCResult:
    """Outcome of a command, decided once by classify_response()."""
    kind: ResultKind
    arguments: Dict[str, Any] = field(default_factory=dict)
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.kind == ResultKind.OK

    def raise_for_result(self) -> None:
        if self.kind == ResultKind.DUPLICATE:
            raise DuplicateTorrent(self.arguments.get(DUPLICATE_KEY))
        if self.kind == ResultKind.ERROR:
            raise ProtocolError(f"Transmission error: {self.message}", body=self.message)


def classify_response(body: Any) -> RPCResult:
    """
    Turn a decoded RPC response body into an RPCResult.

    A ``torrent-duplicate`` entry in the arguments wins over the result string,
    since the daemon reports duplicates alongside ``"success"``.
    """
    if not isinstance(body, dict):
        return RPCResult(ResultKind.ERROR, message=f"Malformed response: {body!r}")

    arguments = body.get("arguments")
    if not isinstance(arguments, dict):
        arguments = {}

    if DUPLICATE_KEY in arguments:
        return RPCResult(ResultKind.DUPLICATE, arguments)

    result = body.get("result")
    if result != SUCCESS:
        return RPCResult(ResultKind.ERROR, arguments, message=result or "Unknown error")

    return RPCResult(ResultKind.OK, arguments)


class RPCClient:
    def __init__(
        self,
        session: SessionManager,
        timeout: Optional[float] = REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session = session
        self.http = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def __aenter__(self) -> "RPCClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()

    async def connect(
        self,
        host: str,
        port: Union[int, str],
        user: Optional[str],
        password: Optional[str],
        timeout: float = CONNECT_TIMEOUT,
    ) -> httpx.Response:
        """
        Negotiate a session with the daemon.

        Args:
            host: Daemon hostname or IP
            port: RPC port
            user: Basic auth username
            password: Basic auth password
            timeout: Hard limit in seconds for the whole probe

        Returns:
            The probe response (2xx or 409)

        Raises:
            ConnectionFailure: On timeout, network error or any other status
        """
        digest = credential_digest(user, password)
        url = build_url(host, port, self.session.path)
        headers = {"Authorization": f"Basic {digest}"}

        logger.info(f"Connecting to Transmission at {host}:{port}")
        try:
            response = await asyncio.wait_for(
                self.http.get(url, headers=headers, timeout=timeout),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Connection to {host}:{port} timed out after {timeout}s")
            raise ConnectionFailure(f"Timed out connecting to {host}:{port}")
        except httpx.TimeoutException as e:
            logger.warning(f"Connection to {host}:{port} timed out: {e}")
            raise ConnectionFailure(f"Timed out connecting to {host}:{port}") from e
        except httpx.HTTPError as e:
            logger.error(f"Failed to connect to Transmission at {host}:{port}: {e}")
            raise ConnectionFailure(f"Could not connect to {host}:{port}: {e}") from e

        if not response.is_success and response.status_code != HTTP_CONFLICT:
            logger.error(f"Transmission at {host}:{port} refused the connection ({response.status_code})")
            raise ConnectionFailure(
                f"Connection to {host}:{port} failed with HTTP {response.status_code}",
                status_code=response.status_code,
            )

        token = response.headers.get(SESSION_HEADER)
        self.session.record_connection(host, port, digest, token)
        logger.info(f"Connected to Transmission at {host}:{port}")
        return response

    async def send(self, method: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Post a single command to the daemon and return the decoded body.

        The session token is refreshed from the response headers before any
        status handling, so a rotated token is kept even when the call fails.
        """
        payload = {"method": method, "arguments": arguments or {}}
        url = self.session.url()

        logger.debug(f"RPC {method} -> {url}")
        try:
            response = await self.http.post(url, json=payload, headers=self.session.auth_headers())
        except httpx.TimeoutException as e:
            logger.warning(f"RPC {method} timed out: {e}")
            raise ConnectionFailure(f"Request {method} timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"RPC {method} failed: {e}")
            raise ConnectionFailure(f"Request {method} failed: {e}") from e

        self.session.refresh_token(response.headers.get(SESSION_HEADER))

        if response.status_code == HTTP_CONFLICT:
            logger.warning(f"RPC {method} rejected with 409, session is out of sync")
            raise SessionDesync(f"Session rejected for {method}")

        if not response.is_success:
            logger.error(f"RPC {method} failed with HTTP {response.status_code}")
            raise ProtocolError(
                f"Request {method} failed with HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ProtocolError(
                f"Invalid JSON in response to {method}",
                status_code=response.status_code,
                body=response.text,
            ) from e

        if not isinstance(body, dict):
            raise ProtocolError(f"Unexpected response to {method}", response.status_code, body)

        return body

    async def fetch_torrents(self, fields: List[str]) -> List[Dict[str, Any]]:
        """Bulk ``torrent-get`` returning the raw torrent dicts."""
        body = await self.send("torrent-get", {"fields": fields})
        torrents = (body.get("arguments") or {}).get("torrents")
        if not isinstance(torrents, list):
            raise ProtocolError("Response to torrent-get has no torrent list", body=body)
        return torrents
