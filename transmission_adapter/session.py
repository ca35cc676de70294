"""
Connection state shared by every RPC call.

The SessionManager owns a single Connection and funnels every mutation through
record_connection() and refresh_token(). Headers are rebuilt from the current
state on each call so a token rotated by one response is picked up by the very
next request.
"""

import base64
from dataclasses import dataclass
from typing import Dict, Optional, Union

from .urls import RPC_PATH, build_url


SESSION_HEADER = "X-Transmission-Session-Id"


def credential_digest(user: Optional[str], password: Optional[str]) -> str:
    """Base64 encoding of ``user:password`` used for HTTP basic auth."""
    raw = f"{user or ''}:{password or ''}"
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


@dataclass
class Connection:
    host: str = ""
    port: Union[int, str] = ""
    credential_digest: str = ""
    session_token: Optional[str] = None


class SessionManager:
    def __init__(self, connection: Optional[Connection] = None, path: str = RPC_PATH):
        self.connection = connection or Connection()
        self.path = path

    @property
    def is_connected(self) -> bool:
        return bool(self.connection.host)

    def record_connection(
        self,
        host: str,
        port: Union[int, str],
        credential_digest: str,
        session_token: Optional[str],
    ) -> None:
        conn = self.connection
        conn.host, conn.port, conn.credential_digest, conn.session_token = (
            host, port, credential_digest, session_token
        )

    def refresh_token(self, token: Optional[str]) -> None:
        if not token:
            return
        self.connection.session_token = token

    def auth_headers(self) -> Dict[str, str]:
        headers = {"Authorization": f"Basic {self.connection.credential_digest}"}
        if self.connection.session_token:
            headers[SESSION_HEADER] = self.connection.session_token
        return headers

    def url(self) -> str:
        return build_url(self.connection.host, self.connection.port, self.path)
