"""
Framework-neutral request reader.
"""

from typing import Any, Dict, Mapping, Optional
from urllib.parse import parse_qs, urlsplit

from ..validation.qsh import create_query_string_hash

JWT_AUTHORIZATION_PREFIX = "JWT "


class HttpRequestReader:
    """Request reader built from the plain parts of an HTTP request."""

    def __init__(
        self,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[Mapping[str, Any]] = None,
    ):
        self.method = method
        self.url = url
        self.headers: Dict[str, str] = {k.lower(): v for k, v in (headers or {}).items()}
        self.body: Mapping[str, Any] = body or {}

    def extract_connect_jwt(self) -> str:
        """Extract the token from the Authorization header or `jwt` query parameter."""
        token = self.headers.get("authorization") or self._query_param("jwt") or ""
        if token.startswith(JWT_AUTHORIZATION_PREFIX):
            token = token[len(JWT_AUTHORIZATION_PREFIX):]
        return token.strip()

    def extract_client_key(self) -> str:
        """Extract `clientKey`, or Bitbucket's `principal.uuid`, from the body."""
        client_key = self.body.get("clientKey")
        if isinstance(client_key, str) and client_key:
            return client_key

        principal = self.body.get("principal")
        if isinstance(principal, Mapping):
            uuid = principal.get("uuid")
            if isinstance(uuid, str):
                return uuid

        return ""

    def compute_query_string_hash(self, base_url: str) -> str:
        return create_query_string_hash(self.method, self.url, base_url)

    def _query_param(self, name: str) -> Optional[str]:
        values = parse_qs(urlsplit(self.url).query).get(name)
        return values[0] if values else None
