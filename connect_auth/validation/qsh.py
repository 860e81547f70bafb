"""
Query String Hash (QSH) computation and verification.

The QSH binds a Connect JWT to the HTTP request it was issued for: the
method, the path relative to the app base URL and the query parameters
(except `jwt`) are canonicalised and hashed with SHA-256.
"""

import hashlib
from typing import Callable, Dict, List, Optional, Union
from urllib.parse import parse_qsl, quote, urlsplit

from ..errors import AuthError, AuthErrorCode, QshInfo
from ..types import CONTEXT_QSH, ConnectJwt, QueryStringHashType

# Reported as the computed value when no request hash was computed
SKIPPED_QSH = "skipped"

_EXCLUDED_PARAMS = frozenset({"jwt"})


def _encode(value: str) -> str:
    """Percent-encode per RFC 3986."""
    return quote(value, safe="")


def _canonical_method(method: str) -> str:
    return method.upper()


def _canonical_path(path: str, base_url: str) -> str:
    base_path = urlsplit(base_url).path.rstrip("/") if base_url else ""
    if base_path and path.startswith(base_path):
        path = path[len(base_path):]

    if not path:
        return "/"
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1 and path.endswith("/"):
        path = path[:-1]

    return path.replace("&", "%26")


def _canonical_query(query: str) -> str:
    params: Dict[str, List[str]] = {}
    for key, value in parse_qsl(query, keep_blank_values=True):
        if key in _EXCLUDED_PARAMS:
            continue
        params.setdefault(_encode(key), []).append(_encode(value))

    return "&".join(
        f"{key}={','.join(sorted(values))}"
        for key, values in sorted(params.items())
    )


def create_canonical_request(method: str, url: str, base_url: str = "") -> str:
    """Build the canonical `METHOD&path&query` representation of a request."""
    parts = urlsplit(url)
    return "&".join([
        _canonical_method(method),
        _canonical_path(parts.path, base_url),
        _canonical_query(parts.query),
    ])


def create_query_string_hash(method: str, url: str, base_url: str = "") -> str:
    """Compute the hex SHA-256 QSH of a request."""
    canonical_request = create_canonical_request(method, url, base_url)
    return hashlib.sha256(canonical_request.encode("utf-8")).hexdigest()


def verify_query_string_hash(
    connect_jwt: ConnectJwt,
    compute_query_string_hash: Callable[[], str],
    query_string_hash_type: Optional[Union[QueryStringHashType, str]] = None,
) -> None:
    """
    Verify the `qsh` claim of a verified token against the incoming request.

    `compute_query_string_hash` is only called when the policy needs a hash
    of the live request.
    """
    qsh_type = QueryStringHashType(query_string_hash_type or QueryStringHashType.COMPUTED)

    if qsh_type is QueryStringHashType.SKIP:
        return

    if not connect_jwt.qsh:
        raise AuthError(
            AuthErrorCode.MISSING_QSH,
            "JWT did not contain the Query String Hash (QSH) claim",
            connect_jwt=connect_jwt,
        )

    # Context tokens carry a fixed sentinel
    if qsh_type in (QueryStringHashType.CONTEXT, QueryStringHashType.ANY) and connect_jwt.qsh == CONTEXT_QSH:
        return

    computed = SKIPPED_QSH
    if qsh_type in (QueryStringHashType.COMPUTED, QueryStringHashType.ANY):
        computed = compute_query_string_hash()
        if connect_jwt.qsh == computed:
            return

    raise AuthError(
        AuthErrorCode.INVALID_QSH,
        "Invalid QSH",
        connect_jwt=connect_jwt,
        qsh_info=QshInfo(computed=computed or "empty", received=connect_jwt.qsh),
    )
