"""
Connect JWT encoding, decoding and verification.
"""

import time
from typing import Any, Dict, Mapping, Optional

from jose import jwt
from jose.exceptions import JOSEError
from pydantic import ValidationError

from ..errors import AuthError, AuthErrorCode
from ..types import ConnectJwt, UnverifiedConnectJwt

SYMMETRIC_ALGORITHM = "HS256"
ASYMMETRIC_ALGORITHM = "RS256"

# Signature is checked by jose, everything else is checked here or by the verifiers
_DECODE_OPTIONS: Dict[str, Any] = {
    "verify_signature": True,
    "verify_aud": False,
    "verify_iat": False,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iss": False,
    "verify_sub": False,
    "verify_jti": False,
    "verify_at_hash": False,
}


def is_asymmetric_algorithm(alg: Optional[str]) -> bool:
    """Check whether the algorithm is asymmetric. Only RS256 is supported."""
    return alg == ASYMMETRIC_ALGORITHM


def encode_symmetric(claims: Mapping[str, Any], shared_secret: str) -> str:
    """Sign claims with a shared secret (HS256)."""
    return jwt.encode(dict(claims), shared_secret, algorithm=SYMMETRIC_ALGORITHM)


def encode_asymmetric(claims: Mapping[str, Any], private_key: str, kid: Optional[str] = None) -> str:
    """Sign claims with an RSA private key (RS256), advertising `kid` in the header."""
    headers = {"kid": kid} if kid else None
    return jwt.encode(dict(claims), private_key, algorithm=ASYMMETRIC_ALGORITHM, headers=headers)


def decode_unverified(raw_connect_jwt: str) -> UnverifiedConnectJwt:
    """Decode a Connect JWT without verifying its authenticity."""
    try:
        header = jwt.get_unverified_header(raw_connect_jwt)
        alg = header.get("alg")
        claims = jwt.get_unverified_claims(raw_connect_jwt)
        if is_asymmetric_algorithm(alg) and header.get("kid"):
            claims["kid"] = header["kid"]
        claims["alg"] = alg
        return UnverifiedConnectJwt.model_validate(claims)
    except (JOSEError, ValidationError, TypeError) as exc:
        raise AuthError(
            AuthErrorCode.FAILED_TO_DECODE,
            "Failed to decode token",
            origin_error=exc,
        ) from exc


def verify_symmetric(
    raw_connect_jwt: str,
    shared_secret: str,
    unverified_connect_jwt: Optional[UnverifiedConnectJwt] = None,
) -> ConnectJwt:
    """
    Decode a Connect JWT verifying it against the shared secret received on
    installation, then check expiration.

    `unverified_connect_jwt` is only attached to the error raised when the
    signature does not match.
    """
    connect_jwt = _verify(
        raw_connect_jwt,
        shared_secret,
        SYMMETRIC_ALGORITHM,
        unverified_connect_jwt,
        include_kid=False,
    )
    _check_expiration(connect_jwt)
    return connect_jwt


def verify_asymmetric(
    raw_connect_jwt: str,
    public_key: str,
    unverified_connect_jwt: Optional[UnverifiedConnectJwt] = None,
) -> ConnectJwt:
    """
    Decode an RS256 Connect JWT verifying it against the public key matching
    its `kid`, then check expiration.
    """
    connect_jwt = _verify(
        raw_connect_jwt,
        public_key,
        ASYMMETRIC_ALGORITHM,
        unverified_connect_jwt,
        include_kid=True,
    )
    _check_expiration(connect_jwt)
    return connect_jwt


def _verify(
    raw_connect_jwt: str,
    key: str,
    algorithm: str,
    unverified_connect_jwt: Optional[UnverifiedConnectJwt],
    *,
    include_kid: bool,
) -> ConnectJwt:
    try:
        claims = jwt.decode(
            raw_connect_jwt,
            key,
            algorithms=[algorithm],
            options=_DECODE_OPTIONS,
        )
        header = jwt.get_unverified_header(raw_connect_jwt)
        if include_kid:
            claims["kid"] = header.get("kid")
        claims["alg"] = header.get("alg")
        return ConnectJwt.model_validate(claims)
    except (JOSEError, ValidationError, TypeError) as exc:
        raise AuthError(
            AuthErrorCode.INVALID_SIGNATURE,
            "Invalid signature",
            origin_error=exc,
            unverified_connect_jwt=unverified_connect_jwt,
        ) from exc


def _check_expiration(connect_jwt: ConnectJwt) -> None:
    now = int(time.time())
    if connect_jwt.exp and now > connect_jwt.exp:
        raise AuthError(
            AuthErrorCode.TOKEN_EXPIRED,
            "Token expired",
            unverified_connect_jwt=connect_jwt,
        )
