"""
Shared fixtures for connect_auth tests.
"""

import time
from typing import Any, Dict, Optional

import jwt as pyjwt
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from helpers import BASE_URL, CLIENT_KEY, KID, SHARED_SECRET


def _generate_key_pair() -> Dict[str, str]:
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("utf-8")
    return {"private": private_pem, "public": public_pem}


@pytest.fixture(scope="session")
def rsa_keys():
    """RSA key pair used to sign asymmetric tokens."""
    return _generate_key_pair()


@pytest.fixture(scope="session")
def other_rsa_keys():
    """RSA key pair unrelated to the published public key."""
    return _generate_key_pair()


@pytest.fixture
def symmetric_jwt():
    """Factory minting HS256 tokens with PyJWT."""

    def _make(
        iss: str = CLIENT_KEY,
        qsh: Optional[str] = None,
        secret: str = SHARED_SECRET,
        **claims: Any,
    ) -> str:
        payload: Dict[str, Any] = {"iss": iss, **claims}
        if qsh:
            payload["qsh"] = qsh
        return pyjwt.encode(payload, secret, algorithm="HS256")

    return _make


@pytest.fixture
def asymmetric_jwt(rsa_keys):
    """Factory minting RS256 tokens with PyJWT."""

    def _make(
        iss: str = CLIENT_KEY,
        qsh: Optional[str] = None,
        aud: Optional[str] = BASE_URL,
        kid: Optional[str] = KID,
        private_key: Optional[str] = None,
        **claims: Any,
    ) -> str:
        payload: Dict[str, Any] = {"iss": iss, **claims}
        if aud:
            payload["aud"] = [aud]
        if qsh:
            payload["qsh"] = qsh
        headers = {"kid": kid} if kid else None
        return pyjwt.encode(payload, private_key or rsa_keys["private"], algorithm="RS256", headers=headers)

    return _make


@pytest.fixture
def now():
    """Current time in seconds since epoch."""
    return int(time.time())
