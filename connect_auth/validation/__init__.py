"""
Token validation package.

Provides the building blocks used by the installation and request
verifiers to decide whether a Connect JWT can be trusted:

- token: decoding and signature/expiry checks for HS256 and RS256 tokens.
- qsh: Query String Hash computation and policy checks.

Nothing here performs IO; public keys and shared secrets are supplied by
the caller.
"""

from .token import (
    ASYMMETRIC_ALGORITHM,
    SYMMETRIC_ALGORITHM,
    decode_unverified,
    encode_asymmetric,
    encode_symmetric,
    is_asymmetric_algorithm,
    verify_asymmetric,
    verify_symmetric,
)
from .qsh import create_canonical_request, create_query_string_hash, verify_query_string_hash

__all__ = [
    "ASYMMETRIC_ALGORITHM",
    "SYMMETRIC_ALGORITHM",
    "decode_unverified",
    "encode_asymmetric",
    "encode_symmetric",
    "is_asymmetric_algorithm",
    "verify_asymmetric",
    "verify_symmetric",
    "create_canonical_request",
    "create_query_string_hash",
    "verify_query_string_hash",
]
