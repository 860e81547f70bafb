"""
Public key provider package.

Asymmetrically signed Connect tokens are verified against the public key
published for their `kid`. Fetching the key is left to the application;
this package defines the provider contract and a caching decorator.

Key points:
- A kid always maps to the same key; rotation issues a new kid, so
  cached entries never need invalidation.
- Cache storage (memory, Redis, ...) is supplied by the caller.
"""

from .provider import (
    CachingKeyProvider,
    ConnectInstallKeysCdnUrl,
    InMemoryKeyCache,
    KeyCache,
    KeyProvider,
)

__all__ = [
    "CachingKeyProvider",
    "ConnectInstallKeysCdnUrl",
    "InMemoryKeyCache",
    "KeyCache",
    "KeyProvider",
]
