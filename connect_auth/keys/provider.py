"""
Public key providers for asymmetric Connect JWT verification.
"""

import asyncio
from enum import Enum
from typing import Dict, Optional, Protocol

from ..logging import get_logger
from ..types import UnverifiedConnectJwt


class ConnectInstallKeysCdnUrl(str, Enum):
    """Connect install-keys distribution points."""

    PRODUCTION = "https://connect-install-keys.atlassian.com"
    STAGING = "https://asap-distribution.us-west-2.staging.atl-asap.net"


class KeyProvider(Protocol):
    """Retrieves the PEM encoded public key for a kid."""

    async def get(self, kid: str, unverified_connect_jwt: UnverifiedConnectJwt) -> str:
        ...


class KeyCache(Protocol):
    """Storage used by CachingKeyProvider."""

    async def get(self, kid: str) -> Optional[str]:
        ...

    async def set(self, kid: str, key: str) -> None:
        ...


class InMemoryKeyCache:
    """Process-local key cache, last write wins."""

    def __init__(self):
        self._keys: Dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def get(self, kid: str) -> Optional[str]:
        return self._keys.get(kid)

    async def set(self, kid: str, key: str) -> None:
        async with self._lock:
            self._keys[kid] = key

    def clear(self) -> None:
        """Drop all cached keys."""
        self._keys.clear()


class CachingKeyProvider:
    """
    Provider decorator caching public keys by kid, so a recent key stays
    available when the distribution point is unreachable.
    """

    def __init__(self, provider: KeyProvider, cache: KeyCache):
        self.provider = provider
        self.cache = cache
        self.logger = get_logger("connect_auth.keys")

    async def get(self, kid: str, unverified_connect_jwt: UnverifiedConnectJwt) -> str:
        """Return the cached key for kid, fetching and caching it on a miss."""
        cached_key = await self.cache.get(kid)
        if cached_key:
            self.logger.debug("Public key served from cache", kid=kid)
            return cached_key

        new_key = await self.provider.get(kid, unverified_connect_jwt)

        await self.cache.set(kid, new_key)
        self.logger.info("Public key cached", kid=kid)
        return new_key
