"""
High level entry point for Connect apps.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from .auth.installation import InstallationVerifier
from .auth.request import RequestVerifier
from .config import ConnectAuthSettings
from .keys.provider import KeyProvider
from .logging import get_logger
from .readers.base import RequestReader
from .types import (
    AuthorizationMethod,
    ConnectCredentials,
    ConnectJwt,
    CredentialsLoader,
    CredentialsSaver,
    InstallationType,
    QueryStringHashType,
    VerifiedRequest,
)


@dataclass(frozen=True)
class InstallResult:
    """Credentials persisted by an accepted installation."""

    type: InstallationType
    client_key: str
    credentials: ConnectCredentials
    connect_jwt: Optional[ConnectJwt] = None


class Addon:
    """Connect app wiring installation and request verification together."""

    def __init__(
        self,
        base_url: str,
        *,
        asymmetric_key_provider: Optional[KeyProvider] = None,
        authorization_method: Union[AuthorizationMethod, str] = AuthorizationMethod.ANY,
        install_query_string_hash_type: Union[QueryStringHashType, str] = QueryStringHashType.COMPUTED,
        request_query_string_hash_type: Union[QueryStringHashType, str] = QueryStringHashType.COMPUTED,
    ):
        self.base_url = base_url
        self.logger = get_logger("connect_auth.addon")
        self.installation_verifier = InstallationVerifier(
            base_url,
            asymmetric_key_provider=asymmetric_key_provider,
            authorization_method=authorization_method,
            query_string_hash_type=install_query_string_hash_type,
        )
        self.request_verifier = RequestVerifier(
            base_url,
            asymmetric_key_provider=asymmetric_key_provider,
            authorization_method=authorization_method,
            query_string_hash_type=request_query_string_hash_type,
        )

    @classmethod
    def from_settings(
        cls,
        settings: ConnectAuthSettings,
        asymmetric_key_provider: Optional[KeyProvider] = None,
    ) -> "Addon":
        """
        Create an addon from settings.

        Only the verification settings are read here. `log_level` and
        `keys_cdn_url` are for the host application, which passes them to
        `configure_logging` and to its own `KeyProvider` implementation.
        """
        return cls(
            settings.base_url,
            asymmetric_key_provider=asymmetric_key_provider,
            authorization_method=settings.authorization_method,
            install_query_string_hash_type=settings.install_query_string_hash_type,
            request_query_string_hash_type=settings.request_query_string_hash_type,
        )

    async def install(
        self,
        request_reader: RequestReader,
        body: Mapping[str, Any],
        load_credentials: CredentialsLoader,
        save_credentials: CredentialsSaver,
    ) -> InstallResult:
        """
        Handle an installation webhook.

        Credentials are saved only after the request was verified; an update
        passes the existing credentials to the saver.
        """
        existing: Optional[ConnectCredentials] = None

        async def _load_credentials(client_key: str) -> Optional[ConnectCredentials]:
            nonlocal existing
            existing = await load_credentials(client_key)
            return existing

        result = await self.installation_verifier.verify(request_reader, _load_credentials)

        credentials = await save_credentials(result.client_key, body, existing)
        self.logger.info(
            "Installation credentials saved",
            client_key=result.client_key,
            installation_type=result.type.value,
        )

        return InstallResult(
            type=result.type,
            client_key=result.client_key,
            credentials=credentials,
            connect_jwt=result.connect_jwt,
        )

    async def authenticate(
        self,
        request_reader: RequestReader,
        load_credentials: CredentialsLoader,
        query_string_hash_type: Optional[Union[QueryStringHashType, str]] = None,
    ) -> VerifiedRequest:
        """Check the request JWT and return the verified token with the stored entity."""
        return await self.request_verifier.verify(request_reader, load_credentials, query_string_hash_type)
