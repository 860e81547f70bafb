"""
Installation lifecycle verification.
"""

from typing import Optional, Union

from ..errors import AuthError, AuthErrorCode
from ..keys.provider import KeyProvider
from ..logging import reset_client_key, set_client_key
from ..readers.base import RequestReader
from ..types import (
    INSTALLATION_QUERY_STRING_HASH_TYPES,
    AuthorizationMethod,
    CredentialsLoader,
    InstallationResult,
    InstallationUpdate,
    NewInstallation,
    QueryStringHashType,
)
from ..validation.qsh import verify_query_string_hash
from ..validation.token import decode_unverified, verify_symmetric
from .base import BaseVerifier


class InstallationVerifier(BaseVerifier):
    """
    Verifies Connect installation webhooks before any data is persisted.

    Handles first-time installations as well as re-installations and
    installation updates of a known client key.
    """

    logger_name = "connect_auth.installation"

    def __init__(
        self,
        base_url: str,
        *,
        asymmetric_key_provider: Optional[KeyProvider] = None,
        authorization_method: Union[AuthorizationMethod, str] = AuthorizationMethod.ANY,
        query_string_hash_type: Union[QueryStringHashType, str] = QueryStringHashType.COMPUTED,
    ):
        super().__init__(
            base_url,
            asymmetric_key_provider=asymmetric_key_provider,
            authorization_method=authorization_method,
            query_string_hash_type=_installation_qsh_type(query_string_hash_type),
        )

    async def verify(
        self,
        request_reader: RequestReader,
        credentials_loader: CredentialsLoader,
        query_string_hash_type: Optional[Union[QueryStringHashType, str]] = None,
    ) -> InstallationResult:
        """Classify an installation request as new installation or update, or reject it."""
        qsh_type = (
            _installation_qsh_type(query_string_hash_type)
            if query_string_hash_type is not None
            else self.query_string_hash_type
        )
        client_key = request_reader.extract_client_key()
        context_token = set_client_key(client_key)

        try:
            result = await self._verify(request_reader, credentials_loader, client_key, qsh_type)
        except AuthError as exc:
            self.logger.warning(
                "Installation rejected",
                code=exc.code.value,
                error=exc.message,
                client_key=client_key,
            )
            raise
        finally:
            reset_client_key(context_token)

        self.logger.info(
            "Installation verified",
            installation_type=result.type.value,
            signed=result.connect_jwt is not None,
            client_key=client_key,
        )
        return result

    async def _verify(
        self,
        request_reader: RequestReader,
        credentials_loader: CredentialsLoader,
        client_key: str,
        qsh_type: QueryStringHashType,
    ) -> InstallationResult:
        raw_connect_jwt = request_reader.extract_connect_jwt()

        unverified_connect_jwt = None
        if raw_connect_jwt:
            unverified_connect_jwt = decode_unverified(raw_connect_jwt)

        # Signed installation
        if self._uses_public_key(unverified_connect_jwt):
            connect_jwt = await self._verify_signed_request(
                request_reader,
                raw_connect_jwt,
                unverified_connect_jwt,
                client_key,
                qsh_type,
            )

            credentials = await credentials_loader(client_key)
            if credentials is None:
                return NewInstallation(client_key=client_key, connect_jwt=connect_jwt)

            return InstallationUpdate(
                client_key=client_key,
                connect_jwt=connect_jwt,
                stored_entity=credentials.stored_entity,
            )

        # Unsigned installation, the issuer is only checked when a token is present
        if unverified_connect_jwt is not None and unverified_connect_jwt.iss != client_key:
            raise AuthError(
                AuthErrorCode.WRONG_ISSUER,
                "Wrong issuer",
                unverified_connect_jwt=unverified_connect_jwt,
            )

        credentials = await credentials_loader(client_key)
        if credentials is None:
            return NewInstallation(client_key=client_key)

        if raw_connect_jwt:
            connect_jwt = verify_symmetric(raw_connect_jwt, credentials.shared_secret, unverified_connect_jwt)

            verify_query_string_hash(
                connect_jwt,
                lambda: request_reader.compute_query_string_hash(self.base_url),
                qsh_type,
            )

            return InstallationUpdate(
                client_key=client_key,
                connect_jwt=connect_jwt,
                stored_entity=credentials.stored_entity,
            )

        raise AuthError(AuthErrorCode.UNAUTHORIZED_REQUEST, "Unauthorized update request")


def _installation_qsh_type(value: Union[QueryStringHashType, str]) -> QueryStringHashType:
    qsh_type = QueryStringHashType(value)
    if qsh_type not in INSTALLATION_QUERY_STRING_HASH_TYPES:
        raise ValueError(f"Unsupported query string hash type for installations: {qsh_type.value}")
    return qsh_type
