"""
Post-installation request verification.
"""

from typing import Optional, Union

from ..errors import AuthError, AuthErrorCode
from ..logging import reset_client_key, set_client_key
from ..readers.base import RequestReader
from ..types import CredentialsLoader, QueryStringHashType, UnverifiedConnectJwt, VerifiedRequest
from ..validation.qsh import verify_query_string_hash
from ..validation.token import decode_unverified, verify_symmetric
from .base import BaseVerifier


class RequestVerifier(BaseVerifier):
    """
    Verifies incoming requests of installed clients using their stored
    credentials, and checks the request was not tampered with via its QSH.

    Handles API, frame-loading, context and app-lifecycle (e.g. uninstall)
    requests.
    """

    logger_name = "connect_auth.request"

    async def verify(
        self,
        request_reader: RequestReader,
        credentials_loader: CredentialsLoader,
        query_string_hash_type: Optional[Union[QueryStringHashType, str]] = None,
    ) -> VerifiedRequest:
        """Authenticate a request and return its verified token and stored entity."""
        qsh_type = QueryStringHashType(query_string_hash_type or self.query_string_hash_type)

        try:
            result = await self._verify(request_reader, credentials_loader, qsh_type)
        except AuthError as exc:
            issuer = exc.unverified_connect_jwt.iss if exc.unverified_connect_jwt else None
            self.logger.warning(
                "Request rejected",
                code=exc.code.value,
                error=exc.message,
                issuer=issuer,
            )
            raise

        self.logger.debug("Request verified", issuer=result.connect_jwt.iss)
        return result

    async def _verify(
        self,
        request_reader: RequestReader,
        credentials_loader: CredentialsLoader,
        qsh_type: QueryStringHashType,
    ) -> VerifiedRequest:
        raw_connect_jwt = request_reader.extract_connect_jwt()
        if not raw_connect_jwt:
            raise AuthError(AuthErrorCode.MISSING_JWT, "Missing JWT")

        unverified_connect_jwt = decode_unverified(raw_connect_jwt)
        issuer = unverified_connect_jwt.iss or ""

        context_token = set_client_key(issuer)
        try:
            return await self._verify_issuer(
                request_reader,
                credentials_loader,
                raw_connect_jwt,
                unverified_connect_jwt,
                issuer,
                qsh_type,
            )
        finally:
            reset_client_key(context_token)

    async def _verify_issuer(
        self,
        request_reader: RequestReader,
        credentials_loader: CredentialsLoader,
        raw_connect_jwt: str,
        unverified_connect_jwt: UnverifiedConnectJwt,
        issuer: str,
        qsh_type: QueryStringHashType,
    ) -> VerifiedRequest:
        credentials = await credentials_loader(issuer)
        if credentials is None:
            raise AuthError(
                AuthErrorCode.UNKNOWN_ISSUER,
                "Unknown issuer",
                unverified_connect_jwt=unverified_connect_jwt,
            )

        # Signed request, the issuer comes from the token itself
        if self._uses_public_key(unverified_connect_jwt):
            connect_jwt = await self._verify_signed_request(
                request_reader,
                raw_connect_jwt,
                unverified_connect_jwt,
                issuer,
                qsh_type,
            )
            return VerifiedRequest(connect_jwt=connect_jwt, stored_entity=credentials.stored_entity)

        connect_jwt = verify_symmetric(raw_connect_jwt, credentials.shared_secret, unverified_connect_jwt)

        verify_query_string_hash(
            connect_jwt,
            lambda: request_reader.compute_query_string_hash(self.base_url),
            qsh_type,
        )

        return VerifiedRequest(connect_jwt=connect_jwt, stored_entity=credentials.stored_entity)
