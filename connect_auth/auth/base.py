"""
Shared configuration and asymmetric verification path.
"""

from typing import Optional, Union

from ..errors import AuthError, AuthErrorCode
from ..keys.provider import KeyProvider
from ..logging import get_logger
from ..readers.base import RequestReader
from ..types import AuthorizationMethod, ConnectJwt, QueryStringHashType, UnverifiedConnectJwt
from ..validation.qsh import verify_query_string_hash
from ..validation.token import is_asymmetric_algorithm, verify_asymmetric


class BaseVerifier:
    """Base class holding the settings common to all verification flows."""

    logger_name = "connect_auth.verifier"

    def __init__(
        self,
        base_url: str,
        *,
        asymmetric_key_provider: Optional[KeyProvider] = None,
        authorization_method: Union[AuthorizationMethod, str] = AuthorizationMethod.ANY,
        query_string_hash_type: Union[QueryStringHashType, str] = QueryStringHashType.COMPUTED,
    ):
        self.base_url = base_url
        self.asymmetric_key_provider = asymmetric_key_provider
        self.authorization_method = AuthorizationMethod(authorization_method)
        self.query_string_hash_type = QueryStringHashType(query_string_hash_type)
        self.logger = get_logger(self.logger_name)

    def _uses_public_key(self, unverified_connect_jwt: Optional[UnverifiedConnectJwt]) -> bool:
        """Select the public-key path, either forced or detected from the token algorithm."""
        if self.authorization_method is AuthorizationMethod.PUBLIC_KEY:
            return True
        if self.authorization_method is AuthorizationMethod.ANY:
            return unverified_connect_jwt is not None and is_asymmetric_algorithm(unverified_connect_jwt.alg)
        return False

    def _require_key_provider(self) -> KeyProvider:
        if self.asymmetric_key_provider is None:
            raise ValueError("Missing asymmetric_key_provider instance")
        return self.asymmetric_key_provider

    async def _verify_signed_request(
        self,
        request_reader: RequestReader,
        raw_connect_jwt: str,
        unverified_connect_jwt: Optional[UnverifiedConnectJwt],
        client_key: str,
        query_string_hash_type: QueryStringHashType,
    ) -> ConnectJwt:
        """
        Verify an asymmetrically signed (RS256) Connect JWT.

        Issuer, audience and kid are checked before the public key is fetched.
        """
        key_provider = self._require_key_provider()

        if not raw_connect_jwt or unverified_connect_jwt is None:
            raise AuthError(AuthErrorCode.MISSING_JWT, "Missing JWT")

        if unverified_connect_jwt.iss != client_key:
            raise AuthError(
                AuthErrorCode.WRONG_ISSUER,
                "Wrong issuer",
                unverified_connect_jwt=unverified_connect_jwt,
            )

        if not unverified_connect_jwt.aud or self.base_url not in unverified_connect_jwt.aud:
            raise AuthError(
                AuthErrorCode.WRONG_AUDIENCE,
                "Wrong audience",
                unverified_connect_jwt=unverified_connect_jwt,
            )

        if not unverified_connect_jwt.kid:
            raise AuthError(
                AuthErrorCode.MISSING_KID,
                "Missing token kid",
                unverified_connect_jwt=unverified_connect_jwt,
            )

        try:
            public_key = await key_provider.get(unverified_connect_jwt.kid, unverified_connect_jwt)
        except Exception as exc:
            raise AuthError(
                AuthErrorCode.FAILED_TO_OBTAIN_PUBLIC_KEY,
                "Failed to obtain public key",
                origin_error=exc,
                unverified_connect_jwt=unverified_connect_jwt,
            ) from exc

        connect_jwt = verify_asymmetric(raw_connect_jwt, public_key, unverified_connect_jwt)

        verify_query_string_hash(
            connect_jwt,
            lambda: request_reader.compute_query_string_hash(self.base_url),
            query_string_hash_type,
        )

        return connect_jwt
