"""
Connect authentication library.

Verifies that installation webhooks and subsequent requests really come
from the Connect platform and were not tampered with in transit:

- auth: installation and request verification flows.
- validation: JWT decoding/verification and Query String Hash checks.
- keys: public key provider contract and caching decorator.
- readers: adapters exposing HTTP requests to the verifiers.

Design notes:
- No IO happens in the library itself. Credentials, public keys and key
  caches are supplied by the application as async callables/objects.
- Failures raise AuthError with a closed set of codes; configuration
  mistakes raise ValueError.
"""

from .addon import Addon, InstallResult
from .auth import InstallationVerifier, RequestVerifier
from .config import ConnectAuthSettings, get_settings
from .errors import AuthError, AuthErrorCode, ErrorResponse, QshInfo
from .keys import CachingKeyProvider, ConnectInstallKeysCdnUrl, InMemoryKeyCache, KeyCache, KeyProvider
from .logging import configure_logging, get_logger
from .readers import HttpRequestReader, RequestReader
from .types import (
    CONTEXT_QSH,
    AuthorizationMethod,
    ConnectCredentials,
    ConnectJwt,
    CredentialsLoader,
    CredentialsSaver,
    InstallationResult,
    InstallationType,
    InstallationUpdate,
    NewInstallation,
    QueryStringHashType,
    UnverifiedConnectJwt,
    VerifiedRequest,
)
from .validation import (
    create_query_string_hash,
    decode_unverified,
    encode_asymmetric,
    encode_symmetric,
    is_asymmetric_algorithm,
    verify_asymmetric,
    verify_query_string_hash,
    verify_symmetric,
)

__all__ = [
    "Addon",
    "InstallResult",
    "InstallationVerifier",
    "RequestVerifier",
    "ConnectAuthSettings",
    "get_settings",
    "AuthError",
    "AuthErrorCode",
    "ErrorResponse",
    "QshInfo",
    "CachingKeyProvider",
    "ConnectInstallKeysCdnUrl",
    "InMemoryKeyCache",
    "KeyCache",
    "KeyProvider",
    "configure_logging",
    "get_logger",
    "HttpRequestReader",
    "RequestReader",
    "CONTEXT_QSH",
    "AuthorizationMethod",
    "ConnectCredentials",
    "ConnectJwt",
    "CredentialsLoader",
    "CredentialsSaver",
    "InstallationResult",
    "InstallationType",
    "InstallationUpdate",
    "NewInstallation",
    "QueryStringHashType",
    "UnverifiedConnectJwt",
    "VerifiedRequest",
    "create_query_string_hash",
    "decode_unverified",
    "encode_asymmetric",
    "encode_symmetric",
    "is_asymmetric_algorithm",
    "verify_asymmetric",
    "verify_query_string_hash",
    "verify_symmetric",
]
