"""
Data types shared by the Connect verification flows.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, List, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, field_validator

E = TypeVar("E")

# Sentinel QSH value carried by context tokens
CONTEXT_QSH = "context-qsh"


class AuthorizationMethod(str, Enum):
    """How an incoming token is authenticated."""

    SHARED_SECRET = "sharedSecret"
    PUBLIC_KEY = "publicKey"
    ANY = "any"


class QueryStringHashType(str, Enum):
    """Policy applied to the `qsh` claim."""

    COMPUTED = "computed"
    CONTEXT = "context"
    ANY = "any"
    SKIP = "skip"


INSTALLATION_QUERY_STRING_HASH_TYPES = frozenset({QueryStringHashType.COMPUTED, QueryStringHashType.SKIP})


class InstallationType(str, Enum):
    """Outcome tag of an accepted installation request."""

    NEW_INSTALLATION = "newInstallation"
    UPDATE = "update"


class UnverifiedConnectJwt(BaseModel):
    """Claims of a Connect JWT whose signature has not been checked."""

    model_config = ConfigDict(extra="allow")

    iss: Optional[str] = None
    alg: Optional[str] = None
    kid: Optional[str] = None
    aud: Optional[List[Any]] = None
    exp: Optional[Union[int, float]] = None
    iat: Optional[Union[int, float]] = None
    qsh: Optional[str] = None
    sub: Optional[str] = None
    context: Optional[Any] = None

    @field_validator("aud", mode="before")
    @classmethod
    def _normalize_audience(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value


class ConnectJwt(UnverifiedConnectJwt):
    """Claims of a Connect JWT that passed signature verification."""


@dataclass(frozen=True)
class ConnectCredentials(Generic[E]):
    """Secret material and app state stored for one installation."""

    shared_secret: str
    stored_entity: Optional[E] = None


CredentialsLoader = Callable[[str], Awaitable[Optional[ConnectCredentials[Any]]]]
CredentialsSaver = Callable[
    [str, Mapping[str, Any], Optional[ConnectCredentials[Any]]],
    Awaitable[ConnectCredentials[Any]],
]


@dataclass(frozen=True)
class NewInstallation:
    """First-time installation, no credentials were stored for the client key."""

    client_key: str
    connect_jwt: Optional[ConnectJwt] = None
    type: InstallationType = field(default=InstallationType.NEW_INSTALLATION, init=False)


@dataclass(frozen=True)
class InstallationUpdate(Generic[E]):
    """Signed re-installation of a known client key."""

    client_key: str
    connect_jwt: ConnectJwt
    stored_entity: Optional[E] = None
    type: InstallationType = field(default=InstallationType.UPDATE, init=False)


InstallationResult = Union[NewInstallation, InstallationUpdate]


@dataclass(frozen=True)
class VerifiedRequest(Generic[E]):
    """Authenticated post-installation request."""

    connect_jwt: ConnectJwt
    stored_entity: Optional[E] = None
