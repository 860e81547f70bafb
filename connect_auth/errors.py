"""
Error handling for Connect authentication.
"""

from enum import Enum
from typing import Any, Dict, Optional, TYPE_CHECKING
from dataclasses import dataclass, asdict
from pydantic import BaseModel

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from .types import UnverifiedConnectJwt


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class AuthErrorCode(str, Enum):
    """Closed set of authentication failure kinds."""

    MISSING_JWT = "MISSING_JWT"
    FAILED_TO_DECODE = "FAILED_TO_DECODE"
    WRONG_ISSUER = "WRONG_ISSUER"
    WRONG_AUDIENCE = "WRONG_AUDIENCE"
    MISSING_KID = "MISSING_KID"
    FAILED_TO_OBTAIN_PUBLIC_KEY = "FAILED_TO_OBTAIN_PUBLIC_KEY"
    UNKNOWN_ISSUER = "UNKNOWN_ISSUER"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    MISSING_QSH = "MISSING_QSH"
    INVALID_QSH = "INVALID_QSH"
    UNAUTHORIZED_REQUEST = "UNAUTHORIZED_REQUEST"


@dataclass(frozen=True)
class QshInfo:
    """Computed and received QSH values of a failed comparison."""

    computed: str
    received: str


class AuthError(Exception):
    """Raised whenever a Connect installation or request cannot be trusted."""

    def __init__(
        self,
        code: AuthErrorCode,
        message: str,
        *,
        origin_error: Optional[BaseException] = None,
        unverified_connect_jwt: Optional["UnverifiedConnectJwt"] = None,
        connect_jwt: Optional["UnverifiedConnectJwt"] = None,
        qsh_info: Optional[QshInfo] = None,
    ):
        self.code = code
        self.message = message
        self.origin_error = origin_error
        self.unverified_connect_jwt = unverified_connect_jwt
        self.connect_jwt = connect_jwt
        self.qsh_info = qsh_info
        super().__init__(message)

    def __repr__(self) -> str:
        return f"AuthError(code={self.code.value!r}, message={self.message!r})"

    @property
    def details(self) -> Dict[str, Any]:
        """Diagnostic context safe to log or serialise."""
        details: Dict[str, Any] = {}
        if self.origin_error is not None:
            details["origin_error"] = str(self.origin_error)
        if self.unverified_connect_jwt is not None:
            details["unverified_connect_jwt"] = self.unverified_connect_jwt.model_dump(exclude_none=True)
        if self.connect_jwt is not None:
            details["connect_jwt"] = self.connect_jwt.model_dump(exclude_none=True)
        if self.qsh_info is not None:
            details["qsh_info"] = asdict(self.qsh_info)
        return details

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code.value,
            message=self.message,
            details=self.details
        )
