"""
Configuration management for Connect authentication.
"""

from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .keys.provider import ConnectInstallKeysCdnUrl
from .types import AuthorizationMethod, QueryStringHashType


class ConnectAuthSettings(BaseSettings):
    """Settings for verifying Connect installations and requests."""

    model_config = SettingsConfigDict(
        env_prefix="CONNECT_AUTH_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # App
    base_url: str = Field(default="http://localhost:3000")

    # Verification
    authorization_method: AuthorizationMethod = Field(default=AuthorizationMethod.ANY)
    install_query_string_hash_type: QueryStringHashType = Field(default=QueryStringHashType.COMPUTED)
    request_query_string_hash_type: QueryStringHashType = Field(default=QueryStringHashType.COMPUTED)

    # Public keys, read by the host application's KeyProvider
    keys_cdn_environment: Literal["production", "staging"] = Field(default="production")

    # Observability, passed by the host application to configure_logging
    log_level: str = Field(default="info")

    @property
    def keys_cdn_url(self) -> str:
        """Connect install-keys distribution point for the configured environment."""
        return ConnectInstallKeysCdnUrl[self.keys_cdn_environment.upper()].value


def get_settings(**overrides: Any) -> ConnectAuthSettings:
    """Get settings from the environment, with explicit overrides."""
    return ConnectAuthSettings(**overrides)
