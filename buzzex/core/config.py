"""
Configuration Management Module

Holds the immutable per-client configuration and the environment-driven
settings used to build it. Uses pydantic / pydantic-settings for validation
and type safety.
"""

import base64
import binascii
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = Path.cwd() / ".env"

DEFAULT_BASE_URL = "https://api.buzzex.io"
DEFAULT_USER_AGENT = "Buzzex Python API Client"

_URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")


def decode_secret(secret: str) -> bytes:
    """
    Decode a base64 API secret.

    Accepts the standard and URL-safe alphabets, embedded whitespace and
    missing padding. Any other character is rejected.

    Raises:
        binascii.Error: The secret is not base64
    """
    compact = "".join(secret.split()).translate(_URLSAFE_TO_STANDARD).rstrip("=")
    return base64.b64decode(compact + "=" * (-len(compact) % 4), validate=True)


class ClientConfig(BaseModel):
    """
    Per-client configuration.

    Frozen once built; a BuzzexClient owns exactly one instance and never
    mutates it.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    api_key: str = Field(default="", description="Public API key")
    api_secret: str = Field(default="", description="Base64-encoded API secret")
    base_url: str = Field(default=DEFAULT_BASE_URL)
    api_version: int = Field(default=1, ge=0, description="Path version segment, /api/v{n}/")
    timeout_ms: int = Field(default=5000, gt=0, description="Round-trip timeout in milliseconds")
    otp: Optional[str] = Field(default=None, description="Two-factor password")
    attach_signature: bool = Field(
        default=False,
        description="Send API-Key/API-Sign headers on private calls"
    )
    user_agent: str = Field(default=DEFAULT_USER_AGENT)

    @field_validator('base_url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalise base URL so paths can be appended directly"""
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must be an http(s) URL")
        return v.rstrip("/")

    @field_validator('api_secret')
    @classmethod
    def validate_secret_encoding(cls, v: str) -> str:
        """Secret must be valid base64 when given"""
        if v:
            try:
                decode_secret(v)
            except (binascii.Error, ValueError):
                raise ValueError(
                    "API secret must be base64-encoded (standard or URL-safe alphabet)"
                )
        return v

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key and self.api_secret)


class Settings(BaseSettings):
    """
    Environment settings for applications embedding the client.

    Loads BUZZEX_* environment variables and the .env file of the working
    directory.

    Usage:
        settings = get_settings()
        client_config = settings.get_client_config()
    """

    api_key: str = Field(default="")
    api_secret: str = Field(default="")
    base_url: str = Field(default=DEFAULT_BASE_URL)
    api_version: int = Field(default=1)
    timeout_ms: int = Field(default=5000)
    otp: Optional[str] = Field(default=None)
    attach_signature: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="BUZZEX_",
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def get_client_config(self) -> ClientConfig:
        """
        Build the client configuration from these settings.

        Returns:
            ClientConfig object

        Raises:
            ValueError: If API credentials are not configured
        """
        if not self.api_key or not self.api_secret:
            raise ValueError("Buzzex API credentials not configured")

        return ClientConfig(
            api_key=self.api_key,
            api_secret=self.api_secret,
            base_url=self.base_url,
            api_version=self.api_version,
            timeout_ms=self.timeout_ms,
            otp=self.otp or None,
            attach_signature=self.attach_signature,
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get settings singleton"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Reload settings from the environment"""
    global _settings
    _settings = Settings()
    return _settings
