"""Configuration models for hookgate."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, SecretStr, field_validator

from hookgate.receivers.secret_store import SECRET_MAX_LENGTH, SECRET_MIN_LENGTH

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class HttpConfig(BaseModel):
    """HTTP gateway configuration."""

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8443, ge=1, le=65535)
    require_https: bool = Field(default=True, description="Reject receiver requests not made over HTTPS.")
    allow_loopback_http: bool = Field(default=True, description="Accept plain HTTP from loopback peers.")
    trust_forwarded_proto: bool = Field(default=False, description="Take the scheme from X-Forwarded-Proto.")


class ReceiverConfig(BaseModel):
    """Per-receiver secrets keyed by route id; the empty id is the default route."""

    secrets: dict[str, SecretStr] = Field(default_factory=dict)

    @field_validator("secrets", mode="after")
    @classmethod
    def _check_secret_lengths(cls, value: dict[str, SecretStr]) -> dict[str, SecretStr]:
        normalized: dict[str, SecretStr] = {}
        for route_id, secret in value.items():
            key = str(route_id).strip().lower()
            if not SECRET_MIN_LENGTH <= len(secret.get_secret_value()) <= SECRET_MAX_LENGTH:
                raise ValueError(
                    f"secret for route id '{key}' must be between {SECRET_MIN_LENGTH} and {SECRET_MAX_LENGTH} characters long"
                )
            normalized[key] = secret
        return normalized


class HookGateConfig(BaseModel):
    """Root configuration."""

    log_level: LogLevel = Field(default="INFO")
    http: HttpConfig = Field(default_factory=HttpConfig)
    receivers: dict[str, ReceiverConfig] = Field(default_factory=dict)

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @field_validator("receivers", mode="after")
    @classmethod
    def _lower_receiver_names(cls, value: dict[str, ReceiverConfig]) -> dict[str, ReceiverConfig]:
        return {name.strip().lower(): receiver for name, receiver in value.items()}

    def secret_snapshot(self) -> dict[str, dict[str, str]]:
        """Plain secret mapping for building a secret store."""
        return {
            name: {route_id: secret.get_secret_value() for route_id, secret in receiver.secrets.items()}
            for name, receiver in self.receivers.items()
        }
