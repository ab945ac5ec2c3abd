"""Read-only receiver secret lookup keyed by receiver name and route id."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Protocol

SECRET_MIN_LENGTH = 32
SECRET_MAX_LENGTH = 128


class SecretStore(Protocol):
    """Read-only protocol for secret retrieval."""

    def get_secret(self, receiver: str, route_id: str) -> str | None: ...


class StaticSecretStore:
    """Immutable snapshot of configured receiver secrets.

    Receiver names and route ids are matched case-insensitively. The empty
    route id is the default entry for a receiver.
    """

    def __init__(self, secrets: Mapping[str, Mapping[str, str]] | None = None) -> None:
        snapshot: dict[tuple[str, str], str] = {}
        for receiver, per_route in (secrets or {}).items():
            for route_id, secret in per_route.items():
                validate_secret(receiver, route_id, secret)
                snapshot[(_key(receiver), _key(route_id))] = secret
        self._secrets = MappingProxyType(snapshot)

    def get_secret(self, receiver: str, route_id: str) -> str | None:
        return self._secrets.get((_key(receiver), _key(route_id)))


def validate_secret(receiver: str, route_id: str, secret: str) -> None:
    if not isinstance(secret, str):
        raise ValueError(f"secret for receiver '{receiver}' (id '{route_id}') must be a string")
    if not SECRET_MIN_LENGTH <= len(secret) <= SECRET_MAX_LENGTH:
        raise ValueError(
            f"secret for receiver '{receiver}' (id '{route_id}') must be between "
            f"{SECRET_MIN_LENGTH} and {SECRET_MAX_LENGTH} characters long"
        )


def parse_secret_setting(value: str) -> dict[str, str]:
    """Parse ``secret`` or ``id1=secret1, id2=secret2`` into a route-id mapping."""

    entries: dict[str, str] = {}
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        route_id, sep, secret = item.partition("=")
        if not sep:
            route_id, secret = "", item
        entries[route_id.strip()] = secret.strip()
    return entries


def _key(value: str) -> str:
    return value.strip().lower()
