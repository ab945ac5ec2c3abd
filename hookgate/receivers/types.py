"""Receiver data models shared by validation, decoding, routing and dispatch layers."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class RejectionKind(str, Enum):
    INSECURE_TRANSPORT = "insecure_transport"
    MISSING_CONFIG = "missing_config"
    MISSING_CODE = "missing_code"
    INVALID_CODE = "invalid_code"
    UNSUPPORTED_CONTENT_TYPE = "unsupported_content_type"
    MALFORMED_BODY = "malformed_body"
    MISSING_DISCRIMINATOR = "missing_discriminator"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    UNKNOWN_RECEIVER = "unknown_receiver"


@dataclass(slots=True)
class ValidationError:
    """Structured rejection used for HTTP response mapping.

    ``kind`` is internal and only used for logging; ``code`` and ``message`` are
    what the caller sees.
    """

    kind: RejectionKind
    code: str
    message: str
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class ValidationResult:
    """Validation output with optional error details."""

    valid: bool
    error: ValidationError | None = None


class PayloadError(Exception):
    """Raised by payload readers and event routers for malformed input."""

    def __init__(self, error: ValidationError) -> None:
        super().__init__(error.message)
        self.error = error


@dataclass(slots=True)
class ReceiverRequest:
    """Normalized inbound HTTP request used by the receiver pipeline.

    ``forwarded`` is set when ``scheme`` came from a trusted proxy header
    rather than from the connection itself.
    """

    method: str
    scheme: str
    query: dict[str, list[str]] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    client_host: str | None = None
    forwarded: bool = False
    body: bytes | None = None
    body_reader: Callable[[], Awaitable[bytes]] | None = None

    def __post_init__(self) -> None:
        self.method = self.method.upper()
        self.scheme = self.scheme.lower()
        self.headers = {key.lower(): value for key, value in self.headers.items()}

    def header(self, name: str, default: str = "") -> str:
        return self.headers.get(name.lower(), default)

    def query_values(self, name: str) -> list[str]:
        return list(self.query.get(name, []))

    @property
    def content_type(self) -> str:
        return self.header("content-type")

    async def read_body(self) -> bytes:
        if self.body is None:
            self.body = await self.body_reader() if self.body_reader is not None else b""
        return self.body


class NormalizedEvent(Mapping[str, str]):
    """Ordered, read-only event fields decoded from a request body.

    When a field name repeats, ``event[name]`` returns the last value. All pairs
    stay available in arrival order through :meth:`getall` and :meth:`items_all`.
    """

    __slots__ = ("_pairs", "_latest")

    def __init__(self, pairs: list[tuple[str, str]] | None = None) -> None:
        self._pairs: tuple[tuple[str, str], ...] = tuple(pairs or ())
        latest: dict[str, str] = {}
        for key, value in self._pairs:
            latest[key] = value
        self._latest = latest

    def __getitem__(self, key: str) -> str:
        return self._latest[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._latest)

    def __len__(self) -> int:
        return len(self._latest)

    def __repr__(self) -> str:
        return f"NormalizedEvent({self._latest!r})"

    def getall(self, key: str) -> list[str]:
        return [value for name, value in self._pairs if name == key]

    def items_all(self) -> list[tuple[str, str]]:
        return list(self._pairs)

    def to_dict(self) -> dict[str, str]:
        return dict(self._latest)


@dataclass(slots=True)
class DispatchResult:
    """HTTP outcome produced by handler dispatch or by the receiver itself."""

    status_code: int = 200
    body: Any = None
    headers: dict[str, str] = field(default_factory=dict)
    error: ValidationError | None = None


@dataclass(slots=True)
class WebHookHandlerContext:
    """Context shared by every handler invoked for one delivery."""

    receiver: str
    route_id: str
    actions: list[str]
    event: NormalizedEvent
    request: ReceiverRequest
    response: DispatchResult | None = None
