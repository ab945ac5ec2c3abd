"""WebHook receiver pipeline: transport, code, payload, routing and dispatch."""

from __future__ import annotations

import logging
from typing import Protocol

from hookgate.receivers.dispatcher import HandlerDispatcher
from hookgate.receivers.transport import TransportGuard
from hookgate.receivers.types import (
    DispatchResult,
    NormalizedEvent,
    PayloadError,
    ReceiverRequest,
    RejectionKind,
    ValidationError,
)
from hookgate.receivers.validator import CodeValidator

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ("GET", "POST")


class ReceiverProfile(Protocol):
    """Vendor-specific capabilities plugged into :class:`WebHookReceiver`."""

    name: str

    def decode_payload(self, body: bytes, content_type: str) -> NormalizedEvent: ...

    def extract_discriminators(self, event: NormalizedEvent) -> list[str]: ...


class ReceiverRejected(Exception):
    """Terminal rejection of one request, carrying the mapped HTTP error."""

    def __init__(self, error: ValidationError) -> None:
        super().__init__(error.message)
        self.error = error


class WebHookReceiver:
    """Verify and dispatch deliveries for one vendor profile.

    GET is a handshake request answered with an empty 200 once transport and code
    checks pass. POST additionally decodes the body, derives discriminators and
    dispatches exactly once. Any other method is answered with 405 before the
    secret store is consulted.
    """

    def __init__(
        self,
        profile: ReceiverProfile,
        *,
        transport_guard: TransportGuard,
        code_validator: CodeValidator,
        dispatcher: HandlerDispatcher,
    ) -> None:
        self._profile = profile
        self._transport_guard = transport_guard
        self._code_validator = code_validator
        self._dispatcher = dispatcher

    @property
    def name(self) -> str:
        return self._profile.name

    async def receive(self, route_id: str, request: ReceiverRequest) -> DispatchResult:
        try:
            return await self._receive(route_id, request)
        except ReceiverRejected as exc:
            return error_result(exc.error)

    async def _receive(self, route_id: str, request: ReceiverRequest) -> DispatchResult:
        if request.method == "POST":
            self._ensure_valid_code(route_id, request)
            body = await request.read_body()
            event = self._decode(body, request.content_type)
            actions = self._route(event)
            logger.info(
                "Dispatching WebHook for receiver '%s' (id '%s') with actions %s",
                self.name,
                route_id,
                actions,
            )
            return await self._dispatcher.dispatch(self.name, route_id, actions, event, request)
        if request.method == "GET":
            self._ensure_valid_code(route_id, request)
            return DispatchResult(status_code=200)
        raise ReceiverRejected(
            ValidationError(
                kind=RejectionKind.METHOD_NOT_ALLOWED,
                code="METHOD_NOT_ALLOWED",
                message=f"The HTTP '{request.method}' method is not supported by the '{self.name}' WebHook receiver.",
                status_code=405,
                headers={"Allow": ", ".join(ALLOWED_METHODS)},
            )
        )

    def _ensure_valid_code(self, route_id: str, request: ReceiverRequest) -> None:
        transport = self._transport_guard.verify(request, self.name)
        if not transport.valid:
            assert transport.error is not None
            raise ReceiverRejected(transport.error)
        code = self._code_validator.verify(request, self.name, route_id)
        if not code.valid:
            assert code.error is not None
            raise ReceiverRejected(code.error)

    def _decode(self, body: bytes, content_type: str) -> NormalizedEvent:
        try:
            return self._profile.decode_payload(body, content_type)
        except PayloadError as exc:
            logger.error("WebHook receiver '%s' rejected body: %s", self.name, exc.error.message)
            raise ReceiverRejected(exc.error) from exc

    def _route(self, event: NormalizedEvent) -> list[str]:
        try:
            actions = self._profile.extract_discriminators(event)
        except PayloadError as exc:
            raise ReceiverRejected(exc.error) from exc
        if not actions:
            raise ReceiverRejected(
                ValidationError(
                    kind=RejectionKind.MISSING_DISCRIMINATOR,
                    code="MISSING_DISCRIMINATOR",
                    message="The WebHook request does not identify an event type.",
                    status_code=400,
                )
            )
        return actions


def error_result(error: ValidationError) -> DispatchResult:
    return DispatchResult(
        status_code=error.status_code,
        headers=dict(error.headers),
        error=error,
    )
