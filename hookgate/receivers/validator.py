"""Shared-secret ``code`` query parameter validation."""

from __future__ import annotations

import hmac
import logging

from hookgate.receivers.secret_store import SecretStore
from hookgate.receivers.types import ReceiverRequest, RejectionKind, ValidationError, ValidationResult

logger = logging.getLogger(__name__)

CODE_QUERY_PARAMETER = "code"

_UNAUTHORIZED_MESSAGE = (
    f"The WebHook verification request must contain a valid '{CODE_QUERY_PARAMETER}' query parameter."
)


class CodeValidator:
    """Validate the ``code`` query parameter against the configured secret."""

    def __init__(self, secret_store: SecretStore) -> None:
        self._secret_store = secret_store

    def verify(self, request: ReceiverRequest, receiver: str, route_id: str) -> ValidationResult:
        secret = self._secret_store.get_secret(receiver, route_id)
        if not secret:
            logger.error(
                "No secret is configured for WebHook receiver '%s' with id '%s'",
                receiver,
                route_id,
            )
            return ValidationResult(
                valid=False,
                error=ValidationError(
                    kind=RejectionKind.MISSING_CONFIG,
                    code="RECEIVER_NOT_CONFIGURED",
                    message="The WebHook receiver is not configured correctly.",
                    status_code=500,
                ),
            )

        values = request.query_values(CODE_QUERY_PARAMETER)
        if not any(values):
            logger.error(
                "WebHook request for receiver '%s' (id '%s') has no '%s' query parameter",
                receiver,
                route_id,
                CODE_QUERY_PARAMETER,
            )
            return _unauthorized(RejectionKind.MISSING_CODE)

        if len(values) > 1 or not secret_equal(values[0], secret):
            logger.error(
                "WebHook request for receiver '%s' (id '%s') has an invalid '%s' query parameter",
                receiver,
                route_id,
                CODE_QUERY_PARAMETER,
            )
            return _unauthorized(RejectionKind.INVALID_CODE)
        return ValidationResult(valid=True)


def secret_equal(provided: str, expected: str) -> bool:
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def _unauthorized(kind: RejectionKind) -> ValidationResult:
    return ValidationResult(
        valid=False,
        error=ValidationError(
            kind=kind,
            code="INVALID_CODE",
            message=_UNAUTHORIZED_MESSAGE,
            status_code=401,
        ),
    )
