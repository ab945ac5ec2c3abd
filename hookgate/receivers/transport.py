"""Encrypted-transport enforcement for receiver requests."""

from __future__ import annotations

import ipaddress
import logging

from hookgate.receivers.types import ReceiverRequest, RejectionKind, ValidationError, ValidationResult

logger = logging.getLogger(__name__)


class TransportGuard:
    """Reject requests that did not arrive over HTTPS.

    Loopback peers may use plain HTTP when ``allow_loopback_http`` is set, and
    operators can turn the check off entirely with ``require_https=False``.
    A scheme reported by a trusted proxy is final: the proxy itself is the
    loopback peer, so the exemption does not apply to forwarded requests.
    """

    def __init__(self, *, require_https: bool = True, allow_loopback_http: bool = True) -> None:
        self._require_https = require_https
        self._allow_loopback_http = allow_loopback_http

    def verify(self, request: ReceiverRequest, receiver: str) -> ValidationResult:
        if not self._require_https or request.scheme == "https":
            return ValidationResult(valid=True)
        if self._allow_loopback_http and not request.forwarded and is_loopback(request.client_host):
            return ValidationResult(valid=True)
        message = f"The WebHook receiver '{receiver}' requires HTTPS in order to be secure. Please register a WebHook URI of type 'https'."
        logger.error(message)
        return ValidationResult(
            valid=False,
            error=ValidationError(
                kind=RejectionKind.INSECURE_TRANSPORT,
                code="HTTPS_REQUIRED",
                message=message,
                status_code=400,
            ),
        )


def is_loopback(host: str | None) -> bool:
    if not host:
        return False
    if host.lower() == "localhost":
        return True
    try:
        return ipaddress.ip_address(host).is_loopback
    except ValueError:
        return False
