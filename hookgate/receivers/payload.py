"""Request body decoding into normalized receiver events."""

from __future__ import annotations

from urllib.parse import parse_qsl

from hookgate.receivers.types import NormalizedEvent, PayloadError, RejectionKind, ValidationError

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class FormPayloadReader:
    """Decode ``application/x-www-form-urlencoded`` bodies.

    Percent-escapes and ``+`` are decoded, blank and valueless fields are kept
    with an empty value and unknown fields pass through. Only undecodable
    UTF-8 is rejected as malformed. Repeated keys keep every pair; lookups on the
    resulting event return the last value.
    """

    def decode(self, body: bytes, content_type: str) -> NormalizedEvent:
        media_type = _media_type(content_type)
        if media_type != FORM_CONTENT_TYPE:
            raise PayloadError(
                ValidationError(
                    kind=RejectionKind.UNSUPPORTED_CONTENT_TYPE,
                    code="UNSUPPORTED_CONTENT_TYPE",
                    message="The WebHook request must contain an entity body formatted as HTML Form Data.",
                    status_code=415,
                )
            )
        try:
            # "flag" decodes as ("flag", ""); empty segments are skipped
            pairs = parse_qsl(body.decode("utf-8"), keep_blank_values=True, encoding="utf-8", errors="strict")
        except ValueError as exc:
            raise PayloadError(
                ValidationError(
                    kind=RejectionKind.MALFORMED_BODY,
                    code="MALFORMED_BODY",
                    message="The WebHook request contained an invalid HTML Form Data entity body.",
                    status_code=400,
                )
            ) from exc
        return NormalizedEvent(pairs)


def _media_type(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip().lower()
