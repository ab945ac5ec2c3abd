"""Event-type discriminator extraction."""

from __future__ import annotations

import logging

from hookgate.receivers.types import NormalizedEvent, PayloadError, RejectionKind, ValidationError

logger = logging.getLogger(__name__)

BAD_BODY_MESSAGE = "The WebHook request must contain an entity body formatted as HTML Form Data with a '{field}' field."


class EventRouter:
    """Read the event discriminator from one field of a normalized event."""

    def __init__(self, field: str = "type") -> None:
        self._field = field

    @property
    def field(self) -> str:
        return self._field

    def route(self, event: NormalizedEvent) -> list[str]:
        action = event.get(self._field, "")
        if not action.strip():
            message = BAD_BODY_MESSAGE.format(field=self._field)
            logger.error(message)
            raise PayloadError(
                ValidationError(
                    kind=RejectionKind.MISSING_DISCRIMINATOR,
                    code="MISSING_DISCRIMINATOR",
                    message=message,
                    status_code=400,
                )
            )
        return [action]
