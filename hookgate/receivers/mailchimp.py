"""MailChimp WebHook receiver profile.

A sample WebHook URI is ``https://<host>/api/webhooks/incoming/mailchimp/{id}?code=<secret>``.
MailChimp posts HTML form data and names the event in the ``type`` field
(``subscribe``, ``unsubscribe``, ``profile``, ``upemail``, ``cleaned``,
``campaign``). It also issues a GET against the URI when the WebHook is
registered, which is answered without dispatching.
"""

from __future__ import annotations

from hookgate.receivers.payload import FormPayloadReader
from hookgate.receivers.router import EventRouter
from hookgate.receivers.types import NormalizedEvent

RECEIVER_NAME = "mailchimp"
EVENT_TYPE_FIELD = "type"


class MailChimpProfile:
    name = RECEIVER_NAME

    def __init__(self) -> None:
        self._reader = FormPayloadReader()
        self._router = EventRouter(EVENT_TYPE_FIELD)

    def decode_payload(self, body: bytes, content_type: str) -> NormalizedEvent:
        return self._reader.decode(body, content_type)

    def extract_discriminators(self, event: NormalizedEvent) -> list[str]:
        return self._router.route(event)
