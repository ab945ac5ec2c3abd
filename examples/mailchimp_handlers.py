"""Sample MailChimp handlers.

Run with::

    hookgate init
    hookgate serve --handlers examples.mailchimp_handlers

then register ``https://<host>/api/webhooks/incoming/mailchimp?code=<secret>``
as the list WebHook URL in MailChimp.
"""

from __future__ import annotations

import logging

from hookgate.receivers import DispatchResult, HandlerRegistry, WebHookHandlerContext

logger = logging.getLogger(__name__)


def register(registry: HandlerRegistry) -> None:
    @registry.handler(receiver="mailchimp", actions=["subscribe", "unsubscribe"])
    async def on_membership(context: WebHookHandlerContext) -> None:
        logger.info("%s: %s", context.actions[0], context.event.get("data[email]", "<unknown>"))

    @registry.handler(receiver="mailchimp", actions=["upemail"])
    async def on_email_change(context: WebHookHandlerContext) -> DispatchResult:
        event = context.event
        logger.info("email changed from %s to %s", event.get("data[old_email]"), event.get("data[new_email]"))
        return DispatchResult(status_code=200, body={"updated": True})

    @registry.handler(receiver="mailchimp", order=90)
    def audit(context: WebHookHandlerContext) -> None:
        logger.debug("mailchimp event on route '%s' with %d fields", context.route_id, len(context.event))
