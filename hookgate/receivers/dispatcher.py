"""Handler registry and dispatch for verified receiver events."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Protocol

from hookgate.receivers.types import (
    DispatchResult,
    NormalizedEvent,
    ReceiverRequest,
    WebHookHandlerContext,
)

logger = logging.getLogger(__name__)

DEFAULT_HANDLER_ORDER = 50

# Handler signature: async (context) -> DispatchResult | None
WebHookHandler = Callable[[WebHookHandlerContext], Awaitable[DispatchResult | None] | DispatchResult | None]


class HandlerDispatcher(Protocol):
    """Protocol used by the receiver to hand off verified events."""

    async def dispatch(
        self,
        receiver: str,
        route_id: str,
        actions: list[str],
        event: NormalizedEvent,
        request: ReceiverRequest,
    ) -> DispatchResult: ...


@dataclass(slots=True)
class _Registration:
    handler: WebHookHandler
    receiver: str | None
    actions: frozenset[str] | None
    route_id: str | None
    order: int
    sequence: int

    def matches(self, receiver: str, route_id: str, actions: list[str]) -> bool:
        if self.receiver is not None and self.receiver != receiver.lower():
            return False
        if self.route_id is not None and self.route_id != route_id.lower():
            return False
        if self.actions is not None and self.actions.isdisjoint(actions):
            return False
        return True


class HandlerRegistry:
    """Registry of WebHook handlers, filtered by receiver, route id and action.

    Usage::

        registry = HandlerRegistry()

        @registry.handler(receiver="mailchimp", actions=["subscribe"])
        async def on_subscribe(context: WebHookHandlerContext) -> None:
            ...

    Every matching handler runs, lowest ``order`` first and registration order
    within the same ``order``. A handler overrides the response by returning a
    :class:`DispatchResult` or by setting ``context.response``; the last
    override wins. Handler exceptions propagate to the caller.
    """

    def __init__(self) -> None:
        self._registrations: list[_Registration] = []

    def register(
        self,
        handler: WebHookHandler,
        *,
        receiver: str | None = None,
        actions: Iterable[str] | None = None,
        route_id: str | None = None,
        order: int = DEFAULT_HANDLER_ORDER,
    ) -> WebHookHandler:
        registration = _Registration(
            handler=handler,
            receiver=None if receiver is None else receiver.lower(),
            actions=None if actions is None else frozenset(actions),
            route_id=None if route_id is None else route_id.lower(),
            order=order,
            sequence=len(self._registrations),
        )
        self._registrations.append(registration)
        logger.info(
            "Registered WebHook handler %s (receiver=%s, actions=%s)",
            getattr(handler, "__qualname__", repr(handler)),
            receiver or "*",
            "*" if actions is None else sorted(registration.actions or ()),
        )
        return handler

    def handler(
        self,
        *,
        receiver: str | None = None,
        actions: Iterable[str] | None = None,
        route_id: str | None = None,
        order: int = DEFAULT_HANDLER_ORDER,
    ) -> Callable[[WebHookHandler], WebHookHandler]:
        """Decorator to register a function as a WebHook handler."""

        def decorator(fn: WebHookHandler) -> WebHookHandler:
            return self.register(fn, receiver=receiver, actions=actions, route_id=route_id, order=order)

        return decorator

    def handlers_for(self, receiver: str, route_id: str, actions: list[str]) -> list[WebHookHandler]:
        matching = [item for item in self._registrations if item.matches(receiver, route_id, actions)]
        matching.sort(key=lambda item: (item.order, item.sequence))
        return [item.handler for item in matching]

    def __len__(self) -> int:
        return len(self._registrations)

    async def dispatch(
        self,
        receiver: str,
        route_id: str,
        actions: list[str],
        event: NormalizedEvent,
        request: ReceiverRequest,
    ) -> DispatchResult:
        handlers = self.handlers_for(receiver, route_id, actions)
        if not handlers:
            logger.info("No WebHook handler registered for receiver '%s' actions %s", receiver, actions)
            return DispatchResult(status_code=200)

        context = WebHookHandlerContext(
            receiver=receiver,
            route_id=route_id,
            actions=list(actions),
            event=event,
            request=request,
        )
        for handler in handlers:
            logger.debug("Running WebHook handler %s", getattr(handler, "__qualname__", repr(handler)))
            outcome = handler(context)
            if inspect.isawaitable(outcome):
                outcome = await outcome
            if isinstance(outcome, DispatchResult):
                context.response = outcome
        return context.response or DispatchResult(status_code=200)
