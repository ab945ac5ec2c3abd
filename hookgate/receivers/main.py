"""Receiver application bootstrap and dependency container."""

from __future__ import annotations

from dataclasses import dataclass, field

from fastapi import FastAPI

from hookgate.config.models import HookGateConfig
from hookgate.receivers.dispatcher import HandlerDispatcher, HandlerRegistry
from hookgate.receivers.http.app import HttpGatewayConfig, create_receiver_app
from hookgate.receivers.mailchimp import MailChimpProfile
from hookgate.receivers.receiver import ReceiverProfile, WebHookReceiver
from hookgate.receivers.secret_store import SecretStore, StaticSecretStore
from hookgate.receivers.transport import TransportGuard
from hookgate.receivers.validator import CodeValidator


def default_profiles() -> list[ReceiverProfile]:
    return [MailChimpProfile()]


@dataclass(slots=True)
class ReceiverApplication:
    """Assemble receiver services and expose the HTTP app."""

    receivers: dict[str, WebHookReceiver]
    secret_store: SecretStore
    dispatcher: HandlerDispatcher
    gateway_config: HttpGatewayConfig = field(default_factory=HttpGatewayConfig)

    def build_http_app(self) -> FastAPI:
        return create_receiver_app(receivers=self.receivers, config=self.gateway_config)


def build_receiver_application(
    config: HookGateConfig,
    *,
    dispatcher: HandlerDispatcher | None = None,
    secret_store: SecretStore | None = None,
    profiles: list[ReceiverProfile] | None = None,
) -> ReceiverApplication:
    """Factory wiring one shared secret snapshot, guard and dispatcher into every receiver."""

    store = secret_store if secret_store is not None else StaticSecretStore(config.secret_snapshot())
    handlers = dispatcher if dispatcher is not None else HandlerRegistry()
    guard = TransportGuard(
        require_https=config.http.require_https,
        allow_loopback_http=config.http.allow_loopback_http,
    )
    validator = CodeValidator(store)
    receivers = {
        profile.name: WebHookReceiver(
            profile,
            transport_guard=guard,
            code_validator=validator,
            dispatcher=handlers,
        )
        for profile in (profiles if profiles is not None else default_profiles())
    }
    return ReceiverApplication(
        receivers=receivers,
        secret_store=store,
        dispatcher=handlers,
        gateway_config=HttpGatewayConfig(trust_forwarded_proto=config.http.trust_forwarded_proto),
    )
