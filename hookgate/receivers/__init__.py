"""WebHook receiver core types and contracts."""

from hookgate.receivers.dispatcher import HandlerDispatcher, HandlerRegistry, WebHookHandler
from hookgate.receivers.mailchimp import MailChimpProfile
from hookgate.receivers.payload import FormPayloadReader
from hookgate.receivers.receiver import ReceiverProfile, WebHookReceiver
from hookgate.receivers.router import EventRouter
from hookgate.receivers.secret_store import SecretStore, StaticSecretStore, parse_secret_setting
from hookgate.receivers.transport import TransportGuard
from hookgate.receivers.types import (
    DispatchResult,
    NormalizedEvent,
    PayloadError,
    ReceiverRequest,
    RejectionKind,
    ValidationError,
    ValidationResult,
    WebHookHandlerContext,
)
from hookgate.receivers.validator import CodeValidator

__all__ = [
    "CodeValidator",
    "DispatchResult",
    "EventRouter",
    "FormPayloadReader",
    "HandlerDispatcher",
    "HandlerRegistry",
    "MailChimpProfile",
    "NormalizedEvent",
    "PayloadError",
    "ReceiverProfile",
    "ReceiverRequest",
    "RejectionKind",
    "SecretStore",
    "StaticSecretStore",
    "TransportGuard",
    "ValidationError",
    "ValidationResult",
    "WebHookHandler",
    "WebHookHandlerContext",
    "WebHookReceiver",
    "parse_secret_setting",
]
