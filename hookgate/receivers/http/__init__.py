"""HTTP surface for WebHook receivers."""

from hookgate.receivers.http.app import HttpGatewayConfig, create_receiver_app, render_result, to_receiver_request

__all__ = ["HttpGatewayConfig", "create_receiver_app", "render_result", "to_receiver_request"]
