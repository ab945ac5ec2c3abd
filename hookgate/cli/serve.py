"""Receiver HTTP server command."""

from __future__ import annotations

import importlib
import logging

from hookgate.config import HookGateConfig, YAMLConfigLoader, load_config
from hookgate.receivers.dispatcher import HandlerRegistry
from hookgate.receivers.main import ReceiverApplication, build_receiver_application

logger = logging.getLogger(__name__)


def load_handler_modules(registry: HandlerRegistry, modules: list[str]) -> None:
    """Import handler modules and let each register itself via ``register(registry)``."""
    for module_name in modules:
        module = importlib.import_module(module_name)
        register = getattr(module, "register", None)
        if not callable(register):
            raise ValueError(f"handler module {module_name} does not define register(registry)")
        register(registry)


def build_application(config: HookGateConfig, registry: HandlerRegistry, handler_modules: list[str]) -> ReceiverApplication:
    load_handler_modules(registry, handler_modules)
    return build_receiver_application(config, dispatcher=registry)


def serve_command(
    config: str | None = None,
    handler_modules: list[str] | None = None,
    host: str | None = None,
    port: int | None = None,
) -> None:
    """Start uvicorn with the configured receivers."""
    import uvicorn

    loaded = load_config(YAMLConfigLoader.resolve_path(config))
    logging.basicConfig(level=loaded.log_level)
    registry = HandlerRegistry()
    application = build_application(loaded, registry, handler_modules or [])
    if len(registry) == 0:
        logger.warning("No WebHook handlers registered; deliveries will be acknowledged and dropped")
    bind_host = host or loaded.http.host
    bind_port = port or loaded.http.port
    logger.info("Serving receivers %s on %s:%d", sorted(application.receivers), bind_host, bind_port)
    uvicorn.run(application.build_http_app(), host=bind_host, port=bind_port, log_level=loaded.log_level.lower())
