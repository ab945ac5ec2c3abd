"""Configuration package for hookgate."""

from hookgate.config.loader import ConfigLoadError, YAMLConfigLoader, load_config
from hookgate.config.models import HookGateConfig, HttpConfig, ReceiverConfig

__all__ = [
    "ConfigLoadError",
    "HookGateConfig",
    "HttpConfig",
    "ReceiverConfig",
    "YAMLConfigLoader",
    "load_config",
]
