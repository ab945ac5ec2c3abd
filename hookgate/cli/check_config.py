"""Configuration check command implementation."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from hookgate.config import HookGateConfig, YAMLConfigLoader, load_config

console = Console()


def check_config_command(config: str | None = None) -> HookGateConfig:
    """Load and validate configuration, then print receivers and route ids (secrets masked)."""
    path = YAMLConfigLoader.resolve_path(config)
    loaded = load_config(path)

    if not path.exists():
        console.print(f"[yellow]Note:[/yellow] config file not found, defaults/env were used: {path}")

    table = Table(title="Configured receivers")
    table.add_column("Receiver")
    table.add_column("Route id")
    table.add_column("Secret")
    for name, receiver in sorted(loaded.receivers.items()):
        for route_id in sorted(receiver.secrets):
            table.add_row(name, route_id or "(default)", "*" * 8)
    console.print(table)
    console.print(
        f"HTTPS required: {loaded.http.require_https} | "
        f"loopback HTTP allowed: {loaded.http.allow_loopback_http} | "
        f"log level: {loaded.log_level}"
    )
    return loaded
