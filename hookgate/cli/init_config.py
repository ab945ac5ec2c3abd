"""`hookgate init`: write a starter hookgate.yaml."""

from __future__ import annotations

import secrets
from pathlib import Path

from rich.console import Console

from hookgate.config.loader import YAMLConfigLoader

console = Console()

TEMPLATE = """\
log_level: INFO

http:
  host: 0.0.0.0
  port: 8443
  require_https: true
  allow_loopback_http: true
  trust_forwarded_proto: false

receivers:
  {receiver}:
    secrets:
      # route id -> secret (32-128 characters); "" is the default route
      "": "{secret}"
"""


def init_config_command(path: str = ".", force: bool = False, receiver: str = "mailchimp") -> Path:
    """Create hookgate.yaml with a freshly generated receiver secret."""
    target_dir = Path(path).resolve()
    target_dir.mkdir(parents=True, exist_ok=True)
    output_path = target_dir / YAMLConfigLoader.DEFAULT_FILENAME
    if output_path.exists() and not force:
        raise FileExistsError(f"{output_path} already exists; pass --force to overwrite")
    output_path.write_text(
        TEMPLATE.format(receiver=receiver.lower(), secret=secrets.token_hex(32)),
        encoding="utf-8",
    )
    console.print(f"[green]Created[/green] {output_path}")
    return output_path
