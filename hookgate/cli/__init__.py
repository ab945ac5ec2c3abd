"""CLI tools: hookgate serve, init, check-config and version."""

from importlib import metadata

import typer

from hookgate.config import ConfigLoadError

app = typer.Typer(
    name="hookgate",
    help="hookgate: verified WebHook receivers with handler dispatch.",
    no_args_is_help=True,
)


@app.command("version")
def version_command() -> None:
    """Print installed package version."""
    try:
        version = metadata.version("hookgate")
    except metadata.PackageNotFoundError:
        version = "unknown"
    typer.echo(f"hookgate {version}")


@app.command("init")
def init_command(
    path: str = typer.Option(".", "--path", help="Output directory"),
    force: bool = typer.Option(False, "--force", help="Overwrite existing hookgate.yaml"),
    receiver: str = typer.Option("mailchimp", "--receiver", help="Receiver to generate a secret for"),
) -> None:
    """Generate hookgate.yaml with a random receiver secret."""
    from hookgate.cli.init_config import init_config_command

    try:
        init_config_command(path=path, force=force, receiver=receiver)
    except FileExistsError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from None


@app.command("check-config")
def check_config(
    config: str = typer.Option("", "--config", help="Optional config file path"),
) -> None:
    """Validate configuration and list configured receivers."""
    from hookgate.cli.check_config import check_config_command

    try:
        check_config_command(config=config or None)
    except ConfigLoadError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(2) from None


@app.command("serve")
def serve(
    config: str = typer.Option("", "--config", help="Optional config file path"),
    handlers: list[str] = typer.Option([], "--handlers", help="Module exposing register(registry); repeatable"),
    host: str = typer.Option("", "--host", help="Bind address (overrides config)"),
    port: int = typer.Option(0, "--port", help="Bind port (overrides config)"),
) -> None:
    """Run the receiver HTTP server."""
    from hookgate.cli.serve import serve_command

    try:
        serve_command(config=config or None, handler_modules=handlers, host=host or None, port=port or None)
    except ConfigLoadError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(2) from None


def main() -> None:
    app()


if __name__ == "__main__":
    main()
