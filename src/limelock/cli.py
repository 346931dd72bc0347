# src/limelock/cli.py
"""Limelock Command Line Interface.

Entry point for the limelock CLI tool.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx
import typer
import yaml
from dynaconf.vendor.ruamel.yaml.parser import ParserError as YamlParserError
from dynaconf.vendor.ruamel.yaml.scanner import ScannerError as YamlScannerError
from pydantic import ValidationError

from limelock import __version__
from limelock.clients.storage import LimelockClient, local_filename
from limelock.contracts.errors import IntegrityViolationError, LimelockError
from limelock.core.config import LimelockSettings, load_settings, resolve_config

__all__ = ["app"]

# Exit code for untrusted data, distinct from generic failures
EXIT_INTEGRITY = 2

_TOKEN_HELP = "Auth token (defaults to auth_token from settings / LIMELOCK_AUTH_TOKEN)."

app = typer.Typer(
    name="limelock",
    help="Limelock: store and fetch integrity-checked blobs.",
    no_args_is_help=True,
)


@dataclass
class _CLIState:
    """Options collected by the top-level callback."""

    settings_path: Path | None = None


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"limelock version {__version__}")
        raise typer.Exit()


def _load_dotenv(env_file: Path | None = None) -> bool:
    """Load environment variables from .env file.

    Args:
        env_file: Explicit path to .env file. If None, searches for .env
                 in current directory and parent directories.

    Returns:
        True if .env was found and loaded, False otherwise.

    Raises:
        typer.Exit: If explicit env_file path doesn't exist.
    """
    from dotenv import load_dotenv

    if env_file is not None:
        if not env_file.exists():
            typer.secho(
                f"Error: .env file not found: {env_file}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(1)
        return load_dotenv(env_file, override=False)

    return load_dotenv(override=False)


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    settings: Path | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="Path to settings YAML file (LIMELOCK_* environment variables override it).",
    ),
    no_dotenv: bool = typer.Option(
        False,
        "--no-dotenv",
        help="Skip loading .env file.",
    ),
    env_file: Path | None = typer.Option(
        None,
        "--env-file",
        help="Path to .env file (skips automatic search).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """Limelock: store and fetch integrity-checked blobs."""
    from limelock.core.logging import configure_logging

    configure_logging(json_output=json_logs, level="DEBUG" if verbose else "WARNING")

    if not no_dotenv:
        _load_dotenv(env_file)

    ctx.obj = _CLIState(settings_path=settings.expanduser() if settings is not None else None)


def _load_cli_settings(ctx: typer.Context) -> LimelockSettings:
    """Load settings, turning config problems into readable CLI errors."""
    state: _CLIState = ctx.obj
    try:
        return load_settings(state.settings_path)
    except (YamlParserError, YamlScannerError) as e:
        typer.echo(f"YAML syntax error in {state.settings_path}: {e.problem}", err=True)
        raise typer.Exit(1) from None
    except FileNotFoundError:
        typer.echo(f"Error: Settings file not found: {state.settings_path}", err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        typer.echo("Configuration errors:", err=True)
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None


@contextmanager
def _client(ctx: typer.Context, token: str | None = None) -> Iterator[LimelockClient]:
    """Build a client from settings and map its failures to exit codes."""
    settings = _load_cli_settings(ctx)
    client = LimelockClient.from_settings(settings)
    if token:
        client.token = token
    try:
        yield client
    except IntegrityViolationError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(EXIT_INTEGRITY) from None
    except LimelockError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    except httpx.HTTPError as e:
        typer.echo(f"Network error: {e}", err=True)
        raise typer.Exit(1) from None
    except OSError as e:
        typer.echo(f"File error: {e}", err=True)
        raise typer.Exit(1) from None
    finally:
        client.close()


def _echo_json(value: Any) -> None:
    typer.echo(json.dumps(value, indent=2, sort_keys=True))


@app.command("hash")
def hash_command(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="File to fingerprint."),
) -> None:
    """Print the content fingerprint of a file."""
    with _client(ctx) as client:
        typer.echo(client.hash_file(path))


@app.command()
def login(
    ctx: typer.Context,
    email: str = typer.Option(..., "--email", "-e", prompt=True, help="Account email."),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True, help="Account password."),
) -> None:
    """Log in and print the session token."""
    with _client(ctx) as client:
        typer.echo(client.login(email, password))


@app.command()
def register(
    ctx: typer.Context,
    email: str = typer.Option(..., "--email", "-e", prompt=True, help="Account email."),
    password: str = typer.Option(
        ...,
        "--password",
        "-p",
        prompt=True,
        hide_input=True,
        confirmation_prompt=True,
        help="Account password.",
    ),
) -> None:
    """Register a new account."""
    with _client(ctx) as client:
        client.register(email, password)
    typer.echo(f"Registered {email}")


@app.command()
def me(
    ctx: typer.Context,
    token: str | None = typer.Option(None, "--token", "-t", envvar="LIMELOCK_TOKEN", help=_TOKEN_HELP),
) -> None:
    """Show details of the logged-in account."""
    with _client(ctx, token) as client:
        _echo_json(client.me())


@app.command()
def put(
    ctx: typer.Context,
    data: str = typer.Argument(..., help="Data to store (sent as given, e.g. hex)."),
    name: str | None = typer.Option(None, "--name", "-n", help="Name to store under (defaults to fingerprint)."),
    token: str | None = typer.Option(None, "--token", "-t", envvar="LIMELOCK_TOKEN", help=_TOKEN_HELP),
) -> None:
    """Store a string payload and print the service receipt."""
    with _client(ctx, token) as client:
        _echo_json(client.put(data, name))


@app.command()
def get(
    ctx: typer.Context,
    tx_id: str = typer.Argument(..., help="Transaction id returned by put/upload."),
    expected_hash: str | None = typer.Option(None, "--expected-hash", help="Fingerprint to verify locally."),
    token: str | None = typer.Option(None, "--token", "-t", envvar="LIMELOCK_TOKEN", help=_TOKEN_HELP),
) -> None:
    """Fetch a record and print it (fails if integrity is not established)."""
    with _client(ctx, token) as client:
        record = client.get(tx_id, expected_hash=expected_hash)
    _echo_json(record.raw)


@app.command()
def upload(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="File to upload."),
    name: str | None = typer.Option(None, "--name", "-n", help="Name to store under (defaults to fingerprint)."),
    token: str | None = typer.Option(None, "--token", "-t", envvar="LIMELOCK_TOKEN", help=_TOKEN_HELP),
) -> None:
    """Upload a file and print the service receipt."""
    with _client(ctx, token) as client:
        _echo_json(client.upload(path, name))


@app.command()
def download(
    ctx: typer.Context,
    tx_id: str = typer.Argument(..., help="Transaction id returned by put/upload."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Destination (defaults to stored filename)."),
    expected_hash: str | None = typer.Option(None, "--expected-hash", help="Fingerprint to verify locally."),
    token: str | None = typer.Option(None, "--token", "-t", envvar="LIMELOCK_TOKEN", help=_TOKEN_HELP),
) -> None:
    """Download a record's payload to a file."""
    with _client(ctx, token) as client:
        record = client.download(tx_id, output, expected_hash=expected_hash)
    typer.echo(f"Wrote {output if output is not None else local_filename(record.filename)}")


@app.command("config")
def show_config(ctx: typer.Context) -> None:
    """Show resolved settings (secrets redacted)."""
    settings = _load_cli_settings(ctx)
    typer.echo(yaml.safe_dump(resolve_config(settings), sort_keys=True).rstrip())


if __name__ == "__main__":
    app()
