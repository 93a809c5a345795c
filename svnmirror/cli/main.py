"""CLI commands for svnmirror."""

import logging
import signal
import sys
import uuid
from pathlib import Path
from types import FrameType

import click
import structlog

from svnmirror import __version__
from svnmirror.checkout.config import CheckoutConfig
from svnmirror.checkout.engine import CheckoutEngine
from svnmirror.checkout.errors import CheckoutCancelledError, CheckoutError
from svnmirror.fetch.auth import Credentials
from svnmirror.fetch.cancel import CancelToken
from svnmirror.fetch.errors import AuthenticationError, FetchError
from svnmirror.observability.logging import (
    bind_run_context,
    clear_run_context,
    configure_logging,
)
from svnmirror.settings.app import get_settings
from svnmirror.settings.loader import ConfigValidationError, load_checkout_config
from svnmirror.settings.maven import (
    DEFAULT_MAVEN_SETTINGS,
    MavenSettingsError,
    load_maven_credentials,
)


logger = structlog.get_logger()

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2
EXIT_CANCELLED = 130


def resolve_credentials(
    username: str | None,
    password: str | None,
    server_id: str | None,
    maven_settings: Path | None,
) -> Credentials:
    """Pick credentials from the first source that provides them.

    Order: command line options, Maven ``settings.xml`` (when a server id
    is given), ``SVN_USERNAME``/``SVN_PASSWORD`` from the environment or
    ``.env``, then an interactive prompt for whatever is still missing.

    Raises:
        MavenSettingsError: If a server id was given but cannot be resolved.
    """
    if username is not None and password is not None:
        return Credentials(username=username, password=password)

    if server_id is not None:
        return load_maven_credentials(
            server_id, maven_settings or DEFAULT_MAVEN_SETTINGS
        )

    if username is None and password is None:
        from_env = get_settings().credentials()
        if from_env is not None:
            return from_env

    if username is None:
        username = click.prompt("Username", err=True)
    if password is None:
        password = click.prompt("Password", hide_input=True, err=True)
    return Credentials(username=username, password=password)


def _build_config(
    config_path: Path | None,
    workers: int | None,
    deadline_seconds: float | None,
) -> CheckoutConfig:
    config = load_checkout_config(config_path) if config_path else CheckoutConfig()
    overrides: dict[str, object] = {}
    if workers is not None:
        overrides["max_workers"] = workers
    if deadline_seconds is not None:
        overrides["deadline_seconds"] = deadline_seconds
    if overrides:
        config = CheckoutConfig.model_validate(
            config.model_dump() | overrides
        )
    return config


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """Mirror Subversion web directory listings to the local filesystem."""


@cli.command()
@click.argument("remote_url")
@click.argument(
    "destination",
    type=click.Path(file_okay=False, path_type=Path),
)
@click.option("--username", "-u", default=None, help="Account name.")
@click.option(
    "--password",
    "-p",
    default=None,
    help="Account password (prompted for when missing).",
)
@click.option(
    "--server-id",
    default=None,
    help="Read credentials from this <server> of a Maven settings.xml.",
)
@click.option(
    "--maven-settings",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Maven settings file (default: ~/.m2/settings.xml).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML file with checkout/fetch settings.",
)
@click.option(
    "--workers",
    type=click.IntRange(1, 32),
    default=None,
    help="Parallel workers per directory level (default: 1, sequential).",
)
@click.option(
    "--deadline",
    "deadline_seconds",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Abort the checkout after this many seconds.",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=True,
    help="Use JSON format for logs (default: true).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
def checkout(  # noqa: PLR0913
    remote_url: str,
    destination: Path,
    username: str | None,
    password: str | None,
    server_id: str | None,
    maven_settings: Path | None,
    config_path: Path | None,
    workers: int | None,
    deadline_seconds: float | None,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Recursively download REMOTE_URL into DESTINATION.

    Existing files are overwritten; nothing is deleted.
    """
    run_id = uuid.uuid4().hex[:12]
    configure_logging(
        level=logging.DEBUG if verbose else logging.INFO,
        json_format=json_logs,
    )
    bind_run_context(run_id)
    try:
        _run_checkout(
            run_id,
            remote_url,
            destination,
            username,
            password,
            server_id,
            maven_settings,
            config_path,
            workers,
            deadline_seconds,
        )
    finally:
        clear_run_context()


def _run_checkout(  # noqa: PLR0913
    run_id: str,
    remote_url: str,
    destination: Path,
    username: str | None,
    password: str | None,
    server_id: str | None,
    maven_settings: Path | None,
    config_path: Path | None,
    workers: int | None,
    deadline_seconds: float | None,
) -> None:
    log = logger.bind(component="cli", command="checkout")

    try:
        config = _build_config(config_path, workers, deadline_seconds)
    except ConfigValidationError as e:
        click.echo(f"Configuration validation failed: {e.file_path}", err=True)
        for error in e.errors:
            click.echo(f"  - {error}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    try:
        credentials = resolve_credentials(
            username, password, server_id, maven_settings
        )
    except MavenSettingsError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    cancel_token = CancelToken()

    def _on_sigint(signum: int, frame: FrameType | None) -> None:  # noqa: ARG001
        cancel_token.cancel("interrupted")

    previous_handler = signal.signal(signal.SIGINT, _on_sigint)
    engine = CheckoutEngine(
        credentials, config=config, run_id=run_id, cancel_token=cancel_token
    )
    try:
        result = engine.checkout(remote_url, destination)
    except CheckoutCancelledError as e:
        click.echo(f"Checkout cancelled: {e.reason}", err=True)
        sys.exit(EXIT_CANCELLED)
    except AuthenticationError as e:
        click.echo(
            f"Error: authentication failed ({e.status_code}) for {remote_url}",
            err=True,
        )
        sys.exit(EXIT_FAILURE)
    except (FetchError, CheckoutError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_FAILURE)
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    for entry in result.skipped_entries:
        click.echo(f"Skipped: {entry}", err=True)
    click.echo(
        f"Checked out {result.files_downloaded} files in "
        f"{result.directories_created} directories "
        f"({result.bytes_written} bytes) to {destination}"
    )
    log.info("cli_complete", exit_code=EXIT_OK)


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
