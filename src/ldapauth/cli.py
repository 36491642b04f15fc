"""Command-line interface for ldapauth.

Calling programs such as OpenVPN and Home Assistant run ``ldapauth
authenticate`` with the credentials in the ``username`` and ``password``
environment variables and act on the exit status.
"""

from __future__ import annotations

from pathlib import Path

import click
import structlog
from safir.click import display_help

from .config import Config
from .constants import CONFIG_PATH
from .exceptions import LDAPAuthError
from .factory import Factory
from .logging import configure_logging
from .models.auth import Credentials

__all__ = [
    "authenticate",
    "check_config",
    "help",
    "main",
]

_config_path_option = click.option(
    "--config-path",
    envvar="LDAPAUTH_CONFIG_PATH",
    type=click.Path(path_type=Path),
    default=CONFIG_PATH,
    show_default=True,
    help="Configuration file.",
)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(message="%(version)s")
def main() -> None:
    """Authenticate users against an LDAP server."""


@main.command()
@click.argument("topic", default=None, required=False, nargs=1)
@click.pass_context
def help(ctx: click.Context, topic: str | None) -> None:
    """Show help for any command."""
    display_help(main, ctx, topic)


@main.command()
@_config_path_option
@click.pass_context
def authenticate(ctx: click.Context, *, config_path: Path) -> None:
    """Authenticate the user given in the environment.

    The username and password are taken from the ``username`` and
    ``password`` environment variables. Exits with status 0 if the user was
    authenticated and authorized, 1 if not, and 2 if the configuration or
    credentials are unusable.
    """
    configure_logging()
    logger = structlog.get_logger("ldapauth")
    try:
        config = Config.from_file(config_path)
        config.configure_logging()
        factory = Factory(config)
        auth_service = factory.create_auth_service()
        reporter = factory.create_reporter()
        outcome = auth_service.authenticate(Credentials())
    except LDAPAuthError as e:
        logger.error(str(e))
        ctx.exit(int(e.exit_code))
    ctx.exit(int(reporter.report(outcome)))


@main.command()
@_config_path_option
@click.pass_context
def check_config(ctx: click.Context, *, config_path: Path) -> None:
    """Check the configuration without contacting the server."""
    configure_logging()
    logger = structlog.get_logger("ldapauth")
    try:
        config = Config.from_file(config_path)
        Factory(config).create_directory_client()
    except LDAPAuthError as e:
        logger.error(str(e))
        ctx.exit(int(e.exit_code))
    click.echo(f"{config_path}: configuration is valid")
