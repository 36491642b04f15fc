"""Checks run before any request is sent to the directory server."""

from __future__ import annotations

from re import Pattern
from urllib.parse import urlparse

from bonsai import LDAPURL

from .config import Config
from .exceptions import ConfigError, CredentialError
from .models.auth import Credentials

__all__ = ["validate_config", "validate_credentials"]

_LDAP_SCHEMES = ("ldap", "ldaps", "ldapi")


def validate_config(config: Config) -> None:
    """Check that the configuration is complete and consistent.

    Checks are made in a fixed order and the first problem found is
    reported, so a broken deployment always fails the same way regardless
    of the credentials supplied.

    Parameters
    ----------
    config
        Configuration to check.

    Raises
    ------
    ConfigError
        Raised if the configuration cannot work.
    """
    if not config.server or not (config.user_dn or config.bind_dn):
        msg = "server and userDn (or bindDn) need to be configured"
        raise ConfigError(msg)
    if config.user_dn and config.bind_dn:
        msg = "Only one of userDn and bindDn may be configured"
        raise ConfigError(msg)
    password = config.bind_password
    if config.bind_dn and not (password and password.get_secret_value()):
        raise ConfigError("bindPassword required if bindDn is set")
    if urlparse(config.server).scheme.lower() not in _LDAP_SCHEMES:
        schemes = ", ".join(f"{s}://" for s in _LDAP_SCHEMES)
        raise ConfigError(f"server must start with one of {schemes}")
    try:
        LDAPURL(config.server)
    except ValueError as e:
        raise ConfigError(f"server is not a valid LDAP URL: {e}") from e

    if config.timeout is None:
        raise ConfigError("timeout needs to be configured")
    if config.timeout <= 0:
        raise ConfigError("timeout must be a positive number of seconds")

    search = (config.base_dn, config.scope, config.filter)
    if any(s is not None for s in search) and any(s is None for s in search):
        msg = "baseDn, scope and filter may only be configured together"
        raise ConfigError(msg)
    if config.attrs and not config.search_configured:
        msg = "Configuring attrs only makes sense when enabling searching"
        raise ConfigError(msg)

    if config.uses_service_account and not config.search_configured:
        msg = "baseDn, scope and filter are required if bindDn is set"
        raise ConfigError(msg)
    if config.user_dn and "{username}" not in config.user_dn:
        raise ConfigError("userDn must contain {username}")


def validate_credentials(
    credentials: Credentials, pattern: Pattern[str] | None
) -> None:
    """Check that the username and password are present and well-formed.

    This says nothing about whether the user exists.

    Parameters
    ----------
    credentials
        Credentials supplied by the calling program.
    pattern
        If not `None`, the whole username must match this pattern.

    Raises
    ------
    CredentialError
        Raised if either value is empty or the username has an invalid
        format.
    """
    username = credentials.username
    if not username or not credentials.password.get_secret_value():
        raise CredentialError("Need username and password")
    if pattern and not pattern.fullmatch(username):
        raise CredentialError(f"Username '{username}' has an invalid format")
