"""Configuration for ldapauth.

ldapauth is configured by a YAML file, normally readable only by the
calling service because it may contain the service account password. Keys
use camel case. The service account password and debug mode may also be
set via environment variables, which take precedence over the file.

Loading only checks the types of the settings. Whether the settings make
sense together is checked by `~ldapauth.validation.validate_config`, so that
a deployment can be checked without supplying credentials.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from pathlib import Path
from re import Pattern
from typing import Any, Self

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ImportString,
    SecretStr,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict
from safir.logging import LogLevel, Profile

from .constants import DEFAULT_TIMEOUT, USERNAME_REGEX
from .exceptions import ConfigError
from .logging import configure_logging
from .models.enums import SearchScope

AuthHook = Callable[[str], Any]
"""Type of a hook called with the raw directory output."""

__all__ = [
    "AuthHook",
    "CamelCaseModel",
    "Config",
    "ConfigOverrides",
]


class CamelCaseModel(BaseModel):
    """Base class for immutable configuration models supporting camel-case.

    This base class also forbids all extra attributes, so that a misspelled
    setting is reported instead of silently ignored.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        extra="forbid",
        frozen=True,
        populate_by_name=True,
    )


class ConfigOverrides(BaseSettings):
    """Settings that may be overridden by environment variables."""

    model_config = SettingsConfigDict(env_prefix="LDAPAUTH_")

    bind_password: SecretStr | None = Field(
        None,
        title="Service account password",
        description="Overrides ``bindPassword`` from the configuration file",
    )

    debug: bool | None = Field(
        None,
        title="Debug mode",
        description="Overrides ``debug`` from the configuration file",
    )


class Config(CamelCaseModel):
    """Configuration for ldapauth."""

    server: str | None = Field(
        None,
        title="LDAP server URL",
        description="URL of the LDAP server, such as ``ldap://ldap:389``",
        examples=["ldap://ldap.example.com:389"],
    )

    user_dn: str | None = Field(
        None,
        title="User DN template",
        description=(
            "DN to bind as, with ``{username}`` replaced by the escaped"
            " username. Mutually exclusive with ``bindDn``."
        ),
        examples=["uid={username},ou=people,dc=example,dc=com"],
    )

    bind_dn: str | None = Field(
        None,
        title="Service account DN",
        description=(
            "DN of a service account used to look up the DN of the user,"
            " for directories where the user DN cannot be derived from the"
            " username. Requires ``bindPassword`` and ``baseDn``."
        ),
    )

    bind_password: SecretStr | None = Field(
        None,
        title="Service account password",
        description=(
            "Password of the service account. May instead be set in the"
            " ``LDAPAUTH_BIND_PASSWORD`` environment variable."
        ),
    )

    base_dn: str | None = Field(
        None,
        title="Authorization search base",
        description=(
            "Base DN of the search that must return exactly one entry for"
            " authentication to succeed. May contain ``{username}`` and"
            " ``{user_dn}``. With a service account, this is instead the"
            " base of the user lookup and the authorization search starts"
            " at the user's DN. Must be set with ``scope`` and ``filter``."
        ),
        examples=["{user_dn}"],
    )

    scope: SearchScope | None = Field(
        None,
        title="Authorization search scope",
        description="One of ``base``, ``one`` or ``sub``",
    )

    filter: str | None = Field(
        None,
        title="Authorization search filter",
        description=(
            "Search filter, such as a group membership check. May contain"
            " ``{username}`` and ``{user_dn}``."
        ),
        examples=[
            "(&(objectClass=person)"
            "(memberOf=cn=staff,ou=groups,dc=example,dc=com))"
        ],
    )

    attrs: tuple[str, ...] = Field(
        (),
        title="Additional attributes",
        description=(
            "Attributes to retrieve in the authorization search, for use by"
            " hooks. Accepts a list or a space-separated string."
        ),
    )

    user_search_attr: str = Field(
        "uid",
        title="Search attribute for users",
        description=(
            "Attribute holding the username, used by the service account to"
            " look up the user's DN"
        ),
    )

    username_pattern: Pattern[str] | None = Field(
        re.compile(USERNAME_REGEX),
        title="Username pattern",
        description=(
            "Regular expression the whole username must match, or null to"
            " accept any username. Special characters are escaped anyway,"
            " but it is best not to allow more than necessary."
        ),
    )

    timeout: float | None = Field(
        DEFAULT_TIMEOUT,
        title="Timeout",
        description="Timeout in seconds for each directory request",
    )

    client: str = Field(
        "session",
        title="Directory client",
        description=(
            "``session`` to use an LDAP session (bonsai) or ``url-query`` to"
            " run :command:`curl` with an LDAP URL. The historical names"
            " ``ldapsearch`` and ``curl`` are also accepted."
        ),
    )

    debug: bool = Field(
        False,
        title="Debug mode",
        description=(
            "Log escaping, client output and the reason for failures. Never"
            " enable this in production, since it reveals which phase of"
            " authentication failed."
        ),
    )

    log_level: LogLevel = Field(
        LogLevel.INFO,
        title="Log level",
        description="Log level when debug mode is not enabled",
    )

    log_profile: Profile = Field(
        Profile.development,
        title="Logging profile",
        description="``development`` for plain text, ``production`` for JSON",
    )

    on_auth_success: ImportString[AuthHook] | None = Field(
        None,
        title="Success hook",
        description=(
            "Import path of a callable run with the raw directory output"
            " when authentication succeeds. It may print data for the"
            " calling program to standard output."
        ),
        examples=["ldapauth.hooks:home_assistant_meta"],
    )

    on_auth_failure: ImportString[AuthHook] | None = Field(
        None,
        title="Failure hook",
        description=(
            "Import path of a callable run with the raw directory output"
            " when authentication fails"
        ),
    )

    @field_validator(
        "server", "user_dn", "bind_dn", "base_dn", "filter", mode="before"
    )
    @classmethod
    def _validate_optional_string(cls, v: Any) -> Any:
        """Treat empty settings as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("attrs", mode="before")
    @classmethod
    def _validate_attrs(cls, v: Any) -> Any:
        """Accept a space-separated string of attributes."""
        if v is None:
            return ()
        if isinstance(v, str):
            return tuple(v.split())
        return v

    @property
    def search_configured(self) -> bool:
        """Whether an authorization search is configured."""
        return self.base_dn is not None

    @property
    def uses_service_account(self) -> bool:
        """Whether the user DN is found with a service account lookup."""
        return self.user_dn is None and self.bind_dn is not None

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Construct a Config object from a configuration file.

        Parameters
        ----------
        path
            Path to the configuration file in YAML.

        Returns
        -------
        Config
            The corresponding `Config` object, with environment overrides
            applied.

        Raises
        ------
        ConfigError
            Raised if the file cannot be read or parsed, or if a setting has
            an invalid type.
        """
        try:
            with path.open("r") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"'{path}': not found") from e
        except IsADirectoryError as e:
            raise ConfigError(f"'{path}': not a file") from e
        except PermissionError as e:
            raise ConfigError(f"'{path}': no read permission") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"'{path}': invalid YAML: {e}") from e
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"'{path}': must contain a mapping of settings")

        try:
            config = cls.model_validate(data)
            overrides = ConfigOverrides()
        except ValidationError as e:
            errors = "; ".join(
                ".".join(str(p) for p in error["loc"]) + f": {error['msg']}"
                for error in e.errors()
            )
            raise ConfigError(f"'{path}': {errors}") from e

        update: dict[str, Any] = {}
        if overrides.bind_password is not None:
            update["bind_password"] = overrides.bind_password
        if overrides.debug is not None:
            update["debug"] = overrides.debug
        return config.model_copy(update=update) if update else config

    def configure_logging(self) -> None:
        """Configure logging based on the ldapauth configuration."""
        log_level = LogLevel.DEBUG if self.debug else self.log_level
        configure_logging(profile=self.log_profile, log_level=log_level)
