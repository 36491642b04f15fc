"""Tests for configuration and credential validation."""

from __future__ import annotations

import re
from typing import Any

import pytest
from pydantic import SecretStr

from ldapauth.config import Config
from ldapauth.exceptions import ConfigError, CredentialError
from ldapauth.models.auth import Credentials
from ldapauth.validation import validate_config, validate_credentials

_SERVER = "ldap://ldap.example.com:389"
_USER_DN = "uid={username},ou=people,dc=example,dc=com"
_SEARCH = {
    "base_dn": "ou=people,dc=example,dc=com",
    "scope": "sub",
    "filter": "(objectClass=person)",
}


@pytest.mark.parametrize(
    ("settings", "error"),
    [
        ({}, "server and userDn"),
        ({"server": _SERVER}, "server and userDn"),
        ({"user_dn": _USER_DN}, "server and userDn"),
        (
            {
                "server": _SERVER,
                "user_dn": _USER_DN,
                "bind_dn": "cn=reader,dc=example,dc=com",
                "bind_password": "secret",
                **_SEARCH,
            },
            "Only one of userDn and bindDn",
        ),
        (
            {
                "server": _SERVER,
                "bind_dn": "cn=reader,dc=example,dc=com",
                **_SEARCH,
            },
            "bindPassword required",
        ),
        (
            {
                "server": _SERVER,
                "bind_dn": "cn=reader,dc=example,dc=com",
                "bind_password": "",
                **_SEARCH,
            },
            "bindPassword required",
        ),
        (
            {"server": "https://ldap.example.com", "user_dn": _USER_DN},
            "server must start with",
        ),
        (
            {"server": "ldap://ldap.example.com:port", "user_dn": _USER_DN},
            "server is not a valid LDAP URL",
        ),
        (
            {"server": _SERVER, "user_dn": _USER_DN, "timeout": None},
            "timeout needs to be configured",
        ),
        (
            {"server": _SERVER, "user_dn": _USER_DN, "timeout": 0},
            "timeout must be a positive",
        ),
        (
            {"server": _SERVER, "user_dn": _USER_DN, "base_dn": "dc=example"},
            "may only be configured together",
        ),
        (
            {
                "server": _SERVER,
                "user_dn": _USER_DN,
                "scope": "sub",
                "filter": "(objectClass=person)",
            },
            "may only be configured together",
        ),
        (
            {"server": _SERVER, "user_dn": _USER_DN, "attrs": "cn mail"},
            "Configuring attrs only makes sense",
        ),
        (
            {
                "server": _SERVER,
                "bind_dn": "cn=reader,dc=example,dc=com",
                "bind_password": "secret",
            },
            "required if bindDn is set",
        ),
        (
            {"server": _SERVER, "user_dn": "uid=alice,dc=example,dc=com"},
            "userDn must contain",
        ),
    ],
)
def test_validate_config_errors(settings: dict[str, Any], error: str) -> None:
    config = Config(**settings)
    with pytest.raises(ConfigError, match=re.escape(error)):
        validate_config(config)


def test_validate_config_order() -> None:
    """The first problem found is reported."""
    config = Config(
        server="http://ldap.example.com",
        user_dn="uid=alice,dc=example,dc=com",
        timeout=0,
    )
    with pytest.raises(ConfigError, match="server must start with"):
        validate_config(config)


@pytest.mark.parametrize(
    "settings",
    [
        {"server": _SERVER, "user_dn": _USER_DN},
        {"server": "ldaps://ldap.example.com", "user_dn": _USER_DN},
        {"server": "ldapi://%2fvar%2frun%2fslapd", "user_dn": _USER_DN},
        {"server": _SERVER, "user_dn": _USER_DN, **_SEARCH, "attrs": "cn"},
        {
            "server": _SERVER,
            "bind_dn": "cn=reader,dc=example,dc=com",
            "bind_password": "secret",
            **_SEARCH,
        },
    ],
)
def test_validate_config(settings: dict[str, Any]) -> None:
    validate_config(Config(**settings))


def test_validate_credentials() -> None:
    pattern = Config().username_pattern
    credentials = Credentials(username="alice.s-1_x", password="secret")
    validate_credentials(credentials, pattern)

    for username, password in (("", "secret"), ("alice", ""), ("", "")):
        credentials = Credentials(username=username, password=password)
        with pytest.raises(CredentialError, match="Need username"):
            validate_credentials(credentials, pattern)

    for username in ("alice,ou=admins", "alice smith", "*", "alice\n"):
        credentials = Credentials(username=username, password="secret")
        with pytest.raises(CredentialError, match="has an invalid format"):
            validate_credentials(credentials, pattern)
        validate_credentials(credentials, None)


def test_validate_credentials_pattern() -> None:
    pattern = re.compile("[a-z]+")
    credentials = Credentials(username="alice1", password="secret")
    with pytest.raises(CredentialError):
        validate_credentials(credentials, pattern)


def test_credentials_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("username", "alice")
    monkeypatch.setenv("password", "some secret")
    monkeypatch.setenv("USERNAME", "root")
    credentials = Credentials()
    assert credentials.username == "alice"
    assert credentials.password == SecretStr("some secret")
    assert "some secret" not in repr(credentials)
