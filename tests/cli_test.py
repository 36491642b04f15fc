"""Tests for the command-line interface."""

from __future__ import annotations

from click.testing import CliRunner

from ldapauth.cli import main
from ldapauth.models.enums import SearchScope
from ldapauth.models.ldap import SearchRequest

from .support.config import config_path
from .support.curl import MockCurl
from .support.ldap import MockLDAP

_ALICE_DN = "uid=alice,ou=people,dc=example,dc=com"


def build_url() -> str:
    search = SearchRequest(
        base_dn=_ALICE_DN,
        scope=SearchScope.base,
        filter=(
            "(&(objectClass=person)"
            "(memberOf=cn=smarthome,ou=groups,dc=example,dc=com))"
        ),
        attrs=("cn",),
    )
    return search.to_url("ldap://ldap-server:389")


def test_help() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["help"], catch_exceptions=False)
    assert result.exit_code == 0
    assert "Commands:" in result.output

    result = runner.invoke(
        main, ["help", "authenticate"], catch_exceptions=False
    )
    assert result.exit_code == 0
    assert "--config-path" in result.output

    result = runner.invoke(main, ["help", "unknown-command"])
    assert result.exit_code != 0


def test_authenticate(mock_curl: MockCurl) -> None:
    mock_curl.add_user(_ALICE_DN, "secret")
    mock_curl.add_output(build_url(), f"DN: {_ALICE_DN}\n\tcn: Alice\n\n")
    runner = CliRunner()

    result = runner.invoke(
        main,
        ["authenticate", "--config-path", str(config_path("home-assistant"))],
        env={"username": "alice", "password": "secret"},
        catch_exceptions=False,
    )
    assert result.exit_code == 0
    assert result.stdout == "name=Alice\n"
    assert "User 'alice' authenticated successfully." in result.stderr


def test_authenticate_failure(mock_curl: MockCurl) -> None:
    mock_curl.add_user(_ALICE_DN, "secret")
    runner = CliRunner()

    result = runner.invoke(
        main,
        ["authenticate"],
        env={
            "LDAPAUTH_CONFIG_PATH": str(config_path("home-assistant")),
            "username": "alice",
            "password": "wrong",
        },
        catch_exceptions=False,
    )
    assert result.exit_code == 1
    assert result.stdout == ""
    assert "User 'alice' failed to authenticate." in result.stderr
    assert "Login denied" not in result.stderr


def test_authenticate_debug(mock_ldap: MockLDAP) -> None:
    runner = CliRunner()

    result = runner.invoke(
        main,
        ["authenticate", "--config-path", str(config_path("direct-search"))],
        env={
            "LDAPAUTH_DEBUG": "true",
            "username": "alice",
            "password": "secret",
        },
        catch_exceptions=False,
    )
    assert result.exit_code == 1
    assert result.stdout == ""
    assert "bind_failed" in result.stderr


def test_authenticate_usage(mock_ldap: MockLDAP, mock_curl: MockCurl) -> None:
    runner = CliRunner()
    credentials = {"username": "alice", "password": "secret"}

    result = runner.invoke(
        main,
        ["authenticate", "--config-path", str(config_path("direct"))],
        catch_exceptions=False,
    )
    assert result.exit_code == 2
    assert "Need username and password" in result.stderr

    result = runner.invoke(
        main,
        ["authenticate", "--config-path", str(config_path("direct"))],
        env={"username": "alice smith", "password": "secret"},
        catch_exceptions=False,
    )
    assert result.exit_code == 2
    assert "Username 'alice smith' has an invalid format" in result.stderr

    result = runner.invoke(
        main,
        ["authenticate", "--config-path", str(config_path("missing"))],
        env=credentials,
        catch_exceptions=False,
    )
    assert result.exit_code == 2
    assert "not found" in result.stderr

    result = runner.invoke(
        main,
        ["authenticate", "--config-path", str(config_path("partial-search"))],
        env=credentials,
        catch_exceptions=False,
    )
    assert result.exit_code == 2
    assert "baseDn, scope and filter" in result.stderr

    result = runner.invoke(
        main,
        ["authenticate", "--config-path", str(config_path("bad-client"))],
        env=credentials,
        catch_exceptions=False,
    )
    assert result.exit_code == 2
    assert "Unsupported client 'ldap3'" in result.stderr

    result = runner.invoke(
        main,
        ["authenticate", "--config-path", str(config_path("bad-server"))],
        env=credentials,
        catch_exceptions=False,
    )
    assert result.exit_code == 2
    assert "server is not a valid LDAP URL" in result.stderr

    assert mock_ldap.binds == []
    assert mock_curl.urls == []


def test_check_config() -> None:
    runner = CliRunner()

    path = config_path("service-account")
    result = runner.invoke(
        main, ["check-config", "--config-path", str(path)]
    )
    assert result.exit_code == 0
    assert result.stdout == f"{path}: configuration is valid\n"

    for name in ("both-modes", "bad-client", "unknown-setting"):
        path = config_path(name)
        result = runner.invoke(
            main, ["check-config", "--config-path", str(path)]
        )
        assert result.exit_code == 2
        assert result.stdout == ""
