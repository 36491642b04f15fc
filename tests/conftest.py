"""Test fixtures."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest
import structlog

from .support.curl import MockCurl, patch_curl
from .support.ldap import MockLDAP, patch_ldap


@pytest.fixture(autouse=True)
def environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Clear environment variables that change the behavior of ldapauth."""
    for variable in (
        "username",
        "password",
        "LDAPAUTH_BIND_PASSWORD",
        "LDAPAUTH_CONFIG_PATH",
        "LDAPAUTH_DEBUG",
    ):
        monkeypatch.delenv(variable, raising=False)
    yield
    structlog.reset_defaults()
    logger = logging.getLogger("ldapauth")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True


@pytest.fixture
def mock_curl() -> Iterator[MockCurl]:
    yield from patch_curl()


@pytest.fixture
def mock_ldap() -> Iterator[MockLDAP]:
    yield from patch_ldap()
