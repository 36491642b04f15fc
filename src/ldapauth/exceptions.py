"""Exceptions for ldapauth."""

from __future__ import annotations

from typing import ClassVar

from .models.enums import ExitCode, FailureReason

__all__ = [
    "AuthenticationFailedError",
    "AuthorizationError",
    "BindError",
    "ConfigError",
    "CredentialError",
    "IdentityNotFoundError",
    "LDAPAuthError",
    "UnsupportedClientError",
    "UsageError",
]


class LDAPAuthError(Exception):
    """Base class for all ldapauth errors."""

    exit_code: ClassVar[ExitCode] = ExitCode.usage
    """Process exit status to use if this error ends the invocation."""


class UsageError(LDAPAuthError):
    """The invocation can never succeed as configured or called.

    These are raised before any request is sent to the directory server.
    """


class ConfigError(UsageError):
    """The configuration is incomplete or inconsistent."""


class CredentialError(UsageError):
    """The username or password is missing or malformed."""


class UnsupportedClientError(UsageError):
    """The configured directory client is not known."""

    def __init__(self, client: str) -> None:
        msg = f"Unsupported client '{client}', revise the configuration"
        super().__init__(msg)
        self.client = client


class AuthenticationFailedError(LDAPAuthError):
    """The user could not be authenticated or authorized.

    All subclasses are reported to the calling program identically.
    """

    exit_code = ExitCode.failure

    reason: ClassVar[FailureReason] = FailureReason.bind_failed
    """Reason recorded in the outcome for debugging."""

    @property
    def failure_reason(self) -> FailureReason:
        """Reason this particular failure is recorded under."""
        return self.reason


class BindError(AuthenticationFailedError):
    """Bind was refused, or the server was unreachable or timed out."""


class IdentityNotFoundError(AuthenticationFailedError):
    """The service account lookup did not find exactly one user."""

    reason = FailureReason.identity_not_found


class AuthorizationError(AuthenticationFailedError):
    """The authorization search did not return exactly one entry.

    Parameters
    ----------
    entries
        Number of entries returned by the search.
    """

    reason = FailureReason.not_authorized

    def __init__(self, entries: int) -> None:
        if entries == 0:
            msg = "Authorization search returned no entries"
        else:
            msg = f"Authorization search returned {entries} entries"
        super().__init__(msg)
        self.entries = entries

    @property
    def failure_reason(self) -> FailureReason:
        """Distinguish an empty result from an ambiguous one."""
        if self.entries == 0:
            return FailureReason.not_authorized
        return FailureReason.ambiguous_identity
