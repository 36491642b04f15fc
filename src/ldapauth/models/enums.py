"""Enums used in ldapauth models."""

from __future__ import annotations

from enum import Enum, IntEnum

__all__ = [
    "ClientKind",
    "ExitCode",
    "FailureReason",
    "SearchScope",
]


class ClientKind(Enum):
    """Implementation used to talk to the directory server."""

    url_query = "url-query"
    """Run :command:`curl` once with an RFC 4516 LDAP URL."""

    session = "session"
    """Open an LDAP session with bonsai and issue separate operations."""

    @classmethod
    def from_name(cls, name: str) -> ClientKind | None:
        """Look up a client kind, accepting the historical tool names.

        Parameters
        ----------
        name
            Configured client name.

        Returns
        -------
        ClientKind or None
            The matching client kind, or `None` if the name is unknown.
        """
        aliases = {"curl": cls.url_query, "ldapsearch": cls.session}
        if name in aliases:
            return aliases[name]
        try:
            return cls(name)
        except ValueError:
            return None


class ExitCode(IntEnum):
    """Process exit status reported to the calling program."""

    success = 0
    """User authenticated and authorized."""

    failure = 1
    """Authentication or authorization failed."""

    usage = 2
    """Configuration or invocation error."""


class FailureReason(Enum):
    """Why an authentication attempt was rejected.

    Only visible in debug logs. The calling program always sees the same
    failure exit status regardless of the reason.
    """

    bind_failed = "bind_failed"
    """Bind was refused, or the server was unreachable or timed out."""

    identity_not_found = "identity_not_found"
    """Service account lookup did not find exactly one user."""

    not_authorized = "not_authorized"
    """Authorization search returned no entries."""

    ambiguous_identity = "ambiguous_identity"
    """Authorization search returned more than one entry."""


class SearchScope(Enum):
    """Scope of a directory search, as written in an LDAP URL."""

    base = "base"
    one = "one"
    sub = "sub"
