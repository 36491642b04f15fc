"""Data models for directory requests and responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import quote

from .enums import SearchScope

__all__ = ["DirectoryResult", "SearchRequest"]

_DN_SAFE = "=,+"
"""Characters left unencoded in the DN part of an LDAP URL."""

_FILTER_SAFE = "=()&|!*:~<>"
"""Characters left unencoded in the filter part of an LDAP URL."""


@dataclass(frozen=True)
class SearchRequest:
    """A directory search.

    All values must already be escaped for their context. The distinguished
    name attribute is always requested first, since entries in the output
    are counted by their ``dn`` lines.
    """

    base_dn: str
    """Base DN of the search."""

    scope: SearchScope
    """Scope of the search."""

    filter: str
    """Search filter."""

    attrs: tuple[str, ...] = field(default_factory=tuple)
    """Additional attributes to retrieve."""

    @property
    def attrlist(self) -> list[str]:
        """Attributes to request, starting with ``dn``."""
        return ["dn", *(a for a in self.attrs if a.lower() != "dn")]

    def to_url(self, server: str) -> str:
        """Render the search as an LDAP URL.

        Parameters
        ----------
        server
            LDAP server URL (scheme, host and port).

        Returns
        -------
        str
            :rfc:`4516` URL of the form
            ``<server>/<base>?<attributes>?<scope>?<filter>``, with each
            component percent-encoded.
        """
        base = quote(self.base_dn, safe=_DN_SAFE)
        attrs = ",".join(quote(a, safe="") for a in self.attrlist)
        search = quote(self.filter, safe=_FILTER_SAFE)
        server = server.rstrip("/")
        return f"{server}/{base}?{attrs}?{self.scope.value}?{search}"


@dataclass(frozen=True)
class DirectoryResult:
    """Result of one exchange with the directory server."""

    bound: bool
    """Whether the bind (and search, if any) succeeded."""

    output: str = ""
    """LDIF-like output from the server."""

    error: str | None = None
    """Error message from the client if the bind failed."""
