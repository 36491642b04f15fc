"""Check the result of the authorization search."""

from __future__ import annotations

from ..ldif import count_entries

__all__ = ["AuthorizationVerifier"]


class AuthorizationVerifier:
    """Require the authorization search to return exactly one entry.

    If no search is configured, a successful bind is enough. Otherwise no
    entries means the user is not authorized and several entries means the
    search does not identify the user, so both are rejected.
    """

    def verify(self, output: str, *, search_configured: bool) -> bool:
        """Check whether the client output grants access.

        Parameters
        ----------
        output
            LDIF-like output of a successful bind and search.
        search_configured
            Whether an authorization search was run.

        Returns
        -------
        bool
            `True` if no search was run or the output has exactly one
            entry.
        """
        if not search_configured:
            return True
        return count_entries(output) == 1
