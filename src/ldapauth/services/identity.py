"""Determine the DN to bind as."""

from __future__ import annotations

from structlog.stdlib import BoundLogger

from ..config import Config
from ..exceptions import BindError, IdentityNotFoundError
from ..ldif import parse_entries
from ..models.enums import SearchScope
from ..models.ldap import SearchRequest
from ..storage.base import DirectoryClient
from ..util import escape_dn_value, escape_filter_value, expand_template

__all__ = ["IdentityResolver"]


class IdentityResolver:
    """Turn a username into the DN of the user.

    If a ``userDn`` template is configured, the DN is computed from it
    without contacting the server. Otherwise, the service account binds and
    searches for the user, and the DN of the single matching entry is used.

    Parameters
    ----------
    config
        Validated ldapauth configuration.
    client
        Directory client used for the service account lookup.
    logger
        Logger to use.
    """

    def __init__(
        self, config: Config, client: DirectoryClient, logger: BoundLogger
    ) -> None:
        self._config = config
        self._client = client
        self._logger = logger

    def resolve(self, username: str) -> str:
        """Determine the DN to bind as.

        Parameters
        ----------
        username
            Username of the user, already checked for format.

        Returns
        -------
        str
            DN of the user.

        Raises
        ------
        BindError
            Raised if the service account could not bind.
        IdentityNotFoundError
            Raised if the lookup did not find exactly one user.
        """
        if self._config.user_dn:
            return expand_template(
                self._config.user_dn, escape_dn_value, username=username
            )
        return self._lookup(username)

    def _lookup(self, username: str) -> str:
        """Find the DN of a user with the service account."""
        assert self._config.bind_dn
        assert self._config.bind_password
        assert self._config.base_dn
        attr = self._config.user_search_attr
        search = SearchRequest(
            base_dn=self._config.base_dn,
            scope=SearchScope.sub,
            filter=f"({attr}={escape_filter_value(username)})",
        )
        logger = self._logger.bind(ldap_search=search.filter, user=username)

        password = self._config.bind_password.get_secret_value()
        result = self._client.authenticate(
            self._config.bind_dn, password, search
        )
        if not result.bound:
            logger.debug("Service account lookup failed", error=result.error)
            raise BindError("Service account could not bind")

        entries = parse_entries(result.output)
        logger.debug("Service account lookup finished", count=len(entries))
        if len(entries) != 1:
            msg = f"Lookup for {username} found {len(entries)} entries"
            raise IdentityNotFoundError(msg)
        return entries[0].dn
