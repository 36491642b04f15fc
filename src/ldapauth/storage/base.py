"""Base class for directory clients.

Each client performs one exchange with the directory server per call: a
bind, optionally followed by a search. Failures of any kind, including an
unreachable server and timeouts, are reported as an unsuccessful
`~ldapauth.models.ldap.DirectoryResult` rather than raised, since the caller
treats them all as a failed authentication.
"""

from __future__ import annotations

from abc import ABCMeta, abstractmethod

from structlog.stdlib import BoundLogger

from ..models.ldap import DirectoryResult, SearchRequest

__all__ = ["DirectoryClient"]


class DirectoryClient(metaclass=ABCMeta):
    """Bind to a directory server and optionally search it.

    Parameters
    ----------
    server
        URL of the LDAP server.
    timeout
        Timeout in seconds for the network exchange.
    logger
        Logger for debug messages and errors.
    """

    def __init__(
        self, server: str, timeout: float, logger: BoundLogger
    ) -> None:
        self._server = server
        self._timeout = timeout
        self._logger = logger.bind(ldap_url=server)

    @abstractmethod
    def authenticate(
        self, bind_dn: str, password: str, search: SearchRequest | None = None
    ) -> DirectoryResult:
        """Bind as the given DN and run the search, if any.

        Parameters
        ----------
        bind_dn
            DN to bind as.
        password
            Password for the bind.
        search
            Search to run after a successful bind, if any.

        Returns
        -------
        DirectoryResult
            Whether the bind and search succeeded, with the LDIF-like
            output of the search (or of the identity check if there was no
            search).
        """
