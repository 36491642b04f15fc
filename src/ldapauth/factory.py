"""Create ldapauth components."""

from __future__ import annotations

import structlog
from structlog.stdlib import BoundLogger

from .config import AuthHook, Config
from .exceptions import UnsupportedClientError
from .models.enums import ClientKind
from .services.auth import AuthService
from .services.authorization import AuthorizationVerifier
from .services.identity import IdentityResolver
from .services.report import ResultReporter
from .storage.base import DirectoryClient
from .storage.curl import CurlDirectoryClient
from .storage.ldap import LDAPDirectoryClient
from .validation import validate_config

__all__ = ["Factory"]


class Factory:
    """Build ldapauth components.

    The configuration is validated when the factory is created, so a broken
    configuration is reported before anything else happens.

    Parameters
    ----------
    config
        ldapauth configuration.
    logger
        Logger to use. Defaults to the ``ldapauth`` logger.

    Raises
    ------
    ConfigError
        Raised if the configuration is incomplete or inconsistent.
    """

    def __init__(
        self, config: Config, logger: BoundLogger | None = None
    ) -> None:
        validate_config(config)
        self._config = config
        self._logger = logger or structlog.get_logger("ldapauth")

    def create_auth_service(self) -> AuthService:
        """Create the service that makes the authentication decision.

        Raises
        ------
        UnsupportedClientError
            Raised if the configured directory client is not known.
        """
        client = self.create_directory_client()
        return AuthService(
            config=self._config,
            client=client,
            resolver=IdentityResolver(self._config, client, self._logger),
            verifier=AuthorizationVerifier(),
            logger=self._logger,
        )

    def create_directory_client(self) -> DirectoryClient:
        """Create the configured directory client.

        Returns
        -------
        DirectoryClient
            Client for the configured server.

        Raises
        ------
        UnsupportedClientError
            Raised if the configured directory client is not known.
        """
        kind = ClientKind.from_name(self._config.client)
        # Presence of both is checked by validate_config.
        assert self._config.server
        assert self._config.timeout
        server = self._config.server
        timeout = self._config.timeout
        match kind:
            case ClientKind.url_query:
                return CurlDirectoryClient(
                    server, timeout, self._logger, verbose=self._config.debug
                )
            case ClientKind.session:
                return LDAPDirectoryClient(server, timeout, self._logger)
            case _:
                raise UnsupportedClientError(self._config.client)

    def create_identity_resolver(self) -> IdentityResolver:
        """Create a resolver for the DN to bind as."""
        client = self.create_directory_client()
        return IdentityResolver(self._config, client, self._logger)

    def create_reporter(
        self,
        *,
        on_success: AuthHook | None = None,
        on_failure: AuthHook | None = None,
    ) -> ResultReporter:
        """Create the reporter for authentication outcomes.

        Parameters
        ----------
        on_success
            Success hook, overriding ``onAuthSuccess`` from the
            configuration.
        on_failure
            Failure hook, overriding ``onAuthFailure`` from the
            configuration.

        Returns
        -------
        ResultReporter
            Newly-created reporter.
        """
        return ResultReporter(
            on_success=on_success or self._config.on_auth_success,
            on_failure=on_failure or self._config.on_auth_failure,
            logger=self._logger,
        )
