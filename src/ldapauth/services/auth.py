"""Authenticate and authorize a user."""

from __future__ import annotations

from structlog.stdlib import BoundLogger

from ..config import Config
from ..exceptions import (
    AuthenticationFailedError,
    AuthorizationError,
    BindError,
)
from ..ldif import count_entries
from ..models.auth import AuthOutcome, Credentials
from ..models.ldap import SearchRequest
from ..storage.base import DirectoryClient
from ..util import escape_dn_value, escape_filter_value, expand_template
from ..validation import validate_credentials
from .authorization import AuthorizationVerifier
from .identity import IdentityResolver

__all__ = ["AuthService"]


class AuthService:
    """Make the authentication decision for one set of credentials.

    The configuration must already have been validated, which
    `~ldapauth.factory.Factory` does when it is created.

    Parameters
    ----------
    config
        Validated ldapauth configuration.
    client
        Directory client for the user bind and authorization search.
    resolver
        Resolver for the DN to bind as.
    verifier
        Check of the authorization search result.
    logger
        Logger to use.
    """

    def __init__(
        self,
        *,
        config: Config,
        client: DirectoryClient,
        resolver: IdentityResolver,
        verifier: AuthorizationVerifier,
        logger: BoundLogger,
    ) -> None:
        self._config = config
        self._client = client
        self._resolver = resolver
        self._verifier = verifier
        self._logger = logger

    def authenticate(self, credentials: Credentials) -> AuthOutcome:
        """Authenticate and authorize a user.

        Parameters
        ----------
        credentials
            Username and password supplied by the calling program.

        Returns
        -------
        AuthOutcome
            The outcome. Bind failures, failed lookups and failed
            authorization searches all produce an unsuccessful outcome.

        Raises
        ------
        CredentialError
            Raised if the credentials are missing or malformed, in which
            case nothing is sent to the directory server.
        """
        validate_credentials(credentials, self._config.username_pattern)
        username = credentials.username
        logger = self._logger.bind(user=username)
        output = ""
        entries = 0
        try:
            user_dn = self._resolver.resolve(username)
            search = self._build_search(username, user_dn)
            logger.debug("Binding as user", user_dn=user_dn)
            password = credentials.password.get_secret_value()
            result = self._client.authenticate(user_dn, password, search)
            output = result.output
            if not result.bound:
                raise BindError(result.error or "Bind failed")
            if search:
                entries = count_entries(output)
            configured = search is not None
            if not self._verifier.verify(output, search_configured=configured):
                raise AuthorizationError(entries)
        except AuthenticationFailedError as e:
            logger.debug(
                "Authentication failed",
                error=str(e),
                failure_reason=e.failure_reason.value,
            )
            return AuthOutcome(
                username=username,
                success=False,
                entry_count=entries,
                raw_output=output,
                failure_reason=e.failure_reason,
            )
        return AuthOutcome(
            username=username,
            success=True,
            entry_count=entries,
            raw_output=output,
        )

    def _build_search(
        self, username: str, user_dn: str
    ) -> SearchRequest | None:
        """Build the authorization search, if one is configured.

        With a service account, ``baseDn`` was the base of the lookup and
        the authorization search is rooted at the DN that was found.
        """
        config = self._config
        if not (config.base_dn and config.scope and config.filter):
            return None
        if config.uses_service_account:
            base_dn = user_dn
        else:
            base_dn = expand_template(
                config.base_dn,
                str,
                username=escape_dn_value(username),
                user_dn=user_dn,
            )
        search_filter = expand_template(
            config.filter,
            escape_filter_value,
            username=username,
            user_dn=user_dn,
        )
        return SearchRequest(
            base_dn=base_dn,
            scope=config.scope,
            filter=search_filter,
            attrs=config.attrs,
        )
