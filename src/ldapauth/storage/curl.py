"""Directory client using an LDAP URL with curl."""

from __future__ import annotations

import subprocess

from structlog.stdlib import BoundLogger

from ..models.ldap import DirectoryResult, SearchRequest
from .base import DirectoryClient

__all__ = ["CurlDirectoryClient"]

_CURL_EXTRA_SECONDS = 1.0
"""How long to wait for curl to exit after its own timeout expires."""


def _quote_config_value(value: str) -> str:
    r"""Quote a value for a curl config file.

    Inside double quotes, curl understands ``\\``, ``\"``, ``\t``, ``\n``,
    ``\r`` and ``\v``.
    """
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\t", "\\t")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\v", "\\v")
    )
    return f'"{escaped}"'


class CurlDirectoryClient(DirectoryClient):
    """Directory client that runs :command:`curl` with an LDAP URL.

    curl binds with the credentials and, given an :rfc:`4516` URL with a
    search, returns the results in the same exchange. curl must have been
    built with LDAP support. The credentials and URL are passed on standard
    input as a curl config file, so that the password is not visible in the
    process listing.

    curl splits the credentials at the first colon, so binding as a DN
    that contains a colon is refused without running curl.

    Parameters
    ----------
    server
        URL of the LDAP server.
    timeout
        Timeout in seconds for the network exchange.
    logger
        Logger for debug messages and errors.
    verbose
        Whether to ask curl for verbose output, which is logged at debug
        level.
    """

    def __init__(
        self,
        server: str,
        timeout: float,
        logger: BoundLogger,
        *,
        verbose: bool = False,
    ) -> None:
        super().__init__(server, timeout, logger)
        self._verbose = verbose

    def authenticate(
        self, bind_dn: str, password: str, search: SearchRequest | None = None
    ) -> DirectoryResult:
        if search:
            url = search.to_url(self._server)
        else:
            url = self._server.rstrip("/") + "/"
        logger = self._logger.bind(bind_dn=bind_dn, ldap_query_url=url)
        if ":" in bind_dn:
            msg = "curl cannot bind as a DN containing ':'"
            logger.debug("Refusing LDAP bind", error=msg)
            return DirectoryResult(bound=False, error=msg)
        command = [
            "curl",
            "--silent",
            "--show-error",
            "--max-time",
            str(self._timeout),
            "--config",
            "-",
        ]
        if self._verbose:
            command.append("--verbose")
        config = (
            f"user = {_quote_config_value(f'{bind_dn}:{password}')}\n"
            f"url = {_quote_config_value(url)}\n"
        )

        logger.debug("Running curl")
        try:
            result = subprocess.run(
                command,
                input=config,
                capture_output=True,
                text=True,
                timeout=self._timeout + _CURL_EXTRA_SECONDS,
                check=False,
            )
        except subprocess.TimeoutExpired:
            msg = f"curl did not finish within {self._timeout}s"
            logger.debug("LDAP request timed out", error=msg)
            return DirectoryResult(bound=False, error=msg)
        except OSError as e:
            logger.error("Cannot run curl", error=str(e))
            return DirectoryResult(bound=False, error=str(e))

        if result.stderr:
            logger.debug("curl diagnostics", curl_stderr=result.stderr)
        if result.returncode != 0:
            msg = f"curl exited with status {result.returncode}"
            logger.debug("LDAP bind or search failed", error=msg)
            return DirectoryResult(bound=False, error=msg)
        return DirectoryResult(bound=True, output=result.stdout)
