"""Directory client using an LDAP session."""

from __future__ import annotations

import io

import bonsai
from bonsai import LDAPClient, LDAPEntry, LDAPSearchScope, LDIFWriter

from ..models.enums import SearchScope
from ..models.ldap import DirectoryResult, SearchRequest
from .base import DirectoryClient

__all__ = ["LDAPDirectoryClient"]

_SCOPES = {
    SearchScope.base: LDAPSearchScope.BASE,
    SearchScope.one: LDAPSearchScope.ONELEVEL,
    SearchScope.sub: LDAPSearchScope.SUBTREE,
}


class LDAPDirectoryClient(DirectoryClient):
    """Directory client that opens an LDAP session with bonsai.

    Without a search, the bind is confirmed with a Who Am I? extended
    operation, whose result is returned as the output. With a search, the
    search is issued on the same connection after the bind.
    """

    def authenticate(
        self, bind_dn: str, password: str, search: SearchRequest | None = None
    ) -> DirectoryResult:
        logger = self._logger.bind(bind_dn=bind_dn)
        client = LDAPClient(self._server)
        client.set_credentials("SIMPLE", user=bind_dn, password=password)
        try:
            with client.connect(timeout=self._timeout) as conn:
                if not search:
                    logger.debug("Checking LDAP identity")
                    output = conn.whoami(timeout=self._timeout)
                    return DirectoryResult(bound=True, output=output)
                logger.debug(
                    "Querying LDAP",
                    ldap_attrs=search.attrlist,
                    ldap_base=search.base_dn,
                    ldap_scope=search.scope.value,
                    ldap_search=search.filter,
                )
                entries = conn.search(
                    base=search.base_dn,
                    scope=_SCOPES[search.scope],
                    filter_exp=search.filter,
                    attrlist=search.attrlist,
                    timeout=self._timeout,
                )
        except (bonsai.LDAPError, TimeoutError) as e:
            logger.debug("LDAP bind or search failed", error=str(e))
            return DirectoryResult(bound=False, error=str(e))
        return DirectoryResult(bound=True, output=self._to_ldif(entries))

    def _to_ldif(self, entries: list[LDAPEntry]) -> str:
        """Render search results as LDIF, one blank line after each entry."""
        output = io.StringIO()
        writer = LDIFWriter(output)
        for entry in entries:
            writer.write_entry(entry)
            output.write("\n")
        return output.getvalue()
