"""Escaping and template utilities for ldapauth."""

from __future__ import annotations

import re
from collections.abc import Callable

import structlog
from bonsai.utils import escape_filter_exp

from .constants import DN_SPECIAL_CHARACTERS

__all__ = [
    "escape_dn_value",
    "escape_filter_value",
    "expand_template",
]

_PLACEHOLDER = re.compile(r"\{([a-z_]+)\}")


def escape_dn_value(raw: str) -> str:
    """Escape a string for use as an attribute value in a DN.

    Each special character is prefixed with a backslash, as is a leading or
    trailing space, so that untrusted input cannot add RDNs or otherwise
    change the structure of the DN it is substituted into.

    Parameters
    ----------
    raw
        Untrusted value, such as a username.

    Returns
    -------
    str
        Escaped value.
    """
    chars = ["\\" + c if c in DN_SPECIAL_CHARACTERS else c for c in raw]
    if chars and chars[0] == " ":
        chars[0] = "\\ "
    if chars and chars[-1] == " ":
        chars[-1] = "\\ "
    escaped = "".join(chars)
    logger = structlog.get_logger("ldapauth")
    logger.debug("Escaped value", raw=raw, escaped=escaped)
    return escaped


def escape_filter_value(raw: str) -> str:
    """Escape a string for use as an assertion value in a search filter.

    Parameters
    ----------
    raw
        Untrusted value, such as a username.

    Returns
    -------
    str
        Value with :rfc:`4515` metacharacters replaced by hex escapes.
    """
    return escape_filter_exp(raw)


def expand_template(
    template: str, escape: Callable[[str], str], **values: str
) -> str:
    """Replace ``{name}`` placeholders in a template.

    Parameters
    ----------
    template
        Template from the configuration, such as
        ``uid={username},ou=people,dc=example,dc=com``.
    escape
        Function used to escape each value for the context of the template.
    **values
        Placeholder values, keyed by placeholder name.

    Returns
    -------
    str
        Expanded template. Unknown placeholders are left alone, and values
        are never expanded again, so they cannot inject placeholders.
    """

    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        return escape(values[name]) if name in values else match.group(0)

    return _PLACEHOLDER.sub(replace, template)
