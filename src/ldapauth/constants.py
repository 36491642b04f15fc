"""Constants for ldapauth."""

__all__ = [
    "CONFIG_PATH",
    "DEFAULT_TIMEOUT",
    "DN_SPECIAL_CHARACTERS",
    "ENTRY_REGEX",
    "USERNAME_REGEX",
]

CONFIG_PATH = "/etc/ldapauth/ldapauth.yaml"
"""Default configuration path."""

DEFAULT_TIMEOUT = 3.0
"""Timeout (in seconds) for each directory request."""

DN_SPECIAL_CHARACTERS = frozenset(',\\#+<>;"=/?')
"""Characters that must be backslash-escaped in a DN attribute value.

``/`` and ``?`` are not special in DNs but are included because escaped
values may be embedded in an LDAP URL.
"""

ENTRY_REGEX = r"^dn\s*:"
"""Regex matching the line that starts an entry in LDIF-like output."""

USERNAME_REGEX = r"^[a-zA-Z0-9_.-]+$"
"""Default regex that usernames must match."""
