"""Parse the LDIF-like output of directory clients.

Output from bonsai is real LDIF. Output from curl is only LDIF-like: the DN
line is ``DN:``, attributes are indented with a tab, and attributes are
separated by blank lines. This parser accepts both.
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass, field

from .constants import ENTRY_REGEX

__all__ = ["LDIFEntry", "count_entries", "parse_entries"]

_ENTRY = re.compile(ENTRY_REGEX, re.IGNORECASE | re.MULTILINE)


@dataclass
class LDIFEntry:
    """One entry parsed from client output."""

    dn: str
    """Distinguished name of the entry."""

    attributes: dict[str, list[str]] = field(default_factory=dict)
    """Attribute values, keyed by attribute name as returned."""

    def get(self, name: str) -> list[str]:
        """Return the values of an attribute, ignoring the case of its name.

        Parameters
        ----------
        name
            Attribute name.

        Returns
        -------
        list of str
            Values of the attribute, empty if it is not present.
        """
        values: list[str] = []
        for attr, attr_values in self.attributes.items():
            if attr.lower() == name.lower():
                values.extend(attr_values)
        return values


def count_entries(output: str) -> int:
    """Count entries by their ``dn:`` lines, ignoring case."""
    return len(_ENTRY.findall(output))


def parse_entries(output: str) -> list[LDIFEntry]:
    """Parse client output into entries.

    Parameters
    ----------
    output
        Raw output of a directory client.

    Returns
    -------
    list of LDIFEntry
        Entries in the order they appear. Lines before the first DN line,
        comments and lines without a colon are ignored.
    """
    entries: list[LDIFEntry] = []
    current: LDIFEntry | None = None
    for line in _unfold(output):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        name, sep, value = stripped.partition(":")
        if not sep:
            continue
        name = name.strip()
        value = _decode_value(value)
        if name.lower() == "dn":
            current = LDIFEntry(dn=value)
            entries.append(current)
        elif current is not None:
            current.attributes.setdefault(name, []).append(value)
    return entries


def _decode_value(value: str) -> str:
    """Decode the part of a line after the attribute name's colon."""
    if not value.startswith(":"):
        return value.strip()
    encoded = value[1:].strip()
    try:
        return base64.b64decode(encoded).decode("utf-8", errors="replace")
    except binascii.Error:
        return encoded


def _unfold(output: str) -> list[str]:
    """Join LDIF continuation lines, which start with a single space."""
    lines: list[str] = []
    for line in output.splitlines():
        if line.startswith(" ") and lines and lines[-1].strip():
            lines[-1] += line[1:]
        else:
            lines.append(line)
    return lines
