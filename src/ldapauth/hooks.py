"""Ready-made hooks for calling programs.

Hooks are configured with ``onAuthSuccess`` or ``onAuthFailure`` as import
strings, such as ``ldapauth.hooks:home_assistant_meta``, and are called with
the raw output of the directory client. Anything they write to standard
output is passed back to the calling program.
"""

from __future__ import annotations

import sys

from .ldif import LDIFEntry, parse_entries

__all__ = ["LDIFEntry", "home_assistant_meta", "parse_entries"]


def home_assistant_meta(raw_output: str) -> None:
    """Print the display name of the user for Home Assistant.

    The Home Assistant command-line authentication provider reads
    ``name=<value>`` lines from standard output when ``meta`` is enabled.
    Requires the authorization search to retrieve ``cn`` (or
    ``displayName``), for example with ``attrs: cn``.

    Parameters
    ----------
    raw_output
        Output of the authorization search.
    """
    entries = parse_entries(raw_output)
    if not entries:
        return
    entry = entries[0]
    names = entry.get("cn") or entry.get("displayName")
    if names:
        name = names[0].replace("\n", " ").strip()
        sys.stdout.write(f"name={name}\n")
