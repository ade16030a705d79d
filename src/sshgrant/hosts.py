"""Host list classification into symbolic names and literal addresses."""

from __future__ import annotations

import re
from typing import Iterable

__all__ = ["classify", "is_name"]

_ALPHA = re.compile(r"[A-Za-z]")


def is_name(entry: str) -> bool:
    """Return True if the entry contains any ASCII letter."""
    return _ALPHA.search(entry) is not None


def classify(hostlist: Iterable[str]) -> tuple[list[str], list[str]]:
    """Partition a host list into ``(names, addresses)``.

    Entries containing at least one letter (hostnames, FQDNs, IPv6 literals
    with hex letters) are names; everything else (bare IPv4 addresses, CIDR
    ranges, digits or punctuation only) is an address. Order within each
    bucket follows the input, and duplicates are kept.

    Args:
        hostlist: Host entries in request order.

    Returns:
        A ``(names, addresses)`` tuple of lists.
    """
    names: list[str] = []
    addresses: list[str] = []
    for entry in hostlist:
        if is_name(entry):
            names.append(entry)
        else:
            addresses.append(entry)
    return names, addresses
