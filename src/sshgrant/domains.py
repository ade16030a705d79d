"""Identity-domain catalogue parsing and allow-list fan-out."""

from __future__ import annotations

import re
from typing import Protocol, Sequence, runtime_checkable

from sshgrant.rules import DomainAppendOp, SettingKind

__all__ = [
    "DomainCatalogue",
    "StaticDomainCatalogue",
    "parse_catalogue",
    "expand",
]

_WHITESPACE = re.compile(r"\s+")


@runtime_checkable
class DomainCatalogue(Protocol):
    """Source of the raw, comma-separated identity domain list."""

    def get_domains(self) -> str: ...


class StaticDomainCatalogue:
    """Domain catalogue backed by a fixed string."""

    def __init__(self, raw: str | None = "") -> None:
        self._raw = raw or ""

    def get_domains(self) -> str:
        return self._raw


def parse_catalogue(raw: str | None) -> list[str]:
    """Parse ``"dom1, dom2"`` into ``["dom1", "dom2"]``.

    All whitespace is removed before splitting on commas. Empty segments
    are dropped, so an empty or comma-only string yields no domains.
    """
    if not raw:
        return []
    return [domain for domain in _WHITESPACE.sub("", raw).split(",") if domain]


def expand(
    catalogue: str | None,
    users: Sequence[str],
    groups: Sequence[str],
) -> list[DomainAppendOp]:
    """Fan users and groups out across every domain in the catalogue.

    For each domain in catalogue order, an ``AllowUsers`` append is emitted
    when ``users`` is non-empty, then an ``AllowGroups`` append when
    ``groups`` is non-empty.

    Args:
        catalogue: Raw comma-separated domain list.
        users: Users to append to each domain's allow-list.
        groups: Groups to append to each domain's allow-list.

    Returns:
        The append operations, in emission order.
    """
    ops: list[DomainAppendOp] = []
    for domain in parse_catalogue(catalogue):
        if users:
            ops.append(DomainAppendOp(domain, SettingKind.ALLOW_USERS, tuple(users)))
        if groups:
            ops.append(DomainAppendOp(domain, SettingKind.ALLOW_GROUPS, tuple(groups)))
    return ops
