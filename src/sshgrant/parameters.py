"""Merge sshd directive overrides with the derived allow lists."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

__all__ = ["merge", "ALLOW_USERS", "ALLOW_GROUPS"]

ALLOW_USERS = "AllowUsers"
ALLOW_GROUPS = "AllowGroups"


def merge(
    overrides: Mapping[str, Any],
    users: Sequence[str],
    groups: Sequence[str],
) -> dict[str, Any]:
    """Build the parameter mapping for the request's Match blocks.

    Overrides are copied first, then ``AllowUsers`` (if any users) and
    ``AllowGroups`` (if any groups) are written over them. A same-named
    override is replaced, not merged.

    Args:
        overrides: Explicit sshd directives from the request.
        users: Users to allow.
        groups: Groups to allow.

    Returns:
        A new ordered dict; ``overrides`` is not modified.
    """
    merged: dict[str, Any] = {
        key: list(value) if isinstance(value, (list, tuple)) else value
        for key, value in overrides.items()
    }
    if users:
        merged[ALLOW_USERS] = list(users)
    if groups:
        merged[ALLOW_GROUPS] = list(groups)
    return merged
