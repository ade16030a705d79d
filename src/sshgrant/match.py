"""sshd Match block synthesis."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from sshgrant.rules import DEFAULT_POSITION, Criteria

__all__ = ["MatchBlock", "synthesize", "DEFAULT_POSITION"]


@dataclass(frozen=True)
class MatchBlock:
    """A Match block descriptor: criteria, host pattern and directives.

    Attributes:
        criteria: ``Host`` for symbolic names, ``Address`` for literals.
        pattern: Comma-joined host entries in request order.
        parameters: Directives for this block, owned by the block.
        position: Where the block goes relative to existing Match blocks.
    """

    criteria: Criteria
    pattern: str
    parameters: dict[str, Any] = field(default_factory=dict)
    position: str = DEFAULT_POSITION

    @property
    def key(self) -> str:
        return f"{self.criteria.value} {self.pattern}"


def synthesize(
    names: Sequence[str],
    addresses: Sequence[str],
    parameters: Mapping[str, Any],
    position: str = DEFAULT_POSITION,
) -> list[MatchBlock]:
    """Create at most two Match blocks, Host before Address.

    A block is produced for each non-empty bucket. Every block gets its own
    deep copy of ``parameters``, and all blocks share the same anchor
    ``position``.
    """
    blocks: list[MatchBlock] = []
    for criteria, entries in ((Criteria.HOST, names), (Criteria.ADDRESS, addresses)):
        if not entries:
            continue
        blocks.append(
            MatchBlock(
                criteria=criteria,
                pattern=",".join(entries),
                parameters=copy.deepcopy(dict(parameters)),
                position=position,
            )
        )
    return blocks
