"""Typed rule operations produced by the compiler.

Each operation describes one idempotent "apply" call on an external
collaborator. ``key`` identifies the resulting state: two operations with
the same key converge to the same configuration when applied.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Union

__all__ = [
    "SubjectKind",
    "SettingKind",
    "Criteria",
    "PamAllow",
    "FirewallAllow",
    "TcpWrapperAllow",
    "DomainAppendOp",
    "MatchBlockCreate",
    "MatchParamSet",
    "Operation",
    "RuleSet",
    "operation_to_dict",
    "DEFAULT_POSITION",
]

ParamValue = Union[str, tuple[str, ...]]

DEFAULT_POSITION = "before first match"


class SubjectKind(str, Enum):
    """Kind of PAM access subject."""

    USER = "user"
    GROUP = "group"


class SettingKind(str, Enum):
    """Identity-directory allow-list setting."""

    ALLOW_USERS = "AllowUsers"
    ALLOW_GROUPS = "AllowGroups"

    @property
    def directive(self) -> str:
        """The SSSD ``simple`` access provider option for this setting."""
        if self is SettingKind.ALLOW_USERS:
            return "simple_allow_users"
        return "simple_allow_groups"


class Criteria(str, Enum):
    """sshd Match block criteria."""

    HOST = "Host"
    ADDRESS = "Address"


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, tuple):
        return [_plain(v) for v in value]
    return value


class _OperationBase:
    def to_dict(self) -> dict[str, Any]:
        """Return a plain, serializable view with a ``type`` tag."""
        return operation_to_dict(self)  # type: ignore[arg-type]


@dataclass(frozen=True)
class PamAllow(_OperationBase):
    """Grant a user or group access from one origin in the PAM access rules."""

    subject_kind: SubjectKind
    subject: str
    origin: str
    permission: str = "+"
    position: str = "end"

    @property
    def key(self) -> tuple[str, ...]:
        return ("pam", self.subject_kind.value, self.subject, self.origin)


@dataclass(frozen=True)
class FirewallAllow(_OperationBase):
    """Accept inbound ssh traffic from one source host."""

    source: str
    label: str
    port: int = 22
    protocol: str = "tcp"
    action: str = "accept"

    @property
    def key(self) -> tuple[str, ...]:
        return ("firewall", self.label)


@dataclass(frozen=True)
class TcpWrapperAllow(_OperationBase):
    """Allow one address for a service in the TCP-wrapper rules."""

    address: str
    service: str = "sshd"

    @property
    def key(self) -> tuple[str, ...]:
        return ("tcpwrapper", self.service, self.address)


@dataclass(frozen=True)
class DomainAppendOp(_OperationBase):
    """Append items to an identity domain's allow-list setting."""

    domain: str
    setting_kind: SettingKind
    items: tuple[str, ...]

    @property
    def directive(self) -> str:
        return self.setting_kind.directive

    @property
    def key(self) -> tuple[Any, ...]:
        return ("domain", self.domain, self.setting_kind.value, self.items)


@dataclass(frozen=True)
class MatchBlockCreate(_OperationBase):
    """Create an sshd Match block at a position relative to existing blocks."""

    criteria: Criteria
    pattern: str
    position: str = DEFAULT_POSITION

    @property
    def match_key(self) -> str:
        return f"{self.criteria.value} {self.pattern}"

    @property
    def key(self) -> tuple[str, ...]:
        return ("match", self.match_key)


@dataclass(frozen=True)
class MatchParamSet(_OperationBase):
    """Set one directive inside an sshd Match block."""

    block: MatchBlockCreate
    directive: str
    value: ParamValue

    @property
    def match_key(self) -> str:
        return self.block.match_key

    @property
    def key(self) -> tuple[str, ...]:
        return ("match_param", self.match_key, self.directive)


Operation = Union[
    PamAllow,
    FirewallAllow,
    TcpWrapperAllow,
    DomainAppendOp,
    MatchBlockCreate,
    MatchParamSet,
]

_TYPE_TAGS: dict[type, str] = {
    PamAllow: "pam_allow",
    FirewallAllow: "firewall_allow",
    TcpWrapperAllow: "tcpwrapper_allow",
    DomainAppendOp: "domain_append",
    MatchBlockCreate: "match_block_create",
    MatchParamSet: "match_param_set",
}


def operation_to_dict(op: Operation) -> dict[str, Any]:
    """Return a plain, serializable view of an operation with a ``type`` tag."""
    data: dict[str, Any] = {"type": _TYPE_TAGS[type(op)]}
    for name in op.__dataclass_fields__:
        value = getattr(op, name)
        if isinstance(value, MatchBlockCreate):
            data[name] = value.match_key
        else:
            data[name] = _plain(value)
    return data


@dataclass
class RuleSet:
    """Ordered collection of operations from one compilation."""

    operations: list[Operation] = field(default_factory=list)

    def __iter__(self) -> Iterator[Operation]:
        return iter(self.operations)

    def __len__(self) -> int:
        return len(self.operations)

    def of_type(self, op_type: type) -> list[Any]:
        """Return the operations of one type, in order."""
        return [op for op in self.operations if isinstance(op, op_type)]

    def unique(self) -> RuleSet:
        """Return a copy keeping only the first operation for each key."""
        seen: set[tuple[Any, ...]] = set()
        kept: list[Operation] = []
        for op in self.operations:
            if op.key in seen:
                continue
            seen.add(op.key)
            kept.append(op)
        return RuleSet(kept)

    def to_dicts(self) -> list[dict[str, Any]]:
        return [op.to_dict() for op in self.operations]
