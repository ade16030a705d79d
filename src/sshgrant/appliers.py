"""Collaborator protocols and the RuleApplier that dispatches to them.

The compiler only describes effects. A driver supplies one collaborator per
subsystem and hands the RuleSet to :class:`RuleApplier`, which calls each
collaborator in RuleSet order. Collaborators must be idempotent; errors
they raise propagate unchanged.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, Sequence

from sshgrant.errors import UnsupportedOperationError
from sshgrant.rules import (
    DomainAppendOp,
    FirewallAllow,
    MatchBlockCreate,
    MatchParamSet,
    Operation,
    PamAllow,
    RuleSet,
    TcpWrapperAllow,
)

__all__ = [
    "PamAccessWriter",
    "FirewallInstaller",
    "TcpWrapperWriter",
    "IdentityDirectoryEditor",
    "SshdConfigWriter",
    "RuleApplier",
    "RecordingCollaborators",
]


class PamAccessWriter(Protocol):
    def allow(
        self,
        subject_kind: str,
        subject: str,
        origin: str,
        permission: str,
        position: str,
    ) -> None: ...


class FirewallInstaller(Protocol):
    def allow(
        self,
        port: int,
        protocol: str,
        source: str,
        action: str,
        label: str,
    ) -> None: ...


class TcpWrapperWriter(Protocol):
    def allow(self, service: str, address: str) -> None: ...


class IdentityDirectoryEditor(Protocol):
    def append_allow_list(self, domain: str, setting_kind: str, items: Sequence[str]) -> None: ...


class SshdConfigWriter(Protocol):
    """Writes Match blocks and their directives; reloads sshd on request."""

    def create_match_block(self, criteria: str, pattern: str, position: str) -> None: ...

    def set_parameter(
        self,
        match_key: str,
        directive: str,
        value: str | Sequence[str],
        block: MatchBlockCreate,
    ) -> None: ...

    def reload(self) -> None: ...


class RuleApplier:
    """Dispatch RuleSet operations to their collaborators.

    sshd is reloaded once, after all operations are applied, if any sshd
    operation was applied.
    """

    def __init__(
        self,
        pam: PamAccessWriter,
        firewall: FirewallInstaller,
        tcpwrapper: TcpWrapperWriter,
        directory: IdentityDirectoryEditor,
        sshd: SshdConfigWriter,
    ) -> None:
        self._pam = pam
        self._firewall = firewall
        self._tcpwrapper = tcpwrapper
        self._directory = directory
        self._sshd = sshd
        self._logger = logging.getLogger("sshgrant.appliers")

    def apply(self, rule_set: RuleSet) -> int:
        """Apply every operation in order.

        Returns:
            The number of operations applied.

        Raises:
            UnsupportedOperationError: If an operation has no collaborator.
        """
        sshd_changed = False
        count = 0
        for op in rule_set:
            sshd_changed = self._dispatch(op) or sshd_changed
            count += 1

        if sshd_changed:
            self._logger.debug("Reloading sshd after %d operations", count)
            self._sshd.reload()
        return count

    def _dispatch(self, op: Operation) -> bool:
        self._logger.debug("Applying %r", op)
        if isinstance(op, PamAllow):
            self._pam.allow(
                op.subject_kind.value, op.subject, op.origin, op.permission, op.position
            )
        elif isinstance(op, FirewallAllow):
            self._firewall.allow(op.port, op.protocol, op.source, op.action, op.label)
        elif isinstance(op, TcpWrapperAllow):
            self._tcpwrapper.allow(op.service, op.address)
        elif isinstance(op, DomainAppendOp):
            self._directory.append_allow_list(op.domain, op.setting_kind.value, list(op.items))
        elif isinstance(op, MatchBlockCreate):
            self._sshd.create_match_block(op.criteria.value, op.pattern, op.position)
            return True
        elif isinstance(op, MatchParamSet):
            value = list(op.value) if isinstance(op.value, tuple) else op.value
            self._sshd.set_parameter(op.match_key, op.directive, value, op.block)
            return True
        else:
            raise UnsupportedOperationError(op)
        return False


class RecordingCollaborators:
    """In-memory stand-in for every collaborator, for dry runs and tests.

    Each call is appended to ``calls`` as ``(method, args)``.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.reloads = 0

    def applier(self) -> RuleApplier:
        """Return a RuleApplier wired to this recorder for every subsystem."""
        return RuleApplier(
            pam=_Recorder(self, "pam"),
            firewall=_Recorder(self, "firewall"),
            tcpwrapper=_Recorder(self, "tcpwrapper"),
            directory=self,
            sshd=self,
        )

    def append_allow_list(self, domain: str, setting_kind: str, items: Sequence[str]) -> None:
        self.calls.append(("directory.append_allow_list", (domain, setting_kind, list(items))))

    def create_match_block(self, criteria: str, pattern: str, position: str) -> None:
        self.calls.append(("sshd.create_match_block", (criteria, pattern, position)))

    def set_parameter(
        self,
        match_key: str,
        directive: str,
        value: str | Sequence[str],
        block: MatchBlockCreate,
    ) -> None:
        self.calls.append(("sshd.set_parameter", (match_key, directive, value)))

    def reload(self) -> None:
        self.reloads += 1


class _Recorder:
    def __init__(self, owner: RecordingCollaborators, prefix: str) -> None:
        self._owner = owner
        self._prefix = prefix

    def allow(self, *args: Any) -> None:
        self._owner.calls.append((f"{self._prefix}.allow", args))
