"""RuleCompiler: turn an AccessRequest into an ordered RuleSet.

Compilation is pure. The compiler reads no files and holds only its
read-only Config, so one instance may compile many requests, from any
number of threads.
"""

from __future__ import annotations

import logging
from typing import Iterable, Union

from sshgrant.config import Config
from sshgrant.domains import DomainCatalogue, expand
from sshgrant.hosts import classify
from sshgrant.match import MatchBlock, synthesize
from sshgrant.parameters import merge
from sshgrant.request import AccessRequest, check_subjects
from sshgrant.rules import (
    FirewallAllow,
    MatchBlockCreate,
    MatchParamSet,
    Operation,
    PamAllow,
    RuleSet,
    SubjectKind,
    TcpWrapperAllow,
)

__all__ = ["RuleCompiler", "compile_request"]

DomainSource = Union[str, DomainCatalogue, None]


class RuleCompiler:
    """Compile access requests into PAM, firewall, tcp-wrapper, identity
    domain and sshd Match block operations.
    """

    def __init__(self, config: Config | None = None) -> None:
        self._config: Config = config or Config()
        self._logger: logging.Logger = logging.getLogger("sshgrant.compiler")

    def compile(
        self,
        request: AccessRequest,
        available_domains: DomainSource = "",
        existing_match_keys: Iterable[str] = (),
    ) -> RuleSet:
        """Compile one request.

        Args:
            request: The access request.
            available_domains: Raw comma-separated identity domain list, or a
                DomainCatalogue to read it from.
            existing_match_keys: Match keys (``"Host a,b"``) already present
                in the sshd configuration. Known blocks are not created
                again, but their parameters are still set.

        Returns:
            The operations, in a fixed order: PAM, firewall, tcp-wrapper,
            identity domain, then each Match block with its parameters.

        Raises:
            ValidationError: If both users and groups are empty.
        """
        check_subjects(request)

        if isinstance(available_domains, DomainCatalogue):
            catalogue = available_domains.get_domains()
        else:
            catalogue = available_domains or ""

        operations: list[Operation] = []
        operations.extend(self._pam_rules(request))
        operations.extend(self._firewall_rules(request))
        operations.extend(self._tcpwrapper_rules(request))
        operations.extend(expand(catalogue, request.users, request.groups))

        names, addresses = classify(request.hostlist)
        parameters = merge(request.sshd_overrides, request.users, request.groups)
        blocks = synthesize(
            names,
            addresses,
            parameters,
            position=self._config.get("sshd.match_position"),
        )
        known = set(existing_match_keys)
        for block in blocks:
            operations.extend(self._match_rules(block, create=block.key not in known))

        self._logger.debug(
            "Compiled request %s: hosts=%d users=%d groups=%d blocks=%s operations=%d",
            request.name,
            len(request.hostlist),
            len(request.users),
            len(request.groups),
            [block.key for block in blocks],
            len(operations),
        )
        return RuleSet(operations)

    def _pam_rules(self, request: AccessRequest) -> list[PamAllow]:
        permission = self._config.get("pam.permission")
        position = self._config.get("pam.position")
        rules: list[PamAllow] = []
        for kind, subjects in (
            (SubjectKind.GROUP, request.groups),
            (SubjectKind.USER, request.users),
        ):
            for subject in subjects:
                for host in request.hostlist:
                    rules.append(PamAllow(kind, subject, host, permission, position))
        return rules

    def _firewall_rules(self, request: AccessRequest) -> list[FirewallAllow]:
        label_format: str = self._config.get("firewall.label_format")
        return [
            FirewallAllow(
                source=host,
                label=label_format.format(name=request.name, host=host),
                port=int(self._config.get("firewall.port")),
                protocol=self._config.get("firewall.protocol"),
                action=self._config.get("firewall.action"),
            )
            for host in request.hostlist
        ]

    def _tcpwrapper_rules(self, request: AccessRequest) -> list[TcpWrapperAllow]:
        service = self._config.get("tcpwrapper.service")
        return [TcpWrapperAllow(address=host, service=service) for host in request.hostlist]

    def _match_rules(self, block: MatchBlock, create: bool) -> list[Operation]:
        header = MatchBlockCreate(block.criteria, block.pattern, block.position)
        operations: list[Operation] = [header] if create else []
        for directive, value in block.parameters.items():
            if isinstance(value, list):
                value = tuple(value)
            operations.append(MatchParamSet(header, directive, value))
        return operations


_default_compiler = RuleCompiler()


def compile_request(
    request: AccessRequest,
    available_domains: DomainSource = "",
    existing_match_keys: Iterable[str] = (),
) -> RuleSet:
    """Compile a request with the default configuration."""
    return _default_compiler.compile(request, available_domains, existing_match_keys)
