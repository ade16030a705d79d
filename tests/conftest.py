"""Shared test fixtures for the sshgrant test suite."""

from __future__ import annotations

import pytest

from sshgrant.appliers import RecordingCollaborators
from sshgrant.compiler import RuleCompiler
from sshgrant.request import AccessRequest


@pytest.fixture
def compiler() -> RuleCompiler:
    return RuleCompiler()


@pytest.fixture
def recorder() -> RecordingCollaborators:
    return RecordingCollaborators()


@pytest.fixture
def bastion_request() -> AccessRequest:
    """Single user, one address and one hostname, one override."""
    return AccessRequest.build(
        name="bastion",
        hostlist=["10.0.0.5", "bastion.corp"],
        users=["alice"],
        groups=[],
        sshd_overrides={"X11Forwarding": "no"},
    )


@pytest.fixture
def mixed_request() -> AccessRequest:
    """Users and groups across several names and addresses."""
    return AccessRequest.build(
        name="ops",
        hostlist=["jump1.corp", "10.1.0.0/16", "jump2.corp"],
        users=["alice", "bob"],
        groups=["wheel"],
        sshd_overrides={"PasswordAuthentication": "no", "AllowUsers": "root"},
    )
