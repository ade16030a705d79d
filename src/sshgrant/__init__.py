"""sshgrant - compile ssh access requests into PAM, firewall, tcp-wrapper,
SSSD and sshd Match block rules."""

from __future__ import annotations

# Core
from sshgrant.compiler import RuleCompiler, compile_request
from sshgrant.request import AccessRequest, load_requests

# Components
from sshgrant.domains import DomainCatalogue, StaticDomainCatalogue, expand, parse_catalogue
from sshgrant.hosts import classify
from sshgrant.match import MatchBlock, synthesize
from sshgrant.parameters import merge

# Rules
from sshgrant.rules import (
    Criteria,
    DomainAppendOp,
    FirewallAllow,
    MatchBlockCreate,
    MatchParamSet,
    PamAllow,
    RuleSet,
    SettingKind,
    SubjectKind,
    TcpWrapperAllow,
)

# Appliers
from sshgrant.appliers import RecordingCollaborators, RuleApplier

# Config
from sshgrant.config import Config

# Errors
from sshgrant.errors import (
    ConfigError,
    ConfigNotFoundError,
    ErrorCodes,
    RequestFileError,
    SshGrantError,
    UnsupportedOperationError,
    ValidationError,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "RuleCompiler",
    "compile_request",
    "AccessRequest",
    "load_requests",
    # Components
    "classify",
    "merge",
    "synthesize",
    "expand",
    "parse_catalogue",
    "MatchBlock",
    "DomainCatalogue",
    "StaticDomainCatalogue",
    # Rules
    "RuleSet",
    "PamAllow",
    "FirewallAllow",
    "TcpWrapperAllow",
    "DomainAppendOp",
    "MatchBlockCreate",
    "MatchParamSet",
    "Criteria",
    "SettingKind",
    "SubjectKind",
    # Appliers
    "RuleApplier",
    "RecordingCollaborators",
    # Config
    "Config",
    # Errors
    "ErrorCodes",
    "SshGrantError",
    "ValidationError",
    "ConfigError",
    "ConfigNotFoundError",
    "RequestFileError",
    "UnsupportedOperationError",
]
