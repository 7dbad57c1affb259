"""
Policy data model.

A PolicyConfig describes one security level completely. Instances are
frozen: they are built once (from the compiled-in defaults or a validated
policy document) and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from safeterm._types import SecurityLevel

UNLIMITED = -1
"""Sentinel for numeric limits that are not enforced."""


class EnvironmentMode(Enum):
    """How the child environment is derived from the real one."""

    WHITELIST = "whitelist"  # Copy only the named variables
    BLACKLIST = "blacklist"  # Copy everything except the named variables
    PASSTHROUGH = "passthrough"  # Copy everything


@dataclass(frozen=True, slots=True)
class CommandRule:
    """Per-command whitelist entry."""

    description: str
    allowed_args: tuple[str, ...] = ()
    requires_file: bool = False


@dataclass(frozen=True, slots=True)
class PathRestriction:
    """String-level restrictions on file path arguments."""

    enabled: bool = False
    pattern: str | None = None
    max_length: int | None = None


@dataclass(frozen=True, slots=True)
class EnvironmentPolicy:
    """Environment filtering policy for spawned commands."""

    mode: EnvironmentMode = EnvironmentMode.PASSTHROUGH
    allowed_vars: frozenset[str] = frozenset()
    blocked_vars: frozenset[str] = frozenset()

    @classmethod
    def whitelist(cls, *names: str) -> EnvironmentPolicy:
        return cls(mode=EnvironmentMode.WHITELIST, allowed_vars=frozenset(names))

    @classmethod
    def blacklist(cls, *names: str) -> EnvironmentPolicy:
        return cls(mode=EnvironmentMode.BLACKLIST, blocked_vars=frozenset(names))

    @classmethod
    def passthrough(cls) -> EnvironmentPolicy:
        return cls(mode=EnvironmentMode.PASSTHROUGH)


@dataclass(frozen=True, slots=True)
class Limits:
    """Numeric limits. UNLIMITED (-1) disables a limit."""

    max_arguments: int = UNLIMITED
    max_command_length: int = UNLIMITED
    timeout_max: int = UNLIMITED
    timeout_default: int = UNLIMITED


@dataclass(frozen=True)
class PolicyConfig:
    """
    Complete description of one security level.

    Attributes:
        level: The level tag declared by the policy.
        description: Human-readable summary.
        command_rules: Lower-cased command name -> rule. Empty means no
            whitelist (every command name is permitted).
        forbidden_patterns: Regex sources checked against the full command line.
        path_restriction: Rules for file path arguments.
        environment_policy: Rules for building the child environment.
        limits: Argument, length and timeout limits.
    """

    level: SecurityLevel
    description: str
    command_rules: Mapping[str, CommandRule]
    forbidden_patterns: tuple[str, ...]
    path_restriction: PathRestriction
    environment_policy: EnvironmentPolicy
    limits: Limits
    source: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        rules = {name.strip().lower(): rule for name, rule in self.command_rules.items()}
        object.__setattr__(self, "command_rules", MappingProxyType(rules))
        object.__setattr__(self, "forbidden_patterns", tuple(self.forbidden_patterns))

    @property
    def has_whitelist(self) -> bool:
        """True if the policy restricts command names."""
        return bool(self.command_rules)
