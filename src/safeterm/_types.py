"""
Core type definitions for safeterm.

Uses dataclasses and enums for lightweight, typed abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from safeterm.errors import SecurityViolation


class SecurityLevel(Enum):
    """Security level of a policy."""

    AGGRESSIVE = "aggressive"  # Strict allow-list of commands and arguments
    MEDIUM = "medium"  # Allow-list with relaxed argument matching
    MINIMAL = "minimal"  # Catastrophic patterns only
    NONE = "none"  # Type checks only
    CUSTOM = "custom"  # Free-form user policy document

    @classmethod
    def builtin(cls) -> tuple[SecurityLevel, ...]:
        """Return the four built-in levels, strictest first."""
        return (cls.AGGRESSIVE, cls.MEDIUM, cls.MINIMAL, cls.NONE)


@dataclass(frozen=True, slots=True)
class ValidationOutcome:
    """Immutable result of validating one request."""

    accepted: bool
    command: str | None = None
    arguments: tuple[str, ...] | None = None
    error: str | None = None

    @classmethod
    def accept(cls, command: str, arguments: list[str] | tuple[str, ...]) -> ValidationOutcome:
        return cls(accepted=True, command=command, arguments=tuple(arguments))

    @classmethod
    def reject(cls, error: str) -> ValidationOutcome:
        return cls(accepted=False, error=error)

    def raise_for_status(self) -> None:
        """Raise SecurityViolation if the request was rejected."""
        if not self.accepted:
            raise SecurityViolation(self.error or "rejected", self.command or "")


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Immutable result from command execution."""

    stdout: str
    stderr: str
    exit_code: int
    timed_out: bool = False
    truncated: bool = False

    @property
    def success(self) -> bool:
        """Return True if command exited with code 0."""
        return self.exit_code == 0 and not self.timed_out


@dataclass
class SessionState:
    """
    Mutable per-process session state owned by the coordinator.

    Only updated after a spawn attempt completes or a directory change
    succeeds, never during validation.
    """

    current_directory: str
    last_exit_code: int | None = None
    last_command: str | None = None


@dataclass(frozen=True, slots=True)
class BoundaryConfig:
    """Boundary directory settings, read once at startup."""

    root_directory: str = "/tmp"
    escape_enabled: bool = False
