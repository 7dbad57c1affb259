"""
Exception hierarchy for safeterm.
"""

from __future__ import annotations


class SafeTermError(Exception):
    """Base class for all safeterm errors."""


class ConfigurationError(SafeTermError):
    """
    Raised when a policy document is malformed or incomplete.

    Never escapes the policy loader: every occurrence is converted into a
    fallback to a built-in level.
    """


class SecurityViolation(SafeTermError):
    """
    Raised when a command is rejected by the active policy.

    Attributes:
        command: The command that was blocked.
        reason: Why the command was blocked.
    """

    def __init__(self, reason: str, command: str = "") -> None:
        self.command = command
        self.reason = reason
        super().__init__(f"Security violation: {reason}")


class BoundaryViolation(SafeTermError):
    """
    Raised when a resolved path escapes the boundary directory.

    Attributes:
        path: The resolved absolute path.
        root: The configured boundary directory.
    """

    def __init__(self, path: str, root: str) -> None:
        self.path = path
        self.root = root
        super().__init__(f"Path '{path}' is outside the allowed boundary ({root})")


class DirectoryNotFoundError(SafeTermError):
    """Raised when a directory change targets a path that does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Directory does not exist: {path}")


class ChangeDirectoryError(SafeTermError):
    """Raised when the operating system refuses a directory change."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to change directory: {reason}")
