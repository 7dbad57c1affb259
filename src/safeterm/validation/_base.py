"""
Abstract base class for all validators.

Each security level (aggressive, medium, minimal, none) implements this
interface. Validators are pure: they never raise for bad input, never touch
the filesystem, and read environment variables only from the snapshot they
were constructed with.
"""

from __future__ import annotations

import os
import re
from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

from safeterm._types import SecurityLevel, ValidationOutcome
from safeterm.policy.config import UNLIMITED, EnvironmentMode, PolicyConfig

FALLBACK_TIMEOUT_MS = 30_000
"""Default used when a bounded policy declares no positive default timeout."""


class Validator(ABC):
    """
    Abstract base for all validators.

    Provides the shared pre-validation helpers, file path rules, environment
    filtering and timeout clamping. Subclasses implement `validate_command`
    and may override the rest.
    """

    level: SecurityLevel

    def __init__(self, config: PolicyConfig, *, environ: Mapping[str, str] | None = None) -> None:
        """
        Initialize a validator.

        Args:
            config: The complete policy to evaluate against.
            environ: Environment to filter in build_environment. A snapshot
                of os.environ is taken if omitted.
        """
        self._config = config
        self._environ = dict(os.environ if environ is None else environ)
        self._forbidden = [(source, re.compile(source)) for source in config.forbidden_patterns]

        restriction = config.path_restriction
        self._path_pattern = re.compile(restriction.pattern) if restriction.pattern else None

    @property
    def config(self) -> PolicyConfig:
        return self._config

    @property
    def description(self) -> str:
        return self._config.description

    @property
    def allowed_commands_count(self) -> int:
        return len(self._config.command_rules)

    @abstractmethod
    def validate_command(self, command: Any, args: Any) -> ValidationOutcome:
        """
        Validate a command and its arguments.

        Args:
            command: The command name. Must be a non-empty string.
            args: The arguments. Must be a list or tuple of strings.

        Returns:
            An accepted outcome carrying the normalized command and
            arguments, or a rejected outcome carrying the error message.
        """
        ...

    def validate_file_path(self, path: str) -> bool:
        """
        Check a file path argument against the path restriction.

        Pure string validation: symlinks are not resolved and the
        filesystem is not consulted.
        """
        restriction = self._config.path_restriction
        if not restriction.enabled:
            return True
        if self._path_pattern is not None and not self._path_pattern.fullmatch(path):
            return False
        if restriction.max_length is not None and len(path) > restriction.max_length:
            return False
        return True

    def build_environment(self, extra: Mapping[str, str] | None = None) -> dict[str, str]:
        """
        Build the environment for a spawned command.

        Args:
            extra: Caller-supplied variables, applied last.

        Returns:
            The filtered environment.
        """
        policy = self._config.environment_policy
        if policy.mode is EnvironmentMode.WHITELIST:
            env = {name: self._environ[name] for name in policy.allowed_vars if name in self._environ}
        elif policy.mode is EnvironmentMode.BLACKLIST:
            env = {k: v for k, v in self._environ.items() if k not in policy.blocked_vars}
        else:
            env = dict(self._environ)

        if extra:
            env.update(extra)
        return env

    def get_timeout(self, requested: int | None = None) -> int:
        """
        Return the timeout to enforce, in milliseconds.

        Zero or a negative value means no timeout.
        """
        limits = self._config.limits
        if limits.timeout_max == UNLIMITED:
            return requested or limits.timeout_default

        default = limits.timeout_default if limits.timeout_default > 0 else FALLBACK_TIMEOUT_MS
        # A bounded policy never hands out "no timeout"
        if requested is None or requested <= 0:
            requested = default
        return min(requested, limits.timeout_max)

    # Shared pre-validation helpers

    @staticmethod
    def _check_shape(command: Any, args: Any) -> str | None:
        if not isinstance(command, str) or not command:
            return "Command must be a non-empty string"
        if not isinstance(args, (list, tuple)):
            return "Arguments must be a list of strings"
        if not all(isinstance(arg, str) for arg in args):
            return "All arguments must be strings"
        return None

    def _check_limits(self, command: str, args: Sequence[str]) -> str | None:
        limits = self._config.limits
        if limits.max_arguments != UNLIMITED and len(args) > limits.max_arguments:
            return f"Too many arguments (maximum {limits.max_arguments} allowed)"

        full_command = f"{command} {' '.join(args)}"
        if limits.max_command_length != UNLIMITED and len(full_command) > limits.max_command_length:
            return f"Command too long (maximum {limits.max_command_length} characters allowed)"
        return None

    def _check_basic(self, command: Any, args: Any) -> str | None:
        return self._check_shape(command, args) or self._check_limits(command, args)

    def _check_forbidden(self, command: str, args: Sequence[str]) -> str | None:
        # Match both the raw line and the trimmed line that will actually run
        trimmed = [arg.strip() for arg in args if arg.strip()]
        candidates = (f"{command} {' '.join(args)}", f"{command} {' '.join(trimmed)}")
        for source, pattern in self._forbidden:
            if any(pattern.search(line) for line in candidates):
                return f"Command contains forbidden pattern: {source}"
        return None

    def _check_policy(self, command: str, args: Sequence[str], *, whitelist: bool) -> str | None:
        """Forbidden patterns first; a whitelist miss is appended when both apply."""
        forbidden = self._check_forbidden(command, args)
        unlisted = self._check_whitelist(command) if whitelist else None
        if forbidden and unlisted:
            return f"{forbidden}; {unlisted}"
        return forbidden or unlisted

    def _check_whitelist(self, command: str) -> str | None:
        rules = self._config.command_rules
        if command not in rules:
            return f"Command '{command}' not in whitelist. Allowed commands: {', '.join(rules)}"
        return None

    @staticmethod
    def _normalize(command: str) -> str:
        return command.strip().lower()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(description={self.description!r})"
