"""
Aggressive validator: strict allow-list of commands and arguments.
"""

from __future__ import annotations

from typing import Any

from safeterm._types import SecurityLevel, ValidationOutcome
from safeterm.validation._base import Validator


class AggressiveValidator(Validator):
    """
    Maximum-security validator.

    A command must be whitelisted and every argument must either equal one
    of the rule's allowed arguments or, for commands that take a file, be a
    file path accepted by the path restriction. There is no heuristic
    fallback.

    Example:
        >>> validator = AggressiveValidator(AGGRESSIVE)
        >>> validator.validate_command("ls", ["-la"]).accepted
        True
    """

    level = SecurityLevel.AGGRESSIVE

    def validate_command(self, command: Any, args: Any) -> ValidationOutcome:
        error = self._check_basic(command, args)
        if error:
            return ValidationOutcome.reject(error)

        normalized = self._normalize(command)
        error = self._check_policy(normalized, args, whitelist=True)
        if error:
            return ValidationOutcome.reject(error)

        rule = self._config.command_rules[normalized]
        sanitized: list[str] = []
        for arg in args:
            arg = arg.strip()
            if not arg:
                continue

            allowed = arg in rule.allowed_args
            if rule.requires_file and not arg.startswith("-"):
                if not self.validate_file_path(arg):
                    return ValidationOutcome.reject(f"File path argument '{arg}' is not allowed")
                allowed = True

            if not allowed:
                return ValidationOutcome.reject(f"Argument '{arg}' not allowed for command '{normalized}'")
            sanitized.append(arg)

        return ValidationOutcome.accept(normalized, sanitized)
