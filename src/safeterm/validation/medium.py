"""
Medium validator: allow-list with relaxed argument matching.
"""

from __future__ import annotations

import re
from typing import Any

from safeterm._types import SecurityLevel, ValidationOutcome
from safeterm.policy.config import CommandRule
from safeterm.validation._base import Validator

# Word characters, dots, slashes and dashes only
SAFE_TOKEN = re.compile(r"[a-zA-Z0-9._/-]+")


class MediumValidator(Validator):
    """
    Balanced validator for trusted development environments.

    Differs from the aggressive level in three ways: an empty whitelist
    disables command-name checks, flag-shaped allowed arguments also accept
    arguments that start with them (`-n` accepts `-n5`), and any argument
    that is a plain safe token is accepted.
    """

    level = SecurityLevel.MEDIUM

    def validate_command(self, command: Any, args: Any) -> ValidationOutcome:
        error = self._check_basic(command, args)
        if error:
            return ValidationOutcome.reject(error)

        normalized = self._normalize(command)
        error = self._check_policy(normalized, args, whitelist=self._config.has_whitelist)
        if error:
            return ValidationOutcome.reject(error)

        rule = self._config.command_rules.get(normalized)
        sanitized: list[str] = []
        for arg in args:
            arg = arg.strip()
            if not arg:
                continue

            if rule is not None:
                error = self._check_argument(normalized, rule, arg)
                if error:
                    return ValidationOutcome.reject(error)
            sanitized.append(arg)

        return ValidationOutcome.accept(normalized, sanitized)

    def _check_argument(self, command: str, rule: CommandRule, arg: str) -> str | None:
        allowed = any(
            arg == allowed_arg or (allowed_arg.startswith("-") and arg.startswith(allowed_arg))
            for allowed_arg in rule.allowed_args
        )

        if rule.requires_file and not arg.startswith("-"):
            if not self.validate_file_path(arg):
                return f"File path argument '{arg}' is not allowed"
            allowed = True

        if not allowed and SAFE_TOKEN.fullmatch(arg):
            allowed = True

        if not allowed:
            return f"Argument '{arg}' not allowed for command '{command}'"
        return None
