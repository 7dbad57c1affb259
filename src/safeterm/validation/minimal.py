"""
Minimal validator: catastrophic patterns only.
"""

from __future__ import annotations

from typing import Any, Mapping

from safeterm._types import SecurityLevel, ValidationOutcome
from safeterm.validation._base import Validator


class MinimalValidator(Validator):
    """
    Validator for trusted environments.

    The whitelist is bypassed unconditionally. Only the limits, the input
    shape and the (short) forbidden-pattern list apply. Arguments are
    trimmed and empty ones dropped.
    """

    level = SecurityLevel.MINIMAL

    def validate_command(self, command: Any, args: Any) -> ValidationOutcome:
        error = self._check_basic(command, args)
        if error:
            return ValidationOutcome.reject(error)

        normalized = self._normalize(command)
        error = self._check_forbidden(normalized, args)
        if error:
            return ValidationOutcome.reject(error)

        sanitized = [arg.strip() for arg in args if arg.strip()]
        return ValidationOutcome.accept(normalized, sanitized)

    def validate_file_path(self, path: str) -> bool:
        return True

    def build_environment(self, extra: Mapping[str, str] | None = None) -> dict[str, str]:
        env = dict(self._environ)
        if extra:
            env.update(extra)
        return env
