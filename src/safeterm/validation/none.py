"""
None validator: type checks only.
"""

from __future__ import annotations

from typing import Any, Mapping

from safeterm._types import SecurityLevel, ValidationOutcome
from safeterm.validation._base import Validator


class NoneValidator(Validator):
    """
    Validator that performs no semantic filtering at all.

    Only the input shape is checked. Arguments are passed through verbatim,
    whitespace and empty strings included, and there is no timeout unless
    the caller asks for one.
    """

    level = SecurityLevel.NONE

    def validate_command(self, command: Any, args: Any) -> ValidationOutcome:
        error = self._check_shape(command, args)
        if error:
            return ValidationOutcome.reject(error)
        return ValidationOutcome.accept(self._normalize(command), list(args))

    def validate_file_path(self, path: str) -> bool:
        return True

    def build_environment(self, extra: Mapping[str, str] | None = None) -> dict[str, str]:
        env = dict(self._environ)
        if extra:
            env.update(extra)
        return env

    def get_timeout(self, requested: int | None = None) -> int:
        # 0 means no timeout
        return requested or 0
