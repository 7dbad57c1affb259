"""
Validators, one per security level.
"""

from __future__ import annotations

from typing import Mapping

from safeterm._types import SecurityLevel
from safeterm.policy.config import PolicyConfig
from safeterm.validation._base import Validator
from safeterm.validation.aggressive import AggressiveValidator
from safeterm.validation.medium import MediumValidator
from safeterm.validation.minimal import MinimalValidator
from safeterm.validation.none import NoneValidator

VALIDATORS: dict[SecurityLevel, type[Validator]] = {
    SecurityLevel.AGGRESSIVE: AggressiveValidator,
    SecurityLevel.MEDIUM: MediumValidator,
    SecurityLevel.MINIMAL: MinimalValidator,
    SecurityLevel.NONE: NoneValidator,
}

if set(VALIDATORS) != set(SecurityLevel.builtin()):
    raise ImportError("Every built-in security level needs a validator")

# Whitelist sizes used to classify free-form custom policies
SMALL_WHITELIST = 30
MODERATE_WHITELIST = 100


def infer_level(config: PolicyConfig) -> SecurityLevel:
    """
    Pick the validator behaviour for a policy.

    Built-in levels map to themselves. Policies declaring `custom` are
    classified by whitelist size: a small whitelist guarded by forbidden
    patterns behaves aggressively, a moderate one as medium, and an empty
    or large one as minimal.
    """
    if config.level is not SecurityLevel.CUSTOM:
        return config.level

    count = len(config.command_rules)
    if count == 0:
        return SecurityLevel.MINIMAL
    if count <= SMALL_WHITELIST and config.forbidden_patterns:
        return SecurityLevel.AGGRESSIVE
    if count <= MODERATE_WHITELIST:
        return SecurityLevel.MEDIUM
    return SecurityLevel.MINIMAL


def validator_for(config: PolicyConfig, *, environ: Mapping[str, str] | None = None) -> Validator:
    """
    Construct the validator that evaluates `config`.

    Args:
        config: A complete policy.
        environ: Environment snapshot for build_environment.
    """
    return VALIDATORS[infer_level(config)](config, environ=environ)


__all__ = [
    "VALIDATORS",
    "AggressiveValidator",
    "MediumValidator",
    "MinimalValidator",
    "NoneValidator",
    "Validator",
    "infer_level",
    "validator_for",
]
