"""
Policy document loading.

Policy documents are YAML files carrying the six PolicyConfig fields:

    validation_level: custom
    description: Project policy
    allowed_commands:
      ls: {allowed_args: ["-l", "-a"], description: List directory contents}
      git: Git operations           # shorthand, normalized to a full rule
    forbidden_patterns: ['[;&|`$(){}]']
    file_path_restrictions: {enabled: true, pattern: '^[a-z./]+$', max_path_length: 255}
    environment_policy: {mode: whitelist, allowed_vars: [PATH, HOME]}
    limits: {max_arguments: 10, max_command_length: 1000, timeout_max: 10000, timeout_default: 5000}

A document that cannot be turned into a complete PolicyConfig never reaches
the validators: the loader logs the problem and returns a built-in policy.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Mapping

import yaml

from safeterm._types import SecurityLevel
from safeterm.errors import ConfigurationError
from safeterm.policy.config import (
    CommandRule,
    EnvironmentMode,
    EnvironmentPolicy,
    Limits,
    PathRestriction,
    PolicyConfig,
)
from safeterm.policy.defaults import AGGRESSIVE, builtin_policy
from safeterm.policy.selector import Selection, SelectionKind

logger = logging.getLogger(__name__)

DEFAULT_SHORTHAND_ARGS: tuple[str, ...] = ("--help",)
"""Allowed arguments for commands declared with the string shorthand."""

_REQUIRED_SECTIONS = (
    "description",
    "forbidden_patterns",
    "file_path_restrictions",
    "environment_policy",
    "limits",
)


class PolicyLoader:
    """
    Produces PolicyConfig values for selector results.

    Built-in levels come from the compiled-in defaults unless `config_dir`
    holds a `<level>.yaml` override. Custom selections are read from the
    selected document. `load` never raises.

    Example:
        >>> loader = PolicyLoader(config_dir="./config/validation")
        >>> policy = loader.load(Selection.builtin(SecurityLevel.MEDIUM))
    """

    def __init__(self, config_dir: Path | str | None = None) -> None:
        self._config_dir = Path(config_dir) if config_dir is not None else None

    @property
    def config_dir(self) -> Path | None:
        return self._config_dir

    def load(self, selection: Selection) -> PolicyConfig:
        """
        Load the policy for a selector result.

        Args:
            selection: Result of select_level().

        Returns:
            A complete PolicyConfig. Falls back to a built-in policy on any
            configuration error.
        """
        if selection.kind is SelectionKind.CUSTOM:
            return self._load_custom(Path(selection.value))
        return self._load_builtin(selection.level)

    def _load_builtin(self, level: SecurityLevel) -> PolicyConfig:
        default = builtin_policy(level)
        if self._config_dir is None:
            return default

        path = self._config_dir / f"{level.value}.yaml"
        if not path.is_file():
            logger.debug(f"No policy override at {path}, using built-in {level.value} policy")
            return default

        try:
            policy = load_policy_file(path, expected_level=level)
        except ConfigurationError as e:
            logger.error(f"Invalid policy document {path}: {e}")
            logger.warning(f"Using built-in {level.value} policy")
            return default

        logger.info(f"Loaded {level.value} policy from {path}")
        return policy

    def _load_custom(self, path: Path) -> PolicyConfig:
        try:
            policy = load_policy_file(path)
        except ConfigurationError as e:
            logger.error(f"Invalid custom policy document {path}: {e}")
            logger.warning("Using built-in aggressive policy")
            return AGGRESSIVE

        logger.info(f"Loaded custom policy from {path} (declared level: {policy.level.value})")
        return policy


def load_policy_file(path: Path | str, *, expected_level: SecurityLevel | None = None) -> PolicyConfig:
    """
    Read and validate a YAML policy document.

    Raises:
        ConfigurationError: If the file cannot be read, parsed or validated.
    """
    path = Path(path)
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Cannot parse {path}: {e}") from e

    return parse_policy(raw, expected_level=expected_level, source=str(path))


def parse_policy(
    raw: Any,
    *,
    expected_level: SecurityLevel | None = None,
    source: str | None = None,
) -> PolicyConfig:
    """
    Validate a parsed policy document and build a PolicyConfig.

    Args:
        raw: The parsed document (normally a dict from YAML).
        expected_level: If given, the declared level must match it.
        source: Where the document came from, kept for diagnostics.

    Raises:
        ConfigurationError: If any of the six sections is missing or malformed.
    """
    if not isinstance(raw, Mapping):
        raise ConfigurationError("Policy document must contain a mapping")

    level = _parse_level(raw.get("validation_level"))
    if expected_level is not None and level is not expected_level:
        raise ConfigurationError(
            f"validation_level mismatch: expected {expected_level.value}, got {level.value}"
        )

    for section in _REQUIRED_SECTIONS:
        if raw.get(section) is None:
            raise ConfigurationError(f"Policy document missing {section}")

    commands = raw.get("allowed_commands")
    if commands is None:
        if level not in (SecurityLevel.MINIMAL, SecurityLevel.NONE):
            raise ConfigurationError("Policy document missing allowed_commands")
        commands = {}

    description = raw["description"]
    if not isinstance(description, str) or not description.strip():
        raise ConfigurationError("description must be a non-empty string")

    return PolicyConfig(
        level=level,
        description=description,
        command_rules=_parse_commands(commands),
        forbidden_patterns=_parse_patterns(raw["forbidden_patterns"]),
        path_restriction=_parse_path_restriction(raw["file_path_restrictions"]),
        environment_policy=_parse_environment(raw["environment_policy"]),
        limits=_parse_limits(raw["limits"]),
        source=source,
    )


def _parse_level(value: Any) -> SecurityLevel:
    if not isinstance(value, str) or not value:
        raise ConfigurationError("Policy document missing validation_level")
    try:
        return SecurityLevel(value.strip().lower())
    except ValueError:
        raise ConfigurationError(f"Unknown validation_level: {value!r}") from None


def _parse_commands(commands: Any) -> dict[str, CommandRule]:
    if not isinstance(commands, Mapping):
        raise ConfigurationError("allowed_commands must be a mapping")

    rules: dict[str, CommandRule] = {}
    for name, entry in commands.items():
        if not isinstance(name, str) or not name.strip():
            raise ConfigurationError(f"Invalid command name: {name!r}")

        if isinstance(entry, str):
            rules[name] = CommandRule(description=entry, allowed_args=DEFAULT_SHORTHAND_ARGS)
            continue

        if not isinstance(entry, Mapping):
            raise ConfigurationError(f"Rule for {name!r} must be a string or a mapping")

        args = entry.get("allowed_args") or []
        if not isinstance(args, list) or not all(isinstance(a, str) for a in args):
            raise ConfigurationError(f"allowed_args for {name!r} must be a list of strings")

        rules[name] = CommandRule(
            description=str(entry.get("description", "")),
            allowed_args=tuple(args),
            requires_file=bool(entry.get("requires_file", False)),
        )
    return rules


def _parse_patterns(patterns: Any) -> tuple[str, ...]:
    if not isinstance(patterns, list):
        raise ConfigurationError("forbidden_patterns must be a list")

    for pattern in patterns:
        if not isinstance(pattern, str):
            raise ConfigurationError(f"Forbidden pattern must be a string: {pattern!r}")
        try:
            re.compile(pattern)
        except re.error as e:
            raise ConfigurationError(f"Invalid forbidden pattern {pattern!r}: {e}") from e
    return tuple(patterns)


def _parse_path_restriction(section: Any) -> PathRestriction:
    if not isinstance(section, Mapping):
        raise ConfigurationError("file_path_restrictions must be a mapping")

    pattern = section.get("pattern")
    if pattern is not None:
        if not isinstance(pattern, str):
            raise ConfigurationError("file_path_restrictions.pattern must be a string")
        try:
            re.compile(pattern)
        except re.error as e:
            raise ConfigurationError(f"Invalid path pattern {pattern!r}: {e}") from e

    max_length = section.get("max_path_length")
    if max_length is not None and not _is_int(max_length):
        raise ConfigurationError("file_path_restrictions.max_path_length must be an integer")

    return PathRestriction(
        enabled=bool(section.get("enabled", False)),
        pattern=pattern,
        max_length=max_length,
    )


def _parse_environment(section: Any) -> EnvironmentPolicy:
    if not isinstance(section, Mapping):
        raise ConfigurationError("environment_policy must be a mapping")

    try:
        mode = EnvironmentMode(str(section.get("mode", "")).lower())
    except ValueError:
        raise ConfigurationError(f"Unknown environment_policy mode: {section.get('mode')!r}") from None

    return EnvironmentPolicy(
        mode=mode,
        allowed_vars=frozenset(section.get("allowed_vars") or ()),
        blocked_vars=frozenset(section.get("blocked_vars") or ()),
    )


def _parse_limits(section: Any) -> Limits:
    if not isinstance(section, Mapping):
        raise ConfigurationError("limits must be a mapping")

    # Missing limits inherit the strictest built-in values
    fallback = AGGRESSIVE.limits
    values: dict[str, int] = {}
    for key in ("max_arguments", "max_command_length", "timeout_max", "timeout_default"):
        value = section.get(key, getattr(fallback, key))
        if not _is_int(value):
            raise ConfigurationError(f"limits.{key} must be an integer")
        values[key] = value
    return Limits(**values)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
