"""
Active policy selection.

Interprets the single selector input (normally the COMMAND_VALIDATION
environment variable) as either a built-in level name or a path to a
custom policy document. Anything ambiguous degrades to the strictest
built-in level.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from safeterm._types import SecurityLevel

logger = logging.getLogger(__name__)

SELECTOR_ENV_VAR = "COMMAND_VALIDATION"
POLICY_SUFFIXES = frozenset({".yaml", ".yml"})


class SelectionKind(Enum):
    BUILTIN = "builtin"
    CUSTOM = "custom"


@dataclass(frozen=True, slots=True)
class Selection:
    """
    Tagged selector result.

    For BUILTIN selections `value` is the level name; for CUSTOM selections
    it is the resolved absolute path of the policy document.
    """

    kind: SelectionKind
    value: str

    @classmethod
    def builtin(cls, level: SecurityLevel) -> Selection:
        return cls(SelectionKind.BUILTIN, level.value)

    @classmethod
    def custom(cls, path: Path | str) -> Selection:
        return cls(SelectionKind.CUSTOM, str(path))

    @property
    def level(self) -> SecurityLevel:
        """The selected level; CUSTOM for policy documents."""
        if self.kind is SelectionKind.CUSTOM:
            return SecurityLevel.CUSTOM
        return SecurityLevel(self.value)


DEFAULT_SELECTION = Selection.builtin(SecurityLevel.AGGRESSIVE)

_BUILTIN_NAMES = {level.value: level for level in SecurityLevel.builtin()}


def select_level(
    value: str | None,
    *,
    install_root: Path | str | None = None,
    cwd: Path | str | None = None,
) -> Selection:
    """
    Decide which policy is active.

    Args:
        value: Raw selector input. None or empty selects the default.
        install_root: Directory tried first for relative policy paths.
        cwd: Directory tried second for relative policy paths.
            Defaults to the process working directory.

    Returns:
        A Selection. Never raises.
    """
    if not value or not value.strip():
        logger.warning(f"{SELECTOR_ENV_VAR} not set, defaulting to aggressive security")
        return DEFAULT_SELECTION

    raw = value.strip()
    level = _BUILTIN_NAMES.get(raw.lower())
    if level is not None:
        if level is SecurityLevel.NONE:
            logger.warning('Using "none" validation level - all security protections disabled')
        elif level is SecurityLevel.MINIMAL:
            logger.warning('Using "minimal" validation level - most security protections disabled')
        else:
            logger.info(f"Using {level.value} validation level")
        return Selection.builtin(level)

    if Path(raw).suffix.lower() in POLICY_SUFFIXES:
        resolved = _resolve_policy_path(raw, install_root, cwd)
        if resolved is not None:
            logger.info(f"Using custom validation policy {resolved}")
            return Selection.custom(resolved)
        logger.warning(f"Policy document not found: {raw}, defaulting to aggressive security")
        return DEFAULT_SELECTION

    logger.warning(f"Invalid {SELECTOR_ENV_VAR} {raw!r}, defaulting to aggressive security")
    return DEFAULT_SELECTION


def _resolve_policy_path(
    raw: str,
    install_root: Path | str | None,
    cwd: Path | str | None,
) -> Path | None:
    candidates: list[Path] = []
    path = Path(raw).expanduser()
    if path.is_absolute():
        candidates.append(path)
    else:
        if install_root is not None:
            candidates.append(Path(install_root) / path)
        try:
            candidates.append(Path(cwd if cwd is not None else Path.cwd()) / path)
        except OSError:
            pass

    for candidate in candidates:
        try:
            if candidate.is_file():
                return candidate.resolve()
        except (OSError, ValueError):
            continue
    return None
