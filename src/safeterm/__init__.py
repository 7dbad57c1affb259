"""
Top-level facade for safeterm.
"""

from safeterm._types import (
    BoundaryConfig,
    CommandResult,
    SecurityLevel,
    SessionState,
    ValidationOutcome,
)
from safeterm.api import create_terminal
from safeterm.boundary import BoundaryGuard
from safeterm.coordinator import ExecutionCoordinator
from safeterm.engine import PolicyEngine
from safeterm.errors import (
    BoundaryViolation,
    ChangeDirectoryError,
    ConfigurationError,
    DirectoryNotFoundError,
    SafeTermError,
    SecurityViolation,
)
from safeterm.executor import LocalExecutor
from safeterm.policy import PolicyConfig, PolicyLoader, Selection, select_level
from safeterm.settings import Settings
from safeterm.validation import Validator, validator_for

__all__ = [
    "create_terminal",
    "BoundaryConfig",
    "BoundaryGuard",
    "BoundaryViolation",
    "ChangeDirectoryError",
    "CommandResult",
    "ConfigurationError",
    "DirectoryNotFoundError",
    "ExecutionCoordinator",
    "LocalExecutor",
    "PolicyConfig",
    "PolicyEngine",
    "PolicyLoader",
    "SafeTermError",
    "SecurityLevel",
    "SecurityViolation",
    "Selection",
    "SessionState",
    "Settings",
    "ValidationOutcome",
    "Validator",
    "select_level",
    "validator_for",
]
