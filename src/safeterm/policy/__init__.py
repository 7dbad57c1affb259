"""Policy model, built-in levels, selection and loading."""

from safeterm.policy.config import (
    UNLIMITED,
    CommandRule,
    EnvironmentMode,
    EnvironmentPolicy,
    Limits,
    PathRestriction,
    PolicyConfig,
)
from safeterm.policy.defaults import BUILTIN_POLICIES, builtin_policy
from safeterm.policy.loader import PolicyLoader, load_policy_file, parse_policy
from safeterm.policy.selector import (
    SELECTOR_ENV_VAR,
    Selection,
    SelectionKind,
    select_level,
)

__all__ = [
    "UNLIMITED",
    "BUILTIN_POLICIES",
    "CommandRule",
    "EnvironmentMode",
    "EnvironmentPolicy",
    "Limits",
    "PathRestriction",
    "PolicyConfig",
    "PolicyLoader",
    "SELECTOR_ENV_VAR",
    "Selection",
    "SelectionKind",
    "builtin_policy",
    "load_policy_file",
    "parse_policy",
    "select_level",
]
