"""
Main entry point: create_terminal factory function.

Wires settings, policy engine, boundary guard and executor into an
ExecutionCoordinator ready to serve tool calls.
"""

from __future__ import annotations

import logging
import os
from typing import Mapping

from safeterm._types import SessionState
from safeterm.boundary import BoundaryGuard
from safeterm.coordinator import ExecutionCoordinator
from safeterm.engine import PolicyEngine
from safeterm.executor import LocalExecutor
from safeterm.policy.config import PolicyConfig
from safeterm.policy.loader import PolicyLoader
from safeterm.settings import Settings

logger = logging.getLogger(__name__)


def create_terminal(
    settings: Settings | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    policy: PolicyConfig | None = None,
    enter_boundary: bool = True,
) -> ExecutionCoordinator:
    """
    Create a policy-guarded terminal for AI agents.

    Args:
        settings: Startup settings. Read from `environ` if omitted.
        environ: Environment holding the policy selector and the variables
            passed to commands. Defaults to os.environ.
        policy: Pin the terminal to an explicit policy instead of using the
            selector.
        enter_boundary: Move the process into the boundary directory before
            returning (skipped when boundary escape is enabled).

    Returns:
        ExecutionCoordinator exposing the terminal tools.

    Example:
        >>> terminal = create_terminal()
        >>> print(await terminal.execute_command("pwd"))

    Example with an explicit policy:
        >>> from safeterm.policy.defaults import MEDIUM
        >>> terminal = create_terminal(policy=MEDIUM, enter_boundary=False)
    """
    env = os.environ if environ is None else environ
    settings = settings or Settings.from_env(env)

    engine = PolicyEngine(
        env,
        loader=PolicyLoader(settings.config_dir),
        install_root=settings.install_root,
    )
    if policy is not None:
        engine.refresh(policy)

    guard = BoundaryGuard(settings.boundary)
    if enter_boundary:
        current = guard.enter()
    else:
        current = os.getcwd()

    validator = engine.get_validator()
    logger.info(
        f"Terminal ready: {validator.config.level.value} validation, "
        f"{validator.allowed_commands_count} allowed commands, directory {current}"
    )

    return ExecutionCoordinator(
        engine,
        guard,
        executor=LocalExecutor(max_output_chars=settings.max_output_chars),
        state=SessionState(current_directory=current),
    )
