"""
Execution coordinator: the five terminal tools over one session.

Each request is independent. A command request goes through the active
validator, then the spawn primitive, then updates the session state. A
directory change goes through the boundary guard. Rejections raise before
any side effect; failing commands are normal output.
"""

from __future__ import annotations

import getpass
import logging
import os
import sys
from pathlib import Path
from typing import Mapping, Sequence

from safeterm._types import CommandResult, SessionState
from safeterm.boundary import BoundaryGuard
from safeterm.engine import PolicyEngine
from safeterm.errors import ChangeDirectoryError, DirectoryNotFoundError, SecurityViolation
from safeterm.executor import LocalExecutor

logger = logging.getLogger(__name__)


def format_command_output(result: CommandResult) -> str:
    """Render a result as STDOUT / STDERR / Exit Code sections."""
    output = ""
    if result.stdout:
        output += f"STDOUT:\n{result.stdout}\n"
    if result.stderr:
        output += f"STDERR:\n{result.stderr}\n"
    output += f"Exit Code: {result.exit_code}\n"
    return output.strip()


class ExecutionCoordinator:
    """
    Orchestrates validation, boundary checks and execution.

    Example:
        >>> terminal = ExecutionCoordinator(PolicyEngine(), BoundaryGuard())
        >>> print(await terminal.execute_command("ls", ["-la"]))
        STDOUT:
        ...
        Exit Code: 0
    """

    def __init__(
        self,
        engine: PolicyEngine,
        guard: BoundaryGuard,
        *,
        executor: LocalExecutor | None = None,
        state: SessionState | None = None,
    ) -> None:
        """
        Initialize a coordinator.

        Args:
            engine: Source of the active validator.
            guard: Boundary enforcement for directory changes.
            executor: Spawn primitive. Defaults to LocalExecutor.
            state: Initial session state. Defaults to the process working
                directory.
        """
        self._engine = engine
        self._guard = guard
        self._executor = executor or LocalExecutor()
        self._state = state or SessionState(current_directory=os.getcwd())

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def engine(self) -> PolicyEngine:
        return self._engine

    async def execute_command(
        self,
        command: str,
        args: Sequence[str] | None = None,
        *,
        cwd: str | None = None,
        timeout: int | None = None,
        env: Mapping[str, str] | None = None,
    ) -> str:
        """
        Validate and run a command.

        Args:
            command: Command name.
            args: Command arguments.
            cwd: Working directory. Defaults to the session directory.
            timeout: Requested timeout in milliseconds, clamped by the policy.
            env: Extra environment variables, applied after filtering.

        Returns:
            Formatted STDOUT / STDERR / Exit Code text.

        Raises:
            SecurityViolation: If the active policy rejects the request.
        """
        validator = self._engine.get_validator()
        outcome = validator.validate_command(command, [] if args is None else args)
        if not outcome.accepted:
            logger.warning(f"Blocked command {command!r}: {outcome.error}")
            raise SecurityViolation(outcome.error or "rejected", str(command))

        command_line = " ".join([outcome.command or "", *(outcome.arguments or ())])
        logger.info(f"Executing command: {command_line}")

        result = await self._executor.run(
            command_line,
            cwd=cwd or self._state.current_directory,
            env=validator.build_environment(env),
            timeout_ms=validator.get_timeout(timeout),
        )

        self._state.last_exit_code = result.exit_code
        self._state.last_command = command_line
        if not result.success:
            logger.info(f"Command failed: {command_line} (exit code {result.exit_code})")

        return format_command_output(result)

    async def change_directory(self, path: str) -> str:
        """
        Change the session (and process) working directory.

        Raises:
            BoundaryViolation: If the target escapes the boundary directory.
            DirectoryNotFoundError: If the target does not exist.
            ChangeDirectoryError: If the operating system refuses the change.
        """
        target = self._guard.resolve(self._state.current_directory, path)
        if not Path(target).is_dir():
            raise DirectoryNotFoundError(target)

        try:
            os.chdir(target)
        except OSError as e:
            logger.warning(f"Could not change directory to {target}: {e}")
            raise ChangeDirectoryError(target, str(e)) from e

        self._state.current_directory = os.getcwd()
        logger.info(f"Directory changed to: {self._state.current_directory}")
        return f"Current directory changed to: {self._state.current_directory}"

    def get_current_directory(self) -> str:
        return f"Current directory: {self._state.current_directory}"

    def get_terminal_info(self) -> str:
        """Dump session, environment and security status as key: value lines."""
        validator = self._engine.get_validator()
        environ = self._engine.environ
        level = validator.config.level.value

        info = {
            "shell": environ.get("SHELL", "unknown"),
            "user": environ.get("USER") or _current_user(),
            "home": str(Path.home()),
            "platform": sys.platform,
            "currentDirectory": self._state.current_directory,
            "lastCommand": self._state.last_command,
            "lastExitCode": self._state.last_exit_code,
            "securityMode": f"{level.upper()}_ENABLED",
            "validationLevel": level,
            "allowedCommands": validator.allowed_commands_count,
            "boundaryDirectory": self._guard.root,
            "boundaryEscape": self._guard.escape_enabled,
        }
        return "\n".join(f"{key}: {value}" for key, value in info.items())

    def list_allowed_commands(self) -> str:
        """Describe the whitelist of the active policy."""
        validator = self._engine.get_validator()
        config = validator.config
        header = f"SECURITY: {config.level.value.upper()} Mode"

        if not config.has_whitelist:
            restrictions = "\n".join(
                [
                    f"- Forbidden patterns: {len(config.forbidden_patterns)}",
                    f"- File path restrictions: {'Enabled' if config.path_restriction.enabled else 'Disabled'}",
                    f"- Environment policy: {config.environment_policy.mode.value}",
                ]
            )
            return (
                f"{header}\n\n{config.description}\n\n"
                f"No command whitelist: all commands are allowed in this validation level.\n\n"
                f"Active restrictions:\n{restrictions}"
            )

        commands = "\n".join(f"{name}: {rule.description}" for name, rule in config.command_rules.items())
        return (
            f"{header} - Whitelisted Commands Only\n\n{config.description}\n\n"
            f"Allowed commands:\n{commands}\n\n"
            f"Note: All commands are validated against security patterns and argument restrictions."
        )


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"
