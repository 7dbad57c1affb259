"""
Framework-neutral tool functions shared by the integrations.

Policy rejections and boundary errors are returned as text so the agent can
read them and adjust, instead of aborting the agent run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Awaitable, Callable

from safeterm.errors import SafeTermError

if TYPE_CHECKING:
    from safeterm.coordinator import ExecutionCoordinator

ToolFunction = Callable[..., Awaitable[str]]

TOOL_DESCRIPTIONS: dict[str, str] = {
    "execute_command": "Execute a terminal command with validated arguments. "
    "Only commands allowed by the active security policy will run.",
    "change_directory": "Change the working directory for subsequent commands "
    "(restricted to the boundary directory).",
    "get_current_directory": "Get the current working directory path.",
    "get_terminal_info": "Get terminal environment info and security status.",
    "list_allowed_commands": "List the commands allowed by the active security policy.",
}


def terminal_tool_functions(terminal: ExecutionCoordinator) -> dict[str, ToolFunction]:
    """
    Build the five terminal tools as async functions bound to `terminal`.
    """

    async def execute_command(
        command: str,
        args: list[str] | None = None,
        cwd: str | None = None,
        timeout: int | None = None,
        env: dict[str, str] | None = None,
    ) -> str:
        """Execute a whitelisted command. Timeout is in milliseconds."""
        try:
            return await terminal.execute_command(command, args or [], cwd=cwd, timeout=timeout, env=env)
        except SafeTermError as e:
            return f"Error: {e}"

    async def change_directory(path: str) -> str:
        """Change the working directory."""
        try:
            return await terminal.change_directory(path)
        except SafeTermError as e:
            return f"Error: {e}"

    async def get_current_directory() -> str:
        """Get the current working directory."""
        return terminal.get_current_directory()

    async def get_terminal_info() -> str:
        """Get terminal environment info and security status."""
        return terminal.get_terminal_info()

    async def list_allowed_commands() -> str:
        """List the commands allowed by the active security policy."""
        return terminal.list_allowed_commands()

    return {
        "execute_command": execute_command,
        "change_directory": change_directory,
        "get_current_directory": get_current_directory,
        "get_terminal_info": get_terminal_info,
        "list_allowed_commands": list_allowed_commands,
    }
