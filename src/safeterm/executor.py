"""
Local subprocess-based command execution.

This is the spawn primitive used by the coordinator. It uses
asyncio.subprocess for non-blocking execution; it performs no validation
of its own.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Mapping

from safeterm._types import CommandResult

logger = logging.getLogger(__name__)


class LocalExecutor:
    """
    Runs a command line through the shell and captures its output.

    Features:
    - Timeout enforcement (the child is killed and reaped)
    - Output truncation to prevent memory exhaustion
    - Spawn failures reported as results, not raised

    Example:
        >>> executor = LocalExecutor()
        >>> result = await executor.run("ls -la", cwd="/tmp", env={}, timeout_ms=10_000)
        >>> print(result.stdout)
    """

    def __init__(self, *, max_output_chars: int = 30_000) -> None:
        """
        Initialize a local executor.

        Args:
            max_output_chars: Maximum characters kept from stdout/stderr.
        """
        self._max_output_chars = max_output_chars

    async def run(
        self,
        command_line: str,
        *,
        cwd: str,
        env: Mapping[str, str],
        timeout_ms: int = 0,
    ) -> CommandResult:
        """
        Execute a command line.

        Args:
            command_line: The full command line, passed to the shell.
            cwd: Working directory for the child.
            env: Complete environment for the child.
            timeout_ms: Milliseconds before the child is killed. Zero or
                negative disables the timeout.

        Returns:
            CommandResult with stdout, stderr and exit_code.
        """
        timeout = timeout_ms / 1000 if timeout_ms and timeout_ms > 0 else None

        try:
            proc = await asyncio.create_subprocess_shell(
                command_line,
                cwd=cwd,
                env=dict(env),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.warning(f"Failed to spawn {command_line!r}: {e}")
            return CommandResult(stdout="", stderr=str(e), exit_code=1)

        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()  # Ensure process is reaped
            return CommandResult(
                stdout="",
                stderr=f"Command timed out after {timeout}s",
                exit_code=-1,
                timed_out=True,
            )

        stdout, stdout_truncated = self._decode_output(stdout_bytes)
        stderr, stderr_truncated = self._decode_output(stderr_bytes)

        return CommandResult(
            stdout=stdout,
            stderr=stderr,
            exit_code=proc.returncode or 0,
            truncated=stdout_truncated or stderr_truncated,
        )

    def _decode_output(self, data: bytes) -> tuple[str, bool]:
        """Decode child output, keeping at most max_output_chars characters."""
        text = data.decode("utf-8", errors="replace")
        overflow = len(text) - self._max_output_chars
        if overflow <= 0:
            return text, False
        return f"{text[: self._max_output_chars]}\n\n[Truncated: {overflow} characters removed]", True
