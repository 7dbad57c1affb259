"""Tests for the execution coordinator (real subprocesses)."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from safeterm import BoundaryConfig, BoundaryGuard, ExecutionCoordinator, PolicyEngine, SessionState
from safeterm._types import CommandResult
from safeterm.coordinator import format_command_output
from safeterm.errors import (
    BoundaryViolation,
    ChangeDirectoryError,
    DirectoryNotFoundError,
    SecurityViolation,
)
from safeterm.policy.defaults import AGGRESSIVE, MEDIUM, MINIMAL, NONE


def parse_info(text: str) -> dict[str, str]:
    return dict(line.split(": ", 1) for line in text.splitlines())


class TestFormatCommandOutput:
    """Rendering of command results."""

    def test_stdout_only(self) -> None:
        result = CommandResult(stdout="hello\n", stderr="", exit_code=0)
        assert format_command_output(result) == "STDOUT:\nhello\n\nExit Code: 0"

    def test_stdout_and_stderr(self) -> None:
        result = CommandResult(stdout="out", stderr="err", exit_code=2)
        assert format_command_output(result) == "STDOUT:\nout\nSTDERR:\nerr\nExit Code: 2"

    def test_no_output(self) -> None:
        assert format_command_output(CommandResult(stdout="", stderr="", exit_code=0)) == "Exit Code: 0"


class TestExecuteCommand:
    """Validation, spawning and state updates."""

    async def test_runs_whitelisted_command(self, make_terminal, temp_dir: Path) -> None:
        terminal = make_terminal(AGGRESSIVE)
        output = await terminal.execute_command("pwd")

        assert f"STDOUT:\n{temp_dir}" in output
        assert output.endswith("Exit Code: 0")
        assert terminal.state.last_command == "pwd"
        assert terminal.state.last_exit_code == 0

    async def test_rejection_raises_before_spawn(self, make_terminal) -> None:
        terminal = make_terminal(AGGRESSIVE)

        with pytest.raises(SecurityViolation, match="forbidden pattern") as exc_info:
            await terminal.execute_command("rm", ["-rf", "/"])

        assert exc_info.value.command == "rm"
        assert terminal.state.last_command is None
        assert terminal.state.last_exit_code is None

    async def test_whitelist_rejection(self, make_terminal) -> None:
        terminal = make_terminal(AGGRESSIVE)
        with pytest.raises(SecurityViolation, match="not in whitelist"):
            await terminal.execute_command("python", ["--version"])

    async def test_runs_normalized_command(self, make_terminal) -> None:
        terminal = make_terminal(MINIMAL)
        output = await terminal.execute_command(" ECHO ", ["  hello ", "", "world"])

        assert "hello world" in output
        assert terminal.state.last_command == "echo hello world"

    async def test_failing_command_is_output(self, make_terminal, temp_dir: Path) -> None:
        terminal = make_terminal(MINIMAL)
        output = await terminal.execute_command("ls", [str(temp_dir / "missing")])

        assert "STDERR:" in output
        assert "Exit Code: 0" not in output
        assert terminal.state.last_exit_code not in (None, 0)

    async def test_explicit_cwd(self, make_terminal, temp_dir: Path) -> None:
        (temp_dir / "sub").mkdir()
        terminal = make_terminal(NONE)
        output = await terminal.execute_command("pwd", cwd=str(temp_dir / "sub"))
        assert str(temp_dir / "sub") in output

    async def test_timeout(self, make_terminal) -> None:
        terminal = make_terminal(NONE)
        output = await terminal.execute_command("sleep", ["5"], timeout=100)

        assert "timed out" in output
        assert output.endswith("Exit Code: -1")
        assert terminal.state.last_exit_code == -1

    async def test_extra_environment(self, make_terminal) -> None:
        terminal = make_terminal(NONE)
        output = await terminal.execute_command("printenv", ["GREETING"], env={"GREETING": "hi there"})
        assert "hi there" in output

    async def test_blacklisted_variables_hidden(self, make_terminal) -> None:
        terminal = make_terminal(replace(MEDIUM, command_rules={}))
        output = await terminal.execute_command("printenv", ["SECRET"])
        assert "hunter2" not in output

    async def test_whitelisted_environment(self, make_terminal) -> None:
        terminal = make_terminal(
            replace(MEDIUM, command_rules={}, environment_policy=AGGRESSIVE.environment_policy)
        )
        output = await terminal.execute_command("printenv", ["USER"])
        assert "tester" in output

        output = await terminal.execute_command("printenv", ["TOKEN"])
        assert "abc123" not in output


class TestChangeDirectory:
    """Directory changes within the boundary."""

    async def test_change_into_child(self, make_terminal, temp_dir: Path, restore_cwd) -> None:
        (temp_dir / "sub").mkdir()
        terminal = make_terminal()

        message = await terminal.change_directory("sub")
        assert message == f"Current directory changed to: {temp_dir / 'sub'}"
        assert terminal.state.current_directory == str(temp_dir / "sub")
        assert terminal.get_current_directory() == f"Current directory: {temp_dir / 'sub'}"

        output = await terminal.execute_command("pwd")
        assert str(temp_dir / "sub") in output

    async def test_escape_rejected(self, make_terminal, temp_dir: Path, restore_cwd) -> None:
        terminal = make_terminal()
        with pytest.raises(BoundaryViolation):
            await terminal.change_directory("..")
        assert terminal.state.current_directory == str(temp_dir)

    async def test_missing_directory(self, make_terminal, temp_dir: Path, restore_cwd) -> None:
        terminal = make_terminal()
        with pytest.raises(DirectoryNotFoundError, match="Directory does not exist"):
            await terminal.change_directory("missing")
        assert terminal.state.current_directory == str(temp_dir)

    async def test_file_is_not_a_directory(self, make_terminal, temp_dir: Path, restore_cwd) -> None:
        (temp_dir / "file").write_text("x")
        terminal = make_terminal()
        with pytest.raises(DirectoryNotFoundError):
            await terminal.change_directory("file")

    async def test_os_refusal_is_wrapped(
        self, make_terminal, temp_dir: Path, restore_cwd, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A chdir the OS refuses becomes a safeterm error and leaves state alone."""
        (temp_dir / "locked").mkdir()
        terminal = make_terminal()

        def refuse(path):
            raise PermissionError(13, "Permission denied", path)

        monkeypatch.setattr("safeterm.coordinator.os.chdir", refuse)
        with pytest.raises(ChangeDirectoryError, match="Failed to change directory"):
            await terminal.change_directory("locked")
        assert terminal.state.current_directory == str(temp_dir)

    async def test_escape_enabled(self, make_terminal, temp_dir: Path, restore_cwd) -> None:
        terminal = make_terminal(escape=True)
        message = await terminal.change_directory("..")
        assert message == f"Current directory changed to: {temp_dir.parent}"


class TestInformationTools:
    """get_terminal_info and list_allowed_commands."""

    def test_terminal_info(self, make_terminal, temp_dir: Path) -> None:
        info = parse_info(make_terminal(AGGRESSIVE).get_terminal_info())

        assert info["shell"] == "/bin/sh"
        assert info["user"] == "tester"
        assert info["currentDirectory"] == str(temp_dir)
        assert info["securityMode"] == "AGGRESSIVE_ENABLED"
        assert info["validationLevel"] == "aggressive"
        assert info["allowedCommands"] == str(len(AGGRESSIVE.command_rules))
        assert info["boundaryDirectory"] == str(temp_dir)
        assert info["boundaryEscape"] == "False"
        assert set(info) >= {"home", "platform", "lastCommand", "lastExitCode"}

    async def test_terminal_info_tracks_last_command(self, make_terminal) -> None:
        terminal = make_terminal(NONE)
        await terminal.execute_command("true")
        info = parse_info(terminal.get_terminal_info())
        assert info["lastCommand"] == "true"
        assert info["lastExitCode"] == "0"

    def test_list_whitelisted_commands(self, make_terminal) -> None:
        text = make_terminal(AGGRESSIVE).list_allowed_commands()

        assert text.startswith("SECURITY: AGGRESSIVE Mode - Whitelisted Commands Only")
        assert AGGRESSIVE.description in text
        assert "ls: List directory contents" in text
        assert "git: Git operations (read-only)" in text

    def test_list_without_whitelist(self, make_terminal) -> None:
        text = make_terminal(MINIMAL).list_allowed_commands()

        assert text.startswith("SECURITY: MINIMAL Mode")
        assert "No command whitelist" in text
        assert "- Forbidden patterns: 2" in text
        assert "- Environment policy: passthrough" in text

    def test_follows_selector_changes(self, temp_dir: Path) -> None:
        environ = {"COMMAND_VALIDATION": "aggressive"}
        terminal = ExecutionCoordinator(
            PolicyEngine(environ),
            BoundaryGuard(BoundaryConfig(root_directory=str(temp_dir))),
            state=SessionState(current_directory=str(temp_dir)),
        )
        assert "AGGRESSIVE" in terminal.list_allowed_commands()

        environ["COMMAND_VALIDATION"] = "none"
        assert parse_info(terminal.get_terminal_info())["validationLevel"] == "none"
