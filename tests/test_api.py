"""Tests for the create_terminal factory."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from safeterm import ExecutionCoordinator, Settings, create_terminal
from safeterm.errors import BoundaryViolation, SecurityViolation
from safeterm.policy.defaults import MEDIUM
from safeterm.validation import MediumValidator, NoneValidator


class TestSettings:
    """Settings read from the environment."""

    def test_defaults(self) -> None:
        settings = Settings.from_env({})
        assert settings.boundary_dir == "/tmp"
        assert not settings.boundary_escape
        assert settings.config_dir is None

    def test_from_env(self, tmp_path: Path) -> None:
        settings = Settings.from_env({
            "BOUNDARY_DIR": str(tmp_path),
            "BOUNDARY_ESCAPE": "TRUE",
            "SAFETERM_CONFIG_DIR": str(tmp_path / "policies"),
        })
        assert settings.boundary.root_directory == str(tmp_path)
        assert settings.boundary.escape_enabled
        assert settings.config_dir == tmp_path / "policies"

    @pytest.mark.parametrize("value", ["1", "yes", "false", ""])
    def test_escape_requires_literal_true(self, value: str) -> None:
        assert not Settings.from_env({"BOUNDARY_ESCAPE": value}).boundary_escape


class TestCreateTerminal:
    """Tests for the create_terminal factory function."""

    def test_creates_coordinator(self, temp_dir: Path, environ, restore_cwd) -> None:
        """Should enter the boundary directory and serve tool calls."""
        environ["BOUNDARY_DIR"] = str(temp_dir)
        terminal = create_terminal(environ=environ)

        assert isinstance(terminal, ExecutionCoordinator)
        assert os.getcwd() == str(temp_dir)
        assert terminal.state.current_directory == str(temp_dir)

    async def test_defaults_to_aggressive(self, temp_dir: Path, environ, restore_cwd) -> None:
        environ["BOUNDARY_DIR"] = str(temp_dir)
        terminal = create_terminal(environ=environ)

        with pytest.raises(SecurityViolation):
            await terminal.execute_command("rm", ["-rf", "/"])
        output = await terminal.execute_command("pwd")
        assert str(temp_dir) in output

    def test_selector_from_environment(self, temp_dir: Path, environ, restore_cwd) -> None:
        environ.update({"BOUNDARY_DIR": str(temp_dir), "COMMAND_VALIDATION": "none"})
        terminal = create_terminal(environ=environ)
        assert isinstance(terminal.engine.get_validator(), NoneValidator)

    def test_explicit_policy(self, environ) -> None:
        terminal = create_terminal(environ=environ, policy=MEDIUM, enter_boundary=False)
        assert isinstance(terminal.engine.get_validator(), MediumValidator)
        assert terminal.state.current_directory == os.getcwd()

    def test_custom_policy_document(self, temp_dir: Path, environ, restore_cwd) -> None:
        policy = Path(__file__).resolve().parent.parent / "examples" / "custom-policy.yaml"
        environ.update({"BOUNDARY_DIR": str(temp_dir), "COMMAND_VALIDATION": str(policy)})
        terminal = create_terminal(environ=environ)

        validator = terminal.engine.get_validator()
        assert validator.description == "Read-only project inspection"
        assert "git: Git operations" in terminal.list_allowed_commands()

    async def test_boundary_from_settings(self, temp_dir: Path, environ, restore_cwd) -> None:
        settings = Settings(boundary_dir=str(temp_dir))
        terminal = create_terminal(settings, environ=environ)

        with pytest.raises(BoundaryViolation):
            await terminal.change_directory("/")

    def test_escape_skips_boundary(self, temp_dir: Path, environ, restore_cwd) -> None:
        before = os.getcwd()
        settings = Settings(boundary_dir=str(temp_dir), boundary_escape=True)
        terminal = create_terminal(settings, environ=environ)
        assert os.getcwd() == before
        assert "boundaryEscape: True" in terminal.get_terminal_info()
