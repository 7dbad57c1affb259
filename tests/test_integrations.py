"""Tests for framework integrations."""

from __future__ import annotations

import pytest

from safeterm.integrations._tools import TOOL_DESCRIPTIONS, terminal_tool_functions
from safeterm.policy.defaults import AGGRESSIVE, NONE

TOOL_NAMES = {
    "execute_command",
    "change_directory",
    "get_current_directory",
    "get_terminal_info",
    "list_allowed_commands",
}


class TestToolFunctions:
    """Framework-neutral tool functions."""

    def test_exposes_five_tools(self, make_terminal) -> None:
        tools = terminal_tool_functions(make_terminal())
        assert set(tools) == TOOL_NAMES
        assert set(TOOL_DESCRIPTIONS) == TOOL_NAMES

    async def test_execute_command(self, make_terminal) -> None:
        tools = terminal_tool_functions(make_terminal(NONE))
        result = await tools["execute_command"]("echo", ["hello"])
        assert "hello" in result
        assert "Exit Code: 0" in result

    async def test_rejection_is_returned_as_text(self, make_terminal) -> None:
        """Agents should see why a command was blocked."""
        tools = terminal_tool_functions(make_terminal(AGGRESSIVE))
        result = await tools["execute_command"]("rm", ["-rf", "/"])
        assert result.startswith("Error: Security violation: Command contains forbidden pattern")

    async def test_boundary_error_is_returned_as_text(self, make_terminal, restore_cwd) -> None:
        tools = terminal_tool_functions(make_terminal())
        result = await tools["change_directory"]("..")
        assert result.startswith("Error: Path")
        assert "outside the allowed boundary" in result

    async def test_information_tools(self, make_terminal, temp_dir) -> None:
        tools = terminal_tool_functions(make_terminal())
        assert await tools["get_current_directory"]() == f"Current directory: {temp_dir}"
        assert "validationLevel: aggressive" in await tools["get_terminal_info"]()
        assert "Allowed commands:" in await tools["list_allowed_commands"]()

    async def test_os_refusal_is_returned_as_text(
        self, make_terminal, temp_dir, restore_cwd, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (temp_dir / "locked").mkdir()
        tools = terminal_tool_functions(make_terminal())

        def refuse(path):
            raise PermissionError(13, "Permission denied", path)

        monkeypatch.setattr("safeterm.coordinator.os.chdir", refuse)
        result = await tools["change_directory"]("locked")
        assert result.startswith("Error: Failed to change directory")


class TestLangChain:
    """LangChain StructuredTool wrappers."""

    def test_creates_tools(self, make_terminal) -> None:
        pytest.importorskip("langchain_core")
        from safeterm.integrations.langchain import create_langchain_tools

        tools = create_langchain_tools(make_terminal())
        assert set(tools) == TOOL_NAMES
        assert tools["execute_command"].description == TOOL_DESCRIPTIONS["execute_command"]
        assert "command" in tools["execute_command"].args

    async def test_runs_tool(self, make_terminal) -> None:
        pytest.importorskip("langchain_core")
        from safeterm.integrations.langchain import create_langchain_tools

        tools = create_langchain_tools(make_terminal(NONE))
        result = await tools["execute_command"].ainvoke({"command": "echo", "args": ["langchain"]})
        assert "langchain" in result

    def test_missing_dependency(self, make_terminal, monkeypatch: pytest.MonkeyPatch) -> None:
        from safeterm.integrations import langchain

        monkeypatch.setattr(langchain, "HAS_LANGCHAIN", False)
        with pytest.raises(ImportError, match="langchain-core"):
            langchain.create_langchain_tools(make_terminal())


class TestPydanticAI:
    """PydanticAI Tool wrappers."""

    def test_creates_tools(self, make_terminal) -> None:
        pytest.importorskip("pydantic_ai")
        from safeterm.integrations.pydantic_ai import create_pydantic_ai_tools

        tools = create_pydantic_ai_tools(make_terminal())
        assert {tool.name for tool in tools} == TOOL_NAMES

    async def test_tool_function_runs(self, make_terminal) -> None:
        pytest.importorskip("pydantic_ai")
        from safeterm.integrations.pydantic_ai import create_pydantic_ai_tools

        tools = {tool.name: tool for tool in create_pydantic_ai_tools(make_terminal(NONE))}
        result = await tools["execute_command"].function("echo", ["pydantic"])
        assert "pydantic" in result

    def test_missing_dependency(self, make_terminal, monkeypatch: pytest.MonkeyPatch) -> None:
        from safeterm.integrations import pydantic_ai

        monkeypatch.setattr(pydantic_ai, "HAS_PYDANTIC_AI", False)
        with pytest.raises(ImportError, match="pydantic-ai"):
            pydantic_ai.create_pydantic_ai_tools(make_terminal())
