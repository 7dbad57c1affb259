"""
PydanticAI integration for safeterm.

Provides helpers to create PydanticAI-compatible tools.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from safeterm.integrations._tools import TOOL_DESCRIPTIONS, terminal_tool_functions

if TYPE_CHECKING:
    from safeterm.coordinator import ExecutionCoordinator

HAS_PYDANTIC_AI = False
_Tool: Any = None

try:
    from pydantic_ai import Tool as _Tool

    HAS_PYDANTIC_AI = True
except ImportError:
    pass


def create_pydantic_ai_tools(terminal: ExecutionCoordinator) -> list[Any]:
    """
    Create PydanticAI tools from a terminal.

    Raises:
        ImportError: If pydantic-ai is not installed.

    Example:
        >>> from pydantic_ai import Agent
        >>> agent = Agent("openai:gpt-4o", tools=create_pydantic_ai_tools(create_terminal()))
    """
    if not HAS_PYDANTIC_AI:
        raise ImportError(
            "PydanticAI integration requires 'pydantic-ai'. "
            "Install with `pip install safeterm[pydantic-ai]`"
        )

    return [
        _Tool(fn, takes_ctx=False, name=name, description=TOOL_DESCRIPTIONS[name])
        for name, fn in terminal_tool_functions(terminal).items()
    ]
