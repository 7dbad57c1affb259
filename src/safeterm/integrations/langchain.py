"""LangChain integration for safeterm."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from safeterm.integrations._tools import TOOL_DESCRIPTIONS, terminal_tool_functions

if TYPE_CHECKING:
    from safeterm.coordinator import ExecutionCoordinator

HAS_LANGCHAIN = False
_StructuredTool: Any = None

try:
    import langchain_core.tools

    _StructuredTool = langchain_core.tools.StructuredTool
    HAS_LANGCHAIN = True
except ImportError:
    pass


def create_langchain_tools(terminal: ExecutionCoordinator) -> dict[str, Any]:
    """
    Create LangChain tools from a terminal.

    Args:
        terminal: The coordinator to wrap.

    Returns:
        Dictionary of async LangChain StructuredTool instances.

    Raises:
        ImportError: If langchain-core is not installed.

    Example:
        >>> terminal = create_terminal()
        >>> tools = create_langchain_tools(terminal)
        >>> agent = create_react_agent(llm, list(tools.values()))
    """
    if not HAS_LANGCHAIN:
        raise ImportError(
            "LangChain integration requires langchain-core. "
            "Install with: pip install safeterm[langchain]"
        )

    return {
        name: _StructuredTool.from_function(
            coroutine=fn,
            name=name,
            description=TOOL_DESCRIPTIONS[name],
        )
        for name, fn in terminal_tool_functions(terminal).items()
    }
