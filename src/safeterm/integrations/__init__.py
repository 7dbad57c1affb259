"""Framework integrations for safeterm."""

from safeterm.integrations.langchain import create_langchain_tools
from safeterm.integrations.pydantic_ai import create_pydantic_ai_tools

__all__ = ["create_langchain_tools", "create_pydantic_ai_tools"]
