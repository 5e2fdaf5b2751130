"""
multistep tools package

Available tools:
- get_constants: fixed X/Y pair
- add: integer addition
- number_guess: hidden-number guessing game
- read_docs_file: allow-listed local markdown files
- tavily_search: web search via Tavily
- rpg_*: battle game bound to an explicit GameSession
"""

from typing import Optional

from ..models import ToolsConfig
from ..rpg import Game
from .registry import ToolDefinition, ToolHandler, ToolRegistry
from .parameters import ParametersBuilder
from .constants import build_get_constants_tool
from .arithmetic import build_add_tool
from .number_guess import build_number_guess_tool
from .docs import build_read_docs_tool
from .search import build_tavily_search_tool, search
from .rpg import GameSession, build_rpg_tools


def build_default_registry(
    tools_config: ToolsConfig,
    session: Optional[GameSession] = None,
) -> ToolRegistry:
    """
    Build the standard tool catalog from configuration.

    Args:
        tools_config: Tool section of the application config.
        session: Game session for the rpg tools. A new one is created when
            omitted, so separate registries get separate games.
    """
    registry = ToolRegistry(
        [
            build_get_constants_tool(tools_config.constants_x, tools_config.constants_y),
            build_add_tool(),
            build_number_guess_tool(
                tools_config.number_guess_target, tools_config.number_guess_max
            ),
            build_read_docs_tool(
                tools_config.docs.directory,
                tools_config.docs.allowed,
                tools_config.docs.max_bytes,
            ),
        ]
    )
    if tools_config.tavily.api_key:
        registry.register(
            build_tavily_search_tool(
                api_key=tools_config.tavily.api_key,
                endpoint=tools_config.tavily.endpoint,
                timeout=tools_config.tavily.timeout,
            )
        )
    if tools_config.rpg.enabled:
        session = session or GameSession(Game(player_name=tools_config.rpg.player_name))
        registry.extend(build_rpg_tools(session))
    return registry


__all__ = [
    "ToolDefinition",
    "ToolHandler",
    "ToolRegistry",
    "ParametersBuilder",
    "build_get_constants_tool",
    "build_add_tool",
    "build_number_guess_tool",
    "build_read_docs_tool",
    "build_tavily_search_tool",
    "search",
    "GameSession",
    "build_rpg_tools",
    "build_default_registry",
]
