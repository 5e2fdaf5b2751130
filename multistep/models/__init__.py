"""
Data models for multistep.
"""

from .config import (
    DEFAULT_SYSTEM_PROMPT,
    ModelConfig,
    TavilyConfig,
    DocsConfig,
    RpgConfig,
    ToolsConfig,
    ServerConfig,
    LoggingConfig,
    LangfuseConfig,
    AppConfig,
)

__all__ = [
    "DEFAULT_SYSTEM_PROMPT",
    "ModelConfig",
    "TavilyConfig",
    "DocsConfig",
    "RpgConfig",
    "ToolsConfig",
    "ServerConfig",
    "LoggingConfig",
    "LangfuseConfig",
    "AppConfig",
]
