"""
Configuration loader for multistep.

Loads configuration from YAML files with support for
environment variable interpolation.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Optional

import yaml

from .exceptions import ConfigError
from .models import (
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

logger = logging.getLogger(__name__)

# Default config path relative to project root
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "config.yaml"

# Regex for environment variable interpolation: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")

# Singleton cache for app config
_app_config: Optional[AppConfig] = None


def resolve_env_vars(value: str) -> str:
    """
    Resolve environment variable references in a string.

    Supports ${VAR} and ${VAR:-default} syntax.

    Args:
        value: String potentially containing env var references

    Returns:
        String with env vars resolved
    """

    def replace_match(match: re.Match) -> str:
        var_name = match.group(1)
        default_value = match.group(2) if match.group(2) is not None else ""
        return os.environ.get(var_name, default_value)

    return ENV_VAR_PATTERN.sub(replace_match, value)


def _substitute_env_vars_recursive(data: Any) -> Any:
    """Recursively substitute environment variables in a data structure."""
    if isinstance(data, dict):
        return {k: _substitute_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_substitute_env_vars_recursive(item) for item in data]
    elif isinstance(data, str):
        return resolve_env_vars(data)
    return data


def _as_bool(value: Any, default: bool) -> bool:
    """Interpret YAML/env booleans, which arrive as strings after interpolation."""
    if value is None or value == "":
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _as_optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def _parse_model_config(data: dict) -> ModelConfig:
    """Parse model configuration from dict."""
    defaults = ModelConfig()
    return ModelConfig(
        base_url=data.get("base_url", defaults.base_url) or "",
        api_key=data.get("api_key", defaults.api_key) or "",
        model=data.get("model") or defaults.model,
        max_tokens=int(data.get("max_tokens") or defaults.max_tokens),
        max_completion_tokens=int(
            data.get("max_completion_tokens") or defaults.max_completion_tokens
        ),
        temperature=_as_optional_float(data.get("temperature")),
        timeout=float(data.get("timeout") or defaults.timeout),
        system_prompt=data.get("system_prompt") or DEFAULT_SYSTEM_PROMPT,
        max_iterations=int(data.get("max_iterations") or defaults.max_iterations),
    )


def _parse_tavily_config(data: dict) -> TavilyConfig:
    """Parse Tavily configuration from dict."""
    defaults = TavilyConfig()
    return TavilyConfig(
        endpoint=data.get("endpoint") or defaults.endpoint,
        api_key=data.get("api_key", "") or "",
        timeout=int(data.get("timeout") or defaults.timeout),
    )


def _parse_docs_config(data: dict) -> DocsConfig:
    """Parse docs tool configuration from dict."""
    defaults = DocsConfig()
    allowed = data.get("allowed")
    return DocsConfig(
        directory=data.get("directory") or defaults.directory,
        allowed=list(allowed) if allowed else defaults.allowed,
        max_bytes=int(data.get("max_bytes") or defaults.max_bytes),
    )


def _parse_rpg_config(data: dict) -> RpgConfig:
    """Parse battle game configuration from dict."""
    return RpgConfig(
        enabled=_as_bool(data.get("enabled"), True),
        player_name=data.get("player_name") or "Hero",
    )


def _parse_tools_config(data: dict) -> ToolsConfig:
    """Parse tools configuration from dict."""
    defaults = ToolsConfig()
    constants = data.get("constants", {}) or {}
    number_guess = data.get("number_guess", {}) or {}
    return ToolsConfig(
        constants_x=int(constants.get("x", defaults.constants_x)),
        constants_y=int(constants.get("y", defaults.constants_y)),
        number_guess_target=int(
            number_guess.get("target", defaults.number_guess_target)
        ),
        number_guess_max=int(number_guess.get("max", defaults.number_guess_max)),
        tavily=_parse_tavily_config(data.get("tavily", {}) or {}),
        docs=_parse_docs_config(data.get("docs", {}) or {}),
        rpg=_parse_rpg_config(data.get("rpg", {}) or {}),
    )


def _parse_server_config(data: dict) -> ServerConfig:
    """Parse server configuration from dict."""
    return ServerConfig(
        host=data.get("host", "0.0.0.0"),
        port=int(data.get("port", 8000)),
        workers=int(data.get("workers", 1)),
        reload=_as_bool(data.get("reload"), False),
    )


def _parse_logging_config(data: dict) -> LoggingConfig:
    """Parse logging configuration from dict."""
    return LoggingConfig(
        level=data.get("level") or "INFO",
    )


def _parse_langfuse_config(data: dict) -> LangfuseConfig:
    """Parse Langfuse configuration from dict."""
    return LangfuseConfig(
        public_key=data.get("public_key", "") or "",
        secret_key=data.get("secret_key", "") or "",
        host=data.get("host", "") or "",
        debug=_as_bool(data.get("debug"), False),
    )


def parse_app_config(raw_config: dict) -> AppConfig:
    """
    Build an AppConfig from an already-loaded mapping.

    Environment variable references are resolved before parsing.

    Raises:
        ConfigError: If a section has the wrong shape or a value can't be converted
    """
    raw_config = _substitute_env_vars_recursive(raw_config)
    try:
        return AppConfig(
            version=str(raw_config.get("version", "1.0")),
            model=_parse_model_config(raw_config.get("model", {}) or {}),
            tools=_parse_tools_config(raw_config.get("tools", {}) or {}),
            server=_parse_server_config(raw_config.get("server", {}) or {}),
            logging=_parse_logging_config(raw_config.get("logging", {}) or {}),
            langfuse=_parse_langfuse_config(raw_config.get("langfuse", {}) or {}),
        )
    except (AttributeError, TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load_app_config(path: Optional[str] = None, reload: bool = False) -> AppConfig:
    """
    Load unified application configuration from a YAML file.

    Uses a singleton pattern - subsequent calls return the cached config
    unless reload=True is specified.

    Args:
        path: Path to the YAML configuration file. If None, uses
              CONFIG_PATH env var or the default path (config/config.yaml).
        reload: If True, force reload from disk instead of using cache.

    Returns:
        AppConfig with all configuration loaded. A missing file yields
        the defaults.

    Raises:
        ConfigError: If the file is not a YAML mapping or a value is invalid
    """
    global _app_config

    if _app_config is not None and not reload:
        return _app_config

    if path is None:
        path = os.environ.get("CONFIG_PATH", str(DEFAULT_CONFIG_PATH))

    config_path = Path(path)

    if not config_path.exists():
        logger.warning(f"Config not found at {config_path}, using defaults")
        _app_config = parse_app_config({})
        return _app_config

    logger.debug(f"Loading configuration from {config_path}")

    with open(config_path, "r") as f:
        raw_config = yaml.safe_load(f)

    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ConfigError(f"Configuration file {config_path} must contain a mapping")

    _app_config = parse_app_config(raw_config)

    logger.debug(
        f"Configuration loaded: version={_app_config.version}, "
        f"model={_app_config.model.model}"
    )

    return _app_config


def reset_config_cache() -> None:
    """Reset the configuration cache, forcing a reload on next access."""
    global _app_config
    _app_config = None
    logger.debug("Configuration cache reset")
