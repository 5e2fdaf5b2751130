"""
Configuration models for multistep.

Defines dataclasses for the unified YAML configuration file.
"""

from dataclasses import dataclass, field


DEFAULT_SYSTEM_PROMPT = (
    "You are a concise assistant. When a tool can provide facts you need, "
    "call it instead of guessing."
)


@dataclass
class ModelConfig:
    """Configuration for the chat model that proposes tool calls."""
    base_url: str = ""
    api_key: str = ""
    model: str = "gpt-4o-mini"
    max_tokens: int = 2000
    max_completion_tokens: int = 2000
    temperature: float | None = None
    timeout: float = 60.0
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    max_iterations: int = 5


@dataclass
class TavilyConfig:
    """Configuration for the Tavily web search tool."""
    endpoint: str = "https://api.tavily.com/search"
    api_key: str = ""
    timeout: int = 15


@dataclass
class DocsConfig:
    """Configuration for the local docs reading tool."""
    directory: str = "docs"
    allowed: list[str] = field(
        default_factory=lambda: ["benches.md", "examples.md", "ratatui.md", "test.md"]
    )
    max_bytes: int = 16 * 1024


@dataclass
class RpgConfig:
    """Configuration for the battle game tools."""
    enabled: bool = True
    player_name: str = "Hero"


@dataclass
class ToolsConfig:
    """Configuration for the default tool catalog."""
    constants_x: int = 42
    constants_y: int = 7
    number_guess_target: int = 42
    number_guess_max: int = 100
    tavily: TavilyConfig = field(default_factory=TavilyConfig)
    docs: DocsConfig = field(default_factory=DocsConfig)
    rpg: RpgConfig = field(default_factory=RpgConfig)


@dataclass
class ServerConfig:
    """Configuration for the FastAPI server."""
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1
    reload: bool = False


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"


@dataclass
class LangfuseConfig:
    """Configuration for Langfuse observability.

    Tracing auto-enables when both public_key and secret_key are provided.
    """
    public_key: str = ""
    secret_key: str = ""
    host: str = ""
    debug: bool = False

    @property
    def is_configured(self) -> bool:
        """Check if Langfuse is configured (both keys present)."""
        return bool(self.public_key and self.secret_key)


@dataclass
class AppConfig:
    """
    Unified application configuration container.

    Holds all configuration sections loaded from config/config.yaml.
    """
    version: str = "1.0"
    model: ModelConfig = field(default_factory=ModelConfig)
    tools: ToolsConfig = field(default_factory=ToolsConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    langfuse: LangfuseConfig = field(default_factory=LangfuseConfig)

    @property
    def log_level(self) -> str:
        """Shortcut for logging.level."""
        return self.logging.level
