"""
Configuration access for multistep.

Loads ``.env`` (python-dotenv) before reading config/config.yaml so that
``${VAR}`` references in the YAML can be satisfied from it.
"""

import logging
import sys

from dotenv import load_dotenv

from .config_loader import load_app_config
from .models import AppConfig

load_dotenv()


def get_config() -> AppConfig:
    """Get the application configuration."""
    return load_app_config()


def configure_logging(level: str | None = None) -> None:
    """Configure logging from the LOG_LEVEL / logging.level setting."""
    log_level = getattr(logging, (level or config.log_level).upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logging.getLogger("multistep").setLevel(log_level)


# Global config instance
config = get_config()
