"""API routers."""

from . import chat, health

__all__ = ["chat", "health"]
