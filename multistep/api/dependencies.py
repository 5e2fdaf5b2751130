"""
Request dependencies shared by the routes.

The proposer and tool registry live on ``app.state`` for the lifetime of
the application; tests swap them through ``app.dependency_overrides``.
"""

from fastapi import Request

from ..orchestration import Proposer
from ..tools import ToolRegistry


def get_proposer(request: Request) -> Proposer:
    return request.app.state.proposer


def get_registry(request: Request) -> ToolRegistry:
    return request.app.state.registry
