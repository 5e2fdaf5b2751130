"""
Battle game tools.

All four tools operate on a caller-owned ``GameSession``. Pass the same
session to several registries to share one game between runs, or build a
fresh session per run to keep them independent.
"""

import logging
import threading
from dataclasses import asdict
from typing import Optional

from ..exceptions import ToolError
from ..rpg import Command, Game
from .parameters import ParametersBuilder
from .registry import ToolDefinition

logger = logging.getLogger(__name__)


class GameSession:
    """A game instance guarded by a lock so handlers can share it."""

    def __init__(self, game: Optional[Game] = None):
        self._game = game or Game()
        self._lock = threading.Lock()

    def rules(self) -> dict:
        with self._lock:
            return asdict(self._game.rules)

    def state(self) -> dict:
        with self._lock:
            return self._game.snapshot().to_dict()

    def actions(self) -> list[str]:
        with self._lock:
            return self._game.available_actions()

    def issue(self, command: Command) -> dict:
        with self._lock:
            continued = self._game.handle_command(command)
            return {
                "continued": continued,
                "log": self._game.drain_log(),
                "snapshot": self._game.snapshot().to_dict(),
            }


def _no_args() -> dict:
    return ParametersBuilder.new_object().additional_properties(False).build()


def _handle_issue_action(session: GameSession, args) -> dict:
    action = args.get("action") if isinstance(args, dict) else None
    try:
        command = Command(action)
    except ValueError:
        raise ToolError(f"invalid action: {action!r}") from None
    logger.debug("rpg action: %s", command.value)
    return session.issue(command)


def build_rpg_tools(session: GameSession) -> list[ToolDefinition]:
    """Return the rules/state/actions/issue tools bound to ``session``."""
    actions = [c.value for c in Command]
    return [
        ToolDefinition(
            name="rpg_get_rules",
            description=(
                "Return the RPG rules/configuration so the model can "
                "understand game mechanics."
            ),
            parameters=_no_args(),
            handler=lambda _args: session.rules(),
        ),
        ToolDefinition(
            name="rpg_get_state",
            description=(
                "Return the current game state (player, enemy, turn, "
                "counters, rules)."
            ),
            parameters=_no_args(),
            handler=lambda _args: session.state(),
        ),
        ToolDefinition(
            name="rpg_list_actions",
            description="List available actions the player can take now.",
            parameters=_no_args(),
            handler=lambda _args: {"actions": session.actions()},
        ),
        ToolDefinition(
            name="rpg_issue_action",
            description="Execute a player action and return the updated state.",
            parameters=(
                ParametersBuilder.new_object()
                .add_string_enum("action", f"One of: {', '.join(actions)}", actions)
                .required("action")
                .additional_properties(False)
                .build()
            ),
            handler=lambda args: _handle_issue_action(session, args),
        ),
    ]
