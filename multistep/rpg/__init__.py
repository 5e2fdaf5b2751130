"""
Tiny turn-based battle game driven through tools.
"""

from .rules import EnemyTemplate, RpgRules
from .models import Command, Enemy, Player, Turn
from .game import Game, GameSnapshot

__all__ = [
    "EnemyTemplate",
    "RpgRules",
    "Command",
    "Enemy",
    "Player",
    "Turn",
    "Game",
    "GameSnapshot",
]
