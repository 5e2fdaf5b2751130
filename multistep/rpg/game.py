"""
Battle game state machine.

One ``Game`` is a single player's run: a sequence of battles against random
enemies until the player quits or is defeated. Randomness comes from an
injected ``random.Random`` so runs can be replayed.
"""

import logging
import random
from dataclasses import asdict, dataclass
from typing import Optional

from .models import (
    Command,
    Enemy,
    Player,
    Turn,
    enemy_attack_damage,
    player_attack_damage,
)
from .rules import RpgRules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameSnapshot:
    player: Player
    enemy: Enemy
    turn: Turn
    battle_count: int
    rules: RpgRules
    is_over: bool

    def to_dict(self) -> dict:
        data = asdict(self)
        data["turn"] = self.turn.value
        return data


class Game:
    """Mutable game state. Not thread-safe; wrap it in a session for sharing."""

    def __init__(
        self,
        rules: Optional[RpgRules] = None,
        player_name: str = "Hero",
        rng: Optional[random.Random] = None,
    ):
        self.rules = rules or RpgRules()
        self._rng = rng or random.Random()
        self.player = Player.from_rules(player_name, self.rules)
        self.enemy = Enemy.random_from_rules(self.rules, self._rng)
        self.turn = Turn.PLAYER if self._rng.random() < 0.5 else Turn.ENEMY
        self.battle_count = 1
        self.log: list[str] = []

    def is_over(self) -> bool:
        return self.player.hp <= 0

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            player=Player(**asdict(self.player)),
            enemy=Enemy(**asdict(self.enemy)),
            turn=self.turn,
            battle_count=self.battle_count,
            rules=self.rules,
            is_over=self.is_over(),
        )

    def available_actions(self) -> list[str]:
        if self.is_over():
            return [Command.QUIT.value]
        return [c.value for c in Command]

    def handle_command(self, cmd: Command) -> bool:
        """Apply a player command. Returns False when the player quits."""
        if cmd is Command.QUIT:
            return False

        if self.is_over():
            self._say("The game is over.")
            return True

        if cmd is Command.RUN:
            if self._rng.random() < self.rules.run_success_rate:
                self._say("You ran away!")
                self._next_battle()
            else:
                self._say("Couldn't escape!")
                self.turn = Turn.ENEMY
        elif cmd is Command.HEAL:
            healed = self.player.heal(self.rules, self._rng)
            if healed > 0:
                self._say(f"You used a potion and healed {healed} HP.")
            else:
                self._say("No potions left!")
            self.turn = Turn.ENEMY
        elif cmd is Command.ATTACK:
            dmg = player_attack_damage(self.player.atk, self._rng)
            self._say(f"You hit the {self.enemy.name} for {dmg} damage!")
            self.enemy.hp -= dmg
            if self.enemy.hp <= 0:
                self._victory()
            else:
                self.turn = Turn.ENEMY

        if self.turn is Turn.ENEMY and self.player.hp > 0:
            self._enemy_turn()
        return True

    def drain_log(self) -> list[str]:
        lines, self.log = self.log, []
        return lines

    def _say(self, line: str) -> None:
        logger.debug(line)
        self.log.append(line)

    def _enemy_turn(self) -> None:
        dmg = enemy_attack_damage(self.enemy.atk, self._rng)
        self._say(f"{self.enemy.name} hits you for {dmg} damage!")
        self.player.hp -= dmg
        if self.player.hp <= 0:
            self._say("You were defeated... Game Over.")
        else:
            self.turn = Turn.PLAYER

    def _victory(self) -> None:
        self._say(f"You defeated the {self.enemy.name}!")
        self._say(f"You found {self.enemy.gold_reward} gold.")
        self.player.gold += self.enemy.gold_reward
        if self._rng.random() < self.rules.potion_drop_rate:
            self.player.potions += 1
            self._say("You found a potion!")
        self._next_battle()

    def _next_battle(self) -> None:
        self.enemy = Enemy.random_from_rules(self.rules, self._rng)
        self.turn = Turn.PLAYER
        self.battle_count += 1
        self._say(f"A wild {self.enemy.name} appears!")
