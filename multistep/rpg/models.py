"""Game entities and damage rolls."""

import random
from dataclasses import dataclass
from enum import Enum

from .rules import RpgRules


class Turn(str, Enum):
    PLAYER = "player"
    ENEMY = "enemy"


class Command(str, Enum):
    ATTACK = "attack"
    HEAL = "heal"
    RUN = "run"
    QUIT = "quit"


@dataclass
class Player:
    name: str
    hp: int
    max_hp: int
    atk: int
    potions: int
    gold: int

    @classmethod
    def from_rules(cls, name: str, rules: RpgRules) -> "Player":
        return cls(
            name=name,
            hp=rules.player_default_max_hp,
            max_hp=rules.player_default_max_hp,
            atk=rules.player_default_atk,
            potions=rules.player_default_potions,
            gold=rules.player_default_gold,
        )

    def heal(self, rules: RpgRules, rng: random.Random) -> int:
        """Drink a potion. Returns the HP restored, 0 when out of potions."""
        if self.potions <= 0:
            return 0
        self.potions -= 1
        amount = rng.randint(rules.heal_min, rules.heal_max)
        self.hp = min(self.hp + amount, self.max_hp)
        return amount


@dataclass
class Enemy:
    name: str
    hp: int
    atk: int
    gold_reward: int

    @classmethod
    def random_from_rules(cls, rules: RpgRules, rng: random.Random) -> "Enemy":
        t = rng.choice(rules.enemy_templates)
        return cls(name=t.name, hp=t.hp, atk=t.atk, gold_reward=t.gold_reward)


def player_attack_damage(atk: int, rng: random.Random) -> int:
    return max(atk + rng.randint(-1, 2), 1)


def enemy_attack_damage(atk: int, rng: random.Random) -> int:
    return max(atk + rng.randint(-1, 1), 1)
