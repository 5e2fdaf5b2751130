"""Static rule set for the battle game."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EnemyTemplate:
    name: str
    hp: int
    atk: int
    gold_reward: int


def _default_enemies() -> tuple[EnemyTemplate, ...]:
    return (
        EnemyTemplate(name="Slime", hp=12, atk=3, gold_reward=6),
        EnemyTemplate(name="Goblin", hp=18, atk=4, gold_reward=9),
        EnemyTemplate(name="Wolf", hp=22, atk=5, gold_reward=12),
    )


@dataclass(frozen=True)
class RpgRules:
    game_name: str = "Tiny CLI RPG"
    player_default_max_hp: int = 30
    player_default_atk: int = 5
    player_default_potions: int = 2
    player_default_gold: int = 0
    heal_min: int = 8
    heal_max: int = 15
    run_success_rate: float = 0.5
    potion_drop_rate: float = 0.3
    enemy_templates: tuple[EnemyTemplate, ...] = field(default_factory=_default_enemies)
