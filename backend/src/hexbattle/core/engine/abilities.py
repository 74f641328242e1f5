from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Ability(str, Enum):
    KNOCKBACK = "Knockback"
    CLUB = "Club"
    JUMP = "Jump"
    LONG_JUMP = "LongJump"
    POISON = "Poison"
    EXPLODE_PUSH = "ExplodePush"
    EXPLODE_DAMAGE = "ExplodeDamage"
    EXPLODE_FIRE = "ExplodeFire"
    EXPLODE_POISON = "ExplodePoison"
    BOMB = "Bomb"
    BOMB_PUSH = "BombPush"
    BOMB_FIRE = "BombFire"
    BOMB_POISON = "BombPoison"
    BOMB_DEMONIC = "BombDemonic"
    SUMMON = "Summon"
    VANISH = "Vanish"
    DASH = "Dash"
    RAGE = "Rage"
    HEAL = "Heal"
    GREAT_HEAL = "GreatHeal"
    BLOODLUST = "Bloodlust"


@dataclass
class RechargeableAbility:
    ability: Ability
    base_cooldown: int = 0
    # сколько ходов осталось до готовности (0 = готово)
    cooldown: int = 0

    @property
    def is_ready(self) -> bool:
        return self.cooldown == 0
