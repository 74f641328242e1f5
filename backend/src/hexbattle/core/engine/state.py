from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional

from hexbattle.core.engine.abilities import RechargeableAbility
from hexbattle.core.engine.hexmap import HexMap, PosHex

Id = int
PlayerId = int


class Weight(IntEnum):
    NORMAL = 0
    HEAVY = 1
    IMMOVABLE = 2


@dataclass(frozen=True)
class PushStrength:
    weight: Weight

    def can_push(self, weight: Weight) -> bool:
        return weight != Weight.IMMOVABLE and weight <= self.weight


@dataclass
class Agent:
    moves: int = 1
    attacks: int = 1
    jokers: int = 0
    move_points: int = 3
    attack_distance: int = 1

    # значения, до которых ресурсы восстанавливаются в начале хода
    base_moves: int = 1
    base_attacks: int = 1
    base_jokers: int = 0
    base_move_points: int = 3


@dataclass
class BelongsTo:
    player_id: PlayerId


@dataclass
class Blocker:
    weight: Weight = Weight.NORMAL


@dataclass
class Strength:
    strength: int
    base_strength: int


@dataclass
class Parts:
    """Component tables keyed by actor id. Any table may lack any id."""

    pos: Dict[Id, PosHex] = field(default_factory=dict)
    belongs_to: Dict[Id, BelongsTo] = field(default_factory=dict)
    agent: Dict[Id, Agent] = field(default_factory=dict)
    abilities: Dict[Id, List[RechargeableAbility]] = field(default_factory=dict)
    blocker: Dict[Id, Blocker] = field(default_factory=dict)
    strength: Dict[Id, Strength] = field(default_factory=dict)


@dataclass(frozen=True)
class BattleResult:
    winner_id: PlayerId


@dataclass
class State:
    player_id: PlayerId
    map: HexMap
    parts: Parts = field(default_factory=Parts)
    battle_result: Optional[BattleResult] = None


def is_agent(state: State, id: Id) -> bool:
    return id in state.parts.agent


def blocker_ids_at(state: State, pos: PosHex) -> List[Id]:
    parts = state.parts
    return sorted(id for id in parts.blocker if parts.pos.get(id) == pos)


def blocker_id_at_opt(state: State, pos: PosHex) -> Optional[Id]:
    ids = blocker_ids_at(state, pos)
    return ids[0] if ids else None


def agent_id_at_opt(state: State, pos: PosHex) -> Optional[Id]:
    for id in blocker_ids_at(state, pos):
        if is_agent(state, id):
            return id
    return None


def is_tile_blocked(state: State, pos: PosHex) -> bool:
    return blocker_id_at_opt(state, pos) is not None
