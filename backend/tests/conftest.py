from __future__ import annotations

from typing import Iterable, Optional

import pytest

from hexbattle.core.engine.abilities import Ability, RechargeableAbility
from hexbattle.core.engine.hexmap import HexMap, PosHex
from hexbattle.core.engine.state import (
    Agent,
    BelongsTo,
    Blocker,
    State,
    Strength,
    Weight,
)


@pytest.fixture()
def state() -> State:
    # игрок 0 ходит, карта радиуса 5 (91 клетка)
    return State(player_id=0, map=HexMap(radius=5))


@pytest.fixture()
def spawn(state):
    """
    Puts an actor into `state`.

    By default the actor is an agent of player 0 with 1 move, 1 attack,
    3 move points, attack distance 1 and full strength 3/3.
    `agent=None` spawns a non-agent object (e.g. a boulder or a bomb).
    """

    def _spawn(
        id: int,
        pos: PosHex,
        *,
        player_id: Optional[int] = 0,
        agent: Optional[Agent] = Agent(),
        abilities: Optional[Iterable[Ability | RechargeableAbility]] = None,
        weight: Optional[Weight] = Weight.NORMAL,
        strength: Optional[Strength] = Strength(strength=3, base_strength=3),
    ) -> int:
        parts = state.parts
        parts.pos[id] = pos
        if player_id is not None:
            parts.belongs_to[id] = BelongsTo(player_id=player_id)
        if agent is not None:
            parts.agent[id] = Agent(**vars(agent))
        if abilities is not None:
            parts.abilities[id] = [
                a if isinstance(a, RechargeableAbility) else RechargeableAbility(a)
                for a in abilities
            ]
        if weight is not None:
            parts.blocker[id] = Blocker(weight=weight)
        if strength is not None:
            parts.strength[id] = Strength(**vars(strength))
        return id

    return _spawn
