from __future__ import annotations

from hexbattle.core.engine.commands import Path
from hexbattle.core.engine.hexmap import PosHex, TileType, neighbors
from hexbattle.core.engine.state import Id, State, agent_id_at_opt


def tile_cost(state: State, id: Id, pos: PosHex) -> int:
    """
    Cost of entering `pos` for actor `id`.

    Base cost is 1. Rocks add 1. Each neighbouring enemy agent adds 1
    (zone of control).
    """
    cost = 1
    if state.map.tile(pos) == TileType.ROCKS:
        cost += 1
    owner = state.parts.belongs_to.get(id)
    for n in neighbors(pos):
        other_id = agent_id_at_opt(state, n)
        if other_id is None or other_id == id:
            continue
        other_owner = state.parts.belongs_to.get(other_id)
        if owner is None or other_owner is None:
            continue
        if other_owner.player_id != owner.player_id:
            cost += 1
    return cost


def path_cost(state: State, id: Id, path: Path) -> int:
    return sum(tile_cost(state, id, step.to) for step in path.steps())
