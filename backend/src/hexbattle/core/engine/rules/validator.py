from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, assert_never

from hexbattle.core.engine.abilities import Ability
from hexbattle.core.engine.commands import (
    Attack,
    Command,
    Create,
    EndTurn,
    MoveTo,
    UseAbility,
)
from hexbattle.core.engine.hexmap import PosHex, distance_hex
from hexbattle.core.engine.movement import path_cost
from hexbattle.core.engine.state import (
    Agent,
    Id,
    PushStrength,
    State,
    Weight,
    agent_id_at_opt,
    blocker_id_at_opt,
    is_tile_blocked,
)

logger = logging.getLogger(__name__)


class Error(str, Enum):
    NOT_ENOUGH_MOVE_POINTS = "NOT_ENOUGH_MOVE_POINTS"
    NOT_ENOUGH_STRENGTH = "NOT_ENOUGH_STRENGTH"
    BAD_ACTOR_ID = "BAD_ACTOR_ID"
    BAD_TARGET_ID = "BAD_TARGET_ID"
    BAD_TARGET_TYPE = "BAD_TARGET_TYPE"
    TILE_IS_BLOCKED = "TILE_IS_BLOCKED"
    DISTANCE_IS_TOO_BIG = "DISTANCE_IS_TOO_BIG"
    DISTANCE_IS_TOO_SMALL = "DISTANCE_IS_TOO_SMALL"
    CAN_NOT_COMMAND_ENEMY_AGENTS = "CAN_NOT_COMMAND_ENEMY_AGENTS"
    NOT_ENOUGH_MOVES = "NOT_ENOUGH_MOVES"
    NOT_ENOUGH_ATTACKS = "NOT_ENOUGH_ATTACKS"
    ABILITY_IS_NOT_READY = "ABILITY_IS_NOT_READY"
    NO_SUCH_ABILITY = "NO_SUCH_ABILITY"
    NO_TARGET = "NO_TARGET"
    BAD_POS = "BAD_POS"
    BAD_ACTOR_TYPE = "BAD_ACTOR_TYPE"
    BATTLE_ENDED = "BATTLE_ENDED"


# --- rule constants ---

BOMB_THROW_DISTANCE_MAX = 3
KNOCKBACK_STRENGTH = PushStrength(Weight.NORMAL)
JUMP_DISTANCE_MIN = 2
JUMP_DISTANCE_MAX = 2
LONG_JUMP_DISTANCE_MAX = 3
POISON_DISTANCE_MAX = 3
DASH_DISTANCE_MAX = 1
HEAL_DISTANCE_MAX = 1


@dataclass
class ValidationError:
    code: Error
    message: str
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ValidationResult:
    ok: bool
    errors: List[ValidationError] = field(default_factory=list)
    cost_preview: Dict[str, Any] = field(default_factory=dict)

    @property
    def code(self) -> Optional[Error]:
        return self.errors[0].code if self.errors else None


class CheckFailed(Exception):
    def __init__(self, error: ValidationError) -> None:
        super().__init__(f"{error.code.value}: {error.message}")
        self.error = error


def _fail(code: Error, message: str, **meta: Any) -> CheckFailed:
    return CheckFailed(ValidationError(code=code, message=message, meta=meta))


def _pos_meta(pos: PosHex) -> Dict[str, int]:
    return {"q": pos.q, "r": pos.r}


def check(state: State, cmd: Command) -> ValidationResult:
    """
    Decide whether `cmd` may be executed in `state`.

    Never mutates `state`. The first failing rule determines the reported error.
    """
    logger.debug("check: %r", cmd)
    try:
        if state.battle_result is not None:
            raise _fail(
                Error.BATTLE_ENDED,
                "Battle has already ended",
                winner_id=state.battle_result.winner_id,
            )
        cost_preview = _dispatch(state, cmd)
    except CheckFailed as e:
        logger.debug("check rejected %s: %s", cmd.type, e.error.code.value)
        return ValidationResult(ok=False, errors=[e.error])
    return ValidationResult(ok=True, cost_preview=cost_preview)


def is_legal(state: State, cmd: Command) -> bool:
    return check(state, cmd).ok


def _dispatch(state: State, cmd: Command) -> Dict[str, Any]:
    if isinstance(cmd, Create):
        check_command_create(state, cmd)
        return {}
    if isinstance(cmd, MoveTo):
        cost = check_command_move_to(state, cmd)
        return {"move_points": cost}
    if isinstance(cmd, Attack):
        check_command_attack(state, cmd)
        return {}
    if isinstance(cmd, EndTurn):
        check_command_end_turn(state, cmd)
        return {}
    if isinstance(cmd, UseAbility):
        check_command_use_ability(state, cmd)
        return {}
    assert_never(cmd)


# --- command checkers ---


def check_command_move_to(state: State, cmd: MoveTo) -> int:
    agent = _try_get_actor(state, cmd.id)
    _check_agent_belongs_to_correct_player(state, cmd.id)
    _check_agent_can(state, cmd.id, "moves")
    # каждый шаг отдельно: через занятую клетку пройти нельзя
    for step in cmd.path.steps():
        _check_not_blocked_and_is_inboard(state, step.to)
    cost = path_cost(state, cmd.id, cmd.path)
    if cost > agent.move_points:
        raise _fail(
            Error.NOT_ENOUGH_MOVE_POINTS,
            "Path costs more move points than the agent has",
            cost=cost,
            move_points=agent.move_points,
        )
    return cost


def check_command_create(state: State, cmd: Create) -> None:
    _check_not_blocked_and_is_inboard(state, cmd.pos)


def check_command_attack(state: State, cmd: Attack) -> None:
    parts = state.parts
    if cmd.attacker_id == cmd.target_id:
        raise _fail(Error.BAD_TARGET_ID, "Agent can't attack itself")
    target_pos = parts.pos.get(cmd.target_id)
    if target_pos is None:
        raise _fail(
            Error.BAD_TARGET_ID, "Target has no position", target_id=cmd.target_id
        )
    attacker = _try_get_actor(state, cmd.attacker_id)
    attacker_pos = _actor_pos(state, cmd.attacker_id)
    _check_agent_belongs_to_correct_player(state, cmd.attacker_id)
    if cmd.target_id not in parts.agent:
        raise _fail(
            Error.BAD_TARGET_ID, "Target is not an agent", target_id=cmd.target_id
        )
    _check_is_inboard(state, target_pos)
    _check_agent_can(state, cmd.attacker_id, "attacks")
    _check_max_distance(attacker_pos, target_pos, attacker.attack_distance)


def check_command_end_turn(state: State, cmd: EndTurn) -> None:
    return None


def check_command_use_ability(state: State, cmd: UseAbility) -> None:
    _check_agent_belongs_to_correct_player(state, cmd.id)
    # способности тратят атаку (или джокер)
    _check_agent_can(state, cmd.id, "attacks")
    _check_agent_ability_ready(state, cmd.id, cmd.ability)

    match cmd.ability:
        case Ability.KNOCKBACK:
            check_ability_knockback(state, cmd.id, cmd.pos)
        case Ability.CLUB:
            check_ability_club(state, cmd.id, cmd.pos)
        case Ability.JUMP:
            check_ability_jump(state, cmd.id, cmd.pos, JUMP_DISTANCE_MAX)
        case Ability.LONG_JUMP:
            check_ability_jump(state, cmd.id, cmd.pos, LONG_JUMP_DISTANCE_MAX)
        case Ability.POISON:
            check_ability_poison(state, cmd.id, cmd.pos)
        case (
            Ability.BOMB
            | Ability.BOMB_PUSH
            | Ability.BOMB_FIRE
            | Ability.BOMB_POISON
            | Ability.BOMB_DEMONIC
        ):
            check_ability_bomb_throw(state, cmd.id, cmd.pos)
        case Ability.SUMMON:
            check_ability_summon(state, cmd.id, cmd.pos)
        case Ability.VANISH:
            check_ability_vanish(state, cmd.id, cmd.pos)
        case Ability.DASH:
            check_ability_dash(state, cmd.id, cmd.pos)
        case Ability.RAGE:
            check_ability_rage(state, cmd.id, cmd.pos)
        case Ability.HEAL | Ability.GREAT_HEAL:
            check_ability_heal(state, cmd.id, cmd.pos)
        case Ability.BLOODLUST:
            check_ability_bloodlust(state, cmd.id, cmd.pos)
        case (
            Ability.EXPLODE_PUSH
            | Ability.EXPLODE_DAMAGE
            | Ability.EXPLODE_FIRE
            | Ability.EXPLODE_POISON
        ):
            check_ability_explode(state, cmd.id, cmd.pos)
        case _:
            assert_never(cmd.ability)


# --- ability checkers ---


def check_ability_knockback(state: State, id: Id, pos: PosHex) -> None:
    selected_pos = _actor_pos(state, id)
    _check_min_distance(selected_pos, pos, 1)
    _check_max_distance(selected_pos, pos, 1)
    target_id = agent_id_at_opt(state, pos)
    if target_id is None:
        raise _fail(
            Error.NO_TARGET, "No agent on the target tile", pos=_pos_meta(pos)
        )
    target_weight = state.parts.blocker[target_id].weight
    if not KNOCKBACK_STRENGTH.can_push(target_weight):
        raise _fail(
            Error.NOT_ENOUGH_STRENGTH,
            "Target is too heavy to be pushed",
            target_id=target_id,
            weight=target_weight.name,
        )


def check_ability_club(state: State, id: Id, pos: PosHex) -> None:
    selected_pos = _actor_pos(state, id)
    _check_min_distance(selected_pos, pos, 1)
    _check_max_distance(selected_pos, pos, 1)
    if agent_id_at_opt(state, pos) is None:
        raise _fail(
            Error.NO_TARGET, "No agent on the target tile", pos=_pos_meta(pos)
        )


def check_ability_jump(state: State, id: Id, pos: PosHex, max_distance: int) -> None:
    agent_pos = _actor_pos(state, id)
    _check_min_distance(agent_pos, pos, JUMP_DISTANCE_MIN)
    _check_max_distance(agent_pos, pos, max_distance)
    _check_not_blocked_and_is_inboard(state, pos)


def check_ability_poison(state: State, id: Id, pos: PosHex) -> None:
    selected_pos = _actor_pos(state, id)
    _check_min_distance(selected_pos, pos, 1)
    _check_max_distance(selected_pos, pos, POISON_DISTANCE_MAX)
    if blocker_id_at_opt(state, pos) is None:
        raise _fail(
            Error.NO_TARGET, "Nothing to poison on the target tile", pos=_pos_meta(pos)
        )


def check_ability_bomb_throw(state: State, id: Id, pos: PosHex) -> None:
    agent_pos = _actor_pos(state, id)
    _check_max_distance(agent_pos, pos, BOMB_THROW_DISTANCE_MAX)
    _check_not_blocked_and_is_inboard(state, pos)


def check_ability_dash(state: State, id: Id, pos: PosHex) -> None:
    agent_pos = _actor_pos(state, id)
    _check_max_distance(agent_pos, pos, DASH_DISTANCE_MAX)
    _check_not_blocked_and_is_inboard(state, pos)


def check_ability_summon(state: State, id: Id, pos: PosHex) -> None:
    _check_object_pos(state, id, pos)


def check_ability_rage(state: State, id: Id, pos: PosHex) -> None:
    _check_object_pos(state, id, pos)


def check_ability_explode(state: State, id: Id, pos: PosHex) -> None:
    _check_object_pos(state, id, pos)


def check_ability_vanish(state: State, id: Id, pos: PosHex) -> None:
    if id in state.parts.agent:
        raise _fail(Error.BAD_ACTOR_TYPE, "Only non-agent objects can vanish", id=id)
    actor_pos = state.parts.pos.get(id)
    if actor_pos is None:
        raise _fail(Error.BAD_ACTOR_TYPE, "Object has no position", id=id)
    if pos != actor_pos:
        raise _fail(
            Error.BAD_POS, "Vanish must target own tile", pos=_pos_meta(pos)
        )


def check_ability_heal(state: State, id: Id, pos: PosHex) -> None:
    agent_pos = _actor_pos(state, id)
    _check_max_distance(agent_pos, pos, HEAL_DISTANCE_MAX)
    target_id = agent_id_at_opt(state, pos)
    if target_id is None:
        raise _fail(
            Error.NO_TARGET, "No agent on the target tile", pos=_pos_meta(pos)
        )
    strength = state.parts.strength.get(target_id)
    if strength is None:
        raise _fail(
            Error.BAD_ACTOR_ID, "Target has no strength", target_id=target_id
        )
    if strength.strength >= strength.base_strength:
        raise _fail(
            Error.BAD_TARGET_TYPE,
            "Target is already at full strength",
            target_id=target_id,
            strength=strength.strength,
        )


def check_ability_bloodlust(state: State, id: Id, pos: PosHex) -> None:
    # TODO: check that the target belongs to the same player as `id`
    if agent_id_at_opt(state, pos) is None:
        raise _fail(
            Error.NO_TARGET, "No agent on the target tile", pos=_pos_meta(pos)
        )


# --- shared predicates ---


def _try_get_actor(state: State, id: Id) -> Agent:
    agent = state.parts.agent.get(id)
    if agent is None:
        raise _fail(Error.BAD_ACTOR_ID, "Actor is not an agent", id=id)
    return agent


def _actor_pos(state: State, id: Id) -> PosHex:
    pos = state.parts.pos.get(id)
    if pos is None:
        raise _fail(Error.BAD_ACTOR_ID, "Actor has no position", id=id)
    return pos


def _check_agent_belongs_to_correct_player(state: State, id: Id) -> None:
    belongs_to = state.parts.belongs_to.get(id)
    if belongs_to is None:
        raise _fail(Error.BAD_ACTOR_ID, "Actor has no owner", id=id)
    if belongs_to.player_id != state.player_id:
        raise _fail(
            Error.CAN_NOT_COMMAND_ENEMY_AGENTS,
            "Actor belongs to another player",
            id=id,
            player_id=state.player_id,
            owner_id=belongs_to.player_id,
        )


def _check_agent_can(
    state: State, id: Id, resource: Literal["moves", "attacks"]
) -> None:
    """Gate on a per-turn counter: either the counter itself or a joker must be left."""
    agent = _try_get_actor(state, id)
    if getattr(agent, resource) == 0 and agent.jokers == 0:
        code = (
            Error.NOT_ENOUGH_MOVES if resource == "moves" else Error.NOT_ENOUGH_ATTACKS
        )
        raise _fail(code, f"No {resource} or jokers left", id=id)


def _check_agent_ability_ready(state: State, id: Id, expected: Ability) -> None:
    abilities = state.parts.abilities.get(id)
    if abilities is None:
        raise _fail(Error.BAD_ACTOR_TYPE, "Actor has no abilities", id=id)
    found = False
    # все записи, а не только первая
    for ability in abilities:
        if ability.ability == expected:
            found = True
            if not ability.is_ready:
                raise _fail(
                    Error.ABILITY_IS_NOT_READY,
                    "Ability is on cooldown",
                    ability=expected.value,
                    cooldown=ability.cooldown,
                )
    if not found:
        raise _fail(
            Error.NO_SUCH_ABILITY, "Actor has no such ability", ability=expected.value
        )


def _check_min_distance(a: PosHex, b: PosHex, min_distance: int) -> None:
    dist = distance_hex(a, b)
    if dist < min_distance:
        raise _fail(
            Error.DISTANCE_IS_TOO_SMALL,
            "Target is too close",
            distance=dist,
            min_distance=min_distance,
        )


def _check_max_distance(a: PosHex, b: PosHex, max_distance: int) -> None:
    dist = distance_hex(a, b)
    if dist > max_distance:
        raise _fail(
            Error.DISTANCE_IS_TOO_BIG,
            "Target is too far",
            distance=dist,
            max_distance=max_distance,
        )


def _check_is_inboard(state: State, pos: PosHex) -> None:
    if not state.map.is_inboard(pos):
        raise _fail(
            Error.BAD_POS, "Position is outside of the map", pos=_pos_meta(pos)
        )


def _check_not_blocked_and_is_inboard(state: State, pos: PosHex) -> None:
    _check_is_inboard(state, pos)
    if is_tile_blocked(state, pos):
        raise _fail(
            Error.TILE_IS_BLOCKED, "Tile is blocked", pos=_pos_meta(pos)
        )


def _check_object_pos(state: State, id: Id, expected_pos: PosHex) -> None:
    real_pos = _actor_pos(state, id)
    if real_pos != expected_pos:
        raise _fail(
            Error.BAD_POS,
            "Ability must target the actor's own tile",
            pos=_pos_meta(expected_pos),
            actor_pos=_pos_meta(real_pos),
        )
