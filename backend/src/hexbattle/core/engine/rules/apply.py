from __future__ import annotations

import logging
from typing import List, Protocol, Tuple

from hexbattle.core.engine.commands import Command, actor_id_of
from hexbattle.core.engine.events import ev_command_rejected
from hexbattle.core.engine.rules.validator import check
from hexbattle.core.engine.state import State

logger = logging.getLogger(__name__)


class Mutator(Protocol):
    """Executes an already validated command against the battle state."""

    def __call__(self, state: State, cmd: Command) -> Tuple[State, List[dict]]: ...


def apply_command(
    state: State, cmd: Command, mutator: Mutator
) -> Tuple[State, List[dict]]:
    """
    Возвращаем (state, events_as_dicts).
    При ошибке валидации возвращаем CommandRejected и НЕ трогаем state,
    mutator в этом случае не вызывается.
    """
    vr = check(state, cmd)
    if not vr.ok:
        e = vr.errors[0]
        logger.info("command %s rejected: %s", cmd.type, e.code.value)
        rej = ev_command_rejected(
            player_id=state.player_id,
            actor_id=actor_id_of(cmd),
            command=cmd.model_dump(mode="json"),
            code=e.code.value,
            message=e.message,
            meta=e.meta,
        ).model_dump()
        return state, [rej]

    return mutator(state, cmd)
