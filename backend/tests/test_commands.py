import pytest
from pydantic import ValidationError

from hexbattle.core.engine.abilities import Ability
from hexbattle.core.engine.commands import (
    Attack,
    EndTurn,
    MoveTo,
    Path,
    UseAbility,
    actor_id_of,
    parse_command,
)
from hexbattle.core.engine.hexmap import PosHex


def test_parse_use_ability_from_dict():
    cmd = parse_command(
        {"type": "UseAbility", "id": 1, "pos": {"q": 2, "r": 0}, "ability": "Jump"}
    )
    assert isinstance(cmd, UseAbility)
    assert cmd.ability is Ability.JUMP
    assert cmd.pos == PosHex(q=2, r=0)


def test_parse_move_to_from_dict():
    cmd = parse_command(
        {
            "type": "MoveTo",
            "id": 7,
            "path": {"tiles": [{"q": 0, "r": 0}, {"q": 1, "r": 0}]},
        }
    )
    assert isinstance(cmd, MoveTo)
    steps = list(cmd.path.steps())
    assert len(steps) == 1
    assert steps[0].from_ == PosHex(q=0, r=0)
    assert steps[0].to == PosHex(q=1, r=0)


def test_parse_rejects_unknown_type_and_extra_fields():
    with pytest.raises(ValidationError):
        parse_command({"type": "Teleport", "id": 1})
    with pytest.raises(ValidationError):
        parse_command({"type": "EndTurn", "player_id": 1})


def test_path_needs_at_least_one_step():
    with pytest.raises(ValidationError):
        Path(tiles=[PosHex(q=0, r=0)])


def test_path_steps_must_be_adjacent():
    with pytest.raises(ValidationError):
        Path(tiles=[PosHex(q=0, r=0), PosHex(q=2, r=0)])


def test_actor_id_of():
    assert actor_id_of(Attack(attacker_id=3, target_id=4)) == 3
    assert actor_id_of(UseAbility(id=5, pos=PosHex(q=0, r=0), ability="Rage")) == 5
    assert actor_id_of(EndTurn()) is None
