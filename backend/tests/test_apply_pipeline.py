from hexbattle.core.engine.abilities import Ability
from hexbattle.core.engine.commands import Attack, UseAbility
from hexbattle.core.engine.hexmap import PosHex
from hexbattle.core.engine.rules import apply_command


class _RecordingMutator:
    def __init__(self):
        self.calls = []

    def __call__(self, state, cmd):
        self.calls.append(cmd)
        return state, [{"type": "Applied", "command": cmd.type}]


def test_rejected_command_is_not_applied(state, spawn):
    spawn(1, PosHex(q=0, r=0), abilities=[Ability.JUMP])
    mutator = _RecordingMutator()

    cmd = UseAbility(id=1, pos=PosHex(q=1, r=0), ability=Ability.JUMP)
    new_state, ev = apply_command(state, cmd, mutator)

    assert new_state is state
    assert mutator.calls == []
    assert len(ev) == 1
    assert ev[0]["type"] == "CommandRejected"
    assert ev[0]["actor_id"] == 1
    assert ev[0]["player_id"] == 0
    payload = ev[0]["payload"]
    assert payload["code"] == "DISTANCE_IS_TOO_SMALL"
    assert payload["meta"] == {"distance": 1, "min_distance": 2}
    assert payload["command"] == {
        "type": "UseAbility",
        "id": 1,
        "pos": {"q": 1, "r": 0},
        "ability": "Jump",
    }


def test_legal_command_goes_to_mutator(state, spawn):
    spawn(1, PosHex(q=0, r=0))
    spawn(2, PosHex(q=1, r=0), player_id=1)
    mutator = _RecordingMutator()

    cmd = Attack(attacker_id=1, target_id=2)
    _, ev = apply_command(state, cmd, mutator)

    assert mutator.calls == [cmd]
    assert ev == [{"type": "Applied", "command": "Attack"}]
