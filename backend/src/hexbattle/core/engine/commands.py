# backend/src/hexbattle/core/engine/commands.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Iterator, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

from hexbattle.core.engine.abilities import Ability
from hexbattle.core.engine.hexmap import PosHex, is_adjacent


@dataclass(frozen=True)
class Step:
    from_: PosHex
    to: PosHex


class Path(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # tiles[0]: стартовая клетка, дальше по одной клетке на шаг
    tiles: list[PosHex]

    @model_validator(mode="after")
    def _check_tiles(self) -> "Path":
        if len(self.tiles) < 2:
            raise ValueError("Path needs a start tile and at least one step")
        for a, b in zip(self.tiles, self.tiles[1:]):
            if not is_adjacent(a, b):
                raise ValueError(f"Path step {a} -> {b} is not between neighbours")
        return self

    def steps(self) -> Iterator[Step]:
        for a, b in zip(self.tiles, self.tiles[1:]):
            yield Step(from_=a, to=b)


class CommandBase(BaseModel):
    model_config = ConfigDict(extra="forbid")
    type: str


class Create(CommandBase):
    type: Literal["Create"] = "Create"
    pos: PosHex
    prototype: str
    owner: Optional[int] = None


class MoveTo(CommandBase):
    type: Literal["MoveTo"] = "MoveTo"
    id: int
    path: Path


class Attack(CommandBase):
    type: Literal["Attack"] = "Attack"
    attacker_id: int
    target_id: int


class EndTurn(CommandBase):
    type: Literal["EndTurn"] = "EndTurn"


class UseAbility(CommandBase):
    type: Literal["UseAbility"] = "UseAbility"
    id: int
    pos: PosHex
    ability: Ability


Command = Annotated[
    Union[Create, MoveTo, Attack, EndTurn, UseAbility],
    Field(discriminator="type"),
]

_COMMAND_ADAPTER: TypeAdapter[Command] = TypeAdapter(Command)


def parse_command(data: dict[str, Any]) -> Command:
    """Build a command from a raw dict, e.g. one received from an AI or UI layer."""
    return _COMMAND_ADAPTER.validate_python(data)


def actor_id_of(cmd: Command) -> Optional[int]:
    if isinstance(cmd, (MoveTo, UseAbility)):
        return cmd.id
    if isinstance(cmd, Attack):
        return cmd.attacker_id
    return None
