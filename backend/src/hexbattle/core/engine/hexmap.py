from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator


@dataclass(frozen=True, order=True)
class PosHex:
    """Axial hex coordinate."""

    q: int
    r: int


class Dir(Enum):
    SOUTH_EAST = (1, 0)
    EAST = (1, -1)
    NORTH_EAST = (0, -1)
    NORTH_WEST = (-1, 0)
    WEST = (-1, 1)
    SOUTH_WEST = (0, 1)


def neighbor(pos: PosHex, d: Dir) -> PosHex:
    dq, dr = d.value
    return PosHex(q=pos.q + dq, r=pos.r + dr)


def neighbors(pos: PosHex) -> list[PosHex]:
    return [neighbor(pos, d) for d in Dir]


def distance_hex(a: PosHex, b: PosHex) -> int:
    dq = a.q - b.q
    dr = a.r - b.r
    return (abs(dq) + abs(dr) + abs(dq + dr)) // 2


def is_adjacent(a: PosHex, b: PosHex) -> bool:
    return distance_hex(a, b) == 1


class TileType(str, Enum):
    PLAIN = "plain"
    ROCKS = "rocks"


@dataclass
class HexMap:
    """
    Hexagonal board centered on (0, 0).
    Tiles not listed in `tiles` are plain.
    """

    radius: int
    tiles: Dict[PosHex, TileType] = field(default_factory=dict)

    def is_inboard(self, pos: PosHex) -> bool:
        return distance_hex(PosHex(q=0, r=0), pos) <= self.radius

    def tile(self, pos: PosHex) -> TileType:
        return self.tiles.get(pos, TileType.PLAIN)

    def set_tile(self, pos: PosHex, tile: TileType) -> None:
        if not self.is_inboard(pos):
            raise ValueError(f"Tile {pos} is outside of the map")
        self.tiles[pos] = tile

    def iter_tiles(self) -> Iterator[PosHex]:
        r = self.radius
        for q in range(-r, r + 1):
            for rr in range(max(-r, -q - r), min(r, -q + r) + 1):
                yield PosHex(q=q, r=rr)
