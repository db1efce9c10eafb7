from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True, slots=True)
class GeoPoint:
    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class TrailSegment:
    start: GeoPoint
    end: GeoPoint


@dataclass(frozen=True, slots=True)
class Coin:
    """A minted token; ``id`` encodes the origin cell and serial as ``"i:j#serial"``."""

    id: str
    value: int


class Direction(str, Enum):
    """Manual movement directions mapped to unit (lat, lng) deltas."""

    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"

    @property
    def delta(self) -> tuple[int, int]:
        return _DELTAS[self]

    @classmethod
    def parse(cls, text: str) -> Direction:
        lowered = text.strip().lower()
        for direction in cls:
            if lowered in (direction.value, direction.value[0]):
                return direction
        raise ValueError(f"Unknown direction: {text!r}")


_DELTAS: dict[Direction, tuple[int, int]] = {
    Direction.NORTH: (1, 0),
    Direction.SOUTH: (-1, 0),
    Direction.EAST: (0, 1),
    Direction.WEST: (0, -1),
}
