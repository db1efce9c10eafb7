"""Mapping between geographic points and integer grid cells."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

from .models import GeoPoint

# Whole-cell steps accumulate binary float error; nudge before flooring.
_FLOOR_TOLERANCE = 1e-6

_CELL_TEXT = re.compile(r"^\s*\(?\s*(-?\d+)\s*[,:]\s*(-?\d+)\s*\)?\s*$")


@dataclass(frozen=True, slots=True)
class CellCoordinate:
    i: int
    j: int

    @property
    def key(self) -> str:
        return f"{self.i},{self.j}"

    def offset(self, di: int, dj: int) -> CellCoordinate:
        return CellCoordinate(self.i + di, self.j + dj)

    def __str__(self) -> str:
        return self.key


def parse_cell(text: str) -> CellCoordinate:
    """Parse ``"i,j"`` (or ``"i:j"``, optionally parenthesised) into a cell."""
    match = _CELL_TEXT.match(text)
    if not match:
        raise ValueError(f"Malformed cell coordinate: {text!r}")
    return CellCoordinate(int(match.group(1)), int(match.group(2)))


@dataclass(frozen=True, slots=True)
class CellBounds:
    south: float
    west: float
    north: float
    east: float

    @property
    def south_west(self) -> GeoPoint:
        return GeoPoint(self.south, self.west)

    @property
    def north_east(self) -> GeoPoint:
        return GeoPoint(self.north, self.east)

    @property
    def center(self) -> GeoPoint:
        return GeoPoint((self.south + self.north) / 2, (self.west + self.east) / 2)

    def contains(self, point: GeoPoint) -> bool:
        """Half-open test agreeing with :meth:`CellIndexer.to_cell`, floor tolerance included."""
        lat_shift = (self.north - self.south) * _FLOOR_TOLERANCE
        lng_shift = (self.east - self.west) * _FLOOR_TOLERANCE
        return (
            self.south - lat_shift <= point.lat < self.north - lat_shift
            and self.west - lng_shift <= point.lng < self.east - lng_shift
        )


class CellIndexer:
    """Converts points to cells relative to a fixed origin, and cells back to bounds."""

    def __init__(self, origin: GeoPoint, cell_size: float) -> None:
        if cell_size <= 0:
            raise ValueError("cell_size must be positive")
        self.origin = origin
        self.cell_size = cell_size

    def to_cell(self, point: GeoPoint) -> CellCoordinate:
        return CellCoordinate(
            i=self._floor_axis(point.lat - self.origin.lat),
            j=self._floor_axis(point.lng - self.origin.lng),
        )

    def to_bounds(self, cell: CellCoordinate) -> CellBounds:
        size = self.cell_size
        return CellBounds(
            south=self.origin.lat + cell.i * size,
            west=self.origin.lng + cell.j * size,
            north=self.origin.lat + (cell.i + 1) * size,
            east=self.origin.lng + (cell.j + 1) * size,
        )

    @staticmethod
    def neighborhood(center: CellCoordinate, radius: int) -> list[CellCoordinate]:
        """Square of ``(2 * radius + 1) ** 2`` cells around ``center``, row-major."""
        span = range(-radius, radius + 1)
        return [center.offset(di, dj) for di in span for dj in span]

    def _floor_axis(self, offset: float) -> int:
        return math.floor(offset / self.cell_size + _FLOOR_TOLERANCE)
