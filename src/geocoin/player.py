"""Player position, movement trail and coin inventory."""

from __future__ import annotations

from dataclasses import dataclass, field

from .ledger import Cache
from .models import Coin, Direction, GeoPoint, TrailSegment


@dataclass(slots=True)
class PlayerState:
    position: GeoPoint
    inventory: list[Coin] = field(default_factory=list)
    trail: list[GeoPoint] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.trail:
            self.trail.append(self.position)

    @property
    def inventory_value(self) -> int:
        return sum(coin.value for coin in self.inventory)

    def segments(self) -> list[TrailSegment]:
        return [TrailSegment(start, end) for start, end in zip(self.trail, self.trail[1:])]

    def offset(self, direction: Direction, step: float) -> GeoPoint:
        d_lat, d_lng = direction.delta
        return GeoPoint(self.position.lat + d_lat * step, self.position.lng + d_lng * step)

    def move(self, direction: Direction, step: float) -> GeoPoint:
        return self.move_to(self.offset(direction, step))

    def move_to(self, point: GeoPoint) -> GeoPoint:
        self.position = point
        self.trail.append(point)
        return point

    def collect_from(self, cache: Cache, coin_id: str) -> Coin | None:
        coin = cache.collect(coin_id)
        if coin is not None:
            self.inventory.append(coin)
        return coin

    def deposit_to(self, cache: Cache) -> int:
        """Move the whole inventory into ``cache``; returns how many coins moved."""
        if not self.inventory:
            return 0
        moved = len(self.inventory)
        cache.deposit_all(self.inventory)
        self.inventory.clear()
        return moved
