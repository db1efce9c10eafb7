"""Per-cache coin ledgers and the minting rule for newly discovered caches."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable

from .grid import CellBounds, CellCoordinate
from .hashing import KeyHasher
from .models import Coin


def coin_id(cell: CellCoordinate, serial: int) -> str:
    return f"{cell.i}:{cell.j}#{serial}"


@dataclass(slots=True)
class Cache:
    """Coins currently held at one discovered cell.

    ``serial_counter`` is the next serial this cell would mint; it only grows.
    """

    cell: CellCoordinate
    bounds: CellBounds
    coins: list[Coin] = field(default_factory=list)
    serial_counter: int = 0

    @property
    def coin_count(self) -> int:
        return len(self.coins)

    @property
    def total_value(self) -> int:
        return sum(coin.value for coin in self.coins)

    def coin_ids(self) -> list[str]:
        return [coin.id for coin in self.coins]

    def collect(self, coin_id: str) -> Coin | None:
        """Remove and return the coin with ``coin_id``; ``None`` when it is not here."""
        for index, coin in enumerate(self.coins):
            if coin.id == coin_id:
                return self.coins.pop(index)
        return None

    def deposit_all(self, coins: Iterable[Coin]) -> None:
        self.coins.extend(tuple(coins))


def mint_cache(
    cell: CellCoordinate,
    bounds: CellBounds,
    hasher: KeyHasher,
    *,
    max_coins_per_cache: int,
    max_coin_value: int,
    first_serial: int = 0,
) -> Cache:
    """Create a cache with its initial coins drawn deterministically from ``hasher``.

    Serials start at ``first_serial`` so a cell regenerated after a reset never
    reissues an id minted earlier in the world's lifetime.
    """
    key = cell.key
    count = math.floor(hasher.hash(f"{key},numCoins") * max_coins_per_cache) + 1
    coins = []
    for serial in range(first_serial, first_serial + count):
        value = math.floor(hasher.hash(f"{key},coinValue{serial}") * max_coin_value) + 1
        coins.append(Coin(id=coin_id(cell, serial), value=value))
    return Cache(cell=cell, bounds=bounds, coins=coins, serial_counter=first_serial + count)
