"""Sparse, lazily populated map from grid cells to discovered caches."""

from __future__ import annotations

from typing import Iterator, Mapping

from .grid import CellCoordinate, CellIndexer
from .hashing import KeyHasher
from .ledger import Cache, mint_cache
from .memento import CacheRecord, RegistryMemento


class CacheRegistry:
    """Owns every discovered :class:`Cache`, keyed by its cell.

    Whether a cell holds a cache is a pure function of its key, the spawn rate and
    the hasher, so nothing about undiscovered cells is ever stored. Per-cell serial
    high-water marks outlive the caches themselves and are never lowered.
    """

    def __init__(
        self,
        indexer: CellIndexer,
        hasher: KeyHasher,
        *,
        spawn_rate: float,
        max_coins_per_cache: int,
        max_coin_value: int,
    ) -> None:
        self.indexer = indexer
        self.hasher = hasher
        self.spawn_rate = spawn_rate
        self.max_coins_per_cache = max_coins_per_cache
        self.max_coin_value = max_coin_value
        self._caches: dict[CellCoordinate, Cache] = {}
        self._serials: dict[CellCoordinate, int] = {}

    def __contains__(self, cell: object) -> bool:
        return cell in self._caches

    def __len__(self) -> int:
        return len(self._caches)

    def __iter__(self) -> Iterator[Cache]:
        return iter(list(self._caches.values()))

    def get(self, cell: CellCoordinate) -> Cache | None:
        return self._caches.get(cell)

    def cells(self) -> set[CellCoordinate]:
        return set(self._caches)

    def spawns_at(self, cell: CellCoordinate) -> bool:
        return self.hasher.hash(cell.key) < self.spawn_rate

    def discover(self, center: CellCoordinate, radius: int) -> list[Cache]:
        """Create caches for spawning cells around ``center``; returns only the new ones."""
        created: list[Cache] = []
        for cell in self.indexer.neighborhood(center, radius):
            if cell in self._caches or not self.spawns_at(cell):
                continue
            cache = mint_cache(
                cell,
                self.indexer.to_bounds(cell),
                self.hasher,
                max_coins_per_cache=self.max_coins_per_cache,
                max_coin_value=self.max_coin_value,
                first_serial=self._serials.get(cell, 0),
            )
            self._caches[cell] = cache
            self._serials[cell] = cache.serial_counter
            created.append(cache)
        return created

    def within(self, center: CellCoordinate, radius: int) -> list[Cache]:
        """Discovered caches inside the neighborhood, by direct cell lookup."""
        return [
            self._caches[cell]
            for cell in self.indexer.neighborhood(center, radius)
            if cell in self._caches
        ]

    def total_value(self) -> int:
        return sum(cache.total_value for cache in self._caches.values())

    def adopt(self, cache: Cache) -> None:
        """Insert a cache rebuilt outside of discovery, e.g. from a saved record."""
        self._caches[cache.cell] = cache
        self._bump_serial(cache.cell, cache.serial_counter)

    def serial_counters(self) -> dict[CellCoordinate, int]:
        return dict(self._serials)

    def seed_serials(self, counters: Mapping[CellCoordinate, int]) -> None:
        for cell, next_serial in counters.items():
            self._bump_serial(cell, next_serial)

    def reset(self) -> None:
        """Forget every cache; serial high-water marks are kept."""
        self._caches.clear()

    def snapshot(self) -> RegistryMemento:
        ordered = sorted(self._caches.values(), key=lambda cache: (cache.cell.i, cache.cell.j))
        return RegistryMemento(
            caches=tuple(
                CacheRecord(
                    cell=cache.cell,
                    bounds=cache.bounds,
                    coins=tuple(cache.coins),
                    serial_counter=cache.serial_counter,
                )
                for cache in ordered
            )
        )

    def restore(self, memento: RegistryMemento) -> None:
        """Replace every live cache with fresh copies of the snapshot's records."""
        self._caches = {
            record.cell: Cache(
                cell=record.cell,
                bounds=record.bounds,
                coins=list(record.coins),
                serial_counter=record.serial_counter,
            )
            for record in memento.caches
        }
        for record in memento.caches:
            self._bump_serial(record.cell, record.serial_counter)

    def _bump_serial(self, cell: CellCoordinate, next_serial: int) -> None:
        if next_serial > self._serials.get(cell, 0):
            self._serials[cell] = next_serial
