"""Immutable world snapshots and the undo stack that holds them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from .grid import CellBounds, CellCoordinate
from .models import Coin

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class CacheRecord:
    cell: CellCoordinate
    bounds: CellBounds
    coins: tuple[Coin, ...]
    serial_counter: int


@dataclass(frozen=True, slots=True)
class RegistryMemento:
    """Deep copy of every discovered cache, ordered by cell."""

    caches: tuple[CacheRecord, ...] = ()

    @property
    def cells(self) -> frozenset[CellCoordinate]:
        return frozenset(record.cell for record in self.caches)


@dataclass(frozen=True, slots=True)
class WorldMemento:
    """Undo point: cache ledgers plus the inventory they trade with."""

    caches: RegistryMemento
    inventory: tuple[Coin, ...] = ()


class MementoStack(Generic[T]):
    """Single-step undo stack that never pops its baseline snapshot."""

    def __init__(self, baseline: T) -> None:
        self._stack: list[T] = [baseline]

    @property
    def baseline(self) -> T:
        return self._stack[0]

    @property
    def depth(self) -> int:
        """Number of saved snapshots above the baseline."""
        return len(self._stack) - 1

    @property
    def can_restore(self) -> bool:
        return self.depth > 0

    def save(self, snapshot: T) -> None:
        self._stack.append(snapshot)

    def restore(self) -> T | None:
        """Pop the most recent snapshot, or ``None`` when only the baseline remains."""
        if not self.can_restore:
            return None
        return self._stack.pop()

    def rebase(self, baseline: T) -> None:
        self._stack = [baseline]
