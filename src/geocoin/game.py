"""Controller that owns the world and serialises every mutation through its methods."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import Settings
from .game_state import GameWorld, origin_of
from .grid import CellCoordinate
from .ledger import Cache
from .memento import MementoStack, WorldMemento
from .models import Coin, Direction, GeoPoint
from .player import PlayerState


@dataclass(slots=True)
class MoveResult:
    position: GeoPoint
    cell: CellCoordinate
    discovered: list[Cache]


class GeocoinGame:
    """Single owner of the :class:`GameWorld`.

    Manual movement and sensor updates both end in :meth:`apply_position`, and
    ledgers are only touched through :meth:`collect` and :meth:`deposit`. Each
    method runs to completion synchronously, so no observer sees a partial update.
    """

    def __init__(
        self,
        world: GameWorld,
        config: Settings,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._world = world
        self._config = config
        self._logger = logger or logging.getLogger("geocoin.game")
        self._history: MementoStack[WorldMemento] = MementoStack(self._memento())

    @property
    def world(self) -> GameWorld:
        return self._world

    @property
    def config(self) -> Settings:
        return self._config

    @property
    def undo_depth(self) -> int:
        return self._history.depth

    def discover(self) -> list[Cache]:
        """Populate the registry around the player's current cell."""
        created = self._world.registry.discover(self._world.player_cell, self._config.neighborhood_radius)
        if created:
            self._logger.info(
                "caches_discovered",
                extra={"cells": [cache.cell.key for cache in created], "total": len(self._world.registry)},
            )
        return created

    def visible_caches(self) -> list[Cache]:
        return self._world.registry.within(self._world.player_cell, self._config.neighborhood_radius)

    def cache_at(self, cell: CellCoordinate) -> Cache | None:
        return self._world.registry.get(cell)

    def move(self, direction: Direction, steps: int = 1) -> MoveResult:
        target = self._world.player.offset(direction, self._config.step_size * steps)
        return self.apply_position(target)

    def apply_position(self, point: GeoPoint) -> MoveResult:
        """The one move entry point for both manual and sensor-driven movement."""
        self._world.player.move_to(point)
        created = self.discover()
        cell = self._world.player_cell
        self._logger.debug("player_moved", extra={"lat": point.lat, "lng": point.lng, "cell": cell.key})
        return MoveResult(position=point, cell=cell, discovered=created)

    def collect(self, cell: CellCoordinate, coin_id: str) -> Coin | None:
        cache = self._require_cache(cell)
        if cache is None:
            return None
        if coin_id not in cache.coin_ids():
            self._logger.info("coin_not_found", extra={"cell": cell.key, "coin_id": coin_id})
            return None

        self._history.save(self._memento())
        coin = self._world.player.collect_from(cache, coin_id)
        self._logger.info("coin_collected", extra={"cell": cell.key, "coin_id": coin_id})
        return coin

    def deposit(self, cell: CellCoordinate) -> int:
        """Deposit the whole inventory into the cache at ``cell``; returns the coin count moved."""
        cache = self._require_cache(cell)
        if cache is None or not self._world.player.inventory:
            return 0

        self._history.save(self._memento())
        moved = self._world.player.deposit_to(cache)
        self._logger.info("coins_deposited", extra={"cell": cell.key, "count": moved})
        return moved

    def undo(self) -> bool:
        """Roll caches and inventory back one step; ``False`` when there is nothing to undo.

        Player position is not rewound, so spawning cells around it that the
        restored snapshot predates are discovered again (with fresh serials).
        """
        memento = self._history.restore()
        if memento is None:
            self._logger.info("undo_empty")
            return False

        self._world.registry.restore(memento.caches)
        self._world.player.inventory = list(memento.inventory)
        self.discover()
        self._logger.info("undo_applied", extra={"remaining": self._history.depth})
        return True

    def reset(self) -> None:
        """Discard the whole world and regenerate around the origin.

        Surfaces must obtain explicit user confirmation before calling this.
        Serial counters survive so regenerated coins get fresh ids.
        """
        registry = self._world.registry
        registry.reset()
        self._world = GameWorld(player=PlayerState(position=origin_of(self._config)), registry=registry)
        self.discover()
        self._history.rebase(self._memento())
        self._logger.warning("world_reset", extra={"caches": len(registry)})

    def _require_cache(self, cell: CellCoordinate) -> Cache | None:
        cache = self._world.registry.get(cell)
        if cache is None:
            self._logger.info("cache_not_found", extra={"cell": cell.key})
        return cache

    def _memento(self) -> WorldMemento:
        return WorldMemento(
            caches=self._world.registry.snapshot(),
            inventory=tuple(self._world.player.inventory),
        )
