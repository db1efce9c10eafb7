"""World value shared by the controller, the session and persistence."""

from __future__ import annotations

from dataclasses import dataclass

from .config import Settings
from .grid import CellCoordinate, CellIndexer
from .hashing import GridHasher, KeyHasher
from .models import GeoPoint
from .player import PlayerState
from .registry import CacheRegistry


@dataclass(slots=True)
class GameWorld:
    player: PlayerState
    registry: CacheRegistry

    @property
    def player_cell(self) -> CellCoordinate:
        return self.registry.indexer.to_cell(self.player.position)

    def total_value(self) -> int:
        """Coins held anywhere in the world; unchanged by collect and deposit."""
        return self.registry.total_value() + self.player.inventory_value

    def coin_ids(self) -> list[str]:
        ids = [coin.id for cache in self.registry for coin in cache.coins]
        ids.extend(coin.id for coin in self.player.inventory)
        return ids


def origin_of(config: Settings) -> GeoPoint:
    return GeoPoint(config.origin_lat, config.origin_lng)


def build_registry(config: Settings, hasher: KeyHasher | None = None) -> CacheRegistry:
    return CacheRegistry(
        CellIndexer(origin_of(config), config.cell_size),
        hasher or GridHasher(config.world_seed),
        spawn_rate=config.spawn_rate,
        max_coins_per_cache=config.max_coins_per_cache,
        max_coin_value=config.max_coin_value,
    )


def new_world(config: Settings, hasher: KeyHasher | None = None) -> GameWorld:
    """Fresh, ungenerated world with the player standing on the origin."""
    return GameWorld(player=PlayerState(position=origin_of(config)), registry=build_registry(config, hasher))
