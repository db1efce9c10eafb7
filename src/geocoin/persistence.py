"""Durable world snapshots.

The saved record is a camelCase JSON document validated with pydantic on the way
back in. Anything that fails validation is treated as corrupt; callers then start
from a fresh world instead of crashing the session.

Exact coin values are stored so reloading never changes the world's total value.
Per-cell serial high-water marks are stored too, so ids stay unique across restarts.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from .config import Settings
from .game_state import GameWorld, build_registry
from .grid import CellBounds, CellCoordinate
from .hashing import KeyHasher
from .ledger import Cache
from .models import Coin, GeoPoint
from .player import PlayerState

RECORD_VERSION = 1


class _RecordModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class PointModel(_RecordModel):
    lat: float
    lng: float


class SegmentModel(_RecordModel):
    start: PointModel
    end: PointModel


class CoinModel(_RecordModel):
    id: str = Field(min_length=1)
    value: int = Field(ge=1)


class CellModel(_RecordModel):
    i: int
    j: int


class BoundsModel(_RecordModel):
    south: float
    west: float
    north: float
    east: float


class CacheModel(_RecordModel):
    cell: CellModel
    bounds: BoundsModel
    coin_count: int = Field(ge=0)
    coins: list[CoinModel] = Field(default_factory=list)
    serial_counter: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _count_matches_coins(self) -> CacheModel:
        if self.coin_count != len(self.coins):
            raise ValueError(
                f"cache {self.cell.i},{self.cell.j} records {self.coin_count} coins but lists {len(self.coins)}"
            )
        return self


class SerialModel(_RecordModel):
    cell: CellModel
    next: int = Field(ge=0)


class WorldRecord(_RecordModel):
    version: int = RECORD_VERSION
    position: PointModel
    inventory: list[CoinModel] = Field(default_factory=list)
    movement_trail: list[PointModel] = Field(default_factory=list)
    movement_segments: list[SegmentModel] = Field(default_factory=list)
    discovered_caches: list[CacheModel] = Field(default_factory=list)
    serial_counters: list[SerialModel] = Field(default_factory=list)

    @model_validator(mode="after")
    def _coin_ids_unique(self) -> WorldRecord:
        seen: set[str] = set()
        for coin in [*self.inventory, *(coin for cache in self.discovered_caches for coin in cache.coins)]:
            if coin.id in seen:
                raise ValueError(f"duplicate coin id {coin.id}")
            seen.add(coin.id)
        return self

    @model_validator(mode="after")
    def _cells_unique(self) -> WorldRecord:
        seen: set[tuple[int, int]] = set()
        for cache in self.discovered_caches:
            cell = (cache.cell.i, cache.cell.j)
            if cell in seen:
                raise ValueError(f"cache {cell[0]},{cell[1]} recorded twice")
            seen.add(cell)
        return self


class WorldStore(Protocol):
    """Storage contract for the single saved world record."""

    def read(self) -> str | None:
        """Return the stored record text, or ``None`` when nothing is saved."""

    def write(self, text: str) -> None:
        """Replace the stored record."""


class InMemoryWorldStore:
    def __init__(self, text: str | None = None) -> None:
        self.text = text

    def read(self) -> str | None:
        return self.text

    def write(self, text: str) -> None:
        self.text = text


class JsonFileWorldStore:
    """Single-file JSON store."""

    def __init__(self, file_path: str | Path) -> None:
        self._path = Path(file_path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> str | None:
        if not self._path.exists():
            return None
        return self._path.read_text(encoding="utf-8")

    def write(self, text: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        staging = self._path.with_name(f"{self._path.name}.tmp")
        staging.write_text(text, encoding="utf-8")
        staging.replace(self._path)


def _point(point: GeoPoint) -> PointModel:
    return PointModel(lat=point.lat, lng=point.lng)


def _coin(coin: Coin) -> CoinModel:
    return CoinModel(id=coin.id, value=coin.value)


class PersistenceManager:
    """Serializes :class:`GameWorld` values to a :class:`WorldStore` and back."""

    def __init__(
        self,
        store: WorldStore,
        config: Settings,
        *,
        hasher: KeyHasher | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._store = store
        self._config = config
        self._hasher = hasher
        self._logger = logger or logging.getLogger("geocoin.persistence")

    def serialize(self, world: GameWorld) -> WorldRecord:
        player = world.player
        return WorldRecord(
            position=_point(player.position),
            inventory=[_coin(coin) for coin in player.inventory],
            movement_trail=[_point(point) for point in player.trail],
            movement_segments=[
                SegmentModel(start=_point(segment.start), end=_point(segment.end)) for segment in player.segments()
            ],
            discovered_caches=[
                CacheModel(
                    cell=CellModel(i=cache.cell.i, j=cache.cell.j),
                    bounds=BoundsModel(
                        south=cache.bounds.south,
                        west=cache.bounds.west,
                        north=cache.bounds.north,
                        east=cache.bounds.east,
                    ),
                    coin_count=cache.coin_count,
                    coins=[_coin(coin) for coin in cache.coins],
                    serial_counter=cache.serial_counter,
                )
                for cache in world.registry
            ],
            serial_counters=[
                SerialModel(cell=CellModel(i=cell.i, j=cell.j), next=next_serial)
                for cell, next_serial in sorted(world.registry.serial_counters().items(), key=lambda item: (item[0].i, item[0].j))
            ],
        )

    def deserialize(self, record: WorldRecord) -> GameWorld:
        registry = build_registry(self._config, self._hasher)
        registry.seed_serials(
            {CellCoordinate(entry.cell.i, entry.cell.j): entry.next for entry in record.serial_counters}
        )
        for entry in record.discovered_caches:
            registry.adopt(
                Cache(
                    cell=CellCoordinate(entry.cell.i, entry.cell.j),
                    bounds=CellBounds(
                        south=entry.bounds.south,
                        west=entry.bounds.west,
                        north=entry.bounds.north,
                        east=entry.bounds.east,
                    ),
                    coins=[Coin(id=coin.id, value=coin.value) for coin in entry.coins],
                    serial_counter=entry.serial_counter,
                )
            )

        position = GeoPoint(record.position.lat, record.position.lng)
        trail = [GeoPoint(point.lat, point.lng) for point in record.movement_trail] or [position]
        player = PlayerState(
            position=position,
            inventory=[Coin(id=coin.id, value=coin.value) for coin in record.inventory],
            trail=trail,
        )
        return GameWorld(player=player, registry=registry)

    def dumps(self, world: GameWorld) -> str:
        return self.serialize(world).model_dump_json(by_alias=True, indent=2)

    def loads(self, text: str) -> GameWorld:
        """Parse record text; raises :class:`pydantic.ValidationError` when corrupt."""
        return self.deserialize(WorldRecord.model_validate_json(text))

    def save(self, world: GameWorld) -> None:
        self._store.write(self.dumps(world))
        self._logger.info(
            "world_saved",
            extra={"caches": len(world.registry), "inventory": len(world.player.inventory)},
        )

    def load(self) -> GameWorld | None:
        """Saved world, or ``None`` when absent or corrupt."""
        try:
            text = self._store.read()
        except (OSError, UnicodeDecodeError) as exc:
            self._logger.warning("world_record_corrupt", extra={"error": f"{type(exc).__name__}: {exc}"})
            return None
        if text is None or not text.strip():
            self._logger.info("world_record_absent")
            return None
        try:
            world = self.loads(text)
        except ValidationError as exc:
            self._logger.warning("world_record_corrupt", extra={"errors": exc.error_count()})
            return None
        self._logger.info(
            "world_loaded",
            extra={"caches": len(world.registry), "inventory": len(world.player.inventory)},
        )
        return world
