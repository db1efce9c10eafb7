from __future__ import annotations

import json
from pathlib import Path

from geocoin.game import GeocoinGame
from geocoin.game_state import new_world
from geocoin.grid import CellCoordinate
from geocoin.models import Direction
from geocoin.persistence import InMemoryWorldStore, JsonFileWorldStore, PersistenceManager
from geocoin.session import GameSession


def _played_game(config) -> GeocoinGame:
    game = GeocoinGame(new_world(config), config)
    game.discover()
    game.move(Direction.NORTH)
    game.move(Direction.EAST)
    cache = game.cache_at(CellCoordinate(0, 0))
    game.collect(cache.cell, cache.coins[0].id)
    return game


def test_round_trip_preserves_world(dense_config) -> None:
    game = _played_game(dense_config)
    manager = PersistenceManager(InMemoryWorldStore(), dense_config)

    manager.save(game.world)
    loaded = manager.load()

    assert loaded is not None
    assert loaded.player.position == game.world.player.position
    assert loaded.player.inventory == game.world.player.inventory
    assert loaded.player.trail == game.world.player.trail
    assert loaded.registry.snapshot() == game.world.registry.snapshot()
    assert loaded.registry.serial_counters() == game.world.registry.serial_counters()
    assert loaded.total_value() == game.world.total_value()


def test_record_uses_camel_case_schema(dense_config) -> None:
    game = _played_game(dense_config)
    payload = json.loads(PersistenceManager(InMemoryWorldStore(), dense_config).dumps(game.world))

    assert set(payload) >= {"position", "inventory", "movementTrail", "movementSegments", "discoveredCaches"}
    assert len(payload["movementSegments"]) == 2
    first_cache = payload["discoveredCaches"][0]
    assert first_cache["coinCount"] == len(first_cache["coins"])
    assert set(first_cache["bounds"]) == {"south", "west", "north", "east"}


def test_missing_record_loads_as_none(dense_config) -> None:
    assert PersistenceManager(InMemoryWorldStore(), dense_config).load() is None


def test_corrupt_records_load_as_none(dense_config) -> None:
    game = _played_game(dense_config)
    good = json.loads(PersistenceManager(InMemoryWorldStore(), dense_config).dumps(game.world))

    miscounted = json.loads(json.dumps(good))
    miscounted["discoveredCaches"][0]["coinCount"] += 1
    duplicated = json.loads(json.dumps(good))
    duplicated["inventory"].append(duplicated["discoveredCaches"][1]["coins"][0])
    repeated_cell = json.loads(json.dumps(good))
    extra_cache = json.loads(json.dumps(repeated_cell["discoveredCaches"][0]))
    extra_cache["coins"] = [{"id": "0:0#77", "value": 5}]
    extra_cache["coinCount"] = 1
    repeated_cell["discoveredCaches"].append(extra_cache)

    for text in ("{not json", "[]", json.dumps({"inventory": []}), json.dumps(miscounted), json.dumps(duplicated), json.dumps(repeated_cell)):
        assert PersistenceManager(InMemoryWorldStore(text), dense_config).load() is None


def test_serial_counters_survive_reload_after_reset(dense_config) -> None:
    game = _played_game(dense_config)
    game.reset()
    store = InMemoryWorldStore()
    manager = PersistenceManager(store, dense_config)
    manager.save(game.world)

    loaded = manager.load()
    loaded.registry.reset()
    loaded.registry.discover(CellCoordinate(0, 0), 1)

    assert set(loaded.coin_ids()).isdisjoint(game.world.coin_ids())


def test_session_falls_back_to_fresh_world_and_saves(dense_config, tmp_path: Path) -> None:
    save_file = Path(dense_config.save_path)
    save_file.write_text("garbage", encoding="utf-8")

    with GameSession(dense_config) as game:
        assert len(game.world.registry) == 9
        assert game.world.player.inventory == []
        game.move(Direction.SOUTH)

    reopened = GameSession(dense_config)
    game = reopened.open()
    assert game.world.player_cell == CellCoordinate(-1, 0)
    reopened.close()


def test_json_file_store_creates_parent_directories(tmp_path: Path) -> None:
    store = JsonFileWorldStore(tmp_path / "nested" / "dir" / "world.json")

    assert store.read() is None
    store.write("{}")
    assert store.read() == "{}"


def test_undecodable_save_file_starts_fresh_world(dense_config) -> None:
    save_file = Path(dense_config.save_path)
    save_file.write_bytes(b"\xff\xfe\x00garbage")

    with GameSession(dense_config) as game:
        assert len(game.world.registry) == 9
        assert game.world.player.inventory == []

    assert json.loads(save_file.read_text(encoding="utf-8"))["inventory"] == []


def test_json_file_store_replaces_record_without_leftovers(tmp_path: Path) -> None:
    store = JsonFileWorldStore(tmp_path / "world.json")
    store.write('{"first": true}')
    store.write('{"second": true}')

    assert store.read() == '{"second": true}'
    assert sorted(path.name for path in tmp_path.iterdir()) == ["world.json"]
