from __future__ import annotations

import pytest

from geocoin.config import Settings


class TableHasher:
    """Hasher with fixed answers for selected keys."""

    def __init__(self, table: dict[str, float] | None = None, default: float = 0.99) -> None:
        self.table = table or {}
        self.default = default
        self.calls: list[str] = []

    def hash(self, key: str) -> float:
        self.calls.append(key)
        return self.table.get(key, self.default)


@pytest.fixture
def config(tmp_path) -> Settings:
    return Settings(
        save_path=str(tmp_path / "world.json"),
        neighborhood_radius=2,
        spawn_rate=0.1,
        max_coins_per_cache=5,
        max_coin_value=10,
    )


@pytest.fixture
def dense_config(tmp_path) -> Settings:
    """Every cell spawns a cache."""
    return Settings(
        save_path=str(tmp_path / "world.json"),
        neighborhood_radius=1,
        spawn_rate=1.0,
        max_coins_per_cache=3,
        max_coin_value=10,
    )
