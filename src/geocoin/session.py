"""Session lifecycle: load on start, save on shutdown."""

from __future__ import annotations

import logging

from .config import Settings
from .game import GeocoinGame
from .game_state import new_world
from .hashing import KeyHasher
from .persistence import JsonFileWorldStore, PersistenceManager, WorldStore


class GameSession:
    """Opens a game from the saved record (or a fresh world) and saves it on close."""

    def __init__(
        self,
        config: Settings,
        *,
        store: WorldStore | None = None,
        hasher: KeyHasher | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._hasher = hasher
        self._logger = logger or logging.getLogger("geocoin.session")
        self._persistence = PersistenceManager(
            store or JsonFileWorldStore(config.save_path),
            config,
            hasher=hasher,
        )
        self._game: GeocoinGame | None = None

    @property
    def game(self) -> GeocoinGame:
        if self._game is None:
            raise RuntimeError("Session is not open")
        return self._game

    def open(self) -> GeocoinGame:
        world = self._persistence.load()
        restored = world is not None
        if world is None:
            world = new_world(self._config, self._hasher)

        self._game = GeocoinGame(world, self._config)
        self._game.discover()
        self._logger.info("session_opened", extra={"restored": restored, "caches": len(world.registry)})
        return self._game

    def close(self) -> None:
        if self._game is None:
            return
        self._persistence.save(self._game.world)
        self._game = None
        self._logger.info("session_closed")

    def __enter__(self) -> GeocoinGame:
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()
