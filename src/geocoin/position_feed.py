"""Cancellable subscription that funnels sensor positions into the game."""

from __future__ import annotations

import asyncio
import logging

from geocoin.adapters import PositionSource
from geocoin.game import GeocoinGame, MoveResult


class PositionFeed:
    """Runs one task that applies each incoming position through the game's move path.

    Updates are applied synchronously between awaits, so cancelling the feed can
    never interrupt a move, collect or deposit halfway through.
    """

    def __init__(
        self,
        game: GeocoinGame,
        source: PositionSource,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._game = game
        self._source = source
        self._logger = logger or logging.getLogger("geocoin.position_feed")
        self._task: asyncio.Task[None] | None = None
        self.applied: list[MoveResult] = []

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the subscription once for this feed."""
        if self.running:
            return

        self._task = asyncio.create_task(self._pump(), name="position-feed")
        self._logger.info("position_feed_started")

    async def stop(self) -> None:
        """Tear down the subscription; no further positions are applied."""
        if not self._task:
            return

        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        finally:
            self._task = None

        self._logger.info("position_feed_stopped", extra={"applied": len(self.applied)})

    async def wait_closed(self) -> None:
        """Wait until the source reports the end of its stream."""
        if self._task:
            await self._task

    async def _pump(self) -> None:
        while True:
            point = await self._source.next_position()
            if point is None:
                self._logger.info("position_feed_exhausted")
                return
            result = self._game.apply_position(point)
            self.applied.append(result)
