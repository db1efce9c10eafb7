"""Producers of raw geographic positions standing in for a geolocation sensor."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Protocol

from pydantic import TypeAdapter

from geocoin.models import GeoPoint
from geocoin.persistence import PointModel

_TRACK = TypeAdapter(list[PointModel])


class PositionSource(Protocol):
    """Subscription-style feed of positions arriving at irregular intervals."""

    async def next_position(self) -> GeoPoint | None:
        """Wait for the next position; ``None`` means the feed has ended."""


class QueuePositionSource:
    """Positions pushed by another coroutine or callback."""

    def __init__(self, max_size: int = 100) -> None:
        self._queue: asyncio.Queue[GeoPoint | None] = asyncio.Queue(maxsize=max_size)

    def push(self, point: GeoPoint) -> None:
        self._queue.put_nowait(point)

    def close(self) -> None:
        self._queue.put_nowait(None)

    async def next_position(self) -> GeoPoint | None:
        return await self._queue.get()


class TrackFilePositionSource:
    """Replays a JSON list of ``{"lat": ..., "lng": ...}`` objects at a fixed pace."""

    def __init__(self, path: str | Path, interval_seconds: float = 1.0) -> None:
        self._points = load_track(path)
        self._interval_seconds = interval_seconds
        self._index = 0

    def __len__(self) -> int:
        return len(self._points)

    async def next_position(self) -> GeoPoint | None:
        if self._index >= len(self._points):
            return None
        if self._index and self._interval_seconds:
            await asyncio.sleep(self._interval_seconds)
        point = self._points[self._index]
        self._index += 1
        return point


def load_track(path: str | Path) -> list[GeoPoint]:
    """Read a track file; raises :class:`pydantic.ValidationError` when malformed."""
    points = _TRACK.validate_json(Path(path).expanduser().read_bytes())
    return [GeoPoint(point.lat, point.lng) for point in points]
