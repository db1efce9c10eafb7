"""Position source adapters (sensor stand-ins)."""

from .position_sources import PositionSource, QueuePositionSource, TrackFilePositionSource, load_track

__all__ = [
    "PositionSource",
    "QueuePositionSource",
    "TrackFilePositionSource",
    "load_track",
]
