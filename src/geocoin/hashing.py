"""Deterministic string-keyed luck values for world generation."""

from __future__ import annotations

import hashlib
from typing import Protocol

_SCALE = float(1 << 64)


class KeyHasher(Protocol):
    def hash(self, key: str) -> float:
        """Return a reproducible value in ``[0, 1)`` for ``key``."""


class GridHasher:
    """SHA-256 backed hasher; the same key always yields the same value.

    An optional world seed is mixed into every key so that two worlds sharing an
    origin still generate different cache layouts.
    """

    def __init__(self, seed: str = "") -> None:
        self.seed = seed

    def hash(self, key: str) -> float:
        material = f"{self.seed}|{key}" if self.seed else key
        digest = hashlib.sha256(material.encode("utf-8")).digest()
        return int.from_bytes(digest[:8], "big") / _SCALE

