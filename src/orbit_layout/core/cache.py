"""Single-slot memo of the last computed layout."""
from __future__ import annotations

import logging
import threading
from collections.abc import Hashable, Iterable, Mapping

from .model import CelestialObject, LayoutResult

LOG = logging.getLogger(__name__)

Fingerprint = tuple


def fingerprint(objects: Iterable[CelestialObject], policy_key: Hashable, paused: bool) -> Fingerprint:
    """Structural key of a layout request.

    Only ids, physical radii and parent links take part; callers that change
    anything else in place must clear the cache themselves.
    """

    return (
        policy_key,
        bool(paused),
        tuple((obj.id, obj.physical.radius, obj.parent_id) for obj in objects),
    )


class LayoutCache:
    """Holds exactly one ``(fingerprint, result)`` pair behind a lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._key: Fingerprint | None = None
        self._value: Mapping[str, LayoutResult] | None = None
        self.hits = 0
        self.misses = 0

    def get(self, key: Fingerprint) -> Mapping[str, LayoutResult] | None:
        with self._lock:
            if self._value is not None and self._key == key:
                self.hits += 1
                LOG.debug("Layout cache hit")
                return self._value
            self.misses += 1
            return None

    def put(self, key: Fingerprint, value: Mapping[str, LayoutResult]) -> None:
        with self._lock:
            self._key = key
            self._value = value

    def clear(self) -> None:
        with self._lock:
            self._key = None
            self._value = None
        LOG.debug("Layout cache cleared")

    def __len__(self) -> int:
        return 0 if self._value is None else 1


__all__ = ["Fingerprint", "LayoutCache", "fingerprint"]
