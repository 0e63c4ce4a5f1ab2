"""Structural index over an orbital forest."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .errors import LayoutValidationError
from .model import AnnularOrbit, CelestialObject, Classification

LOG = logging.getLogger(__name__)


@dataclass
class OrbitTree:
    """Objects indexed by id with their child groups and depths.

    ``groups`` maps a primary id to its children in input order. A primary id that
    is not in ``by_id`` is a *virtual* primary, only possible when validation is off.
    """

    objects: tuple[CelestialObject, ...]
    by_id: dict[str, CelestialObject]
    groups: dict[str, list[CelestialObject]]
    depth: dict[str, int] = field(default_factory=dict)

    @classmethod
    def build(cls, objects: Iterable[CelestialObject], *, validate: bool = True) -> "OrbitTree":
        items = tuple(objects)
        by_id: dict[str, CelestialObject] = {}
        for obj in items:
            if obj.id in by_id:
                if validate:
                    raise LayoutValidationError(obj.id, "duplicate-id", "object id is used more than once")
                LOG.warning("Duplicate object id %r, keeping the first occurrence", obj.id)
                continue
            by_id[obj.id] = obj

        groups: dict[str, list[CelestialObject]] = {}
        for obj in by_id.values():
            parent_id = obj.parent_id
            if parent_id is None:
                continue
            if parent_id not in by_id:
                if validate:
                    raise LayoutValidationError(
                        obj.id, "dangling-parent", f"orbit parent {parent_id!r} is not in the object set"
                    )
                LOG.warning("Object %r orbits missing primary %r, treating it as virtual", obj.id, parent_id)
            if validate and isinstance(obj.orbit, AnnularOrbit):
                orbit = obj.orbit
                if orbit.inner_radius < 0.0 or orbit.inner_radius >= orbit.outer_radius:
                    raise LayoutValidationError(
                        obj.id,
                        "annulus-bounds",
                        f"annulus needs 0 <= inner < outer, got {orbit.inner_radius}..{orbit.outer_radius}",
                    )
            groups.setdefault(parent_id, []).append(obj)

        tree = cls(objects=tuple(by_id.values()), by_id=by_id, groups=groups)
        tree._compute_depths()
        return tree

    def _compute_depths(self) -> None:
        for obj in self.objects:
            if obj.id in self.depth:
                continue
            chain: list[str] = []
            seen: set[str] = set()
            current: str | None = obj.id
            base = 0
            while current is not None:
                if current in self.depth:
                    base = self.depth[current] + 1
                    break
                if current in seen:
                    raise LayoutValidationError(current, "cycle", "orbit parents form a cycle")
                seen.add(current)
                chain.append(current)
                node = self.by_id.get(current)
                current = node.parent_id if node is not None else None
            for offset, object_id in enumerate(reversed(chain)):
                self.depth[object_id] = base + offset

    def depth_of(self, object_id: str) -> int:
        return self.depth.get(object_id, -1)

    def primary_of(self, obj: CelestialObject) -> CelestialObject | None:
        parent_id = obj.parent_id
        return self.by_id.get(parent_id) if parent_id is not None else None

    def children_of(self, object_id: str) -> Sequence[CelestialObject]:
        return self.groups.get(object_id, ())

    def is_virtual(self, primary_id: str) -> bool:
        return primary_id not in self.by_id

    def is_satellite(self, obj: CelestialObject) -> bool:
        """``True`` for a non-star orbiting a planet-or-smaller primary."""

        if obj.classification is Classification.STAR:
            return False
        primary = self.primary_of(obj)
        if primary is None:
            return False
        return is_satellite_host(primary)

    def primaries_deepest_first(self, ids: Iterable[str]) -> list[str]:
        """Order primary ids so nested systems come before the systems containing them."""

        return sorted(ids, key=self.depth_of, reverse=True)

    def sorted_children(self, primary_id: str) -> list[CelestialObject]:
        """Children ordered by source key; input order breaks ties."""

        return sorted(self.children_of(primary_id), key=lambda child: child.sort_key)


def is_satellite_host(primary: CelestialObject) -> bool:
    if primary.classification in (Classification.PLANET, Classification.MOON):
        return True
    return primary.classification is Classification.OTHER and primary.orbit is not None


def validate_forest(objects: Iterable[CelestialObject]) -> OrbitTree:
    """Build a validated tree, raising :class:`LayoutValidationError` on bad input."""

    return OrbitTree.build(objects, validate=True)


__all__ = ["OrbitTree", "is_satellite_host", "validate_forest"]
