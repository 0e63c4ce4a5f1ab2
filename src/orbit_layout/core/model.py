"""Data models for orbital systems and their computed layouts."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class Classification(Enum):
    """Closed set of object kinds the layout engine distinguishes."""

    STAR = "star"
    PLANET = "planet"
    MOON = "moon"
    BELT = "belt"
    RING = "ring"
    OTHER = "other"

    @classmethod
    def parse(cls, value: "str | Classification | None") -> "Classification":
        if isinstance(value, Classification):
            return value
        if value is None:
            return cls.OTHER
        key = str(value).strip().lower().replace("_", "-")
        if key == "dwarf-planet":
            return cls.PLANET
        for member in cls:
            if member.value == key:
                return member
        return cls.OTHER

    @property
    def hierarchy_exempt(self) -> bool:
        """Belts and rings may be larger than their primary."""

        return self in (Classification.BELT, Classification.RING)


@dataclass(frozen=True)
class PhysicalProps:
    radius: float | None = None  # km
    mass: float | None = None
    temperature: float | None = None  # K

    def layout_radius(self, default: float = 1.0) -> float:
        """Radius used for size math; missing or non-positive values become ``default``."""

        if self.radius is None or not math.isfinite(self.radius) or self.radius <= 0.0:
            return default
        return float(self.radius)


@dataclass(frozen=True)
class PointOrbit:
    """Keplerian orbit reduced to what the layout needs."""

    parent_id: str
    semi_major_axis: float  # AU
    eccentricity: float = 0.0
    inclination: float = 0.0
    orbital_period: float | None = None  # days

    @property
    def sort_key(self) -> float:
        return self.semi_major_axis


@dataclass(frozen=True)
class AnnularOrbit:
    """Ring-shaped region around a primary (belts, rings)."""

    parent_id: str
    inner_radius: float  # AU
    outer_radius: float  # AU
    inclination: float = 0.0
    eccentricity: float = 0.0

    @property
    def sort_key(self) -> float:
        return self.inner_radius

    @property
    def width(self) -> float:
        return self.outer_radius - self.inner_radius


Orbit = Union[PointOrbit, AnnularOrbit]


@dataclass(frozen=True)
class CelestialObject:
    id: str
    name: str
    classification: Classification
    physical: PhysicalProps = PhysicalProps()
    orbit: Orbit | None = None
    gas_giant: bool = False

    @property
    def parent_id(self) -> str | None:
        return self.orbit.parent_id if self.orbit is not None else None

    @property
    def is_root(self) -> bool:
        return self.orbit is None

    @property
    def is_annular(self) -> bool:
        return isinstance(self.orbit, AnnularOrbit)

    @property
    def sort_key(self) -> float:
        return self.orbit.sort_key if self.orbit is not None else 0.0


@dataclass(frozen=True)
class BeltGeometry:
    inner_radius: float
    outer_radius: float

    @property
    def center_radius(self) -> float:
        return (self.inner_radius + self.outer_radius) / 2.0

    @property
    def width(self) -> float:
        return self.outer_radius - self.inner_radius

    def shifted_to(self, center: float) -> "BeltGeometry":
        half = self.width / 2.0
        return BeltGeometry(inner_radius=center - half, outer_radius=center + half)


@dataclass(frozen=True)
class LayoutResult:
    """Engine output for one object."""

    visual_radius: float
    orbit_distance: float | None = None
    belt_geometry: BeltGeometry | None = None
    animation_speed: float | None = None


@dataclass(frozen=True)
class LayoutEvent:
    """Record of one adjustment made by a layout stage."""

    stage: str
    kind: str
    object_id: str
    before: float | None = None
    after: float | None = None
    detail: str = ""


@dataclass
class BodyLayout:
    """Mutable per-object record used while a layout is being computed."""

    visual_radius: float = 0.0
    orbit_distance: float | None = None
    belt: BeltGeometry | None = None

    @property
    def position(self) -> float:
        if self.belt is not None:
            return self.belt.center_radius
        return self.orbit_distance or 0.0


@dataclass
class LayoutState:
    """Working state of a single layout call."""

    bodies: dict[str, BodyLayout] = field(default_factory=dict)
    events: list[LayoutEvent] = field(default_factory=list)

    def body(self, object_id: str) -> BodyLayout:
        return self.bodies.setdefault(object_id, BodyLayout())

    def radius_of(self, object_id: str) -> float:
        body = self.bodies.get(object_id)
        return body.visual_radius if body is not None else 0.0

    def emit(
        self,
        stage: str,
        kind: str,
        object_id: str,
        before: float | None = None,
        after: float | None = None,
        detail: str = "",
    ) -> None:
        self.events.append(LayoutEvent(stage, kind, object_id, before, after, detail))


__all__ = [
    "AnnularOrbit",
    "BeltGeometry",
    "BodyLayout",
    "CelestialObject",
    "Classification",
    "LayoutEvent",
    "LayoutResult",
    "LayoutState",
    "Orbit",
    "PhysicalProps",
    "PointOrbit",
]
