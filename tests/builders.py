"""Small constructors for test object sets."""
from __future__ import annotations

from typing import Optional

from orbit_layout.core.model import AnnularOrbit, CelestialObject, Classification, PhysicalProps, PointOrbit


def star(object_id: str = "star", radius: Optional[float] = 695_700.0, **kwargs) -> CelestialObject:
    return CelestialObject(object_id, object_id.title(), Classification.STAR, PhysicalProps(radius=radius), **kwargs)


def body(
    object_id: str,
    parent: str,
    a: float,
    radius: Optional[float] = 6_371.0,
    kind: Classification = Classification.PLANET,
    period: Optional[float] = None,
    gas_giant: bool = False,
) -> CelestialObject:
    return CelestialObject(
        object_id,
        object_id.title(),
        kind,
        PhysicalProps(radius=radius),
        PointOrbit(parent, a, orbital_period=period),
        gas_giant=gas_giant,
    )


def moon(object_id: str, parent: str, a: float, radius: Optional[float] = 1_737.4, **kwargs) -> CelestialObject:
    return body(object_id, parent, a, radius, kind=Classification.MOON, **kwargs)


def belt(
    object_id: str, parent: str, inner: float, outer: float, kind: Classification = Classification.BELT
) -> CelestialObject:
    return CelestialObject(object_id, object_id.title(), kind, PhysicalProps(), AnnularOrbit(parent, inner, outer))


