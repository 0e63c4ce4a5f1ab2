"""Angular speed used by renderers to animate orbits."""
from __future__ import annotations

from .config import LAYOUT_CFG, LayoutCfg
from .model import CelestialObject, PointOrbit


def animation_speed(obj: CelestialObject, cfg: LayoutCfg = LAYOUT_CFG) -> float | None:
    """Speed relative to a one-year orbit, or ``None`` without a usable period."""

    orbit = obj.orbit
    if not isinstance(orbit, PointOrbit) or orbit.orbital_period is None:
        return None
    if not orbit.orbital_period > 0.0:
        return None
    return cfg.base_speed * cfg.reference_period / orbit.orbital_period


def derive_animation_speeds(objects, cfg: LayoutCfg = LAYOUT_CFG) -> dict[str, float | None]:
    return {obj.id: animation_speed(obj, cfg) for obj in objects}


__all__ = ["animation_speed", "derive_animation_speeds"]
