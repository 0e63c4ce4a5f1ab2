"""Size normalisation and visual radius resolution."""
from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

from .config import LAYOUT_CFG, LayoutCfg, SizingMode, ViewPolicy
from .errors import PolicyConfigError
from .model import CelestialObject, Classification, LayoutState, PointOrbit
from .tree import OrbitTree

LOG = logging.getLogger(__name__)


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp *value* between *lo* and *hi*."""

    return max(lo, min(hi, value))


@dataclass(frozen=True)
class SizeRange:
    """Logarithmic span of the physical radii in one object set."""

    log_min: float
    log_range: float

    def normalize(self, radius: float | np.ndarray) -> float | np.ndarray:
        """Map a radius (or an array of radii) onto ``[0, 1]``."""

        level = (np.log10(radius) - self.log_min) / self.log_range
        clipped = np.clip(level, 0.0, 1.0)
        if np.ndim(clipped) == 0:
            return float(clipped)
        return clipped


def physical_radii(
    radii: Iterable[float | None], cfg: LayoutCfg = LAYOUT_CFG
) -> np.ndarray:
    """Radii as a float array with missing or non-positive entries replaced."""

    values = np.array(
        [cfg.default_physical_radius if r is None else r for r in radii], dtype=float
    )
    if values.size == 0:
        return values
    bad = ~np.isfinite(values) | (values <= 0.0)
    values[bad] = cfg.default_physical_radius
    return values


def normalize_sizes(radii: Iterable[float | None], cfg: LayoutCfg = LAYOUT_CFG) -> SizeRange:
    """Compute the log range used to compress physical radii into a visual band.

    The range always spans at least one decade so a set of near-identical bodies
    does not collapse onto a single point.
    """

    values = physical_radii(radii, cfg)
    if values.size == 0:
        return SizeRange(log_min=0.0, log_range=1.0)
    min_radius = float(values.min())
    max_radius = float(values.max())
    if max_radius / min_radius < cfg.min_decade_ratio:
        max_radius = min_radius * cfg.min_decade_ratio
    log_min = math.log10(min_radius)
    log_range = max(math.log10(max_radius) - log_min, 1.0)
    return SizeRange(log_min=log_min, log_range=log_range)


def safe_star_ceiling(
    star: CelestialObject,
    tree: OrbitTree,
    policy: ViewPolicy,
    cfg: LayoutCfg = LAYOUT_CFG,
) -> float:
    """Largest visual radius a star may take under *policy*.

    True-scale policies derive it from the innermost orbit around the star so the
    closest planet keeps ``safe_clearance_ratio`` star radii of clearance.
    """

    upper = policy.max_visual_size
    if policy.star_ceiling is not None:
        return min(policy.star_ceiling, upper)
    if policy.sizing is not SizingMode.TRUE_SCALE:
        return upper
    axes = [
        child.orbit.semi_major_axis
        for child in tree.children_of(star.id)
        if isinstance(child.orbit, PointOrbit) and child.orbit.semi_major_axis > 0.0
    ]
    if not axes:
        return upper
    ceiling = min(axes) * policy.orbit_scale / (1.0 + cfg.safe_clearance_ratio)
    return clamp(ceiling, policy.min_visual_size, upper)


def star_ceiling_for(
    obj: CelestialObject,
    tree: OrbitTree,
    policy: ViewPolicy,
    cfg: LayoutCfg = LAYOUT_CFG,
) -> float:
    if obj.classification is Classification.STAR:
        return safe_star_ceiling(obj, tree, policy, cfg)
    return policy.max_visual_size


def _independent_size(
    obj: CelestialObject,
    level: float,
    tree: OrbitTree,
    policy: ViewPolicy,
    cfg: LayoutCfg,
) -> float:
    """Visual radius of *obj* from its own normalised *level* alone.

    True-scale sizing maps the level geometrically, ``lo * (hi / lo) ** level``.
    With ``level = log10(r / r_min) / log_range`` that equals
    ``lo * (r / r_min) ** k`` where ``k = log10(hi / lo) / log_range``, so sizes are
    near-linear in the physical radius when the visual band covers about as many
    decades as the data.
    """

    lo, hi = policy.min_visual_size, policy.max_visual_size
    if policy.sizing is SizingMode.FIXED:
        if policy.fixed_sizes is None:
            raise PolicyConfigError(f"{policy.policy_id}: fixed sizing needs a fixed_sizes table")
        return policy.fixed_sizes.size_for(
            obj.classification,
            gas_giant=obj.gas_giant,
            gas_giant_multiplier=policy.gas_giant_multiplier,
        )
    if policy.sizing is SizingMode.TRUE_SCALE:
        size = lo * (hi / lo) ** level
        if obj.classification is Classification.STAR:
            size = min(size, safe_star_ceiling(obj, tree, policy, cfg))
        return size
    return lo + level * (hi - lo)


def _store(state: LayoutState, obj: CelestialObject, raw: float, policy: ViewPolicy) -> None:
    size = clamp(raw, policy.min_visual_size, policy.max_visual_size)
    if not math.isclose(size, raw):
        LOG.debug("Clamped %s from %.4g to %.4g under %s", obj.id, raw, size, policy.policy_id)
        state.emit("size", "clamped", obj.id, raw, size)
    state.body(obj.id).visual_radius = size


def resolve_visual_radii(
    tree: OrbitTree,
    policy: ViewPolicy,
    state: LayoutState,
    cfg: LayoutCfg = LAYOUT_CFG,
) -> SizeRange:
    """Assign ``visual_radius`` to every object in two passes.

    Pass A sizes everything except point-orbit satellites. Pass B sizes those
    satellites, proportionally to their already sized primary under logarithmic
    policies. Pass A always completes before pass B starts.
    """

    objects = tree.objects
    radii = physical_radii((obj.physical.radius for obj in objects), cfg)
    size_range = normalize_sizes(radii, cfg)
    levels = size_range.normalize(radii) if radii.size else radii
    level_of = {obj.id: float(level) for obj, level in zip(objects, np.atleast_1d(levels))}

    def is_pass_b(obj: CelestialObject) -> bool:
        return tree.is_satellite(obj) and not obj.is_annular

    for obj in objects:
        if is_pass_b(obj):
            continue
        _store(state, obj, _independent_size(obj, level_of[obj.id], tree, policy, cfg), policy)

    for obj in objects:
        if not is_pass_b(obj):
            continue
        primary = tree.primary_of(obj)
        primary_body = state.bodies.get(primary.id) if primary is not None else None
        if (
            policy.sizing is SizingMode.LOGARITHMIC
            and primary is not None
            and primary_body is not None
            and primary_body.visual_radius > 0.0
        ):
            ratio = obj.physical.layout_radius(cfg.default_physical_radius) / primary.physical.layout_radius(
                cfg.default_physical_radius
            )
            proportional = primary_body.visual_radius * ratio
            floor = policy.min_visual_size * cfg.satellite_floor_factor
            state.body(obj.id).visual_radius = max(proportional, floor)
            if proportional < floor:
                state.emit("size", "satellite-floor", obj.id, proportional, floor)
            continue
        _store(state, obj, _independent_size(obj, level_of[obj.id], tree, policy, cfg), policy)

    return size_range


__all__ = [
    "SizeRange",
    "clamp",
    "normalize_sizes",
    "physical_radii",
    "resolve_visual_radii",
    "safe_star_ceiling",
    "star_ceiling_for",
]
