"""Two-pass orbital placement and the optional global collision pass."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import LAYOUT_CFG, LayoutCfg, ViewPolicy
from .errors import LayoutError
from .model import AnnularOrbit, BeltGeometry, CelestialObject, Classification, LayoutState, PointOrbit
from .sizing import clamp
from .tree import OrbitTree, is_satellite_host

LOG = logging.getLogger(__name__)

_PUSH_TOLERANCE = 1e-9


@dataclass
class _Cursor:
    """Running state while walking one sibling group outward."""

    next_available: float
    previous: tuple[float, float] | None = None  # (position, outer extent)

    def required_inner(self, min_distance: float) -> float:
        if self.previous is None:
            return self.next_available
        position, extent = self.previous
        return max(position + extent + min_distance, self.next_available)


def effective_radius(obj: CelestialObject, tree: OrbitTree, state: LayoutState, policy: ViewPolicy) -> float:
    """Visual radius widened to cover the object's already placed satellites.

    Annular objects report half their width. ``satellite_extent_factor`` lets a
    compact policy count only part of a satellite system.
    """

    body = state.bodies.get(obj.id)
    if body is None:
        return 0.0
    if body.belt is not None:
        return body.belt.width / 2.0
    outermost = 0.0
    for child in tree.children_of(obj.id):
        child_body = state.bodies.get(child.id)
        if child_body is None:
            continue
        if child_body.belt is not None:
            outermost = max(outermost, child_body.belt.outer_radius)
        elif child_body.orbit_distance is not None:
            outermost = max(outermost, child_body.orbit_distance + effective_radius(child, tree, state, policy))
    return max(body.visual_radius, outermost * policy.satellite_extent_factor)


def _seed(primary_radius: float, policy: ViewPolicy) -> float:
    return max(primary_radius * policy.safety_multiplier, policy.min_distance)


def _point_or_annulus(child: CelestialObject) -> PointOrbit | AnnularOrbit:
    if child.orbit is None:
        raise LayoutError(f"{child.id}: listed as an orbiter but has no orbit")
    return child.orbit


def _place_annulus(
    child: CelestialObject,
    orbit: AnnularOrbit,
    cursor: _Cursor,
    policy: ViewPolicy,
    state: LayoutState,
    floor: float = 0.0,
) -> None:
    lo_width, hi_width = policy.belt_width_bounds
    required_inner = max(cursor.required_inner(policy.min_distance), floor)
    if policy.is_equidistant:
        width = lo_width
        inner = required_inner
    else:
        raw_width = orbit.width * policy.orbit_scale
        width = clamp(raw_width, lo_width, hi_width)
        if raw_width > hi_width:
            state.emit("placement", "belt-width-clamped", child.id, raw_width, width)
        desired_inner = orbit.inner_radius * policy.orbit_scale
        inner = max(desired_inner, required_inner)
        if inner > desired_inner + _PUSH_TOLERANCE:
            state.emit("placement", "pushed", child.id, desired_inner, inner, "annulus inner edge")
    belt = BeltGeometry(inner_radius=inner, outer_radius=inner + width)
    body = state.body(child.id)
    body.belt = belt
    body.orbit_distance = None
    cursor.previous = (belt.center_radius, width / 2.0)
    cursor.next_available = belt.outer_radius + policy.min_distance


def _place_satellite_group(
    primary: CelestialObject,
    tree: OrbitTree,
    policy: ViewPolicy,
    state: LayoutState,
    cfg: LayoutCfg,
) -> None:
    primary_radius = state.radius_of(primary.id)
    cursor = _Cursor(next_available=_seed(primary_radius, policy))
    min_d = policy.min_distance
    for child in tree.sorted_children(primary.id):
        orbit = _point_or_annulus(child)
        if isinstance(orbit, AnnularOrbit):
            _place_annulus(child, orbit, cursor, policy, state, floor=primary_radius + min_d)
            continue
        own = state.radius_of(child.id)
        extent = effective_radius(child, tree, state, policy)
        desired = cursor.next_available if policy.is_equidistant else orbit.semi_major_axis * policy.orbit_scale
        candidates = [desired, cursor.next_available, primary_radius + own + min_d]
        if cursor.previous is not None:
            position, prev_extent = cursor.previous
            candidates.append(position + prev_extent + min_d + extent)
        actual = max(candidates)
        if actual > desired + _PUSH_TOLERANCE:
            LOG.debug("Satellite %s pushed from %.4g to %.4g", child.id, desired, actual)
            state.emit("placement", "pushed", child.id, desired, actual, f"satellite of {primary.id}")
        state.body(child.id).orbit_distance = actual
        cursor.previous = (actual, extent)
        cursor.next_available = actual + own * max(policy.safety_multiplier, cfg.satellite_safety_floor) + min_d


def _place_primary_group(
    primary: CelestialObject,
    tree: OrbitTree,
    policy: ViewPolicy,
    state: LayoutState,
) -> None:
    cursor = _Cursor(next_available=_seed(state.radius_of(primary.id), policy))
    min_d = policy.min_distance
    for child in tree.sorted_children(primary.id):
        orbit = _point_or_annulus(child)
        if isinstance(orbit, AnnularOrbit):
            _place_annulus(child, orbit, cursor, policy, state)
            continue
        extent = effective_radius(child, tree, state, policy)
        required_center = cursor.required_inner(min_d) + extent
        if policy.is_equidistant:
            actual = required_center
        else:
            desired = orbit.semi_major_axis * policy.orbit_scale
            actual = max(desired, required_center)
            if actual > desired + _PUSH_TOLERANCE:
                LOG.debug("Orbiter %s pushed from %.4g to %.4g", child.id, desired, actual)
                state.emit("placement", "pushed", child.id, desired, actual, f"sibling clearance around {primary.id}")
        state.body(child.id).orbit_distance = actual
        cursor.previous = (actual, extent)
        cursor.next_available = actual + extent + min_d


def _place_virtual_group(primary_id: str, tree: OrbitTree, policy: ViewPolicy, state: LayoutState) -> None:
    children = tree.sorted_children(primary_id)
    lo_width, hi_width = policy.belt_width_bounds
    for child in children:
        orbit = child.orbit
        body = state.body(child.id)
        if isinstance(orbit, AnnularOrbit):
            inner = orbit.inner_radius * policy.orbit_scale
            width = clamp(orbit.width * policy.orbit_scale, lo_width, hi_width)
            body.belt = BeltGeometry(inner_radius=inner, outer_radius=inner + width)
        elif isinstance(orbit, PointOrbit):
            body.orbit_distance = orbit.semi_major_axis * policy.orbit_scale

    stars = [child for child in children if child.classification is Classification.STAR and not child.is_annular]
    if len(stars) >= 2:
        pair = stars[:2]
        shared = sum(state.body(star.id).orbit_distance or 0.0 for star in pair) / 2.0
        for star in pair:
            state.body(star.id).orbit_distance = shared
        LOG.debug("Stars %s share distance %.4g around virtual primary %s", [s.id for s in pair], shared, primary_id)


def place_orbits(
    tree: OrbitTree,
    policy: ViewPolicy,
    state: LayoutState,
    cfg: LayoutCfg = LAYOUT_CFG,
) -> None:
    """Assign orbit distances and belt geometry to every orbiting object.

    Pass 1 places every satellite group and pass 2 every remaining group. Within
    a pass, deeper primaries go first so their extents are known when their own
    primary's group is laid out.
    """

    satellite_hosts: list[str] = []
    primary_groups: list[str] = []
    for primary_id in tree.groups:
        if tree.is_virtual(primary_id):
            primary_groups.append(primary_id)
        elif is_satellite_host(tree.by_id[primary_id]):
            satellite_hosts.append(primary_id)
        else:
            primary_groups.append(primary_id)

    for primary_id in tree.primaries_deepest_first(satellite_hosts):
        _place_satellite_group(tree.by_id[primary_id], tree, policy, state, cfg)

    for primary_id in tree.primaries_deepest_first(primary_groups):
        if tree.is_virtual(primary_id):
            _place_virtual_group(primary_id, tree, policy, state)
        else:
            _place_primary_group(tree.by_id[primary_id], tree, policy, state)


def resolve_global_collisions(
    tree: OrbitTree,
    policy: ViewPolicy,
    state: LayoutState,
    cfg: LayoutCfg = LAYOUT_CFG,
) -> int:
    """Push apart siblings whose computed positions crowd each other.

    Siblings are compared in order of their computed position. Returns the number
    of objects moved.
    """

    moved = 0
    for primary_id in tree.primaries_deepest_first(tree.groups):
        placed = [child for child in tree.children_of(primary_id) if child.id in state.bodies]
        placed.sort(key=lambda child: state.bodies[child.id].position)
        for prev, cur in zip(placed, placed[1:]):
            prev_body = state.bodies[prev.id]
            cur_body = state.bodies[cur.id]
            spacing = policy.collision_spacing
            if prev_body.belt is not None:
                spacing = min(spacing, cfg.belt_after_belt_spacing)
            required = (
                prev_body.position
                + effective_radius(prev, tree, state, policy)
                + policy.min_distance * spacing
                + effective_radius(cur, tree, state, policy)
            )
            before = cur_body.position
            if before >= required:
                continue
            if cur_body.belt is not None:
                cur_body.belt = cur_body.belt.shifted_to(required)
            else:
                cur_body.orbit_distance = required
            moved += 1
            LOG.debug("Collision pass moved %s from %.4g to %.4g", cur.id, before, required)
            state.emit("collision", "shift", cur.id, before, required, f"after {prev.id}")
    return moved


__all__ = ["effective_radius", "place_orbits", "resolve_global_collisions"]
