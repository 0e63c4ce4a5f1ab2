"""Post-hoc checks that a computed layout keeps its geometric guarantees."""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from .config import ViewPolicy
from .model import CelestialObject, LayoutResult
from .tree import OrbitTree

TOLERANCE = 1e-9


@dataclass(frozen=True)
class Violation:
    rule: str
    object_id: str
    message: str

    def __str__(self) -> str:
        return f"[{self.rule}] {self.object_id}: {self.message}"


def _extent(obj: CelestialObject, tree: OrbitTree, layout: Mapping[str, LayoutResult], policy: ViewPolicy) -> float:
    result = layout[obj.id]
    if result.belt_geometry is not None:
        return result.belt_geometry.width / 2.0
    outermost = 0.0
    for child in tree.children_of(obj.id):
        child_result = layout.get(child.id)
        if child_result is None:
            continue
        if child_result.belt_geometry is not None:
            outermost = max(outermost, child_result.belt_geometry.outer_radius)
        elif child_result.orbit_distance is not None:
            outermost = max(outermost, child_result.orbit_distance + _extent(child, tree, layout, policy))
    return max(result.visual_radius, outermost * policy.satellite_extent_factor)


def _span(obj: CelestialObject, tree: OrbitTree, layout: Mapping[str, LayoutResult], policy: ViewPolicy):
    result = layout[obj.id]
    if result.belt_geometry is not None:
        return result.belt_geometry.inner_radius, result.belt_geometry.outer_radius
    extent = _extent(obj, tree, layout, policy)
    distance = result.orbit_distance or 0.0
    return distance - extent, distance + extent


def find_violations(
    objects: Iterable[CelestialObject],
    layout: Mapping[str, LayoutResult],
    policy: ViewPolicy,
) -> list[Violation]:
    """Every place where *layout* breaks a sizing or spacing guarantee."""

    tree = OrbitTree.build(objects, validate=False)
    found: list[Violation] = []
    lo_width, hi_width = policy.belt_width_bounds

    for obj in tree.objects:
        result = layout[obj.id]
        if not result.visual_radius > 0.0:
            found.append(Violation("positive-radius", obj.id, f"visual radius {result.visual_radius}"))
        belt = result.belt_geometry
        if belt is not None:
            if not belt.inner_radius < belt.outer_radius:
                found.append(Violation("belt-bounds", obj.id, f"{belt.inner_radius} >= {belt.outer_radius}"))
            if not lo_width - TOLERANCE <= belt.width <= hi_width + TOLERANCE:
                found.append(Violation("belt-width", obj.id, f"width {belt.width} outside [{lo_width}, {hi_width}]"))

        primary = tree.primary_of(obj)
        if primary is None:
            continue
        primary_radius = layout[primary.id].visual_radius
        if not obj.classification.hierarchy_exempt and not result.visual_radius < primary_radius:
            found.append(
                Violation("hierarchy", obj.id, f"radius {result.visual_radius} not below {primary.id} {primary_radius}")
            )
        if tree.is_satellite(obj) and result.orbit_distance is not None:
            clearance = result.orbit_distance - result.visual_radius - primary_radius
            if clearance <= 0.0:
                found.append(Violation("primary-clearance", obj.id, f"clearance {clearance:.4g} around {primary.id}"))

    for primary_id, _children in tree.groups.items():
        if tree.is_virtual(primary_id):
            continue
        ordered = tree.sorted_children(primary_id)
        for prev, cur in zip(ordered, ordered[1:]):
            _, prev_outer = _span(prev, tree, layout, policy)
            cur_inner, _ = _span(cur, tree, layout, policy)
            gap = cur_inner - prev_outer
            if gap < policy.min_distance - 1e-6:
                found.append(Violation("sibling-gap", cur.id, f"gap {gap:.4g} after {prev.id}"))
            prev_pos = _position(layout[prev.id])
            cur_pos = _position(layout[cur.id])
            if not cur_pos > prev_pos:
                found.append(Violation("ordering", cur.id, f"position {cur_pos:.4g} not beyond {prev.id} {prev_pos:.4g}"))
    return found


def _position(result: LayoutResult) -> float:
    if result.belt_geometry is not None:
        return result.belt_geometry.center_radius
    return result.orbit_distance or 0.0


__all__ = ["Violation", "find_violations"]
