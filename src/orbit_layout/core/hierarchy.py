"""Keep every primary visibly larger than the bodies orbiting it."""
from __future__ import annotations

import logging

from .config import LAYOUT_CFG, LayoutCfg, ViewPolicy
from .model import CelestialObject, LayoutState
from .sizing import star_ceiling_for
from .tree import OrbitTree

LOG = logging.getLogger(__name__)


def _ranked_children(tree: OrbitTree, primary_id: str) -> list[CelestialObject]:
    return [child for child in tree.children_of(primary_id) if not child.classification.hierarchy_exempt]


def _scale_subtree(
    obj: CelestialObject,
    factor: float,
    tree: OrbitTree,
    policy: ViewPolicy,
    state: LayoutState,
) -> None:
    body = state.body(obj.id)
    before = body.visual_radius
    body.visual_radius = max(before * factor, policy.min_visual_size)
    state.emit("hierarchy", "shrink", obj.id, before, body.visual_radius)
    for child in tree.children_of(obj.id):
        _scale_subtree(child, factor, tree, policy, state)


def enforce_size_hierarchy(
    tree: OrbitTree,
    policy: ViewPolicy,
    state: LayoutState,
    cfg: LayoutCfg = LAYOUT_CFG,
) -> bool:
    """Grow primaries or shrink children until each primary outranks its children.

    Belts and rings are exempt. Returns ``True`` when any radius changed, in which
    case the caller must lay the orbits out again.
    """

    changed = False
    real_groups = [primary_id for primary_id in tree.groups if not tree.is_virtual(primary_id)]

    for primary_id in tree.primaries_deepest_first(real_groups):
        children = _ranked_children(tree, primary_id)
        if not children:
            continue
        primary = tree.by_id[primary_id]
        primary_body = state.body(primary_id)
        largest = max(state.radius_of(child.id) for child in children)
        if largest < primary_body.visual_radius:
            continue
        corrected = largest * cfg.hierarchy_margin
        ceiling = star_ceiling_for(primary, tree, policy, cfg)
        before = primary_body.visual_radius
        changed = True
        if corrected <= ceiling:
            primary_body.visual_radius = corrected
            state.emit("hierarchy", "grow", primary_id, before, corrected)
            continue
        primary_body.visual_radius = ceiling
        state.emit("hierarchy", "cap", primary_id, before, ceiling)
        factor = ceiling / corrected * cfg.child_shrink_factor
        LOG.debug("Shrinking children of %s by %.3g", primary_id, factor)
        for child in children:
            _scale_subtree(child, factor, tree, policy, state)

    # The min_visual floor above can leave a child tied with its primary.
    for primary_id in sorted(real_groups, key=tree.depth_of):
        primary_radius = state.radius_of(primary_id)
        for child in _ranked_children(tree, primary_id):
            body = state.body(child.id)
            if body.visual_radius < primary_radius:
                continue
            strict = primary_radius / cfg.hierarchy_margin
            if strict < policy.min_visual_size:
                LOG.warning(
                    "%s stays below its primary %s only at %.4g, under the policy minimum %.4g",
                    child.id,
                    primary_id,
                    strict,
                    policy.min_visual_size,
                )
            state.emit("hierarchy", "strict", child.id, body.visual_radius, strict)
            body.visual_radius = strict
            changed = True

    return changed


__all__ = ["enforce_size_hierarchy"]
