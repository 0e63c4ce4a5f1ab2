"""Bundled view policies and policy lookup."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Optional

from ..core.config import FixedSizeTable, PolicyId, SizingMode, SpacingMode, ViewPolicy

LOG = logging.getLogger(__name__)


POLICY_DEFINITIONS: tuple[ViewPolicy, ...] = (
    ViewPolicy(
        policy_id=PolicyId.TRUE_SCALE.value,
        name="True scale",
        description="Geometric size scaling with stars capped so inner orbits stay clear.",
        min_visual_size=0.1,
        max_visual_size=40.0,
        orbit_scale=80.0,
        min_distance=0.1,
        safety_multiplier=1.1,
        sizing=SizingMode.TRUE_SCALE,
    ),
    ViewPolicy(
        policy_id=PolicyId.COMPRESSED.value,
        name="Compressed",
        description="Logarithmic sizes in a narrow band, moons sized against their planet.",
        min_visual_size=0.02,
        max_visual_size=0.8,
        orbit_scale=8.0,
        min_distance=0.1,
        safety_multiplier=2.5,
        sizing=SizingMode.LOGARITHMIC,
        max_belt_width=0.2,
    ),
    ViewPolicy(
        policy_id=PolicyId.SCHEMATIC_FIXED.value,
        name="Schematic",
        description="Fixed sizes per classification with compact satellite systems.",
        min_visual_size=0.2,
        max_visual_size=6.0,
        orbit_scale=40.0,
        min_distance=1.0,
        safety_multiplier=3.0,
        sizing=SizingMode.FIXED,
        fixed_sizes=FixedSizeTable(star=2.0, planet=1.2, moon=0.6, belt=0.8, other=0.3),
        satellite_extent_factor=0.5,
        collision_spacing=0.5,
    ),
    ViewPolicy(
        policy_id=PolicyId.EQUIDISTANT.value,
        name="Equidistant",
        description="Fixed sizes on evenly spaced orbits, ignoring source distances.",
        min_visual_size=0.03,
        max_visual_size=1.5,
        orbit_scale=0.3,
        min_distance=0.3,
        safety_multiplier=3.5,
        sizing=SizingMode.FIXED,
        spacing=SpacingMode.EQUIDISTANT,
        fixed_sizes=FixedSizeTable(star=1.5, planet=0.8, moon=0.4, belt=0.6, other=0.2),
        min_belt_width=0.15,
        collision_spacing=0.25,
    ),
)

POLICIES: dict[str, ViewPolicy] = {policy.policy_id: policy for policy in POLICY_DEFINITIONS}
POLICY_DISPLAY_ORDER: list[str] = [policy.policy_id for policy in POLICY_DEFINITIONS]
DEFAULT_POLICY_ID = PolicyId.COMPRESSED.value


def get_policy(
    policy_id: "PolicyId | str",
    table: Optional[Mapping[str, ViewPolicy]] = None,
) -> ViewPolicy:
    """Look up a policy, falling back to the compressed one for unknown ids."""

    policies = POLICIES if table is None else table
    key = policy_id.value if isinstance(policy_id, PolicyId) else str(policy_id)
    policy = policies.get(key)
    if policy is not None:
        return policy
    fallback = policies.get(DEFAULT_POLICY_ID, POLICIES[DEFAULT_POLICY_ID])
    LOG.warning("Unknown view policy %r, using %r", key, fallback.policy_id)
    return fallback


__all__ = [
    "DEFAULT_POLICY_ID",
    "POLICIES",
    "POLICY_DEFINITIONS",
    "POLICY_DISPLAY_ORDER",
    "get_policy",
]
