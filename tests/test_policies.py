from __future__ import annotations

import pytest

from orbit_layout import PolicyConfigError, PolicyId, ViewPolicy
from orbit_layout.core.config import SizingMode, SpacingMode
from orbit_layout.data.policies import DEFAULT_POLICY_ID, POLICIES, POLICY_DISPLAY_ORDER, get_policy


def test_bundled_table_matches_identifiers():
    assert POLICY_DISPLAY_ORDER == [member.value for member in PolicyId]
    assert DEFAULT_POLICY_ID == "compressed"
    assert get_policy(PolicyId.EQUIDISTANT) is POLICIES["equidistant"]
    assert POLICIES["equidistant"].spacing is SpacingMode.EQUIDISTANT
    assert POLICIES["true-scale"].sizing is SizingMode.TRUE_SCALE
    assert not any(policy.global_collision_pass for policy in POLICIES.values())


def test_belt_width_bounds_defaults():
    assert POLICIES["compressed"].belt_width_bounds == (0.1, 0.2)
    assert POLICIES["schematic-fixed"].belt_width_bounds == (1.0, 20.0)
    assert POLICIES["equidistant"].belt_width_bounds == (0.15, 0.15)


def test_custom_table_falls_back_to_its_own_default():
    table = {"compressed": POLICIES["compressed"].with_overrides(name="Custom")}
    assert get_policy("anything", table).name == "Custom"


@pytest.mark.parametrize(
    "changes",
    [
        {"min_visual_size": 0.0},
        {"max_visual_size": 0.01},
        {"orbit_scale": -1.0},
        {"min_distance": -0.1},
        {"safety_multiplier": 0.5},
        {"satellite_extent_factor": 0.0},
        {"sizing": SizingMode.FIXED, "fixed_sizes": None},
        {"min_belt_width": 0.5, "max_belt_width": 0.2},
        {"orbit_scale": float("nan")},
    ],
)
def test_inconsistent_policies_are_rejected(changes):
    with pytest.raises(PolicyConfigError):
        POLICIES["compressed"].with_overrides(**changes)


def test_policy_config_error_is_a_value_error():
    with pytest.raises(ValueError):
        ViewPolicy(
            policy_id="broken",
            name="Broken",
            min_visual_size=1.0,
            max_visual_size=1.0,
            orbit_scale=1.0,
            min_distance=0.0,
            safety_multiplier=1.0,
        )
