from __future__ import annotations

import copy
import math

import numpy as np
import pytest

from builders import belt, body, moon, star
from orbit_layout.core.config import FixedSizeTable, SizingMode
from orbit_layout.core.errors import PolicyConfigError
from orbit_layout.core.model import Classification, LayoutState
from orbit_layout.core.sizing import (
    SizeRange,
    normalize_sizes,
    physical_radii,
    resolve_visual_radii,
    safe_star_ceiling,
)
from orbit_layout.core.tree import OrbitTree
from orbit_layout.data.policies import POLICIES


def _sized(objects, policy_id):
    tree = OrbitTree.build(objects)
    state = LayoutState()
    resolve_visual_radii(tree, POLICIES[policy_id], state)
    return tree, state


def test_normalizer_widens_narrow_range_to_one_decade():
    size_range = normalize_sizes([10.0, 50.0])
    assert size_range.log_min == pytest.approx(1.0)
    assert size_range.log_range == pytest.approx(1.0)
    assert size_range.normalize(10.0) == pytest.approx(0.0)
    assert size_range.normalize(50.0) == pytest.approx(math.log10(5.0))
    assert size_range.normalize(100.0) == pytest.approx(1.0)


def test_normalizer_clips_outside_values():
    size_range = SizeRange(log_min=0.0, log_range=2.0)
    assert size_range.normalize(0.1) == 0.0
    assert size_range.normalize(1e6) == 1.0
    levels = size_range.normalize(np.array([1.0, 10.0, 100.0]))
    assert np.allclose(levels, [0.0, 0.5, 1.0])


def test_bad_radii_are_read_as_one():
    values = physical_radii([0.0, -3.0, None, float("nan"), 1000.0])
    assert values.tolist() == [1.0, 1.0, 1.0, 1.0, 1000.0]
    size_range = normalize_sizes([0.0, None, 1000.0])
    assert size_range.log_min == pytest.approx(0.0)
    assert size_range.log_range == pytest.approx(3.0)


def test_empty_input_gives_unit_range():
    assert normalize_sizes([]) == SizeRange(log_min=0.0, log_range=1.0)


def test_compressed_sizes_satellites_against_their_primary(earth_moon_system):
    _, state = _sized(earth_moon_system, "compressed")
    policy = POLICIES["compressed"]
    level = math.log10(6_371.0 / 1_737.4) / math.log10(695_700.0 / 1_737.4)

    assert state.radius_of("sun") == pytest.approx(policy.max_visual_size)
    earth = state.radius_of("earth")
    assert earth == pytest.approx(policy.min_visual_size + level * (policy.max_visual_size - policy.min_visual_size))
    assert state.radius_of("moon") == pytest.approx(earth * 1_737.4 / 6_371.0)


def test_compressed_satellite_floor_emits_event():
    objects = (star("sun"), body("earth", "sun", 1.0), moon("pebble", "earth", 0.001, radius=1.0))
    _, state = _sized(objects, "compressed")
    policy = POLICIES["compressed"]
    assert state.radius_of("pebble") == pytest.approx(2.0 * policy.min_visual_size)
    assert any(e.kind == "satellite-floor" and e.object_id == "pebble" for e in state.events)


def test_fixed_sizes_follow_classification_table():
    objects = (
        star("sun"),
        body("earth", "sun", 1.0),
        body("jupiter", "sun", 5.2, radius=69_911.0, gas_giant=True),
        moon("io", "jupiter", 0.003),
        belt("belt", "sun", 2.2, 3.2),
        belt("rings", "jupiter", 0.0005, 0.0009, kind=Classification.RING),
    )
    _, state = _sized(objects, "schematic-fixed")
    assert state.radius_of("sun") == pytest.approx(2.0)
    assert state.radius_of("earth") == pytest.approx(1.2)
    assert state.radius_of("jupiter") == pytest.approx(1.8)
    assert state.radius_of("io") == pytest.approx(0.6)
    assert state.radius_of("belt") == pytest.approx(0.8)
    # no ring entry, falls back to the "other" size
    assert state.radius_of("rings") == pytest.approx(0.3)


def test_fixed_table_lookup_is_exhaustive():
    table = FixedSizeTable(star=3.0, planet=2.0, moon=1.0, belt=1.5, other=0.5, ring=0.7)
    assert table.size_for(Classification.RING) == 0.7
    assert table.size_for(Classification.OTHER) == 0.5
    assert table.size_for(Classification.PLANET, gas_giant=True, gas_giant_multiplier=2.0) == 4.0
    assert table.size_for(Classification.MOON, gas_giant=True) == 1.0


def test_fixed_sizing_without_a_table_raises_instead_of_guessing():
    policy = copy.copy(POLICIES["schematic-fixed"])
    # frozen and validated on construction, so only a forced edit gets here
    object.__setattr__(policy, "fixed_sizes", None)
    with pytest.raises(PolicyConfigError, match="fixed_sizes"):
        resolve_visual_radii(OrbitTree.build((star("sun"),)), policy, LayoutState())


def test_true_scale_star_is_capped_by_innermost_orbit():
    objects = (star("sun"), body("mercury", "sun", 0.39, radius=2_439.0))
    tree, state = _sized(objects, "true-scale")
    policy = POLICIES["true-scale"]
    assert policy.sizing is SizingMode.TRUE_SCALE
    assert safe_star_ceiling(tree.by_id["sun"], tree, policy) == pytest.approx(0.39 * 80.0 / 4.0)
    assert state.radius_of("sun") == pytest.approx(7.8)
    assert state.radius_of("mercury") == pytest.approx(policy.min_visual_size)
    assert not any(e.stage == "size" and e.object_id == "sun" for e in state.events)


def test_true_scale_is_geometric_between_bounds():
    objects = (star("sun"), star("dwarf", radius=6_957.0))
    _, state = _sized(objects, "true-scale")
    policy = POLICIES["true-scale"]
    assert state.radius_of("sun") == pytest.approx(policy.max_visual_size)
    assert state.radius_of("dwarf") == pytest.approx(policy.min_visual_size)

    objects = (star("a", radius=100.0), star("b", radius=1_000.0), star("c", radius=10_000.0))
    _, state = _sized(objects, "true-scale")
    middle = policy.min_visual_size * math.sqrt(policy.max_visual_size / policy.min_visual_size)
    assert state.radius_of("b") == pytest.approx(middle)


def test_true_scale_is_linear_when_data_spans_the_visual_band():
    policy = POLICIES["true-scale"]
    ratio = policy.max_visual_size / policy.min_visual_size
    objects = (star("a", radius=1_000.0), star("b", radius=20_000.0), star("c", radius=1_000.0 * ratio))
    _, state = _sized(objects, "true-scale")
    assert state.radius_of("b") == pytest.approx(policy.min_visual_size * 20.0)


def test_star_ceiling_override_applies_to_every_sizing_mode():
    policy = POLICIES["compressed"].with_overrides(star_ceiling=0.3)
    objects = (star("sun"), body("earth", "sun", 1.0))
    tree = OrbitTree.build(objects)
    assert safe_star_ceiling(tree.by_id["sun"], tree, policy) == 0.3
