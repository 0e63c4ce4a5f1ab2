from __future__ import annotations

import pytest

from builders import belt, body, moon, star
from orbit_layout import LayoutEngine, LayoutValidationError
from orbit_layout.core.model import CelestialObject, Classification, PhysicalProps, PointOrbit
from orbit_layout.core.tree import OrbitTree, validate_forest


def test_tree_indexes_groups_and_depths(earth_moon_system):
    tree = OrbitTree.build(earth_moon_system)
    assert [child.id for child in tree.children_of("sun")] == ["earth"]
    assert tree.depth_of("sun") == 0
    assert tree.depth_of("moon") == 2
    assert tree.primaries_deepest_first(tree.groups) == ["earth", "sun"]
    assert tree.is_satellite(tree.by_id["moon"])
    assert not tree.is_satellite(tree.by_id["earth"])


def test_children_sorted_by_source_key_with_stable_ties():
    objects = (
        star("sun"),
        body("outer", "sun", 3.0),
        belt("belt", "sun", 2.0, 2.5),
        body("twin-a", "sun", 1.0),
        body("twin-b", "sun", 1.0),
    )
    tree = OrbitTree.build(objects)
    assert [child.id for child in tree.sorted_children("sun")] == ["twin-a", "twin-b", "belt", "outer"]


def test_orbiting_other_hosts_satellites_but_root_other_does_not():
    barycenter = CelestialObject("bary", "Barycenter", Classification.OTHER)
    comet = CelestialObject(
        "comet", "Comet", Classification.OTHER, PhysicalProps(radius=5.0), PointOrbit("sun", 4.0)
    )
    objects = (
        barycenter,
        body("planet", "bary", 1.0),
        star("sun"),
        comet,
        moon("fragment", "comet", 0.0001, radius=1.0),
    )
    tree = OrbitTree.build(objects)
    assert not tree.is_satellite(tree.by_id["planet"])
    assert tree.is_satellite(tree.by_id["fragment"])


@pytest.mark.parametrize(
    "objects, object_id, rule",
    [
        ((star("sun"), star("sun")), "sun", "duplicate-id"),
        ((star("sun"), body("earth", "nowhere", 1.0)), "earth", "dangling-parent"),
        ((star("sun"), belt("belt", "sun", 3.0, 2.0)), "belt", "annulus-bounds"),
        ((star("sun"), belt("belt", "sun", -1.0, 2.0)), "belt", "annulus-bounds"),
    ],
)
def test_validation_names_object_and_rule(objects, object_id, rule):
    with pytest.raises(LayoutValidationError) as info:
        validate_forest(objects)
    assert info.value.object_id == object_id
    assert info.value.rule == rule
    assert object_id in str(info.value) and rule in str(info.value)


def test_cycles_are_rejected_even_without_validation():
    objects = (body("a", "b", 1.0), body("b", "a", 1.0))
    with pytest.raises(LayoutValidationError) as info:
        OrbitTree.build(objects, validate=False)
    assert info.value.rule == "cycle"


def test_validation_error_is_a_value_error(engine):
    with pytest.raises(ValueError):
        engine.compute_layout((star("sun"), body("earth", "missing", 1.0)), "compressed")


def test_validation_off_keeps_dangling_children_as_virtual_group():
    engine = LayoutEngine(validate=False)
    objects = (
        star("alpha", radius=800_000.0, orbit=PointOrbit("barycenter", 1.0)),
        star("beta", radius=600_000.0, orbit=PointOrbit("barycenter", 3.0)),
        body("lonely", "barycenter", 10.0),
    )
    layout = engine.compute_layout(objects, "compressed")
    # the binary pair shares the mean of its scaled distances
    assert layout["alpha"].orbit_distance == pytest.approx(16.0)
    assert layout["beta"].orbit_distance == pytest.approx(16.0)
    assert layout["lonely"].orbit_distance == pytest.approx(80.0)


def test_validation_off_keeps_first_duplicate(caplog):
    engine = LayoutEngine(validate=False)
    objects = (star("sun"), star("sun", radius=1.0), body("earth", "sun", 1.0))
    with caplog.at_level("WARNING", logger="orbit_layout.core.tree"):
        layout = engine.compute_layout(objects, "compressed")
    assert set(layout) == {"sun", "earth"}
    assert "Duplicate object id" in caplog.text
