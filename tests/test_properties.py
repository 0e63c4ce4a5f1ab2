"""Generated forests checked against the layout guarantees for every policy."""
from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from builders import belt, body, moon, star
from orbit_layout.core.checks import find_violations
from orbit_layout.core.engine import LayoutEngine
from orbit_layout.core.model import Classification
from orbit_layout.data.policies import POLICIES

RADII = st.one_of(
    st.none(),
    st.floats(min_value=1.0, max_value=2_000_000.0, allow_nan=False, allow_infinity=False),
)
AXES = st.floats(min_value=0.00001, max_value=60.0, allow_nan=False, allow_infinity=False)
WIDTHS = st.floats(min_value=0.0001, max_value=25.0, allow_nan=False, allow_infinity=False)
PLANET_KINDS = st.sampled_from([Classification.PLANET, Classification.OTHER])


@st.composite
def forests(draw):
    objects = []
    for s in range(draw(st.integers(min_value=1, max_value=2))):
        star_id = f"s{s}"
        objects.append(star(star_id, radius=draw(RADII)))
        for p in range(draw(st.integers(min_value=0, max_value=5))):
            child_id = f"{star_id}p{p}"
            if draw(st.booleans()) and p % 2:
                inner = draw(AXES)
                objects.append(belt(child_id, star_id, inner, inner + draw(WIDTHS)))
                continue
            objects.append(
                body(
                    child_id,
                    star_id,
                    draw(AXES),
                    radius=draw(RADII),
                    kind=draw(PLANET_KINDS),
                    gas_giant=draw(st.booleans()),
                )
            )
            for m in range(draw(st.integers(min_value=0, max_value=3))):
                moon_id = f"{child_id}m{m}"
                if draw(st.integers(min_value=0, max_value=4)) == 0:
                    inner = draw(AXES) / 1000.0
                    objects.append(
                        belt(moon_id, child_id, inner, inner + draw(WIDTHS) / 1000.0, kind=Classification.RING)
                    )
                    continue
                objects.append(moon(moon_id, child_id, draw(AXES) / 1000.0, radius=draw(RADII)))
                if draw(st.integers(min_value=0, max_value=3)) == 0:
                    objects.append(moon(f"{moon_id}x", moon_id, draw(AXES) / 100_000.0, radius=draw(RADII)))
    return tuple(objects)


@settings(deadline=None, max_examples=60)
@given(objects=forests(), policy_id=st.sampled_from(sorted(POLICIES)), collision=st.booleans())
def test_generated_layouts_keep_every_guarantee(objects, policy_id, collision):
    engine = LayoutEngine()
    policy = engine.policy_for(policy_id).with_overrides(global_collision_pass=collision)
    layout = engine.compute_layout(objects, policy)
    assert set(layout) == {obj.id for obj in objects}
    violations = find_violations(objects, layout, policy)
    assert violations == [], [str(v) for v in violations]


@settings(deadline=None, max_examples=30)
@given(objects=forests(), policy_id=st.sampled_from(sorted(POLICIES)))
def test_recomputation_is_value_equal(objects, policy_id):
    engine = LayoutEngine()
    first = engine.compute_layout(objects, policy_id)
    assert engine.compute_layout(objects, policy_id) is first
    engine.clear_layout_cache()
    assert dict(engine.compute_layout(objects, policy_id)) == dict(first)
