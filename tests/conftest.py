from __future__ import annotations

import pytest

from builders import body, moon, star
from orbit_layout.core.engine import LayoutEngine
from orbit_layout.core.model import CelestialObject


@pytest.fixture
def engine() -> LayoutEngine:
    return LayoutEngine()


@pytest.fixture
def earth_moon_system() -> tuple[CelestialObject, ...]:
    return (
        star("sun"),
        body("earth", "sun", 1.0, period=365.25),
        moon("moon", "earth", 0.002, period=27.32),
    )
