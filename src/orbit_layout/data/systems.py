"""Sample orbital systems bundled with the package."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.model import AnnularOrbit, CelestialObject, Classification, PhysicalProps, PointOrbit

SOLAR_RADIUS_KM = 695_700.0


@dataclass(frozen=True)
class SampleSystem:
    key: str
    name: str
    description: str
    objects: tuple[CelestialObject, ...]

    def object(self, object_id: str) -> CelestialObject:
        for obj in self.objects:
            if obj.id == object_id:
                return obj
        raise KeyError(object_id)


def _star(object_id: str, name: str, radius: float, parent: Optional[str] = None, a: float = 0.0,
          period: Optional[float] = None) -> CelestialObject:
    orbit = PointOrbit(parent, a, orbital_period=period) if parent is not None else None
    return CelestialObject(object_id, name, Classification.STAR, PhysicalProps(radius=radius), orbit)


def _body(object_id: str, name: str, kind: str, radius: Optional[float], parent: str, a: float,
          period: Optional[float] = None, *, gas_giant: bool = False, eccentricity: float = 0.0) -> CelestialObject:
    return CelestialObject(
        object_id,
        name,
        Classification.parse(kind),
        PhysicalProps(radius=radius),
        PointOrbit(parent, a, eccentricity=eccentricity, orbital_period=period),
        gas_giant=gas_giant,
    )


def _annulus(object_id: str, name: str, kind: str, parent: str, inner: float, outer: float) -> CelestialObject:
    return CelestialObject(object_id, name, Classification.parse(kind), PhysicalProps(), AnnularOrbit(parent, inner, outer))


SOL = SampleSystem(
    key="sol",
    name="Sol",
    description="The solar system with its major moons, both belts and Saturn's rings.",
    objects=(
        _star("sun", "Sun", SOLAR_RADIUS_KM),
        _body("mercury", "Mercury", "planet", 2_439.7, "sun", 0.387, 87.97, eccentricity=0.206),
        _body("venus", "Venus", "planet", 6_051.8, "sun", 0.723, 224.70),
        _body("earth", "Earth", "planet", 6_371.0, "sun", 1.0, 365.25),
        _body("moon", "Moon", "moon", 1_737.4, "earth", 0.00257, 27.32),
        _body("mars", "Mars", "planet", 3_389.5, "sun", 1.524, 686.98),
        _body("phobos", "Phobos", "moon", 11.27, "mars", 0.0000627, 0.319),
        _body("deimos", "Deimos", "moon", 6.2, "mars", 0.0001568, 1.263),
        _annulus("asteroid-belt", "Asteroid Belt", "belt", "sun", 2.2, 3.2),
        _body("jupiter", "Jupiter", "planet", 69_911.0, "sun", 5.203, 4_332.59, gas_giant=True),
        _body("io", "Io", "moon", 1_821.6, "jupiter", 0.002819, 1.769),
        _body("europa", "Europa", "moon", 1_560.8, "jupiter", 0.004486, 3.551),
        _body("ganymede", "Ganymede", "moon", 2_634.1, "jupiter", 0.007155, 7.155),
        _body("callisto", "Callisto", "moon", 2_410.3, "jupiter", 0.012585, 16.69),
        _body("saturn", "Saturn", "planet", 58_232.0, "sun", 9.537, 10_759.22, gas_giant=True),
        _annulus("saturn-rings", "Saturn's Rings", "ring", "saturn", 0.000447, 0.000937),
        _body("titan", "Titan", "moon", 2_574.7, "saturn", 0.008168, 15.945),
        _body("uranus", "Uranus", "planet", 25_362.0, "sun", 19.19, 30_688.5, gas_giant=True),
        _body("neptune", "Neptune", "planet", 24_622.0, "sun", 30.07, 60_182.0, gas_giant=True),
        _annulus("kuiper-belt", "Kuiper Belt", "belt", "sun", 30.0, 50.0),
        _body("pluto", "Pluto", "dwarf-planet", 1_188.3, "sun", 39.48, 90_560.0, eccentricity=0.249),
        _body("charon", "Charon", "moon", 606.0, "pluto", 0.0001309, 6.387),
    ),
)

ALPHA_CENTAURI = SampleSystem(
    key="alpha-centauri",
    name="Alpha Centauri",
    description="Binary pair with B on its orbit around A and one planet around A.",
    objects=(
        _star("alpha-cen-a", "Alpha Centauri A", 1.2234 * SOLAR_RADIUS_KM),
        _star("alpha-cen-b", "Alpha Centauri B", 0.8632 * SOLAR_RADIUS_KM, "alpha-cen-a", 23.4, 29_187.0),
        _body("alpha-cen-a-b", "Alpha Centauri Ab", "planet", 40_000.0, "alpha-cen-a", 1.1, 400.0, gas_giant=True),
    ),
)

OVERSIZED_MOON = SampleSystem(
    key="oversized-moon",
    name="Oversized moon",
    description="A small planet whose moon is physically larger than the planet.",
    objects=(
        _star("host", "Host star", SOLAR_RADIUS_KM),
        _body("runt", "Runt", "planet", 2_000.0, "host", 1.0, 365.0),
        _body("giant-moon", "Giant moon", "moon", 5_000.0, "runt", 0.003, 20.0),
    ),
)

SYSTEM_DEFINITIONS: tuple[SampleSystem, ...] = (SOL, ALPHA_CENTAURI, OVERSIZED_MOON)

SYSTEMS: dict[str, SampleSystem] = {system.key: system for system in SYSTEM_DEFINITIONS}
SYSTEM_DISPLAY_ORDER: list[str] = [system.key for system in SYSTEM_DEFINITIONS]
DEFAULT_SYSTEM_KEY = SYSTEM_DISPLAY_ORDER[0]


__all__ = [
    "ALPHA_CENTAURI",
    "DEFAULT_SYSTEM_KEY",
    "OVERSIZED_MOON",
    "SOL",
    "SOLAR_RADIUS_KM",
    "SYSTEMS",
    "SYSTEM_DEFINITIONS",
    "SYSTEM_DISPLAY_ORDER",
    "SampleSystem",
]
