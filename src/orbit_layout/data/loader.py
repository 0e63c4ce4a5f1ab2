"""Conversion of orbital system documents into celestial objects."""
from __future__ import annotations

import json
import math
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Optional

from ..core.errors import SystemFormatError
from ..core.model import AnnularOrbit, CelestialObject, Classification, Orbit, PhysicalProps, PointOrbit


def _number(value: Any, field: str, object_id: str, *, required: bool = False) -> Optional[float]:
    if value is None:
        if required:
            raise SystemFormatError(f"{object_id}: missing {field}")
        return None
    if isinstance(value, bool):
        raise SystemFormatError(f"{object_id}: {field} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise SystemFormatError(f"{object_id}: {field} must be a number, got {value!r}") from exc
    if math.isnan(number):
        raise SystemFormatError(f"{object_id}: {field} is NaN")
    return number


def _orbit_from_mapping(raw: Mapping[str, Any], object_id: str) -> Orbit:
    parent = raw.get("parent", raw.get("parent_id"))
    if not isinstance(parent, str) or not parent:
        raise SystemFormatError(f"{object_id}: orbit needs a parent id")
    inclination = _number(raw.get("inclination"), "inclination", object_id) or 0.0
    eccentricity = _number(raw.get("eccentricity"), "eccentricity", object_id) or 0.0
    if "semi_major_axis" in raw:
        return PointOrbit(
            parent_id=parent,
            semi_major_axis=_number(raw["semi_major_axis"], "semi_major_axis", object_id, required=True),
            eccentricity=eccentricity,
            inclination=inclination,
            orbital_period=_number(raw.get("orbital_period"), "orbital_period", object_id),
        )
    if "inner_radius" in raw or "outer_radius" in raw:
        return AnnularOrbit(
            parent_id=parent,
            inner_radius=_number(raw.get("inner_radius"), "inner_radius", object_id, required=True),
            outer_radius=_number(raw.get("outer_radius"), "outer_radius", object_id, required=True),
            inclination=inclination,
            eccentricity=eccentricity,
        )
    raise SystemFormatError(f"{object_id}: orbit needs semi_major_axis or inner_radius/outer_radius")


def object_from_mapping(raw: Mapping[str, Any]) -> CelestialObject:
    """Build one :class:`CelestialObject` from its document form."""

    if not isinstance(raw, Mapping):
        raise SystemFormatError(f"object entry must be a mapping, got {type(raw).__name__}")
    object_id = raw.get("id")
    if not isinstance(object_id, str) or not object_id:
        raise SystemFormatError(f"object entry without a usable id: {raw!r}")

    props = raw.get("properties") or {}
    if not isinstance(props, Mapping):
        raise SystemFormatError(f"{object_id}: properties must be a mapping")
    physical = PhysicalProps(
        radius=_number(props.get("radius"), "radius", object_id),
        mass=_number(props.get("mass"), "mass", object_id),
        temperature=_number(props.get("temperature"), "temperature", object_id),
    )

    orbit_raw = raw.get("orbit")
    orbit: Optional[Orbit] = None
    if orbit_raw is not None:
        if not isinstance(orbit_raw, Mapping):
            raise SystemFormatError(f"{object_id}: orbit must be a mapping")
        orbit = _orbit_from_mapping(orbit_raw, object_id)

    classification = Classification.parse(raw.get("classification"))
    geometry = str(raw.get("geometry_type", "")).strip().lower().replace("-", "_")
    return CelestialObject(
        id=object_id,
        name=str(raw.get("name") or object_id),
        classification=classification,
        physical=physical,
        orbit=orbit,
        gas_giant=geometry == "gas_giant",
    )


def objects_from_mapping(document: Mapping[str, Any] | Sequence[Mapping[str, Any]]) -> tuple[CelestialObject, ...]:
    """Accept either a system document with an ``objects`` list or the bare list."""

    if isinstance(document, Mapping):
        entries = document.get("objects")
        if not isinstance(entries, Sequence) or isinstance(entries, (str, bytes)):
            raise SystemFormatError("system document needs an 'objects' list")
    elif isinstance(document, Sequence) and not isinstance(document, (str, bytes)):
        entries = document
    else:
        raise SystemFormatError(f"unsupported system document type {type(document).__name__}")
    return tuple(object_from_mapping(entry) for entry in entries)


def load_system(path: str | Path) -> tuple[CelestialObject, ...]:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            document = json.load(fh)
    except json.JSONDecodeError as exc:
        raise SystemFormatError(f"{path}: invalid JSON ({exc})") from exc
    return objects_from_mapping(document)


def object_to_mapping(obj: CelestialObject) -> dict[str, Any]:
    """Document form of *obj*, the inverse of :func:`object_from_mapping`."""

    entry: dict[str, Any] = {
        "id": obj.id,
        "name": obj.name,
        "classification": obj.classification.value,
        "properties": {
            key: value
            for key, value in (
                ("radius", obj.physical.radius),
                ("mass", obj.physical.mass),
                ("temperature", obj.physical.temperature),
            )
            if value is not None
        },
    }
    if obj.gas_giant:
        entry["geometry_type"] = "gas_giant"
    orbit = obj.orbit
    if isinstance(orbit, PointOrbit):
        entry["orbit"] = {
            "parent": orbit.parent_id,
            "semi_major_axis": orbit.semi_major_axis,
            "eccentricity": orbit.eccentricity,
            "inclination": orbit.inclination,
        }
        if orbit.orbital_period is not None:
            entry["orbit"]["orbital_period"] = orbit.orbital_period
    elif isinstance(orbit, AnnularOrbit):
        entry["orbit"] = {
            "parent": orbit.parent_id,
            "inner_radius": orbit.inner_radius,
            "outer_radius": orbit.outer_radius,
            "eccentricity": orbit.eccentricity,
            "inclination": orbit.inclination,
        }
    return entry


def dump_system(objects: Sequence[CelestialObject], path: str | Path, *, system_id: str = "system",
                name: str = "") -> Path:
    path = Path(path)
    document = {"id": system_id, "name": name or system_id, "objects": [object_to_mapping(obj) for obj in objects]}
    with path.open("w", encoding="utf-8") as fh:
        json.dump(document, fh, indent=2)
    return path


__all__ = [
    "dump_system",
    "load_system",
    "object_from_mapping",
    "object_to_mapping",
    "objects_from_mapping",
]
