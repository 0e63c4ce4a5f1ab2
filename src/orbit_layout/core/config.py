"""Configuration dataclasses for the orbit layout engine."""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum

from .errors import PolicyConfigError
from .model import Classification


@dataclass(frozen=True)
class LayoutCfg:
    default_physical_radius: float = 1.0
    min_decade_ratio: float = 10.0
    satellite_floor_factor: float = 2.0
    satellite_safety_floor: float = 2.0
    hierarchy_margin: float = 1.2
    child_shrink_factor: float = 0.8
    safe_clearance_ratio: float = 3.0
    belt_after_belt_spacing: float = 0.2
    base_speed: float = 1.0
    reference_period: float = 365.0  # days, one Earth year


class PolicyId(str, Enum):
    """Identifiers of the bundled view policies."""

    TRUE_SCALE = "true-scale"
    COMPRESSED = "compressed"
    SCHEMATIC_FIXED = "schematic-fixed"
    EQUIDISTANT = "equidistant"


class SizingMode(Enum):
    TRUE_SCALE = "true-scale"
    LOGARITHMIC = "logarithmic"
    FIXED = "fixed"


class SpacingMode(Enum):
    PROPORTIONAL = "proportional"
    EQUIDISTANT = "equidistant"


@dataclass(frozen=True)
class FixedSizeTable:
    """Per-classification visual sizes for fixed-size policies."""

    star: float
    planet: float
    moon: float
    belt: float
    other: float
    ring: float | None = None

    def size_for(
        self,
        classification: Classification,
        *,
        gas_giant: bool = False,
        gas_giant_multiplier: float = 1.5,
    ) -> float:
        if classification is Classification.STAR:
            return self.star
        if classification is Classification.PLANET:
            if gas_giant:
                return self.planet * gas_giant_multiplier
            return self.planet
        if classification is Classification.MOON:
            return self.moon
        if classification is Classification.BELT:
            return self.belt
        if classification is Classification.RING and self.ring is not None:
            return self.ring
        return self.other


@dataclass(frozen=True)
class ViewPolicy:
    """Scaling and sizing constants for one view mode."""

    policy_id: str
    name: str
    min_visual_size: float
    max_visual_size: float
    orbit_scale: float
    min_distance: float
    safety_multiplier: float
    sizing: SizingMode = SizingMode.LOGARITHMIC
    spacing: SpacingMode = SpacingMode.PROPORTIONAL
    fixed_sizes: FixedSizeTable | None = None
    description: str = ""
    gas_giant_multiplier: float = 1.5
    satellite_extent_factor: float = 1.0
    max_belt_width: float | None = None
    min_belt_width: float | None = None
    star_ceiling: float | None = None
    global_collision_pass: bool = False
    collision_spacing: float = 1.0

    def __post_init__(self) -> None:
        def check(condition: bool, message: str) -> None:
            if not condition:
                raise PolicyConfigError(f"policy {self.policy_id!r}: {message}")

        for name in ("min_visual_size", "max_visual_size", "orbit_scale"):
            value = getattr(self, name)
            check(math.isfinite(value) and value > 0.0, f"{name} must be positive, got {value}")
        check(
            self.min_visual_size < self.max_visual_size,
            "min_visual_size must be smaller than max_visual_size",
        )
        check(self.min_distance >= 0.0, "min_distance must not be negative")
        check(self.safety_multiplier >= 1.0, "safety_multiplier must be at least 1.0")
        check(0.0 < self.satellite_extent_factor <= 1.0, "satellite_extent_factor must be in (0, 1]")
        check(self.collision_spacing >= 0.0, "collision_spacing must not be negative")
        if self.sizing is SizingMode.FIXED:
            check(self.fixed_sizes is not None, "fixed sizing needs a fixed_sizes table")
        if self.star_ceiling is not None:
            check(self.star_ceiling > 0.0, "star_ceiling must be positive")
        if self.max_belt_width is not None and self.min_belt_width is not None:
            check(
                0.0 < self.min_belt_width <= self.max_belt_width,
                "min_belt_width must be positive and not above max_belt_width",
            )

    @property
    def is_equidistant(self) -> bool:
        return self.spacing is SpacingMode.EQUIDISTANT

    @property
    def belt_width_bounds(self) -> tuple[float, float]:
        """``(min, max)`` visual belt width."""

        upper = self.max_belt_width if self.max_belt_width is not None else self.orbit_scale * 0.5
        lower = self.min_belt_width if self.min_belt_width is not None else self.min_distance
        if lower <= 0.0:
            lower = min(upper, self.min_visual_size)
        return lower, max(lower, upper)

    def with_overrides(self, **changes: object) -> "ViewPolicy":
        return replace(self, **changes)


LAYOUT_CFG = LayoutCfg()


__all__ = [
    "LAYOUT_CFG",
    "FixedSizeTable",
    "LayoutCfg",
    "PolicyId",
    "SizingMode",
    "SpacingMode",
    "ViewPolicy",
]
