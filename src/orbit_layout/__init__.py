"""Visual layout engine for nested orbital systems."""

from .core.config import LAYOUT_CFG, FixedSizeTable, LayoutCfg, PolicyId, SizingMode, SpacingMode, ViewPolicy
from .core.engine import LayoutEngine, clear_layout_cache, compute_layout
from .core.errors import LayoutError, LayoutValidationError, PolicyConfigError, SystemFormatError
from .core.model import (
    AnnularOrbit,
    BeltGeometry,
    CelestialObject,
    Classification,
    LayoutEvent,
    LayoutResult,
    PhysicalProps,
    PointOrbit,
)
from .data.policies import POLICIES, get_policy

__version__ = "0.1.0"

__all__ = [
    "AnnularOrbit",
    "BeltGeometry",
    "CelestialObject",
    "Classification",
    "FixedSizeTable",
    "LAYOUT_CFG",
    "LayoutCfg",
    "LayoutEngine",
    "LayoutError",
    "LayoutEvent",
    "LayoutResult",
    "LayoutValidationError",
    "PhysicalProps",
    "POLICIES",
    "PointOrbit",
    "PolicyConfigError",
    "PolicyId",
    "SizingMode",
    "SpacingMode",
    "SystemFormatError",
    "ViewPolicy",
    "clear_layout_cache",
    "compute_layout",
    "get_policy",
]
