"""Exceptions raised by the orbit layout engine."""
from __future__ import annotations


class LayoutError(Exception):
    """Base class for all layout engine errors."""


class LayoutValidationError(LayoutError, ValueError):
    """The object set is not a well-formed orbital forest."""

    def __init__(self, object_id: str, rule: str, message: str) -> None:
        self.object_id = object_id
        self.rule = rule
        super().__init__(f"{object_id}: {message} [{rule}]")


class PolicyConfigError(LayoutError, ValueError):
    """A view policy carries inconsistent constants."""


class SystemFormatError(LayoutError, ValueError):
    """A system document could not be converted into celestial objects."""


__all__ = [
    "LayoutError",
    "LayoutValidationError",
    "PolicyConfigError",
    "SystemFormatError",
]
