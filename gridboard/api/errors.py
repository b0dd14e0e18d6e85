"""Public layout error types."""

from __future__ import annotations


class LayoutError(Exception):
    """Base class for layout engine failures."""


class ConfigurationError(LayoutError):
    """Grid or gutter spec is malformed. Raised at construction, never recovered."""


class GeometryError(LayoutError):
    """Derived cell size is below the usable minimum for the surface."""


class OutOfBoundsRequest(LayoutError):
    """A requested block rectangle violates grid bounds."""

    def __init__(self, message: str, *, rect: object | None = None) -> None:
        super().__init__(message)
        self.rect = rect


__all__ = ["ConfigurationError", "GeometryError", "LayoutError", "OutOfBoundsRequest"]
