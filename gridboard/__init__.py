"""Grid layout engine: cell selection, blocks and their interactions."""

from gridboard.api.layout import create_layout

__all__ = ["create_layout"]
