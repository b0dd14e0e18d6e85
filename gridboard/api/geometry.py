"""Public geometry primitives shared by grid and block models."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import StrEnum

from gridboard.api.errors import OutOfBoundsRequest


@dataclass(frozen=True, slots=True)
class Rect:
    """Simple axis-aligned rectangle in surface pixels."""

    x: float
    y: float
    w: float
    h: float

    def contains(self, px: float, py: float) -> bool:
        """Return whether a point is inside the rectangle."""
        return self.x <= px <= self.x + self.w and self.y <= py <= self.y + self.h

    def intersects(self, other: "Rect") -> bool:
        """Return whether two rectangles share any area or edge."""
        return (
            self.x <= other.x + other.w
            and other.x <= self.x + self.w
            and self.y <= other.y + other.h
            and other.y <= self.y + self.h
        )

    @classmethod
    def spanning(cls, x0: float, y0: float, x1: float, y1: float) -> "Rect":
        """Rectangle spanned between two corner points."""
        return cls(x=min(x0, x1), y=min(y0, y1), w=abs(x1 - x0), h=abs(y1 - y0))


@dataclass(frozen=True, slots=True)
class CellCoord:
    """Grid cell coordinate in row/column space."""

    row: int
    col: int


@dataclass(frozen=True, slots=True)
class CellSize:
    """Pixel size of one grid cell."""

    width: int
    height: int


@dataclass(frozen=True, slots=True)
class Gutter:
    """Spacing subtracted from a block's rendered size."""

    width: float = 5
    height: float = 5


@dataclass(frozen=True, slots=True)
class BlockRect:
    """Block placement in grid-cell units."""

    top: int
    left: int
    width: int
    height: int

    @property
    def bottom(self) -> int:
        return self.top + self.height

    @property
    def right(self) -> int:
        return self.left + self.width

    def fits(self, num_cols: int, num_rows: int) -> bool:
        """Return whether the rectangle satisfies block invariants for a grid."""
        return (
            self.width >= 1
            and self.height >= 1
            and self.top >= 0
            and self.left >= 0
            and self.bottom <= num_rows
            and self.right <= num_cols
        )

    def checked(self, num_cols: int, num_rows: int) -> "BlockRect":
        """Return self or raise OutOfBoundsRequest."""
        if not self.fits(num_cols, num_rows):
            raise OutOfBoundsRequest(
                f"block {self} does not fit a {num_cols}x{num_rows} grid", rect=self
            )
        return self

    def clamped(self, num_cols: int, num_rows: int) -> "BlockRect":
        """Clamp size first, then position, so the rectangle fits the grid."""
        width = clamp(self.width, 1, num_cols)
        height = clamp(self.height, 1, num_rows)
        return BlockRect(
            top=clamp(self.top, 0, num_rows - height),
            left=clamp(self.left, 0, num_cols - width),
            width=width,
            height=height,
        )


class Stretch(StrEnum):
    """Hover expansion intent of a block."""

    NONE = ""
    HORIZONTAL = "h"
    VERTICAL = "v"
    FULL = "f"

    def target(self, rect: BlockRect, num_cols: int, num_rows: int) -> BlockRect:
        """Rectangle a hovered block expands to."""
        if self is Stretch.FULL:
            return BlockRect(0, 0, num_cols, num_rows)
        if self is Stretch.VERTICAL:
            return BlockRect(0, rect.left, rect.width, num_rows)
        if self is Stretch.HORIZONTAL:
            return BlockRect(rect.top, 0, num_cols, rect.height)
        return rect


@dataclass(frozen=True, slots=True)
class Direction:
    """Resize handle direction: one optional vertical and horizontal component."""

    vertical: str = ""
    horizontal: str = ""

    @classmethod
    def parse(cls, name: str) -> "Direction":
        normalized = name.strip().lower()
        if normalized not in RESIZE_HANDLES:
            raise ValueError(f"unknown resize direction: {name!r}")
        vertical = normalized[0] if normalized[0] in "ns" else ""
        horizontal = normalized[-1] if normalized[-1] in "ew" else ""
        return cls(vertical=vertical, horizontal=horizontal)

    @property
    def name(self) -> str:
        return self.vertical + self.horizontal


RESIZE_HANDLES: tuple[str, ...] = ("n", "s", "e", "w", "ne", "nw", "se", "sw")


def cells_from_pixels(delta: float, cell_px: float) -> int:
    """Convert a pixel delta to whole cells, rounding halves up."""
    return int(math.floor(delta / cell_px + 0.5))


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))
