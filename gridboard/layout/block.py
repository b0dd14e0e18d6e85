"""Block placement and its move/resize/stretch interactions."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from gridboard.api.events import (
    BlockCommitted,
    BlockRemovalRequested,
    GestureEnded,
    GestureKind,
    GestureStarted,
    Scope,
)
from gridboard.api.geometry import (
    BlockRect,
    CellSize,
    Direction,
    Gutter,
    Rect,
    Stretch,
    cells_from_pixels,
    clamp,
)
from gridboard.layout.records import to_record
from gridboard.runtime.context import LayoutContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DragBounds:
    """Legal range of a moving block's top-left corner, inclusive."""

    top: int
    left: int
    bottom: int
    right: int


@dataclass(frozen=True, slots=True)
class ResizeLimits:
    """Per-axis cell-delta limits captured at resize start, inclusive."""

    horizontal: tuple[int, int] = (0, 0)
    vertical: tuple[int, int] = (0, 0)


class BlockModel:
    """A placed rectangle in grid-cell units.

    Committed fields (`rect`) only change when a gesture ends, when a stretch
    hover starts or stops, or through `set_rect`. While a gesture runs the
    would-be rectangle is kept as a working copy and exposed as `preview`.
    """

    def __init__(
        self,
        rect: BlockRect,
        *,
        num_cols: int,
        num_rows: int,
        cell_size: CellSize,
        gutter: Gutter | None = None,
        origin_x: float = 0,
        origin_y: float = 0,
        stretch: Stretch = Stretch.NONE,
        editable: bool = True,
        context: LayoutContext | None = None,
        scope: Scope | None = None,
        element: object | None = None,
    ) -> None:
        self._context = context or LayoutContext()
        self._scope = scope or self._context.new_scope()
        self.id = self._context.ids.next_id()
        self.num_cols = num_cols
        self.num_rows = num_rows
        self.cell_size = cell_size
        self.gutter = gutter or Gutter()
        self.origin_x = origin_x
        self.origin_y = origin_y
        self.element = element
        self.z_index = 0
        self._rect = rect.checked(num_cols, num_rows)
        self._stretch = Stretch(stretch)
        self._editable = editable
        self._gesture: GestureKind | None = None
        self._start_rect = self._rect
        self._work = self._rect
        self._bounds = DragBounds(0, 0, 0, 0)
        self._limits = ResizeLimits()
        self._direction = Direction()
        self._preview: Rect | None = None
        self._saved_placement: BlockRect | None = None
        self._hover_attached = False
        self._sync_hover_handlers()

    def __repr__(self) -> str:
        return f"BlockModel({self.id}, {self._rect}, stretch={self._stretch.name})"

    @property
    def rect(self) -> BlockRect:
        """Current grid-unit fields, including a stretch hover overwrite."""
        return self._rect

    @property
    def placement(self) -> BlockRect:
        """Persistent placement: the saved rect while a stretch hover is active."""
        return self._saved_placement or self._rect

    @property
    def stretch(self) -> Stretch:
        return self._stretch

    @property
    def editable(self) -> bool:
        return self._editable

    @property
    def gesture(self) -> GestureKind | None:
        return self._gesture

    @property
    def preview(self) -> Rect | None:
        return self._preview

    @property
    def hovered(self) -> bool:
        return self._saved_placement is not None

    @property
    def hover_attached(self) -> bool:
        return self._hover_attached

    def to_record(self) -> dict[str, int | str]:
        return to_record(self.placement, self._stretch)

    # Placement

    def place(self) -> Rect:
        """Absolute surface rectangle of the committed fields."""
        return self._surface_rect(self._rect)

    def update_pos(self, cell_size: CellSize) -> Rect:
        """Adopt a new cell size after a container resize; grid units are kept."""
        self.cell_size = cell_size
        if self._gesture is not None:
            self._preview = self._surface_rect(self._work)
        return self.place()

    def set_rect(self, rect: BlockRect) -> Rect | None:
        """Replace committed fields programmatically.

        Refused with `None` while a gesture or stretch hover owns the fields.
        Raises OutOfBoundsRequest for a rectangle outside the grid.
        """
        if self._gesture is not None or self.hovered:
            return None
        self._rect = rect.checked(self.num_cols, self.num_rows)
        self._publish(BlockCommitted(block_id=self.id, rect=self._rect))
        return self.place()

    def _surface_rect(self, rect: BlockRect) -> Rect:
        cell_w, cell_h = self.cell_size.width, self.cell_size.height
        gutter_w, gutter_h = self.gutter.width, self.gutter.height
        return Rect(
            x=self.origin_x + rect.left * cell_w + gutter_w / 2,
            y=self.origin_y + rect.top * cell_h + gutter_h / 2,
            w=rect.width * cell_w - gutter_w,
            h=rect.height * cell_h - gutter_h,
        )

    # Move

    def on_drag_start(self) -> bool:
        if not self._begin_gesture(GestureKind.MOVE):
            return False
        self._bounds = DragBounds(
            top=0,
            left=0,
            bottom=self.num_rows - self._rect.height,
            right=self.num_cols - self._rect.width,
        )
        return True

    def on_drag(self, delta_x: float, delta_y: float) -> Rect | None:
        if self._gesture is not GestureKind.MOVE:
            return None
        start, bounds = self._start_rect, self._bounds
        top = start.top + cells_from_pixels(delta_y, self.cell_size.height)
        left = start.left + cells_from_pixels(delta_x, self.cell_size.width)
        self._work = BlockRect(
            top=clamp(top, bounds.top, bounds.bottom),
            left=clamp(left, bounds.left, bounds.right),
            width=start.width,
            height=start.height,
        )
        self._preview = self._surface_rect(self._work)
        return self._preview

    def on_drag_end(self) -> BlockRect | None:
        if self._gesture is not GestureKind.MOVE:
            return None
        return self._commit_gesture(GestureKind.MOVE)

    # Resize

    def on_resize_start(self, direction: str | Direction) -> bool:
        if isinstance(direction, str):
            direction = Direction.parse(direction)
        if not self._begin_gesture(GestureKind.RESIZE):
            return False
        rect = self._rect
        horizontal = (0, 0)
        if direction.horizontal == "e":
            horizontal = (-(rect.width - 1), self.num_cols - rect.left - rect.width)
        elif direction.horizontal == "w":
            horizontal = (-rect.left, rect.width - 1)
        vertical = (0, 0)
        if direction.vertical == "s":
            vertical = (-(rect.height - 1), self.num_rows - rect.top - rect.height)
        elif direction.vertical == "n":
            vertical = (-rect.top, rect.height - 1)
        self._direction = direction
        self._limits = ResizeLimits(horizontal=horizontal, vertical=vertical)
        return True

    def on_resize(self, delta_x: float, delta_y: float) -> Rect | None:
        if self._gesture is not GestureKind.RESIZE:
            return None
        start, limits, direction = self._start_rect, self._limits, self._direction
        top, left, width, height = start.top, start.left, start.width, start.height
        if direction.horizontal:
            d_cols = clamp(cells_from_pixels(delta_x, self.cell_size.width), *limits.horizontal)
            if direction.horizontal == "e":
                width += d_cols
            else:
                left += d_cols
                width -= d_cols
        if direction.vertical:
            d_rows = clamp(cells_from_pixels(delta_y, self.cell_size.height), *limits.vertical)
            if direction.vertical == "s":
                height += d_rows
            else:
                top += d_rows
                height -= d_rows
        self._work = BlockRect(top=top, left=left, width=width, height=height)
        self._preview = self._surface_rect(self._work)
        return self._preview

    def on_resize_end(self) -> BlockRect | None:
        if self._gesture is not GestureKind.RESIZE:
            return None
        return self._commit_gesture(GestureKind.RESIZE)

    def end_gesture(self) -> BlockRect | None:
        """End whichever gesture is active, e.g. on pointer loss."""
        if self._gesture is GestureKind.MOVE:
            return self.on_drag_end()
        if self._gesture is GestureKind.RESIZE:
            return self.on_resize_end()
        return None

    def _begin_gesture(self, kind: GestureKind) -> bool:
        if not self._editable or self._gesture is not None:
            return False
        self._gesture = kind
        self.z_index = self._context.z_order.raise_()
        self._start_rect = self._rect
        self._work = self._rect
        self._preview = self.place()
        self._publish(GestureStarted(block_id=self.id, kind=kind))
        return True

    def _commit_gesture(self, kind: GestureKind) -> BlockRect:
        self._rect = self._work
        self._gesture = None
        self._preview = None
        logger.debug("block %s %s committed %s", self.id, kind.value, self._rect)
        self._publish(BlockCommitted(block_id=self.id, rect=self._rect))
        self._publish(GestureEnded(block_id=self.id, kind=kind))
        return self._rect

    # Stretch and mode

    def toggle_stretch(self, kind: Stretch | str) -> Stretch:
        """Select a stretch intent; selecting the active one clears it."""
        kind = Stretch(kind)
        if self.hovered:
            self.on_hover_leave()
        self._stretch = Stretch.NONE if kind is self._stretch else kind
        self._sync_hover_handlers()
        # Stretch is part of the positional record.
        self._publish(BlockCommitted(block_id=self.id, rect=self.placement))
        return self._stretch

    def set_editable(self, editable: bool) -> None:
        """Switch between move/resize handlers and stretch-hover handlers."""
        if editable == self._editable:
            return
        if not editable:
            self.end_gesture()
        elif self.hovered:
            self.on_hover_leave()
        self._editable = editable
        self._sync_hover_handlers()

    def on_hover_enter(self) -> bool:
        if not self._hover_attached or self.hovered:
            return False
        self._saved_placement = self._rect
        self._rect = self._stretch.target(self._rect, self.num_cols, self.num_rows)
        self.z_index = self._context.z_order.raise_()
        self.place()
        return True

    def on_hover_leave(self) -> bool:
        saved = self._saved_placement
        if saved is None:
            return False
        self._rect = saved
        self._saved_placement = None
        self.place()
        return True

    def _sync_hover_handlers(self) -> None:
        # Hover handlers and gesture handlers are never attached together.
        self._hover_attached = not self._editable and self._stretch is not Stretch.NONE

    def request_removal(self) -> None:
        self._publish(BlockRemovalRequested(block_id=self.id))

    def _publish(self, event: object) -> None:
        self._context.events.publish(self._scope, event)
