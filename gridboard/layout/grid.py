"""Cell grid model and drag-to-select protocol."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from enum import IntEnum

import numpy as np

from gridboard.api.events import (
    BlockRequested,
    GestureEnded,
    GestureKind,
    GestureStarted,
    Scope,
    Subscription,
)
from gridboard.api.geometry import BlockRect, CellCoord, Rect
from gridboard.runtime.context import IdAllocator
from gridboard.runtime.events import ScopedEventBus

logger = logging.getLogger(__name__)


class CellState(IntEnum):
    FREE = 0
    SELECTED = 1
    OCCUPIED = 2


class Cell:
    """One addressable grid unit; its state lives in the owning grid's matrix."""

    __slots__ = ("id", "column", "row", "width", "height", "x", "y", "_states")

    def __init__(
        self,
        *,
        cell_id: str,
        column: int,
        row: int,
        width: int,
        height: int,
        states: np.ndarray,
        origin_x: float = 0,
        origin_y: float = 0,
    ) -> None:
        self.id = cell_id
        self.column = column
        self.row = row
        self.width = width
        self.height = height
        self.x = origin_x + column * width
        self.y = origin_y + row * height
        self._states = states

    def __repr__(self) -> str:
        return f"Cell({self.id}, row={self.row}, col={self.column}, {self.state.name})"

    @property
    def coord(self) -> CellCoord:
        return CellCoord(row=self.row, col=self.column)

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    @property
    def state(self) -> CellState:
        return CellState(int(self._states[self.row, self.column]))

    @state.setter
    def state(self, value: CellState) -> None:
        self._states[self.row, self.column] = int(value)

    def is_free(self) -> bool:
        return self.state is CellState.FREE

    def is_selected(self) -> bool:
        return self.state is CellState.SELECTED

    def is_occupied(self) -> bool:
        return self.state is CellState.OCCUPIED


class GridModel:
    """Row-major partition of the surface into equally sized cells.

    Selection runs as `begin_selection` -> `update_selection`* ->
    `end_selection`. Every cell the overlay touches receives a drop; free
    cells become selected unless a block is being moved over the grid. At the
    end the bounding box of the selected cells is published as
    `BlockRequested` on the grid's scope.

    A grid rebuilt mid-gesture is seeded with `moving_blocks`, the ids of
    blocks whose move started before it subscribed.
    """

    def __init__(
        self,
        num_cols: int,
        num_rows: int,
        cell_width: int,
        cell_height: int,
        *,
        origin_x: float = 0,
        origin_y: float = 0,
        events: ScopedEventBus | None = None,
        scope: Scope | None = None,
        ids: IdAllocator | None = None,
        moving_blocks: Iterable[str] = (),
    ) -> None:
        if num_cols < 1 or num_rows < 1:
            raise ValueError("grid needs at least one column and one row")
        self.num_cols = num_cols
        self.num_rows = num_rows
        self.cell_width = cell_width
        self.cell_height = cell_height
        self.origin_x = origin_x
        self.origin_y = origin_y
        ids = ids or IdAllocator()
        self.id = ids.next_id()
        self._states = np.zeros((num_rows, num_cols), dtype=np.int8)
        self.cells: list[Cell] = [
            Cell(
                cell_id=ids.next_id(),
                column=col,
                row=row,
                width=cell_width,
                height=cell_height,
                states=self._states,
                origin_x=origin_x,
                origin_y=origin_y,
            )
            for row in range(num_rows)
            for col in range(num_cols)
        ]
        self._events = events
        self._scope = scope
        self._moving_blocks: set[str] = set(moving_blocks)
        self._anchor: tuple[float, float] | None = None
        self._overlay: Rect | None = None
        self._subscriptions: list[Subscription] = []
        if events is not None and scope is not None:
            self._subscriptions = [
                events.subscribe(scope, GestureStarted, self._on_gesture_started),
                events.subscribe(scope, GestureEnded, self._on_gesture_ended),
            ]

    @property
    def rect(self) -> Rect:
        return Rect(
            self.origin_x,
            self.origin_y,
            self.num_cols * self.cell_width,
            self.num_rows * self.cell_height,
        )

    @property
    def selection_overlay(self) -> Rect | None:
        """Ephemeral selection rectangle while a select gesture runs."""
        return self._overlay

    @property
    def move_in_progress(self) -> bool:
        return bool(self._moving_blocks)

    @property
    def states(self) -> np.ndarray:
        """Read-only view of the cell state matrix, indexed [row, col]."""
        view = self._states.view()
        view.flags.writeable = False
        return view

    def cell(self, row: int, col: int) -> Cell:
        if not (0 <= row < self.num_rows and 0 <= col < self.num_cols):
            raise IndexError(f"cell ({row}, {col}) outside {self.num_cols}x{self.num_rows} grid")
        return self.cells[row * self.num_cols + col]

    def cell_at(self, px: float, py: float) -> Cell | None:
        """Hit-test a surface point."""
        if not self.rect.contains(px, py):
            return None
        col = int((px - self.origin_x) // self.cell_width)
        row = int((py - self.origin_y) // self.cell_height)
        if not (0 <= row < self.num_rows and 0 <= col < self.num_cols):
            return None
        return self.cell(row, col)

    def cells_in_rect(self, rect: Rect) -> list[Cell]:
        """Cells whose area the rectangle overlaps, row-major."""
        cols = _span(rect.x - self.origin_x, rect.w, self.cell_width, self.num_cols)
        rows = _span(rect.y - self.origin_y, rect.h, self.cell_height, self.num_rows)
        if cols is None or rows is None:
            return []
        return [self.cell(row, col) for row in range(rows[0], rows[1] + 1) for col in range(cols[0], cols[1] + 1)]

    def selected_cells(self) -> list[Cell]:
        return [self.cell(int(row), int(col)) for row, col in np.argwhere(self._states == CellState.SELECTED)]

    def selection_to_block(self, cells: Iterable[Cell]) -> BlockRect:
        """Bounding box of the cells in grid units; contiguity is not required."""
        coords = np.array([(cell.row, cell.column) for cell in cells], dtype=np.int64)
        if coords.size == 0:
            raise ValueError("selection is empty")
        top, left = coords.min(axis=0)
        bottom, right = coords.max(axis=0)
        return BlockRect(
            top=int(top),
            left=int(left),
            width=int(right - left + 1),
            height=int(bottom - top + 1),
        )

    def drop_on(self, cell: Cell) -> bool:
        """Deliver a drop to a cell during a drag. Returns whether it became selected."""
        if self.move_in_progress or not cell.is_free():
            return False
        cell.state = CellState.SELECTED
        return True

    def begin_selection(self, x: float, y: float) -> Rect:
        self._anchor = (x, y)
        self._overlay = Rect(x, y, 0, 0)
        return self._overlay

    def update_selection(self, x: float, y: float) -> Rect | None:
        if self._anchor is None:
            return None
        x0, y0 = self._anchor
        self._overlay = Rect.spanning(x0, y0, x, y)
        for cell in self.cells_in_rect(self._overlay):
            self.drop_on(cell)
        return self._overlay

    def end_selection(self) -> BlockRect | None:
        """Close the overlay and request a block for the selected cells."""
        if self._anchor is None:
            return None
        self._anchor = None
        self._overlay = None
        selected = self.selected_cells()
        if not selected:
            return None
        rect = self.selection_to_block(selected)
        logger.debug("selection of %d cells -> %s", len(selected), rect)
        if self._events is not None and self._scope is not None:
            self._events.publish(self._scope, BlockRequested(rect=rect))
        # Handlers may already have marked the new block's cells occupied; keep those.
        for cell in selected:
            if cell.is_selected():
                cell.state = CellState.FREE
        return rect

    def mark_occupied(self, rects: Iterable[BlockRect]) -> None:
        """Recompute occupancy from block rectangles; selected cells outside blocks stay selected."""
        occupied = np.zeros_like(self._states, dtype=bool)
        for rect in rects:
            occupied[rect.top : rect.bottom, rect.left : rect.right] = True
        selected = self._states == CellState.SELECTED
        self._states[:] = np.where(
            occupied,
            CellState.OCCUPIED,
            np.where(selected, CellState.SELECTED, CellState.FREE),
        )

    def destroy(self) -> None:
        if self._events is not None:
            for subscription in self._subscriptions:
                self._events.unsubscribe(subscription)
        self._subscriptions = []
        self._anchor = None
        self._overlay = None
        self.cells = []

    def _on_gesture_started(self, event: GestureStarted) -> None:
        if event.kind is GestureKind.MOVE:
            self._moving_blocks.add(event.block_id)

    def _on_gesture_ended(self, event: GestureEnded) -> None:
        self._moving_blocks.discard(event.block_id)


def _span(offset: float, length: float, cell_px: int, count: int) -> tuple[int, int] | None:
    """Inclusive index range of cells overlapped by [offset, offset + length]."""
    first = math.floor(offset / cell_px)
    if length > 0:
        last = math.ceil((offset + length) / cell_px) - 1
    else:
        last = first
    if last < 0 or first >= count:
        return None
    return max(first, 0), min(last, count - 1)
