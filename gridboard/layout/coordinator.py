"""Layout coordinator: dimensions, grid overlay and the managed block collection."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TypeVar

from gridboard.api.errors import GeometryError, OutOfBoundsRequest
from gridboard.api.events import (
    BlockChanged,
    BlockCommitted,
    BlockCreated,
    BlockRemovalRequested,
    BlockRemoved,
    BlockRequested,
    EditorToggled,
    GestureKind,
    PositionalRecord,
    Subscription,
)
from gridboard.api.geometry import BlockRect, CellSize, Gutter, Rect, Stretch
from gridboard.api.layout import LayoutConfig, LayoutRenderer, NullRenderer, SurfaceSize
from gridboard.layout.block import BlockModel
from gridboard.layout.grid import GridModel
from gridboard.layout.records import dumps_records, parse_record
from gridboard.runtime.config import validate_grid_spec, validate_gutter_spec
from gridboard.runtime.context import LayoutContext, shared_layout_context
from gridboard.runtime.errors import RECOVERABLE_RECORD_ERRORS, log_recoverable
from gridboard.runtime.scheduler import Debouncer

logger = logging.getLogger(__name__)

TEvent = TypeVar("TEvent")


class LayoutCoordinator:
    """Owns the grid, the blocks and the wiring between them.

    Grid and blocks never reference each other or the coordinator; they talk
    through the context event bus on this coordinator's scope. Hosts observe
    `BlockCreated`, `BlockChanged`, `BlockRemoved` and `EditorToggled` on the
    same scope via `subscribe`.
    """

    def __init__(
        self,
        surface: SurfaceSize,
        config: LayoutConfig | None = None,
        *,
        context: LayoutContext | None = None,
        renderer: LayoutRenderer | None = None,
        records: Iterable[PositionalRecord] = (),
    ) -> None:
        self.config = config or LayoutConfig()
        self.num_cols, self.num_rows = validate_grid_spec(self.config.grid)
        gutter_w, gutter_h = validate_gutter_spec(self.config.gutter)
        self.gutter = Gutter(width=gutter_w, height=gutter_h)
        self.context = context or shared_layout_context()
        self.scope = self.context.new_scope()
        self.renderer: LayoutRenderer = renderer or NullRenderer()
        self.surface = surface
        self.cell_size = CellSize(0, 0)
        self.grid: GridModel | None = None
        self._editable = self.config.editable
        self._blocks: dict[str, BlockModel] = {}
        self._destroyed = False
        self._resize = Debouncer(
            self.context.scheduler,
            self.config.resize_debounce_seconds,
            self._apply_container_resize,
        )
        self.calc_dimensions()
        events = self.context.events
        self._subscriptions: list[Subscription] = [
            events.subscribe(self.scope, BlockRequested, self._on_block_requested),
            events.subscribe(self.scope, BlockCommitted, self._on_block_committed),
            events.subscribe(self.scope, BlockRemovalRequested, self._on_removal_requested),
        ]
        if self._editable:
            self._make_grid()
        self.load_records(records)
        logger.debug(
            "layout %s ready: %dx%d cells of %dx%d px",
            self.scope.id,
            self.num_cols,
            self.num_rows,
            self.cell_size.width,
            self.cell_size.height,
        )

    @property
    def editable(self) -> bool:
        return self._editable

    @property
    def blocks(self) -> list[BlockModel]:
        return list(self._blocks.values())

    def get_block(self, block_id: str) -> BlockModel:
        return self._blocks[block_id]

    def calc_dimensions(self, surface: SurfaceSize | None = None) -> CellSize:
        """Floor-divide a surface into cells; too small cells are fatal.

        On success the surface and cell size are adopted together; on
        `GeometryError` both keep their previous values.
        """
        surface = surface or self.surface
        cell_width = int(surface.width // self.num_cols)
        cell_height = int(surface.height // self.num_rows)
        minimum = self.config.min_cell_size
        if cell_width < minimum:
            raise GeometryError(
                f"Calculated cell width {cell_width}px is too small! "
                "Please decrease number of cells in a row."
            )
        if cell_height < minimum:
            raise GeometryError(
                f"Calculated cell height {cell_height}px is too small! "
                "Please decrease number of cells in a column."
            )
        self.surface = surface
        self.cell_size = CellSize(cell_width, cell_height)
        return self.cell_size

    def _make_grid(self) -> GridModel:
        if self.grid is not None:
            self.grid.destroy()
        self.grid = GridModel(
            self.num_cols,
            self.num_rows,
            self.cell_size.width,
            self.cell_size.height,
            origin_x=self.surface.padding_left,
            origin_y=self.surface.padding_top,
            events=self.context.events,
            scope=self.scope,
            ids=self.context.ids,
            moving_blocks=[
                block.id for block in self._blocks.values() if block.gesture is GestureKind.MOVE
            ],
        )
        self.grid.mark_occupied(block.placement for block in self._blocks.values())
        self.renderer.show_grid(self.grid)
        return self.grid

    def _drop_grid(self) -> None:
        if self.grid is None:
            return
        self.grid.destroy()
        self.grid = None
        self.renderer.hide_grid()

    def _refresh_occupancy(self) -> None:
        if self.grid is not None:
            self.grid.mark_occupied(block.placement for block in self._blocks.values())

    # Blocks

    def make_block(
        self,
        rect: BlockRect,
        stretch: Stretch = Stretch.NONE,
        element: object | None = None,
    ) -> BlockModel:
        """Create a managed block; out-of-bounds rectangles are clamped into the grid."""
        try:
            rect = rect.checked(self.num_cols, self.num_rows)
        except OutOfBoundsRequest:
            log_recoverable(logger, f"clamping out-of-bounds block request {rect}")
            rect = rect.clamped(self.num_cols, self.num_rows)
        block = BlockModel(
            rect,
            num_cols=self.num_cols,
            num_rows=self.num_rows,
            cell_size=self.cell_size,
            gutter=self.gutter,
            origin_x=self.surface.padding_left,
            origin_y=self.surface.padding_top,
            stretch=stretch,
            editable=self._editable,
            context=self.context,
            scope=self.scope,
            element=element,
        )
        self._blocks[block.id] = block
        if element is None:
            block.element = self.renderer.mount_block(block)
        block.place()
        self._refresh_occupancy()
        logger.debug("block %s created at %s", block.id, block.rect)
        self._publish(BlockCreated(block_id=block.id, record=block.to_record()))
        return block

    def load_records(self, records: Iterable[PositionalRecord]) -> list[BlockModel]:
        """Restore blocks from positional records; unusable records are skipped."""
        created: list[BlockModel] = []
        for record in records:
            try:
                rect, stretch = parse_record(record)
            except RECOVERABLE_RECORD_ERRORS:
                log_recoverable(logger, f"rejecting positional record {record!r}")
                continue
            created.append(self.make_block(rect, stretch))
        return created

    def remove_block(self, block_id: str) -> None:
        block = self._blocks.pop(block_id)
        block.end_gesture()
        block.on_hover_leave()
        self.renderer.unmount_block(block)
        self._refresh_occupancy()
        logger.debug("block %s removed", block_id)
        self._publish(BlockRemoved(block_id=block_id, record=block.to_record()))

    def records(self) -> list[PositionalRecord]:
        return [block.to_record() for block in self._blocks.values()]

    def to_json(self, *, pretty: bool = False) -> bytes:
        return dumps_records(self.records(), pretty=pretty)

    def block_rects(self) -> dict[str, Rect]:
        return {block_id: block.place() for block_id, block in self._blocks.items()}

    def end_gestures(self) -> None:
        """Close every in-flight gesture, e.g. when the pointer is lost."""
        for block in list(self._blocks.values()):
            block.end_gesture()

    # Modes and resize

    def toggle_editor(self) -> bool:
        """Switch design mode (grid, move/resize) and display mode (stretch hover)."""
        self._editable = not self._editable
        if self._editable:
            self._make_grid()
        else:
            self._drop_grid()
        for block in self._blocks.values():
            block.set_editable(self._editable)
        self._publish(EditorToggled(editable=self._editable))
        return self._editable

    def on_container_resize(self, width: float, height: float) -> None:
        """Debounce a container size change; the last size in a burst wins."""
        self._resize.trigger(width, height)

    def flush_resize(self) -> bool:
        return self._resize.flush()

    def _apply_container_resize(self, width: float, height: float) -> None:
        if self._destroyed:
            return
        self.calc_dimensions(
            SurfaceSize(
                width=width,
                height=height,
                padding_top=self.surface.padding_top,
                padding_left=self.surface.padding_left,
            )
        )
        if self._editable:
            self._make_grid()
        for block in self._blocks.values():
            block.update_pos(self.cell_size)
        logger.debug("layout %s resized to %sx%s", self.scope.id, width, height)

    # Events

    def subscribe(self, event_type: type[TEvent], handler: Callable[[TEvent], None]) -> Subscription:
        subscription = self.context.events.subscribe(self.scope, event_type, handler)
        self._subscriptions.append(subscription)
        return subscription

    def _publish(self, event: object) -> None:
        self.context.events.publish(self.scope, event)

    def _on_block_requested(self, event: BlockRequested) -> None:
        self.make_block(event.rect)

    def _on_block_committed(self, event: BlockCommitted) -> None:
        block = self._blocks.get(event.block_id)
        if block is None:
            return
        self._refresh_occupancy()
        self._publish(BlockChanged(block_id=block.id, record=block.to_record()))

    def _on_removal_requested(self, event: BlockRemovalRequested) -> None:
        if event.block_id in self._blocks:
            self.remove_block(event.block_id)

    def destroy(self) -> None:
        """Tear down: no further events, blocks unmounted, grid dropped."""
        if self._destroyed:
            return
        self._resize.cancel()
        for block in list(self._blocks.values()):
            block.end_gesture()
            self.renderer.unmount_block(block)
        self._blocks.clear()
        self._drop_grid()
        for subscription in self._subscriptions:
            self.context.events.unsubscribe(subscription)
        self._subscriptions = []
        self._destroyed = True
