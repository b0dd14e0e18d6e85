from __future__ import annotations

import pytest

from gridboard.api.geometry import BlockRect, CellSize, Gutter
from gridboard.api.layout import LayoutConfig, SurfaceSize
from gridboard.layout.block import BlockModel
from gridboard.layout.coordinator import LayoutCoordinator
from gridboard.runtime.context import LayoutContext


class RecordingRenderer:
    def __init__(self) -> None:
        self.calls: list[tuple[str, object]] = []
        self.mounted: dict[str, object] = {}
        self.grid_visible = False

    def mount_block(self, block) -> object:
        element = f"el-{block.id}"
        self.mounted[block.id] = element
        self.calls.append(("mount_block", block.id))
        return element

    def unmount_block(self, block) -> None:
        self.mounted.pop(block.id, None)
        self.calls.append(("unmount_block", block.id))

    def show_grid(self, grid) -> None:
        self.grid_visible = True
        self.calls.append(("show_grid", grid.id))

    def hide_grid(self) -> None:
        self.grid_visible = False
        self.calls.append(("hide_grid", None))


def make_block(
    rect: BlockRect,
    *,
    num_cols: int = 20,
    num_rows: int = 15,
    cell_size: CellSize = CellSize(40, 40),
    context: LayoutContext | None = None,
    **kwargs,
) -> BlockModel:
    return BlockModel(
        rect,
        num_cols=num_cols,
        num_rows=num_rows,
        cell_size=cell_size,
        gutter=Gutter(5, 5),
        context=context or LayoutContext(),
        **kwargs,
    )


@pytest.fixture
def context() -> LayoutContext:
    return LayoutContext()


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def coordinator_factory(context: LayoutContext, renderer: RecordingRenderer):
    def _make(
        width: float = 800,
        height: float = 600,
        records=(),
        **config,
    ) -> LayoutCoordinator:
        return LayoutCoordinator(
            SurfaceSize(width=width, height=height),
            LayoutConfig(**config),
            context=context,
            renderer=renderer,
            records=records,
        )

    return _make
