"""Public layout surface contracts."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

from gridboard.api.events import PositionalRecord, Subscription
from gridboard.api.geometry import BlockRect, Rect, Stretch

if TYPE_CHECKING:
    from gridboard.layout.block import BlockModel
    from gridboard.layout.grid import GridModel
    from gridboard.runtime.context import LayoutContext

TEvent = TypeVar("TEvent")


@dataclass(frozen=True, slots=True)
class LayoutConfig:
    """Grid partition and interaction configuration."""

    grid: Sequence[int] = (20, 15)  # [cols, rows]
    gutter: Sequence[float] = (5, 5)  # [w, h]
    min_cell_size: int = 10
    resize_debounce_seconds: float = 0.1
    editable: bool = True


@dataclass(frozen=True, slots=True)
class SurfaceSize:
    """Container content box and its padding offset."""

    width: float
    height: float
    padding_top: float = 0
    padding_left: float = 0


@runtime_checkable
class LayoutRenderer(Protocol):
    """Display adapter that reads model state and writes a display tree."""

    def mount_block(self, block: "BlockModel") -> object:
        """Create a visual element for a block and return its handle."""

    def unmount_block(self, block: "BlockModel") -> None:
        """Drop the block's visual element."""

    def show_grid(self, grid: "GridModel") -> None:
        """Display the grid overlay."""

    def hide_grid(self) -> None:
        """Remove the grid overlay."""


class NullRenderer:
    """Renderer that keeps no display tree."""

    def mount_block(self, block: "BlockModel") -> object:
        return block.id

    def unmount_block(self, block: "BlockModel") -> None:
        return None

    def show_grid(self, grid: "GridModel") -> None:
        return None

    def hide_grid(self) -> None:
        return None


@runtime_checkable
class LayoutSurface(Protocol):
    """Operations a host application may call on a layout."""

    @property
    def editable(self) -> bool:
        """Return whether design mode is active."""

    def make_block(
        self,
        rect: BlockRect,
        stretch: Stretch = Stretch.NONE,
        element: object | None = None,
    ) -> "BlockModel":
        """Create and manage a block."""

    def remove_block(self, block_id: str) -> None:
        """Remove a managed block."""

    def toggle_editor(self) -> bool:
        """Switch design/display mode and return the new editable flag."""

    def on_container_resize(self, width: float, height: float) -> None:
        """Schedule a debounced recompute for a new surface size."""

    def records(self) -> list[PositionalRecord]:
        """Return positional records of all managed blocks."""

    def block_rects(self) -> dict[str, Rect]:
        """Return committed surface rectangles by block id."""

    def subscribe(self, event_type: type[TEvent], handler: Callable[[TEvent], None]) -> Subscription:
        """Subscribe to this layout's lifecycle events."""

    def destroy(self) -> None:
        """Tear the layout down."""


def create_layout(
    surface: SurfaceSize,
    config: LayoutConfig | None = None,
    *,
    context: "LayoutContext | None" = None,
    renderer: LayoutRenderer | None = None,
    records: Iterable[PositionalRecord] = (),
) -> LayoutSurface:
    """Create default layout coordinator implementation."""
    from gridboard.layout.coordinator import LayoutCoordinator

    return LayoutCoordinator(
        surface,
        config,
        context=context,
        renderer=renderer,
        records=records,
    )


__all__ = [
    "LayoutConfig",
    "LayoutRenderer",
    "LayoutSurface",
    "NullRenderer",
    "SurfaceSize",
    "create_layout",
]
