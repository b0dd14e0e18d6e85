"""Public layout API contracts."""

from gridboard.api.errors import ConfigurationError, GeometryError, LayoutError, OutOfBoundsRequest
from gridboard.api.events import (
    BlockChanged,
    BlockCreated,
    BlockLifecycleEvent,
    BlockRemoved,
    EditorToggled,
    EventBus,
    PositionalRecord,
    Scope,
    Subscription,
    create_event_bus,
)
from gridboard.api.geometry import BlockRect, CellCoord, CellSize, Direction, Gutter, Rect, Stretch
from gridboard.api.layout import (
    LayoutConfig,
    LayoutRenderer,
    LayoutSurface,
    NullRenderer,
    SurfaceSize,
    create_layout,
)
from gridboard.api.logging import LayoutLoggingConfig

__all__ = [
    "BlockChanged",
    "BlockCreated",
    "BlockLifecycleEvent",
    "BlockRect",
    "BlockRemoved",
    "CellCoord",
    "CellSize",
    "ConfigurationError",
    "Direction",
    "EditorToggled",
    "EventBus",
    "GeometryError",
    "Gutter",
    "LayoutConfig",
    "LayoutError",
    "LayoutLoggingConfig",
    "LayoutRenderer",
    "LayoutSurface",
    "NullRenderer",
    "OutOfBoundsRequest",
    "PositionalRecord",
    "Rect",
    "Scope",
    "Stretch",
    "Subscription",
    "SurfaceSize",
    "create_event_bus",
    "create_layout",
]
