"""Layout runtime services."""

from gridboard.runtime.config import load_layout_env_config, resolve_log_level_name
from gridboard.runtime.context import (
    IdAllocator,
    LayoutContext,
    ZOrderService,
    create_layout_context,
    shared_layout_context,
)
from gridboard.runtime.events import EventBus, EventTopic, ScopedEventBus
from gridboard.runtime.logging import (
    configure_layout_logging,
    setup_layout_logging,
    shutdown_layout_logging,
)
from gridboard.runtime.scheduler import Debouncer, Scheduler

__all__ = [
    "Debouncer",
    "EventBus",
    "EventTopic",
    "IdAllocator",
    "LayoutContext",
    "Scheduler",
    "ScopedEventBus",
    "ZOrderService",
    "configure_layout_logging",
    "create_layout_context",
    "load_layout_env_config",
    "resolve_log_level_name",
    "setup_layout_logging",
    "shared_layout_context",
    "shutdown_layout_logging",
]
