from __future__ import annotations

import itertools

import pytest

from gridboard.api.errors import OutOfBoundsRequest
from gridboard.api.events import (
    BlockCommitted,
    BlockRemovalRequested,
    GestureEnded,
    GestureKind,
    GestureStarted,
    Scope,
)
from gridboard.api.geometry import RESIZE_HANDLES, BlockRect, CellSize, Rect, Stretch
from gridboard.runtime.context import LayoutContext
from tests.gridboard.conftest import make_block


def test_place_derives_surface_rect_from_grid_units_and_gutter() -> None:
    block = make_block(BlockRect(top=2, left=3, width=4, height=5))
    assert block.place() == Rect(x=3 * 40 + 2.5, y=2 * 40 + 2.5, w=4 * 40 - 5, h=5 * 40 - 5)


def test_place_is_idempotent() -> None:
    block = make_block(BlockRect(1, 1, 2, 2))
    assert block.place() == block.place()
    assert block.rect == BlockRect(1, 1, 2, 2)


def test_place_includes_surface_origin() -> None:
    block = make_block(BlockRect(0, 0, 1, 1), origin_x=10, origin_y=20)
    assert block.place() == Rect(12.5, 22.5, 35, 35)


def test_construction_rejects_out_of_bounds_rect() -> None:
    with pytest.raises(OutOfBoundsRequest):
        make_block(BlockRect(0, 18, 3, 1))


def test_update_pos_keeps_grid_units_and_recomputes_geometry() -> None:
    block = make_block(BlockRect(top=2, left=3, width=4, height=5))
    before = block.place()

    after = block.update_pos(CellSize(30, 50))

    assert block.rect == BlockRect(2, 3, 4, 5)
    assert after != before
    assert after == Rect(x=3 * 30 + 2.5, y=2 * 50 + 2.5, w=4 * 30 - 5, h=5 * 50 - 5)


def test_drag_previews_without_committing_then_commits_on_end() -> None:
    context = LayoutContext()
    scope = Scope("layout")
    committed: list[BlockRect] = []
    context.events.subscribe(scope, BlockCommitted, lambda event: committed.append(event.rect))
    block = make_block(BlockRect(1, 1, 2, 2), context=context, scope=scope)

    assert block.on_drag_start()
    preview = block.on_drag(81, -41)

    assert block.rect == BlockRect(1, 1, 2, 2)
    assert preview == block.preview
    assert preview.x == 3 * 40 + 2.5
    assert preview.y == 0 * 40 + 2.5
    assert committed == []

    assert block.on_drag_end() == BlockRect(0, 3, 2, 2)
    assert block.rect == BlockRect(0, 3, 2, 2)
    assert block.preview is None
    assert committed == [BlockRect(0, 3, 2, 2)]


def test_drag_deltas_are_relative_to_gesture_start() -> None:
    block = make_block(BlockRect(5, 5, 1, 1))
    block.on_drag_start()
    block.on_drag(40, 0)
    block.on_drag(80, 0)
    block.on_drag(40, 40)
    assert block.on_drag_end() == BlockRect(6, 6, 1, 1)


def test_drag_clamps_to_grid_instead_of_rejecting() -> None:
    block = make_block(BlockRect(3, 3, 4, 2))
    block.on_drag_start()
    block.on_drag(-10_000, 10_000)
    assert block.on_drag_end() == BlockRect(top=13, left=0, width=4, height=2)

    block.on_drag_start()
    block.on_drag(10_000, -10_000)
    assert block.on_drag_end() == BlockRect(top=0, left=16, width=4, height=2)


def test_drag_start_raises_z_order() -> None:
    context = LayoutContext()
    first = make_block(BlockRect(0, 0, 1, 1), context=context)
    second = make_block(BlockRect(1, 1, 1, 1), context=context)
    first.on_drag_start()
    first.on_drag_end()
    second.on_drag_start()
    second.on_drag_end()
    assert second.z_index > first.z_index
    first.on_resize_start("e")
    assert first.z_index > second.z_index


def test_samples_without_start_are_ignored() -> None:
    block = make_block(BlockRect(1, 1, 2, 2))
    assert block.on_drag(400, 400) is None
    assert block.on_drag_end() is None
    assert block.on_resize(400, 400) is None
    assert block.on_resize_end() is None
    assert block.rect == BlockRect(1, 1, 2, 2)


def test_second_gesture_is_refused_while_one_is_active() -> None:
    block = make_block(BlockRect(1, 1, 2, 2))
    assert block.on_drag_start()
    assert not block.on_resize_start("se")
    assert block.on_resize(100, 100) is None
    assert block.gesture is GestureKind.MOVE


def test_gesture_events_are_published_in_order() -> None:
    context = LayoutContext()
    scope = Scope("layout")
    seen: list[str] = []
    context.events.subscribe(scope, GestureStarted, lambda event: seen.append(f"start:{event.kind}"))
    context.events.subscribe(scope, BlockCommitted, lambda event: seen.append("commit"))
    context.events.subscribe(scope, GestureEnded, lambda event: seen.append(f"end:{event.kind}"))
    block = make_block(BlockRect(1, 1, 2, 2), context=context, scope=scope)

    block.on_resize_start("s")
    block.on_resize(0, 40)
    block.on_resize_end()

    assert seen == ["start:resize", "commit", "end:resize"]


def test_resize_east_clamps_to_grid_edge() -> None:
    block = make_block(BlockRect(top=0, left=0, width=3, height=2))
    block.on_resize_start("e")
    block.on_resize(25 * 40, 0)
    assert block.on_resize_end() == BlockRect(top=0, left=0, width=20, height=2)


def test_resize_west_and_north_keep_opposite_edge() -> None:
    block = make_block(BlockRect(top=4, left=6, width=3, height=3))
    block.on_resize_start("nw")
    block.on_resize(-80, -40)
    assert block.on_resize_end() == BlockRect(top=3, left=4, width=5, height=4)
    assert block.rect.right == 9
    assert block.rect.bottom == 7


def test_resize_cannot_shrink_below_one_cell() -> None:
    block = make_block(BlockRect(top=4, left=6, width=3, height=3))
    block.on_resize_start("se")
    block.on_resize(-10_000, -10_000)
    assert block.on_resize_end() == BlockRect(top=4, left=6, width=1, height=1)

    block.on_resize_start("nw")
    block.on_resize(10_000, 10_000)
    assert block.on_resize_end() == BlockRect(top=4, left=6, width=1, height=1)


def test_resize_corner_axes_are_independent() -> None:
    block = make_block(BlockRect(top=13, left=0, width=2, height=2))
    block.on_resize_start("se")
    block.on_resize(120, 10_000)
    assert block.on_resize_end() == BlockRect(top=13, left=0, width=5, height=2)


def test_single_axis_handle_ignores_other_axis() -> None:
    block = make_block(BlockRect(top=2, left=2, width=2, height=2))
    block.on_resize_start("n")
    block.on_resize(400, -40)
    assert block.on_resize_end() == BlockRect(top=1, left=2, width=2, height=3)


@pytest.mark.parametrize("direction", RESIZE_HANDLES)
def test_resize_invariants_hold_for_every_direction(direction: str) -> None:
    starts = [BlockRect(0, 0, 1, 1), BlockRect(0, 0, 20, 15), BlockRect(7, 9, 3, 4), BlockRect(14, 19, 1, 1)]
    deltas = (-10_000, -60, -20, 0, 20, 60, 10_000)
    for start, dx, dy in itertools.product(starts, deltas, deltas):
        block = make_block(start)
        block.on_resize_start(direction)
        block.on_resize(dx, dy)
        rect = block.on_resize_end()
        assert rect is not None
        assert rect.fits(20, 15), (start, direction, dx, dy, rect)


def test_unknown_resize_direction_raises() -> None:
    block = make_block(BlockRect(0, 0, 1, 1))
    with pytest.raises(ValueError):
        block.on_resize_start("up")
    assert block.gesture is None


def test_end_gesture_commits_last_preview() -> None:
    block = make_block(BlockRect(0, 0, 2, 2))
    block.on_resize_start("e")
    block.on_resize(80, 0)
    assert block.end_gesture() == BlockRect(0, 0, 4, 2)
    assert block.gesture is None
    assert block.end_gesture() is None


def test_update_pos_during_gesture_refreshes_preview() -> None:
    block = make_block(BlockRect(0, 0, 2, 2))
    block.on_drag_start()
    block.on_drag(40, 0)
    block.update_pos(CellSize(20, 20))
    assert block.preview == Rect(1 * 20 + 2.5, 2.5, 2 * 20 - 5, 2 * 20 - 5)


def test_stretch_toggle_is_exclusive_and_clears_on_repeat() -> None:
    block = make_block(BlockRect(0, 0, 1, 1))
    assert block.toggle_stretch(Stretch.HORIZONTAL) is Stretch.HORIZONTAL
    assert block.toggle_stretch("v") is Stretch.VERTICAL
    assert block.toggle_stretch(Stretch.VERTICAL) is Stretch.NONE


def test_hover_is_inert_while_editable() -> None:
    block = make_block(BlockRect(2, 3, 4, 5), stretch=Stretch.FULL)
    assert not block.hover_attached
    assert block.on_hover_enter() is False
    assert block.rect == BlockRect(2, 3, 4, 5)


@pytest.mark.parametrize(
    ("stretch", "expanded"),
    [
        (Stretch.FULL, BlockRect(0, 0, 20, 15)),
        (Stretch.VERTICAL, BlockRect(0, 3, 4, 15)),
        (Stretch.HORIZONTAL, BlockRect(2, 0, 20, 5)),
    ],
)
def test_stretch_hover_round_trip(stretch: Stretch, expanded: BlockRect) -> None:
    block = make_block(BlockRect(2, 3, 4, 5), stretch=stretch, editable=False)
    assert block.hover_attached

    assert block.on_hover_enter()
    assert block.rect == expanded
    assert block.place() == make_block(expanded).place()
    assert block.to_record()["top"] == 2

    assert block.on_hover_leave()
    assert block.rect == BlockRect(2, 3, 4, 5)
    assert not block.hovered


def test_hover_enter_brings_block_to_front() -> None:
    context = LayoutContext()
    other = make_block(BlockRect(0, 0, 1, 1), context=context)
    other.on_drag_start()
    other.on_drag_end()
    block = make_block(BlockRect(2, 3, 4, 5), stretch=Stretch.FULL, editable=False, context=context)
    block.on_hover_enter()
    assert block.z_index > other.z_index


def test_entering_edit_mode_detaches_and_restores_hover() -> None:
    block = make_block(BlockRect(2, 3, 4, 5), stretch=Stretch.FULL, editable=False)
    block.on_hover_enter()

    block.set_editable(True)

    assert block.rect == BlockRect(2, 3, 4, 5)
    assert not block.hover_attached
    assert block.on_drag_start()


def test_leaving_edit_mode_ends_gesture_and_attaches_hover() -> None:
    block = make_block(BlockRect(2, 3, 4, 5), stretch=Stretch.HORIZONTAL)
    block.on_drag_start()
    block.on_drag(40, 0)

    block.set_editable(False)

    assert block.gesture is None
    assert block.rect == BlockRect(2, 4, 4, 5)
    assert block.hover_attached
    assert not block.on_drag_start()


def test_clearing_stretch_while_hovered_restores_placement() -> None:
    block = make_block(BlockRect(2, 3, 4, 5), stretch=Stretch.FULL, editable=False)
    block.on_hover_enter()
    block.toggle_stretch(Stretch.FULL)
    assert block.rect == BlockRect(2, 3, 4, 5)
    assert not block.hover_attached


def test_request_removal_publishes_block_id() -> None:
    context = LayoutContext()
    scope = Scope("layout")
    seen: list[str] = []
    context.events.subscribe(scope, BlockRemovalRequested, lambda event: seen.append(event.block_id))
    block = make_block(BlockRect(0, 0, 1, 1), context=context, scope=scope)
    block.request_removal()
    assert seen == [block.id]


def test_set_rect_commits_and_publishes() -> None:
    context = LayoutContext()
    scope = Scope("layout")
    committed: list[BlockRect] = []
    context.events.subscribe(scope, BlockCommitted, lambda event: committed.append(event.rect))
    block = make_block(BlockRect(0, 0, 1, 1), context=context, scope=scope)

    assert block.set_rect(BlockRect(1, 2, 3, 4)) == Rect(2 * 40 + 2.5, 40 + 2.5, 3 * 40 - 5, 4 * 40 - 5)
    assert block.rect == BlockRect(1, 2, 3, 4)
    assert committed == [BlockRect(1, 2, 3, 4)]
    with pytest.raises(OutOfBoundsRequest):
        block.set_rect(BlockRect(0, 19, 2, 1))


def test_set_rect_is_refused_during_gesture() -> None:
    block = make_block(BlockRect(0, 0, 1, 1))
    block.on_drag_start()
    assert block.set_rect(BlockRect(5, 5, 1, 1)) is None
    block.on_drag(40, 0)
    assert block.on_drag_end() == BlockRect(0, 1, 1, 1)


def test_set_rect_is_refused_during_stretch_hover() -> None:
    block = make_block(BlockRect(2, 3, 4, 5), stretch=Stretch.FULL, editable=False)
    block.on_hover_enter()
    assert block.set_rect(BlockRect(0, 0, 1, 1)) is None
    block.on_hover_leave()
    assert block.rect == BlockRect(2, 3, 4, 5)


def test_stretch_toggle_publishes_commit_of_placement() -> None:
    context = LayoutContext()
    scope = Scope("layout")
    committed: list[BlockRect] = []
    context.events.subscribe(scope, BlockCommitted, lambda event: committed.append(event.rect))
    block = make_block(BlockRect(2, 3, 4, 5), stretch=Stretch.FULL, editable=False, context=context, scope=scope)
    block.on_hover_enter()

    block.toggle_stretch(Stretch.VERTICAL)

    assert committed == [BlockRect(2, 3, 4, 5)]
