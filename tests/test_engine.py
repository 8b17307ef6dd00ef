"""
Test script for the puzzle engine building blocks

Covers:
1. PieceStore mutations and queries
2. Coordinate conversion and drop resolution
3. DragController clamping, z-order and disabling
4. SecretGestureRecognizer sequences

Usage:
    python tests/test_engine.py
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tifpuzzle.engine import (
    DragController,
    DragState,
    DropOutcome,
    EventHub,
    GeometrySnapshot,
    ManualScheduler,
    PieceStore,
    Point,
    PuzzleEvent,
    Rect,
    SecretGestureRecognizer,
    Tile,
    cell_center,
    drag_bounds,
    resolve_drop,
    secret_sequence_for,
    target_local_position,
    to_global,
    to_grid_local,
)


# Grid square at (20, 60), 300 wide -> 100 per cell on a 3x3 grid.
# Working area starts at y=400 and is 400x400. Control bar ends at y=50.
GEOMETRY = GeometrySnapshot(
    grid_rect=Rect(20, 60, 300, 300),
    working_rect=Rect(0, 400, 400, 400),
    control_bar_bottom=50,
)
CELL = 100.0


def make_tiles(grid_size: int = 3):
    return [Tile.create(r, c, grid_size, Point(200, 200))
            for r in range(grid_size) for c in range(grid_size)]


def test_piece_store():
    """Test PieceStore lookups and mutations."""
    print("\n" + "="*60)
    print("TEST: PieceStore")
    print("="*60)

    store = PieceStore(make_tiles())
    print(f"  Tiles: {len(store)}")
    assert len(store) == 9
    assert [t.id for t in store] == list(range(9))
    assert store.get(5).cell == (1, 2)

    store.set_position(3, Point(10, 20))
    assert store.get(3).position == Point(10, 20)

    store.set_placed(3)
    assert [t.id for t in store.unplaced()] == [0, 1, 2, 4, 5, 6, 7, 8]
    assert not store.all_placed()

    store.bump_z_index(7)
    store.bump_z_index(2)
    assert store.get(7).z_index == 1
    assert store.get(2).z_index == 2
    assert store.max_z_index() == 2

    with pytest.raises(KeyError):
        store.get(42)

    store.replace_all(make_tiles(4))
    assert len(store) == 16
    assert PieceStore().all_placed() is False

    print("  [PASS] PieceStore tests")


def test_coordinate_conversion():
    """Test local -> global -> grid-local conversions."""
    print("\n" + "="*60)
    print("TEST: Coordinate Conversion")
    print("="*60)

    local = Point(170, -190)
    global_point = to_global(local, GEOMETRY.working_rect)
    grid_local = to_grid_local(global_point, GEOMETRY.grid_rect)
    print(f"  local={local} global={global_point} grid={grid_local}")

    assert global_point == Point(170, 210)
    assert grid_local == Point(150, 150)
    assert cell_center(1, 1, CELL) == Point(150, 150)

    tile = Tile.create(1, 1, 3, Point(0, 0))
    assert target_local_position(tile, GEOMETRY, CELL) == Point(170, -190)
    assert target_local_position(tile, GeometrySnapshot(), CELL) is None

    print("  [PASS] Coordinate conversion tests")


def test_drop_resolution():
    """Test the correct-cell-and-near-center snap rule."""
    print("\n" + "="*60)
    print("TEST: Drop Resolution")
    print("="*60)

    center_tile = Tile.create(1, 1, 3, Point(0, 0))

    # Exactly at the cell center
    result = resolve_drop(center_tile, Point(170, -190), GEOMETRY, CELL)
    print(f"  At center: {result.outcome.value}, distance={result.distance}")
    assert result.accepted
    assert result.distance == 0

    # Inside the threshold
    result = resolve_drop(center_tile, Point(195, -190), GEOMETRY, CELL)
    assert result.accepted
    assert result.distance == pytest.approx(25.0)

    # Right cell, too far from center
    result = resolve_drop(center_tile, Point(205, -190), GEOMETRY, CELL)
    print(f"  35 from center: {result.outcome.value}")
    assert result.outcome is DropOutcome.TOO_FAR
    assert result.target_cell == (1, 1)

    # Another tile dropped dead-center on cell (1, 1)
    corner_tile = Tile.create(0, 0, 3, Point(0, 0))
    result = resolve_drop(corner_tile, Point(170, -190), GEOMETRY, CELL)
    print(f"  Wrong cell: {result.outcome.value}, target={result.target_cell}")
    assert result.outcome is DropOutcome.WRONG_CELL
    assert result.target_cell == (1, 1)

    # Below the grid
    result = resolve_drop(center_tile, Point(170, 200), GEOMETRY, CELL)
    assert result.outcome is DropOutcome.OUTSIDE_GRID

    # On the grid's right edge: inside the bounds, but column N does not exist
    edge_tile = Tile.create(0, 2, 3, Point(0, 0))
    result = resolve_drop(edge_tile, Point(320, -290), GEOMETRY, CELL)
    assert result.outcome is DropOutcome.WRONG_CELL
    assert result.target_cell == (0, 3)

    # No layout yet
    result = resolve_drop(center_tile, Point(170, -190), GeometrySnapshot(), CELL)
    assert result.outcome is DropOutcome.NO_GEOMETRY
    assert not result.accepted

    print("  [PASS] Drop resolution tests")


def test_drag_clamping():
    """Test that live drag positions stay inside the play area."""
    print("\n" + "="*60)
    print("TEST: Drag Clamping")
    print("="*60)

    bounds = drag_bounds(GEOMETRY, CELL)
    print(f"  Bounds: x=[{bounds.min_x}, {bounds.max_x}] y=[{bounds.min_y}, {bounds.max_y}]")
    assert bounds.min_x == 50
    assert bounds.max_x == 350
    assert bounds.min_y == -300
    assert bounds.max_y == pytest.approx(312.2)

    store = PieceStore(make_tiles())
    drag = DragController(store)

    tile = drag.move(0, Point(170, -500), GEOMETRY, CELL)
    assert tile.position.y == bounds.min_y
    assert tile.position.x == 170

    tile = drag.move(0, Point(170, 1000), GEOMETRY, CELL)
    assert tile.position.y == bounds.max_y

    tile = drag.move(0, Point(-20, 100), GEOMETRY, CELL)
    assert tile.position == Point(bounds.min_x, 100)

    tile = drag.move(0, Point(900, 100), GEOMETRY, CELL)
    assert tile.position.x == bounds.max_x

    # Without a working area nothing moves
    assert drag.move(1, Point(10, 10), GeometrySnapshot(), CELL) is None
    assert store.get(1).position == Point(200, 200)
    assert drag_bounds(GeometrySnapshot(), CELL) is None

    # Control bar not reported yet -> no bounds, nothing moves
    no_bar = GeometrySnapshot(grid_rect=GEOMETRY.grid_rect, working_rect=GEOMETRY.working_rect)
    assert no_bar.control_bar_bottom is None
    assert drag_bounds(no_bar, CELL) is None
    assert drag.move(1, Point(10, 10), no_bar, CELL) is None
    assert store.get(1).position == Point(200, 200)
    assert store.get(1).z_index == 0

    print("  [PASS] Drag clamping tests")


def test_drag_lifecycle():
    """Test drag states, z-order and snapping."""
    print("\n" + "="*60)
    print("TEST: Drag Lifecycle")
    print("="*60)

    store = PieceStore(make_tiles())
    drag = DragController(store)

    assert drag.state_of(4) is DragState.IDLE
    drag.begin(4, Point(100, 100), GEOMETRY, CELL)
    assert drag.state_of(4) is DragState.DRAGGING
    assert drag.active_tile_id == 4
    assert store.get(4).z_index == 1

    drag.begin(2, Point(100, 100), GEOMETRY, CELL)
    assert store.get(2).z_index == 2
    drag.move(4, Point(120, 100), GEOMETRY, CELL)
    assert store.get(4).z_index == 3

    # Rejected drop: tile stays where it was dragged
    result = drag.end(4, Point(205, -190), GEOMETRY, CELL)
    assert result.outcome is DropOutcome.TOO_FAR
    assert store.get(4).position == Point(120, 100)
    assert drag.state_of(4) is DragState.IDLE

    # Accepted drop: placed, centered, rotation zero
    store.get(4).rotation = 90.0
    drag.begin(4, Point(190, -180), GEOMETRY, CELL)
    result = drag.end(4, Point(190, -180), GEOMETRY, CELL)
    print(f"  Snap: {result.outcome.value}, distance={result.distance:.1f}")
    assert result.accepted
    tile = store.get(4)
    assert tile.is_placed
    assert tile.rotation == 0
    assert tile.position == Point(170, -190)
    assert drag.state_of(4) is DragState.PLACED

    # Placed tiles ignore further drags
    assert drag.move(4, Point(0, 0), GEOMETRY, CELL) is None
    assert drag.end(4, Point(0, 0), GEOMETRY, CELL) is None
    assert store.get(4).position == Point(170, -190)

    print("  [PASS] Drag lifecycle tests")


def test_drag_disabled():
    """Test that drag input is ignored while disabled."""
    print("\n" + "="*60)
    print("TEST: Drag Disabled")
    print("="*60)

    enabled = {"value": False}
    store = PieceStore(make_tiles())
    drag = DragController(store, is_enabled=lambda: enabled["value"])

    assert drag.move(4, Point(10, 10), GEOMETRY, CELL) is None
    assert drag.end(4, Point(170, -190), GEOMETRY, CELL) is None
    assert store.get(4).position == Point(200, 200)
    assert not store.get(4).is_placed
    assert store.get(4).z_index == 0

    enabled["value"] = True
    assert drag.move(4, Point(10, 10), GEOMETRY, CELL) is not None

    print("  [PASS] Drag disabled tests")


def test_secret_sequence():
    """Test corner-tap toggling for both grid sizes."""
    print("\n" + "="*60)
    print("TEST: Secret Sequence")
    print("="*60)

    assert secret_sequence_for(3) == [0, 6, 8, 2]
    assert secret_sequence_for(4) == [0, 12, 15, 3]
    with pytest.raises(ValueError):
        secret_sequence_for(5)

    def tap_indices(recognizer, indices, n=3):
        return [recognizer.tap(i // n, i % n) for i in indices]

    # Exact sequence toggles once, on the last tap
    recognizer = SecretGestureRecognizer(3)
    assert tap_indices(recognizer, [0, 6, 8, 2]) == [False, False, False, True]
    assert recognizer.visible

    # One wrong cell
    recognizer = SecretGestureRecognizer(3)
    tap_indices(recognizer, [0, 6, 8, 5])
    assert not recognizer.visible

    # Rotated order
    recognizer = SecretGestureRecognizer(3)
    tap_indices(recognizer, [6, 8, 2, 0])
    assert not recognizer.visible

    # Twice in a row returns to hidden
    recognizer = SecretGestureRecognizer(3)
    tap_indices(recognizer, [0, 6, 8, 2, 0, 6, 8, 2])
    assert not recognizer.visible

    # Noise before the sequence is pushed out of the buffer
    recognizer = SecretGestureRecognizer(3)
    tap_indices(recognizer, [4, 4, 1, 0, 6, 8, 2])
    assert recognizer.visible
    assert recognizer.taps == [0, 6, 8, 2]

    # 4x4 corners
    recognizer = SecretGestureRecognizer(4)
    for row, col in [(0, 0), (3, 0), (3, 3), (0, 3)]:
        recognizer.tap(row, col)
    print(f"  4x4 taps: {recognizer.taps}, visible={recognizer.visible}")
    assert recognizer.visible

    # Switching grid size changes the target and clears the buffer
    recognizer.set_grid_size(3)
    assert recognizer.taps == []
    assert recognizer.target == [0, 6, 8, 2]

    print("  [PASS] Secret sequence tests")


def test_event_hub():
    """Test subscribers run in order and can unsubscribe."""
    print("\n" + "="*60)
    print("TEST: Event Hub")
    print("="*60)

    hub = EventHub()
    calls = []
    first = lambda tile: calls.append(("first", tile))
    second = lambda tile: calls.append(("second", tile))
    hub.subscribe(PuzzleEvent.TILE_MOVED, first)
    hub.subscribe(PuzzleEvent.TILE_MOVED, second)

    hub.emit(PuzzleEvent.TILE_MOVED, 7)
    hub.emit(PuzzleEvent.TILE_PLACED, 7)
    assert calls == [("first", 7), ("second", 7)]

    hub.unsubscribe(PuzzleEvent.TILE_MOVED, first)
    hub.unsubscribe(PuzzleEvent.TILE_MOVED, first)
    hub.emit(PuzzleEvent.TILE_MOVED, 8)
    assert calls[-1] == ("second", 8)
    assert len(calls) == 3

    print("  [PASS] Event hub tests")


def test_manual_scheduler():
    """Test clock-driven callbacks, cancellation and nested scheduling."""
    print("\n" + "="*60)
    print("TEST: Manual Scheduler")
    print("="*60)

    scheduler = ManualScheduler()
    ran = []
    scheduler.call_later(1.0, lambda: ran.append("a"))
    cancelled = scheduler.call_later(0.5, lambda: ran.append("cancelled"))
    scheduler.call_later(2.0, lambda: scheduler.call_later(1.0, lambda: ran.append("nested")))

    cancelled.cancel()
    assert not cancelled.active
    assert scheduler.pending == 2

    assert scheduler.advance(1.0) == 1
    assert ran == ["a"]
    assert scheduler.now == 1.0

    assert scheduler.run_all() == 2
    print(f"  Ran {ran} by t={scheduler.now}")
    assert ran == ["a", "nested"]
    assert scheduler.now == 3.0
    assert scheduler.next_due() == float("inf")

    print("  [PASS] Manual scheduler tests")


def main():
    """Run all tests."""
    print("\n" + "#"*60)
    print("# ENGINE TESTS")
    print("#"*60)

    tests = [
        ("PieceStore", test_piece_store),
        ("Coordinate Conversion", test_coordinate_conversion),
        ("Drop Resolution", test_drop_resolution),
        ("Drag Clamping", test_drag_clamping),
        ("Drag Lifecycle", test_drag_lifecycle),
        ("Drag Disabled", test_drag_disabled),
        ("Secret Sequence", test_secret_sequence),
        ("Event Hub", test_event_hub),
        ("Manual Scheduler", test_manual_scheduler),
    ]

    results = []
    for name, test in tests:
        try:
            test()
            results.append((name, True))
        except AssertionError as e:
            print(f"  [FAIL] {name}: {e}")
            results.append((name, False))

    print("\n" + "="*60)
    print("SUMMARY")
    print("="*60)

    all_passed = True
    for name, passed in results:
        status = "PASS" if passed else "FAIL"
        print(f"  {name}: [{status}]")
        if not passed:
            all_passed = False

    print()
    if all_passed:
        print("All tests PASSED!")
        return 0
    else:
        print("Some tests FAILED!")
        return 1


if __name__ == "__main__":
    sys.exit(main())
