"""Tests for edge detection over held-control snapshots."""

from __future__ import annotations

from gameplay_models import Direction
from input_edges import ControlSnapshot, InputEdge, InputEdgeKind, PreviousEdgeState


class TestPreviousEdgeState:
    def test_move_press_is_an_edge_once(self) -> None:
        state = PreviousEdgeState()
        held = ControlSnapshot().with_move(Direction.LEFT, True)

        assert state.diff(held) == [InputEdge(InputEdgeKind.PRESS_MOVE, Direction.LEFT)]
        assert state.diff(held) == []

    def test_move_release_is_not_an_edge(self) -> None:
        state = PreviousEdgeState()
        state.diff(ControlSnapshot().with_move(Direction.LEFT, True))
        assert state.diff(ControlSnapshot()) == []

    def test_action_press_and_release(self) -> None:
        state = PreviousEdgeState()
        held = ControlSnapshot().with_action(Direction.UP, True)

        assert state.diff(held) == [InputEdge.press_direction(Direction.UP)]
        assert state.diff(held.with_action(Direction.UP, False)) == [InputEdge.release_direction(Direction.UP)]

    def test_releases_come_before_presses(self) -> None:
        state = PreviousEdgeState()
        state.diff(ControlSnapshot().with_action(Direction.UP, True))

        swapped = ControlSnapshot().with_action(Direction.DOWN, True).with_move(Direction.RIGHT, True)

        assert state.diff(swapped) == [
            InputEdge.release_direction(Direction.UP),
            InputEdge.press_move(Direction.RIGHT),
            InputEdge.press_direction(Direction.DOWN),
        ]

    def test_independent_sources_do_not_share_state(self) -> None:
        keyboard = PreviousEdgeState()
        scripted = PreviousEdgeState()
        held = ControlSnapshot().with_move(Direction.UP, True)

        keyboard.diff(held)

        assert scripted.diff(held) == [InputEdge.press_move(Direction.UP)]
