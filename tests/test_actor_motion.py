"""Tests for ActorMotionController."""

from __future__ import annotations

from actor_motion import Actor, ActorMotionController, MoveOutcome
from game_events import (
    ActorDefeated,
    ActorRespawned,
    AreaTransitionTriggered,
    GameEventQueue,
    HazardTriggered,
    HpChanged,
    MoveBlocked,
    MoveCommitted,
)
from gameplay_models import Direction, GridPos, HazardKind
from grid_model import GridLevel

ROWS = [
    "#######",
    "#..O..#",
    "#.^B.E#",
    "#######",
]


def _setup(position: GridPos, rows: list[str] = ROWS) -> tuple[ActorMotionController, GameEventQueue, Actor]:
    events = GameEventQueue()
    controller = ActorMotionController(GridLevel.from_rows(rows), events)
    return controller, events, Actor.spawn("player", position, max_hp=4)


class TestBlockedMoves:
    def test_wall_blocks(self) -> None:
        controller, events, actor = _setup(GridPos(1, 1))

        result = controller.try_move(actor, Direction.UP)

        assert result.outcome == MoveOutcome.BLOCKED
        assert actor.position == GridPos(1, 1)
        assert events.drain() == [MoveBlocked("player", Direction.UP)]

    def test_grid_edge_blocks(self) -> None:
        controller, events, actor = _setup(GridPos(0, 0), rows=["..."])

        result = controller.try_move(actor, Direction.LEFT)

        assert result.outcome == MoveOutcome.BLOCKED
        assert actor.position == GridPos(0, 0)
        assert events.drain() == [MoveBlocked("player", Direction.LEFT)]

    def test_defeated_actor_cannot_move(self) -> None:
        controller, events, actor = _setup(GridPos(1, 1))
        controller.apply_damage(actor, 4)
        events.drain()

        assert controller.try_move(actor, Direction.RIGHT).outcome == MoveOutcome.BLOCKED
        assert events.drain() == []


class TestFloorMoves:
    def test_move_updates_last_safe_tile(self) -> None:
        controller, events, actor = _setup(GridPos(1, 1))

        result = controller.try_move(actor, Direction.RIGHT)

        assert result.outcome == MoveOutcome.MOVED
        assert actor.position == GridPos(2, 1)
        assert actor.last_safe_tile == GridPos(2, 1)
        assert events.drain() == [MoveCommitted("player", GridPos(1, 1), GridPos(2, 1))]

    def test_sliding_box_is_walkable_but_not_safe(self) -> None:
        controller, _events, actor = _setup(GridPos(4, 2))

        result = controller.try_move(actor, Direction.LEFT)

        assert result.outcome == MoveOutcome.MOVED
        assert actor.position == GridPos(3, 2)
        assert actor.last_safe_tile == GridPos(4, 2)


class TestHazards:
    def test_pit_falls_then_restores_last_safe_tile(self) -> None:
        controller, events, actor = _setup(GridPos(2, 1))

        result = controller.try_move(actor, Direction.RIGHT)

        assert result.outcome == MoveOutcome.HAZARD
        assert result.hazard == HazardKind.PIT
        assert actor.is_falling
        assert actor.hp == 3
        assert controller.try_move(actor, Direction.LEFT).outcome == MoveOutcome.BLOCKED

        events.drain()
        assert controller.complete_fall(actor)
        assert actor.position == GridPos(2, 1)
        assert not actor.is_falling
        assert events.drain() == [ActorRespawned("player", GridPos(2, 1))]

    def test_repeated_falls_restore_the_same_floor_tile(self) -> None:
        controller, _events, actor = _setup(GridPos(1, 1))
        controller.try_move(actor, Direction.RIGHT)

        for _ in range(2):
            controller.try_move(actor, Direction.RIGHT)
            controller.complete_fall(actor)
            assert actor.position == GridPos(2, 1)

        assert actor.hp == 2

    def test_complete_fall_without_falling(self) -> None:
        controller, _events, actor = _setup(GridPos(1, 1))
        assert not controller.complete_fall(actor)

    def test_spike_reverts_to_previous_coordinate(self) -> None:
        controller, events, actor = _setup(GridPos(1, 2))

        result = controller.try_move(actor, Direction.RIGHT)

        assert result.outcome == MoveOutcome.HAZARD
        assert result.hazard == HazardKind.SPIKE
        assert actor.position == GridPos(1, 2)
        assert actor.last_safe_tile == GridPos(1, 2)
        assert events.drain() == [
            MoveCommitted("player", GridPos(1, 2), GridPos(2, 2)),
            HazardTriggered("player", HazardKind.SPIKE),
            HpChanged("player", 3),
            MoveCommitted("player", GridPos(2, 2), GridPos(1, 2)),
        ]


class TestTransitionAndDamage:
    def test_area_transition(self) -> None:
        controller, events, actor = _setup(GridPos(4, 2))

        result = controller.try_move(actor, Direction.RIGHT)

        assert result.outcome == MoveOutcome.TRANSITION_TRIGGERED
        assert actor.position == GridPos(5, 2)
        assert AreaTransitionTriggered("player") in events.drain()

    def test_damage_to_zero_defeats_once(self) -> None:
        controller, events, actor = _setup(GridPos(1, 1))

        controller.apply_damage(actor, 10)
        controller.apply_damage(actor, 1)

        assert actor.hp == 0
        assert actor.is_defeated
        assert events.drain() == [HpChanged("player", 0), ActorDefeated("player")]

    def test_non_positive_damage_is_ignored(self) -> None:
        controller, events, actor = _setup(GridPos(1, 1))
        controller.apply_damage(actor, 0)
        assert actor.hp == 4
        assert events.drain() == []
