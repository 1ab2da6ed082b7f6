# -*- coding: utf-8 -*-
########################
# actor_motion.py
########################
# Purpose:
# - Applies a decided grid move to an actor's discrete position.
# - Resolves walls and hazards and reports the outcome.
#
# Design notes:
# - No Qt usage. Pure gameplay logic. Reads the grid, never writes it.
# - A rejected move leaves the position unchanged, so an actor never stands on a WALL or off the grid.
# - Pit: damage, then the actor falls. The fall completes on the next beat (complete_fall) and always lands
#   on last_safe_tile, which only ever holds a FLOOR coordinate.
# - Spike: damage and an immediate revert to the pre-move coordinate. last_safe_tile is untouched.
# - A falling or defeated actor cannot move.
#
########################
# Interfaces:
# Public enums:
# - class MoveOutcome(enum.Enum): MOVED | BLOCKED | HAZARD | TRANSITION_TRIGGERED
#
# Public dataclasses:
# - Actor(actor_id: str, position: GridPos, hp: int, max_hp: int, last_safe_tile: GridPos, is_falling: bool)
#   - spawn(actor_id: str, position: GridPos, max_hp: int) -> Actor
#   - is_defeated -> bool
# - MoveResult(outcome: MoveOutcome, from_pos: GridPos, to_pos: GridPos, hazard: Optional[HazardKind])
#
# Public classes:
# - class ActorMotionController
#   - __init__(grid: GridLevel, events: GameEventQueue, *, hazard_damage: int = 1)
#   - try_move(actor: Actor, direction: Direction) -> MoveResult
#   - apply_damage(actor: Actor, amount: int) -> None
#   - complete_fall(actor: Actor) -> bool
#
# Inputs:
# - Directions decided by MovementIntentMachine (via GameSession), GridLevel tile queries.
#
# Outputs:
# - MoveCommitted, MoveBlocked, HazardTriggered, HpChanged, ActorDefeated, ActorRespawned and
#   AreaTransitionTriggered events on the session queue.
#
########################

from __future__ import annotations

from dataclasses import dataclass
import enum
import logging
from typing import Optional

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
from gameplay_models import Direction, GridPos, HazardKind, TileKind
from grid_model import GridLevel

_LOGGER = logging.getLogger(__name__)


class MoveOutcome(enum.Enum):
    MOVED = "moved"
    BLOCKED = "blocked"
    HAZARD = "hazard"
    TRANSITION_TRIGGERED = "transition_triggered"


@dataclass
class Actor:
    actor_id: str
    position: GridPos
    hp: int
    max_hp: int
    last_safe_tile: GridPos
    is_falling: bool = False

    @classmethod
    def spawn(cls, actor_id: str, position: GridPos, max_hp: int) -> Actor:
        return cls(
            actor_id=str(actor_id),
            position=position,
            hp=int(max_hp),
            max_hp=int(max_hp),
            last_safe_tile=position,
        )

    @property
    def is_defeated(self) -> bool:
        return self.hp <= 0


@dataclass(frozen=True)
class MoveResult:
    outcome: MoveOutcome
    from_pos: GridPos
    to_pos: GridPos
    hazard: Optional[HazardKind] = None


class ActorMotionController:
    def __init__(self, grid: GridLevel, events: GameEventQueue, *, hazard_damage: int = 1) -> None:
        self._grid = grid
        self._events = events
        self._hazard_damage = int(hazard_damage)

    @property
    def grid(self) -> GridLevel:
        return self._grid

    def try_move(self, actor: Actor, direction: Direction) -> MoveResult:
        from_pos = actor.position

        if actor.is_falling or actor.is_defeated:
            _LOGGER.debug("%s cannot move while falling or defeated", actor.actor_id)
            return MoveResult(outcome=MoveOutcome.BLOCKED, from_pos=from_pos, to_pos=from_pos)

        target = self._grid.target_position(from_pos, direction)
        if target is None or not self._grid.is_walkable(target.x, target.y):
            self._events.publish(MoveBlocked(actor_id=actor.actor_id, direction=direction))
            return MoveResult(outcome=MoveOutcome.BLOCKED, from_pos=from_pos, to_pos=from_pos)

        actor.position = target
        self._events.publish(MoveCommitted(actor_id=actor.actor_id, from_pos=from_pos, to_pos=target))

        tile_kind = self._grid.tile_kind_at(target.x, target.y)

        if tile_kind == TileKind.PIT:
            _LOGGER.info("%s fell into a pit at (%d, %d)", actor.actor_id, target.x, target.y)
            self._events.publish(HazardTriggered(actor_id=actor.actor_id, kind=HazardKind.PIT))
            self.apply_damage(actor, self._hazard_damage)
            actor.is_falling = True
            return MoveResult(outcome=MoveOutcome.HAZARD, from_pos=from_pos, to_pos=target, hazard=HazardKind.PIT)

        if tile_kind == TileKind.SPIKE:
            _LOGGER.info("%s hit spikes at (%d, %d)", actor.actor_id, target.x, target.y)
            self._events.publish(HazardTriggered(actor_id=actor.actor_id, kind=HazardKind.SPIKE))
            self.apply_damage(actor, self._hazard_damage)
            actor.position = from_pos
            self._events.publish(MoveCommitted(actor_id=actor.actor_id, from_pos=target, to_pos=from_pos))
            return MoveResult(outcome=MoveOutcome.HAZARD, from_pos=from_pos, to_pos=from_pos, hazard=HazardKind.SPIKE)

        if tile_kind == TileKind.AREA_TRANSITION:
            _LOGGER.info("%s reached an area transition", actor.actor_id)
            self._events.publish(AreaTransitionTriggered(actor_id=actor.actor_id))
            return MoveResult(outcome=MoveOutcome.TRANSITION_TRIGGERED, from_pos=from_pos, to_pos=target)

        if tile_kind == TileKind.FLOOR:
            actor.last_safe_tile = target
        return MoveResult(outcome=MoveOutcome.MOVED, from_pos=from_pos, to_pos=target)

    def apply_damage(self, actor: Actor, amount: int) -> None:
        if actor.is_defeated or int(amount) <= 0:
            return
        actor.hp = max(0, actor.hp - int(amount))
        self._events.publish(HpChanged(actor_id=actor.actor_id, hp=actor.hp))
        if actor.is_defeated:
            _LOGGER.info("%s was defeated", actor.actor_id)
            self._events.publish(ActorDefeated(actor_id=actor.actor_id))

    def complete_fall(self, actor: Actor) -> bool:
        if not actor.is_falling:
            return False
        actor.position = actor.last_safe_tile
        actor.is_falling = False
        self._events.publish(ActorRespawned(actor_id=actor.actor_id, position=actor.position))
        return True


def _run_unit_tests() -> None:
    grid = GridLevel.from_rows(["#####", "#.O^#", "#####"])
    events = GameEventQueue()
    controller = ActorMotionController(grid, events)
    actor = Actor.spawn("player", GridPos(1, 1), max_hp=4)

    assert controller.try_move(actor, Direction.UP).outcome == MoveOutcome.BLOCKED
    assert actor.position == GridPos(1, 1)

    pit = controller.try_move(actor, Direction.RIGHT)
    assert pit.hazard == HazardKind.PIT
    assert controller.complete_fall(actor)
    assert actor.position == GridPos(1, 1)
    assert actor.hp == 3


if __name__ == "__main__":
    _run_unit_tests()
    print("actor_motion.py: ok")
