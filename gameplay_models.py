# -*- coding: utf-8 -*-
########################
# gameplay_models.py
########################
# Purpose:
# - Core value types shared by the timing engine, the state machines and the grid.
# - Defines directions, tile kinds, grid positions and the construction error type.
#
# Design notes:
# - Keep these models stable. Prefer extending with new optional fields rather than breaking changes.
# - No Qt usage. These are plain enums and dataclasses.
# - Screen convention: y grows downward, so UP is (0, -1).
#
########################
# Interfaces:
# Public enums:
# - class Direction(enum.Enum): NONE | UP | DOWN | LEFT | RIGHT
#   - delta() -> tuple[int, int]
# - class TileKind(enum.Enum): FLOOR | WALL | PIT | SPIKE | SLIDING_BOX | AREA_TRANSITION
# - class HazardKind(enum.Enum): PIT | SPIKE
# - class ActionTier(enum.Enum): LIGHT | HEAVY
#
# Public dataclasses:
# - GridPos(x: int, y: int)
#   - step(direction: Direction) -> GridPos
#   - manhattan_distance(other: GridPos) -> int
#
# Public exceptions:
# - ConfigError(ValueError)
#
# Inputs/Outputs:
# - These types are exchanged between BeatClock, judge, MovementIntentMachine, ChargeInputMachine,
#   ActorMotionController, GameSession and the Qt presentation modules.
#
########################

from __future__ import annotations

from dataclasses import dataclass
import enum
from typing import Tuple


class ConfigError(ValueError):
    """Invalid construction parameter. Raised at construction time, never recovered."""


class Direction(enum.Enum):
    NONE = "none"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    def delta(self) -> Tuple[int, int]:
        return _DIRECTION_DELTAS[self]


_DIRECTION_DELTAS = {
    Direction.NONE: (0, 0),
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}

CARDINAL_DIRECTIONS: Tuple[Direction, ...] = (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)


class TileKind(enum.Enum):
    FLOOR = 0
    WALL = 1
    PIT = 2
    SPIKE = 3
    SLIDING_BOX = 4
    AREA_TRANSITION = 5


class HazardKind(enum.Enum):
    PIT = "pit"
    SPIKE = "spike"


class ActionTier(enum.Enum):
    LIGHT = "light"
    HEAVY = "heavy"


@dataclass(frozen=True)
class GridPos:
    x: int
    y: int

    def step(self, direction: Direction) -> GridPos:
        dx, dy = direction.delta()
        return GridPos(self.x + dx, self.y + dy)

    def manhattan_distance(self, other: GridPos) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)
