# -*- coding: utf-8 -*-
########################
# input_edges.py
########################
# Purpose:
# - Discrete input edges delivered to the core: move presses, action presses and action releases.
# - Edge detection for level-triggered sources by diffing held-control snapshots.
#
# Design notes:
# - No Qt usage. Pure values.
# - Edges carry no timestamp. The judge evaluates them against the clock at delivery.
# - Each input source owns one PreviousEdgeState. There is no shared table keyed by button names.
# - Diff order is deterministic: releases before presses, directions in CARDINAL_DIRECTIONS order.
# - Move releases are not edges the core consumes, so they are never produced.
#
########################
# Interfaces:
# Public enums:
# - class InputEdgeKind(enum.Enum): PRESS_MOVE | PRESS_DIRECTION | RELEASE_DIRECTION
#
# Public dataclasses:
# - InputEdge(kind: InputEdgeKind, direction: Direction)
# - ControlSnapshot(move_directions: frozenset[Direction], action_directions: frozenset[Direction])
#
# Public classes:
# - class PreviousEdgeState
#   - diff(current: ControlSnapshot) -> list[InputEdge]
#
# Inputs:
# - ControlSnapshot values built from the keyboard router or scripted in tests.
#
# Outputs:
# - InputEdge lists queued for the session tick.
#
########################

from __future__ import annotations

from dataclasses import dataclass, field
import enum
from typing import FrozenSet, List

from gameplay_models import CARDINAL_DIRECTIONS, Direction


class InputEdgeKind(enum.Enum):
    PRESS_MOVE = "press_move"
    PRESS_DIRECTION = "press_direction"
    RELEASE_DIRECTION = "release_direction"


@dataclass(frozen=True)
class InputEdge:
    kind: InputEdgeKind
    direction: Direction

    @classmethod
    def press_move(cls, direction: Direction) -> InputEdge:
        return cls(InputEdgeKind.PRESS_MOVE, direction)

    @classmethod
    def press_direction(cls, direction: Direction) -> InputEdge:
        return cls(InputEdgeKind.PRESS_DIRECTION, direction)

    @classmethod
    def release_direction(cls, direction: Direction) -> InputEdge:
        return cls(InputEdgeKind.RELEASE_DIRECTION, direction)


@dataclass(frozen=True)
class ControlSnapshot:
    move_directions: FrozenSet[Direction] = field(default_factory=frozenset)
    action_directions: FrozenSet[Direction] = field(default_factory=frozenset)

    def with_move(self, direction: Direction, held: bool) -> ControlSnapshot:
        moves = set(self.move_directions)
        if held:
            moves.add(direction)
        else:
            moves.discard(direction)
        return ControlSnapshot(move_directions=frozenset(moves), action_directions=self.action_directions)

    def with_action(self, direction: Direction, held: bool) -> ControlSnapshot:
        actions = set(self.action_directions)
        if held:
            actions.add(direction)
        else:
            actions.discard(direction)
        return ControlSnapshot(move_directions=self.move_directions, action_directions=frozenset(actions))


class PreviousEdgeState:
    def __init__(self) -> None:
        self._previous = ControlSnapshot()

    def diff(self, current: ControlSnapshot) -> List[InputEdge]:
        previous = self._previous
        edges: List[InputEdge] = []

        for direction in CARDINAL_DIRECTIONS:
            if direction in previous.action_directions and direction not in current.action_directions:
                edges.append(InputEdge.release_direction(direction))

        for direction in CARDINAL_DIRECTIONS:
            if direction in current.move_directions and direction not in previous.move_directions:
                edges.append(InputEdge.press_move(direction))

        for direction in CARDINAL_DIRECTIONS:
            if direction in current.action_directions and direction not in previous.action_directions:
                edges.append(InputEdge.press_direction(direction))

        self._previous = current
        return edges
