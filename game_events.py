# -*- coding: utf-8 -*-
########################
# game_events.py
########################
# Purpose:
# - Informational events published by the core for the presentation layer.
# - A per-session queue the driving loop fills during a tick and the presentation drains once per frame.
#
# Design notes:
# - No Qt usage. Plain frozen dataclasses.
# - Events never require acknowledgment; the core does not read them back.
# - Queue order is publish order, which the session keeps in its fixed dispatch order
#   (input edges, then per clock event: movement -> charge -> enemies -> level flow).
#
########################
# Interfaces:
# Public dataclasses (all frozen):
# - BeatFired(beat_count: int)
# - HalfBeatFired(half_beat_index: int)
# - MoveCommitted(actor_id: str, from_pos: GridPos, to_pos: GridPos)
# - MoveBlocked(actor_id: str, direction: Direction)
# - HazardTriggered(actor_id: str, kind: HazardKind)
# - ActionResolved(actor_id: str, direction: Direction, tier: ActionTier)
# - IntentSignalled(actor_id: str, signal: str)
# - ChargeStarted(actor_id: str, direction: Direction)
# - ChargeEnded(actor_id: str, direction: Direction)
# - HpChanged(actor_id: str, hp: int)
# - ActorDefeated(actor_id: str)
# - ActorRespawned(actor_id: str, position: GridPos)
# - AttackLanded(actor_id: str, position: GridPos, damage: int)
# - EnemyDefeated(actor_id: str)
# - AreaTransitionTriggered(actor_id: str)
# - LevelLoaded(level_index: int)
#
# Public classes:
# - class GameEventQueue
#   - publish(event: GameEvent) -> None
#   - drain() -> list[GameEvent]
#
########################

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Union

from gameplay_models import ActionTier, Direction, GridPos, HazardKind


@dataclass(frozen=True)
class BeatFired:
    beat_count: int


@dataclass(frozen=True)
class HalfBeatFired:
    half_beat_index: int


@dataclass(frozen=True)
class MoveCommitted:
    actor_id: str
    from_pos: GridPos
    to_pos: GridPos


@dataclass(frozen=True)
class MoveBlocked:
    actor_id: str
    direction: Direction


@dataclass(frozen=True)
class HazardTriggered:
    actor_id: str
    kind: HazardKind


@dataclass(frozen=True)
class ActionResolved:
    actor_id: str
    direction: Direction
    tier: ActionTier


@dataclass(frozen=True)
class IntentSignalled:
    actor_id: str
    signal: str


@dataclass(frozen=True)
class ChargeStarted:
    actor_id: str
    direction: Direction


@dataclass(frozen=True)
class ChargeEnded:
    actor_id: str
    direction: Direction


@dataclass(frozen=True)
class HpChanged:
    actor_id: str
    hp: int


@dataclass(frozen=True)
class ActorDefeated:
    actor_id: str


@dataclass(frozen=True)
class ActorRespawned:
    actor_id: str
    position: GridPos


@dataclass(frozen=True)
class AttackLanded:
    actor_id: str
    position: GridPos
    damage: int


@dataclass(frozen=True)
class EnemyDefeated:
    actor_id: str


@dataclass(frozen=True)
class AreaTransitionTriggered:
    actor_id: str


@dataclass(frozen=True)
class LevelLoaded:
    level_index: int


ClockEvent = Union[BeatFired, HalfBeatFired]

GameEvent = Union[
    BeatFired,
    HalfBeatFired,
    MoveCommitted,
    MoveBlocked,
    HazardTriggered,
    ActionResolved,
    IntentSignalled,
    ChargeStarted,
    ChargeEnded,
    HpChanged,
    ActorDefeated,
    ActorRespawned,
    AttackLanded,
    EnemyDefeated,
    AreaTransitionTriggered,
    LevelLoaded,
]


class GameEventQueue:
    def __init__(self) -> None:
        self._events: List[GameEvent] = []

    def publish(self, event: GameEvent) -> None:
        self._events.append(event)

    def drain(self) -> List[GameEvent]:
        drained = self._events
        self._events = []
        return drained
