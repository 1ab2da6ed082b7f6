# -*- coding: utf-8 -*-
########################
# game_session.py
########################
# Purpose:
# - Owns one playable session: clock, judge, the player's machines, enemies, grid and level flow.
# - Runs the cooperative per-tick loop and publishes events for the presentation layer.
#
# Design notes:
# - No Qt usage. The harness (or a test) calls tick() with measured elapsed time and the queued input edges.
# - Tick order:
#   1) advance the clock and collect its events
#   2) judge queued input edges against the now-current clock
#   3) dispatch clock events chronologically; per beat: fall completion, movement (auto-fire then momentum),
#      charge watchdog, enemies, then level flow (pending transition, game-over countdown)
# - A transition is executed on the first beat after the one it was triggered on.
# - A pit fall completes on the first beat after the one it started on.
# - Defeat ends the session until GAME_OVER_RESTART_BEATS beats pass; the same level then reloads at full hp.
# - Player input is ignored while falling or game over. A fall or defeat cancels any charge.
# - Game logic never reads presentation state.
#
########################
# Interfaces:
# Public constants:
# - PLAYER_ID, GAME_OVER_RESTART_BEATS, LIGHT_ATTACK_DAMAGE, HEAVY_ATTACK_DAMAGE, HEAVY_ATTACK_REACH
#
# Public classes:
# - class GameSession
#   - __init__(*, bpm, tolerance_ms, charge_beats, charge_watchdog_beats, max_hp, levels, rng)
#   - from_config(config: GameConfig, levels: Optional[Sequence[LevelLayout]] = None) -> GameSession
#   - tick(delta_ms: float, edges: Iterable[InputEdge] = ()) -> list[GameEvent]
#   - clock() / timing_window() / grid() / player() / enemies() / stats() / level_index()
#   - movement_mode() / movement_direction() / is_charging() / charge_direction()
#   - is_game_over() / has_pending_transition()
#   - summary() -> dict
#
# Inputs:
# - Elapsed milliseconds and InputEdge values from the driving loop.
#
# Outputs:
# - GameEvent lists in publish order, one list per tick.
#
########################

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Sequence

from actor_motion import Actor, ActorMotionController, MoveOutcome
from beat_clock import BeatClock
from charge_input import DEFAULT_CHARGE_BEATS, ActionResolution, ChargeInputMachine
from enemies import Enemy, EnemyController
from game_events import (
    ActionResolved,
    AttackLanded,
    BeatFired,
    ChargeEnded,
    ChargeStarted,
    GameEvent,
    GameEventQueue,
    IntentSignalled,
    LevelLoaded,
)
from gameplay_models import ActionTier, ConfigError, Direction, HazardKind
from grid_model import GridLevel
from input_edges import InputEdge, InputEdgeKind
from judge import DEFAULT_TOLERANCE_MS, RhythmStats, TimingWindow
from level_layouts import LevelLayout, builtin_levels
from movement_intent import IntentSignal, MovementIntentMachine, MovementMode, MovementStep

if TYPE_CHECKING:
    from config import GameConfig

_LOGGER = logging.getLogger(__name__)

PLAYER_ID = "player"
DEFAULT_BPM = 120.0
DEFAULT_MAX_HP = 4
GAME_OVER_RESTART_BEATS = 4

LIGHT_ATTACK_DAMAGE = 1
HEAVY_ATTACK_DAMAGE = 3
# Tiles covered by a heavy attack, starting at the adjacent one.
HEAVY_ATTACK_REACH = 2


class GameSession:
    def __init__(
        self,
        *,
        bpm: float = DEFAULT_BPM,
        tolerance_ms: float = DEFAULT_TOLERANCE_MS,
        charge_beats: int = DEFAULT_CHARGE_BEATS,
        charge_watchdog_beats: Optional[int] = None,
        max_hp: int = DEFAULT_MAX_HP,
        levels: Optional[Sequence[LevelLayout]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        if int(max_hp) < 1:
            raise ConfigError(f"max_hp must be at least 1, got {max_hp!r}")

        self._levels: List[LevelLayout] = list(levels) if levels is not None else builtin_levels()
        if not self._levels:
            raise ConfigError("at least one level layout is required")

        self._clock = BeatClock(bpm)
        self._timing_window = TimingWindow(tolerance_ms)
        self._movement = MovementIntentMachine(self._timing_window)
        self._charge = ChargeInputMachine(
            self._timing_window,
            charge_beats=charge_beats,
            watchdog_beats=charge_watchdog_beats,
        )
        self._rng = rng if rng is not None else random.Random()
        self._events = GameEventQueue()
        self._stats = RhythmStats()
        self._max_hp = int(max_hp)

        self._level_index = 0
        self._grid: GridLevel = self._levels[0].build_grid()
        self._motion = ActorMotionController(self._grid, self._events)
        self._enemy_controller = EnemyController(self._motion, self._events, self._rng)
        self._player = Actor.spawn(PLAYER_ID, self._levels[0].player_spawn, self._max_hp)
        self._enemies: List[Enemy] = []

        self._fall_beat: Optional[int] = None
        self._transition_beat: Optional[int] = None
        self._game_over_beat: Optional[int] = None

        self._load_level(0, keep_hp=False)

    @classmethod
    def from_config(cls, config: GameConfig, levels: Optional[Sequence[LevelLayout]] = None) -> GameSession:
        return cls(
            bpm=config.rhythm.bpm,
            tolerance_ms=config.rhythm.tolerance_ms,
            charge_beats=config.rhythm.charge_beats,
            charge_watchdog_beats=config.rhythm.charge_watchdog_beats,
            max_hp=config.player.max_hp,
            levels=levels,
            rng=random.Random(config.enemies.seed),
        )

    # ---- read accessors for the presentation layer ----

    def clock(self) -> BeatClock:
        return self._clock

    def timing_window(self) -> TimingWindow:
        return self._timing_window

    def grid(self) -> GridLevel:
        return self._grid

    def player(self) -> Actor:
        return self._player

    def enemies(self) -> List[Enemy]:
        return list(self._enemies)

    def stats(self) -> RhythmStats:
        return self._stats

    def level_index(self) -> int:
        return int(self._level_index)

    def level_count(self) -> int:
        return len(self._levels)

    def movement_mode(self) -> MovementMode:
        return self._movement.mode()

    def movement_direction(self) -> Direction:
        return self._movement.direction()

    def is_charging(self) -> bool:
        return self._charge.is_charging()

    def charge_direction(self) -> Direction:
        return self._charge.direction()

    def is_game_over(self) -> bool:
        return self._game_over_beat is not None

    def has_pending_transition(self) -> bool:
        return self._transition_beat is not None

    def summary(self) -> Dict[str, Any]:
        return {
            "beat_count": self._clock.beat_count(),
            "level_index": self._level_index,
            "player": {
                "x": self._player.position.x,
                "y": self._player.position.y,
                "hp": self._player.hp,
                "max_hp": self._player.max_hp,
            },
            "enemies_remaining": sum(1 for enemy in self._enemies if not enemy.is_defeated),
            "game_over": self.is_game_over(),
            "stats": {
                "combo": self._stats.combo,
                "max_combo": self._stats.max_combo,
                "on_beat": self._stats.on_beat_count,
                "half_beat": self._stats.half_beat_count,
                "miss": self._stats.miss_count,
            },
        }

    # ---- loop ----

    def tick(self, delta_ms: float, edges: Iterable[InputEdge] = ()) -> List[GameEvent]:
        clock_events = self._clock.advance(delta_ms)

        for edge in edges:
            self._handle_edge(edge)

        for clock_event in clock_events:
            self._events.publish(clock_event)
            if isinstance(clock_event, BeatFired):
                self._on_beat(clock_event.beat_count)

        return self._events.drain()

    # ---- input ----

    def _player_accepts_input(self) -> bool:
        return not (self._player.is_falling or self.is_game_over())

    def _handle_edge(self, edge: InputEdge) -> None:
        if not self._player_accepts_input():
            _LOGGER.debug("Ignoring %s %s while the player cannot act", edge.kind.value, edge.direction.value)
            return

        if edge.kind == InputEdgeKind.PRESS_MOVE:
            step = self._movement.on_directional_input(edge.direction, self._clock)
            if step.judgement is not None:
                self._stats.apply_judgement(step.judgement)
            self._apply_movement_step(step, self._clock.beat_count())
        elif edge.kind == InputEdgeKind.PRESS_DIRECTION:
            self._handle_action_press(edge.direction)
        elif edge.kind == InputEdgeKind.RELEASE_DIRECTION:
            self._handle_action_release(edge.direction)

        self._check_player_defeat(self._clock.beat_count())

    def _handle_action_press(self, direction: Direction) -> None:
        was_charging = self._charge.is_charging()
        resolution = self._charge.on_press_edge(direction, self._clock)
        if was_charging or not self._charge.is_charging():
            return

        self._stats.apply_judgement(self._timing_window.judge(self._clock))
        self._events.publish(ChargeStarted(actor_id=PLAYER_ID, direction=direction))
        if resolution is not None:
            self._resolve_action(resolution)

    def _handle_action_release(self, direction: Direction) -> None:
        if not self._charge.is_charging() or self._charge.direction() != direction:
            _LOGGER.debug("Ignoring %s release that does not end the charge", direction.value)
            return
        resolution = self._charge.on_release_edge(direction, self._clock)
        self._events.publish(ChargeEnded(actor_id=PLAYER_ID, direction=direction))
        if resolution is not None:
            self._resolve_action(resolution)

    def _resolve_action(self, resolution: ActionResolution) -> None:
        self._events.publish(ActionResolved(actor_id=PLAYER_ID, direction=resolution.direction, tier=resolution.tier))

        if resolution.tier == ActionTier.HEAVY:
            reach, damage = HEAVY_ATTACK_REACH, HEAVY_ATTACK_DAMAGE
        else:
            reach, damage = 1, LIGHT_ATTACK_DAMAGE

        position = self._player.position
        for _tile in range(reach):
            target = self._grid.target_position(position, resolution.direction)
            if target is None:
                break
            self._events.publish(AttackLanded(actor_id=PLAYER_ID, position=target, damage=damage))
            self._enemy_controller.hit_at(self._enemies, target, damage)
            position = target

    def _apply_movement_step(self, step: MovementStep, beat_count: int) -> None:
        if step.auto_fired is not None:
            self._events.publish(IntentSignalled(actor_id=PLAYER_ID, signal=IntentSignal.AUTO_FIRED.value))
            if not self._commit_move(step.auto_fired, beat_count):
                return

        if step.signal is not None:
            self._events.publish(IntentSignalled(actor_id=PLAYER_ID, signal=step.signal.value))
        if step.move is not None:
            self._commit_move(step.move, beat_count)

    def _commit_move(self, direction: Direction, beat_count: int) -> bool:
        """Move the player; returns False when the move interrupted the movement machine."""
        result = self._motion.try_move(self._player, direction)
        if result.outcome == MoveOutcome.HAZARD and result.hazard == HazardKind.PIT:
            # Falling interrupts any run or charge.
            self._fall_beat = int(beat_count)
            self._movement.reset()
            self._cancel_charge()
            return False
        if result.outcome == MoveOutcome.TRANSITION_TRIGGERED and self._transition_beat is None:
            self._transition_beat = int(beat_count)
        return True

    def _cancel_charge(self) -> None:
        if not self._charge.is_charging():
            return
        direction = self._charge.direction()
        self._charge.reset()
        self._events.publish(ChargeEnded(actor_id=PLAYER_ID, direction=direction))

    def _check_player_defeat(self, beat_count: int) -> None:
        if not self._player.is_defeated or self.is_game_over():
            return
        _LOGGER.info("Game over at beat %d", beat_count)
        self._game_over_beat = int(beat_count)
        self._movement.reset()
        self._cancel_charge()

    # ---- beats ----

    def _on_beat(self, beat_count: int) -> None:
        if not self.is_game_over():
            if self._player.is_falling:
                if self._fall_beat is None or beat_count > self._fall_beat:
                    self._motion.complete_fall(self._player)
                    self._fall_beat = None
            else:
                self._apply_movement_step(self._movement.on_beat(beat_count), beat_count)
                charge_direction = self._charge.direction()
                if self._charge.on_beat(beat_count):
                    self._events.publish(ChargeEnded(actor_id=PLAYER_ID, direction=charge_direction))

            self._enemy_controller.on_beat(self._enemies, self._player)
            self._check_player_defeat(beat_count)

        self._run_level_flow(beat_count)

    def _run_level_flow(self, beat_count: int) -> None:
        if self._game_over_beat is not None:
            if beat_count - self._game_over_beat >= GAME_OVER_RESTART_BEATS:
                _LOGGER.info("Restarting level %d", self._level_index)
                self._load_level(self._level_index, keep_hp=False)
            return

        if self._transition_beat is not None and beat_count > self._transition_beat:
            next_index = (self._level_index + 1) % len(self._levels)
            _LOGGER.info("Transition from level %d to level %d", self._level_index, next_index)
            self._load_level(next_index, keep_hp=True)

    def _load_level(self, level_index: int, *, keep_hp: bool) -> None:
        layout = self._levels[level_index]
        hp = self._player.hp if keep_hp else self._max_hp

        self._level_index = int(level_index)
        self._grid = layout.build_grid()
        self._motion = ActorMotionController(self._grid, self._events)
        self._enemy_controller = EnemyController(self._motion, self._events, self._rng)

        self._player = Actor.spawn(PLAYER_ID, layout.player_spawn, self._max_hp)
        self._player.hp = hp
        self._enemies = [
            Enemy(actor_id=f"enemy_{index}", position=spawn.position, kind=spawn.kind)
            for index, spawn in enumerate(layout.enemies)
        ]

        self._movement.reset()
        self._charge.reset()
        self._fall_beat = None
        self._transition_beat = None
        self._game_over_beat = None

        _LOGGER.info("Loaded level %d (%dx%d)", self._level_index, self._grid.width(), self._grid.height())
        self._events.publish(LevelLoaded(level_index=self._level_index))
