# -*- coding: utf-8 -*-
########################
# movement_intent.py
########################
# Purpose:
# - Per-actor movement state machine: Idle, Primed(direction), Running(direction).
# - Turns timed directional press edges into grid moves and momentum.
#
# Design notes:
# - No Qt usage. Pure gameplay logic. The machine decides moves, it never applies them;
#   ActorMotionController commits the returned direction against the grid.
# - Called once per press edge (not per frame) and once per beat boundary.
# - On-beat input continues a run or primes. A matching half-beat input while primed starts a run.
#   Input in neither window is a hard reset to Idle.
# - Half-beat input that does not confirm a primed direction changes nothing.
# - Any press judged against a later beat than a pending prime first releases the queued move
#   (auto_fired), as if that boundary had been handled before the press.
# - Beat handling order: auto-fire of a primed move first, then the momentum check.
#   The session runs the beat handler after same-tick input, so a perfectly timed press refreshes
#   last_action_beat before the staleness check.
#
########################
# Interfaces:
# Public enums:
# - class MovementMode(enum.Enum): IDLE | PRIMED | RUNNING
# - class IntentSignal(enum.Enum): PRIMED | RUNNING | RESET | AUTO_FIRED | MOMENTUM_LOST
#
# Public dataclasses:
# - MovementStep(move: Optional[Direction], signal: Optional[IntentSignal], judgement: Optional[TimingJudgement],
#                auto_fired: Optional[Direction])
#
# Public classes:
# - class MovementIntentMachine
#   - __init__(timing_window: TimingWindow)
#   - mode() -> MovementMode
#   - direction() -> Direction
#   - last_action_beat() -> int
#   - on_directional_input(direction: Direction, clock: BeatClock) -> MovementStep
#   - on_beat(beat_count: int) -> MovementStep
#   - reset() -> None
#
# Inputs:
# - PRESS_MOVE edges and BeatFired counts from the session loop.
#
# Outputs:
# - MovementStep values; the session commits moves and publishes visual signals.
#
########################

from __future__ import annotations

from dataclasses import dataclass
import enum
import logging
from typing import Optional

from beat_clock import BeatClock
from gameplay_models import Direction
from judge import TimingJudgement, TimingVerdict, TimingWindow

_LOGGER = logging.getLogger(__name__)


class MovementMode(enum.Enum):
    IDLE = "idle"
    PRIMED = "primed"
    RUNNING = "running"


class IntentSignal(enum.Enum):
    PRIMED = "primed"
    RUNNING = "running"
    RESET = "reset"
    AUTO_FIRED = "auto_fired"
    MOMENTUM_LOST = "momentum_lost"


@dataclass(frozen=True)
class MovementStep:
    move: Optional[Direction] = None
    signal: Optional[IntentSignal] = None
    judgement: Optional[TimingJudgement] = None
    # Queued move released by a press judged after its boundary.
    auto_fired: Optional[Direction] = None


class MovementIntentMachine:
    def __init__(self, timing_window: TimingWindow) -> None:
        self._timing_window = timing_window
        self._mode = MovementMode.IDLE
        self._direction = Direction.NONE
        self._last_action_beat = 0
        self._primed_beat = 0

    def mode(self) -> MovementMode:
        return self._mode

    def direction(self) -> Direction:
        return self._direction

    def last_action_beat(self) -> int:
        return int(self._last_action_beat)

    def is_running(self) -> bool:
        return self._mode == MovementMode.RUNNING

    def reset(self) -> None:
        self._mode = MovementMode.IDLE
        self._direction = Direction.NONE
        self._last_action_beat = 0
        self._primed_beat = 0

    def _release_expired_prime(self, beat_index: int) -> Optional[Direction]:
        if self._mode != MovementMode.PRIMED or int(beat_index) <= self._primed_beat:
            return None
        queued_direction = self._direction
        self._mode = MovementMode.IDLE
        self._direction = Direction.NONE
        return queued_direction

    def on_directional_input(self, direction: Direction, clock: BeatClock) -> MovementStep:
        if direction == Direction.NONE:
            _LOGGER.debug("Ignoring directional input without a direction")
            return MovementStep()

        judgement = self._timing_window.judge(clock)
        auto_fired = self._release_expired_prime(judgement.beat_index)

        if judgement.verdict == TimingVerdict.ON_BEAT:
            self._last_action_beat = judgement.beat_index
            if self._mode == MovementMode.RUNNING:
                self._direction = direction
                return MovementStep(move=direction, judgement=judgement)

            self._mode = MovementMode.PRIMED
            self._direction = direction
            self._primed_beat = judgement.beat_index
            return MovementStep(signal=IntentSignal.PRIMED, judgement=judgement, auto_fired=auto_fired)

        if judgement.verdict == TimingVerdict.ON_HALF_BEAT:
            if self._mode == MovementMode.PRIMED and self._direction == direction:
                self._mode = MovementMode.RUNNING
                return MovementStep(move=direction, signal=IntentSignal.RUNNING, judgement=judgement)
            _LOGGER.debug("Half-beat input %s does not confirm mode %s", direction.value, self._mode.value)
            return MovementStep(judgement=judgement, auto_fired=auto_fired)

        _LOGGER.debug("Move miss (offset %.1f ms)", judgement.offset_ms)
        self._mode = MovementMode.IDLE
        self._direction = Direction.NONE
        return MovementStep(signal=IntentSignal.RESET, judgement=judgement, auto_fired=auto_fired)

    def on_beat(self, beat_count: int) -> MovementStep:
        queued_direction = self._release_expired_prime(beat_count)
        if queued_direction is not None:
            return MovementStep(move=queued_direction, signal=IntentSignal.AUTO_FIRED)

        if self._mode == MovementMode.RUNNING and int(beat_count) - self._last_action_beat > 1:
            _LOGGER.debug("Momentum lost at beat %d (last action %d)", beat_count, self._last_action_beat)
            self._mode = MovementMode.IDLE
            self._direction = Direction.NONE
            return MovementStep(signal=IntentSignal.MOMENTUM_LOST)

        return MovementStep()


def _run_unit_tests() -> None:
    clock = BeatClock(120.0)
    machine = MovementIntentMachine(TimingWindow(150.0))

    step = machine.on_directional_input(Direction.RIGHT, clock)
    assert step.signal == IntentSignal.PRIMED
    assert step.move is None

    clock.advance(250.0)
    step = machine.on_directional_input(Direction.RIGHT, clock)
    assert step.move == Direction.RIGHT
    assert machine.mode() == MovementMode.RUNNING

    clock.advance(250.0)
    assert machine.on_beat(clock.beat_count()).signal is None
    clock.advance(500.0)
    assert machine.on_beat(clock.beat_count()).signal == IntentSignal.MOMENTUM_LOST


if __name__ == "__main__":
    _run_unit_tests()
    print("movement_intent.py: ok")
