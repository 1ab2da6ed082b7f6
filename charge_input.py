# -*- coding: utf-8 -*-
########################
# charge_input.py
########################
# Purpose:
# - Press/hold/release timing machine for directional actions.
# - A press resolves a light action when it lands on-beat; holding for charge_beats beats and releasing
#   on-beat resolves a heavy (charge) action.
#
# Design notes:
# - No Qt usage. Pure gameplay logic, decoupled from movement.
# - One charge at a time per actor. A press while charging and a release while idle are ignored.
#   A release for another direction leaves the charge running.
# - Beat indexes come from the judgement, so an early on-beat press or release counts toward the
#   boundary it anticipates.
# - There is no implicit timeout. watchdog_beats is an opt-in extension; with the default None a charge
#   whose release never arrives stays open until reset().
#
########################
# Interfaces:
# Public dataclasses:
# - ActionResolution(direction: Direction, tier: ActionTier, judgement: TimingJudgement)
#
# Public classes:
# - class ChargeInputMachine
#   - __init__(timing_window: TimingWindow, *, charge_beats: int = 2, watchdog_beats: Optional[int] = None)
#   - is_charging() -> bool
#   - direction() -> Direction
#   - start_beat() -> int
#   - on_press_edge(direction: Direction, clock: BeatClock) -> Optional[ActionResolution]
#   - on_release_edge(direction: Direction, clock: BeatClock) -> Optional[ActionResolution]
#   - on_beat(beat_count: int) -> bool
#   - reset() -> None
#
# Inputs:
# - PRESS_DIRECTION and RELEASE_DIRECTION edges, BeatFired counts.
#
# Outputs:
# - ActionResolution values; the session turns them into attacks and ActionResolved events.
#
########################

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional

from beat_clock import BeatClock
from gameplay_models import ActionTier, ConfigError, Direction
from judge import TimingJudgement, TimingVerdict, TimingWindow

_LOGGER = logging.getLogger(__name__)

DEFAULT_CHARGE_BEATS = 2

# Allowed distance between the held beat count and charge_beats.
CHARGE_HOLD_SLACK_BEATS = 0.5


@dataclass(frozen=True)
class ActionResolution:
    direction: Direction
    tier: ActionTier
    judgement: TimingJudgement


class ChargeInputMachine:
    def __init__(
        self,
        timing_window: TimingWindow,
        *,
        charge_beats: int = DEFAULT_CHARGE_BEATS,
        watchdog_beats: Optional[int] = None,
    ) -> None:
        if int(charge_beats) < 1:
            raise ConfigError(f"charge_beats must be at least 1, got {charge_beats!r}")
        if watchdog_beats is not None and int(watchdog_beats) <= int(charge_beats):
            raise ConfigError(
                f"watchdog_beats must exceed charge_beats ({charge_beats}), got {watchdog_beats!r}"
            )

        self._timing_window = timing_window
        self._charge_beats = int(charge_beats)
        self._watchdog_beats = int(watchdog_beats) if watchdog_beats is not None else None

        self._charging = False
        self._direction = Direction.NONE
        self._start_beat = 0

    def is_charging(self) -> bool:
        return bool(self._charging)

    def direction(self) -> Direction:
        return self._direction

    def start_beat(self) -> int:
        return int(self._start_beat)

    def charge_beats(self) -> int:
        return int(self._charge_beats)

    def reset(self) -> None:
        self._charging = False
        self._direction = Direction.NONE
        self._start_beat = 0

    def on_press_edge(self, direction: Direction, clock: BeatClock) -> Optional[ActionResolution]:
        if direction == Direction.NONE:
            _LOGGER.debug("Ignoring action press without a direction")
            return None
        if self._charging:
            _LOGGER.debug("Ignoring %s press while charging %s", direction.value, self._direction.value)
            return None

        judgement = self._timing_window.judge(clock)
        self._charging = True
        self._direction = direction
        self._start_beat = judgement.beat_index

        if judgement.verdict != TimingVerdict.ON_BEAT:
            _LOGGER.debug("Action miss (offset %.1f ms), charging silently", judgement.offset_ms)
            return None
        return ActionResolution(direction=direction, tier=ActionTier.LIGHT, judgement=judgement)

    def on_release_edge(self, direction: Direction, clock: BeatClock) -> Optional[ActionResolution]:
        if not self._charging:
            _LOGGER.debug("Ignoring %s release with no active charge", direction.value)
            return None
        if direction != self._direction:
            _LOGGER.debug("Ignoring %s release while charging %s", direction.value, self._direction.value)
            return None

        judgement = self._timing_window.judge(clock)
        held_beats = judgement.beat_index - self._start_beat
        self._charging = False
        self._direction = Direction.NONE

        if judgement.verdict != TimingVerdict.ON_BEAT:
            return None
        if abs(held_beats - self._charge_beats) > CHARGE_HOLD_SLACK_BEATS:
            return None
        return ActionResolution(direction=direction, tier=ActionTier.HEAVY, judgement=judgement)

    def on_beat(self, beat_count: int) -> bool:
        """Apply the optional watchdog. Returns True when a stale charge was cancelled."""
        if self._watchdog_beats is None or not self._charging:
            return False
        if int(beat_count) - self._start_beat <= self._watchdog_beats:
            return False
        _LOGGER.debug("Charge %s cancelled by watchdog at beat %d", self._direction.value, beat_count)
        self.reset()
        return True


def _run_unit_tests() -> None:
    clock = BeatClock(120.0)
    machine = ChargeInputMachine(TimingWindow(150.0))

    light = machine.on_press_edge(Direction.UP, clock)
    assert light is not None and light.tier == ActionTier.LIGHT
    assert machine.on_press_edge(Direction.DOWN, clock) is None

    clock.advance(1000.0)
    heavy = machine.on_release_edge(Direction.UP, clock)
    assert heavy is not None and heavy.tier == ActionTier.HEAVY
    assert not machine.is_charging()


if __name__ == "__main__":
    _run_unit_tests()
    print("charge_input.py: ok")
