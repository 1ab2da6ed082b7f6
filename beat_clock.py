# -*- coding: utf-8 -*-
########################
# beat_clock.py
########################
# Purpose:
# - Single source of truth for musical time in gameplay.
# - Free-running phase accumulator that turns per-frame elapsed milliseconds into beat and half-beat events.
#
# Design notes:
# - Gameplay code must judge input against BeatClock state only.
# - No Qt usage. Keep this module pure and deterministic.
# - Tempo is immutable. A tempo change requires a new clock.
# - advance() catches up across any number of boundaries in one call. Events come back in
#   chronological order; the caller owns dispatch order.
# - Half-beat numbering: the midpoint of beat n is half-beat 2n+1. Reaching beat n also yields half-beat 2n
#   right after BeatFired(n), since a beat boundary is a half-beat opportunity too.
#
########################
# Interfaces:
# Public dataclasses:
# - BeatSnapshot(bpm: float, beat_period_ms: float, phase_ms: float, beat_count: int)
#
# Public classes:
# - class BeatClock
#   - __init__(bpm: float)  (raises ConfigError unless bpm is positive and finite)
#   - advance(delta_ms: float) -> list[ClockEvent]
#   - bpm() -> float
#   - beat_period_ms() -> float
#   - phase_ms() -> float
#   - beat_count() -> int
#   - beat_progress() -> float
#   - snapshot() -> BeatSnapshot
#
# Inputs:
# - delta_ms from the driving loop, once per tick.
#
# Outputs:
# - BeatFired and HalfBeatFired events, read accessors used by judge and the state machines.
#
########################

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import List

from game_events import BeatFired, ClockEvent, HalfBeatFired
from gameplay_models import ConfigError

_LOGGER = logging.getLogger(__name__)

MS_PER_MINUTE = 60000.0


@dataclass(frozen=True)
class BeatSnapshot:
    bpm: float
    beat_period_ms: float
    phase_ms: float
    beat_count: int


class BeatClock:
    def __init__(self, bpm: float) -> None:
        try:
            bpm_value = float(bpm)
        except (TypeError, ValueError) as exception:
            raise ConfigError(f"bpm must be a number, got {bpm!r}") from exception
        if not math.isfinite(bpm_value) or bpm_value <= 0.0:
            raise ConfigError(f"bpm must be positive, got {bpm!r}")

        self._bpm = bpm_value
        self._beat_period_ms = MS_PER_MINUTE / bpm_value
        self._half_period_ms = self._beat_period_ms / 2.0
        self._phase_ms = 0.0
        self._beat_count = 0
        # Whether the midpoint of the current beat has already been reported.
        self._half_beat_fired = False

    def bpm(self) -> float:
        return float(self._bpm)

    def beat_period_ms(self) -> float:
        return float(self._beat_period_ms)

    def phase_ms(self) -> float:
        return float(self._phase_ms)

    def beat_count(self) -> int:
        return int(self._beat_count)

    def beat_progress(self) -> float:
        return float(self._phase_ms / self._beat_period_ms)

    def snapshot(self) -> BeatSnapshot:
        return BeatSnapshot(
            bpm=self.bpm(),
            beat_period_ms=self.beat_period_ms(),
            phase_ms=self.phase_ms(),
            beat_count=self.beat_count(),
        )

    def advance(self, delta_ms: float) -> List[ClockEvent]:
        delta = float(delta_ms)
        if not math.isfinite(delta) or delta <= 0.0:
            _LOGGER.debug("Ignoring non-positive clock advance: %r", delta_ms)
            return []

        events: List[ClockEvent] = []
        self._phase_ms += delta

        while True:
            if not self._half_beat_fired and self._phase_ms >= self._half_period_ms:
                self._half_beat_fired = True
                events.append(HalfBeatFired(half_beat_index=2 * self._beat_count + 1))

            if self._phase_ms < self._beat_period_ms:
                break

            self._phase_ms -= self._beat_period_ms
            self._beat_count += 1
            self._half_beat_fired = False
            events.append(BeatFired(beat_count=self._beat_count))
            events.append(HalfBeatFired(half_beat_index=2 * self._beat_count))

        return events


def _run_unit_tests() -> None:
    clock = BeatClock(120.0)
    assert clock.beat_period_ms() == 500.0

    events = clock.advance(500.0)
    assert clock.beat_count() == 1
    assert clock.phase_ms() == 0.0
    assert events == [HalfBeatFired(1), BeatFired(1), HalfBeatFired(2)]

    events = clock.advance(1250.0)
    assert clock.beat_count() == 3
    assert abs(clock.phase_ms() - 250.0) < 1e-9
    assert [e for e in events if isinstance(e, BeatFired)] == [BeatFired(2), BeatFired(3)]

    try:
        BeatClock(0.0)
    except ConfigError:
        pass
    else:
        raise AssertionError("bpm=0 must be rejected")


if __name__ == "__main__":
    _run_unit_tests()
    print("beat_clock.py: ok")
