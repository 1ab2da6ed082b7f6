# -*- coding: utf-8 -*-
########################
# judge.py
########################
# Purpose:
# - Timing judgement for player input against the BeatClock.
# - Classifies "now" as on-beat, on-half-beat or miss, with the signed offset to the nearest reference instant.
# - Keeps an informational tally of verdicts for the HUD.
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - Strict inputs: consume only the clock state at the moment of the call. Input edges carry no timestamp,
#   so delivery latency is part of what gets judged.
# - Beat boundaries also count as half-beat opportunities.
# - Offsets are negative when early and positive when late.
#
########################
# Interfaces:
# Public enums:
# - class TimingVerdict(enum.Enum): ON_BEAT | ON_HALF_BEAT | MISS
#
# Public dataclasses:
# - TimingJudgement(verdict: TimingVerdict, offset_ms: float, beat_index: int)
# - TimingWindow(tolerance_ms: float)
#   - judge(clock: BeatClock) -> TimingJudgement
# - RhythmStats(combo: int, max_combo: int, on_beat_count: int, half_beat_count: int, miss_count: int)
#   - apply_judgement(judgement: TimingJudgement) -> None
#
# Public functions:
# - is_on_beat(clock: BeatClock, tolerance_ms: float) -> bool
# - is_on_half_beat(clock: BeatClock, tolerance_ms: float) -> bool
# - judge_timing(clock: BeatClock, tolerance_ms: float) -> TimingJudgement
#
# Inputs:
# - BeatClock (phase and period), tolerance in milliseconds.
#
# Outputs:
# - Verdicts consumed by MovementIntentMachine, ChargeInputMachine and the HUD.
#
########################

from __future__ import annotations

from dataclasses import dataclass
import enum
import math

from beat_clock import BeatClock
from gameplay_models import ConfigError

DEFAULT_TOLERANCE_MS = 150.0


class TimingVerdict(enum.Enum):
    ON_BEAT = "on_beat"
    ON_HALF_BEAT = "on_half_beat"
    MISS = "miss"


@dataclass(frozen=True)
class TimingJudgement:
    verdict: TimingVerdict
    offset_ms: float
    # Nearest beat boundary for ON_BEAT, otherwise the clock's beat_count.
    beat_index: int

    @property
    def is_hit(self) -> bool:
        return self.verdict != TimingVerdict.MISS


def _beat_offset_ms(clock: BeatClock) -> float:
    phase = clock.phase_ms()
    period = clock.beat_period_ms()
    time_since_beat = phase
    time_to_next_beat = period - phase
    if time_since_beat <= time_to_next_beat:
        return time_since_beat
    return -time_to_next_beat


def _half_beat_offset_ms(clock: BeatClock) -> float:
    return clock.phase_ms() - clock.beat_period_ms() / 2.0


def is_on_beat(clock: BeatClock, tolerance_ms: float) -> bool:
    return abs(_beat_offset_ms(clock)) <= float(tolerance_ms)


def is_on_half_beat(clock: BeatClock, tolerance_ms: float) -> bool:
    if abs(_half_beat_offset_ms(clock)) <= float(tolerance_ms):
        return True
    return is_on_beat(clock, tolerance_ms)


def judge_timing(clock: BeatClock, tolerance_ms: float) -> TimingJudgement:
    beat_offset = _beat_offset_ms(clock)
    half_beat_offset = _half_beat_offset_ms(clock)
    beat_count = clock.beat_count()

    if abs(beat_offset) <= float(tolerance_ms):
        # An early press belongs to the boundary it anticipates.
        nearest_beat = beat_count + 1 if beat_offset < 0.0 else beat_count
        return TimingJudgement(verdict=TimingVerdict.ON_BEAT, offset_ms=beat_offset, beat_index=nearest_beat)
    if abs(half_beat_offset) <= float(tolerance_ms):
        return TimingJudgement(verdict=TimingVerdict.ON_HALF_BEAT, offset_ms=half_beat_offset, beat_index=beat_count)

    # Miss offsets are reported against whichever reference instant was closest.
    nearest_offset = beat_offset if abs(beat_offset) <= abs(half_beat_offset) else half_beat_offset
    return TimingJudgement(verdict=TimingVerdict.MISS, offset_ms=nearest_offset, beat_index=beat_count)


@dataclass(frozen=True)
class TimingWindow:
    tolerance_ms: float = DEFAULT_TOLERANCE_MS

    def __post_init__(self) -> None:
        value = float(self.tolerance_ms)
        if not math.isfinite(value) or value < 0.0:
            raise ConfigError(f"tolerance_ms must be a non-negative number, got {self.tolerance_ms!r}")

    def judge(self, clock: BeatClock) -> TimingJudgement:
        return judge_timing(clock, self.tolerance_ms)

    def is_on_beat(self, clock: BeatClock) -> bool:
        return is_on_beat(clock, self.tolerance_ms)

    def is_on_half_beat(self, clock: BeatClock) -> bool:
        return is_on_half_beat(clock, self.tolerance_ms)


@dataclass
class RhythmStats:
    combo: int = 0
    max_combo: int = 0
    on_beat_count: int = 0
    half_beat_count: int = 0
    miss_count: int = 0

    def apply_judgement(self, judgement: TimingJudgement) -> None:
        if not judgement.is_hit:
            self.miss_count += 1
            self.combo = 0
            return

        if judgement.verdict == TimingVerdict.ON_BEAT:
            self.on_beat_count += 1
        else:
            self.half_beat_count += 1
        self.combo += 1
        self.max_combo = max(self.max_combo, self.combo)


def _run_unit_tests() -> None:
    clock = BeatClock(120.0)
    assert is_on_beat(clock, 0.0)
    assert judge_timing(clock, 150.0).verdict == TimingVerdict.ON_BEAT

    clock.advance(250.0)
    assert not is_on_beat(clock, 150.0)
    assert is_on_half_beat(clock, 0.0)

    clock.advance(150.0)
    early_press = judge_timing(clock, 100.0)
    assert early_press.verdict == TimingVerdict.ON_BEAT
    assert abs(early_press.offset_ms - (-100.0)) < 1e-9
    assert early_press.beat_index == 1

    stats = RhythmStats()
    stats.apply_judgement(early_press)
    stats.apply_judgement(TimingJudgement(TimingVerdict.MISS, 200.0, 0))
    assert stats.max_combo == 1
    assert stats.combo == 0


if __name__ == "__main__":
    _run_unit_tests()
    print("judge.py: ok")
