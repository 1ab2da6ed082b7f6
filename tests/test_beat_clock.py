"""Tests for BeatClock."""

from __future__ import annotations

import math

import pytest

from beat_clock import BeatClock
from game_events import BeatFired, HalfBeatFired
from gameplay_models import ConfigError


class TestBeatClockConstruction:
    def test_period_at_120_bpm(self) -> None:
        clock = BeatClock(120.0)
        assert clock.beat_period_ms() == 500.0
        assert clock.bpm() == 120.0

    def test_fresh_clock_is_at_beat_zero(self) -> None:
        clock = BeatClock(90.0)
        assert clock.beat_count() == 0
        assert clock.phase_ms() == 0.0

    @pytest.mark.parametrize("bpm", [0.0, -60.0, math.nan, math.inf, "fast"])
    def test_invalid_bpm_is_rejected(self, bpm: object) -> None:
        with pytest.raises(ConfigError):
            BeatClock(bpm)  # type: ignore[arg-type]

    def test_config_error_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            BeatClock(0.0)


class TestBeatClockAdvance:
    def test_half_beat_then_beat(self) -> None:
        clock = BeatClock(120.0)
        assert clock.advance(250.0) == [HalfBeatFired(1)]
        assert clock.advance(250.0) == [BeatFired(1), HalfBeatFired(2)]
        assert clock.phase_ms() == 0.0

    def test_beat_progress(self) -> None:
        clock = BeatClock(120.0)
        clock.advance(250.0)
        assert clock.beat_progress() == pytest.approx(0.5)

    def test_multi_beat_delta_fires_every_beat_in_order(self) -> None:
        clock = BeatClock(120.0)
        events = clock.advance(1750.0)
        beats = [event.beat_count for event in events if isinstance(event, BeatFired)]
        assert beats == [1, 2, 3]
        assert clock.beat_count() == 3
        assert clock.phase_ms() == pytest.approx(250.0)

    def test_multi_beat_delta_reports_every_half_beat(self) -> None:
        clock = BeatClock(120.0)
        events = clock.advance(1750.0)
        halves = [event.half_beat_index for event in events if isinstance(event, HalfBeatFired)]
        assert halves == [1, 2, 3, 4, 5, 6, 7]

    def test_chunking_invariance(self) -> None:
        single = BeatClock(120.0)
        chunked = BeatClock(120.0)

        single_events = single.advance(1000.0)
        chunked_events = []
        for _ in range(8):
            chunked_events.extend(chunked.advance(125.0))

        assert single_events == chunked_events
        assert single.beat_count() == chunked.beat_count() == 2
        assert single.phase_ms() == chunked.phase_ms()

    @pytest.mark.parametrize("delta_ms", [0.0, -10.0, math.nan])
    def test_non_positive_delta_is_a_no_op(self, delta_ms: float) -> None:
        clock = BeatClock(120.0)
        clock.advance(100.0)
        assert clock.advance(delta_ms) == []
        assert clock.phase_ms() == 100.0
        assert clock.beat_count() == 0

    def test_snapshot_matches_accessors(self) -> None:
        clock = BeatClock(120.0)
        clock.advance(600.0)
        snapshot = clock.snapshot()
        assert snapshot.beat_count == 1
        assert snapshot.phase_ms == pytest.approx(100.0)
        assert snapshot.beat_period_ms == 500.0
