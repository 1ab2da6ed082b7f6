"""Smoke tests for the gameplay view and harness."""

from __future__ import annotations

import random
from types import SimpleNamespace

import pytest

pytest.importorskip("PyQt6.QtWidgets")

from PyQt6.QtCore import Qt

import game_harness
from game_events import BeatFired
from game_harness import GameHarnessWindow
from game_session import GameSession
from gameplay_models import Direction, GridPos
from grid_view import DRAW_ORDER, GridViewWidget
from input_edges import InputEdge
from movement_intent import MovementMode


def _session() -> GameSession:
    return GameSession(rng=random.Random(5))


class TestGridView:
    def test_draw_order_is_back_to_front(self) -> None:
        assert DRAW_ORDER[0] == "background"
        assert DRAW_ORDER[-1] == "hud"
        assert DRAW_ORDER.index("tiles") < DRAW_ORDER.index("enemies") < DRAW_ORDER.index("player")

    def test_size_hint_fits_grid_and_hud(self, qapp: object) -> None:
        del qapp
        view = GridViewWidget(_session())
        hint = view.sizeHint()
        assert hint.width() == 16 * 32
        assert hint.height() > 16 * 32

    def test_paints_after_events(self, qapp: object) -> None:
        del qapp
        session = _session()
        view = GridViewWidget(session)
        view.resize(view.sizeHint())

        view.on_events(session.tick(0.0, [InputEdge.press_direction(Direction.RIGHT)]))
        view.on_events(session.tick(750.0))

        assert not view.grab().isNull()


class TestHarness:
    def test_router_edges_reach_the_session(self, qapp: object) -> None:
        del qapp
        session = _session()
        window = GameHarnessWindow(session)
        controller = window.controller()
        controller.set_paused(True)

        controller.router().press_key(int(Qt.Key.Key_D))
        events = controller.step(0.0)

        assert session.movement_mode() == MovementMode.PRIMED
        assert events

        controller.step(500.0)
        assert session.player().position == GridPos(3, 2)

    def test_long_frame_gap_reaches_the_clock_whole(self, qapp: object, monkeypatch: pytest.MonkeyPatch) -> None:
        del qapp
        monkeypatch.setattr(game_harness, "time", SimpleNamespace(monotonic=lambda: 100.0))
        session = _session()
        window = GameHarnessWindow(session)

        events = window.controller().on_frame(101.2)

        assert session.clock().beat_count() == 2
        assert session.clock().phase_ms() == pytest.approx(200.0)
        assert [event for event in events if isinstance(event, BeatFired)] == [BeatFired(1), BeatFired(2)]

    def test_paused_frames_do_not_advance(self, qapp: object, monkeypatch: pytest.MonkeyPatch) -> None:
        del qapp
        monkeypatch.setattr(game_harness, "time", SimpleNamespace(monotonic=lambda: 100.0))
        session = _session()
        controller = GameHarnessWindow(session).controller()
        controller.set_paused(True)

        assert controller.on_frame(101.2) == []
        assert session.clock().beat_count() == 0
