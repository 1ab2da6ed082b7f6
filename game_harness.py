# -*- coding: utf-8 -*-
########################
# game_harness.py
########################
# Purpose:
# - Gameplay window for local play and iteration.
# - Integrates InputRouter + GameSession + GridViewWidget behind one timer loop.
#
# Design notes:
# - GameSession is the single source of truth for game and musical time; the harness only feeds it.
# - Each timer tick measures real elapsed time with time.monotonic and passes it to GameSession.tick,
#   together with the edges the router queued since the previous tick.
# - Long frame gaps are passed through whole; the clock catches up across every boundary they span.
# - The drained events of every tick go to the view, then the view repaints.
# - GameHarnessController is reusable: any window can install it as an event filter.
#
########################
# Interfaces:
# Public classes:
# - class GameHarnessController(PyQt6.QtCore.QObject)
#   - __init__(session: GameSession, view: GridViewWidget, *, tick_interval_ms: int = 16, parent=None)
#   - session() -> GameSession
#   - router() -> InputRouter
#   - on_frame(now_seconds: float) -> list[GameEvent]
#   - step(delta_ms: float) -> list[GameEvent]
#   - set_paused(paused: bool) -> None
#   - eventFilter(watched, event) -> bool
#
# - class GameHarnessWindow(PyQt6.QtWidgets.QMainWindow)
#   - __init__(session: GameSession, *, tile_size_pixels: int = 32, tick_interval_ms: int = 16)
#   - controller() -> GameHarnessController
#
# Public functions:
# - main() -> int
#
# Inputs:
# - Keyboard input (InputRouter handles QKeyEvent through the event filter).
# - Timer ticks.
#
# Outputs:
# - Visible grid, actors and HUD.
#
########################

from __future__ import annotations

import argparse
import logging
import time
from typing import List, Optional

from PyQt6.QtCore import QEvent, QObject
from PyQt6.QtGui import QKeyEvent
from PyQt6.QtWidgets import QMainWindow

from game_events import GameEvent
from game_session import GameSession
from grid_view import GridViewConfig, GridViewWidget
from input_router import InputRouter

_LOGGER = logging.getLogger(__name__)


class GameHarnessController(QObject):
    """Reusable gameplay loop controller.

    Owns the router and the frame timer. The window installs it as its event filter.
    """

    def __init__(
        self,
        session: GameSession,
        view: GridViewWidget,
        *,
        tick_interval_ms: int = 16,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._session = session
        self._view = view
        self._router = InputRouter(parent=self)
        self._is_paused = False

        self._last_tick_seconds = time.monotonic()
        self._tick_timer_id: int = self.startTimer(int(tick_interval_ms))

    def session(self) -> GameSession:
        return self._session

    def router(self) -> InputRouter:
        return self._router

    def set_paused(self, paused: bool) -> None:
        self._is_paused = bool(paused)
        self._last_tick_seconds = time.monotonic()

    def is_paused(self) -> bool:
        return bool(self._is_paused)

    # -----------------
    # Event filter and timer loop
    # -----------------

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # noqa: N802
        if event.type() == QEvent.Type.KeyPress:
            if isinstance(event, QKeyEvent) and self._router.handle_key_press(event):
                return True
        if event.type() == QEvent.Type.KeyRelease:
            if isinstance(event, QKeyEvent) and self._router.handle_key_release(event):
                return True
        if event.type() in (QEvent.Type.WindowDeactivate, QEvent.Type.FocusOut):
            self._router.clear_pressed_keys()
        return super().eventFilter(watched, event)

    def timerEvent(self, event) -> None:  # type: ignore[override]
        if event.timerId() != self._tick_timer_id:
            return

        self.on_frame(time.monotonic())

    def on_frame(self, now_seconds: float) -> List[GameEvent]:
        delta_ms = (now_seconds - self._last_tick_seconds) * 1000.0
        self._last_tick_seconds = now_seconds

        if self._is_paused:
            return []
        return self.step(delta_ms)

    def step(self, delta_ms: float) -> List[GameEvent]:
        events = self._session.tick(delta_ms, self._router.drain_edges())
        if events:
            self._view.on_events(events)
        self._view.update()
        return events


class GameHarnessWindow(QMainWindow):
    def __init__(
        self,
        session: GameSession,
        *,
        tile_size_pixels: int = 32,
        tick_interval_ms: int = 16,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Rhythm Adventure")

        self._view = GridViewWidget(session, config=GridViewConfig(tile_size_pixels=int(tile_size_pixels)), parent=self)
        self._controller = GameHarnessController(
            session,
            self._view,
            tick_interval_ms=tick_interval_ms,
            parent=self,
        )

        self.setCentralWidget(self._view)

        # Keys reach the focused view first, so both get the shared filter.
        self.installEventFilter(self._controller)
        self._view.installEventFilter(self._controller)
        self._view.setFocus()

    def controller(self) -> GameHarnessController:
        return self._controller

    def view(self) -> GridViewWidget:
        return self._view


def _run_gui(session: GameSession, *, tile_size_pixels: int, tick_interval_ms: int) -> int:
    from PyQt6.QtWidgets import QApplication
    import sys

    app = QApplication.instance() or QApplication(sys.argv)
    window = GameHarnessWindow(session, tile_size_pixels=tile_size_pixels, tick_interval_ms=tick_interval_ms)
    window.resize(window.view().sizeHint())
    window.show()
    return int(app.exec())


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rhythm Adventure gameplay window with default settings")
    parser.add_argument("--bpm", type=float, default=120.0, help="Tempo in beats per minute.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for enemy movement.")
    return parser


def main() -> int:
    import random

    args = build_argument_parser().parse_args()
    session = GameSession(bpm=args.bpm, rng=random.Random(args.seed))
    return _run_gui(session, tile_size_pixels=32, tick_interval_ms=16)


if __name__ == "__main__":
    raise SystemExit(main())
