# -*- coding: utf-8 -*-
########################
# grid_view.py
########################
# Purpose:
# - Gameplay Qt widget.
# - Paints the tile grid, enemies, the player and a HUD (health, scrolling beat bar, combo).
#
########################
# Key Logic:
# - Read only: the widget reads GameSession accessors and never changes game state.
# - Draw order is a declared policy (DRAW_ORDER). Layers paint back to front in that order.
# - Player colour reflects movement intent:
#   - idle: cyan
#   - primed: yellow
#   - running: red
#   - charging: magenta outline on top of the intent colour
#   - falling: hidden until the fall completes
# - Transient effects (attack flashes, intent text, beat pulse) come from the event list of each tick:
#   - the harness hands every drained event list to on_events()
#   - effects fade out after a fixed lifetime measured with time.monotonic
#
########################
# Interfaces:
# Public constants:
# - DRAW_ORDER: tuple[str, ...]
#
# Public dataclasses:
# - GridViewConfig(tile_size_pixels: int, hud_height_pixels: int, beat_bar_lookahead_beats: int, ...)
#
# Public classes:
# - class GridViewWidget(PyQt6.QtWidgets.QWidget)
#   - set_session(session: GameSession) -> None
#   - set_state_text(state_text: str) -> None
#   - on_events(events: Sequence[GameEvent]) -> None
#
# Inputs:
# - GameSession (grid, actors, clock, stats)
# - Event lists drained by GameSession.tick
#
# Outputs:
# - Painted visuals on the widget surface.
#
########################

from __future__ import annotations

from dataclasses import dataclass
import time
from typing import Dict, List, Optional, Sequence

from PyQt6.QtCore import QPointF, QRectF, QSize, Qt
from PyQt6.QtGui import QBrush, QColor, QFont, QPainter, QPen
from PyQt6.QtWidgets import QWidget

from enemies import EnemyKind
from game_events import (
    ActorDefeated,
    AttackLanded,
    BeatFired,
    GameEvent,
    HazardTriggered,
    IntentSignalled,
    LevelLoaded,
)
from game_session import PLAYER_ID, GameSession
from gameplay_models import GridPos, TileKind
from movement_intent import MovementMode

DRAW_ORDER = ("background", "tiles", "attacks", "enemies", "player", "hud")

TILE_COLORS: Dict[TileKind, QColor] = {
    TileKind.FLOOR: QColor(0x44, 0x44, 0x44),
    TileKind.WALL: QColor(0x88, 0x88, 0x88),
    TileKind.PIT: QColor(0x11, 0x11, 0x11),
    TileKind.SPIKE: QColor(0xAA, 0x00, 0x00),
    TileKind.SLIDING_BOX: QColor(0x8B, 0x45, 0x13),
    TileKind.AREA_TRANSITION: QColor(0x00, 0xFF, 0x00),
}

ENEMY_COLORS: Dict[EnemyKind, QColor] = {
    EnemyKind.STATIC: QColor(150, 150, 150),
    EnemyKind.WANDERER: QColor(60, 200, 90),
    EnemyKind.AGGRESSIVE: QColor(230, 40, 40),
}

PLAYER_COLORS: Dict[MovementMode, QColor] = {
    MovementMode.IDLE: QColor(0x00, 0xFF, 0xFF),
    MovementMode.PRIMED: QColor(0xFF, 0xFF, 0x00),
    MovementMode.RUNNING: QColor(0xFF, 0x00, 0x00),
}

CHARGE_OUTLINE_COLOR = QColor(0xFF, 0x00, 0xFF)


@dataclass(frozen=True)
class GridViewConfig:
    tile_size_pixels: int = 32
    hud_height_pixels: int = 56
    beat_bar_lookahead_beats: int = 4
    attack_flash_lifetime_seconds: float = 0.2
    signal_text_lifetime_seconds: float = 0.6
    beat_pulse_lifetime_seconds: float = 0.12


@dataclass
class _AttackFlash:
    position: GridPos
    created_seconds: float


class GridViewWidget(QWidget):
    def __init__(
        self,
        session: GameSession,
        *,
        config: Optional[GridViewConfig] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._session = session
        self._config = config or GridViewConfig()

        self._state_text = ""
        self._attack_flashes: List[_AttackFlash] = []
        self._signal_text = ""
        self._signal_text_seconds = -999.0
        self._last_beat_seconds = -999.0

        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

    def set_session(self, session: GameSession) -> None:
        self._session = session
        self._attack_flashes.clear()

    def set_state_text(self, state_text: str) -> None:
        self._state_text = str(state_text or "")

    def sizeHint(self) -> QSize:  # type: ignore[override]
        grid = self._session.grid()
        tile = int(self._config.tile_size_pixels)
        return QSize(grid.width() * tile, grid.height() * tile + int(self._config.hud_height_pixels))

    def on_events(self, events: Sequence[GameEvent]) -> None:
        now_seconds = time.monotonic()
        for event in events:
            if isinstance(event, BeatFired):
                self._last_beat_seconds = now_seconds
            elif isinstance(event, AttackLanded):
                self._attack_flashes.append(_AttackFlash(position=event.position, created_seconds=now_seconds))
            elif isinstance(event, IntentSignalled) and event.actor_id == PLAYER_ID:
                self._show_signal_text(event.signal.replace("_", " ").upper(), now_seconds)
            elif isinstance(event, HazardTriggered) and event.actor_id == PLAYER_ID:
                self._show_signal_text(event.kind.value.upper(), now_seconds)
            elif isinstance(event, ActorDefeated) and event.actor_id == PLAYER_ID:
                self._state_text = "GAME OVER"
            elif isinstance(event, LevelLoaded):
                self._state_text = f"Level {event.level_index + 1}"
                self._attack_flashes.clear()

    def _show_signal_text(self, text: str, now_seconds: float) -> None:
        self._signal_text = text
        self._signal_text_seconds = now_seconds

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def paintEvent(self, event) -> None:  # type: ignore[override]
        now_seconds = time.monotonic()

        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)

        layer_painters = {
            "background": self._paint_background,
            "tiles": self._paint_tiles,
            "attacks": self._paint_attacks,
            "enemies": self._paint_enemies,
            "player": self._paint_player,
            "hud": self._paint_hud,
        }
        for layer_name in DRAW_ORDER:
            layer_painters[layer_name](painter, now_seconds)

        painter.end()

    def _tile_rect(self, position: GridPos) -> QRectF:
        tile = float(self._config.tile_size_pixels)
        top = float(self._config.hud_height_pixels)
        return QRectF(float(position.x) * tile, top + float(position.y) * tile, tile, tile)

    def _paint_background(self, painter: QPainter, now_seconds: float) -> None:
        painter.fillRect(self.rect(), QBrush(QColor(10, 10, 12)))

    def _paint_tiles(self, painter: QPainter, now_seconds: float) -> None:
        grid = self._session.grid()
        painter.save()
        painter.setPen(QPen(QColor(30, 30, 30)))
        for y in range(grid.height()):
            for x in range(grid.width()):
                kind = grid.tile_kind_at(x, y)
                if kind is None:
                    continue
                painter.setBrush(QBrush(TILE_COLORS[kind]))
                painter.drawRect(self._tile_rect(GridPos(x, y)))
        painter.restore()

    def _paint_attacks(self, painter: QPainter, now_seconds: float) -> None:
        lifetime = float(self._config.attack_flash_lifetime_seconds)
        kept_flashes: List[_AttackFlash] = []
        for flash in self._attack_flashes:
            age = now_seconds - flash.created_seconds
            if age < 0.0 or age > lifetime:
                continue
            kept_flashes.append(flash)

            painter.save()
            painter.setOpacity(1.0 - min(1.0, age / lifetime))
            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(QBrush(QColor(255, 220, 120)))
            painter.drawRect(self._tile_rect(flash.position))
            painter.restore()

        # Consumer drains expired effects every frame.
        self._attack_flashes = kept_flashes

    def _paint_enemies(self, painter: QPainter, now_seconds: float) -> None:
        inset = float(self._config.tile_size_pixels) * 0.15
        painter.save()
        painter.setPen(Qt.PenStyle.NoPen)
        for enemy in self._session.enemies():
            if enemy.is_defeated:
                continue
            painter.setBrush(QBrush(ENEMY_COLORS[enemy.kind]))
            painter.drawRect(self._tile_rect(enemy.position).adjusted(inset, inset, -inset, -inset))
        painter.restore()

    def _paint_player(self, painter: QPainter, now_seconds: float) -> None:
        player = self._session.player()
        if player.is_falling or player.is_defeated:
            return

        rect = self._tile_rect(player.position)
        radius = float(self._config.tile_size_pixels) * 0.38

        painter.save()
        if self._session.is_charging():
            painter.setPen(QPen(CHARGE_OUTLINE_COLOR, 3.0))
        else:
            painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(PLAYER_COLORS[self._session.movement_mode()]))
        painter.drawEllipse(rect.center(), radius, radius)
        painter.restore()

    def _paint_hud(self, painter: QPainter, now_seconds: float) -> None:
        self._paint_health(painter)
        self._paint_beat_bar(painter, now_seconds)
        self._paint_hud_text(painter, now_seconds)

    def _paint_health(self, painter: QPainter) -> None:
        player = self._session.player()
        block = 14.0
        painter.save()
        painter.setPen(QPen(QColor(240, 240, 240)))
        for index in range(int(player.max_hp)):
            filled = index < int(player.hp)
            painter.setBrush(QBrush(QColor(220, 40, 40) if filled else QColor(40, 40, 40)))
            painter.drawRect(QRectF(10.0 + index * (block + 4.0), 8.0, block, block))
        painter.restore()

    def _paint_beat_bar(self, painter: QPainter, now_seconds: float) -> None:
        clock = self._session.clock()
        lookahead = max(1, int(self._config.beat_bar_lookahead_beats))

        bar_left = float(self.width()) * 0.35
        bar_right = float(self.width()) - 10.0
        bar_y = 16.0
        beat_spacing = (bar_right - bar_left) / float(lookahead)
        progress = clock.beat_progress()

        painter.save()
        painter.setPen(QPen(QColor(90, 90, 90), 2.0))
        painter.drawLine(QPointF(bar_left, bar_y), QPointF(bar_right, bar_y))

        pulse_active = (now_seconds - self._last_beat_seconds) <= float(self._config.beat_pulse_lifetime_seconds)
        painter.setPen(QPen(QColor(255, 255, 255) if pulse_active else QColor(180, 180, 180), 3.0))
        painter.drawLine(QPointF(bar_left, bar_y - 10.0), QPointF(bar_left, bar_y + 10.0))

        # Upcoming beats scroll toward the hit line; half-beats are the smaller marks.
        painter.setPen(Qt.PenStyle.NoPen)
        for beat_offset in range(0, lookahead + 1):
            for fraction, size in ((0.0, 6.0), (0.5, 3.0)):
                distance = float(beat_offset) + fraction - progress
                if distance < 0.0 or distance > float(lookahead):
                    continue
                x = bar_left + distance * beat_spacing
                painter.setBrush(QBrush(QColor(70, 180, 240)))
                painter.drawEllipse(QPointF(x, bar_y), size, size)
        painter.restore()

    def _paint_hud_text(self, painter: QPainter, now_seconds: float) -> None:
        stats = self._session.stats()
        painter.save()
        painter.setPen(QPen(QColor(240, 240, 240)))
        painter.setFont(QFont("Arial", 11))
        hud_text = f"Beat {self._session.clock().beat_count()}  Combo {stats.combo}  Max {stats.max_combo}"
        painter.drawText(QRectF(10.0, 28.0, float(self.width()) * 0.5, 20.0), int(Qt.AlignmentFlag.AlignLeft), hud_text)

        age = now_seconds - self._signal_text_seconds
        if self._signal_text and 0.0 <= age <= float(self._config.signal_text_lifetime_seconds):
            painter.setFont(QFont("Arial", 12, weight=QFont.Weight.Bold))
            painter.drawText(
                QRectF(float(self.width()) * 0.35, 28.0, float(self.width()) * 0.65 - 10.0, 20.0),
                int(Qt.AlignmentFlag.AlignHCenter),
                self._signal_text,
            )

        state_text = str(self._state_text or "").strip()
        if state_text:
            painter.setFont(QFont("Arial", 12))
            painter.drawText(
                QRectF(0.0, float(self.height()) - 24.0, float(self.width()), 20.0),
                int(Qt.AlignmentFlag.AlignHCenter),
                state_text,
            )
        painter.restore()
