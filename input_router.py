# -*- coding: utf-8 -*-
########################
# input_router.py
########################
# Purpose:
# - Single keyboard listener for gameplay input.
# - Translates QKeyEvent into input_edges.InputEdge values, queues them for the next tick and emits a Qt signal.
#
# Design notes:
# - This must be the only keyboard input source. No duplicate key mapping elsewhere.
# - WASD are move keys (press edges only). Arrow keys are action keys (press and release edges).
# - Debounce rules:
#   - Ignore auto repeat.
#   - Held keys form a ControlSnapshot; edges come from diffing it with this router's PreviousEdgeState.
# - No time source. Edges are judged by the session against the beat clock when the tick consumes them.
# - Focus loss clears held keys and queues the matching action releases.
#
########################
# Interfaces:
# Public enums:
# - class KeyRole(enum.Enum): MOVE | ACTION
#
# Public classes:
# - class InputRouter(PyQt6.QtCore.QObject)
#   - Signals:
#     - inputEdge(input_edges.InputEdge)
#   - Methods:
#     - handle_key_press(event: QKeyEvent) -> bool
#     - handle_key_release(event: QKeyEvent) -> bool
#     - press_key(key_code: int, is_auto_repeat: bool = False) -> bool
#     - release_key(key_code: int, is_auto_repeat: bool = False) -> bool
#     - drain_edges() -> list[InputEdge]
#     - clear_pressed_keys() -> None
#
# Inputs:
# - Raw QKeyEvent from the Qt event loop (forwarded by the harness event filter).
#
# Outputs:
# - InputEdge lists consumed by GameSession.tick.
#
########################

from __future__ import annotations

import enum
import logging
from typing import Dict, List, Optional, Set, Tuple

from PyQt6.QtCore import QObject, Qt, pyqtSignal
from PyQt6.QtGui import QKeyEvent

from gameplay_models import Direction
from input_edges import ControlSnapshot, InputEdge, PreviousEdgeState

_LOGGER = logging.getLogger(__name__)


class KeyRole(enum.Enum):
    MOVE = "move"
    ACTION = "action"


def _build_default_key_map() -> Dict[int, Tuple[KeyRole, Direction]]:
    """
    Default bindings.

      - WASD: move Up, Left, Down, Right
      - Arrow keys: directional action Up, Left, Down, Right
    """
    key_map: Dict[int, Tuple[KeyRole, Direction]] = {}

    def bind(key_constant: int, role: KeyRole, direction: Direction) -> None:
        key_map[int(key_constant)] = (role, direction)

    # WASD
    bind(Qt.Key.Key_W, KeyRole.MOVE, Direction.UP)
    bind(Qt.Key.Key_A, KeyRole.MOVE, Direction.LEFT)
    bind(Qt.Key.Key_S, KeyRole.MOVE, Direction.DOWN)
    bind(Qt.Key.Key_D, KeyRole.MOVE, Direction.RIGHT)

    # Arrow keys
    bind(Qt.Key.Key_Up, KeyRole.ACTION, Direction.UP)
    bind(Qt.Key.Key_Left, KeyRole.ACTION, Direction.LEFT)
    bind(Qt.Key.Key_Down, KeyRole.ACTION, Direction.DOWN)
    bind(Qt.Key.Key_Right, KeyRole.ACTION, Direction.RIGHT)

    return key_map


class InputRouter(QObject):
    """
    Central keyboard router for gameplay input.

    This object never judges timing. Its only job is to:
      - map keys to a role and a direction
      - keep the held-key snapshot and turn its changes into edges
      - queue the edges for the next session tick and emit them
    """

    # "object" keeps the signal payload a plain Python value (InputEdge).
    inputEdge = pyqtSignal(object)

    def __init__(
        self,
        parent: Optional[QObject] = None,
        key_map: Optional[Dict[int, Tuple[KeyRole, Direction]]] = None,
    ) -> None:
        """
        parent:
            Optional QObject parent.
        key_map:
            Optional override for the key map. If omitted the default map
            binds WASD to moves and the arrow keys to actions.
        """
        super().__init__(parent)

        self._key_map: Dict[int, Tuple[KeyRole, Direction]] = (
            dict(key_map) if key_map is not None else _build_default_key_map()
        )

        self._pressed_keys: Set[int] = set()
        self._edge_state = PreviousEdgeState()
        self._pending_edges: List[InputEdge] = []

        self._total_presses: int = 0
        self._ignored_presses: int = 0

    # ------------------------------------------------------------------
    # Public API used by game_harness
    # ------------------------------------------------------------------

    def handle_key_press(self, event: QKeyEvent) -> bool:
        """
        Handle a Qt key press.

        Returns True if this router consumed the event, False otherwise.
        """
        return self.press_key(int(event.key()), bool(event.isAutoRepeat()))

    def handle_key_release(self, event: QKeyEvent) -> bool:
        """
        Handle a Qt key release.

        Returns True if this router consumed the event, False otherwise.
        """
        return self.release_key(int(event.key()), bool(event.isAutoRepeat()))

    def press_key(self, key_code: int, is_auto_repeat: bool = False) -> bool:
        key_code = int(key_code)
        if key_code not in self._key_map:
            return False

        # Holding a key must not spam edges.
        if is_auto_repeat or key_code in self._pressed_keys:
            self._ignored_presses += 1
            return True

        self._pressed_keys.add(key_code)
        self._total_presses += 1
        self._publish_edges()
        return True

    def release_key(self, key_code: int, is_auto_repeat: bool = False) -> bool:
        key_code = int(key_code)
        if key_code not in self._key_map:
            return False

        if is_auto_repeat:
            return True

        if key_code in self._pressed_keys:
            self._pressed_keys.discard(key_code)
            self._publish_edges()
        else:
            _LOGGER.debug("Ignoring release of key %d that was not held", key_code)
        return True

    def drain_edges(self) -> List[InputEdge]:
        drained = self._pending_edges
        self._pending_edges = []
        return drained

    def clear_pressed_keys(self) -> None:
        """
        Clear pressed state for all keys.

        Called by the harness on focus loss or window deactivation.
        Held action keys produce their release edges so no charge is left open.
        """
        self._pressed_keys.clear()
        self._publish_edges()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _current_snapshot(self) -> ControlSnapshot:
        move_directions: Set[Direction] = set()
        action_directions: Set[Direction] = set()
        for key_code in self._pressed_keys:
            role, direction = self._key_map[key_code]
            if role == KeyRole.MOVE:
                move_directions.add(direction)
            else:
                action_directions.add(direction)
        return ControlSnapshot(
            move_directions=frozenset(move_directions),
            action_directions=frozenset(action_directions),
        )

    def _publish_edges(self) -> None:
        for edge in self._edge_state.diff(self._current_snapshot()):
            self._pending_edges.append(edge)
            self.inputEdge.emit(edge)

    # ------------------------------------------------------------------
    # Introspection helpers
    # ------------------------------------------------------------------

    @property
    def key_map(self) -> Dict[int, Tuple[KeyRole, Direction]]:
        return dict(self._key_map)

    @property
    def total_presses(self) -> int:
        return self._total_presses

    @property
    def ignored_presses(self) -> int:
        return self._ignored_presses


def _run_unit_tests() -> None:
    router = InputRouter()

    assert router.key_map[int(Qt.Key.Key_W)] == (KeyRole.MOVE, Direction.UP)
    assert router.key_map[int(Qt.Key.Key_Left)] == (KeyRole.ACTION, Direction.LEFT)

    router.press_key(int(Qt.Key.Key_Right))
    router.press_key(int(Qt.Key.Key_Right), is_auto_repeat=True)
    router.release_key(int(Qt.Key.Key_Right))
    assert [edge.direction for edge in router.drain_edges()] == [Direction.RIGHT, Direction.RIGHT]
    assert router.ignored_presses == 1


if __name__ == "__main__":
    _run_unit_tests()
    print("input_router.py: ok")
