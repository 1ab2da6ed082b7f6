"""
rhythm_adventure.py

Real entrypoint that launches the game. Supports a headless mode for offline checks.

Integration
- Loads config (config.py) and configures logging (logging_setup.py)
- Loads the level file named by the config, or the built-in levels
- Builds one GameSession
- GUI mode: creates QApplication and the GameHarnessWindow and starts the Qt event loop
- Headless mode: advances the session with fixed ticks and no input, then prints a JSON summary
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from config import GameConfig, load_config
from game_session import GameSession
from gameplay_models import ConfigError
from level_layouts import LevelLayout, load_level_file
from logging_setup import setup_logging

_LOGGER = logging.getLogger(__name__)


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rhythm Adventure")
    parser.add_argument("--config", type=Path, default=None, help="Config file to use instead of the search path.")
    parser.add_argument("--levels", type=Path, default=None, help="JSON level file replacing the built-in levels.")
    parser.add_argument(
        "--headless",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Run the session without a window for SECONDS of game time and print a JSON summary.",
    )
    parser.add_argument("--quiet", action="store_true", help="Only log warnings and errors.")
    parser.add_argument("--debug", action="store_true", help="Log per-beat and input details.")
    return parser


def _load_levels(config: GameConfig, override_path: Optional[Path]) -> Optional[List[LevelLayout]]:
    level_path = override_path
    if level_path is None and config.levels_path:
        level_path = Path(config.levels_path).expanduser()
    if level_path is None:
        return None
    return load_level_file(level_path)


def run_headless(session: GameSession, duration_seconds: float, tick_interval_ms: int) -> Dict[str, Any]:
    """Advance with fixed ticks and no input. Deterministic for a seeded session."""
    total_ms = max(0.0, float(duration_seconds) * 1000.0)
    step_ms = float(max(1, int(tick_interval_ms)))

    event_count = 0
    elapsed_ms = 0.0
    while elapsed_ms < total_ms:
        delta_ms = min(step_ms, total_ms - elapsed_ms)
        event_count += len(session.tick(delta_ms))
        elapsed_ms += delta_ms

    summary = session.summary()
    summary["elapsed_ms"] = elapsed_ms
    summary["event_count"] = event_count
    return summary


def _print_error(exception: Exception) -> None:
    print(json.dumps({"ok": False, "error": str(exception)}, ensure_ascii=False, indent=2))


def main(argv: Optional[Sequence[str]] = None) -> int:
    parsed_args = build_argument_parser().parse_args(argv)

    try:
        game_config, config_path = load_config(parsed_args.config)
    except ConfigError as exception:
        setup_logging(parsed_args)
        _print_error(exception)
        return 2

    setup_logging(parsed_args, default_level=game_config.log_level)
    _LOGGER.info("Config: %s", config_path if config_path is not None else "defaults")

    try:
        levels = _load_levels(game_config, parsed_args.levels)
        session = GameSession.from_config(game_config, levels=levels)
    except ConfigError as exception:
        _print_error(exception)
        return 2

    if parsed_args.headless is not None:
        summary = run_headless(session, parsed_args.headless, game_config.window.tick_interval_ms)
        print(json.dumps({"ok": True, "summary": summary}, ensure_ascii=False, indent=2))
        return 0

    from PyQt6.QtWidgets import QApplication

    from game_harness import GameHarnessWindow

    qt_application = QApplication(sys.argv)

    main_window = GameHarnessWindow(
        session,
        tile_size_pixels=game_config.window.tile_size_pixels,
        tick_interval_ms=game_config.window.tick_interval_ms,
    )
    main_window.resize(main_window.view().sizeHint())
    main_window.show()

    return int(qt_application.exec())


if __name__ == "__main__":
    raise SystemExit(main())
