"""
config.py

Typed configuration loading and validation for Rhythm Adventure.

Design goals
- Load at most one UTF-8 JSON config file
- Validate with pydantic (defaults included)
- Support environment variable overrides
- No other I/O beyond reading the config file (no directory creation)

Config file location
- If RHYTHM_ADVENTURE_CONFIG_PATH is set, that file is used and must exist.
- Otherwise these paths are searched in order and the first one that exists is used:
  1) ./rhythm_adventure_config.json (current working directory)
  2) <user config dir>/RhythmAdventure/RhythmAdventure/rhythm_adventure_config.json
  3) <user config dir>/RhythmAdventure/RhythmAdventure/config.json
- When none exists, defaults apply.

Example config file (rhythm_adventure_config.json)
{
  "rhythm": {
    "bpm": 120,
    "tolerance_ms": 150,
    "charge_beats": 2,
    "charge_watchdog_beats": null
  },
  "player": {
    "max_hp": 4
  },
  "enemies": {
    "seed": 1234
  },
  "window": {
    "tile_size_pixels": 32,
    "tick_interval_ms": 16
  },
  "levels_path": null,
  "log_level": "INFO"
}
"""

from __future__ import annotations

import json
import math
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from platformdirs import user_config_dir
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from gameplay_models import ConfigError

ENV_PREFIX = "RHYTHM_ADVENTURE_"
CONFIG_FILE_NAME = "rhythm_adventure_config.json"
LOG_LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class RhythmConfig(BaseModel):
    bpm: float = Field(default=120.0, gt=0.0, description="Tempo in beats per minute.")
    tolerance_ms: float = Field(default=150.0, ge=0.0, description="Half-width of the timing window.")
    charge_beats: int = Field(default=2, ge=1, description="Beats to hold before a release resolves a heavy action.")
    charge_watchdog_beats: Optional[int] = Field(
        default=None,
        description="Optional: cancel a charge held longer than this many beats. Must exceed charge_beats.",
    )

    @field_validator("bpm", "tolerance_ms")
    @classmethod
    def validate_finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("must be a finite number")
        return value

    @model_validator(mode="after")
    def validate_watchdog(self) -> RhythmConfig:
        if self.charge_watchdog_beats is not None and self.charge_watchdog_beats <= self.charge_beats:
            raise ValueError("charge_watchdog_beats must exceed charge_beats")
        return self


class PlayerConfig(BaseModel):
    max_hp: int = Field(default=4, ge=1, le=99, description="Starting and maximum health.")


class EnemyConfig(BaseModel):
    seed: Optional[int] = Field(default=None, description="Seed for enemy movement. Empty means nondeterministic.")


class WindowConfig(BaseModel):
    tile_size_pixels: int = Field(default=32, ge=4, le=256, description="Edge length of one grid tile on screen.")
    tick_interval_ms: int = Field(default=16, ge=1, le=1000, description="Frame timer interval.")


class GameConfig(BaseModel):
    rhythm: RhythmConfig = Field(default_factory=RhythmConfig)
    player: PlayerConfig = Field(default_factory=PlayerConfig)
    enemies: EnemyConfig = Field(default_factory=EnemyConfig)
    window: WindowConfig = Field(default_factory=WindowConfig)
    levels_path: Optional[str] = Field(default=None, description="Optional JSON level file replacing the built-in levels.")
    log_level: str = Field(default="INFO", description="DEBUG, INFO, WARNING, ERROR or CRITICAL")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        normalized = (value or "").strip().upper()
        if normalized not in LOG_LEVEL_NAMES:
            raise ValueError("log_level must be one of: " + ", ".join(LOG_LEVEL_NAMES))
        return normalized

    @field_validator("levels_path")
    @classmethod
    def normalize_levels_path(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        trimmed = value.strip()
        return trimmed or None


def _default_config_candidates() -> List[Path]:
    config_directory = Path(user_config_dir("RhythmAdventure", "RhythmAdventure"))
    return [
        Path.cwd() / CONFIG_FILE_NAME,
        config_directory / CONFIG_FILE_NAME,
        config_directory / "config.json",
    ]


def _resolve_config_path() -> Optional[Path]:
    explicit_path_text = os.environ.get(ENV_PREFIX + "CONFIG_PATH", "").strip()
    if explicit_path_text:
        return Path(explicit_path_text)

    for candidate_path in _default_config_candidates():
        if candidate_path.exists():
            return candidate_path

    return None


def _read_json_file_utf8(config_path: Path) -> Dict[str, Any]:
    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except OSError as exception:
        raise ConfigError(f"Failed to read config file: {config_path}. Error: {exception}") from exception

    try:
        parsed = json.loads(raw_text)
    except json.JSONDecodeError as exception:
        raise ConfigError(f"Config file is not valid JSON: {config_path}. Error: {exception}") from exception

    if not isinstance(parsed, dict):
        raise ConfigError(f"Config file root must be a JSON object: {config_path}")

    return parsed


def _apply_environment_overrides(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Environment overrides are optional. The config file is the primary source of truth.

    Override variables:
    - RHYTHM_ADVENTURE_BPM
    - RHYTHM_ADVENTURE_TOLERANCE_MS
    - RHYTHM_ADVENTURE_CHARGE_BEATS
    - RHYTHM_ADVENTURE_SEED
    - RHYTHM_ADVENTURE_LEVELS_PATH
    - RHYTHM_ADVENTURE_LOG_LEVEL

    Values that do not parse are ignored.
    """
    def ensure_nested(config_root: Dict[str, Any], section_name: str) -> Dict[str, Any]:
        section = config_root.get(section_name)
        if isinstance(section, dict):
            return section
        section = {}
        config_root[section_name] = section
        return section

    updated_config = dict(config_dict)

    rhythm_section = ensure_nested(updated_config, "rhythm")
    enemies_section = ensure_nested(updated_config, "enemies")

    def override_string(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "")
        if value_text.strip():
            target_dict[key_name] = value_text.strip()

    def override_int(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "").strip()
        if not value_text:
            return
        try:
            target_dict[key_name] = int(value_text)
        except ValueError:
            return

    def override_float(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "").strip()
        if not value_text:
            return
        try:
            target_dict[key_name] = float(value_text)
        except ValueError:
            return

    override_float(ENV_PREFIX + "BPM", rhythm_section, "bpm")
    override_float(ENV_PREFIX + "TOLERANCE_MS", rhythm_section, "tolerance_ms")
    override_int(ENV_PREFIX + "CHARGE_BEATS", rhythm_section, "charge_beats")

    override_int(ENV_PREFIX + "SEED", enemies_section, "seed")

    override_string(ENV_PREFIX + "LEVELS_PATH", updated_config, "levels_path")
    override_string(ENV_PREFIX + "LOG_LEVEL", updated_config, "log_level")

    return updated_config


def load_config(config_path: Optional[Path] = None) -> Tuple[GameConfig, Optional[Path]]:
    """Returns the validated config and the file it came from (None when defaults apply)."""
    resolved_path = Path(config_path) if config_path is not None else _resolve_config_path()
    json_dict = _read_json_file_utf8(resolved_path) if resolved_path is not None else {}
    json_dict = _apply_environment_overrides(json_dict)

    source_text = str(resolved_path) if resolved_path is not None else "defaults"
    try:
        config = GameConfig.model_validate(json_dict)
    except ValidationError as exception:
        raise ConfigError(f"Config validation failed for {source_text}:\n{exception}") from exception

    return config, resolved_path


def to_json(config: GameConfig) -> str:
    return json.dumps(config.model_dump(), ensure_ascii=False, indent=2)


def main() -> int:
    try:
        config, resolved_path = load_config()
    except ConfigError as exception:
        error_payload = {"ok": False, "error": str(exception)}
        print(json.dumps(error_payload, ensure_ascii=False, indent=2))
        return 2

    output_payload = {
        "ok": True,
        "config_path": str(resolved_path) if resolved_path is not None else None,
        "config": json.loads(to_json(config)),
    }
    print(json.dumps(output_payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
