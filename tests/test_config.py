"""Tests for config loading, validation and environment overrides."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

import config
from config import GameConfig, load_config
from gameplay_models import ConfigError


@pytest.fixture
def no_default_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point the search path at an empty directory."""
    monkeypatch.setattr(config, "_default_config_candidates", lambda: [tmp_path / "absent.json"])
    return tmp_path


def _write_config(tmp_path: Path, payload: object) -> Path:
    config_path = tmp_path / "rhythm_adventure_config.json"
    config_path.write_text(json.dumps(payload), encoding="utf-8")
    return config_path


class TestDefaults:
    def test_defaults_without_a_file(self, no_default_config: Path) -> None:
        game_config, resolved_path = load_config()

        assert resolved_path is None
        assert game_config.rhythm.bpm == 120.0
        assert game_config.rhythm.tolerance_ms == 150.0
        assert game_config.rhythm.charge_beats == 2
        assert game_config.rhythm.charge_watchdog_beats is None
        assert game_config.player.max_hp == 4
        assert game_config.log_level == "INFO"

    def test_search_path_picks_first_existing(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        config_path = _write_config(tmp_path, {"rhythm": {"bpm": 100}})
        monkeypatch.setattr(config, "_default_config_candidates", lambda: [tmp_path / "absent.json", config_path])

        game_config, resolved_path = load_config()

        assert resolved_path == config_path
        assert game_config.rhythm.bpm == 100.0


class TestFileLoading:
    def test_explicit_file(self, tmp_path: Path) -> None:
        config_path = _write_config(
            tmp_path,
            {"rhythm": {"bpm": 140, "charge_beats": 3}, "enemies": {"seed": 9}, "log_level": "debug"},
        )

        game_config, resolved_path = load_config(config_path)

        assert resolved_path == config_path
        assert game_config.rhythm.bpm == 140.0
        assert game_config.rhythm.charge_beats == 3
        assert game_config.enemies.seed == 9
        assert game_config.log_level == "DEBUG"

    def test_env_path(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        config_path = _write_config(tmp_path, {"player": {"max_hp": 7}})
        monkeypatch.setenv("RHYTHM_ADVENTURE_CONFIG_PATH", str(config_path))

        game_config, resolved_path = load_config()

        assert resolved_path == config_path
        assert game_config.player.max_hp == 7

    def test_env_path_to_missing_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("RHYTHM_ADVENTURE_CONFIG_PATH", str(tmp_path / "missing.json"))
        with pytest.raises(ConfigError):
            load_config()

    @pytest.mark.parametrize(
        "payload",
        [
            {"rhythm": {"bpm": 0}},
            {"rhythm": {"tolerance_ms": -5}},
            {"rhythm": {"charge_beats": 0}},
            {"rhythm": {"charge_beats": 2, "charge_watchdog_beats": 2}},
            {"player": {"max_hp": 0}},
            {"log_level": "LOUD"},
            ["not", "an", "object"],
        ],
    )
    def test_invalid_values(self, tmp_path: Path, payload: object) -> None:
        with pytest.raises(ConfigError):
            load_config(_write_config(tmp_path, payload))

    def test_invalid_json(self, tmp_path: Path) -> None:
        config_path = tmp_path / "broken.json"
        config_path.write_text("{", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(config_path)


class TestEnvironmentOverrides:
    def test_overrides_win_over_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        config_path = _write_config(tmp_path, {"rhythm": {"bpm": 140}})
        monkeypatch.setenv("RHYTHM_ADVENTURE_BPM", "90.5")
        monkeypatch.setenv("RHYTHM_ADVENTURE_TOLERANCE_MS", "80")
        monkeypatch.setenv("RHYTHM_ADVENTURE_CHARGE_BEATS", "3")
        monkeypatch.setenv("RHYTHM_ADVENTURE_SEED", "11")
        monkeypatch.setenv("RHYTHM_ADVENTURE_LOG_LEVEL", "warning")

        game_config, _resolved_path = load_config(config_path)

        assert game_config.rhythm.bpm == 90.5
        assert game_config.rhythm.tolerance_ms == 80.0
        assert game_config.rhythm.charge_beats == 3
        assert game_config.enemies.seed == 11
        assert game_config.log_level == "WARNING"

    def test_unparseable_override_is_ignored(self, monkeypatch: pytest.MonkeyPatch, no_default_config: Path) -> None:
        monkeypatch.setenv("RHYTHM_ADVENTURE_BPM", "fast")
        game_config, _resolved_path = load_config()
        assert game_config.rhythm.bpm == 120.0

    def test_invalid_override_value_is_a_config_error(
        self, monkeypatch: pytest.MonkeyPatch, no_default_config: Path
    ) -> None:
        monkeypatch.setenv("RHYTHM_ADVENTURE_BPM", "-1")
        with pytest.raises(ConfigError):
            load_config()


class TestMain:
    def test_main_prints_resolved_config(self, no_default_config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert config.main() == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["ok"] is True
        assert payload["config_path"] is None
        assert payload["config"]["rhythm"]["bpm"] == 120.0

    def test_main_reports_errors(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setenv("RHYTHM_ADVENTURE_CONFIG_PATH", str(_write_config(tmp_path, {"rhythm": {"bpm": 0}})))
        assert config.main() == 2
        assert json.loads(capsys.readouterr().out)["ok"] is False

    def test_model_round_trip_defaults(self) -> None:
        assert GameConfig.model_validate(GameConfig().model_dump()) == GameConfig()
