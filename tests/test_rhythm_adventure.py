"""Tests for the command line entry point."""

from __future__ import annotations

import json
import random
from pathlib import Path

import pytest

import config
import rhythm_adventure
from game_session import GameSession


@pytest.fixture(autouse=True)
def _no_default_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "_default_config_candidates", lambda: [tmp_path / "absent.json"])


class TestHeadless:
    def test_run_headless_is_deterministic_for_a_seed(self) -> None:
        summaries = [
            rhythm_adventure.run_headless(GameSession(rng=random.Random(3)), 3.0, 16) for _ in range(2)
        ]
        assert summaries[0] == summaries[1]
        assert summaries[0]["beat_count"] == 6
        assert summaries[0]["elapsed_ms"] == pytest.approx(3000.0)

    def test_main_headless_prints_summary(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert rhythm_adventure.main(["--headless", "2", "--quiet"]) == 0

        payload = json.loads(capsys.readouterr().out)
        assert payload["ok"] is True
        assert payload["summary"]["beat_count"] == 4
        assert payload["summary"]["level_index"] == 0

    def test_main_with_level_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        level_path = tmp_path / "levels.json"
        level_path.write_text(
            json.dumps({"levels": [{"rows": ["#####", "#...#", "#####"], "player_spawn": [2, 1]}]}),
            encoding="utf-8",
        )

        assert rhythm_adventure.main(["--headless", "1", "--levels", str(level_path), "--quiet"]) == 0

        payload = json.loads(capsys.readouterr().out)
        assert payload["summary"]["player"]["x"] == 2
        assert payload["summary"]["enemies_remaining"] == 0

    def test_config_error_exit_code(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        config_path = tmp_path / "bad.json"
        config_path.write_text(json.dumps({"rhythm": {"bpm": -1}}), encoding="utf-8")

        assert rhythm_adventure.main(["--config", str(config_path), "--headless", "1", "--quiet"]) == 2
        assert json.loads(capsys.readouterr().out)["ok"] is False

    def test_bad_level_file_exit_code(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert rhythm_adventure.main(["--headless", "1", "--levels", str(tmp_path / "none.json"), "--quiet"]) == 2
        assert json.loads(capsys.readouterr().out)["ok"] is False
