"""Tests for built-in levels and level files."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from enemies import EnemyKind
from gameplay_models import ConfigError, GridPos, TileKind
from level_layouts import builtin_levels, load_level_file


def _write_levels(tmp_path: Path, payload: object) -> Path:
    level_path = tmp_path / "levels.json"
    level_path.write_text(json.dumps(payload), encoding="utf-8")
    return level_path


class TestBuiltinLevels:
    def test_two_bordered_levels(self) -> None:
        levels = builtin_levels()
        assert len(levels) == 2
        for layout in levels:
            grid = layout.build_grid()
            assert grid.width() == 16
            assert grid.height() == 16
            assert grid.tile_kind_at(0, 0) == TileKind.WALL
            assert grid.tile_kind_at(layout.player_spawn.x, layout.player_spawn.y) == TileKind.FLOOR

    def test_each_level_has_an_exit(self) -> None:
        for layout in builtin_levels():
            assert any("E" in row for row in layout.rows)

    def test_first_level_hazards(self) -> None:
        grid = builtin_levels()[0].build_grid()
        assert grid.tile_kind_at(5, 5) == TileKind.PIT
        assert grid.tile_kind_at(8, 5) == TileKind.SPIKE

    def test_build_grid_returns_a_fresh_grid(self) -> None:
        layout = builtin_levels()[0]
        first = layout.build_grid()
        first.set_tile_at(2, 2, TileKind.WALL)
        assert layout.build_grid().tile_kind_at(2, 2) == TileKind.FLOOR


class TestLevelFile:
    def test_valid_file(self, tmp_path: Path) -> None:
        level_path = _write_levels(
            tmp_path,
            {
                "levels": [
                    {
                        "rows": ["#####", "#...#", "#..E#", "#####"],
                        "player_spawn": [1, 1],
                        "enemies": [{"x": 3, "y": 1, "kind": "aggressive"}, {"x": 2, "y": 2}],
                    }
                ]
            },
        )

        levels = load_level_file(level_path)

        assert len(levels) == 1
        assert levels[0].player_spawn == GridPos(1, 1)
        assert [spawn.kind for spawn in levels[0].enemies] == [EnemyKind.AGGRESSIVE, EnemyKind.WANDERER]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            load_level_file(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        level_path = tmp_path / "levels.json"
        level_path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_level_file(level_path)

    def test_empty_level_list(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            load_level_file(_write_levels(tmp_path, {"levels": []}))

    def test_spawn_on_wall(self, tmp_path: Path) -> None:
        payload = {"levels": [{"rows": ["###", "#.#", "###"], "player_spawn": [0, 0]}]}
        with pytest.raises(ConfigError):
            load_level_file(_write_levels(tmp_path, payload))

    def test_unknown_tile_symbol(self, tmp_path: Path) -> None:
        payload = {"levels": [{"rows": ["###", "#?#", "###"], "player_spawn": [1, 1]}]}
        with pytest.raises(ConfigError):
            load_level_file(_write_levels(tmp_path, payload))
