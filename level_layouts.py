"""
level_layouts.py

Level layouts: grid, player spawn and enemy placements.

Two layouts are built in. A level file can replace them. It is a UTF-8 JSON
object validated with pydantic:

{
  "levels": [
    {
      "rows": ["#####", "#...#", "#.E.#", "#####"],
      "player_spawn": [1, 1],
      "enemies": [{"x": 3, "y": 1, "kind": "wanderer"}]
    }
  ]
}

Row symbols follow grid_model.TILE_LEGEND.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
from typing import List, Tuple

from pydantic import BaseModel, Field, ValidationError

from enemies import EnemyKind
from gameplay_models import ConfigError, GridPos, TileKind
from grid_model import GridLevel

DEFAULT_GRID_WIDTH = 16
DEFAULT_GRID_HEIGHT = 16


@dataclass(frozen=True)
class EnemySpawn:
    position: GridPos
    kind: EnemyKind


@dataclass(frozen=True)
class LevelLayout:
    rows: Tuple[str, ...]
    player_spawn: GridPos
    enemies: Tuple[EnemySpawn, ...] = ()

    def build_grid(self) -> GridLevel:
        # Fresh grid per load so tile edits never leak across reloads.
        return GridLevel.from_rows(self.rows)


class EnemySpawnModel(BaseModel):
    x: int = Field(ge=0)
    y: int = Field(ge=0)
    kind: EnemyKind = EnemyKind.WANDERER


class LevelModel(BaseModel):
    rows: List[str] = Field(min_length=1)
    player_spawn: Tuple[int, int]
    enemies: List[EnemySpawnModel] = Field(default_factory=list)


class LevelFileModel(BaseModel):
    levels: List[LevelModel] = Field(min_length=1)


def _arena_level() -> LevelLayout:
    grid = GridLevel.bordered(DEFAULT_GRID_WIDTH, DEFAULT_GRID_HEIGHT)
    grid.set_tile_at(5, 5, TileKind.PIT)
    grid.set_tile_at(8, 5, TileKind.SPIKE)
    grid.set_tile_at(5, 8, TileKind.WALL)
    # Exit at the bottom.
    grid.set_tile_at(DEFAULT_GRID_WIDTH // 2, DEFAULT_GRID_HEIGHT - 2, TileKind.AREA_TRANSITION)
    return LevelLayout(
        rows=tuple(grid.to_rows()),
        player_spawn=GridPos(2, 2),
        enemies=(
            EnemySpawn(GridPos(4, 4), EnemyKind.STATIC),
            EnemySpawn(GridPos(8, 8), EnemyKind.WANDERER),
            EnemySpawn(GridPos(10, 4), EnemyKind.AGGRESSIVE),
        ),
    )


def _pillar_level() -> LevelLayout:
    grid = GridLevel.bordered(DEFAULT_GRID_WIDTH, DEFAULT_GRID_HEIGHT)
    for x, y in ((4, 4), (12, 4), (4, 12), (12, 12)):
        grid.set_tile_at(x, y, TileKind.WALL)
    # Exit at the top.
    grid.set_tile_at(DEFAULT_GRID_WIDTH // 2, 1, TileKind.AREA_TRANSITION)
    return LevelLayout(
        rows=tuple(grid.to_rows()),
        player_spawn=GridPos(8, 12),
        enemies=(EnemySpawn(GridPos(6, 6), EnemyKind.AGGRESSIVE),),
    )


def builtin_levels() -> List[LevelLayout]:
    return [_arena_level(), _pillar_level()]


def _validate_layout(layout: LevelLayout, level_index: int) -> LevelLayout:
    grid = layout.build_grid()
    spawn = layout.player_spawn
    if grid.tile_kind_at(spawn.x, spawn.y) != TileKind.FLOOR:
        raise ConfigError(f"level {level_index}: player spawn {spawn} is not a floor tile")
    for enemy in layout.enemies:
        if not grid.is_walkable(enemy.position.x, enemy.position.y):
            raise ConfigError(f"level {level_index}: enemy spawn {enemy.position} is not walkable")
    return layout


def load_level_file(level_path: Path) -> List[LevelLayout]:
    try:
        raw_text = Path(level_path).read_text(encoding="utf-8")
    except OSError as exception:
        raise ConfigError(f"Failed to read level file: {level_path}. Error: {exception}") from exception

    try:
        parsed = LevelFileModel.model_validate(json.loads(raw_text))
    except json.JSONDecodeError as exception:
        raise ConfigError(f"Level file is not valid JSON: {level_path}. Error: {exception}") from exception
    except ValidationError as exception:
        raise ConfigError(f"Level file validation failed for {level_path}:\n{exception}") from exception

    layouts: List[LevelLayout] = []
    for level_index, level_model in enumerate(parsed.levels):
        layout = LevelLayout(
            rows=tuple(level_model.rows),
            player_spawn=GridPos(*level_model.player_spawn),
            enemies=tuple(EnemySpawn(GridPos(spawn.x, spawn.y), spawn.kind) for spawn in level_model.enemies),
        )
        layouts.append(_validate_layout(layout, level_index))
    return layouts
