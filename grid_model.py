# -*- coding: utf-8 -*-
########################
# grid_model.py
########################
# Purpose:
# - Static mapping from grid coordinate to TileKind.
# - Answers walkability and neighbour queries for actors.
#
# Design notes:
# - No Qt usage. Pure data plus queries.
# - Out-of-bounds queries never raise: tile_kind_at returns None and is_walkable returns False.
# - Tiles are stored row-major (tiles[y][x]).
#
########################
# Interfaces:
# Public classes:
# - class GridLevel
#   - __init__(tiles: Sequence[Sequence[TileKind]])
#   - from_rows(rows: Sequence[str], legend: Optional[Mapping[str, TileKind]] = None) -> GridLevel
#   - bordered(width: int, height: int) -> GridLevel
#   - width() -> int, height() -> int
#   - in_bounds(x: int, y: int) -> bool
#   - tile_kind_at(x: int, y: int) -> Optional[TileKind]
#   - is_walkable(x: int, y: int) -> bool
#   - target_position(position: GridPos, direction: Direction) -> Optional[GridPos]
#   - set_tile_at(x: int, y: int, kind: TileKind) -> None
#   - to_rows() -> list[str]
#
# Public constants:
# - TILE_LEGEND: dict[str, TileKind]
#
########################

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence

from gameplay_models import ConfigError, Direction, GridPos, TileKind

TILE_LEGEND: Dict[str, TileKind] = {
    ".": TileKind.FLOOR,
    "#": TileKind.WALL,
    "O": TileKind.PIT,
    "^": TileKind.SPIKE,
    "B": TileKind.SLIDING_BOX,
    "E": TileKind.AREA_TRANSITION,
}


class GridLevel:
    def __init__(self, tiles: Sequence[Sequence[TileKind]]) -> None:
        rows = [list(row) for row in tiles]
        if not rows or not rows[0]:
            raise ConfigError("grid must have at least one row and one column")
        width = len(rows[0])
        for row_index, row in enumerate(rows):
            if len(row) != width:
                raise ConfigError(f"grid row {row_index} has {len(row)} tiles, expected {width}")
        self._tiles: List[List[TileKind]] = rows
        self._width = width
        self._height = len(rows)

    @classmethod
    def from_rows(cls, rows: Sequence[str], legend: Optional[Mapping[str, TileKind]] = None) -> GridLevel:
        symbols = dict(legend) if legend is not None else TILE_LEGEND
        tiles: List[List[TileKind]] = []
        for row_index, row_text in enumerate(rows):
            row: List[TileKind] = []
            for column_index, symbol in enumerate(row_text):
                kind = symbols.get(symbol)
                if kind is None:
                    raise ConfigError(f"unknown tile symbol {symbol!r} at ({column_index}, {row_index})")
                row.append(kind)
            tiles.append(row)
        return cls(tiles)

    @classmethod
    def bordered(cls, width: int, height: int) -> GridLevel:
        """Floor surrounded by a one-tile wall border."""
        tiles: List[List[TileKind]] = []
        for y in range(int(height)):
            row: List[TileKind] = []
            for x in range(int(width)):
                on_border = x == 0 or x == width - 1 or y == 0 or y == height - 1
                row.append(TileKind.WALL if on_border else TileKind.FLOOR)
            tiles.append(row)
        return cls(tiles)

    def width(self) -> int:
        return int(self._width)

    def height(self) -> int:
        return int(self._height)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= int(x) < self._width and 0 <= int(y) < self._height

    def tile_kind_at(self, x: int, y: int) -> Optional[TileKind]:
        if not self.in_bounds(x, y):
            return None
        return self._tiles[int(y)][int(x)]

    def is_walkable(self, x: int, y: int) -> bool:
        kind = self.tile_kind_at(x, y)
        return kind is not None and kind != TileKind.WALL

    def target_position(self, position: GridPos, direction: Direction) -> Optional[GridPos]:
        if direction == Direction.NONE:
            return None
        target = position.step(direction)
        if not self.in_bounds(target.x, target.y):
            return None
        return target

    def set_tile_at(self, x: int, y: int, kind: TileKind) -> None:
        if not self.in_bounds(x, y):
            return
        self._tiles[int(y)][int(x)] = kind

    def to_rows(self) -> List[str]:
        symbols = {kind: symbol for symbol, kind in TILE_LEGEND.items()}
        return ["".join(symbols[kind] for kind in row) for row in self._tiles]
