"""Loading and validation of the map grid that follows a scene header.

Rows are indexed first, columns second: ``grid[row][col]``. The player
marker (``N``, ``S``, ``E`` or ``W``) is located, recorded and replaced by
an open floor cell (``0``) when the map is loaded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from raycube.config import ConfigError

BLANK = 0
BORDER = 1
OTHER = 2

PLAYER_MARKS = "NSEW"
_ENCLOSING = frozenset("01NSWED")
_TO_FLOOR = str.maketrans({mark: "0" for mark in PLAYER_MARKS})


@dataclass
class GameMap:
    """A loaded map grid together with the player's starting cell."""

    grid: list[list[str]]
    player_row: int
    player_col: int
    orientation: str

    @property
    def height(self) -> int:
        """Number of rows."""
        return len(self.grid)

    @property
    def width(self) -> int:
        """Length of the longest row."""
        return max((len(row) for row in self.grid), default=0)

    def _inside(self, row: int, col: int) -> bool:
        return 0 <= row < len(self.grid) and 0 <= col < len(self.grid[row])

    def cell(self, row: int, col: int) -> str:
        """The character at a cell, or an empty string outside the grid."""
        if self._inside(row, col):
            return self.grid[row][col]
        return ""

    def set_cell(self, row: int, col: int, value: str) -> None:
        """Replace the character at a cell inside the grid."""
        if len(value) != 1:
            raise ValueError("a cell holds exactly one character")
        if not self._inside(row, col):
            raise IndexError(f"cell ({row}, {col}) is outside the map")
        self.grid[row][col] = value


def classify_boundary_line(line: str) -> int:
    """Classify a line as ``BLANK``, ``BORDER`` or ``OTHER``.

    A border holds at least one ``1`` and otherwise only spaces; a blank
    line holds only spaces; anything else is ``OTHER``.
    """
    kind = BLANK
    for ch in line:
        if ch == "1":
            kind = BORDER
        elif ch not in " \n":
            return OTHER
    return kind


def is_inner_line(line: str) -> bool:
    """True when the first non-space character and the last character are ``1``."""
    return line.lstrip(" ").startswith("1") and line.endswith("1")


def is_closing_line(line: str) -> bool:
    """True when the line holds only walls and spaces."""
    return all(ch in " 1" for ch in line)


def count_map_rows(lines: Sequence[str]) -> int:
    """Validate the map section and return its number of rows.

    Blank lines before the top border are skipped; every row after it must
    be an inner line and the final row must be a closing line.
    """
    pos = 0
    while pos < len(lines):
        kind = classify_boundary_line(lines[pos])
        pos += 1
        if kind == BORDER:
            break
        if pos >= len(lines) or kind == OTHER:
            raise ConfigError("map error")
    height = 1
    last: Optional[str] = None
    for line in lines[pos:]:
        if not is_inner_line(line):
            raise ConfigError("map error")
        height += 1
        last = line
    if last is None or not is_closing_line(last):
        raise ConfigError("map error")
    return height


def extract_map_rows(lines: Sequence[str], height: int) -> list[str]:
    """Return up to ``height`` rows starting at the first border line."""
    for index, line in enumerate(lines):
        if classify_boundary_line(line) == BORDER:
            return list(lines[index:index + height])
    raise ConfigError("map error")


def check_single_player(rows: Sequence[str]) -> None:
    """Require exactly one player marker in the grid."""
    count = sum(row.count(mark) for row in rows for mark in PLAYER_MARKS)
    if count != 1:
        raise ConfigError("player must be one")


def find_player(rows: Sequence[str]) -> Optional[tuple[int, int, str]]:
    """Return ``(row, col, orientation)`` of the last player marker, if any."""
    found = None
    for row_index, row in enumerate(rows):
        for col_index, ch in enumerate(row):
            if ch in PLAYER_MARKS:
                found = (row_index, col_index, ch)
    return found


def check_enclosure(rows: Sequence[str]) -> list[str]:
    """Check that every floor cell is surrounded by map cells.

    Returns the rows with the player marker turned into floor.
    """
    check_single_player(rows)
    grid = [row.translate(_TO_FLOOR) for row in rows]

    def at(row: int, col: int) -> str:
        if 0 <= row < len(grid) and 0 <= col < len(grid[row]):
            return grid[row][col]
        return ""

    for row_index, row in enumerate(grid):
        for col_index, ch in enumerate(row):
            if ch != "0":
                continue
            neighbours = (
                at(row_index, col_index - 1),
                at(row_index - 1, col_index),
                at(row_index, col_index + 1),
                at(row_index + 1, col_index),
            )
            if any(n not in _ENCLOSING for n in neighbours):
                raise ConfigError("error map")
    return grid


def load_map(lines: Sequence[str]) -> GameMap:
    """Validate and load the map from the lines that follow the header."""
    height = count_map_rows(lines)
    rows = extract_map_rows(lines, height)
    player = find_player(rows)
    grid = check_enclosure(rows)
    assert player is not None
    row, col, orientation = player
    return GameMap(
        grid=[list(line) for line in grid],
        player_row=row,
        player_col=col,
        orientation=orientation,
    )