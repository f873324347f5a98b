"""Command-line checks and parsing of the scene file header.

A scene file starts with six identifier lines: four wall textures
(``NO``, ``SO``, ``WE``, ``EA``) and two colours (``C`` for the ceiling,
``F`` for the floor). The map grid follows them.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple, Optional, Sequence, Union

_UINT64 = 1 << 64
_WHITESPACE = " \t\n\v\f\r"
_DIGITS = "0123456789"
_EXTENSION = ".cub"


class ConfigError(Exception):
    """Raised when the arguments or the scene header are invalid."""


@dataclass(frozen=True)
class SceneConfig:
    """Texture paths and colours read from a scene header.

    ``map_start`` is the index of the first line after the header,
    where reading of the map grid begins.
    """

    north: str
    south: str
    west: str
    east: str
    ceiling: int
    floor: int
    map_start: int


class _HeaderKey(NamedTuple):
    name: str
    field: str
    duplicate: str
    is_color: bool


_HEADER_KEYS = (
    _HeaderKey("NO", "north", "Duplicate North", False),
    _HeaderKey("SO", "south", "Duplicate South", False),
    _HeaderKey("WE", "west", "Duplicate West", False),
    _HeaderKey("EA", "east", "Duplicate East", False),
    _HeaderKey("C", "ceiling", "Duplicate Ciel Color", True),
    _HeaderKey("F", "floor", "Duplicate Floor Color", True),
)


def _is_visible(ch: str) -> bool:
    return ord(ch) >= 33


def parse_int(text: str) -> int:
    """Parse a leading integer the way C ``atoi`` does, ignoring trailing text.

    Leading whitespace and one sign are accepted. On unsigned 64-bit
    overflow the result is -1 for positive input and 0 for negative input;
    otherwise the value is wrapped to a signed 32-bit integer.
    """
    pos = 0
    while pos < len(text) and text[pos] in _WHITESPACE:
        pos += 1
    sign = 1
    if pos < len(text) and text[pos] in "+-":
        if text[pos] == "-":
            sign = -1
        pos += 1
    value = 0
    for ch in text[pos:]:
        if ch not in _DIGITS:
            break
        value *= 10
        if value >= _UINT64:
            return -1 if sign == 1 else 0
        value = (value + int(ch)) % _UINT64
    result = (value * sign) & 0xFFFFFFFF
    return result - (1 << 32) if result >= (1 << 31) else result


def has_cub_extension(path: str) -> bool:
    """True when the text from the first dot onwards is exactly ``.cub``."""
    dot = path.find(".")
    return dot != -1 and path[dot:] == _EXTENSION


def check_args(argv: Sequence[str]) -> str:
    """Validate the command-line arguments (without the program name).

    Exactly one argument naming a ``.cub`` file is required; it is returned.
    """
    if len(argv) != 1:
        raise ConfigError("Invalid Arguments")
    path = argv[0]
    if not has_cub_extension(path):
        raise ConfigError("Invalid file type")
    return path


def parse_color(text: Optional[str]) -> int:
    """Parse ``R,G,B`` into a packed ``0xRRGGBB`` integer.

    Each component must be decimal and at most 255; the first may carry up
    to four digits, the others up to three.
    """
    if text is None:
        raise ConfigError("Error color")
    parts = ["", "", ""]
    count = 0
    base = 0
    for pos, ch in enumerate(text):
        rel = pos - base
        if ch not in _DIGITS and ch != ",":
            raise ConfigError("Error color")
        if ch != "," and count <= 2:
            parts[count] += ch
        if ch == "," and rel <= 4:
            base = pos
            count += 1
        elif rel > 3 or count > 2:
            raise ConfigError("Error color")
    if count != 2 or text[-1] not in _DIGITS or not all(parts):
        raise ConfigError("Error color")
    red, green, blue = (parse_int(part) for part in parts)
    if red > 255 or green > 255 or blue > 255:
        raise ConfigError("Error color")
    return red << 16 | green << 8 | blue


def texture_value(rest: str) -> str:
    """Return the single token following an identifier.

    Leading blanks are dropped; any blank after the token is an error.
    Text with no token at all is returned unchanged.
    """
    start: Optional[int] = None
    for pos, ch in enumerate(rest):
        if _is_visible(ch):
            if start is None:
                start = pos
        elif start is not None:
            raise ConfigError("Invalid Textures !!")
    return rest if start is None else rest[start:]


def _match_key(line: str) -> Optional[tuple[_HeaderKey, str]]:
    offset = next((i for i, ch in enumerate(line) if _is_visible(ch)), len(line))
    for key in _HEADER_KEYS:
        if line.startswith(key.name, offset):
            return key, line[offset + len(key.name):]
    return None


def _is_tolerated(line: str) -> bool:
    """Lines that may sit between header entries without being an error."""
    return line == "" or line.startswith("\v") or "\x01" in line


def parse_header(lines: Sequence[str]) -> SceneConfig:
    """Read the six header entries from the scene lines.

    Parsing stops at the first line that is not an identifier once all six
    entries have been seen; that line's index becomes ``map_start``.
    """
    values: dict[str, Union[str, int]] = {}
    for index, line in enumerate(lines):
        found = _match_key(line)
        if found is None:
            if len(values) == len(_HEADER_KEYS):
                return SceneConfig(map_start=index, **values)  # type: ignore[arg-type]
            if not _is_tolerated(line):
                raise ConfigError("Error Textures")
            continue
        key, rest = found
        value = texture_value(rest)
        if key.field in values:
            raise ConfigError(key.duplicate)
        values[key.field] = parse_color(value) if key.is_color else value
    raise ConfigError("Textures doesn't exist")


def read_scene_lines(path: Union[str, Path]) -> list[str]:
    """Read a scene file as a list of lines without their newline characters."""
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise ConfigError("File doesn't exist") from exc
    lines = data.decode("latin-1").split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines