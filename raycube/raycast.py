"""Ray casting of the 3D view, texture sampling and the minimap overlay."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Mapping

import numpy as np

from raycube.camera import Camera, Player
from raycube.mapgrid import GameMap

_NO_HIT_DELTA = float(2**64)
_SOLID = ("1", "D")

MINIMAP_ORIGIN = 10
MINIMAP_SIZE = 200
MINIMAP_RADIUS = 10
MINIMAP_BACKGROUND = 0x222222
MINIMAP_WALL = 0xFFFFFF
MINIMAP_CLOSED_DOOR = 0xFF0000
MINIMAP_OPEN_DOOR = 0x00FF00
MINIMAP_PLAYER = 0xFF0000
MINIMAP_PLAYER_SIZE = 5


class WallFace(IntEnum):
    """Which texture a wall hit is drawn with."""

    NORTH = 0
    DOOR = 1
    SOUTH = 2
    WEST = 3
    EAST = 4


def rgb_to_int(r: int, g: int, b: int) -> int:
    """Pack red, green and blue components into ``0xRRGGBB``."""
    return r << 16 | g << 8 | b


@dataclass
class Texture:
    """A wall texture: a 2D array of packed ``0xRRGGBB`` colours, rows first."""

    pixels: np.ndarray

    def __post_init__(self) -> None:
        self.pixels = np.asarray(self.pixels, dtype=np.uint32)
        if self.pixels.ndim != 2 or 0 in self.pixels.shape:
            raise ValueError("a texture needs a non-empty 2D pixel array")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def sample(self, x: int, y: int) -> int:
        """The colour at texture column ``x`` and row ``y``."""
        return int(self.pixels[y, x])


@dataclass
class Framebuffer:
    """An image of packed colours that the scene is drawn into."""

    width: int
    height: int
    pixels: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("framebuffer dimensions must be positive")
        self.pixels = np.zeros((self.height, self.width), dtype=np.uint32)

    def put_pixel(self, x: int, y: int, color: int) -> None:
        """Set one pixel; positions outside the image are ignored."""
        if 0 <= x < self.width and 0 <= y < self.height:
            self.pixels[y, x] = color & 0xFFFFFFFF

    def fill_rect(self, x: int, y: int, width: int, height: int, color: int) -> None:
        """Fill a rectangle, clipped to the image."""
        left, top = max(x, 0), max(y, 0)
        right, bottom = min(x + width, self.width), min(y + height, self.height)
        if left < right and top < bottom:
            self.pixels[top:bottom, left:right] = color & 0xFFFFFFFF


@dataclass(frozen=True)
class RayHit:
    """Where a ray met a wall.

    ``side`` is 0 when a row boundary was crossed last and 1 for a column
    boundary; ``distance`` is the perpendicular distance to the wall.
    """

    map_x: int
    map_y: int
    side: int
    ray_dir_x: float
    ray_dir_y: float
    distance: float


def cast_ray(
    game_map: GameMap,
    pos_x: float,
    pos_y: float,
    camera: Camera,
    screen_x: int,
    width: int,
) -> RayHit:
    """Step a ray through the grid until it reaches a wall or closed door."""
    map_x, map_y = int(pos_x), int(pos_y)
    cam_x = 2 * screen_x / float(width) - 1
    ray_x = camera.dir_x + camera.plane_x * cam_x
    ray_y = camera.dir_y + camera.plane_y * cam_x
    delta_x = _NO_HIT_DELTA if ray_x == 0 else abs(1 / ray_x)
    delta_y = _NO_HIT_DELTA if ray_y == 0 else abs(1 / ray_y)
    if ray_x < 0:
        step_x, side_x = -1, (pos_x - map_x) * delta_x
    else:
        step_x, side_x = 1, (map_x + 1 - pos_x) * delta_x
    if ray_y < 0:
        step_y, side_y = -1, (pos_y - map_y) * delta_y
    else:
        step_y, side_y = 1, (map_y + 1 - pos_y) * delta_y

    rows, cols = game_map.height, game_map.width
    while True:
        if side_x < side_y:
            side_x += delta_x
            map_x += step_x
            side = 0
        else:
            side_y += delta_y
            map_y += step_y
            side = 1
        if not (0 <= map_x < rows and 0 <= map_y < cols):
            raise ValueError("ray left the map without hitting a wall")
        if game_map.cell(map_x, map_y) in _SOLID:
            break

    distance = side_x - delta_x if side == 0 else side_y - delta_y
    return RayHit(map_x, map_y, side, ray_x, ray_y, distance)


def wall_face(hit: RayHit, game_map: GameMap) -> WallFace:
    """Choose the texture for a hit from the side crossed and ray direction."""
    if game_map.cell(hit.map_x, hit.map_y) == "D":
        return WallFace.DOOR
    if hit.side == 1:
        return WallFace.NORTH if hit.ray_dir_y > 0 else WallFace.SOUTH
    return WallFace.WEST if hit.ray_dir_x > 0 else WallFace.EAST


def _draw_column(
    frame: Framebuffer,
    x: int,
    hit: RayHit,
    texture: Texture,
    player: Player,
    ceiling: int,
    floor: int,
    wall_height: float,
) -> None:
    height = frame.height
    if hit.distance > 0:
        line_height = int(wall_height * height / hit.distance)
    else:
        line_height = height
    start = max(-(line_height // 2) + height // 2, 0)
    end = min(line_height // 2 + height // 2, height - 1)

    wall_x = player.pos_y + hit.distance * hit.ray_dir_y if hit.side == 0 \
        else player.pos_x + hit.distance * hit.ray_dir_x
    wall_x -= math.floor(wall_x)
    tex_x = int(wall_x * texture.width)
    if (hit.side == 0 and hit.ray_dir_x < 0) or (hit.side == 1 and hit.ray_dir_y > 0):
        tex_x = texture.width - tex_x - 1

    column = frame.pixels[:, x]
    column[:start] = ceiling & 0xFFFFFFFF
    count = end - start
    if count > 0 and line_height > 0:
        step = texture.height / line_height
        tex_pos = (start - height // 2 + line_height // 2) * step
        positions = np.cumsum(np.concatenate(([tex_pos], np.full(count - 1, step))))
        tex_y = positions.astype(np.int64) & (texture.height - 1)
        column[start:end] = texture.pixels[tex_y, tex_x]
    column[end:] = floor & 0xFFFFFFFF


def render_scene(
    frame: Framebuffer,
    game_map: GameMap,
    player: Player,
    textures: Mapping[WallFace, Texture],
    ceiling: int,
    floor: int,
    wall_height: float,
) -> None:
    """Draw ceiling, textured walls and floor for every screen column."""
    for x in range(frame.width):
        hit = cast_ray(game_map, player.pos_x, player.pos_y, player.camera, x, frame.width)
        texture = textures[wall_face(hit, game_map)]
        _draw_column(frame, x, hit, texture, player, ceiling, floor, wall_height)


def _minimap_color(cell: str) -> int:
    if cell == "D":
        return MINIMAP_CLOSED_DOOR
    if cell == "O":
        return MINIMAP_OPEN_DOOR
    return MINIMAP_WALL


def draw_minimap(frame: Framebuffer, game_map: GameMap, pos_x: float, pos_y: float) -> None:
    """Draw the map around the player in the top-left corner of the frame."""
    origin = MINIMAP_ORIGIN
    frame.fill_rect(origin, origin, MINIMAP_SIZE, MINIMAP_SIZE, MINIMAP_BACKGROUND)
    start_i = max(int(pos_x) - MINIMAP_RADIUS, 0)
    end_i = min(int(pos_x) + MINIMAP_RADIUS, game_map.height)
    start_j = max(int(pos_y) - MINIMAP_RADIUS, 0)
    end_j = min(int(pos_y) + MINIMAP_RADIUS, game_map.width)
    if end_i <= start_i or end_j <= start_j:
        raise ValueError("player position lies outside the map")
    scale_x = MINIMAP_SIZE / (end_j - start_j)
    scale_y = MINIMAP_SIZE / (end_i - start_i)
    cell_w, cell_h = int(scale_x + 1.0), int(scale_y + 1.0)

    for i in range(start_i, end_i):
        for j in range(start_j, end_j):
            cell = game_map.cell(i, j)
            if not cell:
                break
            if cell in ("1", "D", "O"):
                frame.fill_rect(
                    int(origin + (j - start_j) * scale_x),
                    int(origin + (i - start_i) * scale_y),
                    cell_w,
                    cell_h,
                    _minimap_color(cell),
                )

    marker_x = origin + (pos_y - start_j) * scale_x
    marker_y = origin + (pos_x - start_i) * scale_y
    frame.fill_rect(
        int(marker_x - 2.5),
        int(marker_y - 2.5),
        MINIMAP_PLAYER_SIZE,
        MINIMAP_PLAYER_SIZE,
        MINIMAP_PLAYER,
    )