"""Player view direction, movement, rotation and door proximity."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

from raycube.mapgrid import GameMap

FOV = 66
MOVE_SPEED = 0.2
TURN_SPEED = 0.07
MOUSE_TURN_SPEED = 0.15

_DOORS = ("D", "O")


def fov_factor(angle: float) -> float:
    """Length of the camera plane for a field of view in degrees."""
    return math.tan((angle / 2) * (math.pi / 180))


@dataclass
class Camera:
    """Direction vector and camera plane of the view."""

    dir_x: float
    dir_y: float
    plane_x: float
    plane_y: float

    def rotate(self, angle: float) -> None:
        """Rotate both vectors by ``angle`` radians."""
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        self.dir_x, self.dir_y = (
            self.dir_x * cos_a - self.dir_y * sin_a,
            self.dir_x * sin_a + self.dir_y * cos_a,
        )
        self.plane_x, self.plane_y = (
            self.plane_x * cos_a - self.plane_y * sin_a,
            self.plane_x * sin_a + self.plane_y * cos_a,
        )


def camera_for(orientation: str) -> Camera:
    """The starting camera for a player marker ``N``, ``S``, ``W`` or ``E``."""
    plane = fov_factor(FOV)
    table = {
        "N": (0.0, -1.0, plane, 0.0),
        "S": (0.0, 1.0, -plane, 0.0),
        "W": (-1.0, 0.0, 0.0, -plane),
        "E": (1.0, 0.0, 0.0, plane),
    }
    try:
        return Camera(*table[orientation])
    except KeyError:
        raise ValueError(f"unknown orientation {orientation!r}") from None


@dataclass
class InputState:
    """Which movement and turning controls are held down."""

    forward: bool = False
    backward: bool = False
    strafe_left: bool = False
    strafe_right: bool = False
    turn_left: bool = False
    turn_right: bool = False
    fire: bool = False


def _passable(cell: str) -> bool:
    # A position just past the end of a row reads as empty and is open.
    return cell in ("0", "O", "")


@dataclass
class Player:
    """Player position in map coordinates with its camera."""

    pos_x: float
    pos_y: float
    camera: Camera
    move_speed: float = MOVE_SPEED
    turn_speed: float = TURN_SPEED

    def rotate_right(self, speed: float) -> None:
        self.camera.rotate(speed)

    def rotate_left(self, speed: float) -> None:
        self.camera.rotate(-speed)

    def _step(self, game_map: GameMap, dx: float, dy: float) -> None:
        if _passable(game_map.cell(int(self.pos_x + dx), int(self.pos_y))):
            self.pos_x += dx
        if _passable(game_map.cell(int(self.pos_x), int(self.pos_y + dy))):
            self.pos_y += dy

    def move(self, game_map: GameMap, keys: InputState) -> None:
        """Apply one frame of movement and turning for the held controls."""
        cam = self.camera
        speed = self.move_speed
        if keys.forward:
            self._step(game_map, cam.dir_x * speed, cam.dir_y * speed)
        if keys.backward:
            self._step(game_map, -cam.dir_x * speed, -cam.dir_y * speed)
        if keys.strafe_left:
            self._step(game_map, -cam.plane_x * speed, -cam.plane_y * speed)
        if keys.strafe_right:
            self._step(game_map, cam.plane_x * speed, cam.plane_y * speed)
        if keys.turn_right:
            self.rotate_right(self.turn_speed)
        if keys.turn_left:
            self.rotate_left(self.turn_speed)


@dataclass
class MouseLook:
    """Turns the player as the mouse moves horizontally."""

    speed: float = MOUSE_TURN_SPEED
    last_x: int = field(default=0)

    def on_motion(self, x: int, player: Player) -> None:
        if self.last_x == 0:
            self.last_x = x
        if self.last_x < x:
            player.rotate_right(self.speed)
            self.last_x = x
        elif self.last_x > x:
            player.rotate_left(self.speed)
            self.last_x = x


def adjacent_door(game_map: GameMap, row: float, col: float) -> Optional[tuple[int, int]]:
    """The door cell next to a position, checking up, down, left, right.

    When several doors are adjacent the last one in that order is returned.
    """
    r, c = int(row), int(col)
    found = None
    for nr, nc in ((r - 1, c), (r + 1, c), (r, c - 1), (r, c + 1)):
        if game_map.cell(nr, nc) in _DOORS:
            found = (nr, nc)
    return found


def is_near_door(game_map: GameMap, row: float, col: float) -> bool:
    """True when an open or closed door touches the position's cell."""
    return adjacent_door(game_map, row, col) is not None