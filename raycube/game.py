"""The playable game: state, input handling, the frame update and the window loop."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence, Union

import numpy as np

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
import pygame  # noqa: E402

from raycube.camera import InputState, MouseLook, Player, adjacent_door, camera_for, is_near_door  # noqa: E402
from raycube.config import ConfigError, SceneConfig, check_args, parse_header, read_scene_lines  # noqa: E402
from raycube.mapgrid import GameMap, load_map  # noqa: E402
from raycube.raycast import Framebuffer, Texture, WallFace, draw_minimap, render_scene  # noqa: E402

SCREEN_WIDTH = 1920
SCREEN_HEIGHT = 1280
WALL_HEIGHT = 0.7
TITLE = "Cube3d"
ASSETS = Path("textures")
DOOR_TEXTURE = ASSETS / "door.xpm"
GUN_FRAMES = tuple(ASSETS / "gun" / f"{n}.xpm" for n in range(4))
PROMPT = "Press [o]"
PROMPT_COLOR = (0xFF, 0x00, 0x00)
FRAMES_PER_SECOND = 60

_HELD_KEYS = {
    pygame.K_w: "forward",
    pygame.K_s: "backward",
    pygame.K_a: "strafe_left",
    pygame.K_d: "strafe_right",
    pygame.K_RIGHT: "turn_right",
    pygame.K_LEFT: "turn_left",
    pygame.K_SPACE: "fire",
}


@dataclass
class GunAnimation:
    """Firing animation: three frames, each shown for three updates."""

    active: bool = False
    frame: int = 0
    timer: int = 0
    ticks_per_frame: int = 3
    frame_count: int = 3

    def trigger(self) -> None:
        """Start (or restart) the firing animation."""
        self.active = True
        self.frame = 0
        self.timer = 0

    def tick(self) -> None:
        """Advance the animation by one update."""
        if not self.active:
            return
        self.timer += 1
        if self.timer >= self.ticks_per_frame:
            self.timer = 0
            self.frame += 1
            if self.frame >= self.frame_count:
                self.active = False
                self.frame = 0

    @property
    def image_index(self) -> int:
        """Index of the gun image to draw: 0 at rest, 1..3 while firing."""
        return self.frame + 1 if self.active else 0


class Game:
    """Everything that changes while the game runs."""

    def __init__(
        self,
        config: SceneConfig,
        game_map: GameMap,
        textures: Mapping[WallFace, Texture],
        width: int = SCREEN_WIDTH,
        height: int = SCREEN_HEIGHT,
        wall_height: float = WALL_HEIGHT,
    ) -> None:
        missing = [face.name for face in WallFace if face not in textures]
        if missing:
            raise ValueError(f"missing wall textures: {', '.join(missing)}")
        self.config = config
        self.map = game_map
        self.textures = dict(textures)
        self.wall_height = wall_height
        self.player = Player(
            pos_x=game_map.player_row + 0.5,
            pos_y=game_map.player_col + 0.5,
            camera=camera_for(game_map.orientation),
        )
        self.input = InputState()
        self.mouse = MouseLook()
        self.gun = GunAnimation()
        self.frame = Framebuffer(width, height)
        self.running = True
        self.doors_closed = True
        self.door_key_held = False
        self.prompt_visible = False

    def key_press(self, key: int) -> None:
        """Handle a key going down."""
        if key == pygame.K_ESCAPE:
            self.running = False
        name = _HELD_KEYS.get(key)
        if name is not None:
            setattr(self.input, name, True)
        if key == pygame.K_o and is_near_door(self.map, self.player.pos_x, self.player.pos_y):
            self.toggle_door()

    def key_release(self, key: int) -> None:
        """Handle a key going up."""
        name = _HELD_KEYS.get(key)
        if name is not None:
            setattr(self.input, name, False)
        if key == pygame.K_o:
            self.door_key_held = False

    def mouse_move(self, x: int) -> None:
        """Turn the view from a horizontal mouse position."""
        self.mouse.on_motion(x, self.player)

    def toggle_door(self) -> bool:
        """Open or close the door next to the player; False when there is none."""
        door = adjacent_door(self.map, self.player.pos_x, self.player.pos_y)
        if door is None:
            return False
        row, col = door
        if self.doors_closed:
            self.doors_closed = False
            self.map.set_cell(row, col, "O")
        else:
            self.doors_closed = True
            self.map.set_cell(row, col, "D")
        self.door_key_held = True
        return True

    def update(self) -> None:
        """Advance one frame and redraw the scene and minimap into ``frame``."""
        self.gun.tick()
        self.player.move(self.map, self.input)
        if self.input.fire:
            self.gun.trigger()
        render_scene(
            self.frame,
            self.map,
            self.player,
            self.textures,
            self.config.ceiling,
            self.config.floor,
            self.wall_height,
        )
        draw_minimap(self.frame, self.map, self.player.pos_x, self.player.pos_y)
        self.prompt_visible = is_near_door(self.map, self.player.pos_x, self.player.pos_y)


def _load_surface(path: Union[str, Path]) -> "pygame.Surface":
    try:
        return pygame.image.load(str(path))
    except (pygame.error, OSError) as exc:
        raise ConfigError(f"failed to init image {path}") from exc


def load_texture(path: Union[str, Path]) -> Texture:
    """Load an image file as a texture of packed ``0xRRGGBB`` colours."""
    surface = _load_surface(path)
    rgb = pygame.surfarray.array3d(surface).astype(np.uint32)
    packed = (rgb[..., 0] << 16) | (rgb[..., 1] << 8) | rgb[..., 2]
    return Texture(packed.T.copy())


def _wall_textures(config: SceneConfig) -> dict[WallFace, Texture]:
    return {
        WallFace.NORTH: load_texture(config.north),
        WallFace.DOOR: load_texture(DOOR_TEXTURE),
        WallFace.SOUTH: load_texture(config.south),
        WallFace.WEST: load_texture(config.west),
        WallFace.EAST: load_texture(config.east),
    }


def _frame_surface(frame: Framebuffer) -> "pygame.Surface":
    px = frame.pixels
    rgb = np.stack(((px >> 16) & 0xFF, (px >> 8) & 0xFF, px & 0xFF), axis=-1)
    return pygame.surfarray.make_surface(rgb.astype(np.uint8).swapaxes(0, 1))


def _present(
    screen: "pygame.Surface",
    game: Game,
    gun_images: Sequence["pygame.Surface"],
    font: "pygame.font.Font",
) -> None:
    screen.blit(_frame_surface(game.frame), (0, 0))
    gun = gun_images[game.gun.image_index]
    screen.blit(gun, (game.frame.width // 2 - gun.get_width() // 2,
                      game.frame.height - gun.get_height()))
    if game.prompt_visible:
        text = font.render(PROMPT, True, PROMPT_COLOR)
        screen.blit(text, (game.frame.width // 2, game.frame.height // 2))


def _load_scene(path: str) -> tuple[SceneConfig, GameMap]:
    lines = read_scene_lines(path)
    config = parse_header(lines)
    game_map = load_map(lines[config.map_start:])
    return config, game_map


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the game on the scene file named on the command line."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        path = check_args(args)
        config, game_map = _load_scene(path)
    except ConfigError as exc:
        print(exc, file=sys.stderr)
        return 1

    pygame.init()
    try:
        screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption(TITLE)
        try:
            textures = _wall_textures(config)
            gun_images = [_load_surface(frame) for frame in GUN_FRAMES]
        except ConfigError as exc:
            print(exc, file=sys.stderr)
            return 1
        font = pygame.font.Font(None, 24)
        game = Game(config, game_map, textures)
        clock = pygame.time.Clock()
        while game.running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    game.running = False
                elif event.type == pygame.KEYDOWN:
                    game.key_press(event.key)
                elif event.type == pygame.KEYUP:
                    game.key_release(event.key)
                elif event.type == pygame.MOUSEMOTION:
                    game.mouse_move(event.pos[0])
            if not game.running:
                break
            game.update()
            _present(screen, game, gun_images, font)
            pygame.display.flip()
            clock.tick(FRAMES_PER_SECOND)
    finally:
        pygame.quit()
    return 0