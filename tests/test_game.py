import math

import numpy as np
import pygame
import pytest

from raycube.config import ConfigError, SceneConfig
from raycube.game import Game, GunAnimation, load_texture, main
from raycube.mapgrid import load_map
from raycube.raycast import Texture, WallFace, rgb_to_int

MAP_LINES = [
    "111111",
    "10ND01",
    "100001",
    "111111",
]
CEILING = rgb_to_int(10, 20, 30)
FLOOR = rgb_to_int(40, 50, 60)


def _config():
    return SceneConfig(
        north="n.xpm", south="s.xpm", west="w.xpm", east="e.xpm",
        ceiling=CEILING, floor=FLOOR, map_start=0,
    )


def _textures():
    return {face: Texture(np.full((4, 4), 0x101010 * (int(face) + 1))) for face in WallFace}


@pytest.fixture
def game():
    return Game(_config(), load_map(MAP_LINES), _textures(), width=320, height=240)


def test_gun_animation_runs_through_frames():
    gun = GunAnimation()
    assert gun.image_index == 0
    gun.trigger()
    assert gun.active
    assert gun.image_index == 1
    for _ in range(3):
        gun.tick()
    assert gun.frame == 1
    assert gun.image_index == 2
    for _ in range(6):
        gun.tick()
    assert not gun.active
    assert gun.frame == 0
    assert gun.image_index == 0


def test_gun_tick_idle_does_nothing():
    gun = GunAnimation()
    gun.tick()
    assert (gun.active, gun.frame, gun.timer) == (False, 0, 0)


def test_player_starts_at_cell_centre(game):
    assert game.player.pos_x == pytest.approx(1.5)
    assert game.player.pos_y == pytest.approx(2.5)


def test_key_press_and_release(game):
    game.key_press(pygame.K_w)
    assert game.input.forward
    game.key_release(pygame.K_w)
    assert not game.input.forward
    game.key_press(pygame.K_LEFT)
    assert game.input.turn_left


def test_escape_stops(game):
    game.key_press(pygame.K_ESCAPE)
    assert game.running is False


def test_door_key_toggles_door(game):
    game.key_press(pygame.K_o)
    assert game.map.cell(1, 3) == "O"
    assert game.door_key_held
    game.key_release(pygame.K_o)
    assert not game.door_key_held
    game.key_press(pygame.K_o)
    assert game.map.cell(1, 3) == "D"


def test_door_key_away_from_door(game):
    game.player.pos_x, game.player.pos_y = 2.5, 1.5
    game.key_press(pygame.K_o)
    assert game.map.cell(1, 3) == "D"
    assert game.toggle_door() is False


def test_update_draws_ceiling_and_floor(game):
    game.update()
    w, h = game.frame.width, game.frame.height
    assert int(game.frame.pixels[0, w - 1]) == CEILING
    assert int(game.frame.pixels[h - 1, w - 1]) == FLOOR
    assert game.prompt_visible


def test_update_moves_forward(game):
    game.key_press(pygame.K_w)
    game.update()
    assert game.player.pos_y == pytest.approx(2.3)
    assert game.player.pos_x == pytest.approx(1.5)


def test_fire_triggers_gun(game):
    game.key_press(pygame.K_SPACE)
    game.update()
    assert game.gun.active


def test_mouse_move_rotates(game):
    before = (game.player.camera.dir_x, game.player.camera.dir_y)
    game.mouse_move(100)
    assert (game.player.camera.dir_x, game.player.camera.dir_y) == before
    game.mouse_move(150)
    cam = game.player.camera
    assert (cam.dir_x, cam.dir_y) != before
    assert math.hypot(cam.dir_x, cam.dir_y) == pytest.approx(1.0)


def test_missing_texture_rejected():
    textures = _textures()
    del textures[WallFace.DOOR]
    with pytest.raises(ValueError):
        Game(_config(), load_map(MAP_LINES), textures, width=32, height=32)


def test_load_texture_round_trip(tmp_path):
    surface = pygame.Surface((4, 8))
    surface.fill((200, 100, 50))
    path = tmp_path / "wall.bmp"
    pygame.image.save(surface, str(path))
    texture = load_texture(path)
    assert (texture.width, texture.height) == (4, 8)
    assert texture.sample(3, 7) == rgb_to_int(200, 100, 50)


def test_load_texture_missing(tmp_path):
    with pytest.raises(ConfigError):
        load_texture(tmp_path / "absent.xpm")


def test_main_rejects_arguments(capsys):
    assert main([]) == 1
    assert "Invalid Arguments" in capsys.readouterr().err


def test_main_rejects_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "nothing.cub")]) == 1
    assert "File doesn't exist" in capsys.readouterr().err