# raycube

raycube is a first-person maze game that draws its view by raycasting.
It reads a scene from a `.cub` file and checks that the map is closed.
It then opens a 1920×1280 window where you walk through the maze.

The game has:

- textured walls
- doors that open and close
- a minimap in the top-left corner
- an animated gun

## Installing

```
pip install .
```

pygame and numpy are installed with the package.

## Running

```
raycube path/to/level.cub
```

The command takes exactly one argument: the scene file. The file name,
from its first dot onwards, must be exactly `.cub`. For example, `level.cub`
is accepted and `my.level.cub` is not.

If the arguments, the header or the map are wrong, the command prints the
error to standard error and exits with status 1. It also does this when an
image cannot be loaded.

### Image files the game needs

The wall textures named in the scene are loaded from the paths given there.
The game also loads some images of its own. It looks for them in a
`textures` directory under the current working directory:

- `textures/door.xpm` is the door texture.
- `textures/gun/0.xpm` is the gun at rest.
- `textures/gun/1.xpm` to `textures/gun/3.xpm` are the three firing frames.

These images do not come with the package. All images are loaded with
pygame, so any format pygame can read will work.

## Scene files

A scene file is a header followed by a map. Lines are split on `\n`.

```
NO ./textures/north.png
SO ./textures/south.png
WE ./textures/west.png
EA ./textures/east.png
F 220,100,0
C 225,30,0

111111111
100000001
1000N0D01
100000001
111111111
```

### Header

- `NO`, `SO`, `WE` and `EA` each give a texture path. The path is a single token with no blanks inside it.
- `F` sets the floor colour and `C` sets the ceiling colour.
  - A colour is written as `R,G,B` in decimal.
  - Each component must be between 0 and 255.
- Each of the six entries must appear exactly once. A repeated entry is an error, for example `Duplicate North`.
- Empty lines may appear between header entries. Any other unrecognised line is an error.
- The header ends at the first line that is not an entry once all six entries have been read.

### Map

- The first non-empty line of the map must contain only `1` and spaces.
- Every later line must start with `1` (after any leading spaces) and end with `1`.
- The last line must contain only `1` and spaces.
- There must be exactly one player cell: `N`, `S`, `E` or `W`. The letter also sets the direction the player faces.
- Every floor cell (`0`) must have four neighbours, and each of them must be one of `0`, `1`, `D` or a player letter.

The cells in the map are:

| Cell                 | Meaning                        |
|----------------------|--------------------------------|
| `1`                  | wall                           |
| `0`                  | floor                          |
| `D`                  | closed door                    |
| `O`                  | open door                      |
| `N`, `S`, `E` or `W` | player start and facing        |

The player cell becomes floor once the map has loaded.

## Controls

| Key          | Action                                   |
|--------------|------------------------------------------|
| W / S        | move forward / backward                  |
| A / D        | strafe left / right                      |
| Left / Right | turn                                     |
| Mouse        | turn, following horizontal movement      |
| Space        | fire; the gun animation plays            |
| O            | open or close the door next to you       |
| Escape       | quit                                     |

Doors:

- You can walk through open doors.
- Closed doors block both movement and sight.
- When you stand next to a door, the text "Press [o]" is shown.
- The game keeps one open/closed state for all doors together. Each press of O flips that state and applies it to the adjacent door.

## Using the modules

### `raycube.config`

This module reads the command line and the scene header. Any invalid input raises `ConfigError`.

- `check_args(argv)` checks the arguments.
- `has_cub_extension(path)` tests a file name.
- `read_scene_lines(path)` reads the scene file as a list of lines.
- `parse_header(lines)` returns a `SceneConfig`, which holds:
  - the texture paths
  - the packed `0xRRGGBB` ceiling and floor colours
  - `map_start`, the index of the first map line
- `parse_color(text)` parses one colour.
- `texture_value(rest)` returns the token that follows an entry name.
- `parse_int(text)` parses a leading integer.

### `raycube.mapgrid`

This module checks the map and loads it. Invalid maps raise `ConfigError`.

- `load_map(lines)` returns a `GameMap`. A `GameMap` has:
  - `grid`, indexed as `grid[row][col]`
  - `player_row` and `player_col`, the player's start
  - `orientation`, the direction the player faces
  - `height` and `width`
  - `cell(row, col)`, which returns `""` outside the grid
  - `set_cell(row, col, value)`
- The individual checks are also available:
  - `count_map_rows`
  - `extract_map_rows`
  - `check_single_player`
  - `find_player`
  - `check_enclosure`
  - `classify_boundary_line`
  - `is_inner_line`
  - `is_closing_line`

### `raycube.camera`

This module handles the view and movement.

- `camera_for(orientation)` builds the starting `Camera` with a 66° field of view. `fov_factor(angle)` gives the length of the camera plane for an angle.
- `Player` holds a position and a camera.
  - `move(game_map, keys)` applies one frame of the controls held in an `InputState`. A move is blocked by walls and by closed doors.
  - `rotate_left(speed)` and `rotate_right(speed)` turn the view.
- `MouseLook.on_motion(x, player)` turns the player as the mouse moves left or right.
- `adjacent_door(game_map, row, col)` and `is_near_door(game_map, row, col)` find doors next to a position.

### `raycube.raycast`

This module does the rendering.

- `cast_ray(...)` returns a `RayHit`.
- `wall_face(hit, game_map)` chooses the `WallFace` texture for a hit.
- `render_scene(frame, game_map, player, textures, ceiling, floor, wall_height)` draws the ceiling, the textured walls and the floor into a `Framebuffer`.
- `draw_minimap(frame, game_map, pos_x, pos_y)` draws the minimap.
- Textures are `Texture` objects: 2D numpy arrays of packed colours.
- `rgb_to_int(r, g, b)` packs one colour.

### `raycube.game`

This module ties everything together.

- `Game` holds the running state:
  - `key_press`, `key_release` and `mouse_move` take input.
  - `toggle_door` opens or closes the adjacent door.
  - `update()` advances one frame and redraws `game.frame`.
- `GunAnimation` steps through the firing frames.
- `load_texture(path)` loads an image as a `Texture`.
- `main(argv=None)` runs the window loop at 60 frames per second. It is what the `raycube` command calls.