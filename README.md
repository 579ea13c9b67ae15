# raycube

A small first-person maze explorer. It reads a `.cub` scene file, checks that
the map is closed by walls, loads four XPM wall textures and renders the maze
with a grid raycaster in a 640×480 pygame window.

## Installing

```
pip install .
```

For the tests:

```
pip install .[test]
pytest
```

## Running

```
raycube path/to/scene.cub
```

Exactly one argument is accepted, and it must name an existing file ending in
`.cub`. Any problem with the arguments, the scene file or its textures is
printed on standard error as `Error` followed by a message. Argument errors
exit with status 1; errors in the scene file or textures exit with status 0.

### Controls

| Key            | Action              |
|----------------|---------------------|
| `W` / `S`      | move forward / back |
| `A` / `D`      | strafe left / right |
| Left / Right   | turn                |
| `Esc`          | quit                |

Closing the window also quits. Movement stops short of walls by a small
padding.

## The `.cub` format

The file starts with six elements, in any order, one per line:

```
NO ./textures/north.xpm
SO ./textures/south.xpm
WE ./textures/west.xpm
EA ./textures/east.xpm
F 220,100,0
C 225,30,0
```

- `NO`, `SO`, `WE`, `EA` name the wall textures. Paths must start with `./`
  and each identifier may appear only once.
- `F` (floor) and `C` (ceiling) are three comma-separated values, each one to
  three digits from 0 to 255. Spaces inside the value are ignored.
- Blank lines between elements are allowed; any other line is an error.

The map comes last and uses only these characters:

- `1` wall
- `0` floor
- `N`, `S`, `E`, `W` the player's start tile and the direction they face
- space: outside the map

Exactly one start position is allowed, and every floor tile reachable from it
must be enclosed by walls (reaching a space or the end of a row fails). Once
the map has started, every following line must be a map line, so blank lines
inside or after the map are rejected.

```
111111
100101
101001
1100N1
111111
```

### Textures

Textures are XPM images. Colours in the palette may be written as `#RGB`,
`#RRGGBB` (or longer hex forms), `None` (drawn black), or one of the names
`black`, `white`, `red`, `green`, `blue`, `yellow`, `cyan`, `magenta`,
`gray`/`grey`.

## Using it as a library

```python
from raycube.mapping import parse_scene
from raycube.movement import init_player
from raycube.geometry import cast_rays

scene = parse_scene("maps/room.cub")
player = init_player(scene.game_map)
rays = cast_rays(scene.game_map, player, 640)
print(rays[320].distance, rays[320].vertical_hit)
```

`parse_scene` raises `raycube.scene.CubError` when the file is not valid.

The game can also be stepped without a window:

```python
from raycube.app import Game, load_textures
from raycube.mapping import parse_scene
from raycube.scene import KEY_W

scene = parse_scene("maps/room.cub")
load_textures(scene)
game = Game(scene)
game.handle_keypress(KEY_W)
game.step()                 # moves the player and redraws game.frame
colour = game.frame.pixels[240][320]   # 0xRRGGBB
```

The modules:

- `raycube.scene` – constants and the `Scene`, `GameMap`, `Player`,
  `Texture`, `Color` and `Direction` types, and `CubError`.
- `raycube.elements` – reading a scene file and parsing its elements
  (`read_cub`, `scan_elements`, `parse_color`, `check_arguments`).
- `raycube.mapping` – map extraction and validation (`build_map`,
  `find_player`, `flood_fill_closed`, `validate_map`, `parse_scene`).
- `raycube.geometry` – ray casting (`cast_ray`, `cast_rays`, `Ray`).
- `raycube.movement` – `Keys`, `init_player`, movement and rotation.
- `raycube.render` – `FrameBuffer`, wall slices and `render_frame`.
- `raycube.app` – XPM loading, `Game` and the `main` entry point.

## What it does not do

There are no sprites, doors, minimap, mouse look or sound, and the window
size is fixed at 640×480 when started from the command line.