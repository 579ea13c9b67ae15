"""Core data types and constants shared by the parser, the ray caster and the renderer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

PI = 3.14159265
TWO_PI = 6.28318530
HALF_PI = 1.57079632

FOV = 1.0471975512
HALF_FOV = 0.5235987756

MOVE_SPEED = 1.0
ROTATE_SPEED = 0.05

KEY_W = 119
KEY_A = 97
KEY_S = 115
KEY_D = 100
KEY_LEFT = 65361
KEY_RIGHT = 65363
KEY_ESC = 65307

COLLISION_PADDING = 5.0

WIDTH = 640
HEIGHT = 480

TILE_SIZE = 64


class CubError(Exception):
    """Raised when a scene file, its arguments or its assets are invalid."""


class Direction(IntEnum):
    """Compass directions used to classify rays and walls."""

    EAST = 0
    NORTH = 1
    WEST = 2
    SOUTH = 3


@dataclass
class Color:
    """An RGB colour as given by an ``F`` or ``C`` element."""

    rgb: tuple[int, int, int] = (0, 0, 0)
    is_set: bool = False

    @property
    def hex_color(self) -> int:
        red, green, blue = self.rgb
        return (red << 16) | (green << 8) | blue


@dataclass
class Texture:
    """A wall texture: its file path and, once loaded, its pixel rows."""

    path: str | None = None
    width: int = 0
    height: int = 0
    pixels: list[list[int]] = field(default_factory=list)

    def pixel(self, x: int, y: int) -> int:
        """Return the colour at (x, y), or 0 outside the texture."""
        if x < 0 or x >= self.width or y < 0 or y >= self.height:
            return 0
        return self.pixels[y][x]


@dataclass
class GameMap:
    """The grid of map cells, one string per row."""

    rows: list[str]
    player_x: int = 0
    player_y: int = 0
    tile_size: int = TILE_SIZE

    @property
    def width(self) -> int:
        return max((len(row) for row in self.rows), default=0)

    @property
    def height(self) -> int:
        return len(self.rows)

    def is_wall(self, x: float, y: float) -> bool:
        """Tell whether the world point (x, y) lies in a wall or off the map."""
        map_x = int(x / self.tile_size)
        map_y = int(y / self.tile_size)
        if map_x < 0 or map_y < 0 or map_x >= self.width or map_y >= self.height:
            return True
        row = self.rows[map_y]
        return map_x < len(row) and row[map_x] == "1"


@dataclass
class Player:
    """Player position in world units and viewing direction."""

    x: float = 0.0
    y: float = 0.0
    dir_x: float = 0.0
    dir_y: float = 0.0
    plane_x: float = 0.0
    plane_y: float = 0.0
    angle: float = 0.0
    ray_step: float = 0.0


@dataclass
class Scene:
    """Everything read from a scene file."""

    north: Texture = field(default_factory=Texture)
    south: Texture = field(default_factory=Texture)
    west: Texture = field(default_factory=Texture)
    east: Texture = field(default_factory=Texture)
    floor: Color = field(default_factory=Color)
    ceiling: Color = field(default_factory=Color)
    game_map: GameMap | None = None
    lines: list[str] = field(default_factory=list)