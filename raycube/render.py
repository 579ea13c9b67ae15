"""Drawing textured wall columns, ceiling and floor into a frame buffer."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from raycube.geometry import Ray, cast_rays, is_ray_facing
from raycube.scene import (
    FOV,
    HEIGHT,
    TILE_SIZE,
    WIDTH,
    CubError,
    Direction,
    Player,
    Scene,
    Texture,
)

_MIN_DISTANCE = 0.00001


@dataclass
class FrameBuffer:
    """A screen-sized grid of 0xRRGGBB colours, one list per row."""

    width: int = WIDTH
    height: int = HEIGHT
    pixels: list[list[int]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.pixels:
            self.pixels = [[0] * self.width for _ in range(self.height)]

    def put_pixel(self, x: int, y: int, color: int) -> None:
        """Set one pixel; points outside the frame are ignored."""
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            return
        self.pixels[y][x] = color

    def clear(self, color: int) -> None:
        """Fill the whole frame with one colour."""
        for row in self.pixels:
            row[:] = [color] * self.width


@dataclass
class Slice:
    """The vertical span of one wall column on screen and its texture column."""

    x: int = 0
    texx: int = 0
    start: int = 0
    end: int = 0
    line_h: int = 0
    line_h_d: float = 0.0


def correct_distance(ray: Ray, player: Player) -> float:
    """Ray distance corrected for fish-eye, kept strictly positive."""
    corrected = ray.distance * math.cos(ray.angle - player.angle)
    if corrected <= _MIN_DISTANCE:
        corrected = _MIN_DISTANCE
    return corrected


def get_line_height(corrected_dist: float, dist_proj_plane: float) -> int:
    """Projected wall height in whole pixels, at least 1."""
    raw_line_h = (float(TILE_SIZE) / corrected_dist) * dist_proj_plane
    return max(int(raw_line_h), 1)


def get_tex_x(ray: Ray, texture: Texture) -> int:
    """Texture column matching where the ray struck the wall."""
    wall_hit_pos = ray.hit[1] if ray.vertical_hit else ray.hit[0]
    wall_hit_pos -= math.floor(wall_hit_pos / TILE_SIZE) * TILE_SIZE
    if (ray.vertical_hit and is_ray_facing(Direction.WEST, ray.angle)) or (
        not ray.vertical_hit and is_ray_facing(Direction.NORTH, ray.angle)
    ):
        wall_hit_pos = TILE_SIZE - wall_hit_pos
    tex_x = int((wall_hit_pos / TILE_SIZE) * texture.width)
    if tex_x < 0:
        tex_x = 0
    if tex_x >= texture.width:
        tex_x = texture.width - 1
    return tex_x


def select_texture(scene: Scene, ray: Ray) -> Texture:
    """Pick the wall texture for the side of the wall the ray hit."""
    if ray.vertical_hit:
        return scene.east if is_ray_facing(Direction.EAST, ray.angle) else scene.west
    return scene.north if is_ray_facing(Direction.NORTH, ray.angle) else scene.south


def _projection_distance(width: int) -> float:
    return (float(width) / 2.0) / math.tan(FOV / 2.0)


def calculate_slice(
    width: int, height: int, ray: Ray, player: Player, scene: Scene
) -> Slice:
    """Work out the on-screen span and texture column of one ray's wall."""
    corrected_dist = correct_distance(ray, player)
    dist_proj_plane = _projection_distance(width)
    line_h = get_line_height(corrected_dist, dist_proj_plane)
    start = max(height // 2 - line_h // 2, 0)
    end = start + line_h
    if end >= height:
        end = height - 1
    texture = select_texture(scene, ray)
    return Slice(
        texx=get_tex_x(ray, texture),
        start=start,
        end=end,
        line_h=line_h,
        line_h_d=(float(TILE_SIZE) / corrected_dist) * dist_proj_plane,
    )


def _draw_wall_texture(frame: FrameBuffer, texture: Texture, piece: Slice) -> None:
    step = texture.height / piece.line_h_d
    tex_y = (piece.start - frame.height // 2 + piece.line_h_d / 2) * step
    for y in range(max(piece.start, 0), min(piece.end, frame.height)):
        tex_y_int = int(tex_y)
        if tex_y_int < 0:
            tex_y_int = 0
        if tex_y_int >= texture.height:
            tex_y_int = texture.height - 1
        frame.put_pixel(piece.x, y, texture.pixel(piece.texx, tex_y_int))
        tex_y += step


def _draw_wall_column(
    frame: FrameBuffer, texture: Texture, piece: Slice, scene: Scene
) -> None:
    top = max(piece.start, 0)
    piece.end = min(piece.end, frame.height)
    ceiling = scene.ceiling.hex_color
    for y in range(top):
        frame.put_pixel(piece.x, y, ceiling)
    _draw_wall_texture(frame, texture, piece)
    floor = scene.floor.hex_color
    for y in range(piece.end, frame.height):
        frame.put_pixel(piece.x, y, floor)


def draw_walls(frame: FrameBuffer, rays, scene: Scene, player: Player) -> None:
    """Draw ceiling, wall and floor for every column of the frame."""
    for x, ray in zip(range(frame.width), rays):
        piece = calculate_slice(frame.width, frame.height, ray, player, scene)
        piece.x = x
        _draw_wall_column(frame, select_texture(scene, ray), piece, scene)


def render_frame(frame: FrameBuffer, scene: Scene, player: Player) -> list[Ray]:
    """Clear the frame, cast one ray per column and draw the view.

    Returns the rays that were cast.
    """
    if scene.game_map is None:
        raise CubError("Map not initialized")
    frame.clear(0x000000)
    rays = cast_rays(scene.game_map, player, frame.width)
    draw_walls(frame, rays, scene, player)
    return rays