"""Grid ray casting: angles, intercepts, wall collisions and per-column rays."""

from __future__ import annotations

import math
from dataclasses import dataclass

from raycube.scene import (
    COLLISION_PADDING,
    FOV,
    HALF_FOV,
    HALF_PI,
    PI,
    TILE_SIZE,
    TWO_PI,
    Direction,
    GameMap,
    Player,
)

_MIN_TAN = 0.0001
_EDGE_NUDGE = 0.0001
_WALL = "1"


@dataclass
class RayStep:
    """Current grid intercept of a ray and the step to the next one."""

    next_x: float
    next_y: float
    x_step: float
    y_step: float
    vertical_dir: Direction | None = None
    horizontal_dir: Direction | None = None


@dataclass
class Cast:
    """Outcome of following a ray along one family of grid lines."""

    hitted: bool = False
    hit: tuple[float, float] = (0.0, 0.0)
    distance: float = math.inf
    content: str = ""


@dataclass
class Ray:
    """The closest wall hit of one screen column."""

    angle: float
    distance: float
    hit: tuple[float, float]
    vertical_hit: bool
    wall_content: str = ""
    correct_dist: float = 0.0


def normalize_angle(angle: float) -> float:
    """Bring an angle into the range [0, TWO_PI)."""
    angle = math.fmod(angle, TWO_PI)
    if angle < 0:
        angle += TWO_PI
    return angle


def is_ray_facing(direction: Direction, angle: float) -> bool:
    """Tell whether a ray at ``angle`` points towards ``direction``."""
    angle = normalize_angle(angle)
    if direction == Direction.NORTH:
        return PI < angle < TWO_PI
    if direction == Direction.SOUTH:
        return not is_ray_facing(Direction.NORTH, angle)
    if direction == Direction.WEST:
        return HALF_PI < angle < 1.5 * PI
    if direction == Direction.EAST:
        return not is_ray_facing(Direction.WEST, angle)
    return False


def hit_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Euclidean distance between two points."""
    return math.sqrt((x2 - x1) * (x2 - x1) + (y2 - y1) * (y2 - y1))


def get_padding(move: float) -> float:
    """Collision padding in the direction of a movement component."""
    return COLLISION_PADDING if move > 0 else -COLLISION_PADDING


def safe_tan(angle: float) -> float:
    """Tangent of ``angle`` kept away from zero."""
    t = math.tan(angle)
    if abs(t) < _MIN_TAN:
        return -_MIN_TAN if t < 0 else _MIN_TAN
    return t


def _trunc_div(value: float, divisor: int) -> int:
    whole = int(value)
    quotient = abs(whole) // divisor
    return quotient if whole >= 0 else -quotient


def calculate_intercept(angle: float, player: Player, is_vertical: bool) -> float:
    """First grid line crossed by the ray: an x for vertical lines, a y otherwise."""
    if is_vertical:
        tile_x = int(math.floor(player.x / TILE_SIZE) * TILE_SIZE)
        if is_ray_facing(Direction.EAST, angle):
            return tile_x + TILE_SIZE
        return tile_x - _EDGE_NUDGE
    tile_y = int(math.floor(player.y / TILE_SIZE) * TILE_SIZE)
    if is_ray_facing(Direction.SOUTH, angle):
        return tile_y + TILE_SIZE
    return tile_y - _EDGE_NUDGE


def init_horizontal_step(player: Player, angle: float) -> RayStep:
    """Set up stepping along horizontal grid lines."""
    y_intercept = calculate_intercept(angle, player, False)
    tan_angle = safe_tan(angle)
    y_step = TILE_SIZE if is_ray_facing(Direction.SOUTH, angle) else -TILE_SIZE
    x_step = TILE_SIZE / tan_angle
    if (x_step > 0 and is_ray_facing(Direction.WEST, angle)) or (
        x_step < 0 and is_ray_facing(Direction.EAST, angle)
    ):
        x_step = -x_step
    x_intercept = player.x + (y_intercept - player.y) / tan_angle
    return RayStep(x_intercept, y_intercept, x_step, y_step)


def init_vertical_step(player: Player, angle: float) -> RayStep:
    """Set up stepping along vertical grid lines."""
    x_intercept = calculate_intercept(angle, player, True)
    tan_angle = safe_tan(angle)
    x_step = TILE_SIZE if is_ray_facing(Direction.EAST, angle) else -TILE_SIZE
    y_step = TILE_SIZE * tan_angle
    if (y_step > 0 and is_ray_facing(Direction.NORTH, angle)) or (
        y_step < 0 and is_ray_facing(Direction.SOUTH, angle)
    ):
        y_step = -y_step
    y_intercept = player.y + (x_intercept - player.x) * tan_angle
    return RayStep(x_intercept, y_intercept, x_step, y_step)


def _map_y(step: RayStep) -> int:
    if step.vertical_dir == Direction.NORTH:
        return _trunc_div(int(step.next_y) - 1, TILE_SIZE)
    return _trunc_div(step.next_y, TILE_SIZE)


def _trace_ray(game_map: GameMap, step: RayStep) -> Cast:
    width, height = game_map.width, game_map.height
    while True:
        m_x = _trunc_div(step.next_x, TILE_SIZE)
        m_y = _map_y(step)
        if m_x < 0 or m_x >= width or m_y < 0 or m_y >= height:
            return Cast(hitted=False)
        row = game_map.rows[m_y]
        if m_x < len(row) and row[m_x] == _WALL:
            return Cast(hitted=True, hit=(step.next_x, step.next_y), content=row[m_x])
        step.next_x += step.x_step
        step.next_y += step.y_step


def find_horizontal_collision(game_map: GameMap, angle: float, player: Player) -> Cast:
    """Follow a ray across horizontal grid lines until it meets a wall."""
    step = init_horizontal_step(player, angle)
    step.vertical_dir = (
        Direction.SOUTH if is_ray_facing(Direction.SOUTH, angle) else Direction.NORTH
    )
    return _trace_ray(game_map, step)


def find_vertical_collision(game_map: GameMap, angle: float, player: Player) -> Cast:
    """Follow a ray across vertical grid lines until it meets a wall."""
    step = init_vertical_step(player, angle)
    step.vertical_dir = (
        Direction.EAST if is_ray_facing(Direction.EAST, angle) else Direction.WEST
    )
    return _trace_ray(game_map, step)


def cast_ray(game_map: GameMap, player: Player, angle: float) -> Ray:
    """Cast one ray and keep the closer of its two grid collisions."""
    horizontal = find_horizontal_collision(game_map, angle, player)
    vertical = find_vertical_collision(game_map, angle, player)
    for cast in (horizontal, vertical):
        cast.distance = (
            hit_distance(player.x, player.y, *cast.hit) if cast.hitted else math.inf
        )
    if horizontal.distance < vertical.distance:
        chosen, is_vertical = horizontal, False
    else:
        chosen, is_vertical = vertical, True
    return Ray(
        angle=angle,
        distance=chosen.distance,
        hit=chosen.hit,
        vertical_hit=is_vertical,
        wall_content=chosen.content,
    )


def cast_rays(game_map: GameMap, player: Player, width: int) -> list[Ray]:
    """Cast one ray per screen column, sweeping the field of view left to right."""
    ray_step = FOV / float(width)
    angle = player.angle - HALF_FOV
    rays: list[Ray] = []
    for _ in range(width):
        angle = normalize_angle(angle)
        rays.append(cast_ray(game_map, player, angle))
        angle += ray_step
    return rays