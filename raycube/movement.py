"""Player start, key state, movement with wall collision and rotation."""

from __future__ import annotations

import math
from dataclasses import dataclass

from raycube.geometry import get_padding, normalize_angle
from raycube.scene import (
    KEY_A,
    KEY_D,
    KEY_LEFT,
    KEY_RIGHT,
    KEY_S,
    KEY_W,
    MOVE_SPEED,
    ROTATE_SPEED,
    TILE_SIZE,
    GameMap,
    Player,
)

_KEY_FIELDS = {
    KEY_W: "w",
    KEY_S: "s",
    KEY_A: "a",
    KEY_D: "d",
    KEY_LEFT: "left",
    KEY_RIGHT: "right",
}

_START_DIRECTIONS = {
    "N": (0.0, -1.0, 3 * math.pi / 2),
    "S": (0.0, 1.0, math.pi / 2),
    "E": (1.0, 0.0, 0.0),
    "W": (-1.0, 0.0, math.pi),
}


@dataclass
class Keys:
    """Which movement keys are currently held down."""

    w: bool = False
    s: bool = False
    a: bool = False
    d: bool = False
    left: bool = False
    right: bool = False

    def press(self, keycode: int) -> bool:
        """Mark a key as held; return whether it is a movement key."""
        name = _KEY_FIELDS.get(keycode)
        if name is None:
            return False
        setattr(self, name, True)
        return True

    def release(self, keycode: int) -> bool:
        """Mark a key as released; return whether it is a movement key."""
        name = _KEY_FIELDS.get(keycode)
        if name is None:
            return False
        setattr(self, name, False)
        return True


def init_player(game_map: GameMap) -> Player:
    """Place the player at the centre of the starting tile, facing its letter."""
    start = game_map.rows[game_map.player_y][game_map.player_x]
    player = Player(
        x=(game_map.player_x + 0.5) * TILE_SIZE,
        y=(game_map.player_y + 0.5) * TILE_SIZE,
    )
    if start in _START_DIRECTIONS:
        player.dir_x, player.dir_y, player.angle = _START_DIRECTIONS[start]
    return player


def _try_move(game_map: GameMap, player: Player, move_x: float, move_y: float) -> None:
    if not game_map.is_wall(player.x + move_x + get_padding(move_x), player.y):
        player.x += move_x
    if not game_map.is_wall(player.x, player.y + move_y + get_padding(move_y)):
        player.y += move_y


def move_forward_backward(
    game_map: GameMap, player: Player, speed: float, direction: int
) -> None:
    """Move along the view direction: 1 forward, -1 backward."""
    move_x = math.cos(player.angle) * speed * direction
    move_y = math.sin(player.angle) * speed * direction
    _try_move(game_map, player, move_x, move_y)


def move_strafe(game_map: GameMap, player: Player, speed: float, direction: int) -> None:
    """Move sideways: -1 left, 1 right; any other direction does nothing."""
    if direction == -1:
        move_x = -math.sin(player.angle) * speed
        move_y = math.cos(player.angle) * speed
    elif direction == 1:
        move_x = math.sin(player.angle) * speed
        move_y = -math.cos(player.angle) * speed
    else:
        return
    _try_move(game_map, player, move_x, move_y)


def rotate_player(player: Player, angle_delta: float) -> None:
    """Turn the player by ``angle_delta`` radians."""
    player.angle = normalize_angle(player.angle + angle_delta)
    player.dir_x = math.cos(player.angle)
    player.dir_y = math.sin(player.angle)


def handle_movement(game_map: GameMap, player: Player, keys: Keys) -> None:
    """Apply one frame of movement and rotation for the held keys."""
    if keys.w:
        move_forward_backward(game_map, player, MOVE_SPEED, 1)
    if keys.s:
        move_forward_backward(game_map, player, MOVE_SPEED, -1)
    if keys.a:
        move_strafe(game_map, player, MOVE_SPEED, -1)
    if keys.d:
        move_strafe(game_map, player, MOVE_SPEED, 1)
    if keys.left:
        rotate_player(player, -ROTATE_SPEED)
    if keys.right:
        rotate_player(player, ROTATE_SPEED)