import math

import pytest

from raycube.movement import (
    Keys,
    handle_movement,
    init_player,
    move_forward_backward,
    move_strafe,
    rotate_player,
)
from raycube.scene import (
    KEY_A,
    KEY_D,
    KEY_ESC,
    KEY_LEFT,
    KEY_RIGHT,
    KEY_S,
    KEY_W,
    MOVE_SPEED,
    ROTATE_SPEED,
    TILE_SIZE,
    TWO_PI,
    GameMap,
    Player,
)

ROOM = [
    "1111111",
    "1000001",
    "1000001",
    "100N001",
    "1000001",
    "1000001",
    "1111111",
]


def _room():
    game_map = GameMap(rows=ROOM, player_x=3, player_y=3)
    return game_map


def _centre_player(angle=0.0):
    return Player(x=3.5 * TILE_SIZE, y=3.5 * TILE_SIZE, angle=angle)


@pytest.mark.parametrize(
    "code,name",
    [
        (KEY_W, "w"),
        (KEY_S, "s"),
        (KEY_A, "a"),
        (KEY_D, "d"),
        (KEY_LEFT, "left"),
        (KEY_RIGHT, "right"),
    ],
)
def test_keys_press_and_release(code, name):
    keys = Keys()
    assert keys.press(code) is True
    assert getattr(keys, name) is True
    assert keys.release(code) is True
    assert getattr(keys, name) is False


def test_keys_ignore_other_codes():
    keys = Keys()
    assert keys.press(KEY_ESC) is False
    assert keys == Keys()


@pytest.mark.parametrize(
    "letter,dir_x,dir_y,angle",
    [
        ("N", 0.0, -1.0, 3 * math.pi / 2),
        ("S", 0.0, 1.0, math.pi / 2),
        ("E", 1.0, 0.0, 0.0),
        ("W", -1.0, 0.0, math.pi),
    ],
)
def test_init_player(letter, dir_x, dir_y, angle):
    rows = ["111", "1" + letter + "1", "111"]
    player = init_player(GameMap(rows=rows, player_x=1, player_y=1))
    assert player.x == pytest.approx(1.5 * TILE_SIZE)
    assert player.y == pytest.approx(1.5 * TILE_SIZE)
    assert (player.dir_x, player.dir_y) == (dir_x, dir_y)
    assert player.angle == pytest.approx(angle)


def test_move_forward_and_backward():
    game_map = _room()
    player = _centre_player()
    start_x, start_y = player.x, player.y
    move_forward_backward(game_map, player, 10.0, 1)
    assert player.x == pytest.approx(start_x + 10.0)
    assert player.y == pytest.approx(start_y)
    move_forward_backward(game_map, player, 10.0, -1)
    assert player.x == pytest.approx(start_x)


def test_move_blocked_by_wall():
    game_map = _room()
    player = Player(x=6 * TILE_SIZE - 8, y=3.5 * TILE_SIZE, angle=0.0)
    move_forward_backward(game_map, player, 10.0, 1)
    assert player.x == 6 * TILE_SIZE - 8


def test_strafe_directions():
    game_map = _room()
    left = _centre_player()
    move_strafe(game_map, left, 10.0, -1)
    assert left.y == pytest.approx(3.5 * TILE_SIZE + 10.0)
    right = _centre_player()
    move_strafe(game_map, right, 10.0, 1)
    assert right.y == pytest.approx(3.5 * TILE_SIZE - 10.0)
    still = _centre_player()
    move_strafe(game_map, still, 10.0, 0)
    assert (still.x, still.y) == (3.5 * TILE_SIZE, 3.5 * TILE_SIZE)


def test_rotate_player_wraps_and_updates_direction():
    player = Player(angle=0.0)
    rotate_player(player, -ROTATE_SPEED)
    assert player.angle == pytest.approx(TWO_PI - ROTATE_SPEED)
    assert player.dir_x == pytest.approx(math.cos(player.angle))
    assert player.dir_y == pytest.approx(math.sin(player.angle))


def test_handle_movement_moves_and_turns():
    game_map = _room()
    player = _centre_player()
    keys = Keys(w=True, right=True)
    handle_movement(game_map, player, keys)
    assert player.x == pytest.approx(3.5 * TILE_SIZE + MOVE_SPEED)
    assert player.angle == pytest.approx(ROTATE_SPEED)


def test_handle_movement_no_keys_is_still():
    game_map = _room()
    player = _centre_player(angle=1.0)
    handle_movement(game_map, player, Keys())
    assert (player.x, player.y, player.angle) == (3.5 * TILE_SIZE, 3.5 * TILE_SIZE, 1.0)