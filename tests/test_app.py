import pytest

from raycube.app import Game, load_texture, load_textures, main
from raycube.mapping import validate_map
from raycube.scene import (
    KEY_ESC,
    KEY_LEFT,
    KEY_W,
    TILE_SIZE,
    Color,
    CubError,
    GameMap,
    Scene,
    Texture,
)

XPM_TEXT = """/* XPM */
static char *wall[] = {
/* columns rows colors chars-per-pixel */
"2 2 2 1",
"a c #FF0000",
"b c #0000FF",
/* pixels */
"ab",
"ba"
};
"""


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text)
    return path


def _scene_with_textures():
    wall = Texture(path="./wall.xpm", width=1, height=1, pixels=[[0x123456]])
    scene = Scene(
        north=wall,
        south=wall,
        west=wall,
        east=wall,
        floor=Color(rgb=(10, 20, 30), is_set=True),
        ceiling=Color(rgb=(40, 50, 60), is_set=True),
        game_map=GameMap(rows=["11111", "10001", "100N1", "10001", "11111"]),
    )
    validate_map(scene.game_map)
    return scene


def test_load_texture_reads_pixels(tmp_path):
    path = _write(tmp_path, "wall.xpm", XPM_TEXT)
    texture = load_texture(path, "North")
    assert (texture.width, texture.height) == (2, 2)
    assert texture.pixels == [[0xFF0000, 0x0000FF], [0x0000FF, 0xFF0000]]
    assert texture.pixel(1, 0) == 0x0000FF


def test_load_texture_missing_file_names_texture(tmp_path):
    with pytest.raises(CubError, match="South"):
        load_texture(tmp_path / "nope.xpm", "South")


def test_load_texture_rejects_unknown_pixel_key(tmp_path):
    path = _write(tmp_path, "bad.xpm", '"1 1 1 1",\n"a c #000000",\n"z"\n')
    with pytest.raises(CubError):
        load_texture(path, "West")


def test_load_texture_rejects_truncated_data(tmp_path):
    path = _write(tmp_path, "short.xpm", '"2 3 1 1",\n"a c #000000",\n"aa"\n')
    with pytest.raises(CubError):
        load_texture(path, "East")


def test_load_textures_fills_scene(tmp_path):
    path = _write(tmp_path, "wall.xpm", XPM_TEXT)
    scene = Scene()
    for texture in (scene.north, scene.south, scene.west, scene.east):
        texture.path = str(path)
    load_textures(scene)
    for texture in (scene.north, scene.south, scene.west, scene.east):
        assert texture.width == 2
        assert texture.pixels[0][0] == 0xFF0000


def test_load_textures_without_path_fails():
    with pytest.raises(CubError):
        load_textures(Scene())


def test_game_requires_map():
    with pytest.raises(CubError):
        Game(Scene())


def test_game_places_player_on_start_tile():
    game = Game(_scene_with_textures(), width=8, height=6)
    assert game.player.x == pytest.approx(3.5 * TILE_SIZE)
    assert game.player.y == pytest.approx(2.5 * TILE_SIZE)


def test_keypress_and_release_track_keys():
    game = Game(_scene_with_textures(), width=8, height=6)
    game.handle_keypress(KEY_W)
    game.handle_keypress(KEY_LEFT)
    assert game.keys.w and game.keys.left
    game.handle_keyrelease(KEY_W)
    assert not game.keys.w
    assert game.keys.left


def test_escape_closes_and_stops_steps():
    game = Game(_scene_with_textures(), width=8, height=6)
    game.handle_keypress(KEY_ESC)
    assert game.closing is True
    assert game.step() is None


def test_handle_close_is_idempotent():
    game = Game(_scene_with_textures(), width=8, height=6)
    game.handle_close()
    game.handle_close()
    assert game.closing is True


def test_step_moves_player_forward():
    game = Game(_scene_with_textures(), width=8, height=6)
    start_y = game.player.y
    game.handle_keypress(KEY_W)
    game.step()
    assert game.player.y < start_y


def test_step_draws_only_scene_colours():
    scene = _scene_with_textures()
    game = Game(scene, width=8, height=6)
    rays = game.step()
    assert len(rays) == 8
    allowed = {scene.ceiling.hex_color, scene.floor.hex_color, 0x123456}
    drawn = {color for row in game.frame.pixels for color in row}
    assert drawn <= allowed
    assert 0x123456 in drawn


def test_main_without_arguments_fails():
    assert main([]) == 1


def test_main_with_too_many_arguments_fails():
    assert main(["a.cub", "b.cub"]) == 1


def test_main_with_missing_file_fails(tmp_path, capsys):
    assert main([str(tmp_path / "missing.cub")]) == 1
    assert capsys.readouterr().err.startswith("Error")


def test_main_with_open_map_reports_error(tmp_path, capsys):
    text = (
        "NO ./a.xpm\nSO ./a.xpm\nWE ./a.xpm\nEA ./a.xpm\n"
        "F 1,2,3\nC 4,5,6\n\n1111\n10N0\n1111\n"
    )
    path = _write(tmp_path, "open.cub", text)
    assert main([str(path)]) == 0
    assert "Error" in capsys.readouterr().err