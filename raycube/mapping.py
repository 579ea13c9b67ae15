"""Extracting the map grid from a scene file and checking that it is playable."""

from __future__ import annotations

from raycube.elements import check_arguments, is_map_line, read_cub, scan_elements
from raycube.scene import CubError, GameMap, Scene

_PLAYER_TILES = frozenset("NSEW")
_OPEN_TILES = frozenset("0NSEW")
_WALL = "1"


def extract_map_lines(lines) -> list[str]:
    """Return the lines from the first map line to the end of the file.

    Every line after the map starts must itself be a map line.
    """
    map_lines: list[str] = []
    started = False
    for line in lines:
        if not started and is_map_line(line):
            started = True
        if started:
            if not is_map_line(line):
                raise CubError("Failed to parse map: non-map line inside the map")
            map_lines.append(line)
    if not map_lines:
        raise CubError("Failed to parse map: no map found")
    return map_lines


def build_map(lines) -> GameMap:
    """Build the map grid from the lines of a scene file."""
    rows = [line.rstrip(" \t\n\r") for line in extract_map_lines(lines)]
    return GameMap(rows=rows)


def find_player(game_map: GameMap) -> int:
    """Count starting positions, recording the first one on the map.

    Returns how many starting positions were found.
    """
    found = 0
    for y, row in enumerate(game_map.rows):
        for x, char in enumerate(row):
            if char in _PLAYER_TILES:
                if found == 0:
                    game_map.player_x = x
                    game_map.player_y = y
                found += 1
    return found


def flood_fill_closed(game_map: GameMap) -> bool:
    """Tell whether the area reachable from the player is enclosed by walls."""
    rows = game_map.rows
    height = len(rows)
    visited: set[tuple[int, int]] = set()
    stack = [(game_map.player_x, game_map.player_y)]
    while stack:
        x, y = stack.pop()
        if y < 0 or y >= height or x < 0 or x >= len(rows[y]):
            return False
        char = rows[y][x]
        if char == _WALL or (x, y) in visited:
            continue
        if char not in _OPEN_TILES:
            return False
        visited.add((x, y))
        stack.extend(((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)))
    return True


def validate_map(game_map: GameMap) -> None:
    """Check for a single starting position and a map closed by walls."""
    if find_player(game_map) != 1:
        raise CubError("Multiple or no starting positions found.")
    if not flood_fill_closed(game_map):
        raise CubError("Map is not closed by walls.")


def parse_scene(path) -> Scene:
    """Read, parse and validate a scene file."""
    path = check_arguments([str(path)])
    lines = read_cub(path)
    if not lines:
        raise CubError("Failed to parse cub elements: empty file")
    scene = scan_elements(lines)
    scene.game_map = build_map(scene.lines)
    validate_map(scene.game_map)
    return scene