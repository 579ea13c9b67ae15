"""Reading a scene file and parsing its texture and colour elements."""

from __future__ import annotations

import os

from raycube.scene import Color, CubError, Scene, Texture

_MAP_CHARS = frozenset(" 01NSEW")
_TEXTURE_IDS = ("NO", "SO", "WE", "EA")
_USAGE = " - ./program <map.cub>"


def trim_spaces(line: str) -> str:
    """Strip leading blanks and tabs and trailing blanks, tabs and line ends."""
    return line.lstrip(" \t").rstrip(" \t\n\r")


def is_map_line(line: str) -> bool:
    """Tell whether a line holds only map characters and is not blank."""
    trimmed = trim_spaces(line)
    return bool(trimmed) and all(char in _MAP_CHARS for char in trimmed)


def rgb_to_hex(rgb) -> int:
    """Pack three colour components into one 0xRRGGBB integer."""
    red, green, blue = rgb
    return (red << 16) | (green << 8) | blue


def parse_color(value: str) -> tuple[int, int, int]:
    """Parse ``R,G,B`` with each part one to three digits in 0..255."""
    parts = [part for part in value.split(",") if part]
    for part in parts:
        if not part or len(part) > 3 or not all("0" <= c <= "9" for c in part):
            raise CubError(f"invalid colour: {value!r}")
        if int(part) > 255:
            raise CubError(f"colour component out of range: {value!r}")
    if len(parts) != 3:
        raise CubError(f"colour needs three components: {value!r}")
    red, green, blue = (int(part) for part in parts)
    return red, green, blue


def check_arguments(argv) -> str:
    """Check the command-line arguments and return the scene file path."""
    if len(argv) < 1:
        raise CubError("No file provided." + _USAGE)
    if len(argv) > 1:
        raise CubError("Too many arguments." + _USAGE)
    path = argv[0]
    if len(path) > 4 and not path.endswith(".cub"):
        raise CubError("File must have a .cub extension.")
    try:
        with open(path, "rb"):
            pass
    except OSError as exc:
        raise CubError("The file does not exist") from exc
    return path


def read_cub(path) -> list[str]:
    """Return the lines of a scene file, each keeping its ``\\n``."""
    try:
        with open(path, "rb") as handle:
            return [
                raw.decode("utf-8", errors="surrogateescape") for raw in handle
            ]
    except OSError as exc:
        raise CubError(f"cannot read {path}") from exc


def _texture_slot(scene: Scene, identifier: str) -> Texture:
    return {
        "NO": scene.north,
        "SO": scene.south,
        "WE": scene.west,
        "EA": scene.east,
    }[identifier]


def _color_slot(scene: Scene, identifier: str) -> Color | None:
    if identifier == "F" and not scene.floor.is_set:
        return scene.floor
    if identifier == "C" and not scene.ceiling.is_set:
        return scene.ceiling
    return None


def _apply_element(line: str, scene: Scene) -> None:
    trimmed = trim_spaces(line)
    if not trimmed:
        return
    words = [word for word in trimmed.split(" ") if word]
    identifier, value = words[0], "".join(words[1:])
    if identifier in _TEXTURE_IDS:
        texture = _texture_slot(scene, identifier)
        if not value.startswith("./"):
            raise CubError(f"texture path must start with './': {line.strip()}")
        if texture.path is not None:
            raise CubError(f"duplicate texture element: {identifier}")
        texture.path = value
        return
    color = _color_slot(scene, identifier)
    if color is None:
        raise CubError(f"unknown or duplicate element: {identifier}")
    color.rgb = parse_color(value)
    color.is_set = True


def _elements_loaded(scene: Scene) -> bool:
    textures = (scene.north, scene.south, scene.west, scene.east)
    return (
        all(texture.path is not None for texture in textures)
        and scene.floor.is_set
        and scene.ceiling.is_set
    )


def scan_elements(lines) -> Scene:
    """Parse the elements before the map and return the partly filled scene."""
    scene = Scene(lines=list(lines))
    for line in scene.lines:
        if is_map_line(line):
            if not _elements_loaded(scene):
                raise CubError("Failed to parse cub elements: missing elements")
            return scene
        _apply_element(line, scene)
    raise CubError("Failed to parse cub elements: no map found")