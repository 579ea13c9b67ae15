"""Loading wall textures, the game loop and the command entry point."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field

from raycube.elements import check_arguments
from raycube.geometry import Ray
from raycube.mapping import parse_scene
from raycube.movement import Keys, handle_movement, init_player
from raycube.render import FrameBuffer, render_frame
from raycube.scene import (
    HEIGHT,
    KEY_ESC,
    KEY_LEFT,
    KEY_RIGHT,
    WIDTH,
    CubError,
    Player,
    Scene,
    Texture,
)

_WINDOW_TITLE = "Map Display"
_FRAME_RATE = 60

_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_QUOTED = re.compile(r'"((?:[^"\\]|\\.)*)"')
_COLOR_KEYS = frozenset({"c", "m", "g", "g4", "s"})
_NAMED_COLORS = {
    "black": 0x000000,
    "white": 0xFFFFFF,
    "red": 0xFF0000,
    "green": 0x00FF00,
    "blue": 0x0000FF,
    "yellow": 0xFFFF00,
    "cyan": 0x00FFFF,
    "magenta": 0xFF00FF,
    "gray": 0xBEBEBE,
    "grey": 0xBEBEBE,
}


def _parse_color_value(value: str) -> int:
    lowered = value.strip().lower()
    if lowered == "none":
        return 0
    if lowered.startswith("#"):
        digits = lowered[1:]
        if not digits or len(digits) % 3 or any(c not in "0123456789abcdef" for c in digits):
            raise ValueError(f"bad colour {value!r}")
        size = len(digits) // 3
        channels = [int(digits[i * size:(i + 1) * size], 16) for i in range(3)]
        if size == 1:
            channels = [c * 17 for c in channels]
        elif size > 2:
            channels = [c >> (4 * (size - 2)) for c in channels]
        red, green, blue = channels
        return (red << 16) | (green << 8) | blue
    if lowered in _NAMED_COLORS:
        return _NAMED_COLORS[lowered]
    raise ValueError(f"unknown colour {value!r}")


def _color_spec(spec: str) -> int:
    groups: dict[str, list[str]] = {}
    current: list[str] | None = None
    for token in spec.split():
        if token in _COLOR_KEYS:
            current = groups.setdefault(token, [])
        elif current is not None:
            current.append(token)
        else:
            raise ValueError(f"bad colour entry {spec!r}")
    for key in ("c", "g", "g4", "m"):
        if groups.get(key):
            return _parse_color_value(" ".join(groups[key]))
    raise ValueError(f"no colour in entry {spec!r}")


def _parse_xpm(text: str) -> tuple[int, int, list[list[int]]]:
    strings = _QUOTED.findall(_COMMENT.sub("", text))
    if not strings:
        raise ValueError("no XPM data")
    header = strings[0].split()
    if len(header) < 4:
        raise ValueError("bad XPM header")
    width, height, ncolors, cpp = (int(value) for value in header[:4])
    if width <= 0 or height <= 0 or ncolors <= 0 or cpp <= 0:
        raise ValueError("bad XPM dimensions")
    color_lines = strings[1:1 + ncolors]
    pixel_lines = strings[1 + ncolors:1 + ncolors + height]
    if len(color_lines) != ncolors or len(pixel_lines) != height:
        raise ValueError("truncated XPM data")
    palette = {line[:cpp]: _color_spec(line[cpp:]) for line in color_lines}
    pixels: list[list[int]] = []
    for line in pixel_lines:
        if len(line) < width * cpp:
            raise ValueError("short XPM pixel row")
        row = [palette[line[i:i + cpp]] for i in range(0, width * cpp, cpp)]
        pixels.append(row)
    return width, height, pixels


def load_texture(path, name: str) -> Texture:
    """Load an XPM image into a texture; ``name`` labels it in error messages."""
    try:
        with open(path, encoding="utf-8", errors="replace") as handle:
            width, height, pixels = _parse_xpm(handle.read())
    except (OSError, ValueError, KeyError) as exc:
        raise CubError(f"Failed to load {name} texture: {path}") from exc
    return Texture(path=str(path), width=width, height=height, pixels=pixels)


def load_textures(scene: Scene) -> None:
    """Load the four wall textures named by the scene, in place."""
    for texture, name in (
        (scene.north, "North"),
        (scene.south, "South"),
        (scene.west, "West"),
        (scene.east, "East"),
    ):
        if texture.path is None:
            raise CubError(f"Failed to load {name} texture: no path")
        loaded = load_texture(texture.path, name)
        texture.width = loaded.width
        texture.height = loaded.height
        texture.pixels = loaded.pixels


@dataclass
class Game:
    """A running view of a scene: player, held keys and the frame buffer."""

    scene: Scene
    width: int = WIDTH
    height: int = HEIGHT
    player: Player = field(init=False)
    keys: Keys = field(init=False, default_factory=Keys)
    frame: FrameBuffer = field(init=False)
    closing: bool = field(init=False, default=False)
    rays: list[Ray] = field(init=False, default_factory=list)

    def __post_init__(self) -> None:
        if self.scene.game_map is None:
            raise CubError("Map not initialized")
        self.player = init_player(self.scene.game_map)
        self.frame = FrameBuffer(self.width, self.height)

    def handle_keypress(self, keycode: int) -> None:
        """Hold a movement key, or close on Escape."""
        if keycode == KEY_ESC:
            self.handle_close()
        else:
            self.keys.press(keycode)

    def handle_keyrelease(self, keycode: int) -> None:
        """Release a movement key."""
        self.keys.release(keycode)

    def handle_close(self) -> None:
        """Ask the loop to stop; later calls do nothing."""
        if not self.closing:
            self.closing = True

    def _render(self) -> list[Ray]:
        self.rays = render_frame(self.frame, self.scene, self.player)
        return self.rays

    def step(self) -> list[Ray] | None:
        """Run one frame: move for the held keys and redraw.

        Returns the rays cast, or None once the game is closing.
        """
        if self.closing:
            return None
        handle_movement(self.scene.game_map, self.player, self.keys)
        return self._render()

    def _frame_bytes(self) -> bytes:
        return bytes(
            channel
            for row in self.frame.pixels
            for color in row
            for channel in ((color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF)
        )

    def run(self) -> None:
        """Open a window and play until it is closed or Escape is pressed."""
        import pygame

        key_codes = {
            pygame.K_LEFT: KEY_LEFT,
            pygame.K_RIGHT: KEY_RIGHT,
            pygame.K_ESCAPE: KEY_ESC,
        }
        pygame.init()
        try:
            screen = pygame.display.set_mode((self.width, self.height))
            pygame.display.set_caption(_WINDOW_TITLE)
            clock = pygame.time.Clock()
            self._render()
            while not self.closing:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self.handle_close()
                    elif event.type == pygame.KEYDOWN:
                        self.handle_keypress(key_codes.get(event.key, event.key))
                    elif event.type == pygame.KEYUP:
                        self.handle_keyrelease(key_codes.get(event.key, event.key))
                if self.step() is None:
                    break
                surface = pygame.image.frombuffer(
                    self._frame_bytes(), (self.width, self.height), "RGB"
                )
                screen.blit(surface, (0, 0))
                pygame.display.flip()
                clock.tick(_FRAME_RATE)
        finally:
            pygame.quit()


def main(argv=None) -> int:
    """Start the game on the scene file named on the command line."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        path = check_arguments(list(argv))
    except CubError as exc:
        print(f"Error\n{exc}", file=sys.stderr)
        return 1
    try:
        scene = parse_scene(path)
        load_textures(scene)
        game = Game(scene)
    except CubError as exc:
        print(f"Error\n{exc}", file=sys.stderr)
        return 0
    game.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())