"""
Rendering Engine
=================
Double-buffered terminal renderer. The arena is measured in arena units
and scaled onto terminal cells.
"""

from dataclasses import dataclass, field
from typing import List

from blessed import Terminal

from .config import ARENA_WIDTH, ARENA_HEIGHT


# ANSI 256 color constants
NEON_CYAN = 51
NEON_MAGENTA = 201
NEON_YELLOW = 226
NEON_GREEN = 46
NEON_RED = 196
NEON_PURPLE = 135

GRAY_LIGHT = 252
GRAY_MED = 245
GRAY_DARK = 238
GRAY_DARKER = 235

WHITE = 255

HUD_ROWS = 7


@dataclass
class Cell:
    char: str = ' '
    fg_color: int = 7

    def matches(self, other: 'Cell') -> bool:
        return self.char == other.char and self.fg_color == other.fg_color

    def reset(self):
        self.char = ' '
        self.fg_color = 7


class DoubleBuffer:
    """
    Writes go to the back buffer; present() emits only the cells that
    differ from the front buffer, then swaps.
    """

    def __init__(self, term: Terminal):
        self.term = term
        self.width = term.width
        self.height = term.height
        self.front: List[List[Cell]] = []
        self.back: List[List[Cell]] = []
        self._init_buffers()

    def _init_buffers(self):
        self.front = [[Cell() for _ in range(self.width)] for _ in range(self.height)]
        self.back = [[Cell() for _ in range(self.width)] for _ in range(self.height)]

    def resize(self, width: int, height: int):
        self.width = width
        self.height = height
        self._init_buffers()

    def clear_back(self):
        for row in self.back:
            for cell in row:
                cell.reset()

    def put(self, x: int, y: int, char: str, fg_color: int = 7):
        if 0 <= x < self.width and 0 <= y < self.height:
            cell = self.back[y][x]
            cell.char = char
            cell.fg_color = fg_color

    def put_string(self, x: int, y: int, text: str, fg_color: int = 7):
        for i, char in enumerate(text):
            self.put(x + i, y, char, fg_color)

    def present(self) -> str:
        parts = []
        normal = self.term.normal
        for y in range(self.height):
            for x in range(self.width):
                back_cell = self.back[y][x]
                if not back_cell.matches(self.front[y][x]):
                    parts.append(self.term.move_xy(x, y))
                    parts.append(normal)
                    parts.append(self.term.color(back_cell.fg_color))
                    parts.append(back_cell.char or ' ')
        self.front, self.back = self.back, self.front
        return ''.join(parts)


@dataclass
class GameRenderer:
    """
    Maps arena coordinates to the playfield (everything above the HUD rows)
    and exposes a small drawing vocabulary to the screens in main.py.
    """
    term: Terminal
    arena_width: float = ARENA_WIDTH
    arena_height: float = ARENA_HEIGHT
    buffer: DoubleBuffer = field(init=False)

    def __post_init__(self):
        self.buffer = DoubleBuffer(self.term)

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height

    @property
    def game_height(self) -> int:
        """Rows available to the arena (excluding the border and HUD)."""
        return self.buffer.height - HUD_ROWS

    def resize(self, width: int, height: int):
        """Rebuild both buffers for a new terminal size; the next frame redraws everything."""
        self.buffer.resize(width, height)

    def to_cell(self, x: float, y: float):
        """Arena units -> terminal cell inside the border."""
        inner_w = max(1, self.width - 2)
        inner_h = max(1, self.game_height - 2)
        cx = 1 + int(x / self.arena_width * inner_w)
        cy = 1 + int(y / self.arena_height * inner_h)
        return min(cx, inner_w), min(cy, inner_h)

    def begin_frame(self):
        self.buffer.clear_back()

    def end_frame(self) -> str:
        return self.buffer.present()

    def put(self, x: int, y: int, char: str, fg_color: int = 7):
        self.buffer.put(x, y, char, fg_color)

    def put_string(self, x: int, y: int, text: str, fg_color: int = 7):
        self.buffer.put_string(x, y, text, fg_color)

    def put_centered(self, y: int, text: str, fg_color: int = 7):
        self.buffer.put_string(max(0, self.width // 2 - len(text) // 2), y, text, fg_color)

    def put_world(self, x: float, y: float, char: str, fg_color: int = 7):
        cx, cy = self.to_cell(x, y)
        self.buffer.put(cx, cy, char, fg_color)

    def draw_box(self, x: int, y: int, w: int, h: int, color: int = GRAY_DARK,
                 char: str = '#'):
        for i in range(w):
            self.put(x + i, y, char, color)
            self.put(x + i, y + h - 1, char, color)
        for j in range(1, h - 1):
            self.put(x, y + j, char, color)
            self.put(x + w - 1, y + j, char, color)
