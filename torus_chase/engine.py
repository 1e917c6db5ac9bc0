"""
Rendering Engine
=================
Sparse-frame terminal renderer for the simulation snapshot.

The playfield is mostly empty, so a frame is just the cells something was
drawn into. Presenting a frame diffs it against the one on screen: cells
that were vacated get blanked, cells whose glyph changed get redrawn, and
everything else is left alone.
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple

try:
    from blessed import Terminal
except ImportError:
    raise ImportError("'blessed' library required. Install with: pip install blessed")


# ANSI 256 color constants
NEON_CYAN = 51
NEON_MAGENTA = 201
NEON_YELLOW = 226
NEON_GREEN = 46
NEON_RED = 196
NEON_ORANGE = 208

GRAY_MED = 245
GRAY_DARK = 238

WHITE = 255

UI_ROWS = 2

Glyph = Tuple[str, int]  # (char, 256-color index)


class SparseFrame:
    """Cells drawn this frame, diffed against the cells already on screen."""

    def __init__(self, term: Terminal):
        self.term = term
        self.width = term.width
        self.height = term.height
        self.shown: Dict[Tuple[int, int], Glyph] = {}
        self.drawn: Dict[Tuple[int, int], Glyph] = {}
        self.stale = False

    def resize(self, width: int, height: int):
        """New terminal size: forget what is on screen and clear it next present."""
        self.width = width
        self.height = height
        self.shown = {}
        self.drawn = {}
        self.stale = True

    def begin(self):
        self.drawn = {}

    def put(self, col: int, row: int, char: str, color: int = 7):
        if 0 <= col < self.width and 0 <= row < self.height:
            self.drawn[(col, row)] = (char, color)

    def put_string(self, col: int, row: int, text: str, color: int = 7):
        for i, char in enumerate(text):
            self.put(col + i, row, char, color)

    def present(self) -> str:
        """Escape output that turns the shown frame into the drawn one."""
        term = self.term
        parts = [term.clear] if self.stale else []

        if not self.stale:
            for col, row in sorted(self.shown.keys() - self.drawn.keys()):
                parts.append(term.move_xy(col, row))
                parts.append(term.normal)
                parts.append(' ')

        for (col, row), glyph in self.drawn.items():
            if self.stale or self.shown.get((col, row)) != glyph:
                char, color = glyph
                parts.append(term.move_xy(col, row))
                parts.append(term.normal)
                parts.append(term.color(color))
                parts.append(char or ' ')

        self.shown, self.drawn = self.drawn, {}
        self.stale = False
        return ''.join(parts)


@dataclass
class GameRenderer:
    """
    Maps world coordinates onto terminal cells.

    The world is centred on the origin with y up; the terminal's game
    area is everything above the UI rows. The shake offset (world units)
    is applied to the game area only.
    """
    term: Terminal
    world_width: float
    world_height: float
    frame: SparseFrame = field(init=False)

    shake_x: float = 0.0
    shake_y: float = 0.0

    show_fps: bool = False
    current_fps: float = 60.0

    def __post_init__(self):
        self.frame = SparseFrame(self.term)

    @property
    def width(self) -> int:
        return self.frame.width

    @property
    def height(self) -> int:
        return self.frame.height

    @property
    def game_height(self) -> int:
        """Height of the playable area (excluding UI rows)."""
        return self.frame.height - UI_ROWS

    def set_shake(self, x: float, y: float):
        self.shake_x = x
        self.shake_y = y

    def world_to_cell(self, x: float, y: float) -> Tuple[int, int]:
        """World point -> (column, row), flipping y."""
        col = (x + self.shake_x + self.world_width / 2) / self.world_width * self.width
        row = (self.world_height / 2 - (y + self.shake_y)) / self.world_height * self.game_height
        return int(col), int(row)

    def begin_frame(self):
        self.frame.begin()

    def end_frame(self) -> str:
        return self.frame.present()

    def put_world(self, x: float, y: float, char: str, color: int = 7):
        """Draw at a world position; cells outside the game area are dropped."""
        col, row = self.world_to_cell(x, y)
        if 0 <= col < self.width and 0 <= row < self.game_height:
            self.frame.put(col, row, char, color)

    def put_string(self, x: int, y: int, text: str, color: int = 7):
        """Screen-space text (UI), unaffected by shake."""
        self.frame.put_string(x, y, text, color)

    def put_centered(self, y: int, text: str, color: int = 7):
        self.put_string(max(0, (self.width - len(text)) // 2), y, text, color)

    def resize(self, width: int, height: int):
        self.frame.resize(width, height)
