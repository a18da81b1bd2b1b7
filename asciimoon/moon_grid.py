import unicodedata
from typing import Iterator, Optional

from asciimoon.types import Cell, Color, ColorMode

ANSI_RESET = "\x1b[0m"
ANSI_BOLD = "\x1b[1m"

def char_width(char: str) -> int:
    """Number of terminal columns a character occupies (East Asian wide/fullwidth take 2)."""
    return 2 if unicodedata.east_asian_width(char) in ("W", "F") else 1

def text_width(text: str) -> int:
    return sum(char_width(char) for char in text)

class MoonGrid:
    """
    Rectangular grid of character cells produced by the Moon rasterizer.

    A cell is either None (unset, the caller's background shows through)
    or a Cell holding one character and its foreground color.
    """

    def __init__(self, width: int, height: int, color_mode: ColorMode = ColorMode.TRUECOLOR):
        self.width = max(int(width), 0)
        self.height = max(int(height), 0)
        self.color_mode = color_mode
        self.cells = [[None] * self.width for _ in range(self.height)]

    def __eq__(self, other) -> bool:
        if not isinstance(other, MoonGrid):
            return NotImplemented
        return (self.width, self.height, self.cells) == (other.width, other.height, other.cells)

    def __repr__(self) -> str:
        return f"MoonGrid(width={self.width}, height={self.height}, written={sum(1 for _ in self.written_cells())})"

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> Optional[Cell]:
        if not self.in_bounds(x, y):
            return None
        return self.cells[y][x]

    def set_char(self, x: int, y: int, char: str, fg: Color, bold: bool = False):
        if self.in_bounds(x, y):
            self.cells[y][x] = Cell(char=char, fg=fg, bold=bold)

    def set_string(self, x: int, y: int, text: str, fg: Color, bold: bool = False) -> int:
        """
        Write text starting at (x, y), one cell per column.

        A wide character occupies its own cell and clears the following one.
        Writing stops at the right edge; a wide character that does not fit
        completely is not written.

        Returns
        -------
        int
            Column after the last written character
        """
        if not 0 <= y < self.height:
            return x
        for char in text:
            w = char_width(char)
            if x < 0 or x + w > self.width:
                break
            self.cells[y][x] = Cell(char=char, fg=fg, bold=bold)
            if w == 2:
                self.cells[y][x + 1] = None
            x += w
        return x

    def written_cells(self) -> Iterator[tuple]:
        for y, row in enumerate(self.cells):
            for x, cell in enumerate(row):
                if cell is not None:
                    yield x, y, cell

    def is_empty(self) -> bool:
        return next(self.written_cells(), None) is None

    def _row_columns(self, row: list) -> Iterator[Optional[Cell]]:
        # Skip the column shadowed by a wide character
        skip = False
        for cell in row:
            if skip:
                skip = False
                continue
            if cell is not None and char_width(cell.char) == 2:
                skip = True
            yield cell

    def to_text_lines(self) -> list:
        return ["".join(" " if cell is None else cell.char for cell in self._row_columns(row))
                for row in self.cells]

    def to_ansi_lines(self, color_mode: Optional[ColorMode] = None) -> list:
        """
        Translate the grid into lines with ANSI color escapes.

        Escapes are only emitted when the style changes; every line ends with a reset.
        The grid's own color mode is used unless one is given.
        """
        color_mode = color_mode or self.color_mode
        lines = []
        for row in self.cells:
            out = []
            style = None
            for cell in self._row_columns(row):
                cell_style = None if cell is None else (cell.fg, cell.bold)
                if cell_style != style:
                    out.append(ANSI_RESET)
                    if cell is not None:
                        if cell.bold:
                            out.append(ANSI_BOLD)
                        out.append(cell.fg.ansi_fg(color_mode))
                    style = cell_style
                out.append(" " if cell is None else cell.char)
            out.append(ANSI_RESET)
            lines.append("".join(out))
        return lines
