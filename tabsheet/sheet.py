"""A sparse sheet of cells addressed by position."""

from typing import Dict, Optional, TextIO

from .cell import Cell, CellValue
from .common import InvalidPositionError, Position, Size


def _format_value(value: CellValue) -> str:
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


class Sheet:
    """A table of cells; only cells that were set are stored."""

    def __init__(self) -> None:
        self._cells: Dict[Position, Cell] = {}

    @staticmethod
    def _check(pos: Position) -> None:
        if not pos.is_valid():
            raise InvalidPositionError("Invalid position")

    def set_cell(self, pos: Position, text: str) -> None:
        """Set the content of the cell at ``pos``; a leading '=' makes a formula."""
        self._check(pos)
        cell = self._cells.get(pos)
        if cell is None:
            cell = self._cells[pos] = Cell(self)
        cell.set(text)

    def get_cell(self, pos: Position) -> Optional[Cell]:
        """The cell at ``pos``, or None when nothing is stored there."""
        self._check(pos)
        return self._cells.get(pos)

    def clear_cell(self, pos: Position) -> None:
        """Empty the cell at ``pos``; it is dropped unless a formula uses it."""
        self._check(pos)
        cell = self._cells.get(pos)
        if cell is None:
            return
        cell.clear()
        if not cell.is_referenced():
            del self._cells[pos]

    def printable_size(self) -> Size:
        """Bounding rectangle, from A1, of all stored cells."""
        if not self._cells:
            return Size(0, 0)
        rows = max(pos.row for pos in self._cells) + 1
        cols = max(pos.col for pos in self._cells) + 1
        return Size(rows, cols)

    def _print(self, output: TextIO, render) -> None:
        size = self.printable_size()
        for row in range(size.rows):
            fields = []
            for col in range(size.cols):
                cell = self._cells.get(Position(row, col))
                fields.append("" if cell is None else render(cell))
            output.write("\t".join(fields) + "\n")

    def print_values(self, output: TextIO) -> None:
        """Write cell values, tab-separated, one line per row."""
        self._print(output, lambda cell: _format_value(cell.value()))

    def print_texts(self, output: TextIO) -> None:
        """Write cell texts, tab-separated, one line per row."""
        self._print(output, lambda cell: cell.text())


def create_sheet() -> Sheet:
    """A new empty sheet."""
    return Sheet()