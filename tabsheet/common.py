"""Cell positions, sheet sizes, formula error values and sheet exceptions."""

import enum
import string
from dataclasses import dataclass
from typing import ClassVar

FORMULA_SIGN = "="
ESCAPE_SIGN = "'"

_LETTERS = 26
_MAX_LETTER_COUNT = 3
_INT_MAX = 2**31 - 1
_UPPERCASE = frozenset(string.ascii_uppercase)
_DIGITS = frozenset(string.digits)


@dataclass(frozen=True, order=True)
class Position:
    """Zero-based cell position; ordered by row, then column."""

    row: int = 0
    col: int = 0

    MAX_ROWS: ClassVar[int] = 16384
    MAX_COLS: ClassVar[int] = 16384
    NONE: ClassVar["Position"]

    def is_valid(self) -> bool:
        return 0 <= self.row < self.MAX_ROWS and 0 <= self.col < self.MAX_COLS

    def __str__(self) -> str:
        """Spreadsheet notation such as ``"B3"``; empty for an invalid position."""
        if not self.is_valid():
            return ""
        letters = []
        col = self.col
        while col >= 0:
            col, rem = divmod(col, _LETTERS)
            letters.append(chr(ord("A") + rem))
            col -= 1
        return "".join(reversed(letters)) + str(self.row + 1)

    @classmethod
    def from_string(cls, text: str) -> "Position":
        """Parse spreadsheet notation; returns ``Position.NONE`` on malformed input.

        The result is not range-checked: ``"A0"`` yields a position that is
        not valid rather than ``NONE``.
        """
        split = next(
            (index for index, ch in enumerate(text) if ch not in _UPPERCASE),
            len(text),
        )
        letters, digits = text[:split], text[split:]

        if not letters or not digits or len(letters) > _MAX_LETTER_COUNT:
            return cls.NONE
        if any(ch not in _DIGITS for ch in digits):
            return cls.NONE

        row = int(digits)
        if row > _INT_MAX:
            return cls.NONE

        col = 0
        for ch in letters:
            col = col * _LETTERS + (ord(ch) - ord("A") + 1)

        return cls(row - 1, col - 1)


Position.NONE = Position(-1, -1)


@dataclass(frozen=True)
class Size:
    """Number of rows and columns of a sheet area."""

    rows: int = 0
    cols: int = 0


class FormulaErrorCategory(enum.Enum):
    """Kinds of errors a formula evaluation can produce."""

    REF = "#REF!"
    VALUE = "#VALUE!"
    ARITHMETIC = "#ARITHM!"


class FormulaError(Exception):
    """An evaluation error; raised during evaluation and kept as a cell value."""

    def __init__(self, category: FormulaErrorCategory) -> None:
        self.category = FormulaErrorCategory(category)
        super().__init__(self.category.value)

    def __str__(self) -> str:
        return self.category.value

    def __repr__(self) -> str:
        return f"FormulaError({self.category!s})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FormulaError):
            return self.category is other.category
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.category)


class InvalidPositionError(IndexError):
    """Raised when a sheet operation receives a position out of range."""


class FormulaSyntaxError(ValueError):
    """Raised when a formula is syntactically incorrect."""


class CircularDependencyError(ValueError):
    """Raised when setting a formula would create a cycle between cells."""