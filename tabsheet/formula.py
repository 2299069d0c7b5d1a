"""Formulas: parsed expressions evaluated against a sheet."""

import math
import re
from typing import List, Protocol, Union

from .common import FormulaError, FormulaErrorCategory, FormulaSyntaxError, Position
from .formula_ast import parse_formula_ast

FormulaValue = Union[float, FormulaError]

_NUMERIC_TEXT = re.compile(r"\s*[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class _CellLike(Protocol):
    def value(self) -> object: ...


class _SheetLike(Protocol):
    def get_cell(self, pos: Position) -> "_CellLike | None": ...


def _text_to_number(text: str) -> float:
    if not text:
        return 0.0
    if not _NUMERIC_TEXT.fullmatch(text):
        raise FormulaError(FormulaErrorCategory.VALUE)
    value = float(text)
    if math.isinf(value):
        raise FormulaError(FormulaErrorCategory.VALUE)
    return value


class Formula:
    """An arithmetic expression over numbers and cell references."""

    def __init__(self, expression: str) -> None:
        try:
            self._ast = parse_formula_ast(expression)
        except ValueError as exc:
            raise FormulaSyntaxError(str(exc)) from exc

    def __repr__(self) -> str:
        return f"Formula({self.expression()!r})"

    def evaluate(self, sheet: _SheetLike) -> FormulaValue:
        """Return the value of the formula on ``sheet``, or the error it produced."""

        def lookup(pos: Position) -> float:
            if not pos.is_valid():
                raise FormulaError(FormulaErrorCategory.REF)
            cell = sheet.get_cell(pos)
            if cell is None:
                return 0.0
            value = cell.value()
            if isinstance(value, FormulaError):
                raise value
            if isinstance(value, str):
                return _text_to_number(value)
            return float(value)

        try:
            return self._ast.execute(lookup)
        except FormulaError as error:
            return error

    def expression(self) -> str:
        """Canonical text without spaces or redundant parentheses."""
        return self._ast.to_formula()

    def referenced_cells(self) -> List[Position]:
        """Valid cells used by the formula, sorted and without duplicates."""
        return list(dict.fromkeys(cell for cell in self._ast.cells() if cell.is_valid()))


def parse_formula(expression: str) -> Formula:
    """Parse ``expression``; raises FormulaSyntaxError if it is malformed."""
    return Formula(expression)