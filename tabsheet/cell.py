"""Sheet cells holding empty values, text or formulas, linked by dependencies."""

from typing import TYPE_CHECKING, List, Optional, Set, Union

from .common import (
    ESCAPE_SIGN,
    FORMULA_SIGN,
    CircularDependencyError,
    FormulaError,
    Position,
)
from .formula import Formula, FormulaValue, parse_formula

if TYPE_CHECKING:
    from .sheet import Sheet

CellValue = Union[str, float, FormulaError]


class _EmptyContent:
    def value(self) -> CellValue:
        return ""

    def text(self) -> str:
        return ""

    def referenced_cells(self) -> List[Position]:
        return []

    def invalidate_cache(self) -> None:
        pass


class _TextContent(_EmptyContent):
    def __init__(self, text: str) -> None:
        if not text:
            raise ValueError("text content must not be empty")
        self._text = text

    def value(self) -> CellValue:
        if self._text.startswith(ESCAPE_SIGN):
            return self._text[1:]
        return self._text

    def text(self) -> str:
        return self._text


class _FormulaContent(_EmptyContent):
    def __init__(self, text: str, sheet: "Sheet") -> None:
        if not text.startswith(FORMULA_SIGN):
            raise ValueError("formula content must start with the formula sign")
        self._formula: Formula = parse_formula(text[1:])
        self._sheet = sheet
        self._cache: Optional[FormulaValue] = None

    def value(self) -> CellValue:
        if self._cache is None:
            self._cache = self._formula.evaluate(self._sheet)
        return self._cache

    def text(self) -> str:
        return FORMULA_SIGN + self._formula.expression()

    def referenced_cells(self) -> List[Position]:
        return self._formula.referenced_cells()

    def invalidate_cache(self) -> None:
        self._cache = None


class Cell:
    """A single cell of a sheet, tracking which cells it uses and which use it."""

    def __init__(self, sheet: "Sheet") -> None:
        self._sheet = sheet
        self._content: _EmptyContent = _EmptyContent()
        self._dependents: Set["Cell"] = set()
        self._dependencies: Set["Cell"] = set()

    def __repr__(self) -> str:
        return f"Cell({self.text()!r})"

    def set(self, text: str) -> None:
        """Replace the content.

        Raises FormulaSyntaxError for a malformed formula and
        CircularDependencyError for a formula that would form a cycle;
        in both cases the cell keeps its previous content.
        """
        if not text:
            content: _EmptyContent = _EmptyContent()
        elif text.startswith(FORMULA_SIGN):
            content = _FormulaContent(text, self._sheet)
        else:
            content = _TextContent(text)

        if self._creates_cycle(content):
            raise CircularDependencyError(f"circular dependency in {text!r}")
        self._content = content

        for dependency in self._dependencies:
            dependency._dependents.discard(self)
        self._dependencies.clear()

        for pos in content.referenced_cells():
            dependency = self._sheet.get_cell(pos)
            if dependency is None:
                self._sheet.set_cell(pos, "")
                dependency = self._sheet.get_cell(pos)
            self._dependencies.add(dependency)
            dependency._dependents.add(self)

        self._invalidate_caches()

    def clear(self) -> None:
        """Make the cell empty."""
        self.set("")

    def value(self) -> CellValue:
        """Visible value: text without escape sign, a number, or a FormulaError."""
        return self._content.value()

    def text(self) -> str:
        """Content as it would be edited."""
        return self._content.text()

    def referenced_cells(self) -> List[Position]:
        """Cells used directly by the formula, sorted and without duplicates."""
        return self._content.referenced_cells()

    def is_referenced(self) -> bool:
        """Whether some formula cell uses this cell."""
        return bool(self._dependents)

    def _creates_cycle(self, content: _EmptyContent) -> bool:
        positions = content.referenced_cells()
        if not positions:
            return False
        targets = {self._sheet.get_cell(pos) for pos in positions}
        targets.discard(None)

        visited: Set["Cell"] = set()
        stack: List["Cell"] = [self]
        while stack:
            current = stack.pop()
            if current in visited:
                continue
            visited.add(current)
            if current in targets:
                return True
            stack.extend(current._dependents)
        return False

    def _invalidate_caches(self) -> None:
        visited: Set["Cell"] = set()
        stack: List["Cell"] = [self]
        while stack:
            current = stack.pop()
            if current in visited:
                continue
            visited.add(current)
            current._content.invalidate_cache()
            stack.extend(current._dependents)