# tabsheet

`tabsheet` is a small in-memory spreadsheet library. Each cell holds plain
text or a formula. A formula is an arithmetic expression over numbers and
other cells. Formula results are cached. When a cell changes, the caches of
the formulas that depend on it are cleared. A formula that would make a
cycle is refused.

## Installation

```
pip install tabsheet
```

## Quick start

```python
import io

from tabsheet.common import Position
from tabsheet.sheet import create_sheet

sheet = create_sheet()
sheet.set_cell(Position.from_string("A1"), "2")
sheet.set_cell(Position.from_string("A2"), "=A1*(3+4)")

cell = sheet.get_cell(Position.from_string("A2"))
print(cell.value())   # 14.0
print(cell.text())    # =A1*(3+4)

out = io.StringIO()
sheet.print_values(out)
print(out.getvalue())  # "2\n14\n"
```

## Positions

`Position(row, col)` is zero-based and is ordered by row, then by column.
`Position.from_string("B3")` parses spreadsheet notation and `str(position)`
gives it back. Malformed text gives `Position.NONE`, and `is_valid()` returns
false for it. The sheet is 16384 rows by 16384 columns (`A1` to `XFD16384`).

## Cell contents

- Text that starts with `=` is a formula. If the rest cannot be parsed,
  `FormulaSyntaxError` is raised. This includes `=` on its own.
- Text that starts with an apostrophe (`'`) is shown by `value()` without
  the apostrophe. `text()` keeps it. Use it to store text that begins with `=`.
- An empty string makes an empty cell. Its value and text are both `""`.

Formulas support decimal numbers (with an optional exponent), cell
references such as `B7` or `AA12`, the operators `+ - * /`, unary `+` and
`-`, and parentheses. For a formula cell, `Cell.text()` gives the formula
in normal form, with no spaces and no parentheses that are not needed.
`Cell.referenced_cells()` lists the cells the formula uses, sorted and
without duplicates.

## Evaluation rules

- An empty cell, or a position that was never set, counts as `0`.
- A text cell counts as a number if its whole text is a number. Leading
  whitespace is allowed. Otherwise the formula's value is a `FormulaError`
  with category `FormulaErrorCategory.VALUE`, shown as `#VALUE!`.
- Division by zero or an overflow gives `FormulaErrorCategory.ARITHMETIC`,
  shown as `#ARITHM!`.
- An error in a referenced cell passes on to the formulas that use it.
- A formula that mentions a position outside the sheet, such as `XFE1` or
  `A0`, is not accepted. It raises `FormulaSyntaxError`.

## The sheet

- `set_cell(pos, text)` sets a cell's contents. When a formula refers to a
  cell that is not stored yet, an empty cell is created there.
- `get_cell(pos)` returns the `Cell`, or `None` if nothing is stored at `pos`.
- `clear_cell(pos)` empties the cell. The cell is dropped unless some
  formula still uses it.
- `printable_size()` returns the `Size` of the rectangle, starting at A1,
  that covers every stored cell. Empty cells created by references count too.
- `print_values(output)` and `print_texts(output)` write that rectangle to a
  text stream. Cells are separated by tabs and each row ends with a newline.
  Numbers are written in `%g` form.

## Errors raised

- `InvalidPositionError` (an `IndexError`): a sheet method got a position
  outside the sheet.
- `FormulaSyntaxError` (a `ValueError`): a formula cannot be parsed. The
  cell keeps its old contents.
- `CircularDependencyError` (a `ValueError`): a formula would make a cycle.
  The cell keeps its old contents.

## Lower-level pieces

- `tabsheet.formula.parse_formula(expression)` parses an expression, written
  without the leading `=`, without needing a sheet. The returned `Formula`
  has `evaluate(sheet)`, `expression()` and `referenced_cells()`.
- `tabsheet.formula_ast.parse_formula_ast(text)` returns a `FormulaAST`. It
  has `execute(args)`, `to_formula()`, `to_tree_string()` (prefix form such
  as `(+ 1 2)`), `cells()` and `cells_string()`.
- `tabsheet.formula_parser.tokenize(text)` returns the tokens and
  `tabsheet.formula_parser.parse(text)` returns the parse tree. Both raise
  `ParsingError` on bad input.

## What it does not do

`tabsheet` is a library only. It has no command-line program and no
interactive screen. It does not load or save sheets to files. Formulas have
no functions (such as `SUM`) and no cell ranges.