"""An in-memory spreadsheet library with arithmetic formulas and cell references."""

__version__ = "0.1.0"
__all__ = ["cell", "common", "formula", "formula_ast", "formula_parser", "sheet"]