"""Abstract syntax tree of a formula: evaluation and canonical printing."""

import enum
import math
import operator
from typing import Callable, Dict, List

from .common import FormulaError, FormulaErrorCategory, FormulaSyntaxError, Position
from .formula_parser import (
    BinaryOpNode,
    CellNode,
    LiteralNode,
    Node,
    ParensNode,
    ParsingError,
    UnaryOpNode,
    parse,
)

SheetArgs = Callable[[Position], float]


class _Precedence(enum.IntEnum):
    ADD = 0
    SUB = 1
    MUL = 2
    DIV = 3
    UNARY = 4
    ATOM = 5


class _Rule(enum.IntFlag):
    """A set bit means parentheses are needed around that child."""

    NONE = 0
    LEFT = 1
    RIGHT = 2
    BOTH = 3


_N, _R, _B = _Rule.NONE, _Rule.RIGHT, _Rule.BOTH

# _PRECEDENCE_RULES[parent][child]
_PRECEDENCE_RULES = (
    (_N, _N, _N, _N, _N, _N),  # ADD
    (_R, _R, _N, _N, _N, _N),  # SUB
    (_B, _B, _N, _N, _N, _N),  # MUL
    (_B, _B, _R, _R, _N, _N),  # DIV
    (_B, _B, _N, _N, _N, _N),  # UNARY
    (_N, _N, _N, _N, _N, _N),  # ATOM
)

_BINARY_PRECEDENCE: Dict[str, _Precedence] = {
    "+": _Precedence.ADD,
    "-": _Precedence.SUB,
    "*": _Precedence.MUL,
    "/": _Precedence.DIV,
}

_BINARY_OPS: Dict[str, Callable[[float, float], float]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
}


def _format_number(value: float) -> str:
    return f"{value:g}"


class _Expr:
    precedence: _Precedence

    def tree_string(self) -> str:
        raise NotImplementedError

    def formula_body(self) -> str:
        raise NotImplementedError

    def evaluate(self, args: SheetArgs) -> float:
        raise NotImplementedError

    def formula(self, parent: _Precedence, right_child: bool = False) -> str:
        mask = _Rule.RIGHT if right_child else _Rule.LEFT
        body = self.formula_body()
        if _PRECEDENCE_RULES[parent][self.precedence] & mask:
            return f"({body})"
        return body


class _BinaryOpExpr(_Expr):
    def __init__(self, op: str, lhs: _Expr, rhs: _Expr) -> None:
        self.op = op
        self.lhs = lhs
        self.rhs = rhs
        self.precedence = _BINARY_PRECEDENCE[op]

    def tree_string(self) -> str:
        return f"({self.op} {self.lhs.tree_string()} {self.rhs.tree_string()})"

    def formula_body(self) -> str:
        left = self.lhs.formula(self.precedence)
        right = self.rhs.formula(self.precedence, right_child=True)
        return f"{left}{self.op}{right}"

    def evaluate(self, args: SheetArgs) -> float:
        lhs_value = self.lhs.evaluate(args)
        rhs_value = self.rhs.evaluate(args)
        try:
            result = _BINARY_OPS[self.op](lhs_value, rhs_value)
        except (ZeroDivisionError, OverflowError):
            raise FormulaError(FormulaErrorCategory.ARITHMETIC) from None
        if not math.isfinite(result):
            raise FormulaError(FormulaErrorCategory.ARITHMETIC)
        return result


class _UnaryOpExpr(_Expr):
    precedence = _Precedence.UNARY

    def __init__(self, op: str, operand: _Expr) -> None:
        self.op = op
        self.operand = operand

    def tree_string(self) -> str:
        return f"({self.op} {self.operand.tree_string()})"

    def formula_body(self) -> str:
        return self.op + self.operand.formula(self.precedence)

    def evaluate(self, args: SheetArgs) -> float:
        value = self.operand.evaluate(args)
        return -value if self.op == "-" else value


class _NumberExpr(_Expr):
    precedence = _Precedence.ATOM

    def __init__(self, value: float) -> None:
        self.value = value

    def tree_string(self) -> str:
        return _format_number(self.value)

    def formula_body(self) -> str:
        return _format_number(self.value)

    def evaluate(self, args: SheetArgs) -> float:
        return self.value


class _CellExpr(_Expr):
    precedence = _Precedence.ATOM

    def __init__(self, cell: Position) -> None:
        self.cell = cell

    def tree_string(self) -> str:
        if not self.cell.is_valid():
            return str(FormulaError(FormulaErrorCategory.REF))
        return str(self.cell)

    def formula_body(self) -> str:
        return self.tree_string()

    def evaluate(self, args: SheetArgs) -> float:
        return args(self.cell)


def _build(node: Node, cells: List[Position]) -> _Expr:
    match node:
        case LiteralNode(text=text):
            try:
                value = float(text)
            except ValueError:
                raise ParsingError(f"Invalid number: {text}") from None
            if not math.isfinite(value):
                raise ParsingError(f"Invalid number: {text}")
            return _NumberExpr(value)
        case CellNode(text=text):
            position = Position.from_string(text)
            if not position.is_valid():
                raise FormulaSyntaxError(f"Invalid position: {text}")
            cells.append(position)
            return _CellExpr(position)
        case ParensNode(expr=inner):
            return _build(inner, cells)
        case UnaryOpNode(op=op, operand=operand):
            return _UnaryOpExpr(op, _build(operand, cells))
        case BinaryOpNode(op=op, lhs=lhs, rhs=rhs):
            left = _build(lhs, cells)
            return _BinaryOpExpr(op, left, _build(rhs, cells))
    raise ParsingError(f"Error when parsing: unexpected node {node!r}")


class FormulaAST:
    """A parsed formula together with the sorted cells it mentions."""

    def __init__(self, root: _Expr, cells: List[Position]) -> None:
        self._root = root
        self._cells = sorted(cells)

    def execute(self, args: SheetArgs) -> float:
        """Evaluate, looking up cell values through ``args``.

        Raises FormulaError on an arithmetic error or when ``args`` raises one.
        """
        return self._root.evaluate(args)

    def to_tree_string(self) -> str:
        """Prefix notation such as ``(+ 1 2)``."""
        return self._root.tree_string()

    def to_formula(self) -> str:
        """Infix notation without spaces or redundant parentheses."""
        return self._root.formula(_Precedence.ATOM)

    def cells_string(self) -> str:
        """Mentioned cells in order, each followed by a space."""
        return "".join(f"{cell} " for cell in self._cells)

    def cells(self) -> List[Position]:
        """Mentioned cells, sorted, duplicates included."""
        return list(self._cells)


def parse_formula_ast(text: str) -> FormulaAST:
    """Parse formula text (without the leading '=') into an AST."""
    tree = parse(text)
    cells: List[Position] = []
    try:
        root = _build(tree, cells)
    except RecursionError as exc:
        raise ParsingError("Error when parsing: expression is nested too deeply") from exc
    return FormulaAST(root, cells)