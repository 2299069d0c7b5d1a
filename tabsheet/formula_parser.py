"""Tokenizer and parser turning formula text into a parse tree."""

import enum
import re
from dataclasses import dataclass
from typing import List, Union


class ParsingError(ValueError):
    """Raised when formula text cannot be tokenized or parsed."""


class TokenKind(enum.Enum):
    LPAREN = "("
    RPAREN = ")"
    NUMBER = "NUMBER"
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    CELL = "CELL"
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    offset: int


@dataclass(frozen=True)
class LiteralNode:
    """A number exactly as written."""

    text: str


@dataclass(frozen=True)
class CellNode:
    """A cell reference exactly as written."""

    text: str


@dataclass(frozen=True)
class ParensNode:
    expr: "Node"


@dataclass(frozen=True)
class UnaryOpNode:
    op: str
    operand: "Node"


@dataclass(frozen=True)
class BinaryOpNode:
    op: str
    lhs: "Node"
    rhs: "Node"


Node = Union[LiteralNode, CellNode, ParensNode, UnaryOpNode, BinaryOpNode]

_EXPONENT = r"(?:[eE][+-]?[0-9]+)"
_TOKEN_RE = re.compile(
    rf"""
    (?P<WS>[ \t\r\n]+)
    |(?P<NUMBER>[0-9]*\.[0-9]+{_EXPONENT}?|[0-9]+{_EXPONENT}?)
    |(?P<CELL>[A-Z]+[0-9]+)
    |(?P<LPAREN>\()
    |(?P<RPAREN>\))
    |(?P<ADD>\+)
    |(?P<SUB>-)
    |(?P<MUL>\*)
    |(?P<DIV>/)
    """,
    re.VERBOSE,
)

_MUL_PRECEDENCE = 4
_ADD_PRECEDENCE = 3
_UNARY_PRECEDENCE = 5


def tokenize(text: str) -> List[Token]:
    """Split formula text into tokens, dropping whitespace."""
    tokens = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise ParsingError(
                f"Error when lexing: token recognition error at: '{text[pos]}'"
            )
        if match.lastgroup != "WS":
            tokens.append(Token(TokenKind[match.lastgroup], match.group(), pos))
        pos = match.end()
    return tokens


class _Parser:
    def __init__(self, text: str) -> None:
        self._tokens = tokenize(text)
        self._tokens.append(Token(TokenKind.EOF, "<EOF>", len(text)))
        self._index = 0

    def _peek(self) -> Token:
        return self._tokens[self._index]

    def _advance(self) -> Token:
        token = self._tokens[self._index]
        if token.kind is not TokenKind.EOF:
            self._index += 1
        return token

    def _expect(self, kind: TokenKind) -> Token:
        token = self._advance()
        if token.kind is not kind:
            raise ParsingError(f"Error when parsing: unexpected '{token.text}'")
        return token

    def parse_main(self) -> Node:
        node = self._expr(0)
        self._expect(TokenKind.EOF)
        return node

    def _primary(self) -> Node:
        token = self._advance()
        if token.kind is TokenKind.LPAREN:
            inner = self._expr(0)
            self._expect(TokenKind.RPAREN)
            return ParensNode(inner)
        if token.kind in (TokenKind.ADD, TokenKind.SUB):
            return UnaryOpNode(token.text, self._expr(_UNARY_PRECEDENCE))
        if token.kind is TokenKind.CELL:
            return CellNode(token.text)
        if token.kind is TokenKind.NUMBER:
            return LiteralNode(token.text)
        raise ParsingError(f"Error when parsing: unexpected '{token.text}'")

    def _expr(self, min_precedence: int) -> Node:
        node = self._primary()
        while True:
            kind = self._peek().kind
            if kind in (TokenKind.MUL, TokenKind.DIV) and _MUL_PRECEDENCE >= min_precedence:
                op = self._advance().text
                node = BinaryOpNode(op, node, self._expr(_MUL_PRECEDENCE + 1))
            elif kind in (TokenKind.ADD, TokenKind.SUB) and _ADD_PRECEDENCE >= min_precedence:
                op = self._advance().text
                node = BinaryOpNode(op, node, self._expr(_ADD_PRECEDENCE + 1))
            else:
                return node


def parse(text: str) -> Node:
    """Parse a whole formula expression (without the leading '=') into a tree."""
    try:
        return _Parser(text).parse_main()
    except RecursionError as exc:
        raise ParsingError("Error when parsing: expression is nested too deeply") from exc