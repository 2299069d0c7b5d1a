import pytest

from tabsheet.formula_parser import (
    BinaryOpNode,
    CellNode,
    LiteralNode,
    ParensNode,
    ParsingError,
    Token,
    TokenKind,
    UnaryOpNode,
    parse,
    tokenize,
)


def test_tokenize_skips_whitespace_and_classifies():
    tokens = tokenize(" 12 +A1\t*( 3 )\n")
    assert [t.kind for t in tokens] == [
        TokenKind.NUMBER,
        TokenKind.ADD,
        TokenKind.CELL,
        TokenKind.MUL,
        TokenKind.LPAREN,
        TokenKind.NUMBER,
        TokenKind.RPAREN,
    ]
    assert [t.text for t in tokens] == ["12", "+", "A1", "*", "(", "3", ")"]


def test_tokenize_offsets_point_into_text():
    text = "1 + B22"
    for token in tokenize(text):
        assert text[token.offset:token.offset + len(token.text)] == token.text


def test_tokenize_empty_and_blank():
    assert tokenize("") == []
    assert tokenize(" \t\r\n ") == []


@pytest.mark.parametrize("text", ["1", "42", "1.5", ".5", "2e10", "2E-3", "1.25e+4"])
def test_number_forms(text):
    assert tokenize(text) == [Token(TokenKind.NUMBER, text, 0)]


def test_sign_is_separate_token():
    kinds = [t.kind for t in tokenize("-1")]
    assert kinds == [TokenKind.SUB, TokenKind.NUMBER]


@pytest.mark.parametrize("text", ["3X", "A2B", "A", "a1", "1e", "1.", "#", "x"])
def test_lexing_errors(text):
    with pytest.raises(ParsingError):
        tokenize(text)


def test_parse_literal_and_cell():
    assert parse("  1  ") == LiteralNode("1")
    assert parse("A1") == CellNode("A1")


def test_multiplication_binds_tighter_than_addition():
    assert parse("2 + 2*2") == BinaryOpNode(
        "+", LiteralNode("2"), BinaryOpNode("*", LiteralNode("2"), LiteralNode("2"))
    )


def test_subtraction_is_left_associative():
    assert parse("1-2-3") == BinaryOpNode(
        "-", BinaryOpNode("-", LiteralNode("1"), LiteralNode("2")), LiteralNode("3")
    )


def test_division_is_left_associative():
    assert parse("8/4/2") == BinaryOpNode(
        "/", BinaryOpNode("/", LiteralNode("8"), LiteralNode("4")), LiteralNode("2")
    )


def test_unary_binds_tighter_than_binary():
    assert parse("-1+2") == BinaryOpNode("+", UnaryOpNode("-", LiteralNode("1")), LiteralNode("2"))
    assert parse("-A1*2") == BinaryOpNode(
        "*", UnaryOpNode("-", CellNode("A1")), LiteralNode("2")
    )


def test_repeated_unary():
    assert parse("--1") == UnaryOpNode("-", UnaryOpNode("-", LiteralNode("1")))


def test_parentheses_are_kept():
    assert parse("( ( (  1) ) )") == ParensNode(ParensNode(ParensNode(LiteralNode("1"))))
    assert parse("(2*3)+4") == BinaryOpNode(
        "+", ParensNode(BinaryOpNode("*", LiteralNode("2"), LiteralNode("3"))), LiteralNode("4")
    )


def test_parentheses_override_precedence():
    assert parse("+(1+2)*3") == BinaryOpNode(
        "*",
        UnaryOpNode("+", ParensNode(BinaryOpNode("+", LiteralNode("1"), LiteralNode("2")))),
        LiteralNode("3"),
    )


def test_cell_text_is_preserved_for_later_checks():
    assert parse("ABCD1") == CellNode("ABCD1")


@pytest.mark.parametrize(
    "text", ["", "A0++", "((1)", "2+4-", "1 2", ")", "(", "*1", "1+*2", "A2B", "3X"]
)
def test_parse_errors(text):
    with pytest.raises(ParsingError):
        parse(text)