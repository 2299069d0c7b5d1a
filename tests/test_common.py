import pytest

from tabsheet.common import (
    CircularDependencyError,
    FormulaError,
    FormulaErrorCategory,
    FormulaSyntaxError,
    InvalidPositionError,
    Position,
    Size,
)


@pytest.mark.parametrize("i", range(25))
def test_diagonal_positions_round_trip(i):
    text = chr(ord("A") + i) + str(i + 1)
    assert str(Position(i, i)) == text
    assert Position.from_string(text) == Position(i, i)


@pytest.mark.parametrize(
    "pos, text",
    [
        (Position(0, 0), "A1"),
        (Position(0, 1), "B1"),
        (Position(0, 25), "Z1"),
        (Position(0, 26), "AA1"),
        (Position(0, 27), "AB1"),
        (Position(0, 51), "AZ1"),
        (Position(0, 52), "BA1"),
        (Position(0, 53), "BB1"),
        (Position(0, 77), "BZ1"),
        (Position(0, 78), "CA1"),
        (Position(0, 701), "ZZ1"),
        (Position(0, 702), "AAA1"),
        (Position(136, 2), "C137"),
        (Position(Position.MAX_ROWS - 1, Position.MAX_COLS - 1), "XFD16384"),
    ],
)
def test_position_string_conversion(pos, text):
    assert str(pos) == text
    assert Position.from_string(text) == pos


@pytest.mark.parametrize("pos", [Position(-1, -1), Position(-10, 0), Position(1, -3)])
def test_invalid_position_to_string_is_empty(pos):
    assert str(pos) == ""


@pytest.mark.parametrize(
    "text",
    [
        "",
        "A",
        "1",
        "e2",
        "A0",
        "A-1",
        "A+1",
        "R2D2",
        "C3PO",
        "XFD16385",
        "XFE16384",
        "A1234567890123456789",
        "ABCDEFGHIJKLMNOPQRS8",
    ],
)
def test_string_to_position_invalid(text):
    assert not Position.from_string(text).is_valid()


def test_malformed_string_gives_none():
    assert Position.from_string("R2D2") == Position.NONE
    assert Position.from_string("ABCD1") == Position.NONE


def test_a0_is_parsed_but_out_of_range():
    pos = Position.from_string("A0")
    assert pos.row == -1 and pos.col == 0
    assert not pos.is_valid()


def test_validity_bounds():
    assert Position(0, 0).is_valid()
    assert not Position(Position.MAX_ROWS, 0).is_valid()
    assert not Position(0, Position.MAX_COLS).is_valid()
    assert not Position.NONE.is_valid()


def test_position_ordering_is_row_major():
    positions = [Position(1, 0), Position(0, 5), Position(0, 1)]
    assert sorted(positions) == [Position(0, 1), Position(0, 5), Position(1, 0)]


def test_size_equality():
    assert Size(2, 3) == Size(2, 3)
    assert Size() == Size(0, 0)
    assert Size(2, 3) != Size(3, 2)


@pytest.mark.parametrize(
    "category, text",
    [
        (FormulaErrorCategory.REF, "#REF!"),
        (FormulaErrorCategory.VALUE, "#VALUE!"),
        (FormulaErrorCategory.ARITHMETIC, "#ARITHM!"),
    ],
)
def test_formula_error_text(category, text):
    assert str(FormulaError(category)) == text


def test_formula_error_equality_by_category():
    assert FormulaError(FormulaErrorCategory.VALUE) == FormulaError(FormulaErrorCategory.VALUE)
    assert FormulaError(FormulaErrorCategory.VALUE) != FormulaError(FormulaErrorCategory.REF)
    assert len({FormulaError(FormulaErrorCategory.REF), FormulaError(FormulaErrorCategory.REF)}) == 1


def test_formula_error_keeps_category_when_raised():
    error = FormulaError(FormulaErrorCategory.ARITHMETIC)
    assert error.category is FormulaErrorCategory.ARITHMETIC
    assert str(error) == "#ARITHM!"
    with pytest.raises(FormulaError) as info:
        raise error
    assert info.value is error
    assert info.value == FormulaError(FormulaErrorCategory.ARITHMETIC)


@pytest.mark.parametrize(
    "error_class, base, message",
    [
        (InvalidPositionError, IndexError, "Invalid position"),
        (FormulaSyntaxError, ValueError, "bad"),
        (CircularDependencyError, ValueError, "cycle"),
    ],
)
def test_exception_hierarchy(error_class, base, message):
    assert issubclass(error_class, base)
    error = error_class(message)
    assert str(error) == message