"""Unit tests for parlor/chess/square.py"""

import pytest

from parlor.chess.square import Square


@pytest.mark.parametrize(
    "name, row, col",
    [("a8", 0, 0), ("h1", 7, 7), ("e2", 6, 4), ("d5", 3, 3)],
)
def test_algebraic(name: str, row: int, col: int) -> None:
    square = Square.from_algebraic(name)
    assert square == Square(row, col)
    assert square.to_algebraic() == name


def test_document_key() -> None:
    assert Square(6, 4).to_key() == "6,4"
    assert Square.from_key("0,7") == Square(0, 7)


@pytest.mark.parametrize(
    "square, inside",
    [(Square(0, 0), True), (Square(7, 7), True), (Square(-1, 3), False), (Square(3, 8), False)],
)
def test_bounds(square: Square, inside: bool) -> None:
    assert square.is_within_bounds() == inside


def test_offset() -> None:
    assert Square(6, 4).offset(-2, 0) == Square.from_algebraic("e4")
