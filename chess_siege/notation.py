"""Algebraic square names: file 'a'..'h' is x=0..7, rank '8' is y=0 and rank '1' is y=7."""

from __future__ import annotations

from .board import on_board
from .config import config
from .exceptions import InvalidCoordinateError
from .types import Square

FILES = "abcdefgh"


def format_square(x: int, y: int) -> str:
    if not on_board(x, y):
        raise InvalidCoordinateError(f"Square ({x}, {y}) is off the board")
    return f"{FILES[x]}{config.BOARD_SIZE - y}"


def parse_square(text: str) -> Square:
    """Parse 'e4' into Square(4, 4). Anything but a file letter and rank digit is rejected."""
    if not isinstance(text, str):
        raise InvalidCoordinateError(f"Invalid coordinate {text!r}")
    if len(text) != 2:
        raise InvalidCoordinateError(f"Invalid coordinate '{text}': use a form like 'e4'")
    file_char, rank_char = text[0], text[1]
    if file_char not in FILES:
        raise InvalidCoordinateError(f"Invalid file '{file_char}' in '{text}'")
    if rank_char not in "12345678"[: config.BOARD_SIZE]:
        raise InvalidCoordinateError(f"Invalid rank '{rank_char}' in '{text}'")
    return Square(FILES.index(file_char), config.BOARD_SIZE - int(rank_char))
