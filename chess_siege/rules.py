"""Movement rules for the simplified capture-movement model.

No check, castling, en passant or double-step pawn openings: a piece may go
wherever its archetype pattern reaches, capturing any opposing piece it lands
on (kings included).
"""

from __future__ import annotations

from typing import List

from .board import Board, on_board
from .piece import Piece
from .types import Archetype, Square

KNIGHT_OFFSETS = (
    (1, 2), (1, -2), (-1, 2), (-1, -2),
    (2, 1), (2, -1), (-2, 1), (-2, -1),
)
ORTHOGONALS = ((0, 1), (0, -1), (1, 0), (-1, 0))
DIAGONALS = ((1, 1), (1, -1), (-1, 1), (-1, -1))
KING_OFFSETS = ORTHOGONALS + DIAGONALS

RAY_DIRECTIONS = {
    Archetype.ROOK: ORTHOGONALS,
    Archetype.BISHOP: DIAGONALS,
    Archetype.QUEEN: ORTHOGONALS + DIAGONALS,
}


def _can_land(piece: Piece, board: Board, x: int, y: int) -> bool:
    occupant = board.at(x, y)
    return occupant is None or occupant.owner is not piece.owner


def _pawn_moves(piece: Piece, board: Board) -> List[Square]:
    moves: List[Square] = []
    step = piece.owner.forward
    ty = piece.y + step
    if on_board(piece.x, ty) and board.is_empty(piece.x, ty):
        moves.append(Square(piece.x, ty))
    # diagonals are capture-only
    for tx in (piece.x - 1, piece.x + 1):
        if not on_board(tx, ty):
            continue
        occupant = board.at(tx, ty)
        if occupant is not None and occupant.owner is not piece.owner:
            moves.append(Square(tx, ty))
    return moves


def _offset_moves(piece: Piece, board: Board, offsets) -> List[Square]:
    moves: List[Square] = []
    for dx, dy in offsets:
        tx, ty = piece.x + dx, piece.y + dy
        if on_board(tx, ty) and _can_land(piece, board, tx, ty):
            moves.append(Square(tx, ty))
    return moves


def _ray_moves(piece: Piece, board: Board, directions) -> List[Square]:
    moves: List[Square] = []
    for dx, dy in directions:
        tx, ty = piece.x + dx, piece.y + dy
        while on_board(tx, ty):
            occupant = board.at(tx, ty)
            if occupant is not None:
                if occupant.owner is not piece.owner:
                    moves.append(Square(tx, ty))
                break
            moves.append(Square(tx, ty))
            tx += dx
            ty += dy
    return moves


def legal_moves(piece: Piece, board: Board) -> List[Square]:
    """Return the destinations reachable by ``piece`` on ``board``.

    Pure: neither argument is mutated. Results keep the insertion order of the
    per-archetype scan (forward step before pawn captures, knight offsets in
    table order, rays direction by direction walking outward).
    """
    if piece.archetype is Archetype.PAWN:
        return _pawn_moves(piece, board)
    if piece.archetype is Archetype.KNIGHT:
        return _offset_moves(piece, board, KNIGHT_OFFSETS)
    if piece.archetype is Archetype.KING:
        return _offset_moves(piece, board, KING_OFFSETS)
    return _ray_moves(piece, board, RAY_DIRECTIONS[piece.archetype])


def is_legal(piece: Piece, board: Board, x: int, y: int) -> bool:
    return Square(x, y) in legal_moves(piece, board)
