from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

import numpy as np

from .config import config
from .exceptions import BoardInvariantError
from .piece import Piece
from .types import Archetype, Owner, Square

ARCHETYPE_ORDER: tuple[Archetype, ...] = tuple(Archetype)


def on_board(x: int, y: int) -> bool:
    return 0 <= x < config.BOARD_SIZE and 0 <= y < config.BOARD_SIZE


@dataclass(slots=True)
class Board:
    """Owns the live pieces, their identities and square occupancy (no rule logic).

    Identities come from a monotonically increasing counter and are never
    reused, so a stale id simply stops resolving after its piece is removed.
    """

    _pieces: Dict[int, Piece] = field(default_factory=dict, repr=False)
    _occupancy: Dict[Square, int] = field(default_factory=dict, repr=False)
    _next_id: int = 1
    _tensor_buffer: np.ndarray | None = field(default=None, init=False, repr=False)

    # --- Mutation ---
    def spawn(
        self, archetype: Archetype, owner: Owner, x: int, y: int, has_acted: bool = False
    ) -> Piece:
        """Create a piece with a fresh identity and insert it."""
        piece = Piece(
            piece_id=self._next_id,
            archetype=archetype,
            owner=owner,
            x=x,
            y=y,
            has_acted=has_acted,
        )
        self.insert(piece)
        return piece

    def insert(self, piece: Piece) -> None:
        if not on_board(piece.x, piece.y):
            raise BoardInvariantError(f"Square ({piece.x}, {piece.y}) is off the board")
        if piece.piece_id in self._pieces:
            raise BoardInvariantError(f"Duplicate piece identity {piece.piece_id}")
        sq = piece.square
        if sq in self._occupancy:
            raise BoardInvariantError(
                f"Square {sq} already holds piece {self._occupancy[sq]}"
            )
        self._pieces[piece.piece_id] = piece
        self._occupancy[sq] = piece.piece_id
        self._next_id = max(self._next_id, piece.piece_id + 1)

    def remove(self, piece_id: int) -> Piece:
        piece = self._pieces.pop(piece_id, None)
        if piece is None:
            raise BoardInvariantError(f"No piece with identity {piece_id}")
        del self._occupancy[piece.square]
        return piece

    def remove_at(self, x: int, y: int) -> Optional[Piece]:
        piece_id = self._occupancy.get(Square(x, y))
        if piece_id is None:
            return None
        return self.remove(piece_id)

    def relocate(self, piece_id: int, x: int, y: int) -> Piece:
        """Move a piece to an empty square. Captures must be removed first."""
        piece = self.get(piece_id)
        if piece is None:
            raise BoardInvariantError(f"No piece with identity {piece_id}")
        if not on_board(x, y):
            raise BoardInvariantError(f"Square ({x}, {y}) is off the board")
        dest = Square(x, y)
        occupant = self._occupancy.get(dest)
        if occupant is not None and occupant != piece_id:
            raise BoardInvariantError(f"Square {dest} already holds piece {occupant}")
        del self._occupancy[piece.square]
        piece.move_to(x, y)
        self._occupancy[dest] = piece_id
        return piece

    def reset_acted(self) -> None:
        for piece in self._pieces.values():
            piece.has_acted = False

    # --- Queries ---
    def get(self, piece_id: int) -> Optional[Piece]:
        return self._pieces.get(piece_id)

    def at(self, x: int, y: int) -> Optional[Piece]:
        piece_id = self._occupancy.get(Square(x, y))
        return None if piece_id is None else self._pieces[piece_id]

    def is_empty(self, x: int, y: int) -> bool:
        return Square(x, y) not in self._occupancy

    def pieces(self) -> List[Piece]:
        return list(self._pieces.values())

    def by_owner(self, owner: Owner) -> List[Piece]:
        return [p for p in self._pieces.values() if p.owner is owner]

    def king(self) -> Optional[Piece]:
        for piece in self._pieces.values():
            if piece.is_king and piece.owner is Owner.PLAYER:
                return piece
        return None

    def count(self, owner: Owner) -> int:
        return sum(1 for p in self._pieces.values() if p.owner is owner)

    def __len__(self) -> int:
        return len(self._pieces)

    def __iter__(self) -> Iterator[Piece]:
        return iter(list(self._pieces.values()))

    def __contains__(self, piece_id: object) -> bool:
        return piece_id in self._pieces

    # --- Snapshots ---
    def copy(self) -> "Board":
        """Independent working copy; identities and the id counter carry over."""
        clone = Board(_next_id=self._next_id)
        for piece in self._pieces.values():
            clone.insert(
                Piece(
                    piece_id=piece.piece_id,
                    archetype=piece.archetype,
                    owner=piece.owner,
                    x=piece.x,
                    y=piece.y,
                    has_acted=piece.has_acted,
                )
            )
        clone._next_id = self._next_id
        return clone

    def build_tensor(self, out: np.ndarray | None = None) -> np.ndarray:
        """Build a (12, 8, 8) plane stack of the board, indexed [plane, y, x].

        Planes:
        0-5: player pawn, knight, bishop, rook, queen, king
        6-11: enemy pieces in the same archetype order
        """
        size = config.BOARD_SIZE
        shape = (2 * len(ARCHETYPE_ORDER), size, size)
        if out is not None:
            planes = out
            if planes.shape != shape:
                raise ValueError(f"Expected board tensor of shape {shape}")
        else:
            if self._tensor_buffer is None:
                self._tensor_buffer = np.zeros(shape, dtype=np.float32)
            planes = self._tensor_buffer

        planes.fill(0.0)
        for piece in self._pieces.values():
            offset = 0 if piece.owner is Owner.PLAYER else len(ARCHETYPE_ORDER)
            channel = offset + ARCHETYPE_ORDER.index(piece.archetype)
            planes[channel, piece.y, piece.x] = 1.0
        return planes
