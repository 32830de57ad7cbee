from dataclasses import dataclass

from .types import Archetype, Owner, PieceView, Square


@dataclass(slots=True)
class Piece:
    """Lightweight piece model. Holds state only.

    Movement legality lives in ``rules``; occupancy and identity bookkeeping
    live in ``Board``. Callers keep the ``piece_id`` and re-fetch the piece
    from the board after any mutation.
    """

    piece_id: int
    archetype: Archetype
    owner: Owner
    x: int
    y: int
    has_acted: bool = False

    @property
    def square(self) -> Square:
        return Square(self.x, self.y)

    @property
    def is_king(self) -> bool:
        return self.archetype is Archetype.KING

    def move_to(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def view(self) -> PieceView:
        return PieceView(
            piece_id=self.piece_id,
            archetype=self.archetype,
            owner=self.owner,
            x=self.x,
            y=self.y,
            has_acted=self.has_acted,
        )
