from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

from loguru import logger

from .board import Board
from .config import config, economy_config
from .piece import Piece
from .rules import legal_moves
from .types import Archetype, MoveEvents, MoveResult, Owner, Square


class MovePolicy(Protocol):
    def select_move(self, piece: Piece, board: Board) -> Square | None:
        ...


def capture_value(board: Board, square: Square) -> int:
    """Point value of whatever stands on ``square`` (0 when empty)."""
    target = board.at(square.x, square.y)
    if target is None:
        return 0
    return economy_config.piece_costs.get(target.archetype, 0)


def captures_king(piece: Piece, board: Board, square: Square) -> bool:
    target = board.at(square.x, square.y)
    return (
        target is not None
        and target.is_king
        and target.owner is not piece.owner
    )


@dataclass(slots=True)
class GreedyPolicy:
    """One-ply greedy choice: take the king if possible, else the most valuable
    capture, else advance as far as possible. Ties keep rule-engine order."""

    name: str = "greedy"

    def rank(self, piece: Piece, board: Board, moves: Sequence[Square]) -> List[Square]:
        forward = piece.owner.forward
        return sorted(
            moves,
            key=lambda sq: (-capture_value(board, sq), -sq.y * forward),
        )

    def select_move(self, piece: Piece, board: Board) -> Square | None:
        moves = legal_moves(piece, board)
        if not moves:
            return None
        for square in moves:
            if captures_king(piece, board, square):
                return square
        return self.rank(piece, board, moves)[0]


@dataclass(slots=True)
class EnemyPhaseReport:
    moves: List[MoveResult] = field(default_factory=list)
    breaches: int = 0
    king_captured: bool = False


def acting_order(board: Board) -> List[int]:
    """Enemy identities, pieces nearest the player's back rank first."""
    enemies = sorted(board.by_owner(Owner.ENEMY), key=lambda p: -p.y)
    return [p.piece_id for p in enemies]


def run_enemy_phase(board: Board, policy: Optional[MovePolicy] = None) -> EnemyPhaseReport:
    """Move every enemy once on ``board`` (a working copy) and report what happened.

    Each enemy sees the board as already changed by the enemies before it.
    A piece that can capture the king does not move: the capture is flagged
    and nothing else acts this phase.
    """
    policy = policy or GreedyPolicy()
    report = EnemyPhaseReport()

    for piece_id in acting_order(board):
        piece = board.get(piece_id)
        if piece is None:
            continue
        choice = policy.select_move(piece, board)
        if choice is None:
            continue
        if captures_king(piece, board, choice):
            logger.debug(f"Enemy {piece.archetype.value} at {piece.square} reaches the king")
            report.king_captured = True
            break

        events = MoveEvents()
        origin = piece.square
        target = board.at(choice.x, choice.y)
        if target is not None:
            events.captured = target.archetype
            board.remove(target.piece_id)
        board.relocate(piece_id, choice.x, choice.y)

        if piece.archetype is Archetype.PAWN and choice.y == config.PLAYER_BACK_ROW:
            board.remove(piece_id)
            events.breached = True
            report.breaches += 1

        report.moves.append(
            MoveResult(
                piece_id=piece_id,
                archetype=piece.archetype,
                owner=piece.owner,
                origin=origin,
                destination=choice,
                events=events,
            )
        )
        logger.debug(
            f"Enemy {piece.archetype.value} {origin} -> {choice}"
            + (f" captures {events.captured.value}" if events.captured else "")
            + (" (breach)" if events.breached else "")
        )
    return report
