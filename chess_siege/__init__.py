"""Chess Siege: a single-player tower-defense variant of chess."""

from .board import Board
from .config import config, economy_config
from .economy import Economy
from .exceptions import BoardInvariantError, ChessSiegeError, InvalidCoordinateError
from .game import Game
from .notation import format_square, parse_square
from .piece import Piece
from .policy import GreedyPolicy, run_enemy_phase
from .rules import legal_moves
from .types import (
    ActionResult,
    Archetype,
    GameSnapshot,
    MoveEvents,
    MoveResult,
    Owner,
    Phase,
    Square,
)
from .waves import WAVES, WaveDirector

__all__ = [
    "ActionResult",
    "Archetype",
    "Board",
    "BoardInvariantError",
    "ChessSiegeError",
    "config",
    "economy_config",
    "Economy",
    "format_square",
    "Game",
    "GameSnapshot",
    "GreedyPolicy",
    "InvalidCoordinateError",
    "legal_moves",
    "MoveEvents",
    "MoveResult",
    "Owner",
    "parse_square",
    "Phase",
    "Piece",
    "run_enemy_phase",
    "Square",
    "WAVES",
    "WaveDirector",
]
