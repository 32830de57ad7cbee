from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
from loguru import logger

from .board import Board, on_board
from .config import config
from .economy import Economy, capture_message
from .exceptions import InvalidCoordinateError
from .notation import format_square, parse_square
from .policy import GreedyPolicy, MovePolicy, run_enemy_phase
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
from .waves import WaveDirector, WaveOutcome, is_unbounded

WELCOME = "Welcome to Chess Siege!"


@dataclass(slots=True)
class Game:
    """Turn/phase state machine for one siege.

    Every command validates against the current phase and state first and
    either applies completely or returns a rejected ``ActionResult`` with the
    state untouched. Spawning and the enemy phase run on a working copy of the
    board that replaces the live board once the computation finishes.

    Usage:
        game = Game()
        game.purchase("pawn")
        game.place_at("d4")
        game.start_wave()
        game.move_at("d4", "d5")
        game.end_player_turn()
    """

    director: WaveDirector = field(default_factory=WaveDirector)
    policy: MovePolicy = field(default_factory=GreedyPolicy)
    board: Board = field(init=False)
    economy: Economy = field(init=False)
    phase: Phase = field(default=Phase.SHOP, init=False)
    wave: int = field(default=1, init=False)
    steps_elapsed: int = field(default=0, init=False)
    wave_duration: int = field(default=0, init=False)
    message: str = field(default=WELCOME, init=False)
    selected_id: Optional[int] = field(default=None, init=False)
    placement_type: Optional[Archetype] = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.reset()

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def reset(self) -> ActionResult:
        """Start a fresh siege: lone king on e4, wave 1, starting balance, shop open."""
        self.board = Board()
        kx, ky = config.KING_START
        self.board.spawn(Archetype.KING, Owner.PLAYER, kx, ky)
        self.economy = Economy()
        self.phase = Phase.SHOP
        self.wave = 1
        self.steps_elapsed = 0
        self.wave_duration = 0
        self.selected_id = None
        self.placement_type = None
        self.message = WELCOME
        logger.info("New game started")
        return ActionResult(True, self.message)

    def _set_phase(self, new_phase: Phase) -> None:
        if new_phase is not self.phase:
            logger.info(f"Phase {self.phase.value} -> {new_phase.value} (wave {self.wave})")
        self.phase = new_phase

    def _accept(self, message: str, moves: Optional[List[MoveResult]] = None) -> ActionResult:
        self.message = message
        return ActionResult(True, message, list(moves or []))

    def _reject(self, message: str) -> ActionResult:
        logger.debug(f"Rejected in {self.phase.value}: {message}")
        self.message = message
        return ActionResult(False, message)

    def _require_phase(self, action: str, *phases: Phase) -> Optional[ActionResult]:
        if self.phase in phases:
            return None
        if self.phase.is_terminal:
            return self._reject("The siege is over. Reset to play again.")
        return self._reject(f"Cannot {action} during {self.phase.value}.")

    # =========================================================================
    # SHOP / PLACEMENT
    # =========================================================================

    def purchase(self, archetype: Archetype | str) -> ActionResult:
        rejected = self._require_phase("buy pieces", Phase.SHOP)
        if rejected is not None:
            return rejected
        try:
            archetype = Archetype.parse(archetype)
        except ValueError as e:
            return self._reject(str(e))
        reason = self.economy.purchase(archetype)
        if reason is not None:
            return self._reject(reason)
        self.placement_type = archetype
        self._set_phase(Phase.PLACEMENT)
        return self._accept(f"Place your {archetype.value} on the bottom half.")

    def place_purchased_piece(self, x: int, y: int) -> ActionResult:
        rejected = self._require_phase("place a piece", Phase.PLACEMENT)
        if rejected is not None:
            return rejected
        if not on_board(x, y):
            return self._reject("Square is off the board!")
        if y < config.PLAYER_HALF_START_ROW:
            return self._reject("Must place on your half!")
        if not self.board.is_empty(x, y):
            return self._reject("Square occupied!")
        piece = self.board.spawn(self.placement_type, Owner.PLAYER, x, y)
        logger.debug(f"Placed {piece.archetype.value} at {format_square(x, y)}")
        self.placement_type = None
        self._set_phase(Phase.SHOP)
        return self._accept("Buy more or Start Battle.")

    def place_at(self, square_text: str) -> ActionResult:
        try:
            square = parse_square(square_text)
        except InvalidCoordinateError as e:
            return self._reject(str(e))
        return self.place_purchased_piece(square.x, square.y)

    def cancel_placement(self) -> ActionResult:
        rejected = self._require_phase("cancel a placement", Phase.PLACEMENT)
        if rejected is not None:
            return rejected
        self.economy.refund(self.placement_type)
        self.placement_type = None
        self._set_phase(Phase.SHOP)
        return self._accept("Purchase refunded.")

    def placement_squares(self) -> List[Square]:
        """Empty squares of the player's half, row by row."""
        return [
            Square(x, y)
            for y in range(config.PLAYER_HALF_START_ROW, config.BOARD_SIZE)
            for x in range(config.BOARD_SIZE)
            if self.board.is_empty(x, y)
        ]

    # =========================================================================
    # WAVES
    # =========================================================================

    def start_wave(self) -> ActionResult:
        rejected = self._require_phase("start a wave", Phase.SHOP)
        if rejected is not None:
            return rejected
        if self.director.is_victory(self.wave):
            self._set_phase(Phase.VICTORY)
            return self._accept("You survived the Siege.")

        definition = self.director.definition(self.wave)
        working = self.board.copy()
        report = self.director.spawn(working, self.wave)
        self.board = working
        self.selected_id = None

        if report.king_killed:
            self._set_phase(Phase.GAME_OVER)
            return self._accept("Ambush! King killed during reinforcement.")

        self.economy.start_round()
        self.steps_elapsed = 0
        self.wave_duration = definition.duration
        self._enter_player_turn()
        if is_unbounded(definition.duration):
            return self._accept(f"Wave {self.wave} Started! Destroy every enemy.")
        return self._accept(
            f"Wave {self.wave} Started! Survive {definition.duration} steps."
        )

    def _enter_player_turn(self) -> None:
        self.board.reset_acted()
        self.economy.reset_combo()
        self.selected_id = None
        self._set_phase(Phase.BATTLE_PLAYER)

    # =========================================================================
    # PLAYER TURN
    # =========================================================================

    def _check_movable(self, piece_id: int) -> Optional[ActionResult]:
        piece = self.board.get(piece_id)
        if piece is None:
            return self._reject("No such piece.")
        if piece.owner is not Owner.PLAYER:
            return self._reject("That piece is not yours!")
        if piece.has_acted:
            return self._reject("That piece has already moved this turn.")
        return None

    def select_piece(self, piece_id: int) -> ActionResult:
        rejected = self._require_phase("select a piece", Phase.BATTLE_PLAYER)
        if rejected is not None:
            return rejected
        rejected = self._check_movable(piece_id)
        if rejected is not None:
            return rejected
        self.selected_id = piece_id
        piece = self.board.get(piece_id)
        return self._accept(f"Selected {piece.archetype.value} on {format_square(piece.x, piece.y)}.")

    def select_at(self, square_text: str) -> ActionResult:
        try:
            square = parse_square(square_text)
        except InvalidCoordinateError as e:
            return self._reject(str(e))
        piece = self.board.at(square.x, square.y)
        if piece is None:
            return self._reject(f"No piece on {square_text}.")
        return self.select_piece(piece.piece_id)

    def selected_moves(self) -> List[Square]:
        if self.phase is not Phase.BATTLE_PLAYER or self.selected_id is None:
            return []
        piece = self.board.get(self.selected_id)
        if piece is None or piece.has_acted:
            return []
        return legal_moves(piece, self.board)

    def legal_moves_for(self, piece_id: int) -> List[Square]:
        piece = self.board.get(piece_id)
        return [] if piece is None else legal_moves(piece, self.board)

    def move_piece(self, piece_id: int, x: int, y: int) -> ActionResult:
        rejected = self._require_phase("move", Phase.BATTLE_PLAYER)
        if rejected is not None:
            return rejected
        rejected = self._check_movable(piece_id)
        if rejected is not None:
            return rejected
        piece = self.board.get(piece_id)
        destination = Square(x, y)
        if destination not in legal_moves(piece, self.board):
            return self._reject("Illegal move.")

        events = MoveEvents()
        origin = piece.square
        target = self.board.at(x, y)
        if target is not None:
            self.board.remove(target.piece_id)
            self.economy.credit_capture(target.archetype, events)

        if piece.archetype is Archetype.PAWN and y == config.ENEMY_BACK_ROW:
            # the pawn is spent on the far rank instead of landing there
            self.board.remove(piece_id)
            self.economy.credit_sacrifice(events)
        else:
            self.board.relocate(piece_id, x, y)
            piece.has_acted = True

        self.selected_id = None
        result = MoveResult(
            piece_id=piece_id,
            archetype=piece.archetype,
            owner=piece.owner,
            origin=origin,
            destination=destination,
            events=events,
        )
        logger.debug(
            f"Player {piece.archetype.value} {format_square(*origin)} -> "
            f"{format_square(x, y)} (+{events.points_gained})"
        )
        message = capture_message(events) or (
            f"Moved {piece.archetype.value} to {format_square(x, y)}."
        )
        return self._accept(message, [result])

    def move_at(self, from_text: str, to_text: str) -> ActionResult:
        try:
            origin = parse_square(from_text)
            destination = parse_square(to_text)
        except InvalidCoordinateError as e:
            return self._reject(str(e))
        piece = self.board.at(origin.x, origin.y)
        if piece is None:
            return self._reject(f"No piece on {from_text}.")
        return self.move_piece(piece.piece_id, destination.x, destination.y)

    def end_player_turn(self, resolve: bool = True) -> ActionResult:
        """Hand the turn to the enemy.

        With ``resolve`` (the default) the enemy phase runs immediately; a
        presentation layer that wants a pause passes False and calls
        ``resolve_enemy_phase`` itself.
        """
        rejected = self._require_phase("end the turn", Phase.BATTLE_PLAYER)
        if rejected is not None:
            return rejected
        self.selected_id = None
        self._set_phase(Phase.BATTLE_ENEMY)
        if resolve:
            return self.resolve_enemy_phase()
        return self._accept("Enemy turn.")

    # =========================================================================
    # ENEMY TURN
    # =========================================================================

    def resolve_enemy_phase(self) -> ActionResult:
        """Run every enemy once on a working board and commit the outcome.

        A phase in which an enemy reaches the king commits nothing: board and
        balance stay as they were before the phase and the game is lost.
        When the final wave ends here the game goes straight to VICTORY
        rather than waiting for the next ``start_wave``.
        """
        rejected = self._require_phase("resolve the enemy phase", Phase.BATTLE_ENEMY)
        if rejected is not None:
            return rejected
        working = self.board.copy()
        report = run_enemy_phase(working, self.policy)

        if report.king_captured:
            self._set_phase(Phase.GAME_OVER)
            return self._accept("Your King has fallen!")

        self.board = working
        penalty = self.economy.apply_breaches(report.breaches)
        self.steps_elapsed += 1
        breach_text = f"Breach! Lost {penalty} points. " if penalty else ""
        outcome = self.director.evaluate(self.board, self.steps_elapsed, self.wave_duration)
        if outcome is WaveOutcome.CONTINUE:
            self._enter_player_turn()
            return self._accept(f"{breach_text}Your turn.", report.moves)

        logger.info(f"Wave {self.wave} {outcome.value} after {self.steps_elapsed} steps")
        self.wave += 1
        if self.director.is_victory(self.wave):
            self._set_phase(Phase.VICTORY)
            return self._accept(f"{breach_text}You survived the Siege.", report.moves)
        self._set_phase(Phase.SHOP)
        status = "Wave Cleared!" if outcome is WaveOutcome.CLEARED else "Wave Survived!"
        return self._accept(f"{breach_text}{status} Shop Open.", report.moves)

    # =========================================================================
    # DEBUG
    # =========================================================================

    def force_spawn(
        self, archetype: Archetype | str, owner: Owner | str, x: int, y: int
    ) -> ActionResult:
        """Put a piece on any square regardless of cost or phase, replacing the occupant.

        Kings are never created or replaced this way: the siege has exactly one.
        """
        try:
            archetype = Archetype.parse(archetype)
            owner = Owner.parse(owner)
        except ValueError as e:
            return self._reject(str(e))
        if not on_board(x, y):
            return self._reject("Square is off the board!")
        if archetype is Archetype.KING:
            return self._reject("Only one king may exist.")
        occupant = self.board.at(x, y)
        if occupant is not None and occupant.is_king:
            return self._reject("Cannot replace the king.")
        if occupant is not None:
            self.board.remove(occupant.piece_id)
            if self.selected_id == occupant.piece_id:
                self.selected_id = None
        self.board.spawn(archetype, owner, x, y)
        return self._accept(
            f"Debug: Spawned {owner.value} {archetype.value} at {format_square(x, y)}"
        )

    def force_spawn_at(
        self, archetype: Archetype | str, owner: Owner | str, square_text: str
    ) -> ActionResult:
        try:
            square = parse_square(square_text)
        except InvalidCoordinateError as e:
            return self._reject(str(e))
        return self.force_spawn(archetype, owner, square.x, square.y)

    # =========================================================================
    # STATE QUERIES
    # =========================================================================

    @property
    def balance(self) -> int:
        return self.economy.balance

    @property
    def pawns_bought(self) -> int:
        return self.economy.pawns_bought

    @property
    def steps_remaining(self) -> Optional[int]:
        """Steps left in the current wave; None while the final wave runs unbounded."""
        if is_unbounded(self.wave_duration):
            return None
        return max(0, self.wave_duration - self.steps_elapsed)

    @property
    def is_over(self) -> bool:
        return self.phase.is_terminal

    def snapshot(self) -> GameSnapshot:
        pieces = sorted(self.board.pieces(), key=lambda p: p.piece_id)
        return GameSnapshot(
            pieces=tuple(p.view() for p in pieces),
            phase=self.phase,
            wave=self.wave,
            balance=self.economy.balance,
            pawns_bought=self.economy.pawns_bought,
            steps_remaining=self.steps_remaining,
            message=self.message,
            selected_id=self.selected_id,
            placement_type=self.placement_type,
        )

    def observation(self) -> np.ndarray:
        """A (12, 8, 8) float32 copy of the board planes (see ``Board.build_tensor``)."""
        return self.board.build_tensor().copy()
