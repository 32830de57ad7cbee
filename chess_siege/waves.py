"""The fixed 20-wave script and the director that spawns and retires waves."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from loguru import logger

from .board import Board
from .config import config
from .types import Archetype, Owner, PieceView, SpawnUnit, WaveDefinition

P, N, B, R, Q = (
    Archetype.PAWN,
    Archetype.KNIGHT,
    Archetype.BISHOP,
    Archetype.ROOK,
    Archetype.QUEEN,
)


def _wave(duration: int, *units: tuple[Archetype, int]) -> WaveDefinition:
    return WaveDefinition(
        duration=duration,
        units=tuple(SpawnUnit(archetype=a, column=c) for a, c in units),
    )


# Columns are x indices: 0='a' .. 7='h'. Units spawn on rank 8 (y=0) and push downward.
WAVES: tuple[WaveDefinition, ...] = (
    _wave(2, (P, 2), (P, 5)),
    _wave(2, (P, 1), (P, 3), (P, 6)),
    _wave(3, (P, 2), (P, 5), (N, 4)),
    _wave(3, (P, 0), (P, 7), (N, 3), (N, 5)),
    _wave(4, (P, 2), (P, 4), (P, 6), (B, 3)),
    _wave(4, (N, 1), (N, 6), (P, 3), (P, 5)),
    _wave(2, (P, 1), (P, 2), (P, 3), (P, 4), (P, 5), (P, 6)),
    _wave(3, (B, 2), (B, 5), (P, 3), (P, 4)),
    _wave(4, (R, 0), (R, 7), (P, 3), (P, 4)),
    _wave(3, (B, 2), (B, 5), (N, 3), (N, 4)),
    _wave(2, (N, 2), (N, 5), (R, 4)),
    _wave(4, (R, 1), (R, 6), (B, 3), (B, 4)),
    _wave(3, (Q, 3), (P, 1), (P, 6)),
    _wave(5, (R, 0), (R, 7), (B, 2), (B, 5), (P, 4)),
    _wave(4, (Q, 4), (N, 2), (N, 5), (P, 3)),
    _wave(4, (Q, 3), (R, 2), (R, 5), (P, 4)),
    _wave(
        3,
        (P, 0), (P, 1), (P, 2), (P, 3), (P, 4), (P, 5), (P, 6), (P, 7),
        (B, 3),
    ),
    _wave(5, (R, 1), (R, 6), (N, 3), (N, 4), (Q, 5)),
    _wave(5, (Q, 3), (Q, 4), (R, 2), (R, 5), (P, 7)),
    _wave(
        config.UNBOUNDED_DURATION,
        (R, 0), (R, 7), (B, 2), (B, 5), (Q, 3), (Q, 4), (N, 1), (N, 6),
    ),
)


class WaveOutcome(str, Enum):
    CONTINUE = "continue"
    CLEARED = "cleared"
    SURVIVED = "survived"


@dataclass(slots=True)
class SpawnReport:
    wave: int
    spawned: List[int] = field(default_factory=list)
    ambushed: List[PieceView] = field(default_factory=list)
    dropped: List[SpawnUnit] = field(default_factory=list)
    king_killed: bool = False


def is_unbounded(duration: int) -> bool:
    return duration >= config.UNBOUNDED_DURATION


@dataclass(slots=True)
class WaveDirector:
    waves: Sequence[WaveDefinition] = WAVES

    @property
    def total_waves(self) -> int:
        return len(self.waves)

    def definition(self, wave_index: int) -> Optional[WaveDefinition]:
        """Return the 1-based wave's definition, or None once the script is exhausted."""
        if 1 <= wave_index <= len(self.waves):
            return self.waves[wave_index - 1]
        return None

    def is_victory(self, wave_index: int) -> bool:
        return wave_index > len(self.waves)

    def spawn(self, board: Board, wave_index: int) -> SpawnReport:
        """Place the wave's units on ``board`` (a working copy), in script order.

        Each unit scans its column from rank 8 downward: an empty square takes
        the unit; a player piece there is killed and replaced; an enemy piece
        (including one spawned earlier in this wave) pushes the unit one row
        further. A unit finding no square is dropped. Once the king is killed,
        later units still clear player pieces off their columns but no
        longer spawn.
        """
        definition = self.definition(wave_index)
        if definition is None:
            raise ValueError(f"Wave {wave_index} is not part of the script")

        report = SpawnReport(wave=wave_index)
        for unit in definition.units:
            spawn_row: Optional[int] = None
            king_hit = False
            for y in range(config.BOARD_SIZE):
                occupant = board.at(unit.column, y)
                if occupant is None:
                    spawn_row = y
                    break
                if occupant.owner is Owner.PLAYER:
                    if occupant.is_king:
                        king_hit = True
                    report.ambushed.append(occupant.view())
                    board.remove(occupant.piece_id)
                    spawn_row = y
                    break
                # enemy occupant: keep pushing down the column

            if report.king_killed:
                # removals still land, spawns stop after the king falls
                continue
            if spawn_row is None:
                logger.warning(
                    f"Wave {wave_index}: column {unit.column} full, dropping {unit.archetype.value}"
                )
                report.dropped.append(unit)
                continue

            piece = board.spawn(unit.archetype, Owner.ENEMY, unit.column, spawn_row)
            report.spawned.append(piece.piece_id)
            logger.debug(
                f"Wave {wave_index}: spawned {unit.archetype.value} at ({unit.column}, {spawn_row})"
            )
            if king_hit:
                report.king_killed = True
                logger.info(f"Wave {wave_index}: king ambushed at column {unit.column}")
        return report

    def evaluate(self, board: Board, steps_elapsed: int, duration: int) -> WaveOutcome:
        """Decide whether the wave ends after an enemy phase."""
        if board.count(Owner.ENEMY) == 0:
            return WaveOutcome.CLEARED
        if not is_unbounded(duration) and steps_elapsed >= duration:
            return WaveOutcome.SURVIVED
        return WaveOutcome.CONTINUE
