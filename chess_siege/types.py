from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Optional


class Archetype(str, Enum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"

    @classmethod
    def parse(cls, text: "Archetype | str") -> "Archetype":
        if isinstance(text, cls):
            return text
        try:
            return cls(str(text).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown archetype '{text}'.") from None


class Owner(str, Enum):
    PLAYER = "player"
    ENEMY = "enemy"

    @classmethod
    def parse(cls, text: "Owner | str") -> "Owner":
        if isinstance(text, cls):
            return text
        value = str(text).strip().lower()
        # chess names for the two sides
        aliases = {"white": "player", "black": "enemy"}
        try:
            return cls(aliases.get(value, value))
        except ValueError:
            raise ValueError(f"Unknown owner '{text}'.") from None

    @property
    def forward(self) -> int:
        """Row delta of a forward step (player pieces move toward row 0)."""
        return -1 if self is Owner.PLAYER else 1


class Phase(str, Enum):
    SHOP = "SHOP"
    PLACEMENT = "PLACEMENT"
    BATTLE_PLAYER = "BATTLE_PLAYER"
    BATTLE_ENEMY = "BATTLE_ENEMY"
    GAME_OVER = "GAME_OVER"
    VICTORY = "VICTORY"

    @property
    def is_terminal(self) -> bool:
        return self in (Phase.GAME_OVER, Phase.VICTORY)


class Square(NamedTuple):
    x: int
    y: int


@dataclass(frozen=True, slots=True)
class SpawnUnit:
    archetype: Archetype
    column: int


@dataclass(frozen=True, slots=True)
class WaveDefinition:
    duration: int
    units: tuple[SpawnUnit, ...]


@dataclass(slots=True)
class MoveEvents:
    captured: Optional[Archetype] = None
    capture_reward: int = 0
    combo_bonus: int = 0
    combo_count: int = 0
    sacrificed: bool = False
    sacrifice_bonus: int = 0
    breached: bool = False

    @property
    def points_gained(self) -> int:
        return self.capture_reward + self.combo_bonus + self.sacrifice_bonus


@dataclass(slots=True)
class MoveResult:
    piece_id: int
    archetype: Archetype
    owner: Owner
    origin: Square
    destination: Square
    events: MoveEvents


@dataclass(slots=True)
class ActionResult:
    ok: bool
    message: str
    moves: List[MoveResult] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.ok


@dataclass(frozen=True, slots=True)
class PieceView:
    piece_id: int
    archetype: Archetype
    owner: Owner
    x: int
    y: int
    has_acted: bool


@dataclass(frozen=True, slots=True)
class GameSnapshot:
    pieces: tuple[PieceView, ...]
    phase: Phase
    wave: int
    balance: int
    pawns_bought: int
    steps_remaining: Optional[int]
    message: str
    selected_id: Optional[int] = None
    placement_type: Optional[Archetype] = None
