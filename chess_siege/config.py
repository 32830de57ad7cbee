import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from .types import Archetype

load_dotenv()


@dataclass(slots=True)
class Config:
    # --- Constants ---
    BOARD_SIZE: int = 8
    STARTING_POINTS: int = int(os.getenv("STARTING_POINTS", 40))
    PAWN_CAP_PER_ROUND: int = 3
    TOTAL_WAVES: int = 20
    UNBOUNDED_DURATION: int = 999  # final wave only ends on total elimination

    # King is created once, on e4
    KING_START: tuple[int, int] = (4, 4)
    # Rows >= this belong to the player half (y=7 is the player back rank)
    PLAYER_HALF_START_ROW: int = 4

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    # Presentation delay before the enemy phase (CLI only)
    ENEMY_PHASE_DELAY: float = float(os.getenv("ENEMY_PHASE_DELAY", 0.0))

    # Derived (populated in __post_init__ due to slots)
    ENEMY_BACK_ROW: int = 0
    PLAYER_BACK_ROW: int = 0

    def __post_init__(self):
        if self.BOARD_SIZE != 8:
            raise ValueError("BOARD_SIZE must be 8")
        if self.STARTING_POINTS < 0:
            raise ValueError("STARTING_POINTS must be non-negative")
        self.ENEMY_BACK_ROW = 0
        self.PLAYER_BACK_ROW = self.BOARD_SIZE - 1


@dataclass(slots=True)
class EconomyConfig:
    piece_costs: dict[Archetype, int] = field(
        default_factory=lambda: {
            Archetype.PAWN: 10,
            Archetype.KNIGHT: 30,
            Archetype.BISHOP: 30,
            Archetype.ROOK: 40,
            Archetype.QUEEN: 60,
            Archetype.KING: 0,
        }
    )
    kill_rewards: dict[Archetype, int] = field(
        default_factory=lambda: {
            Archetype.PAWN: 5,
            Archetype.KNIGHT: 15,
            Archetype.BISHOP: 15,
            Archetype.ROOK: 20,
            Archetype.QUEEN: 30,
            Archetype.KING: 0,
        }
    )
    # kill number within a combo sequence -> flat bonus; later kills use combo_bonus_max
    combo_bonuses: dict[int, int] = field(default_factory=lambda: {2: 5, 3: 5})
    combo_bonus_max: int = 10
    sacrifice_bonus: int = 20
    breach_penalty: int = 10

    def purchasable(self) -> list[Archetype]:
        return [a for a in Archetype if a is not Archetype.KING]


config = Config()
economy_config = EconomyConfig()
