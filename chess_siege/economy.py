from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from loguru import logger

from .config import config, economy_config
from .types import Archetype, MoveEvents

COMBO_LABELS = {2: "Double Kill", 3: "Triple Kill"}


def combo_bonus(kill_number: int) -> int:
    """Flat bonus for the ``kill_number``-th capture of an unbroken sequence."""
    if kill_number < 2:
        return 0
    return economy_config.combo_bonuses.get(kill_number, economy_config.combo_bonus_max)


def combo_label(kill_number: int) -> str:
    if kill_number < 2:
        return ""
    return COMBO_LABELS.get(kill_number, "Multi Kill")


def capture_message(events: MoveEvents) -> str:
    """Advisory text for a player move, e.g. 'Killed rook +20 (Double Kill +5)'."""
    if events.sacrificed:
        return f"Pawn Sacrificed! +{events.sacrifice_bonus} Points"
    if events.captured is None:
        return ""
    text = f"Killed {events.captured.value} +{events.capture_reward}"
    if events.combo_bonus:
        text += f" ({combo_label(events.combo_count)} +{events.combo_bonus})"
    return text


@dataclass(slots=True)
class Economy:
    """Point balance and the per-round counters that gate purchases and combos."""

    balance: int = field(default_factory=lambda: config.STARTING_POINTS)
    pawns_bought: int = 0
    combo_kills: int = 0

    @staticmethod
    def cost_of(archetype: Archetype) -> int:
        return economy_config.piece_costs[archetype]

    @staticmethod
    def reward_for(archetype: Archetype) -> int:
        return economy_config.kill_rewards.get(archetype, 0)

    # --- Purchases ---
    def check_purchase(self, archetype: Archetype) -> Optional[str]:
        """Return the advisory explaining why a purchase fails, or None if it can go ahead."""
        if archetype not in economy_config.purchasable():
            return f"The {archetype.value} cannot be purchased!"
        if self.balance < self.cost_of(archetype):
            return "Not enough points!"
        if (
            archetype is Archetype.PAWN
            and self.pawns_bought >= config.PAWN_CAP_PER_ROUND
        ):
            return f"Max {config.PAWN_CAP_PER_ROUND} pawns per round!"
        return None

    def purchase(self, archetype: Archetype) -> Optional[str]:
        reason = self.check_purchase(archetype)
        if reason is not None:
            return reason
        self.balance -= self.cost_of(archetype)
        if archetype is Archetype.PAWN:
            self.pawns_bought += 1
        logger.debug(f"Purchased {archetype.value}; balance now {self.balance}")
        return None

    def refund(self, archetype: Archetype) -> None:
        self.balance += self.cost_of(archetype)
        if archetype is Archetype.PAWN and self.pawns_bought > 0:
            self.pawns_bought -= 1

    # --- Scoring ---
    def credit_capture(self, captured: Archetype, events: MoveEvents) -> None:
        self.combo_kills += 1
        events.captured = captured
        events.capture_reward = self.reward_for(captured)
        events.combo_count = self.combo_kills
        events.combo_bonus = combo_bonus(self.combo_kills)
        self.balance += events.capture_reward + events.combo_bonus

    def credit_sacrifice(self, events: MoveEvents) -> None:
        events.sacrificed = True
        events.sacrifice_bonus = economy_config.sacrifice_bonus
        self.balance += events.sacrifice_bonus

    def apply_breaches(self, count: int) -> int:
        """Deduct the penalty for ``count`` breaches (floor 0); return the nominal penalty."""
        penalty = count * economy_config.breach_penalty
        if penalty:
            self.balance = max(0, self.balance - penalty)
            logger.debug(f"Breach penalty {penalty}; balance now {self.balance}")
        return penalty

    # --- Resets ---
    def reset_combo(self) -> None:
        self.combo_kills = 0

    def start_round(self) -> None:
        self.pawns_bought = 0
        self.combo_kills = 0
