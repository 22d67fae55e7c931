"""Stage progress and end-of-stage rewards."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from config import FULL_REWARD_DEFAULT, RECIPE_UNLOCK_THRESHOLD, REWARD_TIERS
from kitchen.entities import RewardSpec, StageIngredient

FULL = "full"
INCOMPLETE = "incomplete"
TIMEOUT = "timeout"

TIER_MESSAGES = {
    FULL: "Perfect clear! Every goal is complete.",
    "great": "Great job! Most of the goals are complete.",
    "good": "Good job! Some goals are complete, keep going!",
    INCOMPLETE: "Not finished yet. You'll do better next time!",
    TIMEOUT: "Time's up! Try to be quicker next time.",
}


def compute_progress(targets: Sequence[str], ingredients: Sequence[StageIngredient]) -> float:
    """Percentage of targets present on the shelf, capped at 100."""
    if not targets:
        return 0.0
    available = {ingredient.name for ingredient in ingredients if ingredient.quantity.available}
    completed = sum(1 for target in targets if target in available)
    return min(completed / len(targets) * 100.0, 100.0)


@dataclass(frozen=True)
class RewardPolicy:
    """Reward tiers: ``tiers`` holds ``(min_progress, multiplier, label)`` best first."""

    full_reward: int = FULL_REWARD_DEFAULT
    tiers: Tuple[Tuple[float, float, str], ...] = REWARD_TIERS
    unlock_threshold: float = RECIPE_UNLOCK_THRESHOLD

    def evaluate(self, progress: int, reward: Optional[RewardSpec] = None) -> Tuple[str, int]:
        if progress >= 100:
            coins = reward.coins if reward is not None and reward.coins else self.full_reward
            return FULL, coins
        for threshold, multiplier, label in self.tiers:
            if progress >= threshold:
                return label, int(math.floor(progress * multiplier))
        if progress > 0:
            return INCOMPLETE, 0
        return TIMEOUT, 0

    def unlocks_recipes(self, progress: int) -> bool:
        return progress >= self.unlock_threshold


def tier_message(tier: str) -> str:
    return TIER_MESSAGES.get(tier, "")
