"""Core dataclasses for a Time Recipe stage session."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional, Tuple

from config import UNLIMITED_QUANTITY_WORDS

logger = logging.getLogger(__name__)

FINITE = "finite"
UNLIMITED = "unlimited"
UNKNOWN = "unknown"


@dataclass(frozen=True)
class Quantity:
    """How much of a stage ingredient is left.

    ``finite`` quantities carry a count, ``unlimited`` ones are never used up,
    and ``unknown`` marks a value that could not be interpreted when the stage
    was loaded.  Unknown quantities are never available for placement.
    """

    kind: str = FINITE
    count: int = 0
    raw: str = field(default="", compare=False)

    @classmethod
    def finite(cls, count: int) -> "Quantity":
        return cls(FINITE, max(0, int(count)))

    @classmethod
    def unlimited(cls) -> "Quantity":
        return cls(UNLIMITED)

    @classmethod
    def unknown(cls, raw: Any = "") -> "Quantity":
        return cls(UNKNOWN, raw=str(raw))

    @classmethod
    def parse(cls, value: Any) -> "Quantity":
        if isinstance(value, bool):
            pass
        elif isinstance(value, int) and value >= 0:
            return cls.finite(value)
        elif isinstance(value, float) and value.is_integer() and value >= 0:
            return cls.finite(int(value))
        elif isinstance(value, str):
            text = value.strip()
            if text.lower() in UNLIMITED_QUANTITY_WORDS:
                return cls.unlimited()
            if text.isdigit():
                return cls.finite(int(text))
        logger.warning("Unrecognised ingredient quantity %r", value)
        return cls.unknown(value)

    @property
    def available(self) -> bool:
        if self.kind == UNLIMITED:
            return True
        return self.kind == FINITE and self.count > 0

    def take(self) -> "Quantity":
        if not self.available:
            raise ValueError(f"cannot take from {self.display()} quantity")
        if self.kind == UNLIMITED:
            return self
        return Quantity.finite(self.count - 1)

    def add(self, amount: int) -> "Quantity":
        if self.kind == UNLIMITED:
            return self
        if self.kind == UNKNOWN:
            return Quantity.finite(amount)
        return Quantity.finite(self.count + amount)

    def display(self) -> str:
        if self.kind == UNLIMITED:
            return "ample"
        if self.kind == UNKNOWN:
            return "?"
        return str(self.count)

    def to_json(self) -> int | str:
        if self.kind == FINITE:
            return self.count
        if self.kind == UNLIMITED:
            return "ample"
        return self.raw


@dataclass
class StageIngredient:
    """An ingredient on the stage's shelf.  Records persist at zero."""

    name: str
    quantity: Quantity


@dataclass(frozen=True)
class ToolItem:
    name: str
    size: int


@dataclass
class ToolContents:
    """Ingredients currently inside one tool, in insertion order."""

    max_capacity: int
    items: List[ToolItem] = field(default_factory=list)
    used_capacity: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.items


@dataclass
class CookingProgress:
    total_time: int
    remaining_time: int

    @property
    def percent_remaining(self) -> float:
        if self.total_time <= 0:
            return 0.0
        return self.remaining_time / self.total_time * 100.0

    @property
    def percent_done(self) -> float:
        return 100.0 - self.percent_remaining


class Classification(IntEnum):
    """How a tool's contents came out.  Values match the saved-game codes."""

    BURNED = 0
    COOKED = 1
    RAW = 2


# Outcome event kinds
SUCCESS = "success"
COOKED = "cooked"
RAW = "raw"
BURNED = "burned"
REJECTED = "rejected"


@dataclass(frozen=True)
class OutcomeEvent:
    """A structured announcement for the presentation layer."""

    kind: str
    message: str
    tool: str = ""
    recipe: str = ""
    produced: Tuple[Tuple[str, int], ...] = ()


@dataclass(frozen=True)
class RewardSpec:
    coins: int = 0
    recipe_book: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DialogueLine:
    speaker: str
    character: str
    content: str


@dataclass(frozen=True)
class StageDefinition:
    key: str
    name: str
    description: str = ""
    ingredients: Tuple[Tuple[str, Quantity], ...] = ()
    tools: Tuple[str, ...] = ()
    goals: Tuple[str, ...] = ()
    targets: Tuple[str, ...] = ()
    time_limit: int = 60
    reward: Optional[RewardSpec] = None
    predialog: Tuple[DialogueLine, ...] = ()


@dataclass(frozen=True)
class SessionSummary:
    progress: int
    tier: str
    reward: int
    savings: int
    unlocked_recipes: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "progress": self.progress,
            "tier": self.tier,
            "reward": self.reward,
            "savings": self.savings,
            "unlocked_recipes": list(self.unlocked_recipes),
        }
