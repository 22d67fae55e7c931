"""Centralised configuration constants for Time Recipe."""
from __future__ import annotations

from pathlib import Path

# ---------------------------------------------------------------------------
# File paths
# ---------------------------------------------------------------------------
DATA_DIR: Path = Path(__file__).resolve().parent / "data"
ITEMS_FILE: Path = DATA_DIR / "all_items.json"
RECIPES_FILE: Path = DATA_DIR / "recipes.json"
LEVELS_FILE: Path = DATA_DIR / "levels.json"
STAGES_DIR: Path = DATA_DIR / "stages"
PROFILE_FILE: Path = Path("player_profile.json")

# ---------------------------------------------------------------------------
# Catalog defaults (applied when an entry omits a field)
# ---------------------------------------------------------------------------
DEFAULT_EMOJI: str = "🥘"
DEFAULT_INGREDIENT_SIZE: int = 100
DEFAULT_HEATING: float = 30.0
DEFAULT_TOOL_CAPACITY: int = 1000

# ---------------------------------------------------------------------------
# Cooking
# ---------------------------------------------------------------------------
NON_HEATING_FIRE: float = -1.0   # tools with this fire value mix instead of heat
MIXING_TIME: int = 10            # seconds, regardless of contents
RAW_THRESHOLD_PERCENT: float = 30.0  # dumping with at least this much time left is raw

# ---------------------------------------------------------------------------
# Outcome naming
# ---------------------------------------------------------------------------
COOKED_SUFFIX: str = "(cooked)"
BURNED_FOOD: str = "burned food"
WILDCARD_OPEN: str = "{"
WILDCARD_CLOSE: str = "}"

# Literal quantity values meaning "as much as you like"
UNLIMITED_QUANTITY_WORDS: frozenset[str] = frozenset({"ample", "unlimited", "适量"})

# ---------------------------------------------------------------------------
# Player profile (external key-value store)
# ---------------------------------------------------------------------------
HEALTH_KEY: str = "health"
SAVINGS_KEY: str = "savings"
RECIPES_KEY: str = "recipes"
STARTING_HEALTH: int = 100
STARTING_SAVINGS: int = 0

# ---------------------------------------------------------------------------
# Rewards: (minimum progress, multiplier of progress, tier label), best first
# ---------------------------------------------------------------------------
FULL_REWARD_DEFAULT: int = 50
REWARD_TIERS: tuple[tuple[float, float, str], ...] = (
    (80.0, 0.4, "great"),
    (50.0, 0.2, "good"),
)
RECIPE_UNLOCK_THRESHOLD: float = 50.0

# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------
EVENT_LOG_LIMIT: int = 12
DEFAULT_STAGE_ID: str = "stage1"
