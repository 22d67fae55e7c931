"""Time Recipe kitchen engine.

Public API:
    from kitchen import StageSession, Catalog, PlayerProfile, match_recipe
"""
from kitchen.catalog import Catalog, IngredientDefinition, RecipeDefinition, ToolDefinition
from kitchen.cooking import CookingTimers
from kitchen.entities import Classification, OutcomeEvent, Quantity, StageDefinition, StageIngredient
from kitchen.ledger import ToolLedger
from kitchen.matcher import RecipeMatch, match_recipe
from kitchen.profile import PlayerProfile
from kitchen.progress import RewardPolicy, compute_progress
from kitchen.resolver import OutcomeResolver
from kitchen.session import StageSession

__all__ = [
    "Catalog",
    "Classification",
    "CookingTimers",
    "IngredientDefinition",
    "OutcomeEvent",
    "OutcomeResolver",
    "PlayerProfile",
    "Quantity",
    "RecipeDefinition",
    "RecipeMatch",
    "RewardPolicy",
    "StageDefinition",
    "StageIngredient",
    "StageSession",
    "ToolDefinition",
    "ToolLedger",
    "compute_progress",
    "match_recipe",
]
