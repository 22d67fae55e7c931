"""Exception types raised by the kitchen engine.

Load failures are recovered by the catalog loaders, and gameplay rejections
(capacity, quantity) are turned into player-facing events by the session.
None of these is fatal to a running stage.
"""
from __future__ import annotations


class KitchenError(Exception):
    """Base class for every kitchen error."""


class CatalogLoadFailure(KitchenError):
    """Ingredient, tool or recipe data is missing or unreadable."""


class StageLoadFailure(KitchenError):
    """A stage definition is missing or unreadable."""


class CapacityExceeded(KitchenError):
    def __init__(self, tool: str, used: int, size: int, maximum: int) -> None:
        super().__init__(f"{tool} is full ({used}+{size} > {maximum})")
        self.tool = tool
        self.used = used
        self.size = size
        self.maximum = maximum


class InsufficientQuantity(KitchenError):
    def __init__(self, ingredient: str) -> None:
        super().__init__(f"Not enough {ingredient} left")
        self.ingredient = ingredient


class InvalidStateTransition(KitchenError):
    """A cooking command does not apply to the tool's current state."""


class UnknownTool(KitchenError):
    def __init__(self, tool: str) -> None:
        super().__init__(f"Unknown tool: {tool}")
        self.tool = tool
