"""Turn a classified tool into stage ingredients."""
from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from config import BURNED_FOOD, COOKED_SUFFIX
from kitchen.catalog import RecipeDefinition
from kitchen.entities import (
    BURNED,
    COOKED,
    RAW,
    SUCCESS,
    Classification,
    OutcomeEvent,
    Quantity,
    StageIngredient,
    ToolItem,
)
from kitchen.ledger import ToolLedger
from kitchen.matcher import RecipeMatch, match_recipe


class OutcomeResolver:
    """The only writer of stage ingredients while a tool resolves."""

    def __init__(
        self,
        ingredients: List[StageIngredient],
        ledger: ToolLedger,
        recipes: Sequence[RecipeDefinition],
    ) -> None:
        self.ingredients = ingredients
        self.ledger = ledger
        self.recipes = recipes

    def find(self, name: str) -> StageIngredient | None:
        for ingredient in self.ingredients:
            if ingredient.name == name:
                return ingredient
        return None

    def add_ingredient(self, name: str, amount: int) -> StageIngredient:
        ingredient = self.find(name)
        if ingredient is None:
            ingredient = StageIngredient(name, Quantity.finite(amount))
            self.ingredients.append(ingredient)
        else:
            ingredient.quantity = ingredient.quantity.add(amount)
        return ingredient

    def resolve(self, tool: str, classification: Classification) -> OutcomeEvent:
        counts = self.ledger.counts(tool)
        # Burned food is burned food; only raw or cooked contents can form a recipe.
        match = None
        if classification != Classification.BURNED:
            match = match_recipe(counts, tool, self.recipes)
        items = self.ledger.clear(tool)

        if match is not None:
            return self._apply_recipe(tool, match)
        if classification == Classification.COOKED:
            return self._return_each(tool, items, COOKED_SUFFIX, COOKED, "Cooked! The ingredients are back on the shelf.")
        if classification == Classification.RAW:
            return self._return_each(tool, items, "", RAW, "Still raw! The ingredients are back on the shelf.")
        produced = self._produce([(BURNED_FOOD, len(items))])
        return OutcomeEvent(BURNED, "Burned! The food turned into burned food.", tool=tool, produced=produced)

    def _apply_recipe(self, tool: str, match: RecipeMatch) -> OutcomeEvent:
        produced = self._produce(match.resolved_outputs())
        name = match.display_name
        return OutcomeEvent(SUCCESS, f"Success! You made {name}!", tool=tool, recipe=name, produced=produced)

    def _return_each(
        self, tool: str, items: Sequence[ToolItem], suffix: str, kind: str, message: str
    ) -> OutcomeEvent:
        produced = self._produce([(item.name + suffix, 1) for item in items])
        return OutcomeEvent(kind, message, tool=tool, produced=produced)

    def _produce(self, entries: Sequence[Tuple[str, int]]) -> Tuple[Tuple[str, int], ...]:
        totals: Dict[str, int] = {}
        for name, amount in entries:
            if amount <= 0:
                continue
            self.add_ingredient(name, amount)
            totals[name] = totals.get(name, 0) + amount
        return tuple(totals.items())
