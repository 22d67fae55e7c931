"""Read-only reference data: ingredients, tools and recipes."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from config import (
    DEFAULT_EMOJI,
    DEFAULT_HEATING,
    DEFAULT_INGREDIENT_SIZE,
    DEFAULT_TOOL_CAPACITY,
    NON_HEATING_FIRE,
    WILDCARD_CLOSE,
    WILDCARD_OPEN,
)


def is_wildcard(name: str) -> bool:
    return len(name) > 2 and name.startswith(WILDCARD_OPEN) and name.endswith(WILDCARD_CLOSE)


@dataclass(frozen=True)
class IngredientDefinition:
    name: str
    emoji: str = DEFAULT_EMOJI
    size: int = DEFAULT_INGREDIENT_SIZE
    heating: float = DEFAULT_HEATING
    nutrition: Optional[int] = None


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    emoji: str = DEFAULT_EMOJI
    capacity: int = DEFAULT_TOOL_CAPACITY
    fire: float = 1.0

    @property
    def is_heating(self) -> bool:
        return self.fire != NON_HEATING_FIRE


@dataclass(frozen=True)
class RecipeDefinition:
    """A recipe.  ``inputs`` and ``outputs`` keep their declaration order.

    Abstract recipes may name ``{placeholder}`` inputs that bind to any
    ingredient with the required count; outputs and the recipe name may
    reuse those placeholders.
    """

    name: str
    inputs: Tuple[Tuple[str, int], ...]
    tools: Tuple[str, ...]
    outputs: Tuple[Tuple[str, int], ...]
    abstract: bool = False

    def input_counts(self) -> Dict[str, int]:
        return dict(self.inputs)

    def output_counts(self) -> Dict[str, int]:
        return dict(self.outputs)

    def accepts_tool(self, tool: str) -> bool:
        return tool in self.tools

    def wildcards(self) -> List[str]:
        return [name for name, _ in self.inputs if is_wildcard(name)]

    def to_runtime_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "input": dict(self.inputs),
            "tool": list(self.tools),
            "output": dict(self.outputs),
            "abstract": self.abstract,
        }


@dataclass(frozen=True)
class Catalog:
    """Everything a stage needs to look up, loaded once and shared."""

    ingredients: Dict[str, IngredientDefinition] = field(default_factory=dict)
    tools: Dict[str, ToolDefinition] = field(default_factory=dict)
    recipes: Tuple[RecipeDefinition, ...] = ()

    @classmethod
    def build(
        cls,
        ingredients: Iterable[IngredientDefinition],
        tools: Iterable[ToolDefinition],
        recipes: Iterable[RecipeDefinition] = (),
    ) -> "Catalog":
        return cls(
            ingredients={ingredient.name: ingredient for ingredient in ingredients},
            tools={tool.name: tool for tool in tools},
            recipes=tuple(recipes),
        )

    def ingredient(self, name: str) -> Optional[IngredientDefinition]:
        return self.ingredients.get(name)

    def tool(self, name: str) -> Optional[ToolDefinition]:
        return self.tools.get(name)

    def heating_for(self, name: str) -> float:
        ingredient = self.ingredients.get(name)
        return ingredient.heating if ingredient else DEFAULT_HEATING

    def size_for(self, name: str) -> int:
        # Produced ingredients such as "egg(cooked)" have no entry of their own.
        ingredient = self.ingredients.get(name)
        return ingredient.size if ingredient else DEFAULT_INGREDIENT_SIZE

    def nutrition_for(self, name: str) -> Optional[int]:
        ingredient = self.ingredients.get(name)
        return ingredient.nutrition if ingredient else None

    def emoji_for(self, name: str) -> str:
        if name in self.ingredients:
            return self.ingredients[name].emoji
        if name in self.tools:
            return self.tools[name].emoji
        return DEFAULT_EMOJI

    def capacity_for(self, tool: str) -> int:
        definition = self.tools.get(tool)
        return definition.capacity if definition else DEFAULT_TOOL_CAPACITY

    def recipe_named(self, name: str) -> Optional[RecipeDefinition]:
        for recipe in self.recipes:
            if recipe.name == name:
                return recipe
        return None

    def recipes_for_tool(self, tool: str) -> List[RecipeDefinition]:
        return [recipe for recipe in self.recipes if recipe.accepts_tool(tool)]
