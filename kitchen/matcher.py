"""Recipe matching, including abstract recipes with ``{placeholder}`` inputs."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from kitchen.catalog import RecipeDefinition, is_wildcard


@dataclass(frozen=True)
class RecipeMatch:
    recipe: RecipeDefinition
    bindings: Dict[str, str] = field(default_factory=dict)

    def substitute(self, text: str) -> str:
        for placeholder, ingredient in self.bindings.items():
            text = text.replace(placeholder, ingredient)
        return text

    @property
    def display_name(self) -> str:
        return self.substitute(self.recipe.name)

    def resolved_outputs(self) -> List[Tuple[str, int]]:
        return [(self.substitute(name), count) for name, count in self.recipe.outputs]


def _matches_exactly(counts: Mapping[str, int], recipe: RecipeDefinition) -> bool:
    required = recipe.input_counts()
    if len(counts) != len(required):
        return False
    return all(counts.get(name) == count for name, count in required.items())


def _bind_wildcards(counts: Mapping[str, int], recipe: RecipeDefinition) -> Optional[Dict[str, str]]:
    literals = [(name, count) for name, count in recipe.inputs if not is_wildcard(name)]
    for name, count in literals:
        if counts.get(name) != count:
            return None

    literal_names = {name for name, _ in literals}
    remaining = [name for name in counts if name not in literal_names]
    bindings: Dict[str, str] = {}
    for placeholder, count in recipe.inputs:
        if not is_wildcard(placeholder):
            continue
        candidate = next(
            (name for name in remaining if counts[name] == count and name not in bindings.values()),
            None,
        )
        if candidate is None:
            return None
        bindings[placeholder] = candidate
        remaining.remove(candidate)
    # Ingredients left over after every placeholder is bound do not spoil an abstract match.
    return bindings


def match_recipe(
    counts: Mapping[str, int], tool: str, recipes: Iterable[RecipeDefinition]
) -> Optional[RecipeMatch]:
    """Return the first recipe, in catalog order, that ``counts`` satisfies in ``tool``."""
    if not counts:
        return None
    for recipe in recipes:
        if not recipe.accepts_tool(tool):
            continue
        if recipe.abstract:
            bindings = _bind_wildcards(counts, recipe)
            if bindings is not None:
                return RecipeMatch(recipe, bindings)
        elif _matches_exactly(counts, recipe):
            return RecipeMatch(recipe)
    return None
