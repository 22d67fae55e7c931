from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Tuple

from config import RECIPES_FILE
from kitchen.catalog import RecipeDefinition, is_wildcard
from kitchen.errors import CatalogLoadFailure

logger = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(r"\{[^{}]+\}")


def _coerce_count(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        result = value
    elif isinstance(value, float) and value.is_integer():
        result = int(value)
    else:
        return None
    return result if result >= 1 else None


def _coerce_counts(value: Any) -> Tuple[Tuple[str, int], ...] | None:
    if not isinstance(value, dict) or not value:
        return None
    counts: List[Tuple[str, int]] = []
    for name, count in value.items():
        if not isinstance(name, str) or not name.strip():
            return None
        parsed = _coerce_count(count)
        if parsed is None:
            return None
        counts.append((name.strip(), parsed))
    return tuple(counts)


def _coerce_str_list(value: Any) -> Tuple[str, ...] | None:
    if not isinstance(value, list) or not all(isinstance(i, str) for i in value):
        return None
    return tuple(value)


def _parse_recipe_entry(entry: Dict[str, Any]) -> RecipeDefinition | None:
    name = entry.get("name")
    inputs = _coerce_counts(entry.get("input"))
    outputs = _coerce_counts(entry.get("output"))
    tools = _coerce_str_list(entry.get("tool"))
    abstract = entry.get("abstract", False)

    if not isinstance(name, str) or not name.strip():
        return None
    if inputs is None or outputs is None:
        return None
    if not tools:
        return None
    if not isinstance(abstract, bool):
        return None

    if abstract:
        declared = {key for key, _ in inputs if is_wildcard(key)}
        if not declared:
            return None
        used = set(PLACEHOLDER_RE.findall(name))
        for output_name, _ in outputs:
            used.update(PLACEHOLDER_RE.findall(output_name))
        if not used.issubset(declared):
            return None

    return RecipeDefinition(
        name=name.strip(),
        inputs=inputs,
        tools=tools,
        outputs=outputs,
        abstract=abstract,
    )


def load_recipe_catalog(path: Path = RECIPES_FILE) -> Tuple[RecipeDefinition, ...]:
    """Load recipes in file order; the order decides which recipe wins a tie.

    A missing or unreadable file yields no recipes, so matching fails safe.
    """
    try:
        if not path.exists():
            raise CatalogLoadFailure(f"{path} does not exist")
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
            raise CatalogLoadFailure(f"{path} is unreadable: {exc}") from exc
        if not isinstance(raw, list):
            raise CatalogLoadFailure(f"{path} must hold a list of recipes")
    except CatalogLoadFailure as exc:
        logger.warning("Recipe catalog unavailable, no recipes will match: %s", exc)
        return ()

    recipes: List[RecipeDefinition] = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        recipe = _parse_recipe_entry(entry)
        if recipe is None:
            logger.debug("Skipping invalid recipe entry %r", entry.get("name"))
            continue
        recipes.append(recipe)
    return tuple(recipes)


def runtime_recipe_catalog(recipes: Tuple[RecipeDefinition, ...]) -> List[Dict[str, object]]:
    return [recipe.to_runtime_dict() for recipe in recipes]
