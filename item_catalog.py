from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, Tuple

from config import (
    DEFAULT_EMOJI,
    DEFAULT_HEATING,
    DEFAULT_INGREDIENT_SIZE,
    DEFAULT_TOOL_CAPACITY,
    ITEMS_FILE,
    NON_HEATING_FIRE,
    RECIPES_FILE,
)
from kitchen.catalog import Catalog, IngredientDefinition, ToolDefinition
from kitchen.errors import CatalogLoadFailure
from recipe_catalog import load_recipe_catalog

logger = logging.getLogger(__name__)

INGREDIENT_CATEGORIES = ("ingredients", "spice")
TOOL_CATEGORY = "tools"


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise CatalogLoadFailure(f"{path} does not exist")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
        raise CatalogLoadFailure(f"{path} is unreadable: {exc}") from exc


def _coerce_int(value: Any, *, minimum: int | None = None) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        result = value
    elif isinstance(value, float) and value.is_integer():
        result = int(value)
    else:
        return None

    if minimum is not None and result < minimum:
        return None
    return result


def _is_positive_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, (int, float)) and math.isfinite(value) and value > 0


def _parse_name_and_emoji(entry: Dict[str, Any]) -> Tuple[str, str] | None:
    name = entry.get("name")
    emoji = entry.get("emoji", DEFAULT_EMOJI)
    if not isinstance(name, str) or not name.strip():
        return None
    if not isinstance(emoji, str) or not emoji:
        emoji = DEFAULT_EMOJI
    return name.strip(), emoji


def _parse_ingredient_entry(entry: Dict[str, Any]) -> IngredientDefinition | None:
    parsed = _parse_name_and_emoji(entry)
    if parsed is None:
        return None
    name, emoji = parsed

    size = _coerce_int(entry.get("size", DEFAULT_INGREDIENT_SIZE), minimum=1)
    heating = entry.get("heating", DEFAULT_HEATING)
    nutrition = entry.get("nutrition")

    if size is None:
        return None
    if not _is_positive_number(heating):
        return None
    if nutrition is not None:
        nutrition = _coerce_int(nutrition)
        if nutrition is None:
            return None

    return IngredientDefinition(
        name=name,
        emoji=emoji,
        size=size,
        heating=float(heating),
        nutrition=nutrition,
    )


def _parse_tool_entry(entry: Dict[str, Any]) -> ToolDefinition | None:
    parsed = _parse_name_and_emoji(entry)
    if parsed is None:
        return None
    name, emoji = parsed

    capacity = _coerce_int(entry.get("capacity", DEFAULT_TOOL_CAPACITY), minimum=1)
    fire = entry.get("fire", 1.0)

    if capacity is None:
        return None
    if isinstance(fire, bool) or not isinstance(fire, (int, float)):
        return None
    if fire != NON_HEATING_FIRE and not _is_positive_number(fire):
        return None

    return ToolDefinition(name=name, emoji=emoji, capacity=capacity, fire=float(fire))


def load_item_catalog(
    path: Path = ITEMS_FILE,
) -> Tuple[Dict[str, IngredientDefinition], Dict[str, ToolDefinition]]:
    """Load ingredient and tool definitions from ``all_items.json``.

    Spices are ingredients too.  When a name appears twice the first entry
    wins.  A missing or malformed file yields empty tables.
    """
    try:
        raw = _read_json(path)
        if not isinstance(raw, dict):
            raise CatalogLoadFailure(f"{path} must hold an object of categories")
    except CatalogLoadFailure as exc:
        logger.warning("Item catalog unavailable, using an empty one: %s", exc)
        return {}, {}

    ingredients: Dict[str, IngredientDefinition] = {}
    for category in INGREDIENT_CATEGORIES:
        entries = raw.get(category, [])
        if not isinstance(entries, list):
            continue
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            ingredient = _parse_ingredient_entry(entry)
            if ingredient is None or ingredient.name in ingredients:
                continue
            ingredients[ingredient.name] = ingredient

    tools: Dict[str, ToolDefinition] = {}
    entries = raw.get(TOOL_CATEGORY, [])
    if isinstance(entries, list):
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            tool = _parse_tool_entry(entry)
            if tool is None or tool.name in tools:
                continue
            tools[tool.name] = tool

    return ingredients, tools


def load_catalog(items_path: Path = ITEMS_FILE, recipes_path: Path = RECIPES_FILE) -> Catalog:
    ingredients, tools = load_item_catalog(items_path)
    return Catalog(ingredients=ingredients, tools=tools, recipes=load_recipe_catalog(recipes_path))
