"""Persisted player meta-progression: health, savings and the recipe book."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from config import HEALTH_KEY, RECIPES_KEY, SAVINGS_KEY, STARTING_HEALTH, STARTING_SAVINGS
from kitchen.catalog import Catalog, RecipeDefinition

logger = logging.getLogger(__name__)


class PlayerProfile:
    """A small key-value store.

    Values live in memory; when ``path`` is set :meth:`save` writes them as
    JSON so they survive between stages.
    """

    def __init__(self, values: Optional[Dict[str, Any]] = None, path: Optional[Path] = None) -> None:
        self.values: Dict[str, Any] = dict(values or {})
        self.path = path

    def initialise(self) -> None:
        self.values.setdefault(HEALTH_KEY, STARTING_HEALTH)
        self.values.setdefault(SAVINGS_KEY, STARTING_SAVINGS)

    def get_int(self, key: str, default: int = 0) -> int:
        value = self.values.get(key, default)
        if isinstance(value, bool):
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def add(self, key: str, delta: int, default: int = 0) -> int:
        total = self.get_int(key, default) + delta
        self.values[key] = total
        return total

    def get_list(self, key: str) -> List[str]:
        value = self.values.get(key, [])
        if not isinstance(value, list):
            return []
        return [str(item) for item in value]

    def union(self, key: str, names: Iterable[str]) -> List[str]:
        merged = self.get_list(key)
        for name in names:
            if name not in merged:
                merged.append(name)
        self.values[key] = merged
        return merged

    @property
    def health(self) -> int:
        return self.get_int(HEALTH_KEY, STARTING_HEALTH)

    @property
    def savings(self) -> int:
        return self.get_int(SAVINGS_KEY, STARTING_SAVINGS)

    @property
    def unlocked_recipes(self) -> List[str]:
        return self.get_list(RECIPES_KEY)

    def save(self, path: Optional[Path] = None) -> None:
        target = path or self.path
        if target is None:
            return
        target.write_text(json.dumps(self.values, indent=2, ensure_ascii=False), encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> "PlayerProfile":
        values: Dict[str, Any] = {}
        if path.exists():
            try:
                raw = json.loads(path.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
                logger.warning("Player profile %s is unreadable, starting fresh: %s", path, exc)
            else:
                if isinstance(raw, dict):
                    values = raw
        profile = cls(values, path=path)
        profile.initialise()
        return profile


def recipe_book(profile: PlayerProfile, catalog: Catalog) -> List[RecipeDefinition]:
    """Unlocked recipes that the catalog still knows about."""
    book: List[RecipeDefinition] = []
    for name in profile.unlocked_recipes:
        recipe = catalog.recipe_named(name)
        if recipe is not None:
            book.append(recipe)
    return book
