from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Tuple

from config import LEVELS_FILE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LevelCategory:
    key: str
    picture: str = ""
    required_health: int = 0
    stages: Tuple[str, ...] = ()


DEFAULT_LEVELS: Dict[str, LevelCategory] = {
    "Main Story": LevelCategory(
        key="Main Story",
        picture="kitchen.png",
        required_health=0,
        stages=("stage1", "stage2"),
    ),
    "Northeast Feast": LevelCategory(
        key="Northeast Feast",
        picture="dongbei.jpg",
        required_health=200,
        stages=("dongbei1",),
    ),
    "Cantonese Craft": LevelCategory(key="Cantonese Craft", picture="yue.jpeg", required_health=400),
    "Zhejiang Elegance": LevelCategory(key="Zhejiang Elegance", picture="zhe.jpg", required_health=400),
}


def _parse_level_entry(key: str, entry: Dict[str, Any]) -> LevelCategory | None:
    if not isinstance(key, str) or not key.strip():
        return None

    picture = entry.get("picture", "")
    required_health = entry.get("required_health", 0)
    stages = entry.get("stages", [])

    if not isinstance(picture, str):
        return None
    if isinstance(required_health, bool) or not isinstance(required_health, int) or required_health < 0:
        return None
    if not isinstance(stages, list) or not all(isinstance(s, str) and s for s in stages):
        return None

    return LevelCategory(key=key.strip(), picture=picture, required_health=required_health, stages=tuple(stages))


def load_level_catalog(path: Path = LEVELS_FILE) -> Dict[str, LevelCategory]:
    if not path.exists():
        return dict(DEFAULT_LEVELS)

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
        logger.warning("Level catalog %s is unreadable, using defaults: %s", path, exc)
        return dict(DEFAULT_LEVELS)

    if not isinstance(raw, dict):
        return dict(DEFAULT_LEVELS)

    categories: Dict[str, LevelCategory] = {}
    for key, entry in raw.items():
        if not isinstance(entry, dict):
            continue
        category = _parse_level_entry(key, entry)
        if category is None:
            continue
        categories[category.key] = category

    if not categories:
        logger.warning("Level catalog %s has no valid categories, using defaults", path)
        return dict(DEFAULT_LEVELS)

    return categories


def unlocked_categories(catalog: Dict[str, LevelCategory], health: int) -> List[str]:
    return [key for key, category in catalog.items() if category.required_health <= health]


def stage_ids(catalog: Dict[str, LevelCategory]) -> List[str]:
    return [stage for category in catalog.values() for stage in category.stages]
