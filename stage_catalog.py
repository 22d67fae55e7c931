from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Tuple

from config import DEFAULT_STAGE_ID, STAGES_DIR
from item_catalog import _coerce_int
from kitchen.entities import DialogueLine, Quantity, RewardSpec, StageDefinition
from kitchen.errors import StageLoadFailure

logger = logging.getLogger(__name__)

STAGE_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")

DEFAULT_STAGE = StageDefinition(
    key="default",
    name="Default Stage",
    description="Welcome to Time Recipe!",
    ingredients=(
        ("egg", Quantity.finite(2)),
        ("salt", Quantity.unlimited()),
        ("cooking oil", Quantity.unlimited()),
    ),
    tools=("pan", "spatula"),
    time_limit=40,
)


def _str_tuple(value: Any, field_name: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise StageLoadFailure(f"{field_name} must be a list of strings")
    entries = tuple(item for item in value if isinstance(item, str) and item)
    if len(entries) != len(value):
        logger.warning("Skipping %d invalid %s entries", len(value) - len(entries), field_name)
    return entries


def _parse_ingredients(value: Any) -> Tuple[Tuple[str, Quantity], ...]:
    if not isinstance(value, list):
        raise StageLoadFailure("ingredients must be a list")
    parsed: List[Tuple[str, Quantity]] = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            continue
        parsed.append((name.strip(), Quantity.parse(entry.get("quantity", 0))))
    return tuple(parsed)


def _parse_reward(value: Any) -> RewardSpec | None:
    if value is None:
        return None
    if isinstance(value, dict):
        coins = _coerce_int(value.get("coins", 0), minimum=0)
        return RewardSpec(
            coins=coins or 0,
            recipe_book=_str_tuple(value.get("recipe_book"), "reward.recipe_book"),
        )
    coins = _coerce_int(value)
    if coins is None:
        raise StageLoadFailure("reward must be a number or an object")
    return RewardSpec(coins=max(0, coins))


def _parse_predialog(value: Any) -> Tuple[DialogueLine, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise StageLoadFailure("predialog must be a list")
    lines: List[DialogueLine] = []
    for entry in value:
        if not isinstance(entry, dict) or not isinstance(entry.get("content"), str):
            continue
        lines.append(
            DialogueLine(
                speaker=str(entry.get("name", "")),
                character=str(entry.get("character", "")),
                content=entry["content"],
            )
        )
    return tuple(lines)


def parse_stage(stage_id: str, raw: Dict[str, Any]) -> StageDefinition:
    name = raw.get("name")
    time_limit = _coerce_int(raw.get("time_limit"), minimum=1)
    description = raw.get("description", "")

    if not isinstance(name, str) or not name.strip():
        raise StageLoadFailure(f"stage {stage_id} has no name")
    if time_limit is None:
        raise StageLoadFailure(f"stage {stage_id} needs a positive time_limit")
    if not isinstance(description, str):
        description = ""

    return StageDefinition(
        key=stage_id,
        name=name.strip(),
        description=description,
        ingredients=_parse_ingredients(raw.get("ingredients", [])),
        tools=_str_tuple(raw.get("tools"), "tools"),
        goals=_str_tuple(raw.get("goals"), "goals"),
        targets=_str_tuple(raw.get("targets"), "targets"),
        time_limit=time_limit,
        reward=_parse_reward(raw.get("reward")),
        predialog=_parse_predialog(raw.get("predialog")),
    )


def read_stage(stage_id: str, stages_dir: Path = STAGES_DIR) -> StageDefinition:
    """Strict loader: raises :class:`StageLoadFailure` on any problem."""
    if not STAGE_ID_RE.fullmatch(stage_id):
        raise StageLoadFailure(f"invalid stage id {stage_id!r}")
    path = stages_dir / f"{stage_id}.json"
    if not path.exists():
        raise StageLoadFailure(f"stage file {path} does not exist")
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
        raise StageLoadFailure(f"stage file {path} is unreadable: {exc}") from exc
    if not isinstance(raw, dict):
        raise StageLoadFailure(f"stage file {path} must hold an object")
    return parse_stage(stage_id, raw)


def load_stage(stage_id: str = DEFAULT_STAGE_ID, stages_dir: Path = STAGES_DIR) -> StageDefinition:
    try:
        return read_stage(stage_id, stages_dir)
    except StageLoadFailure as exc:
        logger.warning("Falling back to the default stage: %s", exc)
        return DEFAULT_STAGE
