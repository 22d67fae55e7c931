"""Per-tool cooking timers.

Each tool moves idle -> cooking -> resolved -> idle.  Nothing here sleeps:
callers drive the countdown with :meth:`CookingTimers.tick` once per second,
so the state machine runs the same under a game loop or in a test.
"""
from __future__ import annotations

import math
from typing import Callable, Dict, List, Optional

from config import MIXING_TIME, RAW_THRESHOLD_PERCENT
from kitchen.catalog import Catalog
from kitchen.entities import Classification, CookingProgress
from kitchen.errors import InvalidStateTransition
from kitchen.ledger import ToolLedger

IDLE = "idle"
COOKING = "cooking"

Resolver = Callable[[str, Classification], None]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def classify_interrupt(total_time: int, remaining_time: int) -> Classification:
    percent_remaining = remaining_time / total_time * 100.0 if total_time > 0 else 0.0
    if percent_remaining >= RAW_THRESHOLD_PERCENT:
        return Classification.RAW
    if percent_remaining > 0:
        return Classification.COOKED
    return Classification.BURNED


class CookingTimers:
    """Owns every tool's :class:`CookingProgress`; nothing else mutates it."""

    def __init__(self, catalog: Catalog, ledger: ToolLedger, on_resolve: Resolver) -> None:
        self.catalog = catalog
        self.ledger = ledger
        self.on_resolve = on_resolve
        self._progress: Dict[str, CookingProgress] = {}

    def cook_time(self, tool: str) -> int:
        definition = self.catalog.tool(tool)
        if definition is None or not definition.is_heating:
            return MIXING_TIME
        items = self.ledger.contents(tool).items
        # The fastest-heating ingredient decides how long the whole tool takes.
        min_heating = min(self.catalog.heating_for(item.name) for item in items)
        return round_half_up(min_heating / definition.fire)

    def state(self, tool: str) -> str:
        return COOKING if tool in self._progress else IDLE

    def progress(self, tool: str) -> Optional[CookingProgress]:
        return self._progress.get(tool)

    def active_tools(self) -> List[str]:
        return list(self._progress)

    def require_cooking(self, tool: str) -> CookingProgress:
        progress = self._progress.get(tool)
        if progress is None:
            raise InvalidStateTransition(f"{tool} is not cooking")
        return progress

    def start(self, tool: str) -> Optional[int]:
        """Start timing ``tool``.  Returns the total time, or ``None`` on a no-op."""
        if tool in self._progress or self.ledger.contents(tool).is_empty:
            return None
        total_time = self.cook_time(tool)
        self._progress[tool] = CookingProgress(total_time=total_time, remaining_time=total_time)
        return total_time

    def start_all(self) -> List[str]:
        started: List[str] = []
        for tool in self.ledger.tools:
            if self.start(tool) is not None:
                started.append(tool)
        return started

    def tick(self, tool: str) -> Optional[Classification]:
        progress = self._progress.get(tool)
        if progress is None:
            return None
        progress.remaining_time -= 1
        if progress.remaining_time > 0:
            return None
        definition = self.catalog.tool(tool)
        if definition is None or not definition.is_heating:
            classification = Classification.RAW
        else:
            classification = Classification.BURNED
        self._resolve(tool, classification)
        return classification

    def tick_all(self) -> Dict[str, Classification]:
        resolved: Dict[str, Classification] = {}
        for tool in self.active_tools():
            classification = self.tick(tool)
            if classification is not None:
                resolved[tool] = classification
        return resolved

    def interrupt(self, tool: str) -> Optional[Classification]:
        progress = self._progress.get(tool)
        if progress is None:
            return None
        classification = classify_interrupt(progress.total_time, progress.remaining_time)
        self._resolve(tool, classification)
        return classification

    def cancel_all(self) -> None:
        self._progress.clear()

    def _resolve(self, tool: str, classification: Classification) -> None:
        self._progress.pop(tool)
        self.on_resolve(tool, classification)
