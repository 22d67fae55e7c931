"""Per-tool bookkeeping of contained ingredients and capacity."""
from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List

from config import HEALTH_KEY, STARTING_HEALTH
from kitchen.catalog import Catalog
from kitchen.entities import ToolContents, ToolItem
from kitchen.errors import CapacityExceeded, UnknownTool
from kitchen.profile import PlayerProfile


class ToolLedger:
    """Owns the :class:`ToolContents` of every tool on a stage.

    Only the ledger mutates tool contents.  ``used_capacity`` always equals
    the sum of the contained item sizes and never exceeds ``max_capacity``.
    """

    def __init__(self, catalog: Catalog, profile: PlayerProfile, tools: Iterable[str]) -> None:
        self.catalog = catalog
        self.profile = profile
        self._contents: Dict[str, ToolContents] = {}
        for tool in tools:
            if tool not in self._contents:
                self._contents[tool] = ToolContents(max_capacity=catalog.capacity_for(tool))

    @property
    def tools(self) -> List[str]:
        return list(self._contents)

    def contents(self, tool: str) -> ToolContents:
        try:
            return self._contents[tool]
        except KeyError:
            raise UnknownTool(tool) from None

    def can_accept(self, tool: str, size: int) -> bool:
        contents = self.contents(tool)
        return contents.used_capacity + size <= contents.max_capacity

    def insert(self, tool: str, name: str, size: int) -> None:
        contents = self.contents(tool)
        if not self.can_accept(tool, size):
            raise CapacityExceeded(tool, contents.used_capacity, size, contents.max_capacity)
        contents.items.append(ToolItem(name, size))
        contents.used_capacity += size
        nutrition = self.catalog.nutrition_for(name)
        if nutrition:
            self.profile.add(HEALTH_KEY, nutrition, default=STARTING_HEALTH)

    def clear(self, tool: str) -> List[ToolItem]:
        """Empty ``tool`` and return what was inside."""
        contents = self.contents(tool)
        removed = contents.items
        contents.items = []
        contents.used_capacity = 0
        return removed

    def counts(self, tool: str) -> Counter[str]:
        # Counter keeps first-insertion order, which fixes wildcard binding order.
        return Counter(item.name for item in self.contents(tool).items)

    def snapshot(self, tool: str) -> Dict[str, object]:
        contents = self.contents(tool)
        return {
            "items": [{"name": item.name, "size": item.size} for item in contents.items],
            "used_capacity": contents.used_capacity,
            "max_capacity": contents.max_capacity,
        }
