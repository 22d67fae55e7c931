"""StageSession: one playable stage, driven entirely by explicit commands.

The presentation layer translates gestures into the commands below and
re-renders from the snapshots.  All timing comes from :meth:`StageSession.tick`,
called once per second by whatever scheduler hosts the session.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from config import EVENT_LOG_LIMIT, RECIPES_KEY, SAVINGS_KEY, STARTING_SAVINGS
from kitchen.catalog import Catalog
from kitchen.cooking import CookingTimers
from kitchen.entities import (
    REJECTED,
    UNKNOWN,
    Classification,
    OutcomeEvent,
    SessionSummary,
    StageDefinition,
    StageIngredient,
)
from kitchen.errors import CapacityExceeded, InsufficientQuantity, UnknownTool
from kitchen.ledger import ToolLedger
from kitchen.profile import PlayerProfile
from kitchen.progress import RewardPolicy, compute_progress
from kitchen.resolver import OutcomeResolver

logger = logging.getLogger(__name__)

DIALOGUE = "dialogue"
GOALS = "goals"
RUNNING = "running"
FINISHED = "finished"
CLOSED = "closed"


class StageSession:
    """Owns every piece of mutable state for one stage."""

    def __init__(
        self,
        stage: StageDefinition,
        catalog: Catalog,
        profile: Optional[PlayerProfile] = None,
        policy: Optional[RewardPolicy] = None,
    ) -> None:
        self.stage = stage
        self.catalog = catalog
        self.profile = profile if profile is not None else PlayerProfile()
        self.profile.initialise()
        self.policy = policy or RewardPolicy()

        self.ingredients: List[StageIngredient] = [
            StageIngredient(name, quantity) for name, quantity in stage.ingredients
        ]
        tools = []
        for tool in stage.tools:
            if catalog.tool(tool) is None:
                logger.warning("Stage %s lists unknown tool %r; it is left out", stage.key, tool)
                continue
            tools.append(tool)
        self.ledger = ToolLedger(catalog, self.profile, tools)
        self.resolver = OutcomeResolver(self.ingredients, self.ledger, catalog.recipes)
        self.timers = CookingTimers(catalog, self.ledger, self._on_resolve)

        self.time_left: int = stage.time_limit
        self.progress: float = 0.0
        self.events: List[OutcomeEvent] = []
        self.event_log: List[str] = []
        self.summary: Optional[SessionSummary] = None
        self.phase = DIALOGUE
        self._advance_phase()
        self._log_event(f"Stage loaded: {stage.name}")

    # ------------------------------------------------------------------
    # Pre-game sequence
    # ------------------------------------------------------------------

    def _advance_phase(self) -> None:
        if self.phase == DIALOGUE and not self.stage.predialog:
            self.phase = GOALS
        if self.phase == GOALS and not self.stage.goals:
            self.phase = RUNNING

    def dialogue_finished(self) -> bool:
        if self.phase != DIALOGUE:
            return False
        self.phase = GOALS
        self._advance_phase()
        return True

    def goals_acknowledged(self) -> bool:
        if self.phase != GOALS:
            return False
        self.phase = RUNNING
        self._log_event("Timer started")
        return True

    @property
    def running(self) -> bool:
        return self.phase == RUNNING

    @property
    def finished(self) -> bool:
        return self.phase == FINISHED

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @property
    def tools(self) -> List[str]:
        return self.ledger.tools

    def _require_tool(self, tool: str) -> str:
        if tool not in self.ledger.tools:
            raise UnknownTool(tool)
        return tool

    def ingredient_dropped(self, ingredient_index: int, tool_index: int) -> bool:
        if not self.running:
            return False
        if not (0 <= ingredient_index < len(self.ingredients)):
            return False
        if not (0 <= tool_index < len(self.ledger.tools)):
            return False
        ingredient = self.ingredients[ingredient_index]
        tool = self.ledger.tools[tool_index]

        try:
            if not ingredient.quantity.available:
                if ingredient.quantity.kind == UNKNOWN:
                    logger.error(
                        "Ingredient %r has an unrecognised quantity %r; placement refused",
                        ingredient.name,
                        ingredient.quantity.raw,
                    )
                raise InsufficientQuantity(ingredient.name)
            self.ledger.insert(tool, ingredient.name, self.catalog.size_for(ingredient.name))
        except (CapacityExceeded, InsufficientQuantity) as exc:
            self._emit(OutcomeEvent(REJECTED, str(exc), tool=tool))
            return False

        ingredient.quantity = ingredient.quantity.take()
        self._log_event(f"{ingredient.name} -> {tool}")
        self.recompute_progress()
        return True

    def start_cooking(self, tool: str) -> Optional[int]:
        self._require_tool(tool)
        if not self.running:
            return None
        total_time = self.timers.start(tool)
        if total_time is not None:
            self._log_event(f"{tool} cooking for {total_time}s")
        return total_time

    def start_all_cooking(self) -> List[str]:
        if not self.running:
            return []
        started = self.timers.start_all()
        for tool in started:
            self._log_event(f"{tool} cooking for {self.timers.progress(tool).total_time}s")
        return started

    def dump_tool(self, tool: str) -> Optional[Classification]:
        self._require_tool(tool)
        if not self.running:
            return None
        return self.timers.interrupt(tool)

    def tick(self) -> None:
        if not self.running:
            return
        self.timers.tick_all()
        if not self.running:
            return
        self.time_left -= 1
        if self.time_left <= 0:
            self._log_event("Time's up")
            self.finish()

    # ------------------------------------------------------------------
    # Resolution, progress and completion
    # ------------------------------------------------------------------

    def _on_resolve(self, tool: str, classification: Classification) -> None:
        self._emit(self.resolver.resolve(tool, classification))
        self.recompute_progress()

    def recompute_progress(self) -> float:
        self.progress = compute_progress(self.stage.targets, self.ingredients)
        if self.progress >= 100 and self.running:
            self.finish()
        return self.progress

    def finish(self) -> SessionSummary:
        """End the stage once; later calls return the same summary."""
        if self.summary is not None:
            return self.summary
        self.timers.cancel_all()
        self.phase = FINISHED

        progress = int(self.progress + 0.5)
        tier, reward = self.policy.evaluate(progress, self.stage.reward)
        savings = self.profile.add(SAVINGS_KEY, reward, default=STARTING_SAVINGS)
        unlocked: Tuple[str, ...] = ()
        if self.stage.reward is not None and self.policy.unlocks_recipes(progress):
            known = set(self.profile.get_list(RECIPES_KEY))
            unlocked = tuple(name for name in self.stage.reward.recipe_book if name not in known)
            self.profile.union(RECIPES_KEY, self.stage.reward.recipe_book)
        self.profile.save()

        self.summary = SessionSummary(
            progress=progress,
            tier=tier,
            reward=reward,
            savings=savings,
            unlocked_recipes=unlocked,
        )
        self._log_event(f"Stage over: {progress}% ({tier}), reward {reward}")
        return self.summary

    def close(self) -> None:
        """Cancel every tool timer and the stage timer.  No reward is paid."""
        self.timers.cancel_all()
        if self.phase != FINISHED:
            self.phase = CLOSED

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def available_ingredients(self) -> List[StageIngredient]:
        return [ingredient for ingredient in self.ingredients if ingredient.quantity.available]

    def ingredient_snapshot(self) -> List[Dict[str, Any]]:
        return [
            {
                "name": ingredient.name,
                "emoji": self.catalog.emoji_for(ingredient.name),
                "quantity": ingredient.quantity.display(),
                "size": self.catalog.size_for(ingredient.name),
                "available": ingredient.quantity.available,
            }
            for ingredient in self.ingredients
        ]

    def tool_snapshot(self, tool: str) -> Dict[str, Any]:
        snapshot = self.ledger.snapshot(self._require_tool(tool))
        snapshot["name"] = tool
        snapshot["emoji"] = self.catalog.emoji_for(tool)
        progress = self.timers.progress(tool)
        snapshot["state"] = self.timers.state(tool)
        snapshot["total_time"] = progress.total_time if progress else 0
        snapshot["remaining_time"] = progress.remaining_time if progress else 0
        snapshot["percent_done"] = progress.percent_done if progress else 0.0
        return snapshot

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stage": self.stage.key,
            "phase": self.phase,
            "time_left": self.time_left,
            "progress": self.progress,
            "ingredients": [
                {"name": ingredient.name, "quantity": ingredient.quantity.to_json()}
                for ingredient in self.ingredients
            ],
            "tools": [self.tool_snapshot(tool) for tool in self.tools],
            "event_log": list(self.event_log),
            "summary": self.summary.to_dict() if self.summary else None,
        }

    def _emit(self, event: OutcomeEvent) -> None:
        self.events.append(event)
        self._log_event(event.message)

    def _log_event(self, message: str) -> None:
        self.event_log.append(message)
        self.event_log = self.event_log[-EVENT_LOG_LIMIT:]
