from __future__ import annotations

import argparse
import itertools
import json
import logging
import sys
from pathlib import Path
from typing import Dict, Optional, Tuple

try:
    import pygame  # type: ignore
except Exception:
    pygame = None

from config import DEFAULT_STAGE_ID, PROFILE_FILE, RAW_THRESHOLD_PERCENT
from item_catalog import load_catalog
from kitchen import Catalog, PlayerProfile, StageSession
from kitchen.catalog import RecipeDefinition
from kitchen.entities import UNLIMITED
from kitchen.errors import InvalidStateTransition
from kitchen.matcher import RecipeMatch
from kitchen.profile import recipe_book
from kitchen.progress import tier_message
from kitchen.session import DIALOGUE, GOALS
from level_catalog import load_level_catalog, stage_ids, unlocked_categories
from recipe_catalog import runtime_recipe_catalog
from stage_catalog import load_stage

logger = logging.getLogger(__name__)

WINDOW_W = 960
WINDOW_H = 640


def format_time(seconds: int) -> str:
    seconds = max(0, seconds)
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


# ---------------------------------------------------------------------------
# Headless autopilot
# ---------------------------------------------------------------------------


def _has_enough(session: StageSession, name: str, count: int) -> bool:
    for ingredient in session.ingredients:
        if ingredient.name != name:
            continue
        quantity = ingredient.quantity
        return quantity.kind == UNLIMITED or (quantity.available and quantity.count >= count)
    return False


def _candidate_inputs(session: StageSession, recipe: RecipeDefinition, target: str) -> Optional[Dict[str, int]]:
    if not recipe.abstract:
        if target not in recipe.output_counts():
            return None
        return recipe.input_counts()

    placeholders = recipe.wildcards()
    literals = {name for name, _ in recipe.inputs if name not in placeholders}
    shelf = [ingredient.name for ingredient in session.ingredients if ingredient.name not in literals]
    for names in itertools.permutations(shelf, len(placeholders)):
        match = RecipeMatch(recipe, dict(zip(placeholders, names)))
        if target in dict(match.resolved_outputs()):
            return {match.substitute(name): count for name, count in recipe.inputs}
    return None


def plan_target(session: StageSession, target: str) -> Optional[Tuple[str, Dict[str, int]]]:
    """Find an idle tool and the inputs that should produce ``target``."""
    for recipe in session.catalog.recipes:
        inputs = _candidate_inputs(session, recipe, target)
        if inputs is None:
            continue
        if not all(_has_enough(session, name, count) for name, count in inputs.items()):
            continue
        for tool in session.tools:
            if recipe.accepts_tool(tool) and session.ledger.contents(tool).is_empty:
                return tool, inputs
    return None


def cook_target(session: StageSession, target: str) -> bool:
    plan = plan_target(session, target)
    if plan is None:
        return False
    tool, inputs = plan
    tool_index = session.tools.index(tool)
    names = [ingredient.name for ingredient in session.ingredients]
    for name, count in inputs.items():
        for _ in range(count):
            if not session.ingredient_dropped(names.index(name), tool_index):
                return False
    if session.start_cooking(tool) is None:
        return False

    definition = session.catalog.tool(tool)
    if definition is not None and definition.is_heating:
        while session.running:
            try:
                progress = session.timers.require_cooking(tool)
            except InvalidStateTransition:
                return False
            if 0 < progress.percent_remaining < RAW_THRESHOLD_PERCENT:
                break
            session.tick()
    if session.running:
        session.dump_tool(tool)
    return True


def run_headless(stage_id: str, profile_path: Path) -> StageSession:
    catalog = load_catalog()
    profile = PlayerProfile.load(profile_path)
    session = StageSession(load_stage(stage_id), catalog, profile)
    session.dialogue_finished()
    session.goals_acknowledged()

    for target in session.stage.targets:
        if not session.running:
            break
        cook_target(session, target)

    summary = session.finish()
    print(
        f"headless_done stage={session.stage.key} t={session.time_left}s "
        f"progress={summary.progress}% tier={summary.tier} reward={summary.reward} "
        f"savings={summary.savings} unlocked={list(summary.unlocked_recipes)}"
    )
    print(tier_message(summary.tier))
    return session


def list_stages(profile_path: Path, catalog: Catalog) -> None:
    profile = PlayerProfile.load(profile_path)
    levels = load_level_catalog()
    unlocked = set(unlocked_categories(levels, profile.health))
    print(f"health={profile.health} savings={profile.savings}")
    for key, category in levels.items():
        status = "open" if key in unlocked else f"locked (health {category.required_health})"
        print(f"{key}: {status} -> {', '.join(category.stages) or '-'}")
    book = recipe_book(profile, catalog)
    if book:
        print("recipe book: " + ", ".join(recipe.name for recipe in book))


def dump_recipes(catalog: Catalog) -> None:
    print(json.dumps(runtime_recipe_catalog(catalog.recipes), indent=2, ensure_ascii=False))


def warn_if_unlisted(stage_id: str) -> bool:
    if stage_id in stage_ids(load_level_catalog()):
        return True
    logger.warning("Stage %s is not listed in any level category", stage_id)
    return False


# ---------------------------------------------------------------------------
# Graphical front end
# ---------------------------------------------------------------------------


class GameUI:
    def __init__(self, session: StageSession):
        if pygame is None:
            raise RuntimeError("pygame is required for graphical mode. Relaunch with --headless.")
        pygame.init()
        if not pygame.display.get_init():
            raise RuntimeError("Display subsystem is unavailable. Relaunch with --headless.")
        try:
            self.screen = pygame.display.set_mode((WINDOW_W, WINDOW_H))
        except pygame.error as exc:
            raise RuntimeError(f"Display subsystem is unavailable ({exc}). Relaunch with --headless.") from exc
        pygame.display.set_caption(f"Time Recipe - {session.stage.name}")
        self.session = session
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("arial", 22)
        self.small = pygame.font.SysFont("arial", 17)
        self.running = True
        self.selected_ingredient = 0
        self.selected_tool = 0
        self.dialogue_index = 0
        self.second_accumulator = 0.0

        self.palette = {
            "bg": (24, 20, 16),
            "panel": (40, 33, 26),
            "text": (244, 236, 220),
            "muted": (176, 160, 138),
            "accent": (255, 196, 96),
            "danger": (236, 104, 88),
        }

    def handle_input(self) -> None:
        session = self.session
        for ev in pygame.event.get():
            if ev.type == pygame.QUIT:
                self.running = False
            if ev.type != pygame.KEYDOWN:
                continue
            if ev.key == pygame.K_ESCAPE:
                self.running = False
            elif session.phase == DIALOGUE and ev.key in (pygame.K_SPACE, pygame.K_RETURN):
                self.dialogue_index += 1
                if self.dialogue_index >= len(session.stage.predialog):
                    session.dialogue_finished()
            elif session.phase == GOALS and ev.key in (pygame.K_SPACE, pygame.K_RETURN):
                session.goals_acknowledged()
            elif session.running:
                self._handle_command(ev.key)

    def _handle_command(self, key: int) -> None:
        session = self.session
        if key == pygame.K_UP:
            self.selected_ingredient = max(0, self.selected_ingredient - 1)
        elif key == pygame.K_DOWN:
            self.selected_ingredient = min(len(session.ingredients) - 1, self.selected_ingredient + 1)
        elif key == pygame.K_LEFT:
            self.selected_tool = max(0, self.selected_tool - 1)
        elif key == pygame.K_RIGHT:
            self.selected_tool = min(len(session.tools) - 1, self.selected_tool + 1)
        elif key == pygame.K_RETURN:
            session.ingredient_dropped(self.selected_ingredient, self.selected_tool)
        elif key == pygame.K_a:
            session.start_all_cooking()
        elif session.tools and key == pygame.K_c:
            session.start_cooking(session.tools[self.selected_tool])
        elif session.tools and key == pygame.K_d:
            session.dump_tool(session.tools[self.selected_tool])

    def _text(self, text: str, pos: Tuple[int, int], color: str = "text", small: bool = False) -> None:
        font = self.small if small else self.font
        self.screen.blit(font.render(text, True, self.palette[color]), pos)

    def _draw_ingredients(self) -> None:
        self._text("Ingredients", (20, 70), "accent")
        for index, entry in enumerate(self.session.ingredient_snapshot()):
            marker = ">" if index == self.selected_ingredient else " "
            color = "text" if entry["available"] else "muted"
            line = f"{marker} {entry['emoji']} {entry['name']} x{entry['quantity']} (size {entry['size']})"
            self._text(line, (20, 100 + index * 24), color, small=True)

    def _draw_tools(self) -> None:
        self._text("Tools", (480, 70), "accent")
        y = 100
        for index, tool in enumerate(self.session.tools):
            snap = self.session.tool_snapshot(tool)
            marker = ">" if index == self.selected_tool else " "
            usage = snap["used_capacity"] / snap["max_capacity"] * 100
            color = "danger" if usage >= 90 else "text"
            self._text(f"{marker} {snap['emoji']} {tool} {snap['used_capacity']}/{snap['max_capacity']}", (480, y), color)
            items = ", ".join(item["name"] for item in snap["items"]) or "empty"
            self._text(items, (500, y + 24), "muted", small=True)
            if snap["state"] == "cooking":
                self._text(f"cooking: {snap['remaining_time']}s left ({snap['percent_done']:.0f}%)", (500, y + 44), "accent", small=True)
            y += 74

    def draw(self) -> None:
        session = self.session
        self.screen.fill(self.palette["bg"])
        header = f"{session.stage.name} | {format_time(session.time_left)} | progress {round(session.progress)}%"
        self._text(header, (20, 20))

        if session.phase == DIALOGUE and session.stage.predialog:
            line = session.stage.predialog[min(self.dialogue_index, len(session.stage.predialog) - 1)]
            self._text(f"{line.speaker}: {line.content}", (20, WINDOW_H - 80))
            self._text("SPACE to continue", (20, WINDOW_H - 40), "muted", small=True)
        elif session.phase == GOALS:
            for index, goal in enumerate(session.stage.goals):
                self._text(f"- {goal}", (20, 80 + index * 28))
            self._text(f"Time limit {format_time(session.stage.time_limit)}. SPACE to start", (20, WINDOW_H - 40), "muted")
        else:
            self._draw_ingredients()
            self._draw_tools()
            for index, message in enumerate(session.event_log[-4:]):
                self._text(message, (20, WINDOW_H - 120 + index * 22), "muted", small=True)
            if session.summary is not None:
                summary = session.summary
                self._text(
                    f"{summary.tier.upper()}: {summary.progress}% reward {summary.reward} savings {summary.savings}",
                    (20, 40),
                    "accent",
                )
            else:
                keys = "UP/DOWN ingredient  LEFT/RIGHT tool  ENTER drop  C cook  A cook all  D dump  ESC quit"
                self._text(keys, (20, 44), "muted", small=True)

        pygame.display.flip()

    def run(self) -> None:
        while self.running:
            dt = self.clock.tick(30) / 1000.0
            self.handle_input()
            self.second_accumulator += dt
            while self.second_accumulator >= 1.0:
                self.second_accumulator -= 1.0
                self.session.tick()
            self.draw()
        self.session.close()
        self.session.profile.save()
        pygame.quit()


def main() -> None:
    parser = argparse.ArgumentParser(description="Time Recipe cooking stages")
    parser.add_argument("--stage", default=DEFAULT_STAGE_ID, help="stage id to play")
    parser.add_argument("--headless", action="store_true", help="play the stage with the autopilot, no graphics")
    parser.add_argument("--list", action="store_true", help="list level categories and the recipe book")
    parser.add_argument("--recipes", action="store_true", help="print the recipe catalog as JSON")
    parser.add_argument("--profile", type=Path, default=PROFILE_FILE, help="player profile JSON file")
    parser.add_argument("--log-level", default="WARNING", help="logging level")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    if args.list:
        list_stages(args.profile, load_catalog())
        return

    if args.recipes:
        dump_recipes(load_catalog())
        return

    warn_if_unlisted(args.stage)

    if args.headless:
        run_headless(args.stage, args.profile)
        return

    session = StageSession(load_stage(args.stage), load_catalog(), PlayerProfile.load(args.profile))
    try:
        ui = GameUI(session)
    except RuntimeError as exc:
        session.close()
        print(f"Startup error: {exc}", file=sys.stderr)
        sys.exit(1)
    ui.run()


if __name__ == "__main__":
    main()
