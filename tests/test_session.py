from __future__ import annotations

import json

import pytest

from config import EVENT_LOG_LIMIT, RECIPES_KEY, SAVINGS_KEY
from kitchen import Classification, PlayerProfile, Quantity, StageSession
from kitchen.entities import BURNED, REJECTED, SUCCESS, DialogueLine
from kitchen.errors import UnknownTool
from kitchen.progress import FULL, TIMEOUT
from kitchen.session import CLOSED, DIALOGUE, FINISHED, GOALS, RUNNING
from kitchen_fixtures import build_catalog, build_stage

EGG, SALT, RICE, BEEF, PEPPER = range(5)
PAN, BOWL, WOK = range(3)


def _session(profile=None, **overrides):
    return StageSession(build_stage(**overrides), build_catalog(), profile=profile)


def _tick(session, seconds):
    for _ in range(seconds):
        session.tick()


def _cook_scrambled_eggs(session):
    assert session.ingredient_dropped(EGG, PAN)
    assert session.ingredient_dropped(EGG, PAN)
    assert session.ingredient_dropped(SALT, PAN)
    assert session.start_cooking("pan") == 20
    _tick(session, 15)
    return session.dump_tool("pan")


def _quantity(session, name):
    for ingredient in session.ingredients:
        if ingredient.name == name:
            return ingredient.quantity
    return None


def test_pre_game_sequence_gates_commands():
    session = _session(
        predialog=(DialogueLine("Chef", "chef.png", "Welcome to the kitchen."),),
        goals=("Make scrambled eggs",),
    )

    assert session.phase == DIALOGUE
    assert not session.ingredient_dropped(EGG, PAN)
    session.tick()
    assert session.time_left == 60

    assert session.dialogue_finished()
    assert session.phase == GOALS
    assert not session.dialogue_finished()

    assert session.goals_acknowledged()
    assert session.phase == RUNNING


def test_empty_pre_game_sequence_starts_running():
    assert _session().phase == RUNNING


def test_drop_moves_one_unit_into_the_tool():
    session = _session()

    assert session.ingredient_dropped(EGG, PAN)

    assert _quantity(session, "egg") == Quantity.finite(3)
    assert session.tool_snapshot("pan")["items"] == [{"name": "egg", "size": 50}]
    assert session.profile.health == 105


def test_unlimited_ingredient_never_runs_out():
    session = _session()

    for _ in range(5):
        assert session.ingredient_dropped(SALT, BOWL)

    assert _quantity(session, "salt") == Quantity.unlimited()
    assert session.tool_snapshot("bowl")["used_capacity"] == 50


def test_full_tool_rejects_and_leaves_state_unchanged():
    session = _session()
    for _ in range(4):
        session.ingredient_dropped(EGG, BOWL)
    session.ingredient_dropped(RICE, BOWL)

    assert not session.ingredient_dropped(SALT, BOWL)

    event = session.events[-1]
    assert event.kind == REJECTED
    assert "bowl is full" in event.message
    assert session.tool_snapshot("bowl")["used_capacity"] == 300
    assert _quantity(session, "salt") == Quantity.unlimited()


def test_exhausted_ingredient_is_rejected():
    session = _session()
    assert session.ingredient_dropped(RICE, PAN)

    assert not session.ingredient_dropped(RICE, PAN)

    assert session.events[-1].kind == REJECTED
    assert session.events[-1].message == "Not enough rice left"
    assert _quantity(session, "rice") == Quantity.finite(0)
    assert any(ingredient.name == "rice" for ingredient in session.ingredients)
    assert "rice" not in [ingredient.name for ingredient in session.available_ingredients()]


def test_unknown_quantity_is_refused_and_logged(caplog):
    session = _session(ingredients=(("pepper", Quantity.unknown("a pinch")),))

    assert not session.ingredient_dropped(0, PAN)

    assert session.events[-1].kind == REJECTED
    assert "unrecognised quantity" in caplog.text
    assert session.tool_snapshot("pan")["items"] == []


def test_out_of_range_indices_are_ignored():
    session = _session()

    assert not session.ingredient_dropped(99, PAN)
    assert not session.ingredient_dropped(EGG, 99)
    assert session.events == []


def test_unknown_tools_are_left_out_of_the_session(caplog):
    session = _session(tools=("pan", "oven", "bowl"))

    assert session.tools == ["pan", "bowl"]
    assert "oven" in caplog.text
    with pytest.raises(UnknownTool):
        session.start_cooking("oven")
    with pytest.raises(UnknownTool):
        session.dump_tool("oven")


def test_start_cooking_an_empty_tool_is_a_no_op():
    session = _session()

    assert session.start_cooking("pan") is None
    assert session.tool_snapshot("pan")["state"] == "idle"


def test_dump_at_the_right_moment_makes_the_recipe():
    session = _session()

    assert _cook_scrambled_eggs(session) == Classification.COOKED

    event = session.events[-1]
    assert event.kind == SUCCESS
    assert event.recipe == "scrambled eggs"
    assert _quantity(session, "scrambled eggs") == Quantity.finite(1)
    assert session.progress == 50.0
    assert session.time_left == 45
    assert session.running


def test_tool_snapshot_reports_the_countdown():
    session = _session()
    session.ingredient_dropped(EGG, PAN)
    session.start_cooking("pan")
    _tick(session, 4)

    snapshot = session.tool_snapshot("pan")

    assert snapshot["state"] == "cooking"
    assert snapshot["total_time"] == 20
    assert snapshot["remaining_time"] == 16
    assert snapshot["percent_done"] == 20.0


def test_heating_tool_left_too_long_burns():
    session = _session()
    session.ingredient_dropped(EGG, PAN)
    session.ingredient_dropped(EGG, PAN)
    session.ingredient_dropped(SALT, PAN)
    session.start_cooking("pan")

    _tick(session, 20)

    assert session.events[-1].kind == BURNED
    assert _quantity(session, "burned food") == Quantity.finite(3)
    assert _quantity(session, "scrambled eggs") is None


def test_completing_every_target_finishes_and_pays_once(tmp_path):
    path = tmp_path / "profile.json"
    session = _session(profile=PlayerProfile.load(path))
    _cook_scrambled_eggs(session)
    session.ingredient_dropped(RICE, WOK)
    session.ingredient_dropped(BEEF, WOK)
    session.start_cooking("wok")
    _tick(session, 15)

    session.dump_tool("wok")

    assert session.phase == FINISHED
    summary = session.summary
    assert summary.progress == 100
    assert summary.tier == FULL
    assert summary.reward == 70
    assert summary.savings == 70
    assert summary.unlocked_recipes == ("scrambled eggs",)

    assert session.finish() is summary
    session.tick()
    assert session.profile.savings == 70
    assert session.time_left == 30

    stored = json.loads(path.read_text(encoding="utf-8"))
    assert stored[SAVINGS_KEY] == 70
    assert stored[RECIPES_KEY] == ["scrambled eggs"]


def test_partial_progress_pays_a_partial_reward():
    session = _session()
    _cook_scrambled_eggs(session)

    summary = session.finish()

    assert (summary.progress, summary.tier, summary.reward) == (50, "good", 10)
    assert summary.unlocked_recipes == ("scrambled eggs",)


def test_running_out_of_time_cancels_cooking():
    session = _session(time_limit=3)
    session.ingredient_dropped(EGG, PAN)
    session.start_cooking("pan")

    _tick(session, 3)

    assert session.phase == FINISHED
    assert session.summary.tier == TIMEOUT
    assert session.summary.reward == 0
    assert session.summary.unlocked_recipes == ()
    assert session.timers.active_tools() == []
    assert session.tool_snapshot("pan")["state"] == "idle"


def test_recipes_already_known_are_not_reported_again():
    profile = PlayerProfile({RECIPES_KEY: ["scrambled eggs"]})
    session = _session(profile=profile)
    _cook_scrambled_eggs(session)

    summary = session.finish()

    assert summary.unlocked_recipes == ()
    assert profile.unlocked_recipes == ["scrambled eggs"]


def test_close_pays_nothing():
    profile = PlayerProfile()
    session = _session(profile=profile)
    session.ingredient_dropped(EGG, PAN)
    session.start_cooking("pan")

    session.close()

    assert session.phase == CLOSED
    assert session.summary is None
    assert session.timers.active_tools() == []
    assert profile.savings == 0
    assert not session.ingredient_dropped(EGG, PAN)


def test_event_log_is_bounded_and_state_serialises():
    session = _session()
    for _ in range(EVENT_LOG_LIMIT + 5):
        session.ingredient_dropped(SALT, WOK)

    state = session.to_dict()

    assert len(state["event_log"]) == EVENT_LOG_LIMIT
    assert state["phase"] == RUNNING
    assert state["ingredients"][SALT] == {"name": "salt", "quantity": "ample"}
    assert [tool["name"] for tool in state["tools"]] == ["pan", "bowl", "wok"]
    assert state["summary"] is None
    json.dumps(state)
