from __future__ import annotations

import pytest

from kitchen import Quantity, RewardPolicy, StageIngredient, compute_progress
from kitchen.entities import RewardSpec
from kitchen.progress import FULL, INCOMPLETE, TIMEOUT, tier_message


def _shelf(**quantities):
    return [StageIngredient(name, quantity) for name, quantity in quantities.items()]


def test_progress_counts_available_targets():
    shelf = _shelf(a=Quantity.finite(1), b=Quantity.finite(0), c=Quantity.unlimited())

    assert compute_progress(["a", "b"], shelf) == 50.0
    assert compute_progress(["a", "c"], shelf) == 100.0
    assert compute_progress(["b", "missing"], shelf) == 0.0


def test_progress_without_targets_is_zero():
    assert compute_progress([], _shelf(a=Quantity.finite(3))) == 0.0


def test_unknown_quantity_does_not_count():
    assert compute_progress(["a"], _shelf(a=Quantity.unknown("some"))) == 0.0


def test_duplicate_targets_stay_within_bounds():
    progress = compute_progress(["a", "a", "b"], _shelf(a=Quantity.finite(1)))

    assert 0.0 <= progress <= 100.0


@pytest.mark.parametrize(
    "progress, expected",
    [
        (100, (FULL, 70)),
        (85, ("great", 34)),
        (80, ("great", 32)),
        (60, ("good", 12)),
        (50, ("good", 10)),
        (30, (INCOMPLETE, 0)),
        (0, (TIMEOUT, 0)),
    ],
)
def test_default_reward_tiers(progress, expected):
    assert RewardPolicy().evaluate(progress, RewardSpec(coins=70)) == expected


def test_full_reward_falls_back_when_stage_has_no_coins():
    policy = RewardPolicy()

    assert policy.evaluate(100, None) == (FULL, 50)
    assert policy.evaluate(100, RewardSpec(coins=0)) == (FULL, 50)


def test_policy_is_configurable():
    policy = RewardPolicy(full_reward=10, tiers=((40.0, 1.0, "decent"),), unlock_threshold=90.0)

    assert policy.evaluate(100) == (FULL, 10)
    assert policy.evaluate(45) == ("decent", 45)
    assert policy.evaluate(20) == (INCOMPLETE, 0)
    assert not policy.unlocks_recipes(85)
    assert policy.unlocks_recipes(90)


def test_every_tier_has_a_message():
    for tier in (FULL, "great", "good", INCOMPLETE, TIMEOUT):
        assert tier_message(tier)
    assert tier_message("unknown") == ""
