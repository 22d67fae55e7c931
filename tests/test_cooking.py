"""Tests for the per-tool cooking state machine."""
from __future__ import annotations

import unittest

from kitchen import Classification, CookingTimers, PlayerProfile, ToolLedger
from kitchen.cooking import COOKING, IDLE, classify_interrupt, round_half_up
from kitchen.errors import InvalidStateTransition
from kitchen_fixtures import build_catalog


class CookingTestCase(unittest.TestCase):
    def setUp(self):
        catalog = build_catalog()
        self.ledger = ToolLedger(catalog, PlayerProfile(), ["pan", "bowl", "wok"])
        self.resolved = []
        self.timers = CookingTimers(catalog, self.ledger, self._on_resolve)

    def _on_resolve(self, tool, classification):
        self.resolved.append((tool, classification))
        self.ledger.clear(tool)

    def _fill(self, tool, *names):
        for name in names:
            self.ledger.insert(tool, name, 10)


class TestCookTime(CookingTestCase):
    def test_heating_tool_uses_fastest_ingredient(self):
        self._fill("pan", "egg", "rice")
        self.assertEqual(self.timers.start("pan"), 20)

    def test_unknown_ingredient_uses_default_heating(self):
        self._fill("wok", "mystery")
        self.assertEqual(self.timers.cook_time("wok"), 10)

    def test_non_heating_tool_always_takes_ten_seconds(self):
        self._fill("bowl", "beef", "rice", "salt")
        self.assertEqual(self.timers.start("bowl"), 10)

    def test_rounding_is_half_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(20.5), 21)
        self.assertEqual(round_half_up(46.6), 47)


class TestTransitions(CookingTestCase):
    def test_start_is_a_no_op_on_empty_or_cooking_tool(self):
        self.assertIsNone(self.timers.start("pan"))
        self._fill("pan", "egg")
        self.assertIsNotNone(self.timers.start("pan"))
        self.assertIsNone(self.timers.start("pan"))
        self.assertEqual(self.timers.state("pan"), COOKING)

    def test_start_all_skips_empty_and_cooking_tools(self):
        self._fill("pan", "egg")
        self._fill("bowl", "egg")
        self.timers.start("pan")

        self.assertEqual(self.timers.start_all(), ["bowl"])
        self.assertEqual(sorted(self.timers.active_tools()), ["bowl", "pan"])

    def test_heating_tool_burns_when_time_runs_out(self):
        self._fill("wok", "egg")  # 40 / 3 -> 13 seconds
        self.timers.start("wok")

        for _ in range(12):
            self.assertIsNone(self.timers.tick("wok"))
        self.assertEqual(self.timers.tick("wok"), Classification.BURNED)
        self.assertEqual(self.resolved, [("wok", Classification.BURNED)])
        self.assertEqual(self.timers.state("wok"), IDLE)

    def test_non_heating_tool_comes_out_raw(self):
        self._fill("bowl", "egg")
        self.timers.start("bowl")

        for _ in range(10):
            self.timers.tick("bowl")

        self.assertEqual(self.resolved, [("bowl", Classification.RAW)])

    def test_tick_on_idle_tool_does_nothing(self):
        self.assertIsNone(self.timers.tick("pan"))
        self.assertEqual(self.resolved, [])

    def test_tools_count_down_independently(self):
        self._fill("pan", "egg")  # 20 seconds
        self._fill("bowl", "egg")  # 10 seconds
        self.timers.start("pan")
        self.timers.start("bowl")

        for _ in range(10):
            self.timers.tick_all()

        self.assertEqual(self.resolved, [("bowl", Classification.RAW)])
        progress = self.timers.progress("pan")
        self.assertEqual(progress.remaining_time, 10)
        self.assertEqual(progress.percent_remaining, 50.0)
        self.assertEqual(progress.percent_done, 50.0)

    def test_interrupt_requires_cooking(self):
        self.assertIsNone(self.timers.interrupt("pan"))
        with self.assertRaises(InvalidStateTransition):
            self.timers.require_cooking("pan")

    def test_interrupt_resolves_once(self):
        self._fill("pan", "egg", "rice")
        self.timers.start("pan")
        for _ in range(15):
            self.timers.tick("pan")

        self.assertEqual(self.timers.interrupt("pan"), Classification.COOKED)
        self.assertIsNone(self.timers.interrupt("pan"))
        self.assertIsNone(self.timers.tick("pan"))
        self.assertEqual(self.resolved, [("pan", Classification.COOKED)])

    def test_cancel_all_drops_every_timer_without_resolving(self):
        self._fill("pan", "egg")
        self._fill("bowl", "egg")
        self.timers.start_all()

        self.timers.cancel_all()

        self.assertEqual(self.timers.active_tools(), [])
        self.assertEqual(self.timers.state("pan"), IDLE)
        self.assertIsNone(self.timers.progress("pan"))
        self.assertEqual(self.resolved, [])


class TestInterruptClassification(unittest.TestCase):
    def test_boundaries(self):
        self.assertEqual(classify_interrupt(20, 20), Classification.RAW)
        self.assertEqual(classify_interrupt(20, 6), Classification.RAW)
        self.assertEqual(classify_interrupt(20, 5), Classification.COOKED)
        self.assertEqual(classify_interrupt(20, 1), Classification.COOKED)
        self.assertEqual(classify_interrupt(20, 0), Classification.BURNED)

    def test_zero_length_timer_counts_as_burned(self):
        self.assertEqual(classify_interrupt(0, 0), Classification.BURNED)

    def test_codes_match_saved_values(self):
        self.assertEqual(int(Classification.BURNED), 0)
        self.assertEqual(int(Classification.COOKED), 1)
        self.assertEqual(int(Classification.RAW), 2)


if __name__ == "__main__":
    unittest.main()
