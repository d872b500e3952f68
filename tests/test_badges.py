"""
tests/test_badges.py — Unit Tests for Milestone Eligibility
============================================================
"""

from __future__ import annotations

import pytest

from hacknight.database.seed import BADGE_DEFINITIONS
from hacknight.engine.badges import MILESTONES, all_badge_names, eligible_badge_names


class TestEligibleBadgeNames:
    def test_nothing_for_zero(self):
        assert eligible_badge_names(0, 0) == []

    def test_first_check_in(self):
        assert eligible_badge_names(1, 0) == ["First Check-in"]

    def test_cumulative_check_in_milestones(self):
        assert eligible_badge_names(10, 0) == [
            "First Check-in",
            "5 Check-ins",
            "10 Check-ins",
        ]

    def test_streak_milestones(self):
        assert eligible_badge_names(0, 5) == ["3 Week Streak", "5 Week Streak"]

    def test_example_scenario(self):
        assert eligible_badge_names(3, 3) == ["First Check-in", "3 Week Streak"]

    def test_everything(self):
        assert eligible_badge_names(50, 52) == all_badge_names()

    @pytest.mark.parametrize(
        ("count", "expected_last"),
        [(4, "First Check-in"), (5, "5 Check-ins"), (24, "10 Check-ins"), (49, "25 Check-ins")],
    )
    def test_threshold_boundaries(self, count, expected_last):
        assert eligible_badge_names(count, 0)[-1] == expected_last

    def test_streak_of_two_earns_nothing(self):
        assert eligible_badge_names(0, 2) == []


class TestMilestoneTable:
    def test_thresholds_ascend(self):
        for milestones in MILESTONES.values():
            thresholds = [t for t, _ in milestones]
            assert thresholds == sorted(thresholds)

    def test_every_milestone_has_a_seed_definition(self):
        seeded = {name for name, _, _ in BADGE_DEFINITIONS}
        assert set(all_badge_names()) == seeded
