"""
hacknight.engine.badges — Milestone Eligibility
================================================

Declarative milestone table: each metric maps to an ascending list of
``(threshold, badge_name)`` pairs.  Adding a milestone is a data change
here plus a matching row in :data:`hacknight.database.seed.BADGE_DEFINITIONS`.

Eligibility is cumulative — a member with 10 check-ins qualifies for
"First Check-in", "5 Check-ins" and "10 Check-ins" at once.

This module is pure calculation — no database I/O.
"""

from __future__ import annotations

import enum


class Metric(enum.StrEnum):
    """Member stats that milestones are measured against."""
    CHECK_INS = "check_ins"
    STREAK = "streak"


# ---------------------------------------------------------------------------
# Milestone table
# ---------------------------------------------------------------------------
MILESTONES: dict[Metric, list[tuple[int, str]]] = {
    Metric.CHECK_INS: [
        (1, "First Check-in"),
        (5, "5 Check-ins"),
        (10, "10 Check-ins"),
        (25, "25 Check-ins"),
        (50, "50 Check-ins"),
    ],
    Metric.STREAK: [
        (3, "3 Week Streak"),
        (5, "5 Week Streak"),
        (10, "10 Week Streak"),
        (25, "25 Week Streak"),
        (52, "52 Week Streak"),
    ],
}


def all_badge_names() -> list[str]:
    """Every badge name the table can award, in table order."""
    return [name for milestones in MILESTONES.values() for _, name in milestones]


def eligible_badge_names(check_in_count: int, streak_count: int) -> list[str]:
    """Return every badge name whose threshold the member meets, in table order."""
    values = {
        Metric.CHECK_INS: check_in_count,
        Metric.STREAK: streak_count,
    }
    eligible: list[str] = []
    for metric, milestones in MILESTONES.items():
        value = values[metric]
        for threshold, name in milestones:
            if value < threshold:
                break  # thresholds ascend
            eligible.append(name)
    return eligible
