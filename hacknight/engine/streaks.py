"""
hacknight.engine.streaks — Attendance Streak Calculation
=========================================================

A streak is the number of consecutive hack nights, counted backward from
the most recent event that has already started, for which the member has
a checked-in attendance.  The first event without a check-in ends the
count — there is no skip tolerance, so missing last week's event means a
streak of 0 no matter what came before.

This module is pure calculation — no database I/O.  The service layer
(:mod:`hacknight.services.streak_service`) gathers the inputs.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
from typing import Protocol

from hacknight.database.models import AttendanceStatus


class _AttendanceLike(Protocol):
    luma_event_id: str
    status: str
    checked_in_at: object


class _EventLike(Protocol):
    luma_event_id: str
    is_canceled: bool


def checked_in_event_ids(records: Iterable[_AttendanceLike]) -> set[str]:
    """Event ids the member actually checked into.

    Rows still in ``registered`` state, or marked checked-in without a
    timestamp, don't count.
    """
    return {
        record.luma_event_id
        for record in records
        if record.status == AttendanceStatus.CHECKED_IN
        and record.checked_in_at is not None
    }


def calculate_streak(
    checked_in: Collection[str],
    started_events: Iterable[_EventLike],
    *,
    skip_canceled: bool = False,
) -> int:
    """Count the unbroken run of check-ins over *started_events*.

    Parameters
    ----------
    checked_in : Event ids the member checked into.
    started_events : Events that have started, **most recent first**.
    skip_canceled : Drop canceled events from the walk instead of letting
        them break the streak.  Off by default.

    Returns
    -------
    Non-negative streak count.
    """
    if not checked_in:
        return 0

    streak = 0
    for event in started_events:
        if skip_canceled and event.is_canceled:
            continue
        if event.luma_event_id not in checked_in:
            break
        streak += 1
    return streak
