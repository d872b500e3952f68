"""
hacknight.services.streak_service — Streak Computation & Persistence
=====================================================================

Three entry points around the pure :func:`~hacknight.engine.streaks.calculate_streak`:

- :func:`calculate_member_streak` — read-only, against a :class:`Stores` bundle.
- :func:`update_member_streak` — recompute and write ``Member.streak_count``.
  This is the only writer of that column; the value can always be rebuilt
  from attendance + events.
- :func:`recalculate_all_streaks` — maintenance/backfill over every member.
  Each member gets its own session and its own error boundary.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy import Engine
from sqlalchemy.orm import Session

from hacknight.database.engine import get_session
from hacknight.database.stores import Stores
from hacknight.engine.streaks import calculate_streak, checked_in_event_ids
from hacknight.errors import MemberNotFoundError

logger = logging.getLogger(__name__)


def calculate_member_streak(
    stores: Stores,
    member_id: str,
    now: datetime | None = None,
    *,
    skip_canceled: bool = False,
) -> int:
    """Compute *member_id*'s current streak as of *now* (default: UTC now)."""
    checked_in = checked_in_event_ids(stores.attendance.get_by_member(member_id))
    if not checked_in:
        return 0

    now = now or datetime.now(UTC)
    started = stores.events.get_all(started_before=now, descending=True)
    if not started:
        return 0

    return calculate_streak(checked_in, started, skip_canceled=skip_canceled)


def get_streak_count(
    engine: Engine,
    member_id: str,
    now: datetime | None = None,
    *,
    skip_canceled: bool = False,
) -> int:
    """Compute the streak without touching the cached column."""
    with Session(engine) as session:
        return calculate_member_streak(
            Stores.for_session(session), member_id, now, skip_canceled=skip_canceled,
        )


def update_member_streak(
    engine: Engine,
    member_id: str,
    now: datetime | None = None,
    *,
    skip_canceled: bool = False,
) -> int:
    """Recompute the streak and store it on the member row.

    Raises :class:`MemberNotFoundError` for an unknown member; storage
    errors propagate.
    """
    with get_session(engine) as session:
        stores = Stores.for_session(session)
        if stores.members.get(member_id) is None:
            raise MemberNotFoundError(member_id)

        streak = calculate_member_streak(
            stores, member_id, now, skip_canceled=skip_canceled,
        )
        stores.members.set_streak_count(member_id, streak)

    logger.debug("Streak for member %s → %d", member_id, streak)
    return streak


def recalculate_all_streaks(
    engine: Engine,
    now: datetime | None = None,
    *,
    skip_canceled: bool = False,
) -> dict:
    """Recompute and persist the streak of every member.

    All members are evaluated against the same instant.  A failure for one
    member is logged and recorded; the loop moves on to the next.

    Returns ``{"checked": N, "updated": M, "failed": K, "failures": [...],
    "timestamp": ...}``.
    """
    now = now or datetime.now(UTC)

    with Session(engine) as session:
        member_ids = Stores.for_session(session).members.list_ids()

    updated = 0
    failures: list[dict] = []
    for member_id in member_ids:
        try:
            update_member_streak(engine, member_id, now, skip_canceled=skip_canceled)
        except Exception as exc:
            logger.exception("Streak recalculation failed for member %s", member_id)
            failures.append({"member_id": member_id, "error": str(exc)})
            continue
        updated += 1

    if failures:
        logger.warning(
            "Streak recalculation: updated %d/%d members, %d failed",
            updated, len(member_ids), len(failures),
        )
    else:
        logger.info("Streak recalculation: updated all %d members", updated)

    return {
        "checked": len(member_ids),
        "updated": updated,
        "failed": len(failures),
        "failures": failures,
        "timestamp": now.isoformat(),
    }
