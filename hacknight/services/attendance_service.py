"""
hacknight.services.attendance_service — Registration & Check-in Flow
=====================================================================

Attendance rows are unique per (member, event).  Both writers here —
:func:`register_for_event` and :func:`check_in` — insert under a SAVEPOINT
and, when the unique constraint rejects a concurrent duplicate, re-read
the winning row instead of failing.  Checking in twice is a no-op: the
existing row, status and timestamp are returned untouched.

:func:`process_check_in` is the full pipeline behind ``POST /api/check-in``:

1. Validate member and event (``MemberNotFoundError`` / ``EventNotFoundError``)
2. Record the check-in and commit
3. Best-effort Luma guest update
4. Recompute the member's streak
5. Award milestone badges

Once step 2 commits the check-in has succeeded.  Failures in steps 3–5 are
logged and reflected in the result, never raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Engine, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hacknight.database.models import (
    Attendance,
    AttendanceStatus,
    Badge,
    Event,
    Member,
)
from hacknight.errors import EventNotFoundError, MemberNotFoundError
from hacknight.services.badge_service import award_badges_for_member
from hacknight.services.streak_service import update_member_streak

if TYPE_CHECKING:
    from hacknight.services.luma_client import LumaClient

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CheckInResult:
    """Outcome of :func:`process_check_in`."""

    attendance: Attendance
    already_checked_in: bool
    streak_count: int = 0
    awarded_badges: list[Badge] = field(default_factory=list)
    luma_updated: bool = False


def get_attendance(session: Session, member_id: str, luma_event_id: str) -> Attendance | None:
    return session.scalar(
        select(Attendance).where(
            Attendance.member_id == member_id,
            Attendance.luma_event_id == luma_event_id,
        )
    )


def _insert_once(session: Session, record: Attendance) -> Attendance:
    """Insert *record*, or return the row a concurrent writer inserted."""
    try:
        with session.begin_nested():   # SAVEPOINT
            session.add(record)
            session.flush()
        return record
    except IntegrityError:
        existing = get_attendance(session, record.member_id, record.luma_event_id)
        if existing is None:
            raise
        logger.info(
            "Attendance for member %s / event %s already exists — reusing",
            record.member_id, record.luma_event_id,
        )
        return existing


# ---------------------------------------------------------------------------
# Writers
# ---------------------------------------------------------------------------
def register_for_event(engine: Engine, member_id: str, luma_event_id: str) -> Attendance:
    """Create a ``registered`` row, or return the existing one unchanged."""
    with Session(engine, expire_on_commit=False) as session:
        existing = get_attendance(session, member_id, luma_event_id)
        if existing is not None:
            return existing

        record = _insert_once(session, Attendance(
            member_id=member_id,
            luma_event_id=luma_event_id,
            status=AttendanceStatus.REGISTERED.value,
        ))
        session.commit()
        return record


def check_in(
    session: Session,
    member_id: str,
    luma_event_id: str,
    now: datetime | None = None,
) -> tuple[Attendance, bool]:
    """Mark the member checked in.  Returns ``(attendance, already_checked_in)``.

    A missing row is created directly in ``checked-in`` state; a
    ``registered`` row is promoted.  A ``checked-in`` row with no
    ``checked_in_at`` (which would never count toward a streak) gets the
    timestamp and is reported as a fresh check-in.  The promotion is a
    conditional UPDATE, so of two racing requests only one sets the
    timestamp.  The caller owns the transaction.
    """
    now = now or datetime.now(UTC)

    record = get_attendance(session, member_id, luma_event_id)
    if record is None:
        created = Attendance(
            member_id=member_id,
            luma_event_id=luma_event_id,
            status=AttendanceStatus.CHECKED_IN.value,
            checked_in_at=now,
        )
        record = _insert_once(session, created)
        if record is created:
            return record, False

    if record.status == AttendanceStatus.CHECKED_IN and record.checked_in_at is not None:
        return record, True

    result = session.execute(
        update(Attendance)
        .where(
            Attendance.id == record.id,
            or_(
                Attendance.status != AttendanceStatus.CHECKED_IN.value,
                Attendance.checked_in_at.is_(None),
            ),
        )
        .values(status=AttendanceStatus.CHECKED_IN.value, checked_in_at=now)
    )
    session.refresh(record)
    return record, result.rowcount == 0


def process_check_in(
    engine: Engine,
    member_id: str,
    luma_event_id: str,
    *,
    luma_attendee_id: str | None = None,
    now: datetime | None = None,
    skip_canceled: bool = False,
    luma_client: LumaClient | None = None,
) -> CheckInResult:
    """Check a member in, then refresh their streak and badges.

    Streak and badges are recomputed even on a repeated check-in — both are
    idempotent, and it repairs state left behind by an earlier attempt that
    failed after the attendance write.
    """
    now = now or datetime.now(UTC)

    with Session(engine, expire_on_commit=False) as session:
        member = session.get(Member, member_id)
        if member is None:
            raise MemberNotFoundError(member_id)
        event = session.scalar(select(Event).where(Event.luma_event_id == luma_event_id))
        if event is None:
            raise EventNotFoundError(luma_event_id)

        attendance, already = check_in(session, member_id, luma_event_id, now)
        session.commit()
        attendee_id = luma_attendee_id or member.luma_attendee_id

    result = CheckInResult(attendance=attendance, already_checked_in=already)
    if already:
        logger.info("Member %s already checked in to %s", member_id, luma_event_id)
    else:
        logger.info("Member %s checked in to %s", member_id, luma_event_id)

    if not already and luma_client is not None and attendee_id:
        result.luma_updated = luma_client.update_guest_check_in(luma_event_id, attendee_id)
        if not result.luma_updated:
            logger.warning(
                "Check-in recorded locally but Luma API update failed for %s",
                luma_event_id,
            )

    try:
        result.streak_count = update_member_streak(
            engine, member_id, now, skip_canceled=skip_canceled,
        )
    except Exception:
        logger.exception("Error updating streak count for member %s", member_id)

    try:
        result.awarded_badges = award_badges_for_member(
            engine, member_id, result.streak_count,
        )
    except Exception:
        logger.exception("Error awarding badges to member %s", member_id)

    return result


# ---------------------------------------------------------------------------
# Readers
# ---------------------------------------------------------------------------
def get_check_in_history(engine: Engine, member_id: str) -> list[dict]:
    """Checked-in attendance joined to its event, most recent event first.

    Records whose event is no longer in the ``events`` table are left out.
    """
    with Session(engine) as session:
        rows = session.execute(
            select(Attendance, Event)
            .join(Event, Event.luma_event_id == Attendance.luma_event_id)
            .where(
                Attendance.member_id == member_id,
                Attendance.status == AttendanceStatus.CHECKED_IN.value,
                Attendance.checked_in_at.isnot(None),
            )
            .order_by(Event.start_at.desc())
        ).all()
        return [
            {
                "id": attendance.id,
                "checked_in_at": attendance.checked_in_at.isoformat(),
                "event": {
                    "id": event.id,
                    "luma_event_id": event.luma_event_id,
                    "name": event.name,
                    "start_at": event.start_at.isoformat(),
                    "location": event.location,
                },
            }
            for attendance, event in rows
        ]


def get_event_attendance_counts(engine: Engine, luma_event_id: str) -> dict[str, int]:
    """``{"registered": n, "checked_in": m}`` for one event."""
    with Session(engine) as session:
        rows = session.execute(
            select(Attendance.status, func.count().label("cnt"))
            .where(Attendance.luma_event_id == luma_event_id)
            .group_by(Attendance.status)
        ).all()

    counts = {"registered": 0, "checked_in": 0}
    for row in rows:
        if row.status == AttendanceStatus.REGISTERED:
            counts["registered"] = row.cnt
        elif row.status == AttendanceStatus.CHECKED_IN:
            counts["checked_in"] = row.cnt
    return counts
