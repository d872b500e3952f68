"""
hacknight.database.stores — Store Interfaces & SQLAlchemy Implementations
==========================================================================

The streak and badge services never build queries themselves.  They talk
to four narrow stores, each declared as a :class:`typing.Protocol` so tests
(or another backend) can substitute their own:

- :class:`AttendanceStore` — a member's attendance rows and check-in count
- :class:`EventStore`      — events filtered by start time
- :class:`BadgeStore`      — badge definitions and grants
- :class:`MemberStore`     — member lookup and the cached streak count

The ``Sql*`` classes implement them against a single :class:`Session`, so
every read made during one calculation sees the same transaction.

Uniqueness on (member, event) and (member, badge) is enforced by the
schema.  :meth:`SqlBadgeStore.grant` runs its insert inside a SAVEPOINT and
turns an ``IntegrityError`` into ``None`` — a concurrent writer already
granted the badge, which is the outcome the caller wanted anyway.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hacknight.database.models import (
    Attendance,
    AttendanceStatus,
    Badge,
    Event,
    Member,
    MemberBadge,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Interfaces
# ---------------------------------------------------------------------------
class AttendanceStore(Protocol):
    def get_by_member(self, member_id: str) -> list[Attendance]: ...

    def get_checked_in_count_by_member(self, member_id: str) -> int: ...


class EventStore(Protocol):
    def get_all(
        self,
        *,
        upcoming_only: bool = False,
        past_only: bool = False,
        started_before: datetime | None = None,
        descending: bool = False,
        now: datetime | None = None,
    ) -> list[Event]: ...


class BadgeStore(Protocol):
    def get_by_name(self, name: str) -> Badge | None: ...

    def get_by_names(self, names: Iterable[str]) -> dict[str, Badge]: ...

    def has_badge(self, member_id: str, badge_id: str) -> bool: ...

    def held_badge_ids(self, member_id: str) -> set[str]: ...

    def grant(self, member_id: str, badge_id: str) -> MemberBadge | None: ...


class MemberStore(Protocol):
    def get(self, member_id: str) -> Member | None: ...

    def list_ids(self) -> list[str]: ...

    def set_streak_count(self, member_id: str, count: int) -> None: ...


# ---------------------------------------------------------------------------
# SQLAlchemy implementations
# ---------------------------------------------------------------------------
class SqlAttendanceStore:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_member(self, member_id: str) -> list[Attendance]:
        return list(self.session.scalars(
            select(Attendance)
            .where(Attendance.member_id == member_id)
            .order_by(Attendance.created_at.desc())
        ).all())

    def get_checked_in_count_by_member(self, member_id: str) -> int:
        return self.session.scalar(
            select(func.count())
            .select_from(Attendance)
            .where(
                Attendance.member_id == member_id,
                Attendance.status == AttendanceStatus.CHECKED_IN.value,
            )
        ) or 0


class SqlEventStore:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_all(
        self,
        *,
        upcoming_only: bool = False,
        past_only: bool = False,
        started_before: datetime | None = None,
        descending: bool = False,
        now: datetime | None = None,
    ) -> list[Event]:
        """Return events ordered by ``start_at``.

        ``upcoming_only`` keeps ``start_at >= now``, ``past_only`` keeps
        ``start_at < now`` (*now* defaults to the wall clock), and
        ``started_before`` keeps ``start_at <= t``
        (events already under way at *t* count as started).
        """
        q = select(Event)
        now = now or datetime.now(UTC)
        if upcoming_only:
            q = q.where(Event.start_at >= now)
        if past_only:
            q = q.where(Event.start_at < now)
        if started_before is not None:
            q = q.where(Event.start_at <= started_before)

        if descending:
            q = q.order_by(Event.start_at.desc(), Event.id.desc())
        else:
            q = q.order_by(Event.start_at.asc(), Event.id.asc())
        return list(self.session.scalars(q).all())


class SqlBadgeStore:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_name(self, name: str) -> Badge | None:
        return self.session.scalar(select(Badge).where(Badge.name == name))

    def get_by_names(self, names: Iterable[str]) -> dict[str, Badge]:
        """Resolve several definitions in one round-trip, keyed by name."""
        names = list(names)
        if not names:
            return {}
        rows = self.session.scalars(select(Badge).where(Badge.name.in_(names))).all()
        return {badge.name: badge for badge in rows}

    def has_badge(self, member_id: str, badge_id: str) -> bool:
        return self.session.scalar(
            select(MemberBadge.badge_id).where(
                MemberBadge.member_id == member_id,
                MemberBadge.badge_id == badge_id,
            )
        ) is not None

    def held_badge_ids(self, member_id: str) -> set[str]:
        rows = self.session.scalars(
            select(MemberBadge.badge_id).where(MemberBadge.member_id == member_id)
        ).all()
        return set(rows)

    def grant(self, member_id: str, badge_id: str) -> MemberBadge | None:
        """Insert a grant row; ``None`` if the pair already exists."""
        grant = MemberBadge(
            member_id=member_id,
            badge_id=badge_id,
            awarded_at=datetime.now(UTC),
        )
        try:
            with self.session.begin_nested():   # SAVEPOINT
                self.session.add(grant)
                self.session.flush()
        except IntegrityError:
            # Another writer got there first.  The SAVEPOINT was rolled
            # back; the outer transaction is still alive.
            logger.info(
                "Badge %s already granted to member %s — skipping",
                badge_id, member_id,
            )
            return None
        return grant


class SqlMemberStore:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, member_id: str) -> Member | None:
        return self.session.get(Member, member_id)

    def list_ids(self) -> list[str]:
        return list(self.session.scalars(
            select(Member.id).order_by(Member.created_at, Member.id)
        ).all())

    def set_streak_count(self, member_id: str, count: int) -> None:
        self.session.execute(
            update(Member).where(Member.id == member_id).values(streak_count=count)
        )


# ---------------------------------------------------------------------------
# Bundle
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class Stores:
    """The four stores a calculation needs, usually bound to one session."""

    attendance: AttendanceStore
    events: EventStore
    badges: BadgeStore
    members: MemberStore

    @classmethod
    def for_session(cls, session: Session) -> Stores:
        return cls(
            attendance=SqlAttendanceStore(session),
            events=SqlEventStore(session),
            badges=SqlBadgeStore(session),
            members=SqlMemberStore(session),
        )
