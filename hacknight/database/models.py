"""
hacknight.database.models — SQLAlchemy 2.0 Data Models
=======================================================

Tables:
- members        — Community member profiles (cached streak count)
- events         — Hack nights synced from the Luma calendar
- attendance     — One row per (member, event); registered → checked-in
- badges         — Milestone definitions (name is the natural key)
- member_badges  — Earned badges; one row per (member, badge)
"""

from __future__ import annotations

import enum
from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    false,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _new_id() -> str:
    return str(uuid4())


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all Hack Night ORM models."""


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class AttendanceStatus(enum.StrEnum):
    """Lifecycle of an attendance row.  Moves forward only."""
    REGISTERED = "registered"
    CHECKED_IN = "checked-in"


# ---------------------------------------------------------------------------
# Members — one row per community participant
# ---------------------------------------------------------------------------
class Member(Base):
    __tablename__ = "members"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    display_name: Mapped[str | None] = mapped_column(String(100), default=None)
    luma_attendee_id: Mapped[str | None] = mapped_column(String(100), default=None)
    # Derived from attendance + events; written only by streak_service
    streak_count: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0", nullable=False
    )
    is_admin: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    attendance: Mapped[list[Attendance]] = relationship(
        back_populates="member", cascade="all, delete-orphan"
    )
    badges: Mapped[list[MemberBadge]] = relationship(
        back_populates="member", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Member id={self.id} email={self.email!r} streak={self.streak_count}>"


# ---------------------------------------------------------------------------
# Events — hack nights, keyed externally by their Luma event id
# ---------------------------------------------------------------------------
class Event(Base):
    __tablename__ = "events"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    luma_event_id: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    start_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    location: Mapped[str | None] = mapped_column(String(200), default=None)
    is_canceled: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    last_synced_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        Index("ix_events_start_at", "start_at"),
    )

    def __repr__(self) -> str:
        return f"<Event luma={self.luma_event_id!r} start={self.start_at}>"


# ---------------------------------------------------------------------------
# Attendance — (member, event) join with check-in state
# ---------------------------------------------------------------------------
class Attendance(Base):
    __tablename__ = "attendance"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    member_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("members.id", ondelete="CASCADE"), nullable=False
    )
    # Not a FK: events may arrive from the calendar sync after registration
    luma_event_id: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AttendanceStatus.REGISTERED.value,
        server_default=AttendanceStatus.REGISTERED.value,
    )
    checked_in_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    member: Mapped[Member] = relationship(back_populates="attendance")

    __table_args__ = (
        UniqueConstraint("member_id", "luma_event_id", name="uq_attendance_member_event"),
        CheckConstraint(
            "status IN ('registered', 'checked-in')", name="ck_attendance_status",
        ),
        Index("ix_attendance_event", "luma_event_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Attendance member={self.member_id} event={self.luma_event_id!r} "
            f"status={self.status}>"
        )


# ---------------------------------------------------------------------------
# Badges — milestone definitions, seeded once
# ---------------------------------------------------------------------------
class Badge(Base):
    __tablename__ = "badges"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    icon: Mapped[str] = mapped_column(String(20), nullable=False)
    criteria: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    earned_by: Mapped[list[MemberBadge]] = relationship(
        back_populates="badge", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Badge id={self.id} name={self.name!r}>"


# ---------------------------------------------------------------------------
# MemberBadge — earned badges (composite PK = one grant per pair)
# ---------------------------------------------------------------------------
class MemberBadge(Base):
    __tablename__ = "member_badges"

    member_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("members.id", ondelete="CASCADE"), primary_key=True
    )
    badge_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("badges.id", ondelete="CASCADE"), primary_key=True
    )
    awarded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    member: Mapped[Member] = relationship(back_populates="badges")
    badge: Mapped[Badge] = relationship(back_populates="earned_by")

    def __repr__(self) -> str:
        return f"<MemberBadge member={self.member_id} badge={self.badge_id}>"
