"""Initial Hack Night schema

Members, events, attendance, badges and member_badges.  Attendance is
unique per (member, event); member_badges uses (member, badge) as its
primary key so a badge can only be granted once.

Revision ID: 5c2e9a17d4b3
Revises:
Create Date: 2026-01-26 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = "5c2e9a17d4b3"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "members",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("display_name", sa.String(100), nullable=True),
        sa.Column("luma_attendee_id", sa.String(100), nullable=True),
        sa.Column("streak_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_admin", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at", sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )

    op.create_table(
        "events",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("luma_event_id", sa.String(100), nullable=False, unique=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("start_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("location", sa.String(200), nullable=True),
        sa.Column("is_canceled", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column(
            "last_synced_at", sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_events_start_at", "events", ["start_at"])

    op.create_table(
        "attendance",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "member_id", sa.String(36),
            sa.ForeignKey("members.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("luma_event_id", sa.String(100), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="registered"),
        sa.Column("checked_in_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint(
            "member_id", "luma_event_id", name="uq_attendance_member_event",
        ),
        sa.CheckConstraint(
            "status IN ('registered', 'checked-in')", name="ck_attendance_status",
        ),
    )
    op.create_index("ix_attendance_event", "attendance", ["luma_event_id"])

    op.create_table(
        "badges",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("icon", sa.String(20), nullable=False),
        sa.Column("criteria", sa.Text, nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )

    op.create_table(
        "member_badges",
        sa.Column(
            "member_id", sa.String(36),
            sa.ForeignKey("members.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column(
            "badge_id", sa.String(36),
            sa.ForeignKey("badges.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column(
            "awarded_at", sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("member_id", "badge_id"),
    )


def downgrade() -> None:
    op.drop_table("member_badges")
    op.drop_table("badges")
    op.drop_index("ix_attendance_event", table_name="attendance")
    op.drop_table("attendance")
    op.drop_index("ix_events_start_at", table_name="events")
    op.drop_table("events")
    op.drop_table("members")
