"""
tests/test_stores.py — SQL Store Tests
=======================================
"""

from __future__ import annotations

from datetime import timedelta

from sqlalchemy import text
from sqlalchemy.orm import Session

from conftest import NOW, add_member, add_weekly_events
from hacknight.database.models import Attendance, AttendanceStatus, Event, Member
from hacknight.database.stores import SqlEventStore, SqlMemberStore


def _luma_ids(events) -> list[str]:
    return [e.luma_event_id for e in events]


class TestSqlEventStore:
    def _seed(self, engine) -> None:
        add_weekly_events(engine, 3)  # past
        add_weekly_events(engine, 2, latest=NOW + timedelta(weeks=2), prefix="next")

    def test_ascending_by_default(self, db_engine):
        self._seed(db_engine)
        with Session(db_engine) as session:
            events = SqlEventStore(session).get_all()
        assert _luma_ids(events) == ["evt-2", "evt-1", "evt-0", "next-1", "next-0"]

    def test_descending(self, db_engine):
        self._seed(db_engine)
        with Session(db_engine) as session:
            events = SqlEventStore(session).get_all(descending=True)
        assert _luma_ids(events) == ["next-0", "next-1", "evt-0", "evt-1", "evt-2"]

    def test_upcoming_only(self, db_engine):
        self._seed(db_engine)
        with Session(db_engine) as session:
            events = SqlEventStore(session).get_all(upcoming_only=True, now=NOW)
        assert _luma_ids(events) == ["next-1", "next-0"]

    def test_past_only(self, db_engine):
        self._seed(db_engine)
        with Session(db_engine) as session:
            events = SqlEventStore(session).get_all(past_only=True, now=NOW)
        assert _luma_ids(events) == ["evt-2", "evt-1", "evt-0"]

    def test_event_starting_now_is_upcoming_not_past(self, db_engine):
        add_weekly_events(db_engine, 1, latest=NOW)
        with Session(db_engine) as session:
            store = SqlEventStore(session)
            assert _luma_ids(store.get_all(upcoming_only=True, now=NOW)) == ["evt-0"]
            assert store.get_all(past_only=True, now=NOW) == []

    def test_started_before_is_inclusive(self, db_engine):
        add_weekly_events(db_engine, 2, latest=NOW)
        with Session(db_engine) as session:
            events = SqlEventStore(session).get_all(started_before=NOW, descending=True)
        assert _luma_ids(events) == ["evt-0", "evt-1"]


class TestSqlMemberStore:
    def test_list_ids_and_set_streak(self, db_engine):
        ada = add_member(db_engine, "ada@example.com")
        bob = add_member(db_engine, "bob@example.com")

        with Session(db_engine) as session:
            store = SqlMemberStore(session)
            assert set(store.list_ids()) == {ada, bob}
            store.set_streak_count(ada, 4)
            session.commit()

        with Session(db_engine) as session:
            assert SqlMemberStore(session).get(ada).streak_count == 4
            assert SqlMemberStore(session).get("ghost") is None


class TestServerDefaults:
    """Rows written outside the ORM get the same defaults as the migration."""

    def test_raw_insert_uses_column_server_defaults(self, db_engine):
        with Session(db_engine) as session:
            session.execute(text(
                "INSERT INTO members (id, email) VALUES ('m-raw', 'raw@example.com')"
            ))
            session.execute(text(
                "INSERT INTO events (id, luma_event_id, name, start_at) "
                "VALUES ('e-raw', 'evt-raw', 'Raw Night', '2026-03-05 19:00:00')"
            ))
            session.execute(text(
                "INSERT INTO attendance (id, member_id, luma_event_id) "
                "VALUES ('a-raw', 'm-raw', 'evt-raw')"
            ))
            session.commit()

            member = session.get(Member, "m-raw")
            assert member.streak_count == 0
            assert member.is_admin is False
            assert session.get(Event, "e-raw").is_canceled is False
            assert session.get(Attendance, "a-raw").status == AttendanceStatus.REGISTERED
