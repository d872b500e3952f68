"""
tests/test_cli.py — ``python -m hacknight`` Command Tests
==========================================================
"""

from __future__ import annotations

import pytest
from sqlalchemy.orm import Session

import hacknight.__main__ as cli
from conftest import add_check_ins, add_member, add_weekly_events
from hacknight.database.models import Member


@pytest.fixture
def cli_engine(db_engine, monkeypatch, tmp_path):
    """Point the CLI at the in-memory engine and an empty working directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli, "create_db_engine", lambda: db_engine)
    return db_engine


def test_missing_database_url(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    assert cli.main(["seed-badges"]) == 1


def test_seed_badges(cli_engine):
    assert cli.main(["seed-badges"]) == 0
    assert cli.main(["seed-badges"]) == 0


def test_init_db(cli_engine):
    assert cli.main(["init-db"]) == 0


def test_recalc_streaks_without_config(cli_engine):
    ids = add_weekly_events(cli_engine, 2, canceled={0})
    member_id = add_member(cli_engine)
    add_check_ins(cli_engine, member_id, ids[1:])

    assert cli.main(["recalc-streaks"]) == 0
    with Session(cli_engine) as session:
        # Canceled event still counts as a miss by default
        assert session.get(Member, member_id).streak_count == 0


def test_recalc_streaks_reports_failures(cli_engine, monkeypatch):
    add_member(cli_engine)
    monkeypatch.setattr(
        cli,
        "recalculate_all_streaks",
        lambda engine, **kwargs: {"checked": 1, "updated": 0, "failed": 1, "failures": []},
    )
    assert cli.main(["recalc-streaks"]) == 1


def test_recalc_streaks_reads_config(cli_engine, monkeypatch, tmp_path):
    (tmp_path / "config.yaml").write_text(
        "community_name: Hack Night\nstreaks:\n  skip_canceled_events: true\n",
        encoding="utf-8",
    )
    seen: dict = {}

    def fake_recalc(engine, **kwargs):
        seen.update(kwargs)
        return {"checked": 0, "updated": 0, "failed": 0, "failures": []}

    monkeypatch.setattr(cli, "recalculate_all_streaks", fake_recalc)

    assert cli.main(["recalc-streaks"]) == 0
    assert seen == {"skip_canceled": True}


def test_unknown_command_exits():
    with pytest.raises(SystemExit):
        cli.main(["frobnicate"])
