"""Tests for the database layer."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from consolicalm import db
from consolicalm.models import FocusSessionCreate, StudyMode, TodoCreate


@pytest.fixture()
def conn(tmp_path: Path):
    """Provide a fresh database for each test."""
    db_path = tmp_path / "test.db"
    connection = db.get_connection(db_path=db_path, starting_points=240)
    yield connection
    connection.close()


class TestDayKey:
    def test_format(self) -> None:
        assert db.day_key(date(2024, 3, 7)) == 20240307


class TestLedger:
    def test_starting_balance(self, conn) -> None:
        assert db.get_points(conn) == 240

    def test_seeded_once(self, tmp_path: Path) -> None:
        path = tmp_path / "again.db"
        db.get_connection(db_path=path, starting_points=100).close()
        c = db.get_connection(db_path=path, starting_points=100)
        assert db.get_points(c) == 100
        c.close()

    def test_add_and_deduct(self, conn) -> None:
        db.add_points(conn, 10, "focus")
        db.deduct_points(conn, 5, "strike")
        assert db.get_points(conn) == 245

    def test_not_clamped(self, tmp_path: Path) -> None:
        c = db.get_connection(db_path=tmp_path / "low.db", starting_points=3)
        db.deduct_points(c, 10, "strike")
        assert db.get_points(c) == -7
        c.close()

    def test_history_most_recent_first(self, conn) -> None:
        db.add_points(conn, 2, "calm")
        entries = db.list_points(conn)
        assert entries[0].amount == 2
        assert entries[-1].reason == "starting balance"


class TestFocusSessions:
    def test_log_session_credits_points(self, conn) -> None:
        session = db.log_focus_session(
            conn, FocusSessionCreate(mode=StudyMode.POMODORO_25_5, duration_minutes=25)
        )
        assert session.id == 1
        assert session.mode == StudyMode.POMODORO_25_5
        assert db.get_points(conn) == 250

    def test_list_today(self, conn) -> None:
        db.log_focus_session(
            conn, FocusSessionCreate(mode=StudyMode.QUICKSTART_5_1, duration_minutes=5)
        )
        assert len(db.list_focus_sessions(conn, on=date.today())) == 1
        assert db.list_focus_sessions(conn, on=date(2020, 1, 1)) == []


class TestCalmProgress:
    def test_first_session_starts_streak(self, conn) -> None:
        progress = db.record_session_completed(conn, today=date(2024, 5, 1))
        assert progress.streak_count == 1
        assert progress.today_sessions_count == 1
        assert progress.last_completion_key == 20240501

    def test_same_day_keeps_streak(self, conn) -> None:
        db.record_session_completed(conn, today=date(2024, 5, 1))
        progress = db.record_session_completed(conn, today=date(2024, 5, 1))
        assert progress.streak_count == 1
        assert progress.today_sessions_count == 2

    def test_next_day_extends_streak(self, conn) -> None:
        db.record_session_completed(conn, today=date(2024, 5, 31))
        progress = db.record_session_completed(conn, today=date(2024, 6, 1))
        assert progress.streak_count == 2
        assert progress.today_sessions_count == 1

    def test_gap_resets_streak(self, conn) -> None:
        db.record_session_completed(conn, today=date(2024, 5, 1))
        db.record_session_completed(conn, today=date(2024, 5, 2))
        progress = db.record_session_completed(conn, today=date(2024, 5, 5))
        assert progress.streak_count == 1

    def test_challenge(self, conn) -> None:
        day = date(2024, 5, 1)
        assert not db.get_calm_progress(conn, today=day).challenge_done_today
        db.record_session_completed(conn, challenge=True, today=day)
        assert db.get_calm_progress(conn, today=day).challenge_done_today
        assert not db.get_calm_progress(conn, today=date(2024, 5, 2)).challenge_done_today

    def test_today_count_rolls_over_on_read(self, conn) -> None:
        db.record_session_completed(conn, today=date(2024, 5, 1))
        assert db.get_calm_progress(conn, today=date(2024, 5, 2)).today_sessions_count == 0


class TestTodos:
    def test_add_and_list(self, conn) -> None:
        item = db.add_todo(conn, TodoCreate(text="  Read chapter 3 "))
        assert item.text == "Read chapter 3"
        assert [t.id for t in db.list_todos(conn)] == [item.id]

    def test_done_and_filter(self, conn) -> None:
        a = db.add_todo(conn, TodoCreate(text="A"))
        db.add_todo(conn, TodoCreate(text="B"))
        db.set_todo_done(conn, a.id)
        open_items = db.list_todos(conn, include_done=False)
        assert [t.text for t in open_items] == ["B"]

    def test_edit_ignores_blank(self, conn) -> None:
        item = db.add_todo(conn, TodoCreate(text="Old"))
        assert db.edit_todo(conn, item.id, "   ").text == "Old"
        assert db.edit_todo(conn, item.id, "New").text == "New"

    def test_delete(self, conn) -> None:
        item = db.add_todo(conn, TodoCreate(text="Gone"))
        assert db.delete_todo(conn, item.id)
        assert not db.delete_todo(conn, item.id)
        assert db.get_todo(conn, item.id) is None


class TestStatus:
    def test_empty_status(self, conn) -> None:
        summary = db.get_status(conn)
        assert summary.points == 240
        assert summary.focus_sessions_today == 0
        assert summary.open_todos == []

    def test_status_with_activity(self, conn) -> None:
        db.log_focus_session(
            conn, FocusSessionCreate(mode=StudyMode.POMODORO_25_5, duration_minutes=25)
        )
        db.record_session_completed(conn)
        db.add_todo(conn, TodoCreate(text="Open"))

        summary = db.get_status(conn)
        assert summary.focus_sessions_today == 1
        assert summary.focus_minutes_today == 25
        assert summary.calm.streak_count == 1
        assert len(summary.open_todos) == 1


class TestRedeem:
    def test_redeem_within_balance(self, conn) -> None:
        entry = db.redeem_points(conn, 200, "gift card")
        assert entry is not None
        assert entry.amount == -200
        assert entry.reason == "redeemed: gift card"
        assert db.get_points(conn) == 40

    def test_redeem_exact_balance(self, conn) -> None:
        assert db.redeem_points(conn, 240) is not None
        assert db.get_points(conn) == 0

    def test_refused_when_short(self, conn) -> None:
        assert db.redeem_points(conn, 241) is None
        assert db.get_points(conn) == 240
        assert len(db.list_points(conn)) == 1

    def test_non_positive_cost(self, conn) -> None:
        with pytest.raises(ValueError):
            db.redeem_points(conn, 0)
