"""SQLite database layer. All public functions return Pydantic models."""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Optional

from consolicalm.config import get_db_path as _config_get_db_path
from consolicalm.config import load_config
from consolicalm.models import (
    CalmProgress,
    FocusSession,
    FocusSessionCreate,
    PointsEntry,
    StatusSummary,
    StudyMode,
    TodoCreate,
    TodoItem,
)

log = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS points_ledger (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    amount      INTEGER NOT NULL,
    reason      TEXT    NOT NULL DEFAULT '',
    created_at  TEXT    NOT NULL
);

CREATE TABLE IF NOT EXISTS focus_sessions (
    id               INTEGER PRIMARY KEY AUTOINCREMENT,
    mode             TEXT    NOT NULL,
    duration_minutes INTEGER NOT NULL,
    points           INTEGER NOT NULL DEFAULT 0,
    completed_at     TEXT    NOT NULL
);

CREATE TABLE IF NOT EXISTS calm_progress (
    key    TEXT PRIMARY KEY,
    value  INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS todos (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    text        TEXT    NOT NULL,
    done        INTEGER NOT NULL DEFAULT 0,
    created_at  TEXT    NOT NULL
);
"""

_STARTING_BALANCE = "starting balance"


def _get_db_path() -> Path:
    """Return the database file path from config (or default)."""
    return _config_get_db_path()


def get_connection(
    db_path: Optional[Path] = None, starting_points: Optional[int] = None
) -> sqlite3.Connection:
    """Open a connection, ensure the schema exists and seed the ledger."""
    path = db_path or _get_db_path()
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.executescript(_SCHEMA)

    if starting_points is None:
        starting_points = load_config().starting_points
    seeded = conn.execute(
        "INSERT INTO points_ledger (amount, reason, created_at) "
        "SELECT ?, ?, ? WHERE NOT EXISTS (SELECT 1 FROM points_ledger)",
        (starting_points, _STARTING_BALANCE, datetime.now().isoformat()),
    )
    if seeded.rowcount:
        log.debug("Seeded points ledger with %d", starting_points)
    conn.commit()
    return conn


def day_key(d: date) -> int:
    """Stable day key: YYYYMMDD as an integer."""
    return d.year * 10000 + d.month * 100 + d.day


# ---------------------------------------------------------------------------
# Reward ledger
# ---------------------------------------------------------------------------


def _row_to_entry(row: sqlite3.Row) -> PointsEntry:
    return PointsEntry(
        id=row["id"],
        amount=row["amount"],
        reason=row["reason"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def add_points(conn: sqlite3.Connection, amount: int, reason: str = "") -> PointsEntry:
    """Credit (or, with a negative amount, debit) the ledger.

    Totals are not floored at zero: a penalty may take the balance negative.
    """
    cur = conn.execute(
        "INSERT INTO points_ledger (amount, reason, created_at) VALUES (?, ?, ?)",
        (amount, reason, datetime.now().isoformat()),
    )
    conn.commit()
    log.debug("Ledger %+d (%s)", amount, reason)
    row = conn.execute("SELECT * FROM points_ledger WHERE id = ?", (cur.lastrowid,)).fetchone()
    return _row_to_entry(row)


def deduct_points(conn: sqlite3.Connection, amount: int, reason: str = "") -> PointsEntry:
    """Debit *amount* points."""
    return add_points(conn, -abs(amount), reason)


def get_points(conn: sqlite3.Connection) -> int:
    """Current reward total."""
    row = conn.execute("SELECT COALESCE(SUM(amount), 0) AS total FROM points_ledger").fetchone()
    return row["total"]


def redeem_points(
    conn: sqlite3.Connection, cost: int, reason: str = "reward"
) -> Optional[PointsEntry]:
    """Spend *cost* points on a reward.

    Returns None, leaving the ledger untouched, when the balance is short.
    Unlike penalties, spending never takes the total below zero.
    """
    if cost <= 0:
        raise ValueError(f"Reward cost must be positive, got {cost}")
    balance = get_points(conn)
    if balance < cost:
        log.info("Cannot redeem %d points (%s): balance is %d", cost, reason, balance)
        return None
    return deduct_points(conn, cost, f"redeemed: {reason}")


def list_points(conn: sqlite3.Connection, limit: int = 20) -> list[PointsEntry]:
    """Most recent ledger entries first."""
    rows = conn.execute(
        "SELECT * FROM points_ledger ORDER BY id DESC LIMIT ?", (limit,)
    ).fetchall()
    return [_row_to_entry(r) for r in rows]


# ---------------------------------------------------------------------------
# Focus sessions
# ---------------------------------------------------------------------------


def _row_to_session(row: sqlite3.Row) -> FocusSession:
    """Convert a database row to a FocusSession model."""
    return FocusSession(
        id=row["id"],
        mode=StudyMode(row["mode"]),
        duration_minutes=row["duration_minutes"],
        points=row["points"],
        completed_at=datetime.fromisoformat(row["completed_at"]),
    )


def log_focus_session(
    conn: sqlite3.Connection, session_in: FocusSessionCreate
) -> FocusSession:
    """Record a completed focus phase and credit its points."""
    now = datetime.now().isoformat()
    cur = conn.execute(
        "INSERT INTO focus_sessions (mode, duration_minutes, points, completed_at) "
        "VALUES (?, ?, ?, ?)",
        (session_in.mode.value, session_in.duration_minutes, session_in.points, now),
    )
    conn.commit()
    if session_in.points:
        add_points(conn, session_in.points, f"focus session ({session_in.mode.value})")
    row = conn.execute(
        "SELECT * FROM focus_sessions WHERE id = ?", (cur.lastrowid,)
    ).fetchone()
    return _row_to_session(row)


def list_focus_sessions(conn: sqlite3.Connection, on: Optional[date] = None) -> list[FocusSession]:
    """Focus sessions, optionally limited to a single day."""
    query = "SELECT * FROM focus_sessions"
    params: list[str] = []
    if on is not None:
        query += " WHERE substr(completed_at, 1, 10) = ?"
        params.append(on.isoformat())
    query += " ORDER BY completed_at ASC"
    rows = conn.execute(query, params).fetchall()
    return [_row_to_session(r) for r in rows]


# ---------------------------------------------------------------------------
# Calm progress (streak / daily count / daily challenge)
# ---------------------------------------------------------------------------

_CALM_KEYS = (
    "streak_count",
    "last_completion_key",
    "today_sessions_key",
    "today_sessions_count",
    "challenge_completed_key",
)


def _get_calm_value(conn: sqlite3.Connection, key: str) -> int:
    row = conn.execute("SELECT value FROM calm_progress WHERE key = ?", (key,)).fetchone()
    return row["value"] if row else 0


def _set_calm_value(conn: sqlite3.Connection, key: str, value: int) -> None:
    conn.execute(
        "INSERT INTO calm_progress (key, value) VALUES (?, ?) "
        "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
        (key, value),
    )


def get_calm_progress(conn: sqlite3.Connection, today: Optional[date] = None) -> CalmProgress:
    """Read streak and today's counters."""
    today = today or date.today()
    values = {key: _get_calm_value(conn, key) for key in _CALM_KEYS}
    if values["today_sessions_key"] != day_key(today):
        values["today_sessions_count"] = 0
    return CalmProgress(
        **values,
        challenge_done_today=values["challenge_completed_key"] == day_key(today),
    )


def record_session_completed(
    conn: sqlite3.Connection, challenge: bool = False, today: Optional[date] = None
) -> CalmProgress:
    """Update streak and daily counts after any finished guided session.

    Same day keeps the streak, the day after extends it and any longer gap
    starts over at one. Today's count resets when the day key changes.
    """
    today = today or date.today()
    today_key = day_key(today)
    yesterday_key = day_key(today - timedelta(days=1))

    streak = _get_calm_value(conn, "streak_count")
    last = _get_calm_value(conn, "last_completion_key")

    if last == today_key:
        pass
    elif last == yesterday_key:
        _set_calm_value(conn, "streak_count", max(streak, 1) + 1)
        _set_calm_value(conn, "last_completion_key", today_key)
    else:
        _set_calm_value(conn, "streak_count", 1)
        _set_calm_value(conn, "last_completion_key", today_key)

    count = _get_calm_value(conn, "today_sessions_count")
    if _get_calm_value(conn, "today_sessions_key") != today_key:
        _set_calm_value(conn, "today_sessions_key", today_key)
        count = 0
    _set_calm_value(conn, "today_sessions_count", count + 1)

    if challenge:
        _set_calm_value(conn, "challenge_completed_key", today_key)

    conn.commit()
    return get_calm_progress(conn, today)


# ---------------------------------------------------------------------------
# To-do list
# ---------------------------------------------------------------------------


def _row_to_todo(row: sqlite3.Row) -> TodoItem:
    return TodoItem(
        id=row["id"],
        text=row["text"],
        done=bool(row["done"]),
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def add_todo(conn: sqlite3.Connection, todo_in: TodoCreate) -> TodoItem:
    """Insert a new to-do and return it."""
    cur = conn.execute(
        "INSERT INTO todos (text, done, created_at) VALUES (?, 0, ?)",
        (todo_in.text.strip(), datetime.now().isoformat()),
    )
    conn.commit()
    row = conn.execute("SELECT * FROM todos WHERE id = ?", (cur.lastrowid,)).fetchone()
    return _row_to_todo(row)


def get_todo(conn: sqlite3.Connection, todo_id: int) -> Optional[TodoItem]:
    row = conn.execute("SELECT * FROM todos WHERE id = ?", (todo_id,)).fetchone()
    return _row_to_todo(row) if row else None


def list_todos(conn: sqlite3.Connection, include_done: bool = True) -> list[TodoItem]:
    query = "SELECT * FROM todos"
    if not include_done:
        query += " WHERE done = 0"
    query += " ORDER BY id ASC"
    return [_row_to_todo(r) for r in conn.execute(query).fetchall()]


def set_todo_done(conn: sqlite3.Connection, todo_id: int, done: bool = True) -> Optional[TodoItem]:
    conn.execute("UPDATE todos SET done = ? WHERE id = ?", (int(done), todo_id))
    conn.commit()
    return get_todo(conn, todo_id)


def edit_todo(conn: sqlite3.Connection, todo_id: int, text: str) -> Optional[TodoItem]:
    """Replace the text of a to-do. Blank text leaves it unchanged."""
    if text.strip():
        conn.execute("UPDATE todos SET text = ? WHERE id = ?", (text.strip(), todo_id))
        conn.commit()
    return get_todo(conn, todo_id)


def delete_todo(conn: sqlite3.Connection, todo_id: int) -> bool:
    cur = conn.execute("DELETE FROM todos WHERE id = ?", (todo_id,))
    conn.commit()
    return cur.rowcount > 0


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------


def get_status(conn: sqlite3.Connection) -> StatusSummary:
    """Build the full status summary."""
    sessions = list_focus_sessions(conn, on=date.today())
    return StatusSummary(
        points=get_points(conn),
        focus_sessions_today=len(sessions),
        focus_minutes_today=sum(s.duration_minutes for s in sessions),
        calm=get_calm_progress(conn),
        open_todos=list_todos(conn, include_done=False),
    )
