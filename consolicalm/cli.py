"""ConsoliCalm CLI -- focus sessions with a gentle lock, a coach and calm points."""

from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.logging import RichHandler

from consolicalm import checkin as checkin_mod
from consolicalm import coach, db, display, timer
from consolicalm.lock import LockCoordinator
from consolicalm.models import (
    CALM_CHALLENGE_POINTS,
    CALM_SESSION_POINTS,
    FocusSessionCreate,
    Mood,
    RootCause,
    StudyMode,
    TodoCreate,
)

app = typer.Typer(
    name="consolicalm",
    help="Calm focus sessions, a procrastination coach and a small reward economy.",
    no_args_is_help=True,
)
todo_app = typer.Typer(help="Manage your to-do list.", no_args_is_help=True)
app.add_typer(todo_app, name="todo")


def _conn() -> db.sqlite3.Connection:
    """Get a database connection (convenience wrapper)."""
    return db.get_connection()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Configure logging before any command runs."""
    from consolicalm import config as cfg

    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, cfg.load_config().log_level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=display.console, show_path=False)],
        force=True,
    )


# ---------------------------------------------------------------------------
# Focus sessions
# ---------------------------------------------------------------------------


@app.command()
def modes() -> None:
    """List the available study modes."""
    display.print_modes(list(StudyMode))


@app.command()
def focus(
    mode: str = typer.Argument(
        StudyMode.POMODORO_25_5.value, help="Study mode tag (see `consolicalm modes`)"
    ),
    cycles: Optional[int] = typer.Option(
        None, "--cycles", "-c", min=1, help="Stop after this many focus sessions"
    ),
) -> None:
    """Start a focus/break cycle. Ctrl-C during focus earns a strike."""
    try:
        study_mode = StudyMode.from_tag(mode)
    except ValueError as exc:
        display.print_warning(str(exc))
        raise typer.Exit(1)

    conn = _conn()
    focus_timer = timer.FocusTimer(study_mode)
    coordinator = LockCoordinator()
    coordinator.bind(focus_timer)
    coordinator.add_points_listener(
        lambda points: db.deduct_points(conn, points, "left focus mode")
    )

    def _on_session_complete(points: int) -> None:
        session_in = FocusSessionCreate(
            mode=study_mode, duration_minutes=study_mode.focus_minutes, points=points
        )
        db.log_focus_session(conn, session_in)
        display.print_success(f"Focus session logged. +{points} Calm Points")

    focus_timer.add_session_listener(_on_session_complete)

    display.print_info(f"{study_mode.label}: {study_mode.subtitle}")
    display.print_info("Stay with it. Leaving during focus (Ctrl-C) counts as a strike.")
    try:
        completed = timer.run_session(focus_timer, coordinator, max_focus_sessions=cycles)

        state = focus_timer.state
        display.print_info(
            f"{completed} focus session{'s' if completed != 1 else ''} completed. "
            f"Level {state.level} ({state.xp}/100 XP)."
        )
        display.print_info(f"Calm Points: {db.get_points(conn)}")
    finally:
        conn.close()


# ---------------------------------------------------------------------------
# Coach
# ---------------------------------------------------------------------------


@app.command(name="coach")
def coach_cmd(
    text: str = typer.Argument("", help="Why are you stuck? Messy is fine."),
    pick: Optional[str] = typer.Option(
        None, "--pick", "-p", help="Choose a root cause yourself, e.g. fatigue"
    ),
) -> None:
    """Find out why starting feels hard and get a tiny next step."""
    if pick is not None:
        try:
            cause = RootCause(pick.strip().lower().replace("-", "_"))
        except ValueError:
            valid = ", ".join(c.value for c in RootCause if c != RootCause.OTHER)
            display.print_warning(f"Unknown root cause '{pick}'. Use one of: {valid}")
            raise typer.Exit(1)
        result = coach.build_result(cause)
    else:
        result = coach.analyze(text)
    display.print_coach_result(result)


@app.command()
def checkin(
    mood: Mood = typer.Argument(
        ..., case_sensitive=False, help="How you feel: calm, okay, distracted or stressed"
    ),
    reason: str = typer.Argument(..., help="What's going on, in a sentence"),
) -> None:
    """Check in with your mood and get a three-step starter plan."""
    try:
        result = checkin_mod.generate_micro_step(mood, reason)
    except ValueError as exc:
        display.print_warning(str(exc))
        raise typer.Exit(1)
    display.print_checkin(result)

    conn = _conn()
    db.add_points(conn, result.points_reward, f"check-in ({mood.value})")
    conn.close()
    display.print_success(f"+{result.points_reward} Calm Points")


# ---------------------------------------------------------------------------
# Points & calm sessions
# ---------------------------------------------------------------------------


@app.command()
def points(
    history: bool = typer.Option(False, "--history", help="Show recent ledger entries"),
    redeem: Optional[int] = typer.Option(
        None, "--redeem", min=1, help="Spend this many points on a reward"
    ),
    reward: str = typer.Option("reward", "--for", help="What the points are spent on"),
) -> None:
    """Show your Calm Points, or spend them."""
    conn = _conn()
    if redeem is not None:
        entry = db.redeem_points(conn, redeem, reward)
        if entry is None:
            shortfall = redeem - db.get_points(conn)
            conn.close()
            display.print_warning(f"Need {shortfall} more points.")
            raise typer.Exit(1)
        display.print_success(f"Redeemed {redeem} points for {reward}.")
    display.print_success(f"Calm Points: {db.get_points(conn)}")
    if history:
        for entry in db.list_points(conn):
            when = entry.created_at.strftime("%Y-%m-%d %H:%M")
            display.print_info(f"  {when}  {entry.amount:+d}  {entry.reason}")
    conn.close()


@app.command(name="calm-done")
def calm_done(
    challenge: bool = typer.Option(False, "--challenge", help="This was today's calm challenge"),
) -> None:
    """Record a finished guided calm session."""
    conn = _conn()
    if challenge and db.get_calm_progress(conn).challenge_done_today:
        display.print_warning("Today's calm challenge is already completed.")
        conn.close()
        raise typer.Exit(1)

    progress = db.record_session_completed(conn, challenge=challenge)
    earned = CALM_CHALLENGE_POINTS if challenge else CALM_SESSION_POINTS
    db.add_points(conn, earned, "calm challenge" if challenge else "calm session")
    display.print_success(f"+{earned} Calm Points")
    display.print_info(
        f"Streak: {progress.streak_count} day{'s' if progress.streak_count != 1 else ''}, "
        f"{progress.today_sessions_count} session{'s' if progress.today_sessions_count != 1 else ''} today."
    )
    conn.close()


@app.command()
def status() -> None:
    """See how your day is going."""
    conn = _conn()
    summary = db.get_status(conn)
    display.print_status(summary)
    conn.close()


# ---------------------------------------------------------------------------
# To-do list
# ---------------------------------------------------------------------------


@todo_app.command("add")
def todo_add(text: str = typer.Argument(..., help="What do you need to do?")) -> None:
    """Add a to-do."""
    if not text.strip():
        display.print_warning("A to-do needs some text.")
        raise typer.Exit(1)
    conn = _conn()
    item = db.add_todo(conn, TodoCreate(text=text.strip()))
    display.print_success(f"Added #{item.id}: {item.text}")
    conn.close()


@todo_app.command("list")
def todo_list(
    all_items: bool = typer.Option(False, "--all", "-a", help="Include finished items"),
) -> None:
    """List your to-dos."""
    conn = _conn()
    display.print_todo_list(db.list_todos(conn, include_done=all_items))
    conn.close()


def _set_done(todo_id: int, done: bool) -> None:
    conn = _conn()
    item = db.set_todo_done(conn, todo_id, done)
    conn.close()
    if item is None:
        display.print_warning(f"To-do #{todo_id} not found.")
        raise typer.Exit(1)
    verb = "Done" if done else "Reopened"
    display.print_success(f"{verb}: {item.text}")


@todo_app.command("done")
def todo_done(todo_id: int = typer.Argument(..., help="ID of the to-do")) -> None:
    """Tick a to-do off."""
    _set_done(todo_id, True)


@todo_app.command("undo")
def todo_undo(todo_id: int = typer.Argument(..., help="ID of the to-do")) -> None:
    """Mark a finished to-do as open again."""
    _set_done(todo_id, False)


@todo_app.command("edit")
def todo_edit(
    todo_id: int = typer.Argument(..., help="ID of the to-do"),
    text: str = typer.Argument(..., help="New text"),
) -> None:
    """Change the text of a to-do."""
    conn = _conn()
    item = db.edit_todo(conn, todo_id, text)
    conn.close()
    if item is None:
        display.print_warning(f"To-do #{todo_id} not found.")
        raise typer.Exit(1)
    display.print_success(f"Updated #{item.id}: {item.text}")


@todo_app.command("remove")
def todo_remove(todo_id: int = typer.Argument(..., help="ID of the to-do")) -> None:
    """Delete a to-do."""
    conn = _conn()
    removed = db.delete_todo(conn, todo_id)
    conn.close()
    if not removed:
        display.print_warning(f"To-do #{todo_id} not found.")
        raise typer.Exit(1)
    display.print_success(f"Removed #{todo_id}.")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@app.command()
def config(
    db_path: Optional[str] = typer.Option(
        None, "--db-path",
        help="Set a custom database file path",
    ),
    reset: bool = typer.Option(False, "--reset", help="Reset to default local DB"),
    show: bool = typer.Option(False, "--show", help="Show current config"),
) -> None:
    """Configure where your data is stored."""
    from consolicalm import config as cfg

    if db_path:
        result = cfg.set_db_path(db_path)
        display.print_success(f"Database path set to: {result.db_path}")
    elif reset:
        cfg.reset_db_path()
        display.print_success("Reset to default local database.")
    elif show:
        current = cfg.load_config()
        if current.db_path:
            display.print_info(f"Database: {current.db_path}")
        else:
            display.print_info(f"Database: {cfg.get_db_path()} (default)")
        display.print_info(f"Starting points: {current.starting_points}")
        display.print_info(f"Log level: {current.log_level}")
    else:
        display.print_info("Use --db-path, --reset, or --show.")
