"""Rich terminal formatting helpers."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn, TimeRemainingColumn
from rich.table import Table
from rich.text import Text

from consolicalm.models import (
    CoachResult,
    MicroStepResult,
    RootCause,
    StatusSummary,
    StrikeOutcome,
    StudyMode,
    TodoItem,
)

console = Console()


def print_todo_list(items: list[TodoItem], title: str = "To-Do") -> None:
    """Print to-do items in a panel, open items first."""
    if not items:
        console.print(Panel("Nothing on your list.", title=title, border_style="dim"))
        return

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("status", width=3)
    table.add_column("id", width=5)
    table.add_column("text")

    for item in sorted(items, key=lambda i: i.done):
        table.add_row(
            "[x]" if item.done else "[ ]",
            f"#{item.id}",
            item.text,
            style="green" if item.done else "",
        )

    console.print(Panel(table, title=title, border_style="blue"))


def print_modes(modes: list[StudyMode]) -> None:
    """Print the available study modes."""
    table = Table(title="Study modes", border_style="blue")
    table.add_column("Tag", style="bold cyan")
    table.add_column("Mode")
    table.add_column("Focus", justify="right")
    table.add_column("Break", justify="right")
    for mode in modes:
        table.add_row(
            mode.value, mode.label, f"{mode.focus_minutes} min", f"{mode.break_minutes} min"
        )
    console.print(table)


def print_status(summary: StatusSummary) -> None:
    """Print the full status dashboard."""
    calm = summary.calm
    lines: list[str] = [
        f"Calm Points: {summary.points}",
        "",
        f"Focus sessions today: {summary.focus_sessions_today}",
        f"Focus time today: {summary.focus_minutes_today} min",
        "",
        f"Calm sessions today: {calm.today_sessions_count}",
        f"Streak: {calm.streak_count} day{'s' if calm.streak_count != 1 else ''}",
        f"Daily challenge: {'done' if calm.challenge_done_today else 'open'}",
    ]
    console.print(Panel("\n".join(lines), title="Status", border_style="green"))

    if summary.open_todos:
        print_todo_list(summary.open_todos, title="Open to-dos")


def print_coach_result(result: CoachResult) -> None:
    """Print a coach analysis with its suggested next steps."""
    headline = f"Likely root cause: {result.primary.label}"
    if result.secondary is not None:
        headline += f" + {result.secondary.label}"

    lines: list[str] = [
        f"[bold]{headline}[/bold]",
        f"[dim]Confidence: {result.confidence:.0%}[/dim]",
        "",
        result.explanation,
        "",
        "[bold]Try this:[/bold]",
    ]
    lines.extend(f"  - {action}" for action in result.micro_actions[:2])
    if result.recommended_mode is not None:
        lines.append("")
        lines.append(
            f"Recommended mode: {result.recommended_mode.label} "
            f"([cyan]{result.recommended_mode.value}[/cyan])"
        )
    console.print(Panel("\n".join(lines), title="Coach", border_style="magenta"))

    if result.primary == RootCause.OTHER:
        picks = ", ".join(c.value for c in RootCause if c != RootCause.OTHER)
        print_info(f"Pick what fits best: {picks}")


def print_checkin(result: MicroStepResult) -> None:
    """Print quick tips for the mood and the starter plan."""
    lines: list[str] = ["[bold]Quick tips[/bold]"]
    lines.extend(f"  - {tip}" for tip in result.tips)
    lines += ["", f"[bold]{result.title}[/bold]"]
    lines.extend(f"  {i}. {step}" for i, step in enumerate(result.steps, start=1))
    console.print(
        Panel("\n".join(lines), title=f"Check-in: {result.mood.label}", border_style="cyan")
    )


def print_strike(outcome: StrikeOutcome) -> None:
    """Show the focus-mode strike dialog."""
    style = "yellow" if outcome.strike <= 1 else "red"
    console.print(Panel(outcome.message or "", title="Focus Mode", border_style=style))


def print_nudge(message: str) -> None:
    """Print an encouragement message in a styled panel."""
    text = Text(message, justify="center")
    console.print(Panel(text, border_style="magenta", padding=(1, 4)))


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[blue]{message}[/blue]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]{message}[/yellow]")


def create_timer_progress() -> Progress:
    """Create a Rich progress bar for the timer."""
    return Progress(
        TextColumn("[bold blue]{task.description}"),
        BarColumn(bar_width=40),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TimeRemainingColumn(),
        console=console,
    )
