"""Pydantic models -- single source of truth for all data types."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

FOCUS_SESSION_POINTS = 10
FOCUS_SESSION_XP = 25
XP_PER_LEVEL = 100

CALM_SESSION_POINTS = 2
CALM_CHALLENGE_POINTS = 5


class StudyMode(str, enum.Enum):
    """Available focus/break cycles."""

    POMODORO_25_5 = "pomodoro-25-5"
    DEEPWORK_60_10 = "deepwork-60-10"
    QUICKSTART_5_1 = "quickstart-5-1"

    @property
    def focus_minutes(self) -> int:
        return _MODE_TABLE[self][0]

    @property
    def break_minutes(self) -> int:
        return _MODE_TABLE[self][1]

    @property
    def label(self) -> str:
        return _MODE_TABLE[self][2]

    @property
    def subtitle(self) -> str:
        return _MODE_TABLE[self][3]

    @property
    def focus_seconds(self) -> int:
        return self.focus_minutes * 60

    @property
    def break_seconds(self) -> int:
        return self.break_minutes * 60

    @classmethod
    def from_tag(cls, tag: str) -> StudyMode:
        """Resolve a tag such as ``pomodoro-25-5`` or ``POMODORO_25_5``."""
        cleaned = tag.strip().lower().replace("_", "-")
        try:
            return cls(cleaned)
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown study mode '{tag}'. Choose one of: {valid}") from None


# tag -> (focus minutes, break minutes, label, subtitle)
_MODE_TABLE: dict[StudyMode, tuple[int, int, str, str]] = {
    StudyMode.POMODORO_25_5: (
        25, 5, "Pomodoro 25 / 5", "25 min focus -> 5 min break -> repeat",
    ),
    StudyMode.DEEPWORK_60_10: (
        60, 10, "Deep Work 60 / 10", "60 min focus -> 10 min break -> repeat",
    ),
    StudyMode.QUICKSTART_5_1: (
        5, 1, "Quick Start 5 / 1", "5 min focus -> 1 min break -> build momentum",
    ),
}


class Phase(str, enum.Enum):
    """Which half of a study cycle is on the clock."""

    FOCUS = "focus"
    BREAK = "break"


class TimerStatus(str, enum.Enum):
    """Combined phase + running flag, as exposed to the UI."""

    FOCUS_RUNNING = "focus_running"
    FOCUS_PAUSED = "focus_paused"
    BREAK_RUNNING = "break_running"
    BREAK_PAUSED = "break_paused"


class FocusSessionState(BaseModel):
    """Countdown state for one focus/break cycle. Owned by FocusTimer."""

    mode: StudyMode
    phase: Phase = Phase.FOCUS
    remaining_seconds: int = Field(ge=0)
    running: bool = False
    sessions_completed_this_run: int = Field(default=0, ge=0)
    xp: int = Field(default=0, ge=0, lt=XP_PER_LEVEL)
    level: int = Field(default=1, ge=1)

    @property
    def status(self) -> TimerStatus:
        if self.phase == Phase.FOCUS:
            return TimerStatus.FOCUS_RUNNING if self.running else TimerStatus.FOCUS_PAUSED
        return TimerStatus.BREAK_RUNNING if self.running else TimerStatus.BREAK_PAUSED

    @property
    def total_seconds(self) -> int:
        if self.phase == Phase.FOCUS:
            return self.mode.focus_seconds
        return self.mode.break_seconds

    @property
    def progress(self) -> float:
        """Fraction of the current phase already elapsed, clamped to [0, 1]."""
        raw = 1.0 - self.remaining_seconds / self.total_seconds
        return min(max(raw, 0.0), 1.0)

    @property
    def running_focus(self) -> bool:
        return self.running and self.phase == Phase.FOCUS

    @property
    def running_break(self) -> bool:
        return self.running and self.phase == Phase.BREAK


class AppTab(str, enum.Enum):
    """Top-level destinations the user can navigate between."""

    HOME = "home"
    STUDY = "study"
    TODO = "todo"
    CALM = "calm"
    REWARDS = "rewards"


class LockState(BaseModel):
    """Strike counter plus the last focus signal seen by the coordinator."""

    strike_count: int = Field(default=0, ge=0)
    running_focus: bool = False
    running_break: bool = False

    @property
    def locked(self) -> bool:
        return self.running_focus and not self.running_break


class StrikeOutcome(BaseModel):
    """What happened to a single navigation attempt."""

    allowed: bool
    destination: AppTab
    strike: int = Field(default=0, ge=0)
    points_deducted: int = Field(default=0, ge=0)
    paused_timer: bool = False
    message: Optional[str] = None


class RootCause(str, enum.Enum):
    """Why someone reports being stuck on a task."""

    FATIGUE = "fatigue"
    OVERLOAD = "overload"
    AVOIDANCE = "avoidance"
    PERFECTIONISM = "perfectionism"
    LACK_OF_CLARITY = "lack_of_clarity"
    DISTRACTION = "distraction"
    LOW_MOTIVATION = "low_motivation"
    TIME_PRESSURE = "time_pressure"
    OTHER = "other"

    @property
    def label(self) -> str:
        return _ROOT_CAUSE_LABELS[self]


_ROOT_CAUSE_LABELS: dict[RootCause, str] = {
    RootCause.FATIGUE: "Fatigue / low energy",
    RootCause.OVERLOAD: "Mental overload",
    RootCause.AVOIDANCE: "Avoidance / anxiety",
    RootCause.PERFECTIONISM: "Perfectionism",
    RootCause.LACK_OF_CLARITY: "Lack of clarity",
    RootCause.DISTRACTION: "Distractions / environment",
    RootCause.LOW_MOTIVATION: "Low motivation / boredom",
    RootCause.TIME_PRESSURE: "Time pressure / overwhelm",
    RootCause.OTHER: "Other / not sure",
}


class CoachResult(BaseModel):
    """Outcome of a procrastination analysis."""

    primary: RootCause
    secondary: Optional[RootCause] = None
    confidence: float = Field(ge=0.0, le=1.0)
    explanation: str
    micro_actions: list[str] = Field(default_factory=list)
    recommended_mode: Optional[StudyMode] = None


class Mood(str, enum.Enum):
    """How someone feels when they check in."""

    CALM = "calm"
    OKAY = "okay"
    DISTRACTED = "distracted"
    STRESSED = "stressed"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class MicroStepResult(BaseModel):
    """A three-step starter plan offered after a mood check-in."""

    mood: Mood
    title: str
    steps: list[str] = Field(min_length=1)
    tips: list[str] = Field(default_factory=list)
    points_reward: int = Field(ge=0)


class PointsEntry(BaseModel):
    """One credit or debit in the reward ledger."""

    id: int
    amount: int
    reason: str = ""
    created_at: datetime = Field(default_factory=datetime.now)


class FocusSession(BaseModel):
    """A completed focus phase."""

    id: int
    mode: StudyMode
    duration_minutes: int = Field(gt=0)
    points: int = Field(ge=0)
    completed_at: datetime = Field(default_factory=datetime.now)


class FocusSessionCreate(BaseModel):
    """Input model for logging a focus phase."""

    mode: StudyMode
    duration_minutes: int = Field(gt=0, le=120)
    points: int = Field(default=FOCUS_SESSION_POINTS, ge=0)


class CalmProgress(BaseModel):
    """Streak and daily counters for guided calm sessions."""

    streak_count: int = Field(default=0, ge=0)
    last_completion_key: int = Field(default=0, ge=0)
    today_sessions_key: int = Field(default=0, ge=0)
    today_sessions_count: int = Field(default=0, ge=0)
    challenge_completed_key: int = Field(default=0, ge=0)
    challenge_done_today: bool = False


class TodoItem(BaseModel):
    """A single to-do entry."""

    id: int
    text: str
    done: bool = False
    created_at: datetime = Field(default_factory=datetime.now)


class TodoCreate(BaseModel):
    """Input model for creating a to-do."""

    text: str = Field(min_length=1, max_length=500)


class StatusSummary(BaseModel):
    """Dashboard data for the status command."""

    points: int
    focus_sessions_today: int = Field(default=0, ge=0)
    focus_minutes_today: int = Field(default=0, ge=0)
    calm: CalmProgress = Field(default_factory=CalmProgress)
    open_todos: list[TodoItem] = Field(default_factory=list)


class AppConfig(BaseModel):
    """Application configuration (persisted to ~/.config/consolicalm/config.json)."""

    db_path: Optional[str] = None  # None = use default (~/.local/share/consolicalm/)
    starting_points: int = Field(default=240, ge=0)
    log_level: str = "WARNING"
