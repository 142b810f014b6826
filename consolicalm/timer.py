"""Focus timer: the focus/break countdown state machine and its ticker."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable, Optional

from rich.progress import Progress, TaskID

from consolicalm.display import console, create_timer_progress, print_nudge, print_strike
from consolicalm.encouragement import get_break_message, get_nudge
from consolicalm.models import (
    FOCUS_SESSION_POINTS,
    FOCUS_SESSION_XP,
    XP_PER_LEVEL,
    AppTab,
    FocusSessionState,
    Phase,
    StudyMode,
    TimerStatus,
)

if TYPE_CHECKING:
    from consolicalm.lock import LockCoordinator

log = logging.getLogger(__name__)

SessionCompleteListener = Callable[[int], None]
FocusStateListener = Callable[[bool, bool], None]


class FocusTimer:
    """Owns the countdown for one study mode.

    States are FOCUS_RUNNING, FOCUS_PAUSED, BREAK_RUNNING and BREAK_PAUSED;
    a new timer starts in FOCUS_PAUSED with the full focus duration. All
    mutation goes through the transition methods below. Listeners are told
    about finished focus phases (``on_session_complete(points)``) and about
    every change of phase or running flag
    (``on_focus_state_changed(running_focus, running_break)``).
    """

    def __init__(
        self,
        mode: StudyMode,
        points_per_session: int = FOCUS_SESSION_POINTS,
        pause_token: int = 0,
    ) -> None:
        self.mode = mode
        self.points_per_session = points_per_session
        self.state = FocusSessionState(mode=mode, remaining_seconds=mode.focus_seconds)
        self._session_listeners: list[SessionCompleteListener] = []
        self._state_listeners: list[FocusStateListener] = []
        self._last_pause_token = pause_token

    # -- read-only views ------------------------------------------------

    @property
    def running(self) -> bool:
        return self.state.running

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def remaining_seconds(self) -> int:
        return self.state.remaining_seconds

    @property
    def status(self) -> TimerStatus:
        return self.state.status

    # -- listeners ------------------------------------------------------

    def add_session_listener(self, listener: SessionCompleteListener) -> None:
        self._session_listeners.append(listener)

    def add_state_listener(self, listener: FocusStateListener) -> None:
        self._state_listeners.append(listener)

    # -- transitions ----------------------------------------------------

    def start(self) -> None:
        """``*_PAUSED -> *_RUNNING`` in the same phase."""
        if self.state.running:
            return
        self._update(running=True)

    def pause(self) -> None:
        """``*_RUNNING -> *_PAUSED`` in the same phase."""
        if not self.state.running:
            return
        self._update(running=False)

    def toggle(self) -> None:
        if self.state.running:
            self.pause()
        else:
            self.start()

    def force_pause(self) -> None:
        """Pause on behalf of the lock coordinator. Nothing else changes."""
        if self.state.running:
            log.info("Timer force-paused in %s phase", self.state.phase.value)
        self.pause()

    def observe_pause_token(self, token: int) -> bool:
        """Force a pause when *token* has moved past the last one seen.

        Edge-triggered: observing the same token again does nothing.
        Returns True if a pause was requested.
        """
        if token <= self._last_pause_token:
            return False
        self._last_pause_token = token
        self.force_pause()
        return True

    def tick(self) -> None:
        """Apply one elapsed second. Ignored while paused."""
        if not self.state.running:
            return
        if self.state.remaining_seconds > 0:
            self.state.remaining_seconds -= 1
        if self.state.remaining_seconds == 0:
            self._complete_phase()

    def restart(self) -> None:
        """Back to FOCUS_PAUSED with a full focus duration and no sessions."""
        self.state.sessions_completed_this_run = 0
        self._update(
            running=False,
            phase=Phase.FOCUS,
            remaining_seconds=self.mode.focus_seconds,
        )

    # -- internals ------------------------------------------------------

    def _complete_phase(self) -> None:
        if self.state.phase == Phase.FOCUS:
            self.state.sessions_completed_this_run += 1
            self._add_xp(FOCUS_SESSION_XP)
            log.info(
                "Focus phase complete (%d this run), awarding %d points",
                self.state.sessions_completed_this_run,
                self.points_per_session,
            )
            # Phase flips before any listener runs.
            self._update(phase=Phase.BREAK, remaining_seconds=self.mode.break_seconds)
            for listener in list(self._session_listeners):
                listener(self.points_per_session)
        else:
            log.info("Break complete, back to focus")
            self._update(phase=Phase.FOCUS, remaining_seconds=self.mode.focus_seconds)

    def _add_xp(self, amount: int) -> None:
        xp = self.state.xp + amount
        while xp >= XP_PER_LEVEL:
            xp -= XP_PER_LEVEL
            self.state.level += 1
        self.state.xp = xp

    def _update(
        self,
        running: Optional[bool] = None,
        phase: Optional[Phase] = None,
        remaining_seconds: Optional[int] = None,
    ) -> None:
        before = (self.state.running, self.state.phase)
        if running is not None:
            self.state.running = running
        if phase is not None:
            self.state.phase = phase
        if remaining_seconds is not None:
            self.state.remaining_seconds = remaining_seconds
        if (self.state.running, self.state.phase) != before:
            log.debug("Timer now %s", self.state.status.value)
            for listener in list(self._state_listeners):
                listener(self.state.running_focus, self.state.running_break)


def _phase_label(timer: FocusTimer) -> str:
    if timer.phase == Phase.FOCUS:
        return f"Focus - {timer.mode.label}"
    return "Break"


def run_session(
    timer: FocusTimer,
    coordinator: Optional[LockCoordinator] = None,
    max_focus_sessions: Optional[int] = None,
) -> int:
    """Drive *timer* once per second until it stops running.

    Each loop sleeps about a second, then checks that the timer is still
    running before applying exactly one tick, so a pause never leads to an
    extra decrement. Ctrl-C counts as an attempt to leave the timer and is
    routed through *coordinator* when one is given. Returns the number of
    focus phases completed during this call.
    """
    completed_before = timer.state.sessions_completed_this_run
    progress = create_timer_progress()
    timer.start()

    with progress:
        task = progress.add_task(_phase_label(timer), total=timer.state.total_seconds)
        progress.update(task, completed=timer.state.total_seconds - timer.remaining_seconds)
        while timer.running:
            try:
                time.sleep(1)
                if not timer.running:
                    break
                _advance(timer, progress, task)
            except KeyboardInterrupt:
                if coordinator is None:
                    timer.pause()
                    console.print("\n[yellow]Timer paused.[/yellow]")
                    break
                outcome = coordinator.attempt_navigation(AppTab.HOME)
                if outcome.message:
                    print_strike(outcome)
                if outcome.allowed:
                    timer.pause()
                    break
                continue

            done = timer.state.sessions_completed_this_run - completed_before
            if max_focus_sessions is not None and done >= max_focus_sessions:
                timer.pause()

    return timer.state.sessions_completed_this_run - completed_before


def _advance(timer: FocusTimer, progress: Progress, task: TaskID) -> None:
    """Apply one tick and refresh the progress bar."""
    phase_before = timer.phase
    timer.tick()
    if timer.phase == phase_before:
        progress.update(task, completed=timer.state.total_seconds - timer.remaining_seconds)
        return

    # Bell notification
    console.print("\a", end="")
    if timer.phase == Phase.BREAK:
        print_nudge(get_break_message())
    else:
        print_nudge(get_nudge())
    progress.reset(task, total=timer.state.total_seconds, description=_phase_label(timer))
