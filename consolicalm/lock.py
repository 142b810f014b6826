"""Focus lock: strike escalation when leaving the timer during focus."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from consolicalm.encouragement import STRIKE_MESSAGES
from consolicalm.models import AppTab, LockState, StrikeOutcome

if TYPE_CHECKING:
    from consolicalm.timer import FocusTimer

log = logging.getLogger(__name__)

STRIKE_TWO_PENALTY = 5
STRIKE_THREE_PENALTY = 10

PointsListener = Callable[[int], None]
PauseListener = Callable[[int], object]


class LockCoordinator:
    """Decides whether the user may leave the timer screen.

    The coordinator follows the timer's ``on_focus_state_changed`` signal.
    While focus is running, every navigation attempt is a strike:

    1. warning only, navigation denied
    2. 5 points deducted, navigation denied
    3. and every strike after: 10 points deducted, the timer is
       force-paused and navigation is allowed

    The strike counter never goes down for the lifetime of the coordinator.
    """

    def __init__(self) -> None:
        self.state = LockState()
        self.pause_request_token = 0
        self._points_listeners: list[PointsListener] = []
        self._pause_listeners: list[PauseListener] = []

    @property
    def strike_count(self) -> int:
        return self.state.strike_count

    @property
    def locked(self) -> bool:
        return self.state.locked

    def add_points_listener(self, listener: PointsListener) -> None:
        """Register a callback receiving each deduction as a positive amount."""
        self._points_listeners.append(listener)

    def add_pause_listener(self, listener: PauseListener) -> None:
        """Register a callback receiving the new pause-request token."""
        self._pause_listeners.append(listener)

    def bind(self, timer: FocusTimer) -> None:
        """Subscribe to *timer* and let strike 3 force-pause it."""
        timer.add_state_listener(self.on_focus_state_changed)
        self.add_pause_listener(timer.observe_pause_token)
        self.on_focus_state_changed(timer.state.running_focus, timer.state.running_break)

    def on_focus_state_changed(self, running_focus: bool, running_break: bool) -> None:
        self.state.running_focus = running_focus
        self.state.running_break = running_break

    def attempt_navigation(self, target: AppTab) -> StrikeOutcome:
        """Resolve a request to navigate to *target*."""
        if not self.state.locked:
            return StrikeOutcome(allowed=True, destination=target)

        self.state.strike_count += 1
        strike = self.state.strike_count

        if strike == 1:
            log.info("Strike 1: navigation to %s denied", target.value)
            return StrikeOutcome(
                allowed=False,
                destination=AppTab.STUDY,
                strike=strike,
                message=STRIKE_MESSAGES[1],
            )

        if strike == 2:
            log.info("Strike 2: -%d points, navigation to %s denied",
                     STRIKE_TWO_PENALTY, target.value)
            self._deduct(STRIKE_TWO_PENALTY)
            return StrikeOutcome(
                allowed=False,
                destination=AppTab.STUDY,
                strike=strike,
                points_deducted=STRIKE_TWO_PENALTY,
                message=STRIKE_MESSAGES[2],
            )

        log.info("Strike %d: -%d points, pausing timer, navigation to %s allowed",
                 strike, STRIKE_THREE_PENALTY, target.value)
        self._deduct(STRIKE_THREE_PENALTY)
        self._request_pause()
        return StrikeOutcome(
            allowed=True,
            destination=target,
            strike=strike,
            points_deducted=STRIKE_THREE_PENALTY,
            paused_timer=True,
            message=STRIKE_MESSAGES[3],
        )

    def _deduct(self, points: int) -> None:
        for listener in list(self._points_listeners):
            listener(points)

    def _request_pause(self) -> None:
        self.pause_request_token += 1
        for listener in list(self._pause_listeners):
            listener(self.pause_request_token)


class NavigationHost:
    """Tracks the active tab and routes every tab change through the lock."""

    def __init__(self, coordinator: LockCoordinator, start: AppTab = AppTab.HOME) -> None:
        self.coordinator = coordinator
        self.current_tab = start

    def bind(self, timer: FocusTimer) -> None:
        timer.add_state_listener(self.on_focus_state_changed)

    def on_focus_state_changed(self, running_focus: bool, running_break: bool) -> None:
        # Focus starting anywhere pulls the user back to the timer.
        if running_focus and self.current_tab != AppTab.STUDY:
            log.debug("Focus running, returning to study tab from %s", self.current_tab.value)
            self.current_tab = AppTab.STUDY

    def navigate(self, target: AppTab) -> StrikeOutcome:
        outcome = self.coordinator.attempt_navigation(target)
        self.current_tab = outcome.destination
        return outcome
