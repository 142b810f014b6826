"""Mood check-in: quick tips and a three-step starter plan per mood.

Stressed check-ins also look at the reason text to pick the middle step.
"""

from __future__ import annotations

import logging

from consolicalm.models import MicroStepResult, Mood

log = logging.getLogger(__name__)

TIPS: dict[Mood, tuple[str, ...]] = {
    Mood.CALM: ("Keep it light today!", "Start with one small task", "Protect your calm"),
    Mood.OKAY: ("Pick something easy first", "Try a 5-minute timer"),
    Mood.DISTRACTED: ("Put phone away", "Try 5 minute session", "Remove distractions"),
    Mood.STRESSED: ("Breathe slowly", "Break task into tiny steps"),
}

# mood -> (title, steps, points); the stressed plan is built per reason
_PLANS: dict[Mood, tuple[str, tuple[str, ...], int]] = {
    Mood.CALM: (
        "Let's start gently.",
        (
            "Pick ONE task to start (no pressure to finish)",
            "Do 2 minutes of setup (open tabs, gather materials)",
            "Set a 5-minute timer and begin",
        ),
        10,
    ),
    Mood.OKAY: (
        "Quick momentum plan.",
        (
            "Write your goal in 1 sentence",
            "Do a 5-minute focus sprint",
            "Stop and decide: continue or take a short break",
        ),
        10,
    ),
    Mood.DISTRACTED: (
        "Let's reduce distractions first.",
        (
            "Put your phone face down or out of reach",
            "Close extra apps/tabs (leave only what you need)",
            "Do one 5-minute focus sprint",
        ),
        15,
    ),
}

STRESSED_TITLE = "Reset, then one small step."
STRESSED_POINTS = 20

# First matching row wins.
STRESS_HINTS: list[tuple[tuple[str, ...], str]] = [
    (("tired", "exhaust"), "Do the easiest part for 3 minutes only."),
    (("overwhelm", "too much"), "Write a tiny 3-item list. Start with the smallest."),
    (("phone", "scroll"), "Put your phone away for 5 minutes."),
    (
        ("don't know", "don’t know", "dont know", "confused"),
        "Open the assignment and read ONLY the instructions.",
    ),
]
DEFAULT_STRESS_HINT = "Shrink it: do the smallest possible first action."


def tips_for(mood: Mood) -> list[str]:
    return list(TIPS[mood])


def stress_hint(reason: str) -> str:
    """Pick the middle step of a stressed plan from the reason text."""
    lowered = reason.lower()
    for needles, hint in STRESS_HINTS:
        if any(needle in lowered for needle in needles):
            return hint
    return DEFAULT_STRESS_HINT


def generate_micro_step(mood: Mood, reason: str) -> MicroStepResult:
    """Build the starter plan for *mood*.

    Raises ValueError for a blank reason: a check-in needs a sentence
    about what is going on.
    """
    if not reason.strip():
        raise ValueError("Tell me a little about what's going on first.")

    if mood == Mood.STRESSED:
        title = STRESSED_TITLE
        steps = [
            "Breathe for 60 seconds: in 4, out 6",
            stress_hint(reason),
            "Start a 5-minute timer and begin",
        ]
        points = STRESSED_POINTS
    else:
        title, plan, points = _PLANS[mood]
        steps = list(plan)

    log.debug("Check-in %s -> %d points on completion", mood.value, points)
    return MicroStepResult(
        mood=mood, title=title, steps=steps, tips=tips_for(mood), points_reward=points
    )
