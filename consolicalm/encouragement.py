"""Short messages shown around focus sessions and strikes."""

from __future__ import annotations

import random

_COMPLETION_NUDGES: tuple[str, ...] = (
    "Focus session done. That is real progress.",
    "You showed up and stayed. Nice work.",
    "Small sessions add up faster than you think.",
    "You did the hard part: you started.",
    "Another block of focus in the bank.",
    "Calm and steady beats rushed and scattered.",
    "Done is better than perfect. Well done.",
)

_BREAK_MESSAGES: tuple[str, ...] = (
    "Break unlocked. Step away from the screen for a moment.",
    "Take a few slow breaths.",
    "Stretch your shoulders and neck.",
    "Look at something far away for twenty seconds.",
    "Get some water if you can.",
)

STRIKE_MESSAGES: dict[int, str] = {
    1: "Focus warning\n\nStay on the Study screen during Focus Time.",
    2: "Strike 2\n\nYou left Focus Mode again.\n-5 Calm Points.",
    3: (
        "Strike 3\n\nTimer paused.\n-10 Calm Points.\n"
        "You can leave now, but try again when ready."
    ),
}


def get_nudge() -> str:
    """Pick a message for the end of a focus phase."""
    return random.choice(_COMPLETION_NUDGES)


def get_break_message() -> str:
    return random.choice(_BREAK_MESSAGES)
