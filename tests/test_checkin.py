"""Tests for the mood check-in plans."""

from __future__ import annotations

import pytest

from consolicalm.checkin import (
    DEFAULT_STRESS_HINT,
    generate_micro_step,
    stress_hint,
    tips_for,
)
from consolicalm.models import Mood


class TestTips:
    def test_every_mood_has_tips(self) -> None:
        for mood in Mood:
            assert tips_for(mood)

    def test_distracted_tips(self) -> None:
        assert tips_for(Mood.DISTRACTED) == [
            "Put phone away",
            "Try 5 minute session",
            "Remove distractions",
        ]


class TestPlans:
    @pytest.mark.parametrize(
        ("mood", "points", "title"),
        [
            (Mood.CALM, 10, "Let's start gently."),
            (Mood.OKAY, 10, "Quick momentum plan."),
            (Mood.DISTRACTED, 15, "Let's reduce distractions first."),
            (Mood.STRESSED, 20, "Reset, then one small step."),
        ],
    )
    def test_reward_and_title(self, mood: Mood, points: int, title: str) -> None:
        result = generate_micro_step(mood, "just checking in")
        assert result.mood == mood
        assert result.points_reward == points
        assert result.title == title
        assert len(result.steps) == 3
        assert result.tips == tips_for(mood)

    def test_calm_plan_ignores_reason(self) -> None:
        a = generate_micro_step(Mood.CALM, "I'm tired")
        b = generate_micro_step(Mood.CALM, "my phone keeps buzzing")
        assert a.steps == b.steps

    def test_stressed_plan_wraps_hint(self) -> None:
        result = generate_micro_step(Mood.STRESSED, "Too much homework")
        assert result.steps[0] == "Breathe for 60 seconds: in 4, out 6"
        assert result.steps[1] == "Write a tiny 3-item list. Start with the smallest."
        assert result.steps[2] == "Start a 5-minute timer and begin"

    @pytest.mark.parametrize("reason", ["", "   "])
    def test_blank_reason_rejected(self, reason: str) -> None:
        with pytest.raises(ValueError):
            generate_micro_step(Mood.OKAY, reason)


class TestStressHint:
    @pytest.mark.parametrize(
        ("reason", "hint"),
        [
            ("I'm so tired", "Do the easiest part for 3 minutes only."),
            ("Exhausted after practice", "Do the easiest part for 3 minutes only."),
            ("I feel overwhelmed", "Write a tiny 3-item list. Start with the smallest."),
            ("there is too much to do", "Write a tiny 3-item list. Start with the smallest."),
            ("my phone won't stop", "Put your phone away for 5 minutes."),
            ("I keep scrolling", "Put your phone away for 5 minutes."),
            ("I dont know what to do", "Open the assignment and read ONLY the instructions."),
            ("I don't know how", "Open the assignment and read ONLY the instructions."),
            ("I'm confused", "Open the assignment and read ONLY the instructions."),
            ("exams next week", DEFAULT_STRESS_HINT),
        ],
    )
    def test_keyword_branches(self, reason: str, hint: str) -> None:
        assert stress_hint(reason) == hint

    def test_first_match_wins(self) -> None:
        assert stress_hint("tired of scrolling") == "Do the easiest part for 3 minutes only."
