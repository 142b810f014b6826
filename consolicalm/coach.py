"""Rule-based procrastination coach.

Free text is scored against fixed phrase and keyword tables, one table per
root cause. A phrase found anywhere in the normalised text is strong
evidence (+4); a keyword matched exactly or within a small edit distance
of any word is weak evidence (+1). The best-scoring cause picks the canned
explanation, two micro-actions and a recommended study mode.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from consolicalm.models import CoachResult, RootCause, StudyMode

log = logging.getLogger(__name__)

PHRASE_WEIGHT = 4
KEYWORD_WEIGHT = 1
SECONDARY_MIN_SCORE = 2
MIN_CONFIDENCE = 0.35

# (minimum top score, confidence), checked in order
CONFIDENCE_STEPS: list[tuple[int, float]] = [(6, 0.90), (4, 0.70), (2, 0.48)]
LOW_CONFIDENCE = 0.20

PHRASE_RULES: dict[RootCause, tuple[str, ...]] = {
    RootCause.LACK_OF_CLARITY: (
        "don't know where to start", "dont know where to start",
        "no idea where to start", "i'm confused", "im confused",
        "unclear", "too many steps", "i'm lost", "im lost",
    ),
    RootCause.PERFECTIONISM: (
        "has to be perfect", "needs to be perfect", "not good enough",
        "i'll mess up", "ill mess up", "fear of failing", "scared to fail",
        "what if it's bad", "what if its bad",
    ),
    RootCause.AVOIDANCE: (
        "i'm anxious", "im anxious", "i'm stressed", "im stressed",
        "i'm dreading", "im dreading", "i keep avoiding", "avoid it",
        "i feel overwhelmed", "panic", "nervous",
    ),
    RootCause.DISTRACTION: (
        "can't stop scrolling", "cant stop scrolling", "keep scrolling",
        "stuck on my phone", "distracted", "social media", "notifications",
    ),
    RootCause.FATIGUE: (
        "i'm tired", "im tired", "no energy", "burnt out", "burned out",
        "exhausted", "sleepy",
    ),
    RootCause.OVERLOAD: (
        "too much", "so much to do", "my brain is full", "mental overload",
        "i have a lot", "too many things",
    ),
    RootCause.LOW_MOTIVATION: (
        "i don't care", "i dont care", "boring", "not motivated",
        "no motivation", "i hate this",
    ),
    RootCause.TIME_PRESSURE: (
        "due soon", "running out of time", "deadline", "last minute",
        "i'm behind", "im behind",
    ),
}

KEYWORD_RULES: dict[RootCause, tuple[str, ...]] = {
    RootCause.FATIGUE: ("tired", "sleepy", "exhausted", "drained", "burnt", "burned", "fatigue"),
    RootCause.OVERLOAD: ("overwhelmed", "overload", "chaos", "stressed"),
    RootCause.AVOIDANCE: ("anxious", "anxiety", "scared", "avoid", "dreading", "panic", "nervous"),
    RootCause.PERFECTIONISM: ("perfect", "perfection", "fail", "failing", "mistake", "wrong"),
    RootCause.LACK_OF_CLARITY: ("confused", "unclear", "lost", "start", "steps"),
    RootCause.DISTRACTION: (
        "scroll", "phone", "tiktok", "instagram", "youtube", "distracted", "notifications",
    ),
    RootCause.LOW_MOTIVATION: ("boring", "lazy", "motivation", "dont", "don't", "care", "hate"),
    RootCause.TIME_PRESSURE: ("deadline", "due", "soon", "late", "behind"),
}

# cause -> (explanation, micro-actions, recommended mode)
GUIDANCE: dict[RootCause, tuple[str, tuple[str, str], StudyMode]] = {
    RootCause.FATIGUE: (
        "Low energy makes your brain choose easy tasks (like scrolling) over hard ones.",
        (
            "Do Quick Start for 5 minutes only - you can stop after.",
            "Get water + stand up for 30 seconds, then begin.",
        ),
        StudyMode.QUICKSTART_5_1,
    ),
    RootCause.LACK_OF_CLARITY: (
        "If the next step isn't clear, it feels heavy - clarity creates momentum.",
        (
            "Write the next 2 steps only (not the whole plan).",
            "Open the assignment and find the rubric / requirements first.",
        ),
        StudyMode.POMODORO_25_5,
    ),
    RootCause.PERFECTIONISM: (
        "Perfectionism delays starting because the first attempt won't be perfect.",
        (
            "Make a deliberately 'bad first draft' for 10 minutes.",
            "Set a timer: quantity first, quality later.",
        ),
        StudyMode.POMODORO_25_5,
    ),
    RootCause.AVOIDANCE: (
        "Avoidance protects you from discomfort - starting small lowers the threat.",
        (
            "Pick the easiest 2-minute step and do only that.",
            "Name the fear in one sentence, then start anyway.",
        ),
        StudyMode.QUICKSTART_5_1,
    ),
    RootCause.OVERLOAD: (
        "Overload makes choosing hard, so you stall. Simplify the choice.",
        (
            "Do a 60-second brain dump of everything on your mind.",
            "Circle ONE item you can do now and start it.",
        ),
        StudyMode.POMODORO_25_5,
    ),
    RootCause.DISTRACTION: (
        "Distractions win when the environment is set up for interruptions.",
        (
            "Put your phone out of reach for 5 minutes and start.",
            "Close extra tabs; keep only the one you need.",
        ),
        StudyMode.QUICKSTART_5_1,
    ),
    RootCause.LOW_MOTIVATION: (
        "Motivation usually follows action - not the other way around.",
        (
            "Start with the smallest possible win (first sentence / first problem).",
            "Tell yourself: 'I only need to start, not finish.'",
        ),
        StudyMode.QUICKSTART_5_1,
    ),
    RootCause.TIME_PRESSURE: (
        "Time pressure can cause freezing. Short sprints help.",
        (
            "Do one Pomodoro and only aim for progress, not perfection.",
            "List the 3 most important tasks for the deadline.",
        ),
        StudyMode.POMODORO_25_5,
    ),
    RootCause.OTHER: (
        "Pick what feels closest and we'll give you a quick next step.",
        (
            "Choose one tiny step and do 2 minutes of it.",
            "Start Quick Start - momentum first.",
        ),
        StudyMode.QUICKSTART_5_1,
    ),
}

FALLBACK_CONFIDENCE = 0.10
UNCERTAIN_CONFIDENCE = 0.25

_NON_WORD = re.compile(r"[^a-z0-9\s']")
_SPACES = re.compile(r"\s+")


def normalize(text: str) -> str:
    """Lowercase, keep ``[a-z0-9 ']`` and collapse whitespace."""
    cleaned = _NON_WORD.sub(" ", text.lower())
    return _SPACES.sub(" ", cleaned).strip()


def levenshtein(a: str, b: str) -> int:
    """Classic edit distance (insert, delete, substitute all cost 1)."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        current = [i]
        for j, cb in enumerate(b, 1):
            cost = 0 if ca == cb else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def keyword_matches(words: list[str], keyword: str) -> bool:
    """Exact or fuzzy match of *keyword* against any of *words*.

    Words and keywords of 3-10 characters match within edit distance 1,
    or 2 when the keyword has at least 6 characters. A keyword containing
    a space is looked up as a substring of the joined words instead.
    """
    k = keyword.lower()
    if " " in k:
        return k in " ".join(words)

    for w in words:
        if w == k:
            return True
        if 3 <= len(w) <= 10 and 3 <= len(k) <= 10:
            d = levenshtein(w, k)
            if d <= 1:
                return True
            if len(k) >= 6 and d <= 2:
                return True
    return False


def score(text: str) -> dict[RootCause, int]:
    """Per-cause evidence for already-normalised *text*."""
    scores = {cause: 0 for cause in RootCause}

    for cause, phrases in PHRASE_RULES.items():
        for phrase in phrases:
            if phrase in text:
                scores[cause] += PHRASE_WEIGHT

    words = [w for w in text.split(" ") if w]
    for cause, keywords in KEYWORD_RULES.items():
        for keyword in keywords:
            if keyword_matches(words, keyword):
                scores[cause] += KEYWORD_WEIGHT

    return scores


def confidence_for(top_score: int) -> float:
    for threshold, confidence in CONFIDENCE_STEPS:
        if top_score >= threshold:
            return confidence
    return LOW_CONFIDENCE


def analyze(text: str) -> CoachResult:
    """Map free text to a likely root cause plus a next step."""
    cleaned = normalize(text)
    if not cleaned:
        return fallback_result()

    scores = score(cleaned)
    # sorted() is stable, so ties keep declaration order.
    ranked = sorted(
        ((cause, s) for cause, s in scores.items() if cause != RootCause.OTHER),
        key=lambda item: item[1],
        reverse=True,
    )
    top_cause, top_score = ranked[0]
    second_cause, second_score = ranked[1]

    confidence = confidence_for(top_score)
    log.debug("Coach scores for %r: %s", cleaned, {c.value: s for c, s in ranked if s})

    if top_score == 0 or confidence < MIN_CONFIDENCE:
        return uncertain_result()

    secondary = second_cause if second_score >= SECONDARY_MIN_SCORE and second_cause != top_cause else None
    return build_result(top_cause, secondary, confidence)


def build_result(
    primary: RootCause,
    secondary: Optional[RootCause] = None,
    confidence: float = 0.70,
) -> CoachResult:
    """Canned guidance for *primary*; also used when the user picks a cause."""
    explanation, actions, mode = GUIDANCE[primary]
    return CoachResult(
        primary=primary,
        secondary=secondary,
        confidence=confidence,
        explanation=explanation,
        micro_actions=list(actions),
        recommended_mode=mode,
    )


def fallback_result() -> CoachResult:
    """Returned for empty input."""
    return CoachResult(
        primary=RootCause.OTHER,
        confidence=FALLBACK_CONFIDENCE,
        explanation="Type what's going on (even messy). I'll try to map it to a common root cause.",
        micro_actions=[
            "If you're unsure, pick one of the categories with --pick.",
            "Start Quick Start for 5 minutes - just begin.",
        ],
        recommended_mode=StudyMode.QUICKSTART_5_1,
    )


def uncertain_result() -> CoachResult:
    """Returned when no cause has enough evidence."""
    return CoachResult(
        primary=RootCause.OTHER,
        confidence=UNCERTAIN_CONFIDENCE,
        explanation="I'm not totally sure from that - pick what fits best and I'll tailor the next step.",
        micro_actions=[
            "Choose a category with --pick.",
            "Then do a 2-5 minute start (momentum first).",
        ],
        recommended_mode=StudyMode.QUICKSTART_5_1,
    )
