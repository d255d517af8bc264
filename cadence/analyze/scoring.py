"""
cadence.analyze.scoring - Derived scores and coaching labels.

Maps raw metrics onto 0-1 scores and short labels that the feedback
service and UI consume.
"""

from __future__ import annotations

import math

from cadence.models import DeliveryScores

IDEAL_WPM = 150.0
CONFIDENT_MONOTONY = 0.35


def derive_scores(wpm: float | None, filler_count: int, total_words: int) -> DeliveryScores:
    """Compute clarity and confidence scores.

    Clarity falls linearly from 1.0 at no fillers to 0.0 when half the
    words are fillers. Confidence blends clarity (70%) with a Gaussian
    pacing factor peaking at 150 WPM (30%).
    """
    filler_word_rate = filler_count / total_words if total_words > 0 else 0.0
    clarity = max(0.0, min(1.0, 1.0 - filler_word_rate * 2))
    pacing = math.exp(-(((wpm - IDEAL_WPM) / 60) ** 2)) if wpm and wpm > 0 else 0.0
    confidence = clarity * 0.7 + pacing * 0.3

    return DeliveryScores(
        filler_word_rate=round(filler_word_rate, 3),
        clarity_score=round(clarity, 3),
        confidence_score=round(confidence, 3),
        pace_wpm=round(wpm, 1) if wpm else None,
    )


def energy_label(variability: float | None) -> str | None:
    if variability is None:
        return None
    if variability >= 0.3:
        return "alive"
    if variability < 0.15:
        return "flat"
    return "moderate"


def expressiveness_label(range_hz: float | None) -> str | None:
    if range_hz is None:
        return None
    if range_hz >= 80:
        return "expressive"
    if range_hz >= 40:
        return "moderate"
    return "flat"


def slope_label(slope_hz_per_sec: float) -> str:
    """Rising endings may sound unsure; falling endings read as confident."""
    if slope_hz_per_sec > 10:
        return "rising"
    if slope_hz_per_sec < -10:
        return "falling"
    return "flat"


def pace_label(wpm: float | None) -> str | None:
    if not wpm:
        return None
    if wpm < 110:
        return "slow"
    if wpm <= 170:
        return "clear"
    return "fast"


def monotony_comparison(monotony_index: float | None, target: float = CONFIDENT_MONOTONY) -> str | None:
    """Describe pitch variation relative to a confident-speaker target."""
    if monotony_index is None:
        return None
    if monotony_index > target:
        pct = round((monotony_index - target) / target * 100)
        return f"Your voice varied {pct}% less than confident speakers."
    if monotony_index < target:
        pct = round((target - monotony_index) / target * 100)
        return f"Your voice varied {pct}% more than confident speakers."
    return "Matches confident speakers."


def speaking_rate(word_count: int, duration_sec: float | None) -> float | None:
    """Overall words per minute, 1 decimal."""
    if not duration_sec or duration_sec <= 0:
        return None
    return round(word_count / (duration_sec / 60), 1)
