"""
cadence.analyze.rhythm - Pauses, tempo stability and pace timeline.

Everything here is derived from word timestamps, never from raw
silence in the audio: a pause is the gap between one word's end and the
next word's start.
"""

from __future__ import annotations

import math
import statistics

import numpy as np

from cadence.models import PauseEvent, PauseStats, WordToken, WpmPoint, timed_words


def word_gaps(words: list[WordToken] | None) -> list[tuple[float, float, float]]:
    """Positive gaps between consecutive timed words.

    Returns:
        List of (gap_start, gap_end, gap_duration) tuples in time order
    """
    tokens = timed_words(words)
    gaps = []
    for prev, curr in zip(tokens, tokens[1:]):
        gap = curr.start_sec - prev.end_sec
        if gap > 0:
            gaps.append((prev.end_sec, curr.start_sec, gap))
    return gaps


def pause_stats(
    words: list[WordToken] | None,
    duration_sec: float,
    medium_min_sec: float = 0.6,
    long_min_sec: float = 1.5,
) -> PauseStats | None:
    """Summarize inter-word gaps over a clip of ``duration_sec``.

    Returns None when fewer than two timed words exist or the duration is
    unknown; a clip with timed words but no gaps reports zeros.
    """
    if len(timed_words(words)) < 2 or not duration_sec or duration_sec <= 0:
        return None

    gaps = [g for _, _, g in word_gaps(words)]
    if not gaps:
        return PauseStats(
            avg_gap_sec=0.0,
            median_gap_sec=0.0,
            medium_count=0,
            long_count=0,
            ratio_percent=0.0,
            total_pause_sec=0.0,
            total_talk_sec=round(duration_sec, 2),
            long_pause_percent=0.0,
            long_pauses_per_min=0.0,
        )

    total = sum(gaps)
    long_gaps = [g for g in gaps if g >= long_min_sec]
    medium_gaps = [g for g in gaps if medium_min_sec <= g < long_min_sec]
    minutes = duration_sec / 60

    return PauseStats(
        avg_gap_sec=round(total / len(gaps), 2),
        median_gap_sec=round(statistics.median(gaps), 2),
        medium_count=len(medium_gaps),
        long_count=len(long_gaps),
        ratio_percent=round(100 * total / duration_sec, 1),
        total_pause_sec=round(total, 2),
        total_talk_sec=round(max(0.0, duration_sec - total), 2),
        long_pause_percent=round(100 * sum(long_gaps) / duration_sec, 1),
        long_pauses_per_min=round(len(long_gaps) / minutes, 1),
    )


def pause_events(
    words: list[WordToken] | None,
    medium_min_sec: float = 0.6,
    long_min_sec: float = 1.5,
) -> list[PauseEvent]:
    """Gaps of at least ``medium_min_sec``, classified medium or long."""
    events = []
    for start, end, gap in word_gaps(words):
        if gap < medium_min_sec:
            continue
        events.append(
            PauseEvent(
                start_sec=start,
                end_sec=end,
                duration_sec=round(gap, 2),
                kind="long" if gap >= long_min_sec else "medium",
            )
        )
    return events


def _window_starts(duration_sec: float, step: float) -> list[float]:
    return [k * step for k in range(math.ceil(round(duration_sec / step, 9)))]


def tempo_std_dev(words: list[WordToken] | None, duration_sec: float, window_sec: float = 5.0) -> float:
    """Population std of words/second across fixed windows tiling the clip.

    The final window is clipped to the clip end. Returns 0.0 when no
    window has positive span.
    """
    tokens = timed_words(words)
    if not duration_sec or duration_sec <= 0:
        return 0.0

    starts = np.array([w.start_sec for w in tokens])
    rates = []
    for start in _window_starts(duration_sec, window_sec):
        end = min(start + window_sec, duration_sec)
        span = end - start
        if span <= 0:
            continue
        count = int(np.count_nonzero((starts >= start) & (starts < end)))
        rates.append(count / span)

    if not rates:
        return 0.0
    return round(float(np.std(rates)), 2)


def wpm_timeline(words: list[WordToken] | None, window_sec: float = 5.0) -> list[WpmPoint]:
    """Centered sliding words-per-minute, sampled every ``window_sec / 5``.

    The timeline spans from the first full half-window to the last word,
    with windows clipped to ``[0, last_word_end]``.
    """
    tokens = [w for w in words or [] if w.start_sec is not None]
    if not tokens:
        return []

    starts = np.array([w.start_sec for w in tokens])
    duration = max(w.end_sec if w.end_sec is not None else w.start_sec for w in tokens)
    step = max(0.25, window_sec / 5)
    half = window_sec / 2

    timeline = []
    k = 0
    t = half
    while t <= duration + 1e-9:
        t0 = max(0.0, t - half)
        t1 = min(duration, t + half)
        count = int(np.count_nonzero((starts >= t0) & (starts < t1)))
        minutes = max(1e-6, (t1 - t0) / 60)
        timeline.append(WpmPoint(t=round(t, 2), wpm=round(count / minutes, 1)))
        k += 1
        t = half + k * step
    return timeline
