"""
cadence.analyze.prosody - Align the pitch track to word timings.

Splits the transcript into speech segments at inter-word silences and
measures the pitch slope over the closing window of each segment. A
rising end reads as uncertain, a falling end as confident.
"""

from __future__ import annotations

import numpy as np

from cadence.models import EOSSegment, PitchTrack, Segment, WordToken, timed_words


def segment_utterances(words: list[WordToken] | None, gap_sec: float = 0.4) -> list[Segment]:
    """Group timed words into segments separated by gaps of at least ``gap_sec``.

    Untimed tokens are ignored. The last segment closes at the last
    token's end.
    """
    tokens = timed_words(words)
    if not tokens:
        return []

    segments = []
    seg_start = tokens[0].start_sec
    for prev, curr in zip(tokens, tokens[1:]):
        if curr.start_sec - prev.end_sec >= gap_sec:
            segments.append(Segment(start_sec=seg_start, end_sec=prev.end_sec))
            seg_start = curr.start_sec
    segments.append(Segment(start_sec=seg_start, end_sec=tokens[-1].end_sec))
    return segments


def end_of_sentence_slopes(
    segments: list[Segment],
    track: PitchTrack,
    window_sec: float = 0.4,
) -> list[EOSSegment]:
    """Pitch slope (Hz/s) across the trailing window of each segment.

    The slope runs from the first to the last pitch sample inside
    ``[max(start, end - window), end]``. Segments with fewer than two
    samples there, or with both samples at the same time, are dropped.
    """
    results = []
    for seg in segments:
        t0 = max(seg.start_sec, seg.end_sec - window_sec)
        in_window = np.flatnonzero((track.times >= t0) & (track.times <= seg.end_sec))
        if len(in_window) < 2:
            continue
        first, last = in_window[0], in_window[-1]
        dt = float(track.times[last] - track.times[first])
        if dt <= 0:
            continue
        df = float(track.f0_hz[last] - track.f0_hz[first])
        results.append(
            EOSSegment(
                start_sec=seg.start_sec,
                end_sec=seg.end_sec,
                slope_hz_per_sec=round(df / dt, 2),
            )
        )
    return results


def average_slope(eos_segments: list[EOSSegment]) -> float | None:
    if not eos_segments:
        return None
    return round(sum(s.slope_hz_per_sec for s in eos_segments) / len(eos_segments), 2)
