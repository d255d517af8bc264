"""
cadence.analyze.energy - Loudness envelope, variability and emphasis hotspots.

RMS per frame is normalized by a whole-clip percentile, so every
threshold here depends on the complete recording. A streaming variant
would need a decaying percentile estimate instead.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from cadence.analyze.signal import FrameGrid
from cadence.config import AnalysisConfig
from cadence.models import EnergyTrack, Hotspot, WordToken
from cadence.utils import is_word, normalize_token

EPSILON = 1e-9

STOPWORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "if", "in", "on", "at", "by", "to", "of",
        "for", "with", "as", "is", "are", "am", "was", "were", "be", "been", "being",
        "i", "you", "he", "she", "it", "we", "they", "me", "him", "her", "them", "my",
        "your", "his", "their", "our", "so", "well", "right", "okay", "um", "uh",
        "like", "know", "actually", "basically", "literally",
    }
)  # fmt: skip


@dataclass(frozen=True)
class EnergyResult:
    track: EnergyTrack
    variability: float | None
    hotspots: list[Hotspot] = field(default_factory=list)


def frame_rms(frames: np.ndarray) -> np.ndarray:
    """Root-mean-square of each frame row."""
    if frames.shape[0] == 0:
        return np.zeros(0)
    return np.sqrt(np.einsum("ij,ij->i", frames, frames) / frames.shape[1])


def percentile_normalize(values: np.ndarray, q: float = 0.95) -> np.ndarray:
    """Divide by the order statistic at rank ``floor(q * (n - 1))``.

    A zero reference is floored to a tiny epsilon so silence stays zero.
    """
    if len(values) == 0:
        return np.zeros(0)
    ordered = np.sort(values)
    idx = min(len(ordered) - 1, max(0, math.floor(q * (len(ordered) - 1))))
    ref = float(ordered[idx])
    if not ref > 0:
        ref = EPSILON
    return values / ref


def energy_variability(rms_norm: np.ndarray) -> float | None:
    """Coefficient of variation of the normalized envelope, 2 decimals."""
    if len(rms_norm) == 0:
        return None
    mean = float(np.mean(rms_norm))
    if mean <= 0:
        return None
    return round(float(np.std(rms_norm)) / mean, 2)


def trailing_moving_average(values: np.ndarray, window: int) -> np.ndarray:
    """Boxcar mean over the trailing ``window`` values (shorter at the start)."""
    n = len(values)
    if n == 0:
        return np.zeros(0)
    prefix = np.concatenate(([0.0], np.cumsum(values, dtype=np.float64)))
    ends = np.arange(1, n + 1)
    starts = np.maximum(0, ends - window)
    return (prefix[ends] - prefix[starts]) / (ends - starts)


def _frames_for(seconds: float, hop_sec: float) -> int:
    # round() first so 0.2 / 0.01 does not ceil to 21
    return math.ceil(round(seconds / hop_sec, 9))


def detect_hotspots(
    rms_norm: np.ndarray,
    frame_times: np.ndarray,
    hop_sec: float,
    multiplier: float = 1.2,
    min_duration_sec: float = 0.2,
    window_sec: float = 1.0,
) -> list[Hotspot]:
    """Find sustained loudness excursions above the local average.

    A frame is "over" when its normalized RMS exceeds ``multiplier`` times
    the trailing moving average. Maximal runs of over frames lasting at
    least ``min_duration_sec`` become hotspots spanning the first frame
    start to the last frame start plus one hop.
    """
    if len(rms_norm) == 0:
        return []

    window = max(1, round(window_sec / hop_sec))
    moving_avg = trailing_moving_average(rms_norm, window)
    floor = np.where(moving_avg > 0, moving_avg, EPSILON)
    over = rms_norm > multiplier * floor

    min_frames = max(1, _frames_for(min_duration_sec, hop_sec))
    edges = np.diff(np.concatenate(([0], over.astype(np.int8), [0])))
    run_starts = np.flatnonzero(edges == 1)
    run_ends = np.flatnonzero(edges == -1) - 1

    hotspots = []
    for start, end in zip(run_starts, run_ends):
        if end - start + 1 >= min_frames:
            hotspots.append(
                Hotspot(
                    start_sec=round(float(frame_times[start]), 3),
                    end_sec=round(float(frame_times[end]) + hop_sec, 3),
                )
            )
    return hotspots


def is_content_word(word: WordToken) -> bool:
    return (
        word.has_timing
        and is_word(word.text)
        and normalize_token(word.text) not in STOPWORDS
    )


def label_hotspots(hotspots: list[Hotspot], words: list[WordToken] | None) -> list[Hotspot]:
    """Attach the nearest content word (by midpoint) to each hotspot.

    Returns new Hotspot objects; hotspots stay unlabeled when no timed
    content word exists.
    """
    candidates = [w for w in words or [] if is_content_word(w)]
    if not candidates:
        return list(hotspots)

    mids = np.array([w.midpoint for w in candidates])
    labeled = []
    for h in hotspots:
        center = (h.start_sec + h.end_sec) / 2
        best = int(np.argmin(np.abs(mids - center)))
        labeled.append(h.model_copy(update={"label": candidates[best].text}))
    return labeled


def analyze_energy(frames: np.ndarray, grid: FrameGrid, config: AnalysisConfig) -> EnergyResult:
    """Run the energy path over pre-framed conditioned audio."""
    rms = frame_rms(frames)
    rms_norm = percentile_normalize(rms, config.percentile_norm)
    track = EnergyTrack(
        frame_times=grid.start_times(len(rms)),
        rms=rms,
        rms_norm=rms_norm,
        hop_sec=grid.hop_sec,
    )
    hotspots = detect_hotspots(
        rms_norm,
        track.frame_times,
        grid.hop_sec,
        multiplier=config.hotspot_multiplier,
        min_duration_sec=config.hotspot_min_dur_sec,
        window_sec=config.hotspot_window_sec,
    )
    return EnergyResult(track=track, variability=energy_variability(rms_norm), hotspots=hotspots)
