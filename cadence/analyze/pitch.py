"""
cadence.analyze.pitch - Autocorrelation pitch tracking.

Estimates F0 on every ``stride``-th analysis frame of the conditioned
signal. For each frame the lag with the highest autocorrelation
(normalized by zero-lag energy) inside the 75-300 Hz lag band wins; the
estimate is kept only if that correlation clears the voicing threshold.

Frames are processed in blocks against one preallocated lag x frame
scratch matrix, which bounds memory for long recordings and gives the
cancellation token a place to be checked.
"""

from __future__ import annotations

import math

import numpy as np

from cadence.analyze.cancellation import CancellationToken
from cadence.analyze.signal import FrameGrid
from cadence.config import AnalysisConfig
from cadence.models import PitchStats, PitchTrack

SILENCE_ENERGY = 1e-9
BLOCK_FRAMES = 256


def lag_range(grid: FrameGrid, min_hz: float, max_hz: float) -> tuple[int, int]:
    """Inclusive autocorrelation lag bounds for an F0 band, clipped to the window."""
    lag_min = max(1, math.floor(grid.sample_rate / max_hz))
    lag_max = min(grid.win_samples - 1, math.ceil(grid.sample_rate / min_hz))
    return lag_min, lag_max


def track_pitch(
    frames: np.ndarray,
    grid: FrameGrid,
    config: AnalysisConfig,
    cancel: CancellationToken | None = None,
) -> PitchTrack:
    """Estimate F0 for every ``config.pitch_stride``-th frame.

    Args:
        frames: ``(n_frames, win)`` frames of the high-passed signal
        grid: Frame geometry the frames were cut with
        config: Pitch band, voicing threshold and stride
        cancel: Optional token checked between frame blocks

    Returns:
        PitchTrack with one entry per accepted (voiced, in-band) frame
    """
    n_frames = frames.shape[0]
    lag_min, lag_max = lag_range(grid, config.pitch_min_hz, config.pitch_max_hz)
    if n_frames == 0 or lag_max < lag_min:
        return PitchTrack.empty()

    stride = config.pitch_stride
    win = grid.win_samples
    lags = np.arange(lag_min, lag_max + 1)
    scratch = np.empty((len(lags), BLOCK_FRAMES))
    r0 = np.empty(BLOCK_FRAMES)

    times: list[np.ndarray] = []
    f0s: list[np.ndarray] = []

    for first in range(0, n_frames, BLOCK_FRAMES * stride):
        if cancel is not None:
            cancel.raise_if_cancelled()

        block = frames[first : first + BLOCK_FRAMES * stride : stride]
        m = block.shape[0]
        energy = r0[:m]
        np.einsum("ij,ij->i", block, block, out=energy)

        corr = scratch[:, :m]
        for row, lag in enumerate(lags):
            np.einsum("ij,ij->i", block[:, : win - lag], block[:, lag:], out=corr[row])

        voiced = energy > SILENCE_ENERGY
        corr /= np.where(voiced, energy, 1.0)

        best = np.argmax(corr, axis=0)
        best_corr = corr[best, np.arange(m)]
        f0 = grid.sample_rate / lags[best]

        accept = (
            voiced
            & (best_corr >= config.voicing_threshold)
            & (f0 >= config.pitch_min_hz)
            & (f0 <= config.pitch_max_hz)
        )
        frame_idx = first + np.arange(m) * stride
        times.append(frame_idx[accept] * grid.hop_samples / grid.sample_rate)
        f0s.append(f0[accept])

    return PitchTrack(times=np.concatenate(times), f0_hz=np.concatenate(f0s))


def pitch_stats(track: PitchTrack) -> PitchStats:
    """Range (P95 - P5), population variance and monotony index of F0.

    The monotony index ``1 / (1 + variance)`` is 1 for a perfectly flat
    voice and decays toward 0 as variance grows. All three statistics are
    None with fewer than two accepted samples.
    """
    n = len(track)
    if n < 2:
        return PitchStats(valid_count=n)

    ordered = np.sort(track.f0_hz)
    p5 = ordered[max(0, math.floor(0.05 * (n - 1)))]
    p95 = ordered[min(n - 1, math.floor(0.95 * (n - 1)))]
    variance = float(np.var(track.f0_hz))

    return PitchStats(
        range_hz=round(float(p95 - p5), 1),
        variance_hz2=round(variance, 2),
        monotony_index=round(1.0 / (1.0 + variance), 3),
        valid_count=n,
    )
