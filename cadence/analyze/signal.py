"""
cadence.analyze.signal - High-pass conditioning and framing.

Both the energy and the pitch paths read the same conditioned signal
through the same frame grid, so these two steps run once per recording.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import librosa
import numpy as np
from scipy.signal import lfilter


def high_pass(samples: np.ndarray, sample_rate: int, cutoff_hz: float = 70.0) -> np.ndarray:
    """Single-pole RC high-pass: y[i] = a * (y[i-1] + x[i] - x[i-1]).

    Removes DC offset and sub-audible rumble. Initial state is zero, so
    the first output sample equals ``a * x[0]``.

    Args:
        samples: Input signal
        sample_rate: Sample rate in Hz
        cutoff_hz: Corner frequency

    Returns:
        Filtered copy of the signal as float64
    """
    x = np.asarray(samples, dtype=np.float64)
    if len(x) == 0:
        return np.zeros(0)
    rc = 1.0 / (2.0 * math.pi * cutoff_hz)
    dt = 1.0 / sample_rate
    alpha = rc / (rc + dt)
    return lfilter([alpha, -alpha], [1.0, -alpha], x)


@dataclass(frozen=True)
class FrameGrid:
    """Window/hop geometry of the analysis frames, in samples."""

    sample_rate: int
    win_samples: int
    hop_samples: int

    @classmethod
    def from_config(cls, sample_rate: int, win_sec: float = 0.025, hop_sec: float = 0.01) -> FrameGrid:
        return cls(
            sample_rate=sample_rate,
            win_samples=max(1, round(win_sec * sample_rate)),
            hop_samples=max(1, round(hop_sec * sample_rate)),
        )

    @property
    def hop_sec(self) -> float:
        return self.hop_samples / self.sample_rate

    def count(self, n_samples: int) -> int:
        """Number of full windows that fit in ``n_samples``."""
        if n_samples < self.win_samples:
            return 0
        return 1 + (n_samples - self.win_samples) // self.hop_samples

    def start_times(self, n_frames: int) -> np.ndarray:
        return np.arange(n_frames) * self.hop_samples / self.sample_rate


def frame_signal(samples: np.ndarray, grid: FrameGrid) -> np.ndarray:
    """Slice a signal into overlapping frames.

    Returns:
        A ``(n_frames, win_samples)`` strided view of ``samples``; an empty
        ``(0, win_samples)`` array when the clip is shorter than one window
    """
    n_frames = grid.count(len(samples))
    if n_frames == 0:
        return np.zeros((0, grid.win_samples), dtype=np.float64)
    return librosa.util.frame(
        np.ascontiguousarray(samples),
        frame_length=grid.win_samples,
        hop_length=grid.hop_samples,
        axis=0,
    )
