"""
Test configuration and shared fixtures.
"""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
import pytest
from _helpers import SR, make_sine

from cadence.models import AudioSample, WordToken


@pytest.fixture
def sine_sample() -> Callable[..., AudioSample]:
    """Factory for a pure tone AudioSample."""

    def _make(freq: float = 150.0, duration: float = 1.5, amplitude: float = 0.5) -> AudioSample:
        return AudioSample.from_array(make_sine(freq, duration, amplitude), SR)

    return _make


@pytest.fixture
def silence_sample() -> AudioSample:
    """Two seconds of digital silence."""
    return AudioSample.from_array(np.zeros(2 * SR), SR)


@pytest.fixture
def burst_sample() -> AudioSample:
    """Three seconds of quiet 150 Hz tone with a loud stretch at 1.0-1.4s."""
    signal = make_sine(150.0, 3.0, amplitude=0.1)
    burst = slice(int(1.0 * SR), int(1.4 * SR))
    signal[burst] *= 5
    return AudioSample.from_array(signal, SR)


@pytest.fixture
def sample_words() -> list[WordToken]:
    """A short utterance with one medium and one long pause."""
    return [
        WordToken(text="So", start_sec=0.0, end_sec=0.5),
        WordToken(text="we", start_sec=0.7, end_sec=1.0),
        WordToken(text="launched", start_sec=1.7, end_sec=2.0),
        WordToken(text="today.", start_sec=4.0, end_sec=4.5),
    ]


@pytest.fixture
def steady_words() -> list[WordToken]:
    """180 words evenly spaced across one minute."""
    return [
        WordToken(text=f"word{i}", start_sec=i / 3, end_sec=i / 3 + 0.2) for i in range(180)
    ]
