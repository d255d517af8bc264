"""Tests for cadence.analyze.prosody module."""

from __future__ import annotations

import numpy as np
import pytest

from cadence.analyze.prosody import average_slope, end_of_sentence_slopes, segment_utterances
from cadence.models import EOSSegment, PitchTrack, Segment, WordToken


def ramp_track(slope: float, duration: float = 2.0, start_hz: float = 150.0) -> PitchTrack:
    times = np.arange(0, duration, 0.02)
    return PitchTrack(times=times, f0_hz=start_hz + slope * times)


class TestSegmentUtterances:
    def test_splits_on_long_gap(self) -> None:
        """Test segment split at a long gap."""
        words = [
            WordToken(text="a", start_sec=0.0, end_sec=0.3),
            WordToken(text="b", start_sec=0.35, end_sec=0.6),
            WordToken(text="c", start_sec=1.2, end_sec=1.5),
            WordToken(text="d", start_sec=1.6, end_sec=2.0),
        ]
        segments = segment_utterances(words)
        assert segments == [
            Segment(start_sec=0.0, end_sec=0.6),
            Segment(start_sec=1.2, end_sec=2.0),
        ]

    def test_short_gaps_keep_one_segment(self) -> None:
        """Test that short gaps stay in one segment."""
        words = [
            WordToken(text="a", start_sec=0.0, end_sec=0.5),
            WordToken(text="b", start_sec=0.8, end_sec=1.2),
        ]
        assert segment_utterances(words) == [Segment(start_sec=0.0, end_sec=1.2)]

    def test_sorts_by_start(self) -> None:
        """Test segmenting unsorted tokens."""
        words = [
            WordToken(text="b", start_sec=1.5, end_sec=2.0),
            WordToken(text="a", start_sec=0.0, end_sec=0.5),
        ]
        segments = segment_utterances(words)
        assert [s.start_sec for s in segments] == [0.0, 1.5]

    def test_untimed_tokens_ignored(self) -> None:
        """Test that untimed tokens are ignored."""
        words = [
            WordToken(text="a", start_sec=0.0, end_sec=0.5),
            WordToken(text="b"),
        ]
        assert segment_utterances(words) == [Segment(start_sec=0.0, end_sec=0.5)]

    def test_no_words(self) -> None:
        """Test segmenting an empty transcript."""
        assert segment_utterances(None) == []
        assert segment_utterances([WordToken(text="a")]) == []


class TestEndOfSentenceSlopes:
    def test_rising_ending(self) -> None:
        """Test slope sign on a rising ending."""
        eos = end_of_sentence_slopes([Segment(start_sec=0.0, end_sec=2.0)], ramp_track(50.0))

        assert len(eos) == 1
        assert eos[0].slope_hz_per_sec == pytest.approx(50.0, abs=0.01)
        assert eos[0].start_sec == 0.0
        assert eos[0].end_sec == 2.0

    def test_falling_ending(self) -> None:
        """Test slope sign on a falling ending."""
        eos = end_of_sentence_slopes([Segment(start_sec=0.0, end_sec=2.0)], ramp_track(-40.0))
        assert eos[0].slope_hz_per_sec == pytest.approx(-40.0, abs=0.01)

    def test_window_limited_to_segment(self) -> None:
        """A segment shorter than the window uses only its own samples."""
        track = PitchTrack(
            times=np.array([0.0, 0.1, 0.2, 0.3]),
            f0_hz=np.array([300.0, 100.0, 110.0, 120.0]),
        )
        eos = end_of_sentence_slopes([Segment(start_sec=0.1, end_sec=0.3)], track)
        assert eos[0].slope_hz_per_sec == pytest.approx(100.0)

    def test_segment_without_samples_dropped(self) -> None:
        """Test that segments without pitch are dropped."""
        track = ramp_track(10.0, duration=1.0)
        segments = [Segment(start_sec=0.0, end_sec=1.0), Segment(start_sec=5.0, end_sec=6.0)]
        eos = end_of_sentence_slopes(segments, track)
        assert [s.start_sec for s in eos] == [0.0]

    def test_empty_track(self) -> None:
        """Test slopes with an empty pitch track."""
        assert end_of_sentence_slopes([Segment(start_sec=0.0, end_sec=1.0)], PitchTrack.empty()) == []


class TestAverageSlope:
    def test_mean(self) -> None:
        """Test average slope."""
        segments = [
            EOSSegment(start_sec=0, end_sec=1, slope_hz_per_sec=50.0),
            EOSSegment(start_sec=2, end_sec=3, slope_hz_per_sec=-30.0),
        ]
        assert average_slope(segments) == 10.0

    def test_empty(self) -> None:
        """Test average slope with no segments."""
        assert average_slope([]) is None
