"""
cadence.analyze.engine - End-to-end delivery analysis.

A DeliveryAnalyzer is a caller-owned handle: create it, analyze one or
many recordings, then close it (or use it as a context manager). It
keeps no state between recordings apart from its config and its worker
pool; every report is computed fresh.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

from cadence.analyze.cancellation import CancellationToken
from cadence.analyze.energy import EnergyResult, analyze_energy, label_hotspots
from cadence.analyze.fillers import detect_fillers
from cadence.analyze.pitch import pitch_stats, track_pitch
from cadence.analyze.prosody import average_slope, end_of_sentence_slopes, segment_utterances
from cadence.analyze.rhythm import pause_events, pause_stats, tempo_std_dev, wpm_timeline
from cadence.analyze.scoring import (
    derive_scores,
    energy_label,
    expressiveness_label,
    monotony_comparison,
    pace_label,
    speaking_rate,
)
from cadence.analyze.signal import FrameGrid, frame_signal, high_pass
from cadence.config import AnalysisConfig
from cadence.decode.audio import decode_audio
from cadence.exceptions import AnalysisError
from cadence.logging import get_logger
from cadence.models import AudioSample, DeliveryReport, PitchTrack, WordToken, timed_words
from cadence.utils import is_word

logger = get_logger(__name__)

ProgressCallback = Callable[[str, float], None]

STAGES = ("decode", "condition", "frame", "energy", "pitch", "prosody", "rhythm", "fillers", "done")


class DeliveryAnalyzer:
    """Runs the full analysis pipeline for one recording at a time.

    Args:
        config: Analysis parameters (defaults when omitted)

    Example:
        with DeliveryAnalyzer() as analyzer:
            report = analyzer.analyze_bytes(wav_bytes, words=tokens)
    """

    def __init__(self, config: AnalysisConfig | None = None):
        self.config = config or AnalysisConfig()
        self._executor: ThreadPoolExecutor | None = None
        self._closed = False

    def __enter__(self) -> DeliveryAnalyzer:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release the worker pool. The handle cannot be used afterwards."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        self._closed = True

    def _pool(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="cadence")
        return self._executor

    def analyze_bytes(
        self,
        data: bytes,
        words: list[WordToken] | None = None,
        progress: ProgressCallback | None = None,
        cancel: CancellationToken | None = None,
    ) -> DeliveryReport:
        """Decode an encoded buffer, then analyze it.

        Raises:
            DecodeError: If the buffer cannot be decoded
            UnsupportedEnvironmentError: If decoding needs a missing tool
        """
        self._ensure_open()
        sample = decode_audio(data, sample_rate=self.config.sample_rate_hz)
        _notify(progress, "decode")
        return self.analyze(sample, words=words, progress=progress, cancel=cancel)

    def analyze(
        self,
        sample: AudioSample,
        words: list[WordToken] | None = None,
        progress: ProgressCallback | None = None,
        cancel: CancellationToken | None = None,
    ) -> DeliveryReport:
        """Analyze a decoded sample with optional word timestamps.

        Silence, short clips and missing timestamps never raise; the
        affected fields come back as None or empty lists.

        Args:
            sample: Decoded mono audio
            words: Word tokens from the transcription service
            progress: Called as ``progress(stage, fraction)`` after each stage
            cancel: Token checked between stages and pitch blocks

        Raises:
            AnalysisCancelledError: If ``cancel`` fires mid-run
            AnalysisError: If the handle is closed
        """
        self._ensure_open()
        config = self.config
        started = time.perf_counter()

        def checkpoint(stage: str) -> None:
            _notify(progress, stage)
            if cancel is not None:
                cancel.raise_if_cancelled()

        if sample.sample_rate != config.sample_rate_hz:
            logger.debug(
                "Sample rate %d differs from configured %d; analyzing at %d",
                sample.sample_rate,
                config.sample_rate_hz,
                sample.sample_rate,
            )

        conditioned = high_pass(sample.samples, sample.sample_rate, config.high_pass_hz)
        checkpoint("condition")

        grid = FrameGrid.from_config(sample.sample_rate, config.frame_win_sec, config.frame_hop_sec)
        frames = frame_signal(conditioned, grid)
        checkpoint("frame")

        energy, track = self._run_acoustic(frames, grid, progress, cancel)

        timed = timed_words(words)
        hotspots = label_hotspots(energy.hotspots, timed) if timed else energy.hotspots

        eos_segments = None
        eos_average = None
        if timed:
            segments = segment_utterances(timed, config.segment_gap_sec)
            eos_segments = end_of_sentence_slopes(segments, track, config.eos_window_sec)
            eos_average = average_slope(eos_segments)
        checkpoint("prosody")

        duration = sample.duration_sec
        if not duration and timed:
            duration = max(w.end_sec for w in timed)

        pauses = pause_stats(timed, duration, config.pause_medium_min_sec, config.pause_long_min_sec)
        events = pause_events(timed, config.pause_medium_min_sec, config.pause_long_min_sec)
        tempo = tempo_std_dev(timed, duration, config.tempo_window_sec) if timed else 0.0
        timeline = wpm_timeline(words, config.wpm_window_sec)
        checkpoint("rhythm")

        fillers = detect_fillers(words, duration)
        checkpoint("fillers")

        pitch = pitch_stats(track)
        word_count = sum(1 for w in words or [] if is_word(w.text))
        scores = None
        if words:
            wpm = speaking_rate(word_count, duration)
            scores = derive_scores(wpm, fillers.total, word_count).model_copy(
                update={
                    "pace_label": pace_label(wpm),
                    "energy_label": energy_label(energy.variability),
                    "expressiveness_label": expressiveness_label(pitch.range_hz),
                    "monotony_note": monotony_comparison(pitch.monotony_index),
                }
            )

        report = DeliveryReport(
            duration_sec=round(duration, 3),
            variability=energy.variability,
            hotspots=hotspots,
            pitch=pitch,
            eos_segments=eos_segments,
            eos_average_slope_hz_per_sec=eos_average,
            pauses=pauses,
            pause_events=events,
            tempo_std_dev_wps=tempo,
            wpm_timeline=timeline,
            fillers=fillers,
            word_count=word_count,
            scores=scores,
        )
        _notify(progress, "done")
        logger.debug(
            "Analyzed %.2fs clip in %.0f ms (%d frames, %d pitch samples, %d hotspots)",
            duration,
            (time.perf_counter() - started) * 1000,
            frames.shape[0],
            len(track),
            len(hotspots),
        )
        return report

    def _run_acoustic(
        self,
        frames,
        grid: FrameGrid,
        progress: ProgressCallback | None,
        cancel: CancellationToken | None,
    ) -> tuple[EnergyResult, PitchTrack]:
        """Energy and pitch both only read ``frames``; run them side by side if allowed."""
        if self.config.parallel and frames.shape[0] > 0:
            pitch_future = self._pool().submit(track_pitch, frames, grid, self.config, cancel)
            energy = analyze_energy(frames, grid, self.config)
            _notify(progress, "energy")
            track = pitch_future.result()
            _notify(progress, "pitch")
        else:
            energy = analyze_energy(frames, grid, self.config)
            _notify(progress, "energy")
            if cancel is not None:
                cancel.raise_if_cancelled()
            track = track_pitch(frames, grid, self.config, cancel)
            _notify(progress, "pitch")
        if cancel is not None:
            cancel.raise_if_cancelled()
        return energy, track

    def _ensure_open(self) -> None:
        if self._closed:
            raise AnalysisError("DeliveryAnalyzer has been closed")


def _notify(progress: ProgressCallback | None, stage: str) -> None:
    if progress is not None:
        progress(stage, (STAGES.index(stage) + 1) / len(STAGES))


def analyze_delivery(
    sample: AudioSample,
    words: list[WordToken] | None = None,
    config: AnalysisConfig | None = None,
    progress: ProgressCallback | None = None,
    cancel: CancellationToken | None = None,
) -> DeliveryReport:
    """One-shot analysis with a short-lived handle."""
    with DeliveryAnalyzer(config) as analyzer:
        return analyzer.analyze(sample, words=words, progress=progress, cancel=cancel)
