"""
cadence.models - Data model for the analysis pipeline.

Signal-level data (samples, frame series, pitch series) lives in frozen
dataclasses over flat numpy arrays. Everything that ends up in a report
is a pydantic model that serializes to the camelCase JSON contract.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Literal

import numpy as np
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ReportModel(BaseModel):
    """Base for report entities: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


@dataclass(frozen=True)
class AudioSample:
    """Decoded mono audio at the canonical sample rate."""

    samples: np.ndarray
    sample_rate: int
    duration_sec: float

    def __post_init__(self) -> None:
        samples = np.array(self.samples, dtype=np.float32, copy=True)
        samples.setflags(write=False)
        object.__setattr__(self, "samples", samples)

    @classmethod
    def from_array(cls, samples: np.ndarray, sample_rate: int) -> AudioSample:
        """Wrap an array already at ``sample_rate``; duration follows its length."""
        return cls(samples=samples, sample_rate=sample_rate, duration_sec=len(samples) / sample_rate)

    def __len__(self) -> int:
        return len(self.samples)


class WordToken(BaseModel):
    """One transcribed word, as supplied by the transcription service."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str = Field(validation_alias=AliasChoices("text", "punctuated_word", "word"))
    start_sec: float | None = Field(
        default=None, validation_alias=AliasChoices("startSec", "start_sec", "start")
    )
    end_sec: float | None = Field(default=None, validation_alias=AliasChoices("endSec", "end_sec", "end"))
    confidence: float | None = None

    @property
    def has_timing(self) -> bool:
        return self.start_sec is not None and self.end_sec is not None

    @property
    def midpoint(self) -> float:
        return (self.start_sec + self.end_sec) / 2


def timed_words(words: list[WordToken] | None) -> list[WordToken]:
    """Tokens carrying both timestamps, sorted by start time."""
    if not words:
        return []
    return sorted((w for w in words if w.has_timing), key=lambda w: w.start_sec)


class Frame(ReportModel):
    index: int
    start_sec: float
    rms: float
    rms_norm: float


@dataclass(frozen=True)
class EnergyTrack:
    """Per-frame energy series for the whole clip."""

    frame_times: np.ndarray
    rms: np.ndarray
    rms_norm: np.ndarray
    hop_sec: float

    def __len__(self) -> int:
        return len(self.frame_times)

    def frames(self) -> Iterator[Frame]:
        for i in range(len(self.frame_times)):
            yield Frame(
                index=i,
                start_sec=float(self.frame_times[i]),
                rms=float(self.rms[i]),
                rms_norm=float(self.rms_norm[i]),
            )


class Hotspot(ReportModel):
    start_sec: float
    end_sec: float
    label: str | None = None


class PitchSample(ReportModel):
    time_sec: float
    f0_hz: float


@dataclass(frozen=True)
class PitchTrack:
    """Accepted pitch estimates, time ordered."""

    times: np.ndarray
    f0_hz: np.ndarray

    def __len__(self) -> int:
        return len(self.times)

    def samples(self) -> Iterator[PitchSample]:
        for t, f in zip(self.times, self.f0_hz):
            yield PitchSample(time_sec=float(t), f0_hz=float(f))

    @classmethod
    def empty(cls) -> PitchTrack:
        return cls(times=np.zeros(0), f0_hz=np.zeros(0))


class PitchStats(ReportModel):
    range_hz: float | None = None
    variance_hz2: float | None = None
    monotony_index: float | None = None
    valid_count: int = 0


class Segment(ReportModel):
    """A stretch of speech bounded by inter-word silences."""

    start_sec: float
    end_sec: float


class EOSSegment(ReportModel):
    start_sec: float
    end_sec: float
    slope_hz_per_sec: float


class PauseEvent(ReportModel):
    start_sec: float
    end_sec: float
    duration_sec: float
    kind: Literal["medium", "long"] = Field(alias="class")


class PauseStats(ReportModel):
    avg_gap_sec: float
    median_gap_sec: float
    medium_count: int
    long_count: int
    ratio_percent: float
    total_pause_sec: float
    total_talk_sec: float
    long_pause_percent: float = 0.0
    long_pauses_per_min: float | None = None


class WpmPoint(ReportModel):
    t: float
    wpm: float


class FillerSummary(ReportModel):
    total: int = 0
    by_type: dict[str, int] = Field(default_factory=dict)
    most_common: str | None = None
    per_min: float | None = None


class DeliveryScores(ReportModel):
    filler_word_rate: float
    clarity_score: float
    confidence_score: float
    pace_wpm: float | None = None
    pace_label: str | None = None
    energy_label: str | None = None
    expressiveness_label: str | None = None
    monotony_note: str | None = None


class DeliveryReport(ReportModel):
    """Everything the engine measured for one recording."""

    duration_sec: float
    variability: float | None = None
    hotspots: list[Hotspot] = Field(default_factory=list)
    pitch: PitchStats = Field(default_factory=PitchStats)
    eos_segments: list[EOSSegment] | None = None
    eos_average_slope_hz_per_sec: float | None = None
    pauses: PauseStats | None = None
    pause_events: list[PauseEvent] = Field(default_factory=list)
    tempo_std_dev_wps: float = 0.0
    wpm_timeline: list[WpmPoint] = Field(default_factory=list)
    fillers: FillerSummary = Field(default_factory=FillerSummary)
    word_count: int = 0
    scores: DeliveryScores | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON form of the report.

        ``eosSegments`` is dropped when prosody alignment did not run, and
        hotspots without a label carry no ``label`` key.
        """
        data = self.model_dump(by_alias=True, mode="json")
        if self.eos_segments is None:
            data.pop("eosSegments")
            data.pop("eosAverageSlopeHzPerSec")
        for hotspot in data["hotspots"]:
            if hotspot.get("label") is None:
                hotspot.pop("label", None)
        return data
