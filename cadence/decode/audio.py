"""
cadence.decode.audio - Decode and resample to 16kHz mono.

Reads the buffer with libsndfile (soundfile) when it can, downmixes all
channels, and resamples the whole signal with librosa. Containers
libsndfile does not read (webm/opus, m4a, ...) are piped through FFmpeg,
which does the downmix and resample itself.
"""

from __future__ import annotations

import io
import math
import subprocess
from pathlib import Path

import librosa
import numpy as np
import soundfile as sf

from cadence.exceptions import DecodeError
from cadence.logging import get_logger
from cadence.models import AudioSample
from cadence.validation import find_ffmpeg

logger = get_logger(__name__)

CANONICAL_SAMPLE_RATE = 16000

# Leading bytes of containers libsndfile reads itself (WAV, RF64, AIFF, FLAC)
NATIVE_MAGIC = (b"RIFF", b"RF64", b"FORM", b"fLaC")


def decode_audio(data: bytes, sample_rate: int = CANONICAL_SAMPLE_RATE) -> AudioSample:
    """Decode an encoded audio buffer to a mono AudioSample.

    Args:
        data: Encoded audio bytes (WAV, FLAC, OGG, MP3, WebM, ...)
        sample_rate: Target sample rate

    Returns:
        AudioSample at ``sample_rate``

    Raises:
        DecodeError: If the buffer is empty, corrupt, or unsupported
        UnsupportedEnvironmentError: If the container needs FFmpeg and it is
            not installed
    """
    if not data:
        raise DecodeError("Audio buffer is empty")

    try:
        samples, source_rate = _read_soundfile(data)
    except sf.SoundFileError as e:
        if data[:4] in NATIVE_MAGIC:
            raise DecodeError(f"Corrupt audio buffer: {e}") from e
        logger.debug("libsndfile could not read buffer (%s), falling back to FFmpeg", e)
        return _decode_ffmpeg(data, sample_rate)

    if len(samples) == 0:
        raise DecodeError("Audio buffer contains no samples")

    duration = len(samples) / source_rate
    if source_rate != sample_rate:
        samples = librosa.resample(samples, orig_sr=source_rate, target_sr=sample_rate)
        expected = max(1, math.ceil(duration * sample_rate))
        samples = librosa.util.fix_length(samples, size=expected)

    logger.debug(
        "Decoded %.2fs of audio at %d Hz -> %d samples at %d Hz",
        duration,
        source_rate,
        len(samples),
        sample_rate,
    )
    return AudioSample(samples=samples, sample_rate=sample_rate, duration_sec=duration)


def decode_file(path: Path, sample_rate: int = CANONICAL_SAMPLE_RATE) -> AudioSample:
    """Decode an audio file from disk."""
    try:
        data = path.read_bytes()
    except OSError as e:
        raise DecodeError(f"Could not read {path}: {e}") from e
    return decode_audio(data, sample_rate=sample_rate)


def _read_soundfile(data: bytes) -> tuple[np.ndarray, int]:
    samples, source_rate = sf.read(io.BytesIO(data), dtype="float32", always_2d=True)
    return samples.mean(axis=1), int(source_rate)


def _decode_ffmpeg(data: bytes, sample_rate: int) -> AudioSample:
    ffmpeg_path = find_ffmpeg()

    cmd = [
        ffmpeg_path,
        "-hide_banner",
        "-loglevel",
        "error",
        "-i",
        "pipe:0",
        "-vn",
        "-ac",
        "1",
        "-ar",
        str(sample_rate),
        "-f",
        "f32le",
        "pipe:1",
    ]

    try:
        proc = subprocess.run(cmd, input=data, capture_output=True)
    except OSError as e:
        raise DecodeError(f"FFmpeg could not be started: {e}") from e

    if proc.returncode != 0:
        stderr = proc.stderr.decode("utf-8", errors="replace").strip()
        raise DecodeError(f"FFmpeg decode failed: {stderr or 'unknown error'}")

    samples = np.frombuffer(proc.stdout, dtype="<f4")
    if len(samples) == 0:
        raise DecodeError("Audio buffer contains no samples")

    logger.debug("Decoded %d samples at %d Hz via FFmpeg", len(samples), sample_rate)
    return AudioSample.from_array(samples, sample_rate)
