"""
cadence.validation - Dependency checks and input validation.

Validates the decoding environment and word token input before analysis.
"""

from __future__ import annotations

import shutil
import subprocess
from typing import Any

from cadence.exceptions import DependencyError, UnsupportedEnvironmentError
from cadence.models import WordToken

FFMPEG_INSTALL_HINT = "Install with: brew install ffmpeg (macOS) or apt install ffmpeg (Linux)"


def find_ffmpeg() -> str:
    """Return the FFmpeg executable path.

    Raises:
        UnsupportedEnvironmentError: If FFmpeg is not on PATH
    """
    ffmpeg_path = shutil.which("ffmpeg")
    if not ffmpeg_path:
        raise UnsupportedEnvironmentError("ffmpeg", "FFmpeg not found in PATH", FFMPEG_INSTALL_HINT)
    return ffmpeg_path


def check_ffmpeg() -> dict[str, str]:
    """Check if FFmpeg is installed and get its version.

    Returns:
        Dict with 'ffmpeg_version'

    Raises:
        UnsupportedEnvironmentError: If FFmpeg not found
    """
    ffmpeg_path = find_ffmpeg()

    try:
        proc = subprocess.run(
            [ffmpeg_path, "-version"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        version_line = proc.stdout.split("\n")[0]
        return {"ffmpeg_version": version_line.split()[2] if version_line else "unknown"}
    except (subprocess.TimeoutExpired, IndexError):
        return {"ffmpeg_version": "unknown"}


def check_soundfile() -> dict[str, str]:
    """Check that libsndfile is loadable through the soundfile package.

    Raises:
        DependencyError: If soundfile or its native library is missing
    """
    try:
        import soundfile
    except (ImportError, OSError) as e:
        raise DependencyError("soundfile", str(e), "Install with: pip install soundfile") from e
    return {"libsndfile_version": soundfile.__libsndfile_version__}


def validate_words(words: list[WordToken]) -> dict[str, Any]:
    """Summarize how usable a token list is for time-aligned analysis.

    Returns:
        Dict with 'valid', 'timed_count', 'untimed_count', 'warnings'
    """
    result: dict[str, Any] = {"valid": True, "timed_count": 0, "untimed_count": 0, "warnings": []}

    prev_start = None
    for i, word in enumerate(words):
        if not word.has_timing:
            result["untimed_count"] += 1
            continue
        result["timed_count"] += 1
        if word.end_sec < word.start_sec:
            result["warnings"].append(f"Word {i} ('{word.text}') ends before it starts")
            result["valid"] = False
        if prev_start is not None and word.start_sec < prev_start:
            result["warnings"].append(f"Word {i} ('{word.text}') is out of order")
        prev_start = word.start_sec

    if words and result["timed_count"] == 0:
        result["warnings"].append("No word timestamps: pause, prosody and hotspot labels are skipped")
    elif result["untimed_count"]:
        result["warnings"].append(
            f"{result['untimed_count']} word(s) without timestamps are excluded from timing metrics"
        )

    return result
