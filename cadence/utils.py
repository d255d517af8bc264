"""
cadence.utils - Shared utility functions.

Formatting helpers for the CLI and token text helpers shared by the
analyzers.
"""

from __future__ import annotations

import re


def format_duration(seconds: float) -> str:
    """Format seconds as HH:MM:SS or MM:SS.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string (HH:MM:SS if >= 1 hour, otherwise MM:SS)
    """
    seconds = round(seconds)
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_timestamp(seconds: float) -> str:
    """Format a position in the clip as M:SS.ss."""
    minutes = int(seconds // 60)
    return f"{minutes}:{seconds - minutes * 60:05.2f}"


_EDGE_PUNCT = re.compile(r"^\W+|\W+$")


def normalize_token(text: str) -> str:
    """Lower-case a token and strip surrounding punctuation ("Um," -> "um")."""
    return _EDGE_PUNCT.sub("", text.lower())


def is_word(text: str) -> bool:
    """True when the token contains at least one letter, in any script."""
    return any(c.isalpha() for c in text)
