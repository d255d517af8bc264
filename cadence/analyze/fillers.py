"""
cadence.analyze.fillers - Lexical filler word scan.

Works on token text alone, so it runs even when the transcript has no
timestamps.
"""

from __future__ import annotations

from cadence.models import FillerSummary, WordToken
from cadence.utils import normalize_token

FILLER_SINGLES = frozenset(
    {"um", "uh", "like", "actually", "basically", "literally", "so", "okay", "right", "well"}
)
FILLER_BIGRAMS = {("you", "know"): "you know"}


def detect_fillers(
    words: list[WordToken] | list[str] | None,
    duration_sec: float | None = None,
) -> FillerSummary:
    """Count filler words in transcript order.

    A matched bigram consumes both of its tokens. ``most_common`` is the
    type with the highest count, the earliest seen winning ties.

    Args:
        words: WordTokens or plain strings
        duration_sec: Clip duration, used for the per-minute rate

    Returns:
        FillerSummary
    """
    tokens = [normalize_token(w if isinstance(w, str) else w.text) for w in words or []]

    by_type: dict[str, int] = {}
    i = 0
    while i < len(tokens):
        bigram = FILLER_BIGRAMS.get((tokens[i], tokens[i + 1])) if i + 1 < len(tokens) else None
        if bigram:
            by_type[bigram] = by_type.get(bigram, 0) + 1
            i += 2
            continue
        if tokens[i] in FILLER_SINGLES:
            by_type[tokens[i]] = by_type.get(tokens[i], 0) + 1
        i += 1

    most_common = None
    best = 0
    for kind, count in by_type.items():
        if count > best:
            most_common, best = kind, count

    total = sum(by_type.values())
    per_min = None
    if duration_sec and duration_sec > 0:
        per_min = round(total / (duration_sec / 60), 1)

    return FillerSummary(total=total, by_type=by_type, most_common=most_common, per_min=per_min)
