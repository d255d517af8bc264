"""
cadence.io - JSON read/write helpers, atomic file writes, word token loading.

Centralized I/O utilities for the CLI and for callers that keep
transcripts on disk.
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import Any

import pydantic

from cadence.exceptions import ValidationError
from cadence.models import WordToken


def read_json(path: Path) -> Any:
    """Read JSON file with UTF-8 encoding.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON data

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If file contains invalid JSON
    """
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def write_json(path: Path, data: dict[str, Any], indent: int = 2) -> None:
    """Write JSON file atomically with pretty formatting.

    Writes to a temp file first, then renames to prevent corruption
    on interruption.

    Args:
        path: Destination path for JSON file
        data: Data to write
        indent: Indentation level for pretty printing (default: 2)
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=path.parent,
        delete=False,
        suffix=".tmp",
    ) as tmp:
        tmp_path = Path(tmp.name)
        try:
            json.dump(data, tmp, indent=indent, ensure_ascii=False)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise
    tmp_path.replace(path)


def _extract_word_list(data: Any) -> list[Any]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        if isinstance(data.get("words"), list):
            return data["words"]
        # Deepgram prerecorded response
        try:
            return data["results"]["channels"][0]["alternatives"][0]["words"]
        except (KeyError, IndexError, TypeError):
            pass
        # Whisper-style transcript with per-segment words
        if isinstance(data.get("segments"), list):
            words: list[Any] = []
            for seg in data["segments"]:
                words.extend(seg.get("words", []))
            return words
    raise ValidationError("Expected a list of words or an object with a 'words' list")


def parse_words(data: Any) -> list[WordToken]:
    """Validate raw word dicts into WordTokens.

    Accepts a bare list, ``{"words": [...]}``, a Deepgram response, or a
    transcript with ``segments[].words``.

    Raises:
        ValidationError: If the structure or any token is malformed
    """
    raw_words = _extract_word_list(data)
    tokens = []
    for i, raw in enumerate(raw_words):
        try:
            tokens.append(WordToken.model_validate(raw))
        except pydantic.ValidationError as e:
            raise ValidationError(f"Word {i} is malformed: {e}") from e
    return tokens


def load_words(path: Path) -> list[WordToken]:
    """Load word tokens from a JSON file."""
    try:
        data = read_json(path)
    except json.JSONDecodeError as e:
        raise ValidationError(f"{path.name} is not valid JSON: {e}") from e
    return parse_words(data)
