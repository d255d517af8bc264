"""Tests for cadence.validation module."""

from __future__ import annotations

import pytest

from cadence.exceptions import UnsupportedEnvironmentError
from cadence.models import WordToken
from cadence.validation import FFMPEG_INSTALL_HINT, check_soundfile, find_ffmpeg, validate_words


class TestFindFfmpeg:
    def test_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("cadence.validation.shutil.which", lambda name: None)
        with pytest.raises(UnsupportedEnvironmentError) as exc_info:
            find_ffmpeg()
        assert exc_info.value.dependency == "ffmpeg"
        assert exc_info.value.install_hint == FFMPEG_INSTALL_HINT

    def test_found(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("cadence.validation.shutil.which", lambda name: "/usr/bin/ffmpeg")
        assert find_ffmpeg() == "/usr/bin/ffmpeg"


class TestCheckSoundfile:
    def test_reports_version(self) -> None:
        assert check_soundfile()["libsndfile_version"]


class TestValidateWords:
    def test_all_timed(self) -> None:
        words = [
            WordToken(text="a", start_sec=0.0, end_sec=0.2),
            WordToken(text="b", start_sec=0.3, end_sec=0.5),
        ]
        result = validate_words(words)
        assert result["valid"] is True
        assert result["timed_count"] == 2
        assert result["untimed_count"] == 0
        assert result["warnings"] == []

    def test_end_before_start(self) -> None:
        result = validate_words([WordToken(text="a", start_sec=1.0, end_sec=0.5)])
        assert result["valid"] is False
        assert "ends before it starts" in result["warnings"][0]

    def test_out_of_order_is_warning_only(self) -> None:
        words = [
            WordToken(text="a", start_sec=1.0, end_sec=1.2),
            WordToken(text="b", start_sec=0.0, end_sec=0.2),
        ]
        result = validate_words(words)
        assert result["valid"] is True
        assert any("out of order" in w for w in result["warnings"])

    def test_partially_timed(self) -> None:
        words = [WordToken(text="a", start_sec=0.0, end_sec=0.2), WordToken(text="b")]
        result = validate_words(words)
        assert result["untimed_count"] == 1
        assert any("excluded from timing" in w for w in result["warnings"])

    def test_no_timestamps(self) -> None:
        result = validate_words([WordToken(text="a"), WordToken(text="b")])
        assert result["valid"] is True
        assert any("No word timestamps" in w for w in result["warnings"])

    def test_empty(self) -> None:
        result = validate_words([])
        assert result["valid"] is True
        assert result["warnings"] == []
