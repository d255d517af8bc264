"""Tests for cadence.utils module."""

from __future__ import annotations

from cadence.utils import format_duration, format_timestamp, is_word, normalize_token


class TestFormatDuration:
    def test_seconds_only(self) -> None:
        assert format_duration(5) == "0:05"

    def test_minutes(self) -> None:
        assert format_duration(65) == "1:05"

    def test_hours(self) -> None:
        assert format_duration(3661) == "1:01:01"

    def test_rounds_before_splitting(self) -> None:
        assert format_duration(59.6) == "1:00"


class TestFormatTimestamp:
    def test_under_a_minute(self) -> None:
        assert format_timestamp(1.5) == "0:01.50"

    def test_over_a_minute(self) -> None:
        assert format_timestamp(61.25) == "1:01.25"

    def test_zero(self) -> None:
        assert format_timestamp(0.0) == "0:00.00"


class TestNormalizeToken:
    def test_lowercases_and_strips_punctuation(self) -> None:
        assert normalize_token("Um,") == "um"
        assert normalize_token("\"Well...\"") == "well"

    def test_inner_punctuation_kept(self) -> None:
        assert normalize_token("don't") == "don't"

    def test_non_ascii(self) -> None:
        assert normalize_token("¿Déjà?") == "déjà"


class TestIsWord:
    def test_latin(self) -> None:
        assert is_word("launch")

    def test_other_scripts(self) -> None:
        assert is_word("東京")
        assert is_word("ñ")

    def test_digits_and_punctuation(self) -> None:
        assert not is_word("42")
        assert not is_word("...")
        assert not is_word("")
