"""Tests for cadence CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from _helpers import make_sine, wav_bytes
from typer.testing import CliRunner

from cadence import __version__
from cadence.cli import app, print_report
from cadence.models import DeliveryReport, EOSSegment

runner = CliRunner()


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def words_file(workdir: Path) -> Path:
    path = workdir / "words.json"
    words = [
        {"text": "So", "start": 0.0, "end": 0.3},
        {"text": "um", "start": 0.4, "end": 0.6},
        {"text": "you", "start": 0.7, "end": 0.8},
        {"text": "know", "start": 0.8, "end": 1.0},
        {"text": "launch", "start": 1.6, "end": 1.9},
    ]
    path.write_text(json.dumps({"words": words}))
    return path


class TestVersion:
    def test_version_flag(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestAnalyzeCommand:
    def test_writes_report(self, workdir: Path, words_file: Path) -> None:
        audio = workdir / "clip.wav"
        audio.write_bytes(wav_bytes(make_sine(150.0, 2.0)))
        output = workdir / "report.json"

        result = runner.invoke(app, ["analyze", str(audio), "-w", str(words_file), "-o", str(output)])

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text())
        assert data["durationSec"] == 2.0
        assert data["fillers"]["total"] == 3
        assert "eosSegments" in data

    def test_missing_audio(self, workdir: Path) -> None:
        result = runner.invoke(app, ["analyze", str(workdir / "missing.wav")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_undecodable_audio(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("cadence.validation.shutil.which", lambda name: None)
        audio = workdir / "clip.webm"
        audio.write_bytes(b"not really audio" * 32)

        result = runner.invoke(app, ["analyze", str(audio)])
        assert result.exit_code == 1
        assert "FFmpeg" in result.output

    def test_unknown_profile(self, workdir: Path) -> None:
        audio = workdir / "clip.wav"
        audio.write_bytes(wav_bytes(make_sine(150.0, 0.5)))
        result = runner.invoke(app, ["analyze", str(audio), "-p", "nope"])
        assert result.exit_code == 1
        assert "Unknown profile" in result.output


    def test_directory_instead_of_file(self, workdir: Path) -> None:
        (workdir / "clips").mkdir()
        result = runner.invoke(app, ["analyze", str(workdir / "clips")])
        assert result.exit_code == 1
        assert "Could not read" in result.output


class TestPrintReport:
    def test_sentence_endings_labeled(self, capsys: pytest.CaptureFixture[str]) -> None:
        report = DeliveryReport(
            duration_sec=6.0,
            eos_segments=[
                EOSSegment(start_sec=0.0, end_sec=2.0, slope_hz_per_sec=-25.0),
                EOSSegment(start_sec=2.5, end_sec=4.0, slope_hz_per_sec=30.0),
                EOSSegment(start_sec=4.5, end_sec=6.0, slope_hz_per_sec=2.0),
            ],
        )
        print_report(report)

        out = capsys.readouterr().out
        assert "Sentence Endings" in out
        assert "falling" in out
        assert "rising" in out
        assert "flat" in out

    def test_no_endings_table_without_words(self, capsys: pytest.CaptureFixture[str]) -> None:
        print_report(DeliveryReport(duration_sec=1.0))
        assert "Sentence Endings" not in capsys.readouterr().out


class TestFillersCommand:
    def test_counts(self, words_file: Path) -> None:
        result = runner.invoke(app, ["fillers", str(words_file)])
        assert result.exit_code == 0
        assert "Total: 3" in result.output
        assert "Most common: so" in result.output

    def test_missing_file(self, workdir: Path) -> None:
        result = runner.invoke(app, ["fillers", str(workdir / "nope.json")])
        assert result.exit_code == 1


class TestValidateCommand:
    def test_valid_words(self, words_file: Path) -> None:
        result = runner.invoke(app, ["validate", str(words_file)])
        assert result.exit_code == 0
        assert "5 timed" in result.output

    def test_inverted_word(self, workdir: Path) -> None:
        path = workdir / "bad.json"
        path.write_text(json.dumps([{"text": "a", "start": 1.0, "end": 0.5}]))
        result = runner.invoke(app, ["validate", str(path)])
        assert result.exit_code == 1
        assert "ends before it starts" in result.output


class TestInitConfigCommand:
    def test_creates_file(self, workdir: Path) -> None:
        result = runner.invoke(app, ["init-config", "-p", "fast"])
        assert result.exit_code == 0
        content = (workdir / "cadence.yaml").read_text()
        assert "pitch_stride: 4" in content

    def test_refuses_overwrite(self, workdir: Path) -> None:
        (workdir / "cadence.yaml").write_text("profile: default\n")
        result = runner.invoke(app, ["init-config"])
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_force_overwrites(self, workdir: Path) -> None:
        (workdir / "cadence.yaml").write_text("profile: default\n")
        result = runner.invoke(app, ["init-config", "--force", "-p", "high-voice"])
        assert result.exit_code == 0
        assert "high-voice" in (workdir / "cadence.yaml").read_text()

    def test_unknown_profile(self, workdir: Path) -> None:
        result = runner.invoke(app, ["init-config", "-p", "nope"])
        assert result.exit_code == 1
