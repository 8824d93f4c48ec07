"""Tests for file-level audio validation."""

import asyncio

import pytest

from audiowhisper.core.audio import AudioFileValidator


def _validate(validator, path):
    return asyncio.run(validator.validate(path))


class TestAudioFileValidator:
    def test_valid_file_reports_size(self, make_audio):
        result = _validate(AudioFileValidator(), make_audio(4096))
        assert result.valid
        assert result.size_bytes == 4096
        assert result.reason is None

    def test_missing_file(self, tmp_path):
        result = _validate(AudioFileValidator(), tmp_path / "gone.m4a")
        assert not result.valid
        assert result.reason.startswith("Audio file not found")

    def test_directory_is_rejected(self, tmp_path):
        folder = tmp_path / "folder.wav"
        folder.mkdir()
        result = _validate(AudioFileValidator(), folder)
        assert not result.valid
        assert "not a file" in result.reason

    @pytest.mark.parametrize("name", ["notes.txt", "recording", "clip.MOV"])
    def test_unsupported_extension(self, make_audio, name):
        result = _validate(AudioFileValidator(), make_audio(name=name))
        assert not result.valid
        assert result.reason.startswith("Unsupported audio format")

    def test_extension_check_is_case_insensitive(self, make_audio):
        assert _validate(AudioFileValidator(), make_audio(name="MEMO.WAV")).valid

    def test_empty_file(self, make_audio):
        result = _validate(AudioFileValidator(), make_audio(0))
        assert not result.valid
        assert result.reason == "Audio file is empty"

    def test_size_limit(self, make_audio):
        validator = AudioFileValidator(max_bytes=1000)
        assert _validate(validator, make_audio(1000)).valid

        result = _validate(validator, make_audio(1001))
        assert not result.valid
        assert result.reason.startswith("Audio file is too large")
