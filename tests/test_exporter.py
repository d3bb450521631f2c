"""Tests for exporter module."""

import os
import shutil
import struct

import pytest
from pydub import AudioSegment

from longform_tts.assembly import encode_wav
from longform_tts.exporter import export, output_format


def _make_wav(n_samples=2400):
    """0.1s of quiet mono PCM at 24 kHz."""
    return encode_wav(struct.pack(f"<{n_samples}h", *([100] * n_samples)))


def test_output_format():
    assert output_format("out/speech.WAV") == "wav"
    assert output_format("speech.mp3") == "mp3"


def test_output_format_unsupported():
    with pytest.raises(ValueError, match="Unsupported"):
        output_format("speech.ogg")


def test_export_wav_verbatim(tmp_path):
    """WAV bytes are written unchanged."""
    wav = _make_wav()
    path = export(wav, str(tmp_path / "speech.wav"))
    with open(path, "rb") as f:
        assert f.read() == wav


def test_export_creates_parent_dirs(tmp_path):
    path = export(_make_wav(), str(tmp_path / "nested" / "dir" / "speech.wav"))
    assert os.path.exists(path)


@pytest.mark.skipif(not shutil.which("ffmpeg"), reason="ffmpeg not installed")
def test_export_mp3(tmp_path):
    """Pydub can reload the exported MP3."""
    path = export(_make_wav(24000), str(tmp_path / "speech.mp3"))
    assert os.path.getsize(path) > 0
    reloaded = AudioSegment.from_mp3(path)
    assert abs(len(reloaded) - 1000) < 200
