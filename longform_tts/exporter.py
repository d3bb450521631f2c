"""Export assembled WAV audio to disk as WAV or MP3."""

import io
import os

from pydub import AudioSegment

from longform_tts.constants import OUTPUT_BITRATE

SUPPORTED_FORMATS = ("wav", "mp3")


def output_format(output_path: str) -> str:
    """Format implied by the file extension. Raises ValueError if unsupported."""
    ext = os.path.splitext(output_path)[1].lstrip(".").lower()
    if ext not in SUPPORTED_FORMATS:
        raise ValueError(
            f"Unsupported output format '.{ext}' (use {', '.join('.' + f for f in SUPPORTED_FORMATS)})"
        )
    return ext


def export(wav: bytes, output_path: str, bitrate: str = OUTPUT_BITRATE) -> str:
    """Write WAV bytes to output_path, transcoding to MP3 when the path asks for it.

    WAV output is written verbatim. MP3 goes through pydub and needs ffmpeg.
    Returns the path written.
    """
    fmt = output_format(output_path)

    parent = os.path.dirname(output_path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    if fmt == "wav":
        with open(output_path, "wb") as f:
            f.write(wav)
        return output_path

    audio = AudioSegment.from_wav(io.BytesIO(wav))
    audio.export(output_path, format="mp3", bitrate=bitrate)
    return output_path
