"""Assemble ordered segment audio into a WAV container."""

import struct
from dataclasses import dataclass

from longform_tts.constants import BITS_PER_SAMPLE, CHANNELS, SAMPLE_RATE, WAV_HEADER_SIZE
from longform_tts.models import SegmentResult

# RIFF descriptor, fmt chunk and data chunk header, all little-endian
_WAV_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


@dataclass(frozen=True)
class WavHeader:
    riff_size: int
    fmt_size: int
    audio_format: int
    channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int
    data_size: int


def concatenate(results: list[SegmentResult]) -> bytes:
    """Join result audio in index order. Failed and empty results add nothing."""
    ordered = sorted(results, key=lambda r: r.index)
    return b"".join(r.audio for r in ordered if r.ok and r.audio)


def encode_wav(
    pcm: bytes,
    sample_rate: int = SAMPLE_RATE,
    channels: int = CHANNELS,
    bits_per_sample: int = BITS_PER_SAMPLE,
) -> bytes:
    """Wrap raw PCM in a 44-byte RIFF/WAVE header."""
    block_align = channels * bits_per_sample // 8
    byte_rate = sample_rate * block_align
    header = _WAV_HEADER.pack(
        b"RIFF",
        WAV_HEADER_SIZE - 8 + len(pcm),
        b"WAVE",
        b"fmt ",
        16,         # PCM fmt chunk size
        1,          # PCM format tag
        channels,
        sample_rate,
        byte_rate,
        block_align,
        bits_per_sample,
        b"data",
        len(pcm),
    )
    return header + pcm


def read_wav_header(data: bytes) -> WavHeader:
    """Parse a header written by encode_wav. Raises ValueError on anything else."""
    if len(data) < WAV_HEADER_SIZE:
        raise ValueError(f"WAV data too short: {len(data)} bytes")

    (riff, riff_size, wave, fmt, fmt_size, audio_format, channels, sample_rate,
     byte_rate, block_align, bits_per_sample, data_id, data_size) = _WAV_HEADER.unpack_from(data)

    if riff != b"RIFF" or wave != b"WAVE" or fmt != b"fmt " or data_id != b"data":
        raise ValueError("Not a canonical PCM WAV header")

    return WavHeader(
        riff_size=riff_size,
        fmt_size=fmt_size,
        audio_format=audio_format,
        channels=channels,
        sample_rate=sample_rate,
        byte_rate=byte_rate,
        block_align=block_align,
        bits_per_sample=bits_per_sample,
        data_size=data_size,
    )


def assemble(results: list[SegmentResult]) -> bytes:
    """Concatenate results in order and encode them as a WAV file."""
    return encode_wav(concatenate(results))
