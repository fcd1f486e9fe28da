"""Shared test helpers for preprocessing tests.

Usage:
    from tests.helpers import (
        SAMPLE_RATE,
        FakeDecoder,
        make_buffer,
        make_sine,
        make_wav_bytes,
        read_wav_header,
    )
"""

from __future__ import annotations

import io
import struct
import wave

import numpy as np

from minutes._types import SampleBuffer
from minutes.exceptions import AudioDecodeError

SAMPLE_RATE = 16000


def make_sine(
    sample_rate: int = SAMPLE_RATE,
    duration: float = 0.1,
    frequency: float = 440.0,
    amplitude: float = 0.5,
) -> np.ndarray:
    """Generate a float32 sine wave."""
    t = np.arange(int(sample_rate * duration), dtype=np.float64) / sample_rate
    return (amplitude * np.sin(2 * np.pi * frequency * t)).astype(np.float32)


def make_buffer(*channels: np.ndarray | list[float], sample_rate: int = SAMPLE_RATE) -> SampleBuffer:
    """Build a SampleBuffer from one array per channel."""
    return SampleBuffer(np.array(channels, dtype=np.float32), sample_rate)


def make_wav_bytes(
    sample_rate: int = SAMPLE_RATE,
    duration: float = 0.1,
    n_channels: int = 1,
    amplitude: float = 0.5,
) -> bytes:
    """Create WAV PCM 16-bit bytes with a 440Hz tone on every channel."""
    tone = make_sine(sample_rate=sample_rate, duration=duration, amplitude=amplitude)
    frames = np.repeat((tone * 32767).astype("<i2"), n_channels)

    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wf:
        wf.setnchannels(n_channels)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(frames.tobytes())
    return buffer.getvalue()


def read_wav_header(data: bytes) -> dict[str, object]:
    """Unpack the canonical 44-byte WAV header into named fields."""
    fields = struct.unpack("<4sI4s4sIHHIIHH4sI", data[:44])
    names = (
        "riff",
        "riff_size",
        "wave",
        "fmt",
        "fmt_size",
        "audio_format",
        "num_channels",
        "sample_rate",
        "byte_rate",
        "block_align",
        "bits_per_sample",
        "data",
        "data_size",
    )
    return dict(zip(names, fields, strict=True))


def read_wav_samples(data: bytes) -> np.ndarray:
    """Return the int16 payload following the 44-byte header."""
    return np.frombuffer(data[44:], dtype="<i2")


class FakeDecoder:
    """Decoder returning a fixed buffer, or raising AudioDecodeError.

    Records every call so tests can assert whether decoding happened.
    """

    def __init__(self, buffer: SampleBuffer | None = None, error: str | None = None) -> None:
        self._buffer = buffer
        self._error = error
        self.calls: list[bytes] = []

    def decode(self, audio_bytes: bytes) -> SampleBuffer:
        self.calls.append(audio_bytes)
        if self._error is not None or self._buffer is None:
            raise AudioDecodeError(self._error or "no buffer configured")
        return self._buffer
