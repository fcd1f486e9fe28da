"""Audio decoding and WAV encoding.

Converts between bytes (file formats) and SampleBuffer. Decoding is an
injected capability: the pipeline only depends on the ``AudioDecoder``
protocol, and ``SoundFileDecoder`` is the default libsndfile-backed
implementation.
"""

from __future__ import annotations

import io
import struct
import wave
from typing import Protocol

import numpy as np
import soundfile as sf

from minutes._audio_constants import (
    BITS_PER_SAMPLE_INT16,
    BYTES_PER_SAMPLE_INT16,
    PCM_INT16_NEGATIVE_SCALE,
    PCM_INT16_POSITIVE_SCALE,
    PCM_UINT8_SCALE,
    WAV_FMT_CHUNK_SIZE,
    WAV_FORMAT_PCM,
    WAV_HEADER_SIZE,
)
from minutes._types import SampleBuffer
from minutes.exceptions import AudioDecodeError
from minutes.logging import get_logger

logger = get_logger("preprocessing.audio_io")

# RIFF/WAVE header with a single PCM fmt chunk followed by the data chunk.
_WAV_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


class AudioDecoder(Protocol):
    """Turns raw input bytes into a multi-channel SampleBuffer."""

    def decode(self, audio_bytes: bytes) -> SampleBuffer:
        """Decode bytes.

        Raises:
            AudioDecodeError: If the bytes are empty, corrupt, or in an
                unsupported format.
        """
        ...


class SoundFileDecoder:
    """Decoder backed by libsndfile (WAV, FLAC, OGG, MP3, ...).

    Falls back to the stdlib ``wave`` reader for plain PCM WAV that
    libsndfile rejects. Channels are preserved; downmixing is a pipeline
    stage.
    """

    def decode(self, audio_bytes: bytes) -> SampleBuffer:
        if not audio_bytes:
            raise AudioDecodeError("Empty audio (0 bytes)")

        try:
            data, sample_rate = sf.read(io.BytesIO(audio_bytes), dtype="float32", always_2d=True)
        except Exception:
            # Fallback to wave stdlib (plain WAV PCM without complex headers)
            try:
                data, sample_rate = _decode_wav_stdlib(audio_bytes)
            except AudioDecodeError:
                raise
            except Exception as wav_err:
                raise AudioDecodeError(f"Could not decode audio: {wav_err}") from wav_err

        if data.shape[0] == 0:
            raise AudioDecodeError("Audio has no frames")

        # soundfile returns (frames, channels)
        buffer = SampleBuffer(np.ascontiguousarray(data.T, dtype=np.float32), int(sample_rate))

        logger.debug(
            "audio_decoded",
            channels=buffer.num_channels,
            samples=buffer.length,
            sample_rate=buffer.sample_rate,
            duration_s=round(buffer.duration_s, 3),
        )

        return buffer


def _decode_wav_stdlib(audio_bytes: bytes) -> tuple[np.ndarray, int]:
    """Decode WAV PCM using wave stdlib as fallback.

    Returns:
        Tuple (float32 array shaped (frames, channels), sample rate).

    Raises:
        AudioDecodeError: If the WAV is invalid or uses a non-PCM format.
    """
    try:
        with wave.open(io.BytesIO(audio_bytes), "rb") as wf:
            n_channels = wf.getnchannels()
            sampwidth = wf.getsampwidth()
            sample_rate = wf.getframerate()
            n_frames = wf.getnframes()

            if n_frames == 0:
                raise AudioDecodeError("WAV file has no audio frames")

            raw_data = wf.readframes(n_frames)
    except (wave.Error, EOFError) as err:
        raise AudioDecodeError(f"Invalid WAV file: {err}") from err

    if sampwidth == 2:
        data = np.frombuffer(raw_data, dtype="<i2").astype(np.float32) / PCM_INT16_NEGATIVE_SCALE
    elif sampwidth == 1:
        data = np.frombuffer(raw_data, dtype=np.uint8).astype(np.float32) / PCM_UINT8_SCALE - 1.0
    else:
        raise AudioDecodeError(f"Sample width {sampwidth} bytes not supported (expected 1 or 2)")

    return data.reshape(-1, n_channels), sample_rate


def quantize_pcm16(samples: np.ndarray) -> np.ndarray:
    """Quantize float samples to little-endian int16.

    Samples are clamped to [-1.0, 1.0]; negative values scale by 32768 and
    non-negative values by 32767, truncating toward zero.
    """
    clamped = np.clip(samples.astype(np.float64), -1.0, 1.0)
    scaled = np.where(
        clamped < 0,
        clamped * PCM_INT16_NEGATIVE_SCALE,
        clamped * PCM_INT16_POSITIVE_SCALE,
    )
    return np.trunc(scaled).astype("<i2")


def wav_header(num_channels: int, sample_rate: int, num_samples: int) -> bytes:
    """Build the 44-byte canonical PCM16 WAV header.

    Args:
        num_channels: Channel count.
        sample_rate: Sample rate in Hz.
        num_samples: Samples per channel.
    """
    block_align = num_channels * BYTES_PER_SAMPLE_INT16
    data_size = num_samples * block_align
    return _WAV_HEADER.pack(
        b"RIFF",
        WAV_HEADER_SIZE - 8 + data_size,
        b"WAVE",
        b"fmt ",
        WAV_FMT_CHUNK_SIZE,
        WAV_FORMAT_PCM,
        num_channels,
        sample_rate,
        sample_rate * block_align,
        block_align,
        BITS_PER_SAMPLE_INT16,
        b"data",
        data_size,
    )


def encode_wav(buffer: SampleBuffer) -> bytes:
    """Encode a SampleBuffer to WAV PCM 16-bit bytes.

    Channels are interleaved. The result is always
    ``44 + 2 * num_channels * length`` bytes long.

    Args:
        buffer: Audio to encode (mono after the pipeline stages).

    Returns:
        Complete WAV file bytes (with header).
    """
    # (channels, length) -> frame-major interleaving
    pcm_data = quantize_pcm16(buffer.samples).T.tobytes()
    return wav_header(buffer.num_channels, buffer.sample_rate, buffer.length) + pcm_data
