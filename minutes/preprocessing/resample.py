"""ResampleStage — downmixes and converts audio to the target sample rate.

Uses scipy.signal.resample_poly for high-quality polyphase resampling.
Downmix and rate conversion are one linear operation: the channel mean is
resampled once, so there is a single interpolation pass.
"""

from __future__ import annotations

from math import ceil, gcd

import numpy as np
from scipy.signal import resample_poly

from minutes._audio_constants import TARGET_SAMPLE_RATE
from minutes._types import SampleBuffer
from minutes.preprocessing.stages import AudioStage


def _mix_to_mono(buffer: SampleBuffer) -> np.ndarray:
    if buffer.is_mono:
        return buffer.channel(0).astype(np.float32, copy=True)
    return buffer.samples.mean(axis=0, dtype=np.float64).astype(np.float32)


class ResampleStage(AudioStage):
    """Resample-and-downmix stage for the preprocessing pipeline.

    Converts audio with any channel count and sample rate to mono at the
    target sample rate (default 16kHz). The output duration matches the
    input: ``ceil(length * target_rate / sample_rate)`` samples.

    Args:
        target_sample_rate: Target sample rate in Hz (default: 16000).
    """

    def __init__(self, target_sample_rate: int = TARGET_SAMPLE_RATE) -> None:
        self._target_sample_rate = target_sample_rate

    @property
    def name(self) -> str:
        """Identifier name for the stage."""
        return "resample"

    @property
    def target_sample_rate(self) -> int:
        return self._target_sample_rate

    def process(self, buffer: SampleBuffer) -> SampleBuffer:
        """Convert audio to mono at the target sample rate.

        If the audio is already mono at the target rate, a copy is returned
        without resampling.

        Args:
            buffer: Input audio, any channel count and sample rate.

        Returns:
            Mono float32 buffer at the target sample rate.
        """
        mono = _mix_to_mono(buffer)

        if buffer.sample_rate == self._target_sample_rate:
            return SampleBuffer.from_mono(mono, buffer.sample_rate)

        # Calculate up/down factors simplified by GCD
        divisor = gcd(self._target_sample_rate, buffer.sample_rate)
        up = self._target_sample_rate // divisor
        down = buffer.sample_rate // divisor

        expected_length = ceil(buffer.length * up / down)
        resampled = np.asarray(resample_poly(mono, up, down), dtype=np.float32)

        if len(resampled) < expected_length:
            resampled = np.pad(resampled, (0, expected_length - len(resampled)))
        elif len(resampled) > expected_length:
            resampled = resampled[:expected_length]

        return SampleBuffer.from_mono(resampled, self._target_sample_rate)

