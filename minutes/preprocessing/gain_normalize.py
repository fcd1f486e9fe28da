"""Gain Normalize stage for the Audio Preprocessing Pipeline.

Scales the whole buffer so its peak reaches a target linear amplitude.
Gives the transcription service a consistent input level.
"""

from __future__ import annotations

import numpy as np

from minutes._audio_constants import NORMALIZE_PEAK_FLOOR, NORMALIZE_TARGET_PEAK
from minutes._types import SampleBuffer
from minutes.preprocessing.stages import AudioStage


class GainNormalizeStage(AudioStage):
    """Normalize audio amplitude to a target peak.

    Computes one gain, ``target_peak / peak``, and applies it uniformly to
    every sample. Buffers whose peak does not exceed ``peak_floor`` are
    returned unchanged so near-silence is not amplified into audible noise.

    Args:
        target_peak: Target peak amplitude in (0, 1]. Default: 0.95.
        peak_floor: Minimum peak worth normalizing. Default: 0.001.
    """

    def __init__(
        self,
        target_peak: float = NORMALIZE_TARGET_PEAK,
        peak_floor: float = NORMALIZE_PEAK_FLOOR,
    ) -> None:
        if not 0.0 < target_peak <= 1.0:
            msg = f"target_peak must be in (0, 1], got {target_peak}"
            raise ValueError(msg)
        self._target_peak = target_peak
        self._peak_floor = peak_floor

    @property
    def name(self) -> str:
        """Identifier name for the stage."""
        return "gain_normalize"

    @property
    def target_peak(self) -> float:
        return self._target_peak

    def process(self, buffer: SampleBuffer) -> SampleBuffer:
        """Normalize the buffer peak to the target level.

        Args:
            buffer: Input audio.

        Returns:
            New buffer; an unchanged copy when the peak is below the floor.
        """
        if buffer.length == 0:
            return SampleBuffer(buffer.samples.copy(), buffer.sample_rate)

        peak = float(np.max(np.abs(buffer.samples)))

        if peak <= self._peak_floor:
            return SampleBuffer(buffer.samples.copy(), buffer.sample_rate)

        gain = self._target_peak / peak
        normalized = (buffer.samples.astype(np.float64) * gain).astype(np.float32)

        return SampleBuffer(normalized, buffer.sample_rate)
