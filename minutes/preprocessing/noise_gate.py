"""NoiseGateStage — attenuates low-level background noise.

Samples quieter than the threshold are scaled down instead of muted, which
avoids the choppy artifacts of a hard gate.
"""

from __future__ import annotations

import numpy as np

from minutes._audio_constants import NOISE_GATE_REDUCTION, NOISE_GATE_THRESHOLD
from minutes._types import SampleBuffer
from minutes.preprocessing.stages import AudioStage


class NoiseGateStage(AudioStage):
    """Soft noise gate.

    Args:
        threshold: Samples with ``|x| < threshold`` are attenuated (default 0.02).
        reduction: Gain applied to attenuated samples, in [0, 1] (default 0.2).
    """

    def __init__(
        self,
        threshold: float = NOISE_GATE_THRESHOLD,
        reduction: float = NOISE_GATE_REDUCTION,
    ) -> None:
        if not 0.0 <= reduction <= 1.0:
            msg = f"reduction must be in [0, 1], got {reduction}"
            raise ValueError(msg)
        self._threshold = threshold
        self._reduction = reduction

    @property
    def name(self) -> str:
        """Identifier name for the stage."""
        return "noise_gate"

    def process(self, buffer: SampleBuffer) -> SampleBuffer:
        samples = buffer.samples
        gated = np.where(
            np.abs(samples) < self._threshold,
            samples * np.float32(self._reduction),
            samples,
        ).astype(np.float32)
        return SampleBuffer(gated, buffer.sample_rate)
