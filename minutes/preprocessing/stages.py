"""Base interface for Audio Preprocessing Pipeline stages."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from minutes._types import SampleBuffer


class AudioStage(ABC):
    """Individual audio preprocessing pipeline stage.

    Each stage receives a SampleBuffer and returns a new SampleBuffer that
    owns its own sample array. The input buffer is never modified.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifier name for the stage (e.g. 'resample', 'silence_trim')."""
        ...

    @abstractmethod
    def process(self, buffer: SampleBuffer) -> SampleBuffer:
        """Process a decoded buffer.

        Args:
            buffer: Input audio. Multi-channel only for the first stage.

        Returns:
            New buffer with the processed audio.
        """
        ...
