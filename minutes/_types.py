"""Core types for the preprocessing pipeline.

This module defines the enums and dataclasses shared by the decoder,
the stages, the encoder, and the batch runner.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np


class PipelineState(Enum):
    """State of a single preprocessing run.

    Valid transitions:
        IDLE -> DECODING
        DECODING -> RESAMPLING (decoded buffer available)
        DECODING -> FAILED (decode error)
        RESAMPLING -> TRIMMING | GATING | NORMALIZING | ENCODING
        TRIMMING -> GATING | NORMALIZING | ENCODING
        GATING -> NORMALIZING | ENCODING
        NORMALIZING -> ENCODING
        ENCODING -> DONE
        Any running stage -> FAILED (resource error)
    """

    IDLE = "idle"
    DECODING = "decoding"
    RESAMPLING = "resampling"
    TRIMMING = "trimming"
    GATING = "gating"
    NORMALIZING = "normalizing"
    ENCODING = "encoding"
    DONE = "done"
    FAILED = "failed"


class BatchItemStatus(Enum):
    """Outcome of one file in a batch run."""

    PROCESSED = "processed"  # preprocessed WAV produced
    SKIPPED = "skipped"  # no flag enabled, original returned
    PASSTHROUGH = "passthrough"  # text input, never touches the pipeline
    FALLBACK = "fallback"  # preprocessing failed, original returned


@dataclass(frozen=True, slots=True)
class SampleBuffer:
    """Decoded audio held in memory.

    ``samples`` is a float32 matrix shaped ``(num_channels, length)``, so
    every channel has the same length. Stages never mutate a buffer: each
    returns a new one owning a fresh array.

    Raises:
        ValueError: If the array is not 2-D, has no channels, or the
            sample rate is not positive.
    """

    samples: np.ndarray
    sample_rate: int

    def __post_init__(self) -> None:
        if self.samples.ndim != 2:
            msg = f"samples must be 2-D (channels, length), got shape {self.samples.shape}"
            raise ValueError(msg)
        if self.samples.shape[0] < 1:
            msg = "samples must have at least one channel"
            raise ValueError(msg)
        if self.sample_rate <= 0:
            msg = f"sample_rate must be positive, got {self.sample_rate}"
            raise ValueError(msg)

    @classmethod
    def from_mono(cls, channel: np.ndarray, sample_rate: int) -> SampleBuffer:
        """Wrap a 1-D array as a single-channel buffer."""
        return cls(np.asarray(channel, dtype=np.float32).reshape(1, -1), sample_rate)

    @property
    def num_channels(self) -> int:
        return int(self.samples.shape[0])

    @property
    def length(self) -> int:
        """Sample count per channel."""
        return int(self.samples.shape[1])

    @property
    def duration_s(self) -> float:
        return self.length / self.sample_rate

    @property
    def is_mono(self) -> bool:
        return self.num_channels == 1

    def channel(self, index: int = 0) -> np.ndarray:
        """Return one channel as a 1-D view."""
        return self.samples[index]


@dataclass(frozen=True, slots=True)
class SoundInterval:
    """Half-open ``[start, end)`` range of samples classified as sound."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass(frozen=True, slots=True)
class EncodedAudioFile:
    """Pipeline output: container bytes plus the name and type to upload them as."""

    data: bytes
    file_name: str
    mime_type: str
