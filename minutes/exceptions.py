"""Typed exceptions for the minutes preprocessing pipeline.

Hierarchy:
    MinutesError (base)
    +-- AudioError
    |   +-- AudioDecodeError   (corrupt/unsupported input, caller may fall back)
    |   +-- AudioResourceError (allocation or render failure inside a stage)
    |   +-- AudioTooLargeError
    +-- BatchCancelledError
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from minutes.preprocessing.batch import BatchItemResult


class MinutesError(Exception):
    """Base for all minutes exceptions."""


# --- Audio ---


class AudioError(MinutesError):
    """Audio processing error."""


class AudioDecodeError(AudioError):
    """Input bytes could not be decoded (unsupported or corrupt format)."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Audio decoding failed: {detail}")


class AudioResourceError(AudioError):
    """A pipeline stage could not allocate or render its output."""

    def __init__(self, stage: str, reason: str) -> None:
        self.stage = stage
        self.reason = reason
        super().__init__(f"Stage '{stage}' failed: {reason}")


class AudioTooLargeError(AudioError):
    """Audio file exceeds the allowed limit."""

    def __init__(self, size_bytes: int, max_bytes: int) -> None:
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes
        size_mb = size_bytes / (1024 * 1024)
        max_mb = max_bytes / (1024 * 1024)
        super().__init__(f"Audio file ({size_mb:.1f}MB) exceeds the {max_mb:.1f}MB limit")


# --- Batch ---


class BatchCancelledError(MinutesError):
    """Batch was cancelled between files.

    Carries the results of the files completed before cancellation.
    """

    def __init__(self, completed: list[BatchItemResult], remaining: int) -> None:
        self.completed = completed
        self.remaining = remaining
        super().__init__(
            f"Batch cancelled after {len(completed)} file(s), {remaining} not processed"
        )
