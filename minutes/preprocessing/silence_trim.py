"""SilenceTrimStage — removes long pauses from speech recordings.

Silent runs of at least ``min_silence_s`` are cut out; shorter pauses stay
as part of the speech. Every retained segment gets ``padding_s`` of zeros on
both sides so the transcription model still hears natural cadence.

The scan is a small state machine that walks quiet runs instead of single
samples, so it is linear in the sample count without a Python-level loop
per sample:

    SILENCE --(loud sample)--> IN_SOUND --(quiet run)--> MEASURING_SILENCE
    MEASURING_SILENCE --(run >= min)--> SILENCE   (interval closed at run start)
    MEASURING_SILENCE --(run <  min)--> IN_SOUND  (pause kept inside speech)

A sample is *loud* when ``|x| > threshold`` and *quiet* when
``|x| < threshold``. A sample exactly at the threshold is neither: it never
opens an interval and it ends a quiet run.
"""

from __future__ import annotations

from enum import Enum

import numpy as np

from minutes._audio_constants import MIN_SILENCE_DURATION_S, SILENCE_PADDING_S, SILENCE_THRESHOLD
from minutes._types import SampleBuffer, SoundInterval
from minutes.logging import get_logger
from minutes.preprocessing.stages import AudioStage

logger = get_logger("preprocessing.silence_trim")


class _ScanState(Enum):
    SILENCE = "silence"
    IN_SOUND = "in_sound"
    MEASURING_SILENCE = "measuring_silence"


def _quiet_runs(quiet: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Return start and end (exclusive) indices of every maximal True run."""
    padded = np.concatenate(([0], quiet.astype(np.int8), [0]))
    edges = np.diff(padded)
    return np.flatnonzero(edges == 1), np.flatnonzero(edges == -1)


def find_sound_intervals(
    channel: np.ndarray,
    threshold: float,
    min_silence_samples: int,
) -> list[SoundInterval]:
    """Locate the sound intervals of a single channel.

    Args:
        channel: 1-D float samples.
        threshold: Amplitude separating sound from silence.
        min_silence_samples: Shortest quiet run that splits two intervals.

    Returns:
        Ascending, non-overlapping intervals. Empty when nothing is loud.
    """
    magnitude = np.abs(channel)
    loud_indices = np.flatnonzero(magnitude > threshold)
    run_starts, run_ends = _quiet_runs(magnitude < threshold)

    n = len(channel)
    intervals: list[SoundInterval] = []
    state = _ScanState.SILENCE
    cursor = 0
    sound_start = 0
    run = 0

    while cursor < n:
        if state is _ScanState.SILENCE:
            k = int(np.searchsorted(loud_indices, cursor))
            if k == len(loud_indices):
                break
            sound_start = cursor = int(loud_indices[k])
            state = _ScanState.IN_SOUND
        elif state is _ScanState.IN_SOUND:
            run = int(np.searchsorted(run_starts, cursor))
            if run == len(run_starts):
                break
            state = _ScanState.MEASURING_SILENCE
        else:
            silence_start = int(run_starts[run])
            silence_end = int(run_ends[run])
            if silence_end - silence_start >= min_silence_samples:
                intervals.append(SoundInterval(sound_start, silence_start))
                state = _ScanState.SILENCE
            else:
                state = _ScanState.IN_SOUND
            cursor = silence_end

    if state is _ScanState.IN_SOUND:
        intervals.append(SoundInterval(sound_start, n))

    return intervals


def splice_intervals(
    channel: np.ndarray,
    intervals: list[SoundInterval],
    padding_samples: int,
) -> np.ndarray:
    """Concatenate the intervals with zero padding around each one.

    Returns a single zero sample when ``intervals`` is empty, so the result
    is never empty.
    """
    if not intervals:
        return np.zeros(1, dtype=np.float32)

    total = sum(interval.length + 2 * padding_samples for interval in intervals)
    output = np.zeros(total, dtype=np.float32)

    offset = 0
    for interval in intervals:
        offset += padding_samples
        output[offset : offset + interval.length] = channel[interval.start : interval.end]
        offset += interval.length + padding_samples

    return output


class SilenceTrimStage(AudioStage):
    """Remove long silences from mono audio.

    Durations are converted to sample counts at the buffer's own rate with
    ``floor(seconds * sample_rate)``.

    Args:
        threshold: Silence amplitude threshold (default 0.01, about -40 dBFS).
        min_silence_s: Shortest silence removed, in seconds (default 0.3).
        padding_s: Zero padding kept on each side of a segment (default 0.1).
    """

    def __init__(
        self,
        threshold: float = SILENCE_THRESHOLD,
        min_silence_s: float = MIN_SILENCE_DURATION_S,
        padding_s: float = SILENCE_PADDING_S,
    ) -> None:
        self._threshold = threshold
        self._min_silence_s = min_silence_s
        self._padding_s = padding_s

    @property
    def name(self) -> str:
        """Identifier name for the stage."""
        return "silence_trim"

    def process(self, buffer: SampleBuffer) -> SampleBuffer:
        """Trim silences from the first channel.

        Args:
            buffer: Mono input audio.

        Returns:
            Mono buffer of at least one sample at the same sample rate.
        """
        channel = buffer.channel(0)
        min_silence_samples = int(self._min_silence_s * buffer.sample_rate)
        padding_samples = int(self._padding_s * buffer.sample_rate)

        intervals = find_sound_intervals(channel, self._threshold, min_silence_samples)
        trimmed = splice_intervals(channel, intervals, padding_samples)

        logger.debug(
            "silence_trimmed",
            intervals=len(intervals),
            samples_in=buffer.length,
            samples_out=len(trimmed),
        )

        return SampleBuffer.from_mono(trimmed, buffer.sample_rate)
