"""Tests for SilenceTrimStage and the sound-interval scan.

Boundary cases: silent run exactly at the minimum length, runs at the buffer
end, samples exactly at the threshold, all-silent input, and the padding
applied on reconstruction.
"""

from __future__ import annotations

import numpy as np
import pytest

from minutes._audio_constants import MIN_SILENCE_DURATION_S, SILENCE_PADDING_S
from minutes._types import SoundInterval
from minutes.preprocessing.silence_trim import (
    SilenceTrimStage,
    find_sound_intervals,
    splice_intervals,
)
from tests.helpers import make_buffer, make_sine

THRESHOLD = 0.01
LOUD = 0.5
QUIET = 0.001


def pattern(*runs: tuple[float, int]) -> np.ndarray:
    """Build a channel from (value, count) runs."""
    return np.concatenate([np.full(count, value, dtype=np.float32) for value, count in runs])


class TestFindSoundIntervals:
    def test_all_silent_has_no_interval(self) -> None:
        channel = pattern((QUIET, 50))

        assert find_sound_intervals(channel, THRESHOLD, min_silence_samples=5) == []

    def test_all_loud_is_one_interval(self) -> None:
        channel = pattern((LOUD, 20))

        assert find_sound_intervals(channel, THRESHOLD, 5) == [SoundInterval(0, 20)]

    def test_leading_silence_is_skipped(self) -> None:
        channel = pattern((QUIET, 8), (LOUD, 4))

        assert find_sound_intervals(channel, THRESHOLD, 5) == [SoundInterval(8, 12)]

    def test_short_pause_stays_inside_speech(self) -> None:
        channel = pattern((LOUD, 10), (QUIET, 4), (LOUD, 10))

        assert find_sound_intervals(channel, THRESHOLD, 5) == [SoundInterval(0, 24)]

    def test_pause_exactly_at_minimum_splits(self) -> None:
        channel = pattern((LOUD, 10), (QUIET, 5), (LOUD, 10))

        intervals = find_sound_intervals(channel, THRESHOLD, 5)

        assert intervals == [SoundInterval(0, 10), SoundInterval(15, 25)]

    def test_long_trailing_silence_closes_at_run_start(self) -> None:
        channel = pattern((LOUD, 10), (QUIET, 30))

        assert find_sound_intervals(channel, THRESHOLD, 5) == [SoundInterval(0, 10)]

    def test_short_trailing_silence_runs_to_buffer_end(self) -> None:
        channel = pattern((LOUD, 10), (QUIET, 3))

        assert find_sound_intervals(channel, THRESHOLD, 5) == [SoundInterval(0, 13)]

    def test_sample_at_threshold_does_not_start_sound(self) -> None:
        channel = pattern((QUIET, 10), (THRESHOLD, 10), (QUIET, 10))

        assert find_sound_intervals(channel, THRESHOLD, 5) == []

    def test_sample_at_threshold_breaks_silent_run(self) -> None:
        """Two 3-sample quiet runs split by a threshold sample never reach 5."""
        channel = pattern((LOUD, 4), (QUIET, 3), (THRESHOLD, 1), (QUIET, 3), (LOUD, 4))

        assert find_sound_intervals(channel, THRESHOLD, 5) == [SoundInterval(0, 15)]

    def test_negative_samples_use_magnitude(self) -> None:
        channel = pattern((-LOUD, 6), (-QUIET, 6), (LOUD, 6))

        intervals = find_sound_intervals(channel, THRESHOLD, 5)

        assert intervals == [SoundInterval(0, 6), SoundInterval(12, 18)]

    def test_many_segments_in_order(self) -> None:
        channel = pattern(
            (QUIET, 7), (LOUD, 3), (QUIET, 9), (LOUD, 2), (QUIET, 2), (LOUD, 2), (QUIET, 6)
        )

        intervals = find_sound_intervals(channel, THRESHOLD, 5)

        assert intervals == [SoundInterval(7, 10), SoundInterval(19, 25)]


class TestSpliceIntervals:
    def test_pads_each_segment_with_zeros(self) -> None:
        channel = np.array([0.0, 0.3, 0.4, 0.0, 0.0, 0.7], dtype=np.float32)
        intervals = [SoundInterval(1, 3), SoundInterval(5, 6)]

        result = splice_intervals(channel, intervals, padding_samples=2)

        np.testing.assert_array_almost_equal(
            result, [0, 0, 0.3, 0.4, 0, 0, 0, 0, 0.7, 0, 0]
        )

    def test_length_is_segments_plus_two_paddings_each(self) -> None:
        channel = np.ones(100, dtype=np.float32)
        intervals = [SoundInterval(0, 10), SoundInterval(20, 50), SoundInterval(90, 100)]

        result = splice_intervals(channel, intervals, padding_samples=4)

        assert len(result) == 10 + 30 + 10 + 3 * 2 * 4

    def test_no_interval_gives_single_zero_sample(self) -> None:
        result = splice_intervals(np.zeros(10, dtype=np.float32), [], padding_samples=3)

        np.testing.assert_array_equal(result, [0.0])


class TestSilenceTrimStage:
    def test_all_silent_second_yields_one_sample(self) -> None:
        buffer = make_buffer(np.zeros(16000), sample_rate=16000)

        result = SilenceTrimStage().process(buffer)

        assert result.length == 1
        assert result.sample_rate == 16000

    def test_long_silences_shorten_output(self) -> None:
        # Arrange: 0.5 s silence, 1 s tone, 0.5 s silence at 16kHz
        tone = make_sine(sample_rate=16000, duration=1.0, amplitude=0.5)
        silence = np.zeros(8000, dtype=np.float32)
        buffer = make_buffer(np.concatenate([silence, tone, silence]))

        # Act
        result = SilenceTrimStage().process(buffer)

        # Assert
        padding = int(SILENCE_PADDING_S * 16000)
        assert result.length < buffer.length
        assert result.length <= len(tone) + 2 * padding

    def test_no_qualifying_silence_keeps_content(self) -> None:
        """Content survives intact between the two paddings."""
        # Arrange: loud everywhere except 1 ms gaps, far below the minimum
        channel = pattern(*[(LOUD, 200) if i % 2 == 0 else (QUIET, 16) for i in range(11)])
        buffer = make_buffer(channel, sample_rate=16000)

        # Act
        result = SilenceTrimStage().process(buffer)

        # Assert
        padding = int(SILENCE_PADDING_S * 16000)
        assert result.length == buffer.length + 2 * padding
        np.testing.assert_array_equal(result.channel(0)[padding:-padding], channel)
        assert not np.any(result.channel(0)[:padding])
        assert not np.any(result.channel(0)[-padding:])

    def test_durations_use_buffer_sample_rate(self) -> None:
        # Arrange: at 1 kHz, 0.25 s minimum = 250 samples, 0.125 s padding = 125
        stage = SilenceTrimStage(min_silence_s=0.25, padding_s=0.125)
        channel = pattern((LOUD, 100), (QUIET, 250), (LOUD, 100))

        # Act
        result = stage.process(make_buffer(channel, sample_rate=1000))

        # Assert: split into two segments, each padded with 125 zeros per side
        assert result.length == 2 * (100 + 2 * 125)

    def test_defaults_follow_policy_constants(self) -> None:
        rate = 16000
        min_silence = int(MIN_SILENCE_DURATION_S * rate)
        channel = pattern((LOUD, 100), (QUIET, min_silence - 1), (LOUD, 100))

        result = SilenceTrimStage().process(make_buffer(channel, sample_rate=rate))

        padding = int(SILENCE_PADDING_S * rate)
        assert result.length == len(channel) + 2 * padding

    def test_never_empty(self) -> None:
        for channel in (np.zeros(1), np.full(5, 0.005), np.zeros(48000)):
            result = SilenceTrimStage().process(make_buffer(channel))
            assert result.length >= 1

    def test_input_not_modified(self) -> None:
        channel = pattern((LOUD, 100), (QUIET, 6000), (LOUD, 100))
        buffer = make_buffer(channel)

        SilenceTrimStage().process(buffer)

        np.testing.assert_array_equal(buffer.channel(0), channel)

    @pytest.mark.parametrize("threshold", [0.05, 0.2])
    def test_custom_threshold(self, threshold: float) -> None:
        channel = pattern((0.3, 10), (threshold / 2, 10), (0.3, 10))
        stage = SilenceTrimStage(threshold=threshold, min_silence_s=0.01, padding_s=0.0)

        result = stage.process(make_buffer(channel, sample_rate=1000))

        assert result.length == 20
