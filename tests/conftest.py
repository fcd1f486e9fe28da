"""Shared fixtures for all tests."""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure repo root is on sys.path so tests can import the `minutes` package
# when running pytest from the repository root without an editable install.
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from collections.abc import Iterator  # noqa: E402

import numpy as np  # noqa: E402
import pytest  # noqa: E402

from minutes._types import SampleBuffer  # noqa: E402
from minutes.config.settings import get_settings  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate tests from MINUTES_* variables and the settings cache."""
    import os

    for key in list(os.environ):
        if key.startswith("MINUTES_") and not key.startswith("MINUTES_LOG_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def meeting_buffer() -> SampleBuffer:
    """2 s stereo 44.1kHz: 0.5 s noise, 1 s tone at 0.5, 0.5 s noise.

    Noise is low-level (peak 0.001) so it classifies as silence.
    """
    sample_rate = 44100
    n = 2 * sample_rate
    t = np.arange(n, dtype=np.float64) / sample_rate
    rng = np.random.default_rng(seed=7)

    signal = rng.uniform(-0.001, 0.001, n)
    tone = slice(sample_rate // 2, sample_rate // 2 + sample_rate)
    signal[tone] = 0.5 * np.sin(2 * np.pi * 440.0 * t[tone])

    stereo = np.stack([signal, signal]).astype(np.float32)
    return SampleBuffer(stereo, sample_rate)
