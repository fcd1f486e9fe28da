"""Minutes audio preprocessing.

Turns user-supplied meeting recordings into normalized, denoised,
silence-trimmed 16kHz mono PCM WAV files ready for upload to a
transcription service.
"""

from __future__ import annotations

__version__ = "0.1.0"
