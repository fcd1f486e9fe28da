"""Audio Preprocessing Pipeline.

Prepares recordings for upload to a transcription service.
Pipeline: Decode -> Resample -> [Silence Trim] -> [Noise Gate] -> [Gain Normalize]
-> Output WAV PCM 16-bit mono.
"""

from __future__ import annotations

from minutes.preprocessing.audio_io import AudioDecoder, SoundFileDecoder, encode_wav
from minutes.preprocessing.batch import BatchInput, BatchItemResult, BatchPreprocessor
from minutes.preprocessing.pipeline import AudioPreprocessingPipeline, build_stages
from minutes.preprocessing.stages import AudioStage

__all__ = [
    "AudioDecoder",
    "AudioPreprocessingPipeline",
    "AudioStage",
    "BatchInput",
    "BatchItemResult",
    "BatchPreprocessor",
    "SoundFileDecoder",
    "build_stages",
    "encode_wav",
]
