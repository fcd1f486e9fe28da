"""Centralized audio format constants for the preprocessing pipeline.

Single source of truth for PCM/WAV format parameters, the target sample
rate, and the fixed DSP policy values shared by the stages, the encoder,
the batch runner and the CLI.
"""

from __future__ import annotations

# --- PCM 16-bit format ---
# Quantization is asymmetric: negative samples scale by 32768 and
# non-negative samples by 32767, so -1.0 -> -32768 and 1.0 -> 32767.
PCM_INT16_NEGATIVE_SCALE: float = 32768.0
PCM_INT16_POSITIVE_SCALE: float = 32767.0

# Bytes per sample for 16-bit PCM.
BYTES_PER_SAMPLE_INT16: int = 2
BITS_PER_SAMPLE_INT16: int = 16

# PCM 8-bit (unsigned): center value and scale for [-1.0, ~1.0] normalization.
PCM_UINT8_SCALE: float = 128.0

# --- WAV container ---
WAV_HEADER_SIZE: int = 44
WAV_FMT_CHUNK_SIZE: int = 16
WAV_FORMAT_PCM: int = 1
WAV_MIME_TYPE: str = "audio/wav"
OCTET_STREAM_MIME_TYPE: str = "application/octet-stream"
PROCESSED_SUFFIX: str = "_processed.wav"

# --- Standard sample rates ---
# Transcription uploads are always mono 16kHz.
TARGET_SAMPLE_RATE: int = 16000

# --- Silence trimming (-40 dBFS) ---
SILENCE_THRESHOLD: float = 0.01
MIN_SILENCE_DURATION_S: float = 0.3
SILENCE_PADDING_S: float = 0.1

# --- Noise gate (-34 dBFS, reduce to 20%) ---
NOISE_GATE_THRESHOLD: float = 0.02
NOISE_GATE_REDUCTION: float = 0.2

# --- Peak normalization (-0.44 dBFS) ---
NORMALIZE_TARGET_PEAK: float = 0.95
# Peaks at or below this floor are left alone to avoid amplifying noise.
NORMALIZE_PEAK_FLOOR: float = 0.001

# --- Batch limits ---
DEFAULT_MAX_FILE_SIZE_MB: int = 25
