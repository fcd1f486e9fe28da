"""Centralized configuration via pydantic-settings.

All ``MINUTES_*`` environment variables are read, validated, and exposed here.
Logging env vars (``MINUTES_LOG_FORMAT``, ``MINUTES_LOG_LEVEL``) stay in
``minutes.logging`` so logging can be configured before settings load.

Usage::

    from minutes.config.settings import get_settings

    settings = get_settings()
    config = settings.preprocessing.to_processing_config()
    print(settings.batch.max_file_size_bytes)

``.env`` files in the working directory are loaded automatically.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from minutes._audio_constants import DEFAULT_MAX_FILE_SIZE_MB
from minutes.config.preprocessing import ProcessingConfig


class PreprocessingSettings(BaseSettings):
    """Default preprocessing flags.

    The DSP thresholds themselves are fixed in ``minutes._audio_constants``;
    only the on/off switches are configurable.
    """

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    resample: bool = Field(default=True, validation_alias="MINUTES_PREPROCESSING_RESAMPLE")
    noise_reduction: bool = Field(
        default=True, validation_alias="MINUTES_PREPROCESSING_NOISE_REDUCTION"
    )
    normalize_volume: bool = Field(
        default=True, validation_alias="MINUTES_PREPROCESSING_NORMALIZE_VOLUME"
    )
    remove_silence: bool = Field(
        default=True, validation_alias="MINUTES_PREPROCESSING_REMOVE_SILENCE"
    )

    def to_processing_config(self) -> ProcessingConfig:
        """Build the immutable per-run config from these defaults."""
        return ProcessingConfig(
            resample=self.resample,
            noise_reduction=self.noise_reduction,
            normalize_volume=self.normalize_volume,
            remove_silence=self.remove_silence,
        )


class BatchSettings(BaseSettings):
    """Batch runner and CLI settings."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    max_file_size_mb: int = Field(
        default=DEFAULT_MAX_FILE_SIZE_MB, ge=1, le=500, validation_alias="MINUTES_MAX_FILE_SIZE_MB"
    )
    fallback_to_original: bool = Field(
        default=True, validation_alias="MINUTES_FALLBACK_TO_ORIGINAL"
    )
    output_dir: str = Field(default=".", validation_alias="MINUTES_OUTPUT_DIR")

    @property
    def max_file_size_bytes(self) -> int:
        """Maximum input size in bytes (derived from MB setting)."""
        return self.max_file_size_mb * 1024 * 1024

    @property
    def output_path(self) -> Path:
        """Expanded output directory as a Path object."""
        return Path(self.output_dir).expanduser()


class MinutesSettings(BaseSettings):
    """Root settings, aggregating all subsystem settings.

    Loads ``.env`` from the current directory when present.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    preprocessing: PreprocessingSettings = Field(default_factory=PreprocessingSettings)
    batch: BatchSettings = Field(default_factory=BatchSettings)


@lru_cache(maxsize=1)
def get_settings() -> MinutesSettings:
    """Return the singleton ``MinutesSettings`` instance.

    The result is cached; subsequent calls return the same object.
    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    return MinutesSettings()
