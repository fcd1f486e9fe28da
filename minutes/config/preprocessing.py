"""Audio preprocessing pipeline configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ProcessingConfig(BaseModel):
    """User-selected preprocessing flags for one pipeline run.

    Each flag is independent and all are on by default. When none is set
    the pipeline returns its input unchanged without decoding it.
    """

    model_config = ConfigDict(frozen=True)

    resample: bool = True
    noise_reduction: bool = True
    normalize_volume: bool = True
    remove_silence: bool = True

    @property
    def needs_processing(self) -> bool:
        """True when at least one flag is enabled."""
        return self.resample or self.noise_reduction or self.normalize_volume or self.remove_silence

    @classmethod
    def disabled(cls) -> ProcessingConfig:
        """Config with every flag off (identity pipeline)."""
        return cls(
            resample=False,
            noise_reduction=False,
            normalize_volume=False,
            remove_silence=False,
        )
