"""Audio Preprocessing Pipeline.

Orchestrates audio preprocessing stages in sequence. Resampling to mono
16kHz always runs first (it is a no-op for input already in that format);
the other stages are toggled by ProcessingConfig. The order is fixed:
resample -> silence trim -> noise gate -> gain normalize -> WAV encode.
"""

from __future__ import annotations

import mimetypes
from typing import TYPE_CHECKING

from minutes._audio_constants import OCTET_STREAM_MIME_TYPE, PROCESSED_SUFFIX, WAV_MIME_TYPE
from minutes._types import EncodedAudioFile, PipelineState
from minutes.exceptions import AudioDecodeError, AudioResourceError, MinutesError
from minutes.logging import get_logger
from minutes.preprocessing.audio_io import SoundFileDecoder, encode_wav
from minutes.preprocessing.gain_normalize import GainNormalizeStage
from minutes.preprocessing.noise_gate import NoiseGateStage
from minutes.preprocessing.resample import ResampleStage
from minutes.preprocessing.silence_trim import SilenceTrimStage

if TYPE_CHECKING:
    from minutes._types import SampleBuffer
    from minutes.config.preprocessing import ProcessingConfig
    from minutes.preprocessing.audio_io import AudioDecoder
    from minutes.preprocessing.stages import AudioStage

logger = get_logger("preprocessing.pipeline")

_STAGE_STATES: dict[str, PipelineState] = {
    "resample": PipelineState.RESAMPLING,
    "silence_trim": PipelineState.TRIMMING,
    "noise_gate": PipelineState.GATING,
    "gain_normalize": PipelineState.NORMALIZING,
}


def build_stages(config: ProcessingConfig) -> list[AudioStage]:
    """Create the stage list for a config, in pipeline order.

    ResampleStage always comes first: the encoder and the transcription
    upload need mono 16kHz whatever the ``resample`` flag says. The flag
    only counts towards ``needs_processing``.
    """
    stages: list[AudioStage] = [ResampleStage()]
    if config.remove_silence:
        stages.append(SilenceTrimStage())
    if config.noise_reduction:
        stages.append(NoiseGateStage())
    if config.normalize_volume:
        stages.append(GainNormalizeStage())
    return stages


def guess_mime_type(file_name: str) -> str:
    """MIME type for a file name, ``application/octet-stream`` when unknown."""
    mime_type, _ = mimetypes.guess_type(file_name)
    return mime_type or OCTET_STREAM_MIME_TYPE


def processed_file_name(file_name: str) -> str:
    """Derive ``<stem>_processed.wav`` from the original file name.

    The stem is everything before the last dot. Names without a dot, or
    whose only dot is the first character, are used whole.
    """
    dot = file_name.rfind(".")
    stem = file_name[:dot] if dot > 0 else file_name
    return f"{stem}{PROCESSED_SUFFIX}"


class AudioPreprocessingPipeline:
    """Audio preprocessing pipeline.

    Receives audio bytes in any decodable format, applies the enabled
    stages in sequence, and returns a mono PCM 16-bit WAV.

    Runs are synchronous and independent: every call allocates its own
    buffers, so one pipeline instance can process a batch file by file.

    Args:
        config: Flags selecting the stages.
        decoder: Decode capability. Defaults to SoundFileDecoder.
        stages: Explicit stage list. If None, built from ``config``.
    """

    def __init__(
        self,
        config: ProcessingConfig,
        decoder: AudioDecoder | None = None,
        stages: list[AudioStage] | None = None,
    ) -> None:
        self._config = config
        self._decoder: AudioDecoder = decoder if decoder is not None else SoundFileDecoder()
        self._stages = stages if stages is not None else build_stages(config)
        self._state = PipelineState.IDLE

    @property
    def config(self) -> ProcessingConfig:
        """Pipeline configuration."""
        return self._config

    @property
    def stages(self) -> list[AudioStage]:
        """List of pipeline stages."""
        return list(self._stages)

    @property
    def state(self) -> PipelineState:
        """State reached by the current or most recent run."""
        return self._state

    def process(self, audio_bytes: bytes, file_name: str) -> EncodedAudioFile:
        """Process audio through all pipeline stages.

        When no flag is enabled the input is returned untouched, without
        decoding, under its original name.

        Args:
            audio_bytes: Input audio bytes (any supported format).
            file_name: Original file name, used to derive the output name.

        Returns:
            Encoded WAV (or the untouched input for a no-op config).

        Raises:
            AudioDecodeError: If the input audio cannot be decoded. No stage runs.
            AudioResourceError: If a stage or the encoder fails.
        """
        self._state = PipelineState.IDLE

        if not self._config.needs_processing:
            logger.debug("pipeline_noop", file_name=file_name)
            self._state = PipelineState.DONE
            return EncodedAudioFile(audio_bytes, file_name, guess_mime_type(file_name))

        self._state = PipelineState.DECODING
        try:
            buffer = self._decoder.decode(audio_bytes)
        except AudioDecodeError as err:
            self._state = PipelineState.FAILED
            logger.warning("decode_failed", file_name=file_name, error=str(err))
            raise

        for stage in self._stages:
            buffer = self._run_stage(stage, buffer)

        self._state = PipelineState.ENCODING
        try:
            data = encode_wav(buffer)
        except MemoryError as err:
            self._state = PipelineState.FAILED
            raise AudioResourceError("encode", str(err) or type(err).__name__) from err

        self._state = PipelineState.DONE
        output_name = processed_file_name(file_name)
        logger.info(
            "pipeline_complete",
            file_name=output_name,
            sample_rate=buffer.sample_rate,
            samples=buffer.length,
            bytes=len(data),
        )
        return EncodedAudioFile(data, output_name, WAV_MIME_TYPE)

    def _run_stage(self, stage: AudioStage, buffer: SampleBuffer) -> SampleBuffer:
        self._state = _STAGE_STATES.get(stage.name, self._state)
        logger.debug("stage_start", stage=stage.name, sample_rate=buffer.sample_rate)
        try:
            result = stage.process(buffer)
        except MinutesError:
            self._state = PipelineState.FAILED
            raise
        except Exception as err:
            self._state = PipelineState.FAILED
            logger.error("stage_failed", stage=stage.name, error=str(err))
            raise AudioResourceError(stage.name, str(err) or type(err).__name__) from err
        logger.debug(
            "stage_complete",
            stage=stage.name,
            sample_rate=result.sample_rate,
            samples=result.length,
        )
        return result
