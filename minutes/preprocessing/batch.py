"""BatchPreprocessor — runs the pipeline over a list of files, one at a time.

Responsibilities:
- Process files strictly in order; one run finishes before the next starts.
- Check the cancellation event between files (never mid-file).
- Pass text files through untouched.
- On audio failure, either return the original file (fallback) or propagate.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from minutes._types import BatchItemStatus, EncodedAudioFile
from minutes.exceptions import AudioError, AudioTooLargeError, BatchCancelledError
from minutes.logging import get_logger
from minutes.preprocessing.pipeline import guess_mime_type

if TYPE_CHECKING:
    import threading
    from collections.abc import Callable, Sequence

    from minutes.preprocessing.pipeline import AudioPreprocessingPipeline

logger = get_logger("preprocessing.batch")


@dataclass(frozen=True, slots=True)
class BatchInput:
    """One file submitted to a batch."""

    name: str
    data: bytes

    @classmethod
    def from_path(cls, path: Path) -> BatchInput:
        return cls(name=path.name, data=path.read_bytes())

    @property
    def mime_type(self) -> str:
        return guess_mime_type(self.name)

    @property
    def is_text(self) -> bool:
        return self.mime_type.startswith("text/")

    def as_output(self) -> EncodedAudioFile:
        """The input itself, unchanged, as a pipeline-shaped output."""
        return EncodedAudioFile(self.data, self.name, self.mime_type)


@dataclass(frozen=True, slots=True)
class BatchItemResult:
    """Result for one batch file.

    ``error`` is set only for FALLBACK results and holds the failure that
    caused the original file to be returned.
    """

    source_name: str
    output: EncodedAudioFile
    status: BatchItemStatus
    error: AudioError | None = None


class BatchPreprocessor:
    """Sequential batch runner around an AudioPreprocessingPipeline.

    Args:
        pipeline: Pipeline used for every audio file.
        max_file_size_bytes: Inputs above this size fail with AudioTooLargeError.
            None disables the check.
        fallback_to_original: Return the untouched file when preprocessing
            fails instead of raising.
    """

    def __init__(
        self,
        pipeline: AudioPreprocessingPipeline,
        max_file_size_bytes: int | None = None,
        fallback_to_original: bool = True,
    ) -> None:
        self._pipeline = pipeline
        self._max_file_size_bytes = max_file_size_bytes
        self._fallback_to_original = fallback_to_original

    def process_one(self, item: BatchInput) -> BatchItemResult:
        """Process a single file.

        Raises:
            AudioError: If preprocessing fails and fallback is disabled.
        """
        if item.is_text:
            return BatchItemResult(item.name, item.as_output(), BatchItemStatus.PASSTHROUGH)

        if not self._pipeline.config.needs_processing:
            return BatchItemResult(item.name, item.as_output(), BatchItemStatus.SKIPPED)

        try:
            self._check_size(item)
            output = self._pipeline.process(item.data, item.name)
        except AudioError as err:
            if not self._fallback_to_original:
                raise
            logger.warning("batch_item_fallback", file_name=item.name, error=str(err))
            return BatchItemResult(item.name, item.as_output(), BatchItemStatus.FALLBACK, err)

        return BatchItemResult(item.name, output, BatchItemStatus.PROCESSED)

    def process_all(
        self,
        items: Sequence[BatchInput],
        cancel_event: threading.Event | None = None,
        on_result: Callable[[BatchItemResult], None] | None = None,
    ) -> list[BatchItemResult]:
        """Process files in order.

        Args:
            items: Files to process.
            cancel_event: Checked before each file. Once set, no further
                file is started.
            on_result: Called with each result as soon as its file finishes,
                so callers can persist work done before a later failure.

        Returns:
            One result per input, in input order.

        Raises:
            BatchCancelledError: If cancelled; carries the completed results.
            AudioError: If a file fails and fallback is disabled.
        """
        results: list[BatchItemResult] = []
        for index, item in enumerate(items):
            if cancel_event is not None and cancel_event.is_set():
                logger.info("batch_cancelled", completed=len(results), total=len(items))
                raise BatchCancelledError(results, remaining=len(items) - index)

            logger.debug("batch_item_start", index=index + 1, total=len(items), file_name=item.name)
            result = self.process_one(item)
            results.append(result)
            if on_result is not None:
                on_result(result)

        return results

    def _check_size(self, item: BatchInput) -> None:
        if self._max_file_size_bytes is not None and len(item.data) > self._max_file_size_bytes:
            raise AudioTooLargeError(len(item.data), self._max_file_size_bytes)
