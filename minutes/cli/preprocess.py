"""`minutes preprocess` command — prepares audio files for transcription."""

from __future__ import annotations

import signal
import sys
import threading
from pathlib import Path

import click

from minutes.cli.main import cli
from minutes.config.preprocessing import ProcessingConfig
from minutes.config.settings import get_settings
from minutes.exceptions import AudioError, BatchCancelledError
from minutes.preprocessing.batch import BatchInput, BatchItemResult, BatchPreprocessor
from minutes.preprocessing.pipeline import AudioPreprocessingPipeline


def _resolve_config(
    resample: bool | None,
    noise_reduction: bool | None,
    normalize: bool | None,
    remove_silence: bool | None,
) -> ProcessingConfig:
    """Merge explicit CLI flags over the settings defaults."""
    defaults = get_settings().preprocessing
    return ProcessingConfig(
        resample=defaults.resample if resample is None else resample,
        noise_reduction=defaults.noise_reduction if noise_reduction is None else noise_reduction,
        normalize_volume=defaults.normalize_volume if normalize is None else normalize,
        remove_silence=defaults.remove_silence if remove_silence is None else remove_silence,
    )


def _write_result(result: BatchItemResult, source: Path, output_dir: Path) -> Path:
    target = output_dir / result.output.file_name
    # Unchanged outputs keep the source name; never rewrite the source in place.
    if target.resolve() != source.resolve():
        target.write_bytes(result.output.data)
    return target


@cli.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option(
    "--resample/--no-resample",
    default=None,
    help="Convert to mono 16kHz. Output is always mono 16kHz once any stage runs.",
)
@click.option(
    "--noise-reduction/--no-noise-reduction", default=None, help="Attenuate background noise."
)
@click.option("--normalize/--no-normalize", default=None, help="Normalize peak volume.")
@click.option(
    "--remove-silence/--no-remove-silence", default=None, help="Cut long silences."
)
@click.option(
    "--output-dir",
    "-o",
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for processed files. Default: MINUTES_OUTPUT_DIR or current directory.",
)
@click.option(
    "--fallback/--no-fallback",
    default=None,
    help="Keep the original file when preprocessing fails.",
)
def preprocess(
    files: tuple[Path, ...],
    resample: bool | None,
    noise_reduction: bool | None,
    normalize: bool | None,
    remove_silence: bool | None,
    output_dir: Path | None,
    fallback: bool | None,
) -> None:
    """Preprocess audio files for transcription.

    Flags not given on the command line use the MINUTES_PREPROCESSING_* settings.

    Example: minutes preprocess meeting.m4a --no-remove-silence -o out/
    """
    settings = get_settings()

    missing = [path for path in files if not path.is_file()]
    if missing:
        for path in missing:
            click.echo(f"Error: file not found: {path}", err=True)
        sys.exit(1)

    config = _resolve_config(resample, noise_reduction, normalize, remove_silence)
    destination = output_dir if output_dir is not None else settings.batch.output_path
    destination.mkdir(parents=True, exist_ok=True)

    runner = BatchPreprocessor(
        AudioPreprocessingPipeline(config),
        max_file_size_bytes=settings.batch.max_file_size_bytes,
        fallback_to_original=settings.batch.fallback_to_original if fallback is None else fallback,
    )

    total = len(files)
    done = 0

    def _save(result: BatchItemResult) -> None:
        nonlocal done
        done += 1
        target = _write_result(result, files[done - 1], destination)
        line = f"[{done}/{total}] {result.status.value:<11} {result.source_name} -> {target}"
        if result.error is not None:
            line += f" ({result.error})"
        click.echo(line)

    cancel_event = threading.Event()

    def _request_cancel(signum: int, frame: object) -> None:
        click.echo("Cancelling after the current file...", err=True)
        cancel_event.set()

    # Outputs are written as each file finishes; a later failure keeps them.
    previous_handler = signal.signal(signal.SIGINT, _request_cancel)
    try:
        runner.process_all(
            [BatchInput.from_path(path) for path in files], cancel_event, on_result=_save
        )
    except BatchCancelledError as err:
        click.echo(f"Cancelled: {err.remaining} file(s) not processed.", err=True)
        sys.exit(130)
    except AudioError as err:
        click.echo(f"Error: {err}", err=True)
        click.echo(f"{done} of {total} file(s) written before the failure.", err=True)
        sys.exit(1)
    finally:
        signal.signal(signal.SIGINT, previous_handler)
