"""Main CLI command group for minutes."""

from __future__ import annotations

import click

import minutes


@click.group()
@click.version_option(version=minutes.__version__, prog_name="minutes")
def cli() -> None:
    """Minutes — prepare meeting recordings for transcription."""
