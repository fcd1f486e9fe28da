"""Minutes CLI.

Registers every command on the main group.
"""

from minutes.cli.main import cli
from minutes.cli.preprocess import preprocess

__all__ = ["cli", "preprocess"]
