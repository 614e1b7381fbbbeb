"""CLI context and exit codes for stepbind."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

from stepbind.config import StepbindConfig

__all__ = [
    "ExitCode",
    "CLIContext",
]


class ExitCode(IntEnum):
    """Standard exit codes for the stepbind CLI.

    - 0 for success (or a passed step)
    - 1 for failure (or a failed step)
    - 130 for keyboard interrupt (128 + SIGINT=2)
    """

    SUCCESS = 0
    FAILURE = 1
    INTERRUPTED = 130


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Global CLI options and loaded configuration.

    Attributes:
        config: Loaded stepbind configuration.
        config_path: Path to config file (if specified via --config).
        verbosity: Verbosity level (0=default, 1=INFO, 2+=DEBUG).
        quiet: Suppress non-essential output.
    """

    config: StepbindConfig
    config_path: Path | None = None
    verbosity: int = 0
    quiet: bool = False
