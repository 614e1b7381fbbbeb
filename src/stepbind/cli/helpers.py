"""Helper functions shared by CLI commands."""

from __future__ import annotations

import importlib
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from stepbind.exceptions import StepbindError

__all__ = [
    "HandlerImportError",
    "import_handler",
]


class HandlerImportError(StepbindError):
    """Raised when a ``module:function`` reference cannot be imported."""

    pass


def import_handler(reference: str) -> Callable[..., Any]:
    """Import a handler from a ``package.module:function`` reference.

    The working directory is put on ``sys.path`` so that step modules of the
    project under test can be imported. Dotted attribute paths after the colon
    (``module:Class.method``) are followed.

    Raises:
        HandlerImportError: If the reference is malformed or cannot be resolved.
    """
    module_name, sep, attribute_path = reference.partition(":")
    if not sep or not module_name or not attribute_path:
        raise HandlerImportError(
            f"Invalid handler reference '{reference}', expected 'module:function'"
        )

    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise HandlerImportError(f"Cannot import module '{module_name}': {e}") from e

    for attribute in attribute_path.split("."):
        try:
            target = getattr(target, attribute)
        except AttributeError as e:
            raise HandlerImportError(
                f"'{module_name}' has no attribute '{attribute_path}'"
            ) from e
    return target
