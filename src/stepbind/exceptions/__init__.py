"""stepbind exception hierarchy.

All exceptions can be imported from this package:
    from stepbind.exceptions import ConfigError, StepbindError

Step conversion and invocation errors live beside the engine in
``stepbind.steps.errors``.
"""

from __future__ import annotations

from stepbind.exceptions.base import StepbindError
from stepbind.exceptions.config import ConfigError

__all__ = [
    "StepbindError",
    "ConfigError",
]
