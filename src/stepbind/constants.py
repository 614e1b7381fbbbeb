"""Numeric limits and shared defaults for stepbind.

This module is the single source of truth for the value ranges enforced by
the argument converter and for defaults shared by config and the CLI.
"""

from __future__ import annotations

# =============================================================================
# Integer Ranges
# =============================================================================

def signed_range(bit_width: int) -> tuple[int, int]:
    """Return the inclusive (min, max) range of a signed integer width."""
    half = 1 << (bit_width - 1)
    return -half, half - 1


# =============================================================================
# Float Ranges
# =============================================================================

#: Largest finite IEEE 754 single precision value
FLOAT32_MAX: float = 3.4028234663852886e38

#: Text spellings of infinity accepted by float() (compared case-insensitively)
INFINITY_LITERALS: frozenset[str] = frozenset(
    {"inf", "+inf", "-inf", "infinity", "+infinity", "-infinity"}
)

# =============================================================================
# Defaults
# =============================================================================

#: Encoding used to turn text arguments into byte-sequence parameters
DEFAULT_TEXT_ENCODING: str = "utf-8"

#: Indentation of the rendered cucumber JSON report
DEFAULT_REPORT_INDENT: int = 4

#: Project configuration file name looked up in the working directory
PROJECT_CONFIG_FILENAME: str = "stepbind.yaml"
