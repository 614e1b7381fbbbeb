"""Output formatting helpers for stepbind CLI commands."""

from __future__ import annotations

__all__ = [
    "format_error",
    "format_success",
]


def format_error(
    message: str, details: list[str] | None = None, suggestion: str | None = None
) -> str:
    """Format an error message with optional details and suggestion.

    Example:
        >>> print(format_error(
        ...     "Cannot import handler",
        ...     details=["No module named 'steps'"],
        ...     suggestion="Run from the project root",
        ... ))
        Error: Cannot import handler
          No module named 'steps'
        Suggestion: Run from the project root
    """
    lines = [f"Error: {message}"]

    if details:
        for detail in details:
            lines.append(f"  {detail}")

    if suggestion:
        lines.append(f"Suggestion: {suggestion}")

    return "\n".join(lines)


def format_success(message: str) -> str:
    """Format a success message.

    Example:
        >>> format_success("step passed")
        'Success: step passed'
    """
    return f"Success: {message}"
