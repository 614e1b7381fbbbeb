from __future__ import annotations


class StepbindError(Exception):
    """Base exception class for all stepbind-specific errors.

    All custom exceptions in stepbind inherit from this class. This allows
    catching every stepbind error at the CLI boundary while letting system
    exceptions propagate naturally.

    Attributes:
        message: Human-readable error message describing what went wrong.

    Example:
        ```python
        try:
            config = load_config(path)
        except StepbindError as e:
            click.echo(format_error(e.message), err=True)
            sys.exit(1)
        ```
    """

    def __init__(self, message: str) -> None:
        """Initialize the StepbindError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)
