"""Error types raised by the string parsing stream."""

from typing import Optional


class HarkError(ValueError):
    """Base for hark errors with a machine-readable code."""

    def __init__(self, message: str, *, code: str) -> None:
        super().__init__(message)
        self.code = code


class InvalidArgumentError(HarkError):
    """Raised when a stream or its options are constructed with bad arguments."""

    def __init__(self, argument: str, message: Optional[str] = None) -> None:
        super().__init__(
            message or f"The argument {argument} must not be None.",
            code="INVALID_ARGUMENT",
        )
        self.argument = argument


class StreamClosedError(HarkError):
    """Raised when a closed stream is written to or flushed."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"Cannot {operation} a closed stream.",
            code="STREAM_CLOSED",
        )
        self.operation = operation
