"""Immutable options for decoding and splitting a byte stream."""

import codecs
import locale
import os
from dataclasses import dataclass, fields, replace
from typing import Any, ClassVar, Optional

from .errors import InvalidArgumentError

MIN_BUFFER_SIZE = 4
DEFAULT_BUFFER_SIZE = 32
DEFAULT_REPLACEMENT = "?"


@dataclass(frozen=True)
class StringParsingOptions:
    """Encoding, separator, byte buffer size and decode replacement.

    A character may need up to four bytes, so buffers smaller than
    ``MIN_BUFFER_SIZE`` are rejected.
    """

    encoding: str
    separator: str = os.linesep
    buffer_size: int = DEFAULT_BUFFER_SIZE
    decode_replacement: str = DEFAULT_REPLACEMENT

    DEFAULT: ClassVar["StringParsingOptions"]

    def __post_init__(self) -> None:
        if self.encoding is None:
            raise InvalidArgumentError("encoding")
        try:
            info = codecs.lookup(self.encoding)
        except LookupError as exc:
            raise InvalidArgumentError(
                "encoding", f"Unknown encoding: {self.encoding!r}."
            ) from exc
        # bytes-to-bytes and str-to-str codecs such as hex or rot13
        if not getattr(info, "_is_text_encoding", True):
            raise InvalidArgumentError(
                "encoding", f"Not a text encoding: {self.encoding!r}."
            )
        if self.separator is None:
            raise InvalidArgumentError("separator")
        if not isinstance(self.separator, str) or not self.separator:
            raise InvalidArgumentError(
                "separator", "The separator must be a non-empty string."
            )
        if isinstance(self.buffer_size, bool) or not isinstance(self.buffer_size, int):
            raise InvalidArgumentError(
                "buffer_size", "The buffer size must be an integer."
            )
        if self.buffer_size < MIN_BUFFER_SIZE:
            raise InvalidArgumentError(
                "buffer_size", f"The buffer size must be at least {MIN_BUFFER_SIZE}."
            )
        if not isinstance(self.decode_replacement, str):
            raise InvalidArgumentError(
                "decode_replacement", "The decode replacement must be a string."
            )

    @classmethod
    def create(
        cls,
        encoding: Optional[str] = None,
        separator: Optional[str] = None,
        buffer_size: Optional[int] = None,
        decode_replacement: Optional[str] = None,
    ) -> "StringParsingOptions":
        """Build options, taking every field left as None from ``DEFAULT``."""
        return cls.DEFAULT.with_changes(
            encoding=encoding,
            separator=separator,
            buffer_size=buffer_size,
            decode_replacement=decode_replacement,
        )

    def with_changes(self, **changes: Any) -> "StringParsingOptions":
        """Return a validated copy with the non-None ``changes`` applied."""
        names = {item.name for item in fields(self)}
        unknown = set(changes) - names
        if unknown:
            raise InvalidArgumentError(
                sorted(unknown)[0], f"Unknown option(s): {', '.join(sorted(unknown))}."
            )
        overrides = {key: value for key, value in changes.items() if value is not None}
        if not overrides:
            return self
        return replace(self, **overrides)


StringParsingOptions.DEFAULT = StringParsingOptions(
    encoding=locale.getpreferredencoding(False),
)
