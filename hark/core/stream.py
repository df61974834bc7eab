"""Byte sink that decodes its input and reports separated strings."""

import logging
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from .byte_buffer import ByteAccumulator
from .decoder import ReplacingDecoder
from .errors import InvalidArgumentError, StreamClosedError
from .options import StringParsingOptions
from .text_buffer import TextAccumulator

logger = logging.getLogger(__name__)

StringListener = Callable[[str], Any]


@runtime_checkable
class ByteSink(Protocol):
    """Anything accepting raw bytes: binary files, ``io.BytesIO``, other streams."""

    def write(self, data: bytes) -> Any: ...

    def flush(self) -> Any: ...

    def close(self) -> Any: ...


class StringParsingStream:
    """Decode streamed bytes and call ``listener`` for every separated string.

    Bytes are optionally passed through, unmodified, to ``out`` before they
    are decoded. Each string is reported without its separator, in arrival
    order, on the caller's thread. ``flush`` and ``close`` decode whatever is
    still buffered and report the trailing unterminated string, if any.
    """

    def __init__(
        self,
        listener: StringListener,
        out: Optional[ByteSink] = None,
        options: Optional[StringParsingOptions] = None,
        *,
        encoding: Optional[str] = None,
        separator: Optional[str] = None,
        buffer_size: Optional[int] = None,
    ) -> None:
        if listener is None:
            raise InvalidArgumentError("listener")
        if not callable(listener):
            raise InvalidArgumentError("listener", "The listener must be callable.")
        base = options if options is not None else StringParsingOptions.DEFAULT
        self._options = base.with_changes(
            encoding=encoding, separator=separator, buffer_size=buffer_size
        )
        self._listener = listener
        self._out = out
        self._bytes = ByteAccumulator(self._options.buffer_size)
        self._decoder = ReplacingDecoder(
            self._options.encoding, self._options.decode_replacement
        )
        self._text = TextAccumulator(self._options.separator)
        self._closed = False
        logger.debug(
            "Created stream encoding=%s separator=%r buffer_size=%d passthrough=%s",
            self._decoder.encoding,
            self._options.separator,
            self._options.buffer_size,
            out is not None,
        )

    # ---------------- Properties ----------------

    @property
    def listener(self) -> StringListener:
        return self._listener

    @property
    def options(self) -> StringParsingOptions:
        return self._options

    @property
    def encoding(self) -> str:
        return self._decoder.encoding

    @property
    def separator(self) -> str:
        return self._options.separator

    @property
    def buffer_size(self) -> int:
        return self._options.buffer_size

    @property
    def out(self) -> Optional[ByteSink]:
        """The sink receiving a verbatim copy of all bytes, or None."""
        return self._out

    @out.setter
    def out(self, sink: Optional[ByteSink]) -> None:
        self._out = sink

    @property
    def closed(self) -> bool:
        return self._closed

    def writable(self) -> bool:
        return not self._closed

    # ---------------- Writing ----------------

    def write_byte(self, value: int) -> None:
        """Write a single byte given as an int in ``range(256)``."""
        self._check_open("write to")
        data = bytes((value,))
        if self._out is not None:
            self._out.write(data)
        self._bytes.put(value)
        if self._bytes.is_full:
            self._decode_byte_buffer()

    def write(self, data: bytes) -> int:
        """Write a bytes-like object and return the number of bytes consumed.

        Equivalent to calling ``write_byte`` for every byte, except that the
        passthrough sink receives the whole chunk in one call.
        """
        self._check_open("write to")
        view = memoryview(data).cast("B")
        if self._out is not None:
            self._out.write(data)
        pos = 0
        while pos < len(view):
            pos += self._bytes.fill_from(view, pos)
            if self._bytes.is_full:
                self._decode_byte_buffer()
        return len(view)

    # ---------------- Flushing ----------------

    def flush(self) -> None:
        """Drain all buffered bytes and text; the stream stays writable."""
        self._check_open("flush")
        if self._out is not None:
            self._out.flush()
        self._flush_buffers()

    def close(self) -> None:
        """Close the passthrough sink, drain the buffers and close the stream."""
        if self._closed:
            return
        if self._out is not None:
            self._out.close()
        try:
            self._flush_buffers()
        finally:
            self._closed = True
            logger.debug("Closed stream")

    def __enter__(self) -> "StringParsingStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ---------------- Internals ----------------

    def _check_open(self, operation: str) -> None:
        if self._closed:
            raise StreamClosedError(operation)

    def _decode_byte_buffer(self) -> None:
        fragment = self._decoder.decode(self._bytes.contents(), False)
        self._bytes.clear()
        logger.debug("Decode pass produced %d chars", len(fragment))
        self._text.append(fragment)
        self._emit_units()

    def _flush_buffers(self) -> None:
        logger.debug(
            "Flushing %d bytes, partial sequence held=%s",
            len(self._bytes),
            self._decoder.pending,
        )
        self._text.append(self._decoder.decode(self._bytes.contents(), True))
        self._text.append(self._decoder.flush())
        self._bytes.clear()
        self._decoder.reset()

        if not len(self._text):
            return
        self._emit_units()
        remainder = self._text.drain_remainder()
        if remainder is not None:
            logger.debug("Emitting trailing unit of %d chars", len(remainder))
            self._listener(remainder)

    def _emit_units(self) -> None:
        for unit in self._text.extract_all():
            self._listener(unit)
