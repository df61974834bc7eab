"""Core modules for the hark string parsing stream."""

from .byte_buffer import ByteAccumulator  # noqa: F401
from .decoder import ReplacingDecoder  # noqa: F401
from .errors import HarkError, InvalidArgumentError, StreamClosedError  # noqa: F401
from .options import StringParsingOptions  # noqa: F401
from .stream import ByteSink, StringListener, StringParsingStream  # noqa: F401
from .text_buffer import TextAccumulator  # noqa: F401
