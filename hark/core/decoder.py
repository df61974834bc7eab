"""Incremental decoder that replaces malformed input instead of raising."""

import codecs
from typing import Callable, Dict, Tuple

_HANDLER_PREFIX = "hark.replace:"
_registered: Dict[str, str] = {}


def _make_handler(replacement: str) -> Callable[[UnicodeError], Tuple[str, int]]:
    def handler(exc: UnicodeError) -> Tuple[str, int]:
        if isinstance(exc, UnicodeDecodeError):
            return replacement, exc.end
        raise exc

    return handler


def replacement_error_handler(replacement: str) -> str:
    """Return the name of a codecs error handler substituting ``replacement``.

    Handlers are registered once per replacement text; the codecs registry
    has no way to unregister them.
    """
    name = _registered.get(replacement)
    if name is None:
        name = f"{_HANDLER_PREFIX}{replacement}"
        codecs.register_error(name, _make_handler(replacement))
        _registered[replacement] = name
    return name


class ReplacingDecoder:
    """Stateful decoder bound to one encoding and one replacement text.

    Bytes of an incomplete character at the end of a non-final chunk are
    kept and prefixed onto the next call.
    """

    def __init__(self, encoding: str, replacement: str = "?") -> None:
        info = codecs.lookup(encoding)
        self.encoding = info.name
        self.replacement = replacement
        self._decoder = info.incrementaldecoder(
            errors=replacement_error_handler(replacement)
        )

    def decode(self, data: bytes, final: bool = False) -> str:
        return self._decoder.decode(data, final)

    def flush(self) -> str:
        """Emit whatever the decoder still holds, as replacement text."""
        return self._decoder.decode(b"", True)

    def reset(self) -> None:
        self._decoder.reset()

    @property
    def pending(self) -> bool:
        """True while part of a multi-byte sequence is held."""
        buffered, _ = self._decoder.getstate()
        return bool(buffered)
