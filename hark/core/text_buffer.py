"""Growable text buffer split on a separator sequence."""

from typing import Iterator, Optional


class TextAccumulator:
    """Decoded text waiting to be emitted as separator-terminated units.

    ``_scanned`` marks how far the pending text has been searched without a
    match, so appends only rescan the tail that could complete a separator.
    """

    def __init__(self, separator: str) -> None:
        if not separator:
            raise ValueError("separator must not be empty")
        self.separator = separator
        self._text = ""
        self._start = 0
        self._scanned = 0

    def __len__(self) -> int:
        return len(self._text) - self._start

    @property
    def pending(self) -> str:
        return self._text[self._start:]

    def append(self, fragment: str) -> None:
        if not fragment:
            return
        if self._start:
            self._text = self._text[self._start:]
            self._scanned -= self._start
            self._start = 0
        self._text += fragment

    def extract_next(self) -> Optional[str]:
        """Pop the text before the first separator, or return None."""
        pos = self._text.find(self.separator, max(self._start, self._scanned))
        if pos < 0:
            # a separator may still end in text appended later
            self._scanned = max(self._start, len(self._text) - len(self.separator) + 1)
            return None
        unit = self._text[self._start:pos]
        self._start = pos + len(self.separator)
        self._scanned = self._start
        if self._start == len(self._text):
            self._text = ""
            self._start = 0
            self._scanned = 0
        return unit

    def extract_all(self) -> Iterator[str]:
        while True:
            unit = self.extract_next()
            if unit is None:
                return
            yield unit

    def drain_remainder(self) -> Optional[str]:
        """Return all pending text as a final unit and empty the buffer."""
        if not len(self):
            return None
        unit = self._text[self._start:]
        self._text = ""
        self._start = 0
        self._scanned = 0
        return unit
