"""Fixed-capacity byte buffer feeding the decoder."""


class ByteAccumulator:
    """Collect bytes until ``capacity`` is reached.

    The owner decodes the whole content once ``is_full`` and calls
    ``clear``; the buffer is never compacted partially.
    """

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        self._buffer = bytearray(capacity)
        self._position = 0

    def __len__(self) -> int:
        return self._position

    @property
    def remaining(self) -> int:
        return self.capacity - self._position

    @property
    def is_full(self) -> bool:
        return self._position == self.capacity

    def put(self, value: int) -> None:
        if self.is_full:
            raise BufferError("byte buffer is full")
        self._buffer[self._position] = value
        self._position += 1

    def fill_from(self, view: memoryview, start: int) -> int:
        """Copy as many bytes of ``view[start:]`` as fit; return the count."""
        count = min(self.remaining, len(view) - start)
        if count > 0:
            end = self._position + count
            self._buffer[self._position:end] = view[start:start + count]
            self._position = end
        return max(count, 0)

    def contents(self) -> bytes:
        return bytes(self._buffer[:self._position])

    def clear(self) -> None:
        self._position = 0
