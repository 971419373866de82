"""Growable in-memory sink for serialized image bytes."""

from qrcodeine.errors import OutOfMemory, SinkClosed
from qrcodeine.logging import get_logger

log = get_logger("sink")


class OutputSink:
    """Accumulates bytes written by an image serializer.

    Used as a context manager, the sink discards its contents when the block
    exits with an exception, so a failed render never leaks a partial image.
    """

    def __init__(self):
        self._buffer: bytearray | None = bytearray()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self.discard()
        return False

    @property
    def closed(self) -> bool:
        return self._buffer is None

    @property
    def size(self) -> int:
        return len(self._open_buffer())

    def _open_buffer(self) -> bytearray:
        if self._buffer is None:
            raise SinkClosed("sink already finalized or discarded")
        return self._buffer

    def write(self, data) -> int:
        """Append data. On allocation failure the existing contents are kept."""
        buffer = self._open_buffer()
        try:
            buffer += data
        except MemoryError as exc:
            raise OutOfMemory("write error: could not grow output buffer") from exc
        return len(data)

    def finalize(self) -> bytes:
        """Hand the accumulated bytes to the caller and close the sink."""
        data = bytes(self._open_buffer())
        self._buffer = None
        return data

    def discard(self):
        """Drop any partial contents and close the sink. Safe to call twice."""
        if self._buffer is not None:
            log.debug("discarding %d buffered bytes", len(self._buffer))
            self._buffer = None
