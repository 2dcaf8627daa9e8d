"""A view of a seekable stream that starts at a fixed byte offset."""

from __future__ import annotations

import errno
import io
from typing import BinaryIO, Optional

__all__ = ["Subfile"]


class Subfile:
    """Wraps ``stream`` so that byte ``offset`` of it appears as position 0.

    Positions passed to and returned from :meth:`seek` are relative to
    ``offset``. Reads go straight to the underlying stream. ``length`` is
    the length of the whole underlying stream, and is what
    :meth:`byte_len` reports.
    """

    def __init__(self, stream: BinaryIO, offset: int, length: int) -> None:
        stream.seek(offset, io.SEEK_SET)
        self._stream = stream
        self.offset = offset
        self.length = length

    def read(self, size: Optional[int] = -1) -> bytes:
        """Read up to ``size`` bytes from the current position."""
        return self._stream.read(size)

    def readable(self) -> bool:
        return True

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """Move the position and return it, relative to the start offset.

        Raises OSError (EINVAL) when a seek from the end would land before
        the start offset.
        """
        if whence == io.SEEK_SET:
            offset += self.offset
        elif whence == io.SEEK_END:
            if self.length - offset < self.offset:
                raise OSError(errno.EINVAL, "newpos would be < self.offset")
        new_position = self._stream.seek(offset, whence)
        return new_position - self.offset

    def tell(self) -> int:
        """Return the current position relative to the start offset."""
        return self._stream.tell() - self.offset

    def seekable(self) -> bool:
        return True

    def byte_len(self) -> int:
        """Return the length reported for the stream."""
        return self.length