"""Progress-observing reader over a local file."""
import asyncio
from typing import BinaryIO, Optional

from ..protocols import ProgressCallback


class ProgressReader:
    """
    Wraps a binary file and reports cumulative bytes read against a total.

    The stream is consumed once; callers pass the same reader from the
    session start through to the final flush.
    """

    def __init__(
        self,
        raw: BinaryIO,
        size: int,
        callback: Optional[ProgressCallback] = None,
    ):
        self._raw = raw
        self.size = size
        self.bytes_read = 0
        self._callback = callback
        self._empty_reported = False

    def read(self, n: int = -1) -> bytes:
        """Read up to n bytes (all remaining when n < 0)."""
        if n is None or n < 0:
            data = self._raw.read()
        else:
            parts = []
            remaining = n
            # raw reads may come back short before EOF
            while remaining > 0:
                chunk = self._raw.read(remaining)
                if not chunk:
                    break
                parts.append(chunk)
                remaining -= len(chunk)
            data = b"".join(parts)

        if data:
            self.bytes_read += len(data)
            if self._callback:
                self._callback(self.bytes_read, self.size)
        elif n != 0 and self.bytes_read == 0 and not self._empty_reported:
            # an empty stream still reports completion once
            self._empty_reported = True
            if self._callback:
                self._callback(0, self.size)
        return data

    async def read_async(self, n: int = -1) -> bytes:
        """Read without blocking the event loop."""
        return await asyncio.to_thread(self.read, n)
