"""A reader that puts a prefix in front of every line of another stream."""

from __future__ import annotations

from typing import IO


class Prefixer:
    """Wrap a readable stream and prepend ``prefix`` to each line read from it."""

    def __init__(self, reader: IO, prefix: str | bytes) -> None:
        self._reader = reader
        self._prefix = prefix.encode() if isinstance(prefix, str) else bytes(prefix)
        self._unread = b""
        self._eof = False

    def _fill(self) -> bool:
        """Load the next prefixed line; False once the stream is exhausted."""
        if self._eof:
            return False
        line = self._reader.readline()
        if isinstance(line, str):
            line = line.encode()
        if not line:
            self._eof = True
            return False
        self._unread = self._prefix + line
        return True

    def read(self, size: int = -1) -> bytes:
        """Return up to ``size`` prefixed bytes (all when negative); b'' at end."""
        out = bytearray()
        while size < 0 or len(out) < size:
            if not self._unread and not self._fill():
                break
            take = len(self._unread) if size < 0 else size - len(out)
            out += self._unread[:take]
            self._unread = self._unread[take:]
        return bytes(out)

    def write_to(self, writer: IO) -> int:
        """Copy every prefixed line to ``writer``; return the bytes written."""
        total = 0
        while self._unread or self._fill():
            written = writer.write(self._unread)
            if written is None:
                written = len(self._unread)
            total += written
            self._unread = self._unread[written:]
        return total