"""
RFC 5444 Buffer Cursor

Bounds-checked read head over a borrowed byte buffer.

All bounds arithmetic of the decoder lives here. Every read checks the
remaining length first; on shortfall it raises UnexpectedEof and leaves
the offset untouched. Byte reads return memoryview slices of the
original buffer, never copies, so the caller's buffer must outlive every
view derived from it.
"""

import logging
import struct
from typing import Union

from .errors import Rfc5444Error, UnexpectedEof


BufferLike = Union[bytes, bytearray, memoryview]

logger = logging.getLogger(__name__)

_U16 = struct.Struct(">H")


class Cursor:
    """
    Read head over a read-only view of a byte buffer.

    Usage:
        cur = Cursor(b"\\x00\\x01\\x02")
        cur.read_u8()        # 0
        cur.read_be_u16()    # 0x0102
        cur.is_eof()         # True
    """

    __slots__ = ("_buf", "_off")

    def __init__(self, data: BufferLike):
        self._buf = memoryview(data).cast("B").toreadonly()
        self._off = 0

    @property
    def pos(self) -> int:
        """Current offset into the buffer."""
        return self._off

    @property
    def remaining(self) -> int:
        """Number of unread bytes."""
        return len(self._buf) - self._off

    def buffer(self) -> memoryview:
        """The whole underlying view, independent of the offset."""
        return self._buf

    def is_eof(self) -> bool:
        return self._off >= len(self._buf)

    def _require(self, needed: int, what: str) -> None:
        if self.remaining < needed:
            raise UnexpectedEof(
                f"Need {needed} byte(s) for {what}, {self.remaining} left",
                offset=self._off,
            )

    def read_u8(self, what: str = "u8") -> int:
        """Read one byte."""
        self._require(1, what)
        value = self._buf[self._off]
        self._off += 1
        return value

    def read_be_u16(self, what: str = "u16") -> int:
        """Read an unsigned 16-bit integer in network byte order."""
        self._require(2, what)
        (value,) = _U16.unpack_from(self._buf, self._off)
        self._off += 2
        return value

    def read_bytes(self, count: int, what: str = "bytes") -> memoryview:
        """
        Read a byte slice without copying.

        Args:
            count: Number of bytes to claim
            what: Field name used in the error message

        Returns:
            memoryview: Slice of the original buffer

        Raises:
            UnexpectedEof: If fewer than count bytes remain
        """
        if count < 0:
            raise UnexpectedEof(f"Negative length for {what}: {count}", offset=self._off)
        self._require(count, what)
        view = self._buf[self._off:self._off + count]
        self._off += count
        return view

    def clone(self) -> "Cursor":
        """Independent cursor over the same buffer at the same offset."""
        other = Cursor.__new__(Cursor)
        other._buf = self._buf
        other._off = self._off
        return other

    __copy__ = clone

    def __eq__(self, other) -> bool:
        if not isinstance(other, Cursor):
            return NotImplemented
        return self._off == other._off and self._buf == other._buf

    def __repr__(self) -> str:
        return f"Cursor(pos={self._off}, len={len(self._buf)})"


class CursorIterator:
    """
    Base for lazy decode-on-demand sequences.

    Each pull decodes one item from a private cursor. A decode error is
    raised exactly once; after it the iterator is exhausted for good.
    Subclasses implement _read_item().
    """

    def __init__(self, cursor: Cursor):
        self._cursor = cursor
        self._failed = False

    def _read_item(self, cursor: Cursor):
        raise NotImplementedError("Iterator must implement _read_item()")

    def __iter__(self):
        return self

    def __next__(self):
        if self._failed or self._cursor.is_eof():
            raise StopIteration

        start = self._cursor.pos
        try:
            return self._read_item(self._cursor)
        except Rfc5444Error as e:
            self._failed = True
            logger.debug(f"{type(self).__name__} stopped at offset {start}: {e}")
            raise

    def try_next(self):
        """Next item, or None once the sequence is exhausted."""
        return next(self, None)

    @property
    def failed(self) -> bool:
        """True once a decode error has ended this iterator."""
        return self._failed

    def clone(self):
        """Independent copy that resumes from the current position."""
        other = type(self).__new__(type(self))
        other.__dict__.update(self.__dict__)
        other._cursor = self._cursor.clone()
        return other

    __copy__ = clone

    def __repr__(self) -> str:
        return f"{type(self).__name__}(pos={self._cursor.pos}, failed={self._failed})"
