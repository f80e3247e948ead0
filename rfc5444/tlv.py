"""
RFC 5444 TLVs and TLV Blocks

<tlv> layout:
    type        (1 byte)
    flags       (1 byte)
    type_ext    (1 byte)        - if HAS_TYPE_EXT
    index_start (1 byte)        - if HAS_SINGLE_INDEX or HAS_MULTI_INDEX
    index_stop  (1 byte)        - if HAS_MULTI_INDEX
    length      (1 or 2 bytes)  - if HAS_VALUE, 2 bytes when HAS_EXT_LEN
    value       (length bytes)

<tlv-block> layout:
    length      (2 bytes, big-endian)
    tlv*        (length bytes)

Reserved flag bits are accepted and ignored.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from .cursor import BufferLike, Cursor, CursorIterator


class TlvFlags(IntEnum):
    """TLV flag bits."""
    HAS_TYPE_EXT = 0x80
    HAS_SINGLE_INDEX = 0x40
    HAS_MULTI_INDEX = 0x20
    HAS_VALUE = 0x10
    HAS_EXT_LEN = 0x08     # 16-bit length field
    IS_MULTI_VALUE = 0x04  # Value holds one item per indexed address
    RESERVED0 = 0x02
    RESERVED1 = 0x01


@dataclass(frozen=True)
class Tlv:
    """
    A decoded <tlv>.

    value is None when the value flag is clear, and also when it is set
    with a zero length.
    """
    tlv_type: int
    type_ext: Optional[int] = None
    start_index: Optional[int] = None
    stop_index: Optional[int] = None
    value: Optional[memoryview] = None
    is_multi_value: bool = False

    @classmethod
    def read(cls, cur: Cursor) -> "Tlv":
        """
        Decode one <tlv> at the cursor position.

        Args:
            cur: Cursor positioned at the TLV type byte

        Returns:
            Tlv: Decoded TLV, views borrowed from the cursor's buffer

        Raises:
            UnexpectedEof: If a field runs past the end of the buffer
        """
        tlv_type = cur.read_u8("tlv type")
        flags = cur.read_u8("tlv flags")

        type_ext = None
        if flags & TlvFlags.HAS_TYPE_EXT:
            type_ext = cur.read_u8("tlv type extension")

        # Both index flags set is read as the multi-index form
        start_index = None
        stop_index = None
        if flags & TlvFlags.HAS_MULTI_INDEX:
            start_index = cur.read_u8("tlv start index")
            stop_index = cur.read_u8("tlv stop index")
        elif flags & TlvFlags.HAS_SINGLE_INDEX:
            start_index = cur.read_u8("tlv start index")

        value = None
        if flags & TlvFlags.HAS_VALUE:
            if flags & TlvFlags.HAS_EXT_LEN:
                length = cur.read_be_u16("tlv length")
            else:
                length = cur.read_u8("tlv length")
            if length > 0:
                value = cur.read_bytes(length, "tlv value")

        return cls(
            tlv_type=tlv_type,
            type_ext=type_ext,
            start_index=start_index,
            stop_index=stop_index,
            value=value,
            is_multi_value=bool(flags & TlvFlags.IS_MULTI_VALUE),
        )

    @property
    def full_type(self) -> int:
        """Type and extension combined as (type << 8) | type_ext."""
        return (self.tlv_type << 8) | (self.type_ext or 0)


class TlvBlockIter(CursorIterator):
    """Iterator over the TLVs of a block."""

    def _read_item(self, cursor: Cursor) -> Tlv:
        return Tlv.read(cursor)


class TlvBlock:
    """
    Length-delimited <tlv-block>.

    Only the raw block is held; TLVs are decoded on each traversal.
    """

    __slots__ = ("_data",)

    def __init__(self, data: BufferLike):
        self._data = Cursor(data).buffer()

    @classmethod
    def read(cls, cur: Cursor) -> "TlvBlock":
        """
        Decode a <tlv-block> header and claim its body.

        Raises:
            UnexpectedEof: If the length field or the body is truncated
        """
        length = cur.read_be_u16("tlv block length")
        return cls(cur.read_bytes(length, "tlv block"))

    def as_bytes(self) -> memoryview:
        """Raw block body, without the length field."""
        return self._data

    def iterate(self) -> TlvBlockIter:
        """Fresh iterator from the first TLV of the block."""
        return TlvBlockIter(Cursor(self._data))

    def __iter__(self) -> TlvBlockIter:
        return self.iterate()

    @property
    def length(self) -> int:
        """Size of the block body in bytes."""
        return len(self._data)

    def is_empty(self) -> bool:
        return len(self._data) == 0

    def __eq__(self, other) -> bool:
        if not isinstance(other, TlvBlock):
            return NotImplemented
        return self._data == other._data

    def __repr__(self) -> str:
        return f"TlvBlock(length={len(self._data)})"
