"""
RFC 5444 Messages

<message> layout:
    msg_type     (1 byte)
    flags|len    (1 byte)  - high nibble flags, low nibble address_length - 1
    size         (2 bytes) - whole message, header included
    orig_addr    (address_length bytes) - if HAS_ORIG
    hop_limit    (1 byte)               - if HAS_HOP_LIMIT
    hop_count    (1 byte)               - if HAS_HOP_COUNT
    seq_num      (2 bytes)              - if HAS_SEQ_NUM
    tlv-block
    (address-block tlv-block)*          - rest of the size bytes
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from .address import AddressTlvs
from .cursor import BufferLike, Cursor, CursorIterator
from .errors import UnexpectedEof
from .tlv import TlvBlock


class MsgHeaderFlags(IntEnum):
    """Message header flag bits (high nibble of the second byte)."""
    HAS_ORIG = 0x80
    HAS_HOP_LIMIT = 0x40
    HAS_HOP_COUNT = 0x20
    HAS_SEQ_NUM = 0x10


# Low nibble of the flags byte
ADDR_LENGTH_MASK = 0x0F


@dataclass(frozen=True)
class MsgHeader:
    """
    Message header.

    size is the total message length in bytes, header included.
    """
    msg_type: int
    address_length: int
    size: int
    orig_addr: Optional[memoryview] = None
    hop_limit: Optional[int] = None
    hop_count: Optional[int] = None
    seq_num: Optional[int] = None

    @classmethod
    def read(cls, cur: Cursor) -> "MsgHeader":
        """
        Decode a <msg-header>.

        The 4-bit length field gives address lengths from 1 to
        MAX_ADDR_LEN (16) bytes.

        Raises:
            UnexpectedEof: If any header field is truncated
        """
        msg_type = cur.read_u8("message type")

        b = cur.read_u8("message flags")
        flags = b & 0xF0
        address_length = (b & ADDR_LENGTH_MASK) + 1

        size = cur.read_be_u16("message size")

        orig_addr = None
        if flags & MsgHeaderFlags.HAS_ORIG:
            orig_addr = cur.read_bytes(address_length, "originator address")

        hop_limit = None
        if flags & MsgHeaderFlags.HAS_HOP_LIMIT:
            hop_limit = cur.read_u8("hop limit")

        hop_count = None
        if flags & MsgHeaderFlags.HAS_HOP_COUNT:
            hop_count = cur.read_u8("hop count")

        seq_num = None
        if flags & MsgHeaderFlags.HAS_SEQ_NUM:
            seq_num = cur.read_be_u16("message sequence number")

        return cls(
            msg_type=msg_type,
            address_length=address_length,
            size=size,
            orig_addr=orig_addr,
            hop_limit=hop_limit,
            hop_count=hop_count,
            seq_num=seq_num,
        )


@dataclass(frozen=True)
class Message:
    """
    A decoded <message>.

    header and tlv_block are decoded eagerly; the address block region is
    only delimited and is decoded while iterating address_tlv.
    """
    header: MsgHeader
    tlv_block: TlvBlock
    address_tlv: AddressTlvs

    @classmethod
    def read(cls, cur: Cursor) -> "Message":
        """
        Decode one <message> and claim exactly its declared size.

        Args:
            cur: Cursor positioned at the message type byte

        Returns:
            Message: Decoded message

        Raises:
            UnexpectedEof: If the message is truncated, or its declared
                size is smaller than its header and TLV block
        """
        start = cur.pos

        header = MsgHeader.read(cur)
        tlv_block = TlvBlock.read(cur)

        consumed = cur.pos - start
        remaining = header.size - consumed
        if remaining < 0:
            raise UnexpectedEof(
                f"Message size {header.size} is smaller than its "
                f"header and TLV block ({consumed} bytes)",
                offset=start,
            )

        region = cur.read_bytes(remaining, "address blocks")

        return cls(
            header=header,
            tlv_block=tlv_block,
            address_tlv=AddressTlvs(region, header.address_length),
        )


class MessageIter(CursorIterator):
    """Iterator over the messages of a packet."""

    def _read_item(self, cursor: Cursor) -> Message:
        return Message.read(cursor)


class Messages:
    """The message area of a packet: everything after the packet header."""

    __slots__ = ("_data",)

    def __init__(self, data: BufferLike):
        self._data = Cursor(data).buffer()

    def as_bytes(self) -> memoryview:
        """Raw bytes of all messages."""
        return self._data

    def iterate(self) -> MessageIter:
        return MessageIter(Cursor(self._data))

    def __iter__(self) -> MessageIter:
        return self.iterate()

    def __repr__(self) -> str:
        return f"Messages(length={len(self._data)})"
