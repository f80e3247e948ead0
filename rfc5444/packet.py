"""
RFC 5444 Packets

<packet> layout:
    version|flags  (1 byte)  - high nibble version, low nibble flags
    seq_num        (2 bytes) - if HAS_SEQ_NUM
    tlv-block                - if HAS_TLV
    message*                 - rest of the buffer

Only version RFC5444_VERSION is accepted. Unused and reserved flag bits
are ignored.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from .cursor import BufferLike, Cursor
from .errors import InvalidVersion
from .message import Messages
from .tlv import TlvBlock


# Supported version of RFC 5444
RFC5444_VERSION = 0


class PktHeaderFlags(IntEnum):
    """Packet header flag bits (low nibble of the first byte)."""
    HAS_SEQ_NUM = 0x08
    HAS_TLV = 0x04
    RESERVED0 = 0x02
    RESERVED1 = 0x01


@dataclass(frozen=True)
class PktHeader:
    """Packet header."""
    version: int
    seq_num: Optional[int] = None
    tlv_block: Optional[TlvBlock] = None

    @classmethod
    def read(cls, cur: Cursor) -> "PktHeader":
        """
        Decode a <pkt-header>.

        The version is checked before anything past the first byte is read.

        Raises:
            InvalidVersion: If the version nibble is not RFC5444_VERSION
            UnexpectedEof: If the sequence number or TLV block is truncated
        """
        b = cur.read_u8("packet version")
        version = (b & 0xF0) >> 4
        flags = b & 0x0F

        if version != RFC5444_VERSION:
            raise InvalidVersion(version)

        seq_num = None
        if flags & PktHeaderFlags.HAS_SEQ_NUM:
            seq_num = cur.read_be_u16("packet sequence number")

        tlv_block = None
        if flags & PktHeaderFlags.HAS_TLV:
            tlv_block = TlvBlock.read(cur)

        return cls(version=version, seq_num=seq_num, tlv_block=tlv_block)


@dataclass(frozen=True)
class Packet:
    """
    A decoded <packet>.

    Messages are decoded lazily; iterate packet.messages as often as
    needed. All views borrow from the buffer passed to decode_packet.
    """
    header: PktHeader
    messages: Messages

    @classmethod
    def read(cls, data: BufferLike) -> "Packet":
        cur = Cursor(data)
        header = PktHeader.read(cur)
        messages = Messages(cur.read_bytes(cur.remaining, "messages"))
        return cls(header=header, messages=messages)


def decode_packet(data: BufferLike) -> Packet:
    """
    Decode an RFC 5444 packet.

    Args:
        data: Buffer holding exactly one packet

    Returns:
        Packet: Packet view over data

    Raises:
        InvalidVersion: If the packet version is unsupported
        UnexpectedEof: If the packet header is truncated
    """
    return Packet.read(data)
