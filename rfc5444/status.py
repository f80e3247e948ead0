"""
RFC 5444 Status-Code Entry Point

Flattened, integer-status form of decode_packet for callers on the other
side of a foreign-function boundary:

    status, pkt = read_packet(data)

    status == STATUS_OK      -> pkt is a FlatPacket
    status == STATUS_EOF     -> truncated input (UnexpectedEof)
    status == STATUS_EINVAL  -> PrefixTooLarge or InvalidVersion

Only the packet header is flattened. The message area is handed back as
raw bytes; decode it again with rfc5444.Messages to get structured
messages.
"""

import errno
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .cursor import BufferLike
from .errors import InvalidVersion, PrefixTooLarge, Rfc5444Error, UnexpectedEof
from .packet import decode_packet


STATUS_OK = 0
STATUS_EOF = -1
STATUS_EINVAL = -errno.EINVAL


@dataclass
class FlatPktHeader:
    """Packet header with presence flags instead of optionals."""
    version: int = 0
    has_seq_num: bool = False
    seq_num: int = 0
    has_tlv_block: bool = False


@dataclass
class FlatPacket:
    """Flattened packet: header plus the raw message area."""
    hdr: FlatPktHeader = field(default_factory=FlatPktHeader)
    messages: memoryview = field(default_factory=lambda: memoryview(b""))


def status_for(error: Rfc5444Error) -> int:
    """Map a decode error to its status code."""
    if isinstance(error, UnexpectedEof):
        return STATUS_EOF
    if isinstance(error, (PrefixTooLarge, InvalidVersion)):
        return STATUS_EINVAL
    raise TypeError(f"Not an RFC 5444 decode error: {error!r}")


def read_packet(data: BufferLike) -> Tuple[int, Optional[FlatPacket]]:
    """
    Decode a packet header into its flattened form.

    Args:
        data: Buffer holding exactly one packet

    Returns:
        Tuple[int, Optional[FlatPacket]]: (status, packet or None)
    """
    try:
        pkt = decode_packet(data)
    except Rfc5444Error as e:
        return status_for(e), None

    hdr = FlatPktHeader(version=pkt.header.version)
    if pkt.header.seq_num is not None:
        hdr.has_seq_num = True
        hdr.seq_num = pkt.header.seq_num
    hdr.has_tlv_block = pkt.header.tlv_block is not None

    return STATUS_OK, FlatPacket(hdr=hdr, messages=pkt.messages.as_bytes())
