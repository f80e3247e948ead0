"""
rfc5444 - Generalized MANET Packet/Message Format decoder

Zero-copy decoder for RFC 5444 packets as used by OLSRv2 and NHDP.

    pkt = decode_packet(data)
    for msg in pkt.messages:
        for tlv in msg.tlv_block:
            ...
        for block, tlvs in msg.address_tlv:
            ...

This package contains:
- cursor   : Bounds-checked read head and lazy iterator base
- tlv      : TLVs and TLV blocks
- address  : Address blocks and (address block, TLV block) pairs
- message  : Message headers and messages
- packet   : Packet header and decode_packet entry point
- status   : Integer status-code entry point
- errors   : UnexpectedEof, PrefixTooLarge, InvalidVersion

Decoded values are views (memoryview slices) into the caller's buffer.
Nothing here performs I/O or interprets the decoded values.
"""

__version__ = "0.1.0"

from .errors import (
    Rfc5444Error,
    UnexpectedEof,
    PrefixTooLarge,
    InvalidVersion,
)

from .cursor import Cursor, CursorIterator

from .tlv import (
    Tlv,
    TlvFlags,
    TlvBlock,
    TlvBlockIter,
)

from .address import (
    AddressBlock,
    AddressBlockFlags,
    AddressTlvs,
    AddressTlvIter,
    MAX_ADDR_LEN,
)

from .message import (
    Message,
    MessageIter,
    Messages,
    MsgHeader,
    MsgHeaderFlags,
)

from .packet import (
    Packet,
    PktHeader,
    PktHeaderFlags,
    decode_packet,
    RFC5444_VERSION,
)

__all__ = [
    # Errors
    'Rfc5444Error',
    'UnexpectedEof',
    'PrefixTooLarge',
    'InvalidVersion',
    # Cursor
    'Cursor',
    'CursorIterator',
    # TLV
    'Tlv',
    'TlvFlags',
    'TlvBlock',
    'TlvBlockIter',
    # Address blocks
    'AddressBlock',
    'AddressBlockFlags',
    'AddressTlvs',
    'AddressTlvIter',
    'MAX_ADDR_LEN',
    # Messages
    'Message',
    'MessageIter',
    'Messages',
    'MsgHeader',
    'MsgHeaderFlags',
    # Packet
    'Packet',
    'PktHeader',
    'PktHeaderFlags',
    'decode_packet',
    'RFC5444_VERSION',
]
