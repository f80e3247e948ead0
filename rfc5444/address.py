"""
RFC 5444 Address Blocks

<address-block> layout:
    num_addr     (1 byte)
    flags        (1 byte)
    head_length  (1 byte)             - if HAS_HEAD
    head         (head_length bytes)  - if HAS_HEAD
    tail_length  (1 byte)             - if exactly one of FULL_TAIL/ZERO_TAIL
    tail         (tail_length bytes)  - if HAS_FULL_TAIL only
    mid          (mid_length * num_addr bytes)
    prefix_len   (1 or num_addr bytes) - if exactly one PRELEN flag

where mid_length = address_length - head_length - tail_length.

An address block is a compressed list of num_addr addresses sharing a
head and a tail; each address contributes only its middle bytes. With
ZERO_TAIL the shared tail is implied to be tail_length zero bytes.

The decoder exposes the raw components only. Expanding them into full
addresses is left to the caller.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple

from .cursor import BufferLike, Cursor, CursorIterator
from .errors import PrefixTooLarge, UnexpectedEof
from .tlv import TlvBlock


# Largest address length a message header can declare (4 bits + 1)
MAX_ADDR_LEN = 16


class AddressBlockFlags(IntEnum):
    """Address block flag bits."""
    HAS_HEAD = 0x80
    HAS_FULL_TAIL = 0x40
    HAS_ZERO_TAIL = 0x20
    HAS_SINGLE_PRELEN = 0x10
    HAS_MULTI_PRELEN = 0x08
    RESERVED0 = 0x04
    RESERVED1 = 0x02
    RESERVED2 = 0x01


@dataclass(frozen=True)
class AddressBlock:
    """A decoded <address-block>, components borrowed from the input."""
    num_addr: int
    address_length: int
    head: Optional[memoryview] = None
    tail: Optional[memoryview] = None
    mid: Optional[memoryview] = None
    prefix_lengths: Optional[memoryview] = None
    head_length: int = 0
    tail_length: int = 0
    zero_tail: bool = False

    @classmethod
    def read(cls, cur: Cursor, address_length: int) -> "AddressBlock":
        """
        Decode one <address-block>.

        Args:
            cur: Cursor positioned at num_addr
            address_length: Bytes per address, from the message header

        Returns:
            AddressBlock: Decoded block

        Raises:
            UnexpectedEof: If a field is truncated, or head and tail
                together are longer than an address
            PrefixTooLarge: If a prefix length exceeds 8 * address_length
        """
        num_addr = cur.read_u8("address count")
        flags = cur.read_u8("address flags")

        head_length = 0
        head = None
        if flags & AddressBlockFlags.HAS_HEAD:
            head_length = cur.read_u8("head length")
            head = cur.read_bytes(head_length, "head")

        # Neither or both tail flags: no tail fields at all
        tail_length = 0
        tail = None
        full_tail = bool(flags & AddressBlockFlags.HAS_FULL_TAIL)
        zero_tail = bool(flags & AddressBlockFlags.HAS_ZERO_TAIL)
        if full_tail and not zero_tail:
            tail_length = cur.read_u8("tail length")
            if tail_length != 0:
                tail = cur.read_bytes(tail_length, "tail")
        elif zero_tail and not full_tail:
            tail_length = cur.read_u8("tail length")
        else:
            zero_tail = False

        mid_length = address_length - head_length - tail_length
        if mid_length < 0:
            raise UnexpectedEof(
                f"Head ({head_length}) and tail ({tail_length}) exceed "
                f"address length {address_length}",
                offset=cur.pos,
            )

        mid = None
        if mid_length > 0:
            mid = cur.read_bytes(mid_length * num_addr, "address mids")

        # Neither or both prefix flags: no prefix lengths
        single_prelen = bool(flags & AddressBlockFlags.HAS_SINGLE_PRELEN)
        multi_prelen = bool(flags & AddressBlockFlags.HAS_MULTI_PRELEN)
        if single_prelen and not multi_prelen:
            prefix_fields = 1
        elif multi_prelen and not single_prelen:
            prefix_fields = num_addr
        else:
            prefix_fields = 0

        prefix_lengths = None
        if prefix_fields != 0:
            start = cur.pos
            prefix_lengths = cur.read_bytes(prefix_fields, "prefix lengths")
            max_prefix = 8 * address_length
            for i, prefix in enumerate(prefix_lengths):
                if prefix > max_prefix:
                    raise PrefixTooLarge(
                        f"Prefix length {prefix} exceeds {max_prefix} bits",
                        offset=start + i,
                    )

        return cls(
            num_addr=num_addr,
            address_length=address_length,
            head=head,
            tail=tail,
            mid=mid,
            prefix_lengths=prefix_lengths,
            head_length=head_length,
            tail_length=tail_length,
            zero_tail=zero_tail,
        )

    @property
    def mid_length(self) -> int:
        """Bytes each address contributes to mid."""
        return self.address_length - self.head_length - self.tail_length


AddressTlvPair = Tuple[AddressBlock, TlvBlock]


class AddressTlvIter(CursorIterator):
    """Iterator over (AddressBlock, TlvBlock) pairs of a message."""

    def __init__(self, cursor: Cursor, address_length: int):
        super().__init__(cursor)
        self._address_length = address_length

    def _read_item(self, cursor: Cursor) -> AddressTlvPair:
        block = AddressBlock.read(cursor, self._address_length)
        tlvs = TlvBlock.read(cursor)
        return block, tlvs


class AddressTlvs:
    """
    The (<address-block><tlv-block>)* region of a message.

    Pairs are decoded lazily; every call to iterate() starts over from
    the first pair.
    """

    __slots__ = ("_data", "_address_length")

    def __init__(self, data: BufferLike, address_length: int):
        self._data = Cursor(data).buffer()
        self._address_length = address_length

    @property
    def address_length(self) -> int:
        return self._address_length

    def as_bytes(self) -> memoryview:
        return self._data

    def iterate(self) -> AddressTlvIter:
        return AddressTlvIter(Cursor(self._data), self._address_length)

    def __iter__(self) -> AddressTlvIter:
        return self.iterate()

    def __repr__(self) -> str:
        return (f"AddressTlvs(address_length={self._address_length}, "
                f"length={len(self._data)})")
