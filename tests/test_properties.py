"""
Property tests: arbitrary input never escapes the error taxonomy
"""

import pytest
from hypothesis import given, settings, strategies as st

from rfc5444 import (
    AddressBlock,
    Cursor,
    InvalidVersion,
    PrefixTooLarge,
    Rfc5444Error,
    TlvBlock,
    UnexpectedEof,
    decode_packet,
)

from conftest import NHDP_PACKET


def walk(data: bytes) -> int:
    """Decode a packet and pull every nested sequence. Returns item count."""
    pkt = decode_packet(data)
    count = 0
    if pkt.header.tlv_block is not None:
        count += len(list(pkt.header.tlv_block))
    for msg in pkt.messages:
        count += 1 + len(list(msg.tlv_block))
        for _, tlvs in msg.address_tlv:
            count += 1 + len(list(tlvs))
    return count


@given(st.binary(max_size=512))
@settings(max_examples=500)
def test_arbitrary_input_decodes_or_raises_defined_error(data):
    try:
        walk(data)
    except Rfc5444Error as e:
        assert type(e) in (UnexpectedEof, PrefixTooLarge, InvalidVersion)


@given(st.binary(max_size=256))
@settings(max_examples=300)
def test_arbitrary_tlv_block(data):
    try:
        block = TlvBlock.read(Cursor(data))
        list(block)
    except UnexpectedEof:
        pass


@given(st.binary(max_size=128), st.integers(min_value=1, max_value=16))
@settings(max_examples=300)
def test_arbitrary_address_block(data, address_length):
    cur = Cursor(data)
    try:
        block = AddressBlock.read(cur, address_length)
    except (UnexpectedEof, PrefixTooLarge):
        return
    assert block.mid_length >= 0
    assert cur.pos <= len(data)


@given(st.integers(min_value=2, max_value=len(NHDP_PACKET) - 1))
def test_truncated_nhdp_is_unexpected_eof(length):
    with pytest.raises(UnexpectedEof):
        walk(NHDP_PACKET[:length])


def test_full_nhdp_walks_cleanly():
    # 1 message + 1 address block + 3 address TLVs
    assert walk(NHDP_PACKET) == 5


@given(st.integers(min_value=1, max_value=15),
       st.integers(min_value=0, max_value=15),
       st.binary(max_size=64))
def test_any_nonzero_version_is_rejected(version, flags, rest):
    with pytest.raises(InvalidVersion):
        decode_packet(bytes([(version << 4) | flags]) + rest)


@given(st.integers(min_value=1, max_value=16), st.data())
def test_prefix_above_address_width_is_rejected(address_length, data):
    prefix = data.draw(st.integers(min_value=8 * address_length + 1, max_value=255))
    block = bytes([1, 0x10]) + bytes(address_length) + bytes([prefix])
    with pytest.raises(PrefixTooLarge):
        AddressBlock.read(Cursor(block), address_length)


@given(st.integers(min_value=1, max_value=16), st.data())
def test_prefix_within_address_width_is_accepted(address_length, data):
    prefix = data.draw(st.integers(min_value=0, max_value=8 * address_length))
    block = bytes([1, 0x10]) + bytes(address_length) + bytes([prefix])
    assert AddressBlock.read(Cursor(block), address_length).prefix_lengths[0] == prefix
