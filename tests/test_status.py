"""
Tests for the integer status-code entry point
"""

import errno

import pytest

from rfc5444 import Messages, PrefixTooLarge, InvalidVersion, UnexpectedEof
from rfc5444.status import (
    STATUS_EINVAL,
    STATUS_EOF,
    STATUS_OK,
    read_packet,
    status_for,
)


def test_status_codes_are_negative():
    assert STATUS_OK == 0
    assert STATUS_EOF < 0
    assert STATUS_EINVAL == -errno.EINVAL


def test_nhdp(nhdp_packet):
    status, pkt = read_packet(nhdp_packet)
    assert status == STATUS_OK
    assert pkt.hdr.version == 0
    assert not pkt.hdr.has_seq_num
    assert pkt.hdr.seq_num == 0
    assert not pkt.hdr.has_tlv_block
    assert pkt.messages == nhdp_packet[1:]


def test_messages_need_a_second_decode(nhdp_packet):
    _, pkt = read_packet(nhdp_packet)
    msgs = list(Messages(pkt.messages))
    assert [m.header.msg_type for m in msgs] == [1]


def test_sequence_number_and_tlv_flags():
    status, pkt = read_packet(bytes.fromhex("0c beef 0000"))
    assert status == STATUS_OK
    assert pkt.hdr.has_seq_num
    assert pkt.hdr.seq_num == 0xbeef
    assert pkt.hdr.has_tlv_block


def test_truncated_is_eof():
    assert read_packet(b"\x08\x00") == (STATUS_EOF, None)
    assert read_packet(b"") == (STATUS_EOF, None)


def test_invalid_version_is_einval():
    assert read_packet(b"\x20") == (STATUS_EINVAL, None)


def test_broken_messages_are_not_seen():
    # The message area is not decoded here
    status, pkt = read_packet(bytes.fromhex("00 01 03 00ff"))
    assert status == STATUS_OK
    assert len(pkt.messages) == 4


@pytest.mark.parametrize("error,status", [
    (UnexpectedEof("x"), STATUS_EOF),
    (PrefixTooLarge("x"), STATUS_EINVAL),
    (InvalidVersion(3), STATUS_EINVAL),
])
def test_status_for(error, status):
    assert status_for(error) == status


def test_status_for_rejects_other_errors():
    with pytest.raises(TypeError):
        status_for(ValueError("x"))
