"""
Tests for message decoding
"""

import pytest

from rfc5444 import (
    MAX_ADDR_LEN,
    Cursor,
    Message,
    Messages,
    MsgHeader,
    UnexpectedEof,
)


# type 1, all four header flags, address length 4, size 14
FULL_HEADER_MESSAGE = bytes.fromhex("01 f3 000e c0a80101 ff 02 1234 0000")


class TestMsgHeader:
    """Optional header fields in fixed order"""

    def test_no_optional_fields(self):
        cur = Cursor(bytes.fromhex("07 03 0006"))
        hdr = MsgHeader.read(cur)
        assert hdr.msg_type == 7
        assert hdr.address_length == 4
        assert hdr.size == 6
        assert hdr.orig_addr is None
        assert hdr.hop_limit is None
        assert hdr.hop_count is None
        assert hdr.seq_num is None
        assert cur.is_eof()

    def test_all_optional_fields(self):
        cur = Cursor(FULL_HEADER_MESSAGE)
        hdr = MsgHeader.read(cur)
        assert hdr.orig_addr == bytes.fromhex("c0a80101")
        assert hdr.hop_limit == 255
        assert hdr.hop_count == 2
        assert hdr.seq_num == 0x1234
        assert cur.pos == 12

    @pytest.mark.parametrize("nibble,length", [(0x0, 1), (0x3, 4), (0xf, 16)])
    def test_address_length_nibble(self, nibble, length):
        hdr = MsgHeader.read(Cursor(bytes([1, nibble, 0, 6])))
        assert hdr.address_length == length

    def test_address_length_upper_bound(self):
        hdr = MsgHeader.read(Cursor(bytes([1, 0x0f, 0, 6])))
        assert hdr.address_length == MAX_ADDR_LEN

    def test_orig_addr_uses_address_length(self):
        data = bytes.fromhex("01 8f 0016") + bytes(range(16))
        hdr = MsgHeader.read(Cursor(data))
        assert hdr.orig_addr == bytes(range(16))

    def test_hop_count_without_hop_limit(self):
        hdr = MsgHeader.read(Cursor(bytes.fromhex("01 23 0007 05")))
        assert hdr.hop_limit is None
        assert hdr.hop_count == 5

    @pytest.mark.parametrize("data", [
        "",
        "01",
        "01 03",
        "01 03 00",
        "01 83 000a c0a8",
        "01 13 0008 12",
    ])
    def test_truncated(self, data):
        with pytest.raises(UnexpectedEof):
            MsgHeader.read(Cursor(bytes.fromhex(data)))


class TestMessage:
    """Message body and size accounting"""

    def test_full_header_message(self):
        cur = Cursor(FULL_HEADER_MESSAGE)
        msg = Message.read(cur)
        assert msg.header.msg_type == 1
        assert msg.tlv_block.is_empty()
        assert list(msg.address_tlv) == []
        assert cur.is_eof()

    def test_address_region_is_size_bounded(self):
        data = bytes.fromhex(
            "01 03 000e 0000"
            "01 00 0a000001 0000"
            "ff ff"
        )
        cur = Cursor(data)
        msg = Message.read(cur)
        assert cur.remaining == 2
        assert msg.address_tlv.address_length == 4

        pairs = list(msg.address_tlv)
        assert len(pairs) == 1
        assert pairs[0][0].mid == bytes.fromhex("0a000001")

    def test_message_tlvs(self):
        msg = Message.read(Cursor(bytes.fromhex("01 03 000a 0004 01 10 01 2a")))
        assert [(t.tlv_type, bytes(t.value)) for t in msg.tlv_block] == [(1, b"\x2a")]

    def test_size_smaller_than_header(self):
        with pytest.raises(UnexpectedEof):
            Message.read(Cursor(bytes.fromhex("01 03 0003 0000")))

    def test_size_smaller_than_tlv_block(self):
        with pytest.raises(UnexpectedEof):
            Message.read(Cursor(bytes.fromhex("01 03 0007 0002 0100")))

    def test_size_larger_than_buffer(self):
        with pytest.raises(UnexpectedEof):
            Message.read(Cursor(bytes.fromhex("01 03 0010 0000")))

    def test_missing_tlv_block(self):
        with pytest.raises(UnexpectedEof):
            Message.read(Cursor(bytes.fromhex("01 03 0006")))


class TestMessages:
    """Lazy message sequences"""

    TWO_MESSAGES = bytes.fromhex("01 03 0006 0000 02 03 0006 0000")

    def test_back_to_back_messages(self):
        msgs = Messages(self.TWO_MESSAGES)
        assert [m.header.msg_type for m in msgs] == [1, 2]

    def test_restartable(self):
        msgs = Messages(self.TWO_MESSAGES)
        first = [m.header for m in msgs.iterate()]
        second = [m.header for m in msgs.iterate()]
        assert first == second

    def test_as_bytes(self):
        assert Messages(self.TWO_MESSAGES).as_bytes() == self.TWO_MESSAGES

    def test_truncated_second_message(self):
        it = Messages(self.TWO_MESSAGES[:-1]).iterate()
        assert next(it).header.msg_type == 1
        with pytest.raises(UnexpectedEof):
            next(it)
        assert it.try_next() is None

    def test_clone_resumes_from_position(self):
        it = Messages(self.TWO_MESSAGES).iterate()
        next(it)
        other = it.clone()
        assert [m.header.msg_type for m in other] == [2]
        assert [m.header.msg_type for m in it] == [2]
