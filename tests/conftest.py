"""
Shared fixtures for rfc5444 tests
"""

import pytest


# NHDP HELLO from the olsr.org olsrd2 test suite: one message, four
# IPv4 addresses sharing the head 10, three address TLVs.
NHDP_PACKET = bytes.fromhex(
    "00 01 03 00 28 00 00 04 80 01 0a 01 00 65 01 00 66 01 00 67"
    " 0b 0b 0b 00 10 02 50 01 01 00 03 50 00 01 01 03 30 02 03 01 01"
)


@pytest.fixture
def nhdp_packet() -> bytes:
    return NHDP_PACKET
