"""
RFC 5444 Decode Errors

Every decoder in this package fails with one of exactly three errors:

    UnexpectedEof   - the buffer ran out before a declared field was read
    PrefixTooLarge  - an address prefix length exceeds 8 * address_length
    InvalidVersion  - the packet version is not RFC5444_VERSION

All three derive from Rfc5444Error (itself a ValueError), so callers can
catch the whole family at once.
"""

from typing import Optional


class Rfc5444Error(ValueError):
    """Base class for RFC 5444 decode errors."""

    def __init__(self, message: str, offset: Optional[int] = None):
        if offset is not None:
            message = f"{message} (offset {offset})"
        super().__init__(message)
        self.offset = offset


class UnexpectedEof(Rfc5444Error):
    """Buffer ended before a declared-length field could be read."""
    pass


class PrefixTooLarge(Rfc5444Error):
    """Address block prefix length is larger than the address width."""
    pass


class InvalidVersion(Rfc5444Error):
    """Packet header carries an unsupported RFC 5444 version."""

    def __init__(self, version: int):
        super().__init__(f"Unsupported RFC 5444 version: {version}", offset=0)
        self.version = version
