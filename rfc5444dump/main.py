#!/usr/bin/env python3
"""
rfc5444dump - RFC 5444 packet inspection CLI

Decodes one packet and prints every header, TLV and address block in it.

Usage:
    rfc5444dump packet.bin          - Decode a raw packet file
    rfc5444dump --hex packet.txt    - Decode a hex dump
    rfc5444dump --json -            - Read stdin, print JSON
"""

import sys
import json
import logging
import argparse
import ipaddress
from pathlib import Path
from typing import Any, Dict, List, Optional

from rfc5444 import (
    __version__,
    AddressBlock,
    Packet,
    Rfc5444Error,
    Tlv,
    TlvBlock,
    decode_packet,
)

from .config import Config, DEFAULT_CONFIG_PATH


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("rfc5444dump")

EXIT_OK = 0
EXIT_DECODE_ERROR = 1
EXIT_USAGE = 2


def expand_addresses(block: AddressBlock) -> List[bytes]:
    """
    Rebuild the full addresses of an address block.

    Each address is head + its own mid + tail, where a zero tail stands
    for tail_length zero bytes.
    """
    head = bytes(block.head or b"")
    if block.zero_tail:
        tail = bytes(block.tail_length)
    else:
        tail = bytes(block.tail or b"")

    mid_length = block.mid_length
    addresses = []
    for i in range(block.num_addr):
        if mid_length:
            mid = bytes(block.mid[i * mid_length:(i + 1) * mid_length])
        else:
            mid = b""
        addresses.append(head + mid + tail)
    return addresses


def format_address(addr: bytes) -> str:
    """IPv4/IPv6 notation for 4/16-byte addresses, hex otherwise."""
    if len(addr) in (4, 16):
        return str(ipaddress.ip_address(addr))
    return addr.hex(":")


def _hex(view: Optional[memoryview]) -> Optional[str]:
    return bytes(view).hex() if view is not None else None


def tlv_to_dict(tlv: Tlv) -> Dict[str, Any]:
    return {
        "type": tlv.tlv_type,
        "type_ext": tlv.type_ext,
        "start_index": tlv.start_index,
        "stop_index": tlv.stop_index,
        "multi_value": tlv.is_multi_value,
        "value": _hex(tlv.value),
    }


def tlv_block_to_list(block: TlvBlock) -> List[Dict[str, Any]]:
    return [tlv_to_dict(tlv) for tlv in block]


def address_block_to_dict(block: AddressBlock, expand: bool) -> Dict[str, Any]:
    result = {
        "num_addr": block.num_addr,
        "head": _hex(block.head),
        "mid": _hex(block.mid),
        "tail": _hex(block.tail),
        "tail_length": block.tail_length,
        "zero_tail": block.zero_tail,
        "prefix_lengths": list(block.prefix_lengths) if block.prefix_lengths is not None else None,
    }
    if expand:
        result["addresses"] = [format_address(a) for a in expand_addresses(block)]
    return result


def packet_to_dict(pkt: Packet, expand: bool = True) -> Dict[str, Any]:
    """
    Walk the whole packet into plain data.

    Every lazy sequence is iterated, so a malformed message, TLV or
    address block anywhere in the packet raises here.

    Raises:
        Rfc5444Error: On the first decode error
    """
    header = pkt.header
    messages = []
    for msg in pkt.messages:
        hdr = msg.header
        messages.append({
            "type": hdr.msg_type,
            "address_length": hdr.address_length,
            "size": hdr.size,
            "orig_addr": format_address(bytes(hdr.orig_addr)) if hdr.orig_addr is not None else None,
            "hop_limit": hdr.hop_limit,
            "hop_count": hdr.hop_count,
            "seq_num": hdr.seq_num,
            "tlvs": tlv_block_to_list(msg.tlv_block),
            "address_blocks": [
                {
                    **address_block_to_dict(block, expand),
                    "tlvs": tlv_block_to_list(tlvs),
                }
                for block, tlvs in msg.address_tlv
            ],
        })

    return {
        "version": header.version,
        "seq_num": header.seq_num,
        "tlvs": tlv_block_to_list(header.tlv_block) if header.tlv_block is not None else None,
        "messages": messages,
    }


def _tlv_lines(tlvs: List[Dict[str, Any]], indent: str) -> List[str]:
    lines = []
    for tlv in tlvs:
        text = f"{indent}TLV type={tlv['type']}"
        if tlv["type_ext"] is not None:
            text += f" ext={tlv['type_ext']}"
        if tlv["start_index"] is not None:
            text += f" index={tlv['start_index']}"
            if tlv["stop_index"] is not None:
                text += f"-{tlv['stop_index']}"
        if tlv["multi_value"]:
            text += " multi"
        if tlv["value"] is not None:
            text += f" value={tlv['value']}"
        lines.append(text)
    return lines


def render_text(tree: Dict[str, Any]) -> str:
    """Indented text rendering of packet_to_dict() output."""
    lines = [f"Packet version={tree['version']}"]
    if tree["seq_num"] is not None:
        lines[0] += f" seq={tree['seq_num']}"
    if tree["tlvs"] is not None:
        lines.extend(_tlv_lines(tree["tlvs"], "  "))

    for i, msg in enumerate(tree["messages"], 1):
        text = (f"  Message #{i} type={msg['type']} "
                f"addr_len={msg['address_length']} size={msg['size']}")
        for key in ("orig_addr", "hop_limit", "hop_count", "seq_num"):
            if msg[key] is not None:
                text += f" {key}={msg[key]}"
        lines.append(text)
        lines.extend(_tlv_lines(msg["tlvs"], "    "))

        for j, block in enumerate(msg["address_blocks"], 1):
            lines.append(f"    Address block #{j} num_addr={block['num_addr']}")
            for key in ("head", "mid", "tail"):
                if block[key] is not None:
                    lines.append(f"      {key}: {block[key]}")
            if block["zero_tail"]:
                lines.append(f"      zero tail: {block['tail_length']} byte(s)")
            if block["prefix_lengths"] is not None:
                lines.append(f"      prefix lengths: {block['prefix_lengths']}")
            for addr in block.get("addresses", []):
                lines.append(f"      - {addr}")
            lines.extend(_tlv_lines(block["tlvs"], "      "))

    return "\n".join(lines)


class PacketDumper:
    """rfc5444dump application."""

    def __init__(self, config: Config):
        self.config = config

    def read_input(self, source: str) -> bytes:
        """
        Read packet bytes from a file or '-' for stdin.

        Raises:
            OSError: If the file cannot be read
            ValueError: If hex input is malformed or the packet is too large
        """
        if source == "-":
            raw = sys.stdin.buffer.read()
        else:
            raw = Path(source).read_bytes()

        if self.config.input.hex:
            raw = bytes.fromhex("".join(raw.decode("ascii").split()))

        if len(raw) > self.config.input.max_packet_size:
            raise ValueError(
                f"Packet too large: {len(raw)} > {self.config.input.max_packet_size}"
            )
        return raw

    def dump(self, data: bytes) -> int:
        """Decode and print one packet. Returns the exit status."""
        logger.debug(f"Decoding {len(data)} byte packet")

        try:
            pkt = decode_packet(data)
            tree = packet_to_dict(pkt, self.config.output.expand_addresses)
        except Rfc5444Error as e:
            logger.error(f"Decode failed: {e}")
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_DECODE_ERROR

        if self.config.output.format == "json":
            print(json.dumps(tree, indent=2))
        else:
            print(render_text(tree))

        logger.info(f"Decoded packet with {len(tree['messages'])} message(s)")
        return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Decode and print an RFC 5444 packet",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rfc5444dump packet.bin
  rfc5444dump --hex packet.txt
  echo 0001030028... | rfc5444dump --hex --json -
""",
    )
    parser.add_argument("input", help="Packet file, or - for stdin")
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="Configuration file path",
    )
    parser.add_argument(
        "-x", "--hex",
        action="store_true",
        default=None,
        help="Input is hex text",
    )
    parser.add_argument(
        "-j", "--json",
        action="store_true",
        help="Print JSON instead of text",
    )
    parser.add_argument(
        "--no-expand",
        action="store_true",
        help="Don't reconstruct full addresses",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"rfc5444dump {__version__}",
    )

    args = parser.parse_args(argv)

    try:
        config = Config.load(args.config)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_USAGE

    # Command line overrides the config file
    if args.hex:
        config.input.hex = True
    if args.json:
        config.output.format = "json"
    if args.no_expand:
        config.output.expand_addresses = False
    if args.verbose:
        config.log_level = "DEBUG"

    try:
        config.validate()
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_USAGE

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format=LOG_FORMAT,
        filename=str(config.log_file) if config.log_file else None,
    )

    dumper = PacketDumper(config)

    try:
        data = dumper.read_input(args.input)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to read {args.input}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    return dumper.dump(data)


if __name__ == "__main__":
    sys.exit(main())
