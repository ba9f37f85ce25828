"""Packet-line framing used by the smart HTTP protocol."""

from __future__ import annotations

import string

_HEADER_LENGTH = 4
_MAX_PACKET_LENGTH = 0xFFFF
_HEX_DIGITS = frozenset(string.hexdigits.encode("ascii"))


class PktLineError(ValueError):
    """Raised when a packet line cannot be encoded or decoded."""


def encode(line: str | bytes) -> bytes:
    """Prefix ``line`` with its 4-digit hex length, the prefix included."""
    payload = line.encode("utf-8") if isinstance(line, str) else bytes(line)
    total = len(payload) + _HEADER_LENGTH
    if total > _MAX_PACKET_LENGTH:
        raise PktLineError(f"packet of {total} bytes is too long")
    return f"{total:04x}".encode("ascii") + payload


def decode(data: bytes, offset: int = 0) -> tuple[bytes, int]:
    """Decode the packet at ``offset``; return its payload and the offset after it.

    A flush packet yields an empty payload.
    """
    header = bytes(data[offset : offset + _HEADER_LENGTH])
    if len(header) < _HEADER_LENGTH:
        raise PktLineError("not enough data for a length prefix")
    if not all(byte in _HEX_DIGITS for byte in header):
        raise PktLineError(f"invalid length prefix {header!r}")
    length = int(header, 16)
    if length == 0:
        return b"", offset + _HEADER_LENGTH
    if length < _HEADER_LENGTH:
        raise PktLineError(f"invalid packet length {length}")
    if len(data) - offset < length:
        raise PktLineError("packet is truncated")
    return bytes(data[offset + _HEADER_LENGTH : offset + length]), offset + length


def flush() -> bytes:
    """Return a flush packet."""
    return b"0000"