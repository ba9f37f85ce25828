"""Git delta instruction decoding."""

from __future__ import annotations

_COPY_OFFSET_BITS = ((0x01, 0), (0x02, 8), (0x04, 16), (0x08, 24))
_COPY_SIZE_BITS = ((0x10, 0), (0x20, 8), (0x40, 16))
_DEFAULT_COPY_SIZE = 0x10000


class DeltaError(ValueError):
    """Raised when a delta is malformed or does not fit its base."""


def read_delta_size(data: bytes, pos: int = 0) -> tuple[int, int]:
    """Read a little-endian base-128 size at ``pos``; return it and the next position."""
    size = 0
    shift = 0
    while True:
        if pos >= len(data):
            raise DeltaError("truncated size in delta header")
        byte = data[pos]
        pos += 1
        size |= (byte & 0x7F) << shift
        shift += 7
        if not byte & 0x80:
            return size, pos


def _read_fields(delta: bytes, pos: int, cmd: int, bits) -> tuple[int, int]:
    value = 0
    for mask, shift in bits:
        if cmd & mask:
            if pos >= len(delta):
                raise DeltaError("truncated copy instruction")
            value |= delta[pos] << shift
            pos += 1
    return value, pos


def apply_delta(base: bytes, delta: bytes) -> bytes:
    """Rebuild an object from ``base`` and the decompressed ``delta``."""
    expected_base_size, pos = read_delta_size(delta, 0)
    if expected_base_size != len(base):
        raise DeltaError(
            f"base size mismatch: delta expects {expected_base_size}, base has {len(base)}"
        )
    result_size, pos = read_delta_size(delta, pos)

    result = bytearray()
    end = len(delta)
    while pos < end:
        cmd = delta[pos]
        pos += 1
        if cmd & 0x80:
            offset, pos = _read_fields(delta, pos, cmd, _COPY_OFFSET_BITS)
            size, pos = _read_fields(delta, pos, cmd, _COPY_SIZE_BITS)
            if size == 0:
                size = _DEFAULT_COPY_SIZE
            if offset + size > len(base):
                raise DeltaError("copy instruction reaches past the end of the base")
            result += base[offset : offset + size]
        elif cmd:
            chunk = delta[pos : pos + cmd]
            if len(chunk) != cmd:
                raise DeltaError("truncated insert instruction")
            result += chunk
            pos += cmd
        else:
            raise DeltaError("invalid delta instruction 0")

    if len(result) != result_size:
        raise DeltaError(
            f"result size mismatch: delta declares {result_size}, produced {len(result)}"
        )
    return bytes(result)