"""Pack file parsing and unpacking into loose objects."""

from __future__ import annotations

import os
import struct
import zlib
from dataclasses import dataclass

from .delta import DeltaError, apply_delta
from .hashing import SHA_DIGEST_LENGTH, raw_to_hex
from .objects import ObjectType, read_object, write_object

_SIGNATURE = b"PACK"
_HEADER_SIZE = 12
_TRAILER_SIZE = 20
_SUPPORTED_VERSION = 2
_BASE_TYPES = frozenset(
    {ObjectType.COMMIT, ObjectType.TREE, ObjectType.BLOB, ObjectType.TAG}
)


class PackError(ValueError):
    """Raised when pack data is malformed or cannot be unpacked."""


@dataclass(frozen=True)
class PackHeader:
    """Version and object count from the start of a pack."""

    version: int
    objects: int


def read_pack_header(data: bytes) -> PackHeader:
    """Parse the 12-byte pack header."""
    if len(data) < _HEADER_SIZE:
        raise PackError("pack data too small to contain header")
    if bytes(data[:4]) != _SIGNATURE:
        raise PackError("invalid pack file signature")
    version, objects = struct.unpack(">II", bytes(data[4:_HEADER_SIZE]))
    if version != _SUPPORTED_VERSION:
        raise PackError(f"unsupported pack version {version}")
    return PackHeader(version=version, objects=objects)


def read_type_and_size(data: bytes, offset: int = 0) -> tuple[int, int, int]:
    """Read an object's type number and inflated size; return them and the next offset."""
    if offset >= len(data):
        raise PackError("truncated object header")
    byte = data[offset]
    offset += 1
    type_code = (byte >> 4) & 0x07
    size = byte & 0x0F
    shift = 4
    while byte & 0x80:
        if offset >= len(data):
            raise PackError("truncated object header")
        byte = data[offset]
        offset += 1
        size |= (byte & 0x7F) << shift
        shift += 7
    return type_code, size, offset


def zlib_decompress(data: bytes, offset: int = 0) -> tuple[bytes, int]:
    """Inflate the zlib stream at ``offset``; return the data and the offset after the stream."""
    view = memoryview(data)[offset:]
    stream = zlib.decompressobj()
    try:
        inflated = stream.decompress(view)
    except zlib.error as exc:
        raise PackError(f"failed to decompress data at offset {offset}: {exc}") from exc
    if not stream.eof:
        raise PackError(f"compressed data at offset {offset} is truncated")
    consumed = len(view) - len(stream.unused_data)
    return inflated, offset + consumed


def _check_size(data: bytes, size: int, where: str) -> None:
    if len(data) != size:
        raise PackError(f"{where} inflated to {len(data)} bytes, header says {size}")


def read_object_by_offset(pack_data: bytes, offset: int) -> tuple[ObjectType, bytes]:
    """Read the undeltified object stored at ``offset`` in the pack."""
    type_code, size, pos = read_type_and_size(pack_data, offset)
    if type_code not in _BASE_TYPES:
        raise PackError(f"object at offset {offset} is not a base object; nested deltas are not supported")
    data, _ = zlib_decompress(pack_data, pos)
    _check_size(data, size, f"object at offset {offset}")
    return ObjectType(type_code), data


def _read_base_distance(data: bytes, pos: int) -> tuple[int, int]:
    if pos >= len(data):
        raise PackError("truncated delta base offset")
    byte = data[pos]
    pos += 1
    distance = byte & 0x7F
    while byte & 0x80:
        if pos >= len(data):
            raise PackError("truncated delta base offset")
        byte = data[pos]
        pos += 1
        distance = ((distance + 1) << 7) | (byte & 0x7F)
    return distance, pos


def unpack(pack_data: bytes, root: str | os.PathLike[str] = ".") -> list[str]:
    """Write every object in the pack as a loose object; return their SHAs in pack order."""
    header = read_pack_header(pack_data)
    if header.objects == 0:
        raise PackError("no objects in pack file")
    print(f"Pack version: {header.version}, objects: {header.objects}")

    body = memoryview(bytes(pack_data))[: max(len(pack_data) - _TRAILER_SIZE, _HEADER_SIZE)]
    resolved: dict[int, tuple[ObjectType, bytes]] = {}
    shas: list[str] = []
    pos = _HEADER_SIZE

    for index in range(header.objects):
        start = pos
        type_code, size, pos = read_type_and_size(body, pos)

        if type_code in _BASE_TYPES:
            data, pos = zlib_decompress(body, pos)
            _check_size(data, size, f"object {index}")
            obj_type = ObjectType(type_code)
            sha = write_object(obj_type, data, root)
            print(f"Unpacked object {index}: {sha}")
        elif type_code in (ObjectType.REF_DELTA, ObjectType.OFS_DELTA):
            if type_code == ObjectType.REF_DELTA:
                raw_base = bytes(body[pos : pos + SHA_DIGEST_LENGTH])
                if len(raw_base) != SHA_DIGEST_LENGTH:
                    raise PackError(f"object {index}: truncated base SHA")
                pos += SHA_DIGEST_LENGTH
                delta, pos = zlib_decompress(body, pos)
                _check_size(delta, size, f"ref-delta object {index}")
                base_name, base_data = read_object(raw_to_hex(raw_base), root)
                obj_type = ObjectType.from_name(base_name)
            else:
                distance, pos = _read_base_distance(body, pos)
                delta, pos = zlib_decompress(body, pos)
                _check_size(delta, size, f"ofs-delta object {index}")
                base_pos = start - distance
                if distance <= 0 or base_pos < _HEADER_SIZE:
                    raise PackError(f"object {index}: delta base offset out of range")
                if base_pos in resolved:
                    obj_type, base_data = resolved[base_pos]
                else:
                    obj_type, base_data = read_object_by_offset(body, base_pos)
            try:
                data = apply_delta(base_data, delta)
            except DeltaError as exc:
                raise PackError(f"object {index}: {exc}") from exc
            sha = write_object(obj_type, data, root)
        else:
            raise PackError(f"object {index}: unknown object type {type_code}")

        resolved[start] = (obj_type, data)
        shas.append(sha)

    return shas