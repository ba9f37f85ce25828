"""Loose object storage and tree encoding."""

from __future__ import annotations

import os
import zlib
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable

from .hashing import SHA_DIGEST_LENGTH, object_path, raw_to_hex, sha1_hex

_NAME_ENCODING = "utf-8"
_NAME_ERRORS = "surrogateescape"


class GitError(Exception):
    """Raised when an object cannot be stored, read or parsed."""


class ObjectType(IntEnum):
    """Object kinds as numbered in pack files."""

    COMMIT = 1
    TREE = 2
    BLOB = 3
    TAG = 4
    OFS_DELTA = 6
    REF_DELTA = 7

    @property
    def type_name(self) -> str:
        """The name used in a loose object's header."""
        if self in (ObjectType.OFS_DELTA, ObjectType.REF_DELTA):
            raise GitError(f"{self.name} has no loose object name")
        return self.name.lower()

    @classmethod
    def from_name(cls, name: str) -> "ObjectType":
        """Look up the type whose header name is ``name``."""
        for member in (cls.COMMIT, cls.TREE, cls.BLOB, cls.TAG):
            if member.type_name == name:
                return member
        raise GitError(f"unknown object type {name!r}")


@dataclass(frozen=True)
class TreeEntry:
    """One entry of a tree object: mode, name and raw 20-byte SHA-1."""

    mode: str
    name: str
    sha: bytes

    def __post_init__(self) -> None:
        if len(self.sha) != SHA_DIGEST_LENGTH:
            raise ValueError(f"tree entry SHA must be {SHA_DIGEST_LENGTH} bytes")

    @property
    def hex_sha(self) -> str:
        return raw_to_hex(self.sha)

    @property
    def is_tree(self) -> bool:
        return self.mode.startswith("4")

    @property
    def encoded_name(self) -> bytes:
        return self.name.encode(_NAME_ENCODING, _NAME_ERRORS)


def _type_name(obj_type: ObjectType | str) -> str:
    if isinstance(obj_type, ObjectType):
        return obj_type.type_name
    return str(obj_type)


def write_object(
    obj_type: ObjectType | str,
    content: bytes,
    root: str | os.PathLike[str] = ".",
) -> str:
    """Store ``content`` as a loose object and return its hex SHA-1."""
    content = bytes(content)
    store = f"{_type_name(obj_type)} {len(content)}".encode("ascii") + b"\0" + content
    sha = sha1_hex(store)
    path = object_path(sha, root)
    try:
        path.parent.mkdir(mode=0o755, exist_ok=True)
    except OSError as exc:
        raise GitError(f"could not create directory {path.parent}: {exc.strerror}") from exc
    try:
        path.write_bytes(zlib.compress(store))
    except OSError as exc:
        raise GitError(f"could not create object file {path}: {exc.strerror}") from exc
    return sha


def read_object(sha: str, root: str | os.PathLike[str] = ".") -> tuple[str, bytes]:
    """Read a loose object, returning its type name and content."""
    path = object_path(sha, root)
    try:
        compressed = path.read_bytes()
    except OSError as exc:
        raise GitError(f"could not open object {sha}: {exc.strerror}") from exc
    try:
        raw = zlib.decompress(compressed)
    except zlib.error as exc:
        raise GitError(f"failed to decompress object {sha}") from exc

    header, sep, body = raw.partition(b"\0")
    type_bytes, space, size_bytes = header.partition(b" ")
    if not sep or not space:
        raise GitError(f"invalid object format for {sha}")
    try:
        size = int(size_bytes)
        type_name = type_bytes.decode("ascii")
    except (ValueError, UnicodeDecodeError) as exc:
        raise GitError(f"invalid object header for {sha}") from exc
    if size < 0 or len(body) < size:
        raise GitError(f"object {sha} is shorter than its header states")
    return type_name, body[:size]


def parse_tree(content: bytes) -> list[TreeEntry]:
    """Split tree object content into its entries."""
    entries: list[TreeEntry] = []
    pos = 0
    end = len(content)
    while pos < end:
        space = content.find(b" ", pos)
        if space < 0:
            raise GitError("tree entry is missing its mode separator")
        nul = content.find(b"\0", space + 1)
        if nul < 0:
            raise GitError("tree entry is missing its name terminator")
        sha = content[nul + 1 : nul + 1 + SHA_DIGEST_LENGTH]
        if len(sha) != SHA_DIGEST_LENGTH:
            raise GitError("tree entry has a truncated SHA")
        try:
            mode = content[pos:space].decode("ascii")
        except UnicodeDecodeError as exc:
            raise GitError("tree entry has an invalid mode") from exc
        name = content[space + 1 : nul].decode(_NAME_ENCODING, _NAME_ERRORS)
        entries.append(TreeEntry(mode=mode, name=name, sha=bytes(sha)))
        pos = nul + 1 + SHA_DIGEST_LENGTH
    return entries


def serialize_tree(entries: Iterable[TreeEntry]) -> bytes:
    """Encode entries as tree object content, sorted by name byte order."""
    ordered = sorted(entries, key=lambda entry: entry.encoded_name)
    return b"".join(
        entry.mode.encode("ascii") + b" " + entry.encoded_name + b"\0" + entry.sha
        for entry in ordered
    )