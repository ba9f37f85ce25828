"""SHA-1 helpers and loose-object path layout."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path

SHA_DIGEST_LENGTH = 20
HEX_SHA_LENGTH = SHA_DIGEST_LENGTH * 2


def sha1_hex(data: bytes) -> str:
    """Return the 40-character lowercase hex SHA-1 digest of ``data``."""
    return hashlib.sha1(data).hexdigest()


def hex_to_raw(hex_sha: str) -> bytes:
    """Convert a 40-character hex SHA-1 into its 20 raw bytes."""
    if len(hex_sha) != HEX_SHA_LENGTH:
        raise ValueError(f"hex SHA-1 must be {HEX_SHA_LENGTH} characters: {hex_sha!r}")
    try:
        raw = bytes.fromhex(hex_sha)
    except ValueError as exc:
        raise ValueError(f"invalid hex SHA-1: {hex_sha!r}") from exc
    if len(raw) != SHA_DIGEST_LENGTH:
        raise ValueError(f"invalid hex SHA-1: {hex_sha!r}")
    return raw


def raw_to_hex(raw: bytes) -> str:
    """Convert 20 raw SHA-1 bytes into a 40-character lowercase hex string."""
    if len(raw) != SHA_DIGEST_LENGTH:
        raise ValueError(f"raw SHA-1 must be {SHA_DIGEST_LENGTH} bytes, got {len(raw)}")
    return bytes(raw).hex()


def object_path(sha: str, root: str | os.PathLike[str] = ".") -> Path:
    """Return the path of the loose object ``sha`` under the repository at ``root``."""
    if len(sha) != HEX_SHA_LENGTH:
        raise ValueError(f"object name must be {HEX_SHA_LENGTH} characters: {sha!r}")
    return Path(root) / ".git" / "objects" / sha[:2] / sha[2:]