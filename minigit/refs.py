"""Reference discovery and pack negotiation over smart HTTP."""

from __future__ import annotations

import sys
from typing import Iterator

from .hashing import HEX_SHA_LENGTH
from .objects import GitError
from .pktline import PktLineError, decode, encode, flush
from .transport import http_get, http_post

UPLOAD_PACK_SERVICE = "git-upload-pack"
REQUEST_CONTENT_TYPE = "application/x-git-upload-pack-request"
_HEAD_MARKERS = (b"HEAD", b"refs/heads/master")
_MAX_LINE = 511
_PACK_SIGNATURE = b"PACK"


def service_url(repo_url: str, suffix: str) -> str:
    """Join ``suffix`` onto the repository URL, adding ``.git`` when it is absent."""
    if ".git" in repo_url:
        return f"{repo_url}/{suffix}"
    return f"{repo_url}.git/{suffix}"


def _packets(data: bytes) -> Iterator[bytes]:
    pos = 0
    while pos < len(data):
        try:
            payload, pos = decode(data, pos)
        except PktLineError:
            return
        yield payload


def parse_head_sha(data: bytes) -> str | None:
    """Find the SHA advertised for HEAD or refs/heads/master in a ref advertisement."""
    for payload in _packets(data):
        line = payload[:_MAX_LINE].split(b"\0", 1)[0]
        if not line or line.startswith(b"#"):
            continue
        if len(line) >= HEX_SHA_LENGTH and any(marker in line for marker in _HEAD_MARKERS):
            try:
                return line[:HEX_SHA_LENGTH].decode("ascii")
            except UnicodeDecodeError:
                continue
    return None


def build_want_request(head_sha: str) -> bytes:
    """Build the upload-pack request body asking for ``head_sha``."""
    return encode(f"want {head_sha} multi_ack\n") + flush() + encode("done\n")


def strip_to_pack(data: bytes) -> bytes:
    """Skip the packet lines that precede the pack data in an upload-pack response."""
    pos = 0
    while len(data) - pos > 4:
        if bytes(data[pos : pos + 4]) == _PACK_SIGNATURE:
            break
        try:
            _, pos = decode(data, pos)
        except PktLineError:
            break
    return bytes(data[pos:])


def discover_refs(repo_url: str) -> str:
    """Ask the server for its refs and return the HEAD commit SHA."""
    url = service_url(repo_url, f"info/refs?service={UPLOAD_PACK_SERVICE}")
    head_sha = parse_head_sha(http_get(url))
    if not head_sha:
        raise GitError(f"could not discover refs from {repo_url}")
    return head_sha


def request_packfile(repo_url: str, head_sha: str) -> bytes:
    """Request a pack containing ``head_sha`` and return the raw pack data."""
    url = service_url(repo_url, UPLOAD_PACK_SERVICE)
    body = build_want_request(head_sha)
    print(" ".join(f"{byte:02x}" for byte in body), file=sys.stderr)
    response = http_post(url, REQUEST_CONTENT_TYPE, body)
    return strip_to_pack(response)