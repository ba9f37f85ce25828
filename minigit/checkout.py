"""Materialise a commit's tree into a working directory."""

from __future__ import annotations

import os
import string
from pathlib import Path

from .hashing import HEX_SHA_LENGTH
from .objects import GitError, parse_tree, read_object

_HEX = frozenset(string.hexdigits)
_TREE_PREFIX = b"tree "


def tree_from_commit(commit_sha: str, root: str | os.PathLike[str] = ".") -> str:
    """Return the tree SHA named on the first line of a commit."""
    obj_type, content = read_object(commit_sha, root)
    if obj_type != "commit":
        raise GitError(f"{commit_sha} is not a commit")
    if not content.startswith(_TREE_PREFIX):
        raise GitError(f"invalid commit format in {commit_sha}")
    raw = content[len(_TREE_PREFIX) : len(_TREE_PREFIX) + HEX_SHA_LENGTH]
    try:
        tree_sha = raw.decode("ascii")
    except UnicodeDecodeError as exc:
        raise GitError(f"invalid tree SHA in commit {commit_sha}") from exc
    if len(tree_sha) != HEX_SHA_LENGTH or not set(tree_sha) <= _HEX:
        raise GitError(f"invalid tree SHA in commit {commit_sha}")
    return tree_sha


def checkout_tree(
    tree_sha: str,
    base_path: str | os.PathLike[str],
    root: str | os.PathLike[str] = ".",
) -> None:
    """Write the tree's files and subdirectories under ``base_path``."""
    obj_type, content = read_object(tree_sha, root)
    if obj_type != "tree":
        raise GitError(f"{tree_sha} is not a tree")
    base = Path(base_path)
    for entry in parse_tree(content):
        target = base / entry.name
        if entry.is_tree:
            try:
                target.mkdir(mode=0o755, exist_ok=True)
            except OSError as exc:
                raise GitError(f"could not create directory {target}: {exc.strerror}") from exc
            checkout_tree(entry.hex_sha, target, root)
        else:
            _, blob = read_object(entry.hex_sha, root)
            try:
                target.write_bytes(blob)
            except OSError as exc:
                raise GitError(f"could not open file {target} for writing: {exc.strerror}") from exc


def checkout(
    directory: str | os.PathLike[str],
    head_sha: str,
    root: str | os.PathLike[str] | None = None,
) -> str:
    """Check out commit ``head_sha`` into ``directory`` and return its tree SHA.

    Objects are read from the repository at ``root``, which defaults to ``directory``.
    """
    print(f"Checking out commit {head_sha} into directory {directory}")
    repo = directory if root is None else root
    tree_sha = tree_from_commit(head_sha, repo)
    print(f"Tree SHA: {tree_sha}")
    checkout_tree(tree_sha, directory, repo)
    print("Checkout complete.")
    return tree_sha