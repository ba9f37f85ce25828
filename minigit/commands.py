"""Repository commands: init, object inspection, tree and commit creation, clone."""

from __future__ import annotations

import os
import time
from pathlib import Path

from .checkout import checkout
from .hashing import hex_to_raw
from .objects import GitError, ObjectType, TreeEntry, parse_tree, read_object, write_object
from .pack import unpack
from .refs import discover_refs, request_packfile

AUTHOR = "Example Author <author@example.com>"
DEFAULT_HEAD = "ref: refs/heads/main\n"
_FILE_MODE = "100644"
_DIR_MODE = "40000"
_SKIPPED = frozenset({".git"})


def init(root: str | os.PathLike[str] = ".") -> Path:
    """Create an empty repository at ``root`` and return its ``.git`` directory."""
    git_dir = Path(root) / ".git"
    try:
        for directory in (git_dir, git_dir / "objects", git_dir / "refs"):
            directory.mkdir(mode=0o755)
    except OSError as exc:
        raise GitError(f"failed to create directories: {exc.strerror}") from exc
    try:
        (git_dir / "HEAD").write_text(DEFAULT_HEAD)
    except OSError as exc:
        raise GitError(f"failed to create .git/HEAD file: {exc.strerror}") from exc
    print("Initialized git directory")
    return git_dir


def cat_file(sha: str, root: str | os.PathLike[str] = ".") -> bytes:
    """Return the content of object ``sha``."""
    _, content = read_object(sha, root)
    return content


def hash_object(path: str | os.PathLike[str], root: str | os.PathLike[str] = ".") -> str:
    """Store the file at ``path`` as a blob and return its SHA."""
    try:
        content = Path(path).read_bytes()
    except OSError as exc:
        raise GitError(f"could not open file {path}: {exc.strerror}") from exc
    return write_object(ObjectType.BLOB, content, root)


def ls_tree(
    sha: str, name_only: bool = False, root: str | os.PathLike[str] = "."
) -> list[str]:
    """List the entries of tree ``sha``, as names only or as full entry lines."""
    obj_type, content = read_object(sha, root)
    if obj_type != "tree":
        raise GitError(f"{sha} is not a tree")
    entries = parse_tree(content)
    if name_only:
        return [entry.name for entry in entries]
    return [
        f"{entry.mode:0>6} {'tree' if entry.is_tree else 'blob'} {entry.hex_sha}\t{entry.name}"
        for entry in entries
    ]


def write_tree(
    directory: str | os.PathLike[str] = ".", root: str | os.PathLike[str] = "."
) -> str:
    """Store ``directory`` recursively as tree and blob objects; return the tree SHA."""
    entries: list[TreeEntry] = []
    try:
        with os.scandir(directory) as scan:
            children = list(scan)
    except OSError as exc:
        raise GitError(f"could not open directory {directory}: {exc.strerror}") from exc

    for child in children:
        if child.name in _SKIPPED:
            continue
        if child.is_file(follow_symlinks=False):
            mode = _FILE_MODE
            sha = hash_object(child.path, root)
        elif child.is_dir(follow_symlinks=False):
            mode = _DIR_MODE
            sha = write_tree(child.path, root)
        else:
            continue
        entries.append(TreeEntry(mode=mode, name=child.name, sha=hex_to_raw(sha)))

    from .objects import serialize_tree

    return write_object(ObjectType.TREE, serialize_tree(entries), root)


def commit_tree(
    tree_sha: str,
    parent_sha: str | None,
    message: str,
    root: str | os.PathLike[str] = ".",
    timestamp: int | None = None,
) -> str:
    """Create a commit of ``tree_sha`` with an optional parent; return its SHA."""
    when = int(time.time()) if timestamp is None else int(timestamp)
    stamp = f"{when} +0000"
    lines = [f"tree {tree_sha}"]
    if parent_sha:
        lines.append(f"parent {parent_sha}")
    lines.append(f"author {AUTHOR} {stamp}")
    lines.append(f"committer {AUTHOR} {stamp}")
    content = "\n".join(lines) + f"\n\n{message}\n"
    return write_object(ObjectType.COMMIT, content.encode("utf-8"), root)


def clone(repo_url: str, directory: str | os.PathLike[str]) -> str:
    """Clone the repository at ``repo_url`` into ``directory``; return the HEAD SHA."""
    target = Path(directory)
    try:
        target.mkdir(mode=0o755, exist_ok=True)
    except OSError as exc:
        raise GitError(f"could not create directory {target}: {exc.strerror}") from exc
    if not (target / ".git").exists():
        init(target)

    head_sha = discover_refs(repo_url)
    print(f"HEAD SHA: {head_sha}")

    pack_data = request_packfile(repo_url, head_sha)
    print(f"Received packfile of size {len(pack_data)} bytes")

    unpack(pack_data, target)
    checkout(target, head_sha)
    return head_sha