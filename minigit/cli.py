"""Command-line entry point."""

from __future__ import annotations

import sys
from typing import Sequence

from .commands import cat_file, clone, commit_tree, hash_object, init, ls_tree, write_tree
from .delta import DeltaError
from .objects import GitError
from .pack import PackError
from .pktline import PktLineError
from .transport import HttpError

_USAGE = "Usage: ./your_program.sh <command> [<args>]"


class _UsageError(Exception):
    pass


def _write_binary(data: bytes) -> None:
    buffer = getattr(sys.stdout, "buffer", None)
    if buffer is None:
        sys.stdout.write(data.decode("utf-8", errors="replace"))
        return
    sys.stdout.flush()
    buffer.write(data)
    buffer.flush()


def _cat_file(args: Sequence[str]) -> None:
    if len(args) < 2:
        raise _UsageError("Error: Not enough arguments for cat-file")
    if args[0] != "-p":
        raise _UsageError(f"Error: Unknown flag {args[0]}")
    _write_binary(cat_file(args[1]))


def _hash_object(args: Sequence[str]) -> None:
    if not args:
        raise _UsageError("Error: Not enough arguments for hash-object")
    if args[0] != "-w":
        raise _UsageError(f"Error: Unknown flag {args[0]}")
    if len(args) < 2:
        raise _UsageError("Error: Not enough arguments for hash-object")
    print(hash_object(args[1]))


def _ls_tree(args: Sequence[str]) -> None:
    if not args:
        raise _UsageError("Error: Not enough arguments for ls-tree")
    name_only = args[0] == "--name-only"
    rest = args[1:] if name_only else args
    if not rest:
        raise _UsageError("Error: Not enough arguments for ls-tree")
    for line in ls_tree(rest[0], name_only):
        print(line)


def _commit_tree(args: Sequence[str]) -> None:
    usage = "Usage: commit-tree <tree_sha> -p <commit_sha> -m <message>"
    if not args:
        raise _UsageError(usage)
    parent = None
    message = None
    options = iter(args[1:])
    for flag in options:
        value = next(options, None)
        if value is None:
            raise _UsageError(usage)
        if flag == "-p":
            parent = value
        elif flag == "-m":
            message = value
        else:
            raise _UsageError(f"Error: Unknown flag {flag}")
    if message is None:
        raise _UsageError(usage)
    print(commit_tree(args[0], parent, message))


def _clone(args: Sequence[str]) -> None:
    if len(args) < 2:
        raise _UsageError("Usage: clone <repo_url> <directory>")
    clone(args[0], args[1])


def main(argv: Sequence[str] | None = None) -> int:
    """Run one command and return the process exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print(_USAGE, file=sys.stderr)
        return 1

    command, rest = args[0], args[1:]
    handlers = {
        "init": lambda _: init(),
        "cat-file": _cat_file,
        "hash-object": _hash_object,
        "ls-tree": _ls_tree,
        "write-tree": lambda _: print(write_tree()),
        "commit-tree": _commit_tree,
        "clone": _clone,
    }
    handler = handlers.get(command)
    if handler is None:
        print(f"Unknown command {command}", file=sys.stderr)
        return 1

    try:
        handler(rest)
    except _UsageError as exc:
        print(exc, file=sys.stderr)
        return 1
    except (GitError, PackError, PktLineError, DeltaError, HttpError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())