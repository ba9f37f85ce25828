# minigit

A small Git implementation in pure Python, with no dependencies beyond the
standard library. It reads and writes zlib-compressed loose objects in a
`.git` directory, builds trees and commits, and can clone a repository over
the smart HTTP protocol by unpacking the server's packfile (including
ref-delta and offset-delta objects) and checking out the `HEAD` commit.

## Installation

```
pip install .
```

## Command line

The `minigit` command works on the repository in the current directory.

```
minigit init
minigit hash-object -w <file>
minigit cat-file -p <sha>
minigit ls-tree [--name-only] <tree-sha>
minigit write-tree
minigit commit-tree <tree-sha> [-p <parent-sha>] -m <message>
minigit clone <repo-url> <directory>
```

- `init` creates `.git`, `.git/objects`, `.git/refs` and a `.git/HEAD` file
  containing `ref: refs/heads/main`. It fails if `.git` already exists.
- `hash-object -w` stores a file as a blob and prints its SHA-1.
- `cat-file -p` writes the content of a stored object to standard output.
- `ls-tree --name-only` prints the names in a tree object, one per line.
  Without `--name-only` each line is `<mode> <blob|tree> <sha>\t<name>`.
- `write-tree` stores the current directory recursively (skipping `.git`,
  symlinks and other non-regular files) as tree and blob objects and prints
  the tree's SHA-1. Files get mode `100644`, directories `40000`.
- `commit-tree` creates a commit object and prints its SHA-1. The author and
  committer are `Example Author <author@example.com>` with the current time
  and a `+0000` offset.
- `clone` creates the directory, initialises a repository there if it has
  none, asks the server for its refs, requests a pack for the commit
  advertised as `HEAD` (or `refs/heads/master`), writes every object in the
  pack as a loose object and checks the commit's tree out into the directory.
  Repository URLs without `.git` in them get `.git` appended.

Every command exits with status 0 on success and 1 on error, printing the
error to standard error.

## Library use

The same operations are available as functions in `minigit.commands`:

```python
from pathlib import Path

from minigit.commands import cat_file, commit_tree, hash_object, init, ls_tree, write_tree

root = Path("repo")
root.mkdir()
init(root)
(root / "hello.txt").write_bytes(b"hello\n")

blob = hash_object(root / "hello.txt", root)
print(cat_file(blob, root))              # b'hello\n'

tree = write_tree(root, root)
print(ls_tree(tree, name_only=True, root=root))   # ['hello.txt']

commit = commit_tree(tree, None, "first commit", root, timestamp=0)
```

`clone(repo_url, directory)` returns the SHA of the checked-out commit.

Lower-level pieces live in their own modules:

- `minigit.hashing`: `sha1_hex`, `hex_to_raw`, `raw_to_hex`, `object_path`.
- `minigit.objects`: `write_object`, `read_object`, `parse_tree`,
  `serialize_tree`, the `TreeEntry` dataclass, the `ObjectType` enum and
  `GitError`.
- `minigit.pack`: `read_pack_header`, `read_type_and_size`,
  `zlib_decompress`, `read_object_by_offset`, `unpack`, `PackHeader` and
  `PackError`.
- `minigit.delta`: `read_delta_size`, `apply_delta` and `DeltaError`.
- `minigit.pktline`: `encode`, `decode`, `flush` and `PktLineError`.
- `minigit.transport`: `http_get`, `http_post` and `HttpError`.
- `minigit.refs`: `service_url`, `parse_head_sha`, `build_want_request`,
  `strip_to_pack`, `discover_refs`, `request_packfile`.
- `minigit.checkout`: `tree_from_commit`, `checkout_tree`, `checkout`.
- `minigit.cli`: `main(argv=None)`, the command-line entry point.

## What it does not do

- There is no index or staging area, no `add`, `status`, `log`, `diff`,
  `branch`, `fetch` or `push`.
- No reference is ever written or updated: `commit-tree` and `clone` leave
  `.git/HEAD` pointing at `refs/heads/main` with no such branch file.
- Objects are only stored loose; packs are unpacked, never kept or written.
- Cloning fetches the single `HEAD` commit over smart HTTP only; there is no
  SSH, git or local-path transport, no authentication and no shallow or
  partial clone.
- Offset deltas whose base is itself a delta are resolved only when that base
  appeared earlier in the same pack.

## Running the tests

```
pip install .[test]
pytest
```