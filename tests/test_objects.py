import zlib

import pytest

from minigit.hashing import hex_to_raw, object_path
from minigit.objects import (
    GitError,
    ObjectType,
    TreeEntry,
    parse_tree,
    read_object,
    serialize_tree,
    write_object,
)

HELLO_BLOB_SHA = "3b18e512dba79e4c8300dd08aeb37f8e728b8dad"


@pytest.fixture
def repo(tmp_path):
    (tmp_path / ".git" / "objects").mkdir(parents=True)
    return tmp_path


def test_write_blob_known_sha(repo):
    assert write_object("blob", b"hello world\n", repo) == HELLO_BLOB_SHA


def test_write_accepts_object_type(repo):
    assert write_object(ObjectType.BLOB, b"hello world\n", repo) == HELLO_BLOB_SHA


def test_written_file_is_compressed_store(repo):
    sha = write_object("blob", b"hello world\n", repo)
    stored = zlib.decompress(object_path(sha, repo).read_bytes())
    assert stored == b"blob 12\0hello world\n"


def test_empty_tree_sha(repo):
    assert write_object("tree", b"", repo) == "4b825dc642cb6eb9a060e54bf8d69288fbee4904"


@pytest.mark.parametrize("kind", ["blob", "tree", "commit"])
def test_write_read_round_trip(repo, kind):
    content = b"payload \x00 with nul\n" * 3
    sha = write_object(kind, content, repo)
    assert read_object(sha, repo) == (kind, content)


def test_write_twice_is_idempotent(repo):
    first = write_object("blob", b"same", repo)
    second = write_object("blob", b"same", repo)
    assert first == second
    assert read_object(first, repo) == ("blob", b"same")


def test_write_without_objects_dir_raises(tmp_path):
    with pytest.raises(GitError):
        write_object("blob", b"data", tmp_path)


def test_read_missing_object_raises(repo):
    with pytest.raises(GitError):
        read_object(HELLO_BLOB_SHA, repo)


def test_read_corrupt_object_raises(repo):
    path = object_path(HELLO_BLOB_SHA, repo)
    path.parent.mkdir()
    path.write_bytes(b"not zlib data")
    with pytest.raises(GitError):
        read_object(HELLO_BLOB_SHA, repo)


def test_read_object_without_header_terminator_raises(repo):
    path = object_path(HELLO_BLOB_SHA, repo)
    path.parent.mkdir()
    path.write_bytes(zlib.compress(b"blob 12 no terminator"))
    with pytest.raises(GitError):
        read_object(HELLO_BLOB_SHA, repo)


def test_read_object_shorter_than_header_raises(repo):
    path = object_path(HELLO_BLOB_SHA, repo)
    path.parent.mkdir()
    path.write_bytes(zlib.compress(b"blob 99\0short"))
    with pytest.raises(GitError):
        read_object(HELLO_BLOB_SHA, repo)


def test_object_type_name_round_trip():
    for kind in (ObjectType.COMMIT, ObjectType.TREE, ObjectType.BLOB, ObjectType.TAG):
        assert ObjectType.from_name(kind.type_name) is kind


def test_object_type_unknown_name_raises():
    with pytest.raises(GitError):
        ObjectType.from_name("widget")


def test_delta_type_cannot_be_written(repo):
    with pytest.raises(GitError):
        write_object(ObjectType.REF_DELTA, b"data", repo)


def _entry(mode, name, fill):
    return TreeEntry(mode=mode, name=name, sha=bytes([fill]) * 20)


def test_serialize_tree_layout():
    entry = TreeEntry(mode="100644", name="hello.txt", sha=hex_to_raw(HELLO_BLOB_SHA))
    assert serialize_tree([entry]) == b"100644 hello.txt\0" + hex_to_raw(HELLO_BLOB_SHA)


def test_serialize_tree_sorts_by_name():
    entries = [_entry("100644", "b", 2), _entry("40000", "a", 1), _entry("100644", "C", 3)]
    parsed = parse_tree(serialize_tree(entries))
    assert [entry.name for entry in parsed] == ["C", "a", "b"]


def test_tree_round_trip():
    entries = [_entry("100644", "file.txt", 7), _entry("40000", "sub", 9)]
    assert parse_tree(serialize_tree(entries)) == entries


def test_parse_empty_tree():
    assert parse_tree(b"") == []


def test_tree_entry_properties():
    entry = TreeEntry(mode="40000", name="dir", sha=hex_to_raw(HELLO_BLOB_SHA))
    assert entry.is_tree
    assert entry.hex_sha == HELLO_BLOB_SHA
    assert not _entry("100644", "f", 0).is_tree


def test_tree_entry_rejects_bad_sha_length():
    with pytest.raises(ValueError):
        TreeEntry(mode="100644", name="f", sha=b"short")


@pytest.mark.parametrize(
    "content",
    [b"100644", b"100644 name", b"100644 name\0" + b"\x01" * 10],
)
def test_parse_truncated_tree_raises(content):
    with pytest.raises(GitError):
        parse_tree(content)


def test_written_tree_reads_back_as_entries(repo):
    blob = write_object("blob", b"hello world\n", repo)
    content = serialize_tree([TreeEntry("100644", "hello.txt", hex_to_raw(blob))])
    sha = write_object("tree", content, repo)
    kind, body = read_object(sha, repo)
    assert kind == "tree"
    assert [entry.hex_sha for entry in parse_tree(body)] == [blob]