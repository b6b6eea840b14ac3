"""Tests for the in-memory storage backend."""

from __future__ import annotations

import pytest

from dfsbench.storage import InMemoryStorageBackend


def _write(backend: InMemoryStorageBackend, path: str, data: bytes) -> None:
    with backend.create(path) as out:
        out.write(data)


def test_create_makes_parents_and_commits_on_close(memory_backend) -> None:
    _write(memory_backend, "/bench/write/0/file_0", b"hello")

    assert memory_backend.exists("/bench/write/0")
    assert memory_backend.get_status("/bench/write/0").is_dir
    with memory_backend.open("/bench/write/0/file_0") as stream:
        assert stream.read() == b"hello"


def test_create_without_overwrite_rejects_existing(memory_backend) -> None:
    _write(memory_backend, "/f", b"1")
    with pytest.raises(FileExistsError):
        memory_backend.create("/f", overwrite=False)


def test_open_missing_file_raises(memory_backend) -> None:
    with pytest.raises(FileNotFoundError):
        memory_backend.open("/missing")


def test_append_and_truncate(memory_backend) -> None:
    _write(memory_backend, "/f", b"abc")
    with memory_backend.append("/f") as out:
        out.write(b"def")
    assert memory_backend.get_status("/f").length == 6

    memory_backend.truncate("/f", 2)
    with memory_backend.open("/f") as stream:
        assert stream.read() == b"ab"

    memory_backend.truncate("/f", 4)
    with memory_backend.open("/f") as stream:
        assert stream.read() == b"ab\x00\x00"


def test_append_missing_file_raises(memory_backend) -> None:
    with pytest.raises(FileNotFoundError):
        memory_backend.append("/nope")


def test_delete_reports_absence_and_respects_recursive(memory_backend) -> None:
    assert memory_backend.delete("/nothing") is False

    _write(memory_backend, "/d/f", b"x")
    with pytest.raises(OSError):
        memory_backend.delete("/d")
    assert memory_backend.delete("/d", recursive=True) is True
    assert not memory_backend.exists("/d/f")


def test_rename_moves_file(memory_backend) -> None:
    _write(memory_backend, "/a/f", b"x")
    memory_backend.rename("/a/f", "/a/g")

    assert not memory_backend.exists("/a/f")
    assert memory_backend.exists("/a/g")


def test_rename_missing_source_raises(memory_backend) -> None:
    with pytest.raises(FileNotFoundError):
        memory_backend.rename("/a", "/b")


def test_set_permission_and_status(memory_backend) -> None:
    _write(memory_backend, "/f", b"x")
    memory_backend.set_permission("/f", 0o600)
    assert memory_backend.get_status("/f").permission == 0o600


def test_symlink_requires_parent_and_resolves_target(memory_backend) -> None:
    _write(memory_backend, "/data/f", b"payload")
    with pytest.raises(FileNotFoundError):
        memory_backend.create_symlink("/data/f", "/links/l")

    memory_backend.mkdirs("/links")
    memory_backend.create_symlink("/data/f", "/links/l")
    assert memory_backend.get_status("/links/l").is_symlink
    with memory_backend.open("/links/l") as stream:
        assert stream.read() == b"payload"


def test_list_status_returns_direct_children_sorted(memory_backend) -> None:
    _write(memory_backend, "/d/b", b"")
    _write(memory_backend, "/d/a", b"")
    _write(memory_backend, "/d/sub/c", b"")

    assert [status.path for status in memory_backend.list_status("/d")] == ["/d/a", "/d/b", "/d/sub"]


def test_list_status_of_file_or_missing_path(memory_backend) -> None:
    _write(memory_backend, "/f", b"")
    with pytest.raises(NotADirectoryError):
        memory_backend.list_status("/f")
    with pytest.raises(FileNotFoundError):
        memory_backend.list_status("/missing")
