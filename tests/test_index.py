# tests/test_index.py

import os
import shutil
import subprocess

import pytest

from repo2llm.errors import FileIndexError, SetupError
from repo2llm.git import is_hidden_path, list_tracked_files, resolve_repo_root
from repo2llm.index import DirectoryAggregator, FileEntry, FileIndex

from conftest import index_of, write_files


def test_build_reads_mtimes_in_listing_order(repo_root):
    index = index_of(repo_root, {"b.txt": 10, "a/x.txt": 20, "a.txt": 30})

    assert [entry.relative_path for entry in index] == ["b.txt", "a/x.txt", "a.txt"]
    assert index.get("a/x.txt") == FileEntry("a/x.txt", 20)
    assert len(index) == 3


def test_build_order_does_not_depend_on_worker_count(repo_root):
    files = {f"dir{i % 4}/file{i}.txt": 1000 + i for i in range(40)}
    write_files(repo_root, files)
    listed = list(files)

    single = FileIndex.build(repo_root, list_files=lambda _root: listed, max_workers=1)
    pooled = FileIndex.build(repo_root, list_files=lambda _root: listed, max_workers=16)

    assert list(single) == list(pooled)


def test_build_excludes_hidden_segments(repo_root):
    index = index_of(repo_root, {".env": 1, "config/.secret/key.txt": 2, "src/main.py": 3})

    assert list(index) == [FileEntry("src/main.py", 3)]


def test_build_drops_files_that_vanished(repo_root):
    write_files(repo_root, {"kept.txt": 5})
    index = FileIndex.build(repo_root, list_files=lambda _root: ["kept.txt", "gone.txt"])

    assert "kept.txt" in index
    assert "gone.txt" not in index


def test_build_excludes_binary_files(repo_root):
    index = index_of(repo_root, {"image.bin": (1, b"\x89PNG\x00\x00"), "notes.md": 2})

    assert [entry.relative_path for entry in index] == ["notes.md"]


def test_build_skips_binary_probe_when_disabled(repo_root):
    index = index_of(repo_root, {"image.bin": (1, b"\x00\x01")}, is_binary=None)

    assert "image.bin" in index


def test_build_applies_ignore_file(repo_root):
    (repo_root / ".repo2llmignore").write_text("*.log\n", encoding="utf-8")
    index = index_of(repo_root, {"app.py": 1, "debug.log": 2})

    assert [entry.relative_path for entry in index] == ["app.py"]


def test_build_wraps_listing_failure(repo_root):
    def broken(_root):
        raise OSError("git missing")

    with pytest.raises(FileIndexError):
        FileIndex.build(repo_root, list_files=broken)


def test_relative_to_root(scenario_index, repo_root):
    assert scenario_index.relative_to_root(repo_root) == ""
    assert scenario_index.relative_to_root(repo_root / "src" / "a.go") == "src/a.go"
    assert scenario_index.relative_to_root(repo_root.parent) is None


def test_entries_under_anchors_on_whole_segments(repo_root):
    index = index_of(repo_root, {"lib/a.py": 1, "liberty/b.py": 2, "lib/sub/c.py": 3})

    assert [entry.relative_path for entry in index.entries_under("lib")] == ["lib/a.py", "lib/sub/c.py"]
    assert len(index.entries_under("")) == 3


def test_aggregate_time_is_max_of_files_beneath(scenario_index):
    aggregator = DirectoryAggregator(scenario_index)

    assert aggregator.aggregate_time("src") == 200
    assert aggregator.aggregate_time("") == 200


def test_aggregate_time_does_not_match_sibling_prefix(repo_root):
    index = index_of(repo_root, {"lib/a.py": 10, "liberty/b.py": 99})
    aggregator = DirectoryAggregator(index)

    assert aggregator.aggregate_time("lib") == 10
    assert aggregator.aggregate_time("liberty") == 99


def test_aggregate_time_is_memoized(scenario_index, monkeypatch):
    aggregator = DirectoryAggregator(scenario_index)
    first = aggregator.aggregate_time("src")
    assert aggregator.is_cached("src")

    def fail(_relative_dir):
        raise AssertionError("index rescanned")

    monkeypatch.setattr(scenario_index, "entries_under", fail)
    assert aggregator.aggregate_time("src") == first
    assert aggregator.aggregate_time("/src/") == first


def test_aggregate_time_falls_back_to_directory_mtime(scenario_index, repo_root):
    empty_dir = repo_root / "empty"
    empty_dir.mkdir()
    os.utime(empty_dir, (42, 42))

    assert DirectoryAggregator(scenario_index).aggregate_time("empty") == 42


def test_is_hidden_path():
    assert is_hidden_path(".github/workflows/ci.yml")
    assert is_hidden_path("src/.cache/x")
    assert not is_hidden_path("src/module.py")


def test_resolve_repo_root_rejects_missing_directory(tmp_path):
    with pytest.raises(SetupError):
        resolve_repo_root(tmp_path / "missing")


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
def test_git_collaborators_against_real_repository(repo_root):
    write_files(repo_root, {"README.md": 1, "src/app.py": 2, ".hidden/x.txt": 3})
    subprocess.run(["git", "init", "-q", str(repo_root)], check=True)
    subprocess.run(["git", "-C", str(repo_root), "add", "."], check=True)

    assert resolve_repo_root(repo_root / "src") == repo_root
    assert sorted(list_tracked_files(repo_root)) == ["README.md", "src/app.py"]

    index = FileIndex.build(repo_root)
    assert sorted(entry.relative_path for entry in index) == ["README.md", "src/app.py"]


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
def test_resolve_repo_root_outside_repository(tmp_path):
    plain = tmp_path / "plain"
    plain.mkdir()
    proc = subprocess.run(["git", "-C", str(plain), "rev-parse", "--show-toplevel"], capture_output=True)
    if proc.returncode == 0:
        pytest.skip("temporary directory is inside a git work tree")

    with pytest.raises(SetupError):
        resolve_repo_root(plain)
