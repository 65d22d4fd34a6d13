# tests/conftest.py

import os
from pathlib import Path
from typing import Dict, Tuple, Union

import pytest

from repo2llm.index import FileIndex

FileSpec = Union[float, Tuple[float, Union[str, bytes]]]


def write_files(root: Path, files: Dict[str, FileSpec]) -> Path:
    """Create ``files`` under ``root``; each value is an mtime or (mtime, content)."""
    for rel_path, spec in files.items():
        mtime, content = spec if isinstance(spec, tuple) else (spec, f"contents of {rel_path}\n")
        full_path = root / rel_path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            full_path.write_bytes(content)
        else:
            full_path.write_text(content, encoding="utf-8")
        os.utime(full_path, (mtime, mtime))
    return root


def index_of(root: Path, files: Dict[str, FileSpec], **kwargs) -> FileIndex:
    write_files(root, files)
    listed = list(files)
    return FileIndex.build(root, list_files=lambda _root: listed, **kwargs)


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    root = (tmp_path / "repo").resolve()
    root.mkdir()
    return root


@pytest.fixture
def scenario_index(repo_root: Path) -> FileIndex:
    """README.md at t=100 next to src/ holding a.go (t=200) and b.go (t=50)."""
    return index_of(repo_root, {"README.md": 100, "src/a.go": 200, "src/b.go": 50})
