# tests/test_output.py

from repo2llm.config import CONTENTS_CLOSE, CONTENTS_OPEN, FILE_RULE
from repo2llm.output import OutputAssembler

from conftest import write_files


def test_assembles_header_tree_and_contents_in_sorted_order(repo_root):
    write_files(repo_root, {"README.md": (1, "# Readme\n"), "src/a.go": (2, "package main\n")})

    output = OutputAssembler(repo_root).assemble(["src/a.go", "README.md"])
    text = output.text

    assert output.relative_paths == ["README.md", "src/a.go"]
    assert output.included == ["README.md", "src/a.go"]
    assert text.startswith(f"# Repository: repo ({repo_root})\n# Files: 2\n")
    assert f"```\n{repo_root}\n+-- README.md\n+-- src\n|   +-- a.go\n```\n" in text
    assert text.index(f"# FILE: {repo_root / 'README.md'}") < text.index(f"# FILE: {repo_root / 'src' / 'a.go'}")
    assert f"{FILE_RULE}\n# FILE: {repo_root / 'src' / 'a.go'}\n{FILE_RULE}\n\n{CONTENTS_OPEN}\npackage main\n{CONTENTS_CLOSE}" in text


def test_content_always_ends_with_one_newline(repo_root):
    write_files(repo_root, {"no_newline.txt": (1, "last line"), "newline.txt": (1, "last line\n"), "empty.txt": (1, "")})

    text = OutputAssembler(repo_root).assemble(["no_newline.txt", "newline.txt", "empty.txt"]).text

    assert text.count(f"last line\n{CONTENTS_CLOSE}") == 2
    assert f"last line\n\n{CONTENTS_CLOSE}" not in text
    assert f"{CONTENTS_OPEN}\n\n{CONTENTS_CLOSE}" in text


def test_unreadable_file_is_skipped_with_warning(repo_root, caplog):
    write_files(repo_root, {"kept.txt": (1, "kept\n")})

    output = OutputAssembler(repo_root).assemble(["gone.txt", "kept.txt"])

    assert output.included == ["kept.txt"]
    assert len(output.warnings) == 1
    assert "gone.txt" in output.warnings[0]
    assert "gone.txt" in caplog.text
    assert "kept\n" in output.text


def test_binary_content_is_skipped(repo_root):
    output = OutputAssembler(repo_root, read=lambda _path: b"\x00\x01\x02").assemble(["blob.dat"])

    assert output.included == []
    assert output.warnings == ["Skipping binary file blob.dat"]


def test_invalid_utf8_is_replaced(repo_root):
    output = OutputAssembler(repo_root, read=lambda _path: b"caf\xe9\n").assemble(["latin1.txt"])

    assert "caf�\n" in output.text
