# tests/test_tree.py

from repo2llm.tree import TreeRenderer, sort_paths, version_sort_key


def test_render_is_independent_of_input_order():
    renderer = TreeRenderer()

    first = renderer.render(["a/b.txt", "a/c.txt"])
    second = renderer.render(["a/c.txt", "a/b.txt"])

    assert first == second
    assert first == "+-- a\n|   +-- b.txt\n|   +-- c.txt"


def test_root_files_and_directories_share_top_level():
    tree = TreeRenderer().render({"src/a.go", "README.md"})

    assert tree.splitlines() == ["+-- README.md", "+-- src", "|   +-- a.go"]


def test_directory_headers_are_printed_once():
    tree = TreeRenderer().render(["g.txt", "a/f.txt", "a/b/e.txt", "a/b/c/d.txt"])

    assert tree.splitlines() == [
        "+-- a",
        "|   +-- b",
        "|   |   +-- c",
        "|   |   |   +-- d.txt",
        "|   |   +-- e.txt",
        "|   +-- f.txt",
        "+-- g.txt",
    ]


def test_new_branch_reprints_only_diverging_segments():
    tree = TreeRenderer().render(["x/y/one.txt", "x/z/two.txt"])

    assert tree.splitlines() == [
        "+-- x",
        "|   +-- y",
        "|   |   +-- one.txt",
        "|   +-- z",
        "|   |   +-- two.txt",
    ]


def test_version_sort_compares_numbers_by_value():
    assert sort_paths(["file10.txt", "file2.txt", "file1.txt"]) == ["file1.txt", "file2.txt", "file10.txt"]
    assert sort_paths(["v1.10/a", "v1.9/a"]) == ["v1.9/a", "v1.10/a"]


def test_version_sort_key_breaks_ties_on_raw_string():
    assert version_sort_key("a01") != version_sort_key("a1")
    assert sort_paths(["a1", "a01"]) == ["a01", "a1"]


def test_sort_paths_deduplicates():
    assert sort_paths(["b", "a", "b"]) == ["a", "b"]


def test_render_empty_selection():
    assert TreeRenderer().render([]) == ""


def test_zero_padded_directory_keeps_its_files_together():
    tree = TreeRenderer().render(["01/a.txt", "1/x.txt", "01/z.txt"])

    assert tree.splitlines() == [
        "+-- 01",
        "|   +-- a.txt",
        "|   +-- z.txt",
        "+-- 1",
        "|   +-- x.txt",
    ]


def test_version_sort_compares_segment_by_segment():
    assert sort_paths(["a/b10", "a.b/c", "a/b9"]) == ["a/b9", "a/b10", "a.b/c"]
