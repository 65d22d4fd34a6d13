# repo2llm/tree.py

import re
from typing import Iterable, List, Tuple, Union

from .config import TREE_BRANCH, TREE_INDENT

_DIGITS = re.compile(r"(\d+)")

SegmentKey = Tuple[Tuple[Union[str, int], ...], str]


def _segment_key(segment: str) -> SegmentKey:
    # re.split with a capturing group alternates text and digit runs, so the
    # same positions always hold the same type.
    parts = _DIGITS.split(segment)
    return tuple(int(part) if index % 2 else part for index, part in enumerate(parts)), segment


def version_sort_key(path: str) -> Tuple[SegmentKey, ...]:
    """Order paths like ``sort -V``, one path segment at a time.

    Digit runs compare by value. The raw segment breaks ties such as
    ``01`` / ``1``, so everything under one directory stays contiguous.
    """
    return tuple(_segment_key(segment) for segment in path.split("/"))


def sort_paths(paths: Iterable[str]) -> List[str]:
    return sorted(set(paths), key=version_sort_key)


def _line(depth: int, name: str) -> str:
    return TREE_INDENT * depth + TREE_BRANCH + name


class TreeRenderer:
    """Render relative file paths as an indented tree.

    Each directory header is printed once, right before the first file below
    it in sorted order; consecutive siblings share the headers already shown.
    """

    def render(self, paths: Iterable[str]) -> str:
        return "\n".join(self.render_lines(paths))

    def render_lines(self, paths: Iterable[str]) -> List[str]:
        lines: List[str] = []
        previous: List[str] = []
        for path in sort_paths(paths):
            *directories, filename = path.split("/")

            common = 0
            for prev_part, part in zip(previous, directories):
                if prev_part != part:
                    break
                common += 1

            for depth in range(common, len(directories)):
                lines.append(_line(depth, directories[depth]))
            lines.append(_line(len(directories), filename))
            previous = directories
        return lines
