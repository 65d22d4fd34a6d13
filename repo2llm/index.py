# repo2llm/index.py

import logging
import os
import stat
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional

from . import git
from .config import IGNORE_FILENAME, MAX_FILE_SIZE_MB, STAT_WORKERS
from .errors import FileIndexError
from .files import IgnoreMatcher, is_binary_heuristic, load_ignore_matcher

logger = logging.getLogger(__name__)

ListFiles = Callable[[Path], List[str]]
BinaryProbe = Callable[[Path], bool]


def normalize_dir(relative_dir: str) -> str:
    """Strip surrounding slashes so the root is always the empty string."""
    return relative_dir.strip("/")


def dir_prefix(relative_dir: str) -> str:
    """Prefix that every path strictly under ``relative_dir`` starts with."""
    relative_dir = normalize_dir(relative_dir)
    return relative_dir + "/" if relative_dir else ""


@dataclass(frozen=True)
class FileEntry:
    relative_path: str
    modified_at: float

    @property
    def name(self) -> str:
        return self.relative_path.rsplit("/", 1)[-1]


class FileIndex:
    """Point-in-time snapshot of tracked, non-hidden files and their mtimes.

    Entries keep the order the listing collaborator produced them in; this is
    the "discovery order" that listings fall back on for equal timestamps.
    """

    def __init__(self, root: Path, entries: Iterable[FileEntry]):
        self.root = root
        self._entries: Dict[str, FileEntry] = {}
        for entry in entries:
            self._entries.setdefault(entry.relative_path, entry)

    @classmethod
    def build(
        cls,
        root: Path,
        list_files: Optional[ListFiles] = None,
        is_binary: Optional[BinaryProbe] = is_binary_heuristic,
        ignore_matcher: Optional[IgnoreMatcher] = None,
        max_workers: int = STAT_WORKERS,
    ) -> "FileIndex":
        root = root.resolve()
        list_files = list_files or git.list_tracked_files
        try:
            listed = list_files(root)
        except OSError as e:
            raise FileIndexError(f"Could not list tracked files under {root}: {e}") from e

        if ignore_matcher is None:
            ignore_matcher = load_ignore_matcher(root)

        candidates: List[str] = []
        for rel in listed:
            rel = rel.strip("/")
            if not rel or git.is_hidden_path(rel):
                continue
            if ignore_matcher is not None and ignore_matcher(str(root / rel)):
                logger.debug("Ignored by %s: %s", IGNORE_FILENAME, rel)
                continue
            candidates.append(rel)

        max_bytes = MAX_FILE_SIZE_MB * 1024 * 1024

        def probe(rel: str) -> Optional[FileEntry]:
            full_path = root / rel
            try:
                st = os.stat(full_path)
            except OSError as e:
                logger.warning("Skipping %s: %s", rel, e)
                return None
            if not stat.S_ISREG(st.st_mode):
                logger.debug("Skipping non-regular path %s", rel)
                return None
            if st.st_size > max_bytes:
                logger.debug("Skipping %s: larger than %d MB", rel, MAX_FILE_SIZE_MB)
                return None
            if is_binary is not None and is_binary(full_path):
                logger.debug("Skipping binary file %s", rel)
                return None
            return FileEntry(rel, st.st_mtime)

        # map() yields in submission order, so completion order never leaks.
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="repo2llm-stat") as executor:
            probed = list(executor.map(probe, candidates))

        entries = [entry for entry in probed if entry is not None]
        logger.debug("Indexed %d of %d listed files under %s", len(entries), len(listed), root)
        return cls(root, entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[FileEntry]:
        return iter(self._entries.values())

    def __contains__(self, relative_path: object) -> bool:
        return relative_path in self._entries

    def get(self, relative_path: str) -> Optional[FileEntry]:
        return self._entries.get(relative_path)

    def entries_under(self, relative_dir: str) -> List[FileEntry]:
        """Every entry strictly under ``relative_dir``, at any depth."""
        prefix = dir_prefix(relative_dir)
        return [entry for entry in self._entries.values() if entry.relative_path.startswith(prefix)]

    def relative_to_root(self, path: Path) -> Optional[str]:
        """Slash-separated path of ``path`` relative to the root, or None if outside it."""
        try:
            return path.relative_to(self.root).as_posix() if path != self.root else ""
        except ValueError:
            return None


class DirectoryAggregator:
    """Recency timestamp of a directory: the newest file anywhere beneath it.

    Results are memoized for the life of the process; the index never changes.
    """

    def __init__(self, index: FileIndex):
        self.index = index
        self._cache: Dict[str, float] = {}

    def aggregate_time(self, relative_dir: str) -> float:
        relative_dir = normalize_dir(relative_dir)
        cached = self._cache.get(relative_dir)
        if cached is not None:
            return cached

        times = [entry.modified_at for entry in self.index.entries_under(relative_dir)]
        if times:
            value = max(times)
        else:
            value = self._own_mtime(relative_dir)
        self._cache[relative_dir] = value
        logger.debug("Aggregated %r -> %s", relative_dir, value)
        return value

    def is_cached(self, relative_dir: str) -> bool:
        return normalize_dir(relative_dir) in self._cache

    def _own_mtime(self, relative_dir: str) -> float:
        try:
            return os.stat(self.index.root / relative_dir).st_mtime
        except OSError as e:
            logger.warning("Could not stat directory %s: %s", relative_dir or ".", e)
            return 0.0
