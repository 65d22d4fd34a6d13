# repo2llm/listing.py

import logging
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple, Union

from .config import PREVIEW_DIRECTORY_LIMIT, PREVIEW_ITEM_LIMIT
from .index import DirectoryAggregator, FileIndex, dir_prefix, normalize_dir

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileItem:
    name: str
    modified_at: float

    @property
    def is_directory(self) -> bool:
        return False

    @property
    def label(self) -> str:
        return self.name


@dataclass(frozen=True)
class DirectoryItem:
    name: str
    modified_at: float
    # None: not previewed (past the preview cap). Empty tuple: nothing to show.
    preview: Optional[Tuple["ListingItem", ...]] = None

    @property
    def is_directory(self) -> bool:
        return True

    @property
    def label(self) -> str:
        return self.name + "/"


ListingItem = Union[FileItem, DirectoryItem]


class DirectoryLister:
    """Immediate children of a directory, newest first.

    Files and subdirectories are merged into one list and sorted once by
    timestamp; ties keep the order the index discovered them in.
    """

    def __init__(self, index: FileIndex, aggregator: Optional[DirectoryAggregator] = None):
        self.index = index
        self.aggregator = aggregator or DirectoryAggregator(index)

    def list(self, relative_dir: str, with_previews: bool = True) -> List[ListingItem]:
        relative_dir = normalize_dir(relative_dir)
        prefix = dir_prefix(relative_dir)

        discovered: List[ListingItem] = []
        seen_dirs: Set[str] = set()
        for entry in self.index.entries_under(relative_dir):
            rest = entry.relative_path[len(prefix):]
            head, sep, _ = rest.partition("/")
            if not sep:
                discovered.append(FileItem(head, entry.modified_at))
            elif head not in seen_dirs:
                seen_dirs.add(head)
                child = prefix + head
                discovered.append(DirectoryItem(head, self.aggregator.aggregate_time(child)))

        items = sorted(discovered, key=lambda item: item.modified_at, reverse=True)
        logger.debug("Listed %r: %d items", relative_dir, len(items))
        if not with_previews:
            return items

        previewed = 0
        for position, item in enumerate(items):
            if previewed >= PREVIEW_DIRECTORY_LIMIT:
                break
            if isinstance(item, DirectoryItem):
                items[position] = DirectoryItem(item.name, item.modified_at, self.preview(prefix + item.name))
                previewed += 1
        return items

    def preview(self, relative_dir: str) -> Tuple[ListingItem, ...]:
        """First few children of ``relative_dir``, without nested previews."""
        return tuple(self.list(relative_dir, with_previews=False)[:PREVIEW_ITEM_LIMIT])
