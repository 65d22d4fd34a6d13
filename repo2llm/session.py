# repo2llm/session.py

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from .errors import CommandError, DuplicateSelectionError
from .git import is_hidden_path
from .index import FileIndex
from .listing import DirectoryItem, DirectoryLister, FileItem, ListingItem
from .tree import TreeRenderer, sort_paths

logger = logging.getLogger(__name__)

DONE_COMMANDS = ("", "done", "d")
HELP_COMMANDS = ("help", "h", "?")
LIST_COMMANDS = ("list", "l", "ls")
QUIT_COMMANDS = ("quit", "q", "exit")
ROOT_COMMANDS = ("r", "/")

INDEX_RE = re.compile(r"^\d+$")
RANGE_RE = re.compile(r"^(\d+)\s*-\s*(\d+)$")
INDEX_LIST_RE = re.compile(r"^\d+(?:\s*,\s*\d+)+$")
UNSELECT_RE = re.compile(r"^u\s+(.+)$")


class SessionState(Enum):
    BROWSING = "browsing"
    LISTING_SELECTED = "listing_selected"
    SHOWING_HELP = "showing_help"
    DONE = "done"
    ABORTED = "aborted"

    @property
    def is_overlay(self) -> bool:
        return self in (SessionState.LISTING_SELECTED, SessionState.SHOWING_HELP)

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.DONE, SessionState.ABORTED)


@dataclass
class NavigationContext:
    current_directory: Path
    pending_error: Optional[str] = None


class SelectionSet:
    """Duplicate-free absolute file paths in insertion order."""

    def __init__(self) -> None:
        self._paths: Dict[Path, None] = {}

    def add(self, path: Path, name: Optional[str] = None) -> None:
        if path in self._paths:
            raise DuplicateSelectionError(name or path.name)
        self._paths[path] = None

    def discard(self, path: Path) -> bool:
        if path in self._paths:
            del self._paths[path]
            return True
        return False

    def clear(self) -> None:
        self._paths.clear()

    def first(self, count: int) -> List[Path]:
        return list(self._paths)[:count]

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __iter__(self) -> Iterator[Path]:
        return iter(list(self._paths))

    def __len__(self) -> int:
        return len(self._paths)


@dataclass(frozen=True)
class SessionResult:
    root: Path
    relative_paths: List[str]
    tree: str


class SelectionSession:
    """Navigation state plus the command interpreter that drives it.

    Every command is evaluated against a freshly computed listing of the
    current directory; display indices are only valid for that listing.
    Malformed input never escapes ``execute``: it ends up in
    ``context.pending_error`` and the session stays usable.
    """

    def __init__(self, index: FileIndex, lister: Optional[DirectoryLister] = None):
        self.index = index
        self.root = index.root
        self.lister = lister or DirectoryLister(index)
        self.context = NavigationContext(current_directory=self.root)
        self.selection = SelectionSet()
        self.state = SessionState.BROWSING

    # --- Queries ---

    @property
    def current_directory(self) -> Path:
        return self.context.current_directory

    @property
    def relative_directory(self) -> str:
        return self.index.relative_to_root(self.current_directory) or ""

    @property
    def at_root(self) -> bool:
        return self.current_directory == self.root

    def listing(self) -> List[ListingItem]:
        return self.lister.list(self.relative_directory)

    def is_selected(self, item: ListingItem) -> bool:
        return isinstance(item, FileItem) and (self.current_directory / item.name) in self.selection

    def relative_selection(self) -> List[str]:
        """Selected paths relative to the root, in insertion order."""
        return [self.index.relative_to_root(path) or path.name for path in self.selection]

    def take_error(self) -> Optional[str]:
        """Return the pending error and clear it; it is shown exactly once."""
        error, self.context.pending_error = self.context.pending_error, None
        return error

    def result(self) -> SessionResult:
        relative_paths = sort_paths(self.relative_selection())
        return SessionResult(self.root, relative_paths, TreeRenderer().render(relative_paths))

    # --- Transitions ---

    def acknowledge(self) -> None:
        """Leave a help or selection overlay and go back to browsing."""
        if self.state.is_overlay:
            self.state = SessionState.BROWSING

    def execute(self, command: str) -> SessionState:
        if self.state.is_terminal:
            logger.debug("Ignoring %r: session already %s", command, self.state.value)
            return self.state
        self.acknowledge()

        command = command.strip()
        self.context.pending_error = None
        logger.debug("Command %r in %s", command, self.relative_directory or "/")
        try:
            self._dispatch(command)
        except CommandError as e:
            self.context.pending_error = str(e)
        return self.state

    def _dispatch(self, command: str) -> None:
        if command in DONE_COMMANDS:
            self.state = SessionState.DONE
        elif command in HELP_COMMANDS:
            self.state = SessionState.SHOWING_HELP
        elif command in LIST_COMMANDS:
            self.state = SessionState.LISTING_SELECTED
        elif command in QUIT_COMMANDS:
            self.selection.clear()
            self.state = SessionState.ABORTED
        elif command == "..":
            self._go_up()
        elif command in ROOT_COMMANDS:
            self.context.current_directory = self.root
        elif command == "*":
            self._select_listed_files()
        elif command == "**":
            self._select_recursive()
        elif UNSELECT_RE.match(command):
            self._unselect(UNSELECT_RE.match(command).group(1).strip())
        elif INDEX_RE.match(command):
            self._select_index(int(command))
        elif RANGE_RE.match(command):
            start, end = RANGE_RE.match(command).groups()
            self._select_range(int(start), int(end))
        elif INDEX_LIST_RE.match(command):
            self._select_indices([int(part) for part in command.split(",")])
        else:
            self._select_path(command)

    def _go_up(self) -> None:
        if self.at_root:
            raise CommandError("Already at repository root")
        self.context.current_directory = self.current_directory.parent

    def _select_listed_files(self) -> None:
        fresh = [
            self.current_directory / item.name
            for item in self.listing()
            if isinstance(item, FileItem) and (self.current_directory / item.name) not in self.selection
        ]
        if not fresh:
            raise CommandError("No unselected files in this directory")
        for path in fresh:
            self.selection.add(path)

    def _select_recursive(self) -> None:
        fresh = [
            self.root / entry.relative_path
            for entry in self.index.entries_under(self.relative_directory)
            if (self.root / entry.relative_path) not in self.selection
        ]
        if not fresh:
            raise CommandError("No unselected files under this directory")
        for path in fresh:
            self.selection.add(path)

    def _item_at(self, items: List[ListingItem], index: int) -> ListingItem:
        if index >= len(items):
            raise CommandError(f"Invalid selection: {index} (listing has {len(items)} items)")
        return items[index]

    def _select_index(self, index: int) -> None:
        item = self._item_at(self.listing(), index)
        if isinstance(item, DirectoryItem):
            self.context.current_directory = self.current_directory / item.name
        else:
            self.selection.add(self.current_directory / item.name, item.name)

    def _select_range(self, start: int, end: int) -> None:
        items = self.listing()
        if start > end or end >= len(items):
            raise CommandError(f"Invalid range: {start}-{end} (listing has {len(items)} items)")

        files = [item for item in items[start:end + 1] if isinstance(item, FileItem)]
        if not files:
            raise CommandError(f"No files in range {start}-{end}")
        duplicates = [item.name for item in files if (self.current_directory / item.name) in self.selection]
        for item in files:
            path = self.current_directory / item.name
            if path not in self.selection:
                self.selection.add(path)
        if duplicates:
            self.context.pending_error = "Already selected: " + ", ".join(duplicates)

    def _select_indices(self, indices: List[int]) -> None:
        items = self.listing()
        notes: List[str] = []
        for index in indices:
            if index >= len(items):
                notes.append(f"{index}: out of range")
                continue
            item = items[index]
            if isinstance(item, DirectoryItem):
                notes.append(f"{index}: {item.label} is a directory")
                continue
            try:
                self.selection.add(self.current_directory / item.name, item.name)
            except DuplicateSelectionError as e:
                notes.append(f"{index}: {e}")
        if notes:
            self.context.pending_error = "; ".join(notes)

    def _unselect(self, target: str) -> None:
        if target == "*":
            if not self.selection:
                raise CommandError("Nothing selected")
            self.selection.clear()
            return

        if INDEX_RE.match(target):
            item = self._item_at(self.listing(), int(target))
            if isinstance(item, DirectoryItem):
                raise CommandError(f"{item.label} is a directory")
            path, name = self.current_directory / item.name, item.name
        else:
            try:
                path, name = self._resolve_input_path(target), target
            except (OSError, RuntimeError, ValueError) as e:
                raise CommandError(f"Not selected: {target}") from e
        if not self.selection.discard(path):
            raise CommandError(f"Not selected: {name}")

    def _resolve_input_path(self, text: str) -> Path:
        candidate = Path(text).expanduser()
        if not candidate.is_absolute():
            candidate = self.current_directory / candidate
        return candidate.resolve()

    def _select_path(self, text: str) -> None:
        try:
            path = self._resolve_input_path(text)
            is_dir, is_file = path.is_dir(), path.is_file()
        except (OSError, RuntimeError, ValueError) as e:
            # ENAMETOOLONG, EACCES, embedded NUL, unknown ~user
            logger.debug("Unusable path %r: %s", text, e)
            raise CommandError(f"Path not found: {text}") from e
        relative = self.index.relative_to_root(path)
        if relative is None:
            raise CommandError(f"Path is outside the repository: {text}")
        if is_hidden_path(relative):
            raise CommandError(f"Hidden paths are excluded: {text}")

        if is_dir:
            self.context.current_directory = self.root / relative
        elif is_file:
            if relative not in self.index:
                raise CommandError(f"Not a tracked text file: {text}")
            self.selection.add(self.root / relative, relative)
        else:
            raise CommandError(f"Path not found: {text}")
