# repo2llm/files.py

import logging
from pathlib import Path
from typing import Callable, Optional

import gitignore_parser

from .config import BINARY_SAMPLE_SIZE, IGNORE_FILENAME

logger = logging.getLogger(__name__)

IgnoreMatcher = Callable[[str], bool]


def is_binary_heuristic(filepath: Path, sample_size: int = BINARY_SAMPLE_SIZE) -> bool:
    try:
        with open(filepath, 'rb') as f:
            sample = f.read(sample_size)
        return b'\0' in sample
    except OSError:
        return True


def is_binary_content(data: bytes, sample_size: int = BINARY_SAMPLE_SIZE) -> bool:
    return b'\0' in data[:sample_size]


def read_bytes(filepath: Path) -> bytes:
    with open(filepath, 'rb') as f:
        return f.read()


def load_ignore_matcher(root: Path) -> Optional[IgnoreMatcher]:
    """Parse ``<root>/.repo2llmignore`` (gitignore syntax) if it exists.

    The returned callable takes an absolute path string, like the matchers
    produced by ``gitignore_parser``.
    """
    ignore_file = root / IGNORE_FILENAME
    if not ignore_file.is_file():
        return None
    try:
        matcher = gitignore_parser.parse_gitignore(str(ignore_file), base_dir=str(root))
    except (OSError, ValueError) as e:
        logger.warning("Could not parse %s: %s", ignore_file, e)
        return None
    logger.debug("Loaded ignore patterns from %s", ignore_file)
    return matcher
