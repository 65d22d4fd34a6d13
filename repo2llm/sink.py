# repo2llm/sink.py

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import pyperclip

from .config import TEMP_FILE_PREFIX
from .errors import OutputSinkError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Delivery:
    copied: bool
    fallback_path: Optional[Path] = None
    error: Optional[str] = None


def copy_to_clipboard(text: str) -> None:
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        raise OutputSinkError(str(e)) from e


def save_to_temp_file(text: str) -> Path:
    """Write ``text`` to a new file in the temp directory and keep it there."""
    with tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", prefix=TEMP_FILE_PREFIX, suffix=".md", delete=False
    ) as f:
        f.write(text)
    return Path(f.name)


def deliver(text: str) -> Delivery:
    """Copy to the clipboard, or persist to a temp file when that fails."""
    try:
        copy_to_clipboard(text)
    except OutputSinkError as e:
        logger.warning("Clipboard unavailable: %s", e)
        path = save_to_temp_file(text)
        logger.debug("Saved output to %s", path)
        return Delivery(copied=False, fallback_path=path, error=str(e))
    return Delivery(copied=True)
