# repo2llm/output.py

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from .config import CONTENTS_CLOSE, CONTENTS_OPEN, FILE_RULE
from .files import is_binary_content, read_bytes
from .tree import TreeRenderer, sort_paths

logger = logging.getLogger(__name__)

ReadBytes = Callable[[Path], bytes]


@dataclass
class AssembledOutput:
    text: str
    relative_paths: List[str]
    included: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def file_count(self) -> int:
        return len(self.relative_paths)


class OutputAssembler:
    """Build the final artifact: header, directory tree, then file contents.

    Contents follow the tree's version-sorted order. A file that cannot be
    read, or turns out to be binary, is reported and skipped.
    """

    def __init__(self, root: Path, read: Optional[ReadBytes] = None, renderer: Optional[TreeRenderer] = None):
        self.root = root
        self.read = read or read_bytes
        self.renderer = renderer or TreeRenderer()

    def assemble(self, relative_paths: Iterable[str]) -> AssembledOutput:
        ordered = sort_paths(relative_paths)
        result = AssembledOutput(text="", relative_paths=ordered)

        parts = [
            f"# Repository: {self.root.name} ({self.root})",
            f"# Files: {len(ordered)}",
            "",
            "## Directory Structure",
            "```",
            str(self.root),
        ]
        parts.extend(self.renderer.render_lines(ordered))
        parts.append("```")
        parts.append("")

        for rel_path in ordered:
            block = self._file_block(rel_path, result)
            if block is not None:
                parts.append(block)
                result.included.append(rel_path)

        result.text = "\n".join(parts) + "\n"
        return result

    def _file_block(self, rel_path: str, result: AssembledOutput) -> Optional[str]:
        full_path = self.root / rel_path
        try:
            data = self.read(full_path)
        except OSError as e:
            self._warn(result, f"Skipping unreadable file {rel_path}: {e}")
            return None
        if is_binary_content(data):
            self._warn(result, f"Skipping binary file {rel_path}")
            return None

        content = data.decode("utf-8", errors="replace")
        if not content.endswith("\n"):
            content += "\n"
        return "\n".join([
            "\n",
            FILE_RULE,
            f"# FILE: {full_path}",
            FILE_RULE,
            "",
            CONTENTS_OPEN,
            content + CONTENTS_CLOSE,
        ])

    @staticmethod
    def _warn(result: AssembledOutput, message: str) -> None:
        logger.warning(message)
        result.warnings.append(message)
