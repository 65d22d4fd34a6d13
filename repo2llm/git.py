# repo2llm/git.py

import logging
import subprocess
from pathlib import Path
from typing import List

from .errors import FileIndexError, SetupError

logger = logging.getLogger(__name__)


def is_hidden_path(relative_path: str) -> bool:
    """True if any segment of a slash-separated path starts with a dot."""
    return any(part.startswith(".") for part in relative_path.split("/") if part)


def resolve_repo_root(path: Path) -> Path:
    """Return the top level of the git work tree containing ``path``."""
    if not path.is_dir():
        raise SetupError(f"Directory not found: {path}")
    try:
        proc = subprocess.run(
            ["git", "-C", str(path), "rev-parse", "--show-toplevel"],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise SetupError("git executable not found") from e
    except subprocess.CalledProcessError as e:
        raise SetupError(f"Not a git repository: {path}") from e

    top_level = proc.stdout.strip()
    if not top_level:
        raise SetupError(f"Not a git repository: {path}")
    return Path(top_level).resolve()


def list_tracked_files(root: Path) -> List[str]:
    """List tracked, non-hidden file paths relative to ``root``, in git's order."""
    try:
        proc = subprocess.run(
            ["git", "-C", str(root), "ls-files", "-z"],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=True,
        )
    except FileNotFoundError as e:
        raise FileIndexError("git executable not found") from e
    except subprocess.CalledProcessError as e:
        stderr = e.stderr.decode("utf-8", errors="replace").strip() if e.stderr else ""
        raise FileIndexError(f"git ls-files failed: {stderr or e}") from e

    paths: List[str] = []
    for raw in proc.stdout.split(b"\x00"):
        if not raw:
            continue
        rel = raw.decode("utf-8", errors="replace")
        if is_hidden_path(rel):
            continue
        paths.append(rel)
    logger.debug("git ls-files returned %d non-hidden paths under %s", len(paths), root)
    return paths
