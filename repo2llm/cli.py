# repo2llm/cli.py

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional

from rich.console import Console
from textual.logging import TextualHandler

from .app import Repo2LLMApp
from .errors import FileIndexError, SetupError
from .git import resolve_repo_root
from .index import FileIndex
from .output import OutputAssembler
from .session import SelectionSession
from .sink import deliver

console = Console()
err_console = Console(stderr=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repo2llm",
        description=(
            "Interactively pick git-tracked files, most recently modified first, and copy "
            "them together with a directory tree as one block of text for an LLM chat."
        ),
    )
    parser.add_argument(
        "repo_path",
        nargs="?",
        default=".",
        help="Path inside the git repository (default: current directory)",
    )
    parser.add_argument(
        "-d", "--debug",
        action="store_true",
        help="Print the generated output before exiting and log debug details",
    )
    return parser


def configure_logging(debug: bool) -> None:
    # TextualHandler writes to the devtools console while the app runs, stderr otherwise.
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(name)s: %(message)s",
        handlers=[TextualHandler()],
        force=True,
    )


def run(argv: Optional[List[str]] = None, app_factory: Callable[[SelectionSession], Repo2LLMApp] = Repo2LLMApp) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.debug)

    try:
        root = resolve_repo_root(Path(args.repo_path).expanduser())
        index = FileIndex.build(root)
    except (SetupError, FileIndexError) as e:
        err_console.print(f"Error: {e}", style="bold red", markup=False, highlight=False)
        return 1

    session = SelectionSession(index)
    result = app_factory(session).run()
    if result is None:
        console.print("Exiting without processing files.")
        return 0
    if not result.relative_paths:
        console.print("No files were selected, nothing to copy.")
        return 0

    console.print(f"Formatting {len(result.relative_paths)} files for LLM interaction...")
    output = OutputAssembler(root).assemble(result.relative_paths)
    try:
        delivery = deliver(output.text)
    except OSError as e:
        # Neither clipboard nor temp dir is usable; stdout is the last sink left.
        err_console.print(
            f"Unable to copy to clipboard or save output ({e}). Writing it to stdout.",
            style="bold red",
            markup=False,
            highlight=False,
        )
        console.out(output.text, highlight=False, end="")
        return 0
    if delivery.copied:
        console.print(f"{len(output.included)} files copied to clipboard.", style="bold green")
    else:
        console.print(
            f"Unable to copy to clipboard ({delivery.error}). Output saved to: {delivery.fallback_path}",
            style="yellow",
            markup=False,
            highlight=False,
        )

    if args.debug:
        console.print("=== DEBUG: OUTPUT CONTENTS ===", markup=False)
        console.out(output.text, highlight=False, end="")
        console.print("=== END DEBUG OUTPUT ===", markup=False)
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
