# repo2llm/app.py

from typing import Callable, List, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, ScrollableContainer, Vertical
from textual.css.query import NoMatches
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Footer, Header, Input, Label, Markdown, Static

from .config import EMPTY_DIRECTORY_PREVIEW, SELECTION_PREVIEW_COUNT
from .listing import DirectoryItem, ListingItem
from .session import SelectionSession, SessionResult, SessionState

COMMAND_HINT = "Commands: [N] select/open, [..] up, [d] done, [l] list, [q] quit, [h] help"

HELP_MARKDOWN = """\
### Interactive Navigation Commands

| Command | Effect |
|---|---|
| `N` | Select file N or enter directory N |
| `N-M` | Select every file from N to M |
| `N,M,...` | Select several files |
| `*` | Select every file in this directory |
| `**` | Select every file below this directory |
| `u N`, `u PATH`, `u *` | Unselect by number, by path, or everything |
| `..` | Go up to the parent directory |
| `r`, `/` | Go back to the repository root |
| `PATH` | Open a directory or select a file by path |
| `l` | List currently selected files |
| `d`, empty line | Done, generate the output |
| `q` | Quit without generating output |
| `h`, `?` | Show this help |

**Navigation tips**

- Files and directories are sorted by modification time, most recent first
- A directory's time is that of the newest file anywhere beneath it
- Only git-tracked files are shown; hidden paths and binary files are excluded
- Numbers change as the listing changes, so read them off the current screen
"""


def _preview_text(item: DirectoryItem) -> Text:
    text = Text()
    if item.preview is None:
        return text
    labels = [(entry.label, entry.is_directory) for entry in item.preview]
    if not labels:
        labels = [(EMPTY_DIRECTORY_PREVIEW, False)]
    for position, (label, is_directory) in enumerate(labels):
        text.append("\n    └─ " if position == 0 else "\n       ", style="dim")
        text.append(label, style="dim blue" if is_directory else "dim")
    return text


def render_listing(items: List[ListingItem], is_selected: Callable[[ListingItem], bool]) -> Text:
    """Numbered listing: directories with their preview, selected files ticked."""
    text = Text()
    if not items:
        text.append(EMPTY_DIRECTORY_PREVIEW, style="dim")
        return text
    for index, item in enumerate(items):
        if index:
            text.append("\n")
        text.append(f"[{index}] ", style="bold")
        if isinstance(item, DirectoryItem):
            text.append(f"📁 {item.label}", style="bold blue")
            text.append_text(_preview_text(item))
        else:
            text.append(f"📄 {item.name}")
            if is_selected(item):
                text.append(" ✓", style="bold green")
    return text


class HelpScreen(ModalScreen[None]):
    BINDINGS = [
        Binding("escape", "close", "Close"),
        Binding("enter", "close", "Close", show=False),
    ]

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Label("Help", classes="dialog_title")
            yield Markdown(HELP_MARKDOWN)
            yield Label("Esc or Enter to go back", classes="dialog_hint")

    def action_close(self) -> None:
        self.dismiss(None)


class SelectedFilesScreen(ModalScreen[None]):
    BINDINGS = [
        Binding("escape", "close", "Close"),
        Binding("enter", "close", "Close", show=False),
    ]

    def __init__(self, relative_paths: List[str]):
        super().__init__()
        self.relative_paths = relative_paths

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Label(f"Currently selected files ({len(self.relative_paths)})", classes="dialog_title")
            if self.relative_paths:
                body = "\n".join(f"- `{rel_path}`" for rel_path in self.relative_paths)
            else:
                body = "_None selected_"
            with ScrollableContainer(id="selected_list"):
                yield Markdown(body)
            yield Label("Esc or Enter to go back", classes="dialog_hint")

    def action_close(self) -> None:
        self.dismiss(None)


class Repo2LLMApp(App[Optional[SessionResult]]):
    """Draws the session's listing and feeds each typed command to it.

    Exits with the session result on ``done`` and with ``None`` on ``quit``.
    """

    TITLE = "repo2llm"
    CSS = """
    Screen { layout: vertical; }
    #app_body { layout: horizontal; height: 1fr; }
    #listing_panel { width: 2fr; height: 100%; border: round $primary; padding: 0 1; }
    #sidebar_panel { width: 1fr; height: 100%; border-left: wide $primary-lighten-2; padding: 0 1; }
    #sidebar_panel Markdown { width: 100%; }
    #status_bar { width: 100%; height: auto; padding: 0 1; background: $primary-background; color: $text; }
    #status_bar.error { color: $error; }
    #command_input { margin: 0 0 1 0; }
    #dialog { align: center middle; width: 80%; max-width: 90; height: auto; max-height: 80%; border: thick $primary; background: $surface; padding: 1; }
    #selected_list { max-height: 20; border: round $primary-lighten-2; }
    .dialog_title { width: 100%; text-align: center; margin-bottom: 1; }
    .dialog_hint { width: 100%; color: $text-muted; margin-top: 1; }
    HelpScreen, SelectedFilesScreen { align: center middle; }
    """
    BINDINGS = [
        Binding("ctrl+q", "quit_session", "Quit", show=True, priority=True),
        Binding("ctrl+d", "finish", "Done", show=True, priority=True),
        Binding("f1", "show_help", "Help", show=True),
    ]
    status_message = reactive("Enter a number to select a file or open a directory.")

    def __init__(self, session: SelectionSession):
        super().__init__()
        self.session = session

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="app_body"):
            with ScrollableContainer(id="listing_panel"):
                yield Static(id="listing")
            with ScrollableContainer(id="sidebar_panel"):
                yield Markdown("### Selected Files\n\n_None selected_", id="selected_files_md")
        yield Static(Text(self.status_message), id="status_bar")
        yield Input(placeholder=COMMAND_HINT, id="command_input")
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_view()
        self.query_one("#command_input", Input).focus()

    def watch_status_message(self, new_message: str) -> None:
        try:
            self.query_one("#status_bar", Static).update(Text(new_message))
        except NoMatches:
            pass

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        event.input.value = ""
        self.run_command(event.value)

    def run_command(self, command: str) -> None:
        selected_before = len(self.session.selection)
        state = self.session.execute(command)
        self.log(f"Command {command!r} -> {state.value}")

        if state is SessionState.DONE:
            self.exit(self.session.result())
            return
        if state is SessionState.ABORTED:
            self.exit(None)
            return

        self.refresh_view(selected_before)
        if state is SessionState.SHOWING_HELP:
            self.push_screen(HelpScreen(), self._acknowledge_overlay)
        elif state is SessionState.LISTING_SELECTED:
            self.push_screen(SelectedFilesScreen(self.session.relative_selection()), self._acknowledge_overlay)

    def _acknowledge_overlay(self, _result: None = None) -> None:
        self.session.acknowledge()
        try:
            self.query_one("#command_input", Input).focus()
        except NoMatches:
            pass

    def refresh_view(self, selected_before: Optional[int] = None) -> None:
        session = self.session
        items = session.listing()
        self.query_one("#listing", Static).update(render_listing(items, session.is_selected))

        relative_dir = session.relative_directory
        self.sub_title = f"{session.root.name}/{relative_dir}" if relative_dir else f"{session.root.name} (root)"

        selected = session.relative_selection()
        md_widget = self.query_one("#selected_files_md", Markdown)
        if selected:
            display_items = [f"- `{rel_path}`" for rel_path in selected]
            md_widget.update(f"### Selected Files ({len(selected)})\n\n" + "\n".join(display_items))
        else:
            md_widget.update("### Selected Files\n\n_None selected_")

        status_bar = self.query_one("#status_bar", Static)
        error = session.take_error()
        if error:
            status_bar.add_class("error")
            self.status_message = f"Error: {error}"
            self.bell()
            return
        status_bar.remove_class("error")

        summary = f"Directory: {session.current_directory} | Selected: {len(selected)} files"
        if selected:
            shown = ", ".join(selected[:SELECTION_PREVIEW_COUNT])
            more = "" if len(selected) <= SELECTION_PREVIEW_COUNT else f", +{len(selected) - SELECTION_PREVIEW_COUNT} more"
            summary += f" ({shown}{more})"
        self.status_message = summary
        if selected_before is not None and len(selected) != selected_before:
            delta = len(selected) - selected_before
            self.notify(f"{'Selected' if delta > 0 else 'Unselected'} {abs(delta)} file(s).", timeout=2)

    def action_quit_session(self) -> None:
        self.run_command("quit")

    def action_finish(self) -> None:
        self.run_command("done")

    def action_show_help(self) -> None:
        self.run_command("help")
