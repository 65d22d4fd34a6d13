# repo2llm/errors.py


class Repo2LLMError(Exception):
    """Base class for all repo2llm errors."""


class SetupError(Repo2LLMError):
    """No repository root could be resolved. Fatal."""


class FileIndexError(Repo2LLMError):
    """The tracked-file listing could not be obtained. Fatal."""


class CommandError(Repo2LLMError):
    """Malformed or out-of-range user input. Recovered by the session."""


class DuplicateSelectionError(CommandError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Already selected: {name}")
        self.name = name


class OutputSinkError(Repo2LLMError):
    """The clipboard could not take the assembled text."""
