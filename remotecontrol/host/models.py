import itertools
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path


_untitled_counter = itertools.count(1)


class NotificationLevel(StrEnum):
    info = "info"
    warning = "warning"
    error = "error"


@dataclass(frozen=True)
class Notification:
    level: NotificationLevel
    message: str


@dataclass
class Document:
    """
    A text buffer open in the workbench.

    A document either mirrors a file on disk (`path` is set) or is untitled.
    Offsets are character offsets into `text`.
    """
    text: str = ""

    path: Path | None = None

    language: str = "plaintext"

    dirty: bool = False
    """
    True when the buffer holds edits that have not been saved yet.
    """

    cursor: int = 0

    selection: tuple[int, int] = (0, 0)
    """
    Half-open range [start, end) of the current selection. An empty range
    means nothing is selected and the cursor sits at `start`.
    """

    name: str = field(default="")

    def __post_init__(self) -> None:
        if not self.name:
            if self.path is not None:
                self.name = self.path.name
            else:
                self.name = f"Untitled-{next(_untitled_counter)}"

    @property
    def untitled(self) -> bool:
        return self.path is None

    def insert(self, text: str) -> None:
        """Insert `text` at the cursor and move the cursor after it."""
        at = self.cursor
        self.text = self.text[:at] + text + self.text[at:]
        self.cursor = at + len(text)
        self.selection = (self.cursor, self.cursor)
        self.dirty = True

    def replace_selection(self, text: str) -> None:
        """Replace the selected range (or insert at the cursor) with `text`."""
        start, end = self.selection
        self.text = self.text[:start] + text + self.text[end:]
        self.cursor = start + len(text)
        self.selection = (self.cursor, self.cursor)
        self.dirty = True

    def select(self, start: int, end: int) -> None:
        length = len(self.text)
        start = max(0, min(start, length))
        end = max(start, min(end, length))
        self.selection = (start, end)
        self.cursor = end
