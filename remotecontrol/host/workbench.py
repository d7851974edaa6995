import asyncio
import inspect
import logging
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Awaitable, Callable

from remotecontrol.core.ports.reporter import Reporter
from remotecontrol.host.errors import HostError, NoActiveEditorError, UnknownActionError
from remotecontrol.host.models import Document, Notification, NotificationLevel


Action = Callable[[], Awaitable[object] | object]


class Workbench:
    """
    Headless text editor used as the host application of the listener.

    The workbench keeps a list of open documents, one of which is active
    and carries the cursor and selection edits are applied to. It also
    tracks the visibility of auxiliary panels, records user notifications,
    and exposes a table of named actions that `execute_action()` runs by
    identifier.

    File reads and writes run in a small thread pool so they never block the
    event loop. Every operation raises a HostError (or an OSError for file
    I/O) when the request cannot be honoured.

    The workbench doubles as a Reporter: notifications surfaced by the
    listener end up in the same list as the ones requested by clients.
    When an `echo` reporter is given every notification is forwarded to it
    as well.
    """

    MAX_NOTIFICATIONS = 1000

    def __init__(
        self,
        root: Path | None = None,
        io_workers: int = 2,
        echo: Reporter | None = None,
    ) -> None:
        self._root = (root or Path.cwd()).expanduser()
        self._documents: list[Document] = []
        self._active: Document | None = None
        self._panels: dict[str, bool] = {"terminal": False}
        self._notifications: deque[Notification] = deque(maxlen=self.MAX_NOTIFICATIONS)
        self._io_pool = ThreadPoolExecutor(max_workers=io_workers)
        self._echo = echo
        self._logger = logging.getLogger("host.workbench")
        self._actions: dict[str, Action] = {
            "workbench.action.closeActiveEditor": self.close_active_editor,
            "workbench.action.terminal.toggleTerminal": self.toggle_terminal,
            "workbench.action.files.saveAll": self.save_all,
            "workbench.action.files.newUntitledFile": self.new_file,
        }

    @property
    def root(self) -> Path:
        return self._root

    @property
    def documents(self) -> tuple[Document, ...]:
        return tuple(self._documents)

    @property
    def active_document(self) -> Document | None:
        return self._active

    @property
    def notifications(self) -> list[Notification]:
        return list(self._notifications)

    @property
    def actions(self) -> list[str]:
        return sorted(self._actions)

    def panel_visible(self, name: str) -> bool:
        return self._panels.get(name, False)

    # Notifications

    def show_message(self, level: NotificationLevel, message: str) -> None:
        self._notifications.append(Notification(level=level, message=message))
        if self._echo is None:
            return

        forward = {
            NotificationLevel.info: self._echo.info,
            NotificationLevel.warning: self._echo.warning,
            NotificationLevel.error: self._echo.error,
        }[level]
        forward(message)

    def info(self, message: str) -> None:
        self.show_message(NotificationLevel.info, message)

    def warning(self, message: str) -> None:
        self.show_message(NotificationLevel.warning, message)

    def error(self, message: str) -> None:
        self.show_message(NotificationLevel.error, message)

    # Documents

    async def open_file(self, path: str) -> Document:
        if not path.strip():
            raise HostError("No file path given.")

        file = self.resolve(path)
        for document in self._documents:
            if document.path == file:
                self._activate(document)
                return document

        loop = asyncio.get_running_loop()
        text = await loop.run_in_executor(self._io_pool, self._read, file)

        document = Document(text=text, path=file)
        self._documents.append(document)
        self._activate(document)
        return document

    async def open_content(self, content: str, language: str = "plaintext") -> Document:
        document = Document(text=content, language=language)
        self._documents.append(document)
        self._activate(document)
        return document

    async def new_file(self) -> Document:
        return await self.open_content("")

    async def insert_text(self, text: str) -> None:
        document = self._require_active("insert text into")
        document.insert(text)

    async def replace_selection(self, text: str) -> None:
        document = self._require_active("replace selection in")
        document.replace_selection(text)

    async def save_all(self) -> int:
        """
        Write every dirty document that has a path. Untitled documents have
        nowhere to go without a save dialog and are left dirty.
        """
        loop = asyncio.get_running_loop()
        saved = 0
        for document in list(self._documents):
            if not document.dirty:
                continue
            if document.path is None:
                self._logger.debug(f"Skipping untitled document {document.name}")
                continue

            await loop.run_in_executor(
                self._io_pool, self._write, document.path, document.text
            )
            document.dirty = False
            saved += 1

        return saved

    async def close_active_editor(self) -> None:
        document = self._active
        if document is None:
            return

        self._documents.remove(document)
        self._active = self._documents[-1] if self._documents else None

    # Panels and actions

    async def toggle_panel(self, name: str) -> bool:
        visible = not self._panels.get(name, False)
        self._panels[name] = visible
        return visible

    async def toggle_terminal(self) -> bool:
        return await self.toggle_panel("terminal")

    def register_action(self, action_id: str, action: Action) -> None:
        self._actions[action_id] = action

    async def execute_action(self, action_id: str) -> None:
        action = self._actions.get(action_id.strip())
        if action is None:
            raise UnknownActionError(action_id)

        result = action()
        if inspect.isawaitable(result):
            await result

    def resolve(self, path: str) -> Path:
        file = Path(path).expanduser()
        if not file.is_absolute():
            file = self._root / file
        return file

    def close(self) -> None:
        self._io_pool.shutdown(wait=False, cancel_futures=True)

    def _activate(self, document: Document) -> None:
        self._active = document

    def _require_active(self, action: str) -> Document:
        if self._active is None:
            raise NoActiveEditorError(action)
        return self._active

    @staticmethod
    def _read(file: Path) -> str:
        return file.read_text(encoding="utf-8")

    @staticmethod
    def _write(file: Path, text: str) -> None:
        file.write_text(text, encoding="utf-8")
