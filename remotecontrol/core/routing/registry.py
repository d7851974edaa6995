import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Awaitable, Callable, Mapping

from remotecontrol.core.models.command import Outcome


HandlerResult = Outcome | None | Awaitable[Outcome | None]

CommandHandler = Callable[[str], HandlerResult]
"""
A host capability bound to a command token. It receives the raw argument
text and may return nothing, an Outcome, or an awaitable resolving to
either. Raising an exception means the command failed.
"""


@dataclass(frozen=True)
class CommandEntry:
    name: str
    handler: CommandHandler
    description: str = ""
    failure_prefix: str | None = None
    """
    Text prepended to the failure reason when the outcome is reported,
    e.g. "Failed to open file".
    """


class CommandRegistry:
    """
    Maps command tokens to host capability handlers.

    Handlers are registered exactly once per token. Attempting to register a
    second handler for the same token raises a RuntimeError. Once `freeze()`
    has been called the registry becomes read-only and can be shared by all
    connections without locking.

    This component does not perform any dispatching by itself; it only
    stores and resolves entries. Invocation and failure isolation are
    implemented by the `Dispatcher`.
    """

    def __init__(self) -> None:
        self._entries: dict[str, CommandEntry] = {}
        self._frozen = False
        self._logger = logging.getLogger("core.routing.registry")

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(
        self,
        name: str,
        handler: CommandHandler,
        description: str = "",
        failure_prefix: str | None = None,
    ) -> CommandEntry:
        if self._frozen:
            raise RuntimeError(f"Registry is frozen, cannot register '{name}'")
        if not name or name != name.strip() or any(c.isspace() for c in name):
            raise ValueError(f"Invalid command token '{name}'")
        if name in self._entries:
            raise RuntimeError(f"Handler already registered for '{name}'")

        entry = CommandEntry(
            name=name,
            handler=handler,
            description=description,
            failure_prefix=failure_prefix,
        )
        self._entries[name] = entry
        self._logger.debug(f"Registered command '{name}'")
        return entry

    def command(
        self,
        name: str,
        *,
        description: str = "",
        failure_prefix: str | None = None,
    ) -> Callable[[CommandHandler], CommandHandler]:
        def decorator(func: CommandHandler) -> CommandHandler:
            self.register(
                name,
                func,
                description=description or (func.__doc__ or "").strip(),
                failure_prefix=failure_prefix,
            )
            return func

        return decorator

    def freeze(self) -> None:
        self._frozen = True
        self._logger.debug(f"Registry frozen with {len(self._entries)} command(s)")

    def resolve(self, name: str) -> CommandEntry | None:
        return self._entries.get(name)

    def entries(self) -> Mapping[str, CommandEntry]:
        return MappingProxyType(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)
