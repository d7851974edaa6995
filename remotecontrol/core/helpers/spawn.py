import asyncio
import logging
from typing import Any, Coroutine, TypeVar


T = TypeVar("T")


class TaskSpawner:
    """
    Runs fire-and-forget coroutines as tracked asyncio tasks.

    The Dispatcher runs every command invocation through it and the Listener
    uses it for the watcher of its accept loop. A task stays tracked until
    it finishes; if it raised, the exception is logged when it is dropped.
    Cancellation is not an error and is not logged.

    `wait()` lets shutdown code drain whatever is still in flight within a
    deadline.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop):
        self._loop = loop
        self._tasks: set[asyncio.Task[Any]] = set()
        self._logger = logging.getLogger("core.helpers.spawn")

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    @property
    def remaining_tasks(self) -> int:
        """Number of spawned tasks that have not finished yet."""
        return len(self._tasks)

    def on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)

        if task.cancelled():
            return

        if ex := task.exception():
            self._logger.error(
                f"Error occurred in task {task.get_name()}: {str(ex)}",
                exc_info=ex
            )

    def spawn(self, coro: Coroutine[Any, Any, T], name: str | None = None) -> asyncio.Task[T]:
        task = self._loop.create_task(coro, name=name)
        task.add_done_callback(self.on_done)
        self._tasks.add(task)
        return task

    async def wait(self, timeout: float) -> None:
        """
        Wait for every tracked task, cancelling the ones still running once
        `timeout` seconds have elapsed.
        """
        if not self._tasks:
            return

        _, pending = await asyncio.wait(set(self._tasks), timeout=timeout)
        for task in pending:
            task.cancel("Task cancelled, timeout graceful shutdown exceeded")
        if pending:
            self._logger.error(f"Cancelled {len(pending)} running task(s) on shutdown")
