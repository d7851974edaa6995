import asyncio
import logging

from remotecontrol.core.models.command import Outcome
from remotecontrol.core.ports.reporter import Reporter
from remotecontrol.core.protocol.parser import parse
from remotecontrol.core.routing.dispatcher import Dispatcher


class CommandStream:
    """
    Consumes the command lines of a single TCP connection.

    The CommandProtocol frames incoming bytes into lines and pushes them
    into this stream's queue; `run()` pops them one at a time, in arrival
    order, parses each into a ParsedCommand and hands it to the Dispatcher.

    Each command is dispatched after the previous one of the same
    connection, so host effects keep the arrival order. The stream itself
    never waits for a command to complete: it only keeps the future of the
    last dispatch, and a slow host operation holds back the following
    commands without holding up the reading of new lines. A `None` pushed
    into the queue terminates the stream.

    When `report_received` is set, every received command is surfaced
    through the Reporter before it is dispatched.
    """
    def __init__(
        self,
        dispatcher: Dispatcher,
        queue: asyncio.Queue[str | None],
        reporter: Reporter | None = None,
        report_received: bool = False,
    ) -> None:
        self.queue = queue
        self._dispatcher = dispatcher
        self._reporter = reporter
        self._report_received = report_received
        self._last: asyncio.Future[Outcome] | None = None
        self._logger = logging.getLogger("core.transport.stream")

    @property
    def last(self) -> asyncio.Future[Outcome] | None:
        """Future of the most recent dispatch on this connection."""
        return self._last

    async def receive(self) -> str | None:
        return await self.queue.get()

    async def run(self) -> None:
        while True:
            line = await self.receive()
            if line is None:
                break

            parsed = parse(line)
            if not parsed.name:
                continue

            command = line.strip()
            self._logger.info(f'Received command: "{command}"')
            if self._report_received and self._reporter is not None:
                self._reporter.info(f'Received: "{command}"')

            try:
                self._last = self._dispatcher.dispatch(parsed, after=self._last)
            except Exception as exc:
                self._logger.error(
                    f"Unexpected error dispatching '{parsed.name}': {exc}",
                    exc_info=exc
                )
