import asyncio
import logging

from remotecontrol.core.models.config import ServerConfig
from remotecontrol.core.models.session import ConnectionSession
from remotecontrol.core.models.state import ServerState
from remotecontrol.core.ports.reporter import Reporter
from remotecontrol.core.routing.dispatcher import Dispatcher
from remotecontrol.core.transport.addr import get_remote_addr
from remotecontrol.core.transport.stream import CommandStream


class CommandProtocol(asyncio.Protocol):
    """
    Implements the framing and connection lifecycle for a single TCP
    client. It receives raw bytes from the transport, reassembles them into
    newline-terminated command lines, decodes them and forwards each line to
    the CommandStream associated with the connection.

    When a connection is established, CommandProtocol opens a
    ConnectionSession, registers itself in the server's connection set, and
    starts the CommandStream task that dispatches the connection's commands
    one at a time, in order. Bytes are accumulated in the session's receive
    buffer so a command may span several reads and a single read may carry
    several commands. Lines are decoded with the configured encoding;
    invalid byte sequences are replaced rather than rejected. Blank lines
    are dropped.

    If an unterminated line grows beyond the configured maximum buffer size,
    the connection is closed.

    When the client closes its write side, the final unterminated line is
    dispatched (or discarded, depending on the configuration) and the
    disconnection is reported. When the connection is lost, CommandProtocol
    removes itself from the server state, reports the socket error if there
    was one, and signals termination to the CommandStream by pushing a
    sentinel value into its queue.

    Nothing is ever written back to the client.
    """
    def __init__(
        self,
        config: ServerConfig,
        server_state: ServerState,
        dispatcher: Dispatcher,
        reporter: Reporter,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._transport: asyncio.Transport = None   # type: ignore[assignment]
        self._session: ConnectionSession = None  # type: ignore[assignment]
        self._stream: CommandStream = None   # type: ignore[assignment]

        self._config = config
        self._dispatcher = dispatcher
        self._reporter = reporter
        self._loop = loop or asyncio.get_event_loop()
        self._connections = server_state.connections
        self._tasks = server_state.tasks
        self._eof = False
        self._logger = logging.getLogger("core.transport.protocol")

    @property
    def session(self) -> ConnectionSession:
        return self._session

    def connection_made(self, transport: asyncio.Transport) -> None:   # type: ignore[override]
        self._transport = transport
        self._session = ConnectionSession(
            transport=transport,
            peer=get_remote_addr(transport),
        )
        self._connections.add(self)
        self._stream = CommandStream(
            dispatcher=self._dispatcher,
            queue=asyncio.Queue(),
            reporter=self._reporter,
            report_received=self._config.report_received,
        )
        task = self._loop.create_task(self._stream.run())
        task.add_done_callback(self._tasks.discard)
        self._tasks.add(task)

        self._logger.debug(f"{self._session.who} - Connection made")
        self._reporter.info("Client connected to Socket Command Listener.")

    def connection_lost(self, exc: Exception | None) -> None:
        self._connections.discard(self)

        who = self._session.who
        if exc is not None:
            self._logger.error(f"{who} - Socket error: {exc}")
            self._reporter.error(f"Socket error: {exc}")
        else:
            self._logger.debug(f"{who} - Connection lost.")
            self._transport.close()

        self._session.receive_buffer.clear()
        self._stream.queue.put_nowait(None)

    def eof_received(self) -> bool | None:
        self._eof = True
        remainder = self._session.take_remainder()

        if remainder.strip():
            if self._config.dispatch_trailing_line:
                self._push(remainder)
            else:
                self._logger.debug(
                    f"{self._session.who} - Discarding unterminated line "
                    f"({len(remainder)} bytes)"
                )

        self._logger.info(f"{self._session.who} - Client disconnected")
        self._reporter.info("Client disconnected from Socket Command Listener.")
        # Returning None lets the transport close itself.
        return None

    def data_received(self, data: bytes) -> None:
        if self._eof:
            return

        session = self._session
        session.receive_buffer.extend(data)

        for line in session.drain_lines():
            self._push(line)

        if len(session.receive_buffer) > self._config.max_buffer_size:
            self._logger.warning(
                f"{session.who} - Line exceeds {self._config.max_buffer_size} "
                f"bytes, closing connection"
            )
            session.receive_buffer.clear()
            self._transport.close()

    def shutdown(self) -> None:
        self._transport.close()

    def _push(self, raw: bytes) -> None:
        line = raw.decode(self._config.encoding, errors="replace")
        if not line.strip():
            return

        try:
            self._stream.queue.put_nowait(line)
        except Exception as exc:
            self._logger.error(f"Queue error: {exc}")
