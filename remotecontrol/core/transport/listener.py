import asyncio
import dataclasses
import logging

from remotecontrol.core.errors import BindError, ServeError
from remotecontrol.core.helpers.spawn import TaskSpawner
from remotecontrol.core.models.config import ServerConfig
from remotecontrol.core.models.state import ListenerState, ListenerStatus, ServerState
from remotecontrol.core.ports.reporter import Reporter
from remotecontrol.core.routing.dispatcher import Dispatcher
from remotecontrol.core.transport.protocol import CommandProtocol


class Listener:
    """
    Owns the lifecycle of the TCP server socket that accepts command
    clients, instantiates a CommandProtocol for each connection, and exposes
    idempotent start/stop operations.

    `start(port)` binds the server socket with asyncio's create_server and
    returns as soon as the socket is bound; accepting happens in the
    background, watched by a `serve_forever()` task. Starting a running
    listener is a no-op. A bind failure leaves the listener in the failed
    state with the cause recorded in `state.error`; address-in-use is kept
    distinct from other bind errors since the user can act on it by picking
    another port. A failure of the serving loop after the bind is recorded
    as a ServeError. A failed listener can be started again.

    `stop()` closes the listening socket so no new connection is accepted,
    then returns without waiting for the open connections: they drain on
    their own when their clients disconnect. Stopping a stopped listener is
    a no-op. Once stop() returns the port can be bound again.

    Transitions are serialized by a single asyncio.Lock, so concurrent
    start/stop calls always leave a deterministic state and never a
    dangling socket or a double-bound port.

    `shutdown()` is meant for process exit: it stops the listener, asks
    every open connection to close and waits for them, bounded by the
    graceful shutdown timeout.
    """
    def __init__(
        self,
        config: ServerConfig,
        dispatcher: Dispatcher,
        reporter: Reporter,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._config = config
        self._dispatcher = dispatcher
        self._reporter = reporter
        self._loop = loop or asyncio.get_event_loop()
        self._lock = asyncio.Lock()
        self._spawner = TaskSpawner(loop=self._loop)
        self._state = ListenerState()
        self.server_state = ServerState()
        self._logger = logging.getLogger("core.transport.listener")

    @property
    def state(self) -> ListenerState:
        """A snapshot of the current listener state."""
        return dataclasses.replace(self._state)

    @property
    def status(self) -> ListenerStatus:
        return self._state.status

    @property
    def running(self) -> bool:
        return self._state.status == ListenerStatus.running

    @property
    def address(self) -> tuple[str, int] | None:
        if self._state.bound_port is None:
            return None
        return self._config.host, self._state.bound_port

    def create_protocol(self) -> asyncio.Protocol:
        return CommandProtocol(
            config=self._config,
            server_state=self.server_state,
            dispatcher=self._dispatcher,
            reporter=self._reporter,
            loop=self._loop,
        )

    async def start(self, port: int) -> ListenerStatus:
        async with self._lock:
            state = self._state
            if state.status == ListenerStatus.running:
                self._logger.info(f"Listener already running on port {state.bound_port}")
                self._reporter.info(
                    f"Socket server is already running on port {state.bound_port}."
                )
                return state.status

            state.status = ListenerStatus.starting
            state.error = None
            try:
                server = await self._loop.create_server(
                    self.create_protocol,
                    host=self._config.host,
                    port=port,
                    backlog=self._config.backlog,
                )
            except OSError as exc:
                error = BindError.from_os_error(port, exc)
                state.status = ListenerStatus.failed
                state.error = error
                state.server = None
                state.bound_port = None
                self._logger.error(f"Bind failed on port {port}: {exc}")
                self._reporter.error(str(error))
                return state.status

            state.server = server
            state.bound_port = server.sockets[0].getsockname()[1]
            state.status = ListenerStatus.running
            self._spawner.spawn(
                self._serve(server),
                name=f"listener:{state.bound_port}",
            )

            self._logger.info(
                "Socket server listening on %s:%d", self._config.host, state.bound_port
            )
            self._reporter.info(
                f"Socket Command Listener started on port {state.bound_port}."
            )
            return state.status

    async def stop(self) -> ListenerStatus:
        async with self._lock:
            state = self._state
            if state.status == ListenerStatus.stopped:
                self._logger.info("Listener is not running, skip stopping.")
                self._reporter.info("Socket server is not running.")
                return state.status

            server = state.server
            state.server = None
            state.bound_port = None
            state.status = ListenerStatus.stopped

            if server is not None:
                # Closes the listening sockets right away; open connections
                # are left alone and are not awaited.
                server.close()

            self._logger.info("Socket server stopped.")
            self._reporter.info("Socket Command Listener stopped.")

            return state.status

    async def shutdown(self) -> None:
        await self.stop()

        for connection in self.server_state.connections.copy():
            connection.shutdown()

        try:
            await asyncio.wait_for(
                self._wait_connections_closed(),
                timeout=self._config.timeout_graceful_shutdown
            )
        except asyncio.TimeoutError:
            self._logger.error(
                f"Cancel {len(self.server_state.tasks)} running task(s), "
                f"timeout graceful shutdown: {self.server_state.tasks}"
            )
            for task in self.server_state.tasks:
                task.cancel("Task cancelled, timeout graceful shutdown exceeded")

        await self._wait_watchers()

    async def _serve(self, server: asyncio.AbstractServer) -> None:
        try:
            await server.serve_forever()
        except asyncio.CancelledError:
            # close() cancels serve_forever(); that is a regular stop.
            return
        except Exception as exc:
            await self._fail(server, exc)

    async def _fail(self, server: asyncio.AbstractServer, exc: Exception) -> None:
        async with self._lock:
            state = self._state
            if state.server is not server:
                return

            port = state.bound_port or 0
            server.close()
            state.server = None
            state.bound_port = None
            state.status = ListenerStatus.failed
            state.error = ServeError(port, str(exc))

        self._logger.error(f"Server error: {exc}", exc_info=exc)
        self._reporter.error(f"Server error: {exc}")

    async def _wait_connections_closed(self) -> None:
        if self.server_state.connections:
            self._logger.info("Waiting for client connections to close.")

        while self.server_state.connections:
            await asyncio.sleep(0.1)

        if self.server_state.tasks:
            self._logger.info("Waiting for connection tasks to complete.")

        while self.server_state.tasks:
            await asyncio.sleep(0.1)

    async def _wait_watchers(self) -> None:
        # The accept watcher may still be waiting on server.wait_closed().
        await self._spawner.wait(timeout=self._config.timeout_graceful_shutdown)
