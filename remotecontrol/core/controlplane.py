import asyncio
import logging

from remotecontrol.core.helpers.spawn import TaskSpawner
from remotecontrol.core.models.config import ServerConfig
from remotecontrol.core.models.state import ListenerStatus
from remotecontrol.core.ports.reporter import Reporter
from remotecontrol.core.routing.dispatcher import Dispatcher
from remotecontrol.core.routing.registry import CommandRegistry
from remotecontrol.core.transport.listener import Listener


class ControlPlane:
    """
    Wires the registry, the dispatcher and the listener together on a
    dedicated event loop and drives them for the lifetime of the process.
    """
    def __init__(
        self,
        config: ServerConfig,
        registry: CommandRegistry,
        reporter: Reporter,
    ) -> None:
        self._config = config
        self._registry = registry
        self._reporter = reporter
        self._loop = self._create_event_loop()
        self._spawner = TaskSpawner(loop=self._loop)
        self._dispatcher = Dispatcher(
            registry=self._registry,
            reporter=self._reporter,
            spawner=self._spawner,
        )
        self._listener = Listener(
            config=self._config,
            dispatcher=self._dispatcher,
            reporter=self._reporter,
            loop=self._loop,
        )
        self._logger = logging.getLogger("remotecontrol.controlplane")

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    @property
    def listener(self) -> Listener:
        return self._listener

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    async def start(self, stop_event: asyncio.Event, port: int | None) -> None:
        if not self._registry.frozen:
            self._registry.freeze()
        self._logger.info(
            f"Serving {len(self._registry)} command(s): "
            f"{', '.join(sorted(self._registry.entries()))}"
        )

        if port is not None:
            status = await self._listener.start(port)
            if status == ListenerStatus.failed:
                self._logger.error(
                    "Listener could not start, waiting for shutdown signal."
                )
        else:
            self._logger.info("Autostart disabled, listener left stopped.")

        await stop_event.wait()
        await self.stop()

    async def stop(self) -> None:
        self._logger.info("Shutting down command listener.")
        await self._listener.shutdown()

        if remaining := self._spawner.remaining_tasks:
            self._logger.info(f"Waiting for {remaining} command(s) to complete.")
            await self._spawner.wait(timeout=self._config.timeout_graceful_shutdown)

    @staticmethod
    def _create_event_loop() -> asyncio.AbstractEventLoop:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        return loop
