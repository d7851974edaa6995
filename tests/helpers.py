import asyncio
import os
import time
from typing import Callable

from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, YamlConfigSettingsSource

from remotecontrol.bootstrap.config.settings import RemoteControlConfig
from remotecontrol.core.helpers.spawn import TaskSpawner
from remotecontrol.core.ports.reporter import Reporter
from remotecontrol.core.routing.dispatcher import Dispatcher
from remotecontrol.core.routing.registry import CommandRegistry


class FakeRemoteControlConfig(RemoteControlConfig):
    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        yaml_file = os.environ["TEST_REMOTECONTROLCONFIG"]
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file),
        )


def make_dispatcher(registry: CommandRegistry, reporter: Reporter) -> Dispatcher:
    spawner = TaskSpawner(loop=asyncio.get_running_loop())
    return Dispatcher(registry=registry, reporter=reporter, spawner=spawner)


async def settle(rounds: int = 50) -> None:
    """Let pending callbacks and tasks run for a few loop iterations."""
    for _ in range(rounds):
        await asyncio.sleep(0)


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.01)
