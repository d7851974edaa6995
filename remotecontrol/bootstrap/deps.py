from functools import lru_cache

from pydantic import ValidationError

from remotecontrol.bootstrap.config.settings import RemoteControlConfig
from remotecontrol.core.controlplane import ControlPlane
from remotecontrol.core.routing.registry import CommandRegistry
from remotecontrol.host.workbench import Workbench
from remotecontrol.infra.logging_reporter import LoggingReporter


@lru_cache
def get_cp() -> ControlPlane:
    config = get_config()

    return ControlPlane(
        config=config.get_server_config(),
        registry=get_registry(),
        reporter=get_workbench(),
    )


@lru_cache
def get_registry() -> CommandRegistry:
    return CommandRegistry()


@lru_cache
def get_workbench() -> Workbench:
    config = get_config()
    return Workbench(root=config.workspace.root, echo=LoggingReporter())


@lru_cache
def get_config() -> RemoteControlConfig:
    try:
        return RemoteControlConfig()
    except ValidationError as ex:
        msg = ["Configuration validation failed:"]
        for err in ex.errors():
            loc = ".".join(str(part) for part in err["loc"])
            msg.append(f"  {loc}: {err['msg']}")
        raise SystemExit("\n".join(msg))
