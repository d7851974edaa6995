import codecs
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from remotecontrol.bootstrap.config.loader import get_configfile
from remotecontrol.core.models.config import ServerConfig


class ListenerSettings(BaseModel):
    host: Annotated[
        str,
        Field(
            description=(
                "Bind address for the command listener.\n"
                "The protocol is neither authenticated nor encrypted: keep it on\n"
                "a loopback address unless the network is trusted."
            ),
            default="127.0.0.1"
        )
    ]

    port: Annotated[
        int,
        Field(
            description="TCP port for incoming command connections. 0 lets the OS pick one.",
            default=12345,
            ge=0,
            le=65535,
        )
    ]

    backlog: Annotated[
        int,
        Field(
            description="Maximum number of pending TCP connections.",
            default=100,
            gt=0,
        )
    ]

    max_buffer_size: Annotated[
        int,
        Field(
            description=(
                "Maximum size in bytes of a command line that has not been\n"
                "terminated yet. Clients exceeding it are disconnected."
            ),
            default=1 * 1024 * 1024,
            gt=0,
        )
    ]

    encoding: Annotated[
        str,
        Field(
            description="Text encoding of the wire protocol.",
            default="utf-8"
        )
    ]

    dispatch_trailing_line: Annotated[
        bool,
        Field(
            description=(
                "Dispatch a final command that is not terminated by a newline\n"
                "when the client closes the connection."
            ),
            default=True
        )
    ]

    report_received: Annotated[
        bool,
        Field(
            description="Show a notification for every received command.",
            default=True
        )
    ]

    timeout_graceful_shutdown: Annotated[
        float,
        Field(
            description="Maximum time allowed for graceful shutdown.",
            default=5.0,
            ge=0,
        )
    ]

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError:
            raise ValueError(f"Unknown encoding '{v}'")
        return v


class WorkspaceSettings(BaseModel):
    root: Annotated[
        Path,
        Field(
            description=(
                "Directory relative file paths received by 'openFile' are\n"
                "resolved against. Defaults to the current working directory."
            ),
            default_factory=Path.cwd
        )
    ]

    autostart: Annotated[
        bool,
        Field(
            description="Start the listener as soon as the process boots.",
            default=True
        )
    ]


class RemoteControlConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="REMOTECONTROL_",
        env_nested_delimiter="__",
        extra="ignore"
    )

    listener: Annotated[
        ListenerSettings,
        Field(
            description=(
                "Command listener configuration.\n"
                "Controls where the listener binds, how command lines are framed\n"
                "and decoded, and how long shutdown may wait for open connections."
            ),
            default_factory=ListenerSettings
        )
    ]

    workspace: Annotated[
        WorkspaceSettings,
        Field(
            description="Editor workbench configuration.",
            default_factory=WorkspaceSettings
        )
    ]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: tuple[PydanticBaseSettingsSource, ...] = (init_settings, env_settings)
        if (file := get_configfile()) is not None:
            sources += (YamlConfigSettingsSource(settings_cls, yaml_file=file),)
        return sources

    def get_server_config(self) -> ServerConfig:
        listener = self.listener
        return ServerConfig(
            host=listener.host,
            backlog=listener.backlog,
            max_buffer_size=listener.max_buffer_size,
            encoding=listener.encoding,
            dispatch_trailing_line=listener.dispatch_trailing_line,
            report_received=listener.report_received,
            timeout_graceful_shutdown=listener.timeout_graceful_shutdown,
        )
