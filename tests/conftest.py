import os
from typing import Generator

import pytest
import yaml

from remotecontrol.bootstrap.config.settings import RemoteControlConfig
from remotecontrol.core.models.config import ServerConfig
from tests.fake.fake_host import RecordingHost
from tests.fake.fake_reporter import FakeReporter
from tests.fake.fake_transport import FakeTransport
from tests.helpers import FakeRemoteControlConfig


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def reporter():
    return FakeReporter()


@pytest.fixture
def host():
    return RecordingHost()


@pytest.fixture
def registry(host):
    return host.registry()


@pytest.fixture
def server_config() -> ServerConfig:
    return ServerConfig(
        host="127.0.0.1",
        backlog=10,
        max_buffer_size=1024,
        timeout_graceful_shutdown=1.0,
    )


@pytest.fixture
def config_file(tmp_path):
    file = tmp_path / "remotecontrol.yaml"

    data = {
        "listener": {
            "host": "127.0.0.1",
            "port": 23456,
            "backlog": 10,
            "max_buffer_size": 2048,
            "encoding": "latin-1",
            "dispatch_trailing_line": False,
            "timeout_graceful_shutdown": 1,
        },
        "workspace": {
            "root": str(tmp_path / "workspace"),
            "autostart": False,
        },
    }

    file.write_text(yaml.dump(data))
    return file


@pytest.fixture
def rc_config(config_file) -> Generator[RemoteControlConfig, None, None]:
    backup = os.environ.copy()

    try:
        os.environ["TEST_REMOTECONTROLCONFIG"] = str(config_file)
        yield FakeRemoteControlConfig()
    finally:
        os.environ.clear()
        os.environ.update(backup)
