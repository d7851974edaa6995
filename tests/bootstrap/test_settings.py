import pytest
from pydantic import ValidationError

from remotecontrol.bootstrap.config.loader import CONFIG_ENV, DEFAULT_CONFIG_FILE, build_parser, resolve_configfile
from tests.helpers import FakeRemoteControlConfig


@pytest.mark.ut
def test_config_is_loaded_from_yaml(rc_config, tmp_path):
    assert rc_config.listener.host == "127.0.0.1"
    assert rc_config.listener.port == 23456
    assert rc_config.listener.encoding == "latin-1"
    assert rc_config.listener.dispatch_trailing_line is False
    assert rc_config.workspace.root == tmp_path / "workspace"
    assert rc_config.workspace.autostart is False


@pytest.mark.ut
def test_get_server_config(rc_config):
    server_config = rc_config.get_server_config()

    assert server_config.host == "127.0.0.1"
    assert server_config.backlog == 10
    assert server_config.max_buffer_size == 2048
    assert server_config.encoding == "latin-1"
    assert server_config.dispatch_trailing_line is False
    assert server_config.report_received is True
    assert server_config.timeout_graceful_shutdown == 1.0


@pytest.mark.ut
def test_environment_overrides_yaml(rc_config, monkeypatch):
    monkeypatch.setenv("REMOTECONTROL_LISTENER__PORT", "3333")

    config = FakeRemoteControlConfig()

    assert config.listener.port == 3333
    assert config.listener.encoding == "latin-1"


@pytest.mark.ut
def test_received_report_can_be_turned_off(rc_config, monkeypatch):
    monkeypatch.setenv("REMOTECONTROL_LISTENER__REPORT_RECEIVED", "false")

    config = FakeRemoteControlConfig()

    assert config.get_server_config().report_received is False


@pytest.mark.ut
def test_init_arguments_take_precedence(rc_config):
    config = FakeRemoteControlConfig(listener={"port": 4444})

    assert config.listener.port == 4444


@pytest.mark.ut
@pytest.mark.parametrize(
    "name, value",
    [
        ("REMOTECONTROL_LISTENER__ENCODING", "not-an-encoding"),
        ("REMOTECONTROL_LISTENER__PORT", "70000"),
        ("REMOTECONTROL_LISTENER__MAX_BUFFER_SIZE", "0"),
    ],
)
def test_invalid_values_are_rejected(rc_config, monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValidationError):
        FakeRemoteControlConfig()


@pytest.mark.ut
def test_resolve_configfile_from_cli(tmp_path, monkeypatch):
    file = tmp_path / "custom.yaml"
    file.write_text("{}")
    monkeypatch.setenv(CONFIG_ENV, str(tmp_path / "ignored.yaml"))

    assert resolve_configfile(str(file)) == file


@pytest.mark.ut
def test_resolve_configfile_from_env(tmp_path, monkeypatch):
    file = tmp_path / "env.yaml"
    file.write_text("{}")
    monkeypatch.setenv(CONFIG_ENV, str(file))

    assert resolve_configfile(None) == file


@pytest.mark.ut
def test_resolve_configfile_missing_explicit_file_exits(tmp_path, monkeypatch):
    monkeypatch.delenv(CONFIG_ENV, raising=False)

    with pytest.raises(SystemExit):
        resolve_configfile(str(tmp_path / "nope.yaml"))


@pytest.mark.ut
def test_resolve_configfile_default_is_optional(tmp_path, monkeypatch):
    monkeypatch.delenv(CONFIG_ENV, raising=False)
    monkeypatch.chdir(tmp_path)

    assert resolve_configfile(None) is None

    (tmp_path / DEFAULT_CONFIG_FILE).write_text("{}")
    assert resolve_configfile(None) == tmp_path / DEFAULT_CONFIG_FILE


@pytest.mark.ut
def test_cli_arguments():
    args = build_parser().parse_args(["--port", "5555", "-l", "DEBUG", "-c", "x.yaml"])

    assert args.port == 5555
    assert args.log_level == "DEBUG"
    assert args.config == "x.yaml"

    defaults = build_parser().parse_args([])
    assert defaults.port is None
    assert defaults.log_level == "INFO"
