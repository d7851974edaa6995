import socket
import threading

import pytest

from remotectl.core.client import RemoteControlClient
from remotectl.core.cmd import RemoteCmd


class LineSink:
    """Accepts a single connection and records everything it receives."""

    def __init__(self) -> None:
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(1)
        self.port = self._sock.getsockname()[1]
        self.data = bytearray()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        conn, _ = self._sock.accept()
        with conn:
            while chunk := conn.recv(4096):
                self.data.extend(chunk)

    def received(self, timeout: float = 2.0) -> bytes:
        self._thread.join(timeout)
        self._sock.close()
        return bytes(self.data)


@pytest.fixture
def sink():
    return LineSink()


@pytest.mark.ut
def test_client_sends_newline_terminated_lines(sink):
    with RemoteControlClient("127.0.0.1", sink.port) as client:
        client.send("saveAll")
        client.send("showInfoMessage", "hello world")
        client.send_line("openFile /tmp/a.txt")

    assert sink.received() == b"saveAll\nshowInfoMessage hello world\nopenFile /tmp/a.txt\n"


@pytest.mark.ut
def test_client_encoding(sink):
    with RemoteControlClient("127.0.0.1", sink.port, encoding="latin-1") as client:
        client.send("showInfoMessage", "café")

    assert sink.received() == "showInfoMessage café\n".encode("latin-1")


@pytest.mark.ut
@pytest.mark.parametrize("token", ["", "save all", "tab\there"])
def test_client_rejects_invalid_tokens(token):
    client = RemoteControlClient("127.0.0.1", 1)

    with pytest.raises(ValueError):
        client.send(token)


@pytest.mark.ut
def test_client_rejects_embedded_newline():
    client = RemoteControlClient("127.0.0.1", 1)

    with pytest.raises(ValueError):
        client.send("insertText", "a\nb")


@pytest.mark.ut
def test_client_connection_refused():
    probe = socket.socket()
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()

    client = RemoteControlClient("127.0.0.1", port, timeout=1.0)
    with pytest.raises(OSError):
        client.send("saveAll")


@pytest.mark.ut
def test_cmd_one_shot_send(sink):
    cli = RemoteCmd(["--server", f"127.0.0.1:{sink.port}", "send", "showInfoMessage", "hi", "there"])

    assert not cli.interactive
    assert cli.client.address == ("127.0.0.1", sink.port)
    try:
        cli.onecmd(cli.args.namespace)
    finally:
        cli.close()

    assert not cli.failed
    assert sink.received() == b"showInfoMessage hi there\n"


@pytest.mark.ut
def test_cmd_interactive_forwards_lines(sink):
    cli = RemoteCmd(["--server", f"127.0.0.1:{sink.port}"])

    assert cli.interactive
    assert cli.prompt == f"remotectl(127.0.0.1:{sink.port})> "
    try:
        cli.onecmd("saveAll")
        cli.onecmd("insertText  two  spaces")
        cli.onecmd("send toggleTerminal")
        assert cli.onecmd("") is False
        assert cli.onecmd("exit") is True
    finally:
        cli.close()

    assert sink.received() == b"saveAll\ninsertText  two  spaces\ntoggleTerminal\n"


@pytest.mark.ut
def test_cmd_reports_connection_failure(capsys):
    probe = socket.socket()
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()

    cli = RemoteCmd(["--server", f"127.0.0.1:{port}"])
    cli.onecmd("saveAll")
    cli.close()

    assert cli.failed
    assert capsys.readouterr().out
