import socket


class RemoteControlClient:
    """
    Synchronous TCP client for the remote command listener.

    Each command is written as one newline-terminated line:

        <command> [SP <argument>] LF

    The listener never answers, so the client only writes. This client is
    minimal and blocking. It is intended for CLI usage, debugging, and
    simple scripts.
    """
    def __init__(self, host: str, port: int, encoding: str = "utf-8", timeout: float | None = 5.0):
        self._host = host
        self._port = port
        self._encoding = encoding
        self._timeout = timeout
        self._sock: socket.socket | None = None

    @property
    def address(self) -> tuple[str, int]:
        return self._host, self._port

    def connect(self) -> None:
        if self._sock is not None:
            return

        self._sock = socket.create_connection((self._host, self._port), timeout=self._timeout)

    def close(self) -> None:
        if self._sock:
            try:
                self._sock.close()
            finally:
                self._sock = None

    def send(self, command: str, argument: str = "") -> None:
        if not command or any(c.isspace() for c in command):
            raise ValueError(f"Invalid command token '{command}'")

        line = f"{command} {argument}" if argument else command
        self.send_line(line)

    def send_line(self, line: str) -> None:
        if "\n" in line:
            raise ValueError("A command line cannot contain a newline")

        if not self._sock:
            self.connect()

        self._sock.sendall(f"{line}\n".encode(self._encoding))

    def __enter__(self) -> "RemoteControlClient":
        self.connect()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
