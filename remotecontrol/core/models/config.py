from dataclasses import dataclass


@dataclass
class ServerConfig:
    """
    Static configuration for a command Listener.

    The listening port is not part of it: it is handed to
    `Listener.start(port)` so the same configuration can be restarted on
    another port after a bind failure.
    """
    host: str = "127.0.0.1"
    """
    IP address or hostname on which the listener binds.
    """

    backlog: int = 100
    """
    Maximum number of pending TCP connections waiting for accept().
    """

    max_buffer_size: int = 1 * 1024 * 1024  # 1MB
    """
    Maximum size of an unterminated line held in a connection's receive
    buffer. A client exceeding it is disconnected.
    """

    encoding: str = "utf-8"
    """
    Text encoding of the wire protocol. Invalid byte sequences are replaced,
    never fatal.
    """

    dispatch_trailing_line: bool = True
    """
    Whether a final line without a newline is dispatched when the client
    closes its write side. When False the partial line is discarded.
    """

    report_received: bool = True
    """
    Whether every received command is surfaced through the Reporter at info
    level before it is dispatched.
    """

    timeout_graceful_shutdown: float = 5.0
    """
    Maximum time (in seconds) `Listener.shutdown()` waits for open
    connections and their tasks before cancelling them.
    """
