import errno


class RemoteControlError(Exception):
    """Base class for errors raised by the command listener."""


class BindError(RemoteControlError):
    """
    The listener could not bind its server socket.

    The failure only affects the start attempt that raised it; the listener
    can be started again, on the same or another port.
    """

    def __init__(self, port: int, reason: str) -> None:
        super().__init__(self.describe(port, reason))
        self.port = port
        self.reason = reason

    @staticmethod
    def describe(port: int, reason: str) -> str:
        return f"Server error on port {port}: {reason}"

    @classmethod
    def from_os_error(cls, port: int, exc: OSError) -> "BindError":
        reason = exc.strerror or str(exc)
        if exc.errno == errno.EADDRINUSE:
            return AddressInUseError(port, reason)
        return cls(port, reason)


class AddressInUseError(BindError):
    """The requested port is already bound by another socket."""

    @staticmethod
    def describe(port: int, reason: str) -> str:
        return f"Port {port} is already in use. Please choose a different port."


class ServeError(RemoteControlError):
    """
    The server socket failed while accepting connections, after a
    successful bind.
    """

    def __init__(self, port: int, reason: str) -> None:
        super().__init__(f"Server error: {reason}")
        self.port = port
        self.reason = reason
