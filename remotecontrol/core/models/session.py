import asyncio
import time
from dataclasses import dataclass, field


@dataclass
class ConnectionSession:
    """
    Per-client state of one accepted connection.

    The session is owned by exactly one CommandProtocol. Its receive buffer
    holds the bytes of a line that has not been terminated yet; it is
    mutated in place by the protocol and never shared.
    """
    transport: asyncio.Transport

    peer: tuple[str, int] | None = None

    receive_buffer: bytearray = field(default_factory=bytearray)

    opened_at: float = field(default_factory=time.time)
    """
    Wall-clock time (seconds since epoch) at which the connection was
    accepted.
    """

    def drain_lines(self) -> list[bytes]:
        """
        Remove every newline-terminated line from the receive buffer and
        return them without their terminator. Any trailing partial line
        stays buffered.
        """
        end = self.receive_buffer.rfind(b"\n")
        if end < 0:
            return []

        complete = bytes(self.receive_buffer[:end])
        del self.receive_buffer[:end + 1]
        return complete.split(b"\n")

    def take_remainder(self) -> bytes:
        """Empty the receive buffer and return what it held."""
        remainder = bytes(self.receive_buffer)
        self.receive_buffer.clear()
        return remainder

    @property
    def who(self) -> str:
        return "%s:%d" % self.peer if self.peer else ""
