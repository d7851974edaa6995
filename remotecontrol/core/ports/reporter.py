from typing import Protocol


class Reporter(Protocol):
    """
    The host's user-facing notification surface.

    The listener never answers clients over the wire: connection events,
    lifecycle changes and command outcomes are surfaced through a Reporter
    instead. Implementations must not raise and must not block the event
    loop.
    """

    def info(self, message: str) -> None:
        """Surface an informational message."""

    def warning(self, message: str) -> None:
        """Surface a recoverable problem, e.g. an unknown command."""

    def error(self, message: str) -> None:
        """Surface a failure, e.g. a bind error or a failed command."""
