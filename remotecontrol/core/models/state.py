import asyncio
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from remotecontrol.core.errors import RemoteControlError

if TYPE_CHECKING:
    from remotecontrol.core.transport.protocol import CommandProtocol


class ListenerStatus(StrEnum):
    """
    Lifecycle phase of a Listener.

    stopped  → no server socket is held
    starting → a bind is in flight
    running  → the server socket is bound and accepting
    failed   → the last bind or the serving loop failed; start() may retry
    """
    stopped = "stopped"
    starting = "starting"
    running = "running"
    failed = "failed"


@dataclass
class ListenerState:
    """
    Mutable state owned by a Listener.

    Invariants:
    - running implies `server` and `bound_port` are set
    - stopped implies `server` is None

    Transitions are only performed by the Listener while it holds its
    transition lock.
    """
    status: ListenerStatus = ListenerStatus.stopped

    bound_port: int | None = None
    """
    Port actually bound by the server socket. When the listener is started
    with port 0 this is the port chosen by the OS.
    """

    server: asyncio.AbstractServer | None = None

    error: RemoteControlError | None = None
    """
    Cause of the last failure, cleared on a successful start.
    """


@dataclass
class ServerState:
    """
    Shared runtime bookkeeping for a Listener.

    This object is mutated by:
    - CommandProtocol: adds/removes active connections
    - CommandProtocol: registers the consumer task of each connection
    - Listener.shutdown(): waits for connections and tasks to complete
    """
    connections: "set[CommandProtocol]" = field(default_factory=set)
    """
    Set of active CommandProtocol instances. Each TCP connection corresponds
    to one CommandProtocol.
    """

    tasks: set[asyncio.Task[None]] = field(default_factory=set)
    """
    Set of per-connection consumer tasks. Each task removes itself through
    task.add_done_callback(tasks.discard).
    """
