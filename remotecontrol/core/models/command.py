from dataclasses import dataclass
from enum import StrEnum


@dataclass(frozen=True)
class ParsedCommand:
    """
    A single command line split into its token and argument.

    Built by the parser for every received line and consumed immediately by
    the Dispatcher. It is never retained once dispatched.
    """
    name: str
    """
    Command token, the first whitespace-delimited word of the line.
    Compared literally (case-sensitive) against the registry.
    """

    argument: str = ""
    """
    Everything after the first whitespace run, with internal whitespace
    preserved. Empty when the line carries no argument.
    """


class OutcomeStatus(StrEnum):
    success = "success"
    failure = "failure"


class FailureKind(StrEnum):
    """
    Classifies a failed dispatch so reporters can choose a severity.

    unrecognized_command → no handler for the token (warning)
    handler_failure      → the handler raised (error)
    rejected             → the host declined the request, e.g. nothing to
                           edit (warning)
    """
    unrecognized_command = "unrecognized_command"
    handler_failure = "handler_failure"
    rejected = "rejected"


@dataclass(frozen=True)
class Outcome:
    """
    Result of attempting to execute one dispatched command.

    Outcomes are reported through the host's notification surface and the
    logs. They are never written back to the client socket.
    """
    command: str
    status: OutcomeStatus
    kind: FailureKind | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.success

    @classmethod
    def success(cls, command: str) -> "Outcome":
        return cls(command=command, status=OutcomeStatus.success)

    @classmethod
    def failure(cls, command: str, kind: FailureKind, reason: str) -> "Outcome":
        return cls(
            command=command,
            status=OutcomeStatus.failure,
            kind=kind,
            reason=reason,
        )

    @classmethod
    def rejected(cls, command: str, reason: str) -> "Outcome":
        return cls.failure(command, FailureKind.rejected, reason)

    @classmethod
    def unrecognized(cls, command: str) -> "Outcome":
        return cls.failure(
            command,
            FailureKind.unrecognized_command,
            f'Unknown command received: "{command}"',
        )
