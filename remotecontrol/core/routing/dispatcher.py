import asyncio
import inspect
import logging

from remotecontrol.core.helpers.spawn import TaskSpawner
from remotecontrol.core.models.command import FailureKind, Outcome, ParsedCommand
from remotecontrol.core.ports.reporter import Reporter
from remotecontrol.core.routing.registry import CommandEntry, CommandRegistry


class Dispatcher:
    """
    Invokes the host capability bound to a parsed command and isolates its
    failures.

    - The command token is resolved in the CommandRegistry by exact match.
    - An unknown token yields an `unrecognized_command` Outcome, reported at
      warning level. The connection is not affected.
    - A known token invokes its handler exactly once with the raw argument.
      The invocation runs as a tracked background task, so the caller gets
      a future right away and is never blocked by the host operation.
    - When `after` is given, the handler is not called before that earlier
      invocation has finished, whatever its outcome. A connection passes
      the future of its previous command so its effects on the host happen
      in arrival order even when handlers suspend.
    - Any exception raised by a handler, immediately or once its awaitable
      completes, is converted into a `handler_failure` Outcome and reported
      at error level. A handler may also return a `rejected` Outcome, which
      is reported at warning level as is.

    `dispatch()` always returns an `asyncio.Future[Outcome]`. Callers that
    only need fire-and-forget semantics may drop it; outcomes are reported
    whether or not anyone awaits them.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        reporter: Reporter,
        spawner: TaskSpawner,
    ) -> None:
        self._registry = registry
        self._reporter = reporter
        self._spawner = spawner
        self._logger = logging.getLogger("core.routing.dispatcher")

    def dispatch(
        self,
        parsed: ParsedCommand,
        after: asyncio.Future[Outcome] | None = None,
    ) -> asyncio.Future[Outcome]:
        if not parsed.name:
            return self._resolved(Outcome.success(parsed.name))

        entry = self._registry.resolve(parsed.name)
        if entry is None:
            outcome = Outcome.unrecognized(parsed.name)
            self._reporter.warning(outcome.reason or "")
            return self._resolved(outcome)

        self._logger.debug(f"Dispatching '{entry.name}' argument={parsed.argument!r}")
        return self._spawner.spawn(
            self._invoke(entry, parsed.argument, after),
            name=f"command:{entry.name}",
        )

    async def _invoke(
        self,
        entry: CommandEntry,
        argument: str,
        after: asyncio.Future[Outcome] | None,
    ) -> Outcome:
        if after is not None and not after.done():
            # asyncio.wait never raises the awaited future's exception.
            await asyncio.wait([after])

        try:
            result = entry.handler(argument)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            return self._failed(entry, exc)
        return self._succeeded(entry, result)

    def _succeeded(self, entry: CommandEntry, result: Outcome | None) -> Outcome:
        if isinstance(result, Outcome):
            if not result.ok:
                self._report_failure(entry, result)
            return result

        self._logger.debug(f"Command '{entry.name}' succeeded")
        return Outcome.success(entry.name)

    def _failed(self, entry: CommandEntry, exc: Exception) -> Outcome:
        self._logger.debug(f"Handler '{entry.name}' raised", exc_info=exc)
        outcome = Outcome.failure(
            entry.name,
            FailureKind.handler_failure,
            str(exc) or type(exc).__name__,
        )
        self._report_failure(entry, outcome)
        return outcome

    def _report_failure(self, entry: CommandEntry, outcome: Outcome) -> None:
        reason = outcome.reason or "unknown error"
        if outcome.kind == FailureKind.rejected:
            self._logger.info(f"Command '{entry.name}' rejected: {reason}")
            self._reporter.warning(reason)
            return

        if entry.failure_prefix:
            reason = f"{entry.failure_prefix}: {reason}"
        self._logger.warning(f"Command '{entry.name}' failed: {outcome.reason}")
        self._reporter.error(reason)

    def _resolved(self, outcome: Outcome) -> asyncio.Future[Outcome]:
        future = self._spawner.loop.create_future()
        future.set_result(outcome)
        return future
