import logging

from remotecontrol.core.ports.reporter import Reporter


class LoggingReporter(Reporter):
    """
    Reporter that forwards every notification to the standard logging
    system. Used when the listener is embedded without a UI.
    """
    def __init__(self, name: str = "host.notifications") -> None:
        self._logger = logging.getLogger(name)

    def info(self, message: str) -> None:
        self._logger.info(message)

    def warning(self, message: str) -> None:
        self._logger.warning(message)

    def error(self, message: str) -> None:
        self._logger.error(message)
