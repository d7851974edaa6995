import logging

import pytest

from remotecontrol.infra.logging_reporter import LoggingReporter


@pytest.mark.ut
def test_logging_reporter_levels(caplog):
    reporter = LoggingReporter()

    with caplog.at_level(logging.INFO, logger="host.notifications"):
        reporter.info("started")
        reporter.warning("unknown")
        reporter.error("failed")

    assert [(r.name, r.levelno, r.getMessage()) for r in caplog.records] == [
        ("host.notifications", logging.INFO, "started"),
        ("host.notifications", logging.WARNING, "unknown"),
        ("host.notifications", logging.ERROR, "failed"),
    ]
