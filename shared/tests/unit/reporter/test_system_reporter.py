"""
Unit tests for SystemReporter.

Tests verbose filtering, context prefixes and file logging.

Usage:
    python -m tests.unit.reporter.test_system_reporter
"""

import logging

from shared.reporter import SystemReporter
from shared.tests import LaborantTest


class TestSystemReporter(LaborantTest):
    """Test SystemReporter filtering and handlers."""

    component_name = "shared"
    test_category = "unit"

    def test_verbose_clamped(self):
        assert SystemReporter(name="test.clamp.high", verbose=9).verbose == 3
        assert SystemReporter(name="test.clamp.low", verbose=-1).verbose == 0

    def test_message_prefixed_with_context(self, caplog):
        """Test context is rendered in square brackets."""
        reporter = SystemReporter(name="test.context", verbose=1)
        reporter.logger.propagate = True

        with caplog.at_level(logging.INFO, logger="test.context"):
            reporter.info("Wallet connected", context="WalletConnector")

        assert "[WalletConnector] Wallet connected" in caplog.messages

    def test_verbose_filtering(self, caplog):
        """Test messages above the verbose level are dropped."""
        reporter = SystemReporter(name="test.filter", level=logging.DEBUG, verbose=1)
        reporter.logger.propagate = True

        with caplog.at_level(logging.DEBUG, logger="test.filter"):
            reporter.info("shown", context="Test")
            reporter.info("detail", context="Test", verbose_level=2)
            reporter.debug("debug", context="Test")
            reporter.error("failure", context="Test")

        assert caplog.messages == ["[Test] shown", "[Test] failure"]

    def test_quiet_keeps_errors(self, caplog):
        reporter = SystemReporter(name="test.quiet", verbose=0)
        reporter.logger.propagate = True

        with caplog.at_level(logging.INFO, logger="test.quiet"):
            reporter.info("hidden", context="Test")
            reporter.warning("hidden too", context="Test")
            reporter.critical("shown", context="Test")

        assert caplog.messages == ["[Test] shown"]

    def test_set_verbose(self):
        reporter = SystemReporter(name="test.set_verbose", verbose=1)

        reporter.set_verbose(3)
        assert reporter.verbose == 3
        assert reporter._should_log(3)

    def test_file_logging(self, tmp_path):
        """Test log_dir adds a file handler writing <name>.log."""
        reporter = SystemReporter(name="test-file", log_dir=str(tmp_path))

        reporter.info("written to disk", context="Test")
        for handler in reporter.logger.handlers:
            handler.flush()

        assert reporter.log_file == str(tmp_path / "test-file.log")
        assert "[Test] written to disk" in (tmp_path / "test-file.log").read_text()

    def test_handlers_not_duplicated(self):
        SystemReporter(name="test.reinit")
        reporter = SystemReporter(name="test.reinit")

        assert len(reporter.logger.handlers) == 1


if __name__ == "__main__":
    TestSystemReporter.run_as_main()
