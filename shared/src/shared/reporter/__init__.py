"""System reporting (logging) for Sceau components."""

from shared.reporter.system_reporter import SystemReporter

__all__ = ["SystemReporter"]
