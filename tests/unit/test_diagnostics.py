"""Unit tests for diagnostics sinks."""

import logging

from form_engine.diagnostics import (
    DiagnosticsCollector,
    LoggingDiagnostics,
    format_load_error,
    format_missing,
)


class TestFormatting:
    def test_missing(self):
        assert format_missing("Scale5") == "missing: Scale5"

    def test_load_error(self):
        assert format_load_error("Form", "SyntaxError: x") == "load error: Form: SyntaxError: x"


class TestDiagnosticsCollector:
    def test_records_in_order(self):
        collector = DiagnosticsCollector()
        collector(format_missing("A"))
        collector(format_load_error("B", "boom"))
        collector(format_missing("C"))

        assert len(collector) == 3
        assert collector.missing_names == ["A", "C"]
        assert collector.load_errors == ["load error: B: boom"]

    def test_replay_and_clear(self):
        source = DiagnosticsCollector()
        target = DiagnosticsCollector()
        source("missing: A")
        source.replay(target)
        source.clear()
        assert target.messages == ["missing: A"]
        assert len(source) == 0


class TestLoggingDiagnostics:
    def test_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            LoggingDiagnostics()("missing: A")
        assert "missing: A" in caplog.text
