"""Tests for scratchdsl.diagnostics and scratchdsl.errors."""

from scratchdsl.diagnostics import DiagnosticCollector, DiagnosticContext, DiagnosticLevel
from scratchdsl.errors import (
    DuplicateNameError,
    ScratchDslError,
    UnsupportedOperationError,
    UsageError,
)


class TestDiagnosticContext:
    def test_levels(self):
        ctx = DiagnosticContext(target_name="Cat")
        ctx.info("added costume")
        ctx.warning("missing sound")
        assert ctx.has_warnings()
        assert not ctx.has_errors()
        assert str(ctx.diagnostics[1]) == "Warning: missing sound: Target 'Cat'"

    def test_repeated_message_recorded_once(self):
        ctx = DiagnosticContext(target_name="Cat")
        ctx.warning("missing sound")
        ctx.warning("missing sound")
        ctx.info("missing sound")
        assert len(ctx.diagnostics) == 2

    def test_clear(self):
        ctx = DiagnosticContext()
        ctx.error("boom")
        ctx.clear()
        assert ctx.diagnostics == []


class TestDiagnosticCollector:
    def test_summary(self):
        ctx = DiagnosticContext(target_name="Stage")
        ctx.error("a")
        ctx.warning("b")
        ctx.warning("c")
        ctx.info("d")
        collector = DiagnosticCollector()
        collector.add_context_diagnostics(ctx)
        assert collector.summary() == "1 error, 2 warnings, 1 note"
        assert len(collector.of_level(DiagnosticLevel.WARNING)) == 2

    def test_no_issues(self):
        assert DiagnosticCollector().summary() == "No issues"

    def test_print_all(self, capsys):
        ctx = DiagnosticContext(target_name="Cat")
        ctx.info("added costume")
        collector = DiagnosticCollector()
        collector.add_context_diagnostics(ctx)
        collector.print_all()
        assert capsys.readouterr().out == "Info: added costume: Target 'Cat'\n"


class TestErrors:
    def test_message_and_detail(self):
        error = DuplicateNameError("Name taken", "declared on target Stage")
        assert str(error) == "Name taken (declared on target Stage)"
        assert isinstance(error, UsageError)
        assert isinstance(error, ScratchDslError)

    def test_without_detail(self):
        assert str(ScratchDslError("plain")) == "plain"

    def test_unsupported_is_not_implemented(self):
        assert issubclass(UnsupportedOperationError, NotImplementedError)
