"""Unit tests for Span, Diagnostic and DiagnosticAccumulator."""

from __future__ import annotations

import pytest

from struct_auto_from.core.diagnostics import Diagnostic, DiagnosticAccumulator, Span, fail
from struct_auto_from.core.exceptions import AccumulatorStateError, DiagnosticError


def _raise(message: str) -> None:
    raise fail(message)


class TestSpan:
    def test_location_only(self) -> None:
        assert str(Span("Model3a.name")) == "Model3a.name"

    def test_refinements(self) -> None:
        span = Span("Model3a.name").at_attribute(1).at_offset(17)
        assert str(span) == "Model3a.name, auto_from_attr #2, column 17"

    def test_keyword(self) -> None:
        span = Span("Model3a.name").at_attribute(0).at_key("from_field")
        assert str(span) == "Model3a.name, auto_from_attr #1, keyword 'from_field'"

    def test_at_attribute_resets_position(self) -> None:
        span = Span("R.f").at_attribute(0).at_offset(3).at_attribute(2)
        assert span.offset is None
        assert span.attribute == 2

    def test_frozen(self) -> None:
        span = Span("R.f")
        with pytest.raises(AttributeError):
            span.location = "other"  # type: ignore[misc]


class TestDiagnostic:
    def test_str_with_span(self) -> None:
        diagnostic = Diagnostic("duplicate field `from_field`", Span("R.f"))
        assert str(diagnostic) == "R.f: duplicate field `from_field`"

    def test_str_without_span(self) -> None:
        assert str(Diagnostic("boom")) == "boom"

    def test_error_message_lists_all(self) -> None:
        error = DiagnosticError([Diagnostic("first"), Diagnostic("second")])
        assert "2 errors" in str(error)
        assert "first" in str(error)
        assert "second" in str(error)
        assert error.messages == ["first", "second"]


class TestDiagnosticAccumulator:
    def test_empty_finish_returns_value(self) -> None:
        acc = DiagnosticAccumulator()
        assert acc.finish_with(42) == 42

    def test_finish_without_value(self) -> None:
        acc = DiagnosticAccumulator()
        assert acc.finish() is None
        assert acc.is_finished

    def test_failure_reports_every_diagnostic_in_order(self) -> None:
        acc = DiagnosticAccumulator()
        acc.push(Diagnostic("a"))
        acc.push(Diagnostic("b"))
        acc.extend([Diagnostic("c")])
        with pytest.raises(DiagnosticError) as exc_info:
            acc.finish_with("ignored")
        assert exc_info.value.messages == ["a", "b", "c"]

    def test_successful_value_discarded_on_failure(self) -> None:
        acc = DiagnosticAccumulator()
        acc.push(Diagnostic("a"))
        with pytest.raises(DiagnosticError):
            acc.finish_with({"partial": True})

    def test_handle_returns_value(self) -> None:
        acc = DiagnosticAccumulator()
        assert acc.handle(lambda x: x * 2, 21) == 42
        assert not acc.has_errors

    def test_handle_absorbs_error(self) -> None:
        acc = DiagnosticAccumulator()
        assert acc.handle(_raise, "bad") is None
        assert acc.handle(_raise, "worse") is None
        assert len(acc) == 2
        assert [d.message for d in acc.diagnostics] == ["bad", "worse"]

    def test_handle_propagates_other_exceptions(self) -> None:
        acc = DiagnosticAccumulator()
        with pytest.raises(ZeroDivisionError):
            acc.handle(lambda: 1 / 0)

    def test_push_error(self) -> None:
        acc = DiagnosticAccumulator()
        acc.push_error(DiagnosticError([Diagnostic("x"), Diagnostic("y")]))
        assert len(acc) == 2

    def test_push_after_finish(self) -> None:
        acc = DiagnosticAccumulator()
        acc.finish()
        with pytest.raises(AccumulatorStateError) as exc_info:
            acc.push(Diagnostic("late"))
        assert exc_info.value.current_state == "finished"

    def test_finish_twice(self) -> None:
        acc = DiagnosticAccumulator()
        acc.finish_with(1)
        with pytest.raises(AccumulatorStateError):
            acc.finish_with(2)

    def test_finished_even_when_failing(self) -> None:
        acc = DiagnosticAccumulator()
        acc.push(Diagnostic("a"))
        with pytest.raises(DiagnosticError):
            acc.finish()
        with pytest.raises(AccumulatorStateError):
            acc.handle(lambda: None)
