# vim: set noexpandtab: -*- indent-tabs-mode: t -*-

from flatscope.core.diagnostics import Diagnostic, SchemaError
from flatscope.core.span import EMPTY_RANGE, Position, Range, Span, span_range, span_start, to_position
from flatscope.core.types_core import Namespace
from flatscope.parser.ast import Located


def test_line_ten_is_exported_as_line_nine() -> None:
	assert to_position(10, 1) == Position(9, 0)
	assert to_position(1, 5) == Position(0, 4)


def test_missing_positions_clamp_to_zero() -> None:
	assert to_position(None, None) == Position()
	assert to_position(0, 7) == Position()
	assert span_start(None) == Position()
	assert span_range(Span()) == EMPTY_RANGE


def test_span_range_keeps_end_exclusive() -> None:
	span = Span.from_loc(Located(line=2, column=13, end_line=2, end_column=16), file="x.fbs")
	assert span.file == "x.fbs"
	assert span_range(span) == Range(Position(1, 12), Position(1, 15))
	assert span_range(span).contains(Position(1, 14))
	assert not span_range(span).contains(Position(2, 0))


def test_span_from_span_is_identity() -> None:
	span = Span(file="a.fbs", line=1, column=1)
	assert Span.from_loc(span) is span


def test_namespace_rendering() -> None:
	assert str(Namespace(("pkg", "sub"))) == "pkg.sub"
	assert str(Namespace()) == ""
	assert not Namespace()
	assert Namespace.parse("pkg.sub") == Namespace(("pkg", "sub"))
	assert Namespace.parse("") == Namespace()
	assert Namespace(("a", "b")).qualify("X") == "a.b.X"
	assert Namespace().qualify("X") == "X"
	assert [str(ns) for ns in Namespace(("a", "b")).outward()] == ["a.b", "a", ""]


def test_diagnostic_render_uses_zero_based_column() -> None:
	diag = Diagnostic(message="boom", span=Span(file="s.fbs", line=3, column=5))
	assert diag.render() == "s.fbs:3: 4: error: boom"
	assert Diagnostic(message="boom").render() == "<input>: error: boom"


def test_schema_error_to_diagnostic() -> None:
	err = SchemaError("bad thing", loc=Located(line=2, column=1), file="f.fbs", phase="parser")
	diag = err.to_diagnostic()
	assert diag.phase == "parser"
	assert diag.span.file == "f.fbs"
	assert diag.to_json()["line"] == 2
	assert diag.render() == "f.fbs:2: 0: error: bad thing"
