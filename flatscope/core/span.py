# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source spans and editor-facing positions.

A Span records what the parser reported, in the parser's own numbering
(lark: 1-based lines, 1-based columns, exclusive end column). Everything that
leaves the export layer is a Position/Range pair in 0-based numbering; the
conversion lives here and nowhere else.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source span (best-effort file/line/column plus raw parser loc)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None
	raw: Any = None

	@classmethod
	def from_loc(cls, loc: Any, file: Optional[str] = None) -> "Span":
		"""
		Construct a Span from a parser location object (lark Token, tree meta,
		or one of our own `Located` records).

		If `loc` is already a Span, it is returned unchanged.
		"""
		if loc is None:
			return cls(file=file)
		if isinstance(loc, cls):
			return loc
		return cls(
			file=file or getattr(loc, "file", None) or None,
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
			end_line=getattr(loc, "end_line", None),
			end_column=getattr(loc, "end_column", None),
			raw=loc,
		)

	@property
	def known(self) -> bool:
		return self.line is not None and self.line > 0


@dataclass(frozen=True)
class Position:
	"""0-based (line, col) pair as handed to editor tooling."""

	line: int = 0
	col: int = 0


@dataclass(frozen=True)
class Range:
	start: Position = Position()
	end: Position = Position()

	def contains(self, pos: Position) -> bool:
		return (self.start.line, self.start.col) <= (pos.line, pos.col) <= (self.end.line, self.end.col)


EMPTY_RANGE = Range()


def to_position(line: Optional[int], column: Optional[int]) -> Position:
	"""
	Convert a parser-native (1-based line, 1-based column) pair to a 0-based
	Position. Missing or non-positive values clamp to 0.
	"""
	if line is None or line < 1:
		return Position()
	col = column - 1 if column is not None and column > 0 else 0
	return Position(line=line - 1, col=col)


def span_start(span: Optional[Span]) -> Position:
	if span is None:
		return Position()
	return to_position(span.line, span.column)


def span_range(span: Optional[Span]) -> Range:
	"""Package a span's start/end as a 0-based Range; a span without an end is empty."""
	if span is None or not span.known:
		return EMPTY_RANGE
	start = to_position(span.line, span.column)
	if span.end_line is None:
		return Range(start, start)
	return Range(start, to_position(span.end_line, span.end_column))


__all__ = ["Span", "Position", "Range", "EMPTY_RANGE", "to_position", "span_start", "span_range"]
