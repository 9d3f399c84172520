"""
Common diagnostic structure for the schema front-end.

A parse produces at most one error diagnostic (the first failure wins, the way
flatc reports), but the record keeps the same shape drift-style tooling uses so
it can be rendered to text or JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .span import Span


@dataclass
class Diagnostic:
	"""Represents a schema diagnostic (error/warning/etc.)."""

	message: str
	code: str | None = None
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Source location (Span() denotes unknown).
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def render(self) -> str:
		"""
		Render as `file:line: col: severity: message`.

		Lines stay 1-based and columns 0-based in this rendering, matching the
		conventional compiler error format editors already parse.
		"""
		file = self.span.file or "<input>"
		if not self.span.known:
			return f"{file}: {self.severity}: {self.message}"
		col = (self.span.column or 1) - 1
		return f"{file}:{self.span.line}: {col}: {self.severity}: {self.message}"

	def to_json(self) -> dict:
		"""Render to a structured JSON-friendly dict."""
		return {
			"phase": self.phase,
			"message": self.message,
			"severity": self.severity,
			"file": self.span.file,
			"line": self.span.line,
			"column": self.span.column,
			"notes": list(self.notes),
		}


class SchemaError(ValueError):
	"""
	User-facing schema error raised by the AST builder or the resolver.

	It carries a best-effort location (`loc`, any object with line/column) so the
	handle can turn it into a pinned Diagnostic instead of leaking a raw
	exception across the boundary.
	"""

	def __init__(
		self,
		message: str,
		*,
		loc: object | None = None,
		file: str | None = None,
		phase: str = "resolve",
	) -> None:
		super().__init__(message)
		self.loc = loc
		self.file = file
		self.phase = phase

	def to_diagnostic(self) -> Diagnostic:
		return Diagnostic(message=str(self), phase=self.phase, span=Span.from_loc(self.loc, file=self.file))
