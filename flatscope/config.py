"""Parse configuration."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Tuple


@dataclass(frozen=True)
class ParseOptions:
	"""
	Knobs for one parse.

	include_paths: extra include search roots, consulted after the including
	  file's own directory. No other roots are added implicitly.
	allow_unresolved: keep references to undefined types as predeclared struct
	  definitions instead of failing the parse.
	"""

	include_paths: Tuple[str, ...] = field(default_factory=tuple)
	allow_unresolved: bool = False

	def with_include_paths(self, paths: Iterable[str] | None) -> "ParseOptions":
		if not paths:
			return self
		return replace(self, include_paths=self.include_paths + tuple(str(p) for p in paths))
