# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Per-handle string intern pool.

Every piece of text the export layer synthesizes (qualified names, joined
documentation, type names) goes through `StringPool.intern`, which stores it
once by content and hands back the stored object. Identical content always
comes back as the same object for the life of the pool. The pool belongs to
exactly one SchemaHandle and is dropped with it.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional


class StringPool:
	__slots__ = ("_strings",)

	def __init__(self) -> None:
		self._strings: Optional[Dict[str, str]] = {}

	def intern(self, text: str) -> str:
		if self._strings is None:
			raise RuntimeError("string pool has been released")
		return self._strings.setdefault(text, text)

	def join(self, lines: Iterable[str], sep: str = "\n") -> str:
		"""Join documentation lines and intern the result; no lines gives ''."""
		return self.intern(sep.join(lines))

	def release(self) -> None:
		self._strings = None

	@property
	def released(self) -> bool:
		return self._strings is None

	def __len__(self) -> int:
		return len(self._strings) if self._strings is not None else 0

	def __contains__(self, text: object) -> bool:
		return self._strings is not None and text in self._strings


__all__ = ["StringPool"]
