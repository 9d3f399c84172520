# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
SchemaHandle: the owning unit of the export layer.

`parse()` always returns a handle. The handle owns the resolved tree (read-only
after parse) and one StringPool. `destroy()` drops both; after that the handle
behaves exactly like an absent one (zero counts, empty text, sentinel
records), and a second `destroy()` is a no-op. A handle is also a context
manager, which is the preferred way to scope its lifetime:

	with parse(text, "schema.fbs") as handle:
		for i in range(count_structs(handle)):
			...

Nothing raised by the parser or resolver crosses this boundary: failures are
recorded as a Diagnostic and surfaced through `is_success`/`get_error`.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from flatscope.config import ParseOptions
from flatscope.core.diagnostics import Diagnostic, SchemaError
from flatscope.schema import build_schema
from flatscope.schema.model import SchemaTree

from .intern import StringPool

logger = logging.getLogger(__name__)


class SchemaHandle:
	def __init__(self, tree: Optional[SchemaTree], diagnostic: Optional[Diagnostic] = None) -> None:
		self._tree = tree
		self._diagnostic = diagnostic
		self._pool = StringPool()

	def __enter__(self) -> "SchemaHandle":
		return self

	def __exit__(self, *exc_info) -> None:
		self.destroy()

	def __repr__(self) -> str:
		state = "destroyed" if self.destroyed else ("ok" if self.success else "failed")
		return f"<SchemaHandle {state}>"

	@property
	def destroyed(self) -> bool:
		return self._pool.released

	@property
	def success(self) -> bool:
		return not self.destroyed and self._diagnostic is None

	@property
	def diagnostic(self) -> Optional[Diagnostic]:
		return None if self.destroyed else self._diagnostic

	@property
	def error(self) -> str:
		if self.destroyed or self._diagnostic is None:
			return ""
		return self.intern(self._diagnostic.render())

	@property
	def tree(self) -> Optional[SchemaTree]:
		"""The resolved tree, or None for failed or destroyed handles."""
		if self.destroyed or self._diagnostic is not None:
			return None
		return self._tree

	def intern(self, text: str) -> str:
		return self._pool.intern(text)

	def join_doc(self, lines: Sequence[str]) -> str:
		return self._pool.join(lines)

	@property
	def pool_size(self) -> int:
		return len(self._pool)

	def destroy(self) -> None:
		if self.destroyed:
			return
		logger.debug("releasing schema handle (%d interned strings)", len(self._pool))
		self._tree = None
		self._pool.release()


def parse(
	schema_text: str,
	filename: str = "",
	include_paths: Optional[Sequence[str]] = None,
	*,
	options: Optional[ParseOptions] = None,
) -> SchemaHandle:
	"""
	Parse schema text into a handle.

	`filename` may be empty for in-memory text with no file identity; when set,
	its directory is the first include search root. `include_paths` are
	appended to any paths already in `options`.
	"""
	options = (options or ParseOptions()).with_include_paths(include_paths)
	logger.debug("parsing schema %s (include paths: %s)", filename or "<input>", list(options.include_paths))
	try:
		tree = build_schema(schema_text, filename, options)
	except SchemaError as err:
		diagnostic = err.to_diagnostic()
		logger.debug("schema parse failed: %s", diagnostic.render())
		return SchemaHandle(None, diagnostic)
	logger.debug(
		"parsed %d structs, %d enums, %d services",
		len(tree.structs),
		len(tree.enums),
		len(tree.services),
	)
	return SchemaHandle(tree)


def is_success(handle: Optional[SchemaHandle]) -> bool:
	return handle is not None and handle.success


def get_error(handle: Optional[SchemaHandle]) -> str:
	if handle is None:
		return ""
	return handle.error


def destroy(handle: Optional[SchemaHandle]) -> None:
	if handle is not None:
		handle.destroy()


__all__ = ["SchemaHandle", "parse", "is_success", "get_error", "destroy"]
