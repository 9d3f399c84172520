# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Schema front-end: parses a root schema text and every file it (transitively)
includes.

Include resolution order for `include "x.fbs";` inside file F:
  1. the directory containing F (skipped when F has no file identity),
  2. each caller-supplied include path, in order.

There is no implicit current-working-directory root; callers that want one pass
it explicitly. Each file is parsed once; every include statement is still
recorded as an edge of the include graph.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Sequence

from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from flatscope.core.diagnostics import SchemaError

from . import ast as parser_ast
from .parser import parse_program

logger = logging.getLogger(__name__)


@dataclass
class SourceSet:
	"""
	All programs loaded for one parse, in definition order.

	Definition order is include-first (post-order): a file's includes are
	loaded before its own declarations, the way flatc processes includes at the
	top of a file.
	"""

	root: str
	programs: List[parser_ast.Program] = field(default_factory=list)
	# including file -> ordered set of included files
	includes: Dict[str, Dict[str, None]] = field(default_factory=dict)


def load_sources(source: str, filename: str = "", include_paths: Sequence[str] = ()) -> SourceSet:
	"""Parse `source` (identified as `filename`) and everything it includes."""
	sources = SourceSet(root=filename)
	loading = {_file_key(filename)} if filename else set()
	_load(sources, source, filename, list(include_paths), loading)
	return sources


def _load(
	sources: SourceSet,
	text: str,
	filename: str,
	include_paths: List[str],
	loaded: set,
) -> None:
	try:
		program = parse_program(text, filename)
	except UnexpectedInput as err:
		raise syntax_error(err, text, filename) from err
	for inc in program.includes:
		resolved = _resolve_include(inc.path, filename, include_paths)
		if resolved is None:
			raise SchemaError(f"unable to locate include file: {inc.path}", loc=inc.loc, file=filename)
		sources.includes.setdefault(filename, {})[resolved] = None
		key = _file_key(resolved)
		if key in loaded:
			continue
		loaded.add(key)
		logger.debug("loading include %s (from %s)", resolved, filename or "<input>")
		try:
			included_text = Path(resolved).read_text(encoding="utf-8")
		except OSError as err:
			raise SchemaError(f"unable to load include file: {inc.path}: {err.strerror}", loc=inc.loc, file=filename) from err
		except UnicodeDecodeError as err:
			raise SchemaError(f"unable to load include file: {inc.path}: {err.reason}", loc=inc.loc, file=filename) from err
		_load(sources, included_text, resolved, include_paths, loaded)
	sources.programs.append(program)


def syntax_error(err: UnexpectedInput, text: str, filename: str) -> SchemaError:
	"""Convert a lark failure into a one-line SchemaError pinned to its location."""
	line = getattr(err, "line", -1)
	column = getattr(err, "column", -1)
	if isinstance(err, UnexpectedEOF) or not isinstance(line, int) or line < 1:
		lines = text.split("\n")
		line, column = len(lines), len(lines[-1]) + 1
		message = "unexpected end of file"
	elif isinstance(err, UnexpectedToken):
		found = err.token.value if err.token.type != "$END" else "end of file"
		message = f"unexpected token: {found}"
		expected = sorted(name for name in err.expected if not name.startswith("__"))
		if expected:
			message += f", expecting one of: {', '.join(expected)}"
	elif isinstance(err, UnexpectedCharacters):
		message = f"illegal character: {err.char}"
	else:
		message = str(err).splitlines()[0]
	if not isinstance(column, int):
		column = 1
	return SchemaError(message, loc=parser_ast.Located(line=line, column=column), file=filename, phase="parser")


def _resolve_include(name: str, including: str, include_paths: Sequence[str]) -> str | None:
	roots: List[str] = []
	if including:
		roots.append(os.path.dirname(including))
	roots.extend(include_paths)
	if os.path.isabs(name):
		roots = [""]
	for root in roots:
		candidate = os.path.join(root, name) if root else name
		if os.path.isfile(candidate):
			return os.path.abspath(candidate)
	return None


def _file_key(path: str) -> str:
	return os.path.normcase(os.path.abspath(path))


__all__ = ["SourceSet", "load_sources", "parse_program"]
