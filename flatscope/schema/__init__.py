"""
Resolved schema model and the resolver that builds it from parsed programs.

`build_schema` is the one-call front door: load the root text plus its
includes, then resolve. It raises lark's `UnexpectedInput` or `SchemaError`;
the export layer is what turns those into data.
"""

from __future__ import annotations

from flatscope.config import ParseOptions
from flatscope.parser import load_sources

from .model import EnumDef, EnumVal, FieldDef, RootType, RPCCall, SchemaTree, ServiceDef, StructDef
from .resolver import SchemaResolver, resolve_sources


def build_schema(source: str, filename: str = "", options: ParseOptions | None = None) -> SchemaTree:
	options = options or ParseOptions()
	sources = load_sources(source, filename, options.include_paths)
	return resolve_sources(sources, options)


__all__ = [
	"build_schema",
	"SchemaResolver",
	"resolve_sources",
	"SchemaTree",
	"StructDef",
	"FieldDef",
	"EnumDef",
	"EnumVal",
	"ServiceDef",
	"RPCCall",
	"RootType",
]
