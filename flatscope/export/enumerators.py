# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Index-addressed, bounds-checked views over a SchemaHandle.

Every kind follows the same contract:

	count_<kind>(handle[, parent]) -> int     0 for absent handles / bad parents
	get_<kind>(handle[, parent], i) -> Info  sentinel for any index outside 0..count-1

Records carry 0-based positions and text interned in the handle's pool.

Fields keep a gap-preserving contract: a union-typed table field `u` is
preceded by a compiler-generated discriminator `u_type`. The discriminator
still occupies an index (and is counted by `count_fields`), but `get_field`
returns EMPTY_FIELD for it. `visible_fields` skips those gaps for callers that
only want what the schema author wrote.
"""

from __future__ import annotations

import os
from typing import Iterator, List, Optional, Sequence, TypeVar

from flatscope.core.span import span_range, span_start
from flatscope.core.type_names import element_type, format_base_type, format_type
from flatscope.core.types_core import NamedEnum, Namespace
from flatscope.schema.model import EnumDef, FieldDef, SchemaTree, StructDef

from .handle import SchemaHandle
from .records import (
	EMPTY_ATTRIBUTE,
	EMPTY_ENUM,
	EMPTY_ENUM_VAL,
	EMPTY_FIELD,
	EMPTY_INCLUDE,
	EMPTY_METHOD,
	EMPTY_ROOT_TYPE,
	EMPTY_SERVICE,
	EMPTY_STRUCT,
	AttributeInfo,
	EnumInfo,
	EnumValInfo,
	FieldInfo,
	IncludeInfo,
	MethodInfo,
	RootTypeInfo,
	ServiceInfo,
	StructInfo,
)

T = TypeVar("T")

_SYNTHETIC_SUFFIX = "_type"


def _tree(handle: Optional[SchemaHandle]) -> Optional[SchemaTree]:
	if handle is None:
		return None
	return handle.tree


def _at(items: Sequence[T], index: int) -> Optional[T]:
	if 0 <= index < len(items):
		return items[index]
	return None


def _namespace(handle: SchemaHandle, ns: Namespace) -> Optional[str]:
	if not ns:
		return None
	return handle.intern(str(ns))


def is_synthetic_discriminator(field_def: FieldDef) -> bool:
	"""A `<name>_type` field whose type (or vector element type) is a union enum."""
	if not field_def.name.endswith(_SYNTHETIC_SUFFIX):
		return False
	element = element_type(field_def.type)
	return isinstance(element, NamedEnum) and isinstance(element.ref, EnumDef) and element.ref.is_union


# -- structs / tables -----------------------------------------------------


def count_structs(handle: Optional[SchemaHandle]) -> int:
	tree = _tree(handle)
	return len(tree.structs) if tree is not None else 0


def _struct_def(handle: Optional[SchemaHandle], index: int) -> Optional[StructDef]:
	tree = _tree(handle)
	if tree is None:
		return None
	return _at(tree.structs, index)


def get_struct(handle: Optional[SchemaHandle], index: int) -> StructInfo:
	struct_def = _struct_def(handle, index)
	if struct_def is None:
		return EMPTY_STRUCT
	pos = span_start(struct_def.span)
	return StructInfo(
		name=handle.intern(struct_def.name),
		qualified_name=handle.intern(struct_def.qualified_name),
		namespace=_namespace(handle, struct_def.namespace),
		file=handle.intern(struct_def.file),
		doc=handle.join_doc(struct_def.doc),
		line=pos.line,
		col=pos.col,
		is_table=not struct_def.fixed,
		is_predeclared=struct_def.predecl,
		bytesize=struct_def.bytesize,
		minalign=struct_def.minalign,
	)


# -- fields -----------------------------------------------------------------


def count_fields(handle: Optional[SchemaHandle], struct_index: int) -> int:
	struct_def = _struct_def(handle, struct_index)
	return len(struct_def.fields) if struct_def is not None else 0


def get_field(handle: Optional[SchemaHandle], struct_index: int, field_index: int) -> FieldInfo:
	struct_def = _struct_def(handle, struct_index)
	if struct_def is None:
		return EMPTY_FIELD
	field_def = _at(struct_def.fields, field_index)
	if field_def is None or is_synthetic_discriminator(field_def):
		return EMPTY_FIELD
	pos = span_start(field_def.span)
	return FieldInfo(
		name=handle.intern(field_def.name),
		type_name=handle.intern(format_type(field_def.type)),
		base_type_name=handle.intern(format_base_type(field_def.type)),
		doc=handle.join_doc(field_def.doc),
		line=pos.line,
		col=pos.col,
		type_range=span_range(field_def.type_span),
		type_source=handle.intern(field_def.type_text),
		deprecated=field_def.deprecated,
		has_id=field_def.id is not None,
		id=field_def.id if field_def.id is not None else 0,
		default_value=handle.intern(field_def.default or ""),
	)


def visible_fields(handle: Optional[SchemaHandle], struct_index: int) -> Iterator[FieldInfo]:
	"""Yield the non-sentinel fields of one struct, in declaration order."""
	for field_index in range(count_fields(handle, struct_index)):
		info = get_field(handle, struct_index, field_index)
		if info:
			yield info


# -- enums / unions ----------------------------------------------------------


def count_enums(handle: Optional[SchemaHandle]) -> int:
	tree = _tree(handle)
	return len(tree.enums) if tree is not None else 0


def _enum_def(handle: Optional[SchemaHandle], index: int) -> Optional[EnumDef]:
	tree = _tree(handle)
	if tree is None:
		return None
	return _at(tree.enums, index)


def get_enum(handle: Optional[SchemaHandle], index: int) -> EnumInfo:
	enum_def = _enum_def(handle, index)
	if enum_def is None:
		return EMPTY_ENUM
	pos = span_start(enum_def.span)
	return EnumInfo(
		name=handle.intern(enum_def.name),
		qualified_name=handle.intern(enum_def.qualified_name),
		namespace=_namespace(handle, enum_def.namespace),
		file=handle.intern(enum_def.file),
		doc=handle.join_doc(enum_def.doc),
		line=pos.line,
		col=pos.col,
		is_union=enum_def.is_union,
		underlying_type=handle.intern(format_type(enum_def.underlying_type)),
	)


def count_enum_vals(handle: Optional[SchemaHandle], enum_index: int) -> int:
	enum_def = _enum_def(handle, enum_index)
	return len(enum_def.values) if enum_def is not None else 0


def get_enum_val(handle: Optional[SchemaHandle], enum_index: int, val_index: int) -> EnumValInfo:
	enum_def = _enum_def(handle, enum_index)
	if enum_def is None:
		return EMPTY_ENUM_VAL
	val = _at(enum_def.values, val_index)
	if val is None:
		return EMPTY_ENUM_VAL
	# Union members are named after the type they carry.
	name = format_type(val.union_type) if val.union_type is not None else val.name
	pos = span_start(val.span)
	return EnumValInfo(
		name=handle.intern(name),
		label=handle.intern(val.name),
		doc=handle.join_doc(val.doc),
		value=val.value,
		line=pos.line,
		col=pos.col,
		type_range=span_range(val.type_span),
		type_source=handle.intern(val.type_text),
	)


# -- rpc services -----------------------------------------------------------


def count_services(handle: Optional[SchemaHandle]) -> int:
	tree = _tree(handle)
	return len(tree.services) if tree is not None else 0


def get_service(handle: Optional[SchemaHandle], index: int) -> ServiceInfo:
	tree = _tree(handle)
	service = _at(tree.services, index) if tree is not None else None
	if service is None:
		return EMPTY_SERVICE
	pos = span_start(service.span)
	return ServiceInfo(
		name=handle.intern(service.name),
		qualified_name=handle.intern(service.qualified_name),
		namespace=_namespace(handle, service.namespace),
		file=handle.intern(service.file),
		doc=handle.join_doc(service.doc),
		line=pos.line,
		col=pos.col,
	)


def count_methods(handle: Optional[SchemaHandle], service_index: int) -> int:
	tree = _tree(handle)
	service = _at(tree.services, service_index) if tree is not None else None
	return len(service.calls) if service is not None else 0


def get_method(handle: Optional[SchemaHandle], service_index: int, method_index: int) -> MethodInfo:
	tree = _tree(handle)
	service = _at(tree.services, service_index) if tree is not None else None
	call = _at(service.calls, method_index) if service is not None else None
	if call is None:
		return EMPTY_METHOD
	pos = span_start(call.span)
	return MethodInfo(
		name=handle.intern(call.name),
		doc=handle.join_doc(call.doc),
		line=pos.line,
		col=pos.col,
		request_type=handle.intern(call.request.qualified_name),
		request_range=span_range(call.request_span),
		request_source=handle.intern(call.request_text),
		response_type=handle.intern(call.response.qualified_name),
		response_range=span_range(call.response_span),
		response_source=handle.intern(call.response_text),
		streaming=handle.intern(call.attributes.get("streaming") or ""),
	)


# -- attributes -------------------------------------------------------------


def _user_attributes(tree: Optional[SchemaTree]) -> List[str]:
	if tree is None:
		return []
	return [name for name, known in tree.known_attributes.items() if not known]


def count_attributes(handle: Optional[SchemaHandle]) -> int:
	"""Number of user-defined attributes; built-in attributes are never listed."""
	return len(_user_attributes(_tree(handle)))


def get_attribute(handle: Optional[SchemaHandle], index: int) -> AttributeInfo:
	tree = _tree(handle)
	name = _at(_user_attributes(tree), index)
	if name is None:
		return EMPTY_ATTRIBUTE
	return AttributeInfo(
		name=handle.intern(name),
		is_known=False,
		doc=handle.join_doc(tree.attribute_docs.get(name, ())),
	)


def get_attribute_documentation(handle: Optional[SchemaHandle], name: str) -> str:
	tree = _tree(handle)
	if tree is None:
		return ""
	return handle.join_doc(tree.attribute_docs.get(name, ()))


# -- include graph ----------------------------------------------------------


def _includes_for(tree: Optional[SchemaTree], path: str) -> List[str]:
	if tree is None:
		return []
	graph = tree.files_included_per_file
	edges = graph.get(path)
	if edges is None and path:
		edges = graph.get(os.path.abspath(path))
	return list(edges) if edges else []


def count_includes(handle: Optional[SchemaHandle], path: str) -> int:
	"""Direct includes recorded for one file; unknown files have none."""
	return len(_includes_for(_tree(handle), path))


def get_include(handle: Optional[SchemaHandle], path: str, index: int) -> str:
	included = _at(_includes_for(_tree(handle), path), index)
	if included is None:
		return ""
	return handle.intern(included)


def count_files_with_includes(handle: Optional[SchemaHandle]) -> int:
	tree = _tree(handle)
	return len(tree.files_included_per_file) if tree is not None else 0


def get_file_with_includes(handle: Optional[SchemaHandle], index: int) -> str:
	tree = _tree(handle)
	path = _at(list(tree.files_included_per_file), index) if tree is not None else None
	if path is None:
		return ""
	return handle.intern(path)


def _all_edges(tree: Optional[SchemaTree]) -> List[tuple]:
	if tree is None:
		return []
	return [(src, dst) for src, targets in tree.files_included_per_file.items() for dst in targets]


def count_all_includes(handle: Optional[SchemaHandle]) -> int:
	"""Every recorded include edge across all files; targets repeat once per includer."""
	return len(_all_edges(_tree(handle)))


def get_all_include(handle: Optional[SchemaHandle], index: int) -> IncludeInfo:
	edge = _at(_all_edges(_tree(handle)), index)
	if edge is None:
		return EMPTY_INCLUDE
	src, dst = edge
	return IncludeInfo(including_file=handle.intern(src), included_file=handle.intern(dst))


# -- root type --------------------------------------------------------------


def has_root_type(handle: Optional[SchemaHandle]) -> bool:
	tree = _tree(handle)
	return tree is not None and tree.root_type is not None


def get_root_type(handle: Optional[SchemaHandle]) -> RootTypeInfo:
	tree = _tree(handle)
	if tree is None or tree.root_type is None:
		return EMPTY_ROOT_TYPE
	root = tree.root_type
	return RootTypeInfo(
		name=handle.intern(root.struct_def.qualified_name),
		file=handle.intern(root.file),
		type_range=span_range(root.span),
		type_source=handle.intern(root.text),
	)


__all__ = [
	"is_synthetic_discriminator",
	"count_structs",
	"get_struct",
	"count_fields",
	"get_field",
	"visible_fields",
	"count_enums",
	"get_enum",
	"count_enum_vals",
	"get_enum_val",
	"count_services",
	"get_service",
	"count_methods",
	"get_method",
	"count_attributes",
	"get_attribute",
	"get_attribute_documentation",
	"count_includes",
	"get_include",
	"count_files_with_includes",
	"get_file_with_includes",
	"count_all_includes",
	"get_all_include",
	"has_root_type",
	"get_root_type",
]
