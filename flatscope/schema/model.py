# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Resolved schema tree.

These are the definitions the resolver produces and the export layer reads.
Nothing outside the resolver mutates them. Spans stay in parser-native
numbering; documentation stays as a list of comment lines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from flatscope.core.span import Span
from flatscope.core.types_core import BaseType, Namespace, Primitive, TypeRef


@dataclass(eq=False)
class Definition:
	name: str
	namespace: Namespace = field(default_factory=Namespace)
	file: str = ""
	span: Span = field(default_factory=Span)
	doc: List[str] = field(default_factory=list)
	attributes: Dict[str, Optional[str]] = field(default_factory=dict)

	@property
	def qualified_name(self) -> str:
		return self.namespace.qualify(self.name)


@dataclass(eq=False)
class FieldDef:
	name: str
	type: TypeRef
	span: Span = field(default_factory=Span)
	type_span: Span = field(default_factory=Span)
	type_text: str = ""
	doc: List[str] = field(default_factory=list)
	attributes: Dict[str, Optional[str]] = field(default_factory=dict)
	default: Optional[str] = None
	id: Optional[int] = None
	synthetic: bool = False

	@property
	def deprecated(self) -> bool:
		return "deprecated" in self.attributes


@dataclass(eq=False)
class StructDef(Definition):
	fixed: bool = False
	predecl: bool = False
	bytesize: int = 0
	minalign: int = 1
	fields: List[FieldDef] = field(default_factory=list)


@dataclass(eq=False)
class EnumVal:
	# Tag identifier. For union members this is the alias, or the referenced
	# type name with dots replaced by underscores.
	name: str
	value: int = 0
	span: Span = field(default_factory=Span)
	doc: List[str] = field(default_factory=list)
	union_type: Optional[TypeRef] = None
	type_span: Span = field(default_factory=Span)
	type_text: str = ""


@dataclass(eq=False)
class EnumDef(Definition):
	is_union: bool = False
	underlying: BaseType = BaseType.INT
	values: List[EnumVal] = field(default_factory=list)

	@property
	def underlying_type(self) -> TypeRef:
		return Primitive(self.underlying)


@dataclass(eq=False)
class RPCCall:
	name: str
	request: StructDef
	response: StructDef
	span: Span = field(default_factory=Span)
	doc: List[str] = field(default_factory=list)
	attributes: Dict[str, Optional[str]] = field(default_factory=dict)
	request_span: Span = field(default_factory=Span)
	request_text: str = ""
	response_span: Span = field(default_factory=Span)
	response_text: str = ""


@dataclass(eq=False)
class ServiceDef(Definition):
	calls: List[RPCCall] = field(default_factory=list)


@dataclass(eq=False)
class RootType:
	struct_def: StructDef
	file: str = ""
	span: Span = field(default_factory=Span)
	text: str = ""


@dataclass
class SchemaTree:
	"""Everything one parse resolved, across the root file and its includes."""

	structs: List[StructDef] = field(default_factory=list)
	enums: List[EnumDef] = field(default_factory=list)
	services: List[ServiceDef] = field(default_factory=list)
	# attribute name -> True for built-in, False for user-declared
	known_attributes: Dict[str, bool] = field(default_factory=dict)
	attribute_docs: Dict[str, List[str]] = field(default_factory=dict)
	files_included_per_file: Dict[str, Dict[str, None]] = field(default_factory=dict)
	root_type: Optional[RootType] = None
	file_identifier: str = ""
	file_extension: str = ""


__all__ = [
	"Definition",
	"FieldDef",
	"StructDef",
	"EnumVal",
	"EnumDef",
	"RPCCall",
	"ServiceDef",
	"RootType",
	"SchemaTree",
]
