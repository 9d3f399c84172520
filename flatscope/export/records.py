# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Flat export records.

One fixed-shape record per declaration kind, holding only scalars, interned
text and 0-based positions/ranges. Every field has a zero default, and the
all-default instance of each record is its "not found" sentinel: it is falsy,
so `if not info:` is the idiomatic miss check.

`namespace` is None for declarations in the root namespace.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from flatscope.core.span import EMPTY_RANGE, Range


class _Record:
	name: str

	def __bool__(self) -> bool:
		return bool(self.name)


@dataclass(frozen=True)
class StructInfo(_Record):
	name: str = ""
	qualified_name: str = ""
	namespace: Optional[str] = None
	file: str = ""
	doc: str = ""
	line: int = 0
	col: int = 0
	is_table: bool = False
	is_predeclared: bool = False
	bytesize: int = 0
	minalign: int = 0

	@property
	def is_struct(self) -> bool:
		return bool(self.name) and not self.is_table


@dataclass(frozen=True)
class FieldInfo(_Record):
	name: str = ""
	type_name: str = ""
	base_type_name: str = ""
	doc: str = ""
	line: int = 0
	col: int = 0
	type_range: Range = EMPTY_RANGE
	type_source: str = ""
	deprecated: bool = False
	has_id: bool = False
	id: int = 0
	default_value: str = ""


@dataclass(frozen=True)
class EnumInfo(_Record):
	name: str = ""
	qualified_name: str = ""
	namespace: Optional[str] = None
	file: str = ""
	doc: str = ""
	line: int = 0
	col: int = 0
	is_union: bool = False
	underlying_type: str = ""


@dataclass(frozen=True)
class EnumValInfo(_Record):
	name: str = ""
	# Declared tag identifier; differs from `name` for union members.
	label: str = ""
	doc: str = ""
	value: int = 0
	line: int = 0
	col: int = 0
	type_range: Range = EMPTY_RANGE
	type_source: str = ""


@dataclass(frozen=True)
class ServiceInfo(_Record):
	name: str = ""
	qualified_name: str = ""
	namespace: Optional[str] = None
	file: str = ""
	doc: str = ""
	line: int = 0
	col: int = 0


@dataclass(frozen=True)
class MethodInfo(_Record):
	name: str = ""
	doc: str = ""
	line: int = 0
	col: int = 0
	request_type: str = ""
	request_range: Range = EMPTY_RANGE
	request_source: str = ""
	response_type: str = ""
	response_range: Range = EMPTY_RANGE
	response_source: str = ""
	streaming: str = ""


@dataclass(frozen=True)
class AttributeInfo(_Record):
	name: str = ""
	is_known: bool = False
	doc: str = ""


@dataclass(frozen=True)
class IncludeInfo:
	including_file: str = ""
	included_file: str = ""

	def __bool__(self) -> bool:
		return bool(self.included_file)


@dataclass(frozen=True)
class RootTypeInfo(_Record):
	name: str = ""
	file: str = ""
	type_range: Range = EMPTY_RANGE
	type_source: str = ""


EMPTY_STRUCT = StructInfo()
EMPTY_FIELD = FieldInfo()
EMPTY_ENUM = EnumInfo()
EMPTY_ENUM_VAL = EnumValInfo()
EMPTY_SERVICE = ServiceInfo()
EMPTY_METHOD = MethodInfo()
EMPTY_ATTRIBUTE = AttributeInfo()
EMPTY_INCLUDE = IncludeInfo()
EMPTY_ROOT_TYPE = RootTypeInfo()


__all__ = [
	"StructInfo",
	"FieldInfo",
	"EnumInfo",
	"EnumValInfo",
	"ServiceInfo",
	"MethodInfo",
	"AttributeInfo",
	"IncludeInfo",
	"RootTypeInfo",
	"EMPTY_STRUCT",
	"EMPTY_FIELD",
	"EMPTY_ENUM",
	"EMPTY_ENUM_VAL",
	"EMPTY_SERVICE",
	"EMPTY_METHOD",
	"EMPTY_ATTRIBUTE",
	"EMPTY_INCLUDE",
	"EMPTY_ROOT_TYPE",
]
