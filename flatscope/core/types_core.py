# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Type descriptors shared by the resolver and the export layer.

A TypeRef is a small tagged variant: Primitive, NamedStruct, NamedEnum,
Vector and FixedArray. Named variants point at resolved definitions (anything
with `name` and `namespace`); a None ref stands for a reference the resolver
could not bind.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Protocol, Sequence, Tuple


class BaseType(Enum):
	"""Base kinds understood by the schema language, with their canonical keyword and byte size."""

	NONE = ("none", 1)
	UTYPE = ("utype", 1)
	BOOL = ("bool", 1)
	BYTE = ("byte", 1)
	UBYTE = ("ubyte", 1)
	SHORT = ("short", 2)
	USHORT = ("ushort", 2)
	INT = ("int", 4)
	UINT = ("uint", 4)
	LONG = ("long", 8)
	ULONG = ("ulong", 8)
	FLOAT = ("float", 4)
	DOUBLE = ("double", 8)
	STRING = ("string", 4)
	VECTOR = ("vector", 4)
	STRUCT = ("struct", 0)
	UNION = ("union", 4)
	ARRAY = ("array", 0)

	def __init__(self, keyword: str, size: int) -> None:
		self.keyword = keyword
		self.size = size

	@property
	def is_scalar(self) -> bool:
		return self in _SCALARS

	@property
	def is_integer(self) -> bool:
		return self in _INTEGERS


_INTEGERS = frozenset(
	{
		BaseType.UTYPE,
		BaseType.BOOL,
		BaseType.BYTE,
		BaseType.UBYTE,
		BaseType.SHORT,
		BaseType.USHORT,
		BaseType.INT,
		BaseType.UINT,
		BaseType.LONG,
		BaseType.ULONG,
	}
)
_SCALARS = _INTEGERS | {BaseType.FLOAT, BaseType.DOUBLE}

# Keywords accepted in type position, including the sized aliases.
SCALAR_KEYWORDS: Dict[str, BaseType] = {
	"bool": BaseType.BOOL,
	"byte": BaseType.BYTE,
	"ubyte": BaseType.UBYTE,
	"short": BaseType.SHORT,
	"ushort": BaseType.USHORT,
	"int": BaseType.INT,
	"uint": BaseType.UINT,
	"long": BaseType.LONG,
	"ulong": BaseType.ULONG,
	"float": BaseType.FLOAT,
	"double": BaseType.DOUBLE,
	"string": BaseType.STRING,
	"int8": BaseType.BYTE,
	"uint8": BaseType.UBYTE,
	"int16": BaseType.SHORT,
	"uint16": BaseType.USHORT,
	"int32": BaseType.INT,
	"uint32": BaseType.UINT,
	"int64": BaseType.LONG,
	"uint64": BaseType.ULONG,
	"float32": BaseType.FLOAT,
	"float64": BaseType.DOUBLE,
}

# Inclusive value bounds for enum underlying types.
INTEGER_BOUNDS: Dict[BaseType, Tuple[int, int]] = {
	BaseType.BOOL: (0, 1),
	BaseType.BYTE: (-(2**7), 2**7 - 1),
	BaseType.UBYTE: (0, 2**8 - 1),
	BaseType.UTYPE: (0, 2**8 - 1),
	BaseType.SHORT: (-(2**15), 2**15 - 1),
	BaseType.USHORT: (0, 2**16 - 1),
	BaseType.INT: (-(2**31), 2**31 - 1),
	BaseType.UINT: (0, 2**32 - 1),
	BaseType.LONG: (-(2**63), 2**63 - 1),
	BaseType.ULONG: (0, 2**64 - 1),
}


@dataclass(frozen=True)
class Namespace:
	"""Ordered name components; equality is component-sequence equality."""

	components: Tuple[str, ...] = ()

	@classmethod
	def parse(cls, dotted: str | None) -> "Namespace":
		if not dotted:
			return cls()
		return cls(tuple(part for part in dotted.split(".") if part))

	def __str__(self) -> str:
		return ".".join(self.components)

	def __bool__(self) -> bool:
		return bool(self.components)

	def qualify(self, name: str) -> str:
		if not self.components:
			return name
		return f"{self}.{name}"

	def outward(self) -> Sequence["Namespace"]:
		"""This namespace and each enclosing one, innermost first, ending with the root."""
		return [Namespace(self.components[:i]) for i in range(len(self.components), -1, -1)]


class Named(Protocol):
	name: str
	namespace: Namespace


class TypeRef:
	"""Base class of the type variants."""

	__slots__ = ()


@dataclass(frozen=True)
class Primitive(TypeRef):
	kind: BaseType


@dataclass(frozen=True, eq=False)
class NamedStruct(TypeRef):
	"""Reference to a table or struct definition."""

	ref: Optional[Named]


@dataclass(frozen=True, eq=False)
class NamedEnum(TypeRef):
	"""
	Reference to an enum or union definition.

	`underlying` is the integer kind values are stored as (UTYPE for unions),
	used when the reference cannot be bound to a definition.
	"""

	ref: Optional[Named]
	underlying: BaseType = BaseType.UBYTE


@dataclass(frozen=True)
class Vector(TypeRef):
	element: TypeRef


@dataclass(frozen=True)
class FixedArray(TypeRef):
	element: TypeRef
	length: int


__all__ = [
	"BaseType",
	"SCALAR_KEYWORDS",
	"INTEGER_BOUNDS",
	"Namespace",
	"Named",
	"TypeRef",
	"Primitive",
	"NamedStruct",
	"NamedEnum",
	"Vector",
	"FixedArray",
]
