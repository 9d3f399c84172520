# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Canonical text for type descriptors.

`format_type` is total: every variant renders, and a named reference the
resolver could not bind falls back to the bare keyword of its storage kind.

	Vector(T)         -> "[T]"
	FixedArray(T, N)  -> "[T:N]"
	NamedStruct/Enum  -> "ns.Name" (or "Name" in the root namespace)
	Primitive         -> "int", "string", ...
"""

from __future__ import annotations

from .span import Position, Range
from .types_core import BaseType, FixedArray, NamedEnum, NamedStruct, Primitive, TypeRef, Vector


def format_type(ty: TypeRef) -> str:
	if isinstance(ty, Vector):
		return f"[{format_type(ty.element)}]"
	if isinstance(ty, FixedArray):
		return f"[{format_type(ty.element)}:{ty.length}]"
	if isinstance(ty, NamedStruct):
		if ty.ref is None:
			return BaseType.STRUCT.keyword
		return ty.ref.namespace.qualify(ty.ref.name)
	if isinstance(ty, NamedEnum):
		if ty.ref is None:
			return ty.underlying.keyword
		return ty.ref.namespace.qualify(ty.ref.name)
	if isinstance(ty, Primitive):
		return ty.kind.keyword
	raise TypeError(f"unknown type descriptor {ty!r}")


def element_type(ty: TypeRef) -> TypeRef:
	"""Unwrap exactly one vector/array level; scalars and named types are returned as-is."""
	if isinstance(ty, (Vector, FixedArray)):
		return ty.element
	return ty


def format_base_type(ty: TypeRef) -> str:
	return format_type(element_type(ty))


def extract_base_type_name(type_name: str) -> str:
	"""
	Strip one level of vector/array brackets from a display type name.

	"[Vec3]" -> "Vec3", "[uint:10]" -> "uint", "string" -> "string".
	"""
	if not type_name.startswith("["):
		return type_name
	end = type_name.rfind("]")
	if end <= 0:
		return type_name
	inner = type_name[1:end]
	colon = inner.rfind(":")
	if colon >= 0 and inner[colon + 1 :].isdigit():
		return inner[:colon]
	return inner


def inner_type_range(type_range: Range, type_name: str) -> Range:
	"""
	Narrow a bracketed type expression's range to just the element name.

	For "[Vec3]" spanning columns 10..16 this yields 11..15. Anything without
	brackets keeps its original range.
	"""
	if not type_name.startswith("[") or type_name.rfind("]") <= 0:
		return type_range
	base = extract_base_type_name(type_name)
	start = Position(type_range.start.line, type_range.start.col + 1)
	return Range(start, Position(start.line, start.col + len(base)))


__all__ = ["format_type", "element_type", "format_base_type", "extract_base_type_name", "inner_type_range"]
