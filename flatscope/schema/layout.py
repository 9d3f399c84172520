# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Fixed-size struct layout: byte size and minimum alignment.

Fields are laid out in declaration order, each padded to its natural
alignment (scalar size, nested struct alignment, array element alignment).
The struct's alignment is the largest field alignment unless `force_align`
raises it; the total size is padded to a multiple of that alignment. Tables
have no fixed layout and report size 0, alignment 1.
"""

from __future__ import annotations

from typing import Set, Tuple

from flatscope.core.diagnostics import SchemaError
from flatscope.core.type_names import format_type
from flatscope.core.types_core import FixedArray, NamedEnum, NamedStruct, Primitive, TypeRef

from .model import StructDef

_MAX_FORCE_ALIGN = 256


def _pad(size: int, align: int) -> int:
	return (size + align - 1) // align * align


def compute_layout(struct_def: StructDef, done: Set[int], visiting: Set[int] | None = None) -> None:
	"""Fill in bytesize/minalign for `struct_def` (and any struct it nests) once."""
	if id(struct_def) in done:
		return
	if not struct_def.fixed:
		struct_def.bytesize = 0
		struct_def.minalign = 1
		done.add(id(struct_def))
		return
	visiting = visiting if visiting is not None else set()
	if id(struct_def) in visiting:
		raise SchemaError(
			f"struct cannot contain itself: {struct_def.qualified_name}",
			loc=struct_def.span,
			file=struct_def.file,
		)
	visiting.add(id(struct_def))

	bytesize = 0
	minalign = 1
	for fd in struct_def.fields:
		size, align = _size_align(fd.type, done, visiting, fd.type_span, struct_def.file)
		minalign = max(minalign, align)
		bytesize = _pad(bytesize, align) + size

	force = struct_def.attributes.get("force_align")
	if force is not None:
		try:
			forced = int(force)
		except ValueError:
			forced = 0
		if forced < minalign or forced > _MAX_FORCE_ALIGN or forced & (forced - 1):
			raise SchemaError(
				"force_align must be a power of two integer ranging from the "
				f"struct's natural alignment {minalign} to {_MAX_FORCE_ALIGN}",
				loc=struct_def.span,
				file=struct_def.file,
			)
		minalign = forced

	struct_def.minalign = minalign
	struct_def.bytesize = _pad(bytesize, minalign)
	visiting.discard(id(struct_def))
	done.add(id(struct_def))


def _size_align(ty: TypeRef, done: Set[int], visiting: Set[int], loc, file: str) -> Tuple[int, int]:
	if isinstance(ty, Primitive) and ty.kind.is_scalar:
		return ty.kind.size, ty.kind.size
	if isinstance(ty, NamedEnum) and ty.ref is not None and not getattr(ty.ref, "is_union", False):
		size = ty.ref.underlying.size
		return size, size
	if isinstance(ty, NamedStruct) and isinstance(ty.ref, StructDef) and ty.ref.predecl:
		# Layout of an unresolved type is unknown.
		return 0, 1
	if isinstance(ty, NamedStruct) and isinstance(ty.ref, StructDef) and ty.ref.fixed:
		compute_layout(ty.ref, done, visiting)
		return ty.ref.bytesize, ty.ref.minalign
	if isinstance(ty, FixedArray):
		size, align = _size_align(ty.element, done, visiting, loc, file)
		return size * ty.length, align
	raise SchemaError(
		f"structs may contain only scalar or struct fields: {format_type(ty)}",
		loc=loc,
		file=file,
	)


__all__ = ["compute_layout"]
