# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Resolve parsed programs into a SchemaTree.

Pass 1 walks every program in definition order, tracking the active
namespace, and creates a definition object for every table, struct, enum,
union and service (enum values are computed here since they reference no
types). Attribute uses are checked against the registry as it stands at that
point, so user attributes must be declared before use.

Pass 2 binds type references. Because all definitions exist by then, forward
references need no special handling. A reference `X` seen from namespace
`a.b` is looked up as `a.b.X`, then `a.X`, then `X`.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple, Union

from flatscope.config import ParseOptions
from flatscope.core.diagnostics import SchemaError
from flatscope.core.span import Span
from flatscope.core.type_names import element_type, format_type
from flatscope.core.types_core import (
	INTEGER_BOUNDS,
	SCALAR_KEYWORDS,
	BaseType,
	FixedArray,
	Namespace,
	NamedEnum,
	NamedStruct,
	Primitive,
	TypeRef,
	Vector,
)
from flatscope.parser import SourceSet
from flatscope.parser import ast as parser_ast

from .attributes import builtin_registry
from .layout import compute_layout
from .model import EnumDef, EnumVal, FieldDef, RootType, RPCCall, SchemaTree, ServiceDef, StructDef

logger = logging.getLogger(__name__)

TypeDefinition = Union[StructDef, EnumDef]

_STREAMING_MODES = ("none", "client", "server", "bidi")


class SchemaResolver:
	def __init__(self, options: ParseOptions | None = None) -> None:
		self.options = options or ParseOptions()
		self.tree = SchemaTree(known_attributes=builtin_registry())
		self._types: Dict[str, TypeDefinition] = {}
		self._services: Dict[str, ServiceDef] = {}
		self._predecls: List[StructDef] = []
		self._pending_types: List[Tuple[parser_ast.TypeDecl, StructDef, Namespace]] = []
		self._pending_unions: List[Tuple[parser_ast.UnionDecl, EnumDef, Namespace]] = []
		self._pending_services: List[Tuple[parser_ast.RpcServiceDecl, ServiceDef, Namespace]] = []
		self._root_decl: Optional[Tuple[parser_ast.RootTypeDecl, Namespace, str]] = None

	def resolve(self, sources: SourceSet) -> SchemaTree:
		for program in sources.programs:
			self._declare(program, is_root=program is sources.programs[-1])
		for decl, struct_def, ns in self._pending_types:
			self._resolve_fields(decl, struct_def, ns)
		for decl, enum_def, ns in self._pending_unions:
			self._resolve_union_values(decl, enum_def, ns)
		for decl, service, ns in self._pending_services:
			self._resolve_calls(decl, service, ns)
		if self._root_decl is not None:
			self._resolve_root_type(*self._root_decl)

		self.tree.structs.extend(self._predecls)
		done: set = set()
		for struct_def in self.tree.structs:
			compute_layout(struct_def, done)
		self.tree.files_included_per_file = sources.includes
		return self.tree

	# -- pass 1 ---------------------------------------------------------

	def _declare(self, program: parser_ast.Program, *, is_root: bool) -> None:
		file = program.file
		ns = Namespace()
		for item in program.items:
			if isinstance(item, parser_ast.NamespaceDecl):
				ns = Namespace.parse(item.name)
			elif isinstance(item, parser_ast.AttributeDecl):
				self.tree.known_attributes.setdefault(item.name, False)
				if item.doc:
					self.tree.attribute_docs[item.name] = list(item.doc)
			elif isinstance(item, parser_ast.TypeDecl):
				self._declare_type(item, ns, file)
			elif isinstance(item, parser_ast.EnumDecl):
				self._declare_enum(item, ns, file)
			elif isinstance(item, parser_ast.UnionDecl):
				attrs = self._check_attrs(item.attrs, file)
				enum_def = EnumDef(
					name=item.name,
					namespace=ns,
					file=file,
					span=Span.from_loc(item.loc, file),
					doc=list(item.doc),
					attributes=attrs,
					is_union=True,
					underlying=BaseType.UTYPE,
				)
				self._register(enum_def, item.loc, file)
				self.tree.enums.append(enum_def)
				self._pending_unions.append((item, enum_def, ns))
			elif isinstance(item, parser_ast.RpcServiceDecl):
				self._declare_service(item, ns, file)
			elif isinstance(item, parser_ast.RootTypeDecl):
				if is_root:
					self._root_decl = (item, ns, file)
			elif isinstance(item, parser_ast.FileIdentifierDecl):
				if len(item.value.encode("utf-8")) != 4:
					raise SchemaError(
						f"file_identifier must be exactly 4 characters: {item.value}",
						loc=item.loc,
						file=file,
					)
				if is_root:
					self.tree.file_identifier = item.value
			elif isinstance(item, parser_ast.FileExtensionDecl):
				if is_root:
					self.tree.file_extension = item.value

	def _declare_type(self, decl: parser_ast.TypeDecl, ns: Namespace, file: str) -> None:
		struct_def = StructDef(
			name=decl.name,
			namespace=ns,
			file=file,
			span=Span.from_loc(decl.loc, file),
			doc=list(decl.doc),
			attributes=self._check_attrs(decl.attrs, file),
			fixed=decl.fixed,
			minalign=1,
		)
		for fd in decl.fields:
			self._check_attrs(fd.attrs, file)
		self._register(struct_def, decl.loc, file)
		self.tree.structs.append(struct_def)
		self._pending_types.append((decl, struct_def, ns))

	def _declare_enum(self, decl: parser_ast.EnumDecl, ns: Namespace, file: str) -> None:
		attrs = self._check_attrs(decl.attrs, file)
		underlying = self._enum_underlying(decl.underlying, file)
		enum_def = EnumDef(
			name=decl.name,
			namespace=ns,
			file=file,
			span=Span.from_loc(decl.loc, file),
			doc=list(decl.doc),
			attributes=attrs,
			underlying=underlying,
		)
		self._register(enum_def, decl.loc, file)

		bit_flags = "bit_flags" in attrs
		low, high = INTEGER_BOUNDS[underlying]
		seen: set = set()
		next_value = 0
		for val in decl.values:
			if val.name in seen:
				raise SchemaError(f"enum value already exists: {val.name}", loc=val.loc, file=file)
			seen.add(val.name)
			value = val.value if val.value is not None else next_value
			next_value = value + 1
			if bit_flags:
				if value < 0 or value >= underlying.size * 8:
					raise SchemaError(
						f"bit flag out of range of underlying integral type: {val.name}",
						loc=val.loc,
						file=file,
					)
				value = 1 << value
			if not low <= value <= high:
				raise SchemaError(
					f"enum value does not fit [{low}; {high}]: {val.name} = {value}",
					loc=val.loc,
					file=file,
				)
			enum_def.values.append(EnumVal(name=val.name, value=value, span=Span.from_loc(val.loc, file), doc=list(val.doc)))
		self.tree.enums.append(enum_def)

	def _enum_underlying(self, expr: parser_ast.TypeExpr, file: str) -> BaseType:
		kind = SCALAR_KEYWORDS.get(expr.name) if expr.kind == "named" else None
		if kind is None or not kind.is_integer:
			raise SchemaError("underlying enum type must be integral", loc=expr.loc, file=file)
		return kind

	def _declare_service(self, decl: parser_ast.RpcServiceDecl, ns: Namespace, file: str) -> None:
		service = ServiceDef(
			name=decl.name,
			namespace=ns,
			file=file,
			span=Span.from_loc(decl.loc, file),
			doc=list(decl.doc),
			attributes=self._check_attrs(decl.attrs, file),
		)
		for method in decl.methods:
			attrs = self._check_attrs(method.attrs, file)
			streaming = attrs.get("streaming")
			if streaming is not None and streaming not in _STREAMING_MODES:
				raise SchemaError(
					f"streaming attribute must be one of: {', '.join(_STREAMING_MODES)}",
					loc=method.loc,
					file=file,
				)
		qualified = service.qualified_name
		if qualified in self._services:
			raise SchemaError(f"service already exists: {qualified}", loc=decl.loc, file=file)
		self._services[qualified] = service
		self.tree.services.append(service)
		self._pending_services.append((decl, service, ns))

	def _register(self, definition: TypeDefinition, loc, file: str) -> None:
		qualified = definition.qualified_name
		if qualified in self._types:
			raise SchemaError(f"datatype already exists: {qualified}", loc=loc, file=file)
		self._types[qualified] = definition

	def _check_attrs(self, attrs: Sequence[parser_ast.Attr], file: str) -> Dict[str, Optional[str]]:
		out: Dict[str, Optional[str]] = {}
		for attr in attrs:
			if attr.name not in self.tree.known_attributes:
				raise SchemaError(
					f"user define attributes must be declared before use: {attr.name}",
					loc=attr.loc,
					file=file,
				)
			out[attr.name] = attr.value
		return out

	# -- pass 2 ---------------------------------------------------------

	def _resolve_fields(self, decl: parser_ast.TypeDecl, struct_def: StructDef, ns: Namespace) -> None:
		file = struct_def.file
		names: set = set()

		def _add(field_def: FieldDef, loc) -> None:
			if field_def.name in names:
				raise SchemaError(f"field already exists: {field_def.name}", loc=loc, file=file)
			names.add(field_def.name)
			struct_def.fields.append(field_def)

		for fd in decl.fields:
			ty = self._resolve_type(fd.type_expr, ns, file)
			if not struct_def.fixed and isinstance(ty, FixedArray):
				raise SchemaError(
					"fixed-length array in table must be wrapped in struct",
					loc=fd.type_expr.loc,
					file=file,
				)
			attrs = {a.name: a.value for a in fd.attrs}
			field_id = _int_attr(attrs, "id", fd, file)
			span = Span.from_loc(fd.loc, file)
			type_span = Span.from_loc(fd.type_expr.loc, file)

			union = _union_of(ty)
			if union is not None:
				utype: TypeRef = NamedEnum(union, BaseType.UTYPE)
				if isinstance(ty, Vector):
					utype = Vector(utype)
				_add(
					FieldDef(
						name=f"{fd.name}_type",
						type=utype,
						span=span,
						type_span=type_span,
						id=field_id - 1 if field_id is not None else None,
						synthetic=True,
					),
					fd.loc,
				)
			_add(
				FieldDef(
					name=fd.name,
					type=ty,
					span=span,
					type_span=type_span,
					type_text=fd.type_expr.text,
					doc=list(fd.doc),
					attributes=attrs,
					default=fd.default,
					id=field_id,
				),
				fd.loc,
			)

	def _resolve_union_values(self, decl: parser_ast.UnionDecl, enum_def: EnumDef, ns: Namespace) -> None:
		file = enum_def.file
		seen: set = set()
		next_value = 1
		for val in decl.values:
			ty = self._resolve_type(val.type_expr, ns, file)
			if not (isinstance(ty, NamedStruct) or ty == Primitive(BaseType.STRING)):
				raise SchemaError(
					f"type referenced in union must be a table, struct or string: {val.type_expr.name}",
					loc=val.type_expr.loc,
					file=file,
				)
			label = val.alias or val.type_expr.name.replace(".", "_")
			if label in seen:
				raise SchemaError(f"enum value already exists: {label}", loc=val.loc, file=file)
			seen.add(label)
			value = val.value if val.value is not None else next_value
			next_value = value + 1
			enum_def.values.append(
				EnumVal(
					name=label,
					value=value,
					span=Span.from_loc(val.loc, file),
					doc=list(val.doc),
					union_type=ty,
					type_span=Span.from_loc(val.type_expr.loc, file),
					type_text=val.type_expr.text,
				)
			)

	def _resolve_calls(self, decl: parser_ast.RpcServiceDecl, service: ServiceDef, ns: Namespace) -> None:
		file = service.file
		seen: set = set()
		for method in decl.methods:
			if method.name in seen:
				raise SchemaError(f"rpc method already exists: {method.name}", loc=method.loc, file=file)
			seen.add(method.name)
			request = self._table_ref(method.request, ns, file, "rpc request and response types must be tables")
			response = self._table_ref(method.response, ns, file, "rpc request and response types must be tables")
			service.calls.append(
				RPCCall(
					name=method.name,
					request=request,
					response=response,
					span=Span.from_loc(method.loc, file),
					doc=list(method.doc),
					attributes={a.name: a.value for a in method.attrs},
					request_span=Span.from_loc(method.request.loc, file),
					request_text=method.request.text,
					response_span=Span.from_loc(method.response.loc, file),
					response_text=method.response.text,
				)
			)

	def _resolve_root_type(self, decl: parser_ast.RootTypeDecl, ns: Namespace, file: str) -> None:
		struct_def = self._table_ref(decl.type_expr, ns, file, "root type must be a table")
		self.tree.root_type = RootType(
			struct_def=struct_def,
			file=file,
			span=Span.from_loc(decl.type_expr.loc, file),
			text=decl.type_expr.text,
		)

	def _table_ref(self, expr: parser_ast.TypeExpr, ns: Namespace, file: str, message: str) -> StructDef:
		ty = self._resolve_type(expr, ns, file)
		if not isinstance(ty, NamedStruct) or not isinstance(ty.ref, StructDef) or ty.ref.fixed:
			raise SchemaError(f"{message}: {expr.text or format_type(ty)}", loc=expr.loc, file=file)
		return ty.ref

	def _resolve_type(self, expr: parser_ast.TypeExpr, ns: Namespace, file: str) -> TypeRef:
		if expr.kind == "vector":
			return Vector(self._resolve_type(expr.element, ns, file))
		if expr.kind == "array":
			return FixedArray(self._resolve_type(expr.element, ns, file), expr.length)
		scalar = SCALAR_KEYWORDS.get(expr.name)
		if scalar is not None:
			return Primitive(scalar)
		target = self._lookup(expr.name, ns)
		if target is None:
			target = self._predeclare(expr, ns, file)
		if isinstance(target, EnumDef):
			return NamedEnum(target, BaseType.UTYPE if target.is_union else target.underlying)
		return NamedStruct(target)

	def _lookup(self, name: str, ns: Namespace) -> Optional[TypeDefinition]:
		for scope in ns.outward():
			found = self._types.get(scope.qualify(name))
			if found is not None:
				return found
		return None

	def _predeclare(self, expr: parser_ast.TypeExpr, ns: Namespace, file: str) -> StructDef:
		if not self.options.allow_unresolved:
			raise SchemaError(
				f"type referenced but not defined (check namespace): {expr.name}",
				loc=expr.loc,
				file=file,
			)
		*prefix, name = expr.name.split(".")
		struct_def = StructDef(
			name=name,
			namespace=Namespace(ns.components + tuple(prefix)),
			file=file,
			span=Span.from_loc(expr.loc, file),
			predecl=True,
		)
		logger.debug("predeclaring unresolved type %s", struct_def.qualified_name)
		self._types[struct_def.qualified_name] = struct_def
		self._predecls.append(struct_def)
		return struct_def


def _union_of(ty: TypeRef) -> Optional[EnumDef]:
	inner = element_type(ty) if isinstance(ty, Vector) else ty
	if isinstance(inner, NamedEnum) and isinstance(inner.ref, EnumDef) and inner.ref.is_union:
		return inner.ref
	return None


def _int_attr(attrs: Dict[str, Optional[str]], name: str, fd: parser_ast.FieldDecl, file: str) -> Optional[int]:
	if name not in attrs:
		return None
	raw = attrs[name]
	try:
		return int(raw) if raw is not None else None
	except ValueError:
		raise SchemaError(f"{name} attribute must be an integer: {raw}", loc=fd.loc, file=file) from None


def resolve_sources(sources: SourceSet, options: ParseOptions | None = None) -> SchemaTree:
	return SchemaResolver(options).resolve(sources)


__all__ = ["SchemaResolver", "resolve_sources"]
