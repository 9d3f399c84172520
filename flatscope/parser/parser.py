from __future__ import annotations

import codecs
from pathlib import Path
from typing import Dict, List, Optional

from lark import Lark, Token, Tree

from flatscope.core.diagnostics import SchemaError

from .ast import (
    Attr,
    AttributeDecl,
    EnumDecl,
    EnumValDecl,
    FieldDecl,
    FileExtensionDecl,
    FileIdentifierDecl,
    IncludeDecl,
    Located,
    NamespaceDecl,
    Program,
    RootTypeDecl,
    RpcMethodDecl,
    RpcServiceDecl,
    TypeDecl,
    TypeExpr,
    UnionDecl,
    UnionValDecl,
)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_TYPE_NODES = {"named_type", "vector_type", "array_type"}

# nesting limit for vector/array type expressions, as flatc
_MAX_PARSING_DEPTH = 64


class DocCommentCollector:
	"""
	Lexer callback that records `///` comments by line.

	Doc comments are %ignore'd by the grammar, so this is the only place they
	are seen. The collector is reset at the start of every parse.
	"""

	def __init__(self) -> None:
		self.lines: Dict[int, str] = {}
		self.misplaced: List[Token] = []
		self._source_lines: List[str] = []

	def reset(self, source: str = "") -> None:
		self.lines = {}
		self.misplaced = []
		self._source_lines = source.split("\n")

	def __call__(self, token: Token) -> Token:
		prefix = ""
		if 0 < token.line <= len(self._source_lines):
			prefix = self._source_lines[token.line - 1][: token.column - 1]
		if prefix.strip():
			# trailing `///` after code on the same line
			self.misplaced.append(token)
		else:
			self.lines[token.line] = token.value[3:].rstrip()
		return token


_DOC_COMMENTS = DocCommentCollector()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
	lexer_callbacks={"DOC_COMMENT": _DOC_COMMENTS},
)


def parse_program(source: str, file: str = "") -> Program:
	"""
	Parse one schema file into its syntactic Program.

	Raises lark's `UnexpectedInput` for grammar errors and `SchemaError` for
	malformed input the grammar cannot rule out (non-integer enum values,
	zero-length arrays, bad string escapes, trailing doc comments, type
	expressions nested too deeply).
	"""
	_DOC_COMMENTS.reset(source)
	tree = _PARSER.parse(source)
	if _DOC_COMMENTS.misplaced:
		tok = _DOC_COMMENTS.misplaced[0]
		raise SchemaError(
			"a documentation comment should be on a line on its own",
			loc=_loc_from_token(tok),
			file=file,
			phase="parser",
		)
	doc_lines = dict(_DOC_COMMENTS.lines)
	return _ProgramBuilder(source, file, doc_lines).build(tree)


def _decode_string_token(tok: Token, file: str = "") -> str:
	"""Decode a STRING token, interpreting backslash escapes."""
	content = tok.value[1:-1]
	try:
		unescaped = codecs.decode(content, "unicode_escape")
	except UnicodeDecodeError:
		raise SchemaError(
			f"invalid escape sequence in string literal: {tok.value}",
			loc=_loc_from_token(tok),
			file=file,
			phase="parser",
		) from None
	try:
		return unescaped.encode("latin-1").decode("utf-8")
	except UnicodeError:
		# `\u` escapes above U+00FF or lone `\x` bytes; keep the escaped text
		return unescaped


class _ProgramBuilder:
	def __init__(self, source: str, file: str, doc_lines: Dict[int, str]) -> None:
		self.source = source
		self.file = file
		self.doc_lines = doc_lines
		self.source_lines = source.splitlines()

	def build(self, tree: Tree) -> Program:
		items = []
		for child in tree.children:
			if not isinstance(child, Tree):
				continue
			kind = _name(child)
			if kind == "include_decl":
				items.append(IncludeDecl(path=self._string(child), loc=_loc(child)))
			elif kind == "native_include_decl":
				items.append(IncludeDecl(path=self._string(child), loc=_loc(child), native=True))
			elif kind == "namespace_decl":
				items.append(self._build_namespace_decl(child))
			elif kind == "attribute_decl":
				items.append(self._build_attribute_decl(child))
			elif kind == "table_decl":
				items.append(self._build_type_decl(child, fixed=False))
			elif kind == "struct_decl":
				items.append(self._build_type_decl(child, fixed=True))
			elif kind == "enum_decl":
				items.append(self._build_enum_decl(child))
			elif kind == "union_decl":
				items.append(self._build_union_decl(child))
			elif kind == "root_decl":
				dotted = _child_tree(child, "dotted_ident")
				items.append(RootTypeDecl(type_expr=self._named_type(dotted), loc=_loc(child)))
			elif kind == "file_identifier_decl":
				items.append(FileIdentifierDecl(value=self._string(child), loc=_loc(child)))
			elif kind == "file_extension_decl":
				items.append(FileExtensionDecl(value=self._string(child), loc=_loc(child)))
			elif kind == "rpc_decl":
				items.append(self._build_rpc_decl(child))
			else:
				raise SchemaError(f"unsupported declaration: {kind}", loc=_loc(child), file=self.file)
		return Program(file=self.file, items=items)

	def _docs(self, line: int) -> List[str]:
		"""Doc comment lines directly above `line`; blank lines between are allowed."""
		out: List[str] = []
		cur = line - 1
		while cur >= 1:
			if cur in self.doc_lines:
				out.append(self.doc_lines[cur])
			elif cur <= len(self.source_lines) and self.source_lines[cur - 1].strip():
				break
			cur -= 1
		out.reverse()
		return out

	def _string(self, tree: Tree) -> str:
		tok = next(c for c in tree.children if isinstance(c, Token) and c.type == "STRING")
		return _decode_string_token(tok, self.file)

	def _text(self, tree: Tree) -> str:
		meta = tree.meta
		return self.source[meta.start_pos : meta.end_pos]

	def _build_namespace_decl(self, tree: Tree) -> NamespaceDecl:
		dotted = _child_tree(tree, "dotted_ident")
		name = _dotted(dotted) if dotted is not None else ""
		return NamespaceDecl(name=name, loc=_loc(tree))

	def _build_attribute_decl(self, tree: Tree) -> AttributeDecl:
		tok = next(c for c in tree.children if isinstance(c, Token))
		name = _decode_string_token(tok, self.file) if tok.type == "STRING" else tok.value
		return AttributeDecl(name=name, loc=_loc_from_token(tok), doc=self._docs(tree.meta.line))

	def _build_type_decl(self, tree: Tree, *, fixed: bool) -> TypeDecl:
		name_tok = _first_token(tree, "NAME")
		fields = [
			self._build_field_decl(child)
			for child in tree.children
			if isinstance(child, Tree) and _name(child) == "field_decl"
		]
		return TypeDecl(
			name=name_tok.value,
			fixed=fixed,
			loc=_loc_from_token(name_tok),
			fields=fields,
			attrs=self._build_metadata(_child_tree(tree, "metadata")),
			doc=self._docs(tree.meta.line),
		)

	def _build_field_decl(self, tree: Tree) -> FieldDecl:
		name_tok = _first_token(tree, "NAME")
		type_node = next(c for c in tree.children if isinstance(c, Tree) and _name(c) in _TYPE_NODES)
		default = None
		default_node = _child_tree(tree, "default_value")
		if default_node is not None:
			value = default_node.children[0]
			if isinstance(value, Tree):
				default = _dotted(value)
			elif value.type == "STRING":
				default = _decode_string_token(value, self.file)
			else:
				default = value.value
		return FieldDecl(
			name=name_tok.value,
			type_expr=self._build_type_expr(type_node),
			loc=_loc_from_token(name_tok),
			default=default,
			attrs=self._build_metadata(_child_tree(tree, "metadata")),
			doc=self._docs(tree.meta.line),
		)

	def _build_type_expr(self, tree: Tree, depth: int = 0) -> TypeExpr:
		if depth > _MAX_PARSING_DEPTH:
			raise SchemaError("maximum parsing depth exceeded", loc=_loc(tree), file=self.file, phase="parser")
		kind = _name(tree)
		if kind == "named_type":
			return self._named_type(tree.children[0])
		element = self._build_type_expr(tree.children[0], depth + 1)
		if kind == "vector_type":
			return TypeExpr(kind="vector", loc=_loc(tree), text=self._text(tree), element=element)
		if kind == "array_type":
			length_tok = tree.children[1]
			length = _parse_int(length_tok, self.file)
			if length <= 0:
				raise SchemaError(
					f"fixed-length array size must be positive: {length_tok.value}",
					loc=_loc_from_token(length_tok),
					file=self.file,
				)
			return TypeExpr(kind="array", loc=_loc(tree), text=self._text(tree), element=element, length=length)
		raise SchemaError(f"expected type expression, got {kind}", loc=_loc(tree), file=self.file)

	def _named_type(self, dotted: Tree) -> TypeExpr:
		return TypeExpr(kind="named", loc=_loc(dotted), text=self._text(dotted), name=_dotted(dotted))

	def _build_enum_decl(self, tree: Tree) -> EnumDecl:
		name_tok = _first_token(tree, "NAME")
		type_node = next(c for c in tree.children if isinstance(c, Tree) and _name(c) in _TYPE_NODES)
		values = []
		for child in tree.children:
			if isinstance(child, Tree) and _name(child) == "enum_val":
				val_tok = _first_token(child, "NAME")
				num_tok = next((c for c in child.children if isinstance(c, Token) and c.type == "NUMBER"), None)
				values.append(
					EnumValDecl(
						name=val_tok.value,
						loc=_loc_from_token(val_tok),
						value=_parse_int(num_tok, self.file) if num_tok is not None else None,
						doc=self._docs(child.meta.line),
					)
				)
		return EnumDecl(
			name=name_tok.value,
			underlying=self._build_type_expr(type_node),
			loc=_loc_from_token(name_tok),
			values=values,
			attrs=self._build_metadata(_child_tree(tree, "metadata")),
			doc=self._docs(tree.meta.line),
		)

	def _build_union_decl(self, tree: Tree) -> UnionDecl:
		name_tok = _first_token(tree, "NAME")
		values = [
			self._build_union_val(child)
			for child in tree.children
			if isinstance(child, Tree) and _name(child) == "union_val"
		]
		return UnionDecl(
			name=name_tok.value,
			loc=_loc_from_token(name_tok),
			values=values,
			attrs=self._build_metadata(_child_tree(tree, "metadata")),
			doc=self._docs(tree.meta.line),
		)

	def _build_union_val(self, tree: Tree) -> UnionValDecl:
		alias = None
		first = tree.children[0]
		if isinstance(first, Token) and first.type == "NAME":
			alias = first.value
		dotted = _child_tree(tree, "dotted_ident")
		num_tok = next((c for c in tree.children if isinstance(c, Token) and c.type == "NUMBER"), None)
		type_expr = self._named_type(dotted)
		return UnionValDecl(
			type_expr=type_expr,
			loc=_loc_from_token(first) if alias is not None else type_expr.loc,
			alias=alias,
			value=_parse_int(num_tok, self.file) if num_tok is not None else None,
			doc=self._docs(tree.meta.line),
		)

	def _build_rpc_decl(self, tree: Tree) -> RpcServiceDecl:
		name_tok = _first_token(tree, "NAME")
		methods = []
		for child in tree.children:
			if not (isinstance(child, Tree) and _name(child) == "rpc_method"):
				continue
			method_tok = _first_token(child, "NAME")
			request, response = [c for c in child.children if isinstance(c, Tree) and _name(c) == "dotted_ident"]
			methods.append(
				RpcMethodDecl(
					name=method_tok.value,
					request=self._named_type(request),
					response=self._named_type(response),
					loc=_loc_from_token(method_tok),
					attrs=self._build_metadata(_child_tree(child, "metadata")),
					doc=self._docs(child.meta.line),
				)
			)
		return RpcServiceDecl(
			name=name_tok.value,
			loc=_loc_from_token(name_tok),
			methods=methods,
			attrs=self._build_metadata(_child_tree(tree, "metadata")),
			doc=self._docs(tree.meta.line),
		)

	def _build_metadata(self, tree: Optional[Tree]) -> List[Attr]:
		if tree is None:
			return []
		attrs: List[Attr] = []
		for item in tree.children:
			if not isinstance(item, Tree):
				continue
			toks = [c for c in item.children if isinstance(c, Token)]
			value: Optional[str] = None
			if len(toks) > 1:
				raw = toks[1]
				value = _decode_string_token(raw, self.file) if raw.type == "STRING" else raw.value
			attrs.append(Attr(name=toks[0].value, value=value, loc=_loc_from_token(toks[0])))
		return attrs


def _parse_int(tok: Token, file: str) -> int:
	text = tok.value
	sign = -1 if text.startswith("-") else 1
	digits = text.lstrip("+-")
	try:
		if digits[:2].lower() == "0x":
			return sign * int(digits[2:], 16)
		return sign * int(digits, 10)
	except ValueError:
		raise SchemaError(f"expecting integer constant, got: {text}", loc=_loc_from_token(tok), file=file) from None


def _dotted(tree: Tree) -> str:
	return ".".join(c.value for c in tree.children if isinstance(c, Token))


def _first_token(tree: Tree, ttype: str) -> Token:
	return next(c for c in tree.children if isinstance(c, Token) and c.type == ttype)


def _child_tree(tree: Tree, kind: str) -> Optional[Tree]:
	return next((c for c in tree.children if isinstance(c, Tree) and _name(c) == kind), None)


def _loc(tree: Tree) -> Located:
    meta = tree.meta
    return Located(line=meta.line, column=meta.column, end_line=meta.end_line, end_column=meta.end_column)


def _loc_from_token(token: Token) -> Located:
    return Located(line=token.line, column=token.column, end_line=token.end_line, end_column=token.end_column)


def _name(node: Tree | Token) -> str:
    if isinstance(node, Tree):
        data = node.data
        if isinstance(data, Token):
            return data.value
        return data
    if isinstance(node, Token):
        return node.type
    return str(node)
