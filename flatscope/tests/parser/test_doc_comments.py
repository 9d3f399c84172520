# vim: set noexpandtab: -*- indent-tabs-mode: t -*-

import pytest

from flatscope.core.diagnostics import SchemaError
from flatscope.parser import parse_program


def test_doc_comments_attach_to_following_declaration() -> None:
	prog = parse_program(
		"/// A table.\n"
		"/// Second line.\n"
		"table T {\n"
		"  /// The x.\n"
		"  x:int;\n"
		"  y:int;\n"
		"}\n"
	)
	decl = prog.items[0]
	assert decl.doc == [" A table.", " Second line."]
	assert decl.fields[0].doc == [" The x."]
	assert decl.fields[1].doc == []


def test_plain_comments_are_not_docs() -> None:
	prog = parse_program(
		"// plain comment\n"
		"table A {}\n"
		"/* block */\n"
		"table B {}\n"
	)
	assert [d.doc for d in prog.items] == [[], []]


def test_blank_lines_between_doc_and_declaration() -> None:
	prog = parse_program("/// Spaced out.\n\ntable T {}\n")
	assert prog.items[0].doc == [" Spaced out."]


def test_docs_do_not_leak_between_parses() -> None:
	parse_program("/// first\ntable A {}\n")
	prog = parse_program("\ntable B {}\n")
	assert prog.items[0].doc == []


def test_enum_value_and_rpc_method_docs() -> None:
	prog = parse_program(
		"enum E : int {\n"
		"  /// zero\n"
		"  A,\n"
		"  B\n"
		"}\n"
		"rpc_service S {\n"
		"  /// call it\n"
		"  M(Req):Resp;\n"
		"}\n"
	)
	enum, rpc = prog.items
	assert enum.values[0].doc == [" zero"]
	assert enum.values[1].doc == []
	assert rpc.methods[0].doc == [" call it"]


def test_trailing_doc_comment_is_rejected() -> None:
	with pytest.raises(SchemaError, match="a documentation comment should be on a line on its own") as excinfo:
		parse_program("table T {\n  a:int; /// about a\n  b:int;\n}\n")
	assert excinfo.value.phase == "parser"
	assert excinfo.value.loc.line == 2


def test_plain_trailing_comment_is_allowed() -> None:
	prog = parse_program("table T {\n  a:int; // about a\n  b:int;\n}\n")
	assert prog.items[0].fields[1].doc == []
