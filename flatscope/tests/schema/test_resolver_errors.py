# vim: set noexpandtab: -*- indent-tabs-mode: t -*-

import pytest

from flatscope.core.diagnostics import SchemaError
from flatscope.schema import build_schema


@pytest.mark.parametrize(
	"source, message",
	[
		("table T {}\ntable T {}", "datatype already exists: T"),
		("namespace a;\nenum T : int { A }\nunion T { X }", "datatype already exists: a.T"),
		("table T { a:int; a:int; }", "field already exists: a"),
		("table T (priority) {}", "user define attributes must be declared before use: priority"),
		("table T { x:int (tag); }\nattribute tag;", "user define attributes must be declared before use: tag"),
		("table T { x:Missing; }", r"type referenced but not defined \(check namespace\): Missing"),
		("table T { v:[int:2]; }", "fixed-length array in table must be wrapped in struct"),
		("struct S { a:int; }\nrpc_service R { M(S):S; }", "rpc request and response types must be tables: S"),
		("table R {}\nrpc_service S { M(R):R (streaming: \"sideways\"); }", "streaming attribute must be one of"),
		("table R {}\nrpc_service S { M(R):R; M(R):R; }", "rpc method already exists: M"),
		("struct S { a:int; }\nroot_type S;", "root type must be a table: S"),
		("union U { int }", "type referenced in union must be a table, struct or string: int"),
		("enum E : ubyte { A = 256 }", r"enum value does not fit \[0; 255\]: A = 256"),
		("enum E : float { A }", "underlying enum type must be integral"),
		("enum E : byte (bit_flags) { A = 8 }", "bit flag out of range of underlying integral type: A"),
		("enum E : int { A, A }", "enum value already exists: A"),
		("file_identifier \"AB\";", "file_identifier must be exactly 4 characters: AB"),
		("table T { x:int (id: one); }", "id attribute must be an integer: one"),
	],
)
def test_resolution_errors(source: str, message: str) -> None:
	with pytest.raises(SchemaError, match=message):
		build_schema(source)


def test_error_carries_file_and_location() -> None:
	with pytest.raises(SchemaError) as excinfo:
		build_schema("table T {\n  x:Missing;\n}\n", "t.fbs")
	diag = excinfo.value.to_diagnostic()
	assert diag.render() == "t.fbs:2: 4: error: type referenced but not defined (check namespace): Missing"


def test_root_type_in_included_file_is_ignored(tmp_path) -> None:
	(tmp_path / "inc.fbs").write_text("table Inc {}\nroot_type Inc;\n")
	tree = build_schema('include "inc.fbs";\ntable Main {}\n', str(tmp_path / "main.fbs"))
	assert tree.root_type is None
