# vim: set noexpandtab: -*- indent-tabs-mode: t -*-

from flatscope.export import (
	EMPTY_ATTRIBUTE,
	EMPTY_ENUM,
	EMPTY_METHOD,
	EMPTY_ROOT_TYPE,
	EMPTY_SERVICE,
	EMPTY_STRUCT,
	count_all_includes,
	count_attributes,
	count_enums,
	count_fields,
	count_includes,
	count_methods,
	count_services,
	count_structs,
	destroy,
	get_attribute,
	get_attribute_documentation,
	get_enum,
	get_error,
	get_method,
	get_root_type,
	get_service,
	get_struct,
	has_root_type,
	is_success,
	parse,
)


def test_absent_handle_degrades_to_zero_values() -> None:
	assert not is_success(None)
	assert get_error(None) == ""
	assert count_structs(None) == 0
	assert count_fields(None, 0) == 0
	assert count_enums(None) == 0
	assert count_services(None) == 0
	assert count_methods(None, 0) == 0
	assert count_attributes(None) == 0
	assert count_includes(None, "x.fbs") == 0
	assert count_all_includes(None) == 0
	assert get_struct(None, 0) == EMPTY_STRUCT
	assert get_enum(None, 0) == EMPTY_ENUM
	assert get_service(None, 0) == EMPTY_SERVICE
	assert get_method(None, 0, 0) == EMPTY_METHOD
	assert get_attribute(None, 0) == EMPTY_ATTRIBUTE
	assert get_attribute_documentation(None, "x") == ""
	assert not has_root_type(None)
	assert get_root_type(None) == EMPTY_ROOT_TYPE
	destroy(None)


def test_destroy_is_idempotent_and_empties_the_handle() -> None:
	handle = parse("table T { x:int; }\nroot_type T;\n")
	assert count_structs(handle) == 1
	assert handle.pool_size == 0
	get_struct(handle, 0)
	assert handle.pool_size > 0

	destroy(handle)
	assert handle.destroyed
	assert not is_success(handle)
	assert get_error(handle) == ""
	assert handle.tree is None
	assert count_structs(handle) == 0
	assert get_struct(handle, 0) == EMPTY_STRUCT
	assert not has_root_type(handle)
	assert handle.pool_size == 0
	destroy(handle)
	assert handle.destroyed


def test_context_manager_destroys() -> None:
	with parse("table T {}") as handle:
		assert is_success(handle)
	assert handle.destroyed


def test_failed_handle_behaves_as_empty_schema() -> None:
	with parse("table T { x:Missing; }", "t.fbs") as handle:
		assert not is_success(handle)
		assert handle.tree is None
		assert get_error(handle) == "t.fbs:1: 12: error: type referenced but not defined (check namespace): Missing"
		assert handle.diagnostic.phase == "resolve"
		assert count_structs(handle) == 0
		assert not has_root_type(handle)


def test_exported_text_is_interned() -> None:
	with parse("namespace a.b;\ntable T {}\ntable U { t:T; }\n") as handle:
		first = get_struct(handle, 0)
		again = get_struct(handle, 0)
		assert first.qualified_name is again.qualified_name
		assert first.namespace is get_struct(handle, 1).namespace
		assert first.doc == ""


def test_error_text_is_stable() -> None:
	with parse("table {", "bad.fbs") as handle:
		assert get_error(handle) is get_error(handle)
		assert handle.diagnostic.phase == "parser"


def test_root_type_record() -> None:
	with parse("namespace game;\ntable Monster {}\nroot_type Monster;\n", "m.fbs") as handle:
		assert has_root_type(handle)
		root = get_root_type(handle)
		assert root.name == "game.Monster"
		assert root.file == "m.fbs"
		assert root.type_source == "Monster"
		assert (root.type_range.start.line, root.type_range.start.col) == (2, 10)
		assert (root.type_range.end.line, root.type_range.end.col) == (2, 17)

	with parse("table T {}") as handle:
		assert not has_root_type(handle)
		assert not get_root_type(handle)


def test_malformed_input_yields_failed_handle() -> None:
	cases = [
		('attribute "\\x4";', "invalid escape sequence in string literal"),
		("table T { x:" + "[" * 2000 + "int" + "]" * 2000 + "; }", "maximum parsing depth exceeded"),
		("table T {\n  a:int; /// about a\n  b:int;\n}\n", "a documentation comment should be on a line on its own"),
	]
	for text, message in cases:
		with parse(text, "bad.fbs") as handle:
			assert not is_success(handle)
			assert message in get_error(handle)
			assert get_error(handle).startswith("bad.fbs:")
			assert count_structs(handle) == 0
