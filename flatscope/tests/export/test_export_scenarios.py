# vim: set noexpandtab: -*- indent-tabs-mode: t -*-

from pathlib import Path

from flatscope.export import (
	EMPTY_FIELD,
	count_all_includes,
	count_enum_vals,
	count_enums,
	count_fields,
	count_includes,
	count_structs,
	destroy,
	get_all_include,
	get_enum,
	get_enum_val,
	get_error,
	get_field,
	get_include,
	get_struct,
	is_success,
	parse,
)


def test_single_table() -> None:
	handle = parse("table T { x:int; }")
	try:
		assert is_success(handle)
		assert get_error(handle) == ""
		assert count_structs(handle) == 1
		info = get_struct(handle, 0)
		assert info.name == "T"
		assert info.qualified_name == "T"
		assert info.namespace is None
		assert info.is_table and not info.is_struct
		assert count_fields(handle, 0) == 1
		field = get_field(handle, 0, 0)
		assert field.name == "x"
		assert field.type_name == "int"
		assert field.base_type_name == "int"
	finally:
		destroy(handle)


def test_union_members_and_discriminator_slot() -> None:
	handle = parse(
		"table A {}\n"
		"table B {}\n"
		"union U { A, B }\n"
		"table Holder { u:U; }\n"
	)
	try:
		assert is_success(handle)
		assert count_enums(handle) == 1
		union = get_enum(handle, 0)
		assert union.is_union
		assert union.name == "U"
		assert count_enum_vals(handle, 0) == 2
		assert get_enum_val(handle, 0, 0).name == "A"
		assert get_enum_val(handle, 0, 1).name == "B"
		assert get_enum_val(handle, 0, 0).value == 1

		holder = next(i for i in range(count_structs(handle)) if get_struct(handle, i).name == "Holder")
		assert count_fields(handle, holder) == 2
		assert get_field(handle, holder, 0) == EMPTY_FIELD
		visible = get_field(handle, holder, 1)
		assert visible.name == "u"
		assert visible.type_name == "U"
	finally:
		destroy(handle)


def test_malformed_schema() -> None:
	handle = parse("table T { x:int;", "broken.fbs")
	try:
		assert not is_success(handle)
		error = get_error(handle)
		assert error
		assert error.startswith("broken.fbs:1: ")
		assert ": error: " in error
		assert count_structs(handle) == 0
		assert count_enums(handle) == 0
	finally:
		destroy(handle)


def test_include_graph_keeps_duplicates_across_files(tmp_path: Path) -> None:
	(tmp_path / "b.fbs").write_text("table B {}\n")
	(tmp_path / "a.fbs").write_text('include "b.fbs";\ntable A { b:B; }\n')
	root = tmp_path / "root.fbs"
	text = 'include "a.fbs";\ninclude "b.fbs";\ntable Root { a:A; b:B; }\n'
	root.write_text(text)

	handle = parse(text, str(root))
	try:
		assert is_success(handle), get_error(handle)
		assert count_includes(handle, str(root)) == 2
		assert get_include(handle, str(root), 0) == str(tmp_path / "a.fbs")
		assert get_include(handle, str(root), 1) == str(tmp_path / "b.fbs")

		assert count_all_includes(handle) == 3
		targets = [Path(get_all_include(handle, i).included_file).name for i in range(3)]
		assert sorted(targets) == ["a.fbs", "b.fbs", "b.fbs"]
		assert get_all_include(handle, 2).including_file == str(tmp_path / "a.fbs")
	finally:
		destroy(handle)
