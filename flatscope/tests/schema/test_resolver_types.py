# vim: set noexpandtab: -*- indent-tabs-mode: t -*-

from flatscope.config import ParseOptions
from flatscope.core.type_names import format_type
from flatscope.core.types_core import BaseType, NamedEnum, Vector
from flatscope.schema import build_schema


def _struct(tree, name):
	return next(s for s in tree.structs if s.qualified_name == name)


def _field_types(struct_def):
	return [(f.name, format_type(f.type)) for f in struct_def.fields]


def test_lookup_walks_enclosing_namespaces() -> None:
	tree = build_schema(
		"namespace a.b;\n"
		"table Inner { v:int; }\n"
		"namespace a.c;\n"
		"table Outer { i:a.b.Inner; j:[b.Inner]; k:Later; }\n"
		"table Later {}\n"
	)
	outer = _struct(tree, "a.c.Outer")
	assert _field_types(outer) == [("i", "a.b.Inner"), ("j", "[a.b.Inner]"), ("k", "a.c.Later")]
	assert str(outer.namespace) == "a.c"


def test_scalar_aliases_are_canonical() -> None:
	tree = build_schema("table T { a:int32; b:uint8; c:float64; d:[int16]; }")
	assert _field_types(tree.structs[0]) == [("a", "int"), ("b", "ubyte"), ("c", "double"), ("d", "[short]")]


def test_enum_auto_increment_and_bit_flags() -> None:
	tree = build_schema(
		"enum Color : byte { Red, Green = 4, Blue }\n"
		"attribute \"unused\";\n"
		"enum Flags : ubyte (bit_flags) { A, B, C = 4 }\n"
	)
	color, flags = tree.enums
	assert [(v.name, v.value) for v in color.values] == [("Red", 0), ("Green", 4), ("Blue", 5)]
	assert color.underlying is BaseType.BYTE
	assert [v.value for v in flags.values] == [1, 2, 16]


def test_union_values_and_synthetic_discriminator() -> None:
	tree = build_schema(
		"namespace game;\n"
		"table Sword {}\n"
		"table Bow {}\n"
		"union Weapon { Sword, ranged: Bow }\n"
		"table Hero { name:string; weapon:Weapon (id: 2); spares:[Weapon]; }\n"
	)
	(weapon,) = tree.enums
	assert weapon.is_union
	assert [(v.name, v.value, format_type(v.union_type)) for v in weapon.values] == [
		("Sword", 1, "game.Sword"),
		("ranged", 2, "game.Bow"),
	]
	hero = _struct(tree, "game.Hero")
	assert [f.name for f in hero.fields] == ["name", "weapon_type", "weapon", "spares_type", "spares"]
	utype = hero.fields[1]
	assert utype.synthetic
	assert isinstance(utype.type, NamedEnum) and utype.type.ref is weapon
	assert utype.id == 1
	assert hero.fields[2].id == 2
	assert isinstance(hero.fields[3].type, Vector)
	assert format_type(hero.fields[3].type) == "[game.Weapon]"


def test_union_member_from_another_namespace_uses_underscored_label() -> None:
	tree = build_schema(
		"namespace other;\n"
		"table Shield {}\n"
		"namespace game;\n"
		"union Gear { other.Shield }\n"
	)
	(gear,) = tree.enums
	assert gear.values[0].name == "other_Shield"
	assert format_type(gear.values[0].union_type) == "other.Shield"


def test_root_type_identifier_and_extension() -> None:
	tree = build_schema(
		"namespace game;\n"
		"table Monster {}\n"
		"root_type Monster;\n"
		"file_identifier \"MONS\";\n"
		"file_extension \"mon\";\n"
	)
	assert tree.root_type.struct_def.qualified_name == "game.Monster"
	assert tree.root_type.text == "Monster"
	assert tree.file_identifier == "MONS"
	assert tree.file_extension == "mon"


def test_unresolved_references_become_predeclared_structs() -> None:
	tree = build_schema(
		"namespace a;\n"
		"table T { x:Missing; y:[Missing]; z:b.Other; }\n",
		options=ParseOptions(allow_unresolved=True),
	)
	assert [s.qualified_name for s in tree.structs] == ["a.T", "a.Missing", "a.b.Other"]
	missing = tree.structs[1]
	assert missing.predecl
	assert missing.bytesize == 0 and missing.minalign == 1
	assert tree.structs[0].fields[1].type.element.ref is missing


def test_user_and_builtin_attribute_registry() -> None:
	tree = build_schema(
		"/// How urgent.\n"
		"attribute \"priority\";\n"
		"table T (priority: 1) { x:int (deprecated); }\n"
	)
	assert tree.known_attributes["priority"] is False
	assert tree.known_attributes["deprecated"] is True
	assert tree.attribute_docs == {"priority": [" How urgent."]}
	assert tree.structs[0].attributes == {"priority": "1"}
	assert tree.structs[0].fields[0].deprecated
