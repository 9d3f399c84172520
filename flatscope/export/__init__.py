"""
Export layer: a flat, index-addressed query surface over one parsed schema.

	handle = parse(text, "schema.fbs", ["include/"])
	if not is_success(handle):
		print(get_error(handle))
	for i in range(count_structs(handle)):
		info = get_struct(handle, i)
	destroy(handle)

Accessors never raise for absent/destroyed handles or out-of-range indices;
they return zero counts, empty text and falsy sentinel records instead.
"""

from __future__ import annotations

from .enumerators import (
	count_all_includes,
	count_attributes,
	count_enum_vals,
	count_enums,
	count_fields,
	count_files_with_includes,
	count_includes,
	count_methods,
	count_services,
	count_structs,
	get_all_include,
	get_attribute,
	get_attribute_documentation,
	get_enum,
	get_enum_val,
	get_field,
	get_file_with_includes,
	get_include,
	get_method,
	get_root_type,
	get_service,
	get_struct,
	has_root_type,
	is_synthetic_discriminator,
	visible_fields,
)
from .handle import SchemaHandle, destroy, get_error, is_success, parse
from .intern import StringPool
from .records import (
	EMPTY_ATTRIBUTE,
	EMPTY_ENUM,
	EMPTY_ENUM_VAL,
	EMPTY_FIELD,
	EMPTY_INCLUDE,
	EMPTY_METHOD,
	EMPTY_ROOT_TYPE,
	EMPTY_SERVICE,
	EMPTY_STRUCT,
	AttributeInfo,
	EnumInfo,
	EnumValInfo,
	FieldInfo,
	IncludeInfo,
	MethodInfo,
	RootTypeInfo,
	ServiceInfo,
	StructInfo,
)

__all__ = [
	"SchemaHandle",
	"StringPool",
	"parse",
	"is_success",
	"get_error",
	"destroy",
	"count_structs",
	"get_struct",
	"count_fields",
	"get_field",
	"visible_fields",
	"is_synthetic_discriminator",
	"count_enums",
	"get_enum",
	"count_enum_vals",
	"get_enum_val",
	"count_services",
	"get_service",
	"count_methods",
	"get_method",
	"count_attributes",
	"get_attribute",
	"get_attribute_documentation",
	"count_includes",
	"get_include",
	"count_files_with_includes",
	"get_file_with_includes",
	"count_all_includes",
	"get_all_include",
	"has_root_type",
	"get_root_type",
	"StructInfo",
	"FieldInfo",
	"EnumInfo",
	"EnumValInfo",
	"ServiceInfo",
	"MethodInfo",
	"AttributeInfo",
	"IncludeInfo",
	"RootTypeInfo",
	"EMPTY_STRUCT",
	"EMPTY_FIELD",
	"EMPTY_ENUM",
	"EMPTY_ENUM_VAL",
	"EMPTY_SERVICE",
	"EMPTY_METHOD",
	"EMPTY_ATTRIBUTE",
	"EMPTY_INCLUDE",
	"EMPTY_ROOT_TYPE",
]
