"""Built-in attribute names; anything else must be declared with `attribute "name";` before use."""

BUILTIN_ATTRIBUTES = (
	"deprecated",
	"required",
	"key",
	"shared",
	"hash",
	"id",
	"force_align",
	"bit_flags",
	"original_order",
	"nested_flatbuffer",
	"csharp_partial",
	"streaming",
	"idempotent",
	"cpp_type",
	"cpp_ptr_type",
	"cpp_ptr_type_get",
	"cpp_str_type",
	"cpp_str_flex_ctor",
	"native_inline",
	"native_type",
	"native_custom_alloc",
	"native_default",
	"flexbuffer",
	"private",
)


def builtin_registry() -> dict[str, bool]:
	return {name: True for name in BUILTIN_ATTRIBUTES}
