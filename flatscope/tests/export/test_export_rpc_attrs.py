# vim: set noexpandtab: -*- indent-tabs-mode: t -*-

from flatscope.core.span import Position, Range
from flatscope.export import (
	EMPTY_ATTRIBUTE,
	EMPTY_METHOD,
	count_attributes,
	count_methods,
	count_services,
	get_attribute,
	get_attribute_documentation,
	get_method,
	get_service,
	parse,
)

RPC_SCHEMA = "\n".join(
	[
		"table Req { a:int; }",
		"table Resp { b:int; }",
		"namespace svc;",
		"/// Says hello.",
		"rpc_service Greeter {",
		"  Hello(Req):Resp;",
		"  /// Many replies.",
		'  Stream(Req):Resp (streaming: "server");',
		"}",
	]
)


def test_service_record() -> None:
	with parse(RPC_SCHEMA, "svc.fbs") as handle:
		assert count_services(handle) == 1
		service = get_service(handle, 0)
		assert service.name == "Greeter"
		assert service.qualified_name == "svc.Greeter"
		assert service.namespace == "svc"
		assert service.file == "svc.fbs"
		assert service.doc == " Says hello."
		assert (service.line, service.col) == (4, 12)


def test_method_records_carry_type_expression_ranges() -> None:
	with parse(RPC_SCHEMA) as handle:
		assert count_methods(handle, 0) == 2
		hello = get_method(handle, 0, 0)
		assert hello.name == "Hello"
		assert (hello.line, hello.col) == (5, 2)
		assert hello.request_type == "Req"
		assert hello.request_source == "Req"
		assert hello.request_range == Range(Position(5, 8), Position(5, 11))
		assert hello.response_type == "Resp"
		assert hello.response_range == Range(Position(5, 13), Position(5, 17))
		assert hello.streaming == ""

		stream = get_method(handle, 0, 1)
		assert stream.doc == " Many replies."
		assert stream.streaming == "server"

		assert get_method(handle, 0, 2) == EMPTY_METHOD
		assert get_method(handle, 1, 0) == EMPTY_METHOD
		assert count_methods(handle, 1) == 0


def test_only_user_attributes_are_listed() -> None:
	with parse(
		"/// How urgent.\n"
		"/// Higher is sooner.\n"
		'attribute "priority";\n'
		"attribute tag;\n"
		"table T (priority: 1) { x:int (tag, deprecated); }\n"
	) as handle:
		assert count_attributes(handle) == 2
		priority = get_attribute(handle, 0)
		assert priority.name == "priority"
		assert not priority.is_known
		assert priority.doc == " How urgent.\n Higher is sooner."
		assert get_attribute(handle, 1).name == "tag"
		assert get_attribute(handle, 1).doc == ""
		assert get_attribute(handle, 2) == EMPTY_ATTRIBUTE
		assert get_attribute_documentation(handle, "priority") == " How urgent.\n Higher is sooner."
		assert get_attribute_documentation(handle, "tag") == ""
		assert get_attribute_documentation(handle, "missing") == ""
		assert get_attribute_documentation(handle, "deprecated") == ""


def test_redeclaring_a_builtin_does_not_list_it() -> None:
	with parse('attribute "deprecated";\n') as handle:
		assert count_attributes(handle) == 0
