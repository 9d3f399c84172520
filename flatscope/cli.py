# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path

from flatscope.config import ParseOptions
from flatscope.export import (
	SchemaHandle,
	count_all_includes,
	count_attributes,
	count_enum_vals,
	count_enums,
	count_fields,
	count_methods,
	count_services,
	count_structs,
	get_all_include,
	get_attribute,
	get_enum,
	get_enum_val,
	get_field,
	get_method,
	get_root_type,
	get_service,
	get_struct,
	has_root_type,
	parse,
	visible_fields,
)


def _build_parser() -> argparse.ArgumentParser:
	p = argparse.ArgumentParser(prog="flatscope", description="FlatBuffers schema introspection")
	p.add_argument("-v", "--verbose", action="store_true", help="Log parse/resolve progress to stderr")
	sub = p.add_subparsers(dest="cmd", required=True)

	dump = sub.add_parser("dump", help="Print every declaration exported for a schema")
	dump.add_argument("schema", type=Path, help="Path to a .fbs schema")
	dump.add_argument(
		"-I",
		"--include",
		dest="include_paths",
		action="append",
		type=Path,
		default=[],
		help="Additional include search root (repeatable); searched after the including file's directory",
	)
	dump.add_argument(
		"--allow-unresolved",
		action="store_true",
		help="Keep references to undefined types as predeclared structs instead of failing",
	)
	dump.add_argument("--json", action="store_true", help="Emit machine-readable JSON")
	return p


def _record(info: object) -> dict:
	return dataclasses.asdict(info)


def _dump_json(handle: SchemaHandle) -> dict:
	structs = []
	for i in range(count_structs(handle)):
		entry = _record(get_struct(handle, i))
		entry["fields"] = [_record(get_field(handle, i, j)) for j in range(count_fields(handle, i))]
		structs.append(entry)
	enums = []
	for i in range(count_enums(handle)):
		entry = _record(get_enum(handle, i))
		entry["values"] = [_record(get_enum_val(handle, i, j)) for j in range(count_enum_vals(handle, i))]
		enums.append(entry)
	services = []
	for i in range(count_services(handle)):
		entry = _record(get_service(handle, i))
		entry["methods"] = [_record(get_method(handle, i, j)) for j in range(count_methods(handle, i))]
		services.append(entry)
	return {
		"structs": structs,
		"enums": enums,
		"services": services,
		"attributes": [_record(get_attribute(handle, i)) for i in range(count_attributes(handle))],
		"root_type": _record(get_root_type(handle)) if has_root_type(handle) else None,
		"includes": [_record(get_all_include(handle, i)) for i in range(count_all_includes(handle))],
	}


def _dump_text(handle: SchemaHandle) -> None:
	for i in range(count_structs(handle)):
		info = get_struct(handle, i)
		kind = "table" if info.is_table else "struct"
		extra = " (predeclared)" if info.is_predeclared else ""
		if not info.is_table:
			extra += f" size={info.bytesize} align={info.minalign}"
		print(f"{kind} {info.qualified_name}{extra}  [{info.file or '<input>'}:{info.line}:{info.col}]")
		for field in visible_fields(handle, i):
			flags = " deprecated" if field.deprecated else ""
			ident = f" id={field.id}" if field.has_id else ""
			print(f"  {field.name}: {field.type_name}{ident}{flags}  [{field.line}:{field.col}]")
	for i in range(count_enums(handle)):
		info = get_enum(handle, i)
		kind = "union" if info.is_union else f"enum : {info.underlying_type}"
		print(f"{kind} {info.qualified_name}  [{info.file or '<input>'}:{info.line}:{info.col}]")
		for j in range(count_enum_vals(handle, i)):
			val = get_enum_val(handle, i, j)
			print(f"  {val.name} = {val.value}")
	for i in range(count_services(handle)):
		info = get_service(handle, i)
		print(f"rpc_service {info.qualified_name}  [{info.file or '<input>'}:{info.line}:{info.col}]")
		for j in range(count_methods(handle, i)):
			method = get_method(handle, i, j)
			streaming = f" streaming={method.streaming}" if method.streaming else ""
			print(f"  {method.name}({method.request_type}): {method.response_type}{streaming}")
	for i in range(count_attributes(handle)):
		print(f"attribute {get_attribute(handle, i).name}")
	if has_root_type(handle):
		print(f"root_type {get_root_type(handle).name}")
	for i in range(count_all_includes(handle)):
		edge = get_all_include(handle, i)
		print(f"include {edge.including_file or '<input>'} -> {edge.included_file}")


def _cmd_dump(args: argparse.Namespace) -> int:
	source_path: Path = args.schema
	try:
		text = source_path.read_text(encoding="utf-8")
	except (OSError, UnicodeDecodeError) as err:
		reason = err.reason if isinstance(err, UnicodeDecodeError) else err.strerror
		msg = f"unable to read schema: {reason}"
		if args.json:
			diag = {"phase": "io", "message": msg, "severity": "error", "file": str(source_path), "line": None, "column": None, "notes": []}
			print(json.dumps({"exit_code": 1, "diagnostics": [diag]}))
		else:
			print(f"{source_path}: error: {msg}", file=sys.stderr)
		return 1

	options = ParseOptions(
		include_paths=tuple(str(p) for p in args.include_paths),
		allow_unresolved=bool(args.allow_unresolved),
	)
	with parse(text, str(source_path), options=options) as handle:
		if not handle.success:
			if args.json:
				print(json.dumps({"exit_code": 1, "diagnostics": [handle.diagnostic.to_json()]}))
			else:
				print(handle.error, file=sys.stderr)
			return 1
		if args.json:
			payload = {"exit_code": 0, "diagnostics": [], "schema": _dump_json(handle)}
			print(json.dumps(payload))
		else:
			_dump_text(handle)
	return 0


def main(argv: list[str] | None = None) -> int:
	p = _build_parser()
	args = p.parse_args(argv)
	if args.verbose:
		logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

	if args.cmd == "dump":
		return _cmd_dump(args)

	p.error(f"unknown command {args.cmd}")
	return 2


if __name__ == "__main__":
	sys.exit(main())
