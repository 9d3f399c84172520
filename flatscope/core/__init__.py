"""
flatscope.core: spans, diagnostics and type descriptors shared by the parser,
the resolver and the export layer.

Modules:
  - span: parser-native Span plus 0-based Position/Range normalization
  - diagnostics: Diagnostic record and its text/JSON renderings
  - types_core: BaseType, Namespace and the TypeRef variants
  - type_names: canonical type-name formatting
"""

__all__ = [
	"span",
	"diagnostics",
	"types_core",
	"type_names",
]
