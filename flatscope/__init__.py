"""
flatscope: introspection of FlatBuffers-style schemas for editor tooling.

The package parses `.fbs` schema text (with its includes), resolves it into a
schema tree, and exposes that tree through the flat, index-addressed query
surface in `flatscope.export`.
"""

from flatscope.config import ParseOptions
from flatscope.export import *  # noqa: F401,F403
from flatscope.export import __all__ as _export_all

__version__ = "0.3.0"

__all__ = ["ParseOptions", "__version__", *_export_all]
