from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass(frozen=True)
class Located:
    line: int
    column: int
    end_line: Optional[int] = None
    end_column: Optional[int] = None


@dataclass
class TypeExpr:
    kind: str  # "named" | "vector" | "array"
    loc: Located
    text: str
    name: str = ""
    element: Optional["TypeExpr"] = None
    length: int = 0


@dataclass
class Attr:
    name: str
    value: Optional[str]
    loc: Located


@dataclass
class FieldDecl:
    name: str
    type_expr: TypeExpr
    loc: Located
    default: Optional[str] = None
    attrs: List[Attr] = field(default_factory=list)
    doc: List[str] = field(default_factory=list)


@dataclass
class TypeDecl:
    name: str
    fixed: bool
    loc: Located
    fields: List[FieldDecl] = field(default_factory=list)
    attrs: List[Attr] = field(default_factory=list)
    doc: List[str] = field(default_factory=list)


@dataclass
class EnumValDecl:
    name: str
    loc: Located
    value: Optional[int] = None
    doc: List[str] = field(default_factory=list)


@dataclass
class EnumDecl:
    name: str
    underlying: TypeExpr
    loc: Located
    values: List[EnumValDecl] = field(default_factory=list)
    attrs: List[Attr] = field(default_factory=list)
    doc: List[str] = field(default_factory=list)


@dataclass
class UnionValDecl:
    type_expr: TypeExpr
    loc: Located
    alias: Optional[str] = None
    value: Optional[int] = None
    doc: List[str] = field(default_factory=list)


@dataclass
class UnionDecl:
    name: str
    loc: Located
    values: List[UnionValDecl] = field(default_factory=list)
    attrs: List[Attr] = field(default_factory=list)
    doc: List[str] = field(default_factory=list)


@dataclass
class RpcMethodDecl:
    name: str
    request: TypeExpr
    response: TypeExpr
    loc: Located
    attrs: List[Attr] = field(default_factory=list)
    doc: List[str] = field(default_factory=list)


@dataclass
class RpcServiceDecl:
    name: str
    loc: Located
    methods: List[RpcMethodDecl] = field(default_factory=list)
    attrs: List[Attr] = field(default_factory=list)
    doc: List[str] = field(default_factory=list)


@dataclass
class AttributeDecl:
    name: str
    loc: Located
    doc: List[str] = field(default_factory=list)


@dataclass
class IncludeDecl:
    path: str
    loc: Located
    native: bool = False


@dataclass
class NamespaceDecl:
    name: str
    loc: Located


@dataclass
class RootTypeDecl:
    type_expr: TypeExpr
    loc: Located


@dataclass
class FileIdentifierDecl:
    value: str
    loc: Located


@dataclass
class FileExtensionDecl:
    value: str
    loc: Located


Decl = Union[
    IncludeDecl,
    NamespaceDecl,
    AttributeDecl,
    TypeDecl,
    EnumDecl,
    UnionDecl,
    RootTypeDecl,
    FileIdentifierDecl,
    FileExtensionDecl,
    RpcServiceDecl,
]


@dataclass
class Program:
    file: str
    items: List[Decl] = field(default_factory=list)

    @property
    def includes(self) -> List[IncludeDecl]:
        return [item for item in self.items if isinstance(item, IncludeDecl) and not item.native]
